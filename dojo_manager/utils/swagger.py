"""Swagger/OpenAPI configuration for the application."""
from flask_swagger_ui import get_swaggerui_blueprint

from dojo_manager import __version__

# Swagger UI configuration
SWAGGER_URL = '/api/docs'
API_URL = '/api/swagger.json'

def get_swagger_blueprint():
    """Create and return swagger UI blueprint."""
    return get_swaggerui_blueprint(
        SWAGGER_URL,
        API_URL,
        config={
            'app_name': "Dojo Manager API",
            'defaultModelsExpandDepth': -1,
            'docExpansion': 'list',
            'filter': True,
            'supportedSubmitMethods': ['get', 'post', 'put', 'delete', 'patch'],
            'validatorUrl': None,
        }
    )

def _json(schema):
    return {"application/json": {"schema": schema}}

def _ref(name):
    return {"$ref": f"#/components/schemas/{name}"}

def _responses(success_code="200", description="Success", errors=("400",)):
    responses = {success_code: {"description": description, "content": _json(_ref("Success"))}}
    for code in errors:
        responses[code] = {"description": "Error", "content": _json(_ref("Error"))}
    return responses

def _operation(tag, summary, body=None, params=None, success_code="200", errors=("400",), secured=True):
    operation = {
        "tags": [tag],
        "summary": summary,
        "responses": _responses(success_code, summary, errors)
    }
    if secured:
        operation["security"] = [{"bearerAuth": []}]
    if params:
        operation["parameters"] = params
    if body:
        operation["requestBody"] = {"required": True, "content": _json(body)}
    return operation

def _path_param(name):
    return {"name": name, "in": "path", "required": True, "schema": {"type": "integer"}}

def _query_params(*names):
    return [{"name": name, "in": "query", "schema": {"type": "string"}} for name in names]

ATTENDANCE_STATUSES = ["present", "absent", "late", "left_early", "excused"]
ATTENDANCE_TYPES = ["regular", "backdated", "manual_adjustment", "live_update"]
HISTORY_FILTERS = ('member_id', 'class_id', 'date_from', 'date_to', 'status', 'attendance_type')

def generate_swagger_spec():
    """Generate OpenAPI/Swagger specification."""
    return {
        "openapi": "3.0.0",
        "info": {
            "title": "Dojo Manager API",
            "description": "Membership, class and attendance management for martial arts dojos",
            "version": __version__
        },
        "servers": [
            {"url": "http://127.0.0.1:5000/api", "description": "Development server"}
        ],
        "components": {
            "securitySchemes": {
                "bearerAuth": {"type": "http", "scheme": "bearer", "bearerFormat": "JWT"}
            },
            "schemas": {
                "Success": {
                    "type": "object",
                    "properties": {
                        "error": {"type": "boolean", "example": False},
                        "message": {"type": "string"},
                        "data": {},
                        "meta": {"type": "object"}
                    }
                },
                "Error": {
                    "type": "object",
                    "properties": {
                        "error": {"type": "boolean", "example": True},
                        "kind": {"type": "string", "example": "duplicate_record"},
                        "message": {"type": "string"},
                        "status_code": {"type": "integer"}
                    }
                },
                "AttendanceRecord": {
                    "type": "object",
                    "required": ["member_id", "class_id"],
                    "properties": {
                        "member_id": {"type": "integer"},
                        "class_id": {"type": "integer"},
                        "date": {"type": "string", "format": "date"},
                        "status": {"type": "string", "enum": ATTENDANCE_STATUSES},
                        "hours_attended": {"type": "number", "minimum": 0, "maximum": 24},
                        "notes": {"type": "string"}
                    }
                },
                "Backdate": {
                    "type": "object",
                    "required": ["member_id", "class_id", "date", "status", "adjustment_reason"],
                    "properties": {
                        "member_id": {"type": "integer"},
                        "class_id": {"type": "integer"},
                        "date": {"type": "string", "format": "date"},
                        "status": {"type": "string", "enum": ATTENDANCE_STATUSES},
                        "hours_attended": {"type": "number"},
                        "check_in_time": {"type": "string", "format": "date-time"},
                        "check_out_time": {"type": "string", "format": "date-time"},
                        "adjustment_reason": {"type": "string"},
                        "notes": {"type": "string"}
                    }
                },
                "Adjustment": {
                    "type": "object",
                    "required": ["adjustment_reason"],
                    "properties": {
                        "status": {"type": "string", "enum": ATTENDANCE_STATUSES},
                        "hours_attended": {"type": "number"},
                        "check_in_time": {"type": "string", "format": "date-time"},
                        "check_out_time": {"type": "string", "format": "date-time"},
                        "adjustment_reason": {"type": "string"},
                        "notes": {"type": "string"}
                    }
                },
                "LiveAction": {
                    "type": "object",
                    "required": ["session_id", "member_id", "action"],
                    "properties": {
                        "session_id": {"type": "integer"},
                        "member_id": {"type": "integer"},
                        "action": {"type": "string", "enum": ["check_in", "check_out"]}
                    }
                },
                "Member": {
                    "type": "object",
                    "required": ["first_name", "last_name", "date_of_birth"],
                    "properties": {
                        "first_name": {"type": "string"},
                        "last_name": {"type": "string"},
                        "date_of_birth": {"type": "string", "format": "date"},
                        "email": {"type": "string", "format": "email"},
                        "current_grade_id": {"type": "integer"},
                        "main_dojo_id": {"type": "integer"}
                    }
                },
                "Credentials": {
                    "type": "object",
                    "required": ["email", "password"],
                    "properties": {
                        "email": {"type": "string", "format": "email"},
                        "password": {"type": "string"},
                        "role": {"type": "string", "enum": ["admin", "instructor", "member"]}
                    }
                }
            }
        },
        "paths": {
            "/auth/login": {
                "post": _operation("Authentication", "User login", _ref("Credentials"),
                                   errors=("400", "401"), secured=False)
            },
            "/auth/register": {
                "post": _operation("Authentication", "Register a user", _ref("Credentials"),
                                   success_code="201", secured=False)
            },
            "/auth/me": {"get": _operation("Authentication", "Current user profile", errors=("401",))},
            "/members": {
                "get": _operation("Members", "List members",
                                  params=_query_params('status', 'search', 'page', 'per_page')),
                "post": _operation("Members", "Create member", _ref("Member"), success_code="201")
            },
            "/members/{member_id}": {
                "get": _operation("Members", "Get member", params=[_path_param("member_id")], errors=("404",)),
                "put": _operation("Members", "Update member", _ref("Member"),
                                  params=[_path_param("member_id")], errors=("400", "404")),
                "delete": _operation("Members", "Deactivate member",
                                     params=[_path_param("member_id")], errors=("404",))
            },
            "/classes": {
                "get": _operation("Classes", "List classes",
                                  params=_query_params('active', 'instructor_id', 'dojo_id'))
            },
            "/attendance": {
                "get": _operation("Attendance", "Query attendance history",
                                  params=_query_params(*HISTORY_FILTERS, 'page', 'per_page')),
                "post": _operation("Attendance", "Record attendance", _ref("AttendanceRecord"),
                                   success_code="201")
            },
            "/attendance/backdate": {
                "post": _operation("Attendance", "Record backdated attendance", _ref("Backdate"),
                                   success_code="201")
            },
            "/attendance/export": {
                "get": _operation("Attendance", "Export attendance as CSV",
                                  params=_query_params(*HISTORY_FILTERS))
            },
            "/attendance/{record_id}": {
                "get": _operation("Attendance", "Get attendance record",
                                  params=[_path_param("record_id")], errors=("404",)),
                "put": _operation("Attendance", "Adjust attendance record", _ref("Adjustment"),
                                  params=[_path_param("record_id")], errors=("400", "404"))
            },
            "/attendance/sessions": {
                "post": _operation("Live Sessions", "Start a session", {
                    "type": "object",
                    "required": ["class_id"],
                    "properties": {
                        "class_id": {"type": "integer"},
                        "date": {"type": "string", "format": "date"},
                        "notes": {"type": "string"}
                    }
                }, success_code="201")
            },
            "/attendance/sessions/{session_id}/live": {
                "get": _operation("Live Sessions", "Checked-in and checked-out members",
                                  params=[_path_param("session_id")], errors=("404",))
            },
            "/attendance/live": {
                "post": _operation("Live Sessions", "Check a member in or out", _ref("LiveAction"),
                                   success_code="201", errors=("400", "404"))
            },
            "/attendance/sessions/{session_id}/end": {
                "put": _operation("Live Sessions", "End a session",
                                  params=[_path_param("session_id")], errors=("400", "404"))
            },
            "/attendance/sessions/{session_id}/finalize": {
                "post": _operation("Live Sessions", "Finalize a session into attendance records",
                                   params=[_path_param("session_id")], errors=("404",))
            },
            "/dashboard/stats": {"get": _operation("Dashboard", "Dashboard statistics")}
        }
    }
