"""Dojo Manager - Application Factory."""
import logging
import os
from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_jwt_extended import JWTManager
from flask_cors import CORS
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address

__version__ = '1.0.0'

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()
jwt = JWTManager()
limiter = Limiter(key_func=get_remote_address)

def create_app(config_name: str = None) -> Flask:
    """Application factory pattern."""
    app = Flask(__name__)

    # Load configuration
    from dojo_manager.config import get_config
    config_class = get_config(config_name)
    app.config.from_object(config_class)

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    limiter.init_app(app)

    # Configure CORS
    CORS(app, origins=app.config.get('CORS_ORIGINS', ["*"]))

    # Setup logging
    setup_logging(app)

    # Register blueprints
    register_blueprints(app)

    # Register error handlers
    register_error_handlers(app)

    # Setup database
    setup_database(app)

    # Add CLI commands
    register_commands(app)

    # Add health check
    @app.route('/health')
    def health_check():
        return jsonify({
            'status': 'healthy',
            'service': 'Dojo Manager',
            'version': __version__
        })

    return app

def register_blueprints(app: Flask) -> None:
    """Register all application blueprints."""
    from dojo_manager.api.auth import auth_bp
    from dojo_manager.api.members import members_bp
    from dojo_manager.api.dojos import dojos_bp
    from dojo_manager.api.classes import classes_bp
    from dojo_manager.api.grades import grades_bp
    from dojo_manager.api.payments import payments_bp
    from dojo_manager.api.attendance import attendance_bp
    from dojo_manager.api.dashboard import dashboard_bp
    from dojo_manager.utils.swagger import (
        API_URL, SWAGGER_URL, generate_swagger_spec, get_swagger_blueprint
    )

    # Auth
    app.register_blueprint(auth_bp, url_prefix='/api/auth')

    # Dojo administration
    app.register_blueprint(members_bp, url_prefix='/api/members')
    app.register_blueprint(dojos_bp, url_prefix='/api/dojos')
    app.register_blueprint(classes_bp, url_prefix='/api/classes')
    app.register_blueprint(grades_bp, url_prefix='/api/grades')
    app.register_blueprint(payments_bp, url_prefix='/api/payments')

    # Core Features
    app.register_blueprint(attendance_bp, url_prefix='/api/attendance')
    app.register_blueprint(dashboard_bp, url_prefix='/api/dashboard')

    # Swagger UI
    @app.route(API_URL)
    def swagger_spec():
        """Serve Swagger/OpenAPI specification."""
        return jsonify(generate_swagger_spec())

    app.register_blueprint(get_swagger_blueprint(), url_prefix=SWAGGER_URL)

def register_error_handlers(app: Flask) -> None:
    """Register error handlers."""
    from dojo_manager.utils.exceptions import DojoError
    from dojo_manager.utils.helpers import handle_error, error_response
    from werkzeug.exceptions import HTTPException

    @app.errorhandler(DojoError)
    def handle_dojo_error(error):
        return error_response(error.message, error.status_code, kind=error.kind)

    @app.errorhandler(HTTPException)
    def handle_http_exception(e):
        return handle_error(e, e.code)

    @app.errorhandler(Exception)
    def internal_error(error):
        db.session.rollback()
        app.logger.exception('Unhandled error: %s', error)
        return error_response('Internal server error', 500, kind='internal_error')

    # JWT error handlers
    @jwt.expired_token_loader
    def expired_token_callback(jwt_header, jwt_payload):
        return error_response('Token has expired', 401, kind='token_expired')

    @jwt.invalid_token_loader
    def invalid_token_callback(error):
        return error_response('Invalid token', 401, kind='invalid_token')

    @jwt.unauthorized_loader
    def missing_token_callback(error):
        return error_response('Authorization token required', 401, kind='authorization_required')

def setup_logging(app: Flask) -> None:
    """Setup application logging."""
    app.logger.setLevel(app.config.get('LOG_LEVEL', 'INFO'))

    if not app.debug and not app.testing:
        log_file = app.config['LOG_FILE']
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir)

        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'
        ))
        file_handler.setLevel(logging.INFO)
        app.logger.addHandler(file_handler)

        app.logger.setLevel(logging.INFO)
        app.logger.info('Dojo Manager startup')

def setup_database(app: Flask) -> None:
    """Register models with the metadata."""
    with app.app_context():
        # Import all models
        from dojo_manager.models import (  # noqa: F401
            User, UserRole,
            Dojo, Member, MemberStatus,
            Grade, GradeCriterion, MemberProgress,
            DojoClass, Payment,
            AttendanceRecord, AttendanceSession, LiveAttendance
        )

def register_commands(app: Flask) -> None:
    """Register CLI commands."""
    import click

    @app.cli.command('init-db')
    @click.option('--drop', is_flag=True, help='Drop existing tables')
    def init_db(drop):
        """Initialize the database."""
        if drop:
            db.drop_all()
            click.echo('Dropped all tables.')

        db.create_all()
        click.echo('Created all tables.')

    @app.cli.command('seed-db')
    def seed_db():
        """Seed database with sample dojo data."""
        from dojo_manager.services.seed_service import SeedService

        SeedService.seed_all()
        click.echo('Database seeded successfully!')

    @app.cli.command('create-admin')
    def create_admin():
        """Create admin user."""
        email = click.prompt('Admin email')
        password = click.prompt('Password', hide_input=True, confirmation_prompt=True)

        from dojo_manager.services.auth_service import AuthService

        user, error = AuthService.register(email, password, role='admin')
        if error:
            raise click.ClickException(error)
        click.echo(f"Admin user created: {user['email']}")
