"""Shared fixtures: an in-memory app, seeded ids and JWT headers."""
from datetime import date

import pytest
from flask_jwt_extended import create_access_token

from dojo_manager import create_app, db
from dojo_manager.models.dojo_class import DojoClass
from dojo_manager.models.member import Member
from dojo_manager.models.user import User, UserRole

@pytest.fixture
def app():
    """Create test app."""
    app = create_app('testing')
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()

@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()

def make_user(email, role, password='password123'):
    user = User(email=email, role=role)
    user.set_password(password)
    user.save()
    return user.id

@pytest.fixture
def users(app):
    """Ids of an admin, an instructor and a member account."""
    return {
        'admin': make_user('admin@dojo.test', UserRole.ADMIN),
        'instructor': make_user('sensei@dojo.test', UserRole.INSTRUCTOR),
        'member': make_user('student@dojo.test', UserRole.MEMBER),
    }

@pytest.fixture
def dojo_class(app, users):
    """A 90 minute class; its id."""
    dojo_class = DojoClass(
        name='Adult Karate',
        instructor_id=users['instructor'],
        day_of_week='monday',
        start_time='18:00',
        end_time='19:30',
        duration_hours=1.5
    )
    dojo_class.save()
    return dojo_class.id

@pytest.fixture
def members(app):
    """Ids of three active members."""
    ids = []
    for first, last in (('Ana', 'Lopez'), ('Ben', 'Kato'), ('Cal', 'Ng')):
        member = Member(first_name=first, last_name=last, date_of_birth=date(2000, 1, 1))
        member.save()
        ids.append(member.id)
    return ids

def auth_headers(user_id):
    token = create_access_token(identity=str(user_id))
    return {'Authorization': f'Bearer {token}'}

@pytest.fixture
def admin_headers(users):
    return auth_headers(users['admin'])

@pytest.fixture
def instructor_headers(users):
    return auth_headers(users['instructor'])

@pytest.fixture
def member_headers(users):
    return auth_headers(users['member'])
