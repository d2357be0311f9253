"""Database seeding service for sample dojo data."""
from datetime import date, timedelta

import click

from dojo_manager import db
from dojo_manager.models.attendance import AttendanceRecord, AttendanceStatus, AttendanceType
from dojo_manager.models.dojo import Dojo
from dojo_manager.models.dojo_class import DojoClass
from dojo_manager.models.grade import Grade, GradeCriterion
from dojo_manager.models.member import Member
from dojo_manager.models.payment import Payment
from dojo_manager.models.user import User, UserRole

GRADES = [
    ('White Belt', 'white', 'Beginner level'),
    ('Yellow Belt', 'yellow', 'Basic techniques'),
    ('Orange Belt', 'orange', 'Intermediate basics'),
    ('Green Belt', 'green', 'Advanced basics'),
    ('Blue Belt', 'blue', 'Intermediate level'),
    ('Purple Belt', 'purple', 'Advanced intermediate'),
    ('Brown Belt', 'brown', 'Advanced level'),
    ('Black Belt 1st Dan', 'black', 'Expert level'),
    ('Black Belt 2nd Dan', 'black', 'Advanced expert'),
    ('Black Belt 3rd Dan', 'black', 'Master level'),
]

YELLOW_BELT_CRITERIA = [
    ('Basic stances (zenkutsu-dachi, kokutsu-dachi)', 'kihon'),
    ('Basic blocks (age-uke, soto-uke, uchi-uke, gedan-barai)', 'kihon'),
    ('Basic strikes (oi-zuki, gyaku-zuki, shuto-uchi)', 'kihon'),
    ('Basic kicks (mae-geri, yoko-geri-keage)', 'kihon'),
    ('Kata: Heian Shodan', 'kata'),
    ('Basic kumite (5 step sparring)', 'kumite'),
    ('Etiquette and dojo rules', 'etiquette'),
]

class SeedService:
    """Service to seed database with sample data."""

    @staticmethod
    def seed_all():
        """Seed all sample data."""
        admin, instructor = SeedService.seed_users()
        dojos = SeedService.seed_dojos(instructor)
        grades = SeedService.seed_grades()
        members = SeedService.seed_members(grades, dojos[0])
        classes = SeedService.seed_classes(instructor, dojos)
        SeedService.seed_attendance(members, classes)
        SeedService.seed_payments(members)

    @staticmethod
    def seed_users():
        admin = User(email='admin@dojo.com', role=UserRole.ADMIN)
        admin.set_password('admin123')
        instructor = User(email='instructor@dojo.com', role=UserRole.INSTRUCTOR)
        instructor.set_password('instructor123')

        db.session.add_all([admin, instructor])
        db.session.commit()
        click.echo('Created admin@dojo.com and instructor@dojo.com')
        return admin, instructor

    @staticmethod
    def seed_dojos(instructor):
        dojos = [
            Dojo(name=f'{town} Dojo', address=f'{town} Community Centre, {town} SA',
                 email=f"{town.lower().replace(' ', '')}@ajku.com.au",
                 primary_instructor_id=instructor.id)
            for town in ('Allendale', 'Millicent', 'Mount Gambier')
        ]
        db.session.add_all(dojos)
        db.session.commit()
        click.echo(f'Created {len(dojos)} dojos')
        return dojos

    @staticmethod
    def seed_grades():
        grades = []
        for rank, (name, color, description) in enumerate(GRADES, start=1):
            grades.append(Grade(name=name, color=color, order_rank=rank, description=description))
        db.session.add_all(grades)
        db.session.flush()

        yellow = grades[1]
        for criterion, category in YELLOW_BELT_CRITERIA:
            db.session.add(GradeCriterion(
                grade_id=yellow.id,
                criterion=criterion,
                category=category,
                description='Required for Yellow Belt'
            ))

        db.session.commit()
        click.echo(f'Created {len(grades)} grades')
        return grades

    @staticmethod
    def seed_members(grades, dojo):
        members = [
            Member(first_name='John', last_name='Doe', other_names='Michael',
                   date_of_birth=date(1990, 5, 15), gender='male', email='john.doe@email.com',
                   phone_number='555-0123', emergency_contact_name='Jane Doe',
                   emergency_contact_phone='555-0124', emergency_contact_relationship='Spouse',
                   medical_conditions='None', photo_permission=True, social_media_permission=True,
                   notes='Regular attendee, shows good dedication', current_grade_id=grades[1].id),
            Member(first_name='Emily', last_name='Smith', other_names='Rose',
                   date_of_birth=date(2010, 3, 22), gender='female', email='emily.smith@email.com',
                   guardian_name='Sarah Smith', guardian_phone='555-0126',
                   guardian_email='sarah.smith@email.com', guardian_relationship='Mother',
                   emergency_contact_name='David Smith', emergency_contact_phone='555-0127',
                   emergency_contact_relationship='Father', medical_conditions='Mild asthma',
                   special_needs='Requires inhaler nearby during training',
                   photo_permission=True, notes='Young student, very enthusiastic',
                   current_grade_id=grades[0].id),
            Member(first_name='Robert', last_name='Johnson', other_names='William',
                   date_of_birth=date(1985, 11, 8), gender='male', email='rob.johnson@email.com',
                   emergency_contact_name='Lisa Johnson', emergency_contact_phone='555-0129',
                   emergency_contact_relationship='Wife',
                   medical_conditions='Previous knee injury - right knee',
                   photo_permission=True, social_media_permission=True,
                   notes='Experienced student, helps with beginners', current_grade_id=grades[4].id),
            Member(first_name='Sarah', last_name='Wilson', date_of_birth=date(2008, 7, 12),
                   gender='female', guardian_name='Mark Wilson', guardian_phone='555-0131',
                   guardian_email='mark.wilson@email.com', guardian_relationship='Father',
                   emergency_contact_name='Jennifer Wilson', emergency_contact_phone='555-0132',
                   emergency_contact_relationship='Mother', medical_conditions='None',
                   notes='Shy initially but making good progress', current_grade_id=grades[2].id),
        ]
        for member in members:
            member.main_dojo_id = dojo.id

        db.session.add_all(members)
        db.session.commit()
        click.echo(f'Created {len(members)} members')
        return members

    @staticmethod
    def seed_classes(instructor, dojos):
        classes = [
            DojoClass(name='Beginner Karate', description='Basic karate for beginners',
                      day_of_week='monday', start_time='18:00', end_time='19:00',
                      duration_hours=1.0, max_participants=20),
            DojoClass(name='Advanced Karate', description='Advanced techniques and sparring',
                      day_of_week='wednesday', start_time='19:00', end_time='20:30',
                      duration_hours=1.5, class_type='advanced', max_participants=15),
            DojoClass(name='Kids Karate', description='Karate for children under 12',
                      day_of_week='saturday', start_time='10:00', end_time='11:00',
                      duration_hours=1.0, class_type='junior', max_participants=12),
        ]
        for dojo_class, dojo in zip(classes, dojos):
            dojo_class.instructor_id = instructor.id
            dojo_class.dojo_id = dojo.id

        db.session.add_all(classes)
        db.session.commit()
        click.echo(f'Created {len(classes)} classes')
        return classes

    @staticmethod
    def seed_attendance(members, classes):
        last_week = date.today() - timedelta(days=7)
        db.session.add_all([
            AttendanceRecord(member_id=members[0].id, class_id=classes[0].id, date=last_week,
                             status=AttendanceStatus.PRESENT, hours_attended=1.0,
                             attendance_type=AttendanceType.REGULAR, notes='Good participation'),
            AttendanceRecord(member_id=members[1].id, class_id=classes[2].id, date=last_week,
                             status=AttendanceStatus.PRESENT, hours_attended=1.0,
                             attendance_type=AttendanceType.REGULAR, notes='Excellent technique'),
        ])
        db.session.commit()
        click.echo('Created sample attendance')

    @staticmethod
    def seed_payments(members):
        db.session.add_all([
            Payment(member_id=members[0].id, amount=75, payment_type='monthly',
                    payment_method='card', status='completed', due_date=date(2024, 1, 1),
                    paid_date=date(2024, 1, 1), description='Monthly membership fee'),
            Payment(member_id=members[1].id, amount=50, payment_type='monthly',
                    payment_method='cash', status='pending', due_date=date(2024, 2, 1),
                    description='Monthly membership fee (child rate)'),
        ])
        db.session.commit()
        click.echo('Created sample payments')
