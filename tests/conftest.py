import pytest

from app import create_app
from config.config import Config
from extensions import db, database_handle
from models import Announcement, SchoolClass, Student, Teacher


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    LOG_LEVEL = "WARNING"


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()
        database_handle.close()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_class(app):
    def factory(class_name, grade="6", capacity=2, enrolled=0, room="R-1", class_teacher="Anita Rao"):
        school_class = SchoolClass(
            class_name=class_name,
            grade=grade,
            room=room,
            class_teacher=class_teacher,
            capacity=capacity,
            enrolled=enrolled
        )
        db.session.add(school_class)
        db.session.commit()
        return school_class
    return factory


@pytest.fixture
def make_student(app):
    def factory(roll, name="Student", grade="6", attendance=0, phone="9000000000", allocated_class_id=None):
        student = Student(
            roll=roll,
            name=name,
            grade=grade,
            attendance=attendance,
            phone=phone,
            allocated_class_id=allocated_class_id
        )
        db.session.add(student)
        db.session.commit()
        return student
    return factory


@pytest.fixture
def make_teacher(app):
    def factory(employee_id, name="Teacher", subject="Mathematics", classes=1, experience=1, phone="9100000000"):
        teacher = Teacher(
            employee_id=employee_id,
            name=name,
            subject=subject,
            classes=classes,
            experience=experience,
            phone=phone
        )
        db.session.add(teacher)
        db.session.commit()
        return teacher
    return factory


@pytest.fixture
def make_announcement(app):
    def factory(title, message="Details", type_="Notice", audience="All", date="2026-01-10"):
        announcement = Announcement(title=title, message=message, type=type_, audience=audience, date=date)
        db.session.add(announcement)
        db.session.commit()
        return announcement
    return factory


@pytest.fixture
def enrolled_count(app):
    def lookup(class_id):
        db.session.expire_all()
        return db.session.get(SchoolClass, class_id).enrolled
    return lookup
