import logging

import click
from flask.cli import with_appcontext

from extensions.db import db
from models import Announcement, SchoolClass, Teacher

logger = logging.getLogger(__name__)


def seed_teachers():
    teachers = [
        {"employee_id": "T-101", "name": "Anita Rao", "subject": "Mathematics", "classes": 4, "experience": 9, "phone": "9800000101"},
        {"employee_id": "T-102", "name": "Rahul Menon", "subject": "Physics", "classes": 3, "experience": 5, "phone": "9800000102"},
        {"employee_id": "T-103", "name": "Meera Iyer", "subject": "English", "classes": 5, "experience": 12, "phone": "9800000103"},
    ]

    added = 0
    for t in teachers:
        if not Teacher.query.filter_by(employee_id=t["employee_id"]).first():
            db.session.add(Teacher(**t))
            added += 1

    db.session.commit()
    return added


def seed_classes():
    classes = [
        {"class_name": "6A", "grade": "6", "room": "R-101", "class_teacher": "Anita Rao", "capacity": 30, "enrolled": 0},
        {"class_name": "6B", "grade": "6", "room": "R-102", "class_teacher": "Rahul Menon", "capacity": 30, "enrolled": 0},
        {"class_name": "7A", "grade": "7", "room": "R-201", "class_teacher": "Meera Iyer", "capacity": 32, "enrolled": 0},
    ]

    added = 0
    for c in classes:
        if not SchoolClass.query.filter_by(class_name=c["class_name"]).first():
            db.session.add(SchoolClass(**c))
            added += 1

    db.session.commit()
    return added


def seed_announcements():
    announcements = [
        {"title": "Annual Sports Day", "message": "Sports day will be held on the main ground.", "type": "Event", "audience": "All", "date": "2026-03-14"},
        {"title": "Parent Teacher Meeting", "message": "Meetings for grades 7 to 10.", "type": "Notice", "audience": "Parents", "date": "2026-03-21"},
    ]

    added = 0
    for a in announcements:
        if not Announcement.query.filter_by(title=a["title"]).first():
            db.session.add(Announcement(**a))
            added += 1

    db.session.commit()
    return added


def run_seed():
    return {
        "teachers": seed_teachers(),
        "classes": seed_classes(),
        "announcements": seed_announcements(),
    }


@click.command("seed")
@with_appcontext
def seed_command():
    """Insert sample teachers, classes and announcements."""
    counts = run_seed()
    for name, added in counts.items():
        logger.info("Seeded %d %s", added, name)
        click.echo(f"{name}: {added} added")
