"""
Seat allocation for student enrollment.

A seat is reserved with a single conditional UPDATE that only matches while
``enrolled < capacity``, so two requests racing for the last seat cannot both
win. Creating the student is a separate write; if it fails the seat is handed
back with a guarded decrement.
"""

import logging

from sqlalchemy import update

from extensions import db
from models import SchoolClass, Student
from services.record_service import get_record

logger = logging.getLogger(__name__)

MAX_ALLOCATION_ATTEMPTS = 5


def clamp_enrollment(capacity, enrolled):
    capacity = max(1, capacity)
    enrolled = min(capacity, max(0, enrolled))
    return capacity, enrolled


def find_open_class(grade):
    """Least-filled class of ``grade`` that still has a free seat."""
    return (
        SchoolClass.query
        .filter(
            SchoolClass.grade == grade,
            SchoolClass.enrolled < SchoolClass.capacity
        )
        .order_by(SchoolClass.enrolled.asc(), SchoolClass.class_id.asc())
        .first()
    )


def allocate_seat(grade):
    """
    Reserves one seat in a class of ``grade`` and returns that class,
    or None when every class of the grade is full.
    """
    for _ in range(MAX_ALLOCATION_ATTEMPTS):
        candidate = find_open_class(grade)
        if candidate is None:
            return None

        result = db.session.execute(
            update(SchoolClass)
            .where(
                SchoolClass.class_id == candidate.class_id,
                SchoolClass.enrolled < SchoolClass.capacity
            )
            .values(enrolled=SchoolClass.enrolled + 1)
            .execution_options(synchronize_session=False)
        )

        if result.rowcount == 1:
            db.session.commit()
            return candidate

        # Someone else took the seat between the select and the update.
        db.session.rollback()
        logger.info("Seat in class %s was taken concurrently, retrying", candidate.class_name)

    logger.warning("Gave up allocating a seat in grade %s after %d attempts", grade, MAX_ALLOCATION_ATTEMPTS)
    return None


def release_seat(class_id):
    """Gives back one seat; never takes ``enrolled`` below zero."""
    result = db.session.execute(
        update(SchoolClass)
        .where(
            SchoolClass.class_id == class_id,
            SchoolClass.enrolled > 0
        )
        .values(enrolled=SchoolClass.enrolled - 1)
        .execution_options(synchronize_session=False)
    )
    db.session.commit()
    return result.rowcount == 1


def enroll_student(roll, name, grade, phone):
    """
    Allocates a seat and creates the student in it.

    Returns ``(student, school_class)``, or ``(None, None)`` when no seat is
    free. Errors raised while creating the student propagate after the seat
    has been released.
    """
    school_class = allocate_seat(grade)
    if school_class is None:
        return None, None

    class_id = school_class.class_id

    try:
        student = Student(
            roll=roll,
            name=name,
            grade=grade,
            phone=phone,
            attendance=0,
            allocated_class_id=class_id
        )
        db.session.add(student)
        db.session.commit()
    except Exception:
        db.session.rollback()
        try:
            release_seat(class_id)
        except Exception:
            db.session.rollback()
            logger.exception("Failed to release seat in class %s after student creation failed", class_id)
        raise

    return student, school_class


def withdraw_student(student):
    """Deletes ``student`` and frees the seat it was holding, if any."""
    class_id = student.allocated_class_id
    db.session.delete(student)
    db.session.commit()

    if class_id is not None:
        try:
            release_seat(class_id)
        except Exception:
            db.session.rollback()
            logger.exception("Failed to release seat in class %s for deleted student", class_id)
    return True


def remove_class(class_id):
    """
    Deletes a class and clears the seat of every student placed in it.

    Both writes share one commit, so no student is left pointing at a class
    id the database may hand out again.
    """
    school_class = get_record(SchoolClass, class_id)
    if school_class is None:
        return False

    db.session.execute(
        update(Student)
        .where(Student.allocated_class_id == school_class.class_id)
        .values(allocated_class_id=None)
        .execution_options(synchronize_session=False)
    )
    db.session.delete(school_class)
    db.session.commit()
    return True
