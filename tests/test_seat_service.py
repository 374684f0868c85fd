import logging

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from extensions import db
from models import Student
from services import seat_service
from services.seat_service import (
    allocate_seat, clamp_enrollment, enroll_student, release_seat, remove_class, withdraw_student
)


# --- Allocation ---

def test_allocate_prefers_least_filled_class(make_class, enrolled_count):
    class_a = make_class("6A", capacity=2, enrolled=1)
    class_b = make_class("6B", capacity=2, enrolled=0)

    allocated = allocate_seat("6")

    assert allocated.class_name == "6B"
    assert enrolled_count(class_b.class_id) == 1
    assert enrolled_count(class_a.class_id) == 1


def test_allocate_breaks_ties_by_creation_order(make_class, enrolled_count):
    class_a = make_class("6A", capacity=3, enrolled=1)
    class_b = make_class("6B", capacity=3, enrolled=1)

    allocated = allocate_seat("6")

    assert allocated.class_id == class_a.class_id
    assert enrolled_count(class_a.class_id) == 2
    assert enrolled_count(class_b.class_id) == 1


def test_allocate_returns_none_when_grade_is_full(make_class, enrolled_count):
    full = make_class("6A", capacity=2, enrolled=2)

    assert allocate_seat("6") is None
    assert enrolled_count(full.class_id) == 2


def test_allocate_only_considers_requested_grade(make_class, enrolled_count):
    other = make_class("7A", grade="7", capacity=30, enrolled=0)

    assert allocate_seat("6") is None
    assert enrolled_count(other.class_id) == 0


def test_allocate_retries_when_seat_is_taken_concurrently(make_class, enrolled_count, monkeypatch):
    # The first lookup returns a class that filled up after it was read.
    stale = make_class("6A", capacity=2, enrolled=2)
    open_class = make_class("6B", capacity=2, enrolled=1)

    real_find = seat_service.find_open_class
    calls = []

    def find(grade):
        calls.append(grade)
        if len(calls) == 1:
            return stale
        return real_find(grade)

    monkeypatch.setattr(seat_service, "find_open_class", find)

    allocated = allocate_seat("6")

    assert allocated.class_id == open_class.class_id
    assert len(calls) == 2
    assert enrolled_count(stale.class_id) == 2
    assert enrolled_count(open_class.class_id) == 2


def test_allocate_never_exceeds_capacity(make_class, enrolled_count):
    school_class = make_class("6A", capacity=2, enrolled=0)

    results = [allocate_seat("6") for _ in range(3)]

    assert [r is not None for r in results] == [True, True, False]
    assert enrolled_count(school_class.class_id) == 2


# --- Release ---

def test_release_decrements_enrolled(make_class, enrolled_count):
    school_class = make_class("6A", capacity=2, enrolled=2)

    assert release_seat(school_class.class_id) is True
    assert enrolled_count(school_class.class_id) == 1


def test_release_never_goes_below_zero(make_class, enrolled_count):
    school_class = make_class("6A", capacity=2, enrolled=0)

    assert release_seat(school_class.class_id) is False
    assert enrolled_count(school_class.class_id) == 0


@pytest.mark.parametrize("capacity, enrolled, expected", [
    (30, 10, (30, 10)),
    (0, 5, (1, 1)),
    (-4, -2, (1, 0)),
    (20, 25, (20, 20)),
])
def test_clamp_enrollment(capacity, enrolled, expected):
    assert clamp_enrollment(capacity, enrolled) == expected


# --- Enrollment with compensation ---

def test_enroll_student_creates_student_in_allocated_class(make_class, enrolled_count):
    school_class = make_class("6A", capacity=2, enrolled=0)

    student, allocated = enroll_student("R-1", "Asha", "6", "9000000001")

    assert allocated.class_id == school_class.class_id
    assert student.attendance == 0
    assert student.grade == "6"
    assert student.allocated_class_id == school_class.class_id
    assert enrolled_count(school_class.class_id) == 1


def test_enroll_student_without_seat_changes_nothing(make_class, enrolled_count):
    school_class = make_class("6A", capacity=2, enrolled=2)

    assert enroll_student("R-1", "Asha", "6", "9000000001") == (None, None)
    assert Student.query.count() == 0
    assert enrolled_count(school_class.class_id) == 2


def test_enroll_student_releases_seat_on_unique_violation(make_class, make_student, enrolled_count):
    make_student("A100")
    school_class = make_class("6A", capacity=2, enrolled=1)

    with pytest.raises(IntegrityError):
        enroll_student("A100", "Duplicate", "6", "9000000002")

    assert enrolled_count(school_class.class_id) == 1
    assert Student.query.count() == 1


def test_enroll_student_releases_seat_on_any_failure(make_class, enrolled_count, monkeypatch):
    school_class = make_class("6A", capacity=2, enrolled=0)

    def broken_student(**kwargs):
        raise RuntimeError("write failed")

    monkeypatch.setattr(seat_service, "Student", broken_student)

    with pytest.raises(RuntimeError):
        enroll_student("R-1", "Asha", "6", "9000000001")

    assert enrolled_count(school_class.class_id) == 0


def test_failed_compensation_is_logged_and_create_error_reraised(make_class, monkeypatch, caplog):
    make_class("6A", capacity=2, enrolled=0)

    def broken_student(**kwargs):
        raise RuntimeError("write failed")

    def broken_release(class_id):
        raise OperationalError("UPDATE classes", {}, Exception("connection lost"))

    monkeypatch.setattr(seat_service, "Student", broken_student)
    monkeypatch.setattr(seat_service, "release_seat", broken_release)

    with caplog.at_level(logging.ERROR, logger="services.seat_service"):
        with pytest.raises(RuntimeError, match="write failed"):
            enroll_student("R-1", "Asha", "6", "9000000001")

    assert "Failed to release seat" in caplog.text


# --- Withdrawal ---

def test_withdraw_student_releases_allocated_seat(make_class, enrolled_count):
    school_class = make_class("6A", capacity=2, enrolled=0)
    student, _ = enroll_student("R-1", "Asha", "6", "9000000001")
    assert enrolled_count(school_class.class_id) == 1

    withdraw_student(student)

    assert Student.query.count() == 0
    assert enrolled_count(school_class.class_id) == 0


def test_withdraw_student_without_seat_leaves_classes_alone(make_class, make_student, enrolled_count):
    school_class = make_class("6A", capacity=2, enrolled=2)
    student = make_student("R-9", allocated_class_id=None)
    student_id = student.student_id

    withdraw_student(student)

    assert db.session.get(Student, student_id) is None
    assert enrolled_count(school_class.class_id) == 2


# --- Class removal ---

def test_remove_class_clears_student_seats(make_class):
    school_class = make_class("6A", capacity=2, enrolled=0)
    student, _ = enroll_student("R-1", "Asha", "6", "9000000001")
    student_id = student.student_id

    assert remove_class(school_class.class_id) is True

    db.session.expire_all()
    assert db.session.get(Student, student_id).allocated_class_id is None


def test_remove_missing_class(app):
    assert remove_class(999) is False
    assert remove_class("nope") is False


def test_withdraw_after_class_removal_leaves_newer_class_alone(make_class, enrolled_count):
    old_class = make_class("6A", capacity=2, enrolled=0)
    student, _ = enroll_student("R-1", "Asha", "6", "9000000001")
    remove_class(old_class.class_id)

    # SQLite hands the freed id to the next class.
    new_class = make_class("6C", capacity=3, enrolled=3)

    withdraw_student(student)

    assert enrolled_count(new_class.class_id) == 3
