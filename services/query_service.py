"""
Query building and summary statistics for the list pages.

Each ``list_*`` function takes the raw query-string values and returns the
matching records. Summary functions always look at the whole table, not just
the filtered rows.
"""

from datetime import date

from flask import current_app
from sqlalchemy import case, func, or_

from extensions import db
from models import Announcement, SchoolClass, Student, Teacher
from utils.formatting import percent, round_half_up

ALL = "all"


def escape_like(value, escape="\\"):
    """Escapes LIKE wildcards so ``value`` only ever matches literally."""
    return (
        value.replace(escape, escape * 2)
        .replace("%", escape + "%")
        .replace("_", escape + "_")
    )


def search_clause(term, *columns):
    term = (term or "").strip()
    if not term:
        return None
    pattern = f"%{escape_like(term.lower())}%"
    return or_(*[func.lower(column).like(pattern, escape="\\") for column in columns])


def is_filtered(value):
    return bool(value) and value != ALL


def apply_sort(query, column, direction, *tiebreakers):
    if direction == "asc":
        return query.order_by(column.asc(), *tiebreakers)
    if direction == "desc":
        return query.order_by(column.desc(), *tiebreakers)
    return query


def _apply_search(query, search, *columns):
    clause = search_clause(search, *columns)
    if clause is not None:
        query = query.filter(clause)
    return query


# =========================================================
# LISTS
# =========================================================

def list_students(search="", grade=ALL, attendance_sort="default"):
    query = _apply_search(Student.query, search, Student.name, Student.roll, Student.phone)
    if is_filtered(grade):
        query = query.filter(Student.grade == grade)
    return apply_sort(query, Student.attendance, attendance_sort).all()


def list_teachers(search="", subject=ALL, experience_sort="default"):
    query = _apply_search(Teacher.query, search, Teacher.name, Teacher.employee_id, Teacher.phone)
    if is_filtered(subject):
        query = query.filter(Teacher.subject == subject)
    return apply_sort(query, Teacher.experience, experience_sort).all()


def occupancy_expression():
    """Whole-number occupancy percentage, as shown on the page."""
    return func.round(SchoolClass.enrolled * 100.0 / SchoolClass.capacity)


def list_classes(search="", grade=ALL, occupancy_sort="default"):
    query = _apply_search(
        SchoolClass.query, search,
        SchoolClass.class_name, SchoolClass.room, SchoolClass.class_teacher
    )
    if is_filtered(grade):
        query = query.filter(SchoolClass.grade == grade)
    return apply_sort(
        query, occupancy_expression(), occupancy_sort, SchoolClass.class_id.asc()
    ).all()


def list_announcements(search="", type_=ALL, date_sort="default"):
    query = _apply_search(
        Announcement.query, search,
        Announcement.title, Announcement.message, Announcement.audience
    )
    if is_filtered(type_):
        query = query.filter(Announcement.type == type_)
    return apply_sort(query, Announcement.date, date_sort).all()


def teacher_names():
    rows = db.session.query(Teacher.name).order_by(Teacher.name.asc()).all()
    return [row[0] for row in rows]


# =========================================================
# SUMMARIES
# =========================================================

def student_summary():
    threshold = current_app.config.get("HIGH_ATTENDANCE_THRESHOLD", 95)
    total, average, high = db.session.query(
        func.count(Student.student_id),
        func.avg(Student.attendance),
        func.sum(case((Student.attendance >= threshold, 1), else_=0))
    ).one()

    return {
        "total_students": total,
        "average_attendance": f"{round_half_up(average)}%",
        "high_attendance": int(high or 0),
    }


def teacher_summary():
    senior_years = current_app.config.get("SENIOR_EXPERIENCE_YEARS", 8)
    total, classes_handled, average, senior = db.session.query(
        func.count(Teacher.teacher_id),
        func.sum(Teacher.classes),
        func.avg(Teacher.experience),
        func.sum(case((Teacher.experience >= senior_years, 1), else_=0))
    ).one()

    return {
        "total_teachers": total,
        "total_classes_handled": int(classes_handled or 0),
        "average_experience": f"{round_half_up(average, 1):g} yrs",
        "senior_teachers": int(senior or 0),
    }


def class_summary():
    total, capacity, enrolled = db.session.query(
        func.count(SchoolClass.class_id),
        func.sum(SchoolClass.capacity),
        func.sum(SchoolClass.enrolled)
    ).one()

    capacity = int(capacity or 0)
    enrolled = int(enrolled or 0)

    return {
        "total_classes": total,
        "total_capacity": capacity,
        "total_enrolled": enrolled,
        "occupancy_rate": f"{percent(enrolled, capacity)}%",
    }


def announcement_summary(today=None):
    today = today or date.today().isoformat()
    total, events, notices, upcoming = db.session.query(
        func.count(Announcement.announcement_id),
        func.sum(case((Announcement.type == "Event", 1), else_=0)),
        func.sum(case((Announcement.type == "Notice", 1), else_=0)),
        func.sum(case((Announcement.date >= today, 1), else_=0))
    ).one()

    return {
        "total_announcements": total,
        "event_count": int(events or 0),
        "notice_count": int(notices or 0),
        "upcoming_count": int(upcoming or 0),
    }


def dashboard_summary():
    recent = current_app.config.get("DASHBOARD_RECENT_LIMIT", 4)
    latest = current_app.config.get("DASHBOARD_ANNOUNCEMENT_LIMIT", 3)

    def newest(model, pk):
        return model.query.order_by(model.created_at.desc(), pk.desc()).limit(recent).all()

    return {
        "students": newest(Student, Student.student_id),
        "teachers": newest(Teacher, Teacher.teacher_id),
        "classes": newest(SchoolClass, SchoolClass.class_id),
        "announcements": (
            Announcement.query
            .order_by(Announcement.date.desc(), Announcement.announcement_id.desc())
            .limit(latest)
            .all()
        ),
        "student_count": Student.query.count(),
        "teacher_count": Teacher.query.count(),
        "class_count": SchoolClass.query.count(),
    }
