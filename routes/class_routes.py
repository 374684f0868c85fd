import logging

from flask import Blueprint, render_template, redirect, url_for
from sqlalchemy.exc import IntegrityError

from config.config import GRADE_OPTIONS
from extensions import db
from models import SchoolClass
from services import query_service
from services.record_service import get_record, is_duplicate
from services.seat_service import clamp_enrollment, remove_class
from utils.decorators import database_required
from utils.forms import form_text, option_list, parse_int, query_text, sort_direction

logger = logging.getLogger(__name__)

class_bp = Blueprint("classes", __name__, url_prefix="/classes")

EMPTY_FORM = {
    "class_name": "",
    "grade": GRADE_OPTIONS[0],
    "room": "",
    "class_teacher": "",
    "capacity": "",
    "enrolled": ""
}


def class_form(school_class):
    return {
        "id": school_class.class_id,
        "class_name": school_class.class_name,
        "grade": school_class.grade,
        "room": school_class.room,
        "class_teacher": school_class.class_teacher,
        "capacity": school_class.capacity,
        "enrolled": school_class.enrolled,
    }


def read_class_form():
    return {
        "class_name": form_text("className", "class_name"),
        "grade": form_text("grade"),
        "room": form_text("room"),
        "class_teacher": form_text("classTeacher", "class_teacher"),
        "capacity": form_text("capacity"),
        "enrolled": form_text("enrolled"),
    }


def validate_class(form_input):
    """Returns the clamped ``(capacity, enrolled)`` or None if the form is incomplete."""
    capacity = parse_int(form_input["capacity"])
    enrolled = parse_int(form_input["enrolled"])
    required = ("class_name", "grade", "room", "class_teacher")
    if any(not form_input[field] for field in required) or capacity is None or enrolled is None:
        return None
    return clamp_enrollment(capacity, enrolled)


def render_classes_page(message="", form_input=None):
    search = query_text("search")
    grade = query_text("grade", "all")
    occupancy_sort = sort_direction("occupancySort")
    edit_id = query_text("editId")

    try:
        classes = query_service.list_classes(search, grade, occupancy_sort)

        editing_class = None
        if edit_id:
            record = get_record(SchoolClass, edit_id)
            if record:
                editing_class = class_form(record)

        summary = query_service.class_summary()
        teacher_names = query_service.teacher_names()
    except Exception:
        db.session.rollback()
        logger.exception("Failed to load classes page")
        return "Unable to load classes page.", 500

    if form_input is not None and not form_input["grade"]:
        form_input = {**form_input, "grade": GRADE_OPTIONS[0]}

    selected_teacher = (
        (form_input and form_input.get("class_teacher"))
        or (editing_class and editing_class["class_teacher"])
        or ""
    )

    return render_template(
        "classes.html",
        title="Class Management",
        subtitle="Manage rooms, teachers, and class capacities",
        classes=classes,
        grade_options=option_list(GRADE_OPTIONS, grade),
        teacher_options=option_list(teacher_names, selected_teacher),
        filters={"search": search, "grade": grade, "occupancy_sort": occupancy_sort},
        message=message,
        form=form_input or editing_class or dict(EMPTY_FORM),
        is_editing=bool(form_input and form_input.get("id")) or bool(editing_class),
        **summary
    )


@class_bp.route("")
@database_required
def list_classes():
    return render_classes_page()


@class_bp.route("/add", methods=["POST"])
@database_required
def add_class():
    form_input = read_class_form()

    seats = validate_class(form_input)
    if seats is None:
        return render_classes_page("Please complete all class fields.", form_input)
    capacity, enrolled = seats

    try:
        if is_duplicate(SchoolClass, "class_name", form_input["class_name"]):
            return render_classes_page("Class name already exists.", form_input)

        db.session.add(SchoolClass(
            class_name=form_input["class_name"],
            grade=form_input["grade"],
            room=form_input["room"],
            class_teacher=form_input["class_teacher"],
            capacity=capacity,
            enrolled=enrolled
        ))
        db.session.commit()
        return redirect(url_for("classes.list_classes"))

    except IntegrityError:
        db.session.rollback()
        return render_classes_page("Class name already exists.", form_input)
    except Exception:
        db.session.rollback()
        logger.exception("Failed to add class")
        return render_classes_page("Unable to add class right now.", form_input)


@class_bp.route("/update/<class_id>", methods=["POST"])
@database_required
def update_class(class_id):
    form_input = {"id": class_id, **read_class_form()}

    seats = validate_class(form_input)
    if seats is None:
        return render_classes_page("Please complete all class fields.", form_input)
    capacity, enrolled = seats

    try:
        school_class = get_record(SchoolClass, class_id)

        if not school_class:
            return render_classes_page("Class not found for update.")

        if is_duplicate(SchoolClass, "class_name", form_input["class_name"], exclude_id=school_class.class_id):
            return render_classes_page("Another class already uses this name.", form_input)

        school_class.class_name = form_input["class_name"]
        school_class.grade = form_input["grade"]
        school_class.room = form_input["room"]
        school_class.class_teacher = form_input["class_teacher"]
        school_class.capacity = capacity
        school_class.enrolled = enrolled

        db.session.commit()
        return redirect(url_for("classes.list_classes"))

    except IntegrityError:
        db.session.rollback()
        return render_classes_page("Another class already uses this name.", form_input)
    except Exception:
        db.session.rollback()
        logger.exception("Failed to update class %s", class_id)
        return render_classes_page("Unable to update class right now.", form_input)


@class_bp.route("/delete/<class_id>", methods=["POST"])
@database_required
def delete_class(class_id):
    try:
        remove_class(class_id)
    except Exception:
        db.session.rollback()
        logger.exception("Failed to delete class %s", class_id)

    return redirect(url_for("classes.list_classes"))
