import logging

from flask import Blueprint, render_template, redirect, url_for
from sqlalchemy.exc import IntegrityError

from config.config import SUBJECT_OPTIONS
from extensions import db
from models import Teacher
from services import query_service
from services.record_service import delete_record, get_record, is_duplicate
from utils.decorators import database_required
from utils.forms import form_text, option_list, parse_int, query_text, sort_direction

logger = logging.getLogger(__name__)

teacher_bp = Blueprint("teachers", __name__, url_prefix="/teachers")

EMPTY_FORM = {
    "employee_id": "",
    "name": "",
    "subject": SUBJECT_OPTIONS[0],
    "classes": "",
    "experience": "",
    "phone": ""
}


def teacher_form(teacher):
    return {
        "id": teacher.teacher_id,
        "employee_id": teacher.employee_id,
        "name": teacher.name,
        "subject": teacher.subject,
        "classes": teacher.classes,
        "experience": teacher.experience,
        "phone": teacher.phone,
    }


def read_teacher_form():
    return {
        "employee_id": form_text("employeeId", "employee_id"),
        "name": form_text("name"),
        "subject": form_text("subject"),
        "classes": form_text("classes"),
        "experience": form_text("experience"),
        "phone": form_text("phone"),
    }


def validate_teacher(form_input):
    """Returns ``(classes, experience)`` or None if a field is missing or malformed."""
    classes = parse_int(form_input["classes"])
    experience = parse_int(form_input["experience"])
    required = ("employee_id", "name", "subject", "phone")
    if any(not form_input[field] for field in required) or classes is None or experience is None:
        return None
    return max(0, classes), max(0, experience)


def render_teachers_page(message="", form_input=None):
    search = query_text("search")
    subject = query_text("subject", "all")
    experience_sort = sort_direction("experienceSort")
    edit_id = query_text("editId")

    try:
        teachers = query_service.list_teachers(search, subject, experience_sort)

        editing_teacher = None
        if edit_id:
            record = get_record(Teacher, edit_id)
            if record:
                editing_teacher = teacher_form(record)

        summary = query_service.teacher_summary()
    except Exception:
        db.session.rollback()
        logger.exception("Failed to load teachers page")
        return "Unable to load teachers page.", 500

    if form_input is not None and not form_input["subject"]:
        form_input = {**form_input, "subject": SUBJECT_OPTIONS[0]}

    return render_template(
        "teachers.html",
        title="Teacher Management",
        subtitle="Manage teacher profiles, workloads, and departments",
        teachers=teachers,
        subject_options=option_list(SUBJECT_OPTIONS, subject),
        filters={"search": search, "subject": subject, "experience_sort": experience_sort},
        message=message,
        form=form_input or editing_teacher or dict(EMPTY_FORM),
        is_editing=bool(form_input and form_input.get("id")) or bool(editing_teacher),
        **summary
    )


@teacher_bp.route("")
@database_required
def list_teachers():
    return render_teachers_page()


@teacher_bp.route("/add", methods=["POST"])
@database_required
def add_teacher():
    form_input = read_teacher_form()

    numbers = validate_teacher(form_input)
    if numbers is None:
        return render_teachers_page("Please complete all teacher fields.", form_input)
    classes, experience = numbers

    try:
        if is_duplicate(Teacher, "employee_id", form_input["employee_id"]):
            return render_teachers_page("Employee ID already exists.", form_input)

        db.session.add(Teacher(
            employee_id=form_input["employee_id"],
            name=form_input["name"],
            subject=form_input["subject"],
            phone=form_input["phone"],
            classes=classes,
            experience=experience
        ))
        db.session.commit()
        return redirect(url_for("teachers.list_teachers"))

    except IntegrityError:
        db.session.rollback()
        return render_teachers_page("Employee ID already exists.", form_input)
    except Exception:
        db.session.rollback()
        logger.exception("Failed to add teacher")
        return render_teachers_page("Unable to add teacher right now.", form_input)


@teacher_bp.route("/update/<teacher_id>", methods=["POST"])
@database_required
def update_teacher(teacher_id):
    form_input = {"id": teacher_id, **read_teacher_form()}

    numbers = validate_teacher(form_input)
    if numbers is None:
        return render_teachers_page("Please complete all teacher fields.", form_input)
    classes, experience = numbers

    try:
        teacher = get_record(Teacher, teacher_id)

        if not teacher:
            return render_teachers_page("Teacher not found for update.")

        if is_duplicate(Teacher, "employee_id", form_input["employee_id"], exclude_id=teacher.teacher_id):
            return render_teachers_page("Another teacher already uses this employee ID.", form_input)

        teacher.employee_id = form_input["employee_id"]
        teacher.name = form_input["name"]
        teacher.subject = form_input["subject"]
        teacher.phone = form_input["phone"]
        teacher.classes = classes
        teacher.experience = experience

        db.session.commit()
        return redirect(url_for("teachers.list_teachers"))

    except IntegrityError:
        db.session.rollback()
        return render_teachers_page("Another teacher already uses this employee ID.", form_input)
    except Exception:
        db.session.rollback()
        logger.exception("Failed to update teacher %s", teacher_id)
        return render_teachers_page("Unable to update teacher right now.", form_input)


@teacher_bp.route("/delete/<teacher_id>", methods=["POST"])
@database_required
def delete_teacher(teacher_id):
    try:
        delete_record(Teacher, teacher_id)
    except Exception:
        db.session.rollback()
        logger.exception("Failed to delete teacher %s", teacher_id)

    return redirect(url_for("teachers.list_teachers"))
