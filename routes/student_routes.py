import logging

from flask import Blueprint, render_template, redirect, url_for
from sqlalchemy.exc import IntegrityError

from config.config import GRADE_OPTIONS
from extensions import db
from models import Student
from services import query_service
from services.record_service import get_record, is_duplicate
from services.seat_service import enroll_student, withdraw_student
from utils.decorators import database_required
from utils.forms import form_text, option_list, parse_int, query_text, sort_direction

logger = logging.getLogger(__name__)

student_bp = Blueprint("students", __name__, url_prefix="/students")

EMPTY_FORM = {"roll": "", "name": "", "class": GRADE_OPTIONS[0], "attendance": "", "phone": ""}


# =========================================================
# HELPERS
# =========================================================

def student_form(student):
    return {
        "id": student.student_id,
        "roll": student.roll,
        "name": student.name,
        "class": student.grade,
        "attendance": student.attendance,
        "phone": student.phone,
    }


def read_student_form():
    return {
        "roll": form_text("roll"),
        "name": form_text("name"),
        "class": form_text("class", "grade") or GRADE_OPTIONS[0],
        "attendance": form_text("attendance"),
        "phone": form_text("phone"),
    }


def render_students_page(message="", form_input=None):
    search = query_text("search")
    grade = query_text("class") or query_text("grade", "all")
    attendance_sort = sort_direction("attendanceSort")
    edit_id = query_text("editId")

    try:
        students = query_service.list_students(search, grade, attendance_sort)

        editing_student = None
        if edit_id:
            record = get_record(Student, edit_id)
            if record:
                editing_student = student_form(record)

        summary = query_service.student_summary()
    except Exception:
        db.session.rollback()
        logger.exception("Failed to load students page")
        return "Unable to load students page.", 500

    return render_template(
        "students.html",
        title="Student Management",
        subtitle="Manage enrollment, attendance, and student records",
        students=students,
        grade_options=option_list(GRADE_OPTIONS, grade),
        filters={"search": search, "class": grade, "attendance_sort": attendance_sort},
        message=message,
        form=form_input or editing_student or dict(EMPTY_FORM),
        is_editing=bool(form_input and form_input.get("id")) or bool(editing_student),
        **summary
    )


# =========================================================
# ROUTES
# =========================================================

@student_bp.route("")
@database_required
def list_students():
    return render_students_page()


@student_bp.route("/add", methods=["POST"])
@database_required
def add_student():
    form_input = read_student_form()

    if not form_input["roll"] or not form_input["name"] or not form_input["phone"]:
        return render_students_page("Please complete all student fields.", form_input)

    try:
        if is_duplicate(Student, "roll", form_input["roll"]):
            return render_students_page("Roll number already exists.", form_input)

        student, school_class = enroll_student(
            roll=form_input["roll"],
            name=form_input["name"],
            grade=form_input["class"],
            phone=form_input["phone"]
        )

        if student is None:
            return render_students_page(
                f"No available seats found in Class {form_input['class']}.", form_input
            )

        logger.info("Student %s enrolled in class %s", student.roll, school_class.class_name)
        return redirect(url_for("students.list_students"))

    except IntegrityError:
        db.session.rollback()
        logger.warning("Roll number %s collided on insert", form_input["roll"])
        return render_students_page("Roll number already exists.", form_input)
    except Exception:
        db.session.rollback()
        logger.exception("Failed to add student")
        return render_students_page("Unable to add student right now.", form_input)


@student_bp.route("/update/<student_id>", methods=["POST"])
@database_required
def update_student(student_id):
    form_input = {"id": student_id, **read_student_form()}

    if not form_input["roll"] or not form_input["name"] or not form_input["phone"]:
        return render_students_page("Please complete all student fields.", form_input)

    attendance = None
    if form_input["attendance"] != "":
        attendance = parse_int(form_input["attendance"])
        if attendance is None:
            return render_students_page("Attendance must be a number between 0 and 100.", form_input)

    try:
        student = get_record(Student, student_id)

        if not student:
            return render_students_page("Student not found for update.")

        if is_duplicate(Student, "roll", form_input["roll"], exclude_id=student.student_id):
            return render_students_page("Another student already uses this roll number.", form_input)

        student.roll = form_input["roll"]
        student.name = form_input["name"]
        student.grade = form_input["class"]
        student.phone = form_input["phone"]
        if attendance is not None:
            student.attendance = min(100, max(0, attendance))

        db.session.commit()
        return redirect(url_for("students.list_students"))

    except IntegrityError:
        db.session.rollback()
        return render_students_page("Another student already uses this roll number.", form_input)
    except Exception:
        db.session.rollback()
        logger.exception("Failed to update student %s", student_id)
        return render_students_page("Unable to update student right now.", form_input)


@student_bp.route("/delete/<student_id>", methods=["POST"])
@database_required
def delete_student(student_id):
    try:
        student = get_record(Student, student_id)
        if student:
            withdraw_student(student)
    except Exception:
        db.session.rollback()
        logger.exception("Failed to delete student %s", student_id)

    return redirect(url_for("students.list_students"))
