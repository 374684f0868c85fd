import logging

from flask import Blueprint, render_template, redirect, url_for
from sqlalchemy.exc import IntegrityError

from config.config import ANNOUNCEMENT_AUDIENCES, ANNOUNCEMENT_TYPES
from extensions import db
from models import Announcement
from services import query_service
from services.record_service import delete_record, get_record, is_duplicate
from utils.decorators import database_required
from utils.forms import form_text, option_list, query_text, sort_direction

logger = logging.getLogger(__name__)

announcement_bp = Blueprint("announcements", __name__, url_prefix="/announcements")

EMPTY_FORM = {
    "title": "",
    "message": "",
    "type": ANNOUNCEMENT_TYPES[0],
    "audience": ANNOUNCEMENT_AUDIENCES[0],
    "date": ""
}

REQUIRED_FIELDS = ("title", "message", "type", "audience", "date")


def announcement_form(announcement):
    return {
        "id": announcement.announcement_id,
        "title": announcement.title,
        "message": announcement.message,
        "type": announcement.type,
        "audience": announcement.audience,
        "date": announcement.date,
    }


def read_announcement_form():
    return {field: form_text(field) for field in REQUIRED_FIELDS}


def with_defaults(form_input):
    # Keep the select boxes on a real option when the user left them empty.
    return {
        **form_input,
        "type": form_input["type"] or ANNOUNCEMENT_TYPES[0],
        "audience": form_input["audience"] or ANNOUNCEMENT_AUDIENCES[0],
    }


def render_announcements_page(message="", form_input=None):
    search = query_text("search")
    type_ = query_text("type", "all")
    date_sort = sort_direction("dateSort")
    edit_id = query_text("editId")

    try:
        announcements = query_service.list_announcements(search, type_, date_sort)

        editing_announcement = None
        if edit_id:
            record = get_record(Announcement, edit_id)
            if record:
                editing_announcement = announcement_form(record)

        summary = query_service.announcement_summary()
    except Exception:
        db.session.rollback()
        logger.exception("Failed to load announcements page")
        return "Unable to load announcements page.", 500

    if form_input is not None:
        form_input = with_defaults(form_input)

    selected_audience = (
        (form_input and form_input.get("audience"))
        or (editing_announcement and editing_announcement["audience"])
        or ANNOUNCEMENT_AUDIENCES[0]
    )

    return render_template(
        "announcements.html",
        title="Announcement Management",
        subtitle="Create and manage school notices and events",
        announcements=announcements,
        type_options=option_list(ANNOUNCEMENT_TYPES, type_),
        audience_options=option_list(ANNOUNCEMENT_AUDIENCES, selected_audience),
        filters={"search": search, "type": type_, "date_sort": date_sort},
        message=message,
        form=form_input or editing_announcement or dict(EMPTY_FORM),
        is_editing=bool(form_input and form_input.get("id")) or bool(editing_announcement),
        **summary
    )


@announcement_bp.route("")
@database_required
def list_announcements():
    return render_announcements_page()


@announcement_bp.route("/add", methods=["POST"])
@database_required
def add_announcement():
    form_input = read_announcement_form()

    if any(not form_input[field] for field in REQUIRED_FIELDS):
        return render_announcements_page("Please complete all announcement fields.", form_input)

    try:
        if is_duplicate(Announcement, "title", form_input["title"]):
            return render_announcements_page("Announcement title already exists.", form_input)

        db.session.add(Announcement(**form_input))
        db.session.commit()
        return redirect(url_for("announcements.list_announcements"))

    except IntegrityError:
        db.session.rollback()
        return render_announcements_page("Announcement title already exists.", form_input)
    except Exception:
        db.session.rollback()
        logger.exception("Failed to add announcement")
        return render_announcements_page("Unable to add announcement right now.", form_input)


@announcement_bp.route("/update/<announcement_id>", methods=["POST"])
@database_required
def update_announcement(announcement_id):
    form_input = {"id": announcement_id, **read_announcement_form()}

    if any(not form_input[field] for field in REQUIRED_FIELDS):
        return render_announcements_page("Please complete all announcement fields.", form_input)

    try:
        announcement = get_record(Announcement, announcement_id)

        if not announcement:
            return render_announcements_page("Announcement not found for update.")

        if is_duplicate(Announcement, "title", form_input["title"], exclude_id=announcement.announcement_id):
            return render_announcements_page("Another announcement already uses this title.", form_input)

        for field in REQUIRED_FIELDS:
            setattr(announcement, field, form_input[field])

        db.session.commit()
        return redirect(url_for("announcements.list_announcements"))

    except IntegrityError:
        db.session.rollback()
        return render_announcements_page("Another announcement already uses this title.", form_input)
    except Exception:
        db.session.rollback()
        logger.exception("Failed to update announcement %s", announcement_id)
        return render_announcements_page("Unable to update announcement right now.", form_input)


@announcement_bp.route("/delete/<announcement_id>", methods=["POST"])
@database_required
def delete_announcement(announcement_id):
    try:
        delete_record(Announcement, announcement_id)
    except Exception:
        db.session.rollback()
        logger.exception("Failed to delete announcement %s", announcement_id)

    return redirect(url_for("announcements.list_announcements"))
