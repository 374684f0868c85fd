import logging
from datetime import date

from flask import Blueprint, render_template

from extensions import db
from services import query_service
from utils.decorators import database_required

logger = logging.getLogger(__name__)

dashboard_bp = Blueprint("dashboard", __name__)


@dashboard_bp.route("/")
@database_required
def home():
    try:
        summary = query_service.dashboard_summary()
    except Exception:
        db.session.rollback()
        logger.exception("Failed to load dashboard")
        return "Unable to load dashboard.", 500

    today = date.today()

    stats = [
        {"label": "Students", "value": summary["student_count"], "note": "Live from database"},
        {"label": "Teachers", "value": summary["teacher_count"], "note": "Live from database"},
        {"label": "Classes", "value": summary["class_count"], "note": "Live from database"},
    ]

    return render_template(
        "home.html",
        title="School Management System",
        date=f"{today:%B} {today.day}, {today.year}",
        stats=stats,
        students=summary["students"],
        teachers=summary["teachers"],
        classes=summary["classes"],
        announcements=summary["announcements"]
    )
