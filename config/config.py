import os

from dotenv import load_dotenv

BASE_DIR = os.path.abspath(os.path.dirname(__file__))

load_dotenv()


GRADE_OPTIONS = ["6", "7", "8", "9", "10"]

SUBJECT_OPTIONS = [
    "Mathematics", "Biology", "History", "English",
    "Chemistry", "Physics", "Computer Science",
]

ANNOUNCEMENT_TYPES = ["Notice", "Event", "Campaign", "Reminder"]

ANNOUNCEMENT_AUDIENCES = [
    "All", "Teachers", "Students", "Parents",
    "Grade 6", "Grade 7", "Grade 8", "Grade 9", "Grade 10", "Grades 7-10",
]


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

    # Required; create_app refuses to start without it.
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL")

    SQLALCHEMY_TRACK_MODIFICATIONS = False

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    PORT = int(os.getenv("PORT", "8080"))

    HIGH_ATTENDANCE_THRESHOLD = 95
    SENIOR_EXPERIENCE_YEARS = 8
    DASHBOARD_RECENT_LIMIT = 4
    DASHBOARD_ANNOUNCEMENT_LIMIT = 3
