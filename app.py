import atexit
import logging
import sys

from flask import Flask
from config.config import Config
from extensions import db, migrate, database_handle

# Route Imports
from routes.dashboard_routes import dashboard_bp
from routes.student_routes import student_bp
from routes.teacher_routes import teacher_bp
from routes.class_routes import class_bp
from routes.announcement_routes import announcement_bp

# Model Imports (registers the tables with SQLAlchemy and Flask-Migrate)
from models import Student, Teacher, SchoolClass, Announcement

from utils.seed_data import seed_command

logger = logging.getLogger(__name__)


def configure_logging(level):
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    )


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)

    if not app.config.get("SQLALCHEMY_DATABASE_URI"):
        raise RuntimeError("DATABASE_URL is not set in environment variables.")

    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    # Initialize Extensions
    db.init_app(app)
    migrate.init_app(app, db)

    # Register Blueprints
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(student_bp)
    app.register_blueprint(teacher_bp)
    app.register_blueprint(class_bp)
    app.register_blueprint(announcement_bp)

    app.cli.add_command(seed_command)

    return app


if __name__ == "__main__":
    try:
        app = create_app()
    except Exception as e:
        logging.basicConfig(level=logging.ERROR)
        logger.error("Failed to start server: %s", e)
        sys.exit(1)

    def close_database():
        with app.app_context():
            database_handle.close()

    atexit.register(close_database)
    logger.info("Server is running on port %s", app.config["PORT"])
    app.run(host="0.0.0.0", port=app.config["PORT"])
