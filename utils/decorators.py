import logging
from functools import wraps

from sqlalchemy.exc import SQLAlchemyError

from extensions import database_handle

logger = logging.getLogger(__name__)


def database_required(func):
    @wraps(func)
    def wrapper(*args, **kwargs):
        # 1. Make sure the database is reachable before touching it
        try:
            database_handle.acquire()
        except SQLAlchemyError as e:
            logger.error("Database connection error: %s", e)
            return "Unable to connect to database.", 500

        # 2. Run the view, always handing the connection back
        try:
            return func(*args, **kwargs)
        finally:
            database_handle.release()
    return wrapper
