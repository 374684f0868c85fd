import logging
import threading
from concurrent.futures import Future

from flask import has_app_context
from sqlalchemy import text

from .db import db

logger = logging.getLogger(__name__)


class DatabaseHandle:
    """
    Process-wide handle on the database connection.

    The connection is probed lazily by the first request that needs it.
    Requests arriving while that probe is running wait on the same Future
    instead of starting their own attempt. A failed attempt is forgotten so
    the next request tries again.

    Every successful ``acquire()`` must be paired with a ``release()``;
    ``close()`` only disposes the engine once nothing holds the handle.
    The engine disposed is the one owned by the current app context.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._attempt = None
        self._refs = 0

    @property
    def connected(self):
        attempt = self._attempt
        return attempt is not None and attempt.done() and attempt.exception() is None

    @property
    def references(self):
        return self._refs

    def acquire(self):
        with self._lock:
            self._refs += 1
            attempt = self._attempt
            owner = attempt is None
            if owner:
                attempt = self._attempt = Future()

        if owner:
            self._connect(attempt)

        try:
            return attempt.result()
        except Exception:
            self.release()
            raise

    def release(self):
        with self._lock:
            if self._refs > 0:
                self._refs -= 1

    def close(self):
        with self._lock:
            if self._refs > 0:
                logger.warning("Database handle still held by %d request(s); not closing", self._refs)
                return False
            self._attempt = None

        if has_app_context():
            db.engine.dispose()
            logger.info("Database connection closed")
        return True

    def _connect(self, attempt):
        try:
            with db.engine.connect() as connection:
                connection.execute(text("SELECT 1"))
        except Exception as exc:
            with self._lock:
                self._attempt = None
            attempt.set_exception(exc)
            return

        logger.info("Database connected successfully")
        attempt.set_result(True)


database_handle = DatabaseHandle()
