from .db import db, migrate
from .connection import DatabaseHandle, database_handle

__all__ = ["db", "migrate", "DatabaseHandle", "database_handle"]
