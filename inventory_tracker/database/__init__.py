from inventory_tracker.database.base import Base
from inventory_tracker.database.engine import engine, ensure_sqlite_schema
from inventory_tracker.database.session import SessionLocal, get_db, session_scope

__all__ = ["Base", "engine", "ensure_sqlite_schema", "get_db", "SessionLocal", "session_scope"]
