from prepbuddy.db.base import Base
from prepbuddy.db.session import get_db, engine, SessionLocal
from prepbuddy.db.tables import ALL_TABLE_NAMES

__all__ = ["get_db", "engine", "SessionLocal", "Base", "ALL_TABLE_NAMES"]
