from .config import settings
from .database import engine, SessionLocal, get_db, Base, create_db_engine
from .exceptions import BillingError, ValidationError, NotFound, PersistenceError

__all__ = [
    "settings", "engine", "SessionLocal", "get_db", "Base", "create_db_engine",
    "BillingError", "ValidationError", "NotFound", "PersistenceError",
]
