"""PostgreSQL database module."""

from .client import close_db, close_db_pool, get_db_pool, get_db_session, init_db

__all__ = [
    "init_db",
    "close_db",
    "get_db_session",
    "get_db_pool",
    "close_db_pool",
]
