"""Database layer for paylog application."""

from paylog.database.base import DedupStore, QueueStore, RemoteStore
from paylog.database.factories import create_sqlite_database
from paylog.database.sqlalchemy_db import SQLAlchemyDatabase

__all__ = ["DedupStore", "QueueStore", "RemoteStore", "SQLAlchemyDatabase", "create_sqlite_database"]
