"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from paylog.database.sqlalchemy_db import SQLAlchemyDatabase


def create_sqlite_database(database_path: Optional[str] = None, online: bool = True) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks PAYLOG_DB_PATH
            environment variable, then defaults to ~/.paylog/paylog.db
        online: Whether the local transaction store accepts saves

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        database_path = os.environ.get("PAYLOG_DB_PATH")

    if database_path is None:
        db_dir = Path.home() / ".paylog"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "paylog.db")

    database_url = f"sqlite:///{database_path}"
    return SQLAlchemyDatabase(database_url, online=online)
