# -*- coding: utf-8 -*-
"""
Database handle passed to the repositories.

Wraps the SQLite adapter; one instance is created by the caller and
injected into every repository.
"""

from pathlib import Path
from typing import Optional, List

from repositories.db_adapter import SQLiteAdapter, Row
from utils.logger import get_logger

logger = get_logger(__name__)


class Database:
    """Local on-device database."""

    def __init__(self, db_path: Optional[Path] = None):
        """
        Initialize database.

        Args:
            db_path: Optional path for the SQLite file. Defaults to Config.DB_PATH.
        """
        self._adapter = SQLiteAdapter(db_path)
        self._adapter.connect()

    @property
    def db_path(self) -> Path:
        """Get database path."""
        return self._adapter.db_path

    def initialize(self) -> None:
        """Initialize database schema."""
        self._adapter.initialize()

    def execute(self, query: str, params: tuple = ()) -> List[Row]:
        """
        Execute a statement and commit.

        Returns:
            Row dicts for statements that produce rows, else an empty list
        """
        return self._adapter.execute(query, params)

    def insert(self, query: str, params: tuple = ()) -> int:
        """Execute an INSERT and return the generated integer id."""
        return self._adapter.insert(query, params)

    def fetch_one(self, query: str, params: tuple = ()) -> Optional[Row]:
        """Execute query and fetch single row."""
        return self._adapter.fetch_one(query, params)

    def fetch_all(self, query: str, params: tuple = ()) -> List[Row]:
        """Execute query and fetch all rows."""
        return self._adapter.fetch_all(query, params)

    def close(self) -> None:
        """Close database connection."""
        self._adapter.close()
