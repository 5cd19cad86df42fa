# -*- coding: utf-8 -*-
"""
SQLite database adapter for the on-device store.

This module is the ONLY place that should import sqlite3. Rows come back
as plain dicts keyed by column name.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from utils.logger import get_logger

logger = get_logger(__name__)

Row = Dict[str, Any]


class SQLiteAdapter:
    """SQLite database adapter."""

    def __init__(self, db_path: Optional[Path] = None):
        """Initialize SQLite adapter."""
        # Import sqlite3 only here
        import sqlite3 as _sqlite3
        self._sqlite3 = _sqlite3

        if db_path is None:
            from app.config import Config
            db_path = Config.DB_PATH

        self._db_path = Path(db_path)
        self._connection = None

        # Ensure directory exists
        self._db_path.parent.mkdir(parents=True, exist_ok=True)

    @property
    def db_path(self) -> Path:
        """Get database file path."""
        return self._db_path

    def connect(self) -> bool:
        """Establish SQLite connection."""
        try:
            if self._connection is None:
                self._connection = self._sqlite3.connect(
                    str(self._db_path),
                    check_same_thread=False,
                )
                self._connection.row_factory = self._dict_factory
                self._connection.execute("PRAGMA foreign_keys = ON")
            return True
        except self._sqlite3.Error as e:
            logger.error(f"SQLite connection error: {e}")
            return False

    @staticmethod
    def _dict_factory(cursor, row) -> Row:
        columns = [col[0] for col in cursor.description]
        return {col: row[idx] for idx, col in enumerate(columns)}

    def close(self) -> None:
        """Close SQLite connection."""
        if self._connection:
            self._connection.close()
            self._connection = None
            logger.info("SQLite connection closed")

    def _get_connection(self):
        if not self._connection:
            self.connect()
        return self._connection

    def execute(self, query: str, params: Optional[Tuple] = None) -> List[Row]:
        """Run a write (or any statement) and commit; returns rows when the statement yields any."""
        conn = self._get_connection()
        cursor = conn.cursor()
        try:
            cursor.execute(query, params or ())
            conn.commit()
            return cursor.fetchall() if cursor.description else []
        except Exception as e:
            conn.rollback()
            logger.error(f"SQLite execute error: {e}\nQuery: {query}")
            raise

    def insert(self, query: str, params: Optional[Tuple] = None) -> int:
        """Execute an INSERT and return the new row id."""
        conn = self._get_connection()
        cursor = conn.cursor()
        try:
            cursor.execute(query, params or ())
            conn.commit()
            return cursor.lastrowid
        except Exception as e:
            conn.rollback()
            logger.error(f"SQLite insert error: {e}\nQuery: {query}")
            raise

    def fetch_one(self, query: str, params: Optional[Tuple] = None) -> Optional[Row]:
        cursor = self._get_connection().cursor()
        try:
            cursor.execute(query, params or ())
            return cursor.fetchone()
        except Exception as e:
            logger.error(f"SQLite fetch_one error: {e}\nQuery: {query}")
            raise

    def fetch_all(self, query: str, params: Optional[Tuple] = None) -> List[Row]:
        cursor = self._get_connection().cursor()
        try:
            cursor.execute(query, params or ())
            return cursor.fetchall()
        except Exception as e:
            logger.error(f"SQLite fetch_all error: {e}\nQuery: {query}")
            raise

    def initialize(self) -> None:
        """Initialize SQLite schema."""
        logger.info(f"Initializing SQLite database at: {self._db_path}")
        conn = self._get_connection()
        cursor = conn.cursor()
        self._create_tables(cursor)
        conn.commit()
        logger.info("SQLite database initialized successfully")

    def _create_tables(self, cursor) -> None:
        """Create all database tables."""
        # AUTOINCREMENT keeps local ids from ever being reused
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS areas (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                code TEXT UNIQUE NOT NULL,
                name TEXT NOT NULL,
                created_at TEXT NOT NULL
            )
        """)

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS subareas (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                area_id INTEGER NOT NULL REFERENCES areas(id),
                code TEXT UNIQUE NOT NULL,
                name TEXT NOT NULL,
                created_at TEXT NOT NULL
            )
        """)

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS units (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                subarea_id INTEGER NOT NULL REFERENCES subareas(id),
                code TEXT UNIQUE NOT NULL,
                head_name TEXT NOT NULL,
                location_text TEXT,
                latitude REAL,
                longitude REAL,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS members (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                member_code TEXT UNIQUE NOT NULL,
                unit_id INTEGER NOT NULL REFERENCES units(id),
                subarea_id INTEGER NOT NULL REFERENCES subareas(id),
                area_id INTEGER NOT NULL REFERENCES areas(id),
                first_name TEXT NOT NULL,
                last_name TEXT NOT NULL,
                other_names TEXT,
                sex TEXT NOT NULL,
                date_of_birth TEXT,
                age INTEGER,
                phone_number TEXT,
                occupation TEXT,
                disability_status TEXT NOT NULL DEFAULT 'none',
                disability_notes TEXT,
                photo BLOB,
                fingerprint BLOB,
                notes TEXT,
                consent_given INTEGER NOT NULL DEFAULT 0,
                consent_date TEXT,
                recorder_name TEXT,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)

        cursor.execute("""
            CREATE TABLE IF NOT EXISTS app_settings (
                key TEXT PRIMARY KEY,
                value TEXT
            )
        """)

        cursor.execute("CREATE INDEX IF NOT EXISTS idx_subareas_area ON subareas(area_id)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_units_subarea ON units(subarea_id)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_members_unit ON members(unit_id)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_members_names ON members(first_name, last_name)")
