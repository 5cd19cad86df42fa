# -*- coding: utf-8 -*-
"""
Key/value application settings stored on the device.
"""

import random
import string
import time
from datetime import datetime
from typing import Optional

from utils.datetime_utils import from_isoformat
from .database import Database
from utils.logger import get_logger

logger = get_logger(__name__)

DEVICE_ID_KEY = "sync_device_id"
LAST_SYNC_KEY = "last_sync_time"


class SettingsRepository:
    """Repository for the app_settings table."""

    def __init__(self, db: Database):
        self.db = db

    def get(self, key: str) -> Optional[str]:
        row = self.db.fetch_one("SELECT value FROM app_settings WHERE key = ?", (key,))
        return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        self.db.execute(
            """
            INSERT INTO app_settings (key, value) VALUES (?, ?)
            ON CONFLICT(key) DO UPDATE SET value = excluded.value
            """,
            (key, value)
        )

    def get_device_id(self) -> str:
        """Device identifier stamped on remote member rows; created on first use."""
        device_id = self.get(DEVICE_ID_KEY)
        if not device_id:
            suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=7))
            device_id = f"device-{int(time.time() * 1000)}-{suffix}"
            self.set(DEVICE_ID_KEY, device_id)
            logger.info(f"Generated device id: {device_id}")
        return device_id

    def get_last_sync_time(self) -> Optional[datetime]:
        return from_isoformat(self.get(LAST_SYNC_KEY))

    def set_last_sync_time(self, when: datetime) -> None:
        self.set(LAST_SYNC_KEY, when.isoformat())
