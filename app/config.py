# -*- coding: utf-8 -*-
"""
Registry configuration.

Values are read from environment variables; a `.env` file in the project
root is loaded first so each device can carry its own settings.
"""

from pathlib import Path
from dataclasses import dataclass
from typing import Optional
import os

from dotenv import load_dotenv

# ============================================================================
# Load .env file for local environment configuration
# ============================================================================
load_dotenv()

# ============================================================================
# Read settings from environment variables (from .env or system)
# ============================================================================
# Remote store (REST API in front of the shared database)
_API_URL = os.getenv("REGISTRY_API_URL", "http://localhost:54321")
_API_KEY = os.getenv("REGISTRY_API_KEY", "")
_API_TIMEOUT = int(os.getenv("REGISTRY_API_TIMEOUT", "30"))

# Object storage buckets for member attachments
_PHOTO_BUCKET = os.getenv("REGISTRY_PHOTO_BUCKET", "member-photos")
_FINGERPRINT_BUCKET = os.getenv("REGISTRY_FINGERPRINT_BUCKET", "member-fingerprints")

# Connectivity probe
_CONNECTIVITY_TIMEOUT = float(os.getenv("REGISTRY_CONNECTIVITY_TIMEOUT", "3"))

# Duplicate detection
_DUPLICATE_THRESHOLD = float(os.getenv("REGISTRY_DUPLICATE_THRESHOLD", "0.6"))
_BATCH_DUPLICATE_THRESHOLD = float(os.getenv("REGISTRY_BATCH_DUPLICATE_THRESHOLD", "0.7"))

# Local database
_DB_PATH = os.getenv("REGISTRY_DB_PATH", None)
_LOGS_DIR = os.getenv("REGISTRY_LOGS_DIR", None)


@dataclass
class Config:
    """Application configuration."""

    # Application Info
    APP_NAME: str = "Civil Registry"
    APP_TITLE: str = "Offline Civil Registry - Sync Engine"
    VERSION: str = "1.0.0"

    # Remote store
    API_URL: str = _API_URL
    API_KEY: str = _API_KEY
    API_TIMEOUT: int = _API_TIMEOUT
    API_REST_PATH: str = "/rest/v1"
    API_STORAGE_PATH: str = "/storage/v1"

    # Attachments
    PHOTO_BUCKET: str = _PHOTO_BUCKET
    FINGERPRINT_BUCKET: str = _FINGERPRINT_BUCKET
    ATTACHMENT_CONTENT_TYPE: str = "image/jpeg"

    # Connectivity
    CONNECTIVITY_TIMEOUT: float = _CONNECTIVITY_TIMEOUT

    # Duplicate detection
    DUPLICATE_THRESHOLD: float = _DUPLICATE_THRESHOLD
    BATCH_DUPLICATE_THRESHOLD: float = _BATCH_DUPLICATE_THRESHOLD
    DUPLICATE_DEBOUNCE_MS: int = 500
    NAME_SIMILARITY_CUTOFF: float = 0.8

    # Paths
    PROJECT_ROOT: Path = Path(__file__).parent.parent
    DATA_DIR: Path = PROJECT_ROOT / "data"
    LOGS_DIR: Path = Path(_LOGS_DIR) if _LOGS_DIR else PROJECT_ROOT / "logs"

    # Database Configuration
    DB_NAME: str = "registry.db"
    DB_PATH: Path = Path(_DB_PATH) if _DB_PATH else DATA_DIR / DB_NAME

    # Logging
    LOG_FILE: str = "registry.log"
    LOG_PATH: Path = LOGS_DIR / LOG_FILE
    LOG_MAX_BYTES: int = 5 * 1024 * 1024  # 5MB
    LOG_BACKUP_COUNT: int = 3

    # Member code: AREA-SUBAREA-000001
    MEMBER_CODE_PADDING: int = 6

    @classmethod
    def rest_url(cls, base_url: Optional[str] = None) -> str:
        """Base URL of the table endpoints."""
        return f"{(base_url or cls.API_URL).rstrip('/')}{cls.API_REST_PATH}"

    @classmethod
    def storage_url(cls, base_url: Optional[str] = None) -> str:
        """Base URL of the object storage endpoints."""
        return f"{(base_url or cls.API_URL).rstrip('/')}{cls.API_STORAGE_PATH}"
