# -*- coding: utf-8 -*-
"""Custom exceptions for the application."""

from typing import Optional


class ApiException(Exception):
    """Exception raised for API errors."""

    def __init__(self, message: str, status_code: int = None,
                 response_data: dict = None, context: str = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response_data = response_data or {}
        self.context = context

    def __str__(self):
        if self.status_code:
            return f"[{self.status_code}] {self.message}"
        return self.message


class ValidationException(Exception):
    """Exception raised for validation errors."""

    def __init__(self, message: str, field: str = None,
                 errors: list = None, context: str = None):
        super().__init__(message)
        self.message = message
        self.field = field
        self.errors = errors or []
        self.context = context


class NetworkException(Exception):
    """Exception raised for network/connection errors."""

    def __init__(self, message: str, original_error: Exception = None,
                 context: str = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error
        self.context = context


# ==================== Sync errors ====================


class SyncError(Exception):
    """
    Base class for errors reported by a sync session.

    Record-level errors are collected into SyncResult instead of being
    raised to the caller; session-level errors (connectivity) are raised.
    """

    fatal = False

    def __init__(self, message: str, entity_type: Optional[str] = None,
                 natural_key: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.entity_type = entity_type
        self.natural_key = natural_key

    @property
    def kind(self) -> str:
        return type(self).__name__

    def __str__(self):
        if self.natural_key:
            return f"{self.entity_type} {self.natural_key}: {self.message}"
        if self.entity_type:
            return f"{self.entity_type}: {self.message}"
        return self.message

    def to_dict(self) -> dict:
        return {
            "kind": self.kind,
            "entity_type": self.entity_type,
            "natural_key": self.natural_key,
            "message": self.message,
        }


class ConnectivityError(SyncError):
    """No network path; raised before any write."""

    fatal = True


class RemoteUnreachableError(SyncError):
    """Network present but the remote store does not answer; raised before any write."""

    fatal = True


class ParentNotFoundError(SyncError):
    """A parent record has no identity mapping in this session; record skipped."""


class ValidationError(SyncError):
    """Missing natural key, required field, or inconsistent ancestry; record skipped."""


class MediaTransferError(SyncError):
    """Attachment upload/download failed; the owning record still counts as synced."""


class UnknownError(SyncError):
    """Any other exception raised while processing a single record."""
