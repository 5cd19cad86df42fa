# -*- coding: utf-8 -*-
"""
Attachment transfer for member records.

Photos and fingerprints are stored as independent objects, one per
upload, keyed by the owner's member code and a millisecond timestamp.
Failures never propagate: both operations return an outcome carrying
either the result or a single error string.
"""

import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from app.config import Config
from services.exceptions import ApiException, NetworkException
from services.stores import MediaStore
from utils.logger import get_logger

logger = get_logger(__name__)


class AttachmentKind(Enum):
    """Binary attachment kinds carried by a member."""
    PHOTO = "photo"
    FINGERPRINT = "fingerprint"

    @property
    def bucket(self) -> str:
        if self is AttachmentKind.PHOTO:
            return Config.PHOTO_BUCKET
        return Config.FINGERPRINT_BUCKET

    @property
    def locator_field(self) -> str:
        """Column on the remote member row holding the locator."""
        return f"{self.value}_url"

    @property
    def label(self) -> str:
        return self.value.capitalize()


@dataclass
class TransferOutcome:
    """Result of one attachment transfer."""
    locator: Optional[str] = None
    data: Optional[bytes] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class MediaSyncer:
    """Uploads and downloads member attachments through a MediaStore."""

    def __init__(self, media_store: MediaStore):
        self.media_store = media_store

    @staticmethod
    def build_key(owner_key: str, kind: AttachmentKind) -> str:
        """Object key: <bucket>/<owner>-<epoch ms>.jpg"""
        return f"{kind.bucket}/{owner_key}-{int(time.time() * 1000)}.jpg"

    def upload_attachment(self, data: bytes, owner_key: str, kind: AttachmentKind) -> TransferOutcome:
        key = self.build_key(owner_key, kind)
        try:
            locator = self.media_store.upload(data, key)
        except (ApiException, NetworkException) as e:
            logger.warning(f"{kind.label} upload failed for {owner_key}: {e}")
            return TransferOutcome(error=str(e))
        except Exception as e:
            logger.error(f"{kind.label} upload failed for {owner_key}: {e}", exc_info=True)
            return TransferOutcome(error=str(e))

        logger.debug(f"{kind.label} for {owner_key} stored at {locator}")
        return TransferOutcome(locator=locator)

    def download_attachment(self, locator: str) -> TransferOutcome:
        try:
            data = self.media_store.download(locator)
        except (ApiException, NetworkException) as e:
            logger.warning(f"Attachment download failed ({locator}): {e}")
            return TransferOutcome(locator=locator, error=str(e))
        except Exception as e:
            logger.error(f"Attachment download failed ({locator}): {e}", exc_info=True)
            return TransferOutcome(locator=locator, error=str(e))

        return TransferOutcome(locator=locator, data=data)
