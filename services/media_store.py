# -*- coding: utf-8 -*-
"""
Object storage client for member attachments.

Keys look like "<bucket>/<object path>"; uploads return the public URL of
the stored object, which is what the remote member row keeps.
"""

from typing import Optional

import requests

from app.config import Config
from services.api_client import ApiConfig
from services.exceptions import ApiException, NetworkException
from services.stores import MediaStore
from utils.logger import get_logger

logger = get_logger(__name__)


class RestMediaStore(MediaStore):
    """MediaStore over the registry's storage endpoints."""

    def __init__(self, config: ApiConfig, session: Optional[requests.Session] = None,
                 content_type: str = Config.ATTACHMENT_CONTENT_TYPE):
        self.config = config
        self.storage_url = Config.storage_url(config.base_url)
        self.session = session or requests.Session()
        self.content_type = content_type

    def _auth_headers(self) -> dict:
        return {
            "apikey": self.config.api_key or "",
            "Authorization": f"Bearer {self.config.api_key or ''}",
        }

    def public_url(self, key: str) -> str:
        return f"{self.storage_url}/object/public/{key}"

    def upload(self, data: bytes, key: str) -> str:
        """Upload (upsert) bytes and return the public locator."""
        headers = self._auth_headers()
        headers["Content-Type"] = self.content_type
        headers["x-upsert"] = "true"

        try:
            response = self.session.post(
                f"{self.storage_url}/object/{key}",
                data=data,
                headers=headers,
                timeout=self.config.timeout,
            )
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else 0
            raise ApiException(message=str(e), status_code=status_code, context=key)
        except requests.exceptions.RequestException as e:
            raise NetworkException(message=str(e), original_error=e, context=key)

        logger.debug(f"Uploaded attachment {key} ({len(data)} bytes)")
        return self.public_url(key)

    def download(self, locator: str) -> bytes:
        """Fetch attachment bytes from a locator URL."""
        try:
            response = self.session.get(
                locator,
                headers=self._auth_headers(),
                timeout=self.config.timeout,
            )
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else 0
            raise ApiException(message=str(e), status_code=status_code, context=locator)
        except requests.exceptions.RequestException as e:
            raise NetworkException(message=str(e), original_error=e, context=locator)

        logger.debug(f"Downloaded attachment {locator} ({len(response.content)} bytes)")
        return response.content
