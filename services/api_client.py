# -*- coding: utf-8 -*-
"""
Registry API Client
===================

Talks to the shared registry database through its REST table endpoints
(PostgREST conventions: `?column=eq.value` filters, `order=column.asc`,
`Prefer: return=representation` on writes).
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import requests

from app.config import Config
from services.exceptions import ApiException, NetworkException
from utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class ApiConfig:
    """
    Connection settings for the registry API.

    Unset values are loaded from Config (which reads .env).

    Example .env:
        REGISTRY_API_URL=https://registry.example.org
        REGISTRY_API_KEY=...
    """
    base_url: str = None
    api_key: str = None
    timeout: int = None

    def __post_init__(self):
        """Load from Config if not provided."""
        if self.base_url is None:
            self.base_url = Config.API_URL
        if self.api_key is None:
            self.api_key = Config.API_KEY
        if self.timeout is None:
            self.timeout = Config.API_TIMEOUT


class RegistryApiClient:
    """
    REST client for the remote registry tables.

    Usage:
        client = RegistryApiClient(ApiConfig(base_url="http://localhost:54321"))
        areas = client.select("areas", order="created_at.asc")
    """

    def __init__(self, config: ApiConfig, session: Optional[requests.Session] = None):
        self.config = config
        self.base_url = Config.rest_url(config.base_url)
        self.session = session or requests.Session()

    def _headers(self, extra: Optional[Dict[str, str]] = None) -> Dict[str, str]:
        headers = {
            "apikey": self.config.api_key or "",
            "Authorization": f"Bearer {self.config.api_key or ''}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if extra:
            headers.update(extra)
        return headers

    def _request(
        self,
        method: str,
        endpoint: str,
        json_data: Optional[Dict] = None,
        params: Optional[Dict] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> Any:
        """
        Execute an HTTP request with error mapping.

        Args:
            method: HTTP method (GET, POST, PATCH)
            endpoint: Table endpoint (e.g., "/areas")
            json_data: JSON payload
            params: Query parameters
            headers: Extra headers

        Returns:
            Response JSON data (None for empty bodies)

        Raises:
            ApiException: the server answered with an error status
            NetworkException: the request did not reach the server
        """
        url = f"{self.base_url}{endpoint}"

        logger.info(f"[API REQ] {method} {endpoint}")
        if params:
            logger.debug(f"[API REQ] Params: {params}")
        if json_data:
            logger.debug(f"[API REQ] Body: {json.dumps(json_data, ensure_ascii=False, default=str)}")

        try:
            response = self.session.request(
                method=method,
                url=url,
                json=json_data,
                params=params,
                headers=self._headers(headers),
                timeout=self.config.timeout,
            )
            response.raise_for_status()

            result = None
            if response.text:
                result = response.json()

            logger.info(f"[API RES] {response.status_code} {endpoint}")
            return result

        except requests.exceptions.HTTPError as e:
            status_code = e.response.status_code if e.response is not None else 0
            response_data = {}
            try:
                response_data = e.response.json() if e.response is not None else {}
            except (ValueError, AttributeError):
                pass
            logger.error(f"[API ERR] {status_code} {method} {endpoint} | Response: {response_data}")
            raise ApiException(
                message=response_data.get("message", str(e)) if isinstance(response_data, dict) else str(e),
                status_code=status_code,
                response_data=response_data if isinstance(response_data, dict) else {},
                context=endpoint
            )
        except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
            logger.error(f"Network error: {endpoint} - {e}")
            raise NetworkException(message=str(e), original_error=e, context=endpoint)
        except requests.exceptions.RequestException as e:
            logger.error(f"Request failed: {endpoint} - {e}")
            raise NetworkException(message=str(e), original_error=e, context=endpoint)

    # ==================== Tables ====================

    def select(
        self,
        table: str,
        filters: Optional[Dict[str, Any]] = None,
        order: Optional[str] = None,
        limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """
        Read rows from a table.

        Args:
            table: Table name
            filters: Column equality filters
            order: Sort expression, e.g. "created_at.asc"
            limit: Maximum rows

        Returns:
            List of row dicts
        """
        params: Dict[str, Any] = {"select": "*"}
        for column, value in (filters or {}).items():
            params[column] = f"eq.{value}"
        if order:
            params["order"] = order
        if limit is not None:
            params["limit"] = limit

        rows = self._request("GET", f"/{table}", params=params)
        return rows or []

    def insert(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        """Insert one row and return it as stored."""
        result = self._request(
            "POST", f"/{table}",
            json_data=row,
            headers={"Prefer": "return=representation"}
        )
        if isinstance(result, list):
            return result[0] if result else row
        return result or row

    def update(self, table: str, record_id: str, row: Dict[str, Any]) -> Dict[str, Any]:
        """Update the row with the given id and return it as stored."""
        result = self._request(
            "PATCH", f"/{table}",
            json_data=row,
            params={"id": f"eq.{record_id}"},
            headers={"Prefer": "return=representation"}
        )
        if isinstance(result, list):
            return result[0] if result else row
        return result or row

    def health_check(self) -> bool:
        """
        Check that the remote store answers.

        Returns:
            True if a minimal read succeeds
        """
        try:
            self._request("GET", "/areas", params={"select": "id", "limit": 1})
            logger.info("✅ API health check passed")
            return True
        except (ApiException, NetworkException) as e:
            logger.error(f"❌ API health check failed: {e}")
            return False
