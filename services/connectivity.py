# -*- coding: utf-8 -*-
"""
Network reachability probe.
"""

import socket
from typing import Optional
from urllib.parse import urlparse

from app.config import Config
from utils.logger import get_logger

logger = get_logger(__name__)


class ConnectivityChecker:
    """Checks that a TCP connection to the remote host can be opened."""

    def __init__(self, url: Optional[str] = None, timeout: Optional[float] = None):
        parsed = urlparse(url or Config.API_URL)
        self.host = parsed.hostname or "localhost"
        self.port = parsed.port or (443 if parsed.scheme == "https" else 80)
        self.timeout = timeout if timeout is not None else Config.CONNECTIVITY_TIMEOUT

    def is_online(self) -> bool:
        try:
            with socket.create_connection((self.host, self.port), timeout=self.timeout):
                return True
        except OSError as e:
            logger.warning(f"No network path to {self.host}:{self.port}: {e}")
            return False
