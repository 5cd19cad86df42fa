# -*- coding: utf-8 -*-
"""
Duplicate Check Bridge
======================

Debounced duplicate checking while a member is being captured. Every
form edit restarts a single-shot timer; the detector only runs once the
user stops typing and both first and last name are filled.

Usage:
    bridge = DuplicateCheckBridge(DuplicateDetector(member_repo))
    bridge.duplicatesFound.connect(show_warning)
    first_name_input.textChanged.connect(
        lambda _: bridge.request_check(form.to_member()))
"""

from typing import Optional

from PyQt5.QtCore import QObject, QTimer, pyqtSignal

from app.config import Config
from models.member import Member
from services.duplicate_service import DuplicateDetector
from utils.logger import get_logger

logger = get_logger(__name__)


class DuplicateCheckBridge(QObject):
    """
    Signals:
        duplicatesFound(list): DuplicateMatch objects, best first
        duplicatesCleared(): the latest check found nothing
    """

    duplicatesFound = pyqtSignal(list)
    duplicatesCleared = pyqtSignal()

    def __init__(
        self,
        detector: DuplicateDetector,
        debounce_ms: int = Config.DUPLICATE_DEBOUNCE_MS,
        threshold: float = None,
        parent: Optional[QObject] = None
    ):
        super().__init__(parent)
        self.detector = detector
        self.debounce_ms = debounce_ms
        self.threshold = threshold if threshold is not None else Config.DUPLICATE_THRESHOLD
        self._pending: Optional[Member] = None
        self._checks_run = 0

        self._debounce_timer = QTimer(self)
        self._debounce_timer.setSingleShot(True)
        self._debounce_timer.timeout.connect(self._run_check)

    @property
    def checks_run(self) -> int:
        return self._checks_run

    def request_check(self, candidate: Member):
        """Schedule a check; a newer request replaces a pending one."""
        if not (candidate.first_name or "").strip() or not (candidate.last_name or "").strip():
            self.cancel()
            return
        self._pending = candidate
        self._debounce_timer.start(self.debounce_ms)

    def cancel(self):
        self._debounce_timer.stop()
        self._pending = None

    def _run_check(self):
        candidate, self._pending = self._pending, None
        if candidate is None:
            return

        self._checks_run += 1
        matches = self.detector.find_duplicates(candidate, self.threshold)
        if matches:
            logger.info(f"⚠️ {len(matches)} possible duplicates for {candidate.full_name}")
            self.duplicatesFound.emit(matches)
        else:
            self.duplicatesCleared.emit()
