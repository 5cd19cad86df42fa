# -*- coding: utf-8 -*-
"""
Background sync worker.

Runs one upload or download session off the UI thread.
"""

from PyQt5.QtCore import QThread, pyqtSignal

from services.exceptions import SyncError
from services.sync_session import SyncSession
from services.sync_types import SyncDirection
from utils.logger import get_logger

logger = get_logger(__name__)


class SyncWorker(QThread):
    """
    Executes SyncSession.run_upload / run_download in a QThread.

    Signals:
        progress(int, str): percent 0-100 and a status message
        completed(dict): SyncResult.to_dict()
        failed(str): fatal error message (nothing was written)
    """

    progress = pyqtSignal(int, str)
    completed = pyqtSignal(dict)
    failed = pyqtSignal(str)

    def __init__(self, session: SyncSession, direction: SyncDirection = SyncDirection.UPLOAD, parent=None):
        super().__init__(parent)
        self.session = session
        self.direction = direction

    def _on_progress(self, percent: int):
        verb = "Uploading" if self.direction is SyncDirection.UPLOAD else "Downloading"
        message = "Done" if percent >= 100 else f"{verb}... {percent}%"
        self.progress.emit(percent, message)

    def run(self):
        self.progress.emit(0, "Checking connection...")
        try:
            if self.direction is SyncDirection.UPLOAD:
                result = self.session.run_upload(self._on_progress)
            else:
                result = self.session.run_download(self._on_progress)
        except SyncError as e:
            logger.error(f"❌ Sync failed: {e}")
            self.failed.emit(str(e))
            return
        except Exception as e:
            logger.error(f"❌ Sync crashed: {e}", exc_info=True)
            self.failed.emit(str(e))
            return

        self.completed.emit(result.to_dict())
