# -*- coding: utf-8 -*-
"""
Sync Session
============

Entry point of the sync engine. A session checks connectivity once,
then runs the upload or download reconciler over all four tiers with a
fresh identity mapping, and records the time of the last sync.

Usage:
    session = SyncSession(local_stores, remote_stores, media_store,
                          api_client, ConnectivityChecker(), settings)
    result = session.run_upload(progress_callback=print)
    if not result.success:
        for error in result.errors:
            print(error)
"""

from datetime import datetime
from typing import Any, Dict, Optional

from services.connectivity import ConnectivityChecker
from services.download_reconciler import DownloadReconciler
from services.exceptions import ConnectivityError, RemoteUnreachableError
from services.identity_mapper import IdentityMapper
from services.media_syncer import MediaSyncer
from services.stores import MediaStore, StoreSet
from services.sync_types import ProgressCallback, SyncResult, TIER_ORDER
from services.upload_reconciler import UploadReconciler
from utils.logger import get_logger

logger = get_logger(__name__)


class SyncSession:
    """Runs upload/download sessions against injected stores."""

    def __init__(
        self,
        local_stores: StoreSet,
        remote_stores: StoreSet,
        media_store: MediaStore,
        api_client,
        connectivity: ConnectivityChecker,
        settings=None,
        device_id: Optional[str] = None
    ):
        """
        Args:
            local_stores: Local repositories
            remote_stores: Remote API stores
            media_store: Attachment storage
            api_client: Anything with health_check() -> bool
            connectivity: Anything with is_online() -> bool
            settings: Optional SettingsRepository (device id, last sync time)
            device_id: Overrides the device id kept in settings
        """
        self.local_stores = local_stores
        self.remote_stores = remote_stores
        self.media_store = media_store
        self.api_client = api_client
        self.connectivity = connectivity
        self.settings = settings
        self._device_id = device_id

    @property
    def device_id(self) -> str:
        if self._device_id is None:
            self._device_id = self.settings.get_device_id() if self.settings else "unknown-device"
        return self._device_id

    def _ensure_reachable(self) -> None:
        """Fail before any write when the remote store cannot be used."""
        if not self.connectivity.is_online():
            logger.error("❌ Sync aborted: no network connection")
            raise ConnectivityError("No network connection")
        if not self.api_client.health_check():
            logger.error("❌ Sync aborted: remote store unreachable")
            raise RemoteUnreachableError("Remote store is not reachable")

    def _new_mapper(self) -> IdentityMapper:
        return IdentityMapper(self.local_stores, self.remote_stores)

    def run_upload(self, progress_callback: Optional[ProgressCallback] = None) -> SyncResult:
        """
        Push all local records to the remote store.

        Raises:
            ConnectivityError: no network path
            RemoteUnreachableError: remote store does not answer
        """
        self._ensure_reachable()
        reconciler = UploadReconciler(
            self.local_stores, self.remote_stores, self._new_mapper(),
            MediaSyncer(self.media_store), self.device_id
        )
        result = reconciler.upload(progress_callback)
        self._record_sync(result)
        return result

    def run_download(self, progress_callback: Optional[ProgressCallback] = None) -> SyncResult:
        """
        Pull all remote records into the local store.

        Raises:
            ConnectivityError: no network path
            RemoteUnreachableError: remote store does not answer
        """
        self._ensure_reachable()
        reconciler = DownloadReconciler(
            self.local_stores, self.remote_stores, self._new_mapper(),
            MediaSyncer(self.media_store)
        )
        result = reconciler.download(progress_callback)
        self._record_sync(result)
        return result

    def _record_sync(self, result: SyncResult) -> None:
        if self.settings is not None:
            self.settings.set_last_sync_time(datetime.now())
        if result.success:
            logger.info(f"✅ {result.summary()}")
        else:
            logger.warning(f"⚠️ {result.summary()}")

    def get_status(self) -> Dict[str, Any]:
        """Last sync time, online flag and local record counts per tier."""
        last_sync = self.settings.get_last_sync_time() if self.settings else None
        local_counts = {
            entity_type.value: len(self.local_stores.for_type(entity_type).list())
            for entity_type in TIER_ORDER
        }
        return {
            "last_sync_time": last_sync.isoformat() if last_sync else None,
            "online": self.connectivity.is_online(),
            "local_counts": local_counts,
        }
