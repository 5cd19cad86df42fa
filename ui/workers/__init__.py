# -*- coding: utf-8 -*-
from .sync_worker import SyncWorker

__all__ = ["SyncWorker"]
