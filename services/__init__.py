# -*- coding: utf-8 -*-
"""
Registry Service Layer

Sync engine (session, reconcilers, identity mapper, media syncer), remote
API client and stores, duplicate detection and CSV import.
"""
