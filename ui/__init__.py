# -*- coding: utf-8 -*-
"""Qt integration: background sync worker and interactive duplicate checks."""
