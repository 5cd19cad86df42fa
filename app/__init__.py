# -*- coding: utf-8 -*-
"""
Registry Application Core Module
"""

from .config import Config

__all__ = ["Config"]
