# -*- coding: utf-8 -*-
"""
Registry Repository Layer
"""

# Lazy imports to avoid circular dependencies
__all__ = [
    "Database",
    "AreaRepository",
    "SubareaRepository",
    "UnitRepository",
    "MemberRepository",
    "SettingsRepository",
    "create_local_stores",
]


def __getattr__(name):
    """Lazy import to avoid circular dependencies."""
    if name == "Database":
        from .database import Database
        return Database
    elif name == "AreaRepository":
        from .area_repository import AreaRepository
        return AreaRepository
    elif name == "SubareaRepository":
        from .subarea_repository import SubareaRepository
        return SubareaRepository
    elif name == "UnitRepository":
        from .unit_repository import UnitRepository
        return UnitRepository
    elif name == "MemberRepository":
        from .member_repository import MemberRepository
        return MemberRepository
    elif name == "SettingsRepository":
        from .settings_repository import SettingsRepository
        return SettingsRepository
    elif name == "create_local_stores":
        from .local_stores import create_local_stores
        return create_local_stores
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
