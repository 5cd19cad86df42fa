# -*- coding: utf-8 -*-
"""
Builds the local StoreSet from one Database handle.
"""

from services.stores import StoreSet
from .database import Database
from .area_repository import AreaRepository
from .subarea_repository import SubareaRepository
from .unit_repository import UnitRepository
from .member_repository import MemberRepository


def create_local_stores(db: Database) -> StoreSet:
    """Repositories for all four tiers sharing one connection."""
    return StoreSet(
        areas=AreaRepository(db),
        subareas=SubareaRepository(db),
        units=UnitRepository(db),
        members=MemberRepository(db),
    )
