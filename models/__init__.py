# -*- coding: utf-8 -*-
"""
Registry Data Models
"""

from .area import Area
from .subarea import Subarea
from .unit import Unit
from .member import Member
from .remote_records import RemoteArea, RemoteSubarea, RemoteUnit, RemoteMember

__all__ = [
    "Area",
    "Subarea",
    "Unit",
    "Member",
    "RemoteArea",
    "RemoteSubarea",
    "RemoteUnit",
    "RemoteMember",
]
