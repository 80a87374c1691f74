"""Reusable ``Annotated`` field types for consistent mapping declarations.

Examples
--------
>>> @table("Cities")
... @dataclass
... class City:
...     city_id: IdentityKey = 0
...     city_code: RequiredStr = ""
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Annotated

from suave_db.constants import KeyType
from suave_db.map.annotations import DateStamp, Key, ReadOnly, Required

__all__ = [
    "AssignedKey",
    "AssignedStrKey",
    "GuidKey",
    "IdentityKey",
    "SequentialKey",
    "RequiredStr",
    "InsertStamp",
    "UpdateStamp",
]

# Key Types
IdentityKey = Annotated[int, Key(KeyType.IDENTITY)]

GuidKey = Annotated[uuid.UUID, Key(KeyType.GUID)]

AssignedKey = Annotated[int, Key(KeyType.ASSIGNED)]

AssignedStrKey = Annotated[str, Key(KeyType.ASSIGNED)]

# Sequential keys restart for every combination of assigned keys
SequentialKey = Annotated[int, Key(KeyType.SEQUENTIAL)]

# Value Types
RequiredStr = Annotated[str, Required()]

# Timestamp Types
InsertStamp = Annotated[datetime, DateStamp(), ReadOnly()]

UpdateStamp = Annotated[datetime, DateStamp()]
