"""Record types shared by the test suite."""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Annotated, Optional

from suave_db import Column, Key, KeyType, NotMapped, ReadOnly, Required, SoftDelete, table
from suave_db.utils.mapped_types import InsertStamp, UpdateStamp

Sequential = Key(KeyType.SEQUENTIAL)
Assigned = Key(KeyType.ASSIGNED)


@table("Cities")
@dataclass
class City:
    city_id: Annotated[Optional[int], Key()] = None
    city_code: Annotated[Optional[str], Required()] = None
    city_name: Annotated[Optional[str], Column("Name"), Required()] = None
    area: Annotated[Optional[str], Required()] = None


@table("CitiesManual")
@dataclass
class CityManual:
    city_code: Annotated[str, Assigned, Required()]
    city_name: Annotated[Optional[str], Column("Name"), Required()] = None


@table("CitiesSequential")
@dataclass
class CitySequential:
    city_id: Annotated[Optional[int], Sequential] = None
    city_code: Annotated[Optional[str], Required()] = None
    city_name: Annotated[Optional[str], Column("Name"), Required()] = None


@dataclass
class AssignedAndSequential:
    assigned_id: Annotated[int, Assigned]
    sequential_id: Annotated[Optional[int], Sequential] = None
    heading: Annotated[Optional[str], Required(), Column("Title")] = None


@table("AssignedPairAndSequential")
@dataclass
class AssignedPairAndSequential:
    first_assigned_id: Annotated[int, Assigned]
    second_assigned_id: Annotated[int, Assigned]
    sequential_id: Annotated[Optional[int], Sequential] = None
    heading: Annotated[Optional[str], Required(), Column("Title")] = None


@dataclass
class Itinerary:
    booking_id: Annotated[int, Assigned]
    itinerary_id: Annotated[Optional[int], Sequential] = None
    itinerary_title: Annotated[Optional[str], Required(), Column("Title")] = None


@table("ElementTable")
@dataclass
class Element:
    booking_id: Annotated[int, Assigned]
    itinerary_id: Annotated[int, Assigned, Column("ItinId")]
    element_id: Annotated[Optional[int], Sequential] = None
    element_title: Annotated[Optional[str], Required(), Column("Title")] = None


@table("DateStampTest")
@dataclass
class DateStampTest:
    name: Annotated[str, Assigned]
    value: Optional[str] = None
    insert_date: Optional[InsertStamp] = None
    update_date: Optional[UpdateStamp] = None


@table("ReadOnly")
@dataclass
class ReadOnlyTest:
    sequential_id: Annotated[Optional[int], Sequential] = None
    editable: Optional[str] = None
    read_only_property: Annotated[Optional[str], ReadOnly(), Column("ReadOnly")] = None


@table("SoftDeleteTest", schema="Suave")
@dataclass
class SoftDeleteTest:
    soft_delete_id: Annotated[Optional[int], Key(KeyType.IDENTITY)] = None
    record_status: Annotated[int, SoftDelete(1, 0)] = 0


@table("Documents")
@dataclass
class Document:
    id: Optional[uuid.UUID] = None
    title: Optional[str] = None
    created: Annotated[Optional[datetime], NotMapped()] = None


CITY_DDL = [
    """
    CREATE TABLE Cities (
        city_id INTEGER PRIMARY KEY,
        city_code TEXT NOT NULL,
        Name TEXT NOT NULL,
        area TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE CitiesManual (
        city_code TEXT PRIMARY KEY,
        Name TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE CitiesSequential (
        city_id INTEGER PRIMARY KEY,
        city_code TEXT NOT NULL,
        Name TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE AssignedAndSequential (
        assigned_id INTEGER NOT NULL,
        sequential_id INTEGER NOT NULL,
        Title TEXT NOT NULL,
        PRIMARY KEY (assigned_id, sequential_id)
    )
    """,
    """
    CREATE TABLE AssignedPairAndSequential (
        first_assigned_id INTEGER NOT NULL,
        second_assigned_id INTEGER NOT NULL,
        sequential_id INTEGER NOT NULL,
        Title TEXT NOT NULL,
        PRIMARY KEY (first_assigned_id, second_assigned_id, sequential_id)
    )
    """,
    """
    CREATE TABLE Itinerary (
        booking_id INTEGER NOT NULL,
        itinerary_id INTEGER NOT NULL,
        Title TEXT NOT NULL,
        PRIMARY KEY (booking_id, itinerary_id)
    )
    """,
    """
    CREATE TABLE ElementTable (
        booking_id INTEGER NOT NULL,
        ItinId INTEGER NOT NULL,
        element_id INTEGER NOT NULL,
        Title TEXT NOT NULL,
        PRIMARY KEY (booking_id, ItinId, element_id)
    )
    """,
    """
    CREATE TABLE DateStampTest (
        name TEXT PRIMARY KEY,
        value TEXT,
        insert_date TEXT NOT NULL,
        update_date TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE [ReadOnly] (
        sequential_id INTEGER PRIMARY KEY,
        editable TEXT,
        ReadOnly TEXT
    )
    """,
    """
    CREATE TABLE Suave.SoftDeleteTest (
        soft_delete_id INTEGER PRIMARY KEY,
        record_status INTEGER NOT NULL
    )
    """,
    """
    CREATE TABLE Documents (
        id TEXT PRIMARY KEY,
        title TEXT
    )
    """,
]
