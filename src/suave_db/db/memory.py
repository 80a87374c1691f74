"""In-process data context.

Holds one list of records per mapped type. It honours the same key
generation, stamping, update filtering and paging rules as
:class:`~suave_db.db.context.SqlDataContext`, which makes it usable as a
stub in unit tests and for quick prototypes.
"""

from __future__ import annotations

import copy
import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, TypeVar

from loguru import logger

from suave_db.constants import SortOrder
from suave_db.db.context import DataContext
from suave_db.errors import DataIntegrityError
from suave_db.map.coalesce import coalesce_conditions, coalesce_key, coalesce_sort
from suave_db.paging import PagedList, page_window
from suave_db.utils.time import local_now

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from suave_db.map.field_map import FieldMap
    from suave_db.map.registry import TypeMapRegistry

__all__ = ["InMemoryDataContext"]

T = TypeVar("T")

Predicate = Callable[[Any], bool]


@dataclass
class _Partition:
    rows: list = field(default_factory=list)
    lock: threading.RLock = field(default_factory=threading.RLock)


def _matches(conditions: Mapping[str, Any]) -> Predicate:
    """Equality on every condition; a None condition matches nothing, as in SQL."""
    items = list(conditions.items())

    def predicate(row: Any) -> bool:
        for name, expected in items:
            if expected is None:
                return False
            if getattr(row, name) != expected:
                return False
        return True

    return predicate


def _sort_rows(rows: list, sort: list[tuple[FieldMap, SortOrder]]) -> list:
    """Multi-field sort as successive stable sorts, last key first. NULLs sort low."""
    rows = list(rows)
    for field_map, direction in reversed(sort):
        name = field_map.field
        rows.sort(
            key=lambda row, name=name: (getattr(row, name) is not None, getattr(row, name)),
            reverse=direction is SortOrder.DESCENDING,
        )
    return rows


def _next_value(rows: Iterable[Any], field_map: FieldMap) -> Any:
    values = [getattr(row, field_map.field) for row in rows]
    values = [v for v in values if v is not None]
    return max(values) + 1 if values else 1


class InMemoryDataContext(DataContext):
    """
    Data context over an in-process, type-partitioned store.

    Stored rows are copies of what callers pass in and every read hands out
    fresh copies, so mutating a returned record never changes the store.

    Examples
    --------
    >>> context = InMemoryDataContext()
    >>> context.add_or_replace(City, [City(city_id=1, city_code="PUP", city_name="Portsmouth", area="Hampshire")])
    >>> context.create(City(city_code="BAS", city_name="Basingstoke", area="Hampshire")).city_id
    2
    """

    def __init__(self, registry: TypeMapRegistry | None = None) -> None:
        super().__init__(registry)
        self._partitions: dict[type, _Partition] = {}
        self._store_lock = threading.Lock()

    def _partition(self, cls: type) -> _Partition:
        partition = self._partitions.get(cls)
        if partition is None:
            with self._store_lock:
                partition = self._partitions.get(cls)
                if partition is None:
                    partition = _Partition()
                    self._partitions[cls] = partition
        return partition

    def _snapshot(self, cls: type, predicate: Predicate | None = None) -> list:
        partition = self._partition(cls)
        with partition.lock:
            rows = list(partition.rows)
        if predicate is not None:
            rows = [row for row in rows if predicate(row)]
        return rows

    @staticmethod
    def _copies(rows: Iterable[Any]) -> list:
        return [copy.copy(row) for row in rows]

    # ------------------------------------------------------------ seeding

    def add_or_replace(self, cls: type[T], rows: Iterable[T]) -> None:
        """
        Replace the stored rows of ``cls`` with copies of ``rows``.

        Rows are stored as given: no keys are generated and nothing is
        stamped.
        """
        self.type_map(cls)
        copies = self._copies(rows)
        partition = self._partition(cls)
        with partition.lock:
            partition.rows[:] = copies
        logger.debug(f"Seeded {len(copies)} {cls.__qualname__} row(s)")

    def clear(self) -> None:
        """Drop every stored row of every type."""
        with self._store_lock:
            self._partitions.clear()

    # -------------------------------------------------------------- CRUD

    def create(self, entity: T) -> T:
        type_map = self.type_map(type(entity))
        self._check_required(type_map, entity)
        partition = self._partition(type_map.type)

        with partition.lock:
            sequential = type_map.sequential_key
            if sequential is not None:
                scope = _matches(type_map.values_of(entity, type_map.assigned_keys))
                peers = [row for row in partition.rows if scope(row)]
                setattr(entity, sequential.field, _next_value(peers, sequential))

            self._stamp_new(type_map, entity)

            identity = type_map.identity_key
            if identity is not None:
                setattr(entity, identity.field, _next_value(partition.rows, identity))

            partition.rows.append(copy.copy(entity))

        logger.debug(f"Created {type_map.name} {type_map.values_of(entity, type_map.all_keys)}")
        return entity

    def read(self, cls: type[T], key: Any) -> T | None:
        type_map = self.type_map(cls)
        key = coalesce_key(type_map, key)

        rows = self._snapshot(cls, _matches(key))
        if len(rows) > 1:
            msg = f"Key {key} matches {len(rows)} rows of {type_map.name}."
            raise DataIntegrityError(msg)
        return copy.copy(rows[0]) if rows else None

    def read_all(self, cls: type[T]) -> list[T]:
        self.type_map(cls)
        return self._copies(self._snapshot(cls))

    def read_list(self, cls: type[T], where: Any) -> list[T]:
        type_map = self.type_map(cls)
        conditions = coalesce_conditions(type_map, where)
        return self._copies(self._snapshot(cls, _matches(conditions)))

    def read_page(
        self,
        cls: type[T],
        where: Any = None,
        sort: Any = None,
        page_size: int = 10,
        page_number: int = 1,
    ) -> PagedList[T]:
        type_map = self.type_map(cls)
        conditions = coalesce_conditions(type_map, where, allow_empty=True)
        order = coalesce_sort(type_map, sort)
        first_row, last_row = page_window(page_size, page_number)

        rows = _sort_rows(self._snapshot(cls, _matches(conditions)), order)
        return PagedList.build(
            self._copies(rows[first_row - 1:last_row]),
            len(rows),
            page_size,
            page_number,
        )

    def update(self, cls: type[T], properties: Any) -> T | None:
        type_map = self.type_map(cls)
        key, updates = self._update_payload(type_map, properties)
        matches = _matches(key)
        partition = self._partition(cls)

        with partition.lock:
            for index, row in enumerate(partition.rows):
                if not matches(row):
                    continue
                changed = copy.copy(row)
                for name, value in updates.items():
                    setattr(changed, name, value)
                if type_map.update_stamp_fields:
                    now = local_now()
                    for field_map in type_map.update_stamp_fields:
                        setattr(changed, field_map.field, now)
                partition.rows[index] = changed
                logger.debug(f"Updated {type_map.name} row for {key}")
                return copy.copy(changed)

        return None

    def delete(self, cls: type, key: Any) -> None:
        type_map = self.type_map(cls)
        self._remove(cls, _matches(coalesce_key(type_map, key)))

    def delete_list(self, cls: type, where: Any) -> None:
        type_map = self.type_map(cls)
        self._remove(cls, _matches(coalesce_conditions(type_map, where)))

    def _remove(self, cls: type, predicate: Predicate) -> None:
        partition = self._partition(cls)
        with partition.lock:
            kept = [row for row in partition.rows if not predicate(row)]
            removed = len(partition.rows) - len(kept)
            partition.rows[:] = kept
        logger.debug(f"Deleted {removed} {cls.__qualname__} row(s)")
