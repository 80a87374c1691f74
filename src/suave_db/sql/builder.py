"""Parameterised SQL generation from type maps.

Statements only ever contain identifiers taken from type maps; every value
travels as a named parameter (``:field_name``) so the text can be handed to
:func:`sqlalchemy.text`.
"""

from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from loguru import logger

from suave_db.errors import ArgumentError
from suave_db.map.coalesce import select_updates

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Mapping

    from suave_db.constants import SortOrder
    from suave_db.map.field_map import FieldMap
    from suave_db.map.type_map import TypeMap

__all__ = ["SqlBuilder", "FIRST_ROW_PARAM", "LAST_ROW_PARAM"]

FIRST_ROW_PARAM = "__first_row"
LAST_ROW_PARAM = "__last_row"
ROW_NUMBER_ALIAS = "__row_number"


class SqlBuilder(ABC):
    """
    Base class for dialect-specific statement builders.

    Statements that only depend on the shape of a type (select all, select
    by key, insert, delete, next sequential id) are built once per
    ``(type, kind)`` and cached on the builder. Statements that depend on
    the call (WHERE conditions, update SET lists, ORDER BY, paging) are
    built every call.

    Subclasses supply the insert statement (identity retrieval differs per
    engine) and the current-time expression used for date stamps.
    """

    #: SQLAlchemy dialect name the builder targets
    dialect: str = ""
    #: format string used to encapsulate identifiers
    encapsulation: str = "[{0}]"

    def __init__(self) -> None:
        self._cache: dict[tuple[type, str], str] = {}
        # re-entrant: cached builders call each other
        self._lock = threading.RLock()

    @property
    @abstractmethod
    def now_expression(self) -> str:
        """SQL expression evaluating to the current local time."""

    @abstractmethod
    def _insert(self, type_map: TypeMap) -> str:
        """Build the insert statement for a type."""

    # ---------------------------------------------------------------- helpers

    def quote(self, identifier: str) -> str:
        return self.encapsulation.format(identifier)

    def column_select(self, field_map: FieldMap) -> str:
        """Column reference aliased to the field name when they differ."""
        column = self.quote(field_map.column)
        if field_map.column == field_map.field:
            return column
        return f"{column} AS {self.quote(field_map.field)}"

    def _cached(self, type_map: TypeMap, kind: str, build: Callable[[], str]) -> str:
        key = (type_map.type, kind)
        sql = self._cache.get(key)
        if sql is None:
            with self._lock:
                sql = self._cache.get(key)
                if sql is None:
                    sql = build()
                    self._cache[key] = sql
                    logger.debug(f"Cached {kind} statement for {type_map.name}: {sql}")
        return sql

    def _where(self, maps: Iterable[FieldMap]) -> str:
        clauses = [f"{self.quote(f.column)} = :{f.field}" for f in maps]
        if not clauses:
            return ""
        return "WHERE " + " AND ".join(clauses)

    def _where_conditions(self, type_map: TypeMap, conditions: Mapping[str, Any]) -> str:
        maps = []
        for name in conditions:
            field_map = type_map.get_field(name)
            if field_map is None:
                msg = f"Failed to find field {name} on {type_map.name}."
                raise ArgumentError(msg)
            maps.append(field_map)
        return self._where(maps)

    @staticmethod
    def _join(*parts: str) -> str:
        return " ".join(p for p in parts if p)

    def cached_statements(self, type_map: TypeMap) -> dict[str, str]:
        """Return the shape-invariant statements already cached for a type."""
        with self._lock:
            return {
                kind: sql for (cls, kind), sql in self._cache.items() if cls is type_map.type
            }

    # ------------------------------------------------------------- statements

    def build_select_all(self, type_map: TypeMap) -> str:
        """``SELECT <columns> FROM <table>``."""

        def build() -> str:
            columns = ", ".join(self.column_select(f) for f in type_map.select_fields)
            return f"SELECT {columns} FROM {type_map.table_identifier}"

        return self._cached(type_map, "select", build)

    def build_where_key(self, type_map: TypeMap) -> str:
        """Key equality clause shared by key lookups, updates and deletes."""
        return self._cached(type_map, "where_key", lambda: self._where(type_map.all_keys))

    def build_select_by_key(self, type_map: TypeMap) -> str:
        return self._cached(
            type_map,
            "select_by_key",
            lambda: self._join(self.build_select_all(type_map), self.build_where_key(type_map)),
        )

    def build_select_where(self, type_map: TypeMap, conditions: Mapping[str, Any]) -> str:
        """Select filtered by AND-joined equality conditions."""
        return self._join(
            self.build_select_all(type_map),
            self._where_conditions(type_map, conditions),
        )

    def build_count(self, type_map: TypeMap, conditions: Mapping[str, Any] | None = None) -> str:
        """Row count over the (optionally) filtered table."""
        count_all = self._cached(
            type_map,
            "count",
            lambda: f"SELECT COUNT(*) FROM {type_map.table_identifier}",
        )
        if not conditions:
            return count_all
        return self._join(count_all, self._where_conditions(type_map, conditions))

    def build_insert(self, type_map: TypeMap) -> str:
        """Insert of every insertable field, returning any identity value."""
        return self._cached(type_map, "insert", lambda: self._insert(type_map))

    def build_update(self, type_map: TypeMap, properties: Mapping[str, Any]) -> str:
        """
        Update of the updateable fields present in ``properties``.

        Fields that are keys, read-only, soft delete flags, date stamps or
        unknown are dropped; date stamps that are not insert-only are set to
        the current time.

        Raises
        ------
        ArgumentError
            If no updateable field remains
        """
        assignments = [
            f"{self.quote(f.column)} = :{f.field}" for f in select_updates(type_map, properties)
        ]
        assignments.extend(
            f"{self.quote(f.column)} = {self.now_expression}"
            for f in type_map.update_stamp_fields
        )
        return self._join(
            f"UPDATE {type_map.table_identifier} SET {', '.join(assignments)}",
            self.build_where_key(type_map),
        )

    def build_delete(self, type_map: TypeMap) -> str:
        return self._cached(
            type_map, "delete", lambda: f"DELETE FROM {type_map.table_identifier}"
        )

    def build_delete_by_key(self, type_map: TypeMap) -> str:
        return self._cached(
            type_map,
            "delete_by_key",
            lambda: self._join(self.build_delete(type_map), self.build_where_key(type_map)),
        )

    def build_delete_where(self, type_map: TypeMap, conditions: Mapping[str, Any]) -> str:
        """
        Delete filtered by AND-joined equality conditions.

        Raises
        ------
        ArgumentError
            If no condition is given (a bare DELETE is never generated)
        """
        if not conditions:
            msg = "Please specify at least one field for a WHERE condition."
            raise ArgumentError(msg)
        return self._join(
            self.build_delete(type_map), self._where_conditions(type_map, conditions)
        )

    def build_next_id(self, type_map: TypeMap) -> str:
        """
        ``MAX + 1`` over the sequential key, scoped to the assigned keys.

        Raises
        ------
        ArgumentError
            If the type has no sequential key
        """
        key = type_map.sequential_key
        if key is None:
            msg = f"{type_map.name} has no Sequential key to generate a value for."
            raise ArgumentError(msg)

        def build() -> str:
            return self._join(
                f"SELECT COALESCE(MAX({self.quote(key.column)}), 0) + 1 "
                f"FROM {type_map.table_identifier}",
                self._where(type_map.assigned_keys),
            )

        return self._cached(type_map, "next_id", build)

    def build_order_by(self, sort: list[tuple[FieldMap, SortOrder]]) -> str:
        """ORDER BY clause for a resolved sort order."""
        if not sort:
            return "ORDER BY (SELECT NULL)"
        terms = ", ".join(f"{self.quote(f.column)} {order.sql}" for f, order in sort)
        return f"ORDER BY {terms}"

    def build_select_page(
        self,
        type_map: TypeMap,
        conditions: Mapping[str, Any],
        sort: list[tuple[FieldMap, SortOrder]],
    ) -> str:
        """
        Select one window of the filtered, sorted rows.

        The filtered select is ranked with ``ROW_NUMBER()`` over the resolved
        ORDER BY and wrapped so only ranks between ``:__first_row`` and
        ``:__last_row`` are returned, in rank order.
        """
        columns = ", ".join(self.column_select(f) for f in type_map.select_fields)
        aliases = ", ".join(self.quote(f.field) for f in type_map.select_fields)
        row_number = self.quote(ROW_NUMBER_ALIAS)
        inner = self._join(
            f"SELECT ROW_NUMBER() OVER ({self.build_order_by(sort)}) AS {row_number}, "
            f"{columns} FROM {type_map.table_identifier}",
            self._where_conditions(type_map, conditions),
        )
        return (
            f"SELECT {aliases} FROM ({inner}) AS {self.quote('paged')} "
            f"WHERE {row_number} BETWEEN :{FIRST_ROW_PARAM} AND :{LAST_ROW_PARAM} "
            f"ORDER BY {row_number}"
        )
