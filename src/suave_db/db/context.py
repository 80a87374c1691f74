"""Data contexts: the public CRUD surface.

Two implementations share one contract:

- :class:`SqlDataContext` generates SQL with a
  :class:`~suave_db.sql.builder.SqlBuilder` and runs it through a
  :class:`~suave_db.db.driver.Driver`
- :class:`~suave_db.db.memory.InMemoryDataContext` keeps rows in process
  and is used as a test double

Use :func:`create_data_context` to pick one from a URL.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, TypeVar

from loguru import logger

from suave_db.constants import KeyType
from suave_db.errors import ArgumentError, DataIntegrityError
from suave_db.map.coalesce import (
    Fields,
    coalesce_conditions,
    coalesce_key,
    coalesce_sort,
    select_updates,
    to_property_bag,
)
from suave_db.map.registry import default_registry
from suave_db.paging import PagedList, page_window
from suave_db.db.rows import convert_value, hydrate
from suave_db.sql.builder import FIRST_ROW_PARAM, LAST_ROW_PARAM
from suave_db.utils.time import local_now

if TYPE_CHECKING:
    from suave_db.db.driver import Driver
    from suave_db.map.field_map import FieldMap
    from suave_db.map.registry import TypeMapRegistry
    from suave_db.map.type_map import TypeMap
    from suave_db.sql.builder import SqlBuilder

__all__ = ["DataContext", "SqlDataContext", "create_data_context"]

T = TypeVar("T")


class DataContext(ABC):
    """
    CRUD operations for mapped record types.

    Parameters
    ----------
    registry : TypeMapRegistry | None, optional
        Type map cache, by default the module-level ``default_registry``

    Notes
    -----
    Key arguments accept a bare value (types with a single key), a mapping,
    a record instance or any attribute object carrying every key field.
    Condition arguments accept the same shapes minus the bare value.
    """

    def __init__(self, registry: TypeMapRegistry | None = None) -> None:
        self.registry = registry if registry is not None else default_registry

    def type_map(self, cls: type) -> TypeMap:
        return self.registry.get(cls)

    @abstractmethod
    def create(self, entity: T) -> T:
        """Insert ``entity``, assigning generated values onto it."""

    @abstractmethod
    def read(self, cls: type[T], key: Any) -> T | None:
        """Return the row with the given key, or None."""

    @abstractmethod
    def read_all(self, cls: type[T]) -> list[T]:
        """Return every row."""

    @abstractmethod
    def read_list(self, cls: type[T], where: Any) -> list[T]:
        """Return rows equal to every condition (at least one required)."""

    @abstractmethod
    def read_page(
        self,
        cls: type[T],
        where: Any = None,
        sort: Any = None,
        page_size: int = 10,
        page_number: int = 1,
    ) -> PagedList[T]:
        """Return one page of the (optionally filtered) sorted rows."""

    @abstractmethod
    def update(self, cls: type[T], properties: Any) -> T | None:
        """Update the row identified by the key fields in ``properties``."""

    @abstractmethod
    def delete(self, cls: type, key: Any) -> None:
        """Delete the row with the given key; a missing row is not an error."""

    @abstractmethod
    def delete_list(self, cls: type, where: Any) -> None:
        """Delete rows equal to every condition (at least one required)."""

    # ---------------------------------------------------------------- helpers

    @staticmethod
    def _check_required(type_map: TypeMap, entity: Any) -> None:
        for field_map in type_map.required_fields:
            if _is_generated(field_map):
                continue
            value = getattr(entity, field_map.field)
            if value is None or (isinstance(value, str) and not value):
                msg = f"{type_map.name}.{field_map.field} is required."
                raise ArgumentError(msg)

    @staticmethod
    def _stamp_new(type_map: TypeMap, entity: Any) -> None:
        if type_map.date_stamp_fields:
            now = local_now()
            for field_map in type_map.date_stamp_fields:
                setattr(entity, field_map.field, now)

        soft_delete = type_map.soft_delete_field
        if soft_delete is not None:
            setattr(entity, soft_delete.field, soft_delete.inserted_value)

    @staticmethod
    def _update_payload(type_map: TypeMap, properties: Any) -> tuple[dict, dict]:
        """Split update input into the key and the updateable values."""
        bag = to_property_bag(properties)
        key = coalesce_key(type_map, bag)
        values = bag.as_dict() if isinstance(bag, Fields) else {}
        updates = {f.field: values[f.field] for f in select_updates(type_map, values)}
        return key, updates


def _is_generated(field_map: FieldMap) -> bool:
    return (
        field_map.key_type in (KeyType.IDENTITY, KeyType.SEQUENTIAL)
        or field_map.is_date_stamp
        or field_map.is_soft_delete
    )


class SqlDataContext(DataContext):
    """
    Data context issuing generated SQL through a driver.

    Parameters
    ----------
    driver : Driver
        Executes the statements
    builder : SqlBuilder
        Generates statements for the driver's dialect
    registry : TypeMapRegistry | None, optional
        Type map cache

    Examples
    --------
    >>> engine = get_engine("sqlite:///:memory:")
    >>> context = SqlDataContext(SqlAlchemyDriver(engine), SqliteSqlBuilder())
    >>> city = context.create(City(city_code="PUP", city_name="Portsmouth", area="Hampshire"))
    >>> context.read(City, city.city_id).city_name
    'Portsmouth'
    """

    def __init__(
        self,
        driver: Driver,
        builder: SqlBuilder,
        registry: TypeMapRegistry | None = None,
    ) -> None:
        super().__init__(registry)
        self.driver = driver
        self.builder = builder

    def create(self, entity: T) -> T:
        type_map = self.type_map(type(entity))
        self._check_required(type_map, entity)

        sequential = type_map.sequential_key
        if sequential is not None:
            scope = type_map.values_of(entity, type_map.assigned_keys)
            next_id = self.driver.scalar(self.builder.build_next_id(type_map), scope)
            setattr(entity, sequential.field, convert_value(sequential, next_id))

        self._stamp_new(type_map, entity)

        sql = self.builder.build_insert(type_map)
        params = type_map.values_of(entity, type_map.insertable_fields)

        identity = type_map.identity_key
        if identity is None:
            # No OUTPUT/RETURNING clause, so the insert yields no rows
            self.driver.execute(sql, params)
        else:
            rows = self.driver.query(sql, params)
            if not rows:
                msg = f"Expected a row with the identity value of {type_map.name}, but none returned."
                raise DataIntegrityError(msg)
            setattr(entity, identity.field, convert_value(identity, rows[0][identity.field]))

        logger.debug(f"Created {type_map.name} {type_map.values_of(entity, type_map.all_keys)}")
        return entity

    def read(self, cls: type[T], key: Any) -> T | None:
        type_map = self.type_map(cls)
        key = coalesce_key(type_map, key)

        rows = self.driver.query(self.builder.build_select_by_key(type_map), key)
        if len(rows) > 1:
            msg = f"Key {key} matches {len(rows)} rows of {type_map.name}."
            raise DataIntegrityError(msg)
        return hydrate(type_map, rows[0]) if rows else None

    def read_all(self, cls: type[T]) -> list[T]:
        type_map = self.type_map(cls)
        rows = self.driver.query(self.builder.build_select_all(type_map))
        return [hydrate(type_map, row) for row in rows]

    def read_list(self, cls: type[T], where: Any) -> list[T]:
        type_map = self.type_map(cls)
        conditions = coalesce_conditions(type_map, where)

        rows = self.driver.query(
            self.builder.build_select_where(type_map, conditions), conditions
        )
        return [hydrate(type_map, row) for row in rows]

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

        total = self.driver.scalar(self.builder.build_count(type_map, conditions), conditions)
        rows = self.driver.query(
            self.builder.build_select_page(type_map, conditions, order),
            {**conditions, FIRST_ROW_PARAM: first_row, LAST_ROW_PARAM: last_row},
        )
        return PagedList.build(
            [hydrate(type_map, row) for row in rows],
            int(total or 0),
            page_size,
            page_number,
        )

    def update(self, cls: type[T], properties: Any) -> T | None:
        type_map = self.type_map(cls)
        key, updates = self._update_payload(type_map, properties)

        affected = self.driver.execute(
            self.builder.build_update(type_map, updates), {**updates, **key}
        )
        logger.debug(f"Updated {affected} {type_map.name} row(s) for {key}")

        # re-read so database-side stamps are reflected
        return self.read(cls, key)

    def delete(self, cls: type, key: Any) -> None:
        type_map = self.type_map(cls)
        key = coalesce_key(type_map, key)

        affected = self.driver.execute(self.builder.build_delete_by_key(type_map), key)
        logger.debug(f"Deleted {affected} {type_map.name} row(s) for {key}")

    def delete_list(self, cls: type, where: Any) -> None:
        type_map = self.type_map(cls)
        conditions = coalesce_conditions(type_map, where)

        affected = self.driver.execute(
            self.builder.build_delete_where(type_map, conditions), conditions
        )
        logger.debug(f"Deleted {affected} {type_map.name} row(s) where {conditions}")


def create_data_context(
    database_url: str | None = None,
    echo: bool | None = None,
    registry: TypeMapRegistry | None = None,
) -> DataContext:
    """
    Create a data context for a database URL.

    Parameters
    ----------
    database_url : str | None, optional
        SQLAlchemy URL (``sqlite…`` or ``mssql…``) or ``memory://`` for the
        in-memory engine, by default ``SUAVE_DB_URL``
    echo : bool | None, optional
        Echo SQL statements, by default ``SUAVE_DB_ECHO``
    registry : TypeMapRegistry | None, optional
        Type map cache shared by the context

    Returns
    -------
    DataContext
        ``InMemoryDataContext`` or ``SqlDataContext``

    Examples
    --------
    >>> context = create_data_context("memory://")
    >>> context = create_data_context("sqlite:///./cities.db")
    """
    from suave_db.db.config import MEMORY_URL, get_database_url, get_engine
    from suave_db.db.driver import SqlAlchemyDriver
    from suave_db.db.memory import InMemoryDataContext
    from suave_db.sql.dialects import get_builder

    url = get_database_url(database_url)
    if url.startswith(MEMORY_URL):
        return InMemoryDataContext(registry)

    engine = get_engine(url, echo)
    logger.debug(f"Data context for {engine.url} ({engine.dialect.name})")
    return SqlDataContext(SqlAlchemyDriver(engine), get_builder(engine.dialect.name), registry)
