"""Database driver seam.

The data context never talks to a DBAPI directly; it hands statement text
and a parameter mapping to a :class:`Driver`.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from loguru import logger
from sqlalchemy import text
from sqlalchemy.engine import Connection

if TYPE_CHECKING:
    from collections.abc import Generator, Mapping

    from sqlalchemy.engine import Engine

__all__ = ["Driver", "SqlAlchemyDriver"]


@runtime_checkable
class Driver(Protocol):
    """Three execution primitives over parameterised SQL."""

    def query(self, sql: str, params: Mapping[str, Any] | None = None) -> list[dict[str, Any]]:
        """Execute and return every row as a mapping."""
        ...

    def scalar(self, sql: str, params: Mapping[str, Any] | None = None) -> Any:
        """Execute and return the first column of the first row."""
        ...

    def execute(self, sql: str, params: Mapping[str, Any] | None = None) -> int:
        """Execute and return the number of affected rows."""
        ...


class SqlAlchemyDriver:
    """
    Driver backed by a SQLAlchemy engine or connection.

    Parameters
    ----------
    bind : Engine | Connection
        With an engine every call runs in its own ``engine.begin()`` block
        and commits on success. With a connection, statements run on it and
        transaction control stays with the caller.

    Examples
    --------
    >>> driver = SqlAlchemyDriver(get_engine("sqlite:///:memory:"))
    >>> driver.scalar("SELECT 1 + :n", {"n": 1})
    2

    Sharing a caller-owned transaction:

    >>> with engine.connect() as conn:
    ...     context = SqlDataContext(SqlAlchemyDriver(conn), SqliteSqlBuilder())
    ...     context.create(city)
    ...     conn.commit()
    """

    def __init__(self, bind: Engine | Connection) -> None:
        self.bind = bind

    @property
    def dialect(self) -> str:
        """SQLAlchemy dialect name of the bound database."""
        return self.bind.dialect.name

    @contextmanager
    def _connection(self) -> Generator[Connection, None, None]:
        if isinstance(self.bind, Connection):
            yield self.bind
        else:
            with self.bind.begin() as conn:
                yield conn

    def query(self, sql: str, params: Mapping[str, Any] | None = None) -> list[dict[str, Any]]:
        logger.debug(f"query: {sql} {dict(params or {})}")
        with self._connection() as conn:
            result = conn.execute(text(sql), dict(params or {}))
            return [dict(row) for row in result.mappings()]

    def scalar(self, sql: str, params: Mapping[str, Any] | None = None) -> Any:
        logger.debug(f"scalar: {sql} {dict(params or {})}")
        with self._connection() as conn:
            return conn.execute(text(sql), dict(params or {})).scalar()

    def execute(self, sql: str, params: Mapping[str, Any] | None = None) -> int:
        logger.debug(f"execute: {sql} {dict(params or {})}")
        with self._connection() as conn:
            return conn.execute(text(sql), dict(params or {})).rowcount
