"""pytest configuration for suave_db tests."""

from __future__ import annotations

import pytest
from sqlalchemy import text

from records import CITY_DDL
from suave_db.db import InMemoryDataContext, SqlAlchemyDriver, SqlDataContext, get_engine
from suave_db.map import TypeMapRegistry
from suave_db.sql import SqliteSqlBuilder, TSqlBuilder


@pytest.fixture
def registry():
    """Fresh type map cache, so tests never share built maps."""
    return TypeMapRegistry()


@pytest.fixture
def engine():
    """Create in-memory SQLite engine with the test tables.

    The engine uses a StaticPool, so the attached ``Suave`` schema and every
    table live on the single shared connection.
    """
    engine = get_engine("sqlite:///:memory:", echo=False)
    with engine.connect() as conn:
        conn.execute(text("ATTACH DATABASE ':memory:' AS Suave"))
        for ddl in CITY_DDL:
            conn.execute(text(ddl))
        conn.commit()
    yield engine
    engine.dispose()


@pytest.fixture
def sql_context(engine, registry):
    """SQL data context over the in-memory SQLite engine."""
    return SqlDataContext(SqlAlchemyDriver(engine), SqliteSqlBuilder(), registry)


@pytest.fixture
def memory_context(registry):
    """In-memory data context."""
    return InMemoryDataContext(registry)


@pytest.fixture(params=["sql", "memory"])
def context(request):
    """Run a behavioural test against both data contexts.

    Both must give the same observable results.
    """
    return request.getfixturevalue(f"{request.param}_context")


@pytest.fixture
def tsql():
    return TSqlBuilder()


@pytest.fixture
def sqlite():
    return SqliteSqlBuilder()
