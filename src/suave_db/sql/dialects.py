"""Dialect-specific statement builders."""

from __future__ import annotations

from typing import TYPE_CHECKING

from suave_db.sql.builder import SqlBuilder

if TYPE_CHECKING:
    from suave_db.map.type_map import TypeMap

__all__ = ["TSqlBuilder", "SqliteSqlBuilder", "get_builder"]


class TSqlBuilder(SqlBuilder):
    """SQL Server builder: identity values come back through ``OUTPUT``."""

    dialect = "mssql"

    @property
    def now_expression(self) -> str:
        return "GETDATE()"

    def _insert(self, type_map: TypeMap) -> str:
        parts = [f"INSERT INTO {type_map.table_identifier}"]
        fields = type_map.insertable_fields
        if fields:
            parts.append(f"({', '.join(self.quote(f.column) for f in fields)})")
        if type_map.identity_key is not None:
            parts.append(f"OUTPUT inserted.{self.column_select(type_map.identity_key)}")
        if fields:
            parts.append(f"VALUES ({', '.join(f':{f.field}' for f in fields)})")
        else:
            parts.append("DEFAULT VALUES")
        return " ".join(parts)


class SqliteSqlBuilder(SqlBuilder):
    """
    SQLite builder: identity values come back through ``RETURNING``.

    Needs SQLite 3.35 or later. Schemas map onto attached databases.
    """

    dialect = "sqlite"

    @property
    def now_expression(self) -> str:
        # ISO 8601 local time, the same text the datetime adapter stores
        return "STRFTIME('%Y-%m-%dT%H:%M:%f', 'now', 'localtime')"

    def _insert(self, type_map: TypeMap) -> str:
        parts = [f"INSERT INTO {type_map.table_identifier}"]
        fields = type_map.insertable_fields
        if fields:
            parts.append(f"({', '.join(self.quote(f.column) for f in fields)})")
            parts.append(f"VALUES ({', '.join(f':{f.field}' for f in fields)})")
        else:
            parts.append("DEFAULT VALUES")
        if type_map.identity_key is not None:
            parts.append(f"RETURNING {self.column_select(type_map.identity_key)}")
        return " ".join(parts)


_BUILDERS: dict[str, type[SqlBuilder]] = {
    TSqlBuilder.dialect: TSqlBuilder,
    SqliteSqlBuilder.dialect: SqliteSqlBuilder,
}


def get_builder(dialect: str) -> SqlBuilder:
    """
    Create a builder for a SQLAlchemy dialect name.

    Parameters
    ----------
    dialect : str
        ``"mssql"`` (alias ``"tsql"``) or ``"sqlite"``

    Raises
    ------
    ValueError
        If the dialect is not supported
    """
    name = "mssql" if dialect == "tsql" else dialect
    try:
        return _BUILDERS[name]()
    except KeyError:
        msg = f"Unsupported SQL dialect {dialect!r}; expected one of {sorted(_BUILDERS)}"
        raise ValueError(msg) from None
