"""SQL statement builders."""

from __future__ import annotations

__all__ = [
    "SqlBuilder",
    "SqliteSqlBuilder",
    "TSqlBuilder",
    "get_builder",
]

from .builder import SqlBuilder
from .dialects import SqliteSqlBuilder, TSqlBuilder, get_builder
