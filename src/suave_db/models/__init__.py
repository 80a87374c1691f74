"""Boundary schemas for suave_db."""

from __future__ import annotations

__all__ = ["FieldMapResponse", "TypeMapResponse"]

from .schemas import FieldMapResponse, TypeMapResponse
