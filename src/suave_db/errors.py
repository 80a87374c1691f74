"""Exception hierarchy for suave_db."""

from __future__ import annotations

__all__ = [
    "SuaveError",
    "ConfigurationError",
    "ArgumentError",
    "DataIntegrityError",
]


class SuaveError(Exception):
    """Base class for every error raised by suave_db."""


class ConfigurationError(SuaveError):
    """Raised when a record type declares conflicting mapping metadata.

    Detected once, the first time the type map is built. Not recoverable
    without fixing the declaration.

    Examples
    --------
    >>> @dataclass
    ... class Broken:
    ...     a: Annotated[int, Key(KeyType.IDENTITY)] = 0
    ...     b: Annotated[int, Key(KeyType.IDENTITY)] = 0
    >>> registry.get(Broken)
    Traceback (most recent call last):
    ...
    ConfigurationError: Broken can only define a single Identity key.
    """


class ArgumentError(SuaveError, ValueError):
    """Raised for caller-correctable problems with a single call."""


class DataIntegrityError(SuaveError):
    """Raised when the database returns rows that break a mapping guarantee.

    For example more than one row for a key lookup, or no row carrying the
    generated identity value after an insert.
    """
