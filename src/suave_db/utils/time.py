"""Time utility functions."""

from __future__ import annotations

from datetime import datetime

__all__ = ["local_now"]


def local_now() -> datetime:
    """
    Return the current local time as a naive datetime.

    Date stamps use local time so that values written from Python and
    values produced by the database's own clock function agree.

    Returns
    -------
    datetime
        Current local timestamp without tzinfo

    Examples
    --------
    >>> local_now().tzinfo is None
    True
    """
    return datetime.now()
