"""Registry of built type maps."""

from __future__ import annotations

import threading

from loguru import logger

from suave_db.map.type_map import TypeMap, build_type_map

__all__ = ["TypeMapRegistry", "default_registry"]


class TypeMapRegistry:
    """
    Build-once cache of :class:`TypeMap` objects keyed by record type.

    Owned by whoever hosts the data contexts; tests normally create their
    own so that each starts from an empty cache.

    Concurrent first access for the same type is serialised: exactly one
    caller builds the map and the others receive the same instance. A build
    that raises :class:`~suave_db.errors.ConfigurationError` caches nothing,
    so every caller sees the error.

    Examples
    --------
    >>> registry = TypeMapRegistry()
    >>> city_map = registry.get(City)
    >>> registry.get(City) is city_map
    True
    """

    def __init__(self) -> None:
        self._maps: dict[type, TypeMap] = {}
        self._lock = threading.Lock()

    def get(self, cls: type) -> TypeMap:
        """Return the type map for ``cls``, building it on first use."""
        type_map = self._maps.get(cls)
        if type_map is not None:
            return type_map

        with self._lock:
            type_map = self._maps.get(cls)
            if type_map is None:
                type_map = build_type_map(cls)
                self._maps[cls] = type_map
            else:
                logger.debug(f"Type map for {cls.__qualname__} built by another caller")
        return type_map

    def __contains__(self, cls: type) -> bool:
        return cls in self._maps

    def __len__(self) -> int:
        return len(self._maps)

    def clear(self) -> None:
        """Drop every cached map."""
        with self._lock:
            self._maps.clear()


default_registry = TypeMapRegistry()
