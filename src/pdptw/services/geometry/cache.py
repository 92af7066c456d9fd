"""Persistent, directional coordinate-pair to polyline cache."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

from ...config import settings
from ...models.domain import Coordinate
from ...persistence.filesystem import KeyValueStore

logger = logging.getLogger(__name__)

Polyline = list[Coordinate]


def edge_key(start: Coordinate, end: Coordinate) -> str:
    """Key for the directed edge ``start -> end``; never normalised, A->B differs from B->A."""
    return f"{start[0]:.6f},{start[1]:.6f}-{end[0]:.6f},{end[1]:.6f}"


def full_route_key(coordinates: Iterable[Coordinate]) -> str:
    """Key for a whole-route request, waypoints written as ``lon,lat`` like the provider URL."""
    return "full:" + ";".join(f"{lon},{lat}" for lat, lon in coordinates)


@dataclass(slots=True)
class CacheStats:
    entries: int
    size_kb: float
    hits: int
    misses: int

    @property
    def hit_rate(self) -> float:
        lookups = self.hits + self.misses
        return self.hits / lookups if lookups else 0.0


class GeometryCache:
    """In-memory geometry map mirrored to a durable key-value store under one key."""

    def __init__(self, store: KeyValueStore, storage_key: Optional[str] = None) -> None:
        self.store = store
        self.storage_key = storage_key or settings.cache_storage_key
        self._entries: dict[str, Polyline] = {}
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def get(self, key: str) -> Optional[Polyline]:
        path = self._entries.get(key)
        if path is None:
            self.misses += 1
            return None
        self.hits += 1
        logger.debug(f"Cache hit for {key}")
        return list(path)

    def set(self, key: str, path: Sequence[Coordinate]) -> None:
        self._entries[key] = [(float(lat), float(lon)) for lat, lon in path]

    def serialize(self) -> str:
        return json.dumps([[key, [list(point) for point in path]] for key, path in self._entries.items()])

    def load(self) -> int:
        """Replace the in-memory map with the persisted entries; corrupt payloads reset to empty."""
        try:
            raw = self.store.get_item(self.storage_key)
            entries: dict[str, Polyline] = {}
            if raw:
                for key, path in json.loads(raw):
                    if not isinstance(key, str):
                        raise ValueError(f"Cache key {key!r} is not a string.")
                    entries[key] = [(float(lat), float(lon)) for lat, lon in path]
            self._entries = entries
            logger.info(f"Loaded {len(entries)} cached routes from storage")
        except (OSError, TypeError, ValueError) as exc:
            logger.warning(f"Error loading cache from storage, starting empty: {exc}")
            self._entries = {}
        return len(self._entries)

    def save(self) -> bool:
        try:
            self.store.set_item(self.storage_key, self.serialize())
        except (OSError, TypeError, ValueError) as exc:
            logger.warning(f"Error saving cache to storage: {exc}")
            return False
        logger.info(f"Saved {len(self._entries)} routes to cache")
        return True

    def stats(self) -> CacheStats:
        # Browser storage counts UTF-16 code units, so estimate two bytes per character.
        size_kb = round(len(self.serialize()) * 2 / 1024, 1) if self._entries else 0.0
        return CacheStats(entries=len(self._entries), size_kb=size_kb, hits=self.hits, misses=self.misses)

    def clear(self) -> None:
        self._entries.clear()
        self.hits = 0
        self.misses = 0
        try:
            self.store.remove_item(self.storage_key)
        except (OSError, ValueError) as exc:
            logger.warning(f"Error removing persisted cache: {exc}")
        logger.info("Routing cache cleared")
