"""Owned in-memory collection of monitored sources."""

import asyncio
import logging
from uuid import uuid4

from orderwatch.models import MonitoredSource

logger = logging.getLogger(__name__)

_UNSET = object()


class SourceNotFoundError(KeyError):
    """Raised when a source id is not in the store."""

    def __init__(self, source_id: str):
        self.source_id = source_id
        super().__init__(f"Source not found: {source_id}")


class SourceStore:
    """
    Map of source id to MonitoredSource for the lifetime of the process.

    Every source gets its own asyncio.Lock; holders of the lock are the only
    ones allowed to run detection against that source.
    """

    def __init__(self):
        self._sources: dict[str, MonitoredSource] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def __len__(self) -> int:
        return len(self._sources)

    def __contains__(self, source_id: str) -> bool:
        return source_id in self._sources

    def add(
        self,
        name: str,
        url: str,
        faction: str | None = None,
        enabled: bool = True,
    ) -> MonitoredSource:
        """Create and register a new source."""
        source = MonitoredSource(
            id=uuid4().hex,
            name=name,
            url=url,
            faction=faction,
            enabled=enabled,
        )
        self._sources[source.id] = source
        logger.info(f"Added source {source.name} ({source.id})")
        return source

    def get(self, source_id: str) -> MonitoredSource:
        try:
            return self._sources[source_id]
        except KeyError:
            raise SourceNotFoundError(source_id) from None

    def list(self, enabled_only: bool = False) -> list[MonitoredSource]:
        """Return sources in insertion order."""
        sources = list(self._sources.values())
        if enabled_only:
            sources = [s for s in sources if s.enabled]
        return sources

    def update(
        self,
        source_id: str,
        name: str | None = None,
        url: str | None = None,
        faction: str | None = _UNSET,
        enabled: bool | None = None,
    ) -> MonitoredSource:
        """
        Apply management edits to a source.

        Passing faction=None clears the tag; leaving it out keeps it.

        Changing the URL drops the baseline: fingerprints of two different
        pages are not comparable.
        """
        source = self.get(source_id)

        if name is not None:
            source.name = name
        if faction is not _UNSET:
            source.faction = faction
        if enabled is not None:
            source.enabled = enabled
        if url is not None and url != source.url:
            source.url = url
            source.reset_baseline()
            logger.info(f"URL changed for {source.name}, baseline reset")

        return source

    def delete(self, source_id: str) -> None:
        source = self._sources.pop(source_id, None)
        if source is None:
            raise SourceNotFoundError(source_id)
        self._locks.pop(source_id, None)
        logger.info(f"Deleted source {source.name} ({source_id})")

    def lock_for(self, source_id: str) -> asyncio.Lock:
        """Get the lock serializing checks of one source."""
        lock = self._locks.get(source_id)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[source_id] = lock
        return lock
