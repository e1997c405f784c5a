"""Catalog cache with a background refresh loop.

Refresh cycle:
1. fetch BY_POPULATION_DESC, then BY_POPULATION_ASC (a failure keeps the old list)
2. swap in one new snapshot holding every ordering that succeeded
3. notify subscribers in registration order
4. wait for the interval or a stop request
"""

import asyncio
import threading

from loguru import logger

from server_list.core.config import settings
from server_list.core.infrastructure.logging import BusinessEvents
from server_list.modules.catalog.application.subscribers import (
    SubscriberRegistry,
    UpdateCallback,
)
from server_list.modules.catalog.domain.client import CatalogClient
from server_list.modules.catalog.domain.entities import (
    CatalogSnapshot,
    Entry,
    Ordering,
)
from server_list.modules.catalog.domain.exceptions import (
    CatalogCacheAlreadyStartedError,
    FetchError,
)


class CatalogCache:
    """Holds the latest catalog snapshot and keeps it fresh."""

    def __init__(
        self,
        *,
        fetch_timeout_sec: float | None = None,
        subscribers: SubscriberRegistry | None = None,
    ) -> None:
        self.fetch_timeout_sec = (
            settings.CATALOG_FETCH_TIMEOUT_SEC
            if fetch_timeout_sec is None
            else fetch_timeout_sec
        )
        self._subscribers = subscribers or SubscriberRegistry()
        self._snapshot = CatalogSnapshot()
        self._start_lock = threading.Lock()
        self._task: asyncio.Task[None] | None = None
        self._stop_event: asyncio.Event | None = None

    @property
    def snapshot(self) -> CatalogSnapshot:
        return self._snapshot

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def current(self, ordering: Ordering) -> tuple[Entry, ...]:
        """Latest entries for an ordering; empty until the first successful fetch."""
        return self._snapshot.for_ordering(ordering)

    def on_update(self, callback: UpdateCallback) -> None:
        """Register a callback invoked after every refresh cycle."""
        self._subscribers.add(callback)

    def start(
        self, client: CatalogClient, interval_sec: float | None = None
    ) -> asyncio.Task[None]:
        """Start the refresh loop on the running event loop.

        Raises:
            CatalogCacheAlreadyStartedError: if called more than once.
        """
        interval = (
            settings.CATALOG_REFRESH_INTERVAL_SEC if interval_sec is None else interval_sec
        )
        with self._start_lock:
            if self._task is not None:
                raise CatalogCacheAlreadyStartedError()
            self._stop_event = asyncio.Event()
            self._task = asyncio.create_task(
                self._run(client, interval), name="catalog-refresh"
            )
        logger.info(f"Catalog refresh loop started (interval={interval}s)")
        return self._task

    async def stop(self) -> None:
        """Ask the loop to exit and wait for it. A no-op if never started."""
        if self._task is None or self._stop_event is None:
            return
        self._stop_event.set()
        await self._task
        logger.info("Catalog refresh loop stopped")

    async def refresh_once(self, client: CatalogClient) -> CatalogSnapshot:
        """Run a single refresh cycle and return the resulting snapshot."""
        updates: dict[Ordering, tuple[Entry, ...]] = {}
        failed: list[str] = []

        for ordering in (Ordering.BY_POPULATION_DESC, Ordering.BY_POPULATION_ASC):
            try:
                entries = await self._fetch(client, ordering)
            except FetchError as e:
                logger.warning(f"Failed to get server list: {e.message}")
                BusinessEvents.catalog_fetch_failed(
                    ordering=ordering.value, error=e.reason
                )
                failed.append(ordering.value)
                continue
            updates[ordering] = tuple(entries)

        if updates:
            self._snapshot = self._snapshot.with_updates(updates)

        BusinessEvents.catalog_refreshed(
            updated=[ordering.value for ordering in updates],
            failed=failed,
        )
        self._subscribers.notify()
        return self._snapshot

    async def _fetch(self, client: CatalogClient, ordering: Ordering) -> list[Entry]:
        try:
            return await asyncio.wait_for(
                client.fetch(ordering), timeout=self.fetch_timeout_sec
            )
        except FetchError:
            raise
        except TimeoutError as e:
            raise FetchError(
                ordering, f"timed out after {self.fetch_timeout_sec}s"
            ) from e
        except Exception as e:
            raise FetchError(ordering, f"{type(e).__name__}: {e}") from e

    async def _run(self, client: CatalogClient, interval_sec: float) -> None:
        assert self._stop_event is not None
        while not self._stop_event.is_set():
            await self.refresh_once(client)
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=interval_sec)
            except TimeoutError:
                continue
