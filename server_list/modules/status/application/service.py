"""Minecraft server status checker.

Every poll reads servers.toml, pings all servers concurrently and swaps in
two freshly sorted lists. A server that does not answer is listed as offline.
"""

import asyncio
from collections.abc import Awaitable, Callable, Mapping
from pathlib import Path
from types import MappingProxyType

from loguru import logger

from server_list.core.config import settings
from server_list.core.infrastructure.logging import BusinessEvents
from server_list.modules.catalog.domain.entities import Entry, Ordering
from server_list.modules.status.domain.entities import (
    MinecraftServerInfo,
    ServerConfig,
    ServersConfig,
)
from server_list.modules.status.domain.exceptions import (
    ServersConfigError,
    StatusQueryError,
    StatusServiceAlreadyStartedError,
)
from server_list.modules.status.infrastructure.minecraft import query_server_status
from server_list.modules.status.infrastructure.servers_file import load_servers_config

StatusQuery = Callable[[str, int | None], Awaitable[MinecraftServerInfo]]
ConfigLoader = Callable[[Path], ServersConfig]


class StatusService:
    """Keeps the current server lists for both orderings."""

    def __init__(
        self,
        *,
        servers_file: Path | None = None,
        poll_interval_sec: float | None = None,
        retry_delay_sec: float | None = None,
        query: StatusQuery = query_server_status,
        load_config: ConfigLoader = load_servers_config,
    ) -> None:
        self.servers_file = settings.SERVERS_FILE if servers_file is None else servers_file
        self.poll_interval_sec = (
            settings.STATUS_POLL_INTERVAL_SEC
            if poll_interval_sec is None
            else poll_interval_sec
        )
        self.retry_delay_sec = (
            settings.STATUS_RETRY_DELAY_SEC if retry_delay_sec is None else retry_delay_sec
        )
        self._query = query
        self._load_config = load_config
        self._lists: Mapping[Ordering, tuple[Entry, ...]] = MappingProxyType(
            {ordering: () for ordering in Ordering}
        )
        self._task: asyncio.Task[None] | None = None
        self._stop_event: asyncio.Event | None = None

    def server_list(self, ordering: Ordering) -> tuple[Entry, ...]:
        return self._lists[ordering]

    async def poll_once(self) -> bool:
        """Refresh both lists once.

        Returns:
            False if the servers file could not be loaded (lists are kept).
        """
        logger.info("Getting server status...")
        try:
            config = self._load_config(self.servers_file)
        except ServersConfigError as e:
            logger.warning(f"{e.message}; retry in {self.retry_delay_sec} seconds")
            BusinessEvents.servers_config_invalid(path=e.path, error=e.reason)
            return False

        entries = await asyncio.gather(
            *(self._check_server(server) for server in config.servers)
        )

        # 人数少的在前（稳定排序），人数多的顺序是其完全反转
        ascending = sorted(entries, key=lambda entry: entry.players_online)
        descending = list(reversed(ascending))
        self._lists = MappingProxyType(
            {
                Ordering.BY_POPULATION_ASC: tuple(ascending),
                Ordering.BY_POPULATION_DESC: tuple(descending),
            }
        )

        online = sum(1 for entry in entries if entry.is_online)
        BusinessEvents.server_status_polled(total=len(entries), online=online)
        logger.info("Getting status is completed!")
        return True

    async def _check_server(self, server: ServerConfig) -> Entry:
        try:
            info = await self._query(server.ip, server.port)
        except StatusQueryError as e:
            logger.debug(f"{server.name} is offline: {e.message}")
            return _offline_entry(server)
        except Exception:
            logger.exception(f"Unexpected error while checking {server.name}")
            return _offline_entry(server)
        return Entry(
            ip=server.ip,
            port=info.port_effective,
            icon=server.icon,
            name=server.name,
            description=server.description,
            is_online=True,
            version_name=info.version_name,
            players_online=max(0, info.players_online),
            players_max=max(0, info.players_max),
        )

    def start(self) -> asyncio.Task[None]:
        if self._task is not None:
            raise StatusServiceAlreadyStartedError()
        self._stop_event = asyncio.Event()
        self._task = asyncio.create_task(self._run(), name="status-poll")
        return self._task

    async def stop(self) -> None:
        if self._task is None or self._stop_event is None:
            return
        self._stop_event.set()
        await self._task

    async def _run(self) -> None:
        assert self._stop_event is not None
        while not self._stop_event.is_set():
            try:
                ok = await self.poll_once()
            except Exception:
                logger.exception("Status poll failed")
                ok = False
            delay = self.poll_interval_sec if ok else self.retry_delay_sec
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=delay)
            except TimeoutError:
                continue


def _offline_entry(server: ServerConfig) -> Entry:
    return Entry(
        ip=server.ip,
        port=server.effective_port,
        icon=server.icon,
        name=server.name,
        description=server.description,
        is_online=False,
        version_name="",
        players_online=0,
        players_max=0,
    )
