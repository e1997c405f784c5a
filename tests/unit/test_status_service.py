"""StatusService 单元测试（不访问真实 Minecraft 服务器）。"""

import asyncio
from pathlib import Path

import pytest

from server_list.modules.catalog.domain.entities import Ordering
from server_list.modules.status.application.service import StatusService
from server_list.modules.status.domain.entities import (
    DEFAULT_MINECRAFT_PORT,
    MinecraftServerInfo,
    ServersConfig,
)
from server_list.modules.status.domain.exceptions import (
    ServersConfigError,
    StatusQueryError,
    StatusServiceAlreadyStartedError,
)
from server_list.modules.status.infrastructure.servers_file import load_servers_config

pytestmark = pytest.mark.anyio

DESC = Ordering.BY_POPULATION_DESC
ASC = Ordering.BY_POPULATION_ASC

SERVERS_TOML = """
[[servers]]
ip = "lobby.example.net"
icon = "compass"
name = "Lobby"
description = "Welcome"

[[servers]]
ip = "survival.example.net"
port = 25566
icon = "diamond_pickaxe"
name = "Survival"

[[servers]]
ip = "creative.example.net"
icon = "grass_block"
name = "Creative"

[[servers]]
ip = "down.example.net"
port = 25570
icon = "barrier"
name = "Down"
"""


def _info(host: str, port: int, online: int, max_players: int = 100) -> MinecraftServerInfo:
    return MinecraftServerInfo(
        host=host,
        port_effective=port,
        resolved=f"10.0.0.1:{port}",
        connect_ms=1,
        rtt_ms=1,
        version_name="Paper 1.20.4",
        version_protocol=765,
        players_online=online,
        players_max=max_players,
        motd="hello",
    )


class FakeQuery:
    def __init__(self, players: dict[str, int]) -> None:
        self.players = players
        self.calls: list[tuple[str, int | None]] = []

    async def __call__(self, host: str, port: int | None = None) -> MinecraftServerInfo:
        self.calls.append((host, port))
        if host not in self.players:
            raise StatusQueryError(host, "connection refused")
        return _info(host, port or DEFAULT_MINECRAFT_PORT, self.players[host])


def _service(query, config: ServersConfig | None = None, **kwargs) -> StatusService:
    config = config or ServersConfig.from_toml(SERVERS_TOML)
    return StatusService(
        servers_file=Path("servers.toml"),
        poll_interval_sec=3600,
        retry_delay_sec=3600,
        query=query,
        load_config=lambda path: config,
        **kwargs,
    )


# ============================================
# 单次轮询
# ============================================


class TestPollOnce:
    async def test_lists_are_empty_before_first_poll(self):
        service = _service(FakeQuery({}))
        assert service.server_list(DESC) == ()
        assert service.server_list(ASC) == ()

    async def test_sorted_by_players(self):
        query = FakeQuery(
            {
                "lobby.example.net": 12,
                "survival.example.net": 40,
                "creative.example.net": 3,
            }
        )
        service = _service(query)

        assert await service.poll_once() is True

        assert [e.name for e in service.server_list(ASC)] == [
            "Down",
            "Creative",
            "Lobby",
            "Survival",
        ]
        assert [e.name for e in service.server_list(DESC)] == [
            "Survival",
            "Lobby",
            "Creative",
            "Down",
        ]

    async def test_descending_is_exact_reverse_of_ascending_with_ties(self):
        query = FakeQuery(
            {
                "lobby.example.net": 5,
                "survival.example.net": 5,
                "creative.example.net": 5,
                "down.example.net": 5,
            }
        )
        service = _service(query)

        await service.poll_once()

        ascending = service.server_list(ASC)
        assert [e.name for e in ascending] == ["Lobby", "Survival", "Creative", "Down"]
        assert service.server_list(DESC) == tuple(reversed(ascending))

    async def test_online_entry_uses_queried_status(self):
        service = _service(FakeQuery({"survival.example.net": 7}))

        await service.poll_once()

        survival = next(e for e in service.server_list(ASC) if e.name == "Survival")
        assert survival.is_online is True
        assert survival.port == 25566
        assert survival.players_online == 7
        assert survival.players_max == 100
        assert survival.version_name == "Paper 1.20.4"
        assert survival.icon == "diamond_pickaxe"

    async def test_unreachable_server_is_listed_offline(self):
        service = _service(FakeQuery({}))

        await service.poll_once()

        entries = {e.name: e for e in service.server_list(ASC)}
        assert len(entries) == 4
        down = entries["Down"]
        assert down.is_online is False
        assert down.port == 25570
        assert down.version_name == ""
        assert (down.players_online, down.players_max) == (0, 0)
        assert entries["Lobby"].port == DEFAULT_MINECRAFT_PORT
        assert entries["Lobby"].description == "Welcome"

    async def test_negative_player_counts_are_clamped(self):
        async def query(host: str, port: int | None = None) -> MinecraftServerInfo:
            return _info(host, port or DEFAULT_MINECRAFT_PORT, -3, -1)

        service = _service(query)
        await service.poll_once()

        assert all(e.players_online == 0 for e in service.server_list(DESC))
        assert all(e.players_max == 0 for e in service.server_list(DESC))

    async def test_servers_are_pinged_with_configured_ports(self):
        query = FakeQuery({})
        service = _service(query)

        await service.poll_once()

        assert sorted(query.calls) == [
            ("creative.example.net", None),
            ("down.example.net", 25570),
            ("lobby.example.net", None),
            ("survival.example.net", 25566),
        ]

    async def test_config_error_keeps_previous_lists(self):
        query = FakeQuery({"lobby.example.net": 1})
        good = ServersConfig.from_toml(SERVERS_TOML)
        results: list[ServersConfig | Exception] = [good, ServersConfigError("x", "bad")]

        def load(path: Path) -> ServersConfig:
            result = results.pop(0)
            if isinstance(result, Exception):
                raise result
            return result

        service = StatusService(
            servers_file=Path("servers.toml"),
            poll_interval_sec=3600,
            retry_delay_sec=3600,
            query=query,
            load_config=load,
        )

        assert await service.poll_once() is True
        before = service.server_list(DESC)
        assert await service.poll_once() is False
        assert service.server_list(DESC) == before
        assert len(before) == 4

    async def test_unencodable_host_is_listed_offline(self):
        """查询抛出非预期异常（如 IDNA 编码失败）时，该服务器视为离线。"""
        fake = FakeQuery({"lobby.example.net": 4, "survival.example.net": 9})

        async def query(host: str, port: int | None = None) -> MinecraftServerInfo:
            if host == "creative.example.net":
                raise UnicodeError("encoding with 'idna' codec failed (label too long)")
            return await fake(host, port)

        service = _service(query)

        assert await service.poll_once() is True

        entries = {e.name: e for e in service.server_list(DESC)}
        assert len(entries) == 4
        assert entries["Creative"].is_online is False
        assert entries["Creative"].port == DEFAULT_MINECRAFT_PORT
        assert entries["Survival"].is_online is True
        assert [e.name for e in service.server_list(DESC)][:2] == ["Survival", "Lobby"]

    def test_explicit_zero_settings_are_kept(self):
        service = StatusService(poll_interval_sec=0, retry_delay_sec=0)
        assert service.poll_interval_sec == 0
        assert service.retry_delay_sec == 0


# ============================================
# 后台循环
# ============================================


class TestLoop:
    async def test_start_polls_and_stop_ends(self):
        polled = asyncio.Event()

        async def query(host: str, port: int | None = None) -> MinecraftServerInfo:
            polled.set()
            return _info(host, port or DEFAULT_MINECRAFT_PORT, 1)

        service = _service(query)
        task = service.start()

        await asyncio.wait_for(polled.wait(), timeout=1)
        await asyncio.wait_for(service.stop(), timeout=1)

        assert task.done()

    async def test_loop_survives_unexpected_poll_error(self):
        calls = 0
        polled = asyncio.Event()
        config = ServersConfig.from_toml(SERVERS_TOML)

        def load(path: Path) -> ServersConfig:
            nonlocal calls
            calls += 1
            if calls == 1:
                raise RuntimeError("disk on fire")
            polled.set()
            return config

        service = StatusService(
            servers_file=Path("servers.toml"),
            poll_interval_sec=3600,
            retry_delay_sec=0.01,
            query=FakeQuery({}),
            load_config=load,
        )
        task = service.start()

        await asyncio.wait_for(polled.wait(), timeout=1)
        await asyncio.wait_for(service.stop(), timeout=1)

        assert calls >= 2
        assert task.exception() is None

    async def test_double_start_raises(self):
        service = _service(FakeQuery({}))
        service.start()
        try:
            with pytest.raises(StatusServiceAlreadyStartedError):
                service.start()
        finally:
            await service.stop()


# ============================================
# servers.toml 读取
# ============================================


class TestServersFile:
    def test_load_valid_file(self, tmp_path: Path):
        path = tmp_path / "servers.toml"
        path.write_text(SERVERS_TOML, encoding="utf-8")

        config = load_servers_config(path)

        assert [s.name for s in config.servers] == ["Lobby", "Survival", "Creative", "Down"]
        assert config.servers[0].port is None
        assert config.servers[0].effective_port == DEFAULT_MINECRAFT_PORT
        assert config.servers[1].effective_port == 25566

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ServersConfigError, match="file not found"):
            load_servers_config(tmp_path / "missing.toml")

    def test_invalid_toml(self, tmp_path: Path):
        path = tmp_path / "servers.toml"
        path.write_text("[[servers]\nip = ", encoding="utf-8")

        with pytest.raises(ServersConfigError, match="invalid TOML"):
            load_servers_config(path)

    def test_missing_required_field(self, tmp_path: Path):
        path = tmp_path / "servers.toml"
        path.write_text('[[servers]]\nip = "a.example.net"\nicon = "stone"\n', encoding="utf-8")

        with pytest.raises(ServersConfigError, match="validation error"):
            load_servers_config(path)

    def test_empty_file_has_no_servers(self, tmp_path: Path):
        path = tmp_path / "servers.toml"
        path.write_text("", encoding="utf-8")

        assert load_servers_config(path).servers == []
