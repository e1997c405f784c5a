"""
pytest 配置和共享 fixtures。

测试分层：
- unit/: 单元测试（不依赖外部服务）

使用方法：
    # 运行所有测试
    pytest

    # 只运行单元测试
    pytest tests/unit/
"""

from collections.abc import AsyncGenerator, Callable
from pathlib import Path
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from server_list.modules.catalog.domain.entities import Entry, Ordering
from server_list.modules.catalog.domain.exceptions import FetchError
from server_list.modules.menu.domain.models import MaterializedView
from server_list.modules.status.application.service import StatusService
from server_list.modules.status.domain.entities import ServersConfig

@pytest.fixture
def anyio_backend() -> str:
    """代码基于 asyncio 实现，仅在 asyncio 后端上运行异步测试。"""
    return "asyncio"


# ============================================
# 领域对象 Fixtures
# ============================================


def build_entry(**overrides: Any) -> Entry:
    """生成测试用 Entry。"""
    data: dict[str, Any] = {
        "name": "Alpha",
        "players_online": 10,
        "players_max": 20,
        "icon": "grass_block",
        "description": "Line1\nLine2",
        "version_name": "1.20",
        "ip": "1.2.3.4",
        "port": 25565,
        "is_online": True,
    }
    data.update(overrides)
    return Entry(**data)


@pytest.fixture
def make_entry() -> Callable[..., Entry]:
    return build_entry


@pytest.fixture
def sample_entry_payload() -> dict[str, Any]:
    """远程目录返回的单条 JSON 数据。"""
    return {
        "players_online": 10,
        "version_name": "1.20",
        "description": "Line1\nLine2",
        "icon": "grass_block",
        "is_online": True,
        "ip": "1.2.3.4",
        "port": 25565,
        "name": "Alpha",
        "players_max": 20,
    }


# ============================================
# Fake 协作者
# ============================================


class FakeCatalogClient:
    """Scripted CatalogClient.

    Each ordering gets a queue of responses; a response is either a list of
    entries or an exception instance to raise.
    """

    def __init__(self) -> None:
        self.responses: dict[Ordering, list[list[Entry] | Exception]] = {
            ordering: [] for ordering in Ordering
        }
        self.calls: list[Ordering] = []

    def queue(self, ordering: Ordering, *responses: list[Entry] | Exception) -> None:
        self.responses[ordering].extend(responses)

    async def fetch(self, ordering: Ordering) -> list[Entry]:
        self.calls.append(ordering)
        queue = self.responses[ordering]
        if not queue:
            raise FetchError(ordering, "no scripted response")
        response = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(response, Exception):
            raise response
        return list(response)


@pytest.fixture
def fake_client() -> FakeCatalogClient:
    return FakeCatalogClient()


class FakeViewer:
    """记录所有交互的玩家。"""

    def __init__(self, name: str = "Steve") -> None:
        self.name = name
        self.transfers: list[tuple[str, int]] = []
        self.events: list[str] = []

    def transfer(self, host: str, port: int) -> None:
        self.transfers.append((host, port))
        self.events.append("transfer")

    def close_menu(self) -> None:
        self.events.append("close")

    def play_click_sound(self) -> None:
        self.events.append("sound")


@pytest.fixture
def viewer() -> FakeViewer:
    return FakeViewer()


class RecordingRenderer:
    """MenuRenderer that remembers what it was asked to open."""

    def __init__(self) -> None:
        self.opened: list[tuple[Any, MaterializedView, int]] = []

    def open(self, viewer: Any, view: MaterializedView, page: int = 1) -> None:
        self.opened.append((viewer, view, page))


@pytest.fixture
def renderer() -> RecordingRenderer:
    return RecordingRenderer()


# ============================================
# HTTP Client Fixtures
# ============================================


@pytest.fixture
def status_service() -> StatusService:
    """未启动后台循环的 StatusService（空服务器列表）。"""
    return StatusService(
        servers_file=Path("servers.toml"),
        poll_interval_sec=3600,
        retry_delay_sec=3600,
        load_config=lambda path: ServersConfig(),
    )


@pytest.fixture
async def async_client(status_service) -> AsyncGenerator[AsyncClient, None]:
    """异步 HTTP 客户端（用于 API 测试）。"""
    from main import app
    from server_list.modules.status.interfaces.dependencies import get_status_service

    # 覆盖依赖
    app.dependency_overrides[get_status_service] = lambda: status_service

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    # 清理依赖覆盖
    app.dependency_overrides.clear()
