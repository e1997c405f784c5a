"""Server list wiring for a game host.

Usage:
    plugin = ServerListPlugin(renderer)
    await plugin.enable()
    ...
    plugin.interactions.on_sign_right_click(player, front_lines, back_lines)
    ...
    await plugin.disable()
"""

from loguru import logger

from server_list.core.config import Settings, settings
from server_list.modules.catalog.application.cache import CatalogCache
from server_list.modules.catalog.domain.client import CatalogClient
from server_list.modules.catalog.infrastructure.http_client import HttpCatalogClient
from server_list.modules.menu.application.interactions import MenuInteractionHandler
from server_list.modules.menu.application.view_registry import ViewRegistry
from server_list.modules.menu.domain.ports import MenuRenderer


class ServerListPlugin:
    """Owns the catalog cache, the views and the interaction handler."""

    def __init__(
        self,
        renderer: MenuRenderer,
        *,
        client: CatalogClient | None = None,
        config: Settings = settings,
    ) -> None:
        self.config = config
        self.client = client or HttpCatalogClient(
            config.CATALOG_URL,
            timeout_sec=config.CATALOG_FETCH_TIMEOUT_SEC,
            user_agent=config.CATALOG_USER_AGENT,
        )
        self.cache = CatalogCache(fetch_timeout_sec=config.CATALOG_FETCH_TIMEOUT_SEC)
        self.views = ViewRegistry(self.cache, renderer)
        self.interactions = MenuInteractionHandler(self.views)

    async def enable(self) -> None:
        # Views must be subscribed before the first refresh cycle runs.
        self.views.bind()
        self.cache.start(self.client, self.config.CATALOG_REFRESH_INTERVAL_SEC)
        logger.info(f"Server list enabled (catalog: {self.config.CATALOG_URL})")

    async def disable(self) -> None:
        await self.cache.stop()
        logger.info("Server list disabled")
