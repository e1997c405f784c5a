"""Materialized menu views, one per ordering."""

from collections.abc import Mapping
from types import MappingProxyType

from loguru import logger

from server_list.core.infrastructure.logging import BusinessEvents
from server_list.modules.catalog.application.cache import CatalogCache
from server_list.modules.catalog.domain.entities import Ordering
from server_list.modules.menu.application.layout import MenuLayout
from server_list.modules.menu.application.materializer import PageMaterializer
from server_list.modules.menu.domain.models import MaterializedView
from server_list.modules.menu.domain.ports import MenuRenderer, Viewer


class ViewRegistry:
    """Rebuilds every ordering's view when the catalog cache updates.

    The mapping of views is replaced as a whole, so ``open`` always sees
    fully built views from a single rebuild.
    """

    def __init__(
        self,
        cache: CatalogCache,
        renderer: MenuRenderer,
        *,
        materializer: PageMaterializer | None = None,
        layout: MenuLayout | None = None,
    ) -> None:
        self._cache = cache
        self._renderer = renderer
        self._materializer = materializer or PageMaterializer()
        self._layout = layout or MenuLayout()
        self._views: Mapping[Ordering, MaterializedView] = self._build_all()

    def bind(self) -> None:
        """Subscribe to cache updates."""
        self._cache.on_update(self.rebuild)

    def rebuild(self) -> None:
        views = self._build_all()
        self._views = views
        for ordering, view in views.items():
            BusinessEvents.views_rebuilt(
                ordering=ordering.value,
                entry_count=len(view.entries),
                page_count=view.page_count,
            )
        logger.debug("Server list views rebuilt")

    def view(self, ordering: Ordering) -> MaterializedView:
        return self._views[ordering]

    def open(
        self,
        viewer: Viewer,
        ordering: Ordering = Ordering.BY_POPULATION_DESC,
        page: int = 1,
    ) -> None:
        """Open the current view of ``ordering`` for ``viewer``."""
        view = self._views[ordering]
        self._renderer.open(viewer, view, view.page(page).number)

    def _build_all(self) -> Mapping[Ordering, MaterializedView]:
        return MappingProxyType(
            {
                ordering: self._layout.build(
                    ordering,
                    self._materializer.materialize(self._cache.current(ordering)),
                )
                for ordering in Ordering
            }
        )
