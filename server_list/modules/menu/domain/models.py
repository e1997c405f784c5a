"""Menu domain models.

Everything here is immutable: a refresh builds new values instead of
editing the ones a viewer may currently be looking at.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime

from server_list.modules.catalog.domain.entities import Ordering


@dataclass(frozen=True)
class TransferAction:
    """Send the clicking player to another server."""

    ip: str
    port: int


@dataclass(frozen=True)
class SwitchOrderingAction:
    target: Ordering


@dataclass(frozen=True)
class ChangePageAction:
    page: int


@dataclass(frozen=True)
class CloseMenuAction:
    pass


@dataclass(frozen=True)
class NoAction:
    """Decorative slot."""


MenuAction = (
    TransferAction | SwitchOrderingAction | ChangePageAction | CloseMenuAction | NoAction
)


@dataclass(frozen=True)
class ViewEntryDescriptor:
    """Render-ready description of one menu button."""

    icon: str
    title: str
    lore: tuple[str, ...] = ()
    count: int = 1
    action: MenuAction = NoAction()


@dataclass(frozen=True)
class MenuPage:
    """One page of a menu, keyed by inventory slot."""

    number: int
    page_count: int
    title: str
    slots: tuple[tuple[int, ViewEntryDescriptor], ...]

    def slot(self, index: int) -> ViewEntryDescriptor | None:
        for slot_index, descriptor in self.slots:
            if slot_index == index:
                return descriptor
        return None


@dataclass(frozen=True)
class MaterializedView:
    """Paginated menu built from one ordering's snapshot."""

    ordering: Ordering
    entries: tuple[ViewEntryDescriptor, ...]
    pages: tuple[MenuPage, ...]
    page_size: int
    built_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def page(self, number: int) -> MenuPage:
        """Return page ``number`` (1-based), clamped to the available pages."""
        index = min(max(number, 1), len(self.pages)) - 1
        return self.pages[index]
