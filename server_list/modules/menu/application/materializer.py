"""Turn catalog entries into menu button descriptors.

Per entry:
- icon: ``entry.icon`` matched case-insensitively, otherwise the fallback icon
- title: ``"<name> [<online>/<max>]"``
- lore: ``"Version: <version>"``, a blank line, then each description line
- count: ``players_online`` clamped to ``[1, max_stack_size]``
- action: transfer to ``entry.ip:entry.port``

Output order always equals input order.
"""

from collections.abc import Sequence

from server_list.modules.catalog.domain.entities import Entry
from server_list.modules.menu.domain.icons import IconCatalog
from server_list.modules.menu.domain.models import TransferAction, ViewEntryDescriptor

MIN_STACK_SIZE = 1
MAX_STACK_SIZE = 127


class PageMaterializer:
    """Pure, deterministic entry -> descriptor transformation."""

    def __init__(
        self,
        icons: IconCatalog | None = None,
        max_stack_size: int = MAX_STACK_SIZE,
    ) -> None:
        self.icons = icons or IconCatalog()
        self.max_stack_size = max(MIN_STACK_SIZE, max_stack_size)

    def materialize(self, entries: Sequence[Entry]) -> tuple[ViewEntryDescriptor, ...]:
        return tuple(self.describe(entry) for entry in entries)

    def describe(self, entry: Entry) -> ViewEntryDescriptor:
        return ViewEntryDescriptor(
            icon=self.icons.resolve(entry.icon),
            title=format_title(entry),
            lore=format_lore(entry),
            count=self.stack_size(entry.players_online),
            action=TransferAction(ip=entry.ip, port=entry.port),
        )

    def stack_size(self, players_online: int) -> int:
        return min(max(MIN_STACK_SIZE, players_online), self.max_stack_size)


def format_title(entry: Entry) -> str:
    return f"{entry.name} [{entry.players_online}/{entry.players_max}]"


def format_lore(entry: Entry) -> tuple[str, ...]:
    lines = [f"Version: {entry.version_name}", ""]
    if entry.description:
        lines.extend(entry.description.replace("\r\n", "\n").split("\n"))
    return tuple(lines)


_default_materializer = PageMaterializer()


def materialize(entries: Sequence[Entry]) -> tuple[ViewEntryDescriptor, ...]:
    """Materialize with the default icon set and stack bounds."""
    return _default_materializer.materialize(entries)
