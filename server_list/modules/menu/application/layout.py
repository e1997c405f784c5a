"""Paginated menu frame.

The frame is 6 rows of 9 slots. Columns 0-6 carry server entries, column 7
is a filler pane and column 8 holds the controls::

    V V V V V V V G N
    V V V V V V V G I
    V V V V V V V G P
    V V V V V V V G G
    V V V V V V V G R
    V V V V V V V G C
"""

from collections.abc import Sequence

from server_list.modules.catalog.domain.entities import Ordering
from server_list.modules.menu.domain.models import (
    ChangePageAction,
    CloseMenuAction,
    MaterializedView,
    MenuPage,
    NoAction,
    SwitchOrderingAction,
    ViewEntryDescriptor,
)

ROWS = 6
COLUMNS = 9
CONTENT_COLUMNS = 7
FILLER_COLUMN = 7
CONTROL_COLUMN = 8

FILLER = ViewEntryDescriptor(icon="gray_stained_glass_pane", title=" ")

_TOGGLE_LABELS = {
    Ordering.BY_POPULATION_DESC: "Fewest players first",
    Ordering.BY_POPULATION_ASC: "Most players first",
}


def _slot(row: int, column: int) -> int:
    return row * COLUMNS + column


class MenuLayout:
    """Lays descriptors out on pages of the server list menu."""

    title_template = "Server List [{current}/{total}]"

    def __init__(self, rows: int = ROWS) -> None:
        self.rows = rows
        self.content_slots: tuple[int, ...] = tuple(
            _slot(row, column)
            for row in range(rows)
            for column in range(CONTENT_COLUMNS)
        )

    @property
    def page_size(self) -> int:
        return len(self.content_slots)

    def build(
        self, ordering: Ordering, entries: Sequence[ViewEntryDescriptor]
    ) -> MaterializedView:
        entries = tuple(entries)
        size = self.page_size
        chunks = [entries[i : i + size] for i in range(0, len(entries), size)] or [()]
        total = len(chunks)
        pages = tuple(
            self._page(ordering, number, total, chunk)
            for number, chunk in enumerate(chunks, start=1)
        )
        return MaterializedView(
            ordering=ordering, entries=entries, pages=pages, page_size=size
        )

    def _page(
        self,
        ordering: Ordering,
        number: int,
        total: int,
        chunk: Sequence[ViewEntryDescriptor],
    ) -> MenuPage:
        slots: list[tuple[int, ViewEntryDescriptor]] = list(
            zip(self.content_slots, chunk, strict=False)
        )
        slots.extend((_slot(row, FILLER_COLUMN), FILLER) for row in range(self.rows))
        slots.extend(self._controls(ordering, number, total))
        slots.sort(key=lambda item: item[0])
        return MenuPage(
            number=number,
            page_count=total,
            title=self.title_template.format(current=number, total=total),
            slots=tuple(slots),
        )

    def _controls(
        self, ordering: Ordering, number: int, total: int
    ) -> list[tuple[int, ViewEntryDescriptor]]:
        next_page = min(number + 1, total)
        previous_page = max(number - 1, 1)
        target = (
            Ordering.BY_POPULATION_ASC
            if ordering is Ordering.BY_POPULATION_DESC
            else Ordering.BY_POPULATION_DESC
        )
        buttons = [
            ViewEntryDescriptor(
                icon="arrow",
                title=f"Next [{next_page}/{total}]",
                action=ChangePageAction(next_page),
            ),
            ViewEntryDescriptor(
                icon="name_tag",
                title=f"Current [{number}/{total}]",
                action=NoAction(),
            ),
            ViewEntryDescriptor(
                icon="arrow",
                title=f"Prev [{previous_page}/{total}]",
                action=ChangePageAction(previous_page),
            ),
            FILLER,
            ViewEntryDescriptor(
                icon="lever",
                title=_TOGGLE_LABELS[ordering],
                action=SwitchOrderingAction(target),
            ),
            ViewEntryDescriptor(icon="oak_door", title="Close", action=CloseMenuAction()),
        ]
        return [
            (_slot(row, CONTROL_COLUMN), button)
            for row, button in enumerate(buttons[: self.rows])
        ]
