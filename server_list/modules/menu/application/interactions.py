"""Player interactions with the server list: signs and menu clicks."""

from collections.abc import Sequence

from loguru import logger

from server_list.core.infrastructure.logging import BusinessEvents
from server_list.modules.catalog.domain.entities import Ordering
from server_list.modules.menu.application.view_registry import ViewRegistry
from server_list.modules.menu.domain.models import (
    ChangePageAction,
    CloseMenuAction,
    MenuAction,
    NoAction,
    SwitchOrderingAction,
    TransferAction,
)
from server_list.modules.menu.domain.ports import Viewer

SERVER_LIST_SIGN_MARKER = "[ Server List ]"
SIGN_MARKER_LINE = 2


def is_server_list_sign(
    front_lines: Sequence[str], back_lines: Sequence[str] = ()
) -> bool:
    """Whether either side of a sign carries the marker on its third line."""
    return any(
        len(lines) > SIGN_MARKER_LINE
        and lines[SIGN_MARKER_LINE] == SERVER_LIST_SIGN_MARKER
        for lines in (front_lines, back_lines)
    )


class MenuInteractionHandler:
    def __init__(self, views: ViewRegistry) -> None:
        self._views = views

    def on_sign_right_click(
        self,
        viewer: Viewer,
        front_lines: Sequence[str],
        back_lines: Sequence[str] = (),
    ) -> bool:
        """Open the most-players-first view when a marked sign is clicked."""
        if not is_server_list_sign(front_lines, back_lines):
            return False
        self._views.open(viewer, Ordering.BY_POPULATION_DESC)
        return True

    def on_button_click(
        self, viewer: Viewer, ordering: Ordering, action: MenuAction
    ) -> None:
        match action:
            case TransferAction(ip=ip, port=port):
                logger.info(f"Transferring {viewer.name} to {ip}:{port}")
                viewer.transfer(ip, port)
                BusinessEvents.player_transferred(viewer=viewer.name, ip=ip, port=port)
            case SwitchOrderingAction(target=target):
                viewer.play_click_sound()
                viewer.close_menu()
                self._views.open(viewer, target)
            case ChangePageAction(page=page):
                self._views.open(viewer, ordering, page)
            case CloseMenuAction():
                viewer.close_menu()
            case NoAction():
                pass
