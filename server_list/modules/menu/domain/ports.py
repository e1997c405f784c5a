"""Ports towards the host game environment."""

from typing import Protocol

from server_list.modules.menu.domain.models import MaterializedView


class Viewer(Protocol):
    """A player who can look at menus."""

    name: str

    def transfer(self, host: str, port: int) -> None: ...

    def close_menu(self) -> None: ...

    def play_click_sound(self) -> None: ...


class MenuRenderer(Protocol):
    """Host menu framework that draws a materialized view for a viewer."""

    def open(self, viewer: Viewer, view: MaterializedView, page: int = 1) -> None: ...
