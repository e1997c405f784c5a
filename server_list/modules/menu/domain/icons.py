"""Display icons available to menu entries.

The known set is the game's item registry (``minecraft_items.json``);
anything outside it is shown with the fallback icon.
"""

import json
from pathlib import Path

FALLBACK_ICON = "grass_block"
ITEMS_FILE = Path(__file__).with_name("minecraft_items.json")


def load_item_names(path: Path = ITEMS_FILE) -> frozenset[str]:
    """Load the item registry, a JSON array of lower-case item ids."""
    names = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(names, list) or not all(isinstance(n, str) for n in names):
        raise ValueError(f"{path} must be a JSON array of strings")
    return frozenset(names)


KNOWN_ICONS: frozenset[str] = load_item_names()


class IconCatalog:
    """Maps free-form icon identifiers onto the known icon set."""

    def __init__(
        self,
        known: frozenset[str] = KNOWN_ICONS,
        fallback: str = FALLBACK_ICON,
    ) -> None:
        self._known = frozenset(icon.lower() for icon in known)
        self.fallback = fallback

    def resolve(self, raw: str) -> str:
        """Return the icon for ``raw`` (case-insensitive) or the fallback."""
        key = raw.lower()
        if key in self._known:
            return key
        return self.fallback

    def __contains__(self, raw: object) -> bool:
        return isinstance(raw, str) and raw.lower() in self._known
