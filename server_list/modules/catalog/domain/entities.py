"""Catalog domain entities."""

import json
from collections.abc import Mapping
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from server_list.core.domain.exceptions import ValidationError


class Ordering(str, Enum):
    """Sort key of a server list.

    The value is the wire name used by the catalog API.
    """

    BY_POPULATION_DESC = "Player"  # most players first
    BY_POPULATION_ASC = "PlayerReverse"  # fewest players first

    def to_query(self) -> str:
        """Encode as the JSON string the catalog API expects (quotes included)."""
        return json.dumps(self.value)

    @classmethod
    def from_query(cls, raw: str | None) -> "Ordering":
        """Decode a JSON-encoded ordering query value."""
        if raw is None:
            raise ValidationError("Missing ordering")
        try:
            value = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ValidationError(f"Invalid ordering: {raw!r}") from exc
        if not isinstance(value, str):
            raise ValidationError(f"Invalid ordering: {raw!r}")
        try:
            return cls(value)
        except ValueError as exc:
            raise ValidationError(f"Unknown ordering: {value!r}") from exc


class Entry(BaseModel):
    """One server's catalog record."""

    model_config = ConfigDict(frozen=True)

    players_online: int = Field(..., ge=0, description="Players currently online")
    players_max: int = Field(..., ge=0, description="Player slots")
    version_name: str = Field(..., description="Reported version name")
    description: str = Field(..., description="Free text, may contain line breaks")
    icon: str = Field(..., description="Display icon identifier")
    is_online: bool = Field(..., description="Whether the last ping succeeded")
    ip: str = Field(..., description="Host to transfer players to")
    port: int = Field(..., ge=0, le=65535, description="Port to transfer players to")
    name: str = Field(..., description="Display name")


@dataclass(frozen=True)
class CatalogSnapshot:
    """Both orderings as captured by the refresh loop.

    Never mutated; every refresh produces a new snapshot.
    """

    by_population_desc: tuple[Entry, ...] = ()
    by_population_asc: tuple[Entry, ...] = ()
    refreshed_at: datetime | None = None

    def for_ordering(self, ordering: Ordering) -> tuple[Entry, ...]:
        if ordering is Ordering.BY_POPULATION_DESC:
            return self.by_population_desc
        return self.by_population_asc

    def with_updates(
        self, updates: Mapping[Ordering, tuple[Entry, ...]]
    ) -> "CatalogSnapshot":
        """Return a copy with the given orderings replaced."""
        changes: dict[str, object] = {"refreshed_at": datetime.now(UTC)}
        if Ordering.BY_POPULATION_DESC in updates:
            changes["by_population_desc"] = tuple(updates[Ordering.BY_POPULATION_DESC])
        if Ordering.BY_POPULATION_ASC in updates:
            changes["by_population_asc"] = tuple(updates[Ordering.BY_POPULATION_ASC])
        return replace(self, **changes)
