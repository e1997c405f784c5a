"""HTTP client for the remote server catalog."""

from __future__ import annotations

import json
from typing import Any

import httpx
from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from server_list.core.config import settings
from server_list.modules.catalog.domain.entities import Entry, Ordering
from server_list.modules.catalog.domain.exceptions import FetchError

SERVER_LIST_PATH = "/api/get_server_list"

_entries_adapter = TypeAdapter(list[Entry])


class HttpCatalogClient:
    """Fetch server lists from ``GET <base_url>/api/get_server_list``."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        timeout_sec: float | None = None,
        user_agent: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.CATALOG_URL).rstrip("/")
        self.timeout_sec = (
            settings.CATALOG_FETCH_TIMEOUT_SEC if timeout_sec is None else timeout_sec
        )
        self.user_agent = settings.CATALOG_USER_AGENT if user_agent is None else user_agent
        self._transport = transport

    async def fetch(self, ordering: Ordering) -> list[Entry]:
        """Fetch one ordering of the catalog.

        Raises:
            FetchError: on transport errors, non-2xx status or an invalid payload.
        """
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout_sec,
                transport=self._transport,
            ) as client:
                response = await client.get(
                    SERVER_LIST_PATH,
                    params={"ordering": ordering.to_query()},
                    headers={
                        "User-Agent": self.user_agent,
                        "Accept": "application/json",
                    },
                )
        except httpx.HTTPError as exc:
            raise FetchError(ordering, f"{type(exc).__name__}: {exc}") from exc

        if not response.is_success:
            raise FetchError(ordering, f"HTTP {response.status_code}: {response.text}")

        try:
            payload = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise FetchError(ordering, f"invalid JSON: {exc}") from exc

        return self._parse_entries(ordering, payload)

    @staticmethod
    def _parse_entries(ordering: Ordering, payload: Any) -> list[Entry]:
        if not isinstance(payload, list):
            raise FetchError(ordering, "server list payload must be a JSON array")
        try:
            return _entries_adapter.validate_python(payload)
        except PydanticValidationError as exc:
            raise FetchError(
                ordering, f"invalid server entry: {exc.error_count()} error(s)"
            ) from exc
