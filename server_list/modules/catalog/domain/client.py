"""Catalog client port."""

from typing import Protocol

from server_list.modules.catalog.domain.entities import Entry, Ordering


class CatalogClient(Protocol):
    """Port for fetching one ordering of the remote server catalog.

    Implementations raise FetchError on any transport, status or payload problem.
    """

    async def fetch(self, ordering: Ordering) -> list[Entry]: ...
