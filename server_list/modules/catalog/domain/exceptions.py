"""Catalog domain exceptions."""

from fastapi import status

from server_list.core.domain.exceptions import DomainException
from server_list.modules.catalog.domain.entities import Ordering


class FetchError(DomainException):
    """Raised when one ordering of the catalog cannot be fetched."""

    http_status_code = status.HTTP_502_BAD_GATEWAY
    error_code = "CATALOG_FETCH_FAILED"

    def __init__(self, ordering: Ordering, reason: str):
        self.ordering = ordering
        self.reason = reason
        super().__init__(f"Failed to fetch {ordering.value} server list: {reason}")


class CatalogCacheAlreadyStartedError(DomainException):
    """Raised when the refresh loop is started twice."""

    http_status_code = status.HTTP_409_CONFLICT
    error_code = "ALREADY_STARTED"

    def __init__(self) -> None:
        super().__init__("Catalog refresh loop has already been started")
