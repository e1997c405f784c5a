"""Server list API routes."""

from fastapi import APIRouter, Depends, Query, Response
from loguru import logger

from server_list.core.domain.exceptions import ValidationError
from server_list.modules.catalog.domain.entities import Ordering
from server_list.modules.status.application.service import StatusService
from server_list.modules.status.interfaces.dependencies import get_status_service
from server_list.modules.status.interfaces.schemas import ServerResponse

router = APIRouter(prefix="/api", tags=["servers"])


@router.get(
    "/get_server_list",
    response_model=list[ServerResponse],
    summary="Get the server list",
    description='Ordering is a JSON string: `"Player"` or `"PlayerReverse"`',
)
async def get_server_list(
    ordering: str | None = Query(None, description='JSON string, e.g. "Player"'),
    service: StatusService = Depends(get_status_service),
) -> list[ServerResponse] | Response:
    try:
        parsed = Ordering.from_query(ordering)
    except ValidationError as e:
        logger.info(f"Rejected get_server_list: {e.message}")
        return Response(status_code=e.http_status_code)

    logger.info(f"Received get_server_list ordering={parsed.value}")
    return [
        ServerResponse.model_validate(entry, from_attributes=True)
        for entry in service.server_list(parsed)
    ]
