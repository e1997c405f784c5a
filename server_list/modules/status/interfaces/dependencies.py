"""Status module dependencies."""

from fastapi import Request

from server_list.modules.status.application.service import StatusService


def get_status_service(request: Request) -> StatusService:
    return request.app.state.status_service
