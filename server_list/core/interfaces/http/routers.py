"""API router configuration."""

from fastapi import APIRouter

from server_list.modules.status.interfaces.router import router as status_router

api_router = APIRouter()

# Server list
api_router.include_router(status_router)
