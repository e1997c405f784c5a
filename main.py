"""Minecraft server list backend - status checker and catalog API."""

from fastapi import FastAPI
from fastapi.concurrency import asynccontextmanager
from loguru import logger

from server_list.core.config import settings
from server_list.core.infrastructure.logging import setup_logging
from server_list.core.interfaces.http.exceptions import global_exception_handler
from server_list.core.interfaces.http.routers import api_router
from server_list.modules.catalog.domain.entities import Ordering
from server_list.modules.status.application.service import StatusService


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    setup_logging()
    logger.info("Starting server list backend...")
    logger.info(f"Environment: {settings.ENVIRONMENT}")

    service = StatusService()
    app.state.status_service = service
    service.start()

    yield

    logger.info("Shutting down server list backend...")
    await service.stop()


app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Periodically pings the configured Minecraft servers and serves the sorted list.",
    version="0.1.0",
    lifespan=lifespan,
)

# Exception handlers
app.add_exception_handler(Exception, global_exception_handler)

app.include_router(api_router)


@app.get("/health", tags=["health"])
async def health_check():
    """Health check endpoint."""
    service: StatusService | None = getattr(app.state, "status_service", None)
    if service is None:
        return {"status": "starting", "version": "0.1.0"}

    servers = service.server_list(Ordering.BY_POPULATION_DESC)
    return {
        "status": "healthy",
        "environment": settings.ENVIRONMENT,
        "version": "0.1.0",
        "servers": {
            "total": len(servers),
            "online": sum(1 for server in servers if server.is_online),
        },
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=settings.API_HOST,
        port=settings.SERVER_PORT,
        reload=settings.ENVIRONMENT == "local",
    )
