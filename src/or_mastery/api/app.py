"""FastAPI application factory."""

import logging

from fastapi import FastAPI

from or_mastery.api.auth import router as auth_router
from or_mastery.api.procedures import router as procedures_router
from or_mastery.api.surgeons import router as surgeons_router
from or_mastery.app_logging import configure_logging
from or_mastery.containers import AppContainer


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    app = FastAPI(title="OR Mastery")
    app.state.container = container

    app.include_router(auth_router)
    app.include_router(surgeons_router)
    app.include_router(procedures_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/ping")
    async def ping() -> dict[str, str]:
        return {"status": "pong"}

    logger.info(
        "Application created", extra={"environment": container.settings.environment}
    )
    return app
