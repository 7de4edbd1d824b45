from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.api.v1.dashboard import router as dashboard_router
from app.api.v1.health import router as health_router
from app.core.logger import get_logger
from app.core.orchestrator import DashboardOrchestrator
from app.core.vitalz_client import VitalzClient

logger = get_logger(__name__)


def create_app(client: VitalzClient | None = None) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        vitalz = client or VitalzClient()
        app.state.orchestrator = DashboardOrchestrator(vitalz)
        logger.info("Loading user list from %s", vitalz.base_url)
        await app.state.orchestrator.load_users()
        try:
            yield
        finally:
            # A client passed in by the caller is theirs to close
            if client is None:
                await vitalz.aclose()

    app = FastAPI(title="Vitalz Dashboard", version="1.0.0", lifespan=lifespan)

    app.include_router(health_router, prefix="/v1")
    app.include_router(dashboard_router, prefix="/v1")
    return app


app = create_app()
