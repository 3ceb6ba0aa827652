from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from typing import Optional
import logging

from .config import settings
from .middleware.error_handler import ErrorHandlerMiddleware, register_exception_handlers
from .monitoring.metrics import metrics_endpoint
from .routes.health import router as health_router
from .routes.narrative import router as narrative_router
from .services import NarrativeAIService

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    configured = app.state.service.settings.to_ai_settings().configured_providers()
    logger.info(f"Starting Chronos AI Core (configured providers: {configured or 'none'})")

    yield
    # Shutdown
    await app.state.service.close()
    logger.info("Shutting down Chronos AI Core")


def create_app(service: Optional[NarrativeAIService] = None) -> FastAPI:
    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        debug=settings.debug,
        lifespan=lifespan
    )
    app.state.service = service if service is not None else NarrativeAIService(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(ErrorHandlerMiddleware)
    register_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(narrative_router)

    if settings.enable_metrics:
        app.add_api_route("/metrics", metrics_endpoint, methods=["GET"], include_in_schema=False)

    @app.get("/")
    async def root():
        return {
            "message": "Chronos AI Core API",
            "version": settings.api_version,
            "docs": "/docs"
        }

    return app


app = create_app()
