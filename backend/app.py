"""FastAPI application entry point for the hotlist API."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from config import Settings, configure_logging, settings
from errors import register_error_handlers
from services.runtime import HotlistServices, build_services

configure_logging(settings)

logger = logging.getLogger(__name__)


def create_app(
    app_settings: Settings | None = None,
    services: HotlistServices | None = None,
) -> FastAPI:
    app_settings = app_settings or settings
    problems = app_settings.validate()
    if problems:
        logger.warning("Configuration problems: %s", "; ".join(problems))
    services = services or build_services(app_settings)

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        await services.start(run_scheduler=app_settings.scheduler_enabled)
        try:
            yield
        finally:
            await services.stop()

    app = FastAPI(title="Hotlist API", version="1.0.0", lifespan=lifespan)
    app.state.hotlist = services

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Security headers
    @app.middleware("http")
    async def add_security_headers(request: Request, call_next):
        response: Response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        if app_settings.is_production:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response

    # Centralized error handlers
    register_error_handlers(app)

    from routes.health import router as health_router
    from routes.query import router as query_router

    app.include_router(health_router)
    app.include_router(query_router)

    return app


app = create_app()
