"""FastAPI application factory and setup."""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from loguru import logger

from book_api.api.http.app_data import ApplicationDependencies
from book_api.api.http.errors import error_response, register_error_handlers
from book_api.api.http.routers.books import router as books_router
from book_api.runtime.init_db import init_db
from book_api.runtime.settings import EnvironmentVariables, load_settings

__all__ = ["create_app", "startup", "shutdown"]


# --- Request logging middleware ---
async def log_requests(request: Request, call_next):
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

    base_ctx = {
        "request_id": request_id,
        "method": request.method,
        "path": request.url.path,
        "client_ip": request.client.host if request.client else "unknown",
    }

    start = time.perf_counter()

    # Everything that logs within this block inherits base_ctx
    with logger.contextualize(**base_ctx):
        try:
            logger.info("request.start")
            response = await call_next(request)

            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=response.status_code,
                duration_ms=round(duration_ms, 1),
            ).info("request.end")

            response.headers.setdefault("X-Request-ID", request_id)
            return response

        except Exception as exc:
            duration_ms = (time.perf_counter() - start) * 1000
            logger.bind(
                status_code=500,
                duration_ms=round(duration_ms, 1),
                error_type=type(exc).__name__,
            ).exception("request.error")
            return error_response(
                500, "Internal Server Error", headers={"X-Request-ID": request_id}
            )


# --- Lifecycle hooks ---
def startup(settings: EnvironmentVariables) -> ApplicationDependencies:
    logger.info("Starting up application in {} environment", settings.environment)
    return ApplicationDependencies(database_service=init_db(settings))


def shutdown(dependencies: ApplicationDependencies) -> None:
    logger.info("Shutting down application")
    dependencies.database_service.dispose()


def create_app(
    settings: EnvironmentVariables | None = None,
    dependencies: ApplicationDependencies | None = None,
) -> FastAPI:
    """Build the application.

    When ``dependencies`` is given the caller owns them; otherwise they are
    created on startup from ``settings`` and released on shutdown.
    """
    if settings is None:
        settings = load_settings(env_file=None)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owned = app.state.app_dependencies is None
        if owned:
            app.state.app_dependencies = startup(settings)
        try:
            yield
        finally:
            if owned:
                shutdown(app.state.app_dependencies)
                app.state.app_dependencies = None

    production = settings.environment == "production"
    app = FastAPI(
        title="Book API",
        lifespan=lifespan,
        docs_url=None if production else "/docs",
        redoc_url=None if production else "/redoc",
        openapi_url=None if production else "/openapi.json",
    )
    app.state.settings = settings
    app.state.app_dependencies = dependencies

    app.middleware("http")(log_requests)
    register_error_handlers(app)

    # --- Router registration ---
    app.include_router(books_router, prefix="/books", tags=["books"])

    return app
