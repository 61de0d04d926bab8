"""
Application factory - builds FastAPI app with middleware, error handling and routes.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from deckrender import __version__
from deckrender.config import Settings, get_settings
from deckrender.modules.health.router import router as health_router
from deckrender.modules.render.router import router as render_router
from deckrender.shared.errors import DeckRenderError
from deckrender.shared.ids import generate_request_id
from deckrender.shared.logging import (
    clear_request_context,
    get_logger,
    get_request_context,
    set_request_context,
    setup_logging,
)
from deckrender.shared.types import RequestContext

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan - startup and shutdown."""
    settings = get_settings()
    setup_logging(settings.log_level)
    logger.info(f"Starting deckrender {__version__} (browser backend: {settings.browser_backend})")

    yield

    logger.info("deckrender stopped")


def _error_body(message: str, code: str) -> dict[str, Any]:
    ctx = get_request_context()
    return {
        "error": message,
        "code": code,
        "request_id": ctx.request_id if ctx else None,
    }


def build_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Optional settings override (useful for testing)

    Returns:
        Configured FastAPI application
    """
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title="deckrender",
        description="Render structural HTML to PDF and PPTX through a headless browser",
        version=__version__,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def request_context_middleware(request: Request, call_next: Any) -> Response:
        """Attach request context for logging and tracing."""
        ctx = RequestContext(
            request_id=request.headers.get("X-Request-ID", generate_request_id()),
        )
        set_request_context(ctx)

        try:
            try:
                response = await call_next(request)
            except Exception as exc:
                # Unhandled failures still get the request id and JSON body
                logger.exception(f"{request.url.path} failed unexpectedly")
                response = JSONResponse(
                    status_code=500, content=_error_body(str(exc), "INTERNAL_ERROR")
                )
            response.headers["X-Request-ID"] = ctx.request_id
            return response
        finally:
            clear_request_context()

    @app.exception_handler(DeckRenderError)
    async def deckrender_error_handler(request: Request, exc: DeckRenderError) -> JSONResponse:
        """Pipeline errors -> structured JSON with the mapped status."""
        if exc.http_status >= 500:
            logger.error(f"{request.url.path} failed [{exc.code}]: {exc.message} {exc.details}")
        else:
            logger.warning(f"{request.url.path} rejected [{exc.code}]: {exc.message}")
        return JSONResponse(status_code=exc.http_status, content=_error_body(exc.message, exc.code))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Malformed request bodies are client errors (400)."""
        errors = exc.errors()
        message = errors[0].get("msg", "Invalid request") if errors else "Invalid request"
        logger.warning(f"{request.url.path} invalid body: {message}")
        return JSONResponse(status_code=400, content=_error_body(message, "INVALID_INPUT"))

    app.include_router(health_router, tags=["health"])
    app.include_router(render_router)

    @app.get("/")
    async def root() -> dict[str, str]:
        return {"service": "deckrender", "version": __version__}

    return app
