"""
Error taxonomy for the rendering pipeline.

Each error carries a stable code and the HTTP status the request boundary
converts it to.
"""

from typing import Any


class DeckRenderError(Exception):
    """Base error for all pipeline failures."""

    code: str = "INTERNAL_ERROR"
    http_status: int = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class InvalidInputError(DeckRenderError):
    """Request body missing or invalid (e.g. empty htmlContent)."""

    code = "INVALID_INPUT"
    http_status = 400


class NoSlidesFoundError(DeckRenderError):
    """Deck modes found no slide containers in the input."""

    code = "NO_SLIDES_FOUND"
    http_status = 400


class RenderEngineUnavailableError(DeckRenderError):
    """Browser engine could not be launched or connected."""

    code = "RENDER_ENGINE_UNAVAILABLE"
    http_status = 500


class RenderTimeoutError(DeckRenderError):
    """Content did not reach network idle before the load timeout."""

    code = "RENDER_TIMEOUT"
    http_status = 500


class EmptyArtifactError(DeckRenderError):
    """Capture returned zero bytes."""

    code = "EMPTY_ARTIFACT"
    http_status = 500
