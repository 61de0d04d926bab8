"""Health check route."""

from fastapi import APIRouter

from deckrender import __version__
from deckrender.config import get_settings

router = APIRouter()


@router.get("/health")
async def health() -> dict[str, str]:
    """Liveness check. Does not start a browser."""
    settings = get_settings()
    return {
        "status": "ok",
        "version": __version__,
        "browser_backend": settings.browser_backend,
    }
