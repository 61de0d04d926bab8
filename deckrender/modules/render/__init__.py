"""Render module - HTML to PDF and PPTX rendering using Playwright."""

from .router import router
from .service import RenderService
from .schemas import ConvertRequest, PreviewResponse, RenderMode

__all__ = ["router", "RenderService", "ConvertRequest", "PreviewResponse", "RenderMode"]
