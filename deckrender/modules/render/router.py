"""Render module routes."""

from fastapi import APIRouter, Depends, Response

from deckrender.shared.logging import get_logger
from .responses import to_response
from .schemas import ConvertRequest, PreviewResponse, RenderMode
from .service import RenderService

logger = get_logger(__name__)
router = APIRouter(prefix="/api", tags=["render"])


def get_service() -> RenderService:
    """Dependency injection for service."""
    return RenderService()


@router.post("/convert-html-to-pdf")
async def convert_html_to_pdf(
    request: ConvertRequest,
    service: RenderService = Depends(get_service),
) -> Response:
    """
    Render HTML to a single PDF.

    Slide containers become pages; without any, the whole input is one page.
    Returns the PDF as an attachment.
    """
    document = await service.convert(request, RenderMode.PDF)
    return to_response(document)


@router.post("/convert-to-pptx")
async def convert_to_pptx(
    request: ConvertRequest,
    service: RenderService = Depends(get_service),
) -> Response:
    """Render each slide container to an image and package them as a PPTX deck."""
    document = await service.convert(request, RenderMode.DECK)
    return to_response(document)


@router.post("/preview-pptx", response_model=PreviewResponse)
async def preview_pptx(
    request: ConvertRequest,
    service: RenderService = Depends(get_service),
) -> Response:
    """Render each slide container to a PNG data URI for preview."""
    document = await service.convert(request, RenderMode.DECK_PREVIEW)
    return to_response(document)
