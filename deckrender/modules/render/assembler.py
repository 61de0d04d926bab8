"""
Artifact assembly - turn rendered artifacts into the final document.
"""

import base64
import io

from pptx import Presentation
from pptx.util import Emu, Inches

from deckrender.shared.errors import EmptyArtifactError, NoSlidesFoundError
from deckrender.shared.logging import get_logger
from .schemas import AssembledDocument, RenderedArtifact, RenderMode

logger = get_logger(__name__)

PDF_MIME = "application/pdf"
PPTX_MIME = "application/vnd.openxmlformats-officedocument.presentationml.presentation"

# 16:9 layout, 10in x 5.625in
DECK_WIDTH = Inches(10)
DECK_HEIGHT = Inches(5.625)
BLANK_LAYOUT_INDEX = 6


def assemble_pdf(
    artifacts: list[RenderedArtifact], filename: str = "document.pdf"
) -> AssembledDocument:
    """PDF is captured as a single document; pass it through."""
    if len(artifacts) != 1:
        raise EmptyArtifactError(
            f"Expected exactly one PDF artifact, got {len(artifacts)}"
        )
    return AssembledDocument(
        mode=RenderMode.PDF,
        mime_type=PDF_MIME,
        data=artifacts[0].data,
        filename=filename,
    )


def assemble_deck(
    artifacts: list[RenderedArtifact], filename: str = "presentation.pptx"
) -> AssembledDocument:
    """
    Package one full-bleed image per slide into a 16:9 PPTX.

    Raises:
        NoSlidesFoundError: no artifacts to package
    """
    if not artifacts:
        raise NoSlidesFoundError("Cannot build a deck with zero slides")

    prs = Presentation()
    prs.slide_width = DECK_WIDTH
    prs.slide_height = DECK_HEIGHT
    layout = prs.slide_layouts[BLANK_LAYOUT_INDEX]

    for artifact in artifacts:
        slide = prs.slides.add_slide(layout)
        slide.shapes.add_picture(
            io.BytesIO(artifact.data),
            left=Emu(0),
            top=Emu(0),
            width=prs.slide_width,
            height=prs.slide_height,
        )

    buffer = io.BytesIO()
    prs.save(buffer)
    data = buffer.getvalue()

    logger.info(f"Assembled deck: {len(artifacts)} slides, {len(data)} bytes")
    return AssembledDocument(
        mode=RenderMode.DECK,
        mime_type=PPTX_MIME,
        data=data,
        filename=filename,
    )


def assemble_preview(artifacts: list[RenderedArtifact]) -> AssembledDocument:
    """Encode slide images as data URIs without packaging."""
    if not artifacts:
        raise NoSlidesFoundError("Cannot preview a deck with zero slides")

    images = tuple(
        f"data:{artifact.mime_type};base64,{base64.b64encode(artifact.data).decode('ascii')}"
        for artifact in artifacts
    )
    return AssembledDocument(
        mode=RenderMode.DECK_PREVIEW,
        mime_type="application/json",
        images=images,
    )
