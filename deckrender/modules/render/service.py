"""Render service - one conversion job from HTML to an assembled document."""

from deckrender.config import Settings, get_settings
from deckrender.shared.errors import InvalidInputError
from deckrender.shared.logging import get_logger
from .assembler import assemble_deck, assemble_pdf, assemble_preview
from .browser import BrowserSessionProvider, get_session_provider
from .composer import compose, compose_pages
from .extractor import SlideExtractor
from .renderer import ImageCapture, PdfCapture, Renderer
from .schemas import (
    DECK_CANVAS,
    PDF_CANVAS,
    AssembledDocument,
    ConvertRequest,
    RenderMode,
)

logger = get_logger(__name__)


class RenderService:
    """Runs the conversion pipeline for a single request."""

    def __init__(
        self,
        settings: Settings | None = None,
        provider: BrowserSessionProvider | None = None,
    ):
        self.settings = settings or get_settings()
        self.provider = provider or get_session_provider(self.settings)
        self.extractor = SlideExtractor(self.settings.slide_selector)
        self.renderer = Renderer(
            load_timeout_ms=self.settings.load_timeout_ms,
            concurrency=self.settings.render_concurrency,
        )

    async def convert(self, request: ConvertRequest, mode: RenderMode) -> AssembledDocument:
        """
        Convert request HTML to the document for the given mode.

        Raises:
            InvalidInputError: empty htmlContent (before any browser starts)
            NoSlidesFoundError: deck modes with no slide containers
            RenderEngineUnavailableError, RenderTimeoutError, EmptyArtifactError
        """
        if not request.html_content or not request.html_content.strip():
            raise InvalidInputError("HTML content is required")

        logger.info(f"Converting {len(request.html_content)} chars of HTML ({mode.value})")

        async with self.provider.session() as session:
            if mode is RenderMode.PDF:
                return await self._to_pdf(session, request)
            return await self._to_deck(session, request, mode)

    async def _to_pdf(self, session, request: ConvertRequest) -> AssembledDocument:
        slides, styles = self.extractor.extract(request.html_content, fallback=True)
        document = compose_pages([s.fragment_html for s in slides], styles, PDF_CANVAS)

        margin = request.options.margin
        capture = PdfCapture(margin=margin.as_pdf_margin() if margin else {})
        artifact = await self.renderer.render(session, document, PDF_CANVAS, capture)

        logger.info(f"Generated PDF: {len(artifact.data)} bytes, {len(slides)} page group(s)")
        return assemble_pdf([artifact], filename=self.settings.pdf_filename)

    async def _to_deck(
        self, session, request: ConvertRequest, mode: RenderMode
    ) -> AssembledDocument:
        slides, styles = self.extractor.extract(request.html_content, fallback=False)
        documents = [
            compose(slide.fragment_html, styles, DECK_CANVAS, title=f"Slide {slide.index + 1}")
            for slide in slides
        ]
        artifacts = await self.renderer.render_many(
            session, documents, DECK_CANVAS, ImageCapture()
        )

        if mode is RenderMode.DECK_PREVIEW:
            return assemble_preview(artifacts)
        return assemble_deck(artifacts, filename=self.settings.deck_filename)
