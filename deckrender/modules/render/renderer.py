"""
Render orchestration - load composed documents into pages and capture them.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Any

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from deckrender.shared.errors import EmptyArtifactError, RenderTimeoutError
from deckrender.shared.logging import get_logger
from .browser import RenderSession
from .schemas import Canvas, RenderedArtifact

logger = get_logger(__name__)

# Resolves once web fonts have loaded and layout has settled
READY_SIGNAL = "document.fonts.ready.then(() => true)"


# =============================================================================
# CAPTURE POLICIES
# =============================================================================

@dataclass(frozen=True)
class PdfCapture:
    """Vector capture via the browser's print pipeline."""

    margin: dict[str, str] = field(default_factory=dict)
    page_format: str = "A4"
    print_background: bool = True
    mime_type: str = "application/pdf"

    def options(self) -> dict[str, Any]:
        opts: dict[str, Any] = {
            "format": self.page_format,
            "print_background": self.print_background,
        }
        if self.margin:
            opts["margin"] = dict(self.margin)
        return opts

    async def capture(self, page: Any, canvas: Canvas) -> bytes:
        return await page.pdf(**self.options())


@dataclass(frozen=True)
class ImageCapture:
    """PNG screenshot clipped to the canvas."""

    mime_type: str = "image/png"

    async def capture(self, page: Any, canvas: Canvas) -> bytes:
        return await page.screenshot(type="png", clip=canvas.clip)


Capture = PdfCapture | ImageCapture


# =============================================================================
# RENDERER
# =============================================================================

class Renderer:
    """Drive a RenderSession to turn documents into artifacts."""

    def __init__(self, load_timeout_ms: int = 30000, concurrency: int = 1):
        self.load_timeout_ms = load_timeout_ms
        self.concurrency = max(1, concurrency)

    async def render(
        self,
        session: RenderSession,
        document: str,
        canvas: Canvas,
        capture: Capture,
    ) -> RenderedArtifact:
        """
        Render one document and capture it.

        Raises:
            RenderTimeoutError: content did not reach network idle in time
            EmptyArtifactError: capture returned no bytes
        """
        page = await session.new_page(scale=canvas.scale)
        try:
            await page.set_viewport_size(canvas.viewport)
            try:
                await page.set_content(
                    document,
                    wait_until="networkidle",
                    timeout=self.load_timeout_ms,
                )
            except PlaywrightTimeoutError as e:
                raise RenderTimeoutError(
                    f"Content load exceeded {self.load_timeout_ms}ms",
                    details={"timeout_ms": self.load_timeout_ms},
                ) from e

            await page.evaluate(READY_SIGNAL)

            data = await capture.capture(page, canvas)
            if not data:
                raise EmptyArtifactError(
                    f"Capture produced an empty {capture.mime_type} buffer"
                )

            logger.debug(f"Captured {len(data)} bytes ({capture.mime_type})")
            return RenderedArtifact(data=bytes(data), mime_type=capture.mime_type)
        finally:
            try:
                await page.close()
            except PlaywrightError as e:
                logger.warning(f"Page close failed: {e}")

    async def render_many(
        self,
        session: RenderSession,
        documents: list[str],
        canvas: Canvas,
        capture: Capture,
    ) -> list[RenderedArtifact]:
        """Render documents, returning artifacts in input order."""
        if self.concurrency == 1 or len(documents) <= 1:
            artifacts = []
            for index, document in enumerate(documents):
                logger.info(f"Rendering slide {index + 1}/{len(documents)}")
                artifacts.append(await self.render(session, document, canvas, capture))
            return artifacts

        semaphore = asyncio.Semaphore(self.concurrency)

        async def render_one(document: str) -> RenderedArtifact:
            async with semaphore:
                return await self.render(session, document, canvas, capture)

        logger.info(f"Rendering {len(documents)} slides, {self.concurrency} at a time")
        tasks = [asyncio.ensure_future(render_one(doc)) for doc in documents]
        try:
            # gather keeps input order regardless of completion order
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise
