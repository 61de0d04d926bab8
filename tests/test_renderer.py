"""
Tests for render orchestration against fake pages.
"""

import asyncio

import pytest

from playwright.async_api import Error as PlaywrightError

from deckrender.modules.render.renderer import READY_SIGNAL, ImageCapture, PdfCapture, Renderer
from deckrender.modules.render.schemas import DECK_CANVAS, PDF_CANVAS
from deckrender.shared.errors import EmptyArtifactError, RenderTimeoutError

from conftest import FAKE_PDF, FakeProvider


def _session(fail_on=None):
    return asyncio.run(FakeProvider(fail_on).acquire())


def test_pdf_capture_passes_margins_exactly():
    session = _session()
    margin = {"top": "1cm", "right": "1cm", "bottom": "1cm", "left": "1cm"}

    artifact = asyncio.run(
        Renderer().render(session, "<p>x</p>", PDF_CANVAS, PdfCapture(margin=margin))
    )

    assert artifact.data == FAKE_PDF
    assert artifact.mime_type == "application/pdf"
    assert session.pdf_calls == [
        {"format": "A4", "print_background": True, "margin": margin}
    ]


def test_pdf_capture_without_margin_omits_it():
    assert "margin" not in PdfCapture().options()


def test_render_waits_for_network_idle_then_readiness():
    session = _session()

    asyncio.run(Renderer(load_timeout_ms=1234).render(session, "<p>x</p>", DECK_CANVAS, ImageCapture()))

    assert session.loads == [{"html": "<p>x</p>", "wait_until": "networkidle", "timeout": 1234}]
    assert session.evaluated == [READY_SIGNAL]


def test_image_capture_clips_to_canvas_and_sets_viewport():
    session = _session()

    artifact = asyncio.run(Renderer().render(session, "<p>x</p>", DECK_CANVAS, ImageCapture()))

    page = session.pages[0]
    assert page.scale == 2
    assert page.viewport == {"width": 960, "height": 540}
    assert session.screenshot_calls == [
        {"type": "png", "clip": {"x": 0, "y": 0, "width": 960, "height": 540}}
    ]
    assert artifact.mime_type == "image/png"
    assert artifact.data.startswith(b"\x89PNG")
    assert page.closed


def test_empty_capture_is_an_error():
    session = _session("empty")

    with pytest.raises(EmptyArtifactError):
        asyncio.run(Renderer().render(session, "<p>x</p>", PDF_CANVAS, PdfCapture()))

    assert session.pages[0].closed


def test_load_timeout_is_reported_not_retried():
    session = _session("timeout")

    with pytest.raises(RenderTimeoutError) as exc_info:
        asyncio.run(Renderer(load_timeout_ms=10).render(session, "<p>x</p>", DECK_CANVAS, ImageCapture()))

    assert exc_info.value.details == {"timeout_ms": 10}
    assert len(session.loads) == 1
    assert session.pages[0].closed


class SlowFirstSession:
    """Pages finish in reverse order of submission."""

    def __init__(self):
        self.inner = _session()
        self.delays = {}

    async def new_page(self, scale=1.0):
        page = await self.inner.new_page(scale)
        original = page.set_content

        async def delayed(html, **kwargs):
            await asyncio.sleep(self.delays.get(html, 0))
            await original(html, **kwargs)

        page.set_content = delayed
        return page

    async def release(self):
        await self.inner.release()


def test_parallel_render_keeps_input_order():
    session = SlowFirstSession()
    docs = [f"<p>{i}</p>" for i in range(4)]
    session.delays = {doc: 0.04 - i * 0.01 for i, doc in enumerate(docs)}

    artifacts = asyncio.run(
        Renderer(concurrency=4).render_many(session, docs, DECK_CANVAS, ImageCapture())
    )

    completion_order = [content for content, _ in session.inner.images]
    assert completion_order == list(reversed(docs))
    expected = {content: data for content, data in session.inner.images}
    assert [a.data for a in artifacts] == [expected[d] for d in docs]


def test_sequential_render_many():
    session = _session()
    docs = ["<p>a</p>", "<p>b</p>"]

    artifacts = asyncio.run(Renderer().render_many(session, docs, DECK_CANVAS, ImageCapture()))

    assert len(artifacts) == 2
    assert [load["html"] for load in session.loads] == docs
    assert all(page.closed for page in session.pages)


def test_page_close_failure_does_not_hide_render_error():
    session = _session("empty")
    original_new_page = session.new_page

    async def new_page(scale=1.0):
        page = await original_new_page(scale)

        async def broken_close():
            raise PlaywrightError("Target page, context or browser has been closed")

        page.close = broken_close
        return page

    session.new_page = new_page

    with pytest.raises(EmptyArtifactError):
        asyncio.run(Renderer().render(session, "<p>x</p>", PDF_CANVAS, PdfCapture()))


def test_parallel_failure_cancels_siblings_and_closes_pages():
    session = SlowFirstSession()
    docs = ["<p>ok-1</p>", "<p>bad</p>", "<p>ok-2</p>"]
    session.delays = {docs[0]: 5, docs[2]: 5}
    inner_new_page = session.new_page

    async def new_page(scale=1.0):
        page = await inner_new_page(scale)
        slow_set_content = page.set_content

        async def set_content(html, **kwargs):
            if html == "<p>bad</p>":
                raise RuntimeError("renderer crashed")
            await slow_set_content(html, **kwargs)

        page.set_content = set_content
        return page

    session.new_page = new_page

    with pytest.raises(RuntimeError, match="renderer crashed"):
        asyncio.run(Renderer(concurrency=3).render_many(session, docs, DECK_CANVAS, ImageCapture()))

    pages = session.inner.pages
    assert len(pages) == 3
    assert all(page.closed for page in pages)
    assert session.inner.images == []
