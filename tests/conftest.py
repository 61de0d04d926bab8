"""
Shared fixtures: fake browser sessions that record what the pipeline asks of them.
"""

import hashlib
import io

import pytest
from fastapi.testclient import TestClient
from PIL import Image
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from deckrender.app import build_app
from deckrender.config import Settings, init_settings, reset_settings
from deckrender.modules.render.browser import BrowserSessionProvider, RenderSession
from deckrender.modules.render.router import get_service
from deckrender.modules.render.service import RenderService
from deckrender.shared.errors import RenderEngineUnavailableError

FAKE_PDF = b"%PDF-1.4\n% fake\n%%EOF\n"


def png_for(content: str) -> bytes:
    """Small PNG whose colour is derived from the page content."""
    digest = hashlib.sha1(content.encode("utf-8")).digest()
    img = Image.new("RGB", (8, 6), tuple(digest[:3]))
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()


class FakePage:
    def __init__(self, session: "FakeSession", scale: float):
        self.session = session
        self.scale = scale
        self.viewport = None
        self.content = None
        self.closed = False

    async def set_viewport_size(self, viewport):
        self.viewport = viewport

    async def set_content(self, html, wait_until=None, timeout=None):
        self.session.loads.append({"html": html, "wait_until": wait_until, "timeout": timeout})
        if self.session.fail_on == "load":
            raise RuntimeError("injected load failure")
        if self.session.fail_on == "timeout":
            raise PlaywrightTimeoutError("Timeout 10ms exceeded.")
        self.content = html

    async def evaluate(self, expression):
        self.session.evaluated.append(expression)
        return True

    async def pdf(self, **kwargs):
        self.session.pdf_calls.append(kwargs)
        if self.session.fail_on == "capture":
            raise RuntimeError("injected capture failure")
        if self.session.fail_on == "empty":
            return b""
        return FAKE_PDF

    async def screenshot(self, **kwargs):
        self.session.screenshot_calls.append(kwargs)
        if self.session.fail_on == "capture":
            raise RuntimeError("injected capture failure")
        if self.session.fail_on == "empty":
            return b""
        if self.session.fail_on == "garbage":
            return b"not an image"
        data = png_for(self.content)
        self.session.images.append((self.content, data))
        return data

    async def close(self):
        self.closed = True


class FakeSession(RenderSession):
    def __init__(self, provider: "FakeProvider", fail_on: str | None):
        self.provider = provider
        self.fail_on = fail_on
        self.pages: list[FakePage] = []
        self.loads: list[dict] = []
        self.evaluated: list[str] = []
        self.pdf_calls: list[dict] = []
        self.screenshot_calls: list[dict] = []
        self.images: list[tuple[str, bytes]] = []

    async def new_page(self, scale: float = 1.0):
        if self.fail_on == "new_page":
            raise RuntimeError("injected page failure")
        page = FakePage(self, scale)
        self.pages.append(page)
        return page

    async def release(self) -> None:
        self.provider.release_count += 1


class FakeProvider(BrowserSessionProvider):
    """Counts acquire/release and injects failures at a chosen stage."""

    def __init__(self, fail_on: str | None = None):
        self.fail_on = fail_on
        self.acquire_count = 0
        self.release_count = 0
        self.sessions: list[FakeSession] = []

    async def acquire(self) -> RenderSession:
        self.acquire_count += 1
        session = FakeSession(self, self.fail_on)
        if self.fail_on == "acquire":
            # Mirrors the real provider: clean up the partial session, then fail
            await session.release()
            raise RenderEngineUnavailableError("injected launch failure")
        self.sessions.append(session)
        return session

    @property
    def last_session(self) -> FakeSession:
        return self.sessions[-1]


@pytest.fixture
def settings():
    reset_settings()
    s = init_settings(Settings(load_timeout_ms=10))
    yield s
    reset_settings()


@pytest.fixture
def provider():
    return FakeProvider()


@pytest.fixture
def make_client(settings):
    """Build a TestClient whose render service uses the given fake provider."""

    def _make(provider: FakeProvider) -> TestClient:
        app = build_app(settings)
        app.dependency_overrides[get_service] = lambda: RenderService(settings, provider=provider)
        return TestClient(app, raise_server_exceptions=False)

    return _make


@pytest.fixture
def client(make_client, provider):
    return make_client(provider)
