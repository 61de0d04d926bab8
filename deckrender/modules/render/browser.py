"""
Browser session providers.

A provider hands out one RenderSession per conversion request. The session
owns the Playwright driver and the browser it launched (or connected to) and
is torn down by release(), which is idempotent and tolerates a session that
only got halfway through startup.

Which browser backs the session is decided once, in get_session_provider(),
from settings. Nothing downstream branches on the deployment target.
"""

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from playwright.async_api import Browser, Page, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError

from deckrender.config import Settings
from deckrender.shared.errors import RenderEngineUnavailableError
from deckrender.shared.logging import get_logger

logger = get_logger(__name__)


# Launch arguments for constrained hosting (serverless / small containers)
HOSTED_BROWSER_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
    "--single-process",
    "--no-zygote",
    "--hide-scrollbars",
    "--disable-web-security",
]


# =============================================================================
# SESSION
# =============================================================================

class RenderSession(ABC):
    """A live browser owned by exactly one request."""

    @abstractmethod
    async def new_page(self, scale: float = 1.0) -> Any:
        """Open a fresh page rendering at the given device scale factor."""

    @abstractmethod
    async def release(self) -> None:
        """Close everything the session owns. Safe to call repeatedly."""


class PlaywrightSession(RenderSession):
    """RenderSession backed by a Playwright driver and a Chromium browser."""

    def __init__(self, playwright: Playwright, browser: Browser | None = None):
        self._playwright: Playwright | None = playwright
        self._browser = browser
        self._released = False

    @property
    def released(self) -> bool:
        return self._released

    async def new_page(self, scale: float = 1.0) -> Page:
        if self._released or self._browser is None:
            raise RenderEngineUnavailableError("Render session is not active")
        return await self._browser.new_page(device_scale_factor=scale)

    async def release(self) -> None:
        if self._released:
            return
        self._released = True

        browser, self._browser = self._browser, None
        playwright, self._playwright = self._playwright, None
        try:
            if browser is not None:
                await browser.close()
        except PlaywrightError as e:
            logger.warning(f"Browser close failed: {e}")
        finally:
            if playwright is not None:
                await playwright.stop()
        logger.debug("Render session released")


# =============================================================================
# PROVIDERS
# =============================================================================

class BrowserSessionProvider(ABC):
    """Source of per-request render sessions."""

    @abstractmethod
    async def acquire(self) -> RenderSession:
        """Start a browser and return a session owning it."""

    @asynccontextmanager
    async def session(self) -> AsyncIterator[RenderSession]:
        """Acquire a session and release it on every exit path."""
        session = await self.acquire()
        try:
            yield session
        finally:
            await session.release()


class PlaywrightSessionProvider(BrowserSessionProvider):
    """Base for providers that start a Playwright driver per session."""

    name = "playwright"

    async def acquire(self) -> RenderSession:
        try:
            playwright = await async_playwright().start()
        except Exception as e:
            raise RenderEngineUnavailableError(
                f"Could not start Playwright driver: {e}",
                details={"backend": self.name},
            ) from e

        try:
            browser = await self._open_browser(playwright)
        except BaseException as e:
            # Partial session: driver started, no browser
            await PlaywrightSession(playwright).release()
            if not isinstance(e, Exception):
                raise
            logger.error(f"Browser launch failed ({self.name}): {e}")
            raise RenderEngineUnavailableError(
                f"Could not launch browser: {e}",
                details={"backend": self.name},
            ) from e

        logger.info(f"Render session acquired ({self.name}, {browser.version})")
        return PlaywrightSession(playwright, browser)

    @abstractmethod
    async def _open_browser(self, playwright: Playwright) -> Browser:
        ...


class LocalSessionProvider(PlaywrightSessionProvider):
    """Playwright's bundled headless Chromium (local development)."""

    name = "local"

    def __init__(self, extra_args: list[str] | None = None):
        self.extra_args = list(extra_args or [])

    async def _open_browser(self, playwright: Playwright) -> Browser:
        return await playwright.chromium.launch(headless=True, args=self.extra_args)


class HostedSessionProvider(PlaywrightSessionProvider):
    """Explicit Chromium binary with low-resource launch args."""

    name = "hosted"

    def __init__(self, executable_path: str | None, extra_args: list[str] | None = None):
        self.executable_path = executable_path
        self.args = HOSTED_BROWSER_ARGS + list(extra_args or [])

    async def _open_browser(self, playwright: Playwright) -> Browser:
        return await playwright.chromium.launch(
            headless=True,
            executable_path=self.executable_path,
            args=self.args,
        )


class RemoteSessionProvider(PlaywrightSessionProvider):
    """Connect to an already running browser server."""

    name = "remote"

    def __init__(self, ws_endpoint: str):
        self.ws_endpoint = ws_endpoint

    async def _open_browser(self, playwright: Playwright) -> Browser:
        return await playwright.chromium.connect(self.ws_endpoint)


def get_session_provider(settings: Settings) -> BrowserSessionProvider:
    """Pick the provider for the configured deployment target."""
    backend = settings.browser_backend

    if backend == "hosted":
        return HostedSessionProvider(
            executable_path=settings.browser_executable_path,
            extra_args=settings.browser_args,
        )
    if backend == "remote":
        if not settings.browser_ws_endpoint:
            raise RenderEngineUnavailableError(
                "browser_backend=remote requires browser_ws_endpoint",
                details={"backend": backend},
            )
        return RemoteSessionProvider(settings.browser_ws_endpoint)
    return LocalSessionProvider(extra_args=settings.browser_args)
