import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright.async_api import async_playwright

from config import (
    BROWSER_ARGS,
    DETAIL_TIMEOUT_MS,
    GALLERY_ENTRY_SELECTORS,
    GALLERY_PATH,
    GALLERY_TIMEOUT_MS,
    HEADLESS,
    USER_AGENT,
    VIEWPORT,
)
from errors import BrowserLaunchError, GalleryTimeoutError, NavigationError
from utils.diagnostics import NullDiagnostics

logger = logging.getLogger(__name__)


def gallery_url_for(hackathon_url: str) -> str:
    return hackathon_url.rstrip("/") + GALLERY_PATH


class PageFetcher:
    """
    One headless Chromium session for a scrape run.

    Use as an async context manager; the browser is closed on exit whether the
    run finished or failed. The gallery gets its own browser context and every
    detail page is opened in a fresh context so projects never share history
    or cookies.
    """

    def __init__(self, diagnostics=None, headless: bool = HEADLESS,
                 gallery_timeout_ms: int = GALLERY_TIMEOUT_MS,
                 detail_timeout_ms: int = DETAIL_TIMEOUT_MS):
        self.diagnostics = diagnostics or NullDiagnostics()
        self.headless = headless
        self.gallery_timeout_ms = gallery_timeout_ms
        self.detail_timeout_ms = detail_timeout_ms
        self._playwright = None
        self._browser = None
        self._context = None

    async def __aenter__(self) -> "PageFetcher":
        logger.info("🌐 Launching browser...")
        self._playwright = await async_playwright().start()
        try:
            self._browser = await self._playwright.chromium.launch(
                headless=self.headless,
                args=BROWSER_ARGS,
            )
            self._context = await self._new_context()
        except PlaywrightError as e:
            await self.close()
            raise BrowserLaunchError(f"Could not launch browser: {e}") from e
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        logger.info("🔒 Closing browser...")
        try:
            if self._browser is not None:
                await self._browser.close()
        finally:
            self._browser = None
            self._context = None
            if self._playwright is not None:
                await self._playwright.stop()
                self._playwright = None

    async def _new_context(self):
        context = await self._browser.new_context(viewport=VIEWPORT, user_agent=USER_AGENT)
        context.set_default_timeout(self.detail_timeout_ms)
        return context

    async def open_gallery(self, hackathon_url: str) -> Page:
        """
        Navigate to the hackathon's project gallery.

        Raises:
            NavigationError: If the request fails or the response is not 2xx.
        """
        url = gallery_url_for(hackathon_url)
        page = await self._context.new_page()

        logger.info(f"🎯 Navigating to project gallery: {url}")
        try:
            response = await page.goto(url)
        except PlaywrightError as e:
            await self.diagnostics.screenshot(page, "error-page.png")
            raise NavigationError(url, reason=str(e)) from e

        if response is None or not response.ok:
            status = response.status if response is not None else None
            reason = response.status_text if response is not None else "no response"
            logger.error(f"❌ Failed to load page: {status} {reason}")
            await self.diagnostics.screenshot(page, "error-page.png")
            raise NavigationError(url, status, reason)

        logger.info("⏳ Waiting for initial page load...")
        await page.wait_for_selector("body")
        await self.diagnostics.screenshot(page, "initial-load.png")
        await self.diagnostics.dump_html(page, "page-content.html")
        return page

    async def await_projects_loaded(self, page: Page) -> None:
        """
        Block until at least one project entry is on the page.

        Raises:
            GalleryTimeoutError: If nothing shows up within the gallery timeout.
        """
        logger.info("⏳ Waiting for project elements to load...")
        try:
            await page.wait_for_selector(
                ", ".join(GALLERY_ENTRY_SELECTORS),
                timeout=self.gallery_timeout_ms,
            )
        except PlaywrightTimeoutError as e:
            await self.diagnostics.screenshot(page, "projects-timeout.png")
            raise GalleryTimeoutError(
                f"No project entries appeared within {self.gallery_timeout_ms} ms"
            ) from e
        await self.diagnostics.screenshot(page, "projects-loaded.png")

    @asynccontextmanager
    async def open_detail(self, url: str) -> AsyncIterator[Page]:
        """Open a project page in its own browser context and wait for the network to settle."""
        context = await self._new_context()
        try:
            page = await context.new_page()
            await page.goto(url, wait_until="networkidle", timeout=self.detail_timeout_ms)
            yield page
        finally:
            await context.close()
