"""
PS5 Availability — Browser Sessions (Playwright)

One BrowserProcess owns the Chromium instance. Each retailer check gets its
own Session: a fresh BrowserContext and Page, so cookies and consent state
never leak between retailers. Navigation and settle waits are bounded by
settings.NAVIGATION_TIMEOUT_MS; a timeout surfaces as NavigationFailure.
"""

from __future__ import annotations

from typing import Any

import structlog
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from ps5_availability.config import Settings, settings as default_settings
from ps5_availability.errors import NavigationFailure

logger = structlog.get_logger(__name__)


class Session:
    """Isolated browser context + page used for exactly one retailer check."""

    def __init__(self, context: Any, page: Any, config: Settings) -> None:
        self.context = context
        self.page = page
        self._config = config
        self.closed = False

    async def navigate(self, url: str) -> None:
        """
        Load ``url`` and wait for the configured settle condition.

        Raises:
            NavigationFailure: network error or timeout.
        """
        try:
            await self.page.goto(
                url,
                wait_until=self._config.NAVIGATION_WAIT_UNTIL,
                timeout=self._config.NAVIGATION_TIMEOUT_MS,
            )
        except PlaywrightError as e:
            raise NavigationFailure(f"Navigation to {url} failed: {e}") from e

    async def settle(self) -> None:
        """Wait for the page to settle after an interaction."""
        try:
            await self.page.wait_for_load_state(
                self._config.SETTLE_WAIT_UNTIL,
                timeout=self._config.NAVIGATION_TIMEOUT_MS,
            )
        except PlaywrightError as e:
            raise NavigationFailure(f"Page did not settle: {e}") from e

    async def query_selector(self, selector: str) -> Any | None:
        return await self.page.query_selector(selector)

    async def click(self, selector: str) -> None:
        await self.page.click(selector, timeout=self._config.NAVIGATION_TIMEOUT_MS)

    async def title(self) -> str:
        try:
            return await self.page.title()
        except PlaywrightError:
            return ""

    async def close(self) -> None:
        """Close page and context. Safe to call more than once."""
        if self.closed:
            return
        self.closed = True
        logger.debug("session_closing", title=await self.title(), source="browser")
        try:
            await self.page.close()
        finally:
            await self.context.close()


class BrowserProcess:
    """
    Playwright Chromium process that hands out isolated sessions.

    Usage:
        browser = await BrowserProcess.launch(settings)
        try:
            session = await browser.open_session(locale="nl-NL")
            ...
            await browser.close_session(session)
        finally:
            await browser.close()
    """

    def __init__(self, playwright: Any, browser: Any, config: Settings) -> None:
        self._playwright = playwright
        self._browser = browser
        self._config = config
        self.closed = False

    @classmethod
    async def launch(cls, config: Settings | None = None) -> "BrowserProcess":
        config = config or default_settings
        logger.debug(
            "browser_launching",
            headless=config.BROWSER_HEADLESS,
            args=config.BROWSER_ARGS,
            source="browser",
        )
        playwright = await async_playwright().start()
        try:
            browser = await playwright.chromium.launch(
                headless=config.BROWSER_HEADLESS,
                args=config.BROWSER_ARGS,
                timeout=config.BROWSER_LAUNCH_TIMEOUT_MS,
            )
        except Exception:
            await playwright.stop()
            raise
        return cls(playwright, browser, config)

    async def open_session(self, locale: str | None = None) -> Session:
        """Create a fresh BrowserContext and Page."""
        context = await self._browser.new_context(
            viewport={
                "width": self._config.VIEWPORT_WIDTH,
                "height": self._config.VIEWPORT_HEIGHT,
            },
            locale=locale,
        )
        try:
            page = await context.new_page()
        except Exception:
            await context.close()
            raise
        return Session(context, page, self._config)

    async def close_session(self, session: Session) -> None:
        await session.close()

    async def close(self) -> None:
        """Terminate the browser and the Playwright driver."""
        if self.closed:
            return
        self.closed = True
        try:
            await self._browser.close()
        finally:
            await self._playwright.stop()
        logger.debug("browser_terminated", source="browser")
