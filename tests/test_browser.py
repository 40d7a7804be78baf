"""Tests for the Playwright session layer (Playwright itself is mocked)."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from playwright.async_api import Error as PlaywrightError

from ps5_availability.config import Settings
from ps5_availability.errors import NavigationFailure
from ps5_availability.scraper.browser import BrowserProcess, Session


@pytest.fixture
def config() -> Settings:
    return Settings(NAVIGATION_TIMEOUT_MS=1234, VIEWPORT_WIDTH=800, VIEWPORT_HEIGHT=600)


@pytest.fixture
def mock_page() -> AsyncMock:
    page = AsyncMock()
    page.goto = AsyncMock()
    page.title = AsyncMock(return_value="PlayStation 5 | Coolblue")
    page.query_selector = AsyncMock(return_value=None)
    return page


@pytest.fixture
def mock_context(mock_page: AsyncMock) -> AsyncMock:
    context = AsyncMock()
    context.new_page = AsyncMock(return_value=mock_page)
    return context


class TestSession:
    @pytest.mark.asyncio
    async def test_navigate_uses_settle_condition_and_timeout(
        self, mock_context: AsyncMock, mock_page: AsyncMock, config: Settings
    ) -> None:
        session = Session(mock_context, mock_page, config)
        await session.navigate("https://www.coolblue.nl/product/865866/playstation-5.html")

        mock_page.goto.assert_awaited_once_with(
            "https://www.coolblue.nl/product/865866/playstation-5.html",
            wait_until="networkidle",
            timeout=1234,
        )

    @pytest.mark.asyncio
    async def test_navigate_timeout_becomes_navigation_failure(
        self, mock_context: AsyncMock, mock_page: AsyncMock, config: Settings
    ) -> None:
        mock_page.goto = AsyncMock(side_effect=PlaywrightError("Timeout 1234ms exceeded"))
        session = Session(mock_context, mock_page, config)

        with pytest.raises(NavigationFailure, match="Timeout"):
            await session.navigate("https://example.com")

    @pytest.mark.asyncio
    async def test_close_is_idempotent(
        self, mock_context: AsyncMock, mock_page: AsyncMock, config: Settings
    ) -> None:
        session = Session(mock_context, mock_page, config)
        await session.close()
        await session.close()

        mock_page.close.assert_awaited_once()
        mock_context.close.assert_awaited_once()
        assert session.closed is True

    @pytest.mark.asyncio
    async def test_context_closed_even_if_page_close_fails(
        self, mock_context: AsyncMock, mock_page: AsyncMock, config: Settings
    ) -> None:
        mock_page.close = AsyncMock(side_effect=PlaywrightError("Target closed"))
        session = Session(mock_context, mock_page, config)

        with pytest.raises(PlaywrightError):
            await session.close()
        mock_context.close.assert_awaited_once()


class TestBrowserProcess:
    @pytest.mark.asyncio
    @patch("ps5_availability.scraper.browser.async_playwright")
    async def test_launch_open_and_close(
        self,
        mock_async_playwright: MagicMock,
        mock_context: AsyncMock,
        config: Settings,
    ) -> None:
        browser = AsyncMock()
        browser.new_context = AsyncMock(return_value=mock_context)
        playwright = AsyncMock()
        playwright.chromium.launch = AsyncMock(return_value=browser)
        mock_async_playwright.return_value.start = AsyncMock(return_value=playwright)

        process = await BrowserProcess.launch(config)
        playwright.chromium.launch.assert_awaited_once_with(
            headless=True,
            args=["--start-maximized"],
            timeout=config.BROWSER_LAUNCH_TIMEOUT_MS,
        )

        session = await process.open_session(locale="nl-NL")
        browser.new_context.assert_awaited_once_with(
            viewport={"width": 800, "height": 600},
            locale="nl-NL",
        )
        assert isinstance(session, Session)

        await process.close_session(session)
        await process.close()
        await process.close()

        assert session.closed is True
        browser.close.assert_awaited_once()
        playwright.stop.assert_awaited_once()

    @pytest.mark.asyncio
    @patch("ps5_availability.scraper.browser.async_playwright")
    async def test_failed_launch_stops_driver(
        self, mock_async_playwright: MagicMock, config: Settings
    ) -> None:
        playwright = AsyncMock()
        playwright.chromium.launch = AsyncMock(side_effect=PlaywrightError("Executable doesn't exist"))
        mock_async_playwright.return_value.start = AsyncMock(return_value=playwright)

        with pytest.raises(PlaywrightError):
            await BrowserProcess.launch(config)
        playwright.stop.assert_awaited_once()
