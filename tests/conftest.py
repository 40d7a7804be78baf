"""
PS5 Availability — Shared pytest Fixtures

Playwright objects are replaced with AsyncMock/MagicMock doubles:
- fake sessions whose DOM is a {selector: inner_text} mapping
- a reporting sink backed by a MagicMock logger
- a session provider that records open/close calls
"""

from __future__ import annotations

from typing import Any, Callable
from unittest.mock import AsyncMock, MagicMock

import pytest

from ps5_availability.reporting import ReportingSink
from ps5_availability.scraper.retailers import BOL_NL, RetailerDescriptor


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

pytest_plugins = ("pytest_asyncio",)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def make_handle(text: str) -> MagicMock:
    handle = MagicMock()
    handle.inner_text = AsyncMock(return_value=text)
    return handle


def make_session(dom: dict[str, str]) -> MagicMock:
    """Session double: query_selector returns a handle for selectors in ``dom``."""
    session = MagicMock()
    session.navigate = AsyncMock()
    session.settle = AsyncMock()
    session.click = AsyncMock()
    session.close = AsyncMock()

    async def query_selector(selector: str) -> Any:
        if selector in dom:
            return make_handle(dom[selector])
        return None

    session.query_selector = AsyncMock(side_effect=query_selector)
    return session


def page_dom(
    descriptor: RetailerDescriptor,
    title: str | None = None,
    notice: str | None = None,
    button: str | None = None,
) -> dict[str, str]:
    """Build a DOM mapping for a retailer product page."""
    dom: dict[str, str] = {}
    if title is not None:
        dom[descriptor.structural_selector] = title
    if notice is not None:
        dom[descriptor.availability_selectors.out_of_stock_notice] = notice
    if button is not None:
        dom[descriptor.availability_selectors.purchase_action] = button
    return dom


def available_dom(descriptor: RetailerDescriptor) -> dict[str, str]:
    return page_dom(
        descriptor,
        title=f"{descriptor.expected_structural_text} - Zwart",
        button=descriptor.expected_purchase_action_text,
    )


class FakeProvider:
    """Session provider double that records every open and close."""

    def __init__(self, session_factory: Callable[[str | None], Any]) -> None:
        self._factory = session_factory
        self.opened: list[Any] = []
        self.closed_sessions: list[Any] = []
        self.browser_closed = False
        self.events: list[str] = []

    async def open_session(self, locale: str | None = None) -> Any:
        session = self._factory(locale)
        self.opened.append(session)
        self.events.append("open_session")
        return session

    async def close_session(self, session: Any) -> None:
        self.closed_sessions.append(session)
        self.events.append("close_session")

    async def close(self) -> None:
        self.browser_closed = True
        self.events.append("close_browser")


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def descriptor() -> RetailerDescriptor:
    return BOL_NL


@pytest.fixture
def sink() -> ReportingSink:
    return ReportingSink(logger=MagicMock(), batch_id="test-batch")


@pytest.fixture
def available_session(descriptor: RetailerDescriptor) -> MagicMock:
    return make_session(available_dom(descriptor))
