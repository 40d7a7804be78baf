"""
PS5 Availability — DOM Probe

Existence and text-content queries against one browser session. Accepts
either a selector string (fresh query) or an element handle that was
resolved earlier. A selector that matches nothing is a normal outcome,
not an error. Query errors are logged and degrade to UNKNOWN. Only
resolve() raises, so callers can tell "not found" from "query failed".
"""

from __future__ import annotations

from typing import Any

import structlog

from ps5_availability.config import TriState
from ps5_availability.errors import ProbeFailure

logger = structlog.get_logger(__name__)


def _is_handle(value: Any) -> bool:
    return callable(getattr(value, "inner_text", None))


class DomProbe:
    """
    DOM queries for the check engine.

    The session only needs an async ``query_selector(selector)`` returning
    an element handle or None. Handles need an async ``inner_text()``.
    """

    async def resolve(self, session: Any, selector: str) -> Any | None:
        """
        Query a selector once so several probes can share the handle.

        Returns None when the selector matches nothing.

        Raises:
            ProbeFailure: the query itself raised.
        """
        return await self._query(session, selector)

    async def exists(self, session: Any, target: Any) -> TriState:
        """
        TRUE iff a node resolves for the selector, or the handle is non-null.

        Returns UNKNOWN when the DOM query itself fails or the target is of
        an unsupported kind.
        """
        if target is None:
            return TriState.FALSE
        if not isinstance(target, str):
            if _is_handle(target):
                return TriState.TRUE
            logger.debug(
                "probe_unsupported_target",
                target_type=type(target).__name__,
                source="probe",
            )
            return TriState.UNKNOWN

        try:
            element = await self._query(session, target)
        except ProbeFailure as e:
            logger.debug("probe_exists_failed", selector=target, error=str(e), source="probe")
            return TriState.UNKNOWN
        return TriState.from_bool(element is not None)

    async def text_contains(self, session: Any, target: Any, needle: str) -> TriState:
        """
        Whether the node's rendered text contains ``needle`` (case-sensitive).

        Returns UNKNOWN for a None target, a target of unsupported kind, or
        a failed query. A selector that matches no node returns FALSE.
        """
        if target is None:
            return TriState.UNKNOWN
        if not isinstance(target, str) and not _is_handle(target):
            logger.debug(
                "probe_unsupported_target",
                target_type=type(target).__name__,
                source="probe",
            )
            return TriState.UNKNOWN

        try:
            text = await self.query_text(session, target)
        except ProbeFailure as e:
            logger.debug("probe_text_failed", error=str(e), source="probe")
            return TriState.UNKNOWN

        if text is None:
            return TriState.FALSE
        return TriState.from_bool(needle in text)

    async def query_text(self, session: Any, target: Any) -> str | None:
        """
        Rendered text of the selector's node or of the handle.

        Returns None when the selector matches nothing.

        Raises:
            ProbeFailure: the query or text extraction raised.
        """
        element = target
        if isinstance(target, str):
            element = await self._query(session, target)
        if element is None:
            return None
        try:
            return await element.inner_text()
        except Exception as e:
            raise ProbeFailure(f"inner_text failed: {e}") from e

    async def _query(self, session: Any, selector: str) -> Any | None:
        try:
            return await session.query_selector(selector)
        except Exception as e:
            raise ProbeFailure(f"query_selector({selector!r}) failed: {e}") from e
