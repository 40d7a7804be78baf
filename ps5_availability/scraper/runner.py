"""
PS5 Availability — Job Runner (batch orchestrator)

Runs retailer checks strictly one after another:

1. Resolve the key against the registry (bad key -> error record, continue)
2. Open one isolated session
3. Drive the RetailerCheck to a terminal state
4. Release the session

Every session and the browser process are released in a cleanup phase that
runs whatever happened during the batch.
"""

from __future__ import annotations

from typing import Any, Protocol, Sequence

from ps5_availability.config import CheckState, Edition, Settings, TriState
from ps5_availability.config import settings as default_settings
from ps5_availability.errors import CheckError, RegistryLookupFailure
from ps5_availability.reporting import ReportingSink
from ps5_availability.scraper import CheckJob
from ps5_availability.scraper.browser import BrowserProcess
from ps5_availability.scraper.check import RetailerCheck
from ps5_availability.scraper.probe import DomProbe
from ps5_availability.scraper.retailers import get_retailer


class SessionProvider(Protocol):
    """Session factory and teardown contract (BrowserProcess implements it)."""

    async def open_session(self, locale: str | None = None) -> Any: ...

    async def close_session(self, session: Any) -> None: ...

    async def close(self) -> None: ...


class JobRunner:
    """
    Sequential executor for a batch of retailer checks.

    Usage:
        runner = JobRunner(sink)
        jobs = await runner.run_all(["bolnl", "coolbluenl"], browser)
    """

    def __init__(
        self,
        sink: ReportingSink,
        edition: Edition | None = None,
        probe: DomProbe | None = None,
    ) -> None:
        self.sink = sink
        self.edition = edition
        self.probe = probe or DomProbe()

    async def run_all(
        self,
        retailer_keys: Sequence[str],
        provider: SessionProvider,
    ) -> list[CheckJob]:
        """
        Run one check per key, in input order.

        Args:
            retailer_keys: Registry keys, e.g. ["bolnl", "mediamarktnl"].
            provider: Opens and closes sessions; owns the browser process.

        Returns:
            One CheckJob per key, in input order. Unknown keys yield an
            INDETERMINATE job carrying the lookup error.
        """
        jobs: list[CheckJob] = []
        open_sessions: list[Any] = []
        self.sink.info(
            "batch_started",
            job_count=len(retailer_keys),
            retailers=list(retailer_keys),
        )

        try:
            for key in retailer_keys:
                job = await self._run_one(key, provider, open_sessions)
                self.sink.report(job)
                jobs.append(job)
            self.sink.info("batch_completed", job_count=len(jobs))
        except Exception as e:
            self.sink.error(
                "batch_failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            raise
        finally:
            await self._teardown(provider, open_sessions)

        return jobs

    async def _run_one(
        self,
        key: str,
        provider: SessionProvider,
        open_sessions: list[Any],
    ) -> CheckJob:
        try:
            descriptor = get_retailer(key, self.edition)
        except RegistryLookupFailure as e:
            self.sink.error("retailer_lookup_failed", retailer=key, error=str(e))
            job = CheckJob(retailer=key)
            job.finish(CheckState.INDETERMINATE, TriState.UNKNOWN, error=f"RegistryLookupFailure: {e}")
            return job

        session = await provider.open_session(locale=descriptor.locale)
        open_sessions.append(session)
        check = RetailerCheck(descriptor, session, self.sink, probe=self.probe)
        try:
            await check.run()
        except CheckError as e:
            self.sink.error(
                "retailer_check_failed",
                retailer=descriptor.display_name,
                error=str(e),
                error_type=type(e).__name__,
            )
        finally:
            open_sessions.remove(session)
            try:
                await provider.close_session(session)
            except Exception as e:
                self.sink.error(
                    "session_close_failed",
                    retailer=descriptor.display_name,
                    error=str(e),
                )
        return check.job

    async def _teardown(self, provider: SessionProvider, open_sessions: list[Any]) -> None:
        """Close leftover sessions first, then the browser process."""
        try:
            while open_sessions:
                session = open_sessions.pop()
                try:
                    await provider.close_session(session)
                except Exception as e:
                    self.sink.error("session_close_failed", error=str(e))
        finally:
            self.sink.debug("browser_terminating")
            try:
                await provider.close()
            except Exception as e:
                self.sink.error("browser_close_failed", error=str(e))


async def check_availability(
    retailer_keys: Sequence[str],
    config: Settings | None = None,
    sink: ReportingSink | None = None,
    edition: Edition | None = None,
) -> list[CheckJob]:
    """
    Launch the browser, run the batch and shut everything down.

    Raises:
        ValueError: no retailer keys were supplied.
    """
    if not retailer_keys:
        raise ValueError("No retailers were supplied")

    config = config or default_settings
    sink = sink or ReportingSink()
    sink.info("environment_initializing", retailers=list(retailer_keys))

    browser = await BrowserProcess.launch(config)
    runner = JobRunner(sink, edition=edition)
    return await runner.run_all(retailer_keys, browser)
