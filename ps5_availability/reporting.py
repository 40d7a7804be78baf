"""
PS5 Availability — Reporting Sink

Structured log events and final results for one batch of checks. A sink is
created per batch and handed to the JobRunner and each RetailerCheck, so
every event carries the same batch_id.
"""

from __future__ import annotations

import uuid
from typing import Any

import structlog

from ps5_availability.scraper import CheckJob


class ReportingSink:
    """Collects CheckJob results and emits structlog events for one batch."""

    def __init__(self, logger: Any | None = None, batch_id: str | None = None) -> None:
        self.batch_id = batch_id or uuid.uuid4().hex[:12]
        base = logger or structlog.get_logger("ps5_availability")
        self._logger = base.bind(batch_id=self.batch_id)
        self.jobs: list[CheckJob] = []

    def debug(self, event: str, **fields: Any) -> None:
        self._logger.debug(event, **fields)

    def info(self, event: str, **fields: Any) -> None:
        self._logger.info(event, **fields)

    def warning(self, event: str, **fields: Any) -> None:
        self._logger.warning(event, **fields)

    def error(self, event: str, **fields: Any) -> None:
        self._logger.error(event, **fields)

    def report(self, job: CheckJob) -> None:
        """Record a finished job and emit its verdict."""
        self.jobs.append(job)
        self._logger.info(
            "check_job_reported",
            job_id=str(job.id),
            retailer=job.retailer,
            verdict=job.verdict,
            final_result=job.final_result.value,
            evaluation=[o.render() for o in job.evaluation_outcomes],
            error=job.error,
            source="reporting",
        )
