"""
PS5 Availability — Command-line Entrypoint

Configures structlog, runs the requested retailer checks and prints one
summary block per job.

Run via:
    python -m ps5_availability.main -s bolnl coolbluenl -e disc
    ps5-availability -s mediamarktnl
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Sequence

import structlog

from ps5_availability import __version__
from ps5_availability.config import Edition, settings
from ps5_availability.reporting import ReportingSink
from ps5_availability.scraper import CheckJob
from ps5_availability.scraper.retailers import RETAILERS
from ps5_availability.scraper.runner import check_availability


# ---------------------------------------------------------------------------
# Structlog Configuration
# ---------------------------------------------------------------------------


def configure_logging(log_level: str = "INFO") -> None:
    """
    Set up structured logging with JSON output.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR).
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, log_level.upper()),
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="ps5-availability",
        description="Check PS5 availability at one or more retailers.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  ps5-availability -s bolnl
  ps5-availability -s bolnl coolbluenl mediamarktnl -e disc
""",
    )
    parser.add_argument(
        "-s",
        "--store",
        dest="stores",
        nargs="+",
        required=True,
        help=f"Store(s) you want to check: {', '.join(sorted(RETAILERS))}.",
    )
    parser.add_argument(
        "-e",
        "--edition",
        type=Edition,
        default=settings.DEFAULT_EDITION,
        choices=list(Edition),
        help="disc or digital (default: DEFAULT_EDITION setting, disc).",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Override the log level derived from ENVIRONMENT.",
    )
    parser.add_argument(
        "--headful",
        action="store_true",
        help="Show the browser window instead of running headless.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def format_job(job: CheckJob) -> str:
    """Plain-text summary block for one job."""
    lines = [f"{job.retailer}: {job.verdict.upper()}"]
    if job.structural_outcome is not None:
        lines.append(f"  {job.structural_outcome.render()}")
    for outcome in job.evaluation_outcomes:
        lines.append(f"  {outcome.render()}")
    if job.error:
        lines.append(f"  error: {job.error}")
    return "\n".join(lines)


async def main(argv: Sequence[str] | None = None) -> int:
    """
    Run the checks requested on the command line.

    Returns:
        Process exit code: 0 when the batch completed, 1 otherwise.
    """
    args = parse_args(argv)
    configure_logging(args.log_level or settings.effective_log_level)
    logger = structlog.get_logger(__name__)

    config = settings
    if args.headful:
        config = settings.model_copy(update={"BROWSER_HEADLESS": False})

    print(
        f"Checking availability for the PS5 {args.edition.value} edition "
        f"on {', '.join(args.stores)}..."
    )

    sink = ReportingSink()
    try:
        jobs = await check_availability(args.stores, config, sink, edition=args.edition)
    except Exception as e:
        logger.error(
            "ps5_availability_fatal_error",
            error=str(e),
            error_type=type(e).__name__,
        )
        return 1

    for job in jobs:
        print(format_job(job))
    return 0


def cli() -> None:
    sys.exit(asyncio.run(main()))


if __name__ == "__main__":
    cli()
