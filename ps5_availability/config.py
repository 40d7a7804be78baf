"""
PS5 Availability — Configuration & Constants

Browser, navigation and logging settings. Every timeout and settle
condition lives here. No hardcoded values in the check engine.

Usage:
    from ps5_availability.config import settings
"""

from __future__ import annotations

from enum import Enum

from pydantic import Field
from pydantic_settings import BaseSettings


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class TriState(str, Enum):
    """Three-valued probe result. UNKNOWN means "could not determine"."""
    TRUE = "true"
    FALSE = "false"
    UNKNOWN = "unknown"

    @classmethod
    def from_bool(cls, value: bool | None) -> "TriState":
        if value is None:
            return cls.UNKNOWN
        return cls.TRUE if value else cls.FALSE

    def negate(self) -> "TriState":
        if self is TriState.TRUE:
            return TriState.FALSE
        if self is TriState.FALSE:
            return TriState.TRUE
        return TriState.UNKNOWN


class CheckState(str, Enum):
    """Retailer check lifecycle states."""
    CREATED = "created"
    NAVIGATED = "navigated"
    CONSENT_RESOLVED = "consent_resolved"
    STRUCTURALLY_VALIDATED = "structurally_validated"
    EVALUATED = "evaluated"
    AVAILABLE = "available"          # terminal
    UNAVAILABLE = "unavailable"      # terminal
    INDETERMINATE = "indeterminate"  # terminal

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATES


TERMINAL_STATES = frozenset(
    {CheckState.AVAILABLE, CheckState.UNAVAILABLE, CheckState.INDETERMINATE}
)


class Edition(str, Enum):
    """Console editions a retailer page can list."""
    DISC = "disc"
    DIGITAL = "digital"


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

class Settings(BaseSettings):
    """
    Central configuration for PS5 Availability.

    Loads from environment variables with fallback defaults.
    """

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # -----------------------------------------------------------------------
    # Logging
    # -----------------------------------------------------------------------
    ENVIRONMENT: str = "production"         # "development" switches to DEBUG
    LOG_LEVEL: str = ""                     # Explicit override, e.g. "WARNING"

    # -----------------------------------------------------------------------
    # Browser process
    # -----------------------------------------------------------------------
    BROWSER_HEADLESS: bool = True
    BROWSER_ARGS: list[str] = Field(default_factory=lambda: ["--start-maximized"])
    BROWSER_LAUNCH_TIMEOUT_MS: int = 30000
    VIEWPORT_WIDTH: int = 1280
    VIEWPORT_HEIGHT: int = 1280

    # -----------------------------------------------------------------------
    # Navigation
    # Playwright load states: "load" | "domcontentloaded" | "networkidle"
    # -----------------------------------------------------------------------
    NAVIGATION_WAIT_UNTIL: str = "networkidle"
    SETTLE_WAIT_UNTIL: str = "networkidle"
    NAVIGATION_TIMEOUT_MS: int = 30000

    # -----------------------------------------------------------------------
    # Defaults
    # -----------------------------------------------------------------------
    DEFAULT_EDITION: Edition = Edition.DISC

    @property
    def effective_log_level(self) -> str:
        """LOG_LEVEL if set, else DEBUG for development and INFO otherwise."""
        if self.LOG_LEVEL:
            return self.LOG_LEVEL.upper()
        if self.ENVIRONMENT.lower() == "development":
            return "DEBUG"
        return "INFO"


# Singleton instance
settings = Settings()
