"""
PS5 Availability — Validators

A Validator names one DOM check and holds its tri-state result. The result
starts as UNKNOWN and is assigned once, after the probe has run. The frozen
ValidatorOutcome is what gets stored on a CheckJob.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from ps5_availability.config import TriState

_GLYPHS = {
    TriState.TRUE: "✓",
    TriState.FALSE: "x",
    TriState.UNKNOWN: "?",
}


class ValidatorOutcome(BaseModel):
    """Immutable record of a single validator result."""

    model_config = ConfigDict(frozen=True)

    description: str
    result: TriState = TriState.UNKNOWN

    def render(self) -> str:
        """Glyph plus description, e.g. '✓ Article header contains ...'."""
        return f"{_GLYPHS[self.result]} {self.description}"


class Validator:
    """
    Wraps one boolean-valued DOM check with a human-readable description.

    Usage:
        check = Validator("Purchase button is rendered")
        check.result = await probe.exists(session, handle)
        job.record_evaluation(check.outcome())
    """

    def __init__(self, description: str) -> None:
        self.description = description
        self._result = TriState.UNKNOWN
        self._assigned = False

    @property
    def result(self) -> TriState:
        return self._result

    @result.setter
    def result(self, value: TriState | bool | None) -> None:
        if self._assigned:
            raise RuntimeError(f"Validator result already assigned: {self.description!r}")
        if not isinstance(value, TriState):
            value = TriState.from_bool(value)
        self._result = value
        self._assigned = True

    @property
    def assigned(self) -> bool:
        return self._assigned

    def outcome(self) -> ValidatorOutcome:
        return ValidatorOutcome(description=self.description, result=self._result)

    def render(self) -> str:
        return self.outcome().render()

    def __repr__(self) -> str:
        return f"Validator({self.description!r}, result={self._result.value})"
