"""PS5 Availability — Check jobs"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, Field

from ps5_availability.config import CheckState, TriState
from ps5_availability.engine.validator import ValidatorOutcome


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CheckJob(BaseModel):
    """
    Record of one retailer check: identity, evidence and verdict.

    Owned by exactly one RetailerCheck. Recording methods refuse to mutate
    the job once it has reached a terminal state.
    """
    id: uuid.UUID = Field(default_factory=uuid.uuid4)
    retailer: str
    created_at: datetime = Field(default_factory=_utcnow)
    completed_at: datetime | None = None
    state: CheckState = CheckState.CREATED
    structural_outcome: ValidatorOutcome | None = None
    evaluation_outcomes: list[ValidatorOutcome] = Field(default_factory=list)
    final_result: TriState = TriState.UNKNOWN
    error: str | None = None

    @property
    def is_finished(self) -> bool:
        return self.state.is_terminal

    @property
    def verdict(self) -> str:
        """'available' | 'unavailable' | 'indeterminate' (or the current state)."""
        return self.state.value

    def _ensure_open(self) -> None:
        if self.is_finished:
            raise RuntimeError(f"CheckJob {self.id} is already finished ({self.state.value})")

    def set_state(self, state: CheckState) -> None:
        self._ensure_open()
        self.state = state

    def record_structural(self, outcome: ValidatorOutcome) -> None:
        self._ensure_open()
        self.structural_outcome = outcome

    def record_evaluation(self, outcome: ValidatorOutcome) -> None:
        self._ensure_open()
        self.evaluation_outcomes.append(outcome)

    def finish(
        self,
        state: CheckState,
        result: TriState,
        error: str | None = None,
    ) -> None:
        """Move the job to a terminal state. No mutation is allowed afterwards."""
        self._ensure_open()
        if not state.is_terminal:
            raise ValueError(f"finish() requires a terminal state, got {state.value}")
        self.final_result = result
        self.error = error
        self.completed_at = _utcnow()
        self.state = state
