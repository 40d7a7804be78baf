"""Tests for Validator, ValidatorOutcome and TriState."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from ps5_availability.config import TriState
from ps5_availability.engine.validator import Validator, ValidatorOutcome


def test_validator_starts_unknown() -> None:
    v = Validator("Purchase button is rendered")
    assert v.result is TriState.UNKNOWN
    assert v.assigned is False


def test_validator_accepts_bool_and_none() -> None:
    yes, no, unset = Validator("a"), Validator("b"), Validator("c")
    yes.result = True
    no.result = False
    unset.result = None
    assert yes.result is TriState.TRUE
    assert no.result is TriState.FALSE
    assert unset.result is TriState.UNKNOWN


def test_validator_result_assigned_once() -> None:
    v = Validator("Article header contains 'PlayStation 5'")
    v.result = TriState.TRUE
    with pytest.raises(RuntimeError, match="already assigned"):
        v.result = TriState.FALSE
    assert v.result is TriState.TRUE


def test_outcome_is_frozen() -> None:
    outcome = ValidatorOutcome(description="x", result=TriState.TRUE)
    with pytest.raises(ValidationError):
        outcome.result = TriState.FALSE  # type: ignore[misc]


@pytest.mark.parametrize(
    ("result", "glyph"),
    [(TriState.TRUE, "✓"), (TriState.FALSE, "x"), (TriState.UNKNOWN, "?")],
)
def test_render_glyphs(result: TriState, glyph: str) -> None:
    v = Validator("Purchase button contains 'BESTEL NU'")
    v.result = result
    assert v.render() == f"{glyph} Purchase button contains 'BESTEL NU'"
    assert v.outcome().render() == v.render()


def test_tristate_negate() -> None:
    assert TriState.TRUE.negate() is TriState.FALSE
    assert TriState.FALSE.negate() is TriState.TRUE
    assert TriState.UNKNOWN.negate() is TriState.UNKNOWN
