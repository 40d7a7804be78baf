"""
PS5 Availability — Result Combinator

Reduces validator outcomes into one availability verdict:

    any FALSE           -> FALSE
    all TRUE            -> TRUE
    otherwise (UNKNOWN) -> UNKNOWN

The reduction is order independent. Malformed evidence is a programming
error upstream; it is logged and treated as UNKNOWN instead of raising.
"""

from __future__ import annotations

from typing import Any

import structlog

from ps5_availability.config import TriState
from ps5_availability.engine.validator import Validator, ValidatorOutcome
from ps5_availability.errors import CombinationInputFailure

logger = structlog.get_logger(__name__)


def _collect_results(outcomes: Any) -> list[TriState]:
    if not isinstance(outcomes, (list, tuple)):
        raise CombinationInputFailure(
            f"Expected a list of validator outcomes, got {type(outcomes).__name__}"
        )
    if not outcomes:
        raise CombinationInputFailure("No validator outcomes to combine")

    results: list[TriState] = []
    for item in outcomes:
        if not isinstance(item, (ValidatorOutcome, Validator)):
            raise CombinationInputFailure(
                f"Not a validator outcome: {type(item).__name__}"
            )
        results.append(item.result)
    return results


def combine_outcomes(outcomes: Any) -> TriState:
    """
    Combine an ordered sequence of validator outcomes into a TriState.

    Args:
        outcomes: list or tuple of ValidatorOutcome (or Validator) objects.

    Returns:
        FALSE if any outcome is FALSE, TRUE if all are TRUE, else UNKNOWN.
    """
    try:
        results = _collect_results(outcomes)
    except CombinationInputFailure as e:
        logger.error(
            "combination_input_invalid",
            error=str(e),
            source="combinator",
        )
        return TriState.UNKNOWN

    if TriState.FALSE in results:
        return TriState.FALSE
    if all(r is TriState.TRUE for r in results):
        return TriState.TRUE
    return TriState.UNKNOWN
