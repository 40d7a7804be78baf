from ps5_availability.engine.combinator import combine_outcomes
from ps5_availability.engine.validator import Validator, ValidatorOutcome

__all__ = [
    "combine_outcomes",
    "Validator",
    "ValidatorOutcome",
]
