"""
PS5 Availability — Retailer Check (state machine)

    CREATED -> NAVIGATED -> CONSENT_RESOLVED -> STRUCTURALLY_VALIDATED
            -> EVALUATED -> AVAILABLE | UNAVAILABLE | INDETERMINATE

Any non-terminal state may drop to INDETERMINATE. The engine is shared by
every retailer; the RetailerDescriptor supplies URL, selectors and phrases.
"""

from __future__ import annotations

from typing import Any

from ps5_availability.config import CheckState, TriState
from ps5_availability.engine.combinator import combine_outcomes
from ps5_availability.engine.validator import Validator
from ps5_availability.errors import ConsentHandlingFailure, NavigationFailure, ProbeFailure
from ps5_availability.reporting import ReportingSink
from ps5_availability.scraper import CheckJob
from ps5_availability.scraper.probe import DomProbe
from ps5_availability.scraper.retailers import RetailerDescriptor

_TRANSITIONS: dict[CheckState, frozenset[CheckState]] = {
    CheckState.CREATED: frozenset({CheckState.NAVIGATED}),
    CheckState.NAVIGATED: frozenset({CheckState.CONSENT_RESOLVED}),
    CheckState.CONSENT_RESOLVED: frozenset({CheckState.STRUCTURALLY_VALIDATED}),
    CheckState.STRUCTURALLY_VALIDATED: frozenset({CheckState.EVALUATED}),
    CheckState.EVALUATED: frozenset(
        {CheckState.AVAILABLE, CheckState.UNAVAILABLE}
    ),
}

_VERDICTS: dict[TriState, CheckState] = {
    TriState.TRUE: CheckState.AVAILABLE,
    TriState.FALSE: CheckState.UNAVAILABLE,
    TriState.UNKNOWN: CheckState.INDETERMINATE,
}


class RetailerCheck:
    """
    Runs one availability check against one session.

    The check owns its CheckJob and the session for its whole lifetime. The
    caller releases the session once run() returns or raises.

    Usage:
        check = RetailerCheck(descriptor, session, sink)
        job = await check.run()
    """

    def __init__(
        self,
        descriptor: RetailerDescriptor,
        session: Any,
        sink: ReportingSink,
        probe: DomProbe | None = None,
    ) -> None:
        self.descriptor = descriptor
        self.session = session
        self.sink = sink
        self.probe = probe or DomProbe()
        self.job = CheckJob(retailer=descriptor.key)

    @property
    def state(self) -> CheckState:
        return self.job.state

    def _advance(self, target: CheckState, result: TriState = TriState.UNKNOWN) -> None:
        allowed = _TRANSITIONS.get(self.state, frozenset())
        if target not in allowed:
            raise RuntimeError(
                f"Illegal transition {self.state.value} -> {target.value}"
            )
        if target.is_terminal:
            self.job.finish(target, result)
        else:
            self.job.set_state(target)

    def _abort(self, reason: str) -> None:
        """Drop to INDETERMINATE from any non-terminal state."""
        self.job.finish(CheckState.INDETERMINATE, TriState.UNKNOWN, error=reason)

    def _conclude(self, result: TriState) -> None:
        target = _VERDICTS[result]
        if target is CheckState.INDETERMINATE:
            self._abort("Evaluation evidence was inconclusive")
            return
        self._advance(target, result)

    async def run(self) -> CheckJob:
        """
        Drive the check to a terminal state.

        Raises:
            NavigationFailure: page load failed; the job is already
                finished as INDETERMINATE when this propagates.
        """
        name = self.descriptor.display_name
        self.sink.info("retailer_check_started", retailer=name, job_id=str(self.job.id))

        await self.navigate()
        await self.resolve_consent()

        if not await self.validate_structure():
            self.sink.error(
                "structural_validation_failed",
                retailer=name,
                outcome=self.job.structural_outcome.render(),
            )
            return self.job

        self.sink.debug("structural_validation_passed", retailer=name)
        result = await self.evaluate()
        self._conclude(result)

        if self.state is CheckState.AVAILABLE:
            self.sink.info("unit_available", retailer=name)
        elif self.state is CheckState.UNAVAILABLE:
            self.sink.info("unit_unavailable", retailer=name)
        else:
            self.sink.warning("unit_availability_indeterminate", retailer=name)
        return self.job

    async def navigate(self) -> None:
        """CREATED -> NAVIGATED."""
        url = self.descriptor.target_url
        self.sink.debug("navigating", url=url)
        try:
            await self.session.navigate(url)
        except NavigationFailure as e:
            self._abort(f"NavigationFailure: {e}")
            raise
        self._advance(CheckState.NAVIGATED)

    async def resolve_consent(self) -> None:
        """NAVIGATED -> CONSENT_RESOLVED. Best effort; never raises."""
        try:
            await self._dismiss_consent_prompt()
        except ConsentHandlingFailure as e:
            self.sink.warning(
                "consent_handling_failed",
                retailer=self.descriptor.display_name,
                error=str(e),
            )
        self._advance(CheckState.CONSENT_RESOLVED)

    async def _dismiss_consent_prompt(self) -> None:
        selector = self.descriptor.consent_prompt_selector
        if not selector:
            return
        try:
            prompt = await self.session.query_selector(selector)
            if prompt is None:
                self.sink.debug("consent_prompt_absent", retailer=self.descriptor.display_name)
                return
            self.sink.debug("consent_prompt_detected", retailer=self.descriptor.display_name)
            await self.session.click(selector)
            await self.session.settle()
            await self.session.navigate(self.descriptor.target_url)
        except Exception as e:
            raise ConsentHandlingFailure(str(e)) from e

    async def validate_structure(self) -> bool:
        """
        CONSENT_RESOLVED -> STRUCTURALLY_VALIDATED, or INDETERMINATE.

        Confirms the page is the expected product page before any
        availability signal is trusted.
        """
        expected = self.descriptor.expected_structural_text
        validator = Validator(f"Article header contains '{expected}'")
        validator.result = await self.probe.text_contains(
            self.session, self.descriptor.structural_selector, expected
        )
        self.sink.debug("validator_result", outcome=validator.render())
        self.job.record_structural(validator.outcome())

        if validator.result is not TriState.TRUE:
            self._abort(
                f"Structural validation {validator.result.value}: {validator.description}"
            )
            return False

        self._advance(CheckState.STRUCTURALLY_VALIDATED)
        return True

    async def evaluate(self) -> TriState:
        """
        STRUCTURALLY_VALIDATED -> EVALUATED.

        All three probes run even when an earlier one fails so the job keeps
        the full evidence.
        """
        d = self.descriptor
        selectors = d.availability_selectors

        sold_out = Validator(f"Out of stock notice does not contain '{d.expected_out_of_stock_text}'")
        sold_out.result = (
            await self.probe.text_contains(
                self.session, selectors.out_of_stock_notice, d.expected_out_of_stock_text
            )
        ).negate()

        button_exists = Validator("Purchase button is rendered")
        button_label = Validator(f"Purchase button contains '{d.expected_purchase_action_text}'")
        try:
            button = await self.probe.resolve(self.session, selectors.purchase_action)
        except ProbeFailure as e:
            # query error is not evidence of absence
            self.sink.warning(
                "purchase_action_query_failed",
                retailer=d.display_name,
                error=str(e),
            )
            button_exists.result = TriState.UNKNOWN
            button_label.result = TriState.UNKNOWN
        else:
            button_exists.result = await self.probe.exists(self.session, button)
            button_label.result = await self.probe.text_contains(
                self.session, button, d.expected_purchase_action_text
            )

        validators = [sold_out, button_exists, button_label]
        for v in validators:
            self.sink.debug("validator_result", outcome=v.render())
            self.job.record_evaluation(v.outcome())

        self._advance(CheckState.EVALUATED)
        return combine_outcomes(self.job.evaluation_outcomes)
