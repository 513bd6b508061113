"""Finite state machine driving the subject -> garment -> result flow."""

from __future__ import annotations

import itertools
import logging
from dataclasses import dataclass, replace
from enum import Enum

from tryon.entitlement import EntitlementGate, EntitlementState
from tryon.imggen.image_gen import GENERIC_FAILURE_MESSAGE, GenerationClient, GenerationError
from tryon.metrics.prometheus_exporter import (
    generation_attempts_total,
    generation_outcomes_total,
    quota_denied_total,
)

logger = logging.getLogger(__name__)

INCOMPLETE_INPUT_MESSAGE = "لطفاً تمام تصاویر مورد نیاز را آپلود کنید."
QUOTA_EXCEEDED_MESSAGE = "آپلودهای رایگان شما تمام شده است."


class WorkflowStep(str, Enum):
    """Stages of the try-on flow."""

    AWAITING_SUBJECT_IMAGE = "awaiting_subject_image"
    AWAITING_GARMENT_IMAGE = "awaiting_garment_image"
    GENERATING = "generating"
    SHOWING_RESULT = "showing_result"


@dataclass(slots=True, frozen=True)
class WorkflowState:
    """Immutable snapshot of the workflow; replaced on every transition."""

    step: WorkflowStep = WorkflowStep.AWAITING_SUBJECT_IMAGE
    subject_image: bytes | None = None
    garment_image: bytes | None = None
    result_image: bytes | None = None
    last_error: str | None = None


class WorkflowError(RuntimeError):
    """Base class for intents refused by the workflow."""


class IncompleteInputError(WorkflowError):
    """Raised when generation is requested before both images are present."""

    def __init__(self, message: str = INCOMPLETE_INPUT_MESSAGE) -> None:
        super().__init__(message)


class QuotaExceededError(WorkflowError):
    """Raised when the entitlement gate refuses a new attempt."""

    def __init__(self, entitlement: EntitlementState, message: str = QUOTA_EXCEEDED_MESSAGE) -> None:
        self.entitlement = entitlement
        super().__init__(message)


class WorkflowObserver:
    """Receives state pushes from the workflow. Methods default to no-ops."""

    async def state_changed(self, state: WorkflowState, entitlement: EntitlementState) -> None:
        return None

    async def quota_exceeded(self, entitlement: EntitlementState) -> None:
        return None


class TryOnWorkflow:
    """Owns the workflow state and sequences intents and the generation call."""

    def __init__(
        self,
        client: GenerationClient,
        gate: EntitlementGate,
        observer: WorkflowObserver | None = None,
    ) -> None:
        self._client = client
        self._gate = gate
        self._observer = observer or WorkflowObserver()
        self._state = WorkflowState()
        self._attempt_ids = itertools.count(1)
        self._current_attempt: int | None = None

    @property
    def state(self) -> WorkflowState:
        return self._state

    @property
    def entitlement(self) -> EntitlementState:
        return self._gate.state

    async def provide_subject_image(self, image: bytes) -> None:
        """Store (or replace) the subject photo. The step is left as is."""

        await self._transition(replace(self._state, subject_image=image))

    async def advance_to_garment_step(self) -> bool:
        """Move to garment upload; ignored when no subject photo is present."""

        state = self._state
        if state.step is not WorkflowStep.AWAITING_SUBJECT_IMAGE or state.subject_image is None:
            logger.debug("Advance ignored in step %s.", state.step.value)
            return False
        await self._transition(replace(state, step=WorkflowStep.AWAITING_GARMENT_IMAGE))
        return True

    async def provide_garment_image(self, image: bytes) -> bool:
        """Store the garment photo; only accepted while awaiting it."""

        state = self._state
        if state.step is not WorkflowStep.AWAITING_GARMENT_IMAGE:
            logger.debug("Garment image ignored in step %s.", state.step.value)
            return False
        await self._transition(replace(state, garment_image=image))
        return True

    async def submit_generation(self) -> WorkflowState:
        """Check the quota, run one generation attempt and apply its outcome.

        Raises :class:`IncompleteInputError` when an image is missing and
        :class:`QuotaExceededError` when the free quota is exhausted. A call
        made while another attempt is in flight is a no-op.
        """

        state = self._state
        if state.step in (WorkflowStep.GENERATING, WorkflowStep.SHOWING_RESULT):
            logger.info("Generation request ignored in step %s.", state.step.value)
            return state
        if state.subject_image is None or state.garment_image is None:
            raise IncompleteInputError()
        if state.step is not WorkflowStep.AWAITING_GARMENT_IMAGE:
            logger.info("Generation request ignored in step %s.", state.step.value)
            return state

        entitlement = self._gate.state
        if not entitlement.can_attempt:
            quota_denied_total.inc()
            logger.info("Generation refused: free quota exhausted.")
            try:
                await self._observer.quota_exceeded(entitlement)
            except Exception:
                logger.exception("Observer failed to handle the quota signal.")
            raise QuotaExceededError(entitlement)

        attempt = next(self._attempt_ids)
        self._current_attempt = attempt
        subject, garment = state.subject_image, state.garment_image
        await self._transition(
            replace(state, step=WorkflowStep.GENERATING, result_image=None, last_error=None),
        )
        if not self._is_current(attempt):
            return self._state

        generation_attempts_total.inc()
        logger.info("Dispatching generation attempt %s.", attempt)
        try:
            result = await self._client.generate(subject, garment)
        except GenerationError as exc:
            await self._apply_failure(attempt, subject, garment, str(exc) or GENERIC_FAILURE_MESSAGE)
        except Exception:
            logger.exception("Unexpected failure in generation attempt %s.", attempt)
            await self._apply_failure(attempt, subject, garment, GENERIC_FAILURE_MESSAGE)
        else:
            await self._apply_success(attempt, subject, garment, result)
        return self._state

    async def reset(self) -> None:
        """Return to the initial step from anywhere, abandoning any attempt."""

        if self._current_attempt is not None:
            logger.info("Abandoning generation attempt %s on reset.", self._current_attempt)
        self._current_attempt = None
        await self._transition(WorkflowState())

    async def grant_premium(self) -> None:
        self._gate.grant_premium()
        await self._notify()

    def _is_current(self, attempt: int) -> bool:
        return self._current_attempt == attempt and self._state.step is WorkflowStep.GENERATING

    def _same_inputs(self, subject: bytes, garment: bytes) -> bool:
        return self._state.subject_image is subject and self._state.garment_image is garment

    async def _apply_success(self, attempt: int, subject: bytes, garment: bytes, image: bytes) -> None:
        if not self._is_current(attempt):
            generation_outcomes_total.labels(outcome="discarded").inc()
            logger.info("Discarding stale result of attempt %s.", attempt)
            return
        self._current_attempt = None
        if not self._same_inputs(subject, garment):
            generation_outcomes_total.labels(outcome="discarded").inc()
            logger.info("Inputs changed during attempt %s; result discarded.", attempt)
            await self._transition(replace(self._state, step=WorkflowStep.AWAITING_GARMENT_IMAGE))
            return
        generation_outcomes_total.labels(outcome="success").inc()
        self._gate.record_attempt()
        await self._transition(
            replace(self._state, step=WorkflowStep.SHOWING_RESULT, result_image=image, last_error=None),
        )

    async def _apply_failure(self, attempt: int, subject: bytes, garment: bytes, message: str) -> None:
        if not self._is_current(attempt):
            generation_outcomes_total.labels(outcome="discarded").inc()
            logger.info("Discarding stale failure of attempt %s.", attempt)
            return
        self._current_attempt = None
        generation_outcomes_total.labels(outcome="failure").inc()
        error = message if self._same_inputs(subject, garment) else None
        await self._transition(
            replace(self._state, step=WorkflowStep.AWAITING_GARMENT_IMAGE, last_error=error),
        )

    async def _transition(self, new_state: WorkflowState) -> None:
        previous = self._state.step
        self._state = new_state
        if previous is not new_state.step:
            logger.info("Workflow step %s -> %s.", previous.value, new_state.step.value)
        await self._notify()

    async def _notify(self) -> None:
        # the state is already committed; observer errors are only logged
        try:
            await self._observer.state_changed(self._state, self._gate.state)
        except Exception:
            logger.exception("Observer failed to render step %s.", self._state.step.value)
