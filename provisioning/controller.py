# provisioning/controller.py
"""Step state machine behind the create-VM flow; holds no UI."""
from __future__ import annotations

from dataclasses import asdict
from typing import Callable, Dict, List, Optional

from logger import log
from provisioning.errors import IncompleteRequestError, ProvisioningError
from provisioning.forms import AggregatedRequest, StepForm, build_forms
from provisioning.gateway import ServerRecord, SubmissionGateway
from provisioning.resources import ResourceProvider, Resources
from state import STEP_SEQUENCE, Step, WizardState

DEFAULT_MAX_SUBMIT_ATTEMPTS = 3


def error_message(exc: Exception) -> str:
    if isinstance(exc, ProvisioningError):
        return exc.message
    return str(exc) or "An unexpected error occurred"


class WizardController:

    def __init__(
        self,
        provider: ResourceProvider,
        gateway: SubmissionGateway,
        on_submitted: Optional[Callable[[ServerRecord], None]] = None,
        max_submit_attempts: int = DEFAULT_MAX_SUBMIT_ATTEMPTS,
    ) -> None:
        if max_submit_attempts < 1:
            raise ValueError("max_submit_attempts must be at least 1")
        self.provider = provider
        self.gateway = gateway
        self.max_submit_attempts = max_submit_attempts
        self.forms: Dict[Step, StepForm] = build_forms()
        self.state = WizardState()
        self.resources: Optional[Resources] = None
        self._submitted_listeners: List[Callable[[ServerRecord], None]] = []
        if on_submitted is not None:
            self._submitted_listeners.append(on_submitted)

    def add_submitted_listener(self, callback: Callable[[ServerRecord], None]) -> None:
        self._submitted_listeners.append(callback)

    @property
    def current_step(self) -> Step:
        return self.state.current_step

    @property
    def active_form(self) -> Optional[StepForm]:
        return self.forms.get(self.state.current_step)

    def is_completed(self, step: Step) -> bool:
        return step in self.state.completed

    def pending_steps(self) -> List[Step]:
        """Steps before Summary that have not passed validation since their last edit."""
        return [s for s in STEP_SEQUENCE[:-1] if s not in self.state.completed]

    # -- Resources ---------------------------------------------------------

    def load_resources(self) -> bool:
        try:
            resources = self.provider.list_resources()
        except Exception as e:
            self.state.resource_error = error_message(e)
            log.error("Resource fetch failed: %s", e)
            return False
        self.resources = resources
        self.state.resource_error = None
        return True

    # -- Editing and navigation -------------------------------------------

    def edit(self, step: Step, **values: str) -> bool:
        """Record raw input for ``step``; later steps are left untouched."""
        form = self.forms.get(Step(step))
        if form is None:
            raise ValueError(f"Step {Step(step).value!r} has no editable fields")
        changed = form.set_values(**values)
        if changed:
            self.state.completed.discard(form.step)
            self.state.submit_attempts = 0
            log.debug("Step %s edited: %s", form.step.value, sorted(values))
        return changed

    def advance(self) -> bool:
        state = self.state
        step = state.current_step
        form = self.forms.get(step)
        if form is None:
            log.debug("advance() ignored on %s", step.value)
            return False

        if not form.validate(self.resources):
            state.field_errors = dict(form.errors)
            log.info("Step %s: validation failed on %s", step.value, sorted(form.errors))
            return False

        record = form.to_record()
        aggregate = dict(state.aggregate)
        aggregate.update(asdict(record))

        state.aggregate = aggregate
        state.step_data[step] = record
        state.completed.add(step)
        state.field_errors = {}
        if not state.is_last_step:
            state.current_step = STEP_SEQUENCE[step.position + 1]
        log.info("Step %s completed -> %s", step.value, state.current_step.value)
        return True

    def retreat(self) -> bool:
        state = self.state
        if state.is_first_step:
            return False
        previous = STEP_SEQUENCE[state.current_step.position - 1]
        log.info("Step %s -> back to %s", state.current_step.value, previous.value)
        self._move_to(previous)
        return True

    def go_to(self, step: Step) -> bool:
        """Jump directly to ``step``; forward only past completed steps."""
        target = Step(step)
        if target.position > self.state.current_step.position:
            blocking = [s for s in STEP_SEQUENCE[:target.position] if s not in self.state.completed]
            if blocking:
                log.info("Jump to %s refused: %s not completed",
                         target.value, ", ".join(s.value for s in blocking))
                return False
        log.info("Step %s -> jump to %s", self.state.current_step.value, target.value)
        self._move_to(target)
        return True

    def _move_to(self, step: Step) -> None:
        self.state.current_step = step
        self.state.field_errors = {}
        self.state.submit_error = None
        self.state.submit_attempts = 0

    def reset(self) -> None:
        for form in self.forms.values():
            form.clear()
        self.state = WizardState()
        log.info("Wizard reset")

    # -- Submission ----------------------------------------------------------

    @property
    def can_submit(self) -> bool:
        state = self.state
        return (
            state.current_step == Step.SUMMARY
            and not state.submitting
            and not self.pending_steps()
            and state.submit_attempts < self.max_submit_attempts
        )

    def submit(self) -> Optional[ServerRecord]:
        state = self.state
        if state.current_step != Step.SUMMARY:
            log.warning("submit() refused on step %s", state.current_step.value)
            return None
        if state.submitting:
            log.warning("submit() refused: a submission is already in flight")
            return None
        pending = self.pending_steps()
        if pending:
            state.submit_error = (
                "Complete these steps before creating the VM: "
                + ", ".join(s.label for s in pending)
            )
            return None
        if state.submit_attempts >= self.max_submit_attempts:
            state.submit_error = (
                f"Creation failed {state.submit_attempts} times. "
                "Go back and review your configuration before retrying."
            )
            return None

        try:
            request = AggregatedRequest.from_aggregate(state.aggregate)
        except IncompleteRequestError as e:
            state.submit_error = e.message
            log.error("Submission blocked: %s", e.message)
            return None

        state.submitting = True
        state.submit_error = None
        try:
            record = self.gateway.create_from_aggregate(request)
        except Exception as e:
            state.submitting = False
            state.submit_attempts += 1
            state.submit_error = error_message(e)
            log.error("Submission failed (attempt %d/%d): %s",
                      state.submit_attempts, self.max_submit_attempts, e)
            return None

        state.submitting = False
        log.info("Submitted %s -> server %s (%s)", request.masked(), record.id, record.status)
        self.reset()
        for callback in self._submitted_listeners:
            callback(record)
        return record
