"""Multi-step signup wizard for the Membership Signup tool.

``WizardController`` owns the step pointer, the terms flag, the submission
lifecycle and the live draft. It is UI-agnostic: the Streamlit dashboard
calls into it, and the tests drive it directly.

Navigation rules:

- Next: only when the current step has no violations; moves exactly one
  step and never past the last one.
- Previous: always allowed, never validates, stops at the first step.
- Jump: backwards (or to the same step) is free. Forwards validates every
  step from the current one up to, but not including, the target and stops
  at the first step with violations. The target step's own errors show
  once the user lands on it.

Every edit is persisted through a debounced ``DraftWriter`` so a reload
resumes the application. The draft is cleared after a successful
submission and on ``reset_all``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Callable

from app.draft_store import DraftStore, DraftWriter, parse_iso_date
from app.field_catalogue import MEMBERSHIP_CATALOGUE, Catalogue, FieldDescriptor, FieldKind
from app.gateway import GatewayError, SubmissionGateway, build_gateway, flatten_draft
from app.settings import SignupSettings, load_settings
from app.validation import check_completeness, validate_fields

logger = logging.getLogger(__name__)


class DraftLockedError(RuntimeError):
    """Raised when the draft is edited during or after a submission."""


class SubmissionPhase(str, Enum):
    EDITING = "editing"
    VALIDATING_STEP = "validating_step"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class GateReason(str, Enum):
    """Why a navigation or submission request was refused."""

    FIELD_VIOLATIONS = "field_violations"
    JUMP_BLOCKED = "jump_blocked"
    TERMS_NOT_ACCEPTED = "terms_not_accepted"
    ALREADY_SUBMITTING = "already_submitting"
    ALREADY_SUBMITTED = "already_submitted"
    GATEWAY_ERROR = "gateway_error"


@dataclass
class NavigationResult:
    ok: bool
    step: int
    reason: GateReason | None = None
    violations: dict[str, list[str]] = field(default_factory=dict)
    blocked_step: int | None = None


@dataclass
class SubmissionOutcome:
    ok: bool
    phase: SubmissionPhase
    reason: GateReason | None = None
    violations: dict[str, list[str]] = field(default_factory=dict)
    membership_id: str | None = None
    submitted_data: dict[str, Any] | None = None
    error: str = ""


# ---------------------------------------------------------------------------
# Value coercion, one handler per field kind
# ---------------------------------------------------------------------------

def _coerce_text(field_def: FieldDescriptor, value: Any) -> str:
    return "" if value is None else str(value)


def _coerce_options(field_def: FieldDescriptor, value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    seen: list[str] = []
    for item in value:
        item = str(item)
        if item not in seen:
            seen.append(item)
    return seen


def _coerce_checkbox(field_def: FieldDescriptor, value: Any) -> bool | list[str]:
    if field_def.options:
        return _coerce_options(field_def, value)
    if isinstance(value, str):
        return value.strip().lower() in ("true", "yes", "on", "1")
    return bool(value)


def _coerce_date(field_def: FieldDescriptor, value: Any) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_iso_date(value)


_COERCERS: dict[FieldKind, Callable[[FieldDescriptor, Any], Any]] = {
    FieldKind.TEXT: _coerce_text,
    FieldKind.TEXTAREA: _coerce_text,
    FieldKind.RADIO: _coerce_text,
    FieldKind.SELECT: _coerce_text,
    FieldKind.SIGNATURE: _coerce_text,
    FieldKind.MULTISELECT: _coerce_options,
    FieldKind.CHECKBOX: _coerce_checkbox,
    FieldKind.DATE: _coerce_date,
}


def coerce_value(field_def: FieldDescriptor, value: Any) -> Any:
    """Convert raw input into the draft value type for the field's kind."""
    return _COERCERS[field_def.kind](field_def, value)


# ---------------------------------------------------------------------------
# Controller
# ---------------------------------------------------------------------------

class WizardController:
    """State machine behind the membership signup wizard."""

    def __init__(
        self,
        catalogue: Catalogue,
        store: DraftStore,
        gateway: SubmissionGateway,
        debounce_seconds: float = 0.4,
    ):
        self.catalogue = catalogue
        self.store = store
        self.gateway = gateway
        self._writer = DraftWriter(store, delay=debounce_seconds)
        self._draft: dict[str, Any] = store.load()
        self._current_step = 0
        self.terms_accepted = False
        self.phase = SubmissionPhase.EDITING
        self.membership_id: str | None = None
        self.submitted_data: dict[str, Any] | None = None
        self.last_error = ""

    # -- Read-only views ----------------------------------------------------

    @property
    def current_step(self) -> int:
        return self._current_step

    @property
    def step_count(self) -> int:
        return self.catalogue.step_count

    @property
    def is_first_step(self) -> bool:
        return self._current_step == 0

    @property
    def is_last_step(self) -> bool:
        return self._current_step == self.step_count - 1

    @property
    def progress(self) -> float:
        """Percent of the way through the steps, counting the current one."""
        return (self._current_step + 1) / self.step_count * 100

    @property
    def draft(self) -> dict[str, Any]:
        return {k: (list(v) if isinstance(v, list) else v) for k, v in self._draft.items()}

    @property
    def current_fields(self) -> list[FieldDescriptor]:
        return self.catalogue.step_fields(self._current_step)

    def value_of(self, name: str) -> Any:
        self.catalogue.field(name)
        return self._draft.get(name)

    def step_states(self) -> list[str]:
        """Per-step state for the step indicator: completed, current or upcoming."""
        states = []
        for idx in range(self.step_count):
            if idx < self._current_step:
                states.append("completed")
            elif idx == self._current_step:
                states.append("current")
            else:
                states.append("upcoming")
        return states

    def completeness(self) -> dict:
        return check_completeness(self.catalogue, self._draft)

    # -- Editing ------------------------------------------------------------

    def edit_field(self, name: str, value: Any) -> None:
        """Store a new value for *name* and schedule a draft write.

        Refused with ``DraftLockedError`` while a submission is in flight or
        after it succeeded; ``reset_all`` unlocks the draft again.
        """
        field_def = self.catalogue.field(name)
        if self.phase in (SubmissionPhase.SUBMITTING, SubmissionPhase.SUCCEEDED):
            raise DraftLockedError(f"Draft is locked while {self.phase.value}")
        self._draft[name] = coerce_value(field_def, value)
        self._writer.schedule(self._draft)

    def toggle_option(self, name: str, option: str) -> None:
        """Add *option* to a multi-valued field, or remove it if present."""
        field_def = self.catalogue.field(name)
        if not field_def.is_multi_valued:
            raise ValueError(f"Field {name} does not take multiple options")
        values = list(self._draft.get(name) or [])
        if option in values:
            values.remove(option)
        else:
            values.append(option)
        self.edit_field(name, values)

    def accept_terms(self) -> None:
        self.terms_accepted = True

    def decline_terms(self) -> None:
        self.terms_accepted = False

    # -- Validation and navigation ------------------------------------------

    def validate_step(self, step_index: int) -> dict[str, list[str]]:
        """Violations for the fields of *step_index*; empty dict means valid."""
        names = self.catalogue.steps[self._check_index(step_index)].field_names
        previous = self.phase
        if previous == SubmissionPhase.EDITING:
            self.phase = SubmissionPhase.VALIDATING_STEP
        try:
            return validate_fields(self.catalogue, names, self._draft)
        finally:
            self.phase = previous

    def go_next(self) -> NavigationResult:
        violations = self.validate_step(self._current_step)
        if violations:
            return NavigationResult(
                ok=False, step=self._current_step,
                reason=GateReason.FIELD_VIOLATIONS, violations=violations,
            )
        self._current_step = min(self._current_step + 1, self.step_count - 1)
        return NavigationResult(ok=True, step=self._current_step)

    def go_previous(self) -> NavigationResult:
        self._current_step = max(self._current_step - 1, 0)
        return NavigationResult(ok=True, step=self._current_step)

    def jump_to_step(self, target: int) -> NavigationResult:
        target = self._check_index(target)
        if target <= self._current_step:
            self._current_step = target
            return NavigationResult(ok=True, step=target)

        for idx in range(self._current_step, target):
            violations = self.validate_step(idx)
            if violations:
                return NavigationResult(
                    ok=False, step=self._current_step,
                    reason=GateReason.JUMP_BLOCKED, violations=violations,
                    blocked_step=idx,
                )
        self._current_step = target
        return NavigationResult(ok=True, step=target)

    def _check_index(self, step_index: int) -> int:
        if not 0 <= step_index < self.step_count:
            raise IndexError(f"Step index out of range: {step_index}")
        return step_index

    # -- Submission ---------------------------------------------------------

    async def submit(self) -> SubmissionOutcome:
        """Validate the final step, check the terms, and hand off to the gateway."""
        if self.phase == SubmissionPhase.SUBMITTING:
            return SubmissionOutcome(ok=False, phase=self.phase,
                                     reason=GateReason.ALREADY_SUBMITTING)
        if self.phase == SubmissionPhase.SUCCEEDED:
            return SubmissionOutcome(ok=False, phase=self.phase,
                                     reason=GateReason.ALREADY_SUBMITTED,
                                     membership_id=self.membership_id)

        violations = self.validate_step(self.step_count - 1)
        if violations:
            return SubmissionOutcome(ok=False, phase=self.phase,
                                     reason=GateReason.FIELD_VIOLATIONS,
                                     violations=violations)
        if not self.terms_accepted:
            return SubmissionOutcome(ok=False, phase=self.phase,
                                     reason=GateReason.TERMS_NOT_ACCEPTED)

        # Phase must change before the first await so a second call is refused
        self.phase = SubmissionPhase.SUBMITTING
        self.last_error = ""
        self._writer.flush()
        fields = flatten_draft(self._draft)

        try:
            result = await self.gateway.create(fields)
        except GatewayError as exc:
            logger.warning("Membership submission failed: %s", exc)
            return self._submission_failed(str(exc))
        except Exception as exc:
            logger.exception("Unexpected error while submitting membership")
            return self._submission_failed(f"Failed to submit membership application: {exc}")
        if not isinstance(result, dict):
            return self._submission_failed("Failed to submit membership application: "
                                           "unexpected response")

        self.membership_id = result.get("membershipId")
        self.submitted_data = result.get("membershipData") or fields
        self._draft = {}
        self._writer.discard()
        self.phase = SubmissionPhase.SUCCEEDED
        return SubmissionOutcome(ok=True, phase=self.phase,
                                 membership_id=self.membership_id,
                                 submitted_data=self.submitted_data)

    def _submission_failed(self, message: str) -> SubmissionOutcome:
        # Back to editing with the draft untouched so the applicant can retry
        self.last_error = message
        self.phase = SubmissionPhase.EDITING
        return SubmissionOutcome(ok=False, phase=SubmissionPhase.FAILED,
                                 reason=GateReason.GATEWAY_ERROR, error=message)

    def reset_all(self) -> None:
        """Start over: empty draft, first step, terms unaccepted."""
        self._writer.discard()
        self._draft = {}
        self._current_step = 0
        self.terms_accepted = False
        self.phase = SubmissionPhase.EDITING
        self.membership_id = None
        self.submitted_data = None
        self.last_error = ""


def create_wizard(
    catalogue: Catalogue = MEMBERSHIP_CATALOGUE,
    settings: SignupSettings | None = None,
    gateway: SubmissionGateway | None = None,
) -> WizardController:
    """Build a controller wired to the configured draft slot and gateway."""
    settings = settings or load_settings()
    store = DraftStore(catalogue, storage_key=settings.draft_storage_key)
    if gateway is None:
        gateway = build_gateway(settings.submission_backend, settings.api_base_url)
    return WizardController(catalogue, store, gateway,
                            debounce_seconds=settings.draft_debounce_seconds)
