"""
Dynamic form interpreter
Turns a FormSchema into render descriptors, collects answers keyed by field
label, validates them against the schema and submits them upstream.
"""
import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, computed_field

from onboarding.models.form import FormSchema
from onboarding.models.submission import SubmissionAck, SubmissionPayload
from onboarding.services.api_client import OnboardingApiClient
from onboarding.services.field_descriptors import RenderDescriptor, describe_field
from onboarding.utils.exceptions import (
    FormStateError,
    FormValidationError,
    OnboardingError,
)

logger = logging.getLogger(__name__)

AnswerSet = Dict[str, Any]


class ViolationReason(str, Enum):
    MISSING = "missing"
    UNSUPPORTED_TYPE = "unsupported_type"


class FieldViolation(BaseModel):
    field_id: int
    label: str
    reason: ViolationReason
    message: str


class ValidationResult(BaseModel):
    violations: List[FieldViolation] = Field(default_factory=list)
    unknown_labels: List[str] = Field(default_factory=list)

    @computed_field
    @property
    def ok(self) -> bool:
        return not self.violations and not self.unknown_labels

    @property
    def violated_labels(self) -> List[str]:
        return [v.label for v in self.violations]


# ─── Pure operations ────────────────────────────────────────────────────

def set_answer(answers: AnswerSet, label: str, value: Any) -> AnswerSet:
    """Return a copy of `answers` with `label` set; validation happens at submit."""
    updated = dict(answers)
    updated[label] = value
    return updated


def validate(form: FormSchema, answers: AnswerSet) -> ValidationResult:
    """Check every required field, in field order, and collect all violations."""
    result = ValidationResult()
    for field in form.fields:
        if not field.required:
            continue
        descriptor = describe_field(field)
        if not descriptor.supported:
            result.violations.append(FieldViolation(
                field_id=field.id,
                label=field.label,
                reason=ViolationReason.UNSUPPORTED_TYPE,
                message=f"{field.label} uses an unsupported field type ({field.field_type})",
            ))
        elif not descriptor.is_answered(answers.get(field.label)):
            result.violations.append(FieldViolation(
                field_id=field.id,
                label=field.label,
                reason=ViolationReason.MISSING,
                message=f"{field.label} is required",
            ))

    known = {field.label for field in form.fields}
    result.unknown_labels = [label for label in answers if label not in known]
    return result


def build_submission(form_id: int, submitted_by: Optional[str], answers: AnswerSet) -> SubmissionPayload:
    return SubmissionPayload(
        form_id=form_id,
        submitted_by=submitted_by or "",
        answers=dict(answers),
    )


# ─── Session ────────────────────────────────────────────────────────────

class FormState(str, Enum):
    UNLOADED = "unloaded"
    LOADING = "loading"
    READY = "ready"
    LOAD_FAILED = "load_failed"
    SUBMITTING = "submitting"


class FormSession:
    """One client's fill-out of one form."""

    def __init__(self, api: OnboardingApiClient):
        self.api = api
        self.state = FormState.UNLOADED
        self.form_id: Optional[int] = None
        self.schema: Optional[FormSchema] = None
        self.answers: AnswerSet = {}
        self.submitted_by = ""
        self.last_error: Optional[OnboardingError] = None

    async def load(self, form_id: int) -> FormSchema:
        if self.state in (FormState.LOADING, FormState.SUBMITTING):
            raise FormStateError(f"Cannot load while {self.state.value}")

        self.state = FormState.LOADING
        self.form_id = form_id
        self.schema = None
        self.answers = {}
        self.submitted_by = ""
        self.last_error = None
        try:
            schema = await self.api.get_form(form_id)
        except OnboardingError as exc:
            logger.warning("Loading form %s failed: %s", form_id, exc)
            self.state = FormState.LOAD_FAILED
            self.last_error = exc
            raise
        except BaseException:
            # Cancelled mid-load; nothing was loaded
            self.state = FormState.UNLOADED
            raise

        self.schema = schema
        self.state = FormState.READY
        return schema

    def _require_ready(self) -> FormSchema:
        if self.state != FormState.READY or self.schema is None:
            raise FormStateError(f"Form is not ready (state: {self.state.value})")
        return self.schema

    def describe_fields(self) -> List[RenderDescriptor]:
        schema = self._require_ready()
        return [describe_field(field) for field in schema.fields]

    def set_answer(self, label: str, value: Any) -> None:
        self._require_ready()
        self.answers = set_answer(self.answers, label, value)

    def clear(self) -> None:
        self.answers = {}

    def validate(self) -> ValidationResult:
        return validate(self._require_ready(), self.answers)

    def build_submission(self) -> SubmissionPayload:
        schema = self._require_ready()
        return build_submission(schema.id, self.submitted_by, self.answers)

    async def submit(self) -> SubmissionAck:
        result = self.validate()
        if not result.ok:
            raise FormValidationError(result)

        payload = self.build_submission()
        self.state = FormState.SUBMITTING
        self.last_error = None
        try:
            ack = await self.api.submit_response(payload)
        except OnboardingError as exc:
            logger.warning("Submitting form %s failed: %s", payload.form_id, exc)
            self.last_error = exc
            raise
        finally:
            self.state = FormState.READY

        logger.info("Form %s submitted (submission %s)", payload.form_id, ack.submission_id)
        self.answers = {}
        self.submitted_by = ""
        return ack
