"""
Form routes - render, validate and submit dynamic forms
"""
from fastapi import APIRouter, HTTPException, status, Depends
from pydantic import BaseModel, Field
from typing import Any, Dict, List

from onboarding.dependencies import get_api_client
from onboarding.models.form import FieldCreate, FieldSchema, FormCreate, FormSchema
from onboarding.models.submission import SubmissionAck, SubmissionRequest
from onboarding.services.api_client import OnboardingApiClient
from onboarding.services.field_descriptors import RenderDescriptor
from onboarding.services.form_interpreter import FormSession, ValidationResult, validate

router = APIRouter(prefix="/forms", tags=["Forms"])

class RenderedForm(BaseModel):
    form: FormSchema
    fields: List[RenderDescriptor]

class AnswersBody(BaseModel):
    answers: Dict[str, Any] = Field(default_factory=dict)

@router.get("/", response_model=List[FormSchema])
async def list_forms(api: OnboardingApiClient = Depends(get_api_client)):
    """Get all forms"""
    return await api.list_forms()

@router.post("/", response_model=FormSchema, status_code=status.HTTP_201_CREATED)
async def create_form(form: FormCreate, api: OnboardingApiClient = Depends(get_api_client)):
    """Create an empty form (admin)"""
    return await api.create_form(form.name, description=form.description)

@router.get("/{form_id}", response_model=RenderedForm)
async def get_form(form_id: int, api: OnboardingApiClient = Depends(get_api_client)):
    """Get a form with one render descriptor per field"""
    session = FormSession(api)
    form = await session.load(form_id)
    return RenderedForm(form=form, fields=session.describe_fields())

@router.post("/{form_id}/validate", response_model=ValidationResult)
async def validate_answers(
    form_id: int,
    body: AnswersBody,
    api: OnboardingApiClient = Depends(get_api_client)
):
    """Check answers without submitting"""
    form = await api.get_form(form_id)
    return validate(form, body.answers)

@router.post("/{form_id}/submit", response_model=SubmissionAck, status_code=status.HTTP_201_CREATED)
async def submit_form(
    form_id: int,
    submission: SubmissionRequest,
    api: OnboardingApiClient = Depends(get_api_client)
):
    """Validate and submit a form response"""
    session = FormSession(api)
    await session.load(form_id)
    for label, value in submission.answers.items():
        session.set_answer(label, value)
    session.submitted_by = submission.submitted_by or ""
    return await session.submit()

@router.post("/{form_id}/fields", response_model=FieldSchema, status_code=status.HTTP_201_CREATED)
async def add_field(
    form_id: int,
    field: FieldCreate,
    api: OnboardingApiClient = Depends(get_api_client)
):
    """Add a field to a form (admin)"""
    options = field.normalized_options()
    if options is not None and not options:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"A {field.field_type.value} field needs at least one option"
        )
    return await api.create_field(
        form_id,
        label=field.label,
        field_type=field.field_type.value,
        required=field.required,
        options=options,
    )
