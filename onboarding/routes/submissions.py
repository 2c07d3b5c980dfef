"""
Submission routes - paged admin listing passed through from the backend
"""
from fastapi import APIRouter, Depends, Query
from typing import Optional

from onboarding.config.settings import settings
from onboarding.dependencies import get_api_client
from onboarding.models.submission import SubmissionPage, SubmissionStatus
from onboarding.services.api_client import OnboardingApiClient
from onboarding.utils.helpers import serialize_doc

router = APIRouter(prefix="/submissions", tags=["Submissions"])

@router.get("/")
async def list_submissions(
    page: int = Query(1, ge=1),
    page_size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    form_id: Optional[int] = None,
    status: Optional[SubmissionStatus] = None,
    api: OnboardingApiClient = Depends(get_api_client)
):
    """Get submissions, optionally filtered by form and status"""
    result: SubmissionPage = await api.list_submissions(
        page=page,
        page_size=page_size,
        form_id=form_id,
        status=status.value if status else None,
    )
    return serialize_doc(result.model_dump())
