"""
Models for form submissions sent to and listed from the onboarding backend
"""
from pydantic import BaseModel, Field
from typing import Dict, Any, Optional, List
from datetime import datetime
from enum import Enum

class SubmissionStatus(str, Enum):
    SUBMITTED = "submitted"
    UNDER_REVIEW = "under_review"
    APPROVED = "approved"
    REJECTED = "rejected"

class SubmissionPayload(BaseModel):
    form_id: int
    submitted_by: str = ""
    answers: Dict[str, Any] = Field(default_factory=dict)

class SubmissionRequest(BaseModel):
    """Body accepted by the portal's submit route"""
    submitted_by: Optional[str] = ""
    answers: Dict[str, Any] = Field(default_factory=dict)

class SubmissionAck(BaseModel):
    submission_id: Optional[int] = None
    status: Optional[str] = None

    class Config:
        extra = "allow"

class SubmittedFile(BaseModel):
    id: int
    filename: str

class FieldResponseItem(BaseModel):
    id: int
    field: Dict[str, Any]
    formatted_value: Any = None
    files: List[SubmittedFile] = Field(default_factory=list)

class SubmissionListItem(BaseModel):
    submission_id: int
    form_id: int
    form_name: Optional[str] = None
    submitted_by: Optional[str] = None
    status: Optional[str] = None
    submitted_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    answers: Dict[str, Any] = Field(default_factory=dict)
    field_responses: List[FieldResponseItem] = Field(default_factory=list)

    class Config:
        extra = "ignore"

class SubmissionPage(BaseModel):
    results: List[SubmissionListItem] = Field(default_factory=list)
    page: int = 1
    total_pages: int = 1
