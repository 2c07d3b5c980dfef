"""
Form model and schemas for dynamic onboarding forms
"""
from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from enum import Enum

class FieldType(str, Enum):
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    DROPDOWN = "dropdown"
    CHECKBOX = "checkbox"
    MULTISELECT = "multiselect"
    FILE = "file"

# Field types whose answers are picked from `options`
CHOICE_FIELD_TYPES = {FieldType.DROPDOWN.value, FieldType.MULTISELECT.value}

class FieldSchema(BaseModel):
    id: int
    label: str = Field(..., min_length=1)
    # Raw value from the backend; unknown types must still parse
    field_type: str
    required: bool = False
    options: Optional[List[str]] = None
    order: Optional[int] = None

    class Config:
        extra = "ignore"

    @property
    def known_type(self) -> Optional[FieldType]:
        try:
            return FieldType(self.field_type)
        except ValueError:
            return None

    @property
    def is_choice(self) -> bool:
        return self.field_type in CHOICE_FIELD_TYPES

class FormSchema(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    fields: List[FieldSchema] = Field(default_factory=list)

    class Config:
        extra = "ignore"

    def field_by_label(self, label: str) -> Optional[FieldSchema]:
        for field in self.fields:
            if field.label == label:
                return field
        return None

class FormCreate(BaseModel):
    """Admin request to define a new form"""
    name: str = Field(..., min_length=1, max_length=200)
    description: str = ""

    @field_validator("name")
    @classmethod
    def strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Form name is required")
        return value

class FieldCreate(BaseModel):
    """Admin request to add a field to an existing form"""
    label: str = Field(..., min_length=1, max_length=200)
    field_type: FieldType = FieldType.TEXT
    required: bool = False
    options: Optional[List[str]] = None

    @field_validator("label")
    @classmethod
    def strip_label(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Label is required")
        return value

    def normalized_options(self) -> Optional[List[str]]:
        """Options sent upstream: trimmed for choice types, None otherwise."""
        if self.field_type.value not in CHOICE_FIELD_TYPES:
            return None
        return [opt.strip() for opt in (self.options or []) if opt and opt.strip()]
