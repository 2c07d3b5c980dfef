"""
Render descriptors for dynamic form fields.

Each field kind has its own descriptor class; `describe_field` picks the class
from DESCRIPTOR_TYPES by `field_type`. Types the portal does not know about
get an UnsupportedDescriptor instead of an error, so a field added on the
backend with a new type shows up as a visible placeholder.
"""
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Type

from pydantic import BaseModel, Field

from onboarding.models.form import FieldSchema, FieldType


class InputKind(str, Enum):
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    SINGLE_CHOICE = "single_choice"
    TOGGLE = "toggle"
    MULTI_CHOICE = "multi_choice"
    FILE = "file"
    UNSUPPORTED = "unsupported"


class ChoiceOption(BaseModel):
    value: str
    label: str
    placeholder: bool = False


class RenderDescriptor(BaseModel):
    field_id: int
    label: str
    field_type: str
    kind: InputKind
    input_type: str
    required: bool = False
    supported: bool = True
    placeholder: Optional[str] = None
    options: List[ChoiceOption] = Field(default_factory=list)
    default: Any = None

    KIND: ClassVar[InputKind] = InputKind.TEXT
    INPUT_TYPE: ClassVar[str] = "text"
    SUPPORTED: ClassVar[bool] = True

    @classmethod
    def build(cls, field: FieldSchema) -> "RenderDescriptor":
        return cls(
            field_id=field.id,
            label=field.label,
            field_type=field.field_type,
            kind=cls.KIND,
            input_type=cls.INPUT_TYPE,
            required=field.required,
            supported=cls.SUPPORTED,
            placeholder=cls.placeholder_for(field),
            options=cls.options_for(field),
            default=cls.default_value(),
        )

    @classmethod
    def placeholder_for(cls, field: FieldSchema) -> Optional[str]:
        return f"Enter {field.label}"

    @classmethod
    def options_for(cls, field: FieldSchema) -> List[ChoiceOption]:
        return []

    @classmethod
    def default_value(cls) -> Any:
        return ""

    def is_answered(self, value: Any) -> bool:
        """False for missing, None, blank strings, False and empty collections."""
        if value is None or value is False:
            return False
        if isinstance(value, str):
            return bool(value.strip())
        if isinstance(value, (list, tuple, set, dict)):
            return len(value) > 0
        return True


class TextDescriptor(RenderDescriptor):
    KIND: ClassVar[InputKind] = InputKind.TEXT
    INPUT_TYPE: ClassVar[str] = "text"


class NumberDescriptor(RenderDescriptor):
    KIND: ClassVar[InputKind] = InputKind.NUMBER
    INPUT_TYPE: ClassVar[str] = "number"


class DateDescriptor(RenderDescriptor):
    KIND: ClassVar[InputKind] = InputKind.DATE
    INPUT_TYPE: ClassVar[str] = "date"

    @classmethod
    def placeholder_for(cls, field: FieldSchema) -> Optional[str]:
        return None


def _real_options(field: FieldSchema) -> List[ChoiceOption]:
    # "" is reserved for the unselected placeholder
    return [ChoiceOption(value=opt, label=opt) for opt in (field.options or []) if opt != ""]


class DropdownDescriptor(RenderDescriptor):
    KIND: ClassVar[InputKind] = InputKind.SINGLE_CHOICE
    INPUT_TYPE: ClassVar[str] = "select"

    @classmethod
    def placeholder_for(cls, field: FieldSchema) -> Optional[str]:
        return f"Select {field.label}"

    @classmethod
    def options_for(cls, field: FieldSchema) -> List[ChoiceOption]:
        unselected = ChoiceOption(value="", label=f"Select {field.label}", placeholder=True)
        return [unselected] + _real_options(field)


class CheckboxDescriptor(RenderDescriptor):
    """Boolean toggle. Options on a checkbox field are ignored."""

    KIND: ClassVar[InputKind] = InputKind.TOGGLE
    INPUT_TYPE: ClassVar[str] = "checkbox"

    @classmethod
    def placeholder_for(cls, field: FieldSchema) -> Optional[str]:
        return None

    @classmethod
    def default_value(cls) -> Any:
        return False

    def is_answered(self, value: Any) -> bool:
        return value is True


class MultiSelectDescriptor(RenderDescriptor):
    KIND: ClassVar[InputKind] = InputKind.MULTI_CHOICE
    INPUT_TYPE: ClassVar[str] = "checkbox-group"

    @classmethod
    def placeholder_for(cls, field: FieldSchema) -> Optional[str]:
        return None

    @classmethod
    def options_for(cls, field: FieldSchema) -> List[ChoiceOption]:
        return _real_options(field)

    @classmethod
    def default_value(cls) -> Any:
        return []


class FileDescriptor(RenderDescriptor):
    KIND: ClassVar[InputKind] = InputKind.FILE
    INPUT_TYPE: ClassVar[str] = "file"

    @classmethod
    def placeholder_for(cls, field: FieldSchema) -> Optional[str]:
        return None

    @classmethod
    def default_value(cls) -> Any:
        return None


class UnsupportedDescriptor(RenderDescriptor):
    KIND: ClassVar[InputKind] = InputKind.UNSUPPORTED
    INPUT_TYPE: ClassVar[str] = "none"
    SUPPORTED: ClassVar[bool] = False

    @classmethod
    def placeholder_for(cls, field: FieldSchema) -> Optional[str]:
        return f"Unsupported field type: {field.field_type}"

    @classmethod
    def default_value(cls) -> Any:
        return None


DESCRIPTOR_TYPES: Dict[str, Type[RenderDescriptor]] = {
    FieldType.TEXT.value: TextDescriptor,
    FieldType.NUMBER.value: NumberDescriptor,
    FieldType.DATE.value: DateDescriptor,
    FieldType.DROPDOWN.value: DropdownDescriptor,
    FieldType.CHECKBOX.value: CheckboxDescriptor,
    FieldType.MULTISELECT.value: MultiSelectDescriptor,
    FieldType.FILE.value: FileDescriptor,
}


def describe_field(field: FieldSchema) -> RenderDescriptor:
    descriptor_cls = DESCRIPTOR_TYPES.get(field.field_type, UnsupportedDescriptor)
    return descriptor_cls.build(field)
