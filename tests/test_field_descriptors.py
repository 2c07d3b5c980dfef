"""
Render descriptor dispatch per field type
"""
import pytest

from onboarding.services.field_descriptors import (
    CheckboxDescriptor,
    DropdownDescriptor,
    InputKind,
    UnsupportedDescriptor,
    describe_field,
)


@pytest.mark.parametrize("field_type, kind, input_type", [
    ("text", InputKind.TEXT, "text"),
    ("number", InputKind.NUMBER, "number"),
    ("date", InputKind.DATE, "date"),
    ("dropdown", InputKind.SINGLE_CHOICE, "select"),
    ("checkbox", InputKind.TOGGLE, "checkbox"),
    ("multiselect", InputKind.MULTI_CHOICE, "checkbox-group"),
    ("file", InputKind.FILE, "file"),
])
def test_known_types_dispatch(make_field, field_type, kind, input_type):
    descriptor = describe_field(make_field(field_type=field_type, options=["A"]))
    assert descriptor.kind == kind
    assert descriptor.input_type == input_type
    assert descriptor.supported is True


def test_dropdown_has_distinct_unselected_placeholder(make_field):
    descriptor = describe_field(make_field(label="Country", field_type="dropdown", options=["KE", "UG"]))
    assert isinstance(descriptor, DropdownDescriptor)
    first, *real = descriptor.options
    assert first.placeholder is True
    assert first.value == ""
    assert first.label == "Select Country"
    assert [o.value for o in real] == ["KE", "UG"]
    assert all(o.value != first.value for o in real)


def test_dropdown_drops_empty_option(make_field):
    descriptor = describe_field(make_field(field_type="dropdown", options=["", "KE"]))
    assert [o.value for o in descriptor.options] == ["", "KE"]
    assert sum(1 for o in descriptor.options if o.placeholder) == 1


def test_checkbox_defaults_to_false_and_ignores_options(make_field):
    descriptor = describe_field(make_field(field_type="checkbox", options=["Yes", "No"]))
    assert isinstance(descriptor, CheckboxDescriptor)
    assert descriptor.default is False
    assert descriptor.options == []
    assert descriptor.is_answered(True)
    assert not descriptor.is_answered(False)
    assert not descriptor.is_answered("true")


def test_multiselect_answer_is_a_list(make_field):
    descriptor = describe_field(make_field(field_type="multiselect", options=["Savings", "Loans"]))
    assert descriptor.default == []
    assert not descriptor.is_answered([])
    assert descriptor.is_answered(["Loans"])


def test_unknown_type_degrades_to_placeholder(make_field):
    descriptor = describe_field(make_field(label="Signature", field_type="signature", required=True))
    assert isinstance(descriptor, UnsupportedDescriptor)
    assert descriptor.kind == InputKind.UNSUPPORTED
    assert descriptor.supported is False
    assert descriptor.required is True
    assert descriptor.placeholder == "Unsupported field type: signature"


@pytest.mark.parametrize("value, answered", [
    (None, False),
    ("", False),
    ("   ", False),
    (False, False),
    ([], False),
    ("Jane", True),
    ("0", True),
    (0, True),
])
def test_text_is_answered(make_field, value, answered):
    assert describe_field(make_field()).is_answered(value) is answered
