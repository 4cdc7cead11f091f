"""Shared fixtures for Schema-Form tests."""

import re

import pytest

from schema_form.models.field_definitions import FieldSpec, ValidationRule

EMAIL = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


@pytest.fixture
def basic_fields() -> list[FieldSpec]:
    """Name and email, both required."""
    return [
        FieldSpec(
            id="name",
            label="Name",
            type="text",
            required=True,
            validation=[ValidationRule(type="required", message="Name is required")],
        ),
        FieldSpec(
            id="email",
            label="Email",
            type="text",
            required=True,
            validation=[
                ValidationRule(type="required", message="Email is required"),
                ValidationRule(type="pattern", value=EMAIL, message="Invalid email format"),
            ],
        ),
    ]


@pytest.fixture
def mixed_fields(basic_fields) -> list[FieldSpec]:
    """Basic fields plus a bounded multi-choice and an optional bio."""
    return basic_fields + [
        FieldSpec(
            id="hobbies",
            label="Hobbies",
            type="multi_choice",
            required=True,
            options=["Reading", "Sports", "Music", "Art"],
            min=1,
            max=3,
            validation=[
                ValidationRule(type="required", message="Pick a hobby"),
                ValidationRule(type="min", value=1, message="Pick at least 1"),
                ValidationRule(type="max", value=3, message="Pick at most 3"),
            ],
        ),
        FieldSpec(
            id="bio",
            label="Bio",
            type="textarea",
            validation=[ValidationRule(type="maxLength", value=20, message="Bio too long")],
        ),
    ]


@pytest.fixture
def seven_fields() -> list[FieldSpec]:
    return [
        FieldSpec(id=f"field_{i}", label=f"Field {i}", type="text")
        for i in range(1, 8)
    ]
