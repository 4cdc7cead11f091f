"""
Field definition models for schema-driven forms.

A form schema is an ordered list of ``FieldSpec`` objects. Each field
declares its input type, choice options, type-specific constraints and an
ordered list of ``ValidationRule`` objects evaluated first-failure-wins.

The JSON wire format keeps the camelCase keys used by form editors
(``maxFileSize``, ``minDate`` ...); models accept both spellings.
"""

import re
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_serializer, model_validator

from schema_form.models.patterns import compile_pattern_source, pattern_to_source


class FieldType(str, Enum):
    """Input types a field may declare."""

    TEXT = "text"
    TEXTAREA = "textarea"
    RADIO_BUTTONS = "radio_buttons"
    MULTI_CHOICE = "multi_choice"
    DROP_DOWN = "drop_down"
    DATE = "date"
    FILE = "file"


CHOICE_TYPES = (FieldType.RADIO_BUTTONS, FieldType.MULTI_CHOICE, FieldType.DROP_DOWN)


class RuleKind(str, Enum):
    """Validation rule kinds. ``UNKNOWN`` covers kinds this engine does not know."""

    REQUIRED = "required"
    MIN_LENGTH = "minLength"
    MAX_LENGTH = "maxLength"
    MIN = "min"
    MAX = "max"
    PATTERN = "pattern"
    FILE_SIZE = "fileSize"
    FILE_TYPE = "fileType"
    DATE_RANGE = "dateRange"
    CUSTOM = "custom"
    UNKNOWN = "unknown"


class FileHandle(BaseModel):
    """A file selected for upload."""

    name: str = Field(..., description="File name including extension")
    size: int = Field(default=0, description="Size in bytes")
    type: str = Field(default="", description="MIME type")


class ValidationRule(BaseModel):
    """
    One declarative constraint on a field value.

    ``type`` is kept verbatim so rules of unknown kinds survive a
    load/save round trip; use ``kind`` for dispatch. For ``pattern`` rules,
    ``value`` is either a compiled pattern or its source text.
    """

    type: str = Field(..., description="Rule kind, e.g. required, minLength, pattern")
    value: Any = Field(default=None, description="Kind-specific parameter")
    message: str = Field(..., description="Message returned verbatim on failure")

    @property
    def kind(self) -> RuleKind:
        try:
            return RuleKind(self.type)
        except ValueError:
            return RuleKind.UNKNOWN

    def compiled_pattern(self) -> re.Pattern | None:
        """Return the compiled pattern, or None if the value is not a valid pattern."""
        if isinstance(self.value, re.Pattern):
            return self.value
        if isinstance(self.value, str):
            return compile_pattern_source(self.value)
        return None

    @field_serializer("value", when_used="json")
    def _serialize_value(self, value: Any) -> Any:
        if isinstance(value, re.Pattern):
            return pattern_to_source(value)
        if callable(value):
            return None
        return value


class FieldSpec(BaseModel):
    """
    Schema for a single form field.

    ``min``/``max`` are count bounds for multi-choice fields and value
    bounds for numeric ones. ``step`` is stamped by the step deriver.
    """

    id: str = Field(..., description="Unique field key")
    label: str = Field(..., description="Human-readable label")
    type: str = Field(..., description="Field type, see FieldType")
    required: bool = Field(default=False)
    options: list[str] | None = Field(default=None, description="Choices for choice types")
    min: int | float | None = Field(default=None)
    max: int | float | None = Field(default=None)
    validation: list[ValidationRule] = Field(default_factory=list)
    placeholder: str | None = Field(default=None)
    description: str | None = Field(default=None)
    step: int | None = Field(default=None, description="Step this field belongs to")

    # File-specific
    accept: str | None = Field(default=None, description='e.g. "image/*,.pdf"')
    max_file_size: int | None = Field(default=None, alias="maxFileSize")
    multiple: bool | None = Field(default=None)

    # Date-specific (ISO format)
    min_date: str | None = Field(default=None, alias="minDate")
    max_date: str | None = Field(default=None, alias="maxDate")

    model_config = {"populate_by_name": True}

    @model_validator(mode="after")
    def _check_options(self) -> "FieldSpec":
        if self.field_type in CHOICE_TYPES and not self.options:
            raise ValueError(f"Field '{self.id}' of type '{self.type}' requires options")
        return self

    @property
    def field_type(self) -> FieldType | None:
        """The known field type, or None for types this engine does not know."""
        try:
            return FieldType(self.type)
        except ValueError:
            return None

    def to_wire(self) -> dict[str, Any]:
        """Export as a JSON-compatible dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def default_value(field: FieldSpec) -> Any:
    """Type-appropriate empty value for a field."""
    if field.field_type == FieldType.MULTI_CHOICE:
        return []
    return ""
