"""
Helpers for form value maps.

Value shapes follow the field type: strings for text, choice and date
fields, a list of strings for multi-choice, a ``FileHandle`` or a list of
them for file fields.
"""

from typing import Any, Iterable

from schema_form.models.field_definitions import (
    FieldSpec,
    FieldType,
    FileHandle,
    default_value,
)

FormValues = dict[str, Any]


def has_value(value: Any) -> bool:
    """Presence check used by required-field gating."""
    if isinstance(value, (list, tuple)):
        return len(value) > 0
    return bool(value)


def initial_form_values(fields: Iterable[FieldSpec]) -> FormValues:
    """Default value for every field, keyed by field id."""
    return {field.id: default_value(field) for field in fields}


def format_form_response(values: FormValues) -> FormValues:
    """Prepare a value map for transport: missing values and empty lists become ''."""
    formatted: FormValues = {}
    for key, value in values.items():
        if value is None or (isinstance(value, (list, tuple)) and len(value) == 0):
            formatted[key] = ""
        else:
            formatted[key] = value
    return formatted


def is_form_valid(
    fields: Iterable[FieldSpec],
    values: FormValues,
    errors: dict[str, str],
) -> bool:
    """True if every required field has a value and no errors are recorded."""
    for field in fields:
        if not field.required:
            continue
        if errors.get(field.id) or not has_value(values.get(field.id)):
            return False
    return len(errors) == 0


def get_field_value(field: FieldSpec, values: FormValues) -> Any:
    value = values.get(field.id)
    if not value:
        return default_value(field)
    return value


def coerce_field_value(field: FieldSpec, value: Any) -> Any:
    """Convert JSON payloads (file dicts, tuples) into the shapes validators expect."""
    if field.field_type == FieldType.FILE:
        if isinstance(value, dict):
            return FileHandle.model_validate(value)
        if isinstance(value, (list, tuple)):
            return [
                FileHandle.model_validate(item) if isinstance(item, dict) else item
                for item in value
            ]
    elif field.field_type == FieldType.MULTI_CHOICE and isinstance(value, tuple):
        return list(value)
    return value


def to_json_value(value: Any) -> Any:
    """JSON-compatible form of a stored value."""
    if isinstance(value, FileHandle):
        return value.model_dump()
    if isinstance(value, (list, tuple)):
        return [to_json_value(item) for item in value]
    return value
