"""
Structural checks for form schemas.

Schemas arrive as JSON (from storage or a text editor). A schema with any
structural error is rejected as a whole; it is never partially applied.
"""

import json
import re
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from schema_form.models.field_definitions import FieldSpec, RuleKind

# Conventional field id (alphanumeric + underscore)
VALID_FIELD_ID = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_]*$")


class SchemaStructureError(ValueError):
    """A schema or step configuration that must not be applied."""

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors) or "Invalid schema")


class UnassignedFieldsError(SchemaStructureError):
    """A custom step configuration leaves fields without a step."""

    def __init__(self, field_ids: list[str]):
        self.field_ids = list(field_ids)
        super().__init__(
            [f"Fields not assigned to any step: {', '.join(self.field_ids)}"]
        )


class SchemaCheckResult(BaseModel):
    """Result of a schema structure check."""

    is_valid: bool = Field(..., description="Whether the schema can be applied")
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


def _check_field_id(field_id: str) -> tuple[bool, str | None]:
    """Validate a field id."""
    if not field_id:
        return False, "Field id cannot be empty"
    if len(field_id) > 100:
        return False, "Field id too long"
    if not VALID_FIELD_ID.match(field_id):
        return False, "Unusual characters in field id"
    return True, None


def _inspect(raw: Any) -> tuple[SchemaCheckResult, list[FieldSpec]]:
    errors: list[str] = []
    warnings: list[str] = []
    fields: list[FieldSpec] = []

    if not isinstance(raw, list):
        errors.append("Schema must be an array of form fields")
        return SchemaCheckResult(is_valid=False, errors=errors), fields

    seen: set[str] = set()
    for index, item in enumerate(raw):
        if not isinstance(item, dict):
            errors.append(f"Field at index {index} must be an object")
            continue

        name = item.get("id") or f"#{index}"
        try:
            field = FieldSpec.model_validate(item)
        except ValidationError as e:
            for detail in e.errors():
                location = ".".join(str(part) for part in detail["loc"])
                prefix = f"{location}: " if location else ""
                errors.append(f"Field '{name}': {prefix}{detail['msg']}")
            continue

        if field.id in seen:
            errors.append(f"Duplicate field id: {field.id}")
        seen.add(field.id)

        is_valid, problem = _check_field_id(field.id)
        if not is_valid:
            warnings.append(f"Field '{field.id}': {problem}")

        if field.field_type is None:
            warnings.append(f"Field '{field.id}' has unknown type: {field.type}")

        for rule in field.validation:
            if rule.kind == RuleKind.PATTERN and rule.compiled_pattern() is None:
                errors.append(f"Field '{field.id}': invalid pattern {rule.value!r}")
            elif rule.kind == RuleKind.UNKNOWN:
                warnings.append(f"Field '{field.id}' has unknown rule type: {rule.type}")

        fields.append(field)

    result = SchemaCheckResult(
        is_valid=len(errors) == 0,
        errors=errors,
        warnings=warnings,
    )
    return result, fields


def check_schema(raw: Any) -> SchemaCheckResult:
    """Check a decoded JSON schema without applying it."""
    result, _ = _inspect(raw)
    return result


def parse_schema(raw: Any) -> list[FieldSpec]:
    """
    Build fields from a decoded JSON schema.

    Raises:
        SchemaStructureError: If the schema has any structural error.
    """
    result, fields = _inspect(raw)
    if not result.is_valid:
        raise SchemaStructureError(result.errors)
    return fields


def parse_schema_json(text: str) -> list[FieldSpec]:
    """Parse schema JSON text, as typed into a schema editor."""
    try:
        raw = json.loads(text)
    except json.JSONDecodeError as e:
        raise SchemaStructureError([f"Invalid JSON: {e}"]) from e
    return parse_schema(raw)


def serialize_schema(fields: list[FieldSpec], indent: int | None = 2) -> str:
    """Serialize fields to JSON; pattern rules are written as their source text."""
    return json.dumps([field.to_wire() for field in fields], indent=indent)
