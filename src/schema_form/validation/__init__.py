"""
Validation engine for Schema-Form.

- Rule evaluator (one rule, one value, never raises)
- Field validator and form validation state
- Structural schema checks
"""

from schema_form.validation.field_validator import (
    FormValidationState,
    first_failing_rule,
    validate_field,
    validate_values,
)
from schema_form.validation.rules import evaluate
from schema_form.validation.schema_checks import (
    SchemaCheckResult,
    SchemaStructureError,
    UnassignedFieldsError,
    check_schema,
    parse_schema,
    parse_schema_json,
    serialize_schema,
)

__all__ = [
    "evaluate",
    "FormValidationState",
    "first_failing_rule",
    "validate_field",
    "validate_values",
    "SchemaCheckResult",
    "SchemaStructureError",
    "UnassignedFieldsError",
    "check_schema",
    "parse_schema",
    "parse_schema_json",
    "serialize_schema",
]
