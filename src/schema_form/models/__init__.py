"""
Data models for Schema-Form.

This module contains Pydantic models for:
- Field and rule definitions (the form schema)
- Multi-step configuration
- Validation results
"""

from schema_form.models.field_definitions import (
    CHOICE_TYPES,
    FieldSpec,
    FieldType,
    FileHandle,
    RuleKind,
    ValidationRule,
    default_value,
)
from schema_form.models.steps import (
    MultiStepConfig,
    StepAssignment,
    StepProgress,
    StepSpec,
)
from schema_form.models.validation_result import (
    FieldValidationError,
    RuleResult,
    ValidationResult,
)

__all__ = [
    # Schema
    "CHOICE_TYPES",
    "FieldSpec",
    "FieldType",
    "FileHandle",
    "RuleKind",
    "ValidationRule",
    "default_value",
    # Steps
    "MultiStepConfig",
    "StepAssignment",
    "StepProgress",
    "StepSpec",
    # Validation
    "FieldValidationError",
    "RuleResult",
    "ValidationResult",
]
