"""
Schema-Form: schema-driven form state and validation.

Describe a form as a list of fields with declarative validation rules,
optionally split into steps, and let the engine track values, errors,
touched flags, step position and submission.

Simple Usage:
    from schema_form import FormOrchestrator, parse_schema_json

    fields = parse_schema_json(schema_text)

    form = FormOrchestrator(fields, on_submit=send, on_error=print)
    form.on_field_change("email", "user@example.com")

    await form.on_submit()

Multi-step Usage:
    from schema_form import FormOrchestrator, create_multi_step_config

    config = create_multi_step_config(fields, fields_per_step=3)
    form = FormOrchestrator(config, on_submit=send, store=store, persist_data=True)

    form.on_next()       # gated on required fields of the current step
    form.on_previous()

Validation only:
    from schema_form import validate_field, validate_values

    message = validate_field("", field.validation)
    result = validate_values(fields, {"email": "nope"})
"""

from schema_form.orchestrator import (
    FormOrchestrator,
    WidgetProps,
)
from schema_form.models.field_definitions import (
    FieldSpec,
    FieldType,
    FileHandle,
    RuleKind,
    ValidationRule,
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
from schema_form.form_helpers import (
    format_form_response,
    initial_form_values,
    is_form_valid,
)
from schema_form.validation import (
    FormValidationState,
    SchemaStructureError,
    UnassignedFieldsError,
    check_schema,
    evaluate,
    parse_schema,
    parse_schema_json,
    serialize_schema,
    validate_field,
    validate_values,
)
from schema_form.state import (
    FormValueStore,
    InMemoryStore,
    JsonFileStore,
    storage_key,
)
from schema_form.steps import (
    StepNavigator,
    StepTransition,
    create_custom_multi_step_config,
    create_multi_step_config,
    finalize_step_config,
)
from schema_form.schema_store import SchemaStore

__all__ = [
    # Main interface
    "FormOrchestrator",
    "WidgetProps",
    # Schema models
    "FieldSpec",
    "FieldType",
    "FileHandle",
    "RuleKind",
    "ValidationRule",
    "SchemaStore",
    # Steps
    "MultiStepConfig",
    "StepAssignment",
    "StepProgress",
    "StepSpec",
    "StepNavigator",
    "StepTransition",
    "create_custom_multi_step_config",
    "create_multi_step_config",
    "finalize_step_config",
    # Validation
    "FieldValidationError",
    "FormValidationState",
    "RuleResult",
    "ValidationResult",
    "evaluate",
    "validate_field",
    "validate_values",
    # Schema parsing
    "SchemaStructureError",
    "UnassignedFieldsError",
    "check_schema",
    "parse_schema",
    "parse_schema_json",
    "serialize_schema",
    # Values and persistence
    "FormValueStore",
    "InMemoryStore",
    "JsonFileStore",
    "format_form_response",
    "initial_form_values",
    "is_form_valid",
    "storage_key",
]

__version__ = "0.1.0"
