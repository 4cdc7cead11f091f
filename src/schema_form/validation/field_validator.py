"""
Field validator and form validation state.

Rules run in declaration order and the first failing rule's message wins,
so a ``required`` rule declared before ``pattern`` reports the more
specific message for empty input. Validation errors are data
(``None`` or a message), never exceptions.
"""

from typing import Any, Iterable

from schema_form.form_helpers import FormValues, format_form_response
from schema_form.models.field_definitions import FieldSpec, ValidationRule
from schema_form.models.validation_result import FieldValidationError, ValidationResult
from schema_form.validation.rules import evaluate


def first_failing_rule(value: Any, rules: Iterable[ValidationRule]) -> ValidationRule | None:
    for rule in rules:
        if not evaluate(value, rule).valid:
            return rule
    return None


def validate_field(value: Any, rules: Iterable[ValidationRule]) -> str | None:
    """Message of the first failing rule, or None if all pass."""
    rule = first_failing_rule(value, rules)
    return rule.message if rule is not None else None


def validate_values(fields: Iterable[FieldSpec], values: FormValues) -> ValidationResult:
    """
    Validate a value map against every field and report each failure.

    Args:
        fields: Fields to validate.
        values: Value map keyed by field id.

    Returns:
        ValidationResult whose ``validated_data`` is the formatted
        response when the form is valid.
    """
    fields = list(fields)
    errors = []
    for field in fields:
        value = values.get(field.id)
        rule = first_failing_rule(value, field.validation)
        if rule is not None:
            errors.append(
                FieldValidationError(
                    field_id=field.id,
                    rule=rule.type,
                    message=rule.message,
                    received=value,
                )
            )
    known = {field.id for field in fields}
    warnings = [f"Value for field not in schema: {key}" for key in values if key not in known]
    is_valid = not errors
    return ValidationResult(
        is_valid=is_valid,
        errors=errors,
        warnings=warnings,
        validated_data=format_form_response(values) if is_valid else None,
    )


class FormValidationState:
    """
    Per-field error and touched tracking for a field set.

    ``validate_form`` is the only operation that replaces the whole error
    map; the per-field setters add or remove single keys. Touched flags
    only go back to False through ``clear_touched``.
    """

    def __init__(self, fields: Iterable[FieldSpec]):
        self.errors: dict[str, str] = {}
        self.touched: dict[str, bool] = {}
        self.set_fields(fields)

    def set_fields(self, fields: Iterable[FieldSpec]) -> None:
        self._fields = list(fields)
        self._by_id = {field.id: field for field in self._fields}

    @property
    def fields(self) -> list[FieldSpec]:
        return list(self._fields)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def validate_field_value(self, field_id: str, value: Any) -> str | None:
        field = self._by_id.get(field_id)
        if field is None or not field.validation:
            return None
        return validate_field(value, field.validation)

    def set_field_error(self, field_id: str, message: str | None) -> None:
        if message:
            self.errors[field_id] = message
        else:
            self.errors.pop(field_id, None)

    def set_field_touched(self, field_id: str) -> None:
        self.touched[field_id] = True

    def is_touched(self, field_id: str) -> bool:
        return self.touched.get(field_id, False)

    def visible_error(self, field_id: str) -> str | None:
        """The field's error, only once it has been touched."""
        if not self.is_touched(field_id):
            return None
        return self.errors.get(field_id)

    def validate_form(self, values: FormValues) -> bool:
        new_errors: dict[str, str] = {}
        for field in self._fields:
            error = self.validate_field_value(field.id, values.get(field.id))
            if error:
                new_errors[field.id] = error
        self.errors = new_errors
        return not new_errors

    def clear_errors(self) -> None:
        self.errors = {}

    def clear_touched(self) -> None:
        self.touched = {}
