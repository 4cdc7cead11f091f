"""
Validation result models.

``RuleResult`` is the outcome of evaluating one rule against one value;
``ValidationResult`` is a whole-form report.
"""

from typing import Any

from pydantic import BaseModel, Field


class RuleResult(BaseModel):
    """Outcome of one rule evaluation."""

    valid: bool
    message: str | None = None


class FieldValidationError(BaseModel):
    """Validation error for a specific field."""

    field_id: str = Field(..., description="Id of the field with error")
    rule: str = Field(..., description="Kind of the first failing rule")
    message: str = Field(..., description="Rule message")
    received: Any | None = Field(default=None, description="Received value")


class ValidationResult(BaseModel):
    """Result of form validation."""

    is_valid: bool = Field(..., description="Whether the form data is valid")
    errors: list[FieldValidationError] = Field(
        default_factory=list, description="List of validation errors"
    )
    validated_data: dict[str, Any] | None = Field(
        default=None, description="Formatted response if valid"
    )
    warnings: list[str] = Field(
        default_factory=list, description="Non-blocking warnings"
    )

    @property
    def error_count(self) -> int:
        """Get the number of validation errors."""
        return len(self.errors)

    def get_field_errors(self, field_id: str) -> list[FieldValidationError]:
        """Get all errors for a specific field."""
        return [e for e in self.errors if e.field_id == field_id]

    def to_error_dict(self) -> dict[str, str]:
        """Convert errors to a dict mapping field ids to messages."""
        return {error.field_id: error.message for error in self.errors}
