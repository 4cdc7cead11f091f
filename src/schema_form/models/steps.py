"""
Multi-step form models.

A ``MultiStepConfig`` is an ordered sequence of ``StepSpec`` objects with
1-based contiguous ids, plus the navigation policy flags.
"""

from typing import Any

from pydantic import BaseModel, Field, model_validator

from schema_form.models.field_definitions import FieldSpec


class StepSpec(BaseModel):
    """One page of a multi-step form."""

    id: int = Field(..., ge=1, description="1-based step number")
    title: str = Field(..., description="Step title")
    description: str | None = Field(default=None)
    fields: list[FieldSpec] = Field(default_factory=list)


class StepAssignment(BaseModel):
    """Explicit field assignment for one step, as produced by a step editor."""

    title: str
    description: str | None = None
    field_ids: list[str] = Field(default_factory=list, alias="fieldIds")

    model_config = {"populate_by_name": True}


class MultiStepConfig(BaseModel):
    """Steps of a multi-step form plus navigation policy."""

    steps: list[StepSpec] = Field(default_factory=list)
    allow_step_navigation: bool = Field(default=True, alias="allowStepNavigation")
    validate_on_step_change: bool = Field(default=True, alias="validateOnStepChange")
    show_progress_bar: bool = Field(default=True, alias="showProgressBar")

    model_config = {"populate_by_name": True}

    @model_validator(mode="after")
    def _check_step_ids(self) -> "MultiStepConfig":
        ids = [step.id for step in self.steps]
        if ids != list(range(1, len(ids) + 1)):
            raise ValueError(f"Step ids must be contiguous from 1, got {ids}")
        return self

    @property
    def step_count(self) -> int:
        return len(self.steps)

    def get_step(self, step_id: int) -> StepSpec | None:
        for step in self.steps:
            if step.id == step_id:
                return step
        return None

    def all_fields(self) -> list[FieldSpec]:
        """Every field across all steps, in step order."""
        return [field for step in self.steps for field in step.fields]

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class StepProgress(BaseModel):
    """Progress indicator data for the current step."""

    current_step: int
    total_steps: int
    title: str

    @property
    def percent(self) -> float:
        if self.total_steps == 0:
            return 0.0
        return self.current_step / self.total_steps * 100

    @property
    def label(self) -> str:
        return f"Step {self.current_step} of {self.total_steps} ({round(self.percent)}% complete)"
