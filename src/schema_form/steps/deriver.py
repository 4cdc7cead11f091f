"""
Step deriver.

Partitions a flat field list into the steps of a multi-step form, either
automatically in fixed-size pages or from explicit per-step field
assignments. Fields of each step are copies stamped with their step number.
"""

import logging
from typing import Any, Iterable

from schema_form.config import get_config
from schema_form.form_helpers import FormValues, has_value
from schema_form.models.field_definitions import FieldSpec
from schema_form.models.steps import MultiStepConfig, StepAssignment, StepSpec
from schema_form.validation.schema_checks import UnassignedFieldsError

logger = logging.getLogger("schema-form")

AssignmentInput = StepAssignment | dict[str, Any] | tuple


def _stamp(fields: Iterable[FieldSpec], step_id: int) -> list[FieldSpec]:
    return [field.model_copy(update={"step": step_id}) for field in fields]


def _with_policy(steps: list[StepSpec]) -> MultiStepConfig:
    config = get_config()
    return MultiStepConfig(
        steps=steps,
        allow_step_navigation=config.allow_step_navigation,
        validate_on_step_change=config.validate_on_step_change,
        show_progress_bar=config.show_progress_bar,
    )


def _as_assignment(item: AssignmentInput) -> StepAssignment:
    if isinstance(item, StepAssignment):
        return item
    if isinstance(item, dict):
        return StepAssignment.model_validate(item)
    title, description, field_ids = item
    return StepAssignment(title=title, description=description, field_ids=list(field_ids))


def create_multi_step_config(
    fields: Iterable[FieldSpec],
    fields_per_step: int | None = None,
) -> MultiStepConfig:
    """
    Split fields, in order, into pages of ``fields_per_step``.

    The last page may be smaller. Steps are titled "Step k" and described
    by the field range they cover.

    Args:
        fields: Fields in schema order.
        fields_per_step: Page size. Defaults to ``config.fields_per_step``.

    Raises:
        ValueError: If the page size is less than 1.
    """
    size = fields_per_step if fields_per_step is not None else get_config().fields_per_step
    if size < 1:
        raise ValueError(f"fields_per_step must be at least 1, got {size}")

    fields = list(fields)
    total = len(fields)
    steps = []
    for index, start in enumerate(range(0, total, size)):
        chunk = fields[start:start + size]
        step_id = index + 1
        steps.append(
            StepSpec(
                id=step_id,
                title=f"Step {step_id}",
                description=f"Complete the following fields ({start + 1}-{start + len(chunk)} of {total})",
                fields=_stamp(chunk, step_id),
            )
        )
    return _with_policy(steps)


def create_custom_multi_step_config(
    fields: Iterable[FieldSpec],
    assignments: Iterable[AssignmentInput],
) -> MultiStepConfig:
    """
    Build one step per assignment from the fields it names.

    Fields keep schema order within a step. Fields named by several
    assignments appear in each of those steps; unassigned fields appear in
    none. Use ``finalize_step_config`` to reject incomplete assignments.
    """
    fields = list(fields)
    steps = []
    for index, item in enumerate(assignments):
        assignment = _as_assignment(item)
        wanted = set(assignment.field_ids)
        step_id = index + 1
        steps.append(
            StepSpec(
                id=step_id,
                title=assignment.title,
                description=assignment.description,
                fields=_stamp((f for f in fields if f.id in wanted), step_id),
            )
        )
    return _with_policy(steps)


def find_unassigned_fields(
    fields: Iterable[FieldSpec],
    assignments: Iterable[AssignmentInput],
) -> list[FieldSpec]:
    assigned = {
        field_id
        for item in assignments
        for field_id in _as_assignment(item).field_ids
    }
    return [field for field in fields if field.id not in assigned]


def find_overlapping_fields(assignments: Iterable[AssignmentInput]) -> list[str]:
    """Field ids named by more than one assignment."""
    seen: set[str] = set()
    overlapping: list[str] = []
    for item in assignments:
        for field_id in set(_as_assignment(item).field_ids):
            if field_id in seen and field_id not in overlapping:
                overlapping.append(field_id)
            seen.add(field_id)
    return overlapping


def finalize_step_config(
    fields: Iterable[FieldSpec],
    assignments: Iterable[AssignmentInput],
) -> MultiStepConfig:
    """
    Build a custom step configuration, rejecting it if any field is unassigned.

    Overlapping assignments are allowed and only logged.

    Raises:
        UnassignedFieldsError: If some schema field belongs to no step.
    """
    fields = list(fields)
    assignments = [_as_assignment(item) for item in assignments]

    unassigned = find_unassigned_fields(fields, assignments)
    if unassigned:
        raise UnassignedFieldsError([field.id for field in unassigned])

    overlapping = find_overlapping_fields(assignments)
    if overlapping:
        logger.warning(f"Fields assigned to more than one step: {overlapping}")

    return create_custom_multi_step_config(fields, assignments)


def fields_from_config(config: MultiStepConfig) -> list[FieldSpec]:
    return config.all_fields()


def get_current_step_fields(config: MultiStepConfig, current_step: int) -> list[FieldSpec]:
    step = config.get_step(current_step)
    return list(step.fields) if step is not None else []


def validate_current_step(
    fields: Iterable[FieldSpec],
    values: FormValues,
    errors: dict[str, str],
) -> bool:
    """
    Presence gate for leaving a step.

    Every required field must have a value and no stored error. Optional
    fields and rule-level failures of fields not marked required do not
    block.
    """
    for field in fields:
        if not field.required:
            continue
        if errors.get(field.id) or not has_value(values.get(field.id)):
            return False
    return True
