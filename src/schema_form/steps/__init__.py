"""
Multi-step support: step derivation and navigation.
"""

from schema_form.steps.deriver import (
    create_custom_multi_step_config,
    create_multi_step_config,
    fields_from_config,
    finalize_step_config,
    find_overlapping_fields,
    find_unassigned_fields,
    get_current_step_fields,
    validate_current_step,
)
from schema_form.steps.navigator import StepNavigator, StepTransition

__all__ = [
    "create_custom_multi_step_config",
    "create_multi_step_config",
    "fields_from_config",
    "finalize_step_config",
    "find_overlapping_fields",
    "find_unassigned_fields",
    "get_current_step_fields",
    "validate_current_step",
    "StepNavigator",
    "StepTransition",
]
