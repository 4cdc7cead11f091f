"""Tests for step derivation and navigation."""

import pytest

from schema_form.models.steps import MultiStepConfig, StepAssignment
from schema_form.state.persistence import InMemoryStore
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
from schema_form.validation.field_validator import FormValidationState
from schema_form.validation.schema_checks import UnassignedFieldsError


class TestAutomaticSteps:
    """Tests for fixed-size step derivation."""

    def test_seven_fields_in_pages_of_three(self, seven_fields):
        config = create_multi_step_config(seven_fields, 3)
        assert [len(step.fields) for step in config.steps] == [3, 3, 1]
        assert [step.title for step in config.steps] == ["Step 1", "Step 2", "Step 3"]
        assert [step.id for step in config.steps] == [1, 2, 3]
        assert config.steps[0].description == "Complete the following fields (1-3 of 7)"
        assert config.steps[2].description == "Complete the following fields (7-7 of 7)"

    def test_partition_is_exact(self, seven_fields):
        config = create_multi_step_config(seven_fields, 3)
        assert [f.id for f in fields_from_config(config)] == [f.id for f in seven_fields]

    def test_fields_are_stamped(self, seven_fields):
        config = create_multi_step_config(seven_fields, 3)
        assert [f.step for f in config.steps[1].fields] == [2, 2, 2]
        assert seven_fields[3].step is None

    def test_policy_defaults(self, seven_fields):
        config = create_multi_step_config(seven_fields)
        assert config.allow_step_navigation
        assert config.validate_on_step_change
        assert config.show_progress_bar

    def test_empty_schema(self):
        assert create_multi_step_config([], 3).steps == []

    def test_page_size_must_be_positive(self, seven_fields):
        with pytest.raises(ValueError):
            create_multi_step_config(seven_fields, 0)


class TestCustomSteps:
    """Tests for explicit step assignment."""

    def test_schema_order_within_step(self, seven_fields):
        config = create_custom_multi_step_config(
            seven_fields,
            [
                ("Later", None, ["field_5", "field_2"]),
                {"title": "Rest", "fieldIds": ["field_1", "field_3", "field_4", "field_6", "field_7"]},
            ],
        )
        assert [f.id for f in config.steps[0].fields] == ["field_2", "field_5"]
        assert config.steps[0].title == "Later"
        assert [f.step for f in config.steps[1].fields] == [2] * 5

    def test_overlap_is_not_deduplicated(self, seven_fields):
        config = create_custom_multi_step_config(
            seven_fields,
            [StepAssignment(title="A", field_ids=["field_1"]), StepAssignment(title="B", field_ids=["field_1"])],
        )
        assert [f.id for f in config.steps[0].fields] == ["field_1"]
        assert [f.id for f in config.steps[1].fields] == ["field_1"]
        assert find_overlapping_fields([("A", None, ["field_1"]), ("B", None, ["field_1", "field_2"])]) == ["field_1"]

    def test_unassigned_fields(self, seven_fields):
        assignments = [("A", None, ["field_1", "field_2"])]
        unassigned = find_unassigned_fields(seven_fields, assignments)
        assert [f.id for f in unassigned] == ["field_3", "field_4", "field_5", "field_6", "field_7"]

    def test_finalize_rejects_unassigned(self, seven_fields):
        with pytest.raises(UnassignedFieldsError) as exc_info:
            finalize_step_config(seven_fields, [("A", None, [f"field_{i}" for i in range(1, 7)])])
        assert exc_info.value.field_ids == ["field_7"]

    def test_finalize_accepts_complete_assignment(self, seven_fields):
        config = finalize_step_config(
            seven_fields,
            [
                ("A", "first", ["field_1", "field_2", "field_3"]),
                ("B", None, ["field_3", "field_4", "field_5", "field_6", "field_7"]),
            ],
        )
        assert config.step_count == 2
        assert config.steps[0].description == "first"


class TestStepGate:
    """Tests for the required-field presence gate."""

    def test_required_fields_must_be_present(self, mixed_fields):
        values = {"name": "Ada", "email": "ada@example.com", "hobbies": [], "bio": ""}
        assert not validate_current_step(mixed_fields, values, {})

        values["hobbies"] = ["Art"]
        assert validate_current_step(mixed_fields, values, {})

    def test_stored_error_blocks(self, basic_fields):
        values = {"name": "Ada", "email": "nope"}
        assert not validate_current_step(basic_fields, values, {"email": "Invalid email format"})

    def test_rule_failures_without_stored_error_do_not_block(self, basic_fields):
        """Test that the gate checks presence, not every rule."""
        assert validate_current_step(basic_fields, {"name": "Ada", "email": "nope"}, {})

    def test_optional_errors_do_not_block(self, mixed_fields):
        values = {"name": "Ada", "email": "a@b.com", "hobbies": ["Art"], "bio": "x" * 50}
        assert validate_current_step(mixed_fields, values, {"bio": "Bio too long"})


@pytest.fixture
def config(mixed_fields) -> MultiStepConfig:
    return create_multi_step_config(mixed_fields, 2)


class TestStepNavigator:
    """Tests for StepNavigator."""

    def test_initial_state(self, config):
        navigator = StepNavigator(config)
        assert navigator.current_step == 1
        assert navigator.is_first_step
        assert not navigator.is_last_step
        assert [f.id for f in navigator.current_fields] == ["name", "email"]
        assert get_current_step_fields(config, 5) == []

    def test_next_refused_when_required_field_empty(self, config, mixed_fields):
        navigator = StepNavigator(config)
        validation = FormValidationState(mixed_fields)

        result = navigator.next({"name": "Ada", "email": ""}, validation)
        assert result == StepTransition.REFUSED
        assert navigator.current_step == 1
        assert validation.touched == {"name": True, "email": True}

    def test_next_advances_when_filled(self, config, mixed_fields):
        navigator = StepNavigator(config)
        validation = FormValidationState(mixed_fields)

        result = navigator.next({"name": "Ada", "email": "ada@example.com"}, validation)
        assert result == StepTransition.ADVANCED
        assert navigator.current_step == 2
        assert navigator.is_last_step

    def test_next_from_last_step_is_noop(self, config, mixed_fields):
        navigator = StepNavigator(config)
        validation = FormValidationState(mixed_fields)
        values = {"name": "Ada", "email": "a@b.com", "hobbies": ["Art"], "bio": ""}
        navigator.next(values, validation)

        assert navigator.next(values, validation) == StepTransition.UNCHANGED
        assert navigator.current_step == 2

    def test_previous_from_first_step_is_noop(self, config):
        navigator = StepNavigator(config)
        assert navigator.previous() == StepTransition.UNCHANGED
        assert navigator.current_step == 1

    def test_gate_disabled(self, mixed_fields):
        config = create_multi_step_config(mixed_fields, 2).model_copy(
            update={"validate_on_step_change": False}
        )
        navigator = StepNavigator(config)
        validation = FormValidationState(mixed_fields)

        assert navigator.next({}, validation) == StepTransition.ADVANCED
        assert validation.touched == {}

    def test_backward_navigation_disabled(self, mixed_fields):
        config = create_multi_step_config(mixed_fields, 2).model_copy(
            update={"allow_step_navigation": False, "validate_on_step_change": False}
        )
        navigator = StepNavigator(config)
        navigator.next({}, FormValidationState(mixed_fields))

        assert not navigator.can_go_back
        assert navigator.previous() == StepTransition.UNCHANGED
        assert navigator.current_step == 2

    def test_position_is_persisted(self, config, mixed_fields):
        kv = InMemoryStore()
        navigator = StepNavigator(config, kv, "kyc-multistep-step-data")
        navigator.next({"name": "Ada", "email": "a@b.com"}, FormValidationState(mixed_fields))
        assert kv.get("kyc-multistep-step-data") == {"currentStep": 2}

        restored = StepNavigator(config, kv, "kyc-multistep-step-data")
        assert restored.current_step == 2

        restored.previous()
        assert kv.get("kyc-multistep-step-data") == {"currentStep": 1}

    def test_restored_position_is_clamped(self, config):
        kv = InMemoryStore({"step": {"currentStep": 99}})
        assert StepNavigator(config, kv, "step").current_step == 2

        kv.set("step", {"currentStep": -3})
        assert StepNavigator(config, kv, "step").current_step == 1

    def test_refused_transition_is_not_persisted(self, config, mixed_fields):
        kv = InMemoryStore()
        navigator = StepNavigator(config, kv, "step")
        navigator.next({}, FormValidationState(mixed_fields))
        assert kv.get("step") is None

    def test_reset_and_progress(self, config, mixed_fields):
        navigator = StepNavigator(config)
        navigator.next({"name": "Ada", "email": "a@b.com"}, FormValidationState(mixed_fields))
        progress = navigator.progress()
        assert progress.current_step == 2
        assert progress.total_steps == 2
        assert progress.title == "Step 2"

        navigator.reset()
        assert navigator.current_step == 1

    def test_set_config_clamps(self, config, seven_fields):
        navigator = StepNavigator(config)
        navigator.current_step = 2
        navigator.set_config(create_multi_step_config(seven_fields[:2], 3))
        assert navigator.current_step == 1
