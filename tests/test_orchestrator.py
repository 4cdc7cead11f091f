"""Tests for FormOrchestrator."""

import asyncio

import pytest

from schema_form.models.field_definitions import FieldSpec
from schema_form.orchestrator import FormOrchestrator
from schema_form.state.persistence import InMemoryStore
from schema_form.steps.deriver import create_multi_step_config
from schema_form.steps.navigator import StepTransition


class Recorder:
    """Collects callback invocations."""

    def __init__(self, fail_with: Exception | None = None):
        self.submitted: list[dict] = []
        self.errors: list[str] = []
        self.successes = 0
        self.fail_with = fail_with

    async def submit(self, data):
        self.submitted.append(data)
        if self.fail_with is not None:
            raise self.fail_with

    def error(self, message):
        self.errors.append(message)

    def success(self):
        self.successes += 1


def make_form(schema, recorder: Recorder, **kwargs) -> FormOrchestrator:
    return FormOrchestrator(
        schema,
        on_submit=recorder.submit,
        on_success=recorder.success,
        on_error=recorder.error,
        **kwargs,
    )


class TestFieldEvents:
    """Tests for change and blur handling."""

    def test_change_validates_and_touches(self, basic_fields):
        form = make_form(basic_fields, Recorder())
        form.on_field_change("email", "invalid-email")

        assert form.values["email"] == "invalid-email"
        assert form.errors == {"email": "Invalid email format"}
        assert form.touched == {"email": True}

        form.on_field_change("email", "ada@example.com")
        assert form.errors == {}

    def test_blur_only_touches(self, basic_fields):
        form = make_form(basic_fields, Recorder())
        form.on_field_blur("name")
        assert form.touched == {"name": True}
        assert form.errors == {}

    def test_unknown_field_is_ignored(self, basic_fields):
        form = make_form(basic_fields, Recorder())
        form.on_field_change("nickname", "Ada")
        form.on_field_blur("nickname")
        assert "nickname" not in form.values
        assert form.touched == {}

    def test_file_dict_is_coerced(self):
        upload = FieldSpec(id="passport", label="Passport", type="file")
        form = make_form([upload], Recorder())
        form.on_field_change("passport", {"name": "p.pdf", "size": 3, "type": "application/pdf"})
        assert form.values["passport"].name == "p.pdf"


class TestFieldProps:
    """Tests for the widget contract."""

    def test_error_hidden_until_touched(self, basic_fields):
        form = make_form(basic_fields, Recorder())
        form.validation.set_field_error("name", "Name is required")
        assert form.field_props("name").error is None

        form.on_field_blur("name")
        assert form.field_props("name").error == "Name is required"

    def test_callbacks_route_to_orchestrator(self, basic_fields):
        form = make_form(basic_fields, Recorder())
        props = form.field_props("name")
        props.on_change("Ada")
        assert form.values["name"] == "Ada"
        assert form.field_props("name").value == "Ada"

    def test_unknown_type_fallback(self):
        field = FieldSpec(id="sig", label="Signature", type="signature_pad")
        form = make_form([field], Recorder())
        assert form.field_props("sig").fallback == "Unknown field type: signature_pad"

    def test_unknown_field_raises(self, basic_fields):
        form = make_form(basic_fields, Recorder())
        with pytest.raises(KeyError):
            form.field_props("missing")

    def test_widgets_follow_visible_fields(self, basic_fields):
        form = make_form(basic_fields, Recorder())
        assert [w.field.id for w in form.widgets()] == ["name", "email"]


class TestSubmit:
    """Tests for submit handling."""

    def test_valid_submit(self, mixed_fields):
        recorder = Recorder()
        form = make_form(mixed_fields, recorder)
        form.on_field_change("name", "Ada")
        form.on_field_change("email", "ada@example.com")
        form.on_field_change("hobbies", ["Art"])

        assert asyncio.run(form.on_submit()) is True
        assert recorder.submitted == [
            {"name": "Ada", "email": "ada@example.com", "hobbies": ["Art"], "bio": ""}
        ]
        assert recorder.successes == 1
        assert recorder.errors == []
        assert not form.is_submitting

    def test_empty_list_submitted_as_empty_string(self):
        optional = FieldSpec(id="tags", label="Tags", type="multi_choice", options=["a", "b"])
        recorder = Recorder()
        form = make_form([optional], recorder)

        asyncio.run(form.on_submit())
        assert recorder.submitted == [{"tags": ""}]

    def test_invalid_submit_never_calls_callback(self, basic_fields):
        recorder = Recorder()
        form = make_form(basic_fields, recorder)
        form.on_field_change("email", "invalid-email")

        assert asyncio.run(form.on_submit()) is False
        assert recorder.submitted == []
        assert recorder.errors == ["Please fix all validation errors before submitting"]
        assert form.errors == {"name": "Name is required", "email": "Invalid email format"}
        assert form.touched == {"name": True, "email": True}

    def test_failing_callback_reports_message(self, basic_fields):
        recorder = Recorder(fail_with=RuntimeError("Server unavailable"))
        form = make_form(basic_fields, recorder)
        form.on_field_change("name", "Ada")
        form.on_field_change("email", "ada@example.com")

        assert asyncio.run(form.on_submit()) is False
        assert recorder.errors == ["Server unavailable"]
        assert recorder.successes == 0
        assert form.values["name"] == "Ada"
        assert form.touched == {"name": True, "email": True}
        assert not form.is_submitting

    def test_failing_callback_without_message(self, basic_fields):
        recorder = Recorder(fail_with=RuntimeError())
        form = make_form(basic_fields, recorder)
        form.on_field_change("name", "Ada")
        form.on_field_change("email", "ada@example.com")

        asyncio.run(form.on_submit())
        assert recorder.errors == ["An error occurred"]

    def test_concurrent_submit_is_ignored(self, basic_fields):
        """Test that a second submit while one is pending does nothing."""
        submitted = []

        async def scenario():
            release = asyncio.Event()

            async def slow_submit(data):
                submitted.append(data)
                await release.wait()

            form = FormOrchestrator(basic_fields, on_submit=slow_submit)
            form.on_field_change("name", "Ada")
            form.on_field_change("email", "ada@example.com")

            first = asyncio.create_task(form.on_submit())
            await asyncio.sleep(0)
            assert form.is_submitting
            second = await form.on_submit()
            release.set()
            return await first, second

        first, second = asyncio.run(scenario())
        assert first is True
        assert second is False
        assert len(submitted) == 1

    def test_failing_success_callback_reports_message(self, basic_fields):
        recorder = Recorder()

        def broken_success():
            raise RuntimeError("Redirect failed")

        form = FormOrchestrator(
            basic_fields,
            on_submit=recorder.submit,
            on_success=broken_success,
            on_error=recorder.error,
        )
        form.on_field_change("name", "Ada")
        form.on_field_change("email", "ada@example.com")

        assert asyncio.run(form.on_submit()) is False
        assert len(recorder.submitted) == 1
        assert recorder.errors == ["Redirect failed"]
        assert not form.is_submitting

    def test_callback_cannot_mutate_form_values(self, mixed_fields):
        """Test that the submitted map is detached from form state."""

        async def greedy_submit(data):
            data["hobbies"].append("Sports")
            data["name"] = "Changed"

        form = FormOrchestrator(mixed_fields, on_submit=greedy_submit)
        form.on_field_change("name", "Ada")
        form.on_field_change("email", "ada@example.com")
        form.on_field_change("hobbies", ["Art"])

        assert asyncio.run(form.on_submit()) is True
        assert form.values["hobbies"] == ["Art"]
        assert form.values["name"] == "Ada"

    def test_submit_without_error_callback(self, basic_fields):
        async def submit(data):
            raise ValueError("nope")

        form = FormOrchestrator(basic_fields, on_submit=submit)
        form.on_field_change("name", "Ada")
        form.on_field_change("email", "ada@example.com")
        assert asyncio.run(form.on_submit()) is False


class TestReset:
    """Tests for reset."""

    def test_reset_restores_defaults(self, mixed_fields):
        form = make_form(mixed_fields, Recorder())
        form.on_field_change("name", "Ada")
        form.on_field_change("hobbies", ["Art", "Music"])
        form.on_field_change("email", "bad")

        form.on_reset()
        assert form.values == {"name": "", "email": "", "hobbies": [], "bio": ""}
        assert form.errors == {}
        assert form.touched == {}

    def test_reset_persists_defaults(self, basic_fields):
        kv = InMemoryStore()
        form = make_form(basic_fields, Recorder(), store=kv, persist_data=True)
        form.on_field_change("name", "Ada")
        assert kv.get("kyc-form-data")["name"] == "Ada"

        form.on_reset()
        assert kv.get("kyc-form-data") == {"name": "", "email": ""}


class TestMultiStep:
    """Tests for multi-step forms."""

    @pytest.fixture
    def config(self, mixed_fields):
        return create_multi_step_config(mixed_fields, 2)

    def test_visible_fields_follow_step(self, config):
        form = make_form(config, Recorder())
        assert form.is_multi_step
        assert [f.id for f in form.visible_fields()] == ["name", "email"]

    def test_next_refused_reports_error(self, config):
        recorder = Recorder()
        form = make_form(config, recorder)

        assert form.on_next() == StepTransition.REFUSED
        assert form.current_step == 1
        assert recorder.errors == ["Please fix all validation errors before proceeding"]
        assert form.field_props("name").error is None

    def test_next_and_previous(self, config):
        form = make_form(config, Recorder())
        form.on_field_change("name", "Ada")
        form.on_field_change("email", "ada@example.com")

        assert form.on_next() == StepTransition.ADVANCED
        assert [f.id for f in form.visible_fields()] == ["hobbies", "bio"]
        assert form.on_previous() == StepTransition.RETREATED
        assert form.current_step == 1

    def test_submit_validates_every_step(self, config):
        """Test that fields on other steps still block submission."""
        recorder = Recorder()
        form = make_form(config, recorder)
        form.on_field_change("name", "Ada")
        form.on_field_change("email", "ada@example.com")
        form.on_next()

        assert asyncio.run(form.on_submit()) is False
        assert "hobbies" in form.errors
        assert recorder.submitted == []

    def test_progress(self, config):
        form = make_form(config, Recorder())
        assert form.progress().label == "Step 1 of 2 (50% complete)"

        hidden = config.model_copy(update={"show_progress_bar": False})
        assert make_form(hidden, Recorder()).progress() is None

    def test_single_step_has_no_progress(self, basic_fields):
        form = make_form(basic_fields, Recorder())
        assert form.progress() is None
        assert form.on_next() == StepTransition.UNCHANGED

    def test_step_and_values_persisted_under_multistep_keys(self, config):
        kv = InMemoryStore()
        form = make_form(config, Recorder(), store=kv)
        form.on_field_change("name", "Ada")
        form.on_field_change("email", "ada@example.com")
        form.on_next()

        assert kv.get("temp-multistep-form-data")["name"] == "Ada"
        assert kv.get("temp-multistep-step-data") == {"currentStep": 2}

        restored = make_form(config, Recorder(), store=kv)
        assert restored.current_step == 2
        assert restored.values["email"] == "ada@example.com"


class TestSetSchema:
    """Tests for schema changes on a live form."""

    def test_values_and_errors_reconciled(self, mixed_fields):
        form = make_form(mixed_fields, Recorder())
        form.on_field_change("name", "Ada")
        form.on_field_change("bio", "x" * 30)
        assert "bio" in form.errors

        country = FieldSpec(id="country", label="Country", type="drop_down", options=["TR", "DE"])
        form.set_schema([mixed_fields[0], country])

        assert form.values == {"name": "Ada", "country": ""}
        assert form.errors == {}
        assert form.get_field("bio") is None

    def test_kind_must_match(self, basic_fields, seven_fields):
        form = make_form(basic_fields, Recorder())
        with pytest.raises(ValueError):
            form.set_schema(create_multi_step_config(seven_fields, 3))

    def test_multi_step_schema_change_clamps_step(self, mixed_fields):
        config = create_multi_step_config(mixed_fields, 2)
        form = make_form(config, Recorder())
        form.on_field_change("name", "Ada")
        form.on_field_change("email", "ada@example.com")
        form.on_next()

        form.set_schema(create_multi_step_config(mixed_fields[:2], 2))
        assert form.current_step == 1
        assert set(form.values) == {"name", "email"}
