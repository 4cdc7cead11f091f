"""
Form Orchestrator.

This is the main entry point for Schema-Form. It wires the value store,
validation state and (for multi-step forms) the step navigator together
and exposes the operations a presentation layer calls: field change and
blur, next/previous, submit and reset.
"""

import copy
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterable

from schema_form.config import get_config
from schema_form.form_helpers import FormValues, coerce_field_value, format_form_response
from schema_form.models.field_definitions import FieldSpec
from schema_form.models.steps import MultiStepConfig, StepProgress
from schema_form.state.persistence import KeyValueStore, storage_key
from schema_form.state.value_store import FormValueStore
from schema_form.steps.deriver import fields_from_config
from schema_form.steps.navigator import StepNavigator, StepTransition
from schema_form.validation.field_validator import FormValidationState

logger = logging.getLogger("schema-form")

SubmitCallback = Callable[[FormValues], Awaitable[None]]
ErrorCallback = Callable[[str], None]
SuccessCallback = Callable[[], None]


@dataclass
class WidgetProps:
    """What a widget needs to render one field."""

    field: FieldSpec
    value: Any
    error: str | None
    on_change: Callable[[Any], None]
    on_blur: Callable[[], None]
    fallback: str | None = None


class FormOrchestrator:
    """
    Form state for a single-step or multi-step form.

    Usage:
        form = FormOrchestrator(fields, on_submit=send)

        form.on_field_change("email", "a@b.com")
        form.on_field_blur("email")

        submitted = await form.on_submit()

    Pass a ``MultiStepConfig`` instead of a field list for a multi-step
    form; ``on_next``/``on_previous`` then move between steps.
    """

    def __init__(
        self,
        schema: Iterable[FieldSpec] | MultiStepConfig,
        on_submit: SubmitCallback,
        on_success: SuccessCallback | None = None,
        on_error: ErrorCallback | None = None,
        store: KeyValueStore | None = None,
        persist_data: bool = False,
    ):
        """
        Initialize the orchestrator.

        Args:
            schema: Field list, or step configuration for a multi-step form.
            on_submit: Async callback receiving the formatted value map.
            on_success: Called after ``on_submit`` completes.
            on_error: Called with a message when submit or step gating fails.
            store: Optional persistence store for values and step position.
            persist_data: Use durable rather than temporary storage keys.
        """
        self._on_submit = on_submit
        self._on_success = on_success
        self._on_error = on_error
        self.is_submitting = False

        if isinstance(schema, MultiStepConfig):
            self.step_config: MultiStepConfig | None = schema
            self.fields = fields_from_config(schema)
            values_key = storage_key("multistep-form-data", persist_data)
            step_key = storage_key("multistep-step-data", persist_data)
        else:
            self.step_config = None
            self.fields = list(schema)
            values_key = storage_key("form-data", persist_data)
            step_key = None

        self._by_id = {field.id: field for field in self.fields}
        self._values = FormValueStore(self.fields, store, values_key if store else None)
        self.validation = FormValidationState(self.fields)
        self.navigator = (
            StepNavigator(self.step_config, store, step_key if store else None)
            if self.step_config is not None
            else None
        )

    @property
    def values(self) -> FormValues:
        return self._values.values

    @property
    def errors(self) -> dict[str, str]:
        return dict(self.validation.errors)

    @property
    def touched(self) -> dict[str, bool]:
        return dict(self.validation.touched)

    @property
    def is_valid(self) -> bool:
        return self.validation.is_valid

    @property
    def is_multi_step(self) -> bool:
        return self.navigator is not None

    @property
    def current_step(self) -> int:
        return self.navigator.current_step if self.navigator is not None else 1

    def get_field(self, field_id: str) -> FieldSpec | None:
        return self._by_id.get(field_id)

    def on_field_change(self, field_id: str, value: Any) -> None:
        """Store a new value and recompute the field's error."""
        field = self._by_id.get(field_id)
        if field is None:
            logger.debug(f"Ignoring change for unknown field '{field_id}'")
            return

        value = coerce_field_value(field, value)
        self._values.update(field_id, value)
        self.validation.set_field_error(field_id, self.validation.validate_field_value(field_id, value))
        self.validation.set_field_touched(field_id)

    def on_field_blur(self, field_id: str) -> None:
        if field_id in self._by_id:
            self.validation.set_field_touched(field_id)

    def on_next(self) -> StepTransition:
        if self.navigator is None:
            return StepTransition.UNCHANGED
        result = self.navigator.next(self.values, self.validation)
        if result == StepTransition.REFUSED:
            self._report_error(get_config().step_invalid_message)
        return result

    def on_previous(self) -> StepTransition:
        if self.navigator is None:
            return StepTransition.UNCHANGED
        return self.navigator.previous()

    async def on_submit(self) -> bool:
        """
        Validate every field and hand the formatted values to the submit callback.

        Ignored while a previous submit is still pending. The callback gets
        a copy of the values. Failures of the submit or success callback are
        reported through ``on_error`` and leave the form state intact.

        Returns:
            True if the submit and success callbacks completed.
        """
        if self.is_submitting:
            logger.info("Submit ignored: a submission is already pending")
            return False

        config = get_config()
        for field in self.fields:
            self.validation.set_field_touched(field.id)

        if not self.validation.validate_form(self.values):
            logger.info(f"Submit blocked by {len(self.validation.errors)} field error(s)")
            self._report_error(config.submit_invalid_message)
            return False

        self.is_submitting = True
        try:
            logger.info("Submitting form")
            await self._on_submit(copy.deepcopy(format_form_response(self.values)))
            logger.info("Form submitted")
            if self._on_success is not None:
                self._on_success()
        except Exception as e:
            logger.error(f"Submit failed: {type(e).__name__}: {e}")
            self._report_error(str(e) or config.submit_error_fallback)
            return False
        finally:
            self.is_submitting = False
        return True

    def on_reset(self) -> None:
        self._values.reset()
        if self.navigator is not None:
            self.navigator.reset()
        self.validation.clear_errors()
        self.validation.clear_touched()

    def set_schema(self, schema: Iterable[FieldSpec] | MultiStepConfig) -> None:
        """
        Switch to a changed schema, keeping values of fields that remain.

        The schema must be of the same kind (flat or multi-step) as the
        one the orchestrator was built with.
        """
        if isinstance(schema, MultiStepConfig):
            if self.navigator is None:
                raise ValueError("Cannot switch a single-step form to a step configuration")
            self.step_config = schema
            self.fields = fields_from_config(schema)
            self.navigator.set_config(schema)
        else:
            if self.navigator is not None:
                raise ValueError("Cannot switch a multi-step form to a flat field list")
            self.fields = list(schema)

        self._by_id = {field.id: field for field in self.fields}
        self._values.reconcile(self.fields)
        self.validation.set_fields(self.fields)
        for field_id in list(self.validation.errors):
            if field_id not in self._by_id:
                self.validation.set_field_error(field_id, None)

    def visible_fields(self) -> list[FieldSpec]:
        """Fields of the current step, or all fields for a single-step form."""
        if self.navigator is not None:
            return self.navigator.current_fields
        return list(self.fields)

    def progress(self) -> StepProgress | None:
        if self.navigator is None or not self.navigator.config.show_progress_bar:
            return None
        return self.navigator.progress()

    def field_props(self, field_id: str) -> WidgetProps:
        """
        Widget contract for one field.

        Raises:
            KeyError: If the field is not part of the form.
        """
        field = self._by_id[field_id]
        fallback = None
        if field.field_type is None:
            fallback = f"Unknown field type: {field.type}"
        return WidgetProps(
            field=field,
            value=self._values.get(field_id),
            error=self.validation.visible_error(field_id),
            on_change=lambda value: self.on_field_change(field_id, value),
            on_blur=lambda: self.on_field_blur(field_id),
            fallback=fallback,
        )

    def widgets(self) -> list[WidgetProps]:
        return [self.field_props(field.id) for field in self.visible_fields()]

    def _report_error(self, message: str) -> None:
        if self._on_error is not None:
            self._on_error(message)
