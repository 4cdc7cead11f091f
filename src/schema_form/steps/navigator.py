"""
Step navigator.

Holds the current step of a multi-step form, bounded by
``[1, step_count]``, and applies the forward/backward transition rules.
Successful transitions are written to the persistence store; the stored
position is read once on construction and clamped to range.
"""

import logging
from enum import Enum

from schema_form.form_helpers import FormValues
from schema_form.models.field_definitions import FieldSpec
from schema_form.models.steps import MultiStepConfig, StepProgress, StepSpec
from schema_form.state.persistence import KeyValueStore
from schema_form.steps.deriver import get_current_step_fields, validate_current_step
from schema_form.validation.field_validator import FormValidationState

logger = logging.getLogger("schema-form")


class StepTransition(str, Enum):
    """Outcome of a navigation request."""

    ADVANCED = "advanced"
    RETREATED = "retreated"
    REFUSED = "refused"
    UNCHANGED = "unchanged"


class StepNavigator:
    """
    Current-step state machine.

    Args:
        config: Step configuration.
        store: Optional persistence store for the position.
        key: Storage key for the position.
    """

    def __init__(
        self,
        config: MultiStepConfig,
        store: KeyValueStore | None = None,
        key: str | None = None,
    ):
        self.config = config
        self._store = store
        self._key = key
        self.current_step = 1

        if self._store is not None and self._key:
            stored = self._store.get(self._key)
            if isinstance(stored, dict):
                step = stored.get("currentStep")
                if isinstance(step, int) and not isinstance(step, bool):
                    self.current_step = self._clamp(step)
                    logger.debug(f"Restored step {self.current_step} from '{self._key}'")

    @property
    def step_count(self) -> int:
        return self.config.step_count

    @property
    def is_first_step(self) -> bool:
        return self.current_step == 1

    @property
    def is_last_step(self) -> bool:
        return self.current_step >= self.step_count

    @property
    def can_go_back(self) -> bool:
        return self.config.allow_step_navigation and not self.is_first_step

    @property
    def current_step_spec(self) -> StepSpec | None:
        return self.config.get_step(self.current_step)

    @property
    def current_fields(self) -> list[FieldSpec]:
        return get_current_step_fields(self.config, self.current_step)

    def set_config(self, config: MultiStepConfig) -> None:
        """Swap the step configuration, keeping the position in range."""
        self.config = config
        clamped = self._clamp(self.current_step)
        if clamped != self.current_step:
            self.current_step = clamped
            self._persist()

    def next(self, values: FormValues, validation: FormValidationState) -> StepTransition:
        """
        Advance one step.

        With ``validate_on_step_change`` set, every field of the current
        step is marked touched first, and the move is refused if a required
        field is empty or has a stored error. Advancing from the last step
        changes nothing.
        """
        if self.config.validate_on_step_change:
            fields = self.current_fields
            for field in fields:
                validation.set_field_touched(field.id)
            if not validate_current_step(fields, values, validation.errors):
                logger.info(f"Refused to leave step {self.current_step}: required fields incomplete")
                return StepTransition.REFUSED

        if self.is_last_step:
            return StepTransition.UNCHANGED

        self.current_step += 1
        self._persist()
        return StepTransition.ADVANCED

    def previous(self) -> StepTransition:
        if not self.can_go_back:
            return StepTransition.UNCHANGED
        self.current_step -= 1
        self._persist()
        return StepTransition.RETREATED

    def reset(self) -> None:
        self.current_step = 1
        self._persist()

    def progress(self) -> StepProgress:
        step = self.current_step_spec
        return StepProgress(
            current_step=self.current_step,
            total_steps=self.step_count,
            title=step.title if step is not None else f"Step {self.current_step}",
        )

    def _clamp(self, step: int) -> int:
        return max(1, min(step, max(1, self.step_count)))

    def _persist(self) -> None:
        if self._store is None or not self._key:
            return
        self._store.set(self._key, {"currentStep": self.current_step})
