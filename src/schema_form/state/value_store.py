"""
Form value store.

Owns the value map for a field set. Values change only through
``update``, ``reset`` and ``reconcile``; each mutation is written through
to the persistence store when one is attached.
"""

import copy
import logging
from typing import Any, Iterable

from schema_form.form_helpers import (
    FormValues,
    coerce_field_value,
    initial_form_values,
    to_json_value,
)
from schema_form.models.field_definitions import FieldSpec, default_value
from schema_form.state.persistence import KeyValueStore

logger = logging.getLogger("schema-form")


class FormValueStore:
    """
    Current form values keyed by field id, seeded with type defaults.

    Args:
        fields: Fields the store holds values for.
        store: Optional persistence store, read once here.
        key: Storage key for the value map.
    """

    def __init__(
        self,
        fields: Iterable[FieldSpec],
        store: KeyValueStore | None = None,
        key: str | None = None,
    ):
        self._fields = list(fields)
        self._defaults = initial_form_values(self._fields)
        self._store = store
        self._key = key
        self._values: FormValues = copy.deepcopy(self._defaults)

        if self._store is not None and self._key:
            stored = self._store.get(self._key)
            if isinstance(stored, dict):
                by_id = {field.id: field for field in self._fields}
                self._values = {
                    field_id: coerce_field_value(by_id[field_id], value)
                    if field_id in by_id else value
                    for field_id, value in stored.items()
                }
                logger.debug(f"Restored {len(self._values)} values from '{self._key}'")
            self.reconcile(self._fields)

    @property
    def values(self) -> FormValues:
        return dict(self._values)

    @property
    def defaults(self) -> FormValues:
        return copy.deepcopy(self._defaults)

    def get(self, field_id: str) -> Any:
        return self._values.get(field_id)

    def update(self, field_id: str, value: Any) -> None:
        self._values[field_id] = value
        self._persist()

    def reset(self) -> None:
        self._values = copy.deepcopy(self._defaults)
        self._persist()

    def reconcile(self, fields: Iterable[FieldSpec]) -> bool:
        """
        Align stored values with a (possibly changed) schema.

        Values of fields no longer in the schema are dropped and new fields
        get their type default. Existing values are kept. Idempotent.

        Returns:
            True if the value map changed.
        """
        self._fields = list(fields)
        self._defaults = initial_form_values(self._fields)

        field_ids = {field.id for field in self._fields}
        removed = [field_id for field_id in self._values if field_id not in field_ids]
        added = [field for field in self._fields if field.id not in self._values]
        if not removed and not added:
            return False

        for field_id in removed:
            del self._values[field_id]
        for field in added:
            self._values[field.id] = default_value(field)
        logger.debug(f"Reconciled values: removed {removed}, added {[f.id for f in added]}")
        self._persist()
        return True

    def _persist(self) -> None:
        if self._store is None or not self._key:
            return
        self._store.set(
            self._key,
            {field_id: to_json_value(value) for field_id, value in self._values.items()},
        )
