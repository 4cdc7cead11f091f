"""
Schema store.

Holds the active form schema and saves it to a key-value store whenever an
edit is accepted. Stored schemas keep pattern rules as source text and are
recompiled on load.
"""

import json
import logging
from typing import Iterable

from schema_form.config import get_config
from schema_form.data.default_schema import default_fields
from schema_form.models.field_definitions import FieldSpec
from schema_form.state.persistence import KeyValueStore
from schema_form.validation.schema_checks import (
    SchemaStructureError,
    parse_schema,
    parse_schema_json,
    serialize_schema,
)

logger = logging.getLogger("schema-form")


class SchemaStore:
    """
    Active schema with an explicit load/save lifecycle.

    Usage:
        schemas = SchemaStore(store)
        fields = schemas.load()

        # Apply an edit from a JSON editor (all-or-nothing)
        fields = schemas.apply_json(text)
    """

    def __init__(self, store: KeyValueStore | None = None, key: str | None = None):
        self._store = store
        self._key = key or get_config().schema_storage_key
        self.fields: list[FieldSpec] = default_fields()

    def load(self) -> list[FieldSpec]:
        """
        Read the saved schema, keeping the default if none is saved or it is invalid.
        """
        if self._store is None:
            return self.fields

        raw = self._store.get(self._key)
        if raw is None:
            return self.fields

        try:
            if isinstance(raw, str):
                self.fields = parse_schema_json(raw)
            else:
                self.fields = parse_schema(raw)
        except SchemaStructureError as e:
            logger.warning(f"Failed to parse saved schema, using default: {e}")
        return self.fields

    def update_schema(self, fields: Iterable[FieldSpec]) -> None:
        self.fields = list(fields)
        self._save()

    def apply_json(self, text: str) -> list[FieldSpec]:
        """
        Replace the schema with one typed into an editor.

        Raises:
            SchemaStructureError: If the text is not a valid schema. The
                current schema is left untouched.
        """
        try:
            fields = parse_schema_json(text)
        except SchemaStructureError as e:
            logger.warning(f"Rejected schema edit: {e}")
            raise
        self.update_schema(fields)
        return fields

    def reset_to_default(self) -> list[FieldSpec]:
        self.update_schema(default_fields())
        return self.fields

    def to_json(self, indent: int | None = 2) -> str:
        return serialize_schema(self.fields, indent=indent)

    def _save(self) -> None:
        if self._store is None:
            return
        self._store.set(self._key, json.loads(self.to_json(indent=None)))
