"""
Form state: value store and persistence collaborators.
"""

from schema_form.state.persistence import (
    InMemoryStore,
    JsonFileStore,
    KeyValueStore,
    default_store,
    storage_key,
)
from schema_form.state.value_store import FormValueStore

__all__ = [
    "FormValueStore",
    "InMemoryStore",
    "JsonFileStore",
    "KeyValueStore",
    "default_store",
    "storage_key",
]
