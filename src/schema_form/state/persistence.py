"""
Key-value persistence collaborators.

Stores hold JSON-compatible values. Form values and navigator position use
separate keys, prefixed by whether the session is durable or temporary so
the two never collide.
"""

import copy
import json
from pathlib import Path
from typing import Any, Protocol

from schema_form.config import get_config


class KeyValueStore(Protocol):
    """Synchronous get/set store for JSON values."""

    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any) -> None: ...


class InMemoryStore:
    """Process-local store. Values are copied in and out."""

    def __init__(self, initial: dict[str, Any] | None = None):
        self._data: dict[str, Any] = copy.deepcopy(initial) if initial else {}

    def get(self, key: str) -> Any | None:
        if key not in self._data:
            return None
        return copy.deepcopy(self._data[key])

    def set(self, key: str, value: Any) -> None:
        self._data[key] = copy.deepcopy(value)

    def keys(self) -> list[str]:
        return list(self._data)


class JsonFileStore:
    """
    Store backed by a single JSON document on disk.

    The file is read on every ``get`` and rewritten on every ``set``.
    """

    def __init__(self, file_path: str | Path):
        self.file_path = Path(file_path)

    def _read(self) -> dict[str, Any]:
        if not self.file_path.exists():
            return {}
        with open(self.file_path) as f:
            data = json.load(f)
        return data if isinstance(data, dict) else {}

    def get(self, key: str) -> Any | None:
        return self._read().get(key)

    def set(self, key: str, value: Any) -> None:
        data = self._read()
        data[key] = value
        self.file_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.file_path, "w") as f:
            json.dump(data, f, indent=2)


def storage_key(name: str, persist: bool) -> str:
    """
    Namespaced storage key.

    Example:
        >>> storage_key("form-data", persist=True)
        'kyc-form-data'
        >>> storage_key("multistep-step-data", persist=False)
        'temp-multistep-step-data'
    """
    config = get_config()
    prefix = config.durable_key_prefix if persist else config.temporary_key_prefix
    return f"{prefix}-{name}"


def default_store() -> KeyValueStore:
    """File store if ``storage_file`` is configured, otherwise in-memory."""
    config = get_config()
    if config.storage_file:
        return JsonFileStore(config.storage_file)
    return InMemoryStore()
