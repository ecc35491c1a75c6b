from __future__ import annotations

import os
from typing import Protocol

from .scope import to_str
from .util import file_util, log


class FlatKeyValueStore(Protocol):
    """
    A flat, string-valued key-value store with enumerable keys, modelled after
    browser local storage. No ordering or transactional guarantees.
    """

    def count(self) -> int: ...

    def key_at(self, index: int) -> str | None: ...

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value) -> None: ...

    def remove(self, key: str) -> None: ...

    def clear(self) -> None: ...


class InMemoryStore:
    def __init__(self, items: dict | None = None):
        self._items: dict[str, str] = {k: to_str(v) for k, v in (items or {}).items()}

    def count(self) -> int:
        return len(self._items)

    def key_at(self, index: int) -> str | None:
        if 0 <= index < len(self._items):
            return list(self._items)[index]
        return None

    def get(self, key: str) -> str | None:
        return self._items.get(key)

    def set(self, key: str, value) -> None:
        self._items[key] = to_str(value)

    def remove(self, key: str) -> None:
        self._items.pop(key, None)

    def clear(self) -> None:
        self._items.clear()

    def as_dict(self) -> dict[str, str]:
        return dict(self._items)


class JsonFileStore(InMemoryStore):
    """
    An in-memory store that writes through to a single JSON file on every
    mutation, so entries survive restarts.
    """

    def __init__(self, filename):
        self.filename = os.fspath(filename)
        super().__init__(self._load())

    def _load(self) -> dict:
        if not os.path.exists(self.filename):
            return {}
        data = file_util.parse_json(self.filename)
        if not isinstance(data, dict):
            raise ValueError(f"{self.filename} does not contain a JSON object")
        log.debug(f"Loaded {len(data)} entries from {self.filename}")
        return data

    def _flush(self):
        parent = os.path.dirname(os.path.abspath(self.filename))
        if not file_util.ensure_dir(parent):
            raise NotADirectoryError(parent)
        file_util.replace_json(self.filename, self._items)

    def _commit(self, mutate, *args):
        # memory must never hold what the file does not
        previous = dict(self._items)
        mutate(*args)
        try:
            self._flush()
        except Exception:
            self._items = previous
            raise

    def set(self, key: str, value) -> None:
        self._commit(super().set, key, value)

    def remove(self, key: str) -> None:
        if key in self._items:
            self._commit(super().remove, key)

    def clear(self) -> None:
        self._commit(super().clear)
