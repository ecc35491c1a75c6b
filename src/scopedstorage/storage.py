from __future__ import annotations

import hashlib
import math
import os

from . import events
from .backing import FlatKeyValueStore
from .config import Environment
from .errors import ErrorSink, SignalErrorSink
from .scope import (
    Scope,
    WORKSPACE_IDENTIFIER,
    WORKSPACE_PREFIX,
    namespace_key,
    parse_int,
    physical_key,
    to_str,
)
from .util import file_util, log
from .workspace import Workspace

WORKSPACE_STORAGE_DIR = "workspaceStorage"
META_FILE = "meta.json"


class ScopedStorage:
    """
    GLOBAL and WORKSPACE scoped key-value storage on top of one or two flat
    backing stores.

    WORKSPACE keys are namespaced by the workspace location. When the workspace
    carries a uid, entries left behind by an earlier workspace at the same
    location are purged during construction, before anything can read them.
    """

    def __init__(
        self,
        global_store: FlatKeyValueStore,
        workspace_store: FlatKeyValueStore | None = None,
        workspace: Workspace | None = None,
        environment: Environment | None = None,
        error_sink: ErrorSink | None = None,
    ):
        self.global_store = global_store
        self.workspace_store = workspace_store if workspace_store is not None else global_store
        self.workspace = workspace
        self.environment = environment
        self.error_sink = error_sink if error_sink is not None else SignalErrorSink()

        self._workspace_key = namespace_key(workspace.location if workspace else None)
        self._workspace_storage_path: str | None = None
        self._workspace_storage_failed = False

        if workspace is not None and workspace.has_uid():
            self._cleanup_workspace_scope(workspace.uid, workspace.name)

    @property
    def workspace_key(self) -> str:
        return self._workspace_key

    def _storage_for(self, scope: Scope) -> FlatKeyValueStore:
        return self.global_store if scope is Scope.GLOBAL else self.workspace_store

    def _to_storage_key(self, key: str, scope: Scope) -> str:
        return physical_key(key, scope, self._workspace_key)

    def _cleanup_workspace_scope(self, workspace_id: int, workspace_name: str):
        try:
            previous_id = self.get_integer(WORKSPACE_IDENTIFIER, Scope.WORKSPACE)
            has_previous = previous_id is not None and not math.isnan(previous_id)
            to_delete = self._stale_workspace_keys() if has_previous and previous_id != workspace_id else []
        except Exception as e:
            # keep the old marker so the next start tries again
            log.error(f"Could not check storage of workspace {workspace_name}: {e}")
            return

        if to_delete:
            log.warning(f"Clearing previous version of local storage for workspace {workspace_name}")

            removed = 0
            for key in to_delete:
                try:
                    self.workspace_store.remove(key)
                    removed += 1
                except Exception as e:
                    log.error(f"Could not remove {key}: {e}")
            events.emit(events.WORKSPACE_RECREATED, workspace=workspace_name, removed=removed)

        if previous_id != workspace_id:
            self.store(WORKSPACE_IDENTIFIER, workspace_id, Scope.WORKSPACE)
            events.emit(events.WORKSPACE_IDENTITY_STORED, workspace=workspace_name, uid=workspace_id)

    def _stale_workspace_keys(self) -> list[str]:
        key_prefix = self._to_storage_key("", Scope.WORKSPACE)
        result = []
        for i in range(self.workspace_store.count()):
            key = self.workspace_store.key_at(i)
            if key is None or not key.startswith(WORKSPACE_PREFIX):
                # global keys and data of other consumers of this store
                continue
            if key.startswith(key_prefix):
                result.append(key)
        return result

    def clear(self):
        self.global_store.clear()
        self.workspace_store.clear()

    def store(self, key: str, value, scope: Scope = Scope.GLOBAL):
        scope = Scope.parse(scope)
        if value is None:
            # the backing store only holds strings
            self.remove(key, scope)
            return

        storage_key = self._to_storage_key(key, scope)
        try:
            self._storage_for(scope).set(storage_key, to_str(value))
        except Exception as e:
            self.error_sink.on_unexpected_error(e)

    def get(self, key: str, scope: Scope = Scope.GLOBAL, default=None):
        scope = Scope.parse(scope)
        value = self._storage_for(scope).get(self._to_storage_key(key, scope))
        if value is None:
            return default
        return value

    def remove(self, key: str, scope: Scope = Scope.GLOBAL):
        scope = Scope.parse(scope)
        self._storage_for(scope).remove(self._to_storage_key(key, scope))

    def swap(self, key: str, value_a, value_b, scope: Scope = Scope.GLOBAL, default=None):
        value = self.get(key, scope)
        if value is None and default:
            self.store(key, default, scope)
        elif value == to_str(value_a):
            self.store(key, value_b, scope)
        else:
            self.store(key, value_a, scope)

    def get_integer(self, key: str, scope: Scope = Scope.GLOBAL, default: int | None = None):
        """Returns the stored integer, `default` when absent and NaN when unparsable."""
        value = self.get(key, scope)
        if value is None:
            return default
        return parse_int(value)

    def get_boolean(self, key: str, scope: Scope = Scope.GLOBAL, default: bool | None = None):
        value = self.get(key, scope)
        if value is None:
            return default
        return value.lower() == "true"

    def keys(self, scope: Scope = Scope.GLOBAL) -> list[str]:
        """Lists the (lowercased) logical keys present in `scope`."""
        scope = Scope.parse(scope)
        prefix = self._to_storage_key("", scope)
        storage = self._storage_for(scope)
        result = []
        for i in range(storage.count()):
            key = storage.key_at(i)
            if key is not None and key.startswith(prefix):
                result.append(key[len(prefix):])
        return sorted(result)

    def get_storage_path(self, scope: Scope) -> str | None:
        scope = Scope.parse(scope)
        if scope is Scope.GLOBAL:
            return self.environment.app_settings_home if self.environment else None

        if self.workspace is None or self.environment is None:
            return None
        if self._workspace_storage_failed:
            return None
        if self._workspace_storage_path:
            return self._workspace_storage_path

        workspace = self.workspace
        digest = hashlib.md5(os.fsencode(workspace.fs_path))
        if workspace.uid:
            digest.update(str(workspace.uid).encode("utf8"))
        path = os.path.join(self.environment.app_settings_home, WORKSPACE_STORAGE_DIR, digest.hexdigest())
        meta_file = os.path.join(path, META_FILE)

        created = not os.path.exists(path)
        try:
            if not file_util.ensure_dir(path):
                raise NotADirectoryError(path)
            if not os.path.exists(meta_file):
                file_util.write_json(meta_file, {
                    "workspacePath": workspace.fs_path,
                    "uid": workspace.uid if workspace.uid else None,
                })
        except (OSError, ValueError) as e:
            log.error(f"Could not create workspace storage {path}: {e}")
            self._workspace_storage_failed = True
            return None
        if created:
            events.emit(events.WORKSPACE_STORAGE_CREATED, path=path)

        self._workspace_storage_path = path
        return path
