import math

import pytest

from scopedstorage import events
from scopedstorage.backing import InMemoryStore, JsonFileStore
from scopedstorage.scope import Scope
from scopedstorage.storage import ScopedStorage
from scopedstorage.workspace import Workspace


def _workspace(path="/home/me/project", uid=None):
    return Workspace(location=f"file://{path}", fs_path=path, uid=uid, name="project")


@pytest.mark.parametrize("scope", [Scope.GLOBAL, Scope.WORKSPACE])
@pytest.mark.parametrize("value", ["text", 12, 0, True, 1.5, ""])
def test_store_then_get_returns_string(store, scope, value):
    storage = ScopedStorage(store, workspace=_workspace())
    storage.store("key", value, scope)
    assert storage.get("key", scope) == ("true" if value is True else str(value))


@pytest.mark.parametrize("scope", [Scope.GLOBAL, Scope.WORKSPACE])
def test_storing_none_removes(store, scope):
    storage = ScopedStorage(store, workspace=_workspace())
    storage.store("key", "value", scope)
    storage.store("key", None, scope)
    assert storage.get("key", scope, "fallback") == "fallback"
    assert store.count() == 0


def test_physical_layout(store):
    storage = ScopedStorage(store, workspace=_workspace())
    storage.store("Global.Key", "g")
    storage.store("Workspace.Key", "w", Scope.WORKSPACE)
    assert store.as_dict() == {
        "storage://global/global.key": "g",
        "storage://workspace/home/me/project/workspace.key": "w",
    }


def test_keys_are_case_insensitive(store):
    storage = ScopedStorage(store)
    storage.store("MiXeD", "1")
    assert storage.get("mixed") == "1"
    storage.store("MIXED", "2")
    assert storage.get("Mixed") == "2"
    assert store.count() == 1


def test_scope_accepts_names(store):
    storage = ScopedStorage(store, workspace=_workspace())
    storage.store("k", "v", "workspace")
    assert storage.get("k", Scope.WORKSPACE) == "v"
    with pytest.raises(ValueError):
        storage.get("k", "machine")


def test_remove_absent_key_is_noop(store):
    storage = ScopedStorage(store)
    storage.remove("nothing")
    storage.remove("nothing", Scope.WORKSPACE)
    assert store.count() == 0


def test_no_workspace_uses_sentinel_namespace(store):
    storage = ScopedStorage(store)
    storage.store("k", "v", Scope.WORKSPACE)
    assert store.as_dict() == {"storage://workspace/__$noWorkspace__k": "v"}


def test_separate_workspace_store(store):
    workspace_store = InMemoryStore()
    storage = ScopedStorage(store, workspace_store, workspace=_workspace())
    storage.store("k", "global")
    storage.store("k", "workspace", Scope.WORKSPACE)
    assert store.count() == 1
    assert workspace_store.count() == 1
    assert storage.get("k") == "global"
    assert storage.get("k", Scope.WORKSPACE) == "workspace"


def test_namespace_isolation(store):
    first = ScopedStorage(store, workspace=_workspace("/work/one"))
    second = ScopedStorage(store, workspace=_workspace("/work/two"))
    first.store("shared.name", "one", Scope.WORKSPACE)
    assert second.get("shared.name", Scope.WORKSPACE) is None
    second.store("shared.name", "two", Scope.WORKSPACE)
    assert first.get("shared.name", Scope.WORKSPACE) == "one"


def test_get_boolean(store):
    storage = ScopedStorage(store)
    for raw, expected in [("true", True), ("TRUE", True), ("True", True),
                          ("1", False), ("yes", False), ("", False), ("false", False)]:
        storage.store("flag", raw)
        assert storage.get_boolean("flag") is expected, raw

    storage.store("flag", True)
    assert storage.get_boolean("flag") is True
    assert storage.get_boolean("missing", default=True) is True
    assert not storage.get_boolean("missing")


def test_get_integer(store):
    storage = ScopedStorage(store)
    storage.store("n", 42)
    assert storage.get_integer("n") == 42
    storage.store("n", "17px")
    assert storage.get_integer("n") == 17
    assert storage.get_integer("missing", default=3) == 3
    assert storage.get_integer("missing") is None
    storage.store("n", "many")
    assert math.isnan(storage.get_integer("n"))


def test_swap_alternates(store):
    storage = ScopedStorage(store)
    seen = []
    for _ in range(4):
        storage.swap("k", "A", "B")
        seen.append(storage.get("k"))
    assert seen == ["A", "B", "A", "B"]


def test_swap_uses_default_when_absent(store):
    storage = ScopedStorage(store)
    storage.swap("k", "A", "B", default="B")
    assert storage.get("k") == "B"
    storage.swap("k", "A", "B", default="B")
    assert storage.get("k") == "A"


def test_swap_resets_unknown_value(store):
    storage = ScopedStorage(store)
    storage.store("k", "C")
    storage.swap("k", "A", "B")
    assert storage.get("k") == "A"


def test_swap_compares_stringwise(store):
    storage = ScopedStorage(store)
    storage.store("k", 1)
    storage.swap("k", 1, 2)
    assert storage.get("k") == "2"


def test_clear_empties_both_stores(store):
    workspace_store = InMemoryStore({"foreign": "data"})
    storage = ScopedStorage(store, workspace_store, workspace=_workspace(uid=1))
    storage.store("g", "1")
    storage.store("w", "2", Scope.WORKSPACE)
    storage.clear()
    assert store.count() == 0
    assert workspace_store.count() == 0


def test_keys(store):
    storage = ScopedStorage(store, workspace=_workspace())
    storage.store("B", "1")
    storage.store("a", "2")
    storage.store("w", "3", Scope.WORKSPACE)
    ScopedStorage(store, workspace=_workspace("/elsewhere")).store("other", "4", Scope.WORKSPACE)
    assert storage.keys() == ["a", "b"]
    assert storage.keys(Scope.WORKSPACE) == ["w"]


class FailingStore(InMemoryStore):
    def set(self, key, value):
        raise OSError("quota exceeded")


class RecordingSink:
    def __init__(self):
        self.errors = []

    def on_unexpected_error(self, error):
        self.errors.append(error)


def test_write_failures_go_to_the_error_sink():
    sink = RecordingSink()
    storage = ScopedStorage(FailingStore(), error_sink=sink)
    storage.store("k", "v")
    assert len(sink.errors) == 1
    assert isinstance(sink.errors[0], OSError)
    assert storage.get("k") is None


def test_default_error_sink_emits_signal(capture):
    captured = capture(events.UNEXPECTED_ERROR)
    storage = ScopedStorage(FailingStore())
    storage.store("k", "v")
    assert len(captured) == 1
    assert captured.events[0]["error_type"] == "OSError"
    assert "quota exceeded" in str(captured.events[0]["error"])


def test_error_signal_subscriber_failure_does_not_propagate(capture):
    def bad_receiver(_sender, **kw):
        raise RuntimeError("boom")

    sig = events.signal(events.UNEXPECTED_ERROR)
    sig.connect(bad_receiver)
    try:
        ScopedStorage(FailingStore()).store("k", "v")
    finally:
        sig.disconnect(bad_receiver)


def test_failed_file_write_is_dropped(tmp_path):
    sink = RecordingSink()
    storage = ScopedStorage(JsonFileStore(tmp_path / "storage.json"), error_sink=sink)
    storage.store("k", "old")
    (tmp_path / "storage.json.tmp").mkdir()

    storage.store("k", "new")

    assert len(sink.errors) == 1
    assert storage.get("k") == "old"
