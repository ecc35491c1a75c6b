from __future__ import annotations

import time

from blinker import Namespace

from .util import log

UNEXPECTED_ERROR = "storage.unexpected_error"
WORKSPACE_RECREATED = "workspace.recreated"
WORKSPACE_IDENTITY_STORED = "workspace.identity_stored"
WORKSPACE_STORAGE_CREATED = "workspace.storage_created"

_ns = Namespace()


def now_ms() -> int:
    return int(time.time() * 1000)


def signal(name: str):
    return _ns.signal(name)


def emit(name: str, **payload):
    msg = dict(payload)
    msg.setdefault("ts", now_ms())
    try:
        return signal(name).send(None, event=name, **msg)
    except Exception as e:
        # Subscribers must never break a storage operation.
        log.debug("Event subscriber error for %s: %s", name, e, exc_info=True)
        return []
