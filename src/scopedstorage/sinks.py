from __future__ import annotations

from typing import Callable

from . import events
from .util import log


Disconnect = Callable[[], None]


class BaseSink:
    def __init__(self):
        self._disconnects: list[Disconnect] = []

    def _connect(self, signal_name: str, receiver):
        sig = events.signal(signal_name)
        sig.connect(receiver)
        self._disconnects.append(lambda: sig.disconnect(receiver))

    def close(self):
        for disconnect in reversed(self._disconnects):
            disconnect()
        self._disconnects.clear()


class LogSink(BaseSink):
    """Renders storage events through the package logger."""

    def install(self):
        self._connect(events.UNEXPECTED_ERROR, self._on_unexpected_error)
        self._connect(events.WORKSPACE_RECREATED, self._on_workspace_recreated)
        self._connect(events.WORKSPACE_IDENTITY_STORED, self._on_identity_stored)
        self._connect(events.WORKSPACE_STORAGE_CREATED, self._on_storage_created)
        return self

    def _on_unexpected_error(self, _sender, **kw):
        log.error(f"[red]unexpected storage error[/red] {kw.get('error_type')}: {kw.get('error')}")

    def _on_workspace_recreated(self, _sender, **kw):
        log.info(f"workspace {kw.get('workspace')} recreated, removed={kw.get('removed')}")

    def _on_identity_stored(self, _sender, **kw):
        log.debug(f"workspace {kw.get('workspace')} identity uid={kw.get('uid')}")

    def _on_storage_created(self, _sender, **kw):
        log.debug(f"workspace storage created at {kw.get('path')}")
