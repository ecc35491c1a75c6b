from __future__ import annotations

from typing import Protocol

from . import events


class ErrorSink(Protocol):
    """Receives errors that storage operations swallow instead of raising."""

    def on_unexpected_error(self, error: BaseException) -> None: ...


class SignalErrorSink:
    """Forwards unexpected errors to the `storage.unexpected_error` signal."""

    def on_unexpected_error(self, error: BaseException) -> None:
        events.emit(events.UNEXPECTED_ERROR, error=error, error_type=type(error).__name__)
