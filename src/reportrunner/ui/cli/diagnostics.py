"""Diagnostic emitter writing component output through the CLI state."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from reportrunner.core.diagnostics import format_event_message
from reportrunner.core.exceptions import exception_hint

from .state import CLIState, emit_error, emit_warning, get_cli_state, render_message


class CliEmitter:
    """Print warnings and errors with rich and fold events into the run summary."""

    def __init__(self, state: CLIState | None = None, *, debug_enabled: bool | None = None) -> None:
        self._state = state or get_cli_state()
        self.debug_enabled = (
            self._state.show_tracebacks if debug_enabled is None else bool(debug_enabled)
        )

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        emit_warning(message, exception=exc)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        hint = exception_hint(exc) if exc is not None else None
        emit_error(f"{message} {hint}" if hint and hint not in message else message, exception=exc)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        self._state.record_event(name, payload)
        summary = format_event_message(name, payload)
        if summary:
            render_message("info", summary)


__all__ = ["CliEmitter"]
