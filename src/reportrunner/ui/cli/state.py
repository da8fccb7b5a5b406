"""Per-invocation CLI state: verbosity, consoles and the run summary."""

from __future__ import annotations

from collections.abc import Mapping
from contextvars import ContextVar
from dataclasses import dataclass, field
import sys
from typing import TYPE_CHECKING, Any

import click
import typer


if TYPE_CHECKING:
    from rich.console import Console

__all__ = [
    "CLIState",
    "RunSummary",
    "debug_enabled",
    "emit_error",
    "emit_warning",
    "get_cli_state",
    "render_message",
    "set_cli_state",
]


@dataclass(slots=True)
class RunSummary:
    """What the component reported about the current render."""

    report: str | None = None
    target: str | None = None
    printer: str | None = None
    printed: bool = False

    def describe(self, destination: str | None, page_count: int = -1) -> str | None:
        """Return the closing line for a successful run, if there is one to show."""
        pages = f" ({page_count} page(s))" if page_count >= 0 else ""
        if self.printed:
            label = f"'{self.report}' " if self.report else ""
            return f"Report {label}sent to printer {self.printer or '<default>'}{pages}"
        if destination is None:
            return None
        target = f" as {self.target}" if self.target else ""
        return f"Report written to {destination}{target}{pages}"


@dataclass(slots=True)
class CLIState:
    """Settings and progress shared by the commands of one invocation."""

    verbosity: int = 0
    show_tracebacks: bool = False
    summary: RunSummary = field(default_factory=RunSummary)
    _consoles: dict[str, Console] = field(default_factory=dict, repr=False)

    def _console_for(self, name: str, **options: Any) -> Console:
        from rich.console import Console

        stream = getattr(sys, name)
        console = self._consoles.get(name)
        if console is None or console.file is not stream:
            console = self._consoles[name] = Console(file=stream, **options)
        return console

    @property
    def console(self) -> Console:
        return self._console_for("stdout")

    @property
    def err_console(self) -> Console:
        return self._console_for("stderr", highlight=False)

    def record_event(self, name: str, payload: Mapping[str, Any]) -> None:
        """Fold a component lifecycle event into the run summary."""
        if name == "report_loaded":
            self.summary.report = payload.get("report")
        elif name == "target_resolved":
            self.summary.target = payload.get("target")
        elif name == "printer_selected":
            self.summary.printer = payload.get("printer")
            self.summary.printed = True


_ACTIVE_STATE: ContextVar[CLIState | None] = ContextVar("reportrunner_cli_state", default=None)


def get_cli_state(
    ctx: typer.Context | click.Context | None = None,
    *,
    create: bool = True,
) -> CLIState:
    """Return the state attached to ``ctx`` (or the current click context).

    Outside a click context the last active state is reused.
    """
    if ctx is None:
        ctx = click.get_current_context(silent=True)

    if ctx is not None:
        state = ctx.find_object(CLIState)
        if state is None and create:
            state = ctx.ensure_object(CLIState)
        if state is not None:
            _ACTIVE_STATE.set(state)
            return state

    state = _ACTIVE_STATE.get()
    if state is None:
        if not create:
            raise RuntimeError("CLI state is not initialised for this context.")
        state = CLIState()
        _ACTIVE_STATE.set(state)
    return state


def set_cli_state(
    *,
    ctx: typer.Context | None = None,
    verbosity: int | None = None,
    debug: bool | None = None,
) -> CLIState:
    state = get_cli_state(ctx)
    if verbosity is not None:
        state.verbosity = max(0, verbosity)
    if debug is not None:
        state.show_tracebacks = debug
    return state


_LEVEL_STYLES = {"warning": "yellow", "error": "red"}


def _exception_details(exc: BaseException, message: str, verbosity: int) -> list[str]:
    details: list[str] = []
    text = str(exc).strip()
    if text and text not in message:
        details.append(text)
    details.append(f"type: {type(exc).__name__}")
    if verbosity >= 2:
        cause = exc.__cause__ or exc.__context__
        seen: set[int] = set()
        while cause is not None and id(cause) not in seen:
            seen.add(id(cause))
            details.append(f"caused by {type(cause).__name__}: {cause}")
            cause = cause.__cause__ or cause.__context__
    return details


def render_message(
    level: str,
    message: str,
    *,
    exception: BaseException | None = None,
) -> None:
    """Write a diagnostic to stderr.

    ``info`` messages only appear with ``-v``. Warnings and errors always
    appear; exception details are added from ``-v`` and the cause chain from
    ``-vv``.
    """
    state = get_cli_state()
    if level not in _LEVEL_STYLES:
        if state.verbosity >= 1:
            state.err_console.log(message)
        return

    from rich.text import Text

    style = _LEVEL_STYLES[level]
    text = Text.assemble((f"{level}: ", f"bold {style}"), (message, style))
    if exception is not None and state.verbosity >= 1:
        details = _exception_details(exception, message, state.verbosity)
        text.append("\n" + "\n".join(details), style=style)
    state.err_console.print(text)


def emit_warning(message: str, *, exception: BaseException | None = None) -> None:
    render_message("warning", message, exception=exception)


def emit_error(message: str, *, exception: BaseException | None = None) -> None:
    render_message("error", message, exception=exception)


def debug_enabled() -> bool:
    """Return whether full tracebacks were requested with ``--debug``."""
    try:
        return get_cli_state(create=False).show_tracebacks
    except RuntimeError:
        return False
