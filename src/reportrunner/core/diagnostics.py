"""Diagnostics raised while a report is loaded, bound and rendered.

The reporting component never prints. It hands warnings, errors and named
lifecycle events to a ``DiagnosticEmitter``; hosts decide where they go.
Lifecycle events carry a small payload:

`report_loaded`
: `report`, `source`

`parameters_bound`
: `report`, `parameters`

`target_resolved`
: `target`, `output_type`

`printer_selected`
: `printer`

`render_completed`
: `target`, `page_count`
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
import logging
from typing import Any, Protocol, runtime_checkable


logger = logging.getLogger(__name__)


@runtime_checkable
class DiagnosticEmitter(Protocol):
    """Sink for component warnings, errors and lifecycle events."""

    debug_enabled: bool

    def warning(self, message: str, exc: BaseException | None = None) -> None: ...

    def error(self, message: str, exc: BaseException | None = None) -> None: ...

    def event(self, name: str, payload: Mapping[str, Any]) -> None: ...


class NullEmitter:
    """Discard everything."""

    debug_enabled: bool = False

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        del message, exc

    def error(self, message: str, exc: BaseException | None = None) -> None:
        del message, exc

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        del name, payload


class LoggingEmitter:
    """Route diagnostics to a ``logging.Logger``.

    Known lifecycle events are logged at INFO with a readable summary, any
    other event at DEBUG with its raw payload.
    """

    def __init__(
        self, *, logger_obj: logging.Logger | None = None, debug_enabled: bool = False
    ) -> None:
        self._logger = logger_obj or logger
        self.debug_enabled = debug_enabled

    def _log(self, level: int, message: str, exc: BaseException | None) -> None:
        self._logger.log(level, message, exc_info=exc if exc is not None else None)

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        self._log(logging.WARNING, message, exc)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        self._log(logging.ERROR, message, exc)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        summary = format_event_message(name, payload)
        if summary is None:
            self._logger.debug("event %s: %s", name, dict(payload))
        else:
            self._logger.info(summary)


def _page_suffix(pages: Any) -> str:
    if isinstance(pages, int) and not isinstance(pages, bool) and pages >= 0:
        return f", {pages} page(s)"
    return ""


def _report_loaded(data: Mapping[str, Any]) -> str:
    source = data.get("source")
    return f"Loaded report '{data.get('report') or '<unnamed>'}'" + (
        f" ({source})" if source else ""
    )


def _target_resolved(data: Mapping[str, Any]) -> str:
    output_type = data.get("output_type")
    return f"Rendering to {data.get('target') or '<unknown>'}" + (
        f" (output type {output_type})" if output_type else ""
    )


def _printer_selected(data: Mapping[str, Any]) -> str:
    return f"Sending report to printer {data.get('printer') or '<default>'}"


def _render_completed(data: Mapping[str, Any]) -> str:
    return f"Rendered {data.get('target') or '<unknown>'}{_page_suffix(data.get('page_count'))}"


_EVENT_FORMATTERS: dict[str, Callable[[Mapping[str, Any]], str]] = {
    "report_loaded": _report_loaded,
    "target_resolved": _target_resolved,
    "printer_selected": _printer_selected,
    "render_completed": _render_completed,
}


def format_event_message(name: str, payload: Mapping[str, Any]) -> str | None:
    """Summarise a lifecycle event, or return ``None`` for unknown names."""
    formatter = _EVENT_FORMATTERS.get(name)
    return formatter(payload) if formatter is not None else None


__all__ = [
    "DiagnosticEmitter",
    "LoggingEmitter",
    "NullEmitter",
    "format_event_message",
]
