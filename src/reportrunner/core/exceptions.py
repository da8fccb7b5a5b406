"""Custom exception hierarchy for the report execution pipeline."""

from __future__ import annotations


class ReportingError(RuntimeError):
    """Base exception for report execution failures."""


class ReportValidationError(ReportingError):
    """Describes why a component refused to run; reported, never raised by ``validate()``."""


class ReportLoadError(ReportingError):
    """Raised when a report definition cannot be located or parsed."""


class ParameterConversionError(ReportingError):
    """Raised when a raw input cannot be converted to a parameter's declared type."""

    def __init__(self, parameter: str, message: str | None = None) -> None:
        self.parameter = parameter
        detail = message or f"Unable to convert value for parameter '{parameter}'."
        super().__init__(detail)


class EncoderError(ReportingError):
    """Raised when an output encoder or printer cannot produce its output."""


def exception_messages(exc: BaseException) -> list[str]:
    """Return the collected message chain for an exception and its causes."""
    messages: list[str] = []
    visited: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in visited:
        visited.add(id(current))
        text = str(current).strip()
        if text:
            first_line = text.splitlines()[0].strip()
            if first_line:
                messages.append(first_line)
        current = current.__cause__ or current.__context__
    return messages


def exception_hint(exc: BaseException) -> str | None:
    """Return the most specific message available for an exception chain."""
    messages = exception_messages(exc)
    return messages[-1] if messages else None


__all__ = [
    "EncoderError",
    "ParameterConversionError",
    "ReportLoadError",
    "ReportValidationError",
    "ReportingError",
    "exception_hint",
    "exception_messages",
]
