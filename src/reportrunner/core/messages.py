"""Message catalog for user-facing diagnostics."""

from __future__ import annotations

from typing import Any


MESSAGES: dict[str, str] = {
    "report_definition_missing": (
        "A report definition is required: provide an inline stream, a repository "
        "resource, or a path."
    ),
    "session_missing": "A user session is required to load a report from the repository.",
    "output_stream_missing": "An output stream is required unless the report is printed.",
    "not_validated": "The reporting component must be validated before it is executed.",
    "execution_failed": "Report execution failed.",
    "unable_to_convert_parameter": "Unable to convert the value of parameter '{parameter}'.",
    "unknown_output_target": "No encoder is available for output target '{target}'.",
}


def get_message(key: str, **params: Any) -> str:
    """Return the catalog entry for ``key`` with ``params`` substituted."""
    template = MESSAGES.get(key)
    if template is None:
        return key
    return template.format(**params) if params else template


__all__ = ["MESSAGES", "get_message"]
