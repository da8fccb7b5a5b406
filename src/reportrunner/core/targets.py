"""Output target identifiers and the resolver mapping requests onto them."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from .config import ExecutionConfig
from .model import CORE_NAMESPACE, LOCK_PREFERRED_OUTPUT_TYPE, PREFERRED_OUTPUT_TYPE, ReportModel


MIME_TYPE_HTML = "text/html"
MIME_TYPE_EMAIL = "mime-message/text/html"
MIME_TYPE_PDF = "application/pdf"
MIME_TYPE_XLS = "application/vnd.ms-excel"
MIME_TYPE_RTF = "application/rtf"
MIME_TYPE_CSV = "text/csv"


class OutputTarget(str, Enum):
    """Canonical engine-level identifiers selecting an encoder."""

    CSV = "table/csv;stream"
    HTML_PAGE = "table/html;page"
    HTML_STREAM = "table/html;stream"
    PDF = "pageable/pdf"
    RTF = "table/rtf;flow"
    XLS = "table/excel;flow"
    EMAIL = MIME_TYPE_EMAIL

    def __str__(self) -> str:
        return self.value

    @classmethod
    def coerce(cls, value: Any) -> OutputTarget | str:
        """Return the matching member, or ``value`` as text when it names no target."""
        if isinstance(value, cls):
            return value
        text = str(value)
        try:
            return cls(text)
        except ValueError:
            return text


_MIME_TARGETS: dict[str, OutputTarget] = {
    MIME_TYPE_CSV: OutputTarget.CSV,
    MIME_TYPE_PDF: OutputTarget.PDF,
    MIME_TYPE_RTF: OutputTarget.RTF,
    MIME_TYPE_XLS: OutputTarget.XLS,
    MIME_TYPE_EMAIL: OutputTarget.EMAIL,
}

EXTENSION_MIME_TYPES: dict[str, str] = {
    ".csv": MIME_TYPE_CSV,
    ".htm": MIME_TYPE_HTML,
    ".html": MIME_TYPE_HTML,
    ".pdf": MIME_TYPE_PDF,
    ".rtf": MIME_TYPE_RTF,
    ".xls": MIME_TYPE_XLS,
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ".txt": "text/plain",
    ".xml": "text/xml",
}

TARGET_MIME_TYPES: dict[OutputTarget, str] = {
    OutputTarget.CSV: MIME_TYPE_CSV,
    OutputTarget.HTML_PAGE: MIME_TYPE_HTML,
    OutputTarget.HTML_STREAM: MIME_TYPE_HTML,
    OutputTarget.PDF: MIME_TYPE_PDF,
    OutputTarget.RTF: MIME_TYPE_RTF,
    OutputTarget.XLS: MIME_TYPE_XLS,
    OutputTarget.EMAIL: MIME_TYPE_EMAIL,
}


def mime_type_from_extension(extension: str) -> str | None:
    """Look up the mime type registered for ``extension`` (with or without a dot)."""
    key = extension.strip().lower()
    if not key:
        return None
    if not key.startswith("."):
        key = f".{key}"
    return EXTENSION_MIME_TYPES.get(key)


@dataclass(frozen=True, slots=True)
class TargetResolution:
    """Resolved output target plus the output type it was derived from."""

    target: OutputTarget | str
    output_type: str | None

    @property
    def known(self) -> bool:
        return isinstance(self.target, OutputTarget)


def effective_output_type(report: ReportModel, output_type: str | None) -> str | None:
    """Apply a locked preferred output type declared by the report."""
    if report.get_attribute(CORE_NAMESPACE, LOCK_PREFERRED_OUTPUT_TYPE) is not True:
        return output_type
    preferred = report.get_attribute(CORE_NAMESPACE, PREFERRED_OUTPUT_TYPE)
    if preferred is None:
        return output_type
    preferred_text = str(preferred)
    return mime_type_from_extension(preferred_text) or preferred_text


def resolve_output_target(report: ReportModel, config: ExecutionConfig) -> TargetResolution:
    """Compute the output target for ``report`` under ``config``.

    Order of precedence: a locked preferred output type replaces the requested
    mime type; an explicit output target wins outright; the mime type is then
    mapped through a fixed table; the report's preferred output type is used
    verbatim; streaming HTML is the final fallback.
    """
    output_type = effective_output_type(report, config.output_type)

    if config.output_target is not None:
        return TargetResolution(OutputTarget.coerce(config.output_target), output_type)

    if output_type == MIME_TYPE_HTML:
        target = OutputTarget.HTML_PAGE if config.paginate else OutputTarget.HTML_STREAM
        return TargetResolution(target, output_type)

    mapped = _MIME_TARGETS.get(output_type) if output_type is not None else None
    if mapped is not None:
        return TargetResolution(mapped, output_type)

    preferred = report.get_attribute(CORE_NAMESPACE, PREFERRED_OUTPUT_TYPE)
    if preferred is not None:
        return TargetResolution(OutputTarget.coerce(preferred), output_type)

    return TargetResolution(OutputTarget.HTML_STREAM, output_type)


__all__ = [
    "EXTENSION_MIME_TYPES",
    "MIME_TYPE_CSV",
    "MIME_TYPE_EMAIL",
    "MIME_TYPE_HTML",
    "MIME_TYPE_PDF",
    "MIME_TYPE_RTF",
    "MIME_TYPE_XLS",
    "TARGET_MIME_TYPES",
    "OutputTarget",
    "TargetResolution",
    "effective_output_type",
    "mime_type_from_extension",
    "resolve_output_target",
]
