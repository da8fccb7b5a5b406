"""Encoder contracts and the encoder set consulted by the orchestrator.

Each output family has a dedicated protocol. Encoders return ``True`` on
success, ``False`` on failure, or (paginated HTML only) the number of pages
rendered; they raise :class:`~reportrunner.core.exceptions.EncoderError` (or
any other exception) when output cannot be produced.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, fields, replace
from importlib import metadata
import logging
from typing import IO, Any, Protocol, runtime_checkable

from .model import ReportModel
from .repository import ContentRepository


logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "reportrunner.encoders"
EMAIL_CONTENT_HANDLER_PATTERN = "cid:{0}"


@runtime_checkable
class StreamEncoder(Protocol):
    """Encoder writing a report to a binary stream (PDF, CSV, RTF)."""

    def generate(self, report: ReportModel, stream: IO[bytes], yield_rate: int) -> bool: ...


@runtime_checkable
class WorkbookEncoder(Protocol):
    """Spreadsheet encoder accepting an optional template workbook."""

    def generate(
        self,
        report: ReportModel,
        stream: IO[bytes],
        template: IO[bytes] | None,
        yield_rate: int,
    ) -> bool: ...


@runtime_checkable
class EmailEncoder(Protocol):
    """Encoder producing a MIME message with inline resources."""

    def generate(
        self,
        report: ReportModel,
        stream: IO[bytes],
        content_handler_pattern: str,
        yield_rate: int,
    ) -> bool: ...


@runtime_checkable
class HtmlEncoder(Protocol):
    """Streaming HTML encoder with an optional content-repository variant."""

    def generate(
        self,
        report: ReportModel,
        stream: IO[bytes],
        content_handler_pattern: str | None,
        yield_rate: int,
    ) -> bool: ...

    def generate_to_repository(
        self,
        session: Any,
        report: ReportModel,
        stream: IO[bytes],
        repository: ContentRepository,
        content_handler_pattern: str | None,
        yield_rate: int,
    ) -> bool: ...


@runtime_checkable
class PagedHtmlEncoder(Protocol):
    """Paginated HTML encoder returning the number of logical pages."""

    def generate(
        self,
        report: ReportModel,
        accepted_page: int,
        stream: IO[bytes],
        content_handler_pattern: str | None,
        yield_rate: int,
    ) -> int: ...

    def generate_to_repository(
        self,
        session: Any,
        report: ReportModel,
        accepted_page: int,
        stream: IO[bytes],
        repository: ContentRepository,
        content_handler_pattern: str | None,
        yield_rate: int,
    ) -> int: ...


@dataclass(frozen=True, slots=True)
class EncoderSet:
    """One optional encoder per output family."""

    csv: StreamEncoder | None = None
    pdf: StreamEncoder | None = None
    rtf: StreamEncoder | None = None
    xls: WorkbookEncoder | None = None
    email: EmailEncoder | None = None
    html: HtmlEncoder | None = None
    paged_html: PagedHtmlEncoder | None = None

    @classmethod
    def slot_names(cls) -> tuple[str, ...]:
        return tuple(definition.name for definition in fields(cls))

    def with_encoders(self, **encoders: Any) -> EncoderSet:
        """Return a copy where the given slots are replaced."""
        unknown = set(encoders) - set(self.slot_names())
        if unknown:
            raise ValueError(f"Unknown encoder slot(s): {', '.join(sorted(unknown))}")
        return replace(self, **encoders)

    def available(self) -> dict[str, Any]:
        return {
            name: getattr(self, name)
            for name in self.slot_names()
            if getattr(self, name) is not None
        }

    @classmethod
    def builtin(cls) -> EncoderSet:
        """Return the reference encoders shipped with the package."""
        from reportrunner.adapters.encoders import builtin_encoders

        return cls(**builtin_encoders())

    @classmethod
    def discover(cls, base: EncoderSet | None = None) -> EncoderSet:
        """Overlay encoders published under the ``reportrunner.encoders`` entry points."""
        current = base if base is not None else cls.builtin()
        try:
            group: Iterable[metadata.EntryPoint] = metadata.entry_points().select(
                group=ENTRY_POINT_GROUP
            )
        except Exception:  # pragma: no cover - metadata backend failure
            logger.debug("unable to enumerate encoder entry points", exc_info=True)
            return current
        return current.with_encoders(**_load_entry_points(group, cls.slot_names()))


def _load_entry_points(
    entry_points: Iterable[metadata.EntryPoint],
    slots: Iterable[str],
) -> Mapping[str, Any]:
    allowed = set(slots)
    loaded: dict[str, Any] = {}
    for entry_point in entry_points:
        if entry_point.name not in allowed:
            logger.warning(
                "Ignoring encoder entry point '%s': unknown output family.", entry_point.name
            )
            continue
        try:
            payload = entry_point.load()
        except Exception as exc:  # noqa: BLE001 - third-party plugin import
            logger.warning(
                "Unable to load encoder entry point '%s'.", entry_point.name, exc_info=exc
            )
            continue
        loaded[entry_point.name] = payload() if isinstance(payload, type) else payload
    return loaded


__all__ = [
    "EMAIL_CONTENT_HANDLER_PATTERN",
    "ENTRY_POINT_GROUP",
    "EmailEncoder",
    "EncoderSet",
    "HtmlEncoder",
    "PagedHtmlEncoder",
    "StreamEncoder",
    "WorkbookEncoder",
]
