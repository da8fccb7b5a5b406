"""Report loader contract."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import IO, Any, Protocol, runtime_checkable

from .model import ReportModel


@dataclass(frozen=True, slots=True)
class ReportResource:
    """Report definition published by the host repository."""

    address: str
    name: str | None = None


@runtime_checkable
class ReportLoader(Protocol):
    """Turns a definition source into a :class:`ReportModel`.

    Every method may raise :class:`~reportrunner.core.exceptions.ReportLoadError`.
    """

    def load_from_stream(self, stream: IO[bytes], resource_url: str | None) -> ReportModel: ...

    def load_from_resource(self, resource: ReportResource, session: Any) -> ReportModel: ...

    def load_from_path(self, path: str | Path, session: Any) -> ReportModel: ...


__all__ = ["ReportLoader", "ReportResource"]
