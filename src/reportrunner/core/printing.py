"""Printer directory contract and print service selection."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from .model import ReportModel


@dataclass(frozen=True, slots=True)
class PrintService:
    """A named printer known to the host."""

    name: str
    description: str | None = None


@runtime_checkable
class PrinterDirectory(Protocol):
    """Enumerates printers and submits reports to them."""

    def default_service(self) -> PrintService | None: ...

    def services(self) -> Sequence[PrintService]: ...

    def print_directly(
        self, report: ReportModel, service: PrintService | None, yield_rate: int = 0
    ) -> int | None:
        """Submit ``report``; return the number of pages printed when known."""
        ...


def select_print_service(
    directory: PrinterDirectory,
    printer_name: str | None,
) -> PrintService | None:
    """Pick the service for ``printer_name``.

    Without a name the platform default is used. A name is matched exactly
    against the enumerated services; when nothing matches and services exist,
    the first enumerated service is used, otherwise the default.
    """
    default = directory.default_service()
    if not printer_name:
        return default

    services = list(directory.services())
    for service in services:
        if service.name == printer_name:
            return service
    if services:
        return services[0]
    return default


__all__ = ["PrintService", "PrinterDirectory", "select_print_service"]
