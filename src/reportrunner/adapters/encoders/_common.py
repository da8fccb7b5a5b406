"""Helpers shared by the built-in encoders."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from datetime import date, datetime, time as time_of_day
import time
from typing import Any

from reportrunner.core.model import ReportModel, TableModel


def paced(rows: Iterable[Any], yield_rate: int) -> Iterator[Any]:
    """Iterate ``rows``, giving up the thread every ``yield_rate`` items."""
    for index, row in enumerate(rows, start=1):
        yield row
        if yield_rate > 0 and index % yield_rate == 0:
            time.sleep(0)


def format_value(value: Any) -> str:
    """Render a bound value or a cell for display."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime, date, time_of_day)):
        return value.isoformat()
    if isinstance(value, TableModel):
        return f"{value.row_count} row(s)"
    if isinstance(value, (tuple, list)):
        return ", ".join(format_value(item) for item in value)
    return str(value)


def parameter_rows(report: ReportModel) -> list[tuple[str, str]]:
    """Bound parameters in declaration order, followed by undeclared values."""
    rows: list[tuple[str, str]] = []
    seen: set[str] = set()
    for definition in report.parameters:
        if definition.name in report.parameter_values:
            label = definition.label or definition.name
            rows.append((label, format_value(report.parameter_values[definition.name])))
            seen.add(definition.name)
    for name, value in report.parameter_values.items():
        if name not in seen:
            rows.append((name, format_value(value)))
    return rows


def report_table(report: ReportModel) -> TableModel:
    """Return the report data, or the bound parameters when it carries none."""
    if report.data is not None:
        return report.data
    return TableModel(("parameter", "value"), parameter_rows(report))


__all__ = ["format_value", "paced", "parameter_rows", "report_table"]
