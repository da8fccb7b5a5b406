"""In-memory report model consumed by the binder, resolver, and encoders."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Protocol, runtime_checkable


CORE_NAMESPACE = "core"
LOCK_PREFERRED_OUTPUT_TYPE = "lock-preferred-output-type"
PREFERRED_OUTPUT_TYPE = "preferred-output-type"


class TableModel:
    """Column-labelled rows handed to encoders and table-typed parameters."""

    def __init__(
        self,
        columns: Sequence[str],
        rows: Iterable[Sequence[Any]] = (),
    ) -> None:
        self.columns: tuple[str, ...] = tuple(str(column) for column in columns)
        self.rows: list[tuple[Any, ...]] = [tuple(row) for row in rows]

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def column_count(self) -> int:
        return len(self.columns)

    def value_at(self, row: int, column: int) -> Any:
        return self.rows[row][column]

    def __iter__(self) -> Iterator[tuple[Any, ...]]:
        return iter(self.rows)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TableModel):
            return NotImplemented
        return self.columns == other.columns and self.rows == other.rows

    def __repr__(self) -> str:
        return f"{type(self).__name__}(columns={self.columns!r}, rows={self.row_count})"


@runtime_checkable
class ResultSet(Protocol):
    """Cursor-like result produced by a host data source."""

    def column_names(self) -> Sequence[str]: ...

    def fetch_rows(self) -> Iterable[Sequence[Any]]: ...


class ResultSetTableModel(TableModel):
    """Expose a host ``ResultSet`` through the ``TableModel`` interface."""

    def __init__(self, result_set: ResultSet) -> None:
        super().__init__(result_set.column_names(), result_set.fetch_rows())
        self.result_set = result_set


@dataclass(slots=True)
class ParameterDefinition:
    """Metadata describing a single report parameter."""

    name: str
    value_type: type = str
    array: bool = False
    multi_select: bool = False
    default: Any = None
    label: str | None = None

    def default_value(self, context: ParameterContext) -> Any:
        """Resolve the default value, evaluating callables against ``context``."""
        if callable(self.default) and not isinstance(self.default, type):
            return self.default(context)
        return self.default


@dataclass(slots=True)
class ReportModel:
    """Parsed report definition holding parameters, values, and attributes."""

    name: str = "report"
    parameters: list[ParameterDefinition] = field(default_factory=list)
    parameter_values: dict[str, Any] = field(default_factory=dict)
    attributes: dict[tuple[str, str], Any] = field(default_factory=dict)
    data: TableModel | None = None
    source: str | None = None

    def get_attribute(self, namespace: str, name: str, default: Any = None) -> Any:
        return self.attributes.get((namespace, name), default)

    def set_attribute(self, namespace: str, name: str, value: Any) -> None:
        if value is None:
            self.attributes.pop((namespace, name), None)
        else:
            self.attributes[(namespace, name)] = value

    def parameter(self, name: str) -> ParameterDefinition | None:
        for definition in self.parameters:
            if definition.name == name:
                return definition
        return None


class ParameterContext:
    """Scoped view over a report used while resolving parameter defaults."""

    def __init__(self, report: ReportModel) -> None:
        self.report = report
        self._open = False

    @property
    def is_open(self) -> bool:
        return self._open

    @property
    def parameter_values(self) -> Mapping[str, Any]:
        """Read-only view of the values bound so far."""
        if not self._open:
            raise RuntimeError("Parameter context is closed.")
        return MappingProxyType(self.report.parameter_values)

    def open(self) -> None:
        self._open = True

    def close(self) -> None:
        self._open = False

    def __enter__(self) -> ParameterContext:
        self.open()
        return self

    def __exit__(self, *_exc_info: object) -> None:
        self.close()


__all__ = [
    "CORE_NAMESPACE",
    "LOCK_PREFERRED_OUTPUT_TYPE",
    "PREFERRED_OUTPUT_TYPE",
    "ParameterContext",
    "ParameterDefinition",
    "ReportModel",
    "ResultSet",
    "ResultSetTableModel",
    "TableModel",
]
