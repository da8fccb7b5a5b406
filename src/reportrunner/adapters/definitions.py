"""YAML report definitions.

A definition declares the report name, its attributes, its parameters and an
optional inline data table:

    name: sales
    attributes:
      preferred-output-type: xls
      lock-preferred-output-type: true
    parameters:
      - name: region
        type: string
        multi-select: true
        default: EMEA
      - name: since
        type: date
    data:
      columns: [region, amount]
      rows:
        - [EMEA, 120]

Attribute keys without a namespace prefix (``namespace:name``) live in the
core namespace.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime, time
from decimal import Decimal
from pathlib import Path
from typing import IO, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError
import yaml

from reportrunner.core.config import parse_flag
from reportrunner.core.engine import ensure_initialized
from reportrunner.core.exceptions import ReportLoadError
from reportrunner.core.loader import ReportResource
from reportrunner.core.model import (
    CORE_NAMESPACE,
    LOCK_PREFERRED_OUTPUT_TYPE,
    ParameterDefinition,
    ReportModel,
    TableModel,
)


ParameterTypeName = Literal[
    "string", "integer", "number", "decimal", "boolean", "date", "datetime", "time", "table"
]

PARAMETER_TYPES: dict[str, type] = {
    "string": str,
    "integer": int,
    "number": float,
    "decimal": Decimal,
    "boolean": bool,
    "date": date,
    "datetime": datetime,
    "time": time,
    "table": TableModel,
}


class ParameterSpec(BaseModel):
    """Declared report parameter."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: str = Field(min_length=1)
    type: ParameterTypeName = "string"
    array: bool = False
    multi_select: bool = Field(default=False, alias="multi-select")
    default: Any = None
    label: str | None = None


class DataSpec(BaseModel):
    """Inline tabular data rendered by the encoders."""

    model_config = ConfigDict(extra="forbid")

    columns: list[str] = Field(default_factory=list)
    rows: list[list[Any]] = Field(default_factory=list)


class ReportDefinition(BaseModel):
    """Top-level schema of a YAML report definition."""

    model_config = ConfigDict(extra="forbid")

    name: str = "report"
    attributes: dict[str, Any] = Field(default_factory=dict)
    parameters: list[ParameterSpec] = Field(default_factory=list)
    data: DataSpec | None = None

    def to_model(self, source: str | None = None) -> ReportModel:
        names = [parameter.name for parameter in self.parameters]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ReportLoadError(f"Duplicate parameter name(s): {', '.join(duplicates)}")

        report = ReportModel(name=self.name, source=source)
        for key, value in self.attributes.items():
            namespace, _, attribute = key.rpartition(":")
            namespace = namespace or CORE_NAMESPACE
            if namespace == CORE_NAMESPACE and attribute == LOCK_PREFERRED_OUTPUT_TYPE:
                value = parse_flag(value)
            report.set_attribute(namespace, attribute, value)

        report.parameters = [
            ParameterDefinition(
                name=parameter.name,
                value_type=PARAMETER_TYPES[parameter.type],
                array=parameter.array,
                multi_select=parameter.multi_select,
                default=parameter.default,
                label=parameter.label,
            )
            for parameter in self.parameters
        ]
        if self.data is not None:
            report.data = TableModel(self.data.columns, self.data.rows)
        return report


def parse_report_definition(text: str, *, source: str | None = None) -> ReportModel:
    """Parse YAML ``text`` into a :class:`ReportModel`."""
    label = source or "<stream>"
    try:
        payload = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ReportLoadError(f"Invalid report definition '{label}': {exc}") from exc
    if payload is None:
        payload = {}
    if not isinstance(payload, Mapping):
        raise ReportLoadError(f"Report definition '{label}' must be a mapping.")
    try:
        definition = ReportDefinition.model_validate(dict(payload))
    except ValidationError as exc:
        raise ReportLoadError(f"Invalid report definition '{label}': {exc}") from exc
    return definition.to_model(source=source)


class YamlReportLoader:
    """Load YAML report definitions from streams, repository resources, or paths."""

    def __init__(self, root: str | Path | None = None, *, encoding: str = "utf-8") -> None:
        self.root = Path(root).expanduser() if root is not None else None
        self.encoding = encoding

    def _resolve(self, location: str | Path) -> Path:
        path = Path(location).expanduser()
        if not path.is_absolute() and self.root is not None:
            path = self.root / path
        return path

    def _read(self, path: Path) -> ReportModel:
        try:
            text = path.read_text(encoding=self.encoding)
        except (OSError, UnicodeDecodeError) as exc:
            raise ReportLoadError(f"Unable to read report definition '{path}'.") from exc
        return parse_report_definition(text, source=str(path))

    def load_from_stream(self, stream: IO[bytes], resource_url: str | None) -> ReportModel:
        ensure_initialized()
        try:
            raw = stream.read()
        except OSError as exc:
            raise ReportLoadError("Unable to read report definition stream.") from exc
        if isinstance(raw, bytes):
            try:
                raw = raw.decode(self.encoding)
            except UnicodeDecodeError as exc:
                raise ReportLoadError("Report definition stream is not valid text.") from exc
        return parse_report_definition(raw, source=resource_url)

    def load_from_resource(self, resource: ReportResource, session: Any) -> ReportModel:
        ensure_initialized()
        return self._read(self._resolve(resource.address))

    def load_from_path(self, path: str | Path, session: Any) -> ReportModel:
        ensure_initialized()
        return self._read(self._resolve(path))


__all__ = [
    "PARAMETER_TYPES",
    "DataSpec",
    "ParameterSpec",
    "ReportDefinition",
    "YamlReportLoader",
    "parse_report_definition",
]
