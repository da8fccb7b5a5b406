"""Configuration models used by the reporting component.

ExecutionConfig

`output_type` (`str | None`)
: Requested mime type, such as `text/csv` or `application/pdf`. Mapped to an
  output target unless `output_target` is given.

`output_target` (`str | None`)
: Engine-level target identifier (for instance `table/html;page`). When set,
  it is used verbatim and no mime-type mapping takes place.

`paginate` (`bool`)
: Ask for paginated HTML instead of a single HTML stream.

`accepted_page` (`int`)
: Zero-based logical page emitted by the paginated HTML encoder. `-1`
  renders every page. The `accepted-page` input is read only when pagination
  is requested; a value set on the component always applies.

`print_report` (`bool`)
: Send the report to a printer instead of an output stream.

`printer_name` (`str | None`)
: Name of the printer service. Unknown names fall back to the first
  available printer.

`yield_rate` (`int`)
: Pacing hint forwarded to encoders. `0` disables throttling; values below
  one are clamped to zero.

`use_content_repository` (`bool`)
: Let the HTML encoders publish auxiliary resources through the host
  content repository.

`content_handler_pattern` (`str | None`)
: Pattern naming auxiliary resources (`{0}` is replaced by the resource
  name). Defaults to the engine configuration.

EngineConfig

`content_handler` (`str`)
: Default content-handler pattern for HTML output written straight to the
  output stream.

`resource_content_handler` (`str`)
: Default content-handler pattern used when a content repository is active.

`rows_per_page` (`int`)
: Number of data rows per logical page for the built-in paginated HTML
  encoder.
"""

from __future__ import annotations

from collections.abc import Mapping
from numbers import Number
from pathlib import Path
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)
import yaml

from .exceptions import ReportingError


OUTPUT_TYPE = "output-type"
OUTPUT_TARGET = "output-target"
REPORT_DEFINITION_INPUT = "report-definition"
REPORT_DEFINITION_PATH = "report-definition-path"
REPORTLOAD_RESURL = "res-url"
USE_CONTENT_REPOSITORY = "useContentRepository"
REPORTHTML_CONTENTHANDLER_PATTERN = "content-handler-pattern"
REPORTGENERATE_YIELDRATE = "yield-rate"
ACCEPTED_PAGE = "accepted-page"
PAGINATE_OUTPUT = "paginate"
PRINT = "print"
PRINTER_NAME = "printer-name"
XLS_WORKBOOK_PARAM = "workbook"

RESERVED_INPUTS = frozenset(
    {
        OUTPUT_TYPE,
        OUTPUT_TARGET,
        REPORT_DEFINITION_INPUT,
        REPORT_DEFINITION_PATH,
        REPORTLOAD_RESURL,
        USE_CONTENT_REPOSITORY,
        REPORTHTML_CONTENTHANDLER_PATTERN,
        REPORTGENERATE_YIELDRATE,
        ACCEPTED_PAGE,
        PAGINATE_OUTPUT,
        PRINT,
        PRINTER_NAME,
        XLS_WORKBOOK_PARAM,
    }
)

_INPUT_FIELDS: dict[str, str] = {
    OUTPUT_TYPE: "output_type",
    OUTPUT_TARGET: "output_target",
    PAGINATE_OUTPUT: "paginate",
    ACCEPTED_PAGE: "accepted_page",
    PRINT: "print_report",
    PRINTER_NAME: "printer_name",
    REPORTGENERATE_YIELDRATE: "yield_rate",
    USE_CONTENT_REPOSITORY: "use_content_repository",
    REPORTHTML_CONTENTHANDLER_PATTERN: "content_handler_pattern",
}


def parse_flag(value: Any) -> bool:
    """Interpret boolean-like inputs; only a case-insensitive ``"true"`` is truthy."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() == "true"


class ExecutionConfig(BaseModel):
    """Resolved, immutable settings for one report execution."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    output_type: str | None = None
    output_target: str | None = None
    paginate: bool = False
    accepted_page: int = -1
    print_report: bool = False
    printer_name: str | None = None
    yield_rate: int = Field(default=0, ge=0)
    use_content_repository: bool = False
    content_handler_pattern: str | None = None

    @field_validator("paginate", "print_report", "use_content_repository", mode="before")
    @classmethod
    def _coerce_flag(cls, value: Any) -> bool:
        return parse_flag(value)

    @field_validator("yield_rate", mode="before")
    @classmethod
    def _clamp_yield_rate(cls, value: Any) -> int:
        if isinstance(value, bool) or not isinstance(value, Number):
            return 0
        rate = int(value)  # type: ignore[call-overload]
        return rate if rate >= 1 else 0

    @field_validator("accepted_page", mode="before")
    @classmethod
    def _parse_page(cls, value: Any) -> int:
        if value is None:
            return -1
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        return int(str(value).strip())

    @field_validator(
        "output_type", "output_target", "printer_name", "content_handler_pattern", mode="before"
    )
    @classmethod
    def _stringify(cls, value: Any) -> str | None:
        if value is None:
            return None
        return str(value)

    @classmethod
    def from_inputs(
        cls,
        inputs: Mapping[str, Any] | None,
        overrides: Mapping[str, Any] | None = None,
    ) -> ExecutionConfig:
        """Build a configuration from reserved input keys and explicit overrides.

        Explicit overrides (values set directly on the component) win over the
        input mapping; ``None`` overrides are ignored. The ``accepted-page``
        input is dropped unless pagination ends up requested.
        """
        payload: dict[str, Any] = {}
        for key, field_name in _INPUT_FIELDS.items():
            if inputs is not None and inputs.get(key) is not None:
                payload[field_name] = inputs[key]
        if not parse_flag(_effective(payload, overrides, "paginate")):
            payload.pop("accepted_page", None)
        for field_name, value in (overrides or {}).items():
            if value is not None:
                payload[field_name] = value
        return cls.model_validate(payload)


def _effective(
    payload: Mapping[str, Any], overrides: Mapping[str, Any] | None, field_name: str
) -> Any:
    override = (overrides or {}).get(field_name)
    return override if override is not None else payload.get(field_name)


class EngineConfig(BaseModel):
    """Process-wide settings read by the engine bootstrap."""

    model_config = ConfigDict(extra="forbid")

    content_handler: str = "{0}"
    resource_content_handler: str = "content/{0}"
    rows_per_page: int = Field(default=50, ge=1)


def load_engine_config(path: Path | str | None = None, **overrides: Any) -> EngineConfig:
    """Read an ``EngineConfig`` from a YAML file and apply keyword overrides."""
    payload: dict[str, Any] = {}
    if path is not None:
        config_path = Path(path).expanduser()
        try:
            raw = yaml.safe_load(config_path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as exc:
            raise ReportingError(f"Unable to read engine configuration '{config_path}'.") from exc
        if raw is not None and not isinstance(raw, Mapping):
            raise ReportingError(f"Engine configuration '{config_path}' must be a mapping.")
        payload.update(dict(raw or {}))
    payload.update(overrides)
    try:
        return EngineConfig.model_validate(payload)
    except ValidationError as exc:
        raise ReportingError(f"Invalid engine configuration: {exc}") from exc


__all__ = [
    "ACCEPTED_PAGE",
    "OUTPUT_TARGET",
    "OUTPUT_TYPE",
    "PAGINATE_OUTPUT",
    "PRINT",
    "PRINTER_NAME",
    "REPORTGENERATE_YIELDRATE",
    "REPORTHTML_CONTENTHANDLER_PATTERN",
    "REPORTLOAD_RESURL",
    "REPORT_DEFINITION_INPUT",
    "REPORT_DEFINITION_PATH",
    "RESERVED_INPUTS",
    "USE_CONTENT_REPOSITORY",
    "XLS_WORKBOOK_PARAM",
    "EngineConfig",
    "ExecutionConfig",
    "load_engine_config",
    "parse_flag",
]
