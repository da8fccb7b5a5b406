from __future__ import annotations

from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any

import pytest

from reportrunner.core.binder import ParameterBinder, bind_parameters, canonical_string, convert
from reportrunner.core.converters import ConverterError, ConverterRegistry
from reportrunner.core.exceptions import ParameterConversionError
from reportrunner.core.model import (
    ParameterContext,
    ParameterDefinition,
    ReportModel,
    ResultSetTableModel,
    TableModel,
)


class _Cursor:
    def column_names(self) -> list[str]:
        return ["id", "name"]

    def fetch_rows(self) -> list[tuple[Any, ...]]:
        return [(1, "a"), (2, "b")]


def _bind(report: ReportModel, inputs: dict[str, Any]) -> ReportModel:
    with ParameterContext(report) as context:
        ParameterBinder().bind(report, inputs, context)
    return report


def test_canonical_string_forms() -> None:
    assert canonical_string(True) == "true"
    assert canonical_string(b"abc") == "abc"
    assert canonical_string(Decimal("1.5")) == "1.5"


def test_convert_passes_through_matching_values() -> None:
    value = date(2024, 1, 2)
    assert convert(date, value) is value


def test_convert_does_not_take_booleans_as_integers() -> None:
    assert convert(bool, True) is True
    with pytest.raises(ConverterError):
        convert(int, True)


def test_boolean_input_for_integer_parameter_fails() -> None:
    report = ReportModel(parameters=[ParameterDefinition("limit", int)])
    with pytest.raises(ParameterConversionError):
        _bind(report, {"limit": True})


def test_convert_empty_string_yields_none() -> None:
    assert convert(int, "") is None
    assert convert(str, "") is None


def test_convert_none_yields_none() -> None:
    assert convert(int, None) is None


def test_convert_date_from_epoch_millis() -> None:
    assert convert(date, "86400000") == date(1970, 1, 2)
    assert convert(datetime, 0) == datetime(1970, 1, 1, tzinfo=timezone.utc)


def test_convert_date_falls_back_to_iso_format() -> None:
    assert convert(date, "2024-03-01") == date(2024, 3, 1)


def test_convert_without_converter_returns_raw_value() -> None:
    class Opaque:
        pass

    assert convert(Opaque, 42, registry=ConverterRegistry()) == 42


def test_convert_wraps_result_sets_for_tables() -> None:
    table = convert(TableModel, _Cursor())
    assert isinstance(table, ResultSetTableModel)
    assert table.columns == ("id", "name")
    assert table.row_count == 2


def test_absent_parameter_leaves_no_entry() -> None:
    report = ReportModel(parameters=[ParameterDefinition("region")])
    _bind(report, {})
    assert "region" not in report.parameter_values


def test_unresolved_parameter_keeps_previous_value() -> None:
    report = ReportModel(
        parameters=[ParameterDefinition("region")],
        parameter_values={"region": "EMEA"},
    )
    _bind(report, {"other": "x"})
    assert report.parameter_values == {"region": "EMEA"}


def test_default_value_is_used_when_input_missing() -> None:
    report = ReportModel(parameters=[ParameterDefinition("limit", int, default="10")])
    _bind(report, {})
    assert report.parameter_values["limit"] == 10


def test_callable_default_sees_earlier_bindings() -> None:
    seen: dict[str, Any] = {}

    def default(context: ParameterContext) -> str:
        seen.update(context.parameter_values)
        return "fallback"

    report = ReportModel(
        parameters=[ParameterDefinition("first"), ParameterDefinition("second", default=default)]
    )
    _bind(report, {"first": "one"})
    assert seen == {"first": "one"}
    assert report.parameter_values["second"] == "fallback"


def test_multi_select_scalar_becomes_single_element_array() -> None:
    report = ReportModel(parameters=[ParameterDefinition("ids", int, multi_select=True)])
    _bind(report, {"ids": "7"})
    assert report.parameter_values["ids"] == (7,)


def test_array_scalar_becomes_single_element_array() -> None:
    report = ReportModel(parameters=[ParameterDefinition("ids", int, array=True)])
    _bind(report, {"ids": "7"})
    assert report.parameter_values["ids"] == (7,)


def test_array_input_converts_each_element() -> None:
    report = ReportModel(parameters=[ParameterDefinition("ids", int, array=True)])
    _bind(report, {"ids": ["1", 2, "3.0"]})
    assert report.parameter_values["ids"] == (1, 2, 3)


def test_failing_element_aborts_without_partial_array() -> None:
    report = ReportModel(
        parameters=[
            ParameterDefinition("ids", int, array=True),
            ParameterDefinition("after"),
        ]
    )
    with pytest.raises(ParameterConversionError) as excinfo:
        _bind(report, {"ids": ["1", "two"], "after": "x"})
    assert excinfo.value.parameter == "ids"
    assert "ids" not in report.parameter_values
    assert "after" not in report.parameter_values


def test_empty_string_binds_none_for_scalar_parameter() -> None:
    report = ReportModel(parameters=[ParameterDefinition("limit", int)])
    _bind(report, {"limit": ""})
    assert report.parameter_values["limit"] is None


def test_bind_parameters_uses_given_registry() -> None:
    registry = ConverterRegistry()
    registry.register(int, lambda text: int(text) * 2)
    report = ReportModel(parameters=[ParameterDefinition("count", int)])
    with ParameterContext(report) as context:
        bind_parameters(report, {"count": "4"}, context, registry=registry)
    assert report.parameter_values["count"] == 8


def test_context_rejects_reads_after_close() -> None:
    report = ReportModel()
    context = ParameterContext(report)
    with context:
        assert context.is_open
    assert not context.is_open
    with pytest.raises(RuntimeError):
        _ = context.parameter_values
