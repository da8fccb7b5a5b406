"""Bind untyped inputs onto a report's typed parameter slots."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date, datetime, timezone
import logging
from typing import Any

from .converters import ConverterError, ConverterRegistry, get_converter_registry
from .exceptions import ParameterConversionError
from .messages import get_message
from .model import (
    ParameterContext,
    ParameterDefinition,
    ReportModel,
    ResultSet,
    ResultSetTableModel,
    TableModel,
)
from .values import ArrayValue, ScalarValue, tag_value


logger = logging.getLogger(__name__)


def canonical_string(value: Any) -> str:
    """Return the textual form fed to converters."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return str(value)


def _from_epoch_millis(text: str, target: type) -> Any:
    millis = int(text.strip())
    moment = datetime.fromtimestamp(millis / 1000, tz=timezone.utc)
    if target is datetime:
        return moment
    return moment.date()


def convert(
    target_type: type,
    raw_value: Any,
    *,
    registry: ConverterRegistry | None = None,
) -> Any:
    """Convert ``raw_value`` so that it satisfies ``target_type``.

    Values already of the right type pass through, except that a boolean
    never counts as an integer. Host result sets are wrapped when a table is
    expected. Everything else goes through its string form: an empty string
    yields ``None``, dates accept millisecond epochs, and the remaining cases
    are handed to the converter registry. Types with no registered converter
    keep the raw value.

    Raises:
        ConverterError: the registered converter rejected the string form.
    """
    if target_type is None:
        raise TypeError("target_type must not be None")
    if raw_value is None:
        return None
    if isinstance(raw_value, target_type) and not (
        isinstance(raw_value, bool) and target_type is not bool
    ):
        return raw_value

    if issubclass(TableModel, target_type) and isinstance(raw_value, ResultSet):
        return ResultSetTableModel(raw_value)

    text = canonical_string(raw_value)
    if not text:
        return None

    if target_type in (date, datetime):
        try:
            return _from_epoch_millis(text, target_type)
        except (ValueError, OverflowError, OSError):
            pass  # not an epoch, parse it as a calendar value below

    registry = registry if registry is not None else get_converter_registry()
    converter = registry.get_converter(target_type)
    if converter is None:
        return raw_value
    return converter.parse(text)


class ParameterBinder:
    """Apply an input mapping to the parameter store of a report."""

    def __init__(self, registry: ConverterRegistry | None = None) -> None:
        self.registry = registry

    def bind(
        self,
        report: ReportModel,
        inputs: Mapping[str, Any] | None,
        context: ParameterContext,
    ) -> None:
        """Bind every declared parameter that has an input or a default.

        Parameters are processed in declaration order. Parameters without an
        input and without a default are left untouched in the value store.
        """
        values = inputs or {}
        for definition in report.parameters:
            raw = values.get(definition.name)
            if raw is None:
                raw = definition.default_value(context)
            if raw is None:
                continue
            report.parameter_values[definition.name] = self.convert_parameter(definition, raw)

    def convert_parameter(self, definition: ParameterDefinition, raw: Any) -> Any:
        """Return the typed value for ``definition`` after multiplicity normalization."""
        tagged = tag_value(raw)
        if isinstance(tagged, ScalarValue) and (definition.array or definition.multi_select):
            tagged = tagged.as_array()

        if isinstance(tagged, ArrayValue):
            return tuple(
                self._convert(definition, definition.value_type, item) for item in tagged.items
            )
        return self._convert(definition, definition.value_type, tagged.value)

    def _convert(self, definition: ParameterDefinition, target: type, raw: Any) -> Any:
        try:
            return convert(target, raw, registry=self.registry)
        except ConverterError as exc:
            message = get_message("unable_to_convert_parameter", parameter=definition.name)
            logger.debug("%s (%s)", message, exc)
            raise ParameterConversionError(definition.name, message) from exc


def bind_parameters(
    report: ReportModel,
    inputs: Mapping[str, Any] | None,
    context: ParameterContext,
    *,
    registry: ConverterRegistry | None = None,
) -> None:
    """Bind ``inputs`` onto ``report`` using a fresh ``ParameterBinder``."""
    ParameterBinder(registry).bind(report, inputs, context)


__all__ = ["ParameterBinder", "bind_parameters", "canonical_string", "convert"]
