from __future__ import annotations

from decimal import Decimal

import pytest

from reportrunner.core.converters import (
    CallableConverter,
    ConverterError,
    ConverterRegistry,
    get_converter_registry,
    parse_bool,
    parse_int,
    set_converter_registry,
)
from reportrunner.core.values import ArrayValue, ScalarValue, is_array_like, tag_value


@pytest.mark.parametrize("raw", [["a", "b"], ("a",), {"x"}, frozenset({1})])
def test_sequences_are_tagged_as_arrays(raw: object) -> None:
    tagged = tag_value(raw)
    assert isinstance(tagged, ArrayValue)
    assert len(tagged) == len(raw)  # type: ignore[arg-type]


@pytest.mark.parametrize("raw", ["text", b"bytes", bytearray(b"x"), 12, None, True])
def test_text_and_scalars_are_tagged_as_scalars(raw: object) -> None:
    assert not is_array_like(raw)
    assert tag_value(raw) == ScalarValue(raw)


def test_scalar_promotes_to_single_element_array() -> None:
    assert ScalarValue("EMEA").as_array() == ArrayValue(("EMEA",))


def test_tag_value_keeps_existing_tags() -> None:
    tagged = ArrayValue((1, 2))
    assert tag_value(tagged) is tagged


def test_parse_bool_tokens() -> None:
    assert parse_bool(" Yes ") is True
    assert parse_bool("off") is False
    with pytest.raises(ValueError):
        parse_bool("maybe")


def test_parse_int_accepts_integral_floats() -> None:
    assert parse_int("12") == 12
    assert parse_int("12.0") == 12
    with pytest.raises(ValueError):
        parse_int("12.5")


def test_callable_converter_wraps_parse_failures() -> None:
    converter = CallableConverter(Decimal, Decimal)
    assert converter.parse(" 1.50 ") == Decimal("1.50")
    with pytest.raises(ConverterError, match="Decimal"):
        converter.parse("abc")


def test_registry_wraps_plain_callables() -> None:
    registry = ConverterRegistry()
    registry.register(int, int)

    assert int in registry
    assert isinstance(registry.get_converter(int), CallableConverter)
    registry.unregister(int)
    assert registry.get_converter(int) is None
    assert list(registry) == []


def test_default_registry_is_shared_until_replaced() -> None:
    first = get_converter_registry()
    assert get_converter_registry() is first
    assert bool in first

    custom = ConverterRegistry()
    set_converter_registry(custom)
    assert get_converter_registry() is custom
