"""String-to-value converters keyed by target type."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from threading import RLock
from typing import Any, Protocol, runtime_checkable


class ConverterError(ValueError):
    """Raised when a converter cannot parse its textual input."""


@runtime_checkable
class ValueConverter(Protocol):
    """Parse the canonical string form of a value into a typed value."""

    def parse(self, text: str) -> Any: ...


class CallableConverter:
    """Adapt a plain parsing callable to the ``ValueConverter`` protocol."""

    def __init__(self, target: type, parser: Callable[[str], Any]) -> None:
        self.target = target
        self._parser = parser

    def parse(self, text: str) -> Any:
        try:
            return self._parser(text.strip())
        except (ValueError, TypeError, InvalidOperation) as exc:
            raise ConverterError(
                f"Cannot convert {text!r} to {self.target.__name__}."
            ) from exc

    def __repr__(self) -> str:
        return f"CallableConverter({self.target.__name__})"


_TRUE_TOKENS = frozenset({"true", "yes", "on", "1"})
_FALSE_TOKENS = frozenset({"false", "no", "off", "0"})


def parse_bool(text: str) -> bool:
    token = text.strip().lower()
    if token in _TRUE_TOKENS:
        return True
    if token in _FALSE_TOKENS:
        return False
    raise ValueError(f"not a boolean: {text!r}")


def parse_int(text: str) -> int:
    try:
        return int(text)
    except ValueError:
        # Accept integral floats such as "12.0".
        number = float(text)
        if not number.is_integer():
            raise
        return int(number)


class ConverterRegistry:
    """Registry of ``ValueConverter`` instances keyed by target type."""

    def __init__(self) -> None:
        self._converters: dict[type, ValueConverter] = {}
        self._lock = RLock()

    def register(self, target: type, converter: ValueConverter | Callable[[str], Any]) -> None:
        """Register ``converter`` for ``target``, wrapping plain callables."""
        if not isinstance(converter, ValueConverter):
            converter = CallableConverter(target, converter)
        with self._lock:
            self._converters[target] = converter

    def unregister(self, target: type) -> None:
        with self._lock:
            self._converters.pop(target, None)

    def get_converter(self, target: type) -> ValueConverter | None:
        with self._lock:
            return self._converters.get(target)

    def __contains__(self, target: object) -> bool:
        with self._lock:
            return target in self._converters

    def __iter__(self) -> Iterator[type]:
        with self._lock:
            return iter(list(self._converters))


def register_builtin_converters(registry: ConverterRegistry) -> ConverterRegistry:
    """Populate ``registry`` with converters for the common scalar types."""
    registry.register(str, str)
    registry.register(int, parse_int)
    registry.register(float, float)
    registry.register(Decimal, Decimal)
    registry.register(bool, parse_bool)
    registry.register(date, date.fromisoformat)
    registry.register(datetime, datetime.fromisoformat)
    registry.register(time, time.fromisoformat)
    return registry


_DEFAULT_REGISTRY: ConverterRegistry | None = None
_LOCK: RLock = RLock()


def get_converter_registry() -> ConverterRegistry:
    """Return the process-wide registry, creating it with built-ins on first use."""
    global _DEFAULT_REGISTRY
    with _LOCK:
        if _DEFAULT_REGISTRY is None:
            _DEFAULT_REGISTRY = register_builtin_converters(ConverterRegistry())
        return _DEFAULT_REGISTRY


def set_converter_registry(registry: ConverterRegistry | None) -> None:
    """Replace the process-wide registry (``None`` restores lazy defaults)."""
    global _DEFAULT_REGISTRY
    with _LOCK:
        _DEFAULT_REGISTRY = registry


__all__ = [
    "CallableConverter",
    "ConverterError",
    "ConverterRegistry",
    "ValueConverter",
    "get_converter_registry",
    "parse_bool",
    "parse_int",
    "register_builtin_converters",
    "set_converter_registry",
]
