"""Tagged representation of raw input values.

Inputs arrive as an untyped mapping. Before conversion every raw value is
classified as either a single value or a sequence of values so that the
binder can dispatch on the tag instead of inspecting runtime types.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class ScalarValue:
    """A single raw input value."""

    value: Any

    def as_array(self) -> ArrayValue:
        return ArrayValue((self.value,))


@dataclass(frozen=True, slots=True)
class ArrayValue:
    """An ordered collection of raw input values."""

    items: tuple[Any, ...]

    def __len__(self) -> int:
        return len(self.items)


TaggedValue = ScalarValue | ArrayValue


def is_array_like(raw: Any) -> bool:
    """Return True for sequences that represent several values (not text or bytes)."""
    if isinstance(raw, (str, bytes, bytearray, memoryview)):
        return False
    return isinstance(raw, (Sequence, set, frozenset))


def tag_value(raw: Any) -> TaggedValue:
    """Classify ``raw`` into a scalar or array variant."""
    if isinstance(raw, (ScalarValue, ArrayValue)):
        return raw
    if is_array_like(raw):
        return ArrayValue(tuple(raw))
    return ScalarValue(raw)


__all__ = ["ArrayValue", "ScalarValue", "TaggedValue", "is_array_like", "tag_value"]
