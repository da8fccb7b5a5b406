"""Content repository and session contracts supplied by the host."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ContentRepository(Protocol):
    """Storage for auxiliary resources produced while rendering HTML."""

    def store(self, name: str, payload: bytes, mime_type: str) -> None: ...


ContentRepositoryProvider = Callable[[Any], ContentRepository]


@dataclass(slots=True)
class ReportSession:
    """Minimal host session handed to loaders and repository-aware encoders."""

    name: str
    attributes: dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class StoredContent:
    payload: bytes
    mime_type: str


class InMemoryContentRepository:
    """Dictionary-backed content repository."""

    def __init__(self) -> None:
        self.items: dict[str, StoredContent] = {}

    def store(self, name: str, payload: bytes, mime_type: str) -> None:
        self.items[name] = StoredContent(payload=bytes(payload), mime_type=mime_type)

    def get(self, name: str) -> StoredContent | None:
        return self.items.get(name)


__all__ = [
    "ContentRepository",
    "ContentRepositoryProvider",
    "InMemoryContentRepository",
    "ReportSession",
    "StoredContent",
]
