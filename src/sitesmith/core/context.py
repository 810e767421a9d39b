"""Read-only store of values computed before any page is resolved."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import ClassVar

from .fixture import Fixture


class ContextKind(str, Enum):
    """Names of the precomputed contexts, matching their ``<name>.context`` files."""

    MARKDOWN = "markdown"
    FAVICON = "favicon"


@dataclass(frozen=True, slots=True)
class MarkdownContext:
    """Parsed wrapper template every markdown article is rendered into."""

    kind: ClassVar[ContextKind] = ContextKind.MARKDOWN
    fixture: Fixture


@dataclass(frozen=True, slots=True)
class FaviconContext:
    """Location the favicon was copied to in the output tree."""

    kind: ClassVar[ContextKind] = ContextKind.FAVICON
    path: Path


ContextEntry = MarkdownContext | FaviconContext


@dataclass(frozen=True, slots=True)
class ContextStore:
    """Immutable mapping from :class:`ContextKind` to its entry."""

    entries: Mapping[ContextKind, ContextEntry] = field(
        default_factory=lambda: MappingProxyType({})
    )

    @classmethod
    def from_entries(cls, entries: Iterable[ContextEntry]) -> ContextStore:
        table: dict[ContextKind, ContextEntry] = {}
        for entry in entries:
            table[entry.kind] = entry
        return cls(entries=MappingProxyType(table))

    def __contains__(self, kind: object) -> bool:
        return kind in self.entries

    def get(self, kind: ContextKind) -> ContextEntry | None:
        return self.entries.get(kind)

    def markdown_fixture(self) -> Fixture | None:
        """Return the markdown wrapper template, or ``None`` when absent."""
        match self.get(ContextKind.MARKDOWN):
            case MarkdownContext(fixture=fixture):
                return fixture
            case _:
                return None

    def favicon_path(self) -> Path | None:
        """Return the favicon output location, or ``None`` when absent."""
        match self.get(ContextKind.FAVICON):
            case FaviconContext(path=path):
                return path
            case _:
                return None


__all__ = [
    "ContextEntry",
    "ContextKind",
    "ContextStore",
    "FaviconContext",
    "MarkdownContext",
]
