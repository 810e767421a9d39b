"""A source file buffer together with the tags discovered in it."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .diagnostics import DiagnosticEmitter, ensure_emitter
from .exceptions import TemplateStructureError
from .scanner import scan
from .tags import FileOffset, Tag, TagKind, classify


@dataclass(slots=True)
class Fixture:
    """One file's bytes plus its ordered tag list.

    ``tags`` follows discovery order, which is also the order the resolver
    consumes them in. Offsets always refer to ``data`` as read from disk.
    """

    source: Path
    data: bytearray
    tags: list[Tag] = field(default_factory=list)

    @classmethod
    def from_bytes(
        cls,
        source: Path,
        data: bytes | bytearray,
        *,
        emitter: DiagnosticEmitter | None = None,
    ) -> Fixture:
        fixture = cls(source=Path(source), data=bytearray(data))
        fixture.parse(emitter=emitter)
        return fixture

    @classmethod
    def from_path(cls, path: Path, *, emitter: DiagnosticEmitter | None = None) -> Fixture:
        """Read ``path`` and scan it. ``OSError`` propagates to the caller."""
        return cls.from_bytes(path, path.read_bytes(), emitter=emitter)

    def parse(self, *, emitter: DiagnosticEmitter | None = None) -> list[Tag]:
        """Populate :attr:`tags` from :attr:`data`."""
        tags: list[Tag] = []
        for span in scan(self.data, emitter=emitter, source=self.source):
            offset = FileOffset(span.start, span.end)
            if span.escaped:
                tags.append(Tag(TagKind.ESCAPE, span.inner, offset))
                continue
            kind, payload = classify(span.inner)
            tags.append(Tag(kind, payload, offset, raw=span.inner))
        self.tags = tags
        return tags

    def clone(self) -> Fixture:
        """Return a copy sharing neither the buffer nor the tag list."""
        return Fixture(source=self.source, data=bytearray(self.data), tags=list(self.tags))

    def stage_markdown(
        self,
        title: str,
        content: str,
        *,
        emitter: DiagnosticEmitter | None = None,
    ) -> None:
        """Store a rendered article in the ``markdown-title``/``markdown-content`` tags."""
        staged_title = staged_content = False
        for index, tag in enumerate(self.tags):
            if tag.kind is TagKind.MARKDOWN_CONTENT:
                self.tags[index] = tag.with_payload(content)
                staged_content = True
            elif tag.kind is TagKind.MARKDOWN_TITLE:
                self.tags[index] = tag.with_payload(title)
                staged_title = True
        if not staged_content:
            raise TemplateStructureError(
                f"Markdown template {self.source} has no markdown-content tag."
            )
        if not staged_title:
            ensure_emitter(emitter).warning(
                f"Markdown template {self.source} has no markdown-title tag; title omitted."
            )

    def kinds(self) -> list[TagKind]:
        return [tag.kind for tag in self.tags]


__all__ = ["Fixture"]
