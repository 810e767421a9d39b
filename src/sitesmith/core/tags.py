"""Tag descriptors and the classifier mapping tag text to a kind.

A tag is written ``{{kind:payload}}``. The kind is matched case-insensitively
against :class:`TagKind` (or one of its short aliases) and everything after
the first colon is kept verbatim as the payload.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TagKind(str, Enum):
    """Closed set of tag kinds understood by the resolver."""

    UNKNOWN = ""
    ESCAPE = "\\"

    FILE_EMBED = "file-embed"
    FRAGMENT = "fragment"
    CURRENT_YEAR = "current-year"
    SELF_LINK = "self-link"
    SUMMARY_LIST = "summary-list"

    MARKDOWN_TITLE = "markdown-title"
    MARKDOWN_CONTENT = "markdown-content"

    CSS_LOCATION = "css-location"
    FAVICON_LOCATION = "favicon-location"
    HOME_URL = "home-url"

    @property
    def is_known(self) -> bool:
        return self not in (TagKind.UNKNOWN, TagKind.ESCAPE)


_ALIASES: dict[str, TagKind] = {
    "f": TagKind.FILE_EMBED,
    "t": TagKind.FRAGMENT,
    "me": TagKind.SELF_LINK,
    "summary-enumerate": TagKind.SUMMARY_LIST,
}

_KIND_TOKENS: dict[str, TagKind] = {
    **{kind.value: kind for kind in TagKind if kind.is_known},
    **_ALIASES,
}

_PATH_KINDS = frozenset({TagKind.FILE_EMBED, TagKind.FRAGMENT})


@dataclass(frozen=True, slots=True)
class FileOffset:
    """Half-open byte range ``[start, end)`` inside one buffer version."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.end < self.start:
            raise ValueError(f"Invalid offset range [{self.start}, {self.end}).")

    def __len__(self) -> int:
        return self.end - self.start

    def shift(self, delta: int) -> FileOffset:
        return FileOffset(self.start + delta, self.end + delta)


@dataclass(frozen=True, slots=True)
class Tag:
    """A classified placeholder located in its owning buffer."""

    kind: TagKind
    payload: str
    offset: FileOffset
    raw: str = ""

    @property
    def start(self) -> int:
        return self.offset.start

    @property
    def end(self) -> int:
        return self.offset.end

    @property
    def path(self) -> str:
        """Relative file path referenced by ``file-embed`` and ``fragment`` tags."""
        if self.kind not in _PATH_KINDS:
            return ""
        return self.payload.strip()

    @property
    def css_class(self) -> str:
        """CSS classes requested by a ``summary-list`` tag via ``class=...``."""
        if self.kind is not TagKind.SUMMARY_LIST:
            return ""
        trimmed = self.payload.strip()
        if not trimmed.startswith("class="):
            return ""
        return trimmed[len("class=") :].strip().strip('"').strip()

    def with_payload(self, payload: str) -> Tag:
        return Tag(kind=self.kind, payload=payload, offset=self.offset, raw=self.raw)

    def describe(self) -> str:
        """Render the tag for diagnostics, spelling known kinds by their canonical name."""
        if self.kind is TagKind.ESCAPE:
            return f"\\{self.payload}"
        if self.kind.is_known:
            return f"{{{{{format_tag(self.kind, self.payload)}}}}}"
        return f"{{{{{self.raw}}}}}"


def classify(inner: str) -> tuple[TagKind, str]:
    """Split the text between the delimiters into ``(kind, payload)``.

    Only the first colon separates kind from payload. Text without a colon,
    or with an unrecognised kind, classifies as :attr:`TagKind.UNKNOWN`.
    """
    name, separator, payload = inner.partition(":")
    if not separator:
        return TagKind.UNKNOWN, ""
    kind = _KIND_TOKENS.get(name.strip().lower(), TagKind.UNKNOWN)
    return kind, payload


def format_tag(kind: TagKind, payload: str = "") -> str:
    """Return the inner text that :func:`classify` maps back to ``(kind, payload)``."""
    if not kind.is_known:
        raise ValueError(f"Cannot format a tag of kind {kind!r}.")
    return f"{kind.value}:{payload}"


__all__ = ["FileOffset", "Tag", "TagKind", "classify", "format_tag"]
