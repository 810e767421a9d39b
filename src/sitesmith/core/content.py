"""Discovery of markdown articles and their sibling metadata files."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from types import MappingProxyType

from ..adapters.fsutil import glob_files
from .config import SiteConfig
from .exceptions import ContentItemError


METADATA_SUFFIX = ".content"
IMAGES_DIRNAME = "images"
REQUIRED_METADATA = ("title", "published")


@dataclass(frozen=True, slots=True)
class ContentItem:
    """One markdown article, read-only once discovered."""

    source: Path
    body: bytes
    metadata: Mapping[str, bytes]
    output: Path
    images: Path | None = None
    html: str = ""

    @property
    def directory(self) -> Path:
        return self.source.parent

    @property
    def title(self) -> str:
        return self.metadata["title"].decode("utf-8").strip()

    @property
    def published(self) -> str:
        return self.metadata["published"].decode("utf-8").strip()

    def with_html(self, html: str) -> ContentItem:
        return replace(self, html=html)


@dataclass(slots=True)
class DiscoveryResult:
    items: list[ContentItem] = field(default_factory=list)
    errors: list[ContentItemError] = field(default_factory=list)


def read_metadata(directory: Path) -> dict[str, bytes]:
    """Return ``{stem: bytes}`` for every ``*.content`` file directly inside ``directory``."""
    metadata: dict[str, bytes] = {}
    for path in sorted(directory.glob(f"*{METADATA_SUFFIX}")):
        if not path.is_file():
            continue
        try:
            metadata[path.stem] = path.read_bytes()
        except OSError as exc:
            raise ContentItemError(f"Failed to read metadata {path}: {exc}") from exc
    return metadata


def output_path_for(config: SiteConfig, source: Path, published: str) -> Path:
    """Return where an article is written.

    ``pages/blog/my-post/post.md`` published ``2024-05-01`` becomes
    ``<output pages>/blog/2024-05-01/my-post.html``.
    """
    relative = source.parent.relative_to(config.input_pages)
    if relative == Path("."):
        return config.output_pages / published / f"{source.stem}.html"
    return config.output_pages / relative.parent / published / f"{relative.name}.html"


def _required_text(source: Path, metadata: Mapping[str, bytes]) -> dict[str, str]:
    text: dict[str, str] = {}
    for key in REQUIRED_METADATA:
        try:
            text[key] = metadata[key].decode("utf-8").strip()
        except UnicodeDecodeError as exc:
            raise ContentItemError(
                f"Article {source} has {key}{METADATA_SUFFIX} that is not valid UTF-8: {exc}"
            ) from exc
    return text


def load_item(config: SiteConfig, source: Path) -> ContentItem:
    """Read one article. Raises :class:`ContentItemError` when it cannot be built."""
    try:
        body = source.read_bytes()
    except OSError as exc:
        raise ContentItemError(f"Failed to read markdown {source}: {exc}") from exc

    metadata = read_metadata(source.parent)
    missing = [key for key in REQUIRED_METADATA if not metadata.get(key, b"").strip()]
    if missing:
        names = ", ".join(f"{key}{METADATA_SUFFIX}" for key in missing)
        raise ContentItemError(f"Article {source} is missing required metadata: {names}")

    published = _required_text(source, metadata)["published"]
    if published in (".", "..") or any(sep in published for sep in ("/", "\\")):
        raise ContentItemError(
            f"Article {source} has an invalid published value {published!r}; "
            "it must not contain path separators."
        )
    images = source.parent / IMAGES_DIRNAME
    return ContentItem(
        source=source,
        body=body,
        metadata=MappingProxyType(metadata),
        output=output_path_for(config, source, published),
        images=images if images.is_dir() else None,
    )


def discover_content(config: SiteConfig) -> DiscoveryResult:
    """Load every ``*.md`` article below the input pages directory.

    A broken article is reported in ``errors`` and skipped; the others load.
    """
    result = DiscoveryResult()
    if not config.input_pages.is_dir():
        return result
    for source in glob_files(config.input_pages, "*.md"):
        try:
            result.items.append(load_item(config, source))
        except ContentItemError as exc:
            result.errors.append(exc)
    return result


def summary_order(items: list[ContentItem]) -> list[ContentItem]:
    """Newest first, ties broken by title."""
    by_title = sorted(items, key=lambda item: item.title)
    return sorted(by_title, key=lambda item: item.published, reverse=True)


__all__ = [
    "ContentItem",
    "DiscoveryResult",
    "REQUIRED_METADATA",
    "discover_content",
    "load_item",
    "output_path_for",
    "read_metadata",
    "summary_order",
]
