"""Expansion of tags into their replacement bytes.

The resolver never edits a fixture's buffer. It walks the tags in discovery
order and rebuilds the output into a fresh buffer, copying the literal bytes
between consecutive tags and appending each tag's replacement. Every tag's
original offsets are therefore read exactly once. Where each replacement
landed in the output is recorded in :attr:`Resolution.spans`.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from datetime import datetime
import os
from pathlib import Path

from ..adapters.fsutil import write_output
from .config import SiteConfig
from .content import ContentItem, summary_order
from .context import ContextStore
from .diagnostics import DiagnosticEmitter, ensure_emitter
from .exceptions import FragmentCycleError, TagResolutionError
from .fixture import Fixture
from .tags import FileOffset, Tag, TagKind


@dataclass(slots=True)
class Resolution:
    """Result of resolving one fixture."""

    data: bytes
    errors: list[TagResolutionError] = field(default_factory=list)
    spans: list[FileOffset] = field(default_factory=list)


def trailer(moment: datetime) -> bytes:
    """HTML comment appended to every generated file."""
    return f"\n<!-- Generated {moment.isoformat(timespec='seconds')} -->".encode()


def _relative_url(target: Path, output: Path) -> str:
    return Path(os.path.relpath(target, output.parent)).as_posix()


class Resolver:
    """Resolve fixtures against a fixed configuration, context and article list."""

    def __init__(
        self,
        config: SiteConfig,
        context: ContextStore | None = None,
        items: Sequence[ContentItem] = (),
        *,
        emitter: DiagnosticEmitter | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.config = config
        self.context = context or ContextStore()
        self.items = list(items)
        self.emitter = ensure_emitter(emitter)
        self.clock = clock or datetime.now

    def resolve(self, fixture: Fixture, output: Path) -> Resolution:
        """Expand every tag of ``fixture`` as if it were written to ``output``.

        Failures on individual tags are collected in ``errors`` and the tag
        expands to nothing.
        """
        return self._resolve(fixture, output, (self._identity(fixture.source),))

    def render_to(self, fixture: Fixture, output: Path) -> Resolution:
        """Resolve ``fixture`` and write it with the generation trailer.

        :class:`~sitesmith.core.exceptions.OutputWriteError` propagates.
        """
        resolution = self.resolve(fixture, output)
        write_output(output, resolution.data + trailer(self.clock()))
        return resolution

    def _resolve(self, fixture: Fixture, output: Path, chain: tuple[Path, ...]) -> Resolution:
        source = bytes(fixture.data)
        result = Resolution(data=b"")
        buffer = bytearray()
        cursor = 0
        for tag in fixture.tags:
            buffer += source[cursor : tag.start]
            try:
                replacement = self._expand(tag, fixture, source, output, chain, result.errors)
            except TagResolutionError as exc:
                result.errors.append(exc)
                replacement = b""
            start = len(buffer)
            buffer += replacement
            result.spans.append(FileOffset(start, len(buffer)))
            cursor = tag.end
        buffer += source[cursor:]
        result.data = bytes(buffer)
        return result

    def _expand(
        self,
        tag: Tag,
        fixture: Fixture,
        source: bytes,
        output: Path,
        chain: tuple[Path, ...],
        errors: list[TagResolutionError],
    ) -> bytes:
        match tag.kind:
            case TagKind.ESCAPE:
                return tag.payload.encode()
            case TagKind.FILE_EMBED:
                return self._read(self._target(tag, fixture), tag, fixture)
            case TagKind.FRAGMENT:
                return self._fragment(tag, fixture, output, chain, errors)
            case TagKind.CURRENT_YEAR:
                return str(self.clock().year).encode()
            case TagKind.SELF_LINK:
                href = self.config.resolved_home_url
                return f'<a href="{href}" class="hover:text-white">{self.config.site_name}</a>'.encode()
            case TagKind.SUMMARY_LIST:
                return self._summary(tag, fixture, output)
            case TagKind.MARKDOWN_TITLE | TagKind.MARKDOWN_CONTENT:
                return tag.payload.encode()
            case TagKind.HOME_URL:
                return self._home_url(fixture, output).encode()
            case TagKind.CSS_LOCATION:
                return self._asset_url(self.config.tailwind_output, fixture, output).encode()
            case TagKind.FAVICON_LOCATION:
                favicon = self.context.favicon_path()
                if favicon is None:
                    raise TagResolutionError(
                        f"No favicon available for {tag.describe()} in {fixture.source}",
                        tag=tag,
                        source=fixture.source,
                    )
                return self._asset_url(favicon.name, fixture, output).encode()
            case _:
                self.emitter.warning(
                    f"Unknown tag {tag.describe()} in {fixture.source}; leaving it in the output."
                )
                return source[tag.start : tag.end]

    def _identity(self, path: Path) -> Path:
        try:
            return path.resolve()
        except OSError:
            return Path(os.path.abspath(path))

    def _target(self, tag: Tag, fixture: Fixture) -> Path:
        if not tag.path:
            raise TagResolutionError(
                f"Tag {tag.describe()} in {fixture.source} names no file",
                tag=tag,
                source=fixture.source,
            )
        return Path(os.path.normpath(f"{fixture.source.parent}/{tag.path}"))

    def _read(self, path: Path, tag: Tag, fixture: Fixture) -> bytes:
        try:
            return path.read_bytes()
        except OSError as exc:
            raise TagResolutionError(
                f"Failed to read {path} for {tag.describe()} in {fixture.source}: {exc}",
                tag=tag,
                source=fixture.source,
            ) from exc

    def _fragment(
        self,
        tag: Tag,
        fixture: Fixture,
        output: Path,
        chain: tuple[Path, ...],
        errors: list[TagResolutionError],
    ) -> bytes:
        target = self._target(tag, fixture)
        identity = self._identity(target)
        if identity in chain:
            raise FragmentCycleError([*chain, identity], tag=tag, source=fixture.source)
        if len(chain) > self.config.max_fragment_depth:
            raise FragmentCycleError(
                [*chain, identity],
                tag=tag,
                source=fixture.source,
                limit=self.config.max_fragment_depth,
            )
        nested = Fixture.from_bytes(target, self._read(target, tag, fixture), emitter=self.emitter)
        resolution = self._resolve(nested, output, (*chain, identity))
        errors.extend(resolution.errors)
        return resolution.data

    def _summary(self, tag: Tag, fixture: Fixture, output: Path) -> bytes:
        css_class = tag.css_class
        parts: list[str] = []
        for item in summary_order(self.items):
            try:
                url = "./" + _relative_url(item.output, output)
            except ValueError as exc:
                raise TagResolutionError(
                    f"Cannot link {item.output} from {output}: {exc}",
                    tag=tag,
                    source=fixture.source,
                ) from exc
            parts.append(
                f'<li class="{css_class} group">'
                f'<a href="{url}">{item.title}</a>'
                '<div class="text-gray-500 text-base group-hover:text-cyan-500">'
                f"Published: {item.published}</div>"
                "</li>"
            )
        return "".join(parts).encode()

    def _pages_location(self, fixture: Fixture, output: Path) -> str:
        try:
            return _relative_url(self.config.output_pages, output)
        except ValueError as exc:
            raise TagResolutionError(
                f"Cannot compute a relative location for {output}: {exc}",
                source=fixture.source,
            ) from exc

    def _home_url(self, fixture: Fixture, output: Path) -> str:
        if not self.config.dev_mode:
            return self.config.resolved_home_url
        index = self.config.output_pages / "index.html"
        if self._identity(index) == self._identity(output):
            return "#"
        return f"{self._pages_location(fixture, output)}/index.html"

    def _asset_url(self, name: str, fixture: Fixture, output: Path) -> str:
        if not self.config.dev_mode:
            return f"{self.config.site_url}/{name}"
        return f"{self._pages_location(fixture, output)}/{name}"


__all__ = ["Resolution", "Resolver", "trailer"]
