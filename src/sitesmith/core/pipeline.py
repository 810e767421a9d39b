"""Orchestration of a complete site build."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from ..adapters.fsutil import copy_file, copy_tree, glob_files
from ..adapters.markdown import (
    MarkdownConversionError,
    MarkdownOptions,
    highlight_stylesheet,
    render_markdown,
)
from ..adapters.tailwind import TailwindResult, run_tailwind
from .config import SiteConfig
from .content import ContentItem, discover_content
from .context import ContextEntry, ContextKind, ContextStore, FaviconContext, MarkdownContext
from .diagnostics import DiagnosticEmitter, ensure_emitter
from .exceptions import SiteBuildError, TagResolutionError, TemplateStructureError
from .fixture import Fixture
from .resolver import Resolver


CONTEXT_SUFFIX = ".context"
TEMPLATE_PATTERN = "*.template"
FAVICON_PATTERN = "*.ico"


@dataclass(slots=True)
class BuildReport:
    """Outcome of a build.

    ``errors`` hold failures that stopped one unit of work (a page, an
    article, a context file). ``warnings`` hold tag-level problems that were
    replaced by empty output.
    """

    errors: list[SiteBuildError] = field(default_factory=list)
    warnings: list[TagResolutionError] = field(default_factory=list)
    written: list[Path] = field(default_factory=list)
    tailwind: TailwindResult | None = None

    def failed(self, *, strict: bool = False) -> bool:
        return bool(self.errors) or (strict and bool(self.warnings))

    def messages(self) -> list[str]:
        return [str(error) for error in self.errors]


class SitePipeline:
    """Run the build stages in order: context, content, pages, articles, styles."""

    def __init__(
        self,
        config: SiteConfig,
        *,
        emitter: DiagnosticEmitter | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.config = config
        self.emitter = ensure_emitter(emitter)
        self.clock = clock
        self.markdown_options = MarkdownOptions(
            tab_length=config.markdown_tab_length,
            callout_prefix=config.callout_prefix,
        )

    def run(self) -> BuildReport:
        """Build the whole site.

        :class:`~sitesmith.core.exceptions.TailwindError` propagates; every
        other failure is recorded in the report and the build carries on.
        """
        report = BuildReport()
        context = self.prepare(report)
        items = self.load_content(report)
        resolver = Resolver(
            self.config, context, items, emitter=self.emitter, clock=self.clock
        )
        self.render_pages(resolver, report)
        self.render_articles(resolver, context, items, report)
        if self.config.run_tailwind:
            report.tailwind = self.build_styles()
        return report

    def prepare(self, report: BuildReport) -> ContextStore:
        """Collect the contexts every later stage reads."""
        entries: list[ContextEntry] = []
        for path in glob_files(self.config.input_root, f"*{CONTEXT_SUFFIX}"):
            name = path.name[: -len(CONTEXT_SUFFIX)]
            if name != ContextKind.MARKDOWN.value:
                self.emitter.warning(f"Ignoring unknown context file {path}.")
                continue
            try:
                fixture = Fixture.from_path(path, emitter=self.emitter)
            except OSError as exc:
                self._fail(report, SiteBuildError(f"Failed to read context {path}: {exc}"))
                continue
            entries.append(MarkdownContext(fixture=fixture))

        favicons = glob_files(self.config.input_root, FAVICON_PATTERN)
        if len(favicons) == 1:
            destination = self.config.output_pages / favicons[0].name
            try:
                copy_file(favicons[0], destination)
            except SiteBuildError as exc:
                self._fail(report, exc)
            else:
                entries.append(FaviconContext(path=destination))
                self.emitter.event("favicon_copied", {"output": str(destination)})
        else:
            listed = ", ".join(str(path) for path in favicons) or "none"
            self.emitter.warning(
                f"Expected exactly one favicon, found {len(favicons)} ({listed}); not using any."
            )
        return ContextStore.from_entries(entries)

    def load_content(self, report: BuildReport) -> list[ContentItem]:
        """Discover articles and convert their bodies to HTML."""
        discovery = discover_content(self.config)
        for error in discovery.errors:
            self._fail(report, error)
        items: list[ContentItem] = []
        for item in discovery.items:
            try:
                html = render_markdown(item.body, self.markdown_options)
            except MarkdownConversionError as exc:
                self._fail(report, MarkdownConversionError(f"{item.source}: {exc}"))
                continue
            items.append(item.with_html(html))
        return items

    def render_pages(self, resolver: Resolver, report: BuildReport) -> None:
        """Resolve every ``*.template`` page into an ``.html`` file."""
        for source in glob_files(self.config.input_pages, TEMPLATE_PATTERN):
            relative = source.relative_to(self.config.input_pages)
            output = self.config.output_pages / relative.with_suffix(".html")
            try:
                fixture = Fixture.from_path(source, emitter=self.emitter)
            except OSError as exc:
                self._fail(report, SiteBuildError(f"Failed to read template {source}: {exc}"))
                continue
            if self._write(resolver, fixture, output, report):
                self.emitter.event("page_written", {"output": str(output), "source": str(source)})

    def render_articles(
        self,
        resolver: Resolver,
        context: ContextStore,
        items: list[ContentItem],
        report: BuildReport,
    ) -> None:
        """Render each article into its own copy of the markdown wrapper template."""
        if not items:
            return
        wrapper = context.markdown_fixture()
        if wrapper is None:
            self._fail(report, TemplateStructureError("No markdown context found."))
            return
        for item in items:
            fixture = wrapper.clone()
            try:
                fixture.stage_markdown(item.title, item.html, emitter=self.emitter)
            except TemplateStructureError as exc:
                self._fail(report, exc)
                return
            if not self._write(resolver, fixture, item.output, report):
                continue
            if item.images is not None:
                try:
                    copy_tree(item.images, item.output.parent / item.images.name)
                except SiteBuildError as exc:
                    self._fail(report, exc)
            self.emitter.event("item_written", {"output": str(item.output), "title": item.title})

    def build_styles(self) -> TailwindResult:
        css = highlight_stylesheet(self.config.pygments_style)
        return run_tailwind(self.config, css, emitter=self.emitter)

    def _write(
        self, resolver: Resolver, fixture: Fixture, output: Path, report: BuildReport
    ) -> bool:
        try:
            resolution = resolver.render_to(fixture, output)
        except SiteBuildError as exc:
            self._fail(report, exc)
            return False
        for error in resolution.errors:
            report.warnings.append(error)
            self.emitter.warning(str(error))
        report.written.append(output)
        return True

    def _fail(self, report: BuildReport, error: SiteBuildError) -> None:
        report.errors.append(error)
        self.emitter.error(str(error))


__all__ = ["BuildReport", "SitePipeline"]
