"""Primary public API for sitesmith."""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version as _pkg_version

from sitesmith.core.config import SiteConfig
from sitesmith.core.content import ContentItem, discover_content
from sitesmith.core.context import ContextKind, ContextStore, FaviconContext, MarkdownContext
from sitesmith.core.diagnostics import DiagnosticEmitter, LoggingEmitter, NullEmitter
from sitesmith.core.exceptions import (
    ContentItemError,
    FragmentCycleError,
    OutputWriteError,
    SiteBuildError,
    TagResolutionError,
    TailwindError,
    TemplateStructureError,
)
from sitesmith.core.fixture import Fixture
from sitesmith.core.pipeline import BuildReport, SitePipeline
from sitesmith.core.resolver import Resolution, Resolver
from sitesmith.core.scanner import RawSpan, scan
from sitesmith.core.tags import FileOffset, Tag, TagKind, classify, format_tag


try:
    __version__ = _pkg_version("sitesmith")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "BuildReport",
    "ContentItem",
    "ContentItemError",
    "ContextKind",
    "ContextStore",
    "DiagnosticEmitter",
    "FaviconContext",
    "FileOffset",
    "Fixture",
    "FragmentCycleError",
    "LoggingEmitter",
    "MarkdownContext",
    "NullEmitter",
    "OutputWriteError",
    "RawSpan",
    "Resolution",
    "Resolver",
    "SiteBuildError",
    "SiteConfig",
    "SitePipeline",
    "Tag",
    "TagKind",
    "TagResolutionError",
    "TailwindError",
    "TemplateStructureError",
    "__version__",
    "classify",
    "discover_content",
    "format_tag",
    "scan",
]
