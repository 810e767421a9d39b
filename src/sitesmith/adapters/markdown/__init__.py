"""Markdown conversion and code highlighting utilities."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import markdown
from pygments.formatters import HtmlFormatter
from pygments.util import ClassNotFound

from sitesmith.core.exceptions import SiteBuildError

from .callouts import DEFAULT_CALLOUT_PREFIX, CalloutExtension
from .style import SiteStyle


__all__ = [
    "DEFAULT_MARKDOWN_EXTENSIONS",
    "HIGHLIGHT_CSS_CLASS",
    "MarkdownConversionError",
    "MarkdownOptions",
    "highlight_stylesheet",
    "render_markdown",
]


HIGHLIGHT_CSS_CLASS = "highlight"

DEFAULT_MARKDOWN_EXTENSIONS = [
    "pymdownx.highlight",
    "pymdownx.superfences",
    "pymdownx.caret",
    "pymdownx.tilde",
    "abbr",
    "attr_list",
    "def_list",
    "footnotes",
    "tables",
]


DEFAULT_EXTENSION_CONFIGS: dict[str, dict[str, object]] = {
    "pymdownx.highlight": {
        "use_pygments": True,
        "css_class": HIGHLIGHT_CSS_CLASS,
        "guess_lang": True,
        "pygments_lang_class": True,
    },
}


class MarkdownConversionError(SiteBuildError):
    """Raised when Markdown cannot be converted into HTML."""


@dataclass(frozen=True, slots=True)
class MarkdownOptions:
    """Processor settings; instances double as cache keys."""

    tab_length: int = 4
    callout_prefix: str = DEFAULT_CALLOUT_PREFIX


_MARKDOWN_CACHE: dict[MarkdownOptions, markdown.Markdown] = {}


def _build_markdown_processor(options: MarkdownOptions) -> markdown.Markdown:
    extension_configs = {
        name: dict(DEFAULT_EXTENSION_CONFIGS[name])
        for name in DEFAULT_MARKDOWN_EXTENSIONS
        if name in DEFAULT_EXTENSION_CONFIGS
    }
    extensions: list[Any] = [
        *DEFAULT_MARKDOWN_EXTENSIONS,
        CalloutExtension(prefix=options.callout_prefix),
    ]
    try:
        return markdown.Markdown(
            extensions=extensions,
            extension_configs=extension_configs,
            tab_length=options.tab_length,
        )
    except Exception as exc:  # pragma: no cover - library-controlled
        raise MarkdownConversionError(f"Failed to initialize Markdown processor: {exc}") from exc


def render_markdown(source: bytes | str, options: MarkdownOptions | None = None) -> str:
    """Convert Markdown source into an HTML fragment."""
    options = options or MarkdownOptions()
    if isinstance(source, bytes):
        try:
            text = source.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MarkdownConversionError(f"Markdown source is not valid UTF-8: {exc}") from exc
    else:
        text = source

    processor = _MARKDOWN_CACHE.get(options)
    if processor is None:
        processor = _build_markdown_processor(options)
        _MARKDOWN_CACHE[options] = processor

    try:
        processor.reset()
        return processor.convert(text)
    except Exception as exc:  # pragma: no cover - library-controlled
        raise MarkdownConversionError(f"Failed to convert Markdown source: {exc}") from exc


def highlight_stylesheet(style: str | None = None) -> str:
    """Return CSS rules for highlighted code blocks.

    ``style`` names any installed Pygments style; the built-in
    :class:`SiteStyle` is used when it is ``None``.
    """
    try:
        formatter = HtmlFormatter(style=style or SiteStyle)
    except ClassNotFound as exc:
        raise MarkdownConversionError(f"Unknown Pygments style '{style}'.") from exc
    return formatter.get_style_defs(f".{HIGHLIGHT_CSS_CLASS}")
