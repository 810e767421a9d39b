"""Markdown extension turning a marker line into blockquote CSS classes.

``> Callout:border-red-500 bg-red-950`` followed by the quote text renders a
``<blockquote class="border-red-500 bg-red-950">`` without the marker line.
"""

from __future__ import annotations

import xml.etree.ElementTree as ElementTree

from markdown import Markdown
from markdown.extensions import Extension
from markdown.treeprocessors import Treeprocessor


DEFAULT_CALLOUT_PREFIX = "Callout:"


class _CalloutTreeprocessor(Treeprocessor):
    """Move the marker line of a blockquote into its ``class`` attribute."""

    def __init__(self, md: Markdown, prefix: str) -> None:
        super().__init__(md)
        self.prefix = prefix

    def run(self, root: ElementTree.Element) -> None:  # type: ignore[override]
        for quote in root.iter("blockquote"):
            if len(quote) == 0:
                continue
            first = quote[0]
            if first.tag != "p" or not first.text:
                continue
            text = first.text.lstrip()
            if not text.startswith(self.prefix):
                continue
            marker, _, rest = text.partition("\n")
            classes = marker[len(self.prefix) :].strip()
            first.text = rest
            if classes:
                existing = quote.get("class")
                quote.set("class", f"{existing} {classes}" if existing else classes)
            if not rest.strip() and len(first) == 0:
                quote.remove(first)


class CalloutExtension(Extension):
    """Register the blockquote marker processor."""

    def __init__(self, **kwargs: object) -> None:
        self.config = {
            "prefix": [DEFAULT_CALLOUT_PREFIX, "Marker opening a callout blockquote."],
        }
        super().__init__(**kwargs)

    def extendMarkdown(self, md: Markdown) -> None:  # type: ignore[override]  # noqa: N802
        processor = _CalloutTreeprocessor(md, str(self.getConfig("prefix")))
        # Must run after the inline processor (priority 20).
        md.treeprocessors.register(processor, "sitesmith_callouts", 15)


def makeExtension(**kwargs: object) -> CalloutExtension:  # pragma: no cover - API hook  # noqa: N802
    return CalloutExtension(**kwargs)


__all__ = ["CalloutExtension", "DEFAULT_CALLOUT_PREFIX", "makeExtension"]
