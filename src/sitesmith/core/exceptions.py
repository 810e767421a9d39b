"""Custom exception hierarchy for the site build pipeline."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from .tags import Tag


class SiteBuildError(RuntimeError):
    """Base exception for site build failures."""


class TagResolutionError(SiteBuildError):
    """Raised when a single tag cannot be expanded.

    The resolver records these instead of propagating them; the tag is
    replaced with an empty byte string and resolution continues.
    """

    def __init__(self, message: str, *, tag: Tag | None = None, source: Path | None = None) -> None:
        super().__init__(message)
        self.tag = tag
        self.source = source


class FragmentCycleError(TagResolutionError):
    """Raised when fragment includes loop back on themselves or nest too deeply."""

    def __init__(
        self,
        chain: list[Path],
        *,
        tag: Tag | None = None,
        source: Path | None = None,
        limit: int | None = None,
    ) -> None:
        rendered = " -> ".join(str(path) for path in chain)
        if limit is not None:
            message = f"Fragment cycle detected (depth limit {limit} exceeded): {rendered}"
        else:
            message = f"Fragment cycle detected: {rendered}"
        super().__init__(message, tag=tag, source=source)
        self.chain = list(chain)


class TemplateStructureError(SiteBuildError):
    """Raised when a template lacks a slot the pipeline needs to fill."""


class ContentItemError(SiteBuildError):
    """Raised when a content item is missing required metadata."""


class OutputWriteError(SiteBuildError):
    """Raised when a generated file cannot be written."""


class TailwindError(SiteBuildError):
    """Raised when the external CSS build step fails."""

    def __init__(self, message: str, *, stdout: str = "", stderr: str = "") -> None:
        details = [message]
        if stdout.strip():
            details.append(f"stdout: {stdout.strip()}")
        if stderr.strip():
            details.append(f"stderr: {stderr.strip()}")
        super().__init__("\n".join(details))
        self.stdout = stdout
        self.stderr = stderr


def exception_messages(exc: BaseException) -> list[str]:
    """Return the collected message chain for an exception and its causes."""
    messages: list[str] = []
    visited: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in visited:
        visited.add(id(current))
        text = str(current).strip()
        if text:
            first_line = text.splitlines()[0].strip()
            if first_line:
                messages.append(first_line)
        current = current.__cause__ or current.__context__
    return messages


def exception_hint(exc: BaseException) -> str | None:
    """Return the most specific message available for an exception chain."""
    messages = exception_messages(exc)
    return messages[-1] if messages else None


__all__ = [
    "ContentItemError",
    "FragmentCycleError",
    "OutputWriteError",
    "SiteBuildError",
    "TagResolutionError",
    "TailwindError",
    "TemplateStructureError",
    "exception_hint",
    "exception_messages",
]
