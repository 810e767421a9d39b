"""CLI command implementations exposed via `sitesmith.ui.cli`."""

from __future__ import annotations

from .build import build


__all__ = ["build"]
