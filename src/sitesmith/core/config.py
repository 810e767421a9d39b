"""Configuration model for a site build.

SiteConfig

`root` (`Path`)
: Site root. Content is read from `root/content_dir` and written to
  `root/build_dir`.

`content_dir` / `build_dir` (`str`)
: Input and output trees, relative to `root`.

`pages_dir` (`str`)
: Sub-directory of both trees holding the pages. Templates and markdown
  articles are discovered below `content_dir/pages_dir`.

`site_url` (`str`)
: Production base URL used by `css-location` and `favicon-location` tags.

`home_url` (`str | None`)
: Production target of `home-url` and `self-link` tags. Defaults to
  `site_url` followed by a slash.

`site_name` (`str`)
: Text of the `self-link` anchor.

`dev_mode` (`bool`)
: Emit root-relative URLs so the build can be browsed from disk. Defaults to
  `True` when the `SITESMITH_DEV` environment variable is non-empty.

`max_fragment_depth` (`int`)
: Maximum nesting of `fragment` tags before the include is rejected.

`markdown_tab_length` (`int`)
: Tab width handed to the markdown processor.

`pygments_style` (`str | None`)
: Name of a Pygments style for code blocks. The built-in dark style is used
  when omitted.

`callout_prefix` (`str`)
: Marker opening a blockquote whose first line lists CSS classes.

`tailwind_command`, `tailwind_input`, `tailwind_output`, `run_tailwind`
: External CSS build settings. Input and output live in the pages dirs.
"""

from __future__ import annotations

from collections.abc import Mapping
import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
import yaml

from .exceptions import SiteBuildError


DEV_ENVIRONMENT_VARIABLE = "SITESMITH_DEV"
CONFIG_FILENAME = "sitesmith.yml"


def normalise_root(value: Any) -> Path:
    """Return the site root, defaulting to the working directory and dropping a trailing slash."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return Path(".")
    text = str(value)
    if len(text) > 1:
        text = text.rstrip("/") or "/"
    return Path(text)


def dev_mode_from_environment(environ: Mapping[str, str] | None = None) -> bool:
    """Return whether the development toggle is set in ``environ``."""
    env = os.environ if environ is None else environ
    return bool(env.get(DEV_ENVIRONMENT_VARIABLE, ""))


class SiteConfig(BaseModel):
    """Paths, URLs and tool settings for one build."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    root: Path = Path(".")
    content_dir: str = "content"
    build_dir: str = "build"
    pages_dir: str = "pages"
    site_url: str = "https://localhost"
    home_url: str | None = None
    site_name: str = "Home"
    dev_mode: bool = Field(default_factory=lambda: dev_mode_from_environment())
    max_fragment_depth: int = Field(default=32, ge=1)
    markdown_tab_length: int = Field(default=4, ge=1)
    pygments_style: str | None = None
    callout_prefix: str = "Callout:"
    tailwind_command: str = "tailwindcss"
    tailwind_input: str = "input.css"
    tailwind_output: str = "output.css"
    run_tailwind: bool = True

    @field_validator("root", mode="before")
    @classmethod
    def _coerce_root(cls, value: Any) -> Path:
        return normalise_root(value)

    @field_validator("site_url", mode="after")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @property
    def input_root(self) -> Path:
        return self.root / self.content_dir

    @property
    def output_root(self) -> Path:
        return self.root / self.build_dir

    @property
    def input_pages(self) -> Path:
        return self.input_root / self.pages_dir

    @property
    def output_pages(self) -> Path:
        return self.output_root / self.pages_dir

    @property
    def resolved_home_url(self) -> str:
        return self.home_url or f"{self.site_url}/"

    @classmethod
    def load(cls, root: Path | str | None = None, **overrides: Any) -> SiteConfig:
        """Build a configuration from ``root/sitesmith.yml`` plus ``overrides``.

        Overrides whose value is ``None`` are ignored so CLI defaults do not
        mask the file.
        """
        base = normalise_root(root)
        payload: dict[str, Any] = {}
        config_path = base / CONFIG_FILENAME
        if config_path.is_file():
            try:
                loaded = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
            except yaml.YAMLError as exc:
                raise SiteBuildError(f"Invalid configuration file {config_path}: {exc}") from exc
            if not isinstance(loaded, dict):
                raise SiteBuildError(f"Configuration file {config_path} must hold a mapping.")
            payload.update(loaded)
        payload.update({key: value for key, value in overrides.items() if value is not None})
        payload["root"] = base
        try:
            return cls.model_validate(payload)
        except ValidationError as exc:
            raise SiteBuildError(f"Invalid configuration: {exc}") from exc


__all__ = [
    "CONFIG_FILENAME",
    "DEV_ENVIRONMENT_VARIABLE",
    "SiteConfig",
    "dev_mode_from_environment",
    "normalise_root",
]
