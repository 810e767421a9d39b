"""Implementation of the ``sitesmith build`` command."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from sitesmith.core.config import SiteConfig
from sitesmith.core.exceptions import SiteBuildError, exception_hint
from sitesmith.core.pipeline import SitePipeline

from ..diagnostics import CliEmitter
from ..presenter import present_build_summary
from ..state import emit_error, set_cli_state


OUTPUT_PANEL = "Output"
DIAGNOSTICS_PANEL = "Diagnostics"


RootArgument = Annotated[
    Path | None,
    typer.Argument(
        metavar="ROOT",
        help="Site root holding the content/ tree. Defaults to the current directory.",
        file_okay=False,
        dir_okay=True,
    ),
]

SiteUrlOption = Annotated[
    str | None,
    typer.Option("--site-url", help="Production base URL.", rich_help_panel=OUTPUT_PANEL),
]

DevOption = Annotated[
    bool | None,
    typer.Option(
        "--dev/--production",
        help="Emit relative URLs for local browsing (default: SITESMITH_DEV).",
        show_default=False,
        rich_help_panel=OUTPUT_PANEL,
    ),
]

TailwindOption = Annotated[
    bool,
    typer.Option(
        "--tailwind/--no-tailwind",
        help="Run the Tailwind CSS build after templating.",
        rich_help_panel=OUTPUT_PANEL,
    ),
]

StrictOption = Annotated[
    bool,
    typer.Option(
        "--strict",
        help="Exit with an error status when any tag failed to resolve.",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]

VerboseOption = Annotated[
    int,
    typer.Option(
        "--verbose",
        "-v",
        count=True,
        help="Increase output verbosity (repeatable).",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]

DebugOption = Annotated[
    bool,
    typer.Option(
        "--debug",
        help="Show full tracebacks on failure.",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]


def format_build_failure(error: SiteBuildError) -> str:
    """Return a concise build failure summary suitable for end users."""
    summary = "Build failed"
    hint = exception_hint(error)
    if hint:
        summary = f"{summary}: {hint}"
    return f"{summary.rstrip('.')}. Re-run with --debug for technical details."


def build(
    root: RootArgument = None,
    site_url: SiteUrlOption = None,
    dev: DevOption = None,
    tailwind: TailwindOption = True,
    strict: StrictOption = False,
    verbose: VerboseOption = 0,
    debug: DebugOption = False,
) -> None:
    """Render templates and markdown articles of a site into its build directory."""
    state = set_cli_state(verbosity=verbose, debug=debug)

    try:
        config = SiteConfig.load(
            root,
            site_url=site_url,
            dev_mode=dev,
            run_tailwind=None if tailwind else False,
        )
    except SiteBuildError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    pipeline = SitePipeline(config, emitter=CliEmitter(state=state))
    try:
        report = pipeline.run()
    except SiteBuildError as exc:
        if debug:
            raise
        emit_error(format_build_failure(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    present_build_summary(state=state, report=report)
    if report.failed(strict=strict):
        raise typer.Exit(code=1)


__all__ = ["build", "format_build_failure"]
