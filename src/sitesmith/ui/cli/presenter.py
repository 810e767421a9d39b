"""Rich-aware presenters for CLI output."""

from __future__ import annotations

from pathlib import Path

from rich import box
from rich.table import Table

from sitesmith.core.pipeline import BuildReport

from .state import CLIState


def _format_path(path: Path) -> str:
    """Format a path relative to the current working directory for display."""
    resolved = path.resolve()
    try:
        return str(resolved.relative_to(Path.cwd()))
    except ValueError:
        return str(resolved)


def _size_details(path: Path) -> str:
    """Return a human-readable size for a file if it exists."""
    try:
        size = path.stat().st_size
    except OSError:
        return ""
    if size >= 1024 * 1024:
        return f"{size / (1024 * 1024):.2f} MiB"
    if size >= 1024:
        return f"{size / 1024:.1f} KiB"
    return f"{size} B"


_EVENT_KINDS = (("page_written", "page"), ("item_written", "article"))


def _written_rows(state: CLIState) -> list[tuple[str, str, str]]:
    rows: list[tuple[str, str, str]] = []
    for event, kind in _EVENT_KINDS:
        for payload in state.consume_events(event):
            output = payload.get("output")
            if not output:
                continue
            path = Path(output)
            rows.append((_format_path(path), kind, _size_details(path)))
    return rows


def present_build_summary(*, state: CLIState, report: BuildReport) -> None:
    """Print the files recorded by the build events and a one-line outcome."""
    console = state.console
    rows = _written_rows(state)
    if rows:
        table = Table(box=box.SQUARE, header_style="bold cyan")
        table.add_column("Output", style="cyan")
        table.add_column("Kind", style="green")
        table.add_column("Filesize", style="magenta", justify="right", no_wrap=True)
        for row in rows:
            table.add_row(*row)
        console.print(table)

    summary = (
        f"{len(report.written)} file(s) written, "
        f"{len(report.errors)} error(s), {len(report.warnings)} warning(s)"
    )
    style = "red" if report.errors else ("yellow" if report.warnings else "green")
    console.print(summary, style=style)


__all__ = ["present_build_summary"]
