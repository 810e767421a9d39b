"""Invocation of the Tailwind CSS build."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import shutil
import subprocess

from sitesmith.core.config import SiteConfig
from sitesmith.core.diagnostics import DiagnosticEmitter, ensure_emitter
from sitesmith.core.exceptions import TailwindError

from .fsutil import write_output


GENERATED_INPUT_NAME = "input-generated.css"
STYLES_START = "/* Generated highlight styles: */"
STYLES_END = "/* End generated highlight styles */"


@dataclass(slots=True)
class TailwindResult:
    command: list[str]
    returncode: int
    stdout: str
    stderr: str


def merge_stylesheets(base_css: str, highlight_css: str) -> str:
    """Append the highlight rules to the hand-written Tailwind input."""
    return f"{base_css}\n\n{STYLES_START}\n{highlight_css}\n{STYLES_END}\n"


def build_tailwind_command(config: SiteConfig, input_path: Path, output_path: Path) -> list[str]:
    executable = shutil.which(config.tailwind_command) or config.tailwind_command
    return [
        executable,
        "--input",
        str(input_path),
        "--output",
        str(output_path),
        "--minify",
    ]


def write_generated_input(config: SiteConfig, highlight_css: str) -> Path:
    """Write ``input.css`` plus highlight rules to the build directory."""
    source = config.input_pages / config.tailwind_input
    try:
        base_css = source.read_text(encoding="utf-8")
    except OSError as exc:
        raise TailwindError(f"Unable to read Tailwind input '{source}': {exc}") from exc
    target = config.output_root / GENERATED_INPUT_NAME
    write_output(target, merge_stylesheets(base_css, highlight_css).encode("utf-8"))
    return target


def run_tailwind(
    config: SiteConfig,
    highlight_css: str,
    *,
    emitter: DiagnosticEmitter | None = None,
) -> TailwindResult:
    """Build the site stylesheet. Raises :class:`TailwindError` on any failure."""
    generated = write_generated_input(config, highlight_css)
    command = build_tailwind_command(
        config, generated, config.output_pages / config.tailwind_output
    )
    ensure_emitter(emitter).event("tailwind_run", {"command": command})
    try:
        process = subprocess.run(
            command,
            check=False,
            capture_output=True,
            text=True,
            cwd=config.root,
        )
    except OSError as exc:
        raise TailwindError(f"Failed to launch '{config.tailwind_command}': {exc}") from exc

    if process.returncode != 0:
        raise TailwindError(
            f"Tailwind exited with status {process.returncode}",
            stdout=process.stdout or "",
            stderr=process.stderr or "",
        )
    return TailwindResult(
        command=command,
        returncode=process.returncode,
        stdout=process.stdout or "",
        stderr=process.stderr or "",
    )


__all__ = [
    "GENERATED_INPUT_NAME",
    "TailwindResult",
    "build_tailwind_command",
    "merge_stylesheets",
    "run_tailwind",
    "write_generated_input",
]
