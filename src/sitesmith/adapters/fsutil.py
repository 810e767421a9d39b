"""Filesystem helpers: discovery, copying and output writing."""

from __future__ import annotations

from pathlib import Path
import shutil

from sitesmith.core.exceptions import OutputWriteError


def glob_files(root: Path, pattern: str) -> list[Path]:
    """Return files below ``root`` whose name matches ``pattern``, in sorted order."""
    if not root.is_dir():
        return []
    return sorted(path for path in root.rglob(pattern) if path.is_file())


def write_output(target: Path, data: bytes) -> None:
    """Write ``data`` to ``target``, creating parent directories as needed."""
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)
    except OSError as exc:
        raise OutputWriteError(f"Failed to write output '{target}': {exc}") from exc


def copy_file(source: Path, destination: Path) -> Path:
    """Copy one file, creating the destination directory."""
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, destination)
    except OSError as exc:
        raise OutputWriteError(f"Failed to copy '{source}' to '{destination}': {exc}") from exc
    return destination


def copy_tree(source: Path, destination: Path) -> Path:
    """Recursively copy ``source`` into ``destination``, merging with existing files."""
    try:
        shutil.copytree(source, destination, dirs_exist_ok=True)
    except (OSError, shutil.Error) as exc:
        raise OutputWriteError(f"Failed to copy '{source}' to '{destination}': {exc}") from exc
    return destination


__all__ = ["copy_file", "copy_tree", "glob_files", "write_output"]
