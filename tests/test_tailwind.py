from __future__ import annotations

from pathlib import Path
import subprocess

import pytest

from sitesmith.adapters import tailwind
from sitesmith.adapters.tailwind import (
    GENERATED_INPUT_NAME,
    build_tailwind_command,
    merge_stylesheets,
    run_tailwind,
)
from sitesmith.core.config import SiteConfig
from sitesmith.core.exceptions import TailwindError


class _RecordingEmitter:
    def __init__(self) -> None:
        self.events: list[tuple[str, dict]] = []

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        return

    def error(self, message: str, exc: BaseException | None = None) -> None:
        return

    def event(self, name: str, payload) -> None:
        self.events.append((name, dict(payload)))


def _config(root: Path) -> SiteConfig:
    config = SiteConfig(root=root, dev_mode=False, tailwind_command="sitesmith-missing-tailwind")
    config.input_pages.mkdir(parents=True)
    (config.input_pages / "input.css").write_text("@tailwind base;\n", encoding="utf-8")
    return config


def test_merge_stylesheets_wraps_highlight_rules() -> None:
    merged = merge_stylesheets("@tailwind base;", ".highlight { color: red }")

    assert merged.startswith("@tailwind base;")
    assert tailwind.STYLES_START in merged
    assert merged.index(".highlight") < merged.index(tailwind.STYLES_END)


def test_command_targets_build_tree(tmp_path: Path) -> None:
    config = _config(tmp_path)

    command = build_tailwind_command(config, Path("in.css"), Path("out.css"))

    assert command == [
        "sitesmith-missing-tailwind",
        "--input",
        "in.css",
        "--output",
        "out.css",
        "--minify",
    ]


def test_run_tailwind_writes_input_and_invokes_command(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    config = _config(tmp_path)
    emitter = _RecordingEmitter()
    calls: list[tuple[list[str], dict]] = []

    def fake_run(command, **kwargs):
        calls.append((command, kwargs))
        return subprocess.CompletedProcess(command, 0, stdout="Done", stderr="")

    monkeypatch.setattr(tailwind.subprocess, "run", fake_run)

    result = run_tailwind(config, ".highlight { color: red }", emitter=emitter)

    generated = config.output_root / GENERATED_INPUT_NAME
    assert generated.read_text(encoding="utf-8").startswith("@tailwind base;")
    assert ".highlight { color: red }" in generated.read_text(encoding="utf-8")
    command, kwargs = calls[0]
    assert command[2] == str(generated)
    assert command[4] == str(config.output_pages / "output.css")
    assert kwargs["cwd"] == config.root
    assert kwargs["check"] is False
    assert result.returncode == 0
    assert result.stdout == "Done"
    assert emitter.events == [("tailwind_run", {"command": command})]


def test_run_tailwind_failure_carries_output(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    config = _config(tmp_path)

    def fake_run(command, **kwargs):
        return subprocess.CompletedProcess(command, 2, stdout="partial", stderr="syntax error")

    monkeypatch.setattr(tailwind.subprocess, "run", fake_run)

    with pytest.raises(TailwindError) as excinfo:
        run_tailwind(config, "")

    message = str(excinfo.value)
    assert "status 2" in message
    assert "stdout: partial" in message
    assert "stderr: syntax error" in message
    assert excinfo.value.stderr == "syntax error"


def test_run_tailwind_missing_executable(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config = _config(tmp_path)

    def fake_run(command, **kwargs):
        raise FileNotFoundError(command[0])

    monkeypatch.setattr(tailwind.subprocess, "run", fake_run)

    with pytest.raises(TailwindError, match="Failed to launch"):
        run_tailwind(config, "")


def test_run_tailwind_requires_input_css(tmp_path: Path) -> None:
    config = SiteConfig(root=tmp_path, dev_mode=False)

    with pytest.raises(TailwindError, match="input.css"):
        run_tailwind(config, "")
