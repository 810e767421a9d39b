from __future__ import annotations

from pathlib import Path
import subprocess

import pytest
from typer.testing import CliRunner

from sitesmith.adapters import tailwind
from sitesmith.core.config import DEV_ENVIRONMENT_VARIABLE
from sitesmith.core.exceptions import TailwindError
from sitesmith.ui.cli import app
from sitesmith.ui.cli.commands.build import format_build_failure


def _site(root: Path) -> Path:
    pages = root / "content" / "pages"
    pages.mkdir(parents=True)
    (root / "content" / "favicon.ico").write_bytes(b"ico")
    (pages / "index.template").write_text(
        '<a href="{{home-url:}}">{{current-year:}}</a>', encoding="utf-8"
    )
    return root


@pytest.fixture(autouse=True)
def _production_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(DEV_ENVIRONMENT_VARIABLE, raising=False)


def test_build_writes_site(tmp_path: Path) -> None:
    root = _site(tmp_path)
    runner = CliRunner()

    result = runner.invoke(app, [str(root), "--no-tailwind", "--site-url", "https://example.org"])

    assert result.exit_code == 0, result.output
    html = (root / "build" / "pages" / "index.html").read_text(encoding="utf-8")
    assert html.startswith('<a href="https://example.org/">')
    assert "1 file(s) written, 0 error(s), 0 warning(s)" in result.output


def test_build_dev_flag_overrides_environment(tmp_path: Path) -> None:
    root = _site(tmp_path)
    runner = CliRunner()

    result = runner.invoke(app, [str(root), "--no-tailwind", "--dev"])

    assert result.exit_code == 0, result.output
    html = (root / "build" / "pages" / "index.html").read_text(encoding="utf-8")
    assert html.startswith('<a href="#">')


def test_build_reads_config_file(tmp_path: Path) -> None:
    root = _site(tmp_path)
    (root / "sitesmith.yml").write_text(
        "site_url: https://config.example\nrun_tailwind: false\n", encoding="utf-8"
    )
    runner = CliRunner()

    result = runner.invoke(app, [str(root)])

    assert result.exit_code == 0, result.output
    html = (root / "build" / "pages" / "index.html").read_text(encoding="utf-8")
    assert "https://config.example/" in html


def test_tag_warnings_fail_only_in_strict_mode(tmp_path: Path) -> None:
    root = _site(tmp_path)
    (root / "content" / "pages" / "broken.template").write_text("{{f: nope.txt}}", encoding="utf-8")
    runner = CliRunner()

    relaxed = runner.invoke(app, [str(root), "--no-tailwind"])
    strict = runner.invoke(app, [str(root), "--no-tailwind", "--strict"])

    assert relaxed.exit_code == 0, relaxed.output
    assert "1 warning(s)" in relaxed.output
    assert strict.exit_code == 1


def test_content_errors_fail_the_build(tmp_path: Path) -> None:
    root = _site(tmp_path)
    article = root / "content" / "pages" / "blog" / "post"
    article.mkdir(parents=True)
    (article / "post.md").write_text("# Post", encoding="utf-8")
    runner = CliRunner()

    result = runner.invoke(app, [str(root), "--no-tailwind"])

    assert result.exit_code == 1
    assert "1 error(s)" in result.output


def test_invalid_config_exits_with_error(tmp_path: Path) -> None:
    root = _site(tmp_path)
    (root / "sitesmith.yml").write_text("unknown_key: 1\n", encoding="utf-8")
    runner = CliRunner()

    result = runner.invoke(app, [str(root), "--no-tailwind"])

    assert result.exit_code == 1
    assert "Invalid configuration" in result.output


def test_tailwind_failure_exits_with_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    root = _site(tmp_path)
    (root / "content" / "pages" / "input.css").write_text("@tailwind base;", encoding="utf-8")

    def fake_run(command, **kwargs):
        return subprocess.CompletedProcess(command, 1, stdout="", stderr="boom")

    monkeypatch.setattr(tailwind.subprocess, "run", fake_run)
    runner = CliRunner()

    result = runner.invoke(app, [str(root)])

    assert result.exit_code == 1
    assert "Build failed" in result.output


def test_format_build_failure_uses_root_cause() -> None:
    try:
        try:
            raise FileNotFoundError("tailwindcss: not found")
        except FileNotFoundError as exc:
            raise TailwindError("Failed to launch 'tailwindcss'") from exc
    except TailwindError as error:
        message = format_build_failure(error)

    assert message == (
        "Build failed: tailwindcss: not found. Re-run with --debug for technical details."
    )
