from __future__ import annotations

from datetime import datetime
from pathlib import Path
import subprocess

import pytest

from sitesmith.adapters import tailwind
from sitesmith.core.config import SiteConfig
from sitesmith.core.exceptions import ContentItemError, TailwindError, TemplateStructureError
from sitesmith.core.pipeline import SitePipeline
from sitesmith.core.resolver import trailer


NOW = datetime(2024, 5, 1, 12, 0, 0)

WRAPPER = (
    "<html><head><title>{{markdown-title:}}</title>"
    '<link rel="icon" href="{{favicon-location:}}"></head>'
    "<body>{{markdown-content:}}<footer>{{current-year:}}</footer></body></html>"
)


class _RecordingEmitter:
    def __init__(self) -> None:
        self.warnings: list[str] = []
        self.errors: list[str] = []
        self.events: list[tuple[str, dict]] = []

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        self.warnings.append(message)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        self.errors.append(message)

    def event(self, name: str, payload) -> None:
        self.events.append((name, dict(payload)))


def _write(path: Path, text: str | bytes) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(text, bytes):
        path.write_bytes(text)
    else:
        path.write_text(text, encoding="utf-8")
    return path


def _site(root: Path) -> SiteConfig:
    config = SiteConfig(
        root=root,
        dev_mode=False,
        site_url="https://example.org",
        run_tailwind=False,
    )
    content = config.input_root
    pages = config.input_pages
    _write(content / "markdown.context", WRAPPER)
    _write(content / "favicon.ico", b"\x00icon")
    _write(
        pages / "index.template",
        '<ul>{{summary-enumerate: class="post"}}</ul>'
        '<link href="{{css-location:}}">{{f: footer.txt}}',
    )
    _write(pages / "footer.txt", "<p>foot</p>")
    article = pages / "blog" / "hello"
    _write(article / "post.md", "# Hello\n\nWorld")
    _write(article / "title.content", "Hello World\n")
    _write(article / "published.content", "2024-03-01\n")
    _write(article / "images" / "pic.png", b"png")
    return config


def _run(config: SiteConfig, emitter: _RecordingEmitter | None = None):
    return SitePipeline(config, emitter=emitter, clock=lambda: NOW).run()


def test_full_build_writes_pages_and_articles(tmp_path: Path) -> None:
    config = _site(tmp_path)
    emitter = _RecordingEmitter()

    report = _run(config, emitter)

    assert report.errors == []
    assert report.warnings == []
    assert not report.failed(strict=True)
    index = config.output_pages / "index.html"
    article = config.output_pages / "blog" / "2024-03-01" / "hello.html"
    assert report.written == [index, article]

    index_html = index.read_text(encoding="utf-8")
    assert '<a href="./blog/2024-03-01/hello.html">Hello World</a>' in index_html
    assert '<li class="post group">' in index_html
    assert '<link href="https://example.org/output.css">' in index_html
    assert "<p>foot</p>" in index_html
    assert index.read_bytes().endswith(trailer(NOW))

    article_html = article.read_text(encoding="utf-8")
    assert "<title>Hello World</title>" in article_html
    assert "<h1>Hello</h1>" in article_html
    assert "<p>World</p>" in article_html
    assert "<footer>2024</footer>" in article_html
    assert 'href="https://example.org/favicon.ico"' in article_html

    assert (config.output_pages / "favicon.ico").read_bytes() == b"\x00icon"
    assert (article.parent / "images" / "pic.png").read_bytes() == b"png"
    assert [name for name, _ in emitter.events] == [
        "favicon_copied",
        "page_written",
        "item_written",
    ]


def test_wrapper_context_is_not_mutated_between_articles(tmp_path: Path) -> None:
    config = _site(tmp_path)
    second = config.input_pages / "blog" / "second"
    _write(second / "post.md", "Second body")
    _write(second / "title.content", "Second")
    _write(second / "published.content", "2024-04-01")

    report = _run(config)

    first_html = (config.output_pages / "blog" / "2024-03-01" / "hello.html").read_text(encoding="utf-8")
    second_html = (config.output_pages / "blog" / "2024-04-01" / "second.html").read_text(encoding="utf-8")
    assert report.errors == []
    assert "Second" not in first_html
    assert "<title>Second</title>" in second_html
    assert "Hello World" not in second_html


def test_broken_article_is_reported_and_others_build(tmp_path: Path) -> None:
    config = _site(tmp_path)
    _write(config.input_pages / "blog" / "draft" / "post.md", "draft")
    _write(config.input_pages / "blog" / "draft" / "title.content", "Draft")
    emitter = _RecordingEmitter()

    report = _run(config, emitter)

    assert len(report.errors) == 1
    assert isinstance(report.errors[0], ContentItemError)
    assert report.failed()
    assert emitter.errors == [str(report.errors[0])]
    assert (config.output_pages / "blog" / "2024-03-01" / "hello.html").exists()


def test_tag_failures_become_warnings(tmp_path: Path) -> None:
    config = _site(tmp_path)
    _write(config.input_pages / "about.template", "<p>{{f: nope.txt}}</p>")
    emitter = _RecordingEmitter()

    report = _run(config, emitter)

    assert report.errors == []
    assert len(report.warnings) == 1
    assert not report.failed()
    assert report.failed(strict=True)
    assert (config.output_pages / "about.html").read_bytes().startswith(b"<p></p>")
    assert any("nope.txt" in message for message in emitter.warnings)


def test_missing_favicon_warns_and_favicon_tags_fail(tmp_path: Path) -> None:
    config = _site(tmp_path)
    (config.input_root / "favicon.ico").unlink()
    emitter = _RecordingEmitter()

    report = _run(config, emitter)

    assert any("exactly one favicon" in message for message in emitter.warnings)
    assert len(report.warnings) == 1
    assert not (config.output_pages / "favicon.ico").exists()


def test_two_favicons_are_rejected(tmp_path: Path) -> None:
    config = _site(tmp_path)
    _write(config.input_root / "other.ico", b"ico")
    emitter = _RecordingEmitter()

    _run(config, emitter)

    assert any("found 2" in message for message in emitter.warnings)


def test_unknown_context_file_is_ignored(tmp_path: Path) -> None:
    config = _site(tmp_path)
    _write(config.input_root / "sidebar.context", "x")
    emitter = _RecordingEmitter()

    report = _run(config, emitter)

    assert report.errors == []
    assert any("sidebar.context" in message for message in emitter.warnings)


def test_articles_without_wrapper_fail(tmp_path: Path) -> None:
    config = _site(tmp_path)
    (config.input_root / "markdown.context").unlink()

    report = _run(config)

    assert len(report.errors) == 1
    assert isinstance(report.errors[0], TemplateStructureError)
    assert (config.output_pages / "index.html").exists()


def test_wrapper_without_content_slot_fails(tmp_path: Path) -> None:
    config = _site(tmp_path)
    _write(config.input_root / "markdown.context", "<title>{{markdown-title:}}</title>")

    report = _run(config)

    assert any(isinstance(error, TemplateStructureError) for error in report.errors)
    assert not (config.output_pages / "blog" / "2024-03-01" / "hello.html").exists()


def test_development_build_links_relatively(tmp_path: Path) -> None:
    config = _site(tmp_path).model_copy(update={"dev_mode": True})

    _run(config)

    index_html = (config.output_pages / "index.html").read_text(encoding="utf-8")
    article_html = (config.output_pages / "blog" / "2024-03-01" / "hello.html").read_text(
        encoding="utf-8"
    )
    assert '<link href="./output.css">' in index_html
    assert 'href="../../favicon.ico"' in article_html


def test_tailwind_stage_runs_after_rendering(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config = _site(tmp_path).model_copy(update={"run_tailwind": True})
    _write(config.input_pages / "input.css", "@tailwind base;")
    seen: list[list[str]] = []

    def fake_run(command, **kwargs):
        seen.append(command)
        assert (config.output_pages / "index.html").exists()
        return subprocess.CompletedProcess(command, 0, stdout="", stderr="")

    monkeypatch.setattr(tailwind.subprocess, "run", fake_run)

    report = _run(config)

    assert report.tailwind is not None
    assert len(seen) == 1
    generated = (config.output_root / tailwind.GENERATED_INPUT_NAME).read_text(encoding="utf-8")
    assert ".highlight" in generated


def test_tailwind_failure_propagates(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    config = _site(tmp_path).model_copy(update={"run_tailwind": True})
    _write(config.input_pages / "input.css", "@tailwind base;")

    def fake_run(command, **kwargs):
        return subprocess.CompletedProcess(command, 1, stdout="", stderr="boom")

    monkeypatch.setattr(tailwind.subprocess, "run", fake_run)

    with pytest.raises(TailwindError, match="boom"):
        _run(config)


def test_undecodable_metadata_only_fails_its_article(tmp_path: Path) -> None:
    config = _site(tmp_path)
    cafe = config.input_pages / "blog" / "cafe"
    _write(cafe / "post.md", "Coffee")
    _write(cafe / "title.content", b"Caf\xe9")
    _write(cafe / "published.content", "2024-02-01")

    report = _run(config)

    assert len(report.errors) == 1
    assert isinstance(report.errors[0], ContentItemError)
    index_html = (config.output_pages / "index.html").read_text(encoding="utf-8")
    assert "Hello World" in index_html
    assert (config.output_pages / "blog" / "2024-03-01" / "hello.html").exists()
