"""
Pytest fixtures for the render stage tests.

구성:
- 템플릿 디렉토리 (page.html, t.html, broken.html, partials/)
- data 파일 디렉토리 (pages/)
- item 생성 헬퍼
"""

import logging
from collections.abc import Callable
from pathlib import Path

import pytest

from src.domain.schemas import Contents, Deferred, Item, Materialized

# =============================================================================
# Path Fixtures
# =============================================================================


@pytest.fixture
def project_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """
    프로젝트 루트 (현재 작업 디렉토리로 설정).

    templateDirectories 기본값(".")이 이 디렉토리를 가리킨다.
    """
    root = tmp_path / "project"
    root.mkdir()
    monkeypatch.chdir(root)
    return root


@pytest.fixture
def templates_dir(project_dir: Path) -> Path:
    """
    템플릿 디렉토리.

    - page.html: title 출력
    - t.html: title + body
    - layout.html / child.html: 상속
    - broken.html: 문법 오류
    """
    root = project_dir / "templates"
    (root / "partials").mkdir(parents=True)

    (root / "page.html").write_text(
        "<h1>{{ title }}</h1>", encoding="utf-8"
    )
    (root / "t.html").write_text(
        "<title>{{ title }}</title><p>{{ body }}</p>", encoding="utf-8"
    )
    (root / "layout.html").write_text(
        "<main>{% block content %}{% endblock %}</main>", encoding="utf-8"
    )
    (root / "child.html").write_text(
        '{% extends "layout.html" %}{% block content %}{{ title }}{% endblock %}',
        encoding="utf-8",
    )
    (root / "partials" / "nav.html").write_text(
        "{% for link in nav %}<a href=\"{{ link.href }}\">{{ link.label }}</a>{% endfor %}",
        encoding="utf-8",
    )
    (root / "broken.html").write_text(
        "{% for x in %}", encoding="utf-8"
    )
    return root


@pytest.fixture
def pages_dir(project_dir: Path) -> Path:
    """data 파일 디렉토리."""
    root = project_dir / "pages"
    root.mkdir()
    return root


# =============================================================================
# Item Fixtures
# =============================================================================


@pytest.fixture
def make_item(pages_dir: Path) -> Callable[..., Item]:
    """
    data 파일을 쓰고 item을 만드는 헬퍼.

    Usage:
        item = make_item("index.py", 'template = "page.html"')
        item = make_item("index.py", source, contents="deferred")
    """

    def _make(
        name: str,
        source: str,
        contents: str | Contents = "materialized",
        data: dict | None = None,
    ) -> Item:
        path = pages_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(source, encoding="utf-8")

        if contents == "materialized":
            contents = Materialized(source.encode("utf-8"))
        elif contents == "deferred":
            contents = Deferred()

        return Item(path=path, contents=contents, base=pages_dir, data=data)

    return _make


@pytest.fixture
def status_log(caplog: pytest.LogCaptureFixture) -> pytest.LogCaptureFixture:
    """상태 로그 캡처 (src.core.logging)."""
    caplog.set_level(logging.INFO, logger="src.core.logging")
    return caplog


@pytest.fixture
def status_lines(status_log: pytest.LogCaptureFixture) -> Callable[[], list[str]]:
    """캡처된 상태 줄 목록을 돌려주는 함수."""

    def _lines() -> list[str]:
        return [
            r.getMessage() for r in status_log.records
            if r.name == "src.core.logging"
        ]

    return _lines
