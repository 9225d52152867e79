"""
Render layer: 템플릿 + 데이터 → markup.

역할:
- Jinja2 Environment 구성 (FileSystemLoader)
- 렌더 전 템플릿 존재 확인
"""

from .engine import (
    build_environment,
    render,
    render_async,
    resolve_template,
    search_roots,
    template_exists,
    translate_engine_options,
)

__all__ = [
    "build_environment",
    "render",
    "render_async",
    "resolve_template",
    "search_roots",
    "template_exists",
    "translate_engine_options",
]
