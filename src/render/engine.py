"""
Template engine: Jinja2 기반.

역할:
- Settings → jinja2.Environment (FileSystemLoader)
- 렌더 전 템플릿 존재 확인 (search root 밖으로 나가는 경로 거부)
- 렌더 (sync / async environment)
"""

import logging
import os
from collections.abc import Iterator, Mapping
from typing import Any

from jinja2 import (
    BaseLoader,
    ChoiceLoader,
    Environment,
    FileSystemLoader,
    StrictUndefined,
)

from src.core.settings import Settings
from src.domain.constants import ENGINE_OPTION_NAMES, OPT_ENGINE_OPTIONS
from src.domain.errors import ConfigError, ErrorCodes

logger = logging.getLogger(__name__)

# Environment.__init__ 키워드 중 옵션으로 허용하는 것
JINJA_ENV_OPTIONS = frozenset({
    "block_start_string",
    "block_end_string",
    "variable_start_string",
    "variable_end_string",
    "comment_start_string",
    "comment_end_string",
    "line_statement_prefix",
    "line_comment_prefix",
    "trim_blocks",
    "lstrip_blocks",
    "newline_sequence",
    "keep_trailing_newline",
    "extensions",
    "optimized",
    "undefined",
    "finalize",
    "autoescape",
    "cache_size",
    "auto_reload",
    "bytecode_cache",
    "enable_async",
})


# =============================================================================
# Environment
# =============================================================================


def translate_engine_options(options: Mapping[str, Any]) -> dict[str, Any]:
    """
    engine 옵션 → Environment 키워드.

    nunjucks 스타일 이름도 받는다:
    - throwOnUndefined: true → undefined=StrictUndefined
    - noCache: true → cache_size=0
    - trimBlocks / lstripBlocks → trim_blocks / lstrip_blocks

    Raises:
        ConfigError: INVALID_OPTION (알 수 없는 옵션)
    """
    translated: dict[str, Any] = {}
    for key, value in options.items():
        if key == "throwOnUndefined":
            if value:
                translated["undefined"] = StrictUndefined
        elif key == "noCache":
            if value:
                translated["cache_size"] = 0
        elif key in ENGINE_OPTION_NAMES:
            translated[ENGINE_OPTION_NAMES[key]] = value
        elif key in JINJA_ENV_OPTIONS:
            translated[key] = value
        else:
            raise ConfigError(
                ErrorCodes.INVALID_OPTION,
                option=f"{OPT_ENGINE_OPTIONS}.{key}",
                value=value,
            )
    return translated


def build_environment(settings: Settings) -> Environment:
    """
    stage가 공유할 Environment 생성.

    prebuilt_engine이 있으면 그대로 사용 (engine_options, template_directories 무시).
    """
    if settings.prebuilt_engine is not None:
        return settings.prebuilt_engine

    loader = FileSystemLoader(list(settings.template_directories))
    environment = Environment(
        loader=loader,
        **translate_engine_options(settings.engine_options),
    )
    logger.debug(
        f"Built template environment: roots={list(settings.template_directories)}"
    )
    return environment


# =============================================================================
# Existence Check
# =============================================================================


def iter_loaders(loader: BaseLoader | None) -> Iterator[BaseLoader]:
    """ChoiceLoader를 펼쳐 하위 loader를 순회."""
    if loader is None:
        return
    if isinstance(loader, ChoiceLoader):
        for child in loader.loaders:
            yield from iter_loaders(child)
    else:
        yield loader


def search_roots(environment: Environment) -> list[str]:
    """
    environment의 모든 search root (loader 순서, loader별 자기 searchpath).

    searchpath가 없는 loader(DictLoader 등)는 건너뛴다.
    """
    roots: list[str] = []
    for loader in iter_loaders(environment.loader):
        paths = getattr(loader, "searchpath", None)
        if not paths:
            continue
        roots.extend(os.fspath(p) for p in paths)
    return roots


def is_inside_root(root: str, template: str) -> str | None:
    """
    root 기준으로 template 경로를 해석.

    Returns:
        root 안쪽이면 절대 경로, 밖이면 None
    """
    base_path = os.path.abspath(root)
    candidate = os.path.abspath(os.path.join(base_path, template))
    prefix = base_path if base_path.endswith(os.sep) else base_path + os.sep
    if candidate.startswith(prefix):
        return candidate
    return None


def resolve_template(environment: Environment, template: str) -> str | None:
    """
    템플릿 이름을 search root 기준으로 해석.

    렌더 전에 호출 → MISSING(drop)과 렌더 실패(에러)를 구분.
    root 밖으로 해석되는 경로(../secret.html 등)는 파일이 있어도 None.

    Returns:
        root 기준 정규화된 이름 ("partials/../page.html" → "page.html"), 없으면 None.
        loader는 ".." 조각을 거부하므로 렌더에는 이 이름을 넘긴다.
    """
    for root in search_roots(environment):
        candidate = is_inside_root(root, template)
        if candidate is not None and os.path.isfile(candidate):
            relative = os.path.relpath(candidate, os.path.abspath(root))
            return relative.replace(os.sep, "/")
    return None


def template_exists(environment: Environment, template: str) -> bool:
    """템플릿 파일이 search root 중 하나에 있는지 확인."""
    return resolve_template(environment, template) is not None


# =============================================================================
# Render
# =============================================================================


def render(environment: Environment, template: str, context: Mapping[str, Any]) -> str:
    """동기 렌더 (non-async environment)."""
    return environment.get_template(template).render(context)


async def render_async(
    environment: Environment,
    template: str,
    context: Mapping[str, Any],
) -> str:
    """async environment 렌더 (enable_async=True)."""
    compiled = environment.get_template(template)
    return await compiled.render_async(context)
