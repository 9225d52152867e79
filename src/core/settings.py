"""
Stage 설정: 옵션 정규화 + YAML 설정 파일.

규칙:
- 별칭(tplProp 등)은 값이 있을 때만 canonical 값을 덮어쓰고 버린다
- 알 수 없는 키는 무시 (debug 로그)
- 호출자의 매핑은 수정하지 않는다
- Settings는 생성 후 불변
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from os import PathLike
from pathlib import Path
from types import MappingProxyType
from typing import Any

import yaml
from jinja2 import Environment

from src.domain.constants import (
    CONFIG_SECTION_KEY,
    DEFAULT_ENGINE_OPTIONS,
    DEFAULT_TEMPLATE_DIRECTORY,
    DEFAULT_TEMPLATE_PROPERTY,
    KEYWORD_OPTIONS,
    OPT_ENGINE_OPTIONS,
    OPT_PREBUILT_ENGINE,
    OPT_SERIALIZE_RENDER,
    OPT_TEMPLATE_DIRECTORIES,
    OPT_TEMPLATE_PROPERTY,
    OPTION_ALIASES,
)
from src.domain.errors import ConfigError, ErrorCodes

logger = logging.getLogger(__name__)

CANONICAL_OPTIONS = frozenset({
    OPT_TEMPLATE_PROPERTY,
    OPT_TEMPLATE_DIRECTORIES,
    OPT_ENGINE_OPTIONS,
    OPT_PREBUILT_ENGINE,
    OPT_SERIALIZE_RENDER,
})


@dataclass(frozen=True)
class Settings:
    """stage 인스턴스 하나의 설정 (생성 후 불변)."""
    template_property: str = DEFAULT_TEMPLATE_PROPERTY
    template_directories: tuple[str, ...] = (DEFAULT_TEMPLATE_DIRECTORY,)
    engine_options: Mapping[str, Any] = field(
        default_factory=lambda: MappingProxyType(dict(DEFAULT_ENGINE_OPTIONS))
    )
    prebuilt_engine: Environment | None = None
    serialize_render: bool = False


# =============================================================================
# Option Normalization
# =============================================================================


def map_option(options: dict[str, Any], alias: str, canonical: str) -> None:
    """
    별칭 키를 canonical 키로 옮긴다 (in place).

    별칭 값이 truthy일 때만 덮어쓰고, 별칭 키는 항상 제거.
    """
    value = options.pop(alias, None)
    if value:
        options[canonical] = value


def normalize_options(
    options: Mapping[str, Any] | None = None,
    **kwargs: Any,
) -> dict[str, Any]:
    """
    옵션 매핑 정규화.

    Args:
        options: camelCase/별칭 키 매핑 (예: {"tplDir": "views"})
        **kwargs: snake_case 키워드 (예: template_directories="views")

    Returns:
        canonical 키만 남은 새 dict
    """
    merged: dict[str, Any] = dict(options or {})
    for keyword, value in kwargs.items():
        merged[KEYWORD_OPTIONS.get(keyword, keyword)] = value

    for alias, canonical in OPTION_ALIASES.items():
        map_option(merged, alias, canonical)

    unknown = set(merged) - CANONICAL_OPTIONS
    for key in sorted(unknown):
        logger.debug(f"Ignoring unknown option: {key}")
        del merged[key]

    return merged


def _as_directories(value: Any) -> tuple[str, ...]:
    if isinstance(value, (str, PathLike)):
        return (str(value),)
    if isinstance(value, (list, tuple)) and value:
        if all(isinstance(v, (str, PathLike)) for v in value):
            return tuple(str(v) for v in value)
    raise ConfigError(
        ErrorCodes.INVALID_OPTION,
        option=OPT_TEMPLATE_DIRECTORIES,
        value=value,
    )


def build_settings(
    options: Mapping[str, Any] | None = None,
    **kwargs: Any,
) -> Settings:
    """
    옵션 → Settings.

    Raises:
        ConfigError: INVALID_OPTION (타입 불일치)
    """
    normalized = normalize_options(options, **kwargs)
    values: dict[str, Any] = {}

    if OPT_TEMPLATE_PROPERTY in normalized:
        prop = normalized[OPT_TEMPLATE_PROPERTY]
        if not isinstance(prop, str) or not prop:
            raise ConfigError(
                ErrorCodes.INVALID_OPTION,
                option=OPT_TEMPLATE_PROPERTY,
                value=prop,
            )
        values["template_property"] = prop

    if OPT_TEMPLATE_DIRECTORIES in normalized:
        values["template_directories"] = _as_directories(
            normalized[OPT_TEMPLATE_DIRECTORIES]
        )

    if OPT_ENGINE_OPTIONS in normalized:
        engine_options = normalized[OPT_ENGINE_OPTIONS]
        if not isinstance(engine_options, Mapping):
            raise ConfigError(
                ErrorCodes.INVALID_OPTION,
                option=OPT_ENGINE_OPTIONS,
                value=engine_options,
            )
        values["engine_options"] = MappingProxyType(dict(engine_options))

    if normalized.get(OPT_PREBUILT_ENGINE) is not None:
        engine = normalized[OPT_PREBUILT_ENGINE]
        if not isinstance(engine, Environment):
            raise ConfigError(
                ErrorCodes.INVALID_OPTION,
                option=OPT_PREBUILT_ENGINE,
                value=type(engine).__name__,
            )
        values["prebuilt_engine"] = engine

    if OPT_SERIALIZE_RENDER in normalized:
        values["serialize_render"] = bool(normalized[OPT_SERIALIZE_RENDER])

    return Settings(**values)


# =============================================================================
# Config File
# =============================================================================


def load_settings(config_path: Path) -> Settings:
    """
    YAML 설정 파일 로드.

    최상위 매핑 또는 `mockup:` 섹션을 옵션으로 사용.
    상대 경로 templateDirectories는 설정 파일 위치 기준으로 해석.

    Args:
        config_path: YAML 파일 경로

    Returns:
        Settings

    Raises:
        ConfigError: INVALID_OPTION (매핑이 아닌 문서)
    """
    config_path = Path(config_path)
    with open(config_path, encoding="utf-8") as f:
        document = yaml.safe_load(f) or {}

    if isinstance(document, Mapping) and CONFIG_SECTION_KEY in document:
        document = document[CONFIG_SECTION_KEY] or {}

    if not isinstance(document, Mapping):
        raise ConfigError(
            ErrorCodes.INVALID_OPTION,
            path=str(config_path),
            reason="config document must be a mapping",
        )

    options = normalize_options(document)
    if OPT_TEMPLATE_DIRECTORIES in options:
        options[OPT_TEMPLATE_DIRECTORIES] = [
            str(config_path.parent / d)
            for d in _as_directories(options[OPT_TEMPLATE_DIRECTORIES])
        ]

    return build_settings(options)
