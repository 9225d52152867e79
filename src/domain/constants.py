"""
Domain Constants: stage 전역 상수.

옵션 이름, 기본값, 별칭 테이블 등.
"""

# =============================================================================
# Plugin
# =============================================================================

PLUGIN_NAME = "mockup-render"

# =============================================================================
# Option Names (canonical)
# =============================================================================

OPT_TEMPLATE_PROPERTY = "templateProperty"
OPT_TEMPLATE_DIRECTORIES = "templateDirectories"
OPT_ENGINE_OPTIONS = "engineOptions"
OPT_PREBUILT_ENGINE = "prebuiltEngine"
OPT_SERIALIZE_RENDER = "serializeRender"

# =============================================================================
# Defaults
# =============================================================================
# templateDirectories 기본값: 현재 작업 디렉토리 (빌드를 실행하는 프로젝트 루트)

DEFAULT_TEMPLATE_PROPERTY = "template"
DEFAULT_TEMPLATE_DIRECTORY = "."
DEFAULT_ENGINE_OPTIONS = {"autoescape": True}

# =============================================================================
# Option Aliases (alias → canonical)
# =============================================================================
# 별칭 값이 있으면 canonical 값을 덮어쓰고, 별칭 키는 버린다.

OPTION_ALIASES = {
    "tplProp": OPT_TEMPLATE_PROPERTY,
    "tplDir": OPT_TEMPLATE_DIRECTORIES,
    "njkOpts": OPT_ENGINE_OPTIONS,
    "njkEnv": OPT_PREBUILT_ENGINE,
    "engineOpts": OPT_ENGINE_OPTIONS,
    "engineEnv": OPT_PREBUILT_ENGINE,
}

# snake_case 키워드 → canonical
KEYWORD_OPTIONS = {
    "template_property": OPT_TEMPLATE_PROPERTY,
    "template_directories": OPT_TEMPLATE_DIRECTORIES,
    "engine_options": OPT_ENGINE_OPTIONS,
    "prebuilt_engine": OPT_PREBUILT_ENGINE,
    "serialize_render": OPT_SERIALIZE_RENDER,
}

# =============================================================================
# Engine Option Names (nunjucks 스타일 → Jinja2)
# =============================================================================

ENGINE_OPTION_NAMES = {
    "trimBlocks": "trim_blocks",
    "lstripBlocks": "lstrip_blocks",
}

# =============================================================================
# Data Document Formats
# =============================================================================

JSON_SUFFIXES = (".json",)
YAML_SUFFIXES = (".yaml", ".yml")
DATA_MODULE_SUFFIXES = (".py",)

# =============================================================================
# Config File
# =============================================================================
# load_settings(): 최상위 매핑 또는 이 키 아래 매핑을 옵션으로 사용

CONFIG_SECTION_KEY = "mockup"
