"""
test_settings.py - 옵션 정규화 / Settings / YAML 설정 테스트

테스트 케이스:
- 기본값
- 별칭 → canonical (값이 있을 때만 덮어씀)
- snake_case 키워드
- 알 수 없는 키 무시, 호출자 매핑 불변
- 잘못된 타입 → ConfigError
- load_settings: 최상위 / mockup: 섹션, 상대 경로 해석
"""

from pathlib import Path

import pytest
from jinja2 import Environment

from src.core.settings import (
    Settings,
    build_settings,
    load_settings,
    map_option,
    normalize_options,
)
from src.domain.errors import ConfigError, ErrorCodes

# =============================================================================
# Defaults
# =============================================================================


class TestDefaults:
    """기본 설정."""

    def test_empty_options(self):
        settings = build_settings({})

        assert settings.template_property == "template"
        assert settings.template_directories == (".",)
        assert dict(settings.engine_options) == {"autoescape": True}
        assert settings.prebuilt_engine is None
        assert settings.serialize_render is False

    def test_none_options(self):
        assert build_settings(None) == Settings()

    def test_settings_are_frozen(self):
        settings = build_settings({})

        with pytest.raises(AttributeError):
            settings.template_property = "layout"

    def test_engine_options_read_only(self):
        settings = build_settings({"engineOptions": {"trimBlocks": True}})

        with pytest.raises(TypeError):
            settings.engine_options["autoescape"] = False


# =============================================================================
# Aliases
# =============================================================================


class TestAliases:
    """별칭 매핑."""

    def test_all_aliases(self):
        env = Environment()
        normalized = normalize_options({
            "tplProp": "layout",
            "tplDir": "views",
            "njkOpts": {"trimBlocks": True},
            "njkEnv": env,
        })

        assert normalized == {
            "templateProperty": "layout",
            "templateDirectories": "views",
            "engineOptions": {"trimBlocks": True},
            "prebuiltEngine": env,
        }

    def test_engine_aliases(self):
        normalized = normalize_options({"engineOpts": {"a": 1}})

        assert normalized == {"engineOptions": {"a": 1}}

    def test_alias_overrides_canonical(self):
        normalized = normalize_options({"tplDir": "a", "templateDirectories": "b"})

        assert normalized == {"templateDirectories": "a"}

    def test_empty_alias_keeps_canonical(self):
        """별칭 값이 비어 있으면 canonical 유지, 별칭은 제거."""
        normalized = normalize_options({"tplProp": "", "templateProperty": "layout"})

        assert normalized == {"templateProperty": "layout"}

    def test_map_option_in_place(self):
        options = {"tplProp": "layout"}

        map_option(options, "tplProp", "templateProperty")

        assert options == {"templateProperty": "layout"}

    def test_caller_mapping_untouched(self):
        options = {"tplDir": "views", "extra": 1}

        normalize_options(options)

        assert options == {"tplDir": "views", "extra": 1}

    def test_unknown_keys_ignored(self):
        normalized = normalize_options({"templateProperty": "t", "nope": True})

        assert normalized == {"templateProperty": "t"}

    def test_keyword_options(self):
        settings = build_settings(
            template_property="page.layout",
            template_directories=["a", "b"],
            serialize_render=True,
        )

        assert settings.template_property == "page.layout"
        assert settings.template_directories == ("a", "b")
        assert settings.serialize_render is True


# =============================================================================
# Validation
# =============================================================================


class TestValidation:
    """잘못된 옵션."""

    def test_directories_from_path(self, tmp_path: Path):
        settings = build_settings({"templateDirectories": tmp_path})

        assert settings.template_directories == (str(tmp_path),)

    @pytest.mark.parametrize("value", [3, [], ["a", 1], {"a": "b"}])
    def test_invalid_directories(self, value):
        with pytest.raises(ConfigError) as exc_info:
            build_settings({"templateDirectories": value})

        assert exc_info.value.code == ErrorCodes.INVALID_OPTION
        assert exc_info.value.context["option"] == "templateDirectories"

    def test_invalid_property(self):
        with pytest.raises(ConfigError):
            build_settings({"templateProperty": 5})

    def test_invalid_engine_options(self):
        with pytest.raises(ConfigError):
            build_settings({"engineOptions": ["autoescape"]})

    def test_invalid_prebuilt_engine(self):
        with pytest.raises(ConfigError) as exc_info:
            build_settings({"prebuiltEngine": object()})

        assert exc_info.value.to_dict()["option"] == "prebuiltEngine"


# =============================================================================
# Config File
# =============================================================================


class TestLoadSettings:
    """YAML 설정 파일."""

    def test_top_level_mapping(self, tmp_path: Path):
        config = tmp_path / "mockup.yaml"
        config.write_text(
            "tplProp: layout\n"
            "templateDirectories: [views, /abs/templates]\n"
            "engineOptions:\n"
            "  trimBlocks: true\n",
            encoding="utf-8",
        )

        settings = load_settings(config)

        assert settings.template_property == "layout"
        assert settings.template_directories == (
            str(tmp_path / "views"),
            "/abs/templates",
        )
        assert dict(settings.engine_options) == {"trimBlocks": True}

    def test_section(self, tmp_path: Path):
        config = tmp_path / "build.yaml"
        config.write_text(
            "other: 1\nmockup:\n  templateProperty: page\n",
            encoding="utf-8",
        )

        settings = load_settings(config)

        assert settings.template_property == "page"
        assert settings.template_directories == (".",)

    def test_empty_file(self, tmp_path: Path):
        config = tmp_path / "empty.yaml"
        config.write_text("", encoding="utf-8")

        assert load_settings(config) == Settings()

    def test_non_mapping_document(self, tmp_path: Path):
        config = tmp_path / "list.yaml"
        config.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(ConfigError) as exc_info:
            load_settings(config)

        assert exc_info.value.code == ErrorCodes.INVALID_OPTION
