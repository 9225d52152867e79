"""
Error definitions for the render stage.

규칙:
- 조용한 실패 금지 → item 단위 치명 에러는 PluginError로 감싸서 전달
- UNDEFINED / MISSING 은 에러가 아님 (drop + 로그)
- 원본 에러는 항상 보존 (PluginError.error, __cause__)
"""

import traceback
from typing import Any

from src.domain.constants import PLUGIN_NAME


# =============================================================================
# Error Codes
# =============================================================================

class ErrorCodes:
    """에러 코드 상수."""

    # === Item ===
    LOAD_FAILED = "LOAD_FAILED"
    EVALUATION_FAILED = "EVALUATION_FAILED"
    INVALID_TEMPLATE_REFERENCE = "INVALID_TEMPLATE_REFERENCE"
    RENDER_FAILED = "RENDER_FAILED"

    # === Config ===
    INVALID_OPTION = "INVALID_OPTION"


# =============================================================================
# Exceptions
# =============================================================================

class ConfigError(Exception):
    """
    stage 구성 옵션이 잘못된 경우.

    Usage:
        raise ConfigError(ErrorCodes.INVALID_OPTION, option="tplDir", value=3)
    """

    def __init__(self, code: str, **context: Any) -> None:
        self.code = code
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        ctx_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
        return f"[{self.code}] {ctx_str}" if ctx_str else f"[{self.code}]"

    def to_dict(self) -> dict[str, Any]:
        """로그/JSON 직렬화용."""
        return {
            "code": self.code,
            **self.context,
        }


class EvaluationError(Exception):
    """
    데이터 문서 평가 실패.

    label은 진단용 식별자 (보통 item 경로), line은 알 수 있을 때만.
    """

    def __init__(self, label: str, message: str, line: int | None = None) -> None:
        self.label = label
        self.message = message
        self.line = line
        where = f"{label}:{line}" if line is not None else label
        super().__init__(f"{where}: {message}")


class PluginError(Exception):
    """
    stage 범위 에러 래퍼.

    item 하나의 처리를 끝내는 유일한 출력. stage 자체는 계속 사용 가능.

    Attributes:
        plugin: 에러를 낸 stage 이름
        error: 원본 예외
        code: ErrorCodes 분류
        show_stack: details()에 stack trace 포함 여부
        show_properties: details()에 원본 예외 속성 포함 여부
    """

    def __init__(
        self,
        error: BaseException,
        code: str,
        plugin: str = PLUGIN_NAME,
        show_stack: bool = True,
        show_properties: bool = True,
        **context: Any,
    ) -> None:
        self.plugin = plugin
        self.error = error
        self.code = code
        self.show_stack = show_stack
        self.show_properties = show_properties
        self.context = context
        super().__init__(f"[{plugin}] [{code}] {error}")
        self.__cause__ = error

    @property
    def properties(self) -> dict[str, Any]:
        """원본 예외의 공개 속성 (args 제외)."""
        return {
            k: v for k, v in vars(self.error).items()
            if not k.startswith("_")
        }

    def details(self) -> str:
        """
        진단 메시지.

        show_properties / show_stack 플래그에 따라 원본 예외의 속성과
        stack trace를 덧붙인다.
        """
        lines = [f"Error in plugin '{self.plugin}'", f"Message: {self.error}"]
        for key, value in self.context.items():
            lines.append(f"{key}: {value}")

        if self.show_properties:
            props = self.properties
            if props:
                lines.append("Details:")
                lines.extend(f"    {k}: {v!r}" for k, v in props.items())

        if self.show_stack:
            stack = "".join(traceback.format_exception(self.error)).rstrip()
            lines.append(stack)

        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        """로그/JSON 직렬화용."""
        return {
            "plugin": self.plugin,
            "code": self.code,
            "error_type": type(self.error).__name__,
            "error": str(self.error),
            **self.context,
        }
