"""
Template Render Transform: data 파일 item → 렌더된 markup item.

item 처리 흐름:
1. 내용 로드 (Deferred / Streaming / Materialized)
2. data 평가
3. 보조 데이터(item.data) 병합, 보조 데이터 우선
4. templateProperty 경로로 템플릿 이름 조회
5. 없음 → UNDEFINED drop / 파일 없음 → MISSING drop / 있음 → 렌더 → DONE

로드/평가/렌더 실패는 PluginError 하나로 전달되고, item 내용은 바뀌지 않는다.
"""

import asyncio
import logging
from collections.abc import Callable, Mapping
from typing import Any

from src.core.data import deep_merge, lookup_path
from src.core.logging import StatusCounter, emit_status
from src.core.settings import Settings, build_settings
from src.domain.constants import PLUGIN_NAME
from src.domain.errors import ErrorCodes, PluginError
from src.domain.schemas import Item, ItemState, Materialized, StatusCode
from src.evaluate.evaluator import Evaluator
from src.render.engine import build_environment, render, render_async, resolve_template

logger = logging.getLogger(__name__)

Callback = Callable[[PluginError | None, Item | None], Any]

# 실패한 단계 → 에러 코드
STATE_ERROR_CODES = {
    ItemState.LOADING_CONTENT: ErrorCodes.LOAD_FAILED,
    ItemState.EVALUATING: ErrorCodes.EVALUATION_FAILED,
    ItemState.MERGING: ErrorCodes.EVALUATION_FAILED,
    ItemState.LOOKING_UP_TEMPLATE: ErrorCodes.INVALID_TEMPLATE_REFERENCE,
    ItemState.CHECKING_EXISTENCE: ErrorCodes.INVALID_TEMPLATE_REFERENCE,
    ItemState.RENDERING: ErrorCodes.RENDER_FAILED,
}


class TemplateRenderTransform:
    """
    pipeline stage.

    Settings와 Environment는 생성 시 한 번 만들어 모든 item이 공유한다.
    item 단위 상태는 process() 지역 변수에만 둔다 (동시 처리 가능).

    Usage:
        stage = TemplateRenderTransform({"tplDir": "templates"})
        item = await stage.process(Item(path=Path("pages/index.py")))
    """

    def __init__(
        self,
        options: Mapping[str, Any] | Settings | None = None,
        evaluator: Evaluator | None = None,
        **kwargs: Any,
    ) -> None:
        """
        Args:
            options: 옵션 매핑 (canonical 키 또는 별칭) 또는 Settings
            evaluator: data evaluator (기본: 확장자 기반 Evaluator)
            **kwargs: snake_case 옵션

        Raises:
            ConfigError: INVALID_OPTION
        """
        self.plugin = PLUGIN_NAME
        if isinstance(options, Settings):
            self.settings = options
        else:
            self.settings = build_settings(options, **kwargs)
        self.environment = build_environment(self.settings)
        self.evaluator = evaluator or Evaluator()
        self.counter = StatusCounter()
        self._render_lock = asyncio.Lock() if self.settings.serialize_render else None

    async def process(self, item: Item) -> Item | None:
        """
        item 하나 처리.

        Returns:
            렌더된 item, 또는 drop이면 None

        Raises:
            PluginError: 로드/평가/렌더 실패
        """
        state = ItemState.LOADING_CONTENT
        try:
            text = await item.contents.read_text(item.path)

            state = ItemState.EVALUATING
            data = await asyncio.to_thread(
                self.evaluator.evaluate, text, str(item.path)
            )

            state = ItemState.MERGING
            if item.data:
                deep_merge(data, item.data)

            state = ItemState.LOOKING_UP_TEMPLATE
            template = lookup_path(data, self.settings.template_property)

            if not template:
                self._finish(StatusCode.UNDEFINED, item)
                return None

            if not isinstance(template, str):
                raise TypeError(
                    f"{self.settings.template_property} must be a string, "
                    f"got {type(template).__name__}"
                )

            state = ItemState.CHECKING_EXISTENCE
            resolved = resolve_template(self.environment, template)
            if resolved is None:
                self._finish(StatusCode.MISSING, item)
                return None

            state = ItemState.RENDERING
            markup = await self._render(resolved, data)

        except Exception as e:
            self.counter.record_failure()
            logger.debug(f"{item.relative} failed while {state.value}: {e}")
            raise PluginError(
                e,
                STATE_ERROR_CODES[state],
                plugin=self.plugin,
                path=str(item.path),
                state=state.value,
            )

        item.contents = Materialized(markup.encode("utf-8"))
        self._finish(StatusCode.DONE, item, template)
        return item

    async def handle(self, item: Item, callback: Callback) -> None:
        """
        callback 방식 진입점.

        callback(error, item_or_none)을 item마다 정확히 한 번 호출.
        """
        try:
            result = await self.process(item)
        except PluginError as e:
            callback(e, None)
            return
        callback(None, result)

    async def _render(self, template: str, context: dict[str, Any]) -> str:
        if self._render_lock is None:
            return await self._render_unlocked(template, context)
        async with self._render_lock:
            return await self._render_unlocked(template, context)

    async def _render_unlocked(self, template: str, context: dict[str, Any]) -> str:
        if self.environment.is_async:
            return await render_async(self.environment, template, context)
        return await asyncio.to_thread(render, self.environment, template, context)

    def _finish(
        self,
        status: StatusCode,
        item: Item,
        template: str | None = None,
    ) -> None:
        emit_status(status, item.relative, template)
        self.counter.record(status)


def mockup(
    options: Mapping[str, Any] | Settings | None = None,
    **kwargs: Any,
) -> TemplateRenderTransform:
    """stage 생성 (간편 함수)."""
    return TemplateRenderTransform(options, **kwargs)
