"""
Data schemas for the render stage.

- Item: pipeline을 흐르는 파일 단위
- Contents: Deferred / Streaming / Materialized (tagged variant)
- ItemState / StatusCode: item 처리 상태
"""

import asyncio
import os
from collections.abc import AsyncIterable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, ClassVar

# =============================================================================
# Contents Variant
# =============================================================================

class ContentKind(str, Enum):
    """item 내용의 표현 형태."""
    DEFERRED = "deferred"          # 아직 읽지 않음 → item.path에서 읽기
    STREAMING = "streaming"        # chunk 단위로 도착
    MATERIALIZED = "materialized"  # 메모리에 있음


class Contents:
    """item 내용. 형태별로 자신의 텍스트 추출 절차를 가진다."""

    kind: ClassVar[ContentKind]

    async def read_bytes(self, path: Path) -> bytes:
        raise NotImplementedError

    async def read_text(self, path: Path) -> str:
        """UTF-8 텍스트로 읽기."""
        raw = await self.read_bytes(path)
        return raw.decode("utf-8")


@dataclass
class Deferred(Contents):
    """내용 미로딩. 읽기 실패는 그대로 전파."""

    kind: ClassVar[ContentKind] = ContentKind.DEFERRED

    async def read_bytes(self, path: Path) -> bytes:
        return await asyncio.to_thread(Path(path).read_bytes)


@dataclass
class Streaming(Contents):
    """
    chunk 스트림.

    chunks: bytes/str chunk의 async 또는 sync iterable.
    iteration 종료 = end-of-stream, iterable이 던진 예외 = stream error.
    """

    chunks: AsyncIterable[bytes | str] | Iterable[bytes | str]
    kind: ClassVar[ContentKind] = ContentKind.STREAMING

    async def read_bytes(self, path: Path) -> bytes:
        buffer = bytearray()
        if isinstance(self.chunks, AsyncIterable):
            async for chunk in self.chunks:
                buffer += _as_bytes(chunk)
        else:
            for chunk in self.chunks:
                buffer += _as_bytes(chunk)
        return bytes(buffer)


@dataclass
class Materialized(Contents):
    """메모리에 로드된 내용."""

    data: bytes
    kind: ClassVar[ContentKind] = ContentKind.MATERIALIZED

    async def read_bytes(self, path: Path) -> bytes:
        return self.data


def _as_bytes(chunk: bytes | str) -> bytes:
    if isinstance(chunk, str):
        return chunk.encode("utf-8")
    return bytes(chunk)


# =============================================================================
# Item
# =============================================================================

@dataclass
class Item:
    """
    pipeline item (파일 단위).

    Attributes:
        path: 원본 파일 경로
        contents: 내용 (기본: Deferred → path에서 읽음)
        base: relative 계산 기준 디렉토리 (기본: 현재 작업 디렉토리)
        data: 상위 단계가 붙인 보조 데이터 (평가 결과보다 우선)
    """
    path: Path
    contents: Contents = field(default_factory=Deferred)
    base: Path | None = None
    data: dict[str, Any] | None = None

    def __post_init__(self) -> None:
        self.path = Path(self.path)
        self.base = Path(self.base) if self.base is not None else Path.cwd()

    @property
    def relative(self) -> str:
        """base 기준 상대 경로 (로그용)."""
        return os.path.relpath(self.path, self.base)

    @property
    def is_deferred(self) -> bool:
        return self.contents.kind is ContentKind.DEFERRED

    @property
    def is_streaming(self) -> bool:
        return self.contents.kind is ContentKind.STREAMING

    @property
    def is_materialized(self) -> bool:
        return self.contents.kind is ContentKind.MATERIALIZED


# =============================================================================
# Processing State
# =============================================================================

class ItemState(str, Enum):
    """
    item 처리 상태.

    START → LOADING_CONTENT → EVALUATING → MERGING → LOOKING_UP_TEMPLATE
      → UNDEFINED
      → CHECKING_EXISTENCE → MISSING
                           → RENDERING → DONE
    (UNDEFINED/MISSING 외 모든 단계에서 ERROR 가능)
    """
    START = "start"
    LOADING_CONTENT = "loading_content"
    EVALUATING = "evaluating"
    MERGING = "merging"
    LOOKING_UP_TEMPLATE = "looking_up_template"
    CHECKING_EXISTENCE = "checking_existence"
    RENDERING = "rendering"
    UNDEFINED = "undefined"
    MISSING = "missing"
    DONE = "done"
    ERROR = "error"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATES


TERMINAL_STATES = frozenset({
    ItemState.UNDEFINED,
    ItemState.MISSING,
    ItemState.DONE,
    ItemState.ERROR,
})


class StatusCode(str, Enum):
    """item당 한 줄 기록되는 상태 태그."""
    DONE = "DONE"
    MISSING = "MISSING"
    UNDEFINED = "UNDEFINED"


@dataclass(frozen=True)
class StatusRecord:
    """상태 로그 한 줄."""
    status: StatusCode
    relative: str
    template: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "relative": self.relative,
            "template": self.template,
        }
