"""
Reference host: 파일 시스템 → stage → 파일 시스템.

stage를 외부 runner 없이 쓰기 위한 최소 구성:
- read_items(): glob으로 item 생성 (buffer / stream / defer)
- run_stage(): item마다 stage.handle() 호출, 순서대로 결과 수집
- write_items(): 렌더 결과를 out_dir/relative 에 원자적으로 쓰기
"""

import asyncio
import logging
import os
import tempfile
from collections.abc import AsyncIterable, AsyncIterator, Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

from src.domain.errors import ConfigError, ErrorCodes, PluginError
from src.domain.schemas import Deferred, Item, Materialized, Streaming
from src.pipeline.transform import TemplateRenderTransform

logger = logging.getLogger(__name__)

READ_MODES = ("buffer", "stream", "defer")
CHUNK_SIZE = 64 * 1024


# =============================================================================
# Source
# =============================================================================


async def read_chunks(path: Path, chunk_size: int = CHUNK_SIZE) -> AsyncIterator[bytes]:
    """파일을 chunk 단위로 읽는 async iterator."""
    with open(path, "rb") as f:
        while True:
            chunk = await asyncio.to_thread(f.read, chunk_size)
            if not chunk:
                break
            yield chunk


def read_items(
    root: Path,
    pattern: str = "**/*",
    mode: str = "buffer",
    base: Path | None = None,
) -> Iterator[Item]:
    """
    root 아래 pattern에 맞는 파일을 item으로.

    Args:
        root: 검색 디렉토리
        pattern: glob 패턴
        mode: "buffer" (즉시 읽기), "stream" (chunk 스트림), "defer" (stage가 읽음)
        base: relative 기준 (기본: root)

    Raises:
        ConfigError: INVALID_OPTION (알 수 없는 mode)
    """
    if mode not in READ_MODES:
        raise ConfigError(ErrorCodes.INVALID_OPTION, option="mode", value=mode)

    root = Path(root)
    base = Path(base) if base is not None else root

    for path in sorted(root.glob(pattern)):
        if not path.is_file():
            continue
        if mode == "buffer":
            contents = Materialized(path.read_bytes())
        elif mode == "stream":
            contents = Streaming(read_chunks(path))
        else:
            contents = Deferred()
        yield Item(path=path, contents=contents, base=base)


# =============================================================================
# Run
# =============================================================================


@dataclass
class RunResult:
    """run_stage() 결과."""
    items: list[Item] = field(default_factory=list)
    errors: list[PluginError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


async def run_stage(
    stage: TemplateRenderTransform,
    items: Iterable[Item] | AsyncIterable[Item],
    stop_on_error: bool = True,
) -> RunResult:
    """
    item을 순서대로 stage에 통과시킨다.

    Args:
        stage: render stage
        items: 입력 item (sync/async iterable)
        stop_on_error: True면 첫 PluginError를 그대로 raise

    Returns:
        RunResult (emit된 item, 수집된 에러)
    """
    result = RunResult()

    def done(error: PluginError | None, item: Item | None) -> None:
        if error is not None:
            result.errors.append(error)
        elif item is not None:
            result.items.append(item)

    async def each(item: Item) -> None:
        await stage.handle(item, done)
        if stop_on_error and result.errors:
            raise result.errors[0]

    if isinstance(items, AsyncIterable):
        async for item in items:
            await each(item)
    else:
        for item in items:
            await each(item)

    summary = stage.counter.to_dict()
    logger.info(
        f"Processed {stage.counter.total} items: "
        + ", ".join(f"{k}={v}" for k, v in summary.items())
    )
    return result


# =============================================================================
# Destination
# =============================================================================


def _write_bytes(path: Path, data: bytes) -> None:
    """temp → replace. 실패 시 temp 삭제, 기존 파일 보존."""
    path.parent.mkdir(parents=True, exist_ok=True)

    temp_path = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="wb", dir=path.parent, suffix=".tmp", delete=False
        ) as f:
            temp_path = Path(f.name)
            f.write(data)
        os.replace(temp_path, path)
    except Exception:
        if temp_path is not None:
            temp_path.unlink(missing_ok=True)
        raise


def write_items(
    items: Iterable[Item],
    out_dir: Path,
    extension: str | None = None,
) -> list[Path]:
    """
    렌더된 item을 out_dir/relative 에 쓴다.

    Args:
        items: Materialized 내용을 가진 item
        out_dir: 출력 디렉토리
        extension: 출력 확장자 교체 (예: ".html")

    Returns:
        쓴 파일 경로 목록
    """
    out_dir = Path(out_dir)
    written: list[Path] = []

    for item in items:
        if not isinstance(item.contents, Materialized):
            logger.warning(f"Skipping {item.relative}: contents not materialized")
            continue

        target = out_dir / item.relative
        if extension is not None:
            target = target.with_suffix(extension)

        _write_bytes(target, item.contents.data)
        written.append(target)

    return written
