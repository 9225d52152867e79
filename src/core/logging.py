"""
Status logging: item당 한 줄 (DONE / MISSING / UNDEFINED).

규칙:
- 처리가 분류된 item마다 정확히 한 줄
- DONE 줄에는 사용한 템플릿 이름 포함
- 치명 에러는 여기서 기록하지 않음 (PluginError로 전달)
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Any

from src.domain.schemas import StatusCode, StatusRecord

logger = logging.getLogger(__name__)

STATUS_LEVELS = {
    StatusCode.DONE: logging.INFO,
    StatusCode.MISSING: logging.WARNING,
    StatusCode.UNDEFINED: logging.WARNING,
}


def format_status(record: StatusRecord) -> str:
    """
    상태 줄 포맷.

    Example:
        "[DONE] pages/index.py (page.html)"
        "[MISSING] pages/about.py"
    """
    line = f"[{record.status.value}] {record.relative}"
    if record.template is not None:
        line += f" ({record.template})"
    return line


def emit_status(
    status: StatusCode,
    relative: str,
    template: str | None = None,
) -> StatusRecord:
    """
    상태 줄 기록.

    Args:
        status: 상태 태그
        relative: item 상대 경로
        template: 템플릿 이름 (DONE일 때)

    Returns:
        기록된 StatusRecord
    """
    record = StatusRecord(status=status, relative=relative, template=template)
    logger.log(
        STATUS_LEVELS[status],
        format_status(record),
        extra={"status": status.value, "relative": relative, "template": template},
    )
    return record


@dataclass
class StatusCounter:
    """
    stage 단위 상태 집계.

    여러 item이 동시에 처리될 수 있으므로 lock으로 보호.
    """
    done: int = 0
    missing: int = 0
    undefined: int = 0
    failed: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def record(self, status: StatusCode) -> None:
        with self._lock:
            if status is StatusCode.DONE:
                self.done += 1
            elif status is StatusCode.MISSING:
                self.missing += 1
            else:
                self.undefined += 1

    def record_failure(self) -> None:
        with self._lock:
            self.failed += 1

    @property
    def total(self) -> int:
        return self.done + self.missing + self.undefined + self.failed

    def to_dict(self) -> dict[str, Any]:
        """요약 리포트용."""
        with self._lock:
            return {
                "done": self.done,
                "missing": self.missing,
                "undefined": self.undefined,
                "failed": self.failed,
            }
