"""
Core layer: stage 설정, 데이터 유틸, 상태 로그.
"""

from .data import deep_merge, lookup_path, split_path
from .logging import StatusCounter, emit_status, format_status
from .settings import Settings, build_settings, load_settings, normalize_options

__all__ = [
    # data
    "deep_merge",
    "lookup_path",
    "split_path",
    # logging
    "StatusCounter",
    "emit_status",
    "format_status",
    # settings
    "Settings",
    "build_settings",
    "load_settings",
    "normalize_options",
]
