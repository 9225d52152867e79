"""
Evaluate layer: item 내용 → Evaluated Data.

역할:
- 확장자별 data 문서 파싱 (json, yaml, python data module)
- 임의 코드 실행 금지
"""

from .evaluator import (
    Evaluator,
    parse_data_module,
    parse_json,
    parse_yaml,
)

__all__ = [
    "Evaluator",
    "parse_data_module",
    "parse_json",
    "parse_yaml",
]
