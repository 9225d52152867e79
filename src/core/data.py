"""
Evaluated Data 유틸리티: 병합, 경로 조회.

- deep_merge: 보조 데이터를 평가 결과에 재귀 병합 (보조 데이터 우선)
- lookup_path: "a.b", "a[0].b", 'a["x.y"]' 형식 경로 조회
"""

import re
from collections.abc import Mapping, MutableMapping, Sequence
from typing import Any

# 경로 토큰: name | [0] | ["key"] | ['key']
_PATH_TOKEN = re.compile(
    r"""
    \[(?P<index>-?\d+)\]
    | \["(?P<dq>[^"]*)"\]
    | \['(?P<sq>[^']*)'\]
    | (?P<name>[^.\[\]]+)
    """,
    re.VERBOSE,
)


def deep_merge(
    target: MutableMapping[str, Any],
    source: Mapping[str, Any],
) -> MutableMapping[str, Any]:
    """
    source를 target에 재귀 병합 (in place).

    - 양쪽 모두 매핑인 키: 재귀 병합
    - 그 외: source 값으로 교체

    Returns:
        target (병합됨)
    """
    for key, value in source.items():
        existing = target.get(key)
        if isinstance(existing, MutableMapping) and isinstance(value, Mapping):
            deep_merge(existing, value)
        elif isinstance(value, Mapping):
            target[key] = deep_merge({}, value)
        else:
            target[key] = value
    return target


def split_path(path: str) -> list[str | int]:
    """
    경로 문자열 → 토큰 목록.

    Example:
        split_path('meta.layouts[1]["page.html"]') == ["meta", "layouts", 1, "page.html"]
    """
    tokens: list[str | int] = []
    for match in _PATH_TOKEN.finditer(path):
        if match.group("index") is not None:
            tokens.append(int(match.group("index")))
        elif match.group("dq") is not None:
            tokens.append(match.group("dq"))
        elif match.group("sq") is not None:
            tokens.append(match.group("sq"))
        else:
            tokens.append(match.group("name"))
    return tokens


def lookup_path(data: Any, path: str) -> Any:
    """
    경로로 값 조회. 없으면 None.

    경로 문자열 전체가 매핑의 키이면 그 값을 우선 사용.
    """
    if isinstance(data, Mapping) and path in data:
        return data[path]

    current = data
    for token in split_path(path):
        if isinstance(current, Mapping):
            key = token if isinstance(token, str) else str(token)
            if key not in current:
                if token in current:
                    key = token
                else:
                    return None
            current = current[key]
        elif isinstance(current, Sequence) and not isinstance(current, (str, bytes)):
            try:
                current = current[int(token)]
            except (ValueError, IndexError):
                return None
        else:
            return None
    return current
