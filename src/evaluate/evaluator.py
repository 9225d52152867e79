"""
Data evaluator: item 내용 → Evaluated Data (mapping).

임의 코드 실행(eval/exec)은 하지 않는다. 파일 확장자로 형식을 고른다:
- .json       → json
- .yaml/.yml  → yaml.safe_load
- .py         → data module (최상위 NAME = <literal> 할당만 허용)
- 그 외       → yaml.safe_load (JSON도 대부분 YAML로 읽힘)
"""

import ast
import json
import logging
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any

import yaml

from src.domain.constants import DATA_MODULE_SUFFIXES, JSON_SUFFIXES, YAML_SUFFIXES
from src.domain.errors import EvaluationError

logger = logging.getLogger(__name__)

Parser = Callable[[str, str], Any]


# =============================================================================
# Parsers
# =============================================================================


def parse_json(source: str, label: str) -> Any:
    """JSON 문서 파싱."""
    try:
        return json.loads(source) if source.strip() else None
    except json.JSONDecodeError as e:
        raise EvaluationError(label, e.msg, e.lineno) from e


def parse_yaml(source: str, label: str) -> Any:
    """YAML 문서 파싱 (safe_load)."""
    try:
        return yaml.safe_load(source)
    except yaml.YAMLError as e:
        mark = getattr(e, "problem_mark", None)
        line = mark.line + 1 if mark is not None else None
        problem = getattr(e, "problem", None) or str(e)
        raise EvaluationError(label, problem, line) from e


def _is_docstring(node: ast.stmt) -> bool:
    return (
        isinstance(node, ast.Expr)
        and isinstance(node.value, ast.Constant)
        and isinstance(node.value.value, str)
    )


def _assignment_targets(node: ast.stmt, label: str) -> tuple[list[str], ast.expr]:
    if isinstance(node, ast.Assign):
        names = []
        for target in node.targets:
            if not isinstance(target, ast.Name):
                raise EvaluationError(
                    label, "only simple name assignments are allowed", node.lineno
                )
            names.append(target.id)
        return names, node.value

    if isinstance(node, ast.AnnAssign) and node.value is not None:
        if not isinstance(node.target, ast.Name):
            raise EvaluationError(
                label, "only simple name assignments are allowed", node.lineno
            )
        return [node.target.id], node.value

    raise EvaluationError(
        label,
        f"unsupported statement in data module: {type(node).__name__}",
        getattr(node, "lineno", None),
    )


def parse_data_module(source: str, label: str) -> dict[str, Any]:
    """
    Python data module 파싱.

    허용:
        template = "page.html"
        title: str = "Hi"
        nav = [{"href": "/", "label": "Home"}]

    값은 ast.literal_eval로만 평가. `_`로 시작하는 이름은 결과에서 제외.

    Raises:
        EvaluationError: 문법 오류, literal이 아닌 값, 허용되지 않는 문장
    """
    try:
        tree = ast.parse(source, filename=label)
    except SyntaxError as e:
        raise EvaluationError(label, e.msg, e.lineno) from e

    result: dict[str, Any] = {}
    for node in tree.body:
        if _is_docstring(node):
            continue

        names, value_node = _assignment_targets(node, label)
        try:
            value = ast.literal_eval(value_node)
        except (ValueError, TypeError, SyntaxError) as e:
            raise EvaluationError(
                label, f"value of {', '.join(names)} is not a literal", node.lineno
            ) from e

        for name in names:
            if not name.startswith("_"):
                result[name] = value

    return result


# =============================================================================
# Evaluator
# =============================================================================


class Evaluator:
    """
    확장자 기반 data evaluator.

    Usage:
        evaluator = Evaluator()
        evaluator.register(".toml", parse_toml)
        data = evaluator.evaluate(text, "pages/index.py")
    """

    def __init__(self, default: Parser = parse_yaml) -> None:
        self._parsers: dict[str, Parser] = {}
        self._default = default

        for suffix in JSON_SUFFIXES:
            self.register(suffix, parse_json)
        for suffix in YAML_SUFFIXES:
            self.register(suffix, parse_yaml)
        for suffix in DATA_MODULE_SUFFIXES:
            self.register(suffix, parse_data_module)

    def register(self, suffix: str, parser: Parser) -> None:
        """확장자에 parser 등록 (기존 등록 덮어씀)."""
        self._parsers[suffix.lower()] = parser

    def parser_for(self, label: str) -> Parser:
        return self._parsers.get(Path(label).suffix.lower(), self._default)

    def evaluate(self, source: str, label: str) -> dict[str, Any]:
        """
        source 평가.

        Args:
            source: item 텍스트
            label: 진단용 식별자 (item 경로, 확장자로 형식 선택)

        Returns:
            Evaluated Data (새 dict, 빈 문서는 {})

        Raises:
            EvaluationError: 파싱 실패 또는 매핑이 아닌 결과
        """
        label = str(label)
        value = self.parser_for(label)(source, label)

        if value is None:
            return {}
        if not isinstance(value, Mapping):
            raise EvaluationError(
                label,
                f"document must produce a mapping, got {type(value).__name__}",
            )

        logger.debug(f"Evaluated {label}: {len(value)} keys")
        return dict(value)
