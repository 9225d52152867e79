"""Domain layer: errors, schemas and constants."""

from .errors import ConfigError, ErrorCodes, EvaluationError, PluginError
from .schemas import (
    ContentKind,
    Deferred,
    Item,
    ItemState,
    Materialized,
    StatusCode,
    StatusRecord,
    Streaming,
)

__all__ = [
    # errors
    "ConfigError",
    "ErrorCodes",
    "EvaluationError",
    "PluginError",
    # schemas
    "ContentKind",
    "Deferred",
    "Item",
    "ItemState",
    "Materialized",
    "StatusCode",
    "StatusRecord",
    "Streaming",
]
