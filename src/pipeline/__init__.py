"""
Pipeline layer: render stage + reference host.
"""

from .host import RunResult, read_items, run_stage, write_items
from .transform import TemplateRenderTransform, mockup

__all__ = [
    # transform
    "TemplateRenderTransform",
    "mockup",
    # host
    "RunResult",
    "read_items",
    "run_stage",
    "write_items",
]
