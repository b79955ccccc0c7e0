"""
Render JSON trees back to text.
"""

import json
from enum import Enum
from typing import Any, Optional


def _default(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def serialize(value: Any, indent: Optional[int] = None) -> str:
    """
    Serialize any JSON tree. Without ``indent`` the output has no whitespace
    at all; with it, each nesting level is indented by that many spaces. Keys
    are written in insertion order.
    """
    if indent is None:
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=_default)
    return json.dumps(value, indent=indent, ensure_ascii=False, default=_default)
