"""
Adapter over ijson that turns JSON text into a JsonMap/JsonList tree.

Events are pushed into a list as ijson produces them, so when the text is
malformed everything read before the bad token is still available and the
caller gets a partial tree together with the positioned error.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Tuple, Union

import ijson

from .errors import Diagnostic, MalformedDocumentError, parse_error
from .values import JsonList, JsonMap


@dataclass
class ParseResult:
    value: Any
    errors: List[Diagnostic] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def parse_document(content: Union[str, bytes]) -> ParseResult:
    """
    Parse ``content`` leniently. Never raises for bad JSON; instead returns
    whatever could be built plus the errors found.
    """
    if isinstance(content, bytes):
        data = content
        text = content.decode("utf-8", errors="replace")
    else:
        text = content
        data = content.encode("utf-8")

    events = ijson.sendable_list()
    coro = ijson.parse_coro(events, use_float=True)
    errors = []
    try:
        coro.send(data)
        coro.close()
    except (ijson.JSONError, ValueError) as e:
        line, column = _locate(text)
        errors.append(parse_error(str(e) or "Malformed JSON", line, column))

    return ParseResult(_build_tree(events), errors)


def loads(content: Union[str, bytes]) -> Any:
    """Strict variant of parse_document: raises MalformedDocumentError on bad input."""
    result = parse_document(content)
    if not result.ok:
        raise MalformedDocumentError(result.errors, partial=result.value)
    return result.value


def _locate(text: str) -> Tuple[int, int]:
    # ijson does not report positions, the stdlib decoder does
    try:
        json.loads(text)
    except json.JSONDecodeError as e:
        return e.lineno, e.colno
    except (ValueError, RecursionError):
        pass
    lines = text.splitlines() or [""]
    return len(lines), len(lines[-1]) + 1


def _build_tree(events: Iterable[Tuple[str, str, Any]]) -> Any:
    root = None
    stack: List[Any] = []
    keys: List[Any] = []

    def attach(value):
        nonlocal root
        if not stack:
            root = value
        elif isinstance(stack[-1], JsonMap):
            stack[-1][keys[-1]] = value
        else:
            stack[-1].append(value)

    for _prefix, event, value in events:
        if event == "map_key":
            keys[-1] = value
        elif event == "start_map":
            container = JsonMap()
            attach(container)
            stack.append(container)
            keys.append(None)
        elif event == "start_array":
            container = JsonList()
            attach(container)
            stack.append(container)
            keys.append(None)
        elif event in ("end_map", "end_array"):
            stack.pop()
            keys.pop()
        else:
            attach(value)

    return root
