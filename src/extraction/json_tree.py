from __future__ import annotations

import json
from enum import Enum
from typing import Any, Iterator, List, Optional, Tuple


class JsonKind(Enum):
    NULL = "null"
    BOOL = "bool"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


def kind_of(value: Any) -> JsonKind:
    if value is None:
        return JsonKind.NULL
    # bool before int: True is an int in Python.
    if isinstance(value, bool):
        return JsonKind.BOOL
    if isinstance(value, (int, float)):
        return JsonKind.NUMBER
    if isinstance(value, str):
        return JsonKind.STRING
    if isinstance(value, list):
        return JsonKind.ARRAY
    if isinstance(value, dict):
        return JsonKind.OBJECT
    raise TypeError(f"Not a decoded JSON value: {type(value).__name__}")


def is_container(value: Any) -> bool:
    return kind_of(value) in (JsonKind.ARRAY, JsonKind.OBJECT)


def _children(value: Any) -> Iterator[Tuple[Optional[str], Any]]:
    if kind_of(value) is JsonKind.OBJECT:
        return iter(value.items())
    return ((None, item) for item in value)


def walk(root: Any) -> Iterator[Tuple[Optional[str], Any]]:
    """Depth-first, pre-order traversal of a decoded JSON tree.

    Yields ``(key, value)`` for every member below ``root``; ``key`` is the
    mapping key, or ``None`` for sequence items. Mappings are visited in
    insertion order and each entry is yielded before its value is descended
    into, so a consumer that stops at the first match sees the same order on
    every run. Uses an explicit stack rather than recursion.
    """
    if not is_container(root):
        return
    stack: List[Iterator[Tuple[Optional[str], Any]]] = [_children(root)]
    while stack:
        try:
            key, child = next(stack[-1])
        except StopIteration:
            stack.pop()
            continue
        yield key, child
        if is_container(child):
            stack.append(_children(child))


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-standard JSON constant: {name}")


def strict_loads(raw: str | bytes) -> Any:
    """``json.loads`` that refuses NaN/Infinity, as RFC 8259 does."""
    return json.loads(raw, parse_constant=_reject_constant)
