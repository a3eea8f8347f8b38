"""Sparse update payloads.

A payload is a nested dict whose leaves are either ``Set(value)`` or the
``DELETE`` marker. A key that is absent is left as-is (Keep). The host's
wire form is produced only at the storage boundary by
:func:`to_update_data`, where ``DELETE`` becomes the legacy ``-=key`` entry.
"""
from __future__ import annotations
import copy
import math
from dataclasses import dataclass
from typing import Any, Dict

DELETION_PREFIX = "-="

# Lists the store merges item by item on "_id" instead of replacing
EMBEDDED_COLLECTIONS = ("effects",)


@dataclass(frozen=True)
class Set:
    value: Any


class _Delete:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "DELETE"


DELETE = _Delete()

Payload = Dict[str, Any]


def is_empty(payload: Payload) -> bool:
    """True when no leaf anywhere in the payload sets or deletes a field."""
    for node in payload.values():
        if isinstance(node, dict):
            if not is_empty(node):
                return False
        elif isinstance(node, Set) or node is DELETE:
            return False
    return True


def to_update_data(payload: Payload) -> Dict[str, Any]:
    """Render a payload into the host's nested update-data convention."""
    out: Dict[str, Any] = {}
    for key, node in payload.items():
        if node is DELETE:
            out[f"{DELETION_PREFIX}{key}"] = None
        elif isinstance(node, Set):
            out[key] = copy.deepcopy(node.value)
        elif isinstance(node, dict):
            out[key] = to_update_data(node)
        else:
            raise TypeError(f"Unexpected payload node at {key!r}: {node!r}")
    return out


def _same(current: Any, value: Any, partial: bool = False) -> bool:
    # Mappings must hold the same keys. With `partial` (items of an embedded
    # collection) only the keys being written are compared.
    if isinstance(value, dict):
        if not isinstance(current, dict):
            return False
        if not partial and current.keys() != value.keys():
            return False
        return all(k in current and _same(current[k], v) for k, v in value.items())
    if isinstance(value, list):
        if not isinstance(current, list) or len(current) != len(value):
            return False
        return all(_same(c, v, partial) for c, v in zip(current, value))
    if isinstance(value, float) and math.isnan(value):
        return isinstance(current, float) and math.isnan(current)
    # "5" and 5 differ, as do True and 1
    return type(value) is type(current) and value == current


def prune(payload: Payload, document: Dict[str, Any]) -> Payload:
    """Drop every leaf that would not change `document`.

    ``Set`` leaves matching the current value and ``DELETE`` leaves for keys
    that do not exist are removed, as are interior nodes left empty.
    """
    out: Payload = {}
    for key, node in payload.items():
        exists = isinstance(document, dict) and key in document
        current = document.get(key) if exists else None
        if node is DELETE:
            if exists:
                out[key] = node
        elif isinstance(node, Set):
            if not exists or not _same(current, node.value, partial=key in EMBEDDED_COLLECTIONS):
                out[key] = node
        elif isinstance(node, dict):
            sub = prune(node, current if isinstance(current, dict) else {})
            if sub:
                out[key] = sub
    return out

__all__ = ["Set", "DELETE", "DELETION_PREFIX", "EMBEDDED_COLLECTIONS", "Payload", "is_empty", "to_update_data", "prune"]
