"""Apply host-style sparse update data to a stored document.

Rules:
- dotted keys expand into nested mappings ("prototypeToken.actorLink")
- ``-=key`` removes ``key`` from the mapping it appears in
- mappings merge recursively; an empty mapping replaces (clears) the target
- lists replace, except embedded collections (``effects``) which merge item
  by item on ``_id``
"""
from __future__ import annotations
import copy
from typing import Any, Dict

from models.update import DELETION_PREFIX, EMBEDDED_COLLECTIONS


def expand(data: Dict[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, dict):
            value = expand(value)
        parts = key.split(".") if not key.startswith(DELETION_PREFIX) else [key]
        node = out
        for part in parts[:-1]:
            node = node.setdefault(part, {})
        last = parts[-1]
        if isinstance(value, dict) and isinstance(node.get(last), dict):
            node[last].update(value)
        else:
            node[last] = value
    return out


def _merge_collection(target: list, changes: list) -> list:
    by_id = {item.get("_id"): item for item in target if isinstance(item, dict)}
    for change in changes:
        existing = by_id.get(change.get("_id")) if isinstance(change, dict) else None
        if existing is None:
            target.append(copy.deepcopy(change))
        else:
            _merge(existing, change)
    return target


def _merge(target: Dict[str, Any], changes: Dict[str, Any]) -> Dict[str, Any]:
    for key, value in changes.items():
        if key.startswith(DELETION_PREFIX):
            target.pop(key[len(DELETION_PREFIX):], None)
            continue
        current = target.get(key)
        if key in EMBEDDED_COLLECTIONS and isinstance(value, list) and isinstance(current, list):
            _merge_collection(current, value)
        elif isinstance(value, dict) and value and isinstance(current, dict):
            _merge(current, value)
        elif isinstance(value, dict):
            target[key] = _merge({}, value)
        else:
            target[key] = copy.deepcopy(value)
    return target


def apply_update(document: Dict[str, Any], update_data: Dict[str, Any]) -> Dict[str, Any]:
    """Return a merged copy; `document` is left untouched."""
    return _merge(copy.deepcopy(document), expand(update_data))

__all__ = ["apply_update", "expand", "EMBEDDED_COLLECTIONS"]
