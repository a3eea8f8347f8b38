"""JSON Schemas for world records.

The loose schemas gate what the store will load at all. The typed schemas
are what an update with ``enforce_types=True`` must satisfy afterwards;
the migration itself writes with type enforcement off.
"""
from __future__ import annotations
from typing import Any, Dict, List

from jsonschema import Draft7Validator

from modules.data_constants import EFFECT_MODES

_CHANGE = {
    "type": "object",
    "required": ["key"],
    "properties": {"key": {"type": "string"}},
}

_EFFECT = {
    "type": "object",
    "required": ["_id"],
    "properties": {
        "_id": {"type": "string"},
        "changes": {"type": "array", "items": _CHANGE},
    },
}

ACTOR_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "required": ["_id", "type"],
    "properties": {
        "_id": {"type": "string"},
        "name": {"type": "string"},
        "type": {"type": "string"},
        "system": {
            "type": "object",
            "properties": {
                "attributes": {
                    "type": "object",
                    "additionalProperties": {
                        "type": "object",
                        "properties": {"skills": {"type": "object"}},
                    },
                },
            },
        },
        "effects": {"type": "array", "items": _EFFECT},
        "prototypeToken": {"type": "object"},
    },
}

SCENE_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "required": ["_id"],
    "properties": {
        "_id": {"type": "string"},
        "name": {"type": "string"},
        "tokens": {"type": "array", "items": {"type": "object"}},
    },
}

TYPED_ACTOR_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "allOf": [ACTOR_SCHEMA],
    "properties": {
        "system": {
            "properties": {
                "healing-clock": {"type": "integer"},
                "attributes": {
                    "additionalProperties": {
                        "properties": {
                            "label": {"type": ["string", "null"]},
                            "skills": {
                                "additionalProperties": {
                                    "type": "object",
                                    "properties": {"value": {"type": "integer"}},
                                },
                            },
                        },
                    },
                },
            },
        },
        "effects": {
            "items": {
                "properties": {
                    "changes": {
                        "items": {"properties": {"mode": {"enum": sorted(EFFECT_MODES)}}},
                    },
                },
            },
        },
        "prototypeToken": {"properties": {"actorLink": {"type": "boolean"}}},
    },
}

TYPED_SCENE_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "allOf": [SCENE_SCHEMA],
    "properties": {
        "tokens": {
            "items": {
                "properties": {
                    "actorLink": {"type": "boolean"},
                    "actorData": {"type": "object"},
                },
            },
        },
    },
}


def validate(schema: Dict[str, Any], data: Any) -> List[str]:
    """Return 'path: message' strings, empty when `data` is valid."""
    v = Draft7Validator(schema)
    errors = sorted(v.iter_errors(data), key=lambda e: [str(p) for p in e.path])
    out = []
    for err in errors:
        loc = "/".join(str(p) for p in err.path) or "<root>"
        out.append(f"{loc}: {err.message}")
    return out

__all__ = ["ACTOR_SCHEMA", "SCENE_SCHEMA", "TYPED_ACTOR_SCHEMA", "TYPED_SCENE_SCHEMA", "validate"]
