from __future__ import annotations
from typing import Any, Dict

# JSON Schema (draft 7) for aliax.yaml after YAML parsing.

_STRINGS = {"type": "array", "items": {"type": "string"}}

SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "aliax workspace",
    "type": ["object", "null"],
    "definitions": {
        "flag": {
            "type": "object",
            "required": ["name"],
            "properties": {
                "name": {"type": "string", "pattern": r"^[A-Za-z0-9_][A-Za-z0-9_\-]*$"},
                "alias": {"oneOf": [{"type": "string"}, _STRINGS]},
                "type": {"enum": ["string", "bool"]},
                "usage": {"type": "string"},
            },
            "additionalProperties": False,
        },
        "case": {
            "type": "object",
            "properties": {
                "pattern": {"oneOf": [{"type": "null"}, {"type": "string"}, _STRINGS]},
                "platform": {"enum": ["bash", "powershell", "", None]},
                "run": {"type": ["string", "null"]},
            },
            "additionalProperties": False,
        },
        "command": {
            "type": ["object", "null"],
            "properties": {
                "short": {"type": "string"},
                "long": {"type": "string"},
                "example": {"type": "string"},
                "disableHelp": {"type": "boolean"},
                "bin": {"type": "string"},
                "flags": {"type": ["array", "null"], "items": {"$ref": "#/definitions/flag"}},
                "match": {"type": ["array", "null"], "items": {"$ref": "#/definitions/case"}},
                "command": {"$ref": "#/definitions/commands"},
            },
            "additionalProperties": False,
        },
        "commands": {
            "type": ["object", "null"],
            "propertyNames": {"pattern": r"^[A-Za-z0-9][A-Za-z0-9_\-.]*$"},
            "additionalProperties": {"$ref": "#/definitions/command"},
        },
    },
    "properties": {
        "variable": {"type": ["object", "null"], "additionalProperties": {"type": "string"}},
        "extend": {"$ref": "#/definitions/commands"},
        "command": {"$ref": "#/definitions/commands"},
        "script": {
            "type": ["object", "null"],
            "additionalProperties": {"oneOf": [{"type": "string"}, {"$ref": "#/definitions/command"}]},
        },
        "runPath": {"type": "string", "minLength": 1},
        "executable": {"type": "string", "pattern": r"^[A-Za-z_][A-Za-z0-9_]*$"},
    },
    "additionalProperties": False,
}
