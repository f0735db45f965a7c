"""Validation of outgoing documents against the shared JSON schemas."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

from jsonschema import Draft202012Validator
from jsonschema.exceptions import best_match

from ..domain.errors import SchemaValidationError

_SCHEMA_DIR = Path(__file__).resolve().parent.parent / "schemas"

# Cache compiled validators per schema name
_VALIDATORS: dict[str, Draft202012Validator] = {}


def load_schema(name: str) -> Dict[str, Any]:
    path = _SCHEMA_DIR / f"{name}.json"
    if not path.exists():
        raise FileNotFoundError(f"Schema file not found: {path}")
    return json.loads(path.read_text(encoding="utf-8"))


def _get_validator(name: str) -> Draft202012Validator:
    if name not in _VALIDATORS:
        schema = load_schema(name)
        Draft202012Validator.check_schema(schema)
        _VALIDATORS[name] = Draft202012Validator(
            schema, format_checker=Draft202012Validator.FORMAT_CHECKER
        )
    return _VALIDATORS[name]


def validate(schema: str, document: Dict[str, Any]) -> None:
    """Raise ``SchemaValidationError`` if ``document`` does not match ``schema``."""
    error = best_match(_get_validator(schema).iter_errors(document))
    if error is not None:
        raise SchemaValidationError(schema, error.message)


def validate_transfer(document: Dict[str, Any]) -> None:
    validate("Transfer", document)
