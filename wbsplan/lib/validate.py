"""
Schema validation for project and log records.

Records arriving from the persistence layer or the time-entry subsystem are
checked against the JSON Schemas in ``wbsplan/schemas`` before any model is
built from them. Paths in errors use the record's own shape, e.g.
``tasks[2].startDate`` or ``[5].hours`` for the sixth log in a batch.
"""

import json
from functools import lru_cache
from pathlib import Path

import jsonschema
from jsonschema.exceptions import best_match

SCHEMAS_DIR = Path(__file__).parent.parent / "schemas"


class ValidationError(Exception):
    """A record does not match its schema."""

    def __init__(self, schema_name: str, message: str, path: str | None = None):
        self.schema_name = schema_name
        self.message = message
        self.path = path
        where = f" (at {path})" if path else ""
        super().__init__(f"Invalid {schema_name} record{where}: {message}")


def format_path(parts) -> str | None:
    """Render a jsonschema path deque as ``a.b[0].c``; None for the record root."""
    text = ""
    for part in parts:
        if isinstance(part, int):
            text += f"[{part}]"
        else:
            text += f".{part}" if text else str(part)
    return text or None


@lru_cache(maxsize=None)
def schema_validator(schema_name: str):
    """Checked validator for a bundled schema, built once per name."""
    schema_path = SCHEMAS_DIR / f"{schema_name}.schema.json"
    if not schema_path.exists():
        raise ValidationError(schema_name, f"Schema file not found: {schema_path}")
    schema = json.loads(schema_path.read_text(encoding="utf-8"))
    validator_cls = jsonschema.validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def _first_error(data, schema_name: str):
    return best_match(schema_validator(schema_name).iter_errors(data))


def validate(data, schema_name: str) -> None:
    """
    Validate one record against a named schema.

    Raises:
        ValidationError: with the most relevant failure when the record is
            invalid, or when the schema itself is missing
    """
    error = _first_error(data, schema_name)
    if error is not None:
        raise ValidationError(schema_name, error.message, format_path(error.absolute_path))


def validate_many(items: list, schema_name: str) -> None:
    """Validate each record of a batch; the path names the failing index."""
    if not isinstance(items, list):
        raise ValidationError(schema_name, "Expected a list of records")
    for index, item in enumerate(items):
        error = _first_error(item, schema_name)
        if error is not None:
            path = format_path([index, *error.absolute_path])
            raise ValidationError(schema_name, error.message, path)
