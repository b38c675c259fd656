"""Rendering of schema constraints and literal values into strings."""

import json

CONSTRAINT_KEYS = ("pattern", "minLength", "maxLength", "minimum", "maximum", "minItems", "maxItems")


def render_scalar(value) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    return str(value)


def render_value(value) -> str:
    """Render an example or default value for a table cell ('' when absent)."""
    if value is None:
        return ""
    return render_scalar(value)


def serialize_constraints(schema) -> str:
    """Join the schema's validation constraints as `key=value; ...`.

    >>> serialize_constraints({"pattern": "^[A-Z]+$", "minLength": 1, "enum": ["A", "B"]})
    'pattern=^[A-Z]+$; minLength=1; enum=[A, B]'
    """
    if not isinstance(schema, dict):
        return ""

    parts = []
    if schema.get("pattern"):
        parts.append(f"pattern={schema['pattern']}")
    for key in CONSTRAINT_KEYS[1:]:
        if schema.get(key) is not None:
            parts.append(f"{key}={render_scalar(schema[key])}")
    enum = schema.get("enum")
    if isinstance(enum, list):
        parts.append("enum=[" + ", ".join("" if v is None else render_scalar(v) for v in enum) + "]")
    if "const" in schema:
        parts.append(f"const={render_scalar(schema['const'])}")
    return "; ".join(parts)
