"""Predicates over schema nodes that tolerate partial or malformed input."""

COMPOSITION_KEYS = ("allOf", "oneOf", "anyOf")


def as_schema(node) -> dict:
    return node if isinstance(node, dict) else {}


def text(value) -> str:
    return value if isinstance(value, str) else ""


def declared_type(schema: dict) -> str:
    """The declared type; for OAS 3.1 type lists, the first non-null entry."""
    schema_type = schema.get("type")
    if isinstance(schema_type, list):
        schema_type = next((t for t in schema_type if t != "null"), "")
    return text(schema_type)


def is_nullable(schema: dict) -> bool:
    schema_type = schema.get("type")
    return schema.get("nullable") is True or (isinstance(schema_type, list) and "null" in schema_type)


def has_composition(schema: dict) -> bool:
    return any(isinstance(schema.get(key), list) and schema[key] for key in COMPOSITION_KEYS)


def is_structured(schema: dict) -> bool:
    """Object-shaped or composed: flattened into its own fields."""
    return declared_type(schema) == "object" or isinstance(schema.get("properties"), dict) or has_composition(schema)


def is_array(schema: dict) -> bool:
    return declared_type(schema) == "array" and isinstance(schema.get("items"), dict)


def field_key(name) -> str:
    """A property or parameter name as text.

    YAML 1.1 loads keys such as `on`, `yes` or `404` as booleans and ints;
    booleans come back lowercase.
    """
    if isinstance(name, bool):
        return "true" if name else "false"
    if name is None:
        return "null"
    return str(name)


def required_names(schema) -> frozenset[str]:
    required = as_schema(schema).get("required")
    if not isinstance(required, list):
        return frozenset()
    return frozenset(field_key(name) for name in required if not isinstance(name, (dict, list)))
