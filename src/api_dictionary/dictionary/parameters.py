"""Mapping of operation parameters to field records.

Parameters are never descended into: an object- or array-typed parameter
still yields exactly one record.
"""

from api_dictionary.dictionary.constraints import render_value, serialize_constraints
from api_dictionary.dictionary.naming import SchemaNameResolver
from api_dictionary.dictionary.shapes import as_schema, declared_type, field_key, is_nullable, text
from api_dictionary.models import FieldRecord, FlattenContext

LOCATIONS = {
    "path": "path_param",
    "query": "query_param",
    "header": "header_param",
    "cookie": "cookie_param",
}


def parameter_schema(param: dict) -> dict:
    """The parameter's schema, or the first `content` media type's schema."""
    if isinstance(param.get("schema"), dict):
        return param["schema"]
    content = param.get("content")
    if isinstance(content, dict):
        for media in content.values():
            if isinstance(media, dict) and isinstance(media.get("schema"), dict):
                return media["schema"]
    return {}


def map_parameter(param: dict, context: FlattenContext, resolver: SchemaNameResolver) -> FieldRecord:
    """Convert one parameter declaration into a single field record."""
    param = as_schema(param)
    name = "" if param.get("name") is None else field_key(param["name"])
    location = text(param.get("in"))
    schema = parameter_schema(param)
    items = as_schema(schema.get("items"))

    return FieldRecord(
        operation_id=context.operation_id,
        method=context.method,
        path=context.path,
        tags=context.tags,
        summary=context.summary,
        location=LOCATIONS.get(location, location),
        schema_name=resolver.resolve(schema),
        field_path=name,
        field_name=name,
        type=declared_type(schema),
        item_type=declared_type(items),
        format=text(schema.get("format")),
        required=param.get("required") is True,
        nullable=is_nullable(schema),
        deprecated=param.get("deprecated") is True,
        read_only=schema.get("readOnly") is True,
        write_only=schema.get("writeOnly") is True,
        description=text(param.get("description")) or text(schema.get("description")),
        constraints=serialize_constraints(schema),
        example=render_value(param.get("example", schema.get("example"))),
        default=render_value(schema.get("default")),
        source_ref=f"parameters.{name}",
    )
