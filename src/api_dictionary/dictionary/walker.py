"""Operation walker: turns a dereferenced OpenAPI document into a data dictionary.

Every path x method combination produces its parameter records, its
request/response body records, and one endpoint summary row. Component
schemas produce one schema summary row each.
"""

import re
from datetime import datetime, timezone

from api_dictionary.dictionary.flatten import SchemaFlattener
from api_dictionary.dictionary.naming import SchemaNameResolver
from api_dictionary.dictionary.ordering import sort_endpoints, sort_records, sort_schemas
from api_dictionary.dictionary.parameters import map_parameter
from api_dictionary.dictionary.shapes import as_schema, declared_type, field_key, required_names, text
from api_dictionary.models import (
    ApiInfo,
    DataDictionary,
    EndpointSummary,
    FieldRecord,
    FlattenContext,
    SchemaSummary,
)

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")

COMPONENT_SCHEMA_PREFIX = "#/components/schemas/"


def operation_id_for(method: str, path: str) -> str:
    """Slug used when an operation declares no operationId."""
    return re.sub(r"[^a-zA-Z0-9]+", "_", f"{method}_{path}")


def _media_types(body) -> dict:
    content = as_schema(body).get("content")
    return content if isinstance(content, dict) else {}


def _parameters(node) -> list:
    params = as_schema(node).get("parameters")
    return params if isinstance(params, list) else []


def build_dictionary(document: dict, references: dict[int, str] | None = None, source: str = "") -> DataDictionary:
    """Build the sorted field records, endpoint rows and schema rows of a document.

    `references` maps `id(schema)` to the `$ref` pointer it was resolved
    from; it lets schemas keep their component names.
    """
    resolver = SchemaNameResolver(references)
    component_schemas = as_schema(as_schema(document.get("components")).get("schemas"))
    for name, schema in component_schemas.items():
        if isinstance(schema, dict):
            resolver.resolve(schema, f"{COMPONENT_SCHEMA_PREFIX}{name}")

    flattener = SchemaFlattener(resolver)
    records: list[FieldRecord] = []
    endpoints: list[EndpointSummary] = []

    paths = as_schema(document.get("paths"))
    for path, path_item in paths.items():
        path_item = as_schema(path_item)
        for method in HTTP_METHODS:
            operation = path_item.get(method)
            if not isinstance(operation, dict):
                continue
            endpoint, operation_records = walk_operation(
                str(path), method, operation, _parameters(path_item), resolver, flattener
            )
            endpoints.append(endpoint)
            records.extend(operation_records)

    info = as_schema(document.get("info"))
    return DataDictionary(
        api_info=ApiInfo(
            title=text(info.get("title")),
            version=str(info.get("version") or ""),
            description=text(info.get("description")),
        ),
        source=source,
        generated_at=datetime.now(timezone.utc).isoformat(),
        field_instances=sort_records(records),
        endpoints=sort_endpoints(endpoints),
        schemas=sort_schemas(summarize_schemas(component_schemas)),
    )


def walk_operation(
    path: str,
    method: str,
    operation: dict,
    path_parameters: list,
    resolver: SchemaNameResolver,
    flattener: SchemaFlattener,
) -> tuple[EndpointSummary, list[FieldRecord]]:
    """Produce the endpoint row and every field record of one operation."""
    operation_id = text(operation.get("operationId")) or operation_id_for(method, path)
    tags = ", ".join(str(t) for t in operation.get("tags") or [])
    summary = text(operation.get("summary"))
    base = FlattenContext(operation_id=operation_id, method=method.upper(), path=path, tags=tags, summary=summary)

    records: list[FieldRecord] = []
    all_params = path_parameters + _parameters(operation)
    for param in all_params:
        records.append(map_parameter(param, base, resolver))

    request_types = _media_types(operation.get("requestBody"))
    for media_type, media in request_types.items():
        media_type = str(media_type)
        schema = as_schema(media).get("schema")
        if isinstance(schema, dict):
            ctx = base.model_copy(
                update={
                    "location": "request_body",
                    "media_type": media_type,
                    "source_ref": f"requestBody.content.{media_type}.schema",
                    "required": required_names(schema),
                }
            )
            records.extend(flattener.flatten(schema, "", ctx, resolver.resolve(schema)))

    response_codes = []
    responses = as_schema(operation.get("responses"))
    for status, response in responses.items():
        status = str(status)
        response_types = _media_types(response)
        response_codes.append(f"{status}: {', '.join(str(m) for m in response_types)}" if response_types else status)
        for media_type, media in response_types.items():
            media_type = str(media_type)
            schema = as_schema(media).get("schema")
            if isinstance(schema, dict):
                ctx = base.model_copy(
                    update={
                        "location": "response_body",
                        "http_status": status,
                        "media_type": media_type,
                        "source_ref": f"responses.{status}.content.{media_type}.schema",
                        "required": required_names(schema),
                    }
                )
                records.extend(flattener.flatten(schema, "", ctx, resolver.resolve(schema)))

    endpoint = EndpointSummary(
        method=method.upper(),
        path=path,
        operation_id=operation_id,
        tags=tags,
        summary=summary,
        description=text(operation.get("description")),
        request_media_types=", ".join(str(m) for m in request_types),
        response_codes_and_media_types="; ".join(response_codes),
        parameter_count=len(all_params),
    )
    return endpoint, records


def summarize_schemas(component_schemas: dict) -> list[SchemaSummary]:
    summaries = []
    for name, schema in component_schemas.items():
        schema = as_schema(schema)
        schema_type = declared_type(schema)
        if not schema_type:
            schema_type = next((key for key in ("allOf", "oneOf", "anyOf") if schema.get(key)), "unknown")
        properties = schema.get("properties")
        summaries.append(
            SchemaSummary(
                name=str(name),
                type=schema_type,
                description=text(schema.get("description")),
                property_count=len(properties) if isinstance(properties, dict) else 0,
                required=", ".join(field_key(r) for r in schema.get("required") or []),
            )
        )
    return summaries
