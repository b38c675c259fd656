"""Deterministic ordering of the generated collections."""

from api_dictionary.models import EndpointSummary, FieldRecord, SchemaSummary

LOCATION_ORDER = ("path_param", "query_param", "header_param", "cookie_param", "request_body", "response_body")


def _location_rank(location: str) -> int:
    # unrecognized locations sort after the known ones
    if location in LOCATION_ORDER:
        return LOCATION_ORDER.index(location)
    return len(LOCATION_ORDER)


def record_sort_key(record: FieldRecord) -> tuple:
    return (
        record.path,
        record.method,
        _location_rank(record.location),
        record.http_status,
        record.field_path,
    )


def sort_records(records: list[FieldRecord]) -> list[FieldRecord]:
    """Order records by path, method, location, status and field path.

    The sort is stable, so records equal on every key keep their
    traversal order.
    """
    return sorted(records, key=record_sort_key)


def sort_endpoints(endpoints: list[EndpointSummary]) -> list[EndpointSummary]:
    return sorted(endpoints, key=lambda e: (e.path, e.method))


def sort_schemas(schemas: list[SchemaSummary]) -> list[SchemaSummary]:
    return sorted(schemas, key=lambda s: s.name)
