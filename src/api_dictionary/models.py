"""Data models for the generated data dictionary.

The walker and flattener produce these models; the writers consume them.
Field names are snake_case in Python and camelCase when serialized.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

FLAG_FIELDS = ("required", "nullable", "deprecated", "read_only", "write_only")


class _Row(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    def to_row(self) -> dict:
        """Serialize with camelCase keys, as used by every writer."""
        return self.model_dump(by_alias=True)


class FlattenContext(BaseModel):
    """Operation identity and location shared by every record of one subtree."""

    model_config = ConfigDict(frozen=True)

    operation_id: str
    method: str
    path: str
    tags: str = ""
    summary: str = ""
    location: str = ""
    http_status: str = ""
    media_type: str = ""
    source_ref: str = ""
    required: frozenset[str] = frozenset()  # required names of the enclosing object


class FieldRecord(_Row):
    """One field occurrence at a specific operation, location and schema path."""

    operation_id: str
    method: str
    path: str
    tags: str = ""
    summary: str = ""
    location: str  # path_param / query_param / header_param / cookie_param / request_body / response_body
    http_status: str = ""
    media_type: str = ""
    schema_name: str = ""
    field_path: str = ""
    field_name: str = ""
    type: str = ""
    item_type: str = ""
    format: str = ""
    required: bool = False
    nullable: bool = False
    deprecated: bool = False
    read_only: bool = False
    write_only: bool = False
    description: str = ""
    constraints: str = ""
    example: str = ""
    default: str = ""
    source_ref: str = ""
    issues: str = ""

    def to_row(self) -> dict:
        row = super().to_row()
        for name in FLAG_FIELDS:
            key = to_camel(name)
            row[key] = "Yes" if row[key] else "No"
        return row


class EndpointSummary(_Row):
    """One row per declared operation."""

    method: str
    path: str
    operation_id: str
    tags: str = ""
    summary: str = ""
    description: str = ""
    request_media_types: str = ""
    response_codes_and_media_types: str = ""
    parameter_count: int = 0


class SchemaSummary(_Row):
    """One row per named component schema."""

    name: str
    type: str = "unknown"
    description: str = ""
    property_count: int = 0
    required: str = ""


class ApiInfo(_Row):
    title: str = ""
    version: str = ""
    description: str = ""


class DataDictionary(BaseModel):
    """Everything produced by one generation run."""

    api_info: ApiInfo = Field(default_factory=ApiInfo)
    source: str = ""
    generated_at: str = ""
    field_instances: list[FieldRecord] = []
    endpoints: list[EndpointSummary] = []
    schemas: list[SchemaSummary] = []
