"""JSON export of a data dictionary."""

import json
from pathlib import Path

from api_dictionary.models import DataDictionary


def to_document(dictionary: DataDictionary) -> dict:
    """Build the JSON document consumed by the HTML viewer."""
    return {
        "generatedAt": dictionary.generated_at,
        "source": dictionary.source,
        "apiInfo": dictionary.api_info.to_row(),
        "fieldInstances": [record.to_row() for record in dictionary.field_instances],
        "endpoints": [endpoint.to_row() for endpoint in dictionary.endpoints],
        "schemas": [schema.to_row() for schema in dictionary.schemas],
    }


def write_json(dictionary: DataDictionary, output: Path) -> Path:
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(json.dumps(to_document(dictionary), indent=2, ensure_ascii=False), encoding="utf-8")
    return output
