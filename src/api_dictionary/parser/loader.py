"""Load an OpenAPI document from disk and dereference it."""

import json
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from api_dictionary.parser.refs import dereference


class DocumentLoadError(Exception):
    """The document cannot be read or is not an OpenAPI document."""


@dataclass
class LoadedDocument:
    document: dict
    # id(resolved schema) -> $ref pointer that produced it
    references: dict[int, str] = field(default_factory=dict)


def read_document(file_path: Path) -> dict:
    """Parse a YAML or JSON OpenAPI file into a mapping.

    Raises DocumentLoadError when the file cannot be parsed or does not
    look like an OpenAPI/Swagger document.
    """
    try:
        text = file_path.read_text(encoding="utf-8")
    except OSError as e:
        raise DocumentLoadError(f"Cannot read {file_path}: {e}") from e

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as yaml_error:
        # JSON with tabs or other constructs YAML rejects
        try:
            data = json.loads(text)
        except (json.JSONDecodeError, ValueError):
            raise DocumentLoadError(f"{file_path} is neither valid YAML nor JSON: {yaml_error}") from yaml_error

    if not isinstance(data, dict) or not ("openapi" in data or "swagger" in data):
        raise DocumentLoadError(f"{file_path} is not an OpenAPI document")
    if not isinstance(data.get("paths", {}), dict):
        raise DocumentLoadError(f"{file_path} has a malformed 'paths' section")
    return data


def load_document(file_path: Path) -> LoadedDocument:
    """Read and dereference an OpenAPI document in one blocking step."""
    raw = read_document(file_path)
    try:
        document, references = dereference(raw)
    except ValueError as e:
        raise DocumentLoadError(f"Cannot dereference {file_path}: {e}") from e
    return LoadedDocument(document=document, references=references)
