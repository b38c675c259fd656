import json
from pathlib import Path

import pytest

from api_dictionary.parser.loader import DocumentLoadError, load_document, read_document
from api_dictionary.parser.refs import dereference, resolve_pointer

FIXTURES = Path(__file__).parent / "fixtures"


def _write(tmp_path, name: str, text: str) -> Path:
    f = tmp_path / name
    f.write_text(text, encoding="utf-8")
    return f


class TestReadDocument:
    def test_reads_yaml(self):
        doc = read_document(FIXTURES / "petstore.yaml")
        assert doc["info"]["title"] == "Swagger Petstore"

    def test_reads_json(self, tmp_path):
        f = _write(tmp_path, "api.json", json.dumps({"openapi": "3.0.0", "paths": {}}))
        assert read_document(f)["openapi"] == "3.0.0"

    def test_rejects_non_openapi(self, tmp_path):
        f = _write(tmp_path, "doc.yaml", "title: not an api\n")
        with pytest.raises(DocumentLoadError, match="not an OpenAPI document"):
            read_document(f)

    def test_rejects_unparseable_text(self, tmp_path):
        f = _write(tmp_path, "doc.yaml", "openapi: [unclosed\n  - {\n")
        with pytest.raises(DocumentLoadError):
            read_document(f)

    def test_rejects_malformed_paths(self, tmp_path):
        f = _write(tmp_path, "doc.yaml", "openapi: 3.0.0\npaths: [1, 2]\n")
        with pytest.raises(DocumentLoadError, match="paths"):
            read_document(f)

    def test_missing_file(self, tmp_path):
        with pytest.raises(DocumentLoadError, match="Cannot read"):
            read_document(tmp_path / "missing.yaml")


class TestLoadDocument:
    def test_refs_become_shared_objects(self):
        loaded = load_document(FIXTURES / "petstore.yaml")
        doc = loaded.document
        pet = doc["components"]["schemas"]["Pet"]
        listed = doc["paths"]["/pets"]["get"]["responses"]["200"]["content"]["application/json"]["schema"]
        shown = doc["paths"]["/pets/{petId}"]["get"]["responses"]["200"]["content"]["application/json"]["schema"]
        assert listed["items"] is pet
        assert shown is pet
        assert loaded.references[id(pet)] == "#/components/schemas/Pet"

    def test_circular_refs_become_cycles(self):
        doc = load_document(FIXTURES / "petstore.yaml").document
        node = doc["components"]["schemas"]["Node"]
        assert node["properties"]["children"]["items"] is node

    def test_no_ref_keys_remain(self):
        doc = load_document(FIXTURES / "petstore.yaml").document
        assert "$ref" not in doc["paths"]["/pets"]["post"]["requestBody"]["content"]["application/json"]["schema"]

    def test_unresolvable_ref(self, tmp_path):
        f = _write(
            tmp_path,
            "api.yaml",
            "openapi: 3.0.0\npaths:\n  /a:\n    get:\n      responses:\n        '200':\n"
            "          content:\n            application/json:\n              schema:\n"
            "                $ref: '#/components/schemas/Missing'\n",
        )
        with pytest.raises(DocumentLoadError, match="Missing"):
            load_document(f)

    def test_external_ref(self, tmp_path):
        f = _write(tmp_path, "api.yaml", "openapi: 3.0.0\npaths: {}\nx-thing:\n  $ref: 'other.yaml#/Pet'\n")
        with pytest.raises(DocumentLoadError, match="local"):
            load_document(f)


class TestDereference:
    def test_ref_chain_loop_is_an_error(self):
        document = {
            "components": {"schemas": {"A": {"$ref": "#/components/schemas/B"}, "B": {"$ref": "#/components/schemas/A"}}}
        }
        with pytest.raises(ValueError, match="Circular"):
            dereference(document)

    def test_alias_ref_resolves_to_target(self):
        document = {
            "components": {
                "schemas": {
                    "Alias": {"$ref": "#/components/schemas/Pet"},
                    "Pet": {"type": "object"},
                }
            }
        }
        resolved, references = dereference(document)
        schemas = resolved["components"]["schemas"]
        assert schemas["Alias"] is schemas["Pet"]
        assert references[id(schemas["Pet"])] == "#/components/schemas/Pet"

    def test_source_document_is_untouched(self):
        document = {"a": {"$ref": "#/b"}, "b": {"type": "string"}}
        resolved, _ = dereference(document)
        assert resolved["a"] == {"type": "string"}
        assert document["a"] == {"$ref": "#/b"}

    def test_pointer_escapes(self):
        document = {"paths": {"/a/{id}": {"get": {"x": 1}}}}
        assert resolve_pointer(document, "#/paths/~1a~1%7Bid%7D/get") == {"x": 1}
        assert resolve_pointer(document, "#") is document
