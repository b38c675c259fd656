from api_dictionary.dictionary.flatten import SchemaFlattener
from api_dictionary.dictionary.naming import SchemaNameResolver
from api_dictionary.models import FlattenContext


def _flatten(schema, field_path="", required=None):
    resolver = SchemaNameResolver()
    if required is None:
        required = schema.get("required", [])
    ctx = FlattenContext(
        operation_id="createThing",
        method="POST",
        path="/things",
        location="request_body",
        media_type="application/json",
        source_ref="requestBody.content.application/json.schema",
        required=frozenset(required),
    )
    return SchemaFlattener(resolver).flatten(schema, field_path, ctx, resolver.resolve(schema))


def _by_path(records):
    return {r.field_path: r for r in records}


def _paths(records):
    return [r.field_path for r in records]


class TestRequiredScoping:
    def test_required_reflects_directly_enclosing_object(self):
        schema = {
            "type": "object",
            "required": ["a", "inner"],
            "properties": {
                "a": {"type": "string"},
                "b": {"type": "string"},
                "inner": {
                    "type": "object",
                    "required": ["b"],
                    "properties": {"a": {"type": "string"}, "b": {"type": "string"}},
                },
            },
        }
        records = _by_path(_flatten(schema))
        assert records["a"].required is True
        assert records["b"].required is False
        assert records["inner"].required is True
        assert records["inner.a"].required is False
        assert records["inner.b"].required is True

    def test_array_items_use_their_own_required_list(self):
        schema = {
            "type": "object",
            "required": ["items"],
            "properties": {
                "items": {
                    "type": "array",
                    "items": {"type": "object", "required": ["id"], "properties": {"id": {"type": "integer"}, "note": {"type": "string"}}},
                }
            },
        }
        records = _by_path(_flatten(schema))
        assert records["items"].required is True
        assert records["items[].id"].required is True
        assert records["items[].note"].required is False


class TestArrays:
    def test_primitive_array_property_is_one_record(self):
        schema = {"type": "object", "properties": {"tags": {"type": "array", "items": {"type": "string"}}}}
        records = _flatten(schema)
        assert len(records) == 1
        assert records[0].field_path == "tags"
        assert records[0].type == "array"
        assert records[0].item_type == "string"

    def test_root_primitive_array(self):
        schema = {"type": "array", "items": {"type": "string", "maxLength": 5, "description": "a code"}}
        records = _flatten(schema)
        assert len(records) == 1
        record = records[0]
        assert record.field_path == "[]"
        assert record.field_name == "items[]"
        assert record.type == "array"
        assert record.item_type == "string"
        assert record.description == "a code"
        assert record.constraints == "maxLength=5"

    def test_primitive_array_prefers_own_description_and_constraints(self):
        schema = {"type": "array", "description": "codes", "maxItems": 3, "items": {"type": "string", "description": "a code", "maxLength": 5}}
        record = _flatten(schema, "codes", required=["codes"])[0]
        assert record.field_path == "codes[]"
        assert record.field_name == "codes[]"
        assert record.description == "codes"
        assert record.constraints == "maxItems=3"
        assert record.required is True

    def test_structured_array_is_transparent(self):
        schema = {
            "type": "object",
            "properties": {
                "pets": {"type": "array", "items": {"type": "object", "properties": {"id": {"type": "integer"}}}}
            },
        }
        records = _flatten(schema)
        assert _paths(records) == ["pets", "pets[].id"]
        assert records[0].item_type == "object"

    def test_root_array_of_objects_has_no_summary_record(self):
        schema = {"type": "array", "items": {"type": "object", "properties": {"id": {"type": "integer"}}}}
        assert _paths(_flatten(schema)) == ["[].id"]


class TestVariants:
    def _payment(self):
        card = {"title": "Card", "type": "object", "required": ["x"], "properties": {"x": {"type": "string"}}}
        bank = {
            "title": "Bank",
            "type": "object",
            "required": ["y"],
            "properties": {"y": {"type": "string"}, "x": {"type": "string"}},
        }
        return {"type": "object", "properties": {"p": {"oneOf": [card, bank]}}}

    def test_each_variant_yields_its_own_records(self):
        records = _flatten(self._payment())
        assert _paths(records) == ["p", "p.x", "p.y", "p.x"]
        summary, card_x, bank_y, bank_x = records
        assert summary.type == "object"
        assert card_x.issues == "variant: Card"
        assert bank_y.issues == "variant: Bank"
        assert bank_x.issues == "variant: Bank"

    def test_variant_required_sets_are_not_merged(self):
        records = _flatten(self._payment())
        card_x = [r for r in records if r.field_path == "p.x" and "Card" in r.issues][0]
        bank_x = [r for r in records if r.field_path == "p.x" and "Bank" in r.issues][0]
        bank_y = [r for r in records if r.field_path == "p.y"][0]
        assert card_x.required is True
        assert bank_x.required is False
        assert bank_y.required is True

    def test_anonymous_variants_are_numbered(self):
        schema = {"anyOf": [{"type": "object", "properties": {"a": {"type": "string"}}}, {"type": "integer"}]}
        records = _flatten(schema, "value")
        assert [r.issues for r in records] == ["variant: variant1", "variant: variant2"]
        assert records[1].type == "integer"

    def test_nested_variant_labels_are_chained(self):
        inner = {"oneOf": [{"type": "object", "properties": {"a": {"type": "string"}}}]}
        outer = {"oneOf": [{"title": "Outer", "type": "object", "properties": {"in": inner}}]}
        records = _by_path(_flatten(outer))
        assert records["in"].issues == "variant: Outer"
        assert records["in.a"].issues == "variant: Outer|variant1"


class TestCycles:
    def test_self_referential_schema_terminates_one_level_deep(self):
        node = {"type": "object", "properties": {"name": {"type": "string"}, "children": {"type": "array"}}}
        node["properties"]["children"]["items"] = node
        paths = _paths(_flatten(node, "root", required=[]))
        assert "root.name" in paths
        assert "root.children" in paths
        assert "root.children[].name" in paths
        assert "root.children[].children[].name" not in paths

    def test_mutual_recursion_stops_at_the_repeated_node(self):
        a = {"title": "A", "type": "object", "properties": {"label": {"type": "string"}}}
        b = {"title": "B", "type": "object", "properties": {"a": a}}
        a["properties"]["b"] = b
        paths = _paths(_flatten(a))
        assert paths == ["label", "b", "b.a"]

    def test_diamond_reuse_is_traversed_from_each_branch(self):
        shared = {"type": "object", "properties": {"v": {"type": "string"}}}
        schema = {"type": "object", "properties": {"left": shared, "right": shared}}
        assert _paths(_flatten(schema)) == ["left", "left.v", "right", "right.v"]

    def test_same_node_in_two_variants(self):
        shared = {"type": "object", "properties": {"v": {"type": "string"}}}
        schema = {"oneOf": [shared, {"type": "object", "properties": {"s": shared}}]}
        assert _paths(_flatten(schema)) == ["v", "s", "s.v"]


class TestAllOf:
    def test_merged_properties_and_required(self):
        schema = {
            "allOf": [
                {"type": "object", "required": ["a"], "properties": {"a": {"type": "string"}}},
                {"type": "object", "properties": {"b": {"type": "integer"}}},
            ]
        }
        records = _by_path(_flatten(schema, required=[]))
        assert records["a"].required is True
        assert records["b"].required is False
        assert records["a"].issues == ""

    def test_non_object_member_is_reported_on_the_subtree(self):
        schema = {
            "type": "object",
            "properties": {
                "thing": {
                    "allOf": [
                        {"type": "object", "properties": {"inner": {"type": "object", "properties": {"x": {"type": "string"}}}}},
                        {"type": "string"},
                    ]
                }
            },
        }
        records = _by_path(_flatten(schema))
        assert records["thing"].issues == ""
        assert records["thing.inner"].issues == "allOf contains non-object type: string"
        assert records["thing.inner.x"].issues == "allOf contains non-object type: string"

    def test_merge_issue_follows_variant_label(self):
        schema = {"oneOf": [{"title": "V", "allOf": [{"type": "string"}, {"properties": {"a": {"type": "string"}}}]}]}
        record = _flatten(schema)[0]
        assert record.issues == "variant: V; allOf contains non-object type: string"

    def test_sibling_only_properties_are_tagged(self):
        schema = {
            "allOf": [{"type": "object", "properties": {"a": {"type": "string"}}}],
            "properties": {
                "a": {"type": "string", "maxLength": 3},
                "extra": {"type": "object", "properties": {"x": {"type": "string"}}},
            },
            "required": ["extra"],
        }
        records = _by_path(_flatten(schema, required=[]))
        assert records["a"].issues == ""
        assert records["a"].constraints == "maxLength=3"
        assert records["extra"].required is True
        assert records["extra"].issues == "declared beside allOf"
        assert records["extra.x"].issues == "declared beside allOf"

    def test_sibling_tag_follows_variant_label(self):
        schema = {"oneOf": [{"title": "V", "allOf": [{"type": "object"}], "properties": {"b": {"type": "string"}}}]}
        record = _flatten(schema)[0]
        assert record.issues == "variant: V; declared beside allOf"

    def test_self_referential_all_of_terminates(self):
        node = {"allOf": [{"type": "object", "properties": {"name": {"type": "string"}}}]}
        node["allOf"].append({"type": "object", "properties": {"next": node}})
        paths = _paths(_flatten(node))
        assert paths[:2] == ["name", "next"]
        assert len(paths) < 10


class TestPrimitivesAndDegradation:
    def test_root_primitive_uses_value_name(self):
        record = _flatten({"type": "string", "format": "uuid"})[0]
        assert record.field_name == "value"
        assert record.field_path == ""
        assert record.format == "uuid"

    def test_root_primitive_uses_last_path_segment(self):
        record = _flatten({"type": "boolean"}, "a.flag", required=["flag"])[0]
        assert record.field_name == "flag"
        assert record.required is True

    def test_malformed_parts_degrade_to_empty_values(self):
        schema = {"properties": {"a": "nonsense", "b": {"type": 5, "description": 3}}, "required": "a"}
        records = _by_path(_flatten(schema, required=[]))
        assert records["a"].type == ""
        assert records["b"].type == ""
        assert records["b"].description == ""

    def test_non_dict_schema_yields_nothing(self):
        assert _flatten({"type": "object"}) == []
        resolver = SchemaNameResolver()
        flattener = SchemaFlattener(resolver)
        ctx = FlattenContext(operation_id="x", method="GET", path="/x")
        assert flattener.flatten(None, "", ctx, "x") == []

    def test_non_string_property_names(self):
        flags = {"type": "object", "required": [True, 7], "properties": {True: {"type": "boolean"}, 7: {"type": "string"}}}
        records = _by_path(_flatten({"type": "object", "properties": {"flags": flags}}))
        assert records["flags.true"].field_name == "true"
        assert records["flags.true"].required is True
        assert records["flags.7"].required is True

    def test_type_list_sets_nullable(self):
        schema = {"type": "object", "properties": {"a": {"type": ["string", "null"]}}}
        record = _flatten(schema)[0]
        assert record.type == "string"
        assert record.nullable is True

    def test_metadata_is_rendered(self):
        schema = {
            "type": "object",
            "properties": {
                "a": {"type": "string", "example": {"k": 1}, "default": True, "deprecated": True, "writeOnly": True}
            },
        }
        record = _flatten(schema)[0]
        assert record.example == '{"k":1}'
        assert record.default == "true"
        assert record.deprecated is True
        assert record.write_only is True
        assert record.read_only is False
        assert record.operation_id == "createThing"
        assert record.source_ref == "requestBody.content.application/json.schema"


class TestIdempotence:
    def test_flattening_twice_gives_identical_records(self):
        node = {"type": "object", "properties": {"name": {"type": "string"}, "kids": {"type": "array"}}}
        node["properties"]["kids"]["items"] = node
        assert _flatten(node) == _flatten(node)
