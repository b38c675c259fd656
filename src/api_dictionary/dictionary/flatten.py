"""Recursive flattening of request/response schemas into field records."""

from api_dictionary.dictionary.composition import (
    SIBLING_ISSUE,
    MergeResult,
    all_of_members,
    merge_all_of,
    sibling_only_properties,
)
from api_dictionary.dictionary.constraints import render_value, serialize_constraints
from api_dictionary.dictionary.naming import ANONYMOUS, SchemaNameResolver
from api_dictionary.dictionary.shapes import (
    as_schema,
    declared_type,
    field_key,
    is_array,
    is_nullable,
    is_structured,
    required_names,
    text,
)
from api_dictionary.models import FieldRecord, FlattenContext


def _last_segment(field_path: str) -> str:
    return field_path.split(".")[-1]


class SchemaFlattener:
    """Walks one schema graph and emits a record per observable field.

    `visited` is the lineage of node ids on the current branch. It is an
    immutable tuple, so sibling properties, array items and composition
    variants never share cycle state and a schema reused from two places
    is traversed from both. A node already present above its immediate
    parent is not expanded again; a node that refers directly to itself
    is expanded one more level so its element shape is visible.
    """

    def __init__(self, resolver: SchemaNameResolver):
        self.resolver = resolver
        # id(allOf node) -> (node, merge result)
        self._merged: dict[int, tuple[dict, MergeResult]] = {}
        # id(merged node) -> property names only declared beside allOf
        self._sibling_only: dict[int, frozenset[str]] = {}

    def flatten(
        self,
        schema,
        field_path: str,
        context: FlattenContext,
        enclosing_name: str,
        variant_label: str = "",
        visited: tuple[int, ...] = (),
        issues: tuple[str, ...] = (),
    ) -> list[FieldRecord]:
        if not isinstance(schema, dict) or id(schema) in visited[:-1]:
            return []
        lineage = visited + (id(schema),)

        if isinstance(schema.get("allOf"), list) and schema["allOf"]:
            merged, merge_issues = self._merge(schema)
            ctx = context.model_copy(update={"required": required_names(merged)})
            # the merged node stands in for this one on the lineage
            return self.flatten(merged, field_path, ctx, enclosing_name, variant_label, visited, issues + tuple(merge_issues))

        for keyword in ("oneOf", "anyOf"):
            members = schema.get(keyword)
            if isinstance(members, list) and members:
                return self._flatten_variants(members, field_path, context, enclosing_name, variant_label, lineage, issues)

        if is_array(schema):
            return self._flatten_array(schema, field_path, context, enclosing_name, variant_label, lineage, issues)

        if declared_type(schema) == "object" or isinstance(schema.get("properties"), dict):
            return self._flatten_object(schema, field_path, context, enclosing_name, variant_label, lineage, issues)

        schema_type = declared_type(schema)
        if schema_type and not schema.get("properties") and not schema.get("items"):
            field_name = _last_segment(field_path) or "value"
            return [
                self._record(
                    context,
                    schema,
                    variant_label,
                    issues,
                    schema_name=enclosing_name,
                    field_path=field_path,
                    field_name=field_name,
                    type=schema_type,
                    required=field_name in context.required,
                )
            ]
        return []

    def _merge(self, schema: dict) -> MergeResult:
        entry = self._merged.get(id(schema))
        if entry is None:
            entry = (schema, merge_all_of(all_of_members(schema)))
            self._merged[id(schema)] = entry
            self._sibling_only[id(entry[1].merged)] = sibling_only_properties(schema)
        return entry[1]

    def _flatten_variants(self, members, field_path, context, enclosing_name, variant_label, lineage, issues):
        records = []
        for index, member in enumerate(members, start=1):
            name = self.resolver.resolve(member) if isinstance(member, dict) else ANONYMOUS
            if name == ANONYMOUS:
                name = f"variant{index}"
            label = f"{variant_label}|{name}" if variant_label else name
            ctx = context.model_copy(update={"required": required_names(member)})
            records.extend(self.flatten(member, field_path, ctx, enclosing_name, label, lineage, issues))
        return records

    def _flatten_array(self, schema, field_path, context, enclosing_name, variant_label, lineage, issues):
        items = schema["items"]
        array_path = f"{field_path}[]"
        if is_structured(items):
            # structured items surface directly under the [] path
            ctx = context.model_copy(update={"required": required_names(items)})
            item_name = self.resolver.resolve_or(items, enclosing_name)
            return self.flatten(items, array_path, ctx, item_name, variant_label, lineage, issues)

        field_name = _last_segment(field_path) or "items"
        return [
            self._record(
                context,
                schema,
                variant_label,
                issues,
                schema_name=enclosing_name,
                field_path=array_path,
                field_name=f"{field_name}[]",
                type="array",
                item_type=declared_type(items),
                format=text(items.get("format")),
                required=field_name in context.required,
                description=text(schema.get("description")) or text(items.get("description")),
                constraints=serialize_constraints(schema) or serialize_constraints(items),
            )
        ]

    def _flatten_object(self, schema, field_path, context, enclosing_name, variant_label, lineage, issues):
        records = []
        properties = schema.get("properties")
        if not isinstance(properties, dict):
            return records

        sibling_only = self._sibling_only.get(id(schema), frozenset())
        for name, prop in properties.items():
            name = field_key(name)
            prop = as_schema(prop)
            prop_issues = issues + (SIBLING_ISSUE,) if name in sibling_only else issues
            child_path = f"{field_path}.{name}" if field_path else name
            prop_name = self.resolver.resolve_or(prop, enclosing_name)
            common = dict(schema_name=prop_name, field_path=child_path, field_name=name, required=name in context.required)

            if is_structured(prop):
                records.append(
                    self._record(context, prop, variant_label, prop_issues, type=declared_type(prop) or "object", **common)
                )
                ctx = context.model_copy(update={"required": required_names(prop)})
                records.extend(self.flatten(prop, child_path, ctx, prop_name, variant_label, lineage, prop_issues))
            elif is_array(prop):
                items = prop["items"]
                item_type = declared_type(items) or ("object" if "properties" in items else "")
                records.append(
                    self._record(context, prop, variant_label, prop_issues, type="array", item_type=item_type, **common)
                )
                if is_structured(items):
                    ctx = context.model_copy(update={"required": required_names(items)})
                    item_name = self.resolver.resolve_or(items, prop_name)
                    records.extend(
                        self.flatten(items, f"{child_path}[]", ctx, item_name, variant_label, lineage, prop_issues)
                    )
            else:
                records.append(self._record(context, prop, variant_label, prop_issues, type=declared_type(prop), **common))
        return records

    def _record(self, context: FlattenContext, schema: dict, variant_label: str, issues, **values) -> FieldRecord:
        example = schema.get("example")
        if example is None and isinstance(schema.get("examples"), list) and schema["examples"]:
            example = schema["examples"][0]

        notes = [f"variant: {variant_label}"] if variant_label else []
        notes.extend(issues)

        fields = dict(
            operation_id=context.operation_id,
            method=context.method,
            path=context.path,
            tags=context.tags,
            summary=context.summary,
            location=context.location,
            http_status=context.http_status,
            media_type=context.media_type,
            source_ref=context.source_ref,
            format=text(schema.get("format")),
            nullable=is_nullable(schema),
            deprecated=schema.get("deprecated") is True,
            read_only=schema.get("readOnly") is True,
            write_only=schema.get("writeOnly") is True,
            description=text(schema.get("description")),
            constraints=serialize_constraints(schema),
            example=render_value(example),
            default=render_value(schema.get("default")),
            issues="; ".join(notes),
        )
        fields.update(values)
        return FieldRecord(**fields)
