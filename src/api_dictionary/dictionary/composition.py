"""Collapse of `allOf` compositions into a single object schema."""

from typing import NamedTuple

from api_dictionary.dictionary.shapes import field_key

SIBLING_ISSUE = "declared beside allOf"


class MergeResult(NamedTuple):
    merged: dict
    issues: list[str]


def merge_all_of(members: list) -> MergeResult:
    """Merge `allOf` members into one synthetic object schema.

    Properties are a shallow union (later members win), `required` is the
    de-duplicated union and the description is the first non-empty one.
    Nested compositions inside member properties are left untouched.
    """
    properties: dict = {}
    required: list[str] = []
    description = ""
    issues: list[str] = []

    for member in members:
        if not isinstance(member, dict):
            issues.append("allOf contains a non-schema member")
            continue
        member_type = member.get("type")
        if member_type and member_type != "object":
            issues.append(f"allOf contains non-object type: {member_type}")
        if isinstance(member.get("properties"), dict):
            properties.update(member["properties"])
        for name in member.get("required") or []:
            if name not in required:
                required.append(name)
        if not description and member.get("description"):
            description = member["description"]

    merged = {"type": "object", "properties": properties, "required": required}
    if description:
        merged["description"] = description
    return MergeResult(merged, issues)


def all_of_members(schema: dict) -> list:
    """The `allOf` list, plus properties declared beside it as a last member."""
    members = list(schema.get("allOf") or [])
    if "properties" in schema or "required" in schema:
        sibling = {key: value for key, value in schema.items() if key in ("properties", "required", "description")}
        members.append(sibling)
    return members


def sibling_only_properties(schema: dict) -> frozenset[str]:
    """Names of properties declared beside `allOf` and in none of its members."""
    siblings = schema.get("properties")
    if not isinstance(siblings, dict):
        return frozenset()
    declared = set()
    for member in schema.get("allOf") or []:
        if isinstance(member, dict) and isinstance(member.get("properties"), dict):
            declared.update(field_key(name) for name in member["properties"])
    return frozenset(field_key(name) for name in siblings) - declared
