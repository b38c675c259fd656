"""Local $ref dereferencing that keeps the pointer each schema came from.

Every `$ref` is replaced by the resolved object itself, so a schema referenced
from several places is one shared object and circular references become
circular object graphs. The pointer of each resolved object is recorded
(keyed by `id()`) so later stages can still name the schema.
"""

from urllib.parse import unquote


def _decode_token(token: str) -> str:
    return unquote(token).replace("~1", "/").replace("~0", "~")


def resolve_pointer(document, pointer: str):
    """Return the node a local JSON pointer (`#/a/b`) designates.

    Raises ValueError for non-local pointers and missing targets.
    """
    if not pointer.startswith("#"):
        raise ValueError(f"Only local references are supported: {pointer!r}")
    node = document
    path = pointer[1:]
    if not path:
        return node
    if not path.startswith("/"):
        raise ValueError(f"Invalid JSON pointer: {pointer!r}")
    for raw in path.split("/")[1:]:
        token = _decode_token(raw)
        if isinstance(node, dict) and token in node:
            node = node[token]
        elif isinstance(node, list) and token.isdigit() and int(token) < len(node):
            node = node[int(token)]
        else:
            raise ValueError(f"Unresolvable reference: {pointer!r}")
    return node


class Dereferencer:
    """Builds a resolved copy of a document, sharing one object per target."""

    def __init__(self, document: dict):
        self.document = document
        self.references: dict[int, str] = {}
        self._resolved: dict[int, dict] = {}
        self._following: list[str] = []

    def dereference(self) -> dict:
        return self._resolve(self.document)

    def _resolve(self, node):
        if isinstance(node, list):
            return [self._resolve(item) for item in node]
        if not isinstance(node, dict):
            return node

        ref = node.get("$ref")
        if isinstance(ref, str):
            return self._follow(ref)

        if id(node) in self._resolved:
            return self._resolved[id(node)]
        # registered before the children so cycles close on this object
        out: dict = {}
        self._resolved[id(node)] = out
        for key, value in node.items():
            out[key] = self._resolve(value)
        return out

    def _follow(self, ref: str):
        target = resolve_pointer(self.document, ref)
        if isinstance(target, dict) and id(target) in self._resolved:
            resolved = self._resolved[id(target)]
        else:
            # only chains of bare $ref objects can loop here
            if ref in self._following:
                chain = " -> ".join(self._following + [ref])
                raise ValueError(f"Circular $ref chain: {chain}")
            self._following.append(ref)
            try:
                resolved = self._resolve(target)
            finally:
                self._following.pop()
        if isinstance(resolved, dict):
            self.references.setdefault(id(resolved), ref)
        return resolved


def dereference(document: dict) -> tuple[dict, dict[int, str]]:
    """Resolve every local `$ref` in the document.

    Returns the resolved document and a mapping of `id(schema)` to the
    pointer it was first reached through.
    """
    deref = Dereferencer(document)
    resolved = deref.dereference()
    return resolved, deref.references
