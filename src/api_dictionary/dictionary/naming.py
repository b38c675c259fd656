"""Stable display names for schema nodes."""

ANONYMOUS = "inline/anonymous"


class SchemaNameResolver:
    """Names schema nodes for one generation run.

    Names are cached by object identity, so the same node resolves to the
    same name for the lifetime of the resolver. `references` maps `id(node)`
    to the `$ref` pointer the node was dereferenced from.
    """

    def __init__(self, references: dict[int, str] | None = None):
        self.references = references or {}
        # id(node) -> (node, name); the node is held so its id stays unique
        self._cache: dict[int, tuple[object, str]] = {}

    def resolve(self, node, ref_path: str | None = None) -> str:
        cached = self._cache.get(id(node))
        if cached is not None:
            return cached[1]

        ref_path = ref_path or self.references.get(id(node))
        title = node.get("title") if isinstance(node, dict) else None
        if ref_path:
            name = ref_path.rstrip("/").split("/")[-1] or ANONYMOUS
        elif isinstance(title, str) and title:
            name = title
        else:
            name = ANONYMOUS

        self._cache[id(node)] = (node, name)
        return name

    def resolve_or(self, node, fallback: str) -> str:
        """Resolve `node`, using `fallback` when it has no name of its own."""
        name = self.resolve(node)
        return fallback if name == ANONYMOUS and fallback else name
