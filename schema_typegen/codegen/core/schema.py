"""
Schema resolution for code generation.

SchemaStore fetches, parses and caches schema documents and hands out
SchemaNode instances keyed by canonical identity (document URI + JSON
pointer). The same identity always yields the same SchemaNode instance, and
the store also remembers the type generated for each node.
"""

import json
import posixpath
import weakref
from typing import Any, Dict, List, Optional, Set, Tuple
from urllib.parse import unquote, urldefrag, urljoin, urlsplit, urlunsplit

from ...logging_config import get_logger
from ...utils import DefaultFetcher, Fetcher, NotFoundError
from .errors import CyclicLoadError, UnresolvableReferenceError
from .model import replace_type

logger = get_logger(__name__)

# Keywords whose values are data, not subschemas
_DATA_KEYWORDS = {"enum", "const", "default", "examples", "example"}


def escape_pointer_token(token: str) -> str:
    """Escape one JSON pointer token (RFC 6901)."""
    return str(token).replace("~", "~0").replace("/", "~1")


def unescape_pointer_token(token: str) -> str:
    """Decode one JSON pointer token (RFC 6901)."""
    return token.replace("~1", "/").replace("~0", "~")


def split_pointer(pointer: str) -> List[str]:
    """Split a JSON pointer into decoded tokens ("" is the root)."""
    if not pointer:
        return []
    if not pointer.startswith("/"):
        raise ValueError(f"Invalid JSON pointer '{pointer}'")
    return [unescape_pointer_token(t) for t in pointer[1:].split("/")]


def join_pointer(tokens) -> str:
    """Build a canonical JSON pointer from decoded tokens."""
    return "".join(f"/{escape_pointer_token(t)}" for t in tokens)


def normalize_uri(uri: str) -> str:
    """Canonical form of a document URI (no fragment).

    Lowercases scheme and host and removes dot segments from the path.
    """
    parts = urlsplit(uri)
    path = parts.path
    if path:
        trailing = path.endswith("/")
        normalized = posixpath.normpath(path)
        if normalized == ".":
            normalized = ""
        # normpath keeps a leading '//' which is meaningless for URI paths
        if normalized.startswith("//"):
            normalized = "/" + normalized.lstrip("/")
        if trailing and normalized and not normalized.endswith("/"):
            normalized += "/"
        path = normalized
    return urlunsplit((parts.scheme.lower(), parts.netloc.lower(), path, parts.query, ""))


def walk_pointer(document: Any, tokens: List[str]) -> Any:
    """Resolve decoded pointer tokens against a parsed document.

    Raises:
        KeyError: If the pointer does not exist in the document
    """
    current = document
    for token in tokens:
        if isinstance(current, list):
            try:
                index = int(token)
            except ValueError as e:
                raise KeyError(f"'{token}' is not a list index") from e
            if index < 0 or index >= len(current):
                raise KeyError(f"list index {index} out of range")
            current = current[index]
        elif isinstance(current, dict):
            if token not in current:
                raise KeyError(f"key '{token}' not found")
            current = current[token]
        else:
            raise KeyError(f"cannot dereference '{token}' through a non-container")
    return current


class SchemaNode:
    """One parsed JSON Schema fragment with a canonical identity.

    Nodes are created only by :class:`SchemaStore`; compare them with ``is``.
    """

    __slots__ = ("store", "document", "pointer", "content", "base_uri", "_parent", "__weakref__")

    def __init__(
        self,
        store: "SchemaStore",
        document: str,
        pointer: str,
        content: Any,
        base_uri: str,
        parent: Optional["SchemaNode"] = None,
    ):
        self.store = store
        self.document = document
        self.pointer = pointer
        self.content = content
        self.base_uri = base_uri
        self._parent = weakref.ref(parent) if parent is not None else None

    def __repr__(self) -> str:
        return f"<SchemaNode {self.uri}>"

    @property
    def uri(self) -> str:
        """Canonical identity: document URI + '#' + JSON pointer."""
        return f"{self.document}#{self.pointer}"

    @property
    def parent(self) -> Optional["SchemaNode"]:
        return self._parent() if self._parent is not None else None

    @property
    def is_root(self) -> bool:
        return self.pointer == ""

    @property
    def is_object(self) -> bool:
        return isinstance(self.content, dict)

    @property
    def is_boolean(self) -> bool:
        return isinstance(self.content, bool)

    @property
    def last_token(self) -> Optional[str]:
        tokens = split_pointer(self.pointer)
        return tokens[-1] if tokens else None

    def get(self, keyword: str, default: Any = None) -> Any:
        """Raw value of a keyword (``default`` for missing keys or non-objects)."""
        if isinstance(self.content, dict):
            return self.content.get(keyword, default)
        return default

    def has(self, keyword: str) -> bool:
        return isinstance(self.content, dict) and keyword in self.content

    def __contains__(self, keyword: str) -> bool:
        return self.has(keyword)

    def keys(self) -> List[str]:
        return list(self.content.keys()) if isinstance(self.content, dict) else []

    def child(self, *tokens) -> "SchemaNode":
        """The node at ``tokens`` below this one, with identity preserved."""
        return self.store.node_at(
            self.document, self.pointer + join_pointer(str(t) for t in tokens)
        )

    def ref(self) -> Optional[str]:
        value = self.get("$ref")
        return value if isinstance(value, str) else None


class SchemaStore:
    """Resolves references to SchemaNodes and caches them by canonical identity.

    Also owns the map from node identity to the type generated for it.
    Entries live for the lifetime of the store and are never evicted.
    """

    def __init__(self, fetcher: Optional[Fetcher] = None):
        self.fetcher = fetcher if fetcher is not None else DefaultFetcher()
        self._documents: Dict[str, Any] = {}
        self._nodes: Dict[str, SchemaNode] = {}
        self._types: Dict[str, Any] = {}
        # resource URI ($id or document URI) -> (document URI, pointer)
        self._resources: Dict[str, Tuple[str, str]] = {}
        # (resource URI, anchor name) -> (document URI, pointer)
        self._anchors: Dict[Tuple[str, str], Tuple[str, str]] = {}
        self._loading: Set[str] = set()
        self.fetch_count: Dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._nodes)

    # Documents

    def add_document(self, uri: str, content: Any) -> SchemaNode:
        """Register an already parsed document and return its root node.

        Raises:
            ValueError: If a different document is already registered under uri
        """
        doc_uri = normalize_uri(urldefrag(uri)[0])
        if doc_uri in self._documents:
            if self._documents[doc_uri] != content:
                raise ValueError(f"A different document is already registered as {doc_uri}")
        else:
            self._register_document(doc_uri, content)
        return self.node_at(doc_uri, "")

    def has_document(self, uri: str) -> bool:
        return normalize_uri(urldefrag(uri)[0]) in self._documents

    def _register_document(self, doc_uri: str, content: Any):
        self._documents[doc_uri] = content
        self._resources.setdefault(doc_uri, (doc_uri, ""))
        self._index_resources(doc_uri, content, doc_uri, [])
        logger.debug("Registered schema document %s", doc_uri)

    def _index_resources(self, doc_uri: str, content: Any, base: str, tokens: List[str]):
        """Record embedded $id resources and $anchor names of a document."""
        if isinstance(content, dict):
            resource_base = base
            identifier = self._identifier_of(content, is_root=not tokens)
            if identifier is not None:
                absolute, fragment = urldefrag(urljoin(base, identifier))
                if absolute:
                    resource_base = normalize_uri(absolute)
                    self._resources.setdefault(resource_base, (doc_uri, join_pointer(tokens)))
                if fragment and not fragment.startswith("/"):
                    self._anchors.setdefault((resource_base, fragment), (doc_uri, join_pointer(tokens)))
            anchor = content.get("$anchor")
            if isinstance(anchor, str):
                self._anchors.setdefault((resource_base, anchor), (doc_uri, join_pointer(tokens)))
            for key, value in content.items():
                if key in _DATA_KEYWORDS:
                    continue
                if key in ("properties", "definitions", "$defs", "patternProperties"):
                    if isinstance(value, dict):
                        for name, sub in value.items():
                            self._index_resources(doc_uri, sub, resource_base, tokens + [key, name])
                    continue
                self._index_resources(doc_uri, value, resource_base, tokens + [key])
        elif isinstance(content, list):
            for index, item in enumerate(content):
                self._index_resources(doc_uri, item, base, tokens + [str(index)])

    @staticmethod
    def _identifier_of(content: Dict[str, Any], is_root: bool) -> Optional[str]:
        identifier = content.get("$id")
        if not isinstance(identifier, str) and is_root:
            identifier = content.get("id")
        return identifier if isinstance(identifier, str) and identifier else None

    def _load_document(self, doc_uri: str, referrer: Optional[str] = None) -> Any:
        """Fetch and parse a document once.

        Raises:
            CyclicLoadError: If the document is already being loaded
            UnresolvableReferenceError: If it cannot be fetched or parsed
        """
        if doc_uri in self._documents:
            return self._documents[doc_uri]

        if doc_uri in self._loading:
            raise CyclicLoadError(
                f"Re-entrant load of schema document {doc_uri}", location=referrer or doc_uri
            )

        self._loading.add(doc_uri)
        try:
            logger.debug("Fetching schema document %s", doc_uri)
            self.fetch_count[doc_uri] = self.fetch_count.get(doc_uri, 0) + 1
            try:
                raw = self.fetcher.fetch(doc_uri)
            except NotFoundError as e:
                raise UnresolvableReferenceError(
                    f"Cannot fetch schema {doc_uri}: {e.reason}", location=referrer or doc_uri
                ) from e

            try:
                content = json.loads(raw)
            except (UnicodeDecodeError, json.JSONDecodeError) as e:
                raise UnresolvableReferenceError(
                    f"Invalid JSON in schema {doc_uri}: {e}", location=referrer or doc_uri
                ) from e

            # The fetcher may have registered the document itself
            if doc_uri not in self._documents:
                self._register_document(doc_uri, content)
            return self._documents[doc_uri]
        finally:
            self._loading.discard(doc_uri)

    # Nodes

    def node_at(self, doc_uri: str, pointer: str) -> SchemaNode:
        """The node at ``pointer`` inside a loaded document (memoized).

        Raises:
            UnresolvableReferenceError: If the pointer does not exist
        """
        key = f"{doc_uri}#{pointer}"
        node = self._nodes.get(key)
        if node is not None:
            return node

        document = self._load_document(doc_uri)
        tokens = split_pointer(pointer)
        try:
            content = walk_pointer(document, tokens)
        except KeyError as e:
            raise UnresolvableReferenceError(
                f"JSON pointer '{pointer}' cannot be resolved in {doc_uri}: {e.args[0]}",
                location=key,
            ) from e

        if tokens:
            parent = self.node_at(doc_uri, join_pointer(tokens[:-1]))
            base_uri = parent.base_uri
        else:
            parent = None
            base_uri = doc_uri

        if isinstance(content, dict):
            identifier = self._identifier_of(content, is_root=not tokens)
            if identifier is not None:
                absolute = urldefrag(urljoin(base_uri, identifier))[0]
                if absolute:
                    base_uri = normalize_uri(absolute)

        node = SchemaNode(self, doc_uri, pointer, content, base_uri, parent)
        self._nodes[key] = node
        return node

    def resolve(self, uri: str, base: Optional[str] = None, referrer: Optional[str] = None) -> SchemaNode:
        """Resolve a (possibly relative) reference to a SchemaNode.

        Args:
            uri: Reference, e.g. ``#/definitions/a``, ``b.json#/c`` or an absolute URI
            base: Base URI relative references are resolved against
            referrer: Location reported in errors (the node holding the $ref)

        Returns:
            The cached node for the reference's canonical identity

        Raises:
            UnresolvableReferenceError: If the target cannot be fetched, parsed or found
            CyclicLoadError: If resolution re-enters a document being loaded
        """
        absolute = urljoin(base, uri) if base else uri
        doc_part, fragment = urldefrag(absolute)
        if not doc_part and base:
            doc_part = urldefrag(base)[0]
        resource = normalize_uri(doc_part)

        if resource not in self._resources:
            self._load_document(resource, referrer=referrer)
        doc_uri, prefix = self._resources.get(resource, (resource, ""))

        fragment = unquote(fragment)
        if not fragment:
            pointer = prefix
        elif fragment.startswith("/"):
            pointer = prefix + join_pointer(split_pointer(fragment))
        else:
            target = self._anchors.get((resource, fragment))
            if target is None:
                raise UnresolvableReferenceError(
                    f"Anchor '#{fragment}' not found in {resource}", location=referrer or absolute
                )
            doc_uri, pointer = target

        node = self.node_at(doc_uri, pointer)
        return node

    def resolve_ref(self, node: SchemaNode) -> SchemaNode:
        """Follow the $ref of ``node`` (repeatedly, for ref-to-ref chains).

        Raises:
            UnresolvableReferenceError: For dangling or circular ref chains
        """
        seen = {node.uri}
        current = node
        while current.ref() is not None:
            target = self.resolve(current.ref(), base=current.base_uri, referrer=current.uri)
            if target.uri in seen:
                raise UnresolvableReferenceError(
                    f"Circular $ref chain through {target.uri}", location=node.uri
                )
            seen.add(target.uri)
            current = target
        return current

    # Generated types

    def get_type(self, node: SchemaNode) -> Any:
        """The type generated (or being generated) for a node, if any."""
        return self._types.get(node.uri)

    def register_type(self, node: SchemaNode, type_ref: Any) -> Any:
        """Remember the type generated for a node; the first registration wins."""
        existing = self._types.get(node.uri)
        if existing is not None:
            return existing
        self._types[node.uri] = type_ref
        return type_ref

    def replace_types(self, mapping: Dict[Any, Any]):
        """Redirect stored types through ``mapping`` (used when collapsing duplicates)."""
        for key, value in list(self._types.items()):
            self._types[key] = replace_type(value, mapping)
