"""Tests for schema document loading and reference resolution."""

from __future__ import annotations

import pytest

from schema_typegen.codegen.core.errors import CyclicLoadError, UnresolvableReferenceError
from schema_typegen.codegen.core.schema import SchemaStore, normalize_uri
from schema_typegen.utils import MappingFetcher, NotFoundError

DOC = "file:///schemas/a.json"


@pytest.fixture
def store() -> SchemaStore:
    documents = {
        DOC: {
            "definitions": {
                "x": {"type": "string"},
                "a/b": {"type": "integer"},
                "a b": {"type": "boolean"},
                "inner": {"$id": "inner.json", "type": "object"},
                "named": {"$anchor": "thing", "type": "number"},
                "alias": {"$ref": "#/definitions/x"},
                "loop1": {"$ref": "#/definitions/loop2"},
                "loop2": {"$ref": "#/definitions/loop1"},
            }
        },
        "file:///schemas/other.json": {"definitions": {"y": {"type": "null"}}},
        "file:///schemas/broken.json": "{not json",
    }
    return SchemaStore(MappingFetcher(documents))


def test_same_identity_yields_same_node(store) -> None:
    first = store.resolve(f"{DOC}#/definitions/x")
    second = store.resolve("#/definitions/x", base=DOC)
    root = store.resolve(DOC)

    assert first is second
    assert root.child("definitions", "x") is first
    assert first.uri == f"{DOC}#/definitions/x"
    assert first.parent.parent is root


def test_dot_segments_are_normalized(store) -> None:
    direct = store.resolve(f"{DOC}#/definitions/x")
    dotted = store.resolve("file:///schemas/sub/../a.json#/definitions/x")
    assert dotted is direct


def test_normalize_uri_lowercases_scheme_and_host() -> None:
    assert normalize_uri("HTTP://Example.COM/a/./b/../c.json#frag") == "http://example.com/a/c.json"


def test_escaped_pointer_tokens(store) -> None:
    node = store.resolve(DOC).child("definitions", "a/b")
    assert node.pointer == "/definitions/a~1b"
    assert store.resolve("#/definitions/a~1b", base=DOC) is node
    assert store.resolve("#/definitions/a%20b", base=DOC).get("type") == "boolean"


def test_document_is_fetched_once(store) -> None:
    store.resolve(f"{DOC}#/definitions/x")
    store.resolve(f"{DOC}#/definitions/named")
    store.resolve("other.json#/definitions/y", base=DOC)

    assert store.fetch_count[DOC] == 1
    assert store.fetch_count["file:///schemas/other.json"] == 1


def test_relative_document_reference(store) -> None:
    node = store.resolve("other.json#/definitions/y", base=f"{DOC}#/definitions/x")
    assert node.document == "file:///schemas/other.json"
    assert node.get("type") == "null"


def test_embedded_id_is_addressable(store) -> None:
    store.resolve(DOC)
    node = store.resolve("file:///schemas/inner.json")

    assert node.document == DOC
    assert node.pointer == "/definitions/inner"
    assert node.base_uri == "file:///schemas/inner.json"


def test_anchor_resolves_to_declaring_node(store) -> None:
    node = store.resolve("#thing", base=DOC)
    assert node.pointer == "/definitions/named"


def test_unknown_anchor_raises(store) -> None:
    with pytest.raises(UnresolvableReferenceError, match="Anchor"):
        store.resolve("#nowhere", base=DOC)


def test_missing_document_raises(store) -> None:
    with pytest.raises(UnresolvableReferenceError, match="Cannot fetch"):
        store.resolve("file:///schemas/missing.json")


def test_bad_pointer_raises(store) -> None:
    with pytest.raises(UnresolvableReferenceError, match="cannot be resolved"):
        store.resolve(f"{DOC}#/definitions/nope")


def test_invalid_json_raises(store) -> None:
    with pytest.raises(UnresolvableReferenceError, match="Invalid JSON"):
        store.resolve("file:///schemas/broken.json")


def test_ref_chain_is_followed(store) -> None:
    alias = store.resolve("#/definitions/alias", base=DOC)
    assert store.resolve_ref(alias) is store.resolve("#/definitions/x", base=DOC)


def test_circular_ref_chain_raises(store) -> None:
    loop = store.resolve("#/definitions/loop1", base=DOC)
    with pytest.raises(UnresolvableReferenceError, match="Circular"):
        store.resolve_ref(loop)


class ReentrantFetcher:
    """Fetcher that asks its store for the document it is serving."""

    def __init__(self) -> None:
        self.store: SchemaStore | None = None

    def fetch(self, uri: str) -> bytes:
        self.store.resolve(uri)
        raise NotFoundError(uri)


def test_reentrant_load_raises_cyclic_load_error() -> None:
    fetcher = ReentrantFetcher()
    store = SchemaStore(fetcher)
    fetcher.store = store

    with pytest.raises(CyclicLoadError):
        store.resolve("file:///schemas/self.json")


def test_add_document_rejects_conflicting_content(store) -> None:
    store.add_document("file:///schemas/mem.json", {"type": "string"})
    assert store.add_document("file:///schemas/mem.json", {"type": "string"}).get("type") == "string"

    with pytest.raises(ValueError):
        store.add_document("file:///schemas/mem.json", {"type": "integer"})


def test_first_type_registration_wins(store) -> None:
    node = store.resolve(f"{DOC}#/definitions/x")
    assert store.get_type(node) is None

    first, second = object(), object()
    assert store.register_type(node, first) is first
    assert store.register_type(node, second) is first
    assert store.get_type(node) is first
