"""Tests for identifier normalization and disambiguation."""

from __future__ import annotations

import pytest

from schema_typegen.codegen.core.config import GenerationConfig
from schema_typegen.codegen.core.naming import (
    NameHelper,
    NamingCase,
    UniqueNameScope,
    name_from_ref,
    singularize,
)
from schema_typegen.codegen.core.schema import SchemaStore
from schema_typegen.codegen.languages.python import create_python_sanitizer
from schema_typegen.utils import MappingFetcher


@pytest.fixture
def sanitizer():
    return create_python_sanitizer()


@pytest.mark.parametrize(
    ("raw", "case", "expected"),
    [
        ("userName", NamingCase.SNAKE_CASE, "user_name"),
        ("HTTPServer", NamingCase.SNAKE_CASE, "http_server"),
        ("postal-address", NamingCase.PASCAL_CASE, "PostalAddress"),
        ("first name", NamingCase.CAMEL_CASE, "firstName"),
        ("in progress", NamingCase.SCREAMING_SNAKE, "IN_PROGRESS"),
    ],
)
def test_sanitize_converts_case(sanitizer, raw, case, expected) -> None:
    assert sanitizer.sanitize_name(raw, case) == expected


def test_sanitize_escapes_reserved_words_and_builtins(sanitizer) -> None:
    assert sanitizer.sanitize_name("class") == "class_"
    assert sanitizer.sanitize_name("id") == "id_"
    assert sanitizer.sanitize_name("model_config") == "model_config_"


def test_sanitize_prefixes_leading_digit(sanitizer) -> None:
    assert sanitizer.sanitize_name("2fa") == "_2fa"


def test_sanitize_falls_back_when_nothing_is_left(sanitizer) -> None:
    assert sanitizer.sanitize_name("$$$", NamingCase.PASCAL_CASE, fallback="Type") == "Type"


def test_unique_scope_numbers_collisions_in_claim_order() -> None:
    scope = UniqueNameScope()
    assert [scope.claim("A") for _ in range(3)] == ["A", "A_1", "A_2"]


def test_unique_scope_skips_taken_suffixes() -> None:
    scope = UniqueNameScope(taken=["Item", "Item1"], separator="")
    assert scope.claim("Item") == "Item2"
    assert "Item2" in scope


@pytest.mark.parametrize(
    ("ref", "expected"),
    [
        ("#/definitions/postalAddress", "postalAddress"),
        ("schemas/person.schema.json", "person"),
        ("http://example.com/a.json#/properties/b~1c", "b/c"),
        ("#", "Root"),
    ],
)
def test_name_from_ref(ref, expected) -> None:
    assert name_from_ref(ref) == expected


@pytest.mark.parametrize(
    ("plural", "singular"),
    [
        ("items", "item"),
        ("children", "child"),
        ("categories", "category"),
        ("addresses", "address"),
        ("boxes", "box"),
        ("status", "status"),
    ],
)
def test_singularize(plural, singular) -> None:
    assert singularize(plural) == singular


def test_name_helper_prefers_explicit_name_then_title(sanitizer) -> None:
    store = SchemaStore(MappingFetcher({}))
    root = store.add_document(
        "file:///schemas/names.json",
        {
            "definitions": {
                "explicit": {"x-name": "acme.billing.invoice", "title": "Bill"},
                "titled": {"title": "shipping label"},
            }
        },
    )
    explicit = root.child("definitions", "explicit")
    titled = root.child("definitions", "titled")

    helper = NameHelper(sanitizer, GenerationConfig(use_title_as_class_name=True))
    assert helper.class_name("explicit", explicit) == "Invoice"
    assert helper.explicit_namespace(explicit) == "acme.billing"
    assert helper.class_name("titled", titled) == "ShippingLabel"

    plain = NameHelper(sanitizer, GenerationConfig())
    assert plain.class_name("titled", titled) == "Titled"


def test_name_helper_applies_prefix_and_suffix(sanitizer) -> None:
    helper = NameHelper(sanitizer, GenerationConfig(class_name_prefix="Api", class_name_suffix="Model"))
    assert helper.normalize_class_name("user") == "ApiUserModel"
