"""Tests for primitive type selection, arrays and enums."""

from __future__ import annotations

import pytest

from schema_typegen.codegen.core.model import (
    ANY_TYPE,
    ArrayType,
    GeneratedType,
    PrimitiveKind,
    PrimitiveType,
)


@pytest.fixture
def field_of(generate):
    """Generate an object with one property ``value``; return that field."""

    def run(property_schema, **overrides):
        generator, root = generate(
            {"type": "object", "properties": {"value": property_schema}}, **overrides
        )
        return generator, root.get_field("value")

    return run


def kind_of(field_of, property_schema, **overrides):
    _, fld = field_of(property_schema, **overrides)
    return fld.type.kind


@pytest.mark.parametrize(
    ("schema", "kind"),
    [
        ({"type": "string"}, PrimitiveKind.STRING),
        ({"type": "boolean"}, PrimitiveKind.BOOLEAN),
        ({"type": "integer"}, PrimitiveKind.INTEGER),
        ({"type": "number"}, PrimitiveKind.DOUBLE),
        ({"type": "null"}, PrimitiveKind.NULL),
        ({}, PrimitiveKind.ANY),
        ({"type": "string", "format": "date-time"}, PrimitiveKind.DATE_TIME),
        ({"type": "string", "format": "date"}, PrimitiveKind.DATE),
        ({"type": "string", "format": "time"}, PrimitiveKind.TIME),
        ({"type": "string", "format": "uuid"}, PrimitiveKind.UUID),
        ({"type": "string", "format": "uri"}, PrimitiveKind.URI),
        ({"type": "string", "format": "regex"}, PrimitiveKind.REGEX),
        ({"type": "string", "format": "email"}, PrimitiveKind.STRING),
        ({"type": "string", "format": "made-up"}, PrimitiveKind.STRING),
        ({"type": "integer", "format": "int64"}, PrimitiveKind.LONG),
        ({"type": "integer", "format": "utc-millisec"}, PrimitiveKind.LONG),
        ({"type": "number", "format": "float"}, PrimitiveKind.FLOAT),
        ({"type": "integer", "maximum": 2**40}, PrimitiveKind.LONG),
        ({"type": "integer", "minimum": -(2**31) + 1}, PrimitiveKind.INTEGER),
        ({"type": "string", "contentEncoding": "base64"}, PrimitiveKind.BYTES),
        ({"type": "string", "media": {"binaryEncoding": "base64"}}, PrimitiveKind.BYTES),
        ({"type": ["null", "integer"]}, PrimitiveKind.INTEGER),
    ],
)
def test_primitive_selection(field_of, schema, kind) -> None:
    assert kind_of(field_of, schema) == kind


def test_numeric_representations_follow_config(field_of) -> None:
    assert kind_of(field_of, {"type": "integer"}, use_long_integers=True) == PrimitiveKind.LONG
    assert kind_of(field_of, {"type": "integer"}, use_big_integers=True) == PrimitiveKind.BIG_INTEGER
    assert kind_of(field_of, {"type": "number"}, use_double_numbers=False) == PrimitiveKind.FLOAT
    assert kind_of(field_of, {"type": "number"}, use_big_decimals=True) == PrimitiveKind.DECIMAL


def test_temporal_formats_can_be_disabled(field_of) -> None:
    schema = {"type": "string", "format": "date-time"}
    assert kind_of(field_of, schema, format_date_times=False) == PrimitiveKind.STRING
    assert kind_of(field_of, {"type": "string", "format": "date"}, format_dates=False) == PrimitiveKind.STRING


def test_format_mapping_overrides_builtin_handling(field_of) -> None:
    schema = {"type": "string", "format": "email"}
    assert kind_of(field_of, schema, format_type_mapping={"email": "uri"}) == PrimitiveKind.URI


def test_unknown_format_mapping_target_warns(field_of) -> None:
    generator, fld = field_of(
        {"type": "string", "format": "email"}, format_type_mapping={"email": "nonsense"}
    )

    assert fld.type.kind == PrimitiveKind.STRING
    assert any("Unknown type 'nonsense'" in w for w in generator.warnings)


def test_nullable_type_list(field_of) -> None:
    _, fld = field_of({"type": ["string", "null"]})
    assert fld.type.kind == PrimitiveKind.STRING
    assert fld.nullable


def test_false_schema_warns_and_uses_any(field_of) -> None:
    generator, fld = field_of(False)
    assert fld.type is ANY_TYPE
    assert any("accepts no value" in w for w in generator.warnings)


def test_bare_properties_make_an_object(field_of) -> None:
    _, fld = field_of({"properties": {"x": {"type": "string"}}})
    assert isinstance(fld.type, GeneratedType)
    assert fld.type.name == "Value"


# Arrays


def test_array_without_items_holds_any(field_of) -> None:
    _, fld = field_of({"type": "array"})
    assert fld.type == ArrayType(ANY_TYPE)


def test_unique_items_make_a_set(field_of) -> None:
    _, fld = field_of({"type": "array", "items": {"type": "string"}, "uniqueItems": True})
    assert fld.type == ArrayType(PrimitiveType(PrimitiveKind.STRING), unique=True)


def test_uniform_tuple_items_collapse(field_of) -> None:
    _, fld = field_of({"type": "array", "items": [{"type": "string"}, {"type": "string"}]})
    assert fld.type == ArrayType(PrimitiveType(PrimitiveKind.STRING))


def test_mixed_tuple_items_warn(field_of) -> None:
    generator, fld = field_of({"type": "array", "items": [{"type": "string"}, {"type": "integer"}]})
    assert fld.type == ArrayType(ANY_TYPE)
    assert any("Tuple 'items'" in w for w in generator.warnings)


def test_nested_arrays(field_of) -> None:
    _, fld = field_of({"type": "array", "items": {"type": "array", "items": {"type": "integer"}}})
    assert fld.type == ArrayType(ArrayType(PrimitiveType(PrimitiveKind.INTEGER)))


def test_array_item_types_are_singular(generate) -> None:
    schema = {
        "type": "object",
        "properties": {
            "tags": {"type": "array", "items": {"type": "object", "properties": {"v": {"type": "string"}}}},
            "categories": {"type": "array", "items": {"type": "object"}},
        },
    }
    _, root = generate(schema)

    assert root.get_field("tags").type.element.name == "Tag"
    assert root.get_field("categories").type.element.name == "Category"


def test_root_array_names_its_element(generate) -> None:
    schema = {
        "type": "array",
        "items": {"type": "object", "properties": {"a": {"type": "string"}}},
    }
    generator, root = generate(schema, name="Items")

    assert isinstance(root, ArrayType)
    assert root.element.name == "Item"
    assert generator.roots["Items"] is root


# Enums


def test_enum_member_names_are_disambiguated(field_of) -> None:
    _, fld = field_of({"enum": ["a", "A", "a-"]})
    enum = fld.type

    assert enum.is_enum
    assert enum.name == "Value"
    assert [(m.name, m.value) for m in enum.enum_members] == [("A", "a"), ("A_1", "A"), ("A_2", "a-")]
    assert enum.enum_value_type == PrimitiveType(PrimitiveKind.STRING)


def test_integer_enum_members(field_of) -> None:
    _, fld = field_of({"enum": [1, 2]})

    assert [m.name for m in fld.type.enum_members] == ["_1", "_2"]
    assert fld.type.enum_value_type == PrimitiveType(PrimitiveKind.INTEGER)


def test_boolean_and_empty_string_members(field_of) -> None:
    _, flags = field_of({"enum": [True, False]})
    _, blank = field_of({"enum": ["", "x"]})

    assert [m.name for m in flags.type.enum_members] == ["TRUE", "FALSE"]
    assert [m.name for m in blank.type.enum_members] == ["EMPTY", "X"]


def test_explicit_enum_names(field_of) -> None:
    _, fld = field_of({"enum": [1, 2], "x-enum-names": ["one", "two"]})
    assert [m.name for m in fld.type.enum_members] == ["ONE", "TWO"]


def test_mismatched_enum_names_warn(field_of) -> None:
    generator, fld = field_of({"enum": [1, 2], "x-enum-names": ["one"]})

    assert [m.name for m in fld.type.enum_members] == ["_1", "_2"]
    assert any("x-enum-names" in w for w in generator.warnings)


def test_null_enum_value_makes_enum_nullable(field_of) -> None:
    _, fld = field_of({"enum": ["x", None]})

    assert fld.type.nullable
    assert [m.value for m in fld.type.enum_members] == ["x"]
    assert fld.nullable


def test_duplicate_enum_values_warn(field_of) -> None:
    generator, fld = field_of({"enum": ["x", "x", 1, True]})

    assert [m.value for m in fld.type.enum_members] == ["x", 1, True]
    assert any("Duplicate enum value 'x'" in w for w in generator.warnings)


def test_empty_enum_warns(field_of) -> None:
    generator, fld = field_of({"enum": []})

    assert fld.type is ANY_TYPE
    assert any("non-empty list" in w for w in generator.warnings)


def test_shared_enum_definition_is_one_type(generate) -> None:
    schema = {
        "type": "object",
        "definitions": {"color": {"enum": ["red", "green"]}},
        "properties": {
            "fg": {"$ref": "#/definitions/color"},
            "bg": {"$ref": "#/definitions/color"},
        },
    }
    generator, root = generate(schema)

    assert root.get_field("fg").type is root.get_field("bg").type
    assert root.get_field("fg").type.name == "Color"
    assert len([t for t in generator.model.all_types() if t.is_enum]) == 1
