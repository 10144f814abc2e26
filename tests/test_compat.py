"""Tests for type equivalence, assignability and duplicate detection."""

from __future__ import annotations

from schema_typegen.codegen.core.compat import TypeCompatibility
from schema_typegen.codegen.core.model import (
    ANY_TYPE,
    ArrayType,
    Field,
    GeneratedType,
    MapType,
    PrimitiveKind,
    PrimitiveType,
    TypeKind,
)

STRING = PrimitiveType(PrimitiveKind.STRING)
INTEGER = PrimitiveType(PrimitiveKind.INTEGER)
LONG = PrimitiveType(PrimitiveKind.LONG)
DOUBLE = PrimitiveType(PrimitiveKind.DOUBLE)

compat = TypeCompatibility()


def make_type(name, *fields, base_name=None, namespace="models"):
    gtype = GeneratedType(name, namespace=namespace, base_name=base_name)
    for field_name, field_type in fields:
        gtype.add_field(Field(name=field_name, json_name=field_name, type=field_type))
    return gtype


def linked_list(name):
    node = make_type(name, ("value", STRING))
    node.add_field(Field(name="next", json_name="next", type=node))
    return node


def test_primitive_and_container_equivalence() -> None:
    assert compat.equivalent(STRING, PrimitiveType(PrimitiveKind.STRING))
    assert not compat.equivalent(STRING, INTEGER)
    assert compat.equivalent(ArrayType(STRING), ArrayType(STRING))
    assert not compat.equivalent(ArrayType(STRING), ArrayType(STRING, unique=True))
    assert compat.equivalent(MapType(INTEGER), MapType(INTEGER))
    assert not compat.equivalent(MapType(INTEGER), ArrayType(INTEGER))


def test_structural_equivalence_of_generated_types() -> None:
    a = make_type("Point", ("x", DOUBLE), ("y", DOUBLE))
    b = make_type("Point1", ("x", DOUBLE), ("y", DOUBLE))
    c = make_type("Point2", ("y", DOUBLE), ("x", DOUBLE))

    assert compat.equivalent(a, b)
    assert not compat.equivalent(a, c)


def test_field_details_break_equivalence() -> None:
    a = make_type("A", ("x", STRING))
    b = make_type("B", ("x", STRING))
    b.fields[0].required = True
    assert not compat.equivalent(a, b)

    c = make_type("C", ("x", STRING))
    c.fields[0].constraints.max_length = 3
    assert not compat.equivalent(a, c)


def test_recursive_types_compare_without_looping() -> None:
    assert compat.equivalent(linked_list("Node"), linked_list("Node1"))

    different = make_type("Node2", ("value", INTEGER))
    different.add_field(Field(name="next", json_name="next", type=different))
    assert not compat.equivalent(linked_list("Node"), different)


def test_enum_equivalence_uses_members() -> None:
    def enum(name, *values):
        gtype = GeneratedType(name, kind=TypeKind.ENUM)
        gtype.enum_value_type = STRING
        for value in values:
            gtype.add_enum_member(value.upper(), value)
        return gtype

    assert compat.equivalent(enum("Color", "red", "blue"), enum("Color1", "red", "blue"))
    assert not compat.equivalent(enum("Color", "red"), enum("Color1", "red", "blue"))


def test_assignability() -> None:
    assert compat.is_assignable(INTEGER, LONG)
    assert not compat.is_assignable(LONG, INTEGER)
    assert not compat.is_assignable(INTEGER, DOUBLE)
    assert compat.is_assignable(STRING, ANY_TYPE)
    assert compat.is_assignable(ArrayType(INTEGER), ArrayType(LONG))

    base = make_type("Base", ("id", STRING))
    derived = make_type("Derived")
    derived.supertype = base
    assert compat.is_assignable(derived, base)
    assert not compat.is_assignable(base, derived)
    assert compat.is_subtype(derived, derived)


def test_find_duplicates_groups_by_requested_name() -> None:
    first = make_type("Address", ("street", STRING))
    second = make_type("Address1", ("street", STRING), base_name="Address")
    other = make_type("Location", ("street", STRING))
    shaped = make_type("Address2", ("zip", STRING), base_name="Address")

    duplicates = compat.find_duplicates([first, second, other, shaped])

    assert duplicates == {second: first}


def test_find_duplicates_keeps_explicit_names_and_namespaces_apart() -> None:
    first = make_type("Item", ("id", STRING))
    explicit = make_type("Item1", ("id", STRING), base_name="Item")
    explicit.explicit_name = True
    elsewhere = make_type("Item", ("id", STRING), namespace="other")

    assert compat.find_duplicates([first, explicit, elsewhere]) == {}
