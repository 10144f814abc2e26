"""Tests for Python source rendering (dataclass and pydantic styles)."""

from __future__ import annotations

import ast
import sys
import types

import pytest

from schema_typegen.codegen import generate_code_from_schema, get_renderer
from schema_typegen.codegen.languages.python import PythonGenerator, create_python_generator

TREE = {
    "type": "object",
    "description": "A node with children.",
    "properties": {
        "name": {"type": "string"},
        "children": {"type": "array", "items": {"$ref": "#"}},
    },
    "required": ["name"],
}

PROFILE = {
    "type": "object",
    "properties": {
        "firstName": {"type": "string", "minLength": 1},
        "status": {"enum": ["on", "off"], "default": "off"},
        "nickname": {"type": ["string", "null"]},
        "born": {"type": "string", "format": "date"},
        "tags": {"type": "array", "items": {"type": "string"}, "uniqueItems": True},
    },
    "required": ["firstName"],
}


def render(generate, schema, name="Root", **overrides):
    generator, _ = generate(schema, name=name, **overrides)
    result = generator.render()
    assert result.success, result.error_message
    ast.parse(result.code)
    return result


def load_module(code, name, monkeypatch):
    """Execute generated code as an importable module."""
    module = types.ModuleType(name)
    monkeypatch.setitem(sys.modules, name, module)
    exec(compile(code, f"<{name}>", "exec"), module.__dict__)
    return module


def test_pydantic_tree(generate) -> None:
    result = render(generate, TREE, name="Tree")
    code = result.code

    assert code.startswith('"""Types generated from JSON Schema (Tree)."""')
    assert "from pydantic import BaseModel, ConfigDict, Field" in code
    assert "class Tree(BaseModel):" in code
    assert '    """A node with children."""' in code
    assert "    model_config = ConfigDict(populate_by_name=True, extra='allow')" in code
    assert "    name: str\n" in code
    assert "    children: list[Tree] = Field(default_factory=list)" in code
    assert "Tree.model_rebuild()" in code
    assert result.metadata["type_count"] == 1
    assert result.metadata["roots"] == ["Tree"]


def test_dataclass_tree(generate) -> None:
    code = render(generate, TREE, name="Tree", style="dataclass").code

    assert "from dataclasses import dataclass, field" in code
    assert "@dataclass(kw_only=True)\nclass Tree:" in code
    assert "    name: str = field(metadata={'json_name': 'name'})" in code
    assert (
        "    children: list[Tree] = field(default_factory=list, "
        "metadata={'json_name': 'children'})"
    ) in code
    assert (
        "    additional_properties: dict[str, Any] = field(default_factory=dict, "
        "metadata={'additional_properties': True})"
    ) in code


def test_dataclass_output_runs(generate, monkeypatch) -> None:
    code = render(generate, TREE, name="Tree", style="dataclass").code
    module = load_module(code, "generated_tree", monkeypatch)

    tree = module.Tree(name="root", children=[module.Tree(name="leaf")])
    assert tree.children[0].name == "leaf"
    assert tree.additional_properties == {}

    with pytest.raises(TypeError):
        module.Tree()


def test_pydantic_fields(generate) -> None:
    code = render(generate, PROFILE, name="Profile").code

    assert "class Status(str, Enum):" in code
    assert "    OFF = 'off'" in code
    assert code.index("class Status") < code.index("class Profile")
    assert "    first_name: str = Field(alias='firstName', min_length=1)" in code
    assert "    status: Status = Status.OFF" in code
    assert "    nickname: str | None = None" in code
    assert "    born: date | None = None" in code
    assert "    tags: set[str] = Field(default_factory=set)" in code
    assert "from datetime import date" in code
    assert "from enum import Enum" in code


def test_reserved_and_builtin_field_names(generate) -> None:
    schema = {
        "type": "object",
        "properties": {"class": {"type": "string"}, "id": {"type": "integer"}},
    }
    code = render(generate, schema, style="dataclass").code

    assert "    class_: str | None = field(default=None, metadata={'json_name': 'class'})" in code
    assert "    id_: int | None = field(default=None, metadata={'json_name': 'id'})" in code


def test_defaults_render_as_python_literals(generate) -> None:
    schema = {
        "type": "object",
        "properties": {
            "created": {"type": "string", "format": "date-time", "default": "2024-01-02T03:04:05"},
            "ratio": {"type": "number", "default": 0.5},
            "labels": {"type": "array", "items": {"type": "string"}, "default": ["a"]},
            "origin": {
                "type": "object",
                "properties": {"x": {"type": "integer"}},
                "default": {"x": 1},
            },
        },
    }
    code = render(generate, schema, style="dataclass", add_comments=False).code

    assert "datetime.fromisoformat('2024-01-02T03:04:05')" in code
    assert "ratio: float = field(default=0.5," in code
    assert "labels: list[str] = field(default_factory=lambda: ['a']," in code
    assert "origin: Origin = field(default_factory=lambda: Origin(x=1)," in code
    assert not code.startswith('"""')


def test_inheritance_orders_base_first(generate) -> None:
    schema = {
        "type": "object",
        "definitions": {"base": {"type": "object", "properties": {"id": {"type": "string"}}}},
        "extends": {"$ref": "#/definitions/base"},
        "properties": {"name": {"type": "string"}},
    }
    code = render(generate, schema, style="pydantic").code

    assert "class Base(BaseModel):" in code
    assert "class Root(Base):" in code
    assert code.index("class Base(") < code.index("class Root(")


def test_collapsed_types_render_once(generate) -> None:
    address = {"type": "object", "properties": {"street": {"type": "string"}}}
    schema = {
        "type": "object",
        "properties": {
            "billing": {"type": "object", "properties": {"address": address}},
            "shipping": {"type": "object", "properties": {"address": address}},
        },
    }
    code = render(generate, schema).code

    assert code.count("class Address(") == 1
    assert "Address1" not in code


def test_namespaces_share_one_module_with_unique_names(generate) -> None:
    schema = {
        "type": "object",
        "properties": {
            "a": {"x-name": "one.Item", "type": "object", "properties": {"p": {"type": "string"}}},
            "b": {"x-name": "two.Item", "type": "object", "properties": {"q": {"type": "string"}}},
        },
    }
    code = render(generate, schema).code

    assert "class Item(BaseModel):" in code
    assert "class Item1(BaseModel):" in code


def test_root_array_becomes_alias(generate) -> None:
    schema = {"type": "array", "items": {"type": "object", "properties": {"a": {"type": "string"}}}}
    code = render(generate, schema, name="Items").code

    assert "class Item(BaseModel):" in code
    assert "Items = list[Item]" in code


def test_sealed_and_typed_extension_points(generate) -> None:
    schema = {
        "type": "object",
        "properties": {
            "sealed": {"type": "object", "additionalProperties": False},
            "counts": {"type": "object", "additionalProperties": {"type": "integer"}},
        },
    }
    pydantic_code = render(generate, schema).code
    dataclass_code = render(generate, schema, style="dataclass").code

    assert "model_config = ConfigDict(populate_by_name=True, extra='forbid')" in pydantic_code
    assert "    __pydantic_extra__: dict[str, int] = Field(init=False)" in pydantic_code
    assert (
        "    additional_properties: dict[str, int] = field(default_factory=dict, "
        "metadata={'additional_properties': True})"
    ) in dataclass_code


def test_constructors_accessors_and_builders_run(generate, monkeypatch) -> None:
    code = render(
        generate,
        PROFILE,
        name="Profile",
        style="dataclass",
        include_constructors=True,
        constructors_required_properties_only=True,
        include_copy_constructor=True,
        include_dynamic_accessors=True,
        generate_builders=True,
    ).code

    assert "from dataclasses import dataclass, field, replace" in code
    assert "from typing import Any, ClassVar" in code
    assert "class ProfileBuilder:" in code

    module = load_module(code, "generated_profile", monkeypatch)

    profile = module.Profile.from_required(first_name="Ada")
    assert profile.status is module.Status.OFF
    assert profile.tags == set()

    clone = profile.copy()
    assert clone == profile and clone is not profile

    profile.set_property("firstName", "Grace")
    assert profile.get_property("firstName") == "Grace"
    assert profile.with_property("nickname", "G").nickname == "G"
    with pytest.raises(AttributeError):
        profile.get_property("unknown")

    built = module.ProfileBuilder().with_first_name("Linus").with_nickname("L").build()
    assert built.first_name == "Linus"
    assert built.nickname == "L"


def test_none_style_renders_plain_dataclasses(generate) -> None:
    code = render(generate, TREE, name="Tree", style="none").code

    assert "@dataclass(kw_only=True)\nclass Tree:" in code
    assert "    children: list[Tree] = field(default_factory=list)" in code
    assert "additional_properties" not in code


def test_validate_types_reports_weak_spots(generate) -> None:
    schema = {
        "type": "object",
        "properties": {
            "anything": {},
            "bag": {"type": "array"},
            "empty": {"type": "object", "additionalProperties": False},
        },
    }
    result = render(generate, schema)

    assert "Field Root.anything has no declared type" in result.warnings
    assert "Collection field Root.bag has no element type" in result.warnings
    assert "Type 'Empty' has no fields" in result.warnings


def test_renderer_lookup_and_factory() -> None:
    assert isinstance(get_renderer("py"), PythonGenerator)

    renderer = create_python_generator(style="pydantic")
    assert renderer.is_pydantic
    assert renderer.file_extension == ".py"


def test_generate_code_from_schema_facade() -> None:
    result = generate_code_from_schema(
        {"title": "Pet", "type": "object", "properties": {"name": {"type": "string"}}},
        style="dataclass",
    )
    assert result.success
    assert "class Pet:" in result.code

    failed = generate_code_from_schema(
        {"type": "object", "properties": {"x": {"$ref": "file:///nowhere/missing.json"}}}
    )
    assert not failed.success
    assert "missing.json" in failed.error_message
