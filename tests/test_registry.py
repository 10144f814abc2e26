"""Tests for the renderer and annotator registries."""

from __future__ import annotations

import pytest

from schema_typegen.codegen import (
    get_annotator,
    get_renderer,
    is_language_supported,
    list_annotation_styles,
    list_supported_languages,
)
from schema_typegen.codegen.core.annotator import Annotator, NoopAnnotator
from schema_typegen.codegen.core.engine import RegistryError
from schema_typegen.codegen.languages.python import (
    DataclassAnnotator,
    PydanticAnnotator,
    PythonGenerator,
)
from schema_typegen.codegen.registry import ComponentRegistry


def test_builtin_components_are_registered() -> None:
    assert list_supported_languages() == ["python"]
    assert list_annotation_styles() == ["dataclass", "none", "pydantic"]
    assert is_language_supported("PY")
    assert not is_language_supported("cobol")


def test_lookup_by_alias() -> None:
    assert isinstance(get_annotator("pydantic2"), PydanticAnnotator)
    assert isinstance(get_annotator("dataclasses"), DataclassAnnotator)
    assert isinstance(get_annotator("noop"), NoopAnnotator)
    assert isinstance(get_renderer("py"), PythonGenerator)


def test_annotator_receives_config_for_its_style() -> None:
    annotator = get_annotator("dataclass")
    assert annotator.config.annotation_style == "dataclass"

    configured = get_annotator("pydantic", {"custom": {"pydantic_use_alias": False}})
    assert configured.config.custom["pydantic_use_alias"] is False


def test_unknown_names_raise() -> None:
    with pytest.raises(RegistryError, match="Available: python"):
        get_renderer("cobol")
    with pytest.raises(RegistryError, match="No annotator registered"):
        get_annotator("xml")


class OtherAnnotator(Annotator):
    style = "other"


def test_component_registry_rules() -> None:
    registry = ComponentRegistry("annotator", Annotator)
    registry.register("one", NoopAnnotator, aliases=["uno", "ONE"])

    assert registry.resolve_name("UNO") == "one"
    assert registry.get_aliases("one") == ["uno"]

    # Re-registering without replace keeps the first class
    registry.register("one", OtherAnnotator)
    assert registry.get_class("one") is NoopAnnotator

    with pytest.raises(RegistryError, match="conflicts"):
        registry.register("two", OtherAnnotator, aliases=["one"])
    with pytest.raises(RegistryError, match="already points"):
        registry.register("three", OtherAnnotator, aliases=["uno"])
    with pytest.raises(RegistryError, match="must inherit"):
        registry.register("bad", dict)

    registry.unregister("one")
    assert not registry.is_supported("uno")
