"""Tests for the annotator contract and annotator chaining."""

from __future__ import annotations

from schema_typegen.codegen import TypeGenerator, load_config
from schema_typegen.codegen.core.annotator import Annotator, CompositeAnnotator, Markup
from schema_typegen.codegen.core.model import ExtensionKind

SCHEMA = {
    "type": "object",
    "properties": {
        "name": {"type": "string"},
        "status": {"enum": ["active", "retired"]},
    },
    "additionalProperties": True,
}


class RecordingAnnotator(Annotator):
    """Tags every hook call with its own label."""

    def __init__(self, tag: str, extensions: bool = True):
        super().__init__()
        self.tag = tag
        self.extensions = extensions

    def annotate_type(self, gtype, node):
        return [Markup(f"{self.tag}:type", {"type": gtype.name})]

    def annotate_field(self, target, metadata):
        return [Markup(f"{self.tag}:field", {"json_name": metadata.json_name})]

    def annotate_enum_member(self, gtype, member):
        return [Markup(f"{self.tag}:member", {"value": member.value})]

    def annotate_extension_point(self, gtype, extension):
        return [Markup(f"{self.tag}:extension")]

    def supports_additional_properties(self) -> bool:
        return self.extensions


def names(markup):
    return [m.name for m in markup]


def build(*annotators):
    generator = TypeGenerator(
        config=load_config("pydantic"), annotator=CompositeAnnotator(*annotators)
    )
    return generator.generate(SCHEMA, name="Account")


def test_composite_chains_markup_in_order() -> None:
    account = build(RecordingAnnotator("first"), RecordingAnnotator("second"))
    status = account.get_field("status").type

    assert names(account.annotations) == ["first:type", "second:type"]
    assert names(status.annotations) == ["first:type", "second:type"]
    assert names(account.get_field("name").annotations) == ["first:field", "second:field"]
    assert [m.get("json_name") for m in account.get_field("status").annotations] == [
        "status",
        "status",
    ]
    for member in status.enum_members:
        assert names(member.annotations) == ["first:member", "second:member"]
        assert [m.get("value") for m in member.annotations] == [member.value, member.value]

    extension = account.extension_point
    assert extension.kind is ExtensionKind.OPEN
    assert names(extension.annotations) == ["first:extension", "second:extension"]


def test_additional_properties_need_every_annotator() -> None:
    account = build(RecordingAnnotator("first"), RecordingAnnotator("second", extensions=False))

    assert account.extension_point is None
    assert not CompositeAnnotator(
        RecordingAnnotator("a"), RecordingAnnotator("b", extensions=False)
    ).supports_additional_properties()
    assert CompositeAnnotator(RecordingAnnotator("a")).supports_additional_properties()


def test_sealed_types_are_kept_without_extension_support() -> None:
    generator = TypeGenerator(
        config=load_config("pydantic"),
        annotator=CompositeAnnotator(RecordingAnnotator("only", extensions=False)),
    )
    sealed = generator.generate({"type": "object", "additionalProperties": False}, name="Sealed")

    assert sealed.extension_point.kind is ExtensionKind.SEALED
    assert names(sealed.extension_point.annotations) == ["only:extension"]
