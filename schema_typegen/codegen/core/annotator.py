"""
Annotator capability contract.

An annotator turns facts about generated types and fields (required, default,
format, validation bounds) into serialization markup for a particular target
library. The core stores the returned markup on the model and never
interprets it.
"""

from abc import ABC
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .model import (
    NO_DEFAULT,
    Constraints,
    EnumMember,
    ExtensionPoint,
    Field,
    GeneratedType,
)


@dataclass(frozen=True)
class Markup:
    """One opaque annotation produced by an annotator."""

    name: str
    arguments: Dict[str, Any] = field(default_factory=dict)
    style: str = ""

    def get(self, key: str, default: Any = None) -> Any:
        return self.arguments.get(key, default)


@dataclass
class FieldMetadata:
    """Structured facts about a field handed to the annotator."""

    json_name: str
    required: bool
    nullable: bool = False
    default: Any = NO_DEFAULT
    format: Optional[str] = None
    constraints: Constraints = field(default_factory=Constraints)

    @property
    def has_default(self) -> bool:
        return self.default is not NO_DEFAULT

    @classmethod
    def for_field(cls, target: Field, format_name: Optional[str] = None) -> "FieldMetadata":
        return cls(
            json_name=target.json_name,
            required=target.required,
            nullable=target.nullable,
            default=target.default,
            format=format_name,
            constraints=target.constraints,
        )


class Annotator(ABC):
    """Base annotator: every hook is a no-op returning no markup.

    Subclasses override the hooks they need.
    """

    style = "none"

    def __init__(self, config: Any = None):
        self.config = config

    def annotate_type(self, gtype: GeneratedType, node: Any) -> List[Markup]:
        """Markup for a finished object or enum type."""
        return []

    def annotate_field(self, target: Field, metadata: FieldMetadata) -> List[Markup]:
        """Markup for a field once all property rules have run."""
        return []

    def annotate_enum_member(self, gtype: GeneratedType, member: EnumMember) -> List[Markup]:
        """Markup for one enum constant."""
        return []

    def annotate_extension_point(self, gtype: GeneratedType, extension: ExtensionPoint) -> List[Markup]:
        """Markup for the additional-properties slot of an object type."""
        return []

    def supports_additional_properties(self) -> bool:
        """Whether open/typed extension points can be represented."""
        return True


class NoopAnnotator(Annotator):
    """Annotator that attaches nothing."""

    style = "none"


class CompositeAnnotator(Annotator):
    """Runs several annotators and concatenates their markup."""

    style = "composite"

    def __init__(self, *annotators: Annotator):
        super().__init__(annotators[0].config if annotators else None)
        self.annotators = list(annotators)

    def annotate_type(self, gtype, node):
        return [m for a in self.annotators for m in a.annotate_type(gtype, node)]

    def annotate_field(self, target, metadata):
        return [m for a in self.annotators for m in a.annotate_field(target, metadata)]

    def annotate_enum_member(self, gtype, member):
        return [m for a in self.annotators for m in a.annotate_enum_member(gtype, member)]

    def annotate_extension_point(self, gtype, extension):
        return [m for a in self.annotators for m in a.annotate_extension_point(gtype, extension)]

    def supports_additional_properties(self) -> bool:
        return all(a.supports_additional_properties() for a in self.annotators)
