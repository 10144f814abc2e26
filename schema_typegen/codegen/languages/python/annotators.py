"""
Annotators for Python output.

Each annotator turns field facts into the keyword arguments its target
library understands: ``pydantic.Field(...)`` arguments and ``ConfigDict``
settings, or ``dataclasses.field(metadata=...)`` entries.
"""

from typing import Any, Dict, List

from ...core.annotator import Annotator, FieldMetadata, Markup
from ...core.model import ExtensionKind, ExtensionPoint, Field, GeneratedType


def _constraint_arguments(metadata: FieldMetadata) -> Dict[str, Any]:
    """Validation bounds as pydantic-style keyword arguments."""
    constraints = metadata.constraints
    arguments: Dict[str, Any] = {}

    if constraints.minimum is not None:
        key = "gt" if constraints.exclusive_minimum else "ge"
        arguments[key] = constraints.minimum
    if constraints.maximum is not None:
        key = "lt" if constraints.exclusive_maximum else "le"
        arguments[key] = constraints.maximum
    if constraints.multiple_of is not None:
        arguments["multiple_of"] = constraints.multiple_of

    # pydantic uses the same length keywords for strings and collections
    min_length = constraints.min_length if constraints.min_length is not None else constraints.min_items
    max_length = constraints.max_length if constraints.max_length is not None else constraints.max_items
    if min_length is not None:
        arguments["min_length"] = min_length
    if max_length is not None:
        arguments["max_length"] = max_length

    if constraints.pattern is not None:
        arguments["pattern"] = constraints.pattern
    if constraints.digits is not None:
        digits = constraints.digits
        arguments["max_digits"] = digits.integer_digits + digits.fraction_digits
        arguments["decimal_places"] = digits.fraction_digits
    return arguments


class PydanticAnnotator(Annotator):
    """Markup for pydantic v2 models."""

    style = "pydantic"

    @property
    def _custom(self) -> Dict[str, Any]:
        return self.config.custom if self.config is not None else {}

    def annotate_type(self, gtype: GeneratedType, node) -> List[Markup]:
        if not gtype.is_object or not self._custom.get("pydantic_config_dict", True):
            return []
        arguments: Dict[str, Any] = {}
        if self._custom.get("pydantic_use_alias", True):
            arguments["populate_by_name"] = True
        extension = gtype.extension_point
        if extension is not None:
            arguments["extra"] = "forbid" if extension.is_sealed else "allow"
        if not arguments:
            return []
        return [Markup("model_config", arguments, self.style)]

    def annotate_field(self, target: Field, metadata: FieldMetadata) -> List[Markup]:
        arguments: Dict[str, Any] = {}
        if self._custom.get("pydantic_use_alias", True) and metadata.json_name != target.name:
            arguments["alias"] = metadata.json_name
        arguments.update(_constraint_arguments(metadata))
        if not arguments:
            return []
        return [Markup("Field", arguments, self.style)]

    def annotate_extension_point(self, gtype: GeneratedType, extension: ExtensionPoint) -> List[Markup]:
        if extension.kind == ExtensionKind.TYPED:
            return [Markup("typed_extra", {"attribute": "__pydantic_extra__"}, self.style)]
        return []


class DataclassAnnotator(Annotator):
    """Markup for standard library dataclasses.

    The JSON name and the validation bounds are kept in field metadata so
    serializers and validators can find them.
    """

    style = "dataclass"

    def annotate_type(self, gtype: GeneratedType, node) -> List[Markup]:
        if not gtype.is_object:
            return []
        custom = self.config.custom if self.config is not None else {}
        arguments = {
            "kw_only": custom.get("dataclass_kw_only", True),
            "slots": custom.get("dataclass_slots", False),
            "frozen": custom.get("dataclass_frozen", False),
        }
        return [Markup("dataclass", arguments, self.style)]

    def annotate_field(self, target: Field, metadata: FieldMetadata) -> List[Markup]:
        arguments: Dict[str, Any] = {"json_name": metadata.json_name}
        if metadata.format is not None:
            arguments["format"] = metadata.format
        arguments.update(_constraint_arguments(metadata))
        return [Markup("metadata", arguments, self.style)]

    def annotate_extension_point(self, gtype: GeneratedType, extension: ExtensionPoint) -> List[Markup]:
        if extension.is_sealed:
            return []
        return [Markup("metadata", {"additional_properties": True}, self.style)]
