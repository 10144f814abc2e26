"""
Rule catalogue.

Importing this package registers every rule in
:data:`schema_typegen.codegen.core.engine.default_registry`.
"""

from . import (  # noqa: F401
    accessor_rules,
    array_rule,
    doc_rules,
    enum_rule,
    object_rule,
    property_rules,
    schema_rule,
    type_rule,
)
from .property_rules import coerce_default

RULE_NAMES = (
    "schema", "type", "format", "media",
    "object", "extends", "properties", "property", "required_array",
    "additional_properties", "constructors", "builder", "dynamic_properties",
    "array", "enum",
    "required", "not_required", "default",
    "minimum_maximum", "multiple_of", "min_items_max_items",
    "min_length_max_length", "digits", "pattern", "valid",
    "title", "description", "comment", "name",
)

__all__ = ["RULE_NAMES", "coerce_default"]
