"""
Helpers shared by several rules.
"""

from typing import Optional, Tuple

from ...logging_config import get_logger
from ..core.errors import AmbiguousTypeError
from ..core.model import (
    ArrayType,
    Documentation,
    MapType,
    GeneratedType,
    Namespace,
    PrimitiveKind,
    PrimitiveType,
    TypeKind,
)
from ..core.schema import SchemaNode

logger = get_logger(__name__)

INT32_MAX = 2**31 - 1

PRIMITIVE_TYPE_NAMES = {"string", "integer", "number", "boolean", "null", "any"}


def declared_type(node: SchemaNode) -> Tuple[Optional[str], bool]:
    """The effective ``type`` keyword of a node and whether null is allowed.

    A list of types picks the first non-null entry.
    """
    value = node.get("type")
    if isinstance(value, list):
        names = [v for v in value if isinstance(v, str)]
        nullable = "null" in names
        non_null = [v for v in names if v != "null"]
        if non_null:
            return non_null[0], nullable
        return ("null" if nullable else None), nullable
    if isinstance(value, str):
        return value, value == "null"
    return None, False


def integer_type(config, node: Optional[SchemaNode] = None) -> PrimitiveType:
    """Primitive for ``type: integer`` under the configured representation."""
    if config.use_big_integers:
        return PrimitiveType(PrimitiveKind.BIG_INTEGER)
    if config.use_long_integers:
        return PrimitiveType(PrimitiveKind.LONG)
    if node is not None:
        # Bounds outside the 32-bit range need a wider type
        for keyword in ("minimum", "maximum", "exclusiveMinimum", "exclusiveMaximum"):
            bound = node.get(keyword)
            if isinstance(bound, (int, float)) and not isinstance(bound, bool):
                if abs(bound) > INT32_MAX:
                    return PrimitiveType(PrimitiveKind.LONG)
    return PrimitiveType(PrimitiveKind.INTEGER)


def number_type(config) -> PrimitiveType:
    """Primitive for ``type: number`` under the configured representation."""
    if config.use_big_decimals:
        return PrimitiveType(PrimitiveKind.DECIMAL)
    if config.use_double_numbers:
        return PrimitiveType(PrimitiveKind.DOUBLE)
    return PrimitiveType(PrimitiveKind.FLOAT)


def primitive_for(config, type_name: str, node: Optional[SchemaNode] = None) -> PrimitiveType:
    if type_name == "string":
        return PrimitiveType(PrimitiveKind.STRING)
    if type_name == "integer":
        return integer_type(config, node)
    if type_name == "number":
        return number_type(config)
    if type_name == "boolean":
        return PrimitiveType(PrimitiveKind.BOOLEAN)
    if type_name == "null":
        return PrimitiveType(PrimitiveKind.NULL)
    return PrimitiveType(PrimitiveKind.ANY)


def apply_documentation(ctx, name: str, node: SchemaNode, doc: Documentation) -> Documentation:
    """Run the title, description and comment rules into ``doc``."""
    for rule_name in ("title", "description", "comment"):
        ctx.apply(rule_name, name, node, doc)
    return doc


def create_generated_type(ctx, name: str, node: SchemaNode, namespace: Namespace,
                          kind: TypeKind) -> GeneratedType:
    """Create the type for ``node`` in the right namespace under the right name.

    A type with an explicit ``x-name`` that is already taken gets a numbered
    placeholder name; :func:`settle_explicit_name` decides after the type is
    built whether it is a duplicate of the existing one or a real conflict.
    """
    ns_name = ctx.naming.explicit_namespace(node)
    if ns_name:
        namespace = ctx.model.namespace(ns_name)

    class_name = ctx.naming.class_name(name, node)

    if ctx.naming.explicit_name(node):
        existing = namespace.get(class_name)
        if existing is None:
            return namespace.new_explicit_type(class_name, kind, source=node.uri)
        gtype = namespace.new_type(class_name, kind, source=node.uri)
        ctx.engine.explicit_claims[gtype] = existing
        logger.debug(
            "Explicit name %s is taken; building %s for comparison",
            existing.qualified_name,
            gtype.qualified_name,
        )
        return gtype

    return namespace.new_type(class_name, kind, source=node.uri)


def settle_explicit_name(ctx, gtype: GeneratedType):
    """Resolve a pending explicit-name claim once ``gtype`` is complete.

    Raises:
        AmbiguousTypeError: If the type holding the name is not equivalent
    """
    existing = ctx.engine.explicit_claims.pop(gtype, None)
    if existing is None:
        return
    if ctx.compat.equivalent(existing, gtype):
        logger.info(
            "Schema %s duplicates %s; reusing %s",
            gtype.source,
            existing.source,
            existing.qualified_name,
        )
        ctx.engine.duplicates[gtype] = existing
        return
    raise AmbiguousTypeError(
        f"Type name '{existing.qualified_name}' is requested by {existing.source} "
        f"and by {gtype.source} for different types",
        location=gtype.source,
    )


def is_required(property_name: str, node: SchemaNode, object_node: Optional[SchemaNode]) -> bool:
    """Whether a property is required by its object (or by draft-03 ``required: true``)."""
    if object_node is not None:
        required = object_node.get("required")
        if isinstance(required, list) and property_name in required:
            return True
    return node.get("required") is True


def innermost_type(type_ref):
    """Element or value type of (nested) arrays and maps, else the type itself."""
    if isinstance(type_ref, ArrayType):
        return innermost_type(type_ref.element)
    if isinstance(type_ref, MapType):
        return innermost_type(type_ref.value)
    return type_ref
