"""
Enum rule.
"""

from ...logging_config import get_logger
from ..core.engine import rule
from ..core.errors import UnsupportedSchemaConstructError
from ..core.model import (
    GeneratedType,
    PrimitiveKind,
    PrimitiveType,
    TypeKind,
)
from ..core.naming import UniqueNameScope
from .common import (
    apply_documentation,
    create_generated_type,
    declared_type,
    integer_type,
    number_type,
    primitive_for,
    settle_explicit_name,
)

logger = get_logger(__name__)


@rule("enum", produces_type=True)
def enum_rule(ctx, name, node, namespace):
    """Generated enum type for a node with ``enum``.

    Members follow declaration order. Names come from ``x-enum-names`` when
    given, else from the values; collisions get a numeric suffix. ``null``
    values produce no member and make the enum nullable.
    """
    existing = ctx.store.get_type(node)
    if isinstance(existing, GeneratedType):
        return existing

    values = node.get("enum")
    if not isinstance(values, list) or not values:
        raise UnsupportedSchemaConstructError(
            "'enum' must be a non-empty list", location=node.uri
        )

    gtype = create_generated_type(ctx, name, node, namespace, TypeKind.ENUM)
    ctx.store.register_type(node, gtype)

    apply_documentation(ctx, name, node, gtype.doc)
    gtype.enum_value_type = _value_type(ctx, node, values)

    names = _member_names(ctx, node, values)
    scope = UniqueNameScope()
    seen = []
    for index, value in enumerate(values):
        if value is None:
            gtype.nullable = True
            continue
        if isinstance(value, (dict, list)):
            ctx.unsupported(f"Enum value {value!r} of {gtype.name} is not a literal")
            continue
        if any(value == other and type(value) is type(other) for other in seen):
            ctx.unsupported(f"Duplicate enum value {value!r} in {gtype.name}")
            continue
        seen.append(value)

        raw_name = names[index] if names is not None else value
        member = gtype.add_enum_member(scope.claim(ctx.naming.enum_constant_name(raw_name)), value)
        member.annotations.extend(ctx.annotator.annotate_enum_member(gtype, member))

    _, nullable = declared_type(node)
    if nullable:
        gtype.nullable = True

    gtype.annotations.extend(ctx.annotator.annotate_type(gtype, node))
    gtype.finalize()
    settle_explicit_name(ctx, gtype)
    logger.debug("Enum %s with %d members", gtype.qualified_name, len(gtype.enum_members))
    return gtype


def _member_names(ctx, node, values):
    names = node.get(ctx.naming.ENUM_NAMES_KEYWORD)
    if names is None:
        return None
    if (
        not isinstance(names, list)
        or len(names) != len(values)
        or not all(isinstance(n, str) for n in names)
    ):
        ctx.unsupported(
            f"'{ctx.naming.ENUM_NAMES_KEYWORD}' must list one name per enum value"
        )
        return None
    return names


def _value_type(ctx, node, values) -> PrimitiveType:
    """Representation of the enum's literal values."""
    type_name, _ = declared_type(node)
    if type_name in ("string", "integer", "number", "boolean"):
        return primitive_for(ctx.config, type_name, node)

    literals = [v for v in values if v is not None]
    if literals and all(isinstance(v, str) for v in literals):
        return PrimitiveType(PrimitiveKind.STRING)
    if literals and all(isinstance(v, bool) for v in literals):
        return PrimitiveType(PrimitiveKind.BOOLEAN)
    if literals and all(isinstance(v, int) and not isinstance(v, bool) for v in literals):
        return integer_type(ctx.config, node)
    if literals and all(
        isinstance(v, (int, float)) and not isinstance(v, bool) for v in literals
    ):
        return number_type(ctx.config)
    return PrimitiveType(PrimitiveKind.ANY)
