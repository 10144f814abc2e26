"""
Object rules: create a generated object type and populate it from
``extends``, ``properties``, ``required`` and ``additionalProperties``.
"""

from ...logging_config import get_logger
from ..core.annotator import FieldMetadata
from ..core.engine import rule
from ..core.model import (
    ANY_TYPE,
    ExtensionKind,
    ExtensionPoint,
    Field,
    GeneratedType,
    TypeKind,
)
from .common import (
    apply_documentation,
    create_generated_type,
    declared_type,
    is_required,
    settle_explicit_name,
)

logger = get_logger(__name__)

# Property rules in application order
PROPERTY_RULES = (
    "minimum_maximum",
    "multiple_of",
    "min_items_max_items",
    "min_length_max_length",
    "digits",
    "pattern",
    "valid",
)


@rule("object", produces_type=True)
def object_rule(ctx, name, node, namespace):
    """Generated object type for ``node``.

    The type is registered against the node before any property is visited,
    so a property referring back to this node gets the same instance.
    """
    existing = ctx.store.get_type(node)
    if isinstance(existing, GeneratedType):
        return existing

    gtype = create_generated_type(ctx, name, node, namespace, TypeKind.OBJECT)
    ctx.store.register_type(node, gtype)
    logger.debug("Created %s for %s", gtype.qualified_name, node.uri)

    apply_documentation(ctx, name, node, gtype.doc)

    if node.has("extends"):
        ctx.apply("extends", name, node.child("extends"), gtype, parent=node)

    if node.has("properties"):
        ctx.apply("properties", name, node.child("properties"), gtype, parent=node)

    if node.has("required"):
        ctx.apply("required_array", name, node, gtype)

    ctx.apply("additional_properties", name, node, gtype)
    ctx.apply("dynamic_properties", name, node, gtype)
    ctx.apply("constructors", name, node, gtype)
    ctx.apply("builder", name, node, gtype)

    gtype.annotations.extend(ctx.annotator.annotate_type(gtype, node))
    gtype.finalize()
    settle_explicit_name(ctx, gtype)
    return gtype


@rule("extends", idempotent=True)
def extends_rule(ctx, name, node, gtype):
    """Set the supertype of ``gtype`` from an ``extends`` schema."""
    namespace = ctx.model.namespace(gtype.namespace)
    supertype = ctx.apply("schema", f"{name}Parent", node, namespace, parent=ctx.parent)

    if not isinstance(supertype, GeneratedType) or not supertype.is_object:
        ctx.unsupported(f"'extends' of {gtype.name} does not describe an object type")
        return gtype

    if ctx.compat.is_subtype(supertype, gtype):
        ctx.unsupported(f"Inheritance cycle between {gtype.name} and {supertype.name}")
        return gtype

    gtype.supertype = supertype
    gtype.reserve_field_names([f.name for f in supertype.all_fields()])
    return gtype


@rule("properties", idempotent=True)
def properties_rule(ctx, name, node, gtype):
    """Apply the property rule to each declared property, in order."""
    if not node.is_object:
        ctx.unsupported("'properties' must be an object")
        return gtype
    for property_name in node.keys():
        ctx.apply("property", property_name, node.child(property_name), gtype, parent=ctx.parent)
    return gtype


@rule("property")
def property_rule(ctx, name, node, gtype):
    """Add the field for one property to ``gtype``.

    ``ctx.parent`` is the object schema declaring the property.
    """
    object_node = ctx.parent
    namespace = ctx.model.namespace(gtype.namespace)
    field_type = ctx.apply("schema", name, node, namespace, parent=object_node)
    resolved = ctx.store.resolve_ref(node) if node.ref() is not None else node

    inherited = gtype.find_inherited_field(name)
    if inherited is not None:
        if ctx.compat.is_assignable(field_type, inherited.type):
            logger.debug(
                "Property '%s' of %s is inherited from %s",
                name,
                gtype.name,
                inherited.owner.name if inherited.owner else "supertype",
            )
        else:
            ctx.unsupported(
                f"Property '{name}' of {gtype.name} redeclares an inherited field "
                f"with an incompatible type",
                node=node,
            )
        return gtype

    new_field = gtype.add_field(
        Field(
            name=ctx.naming.field_name(name, node),
            json_name=name,
            type=field_type,
            source=node.uri,
        )
    )

    apply_documentation(ctx, name, node, new_field.doc)
    if resolved is not node and new_field.doc.is_empty():
        apply_documentation(ctx, name, resolved, new_field.doc)
    ctx.apply("name", name, node, new_field.doc)

    new_field.nullable = _is_nullable(resolved, field_type)

    if is_required(name, node, object_node):
        ctx.apply("required", name, node, new_field, parent=object_node)
    else:
        ctx.apply("not_required", name, node, new_field, parent=object_node)

    ctx.apply("default", name, node if node.has("default") else resolved, new_field)

    if ctx.config.include_validation_constraints:
        for rule_name in PROPERTY_RULES:
            ctx.apply(rule_name, name, resolved, new_field)

    format_name = resolved.get("format")
    metadata = FieldMetadata.for_field(
        new_field, format_name if isinstance(format_name, str) else None
    )
    new_field.annotations.extend(ctx.annotator.annotate_field(new_field, metadata))
    return gtype


def _is_nullable(node, field_type) -> bool:
    _, nullable = declared_type(node)
    if nullable:
        return True
    if isinstance(field_type, GeneratedType) and field_type.nullable:
        return True
    return False


@rule("required_array", idempotent=True)
def required_array_rule(ctx, name, node, gtype):
    """Check the object's ``required`` list against its properties.

    Fields themselves are marked by the property rule.
    """
    required = node.get("required")
    if isinstance(required, bool):
        # draft-03 boolean form belongs to the property, not the object
        return gtype
    if not isinstance(required, list):
        ctx.unsupported(f"'required' of {gtype.name} must be a list of property names")
        return gtype

    properties = node.get("properties")
    declared = set(properties) if isinstance(properties, dict) else set()
    for property_name in required:
        if not isinstance(property_name, str):
            ctx.unsupported(f"Ignoring non-string required entry {property_name!r}")
            continue
        if property_name in declared:
            continue
        inherited = gtype.find_inherited_field(property_name)
        if inherited is not None:
            continue
        ctx.unsupported(
            f"Required property '{property_name}' is not declared by {gtype.name}"
        )
    return gtype


@rule("additional_properties", idempotent=True)
def additional_properties_rule(ctx, name, node, gtype):
    """Set the extension point from ``additionalProperties``.

    ``false`` seals the type; ``true`` (or absence, when enabled) opens it to
    values of any type; a schema types the extra values.
    """
    missing = not node.has("additionalProperties")
    value = node.get("additionalProperties")

    if value is False:
        extension = ExtensionPoint(ExtensionKind.SEALED)
    elif missing or value is True:
        if missing and not ctx.config.include_additional_properties:
            return gtype
        if not ctx.annotator.supports_additional_properties():
            return gtype
        extension = ExtensionPoint(ExtensionKind.OPEN, value_type=ANY_TYPE)
    elif isinstance(value, dict):
        if not ctx.annotator.supports_additional_properties():
            return gtype
        namespace = ctx.model.namespace(gtype.namespace)
        value_type = ctx.apply(
            "schema",
            ctx.naming.additional_properties_type_name(gtype.name),
            node.child("additionalProperties"),
            namespace,
            parent=node,
        )
        extension = ExtensionPoint(ExtensionKind.TYPED, value_type=value_type)
    else:
        ctx.unsupported(f"Unsupported additionalProperties value {value!r}")
        return gtype

    extension.field_name = gtype.claim_field_name(
        ctx.naming.field_name("additional_properties", None)
    )
    extension.annotations.extend(ctx.annotator.annotate_extension_point(gtype, extension))
    gtype.extension_point = extension
    return gtype

