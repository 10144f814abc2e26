"""
Rules that derive constructors, builders and dynamic accessors from the
populated fields of an object type.
"""

from ..core.engine import rule
from ..core.model import Builder, Constructor, DynamicAccessors


@rule("constructors", idempotent=True)
def constructors_rule(ctx, name, node, gtype):
    """Constructor signatures over all fields, required fields and a copy source."""
    config = ctx.config
    if not config.include_constructors:
        return gtype

    fields = tuple(gtype.all_fields())
    required = tuple(f for f in fields if f.required)

    signatures = [Constructor("no_args")]
    if config.constructors_required_properties_only:
        if required:
            signatures.append(Constructor("required_properties", required))
    elif fields:
        signatures.append(Constructor("all_properties", fields))
    if config.include_copy_constructor:
        signatures.append(Constructor("copy"))

    for signature in signatures:
        if signature not in gtype.constructors:
            gtype.constructors.append(signature)
    return gtype


@rule("builder", idempotent=True)
def builder_rule(ctx, name, node, gtype):
    """Fluent builder over the declared fields, chained to the supertype's builder."""
    if not ctx.config.generate_builders:
        return gtype
    parent = gtype.supertype.builder if gtype.supertype is not None else None
    gtype.builder = Builder(
        name=f"{gtype.name}Builder",
        fields=tuple(gtype.fields),
        parent=parent,
    )
    return gtype


@rule("dynamic_properties", idempotent=True)
def dynamic_properties_rule(ctx, name, node, gtype):
    """By-name get/set/with accessors over every property, inherited ones included."""
    if not ctx.config.include_dynamic_accessors:
        return gtype
    gtype.dynamic_accessors = DynamicAccessors(
        properties=tuple(f.json_name for f in gtype.all_fields())
    )
    return gtype
