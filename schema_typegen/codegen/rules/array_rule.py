"""
Array rule.
"""

from ..core.engine import rule
from ..core.model import ANY_TYPE, ArrayType


@rule("array", produces_type=True)
def array_rule(ctx, name, node, namespace):
    """Collection type for ``type: array``.

    Element types are named after the singular of ``name``. ``uniqueItems``
    selects a set. A tuple-form ``items`` list collapses to its common
    element type, or ``any`` when the positions differ.
    """
    unique = node.get("uniqueItems") is True
    item_name = ctx.naming.item_type_name(name)

    if not node.has("items"):
        return ArrayType(ANY_TYPE, unique)

    items = node.get("items")
    if isinstance(items, list):
        element = _common_item_type(ctx, item_name, node, namespace, len(items))
    else:
        element = ctx.apply("schema", item_name, node.child("items"), namespace, parent=node)
    return ArrayType(element, unique)


def _common_item_type(ctx, item_name, node, namespace, count):
    if count == 0:
        return ANY_TYPE
    element_types = [
        ctx.apply("schema", item_name, node.child("items", index), namespace, parent=node)
        for index in range(count)
    ]
    first = element_types[0]
    if all(ctx.compat.equivalent(first, other) for other in element_types[1:]):
        return first
    ctx.unsupported("Tuple 'items' with differing element types; using any")
    return ANY_TYPE
