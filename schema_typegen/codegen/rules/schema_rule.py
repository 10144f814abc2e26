"""
Entry rule: follows $ref, reuses types already generated for a node and
hands everything else to the type rule.
"""

from ...logging_config import get_logger
from ..core.engine import rule
from ..core.naming import name_from_ref

logger = get_logger(__name__)


@rule("schema", produces_type=True)
def schema_rule(ctx, name, node, namespace):
    """Type reference for ``node``, generating it on first visit.

    A ``$ref`` is resolved to its canonical node and the referenced schema
    wins over any sibling keywords. The result is recorded against the
    node's canonical identity so later visits (including recursive ones)
    get the same instance.
    """
    if node.ref() is not None:
        target = ctx.store.resolve_ref(node)
        existing = ctx.store.get_type(target)
        if existing is not None:
            return existing
        ref_name = name_from_ref(target.uri)
        result = ctx.apply("schema", ref_name, target, namespace, parent=ctx.parent)
        ctx.store.register_type(node, result)
        return result

    existing = ctx.store.get_type(node)
    if existing is not None:
        return existing

    result = ctx.apply("type", name, node, namespace, parent=ctx.parent)
    ctx.store.register_type(node, result)
    return result
