"""
Documentation rules. Each fills one part of a Documentation record.
"""

from ..core.engine import rule


def _text(node, keyword):
    value = node.get(keyword)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


@rule("title")
def title_rule(ctx, name, node, doc):
    text = _text(node, "title")
    if text is not None:
        doc.title = text
    return doc


@rule("description")
def description_rule(ctx, name, node, doc):
    text = _text(node, "description")
    if text is not None:
        doc.description = text
    return doc


@rule("comment")
def comment_rule(ctx, name, node, doc):
    text = _text(node, "$comment")
    if text is not None:
        doc.comment = text
    return doc


@rule("name")
def name_rule(ctx, name, node, doc):
    """Record the JSON property name when ``x-name`` renames the field."""
    if ctx.naming.explicit_name(node):
        note = f'Corresponds to the "{name}" property.'
        if note not in doc.notes:
            doc.notes.append(note)
    return doc
