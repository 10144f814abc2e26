"""
Type selection rules: ``type``, ``format`` and ``media``.
"""

from ...logging_config import get_logger
from ..core.engine import rule
from ..core.errors import UnsupportedSchemaConstructError
from ..core.model import ANY_TYPE, PrimitiveKind, PrimitiveType
from .common import PRIMITIVE_TYPE_NAMES, declared_type, primitive_for

logger = get_logger(__name__)

# Format hints that keep the string representation
_PLAIN_STRING_FORMATS = {
    "email", "idn-email", "hostname", "idn-hostname", "host-name",
    "ipv4", "ipv6", "ip-address", "phone", "color", "style",
    "json-pointer", "relative-json-pointer", "uri-template",
}

_STRING_FORMATS = {
    "uuid": PrimitiveKind.UUID,
    "uri": PrimitiveKind.URI,
    "uri-reference": PrimitiveKind.URI,
    "iri": PrimitiveKind.URI,
    "iri-reference": PrimitiveKind.URI,
    "regex": PrimitiveKind.REGEX,
}

_NUMERIC_FORMATS = {
    "int32": PrimitiveKind.INTEGER,
    "int64": PrimitiveKind.LONG,
    "float": PrimitiveKind.FLOAT,
    "double": PrimitiveKind.DOUBLE,
}

_BINARY_ENCODINGS = {"base64", "base64url"}


@rule("type", produces_type=True)
def type_rule(ctx, name, node, namespace):
    """Pick the representation of a schema node.

    Precedence: ``$ref``, ``enum``, array, object (or bare ``properties``),
    primitive with format and media refinements, then ``any``.
    """
    if node.ref() is not None:
        return ctx.apply("schema", name, node, namespace, parent=ctx.parent)

    if node.is_boolean:
        if node.content is False:
            raise UnsupportedSchemaConstructError(
                "Schema 'false' accepts no value; using any", location=node.uri
            )
        return ANY_TYPE

    if not node.is_object:
        raise UnsupportedSchemaConstructError(
            f"Expected a schema object, found {type(node.content).__name__}",
            location=node.uri,
        )

    if node.has("enum"):
        return ctx.apply("enum", name, node, namespace, parent=ctx.parent)

    type_name, _ = declared_type(node)

    if type_name == "array":
        return ctx.apply("array", name, node, namespace, parent=ctx.parent)

    if type_name == "object" or (type_name is None and node.has("properties")):
        return ctx.apply("object", name, node, namespace, parent=ctx.parent)

    if type_name is None:
        return ANY_TYPE

    if type_name not in PRIMITIVE_TYPE_NAMES:
        raise UnsupportedSchemaConstructError(
            f"Unknown schema type '{type_name}'", location=node.uri
        )

    result = primitive_for(ctx.config, type_name, node)
    if node.has("format"):
        result = ctx.apply("format", name, node, result)
    if result.kind == PrimitiveKind.STRING:
        result = ctx.apply("media", name, node, result)
    return result


@rule("format")
def format_rule(ctx, name, node, base_type):
    """Refine a primitive by its ``format`` hint.

    Unrecognized hints leave the base type unchanged.
    """
    format_name = node.get("format")
    if not isinstance(format_name, str):
        return base_type

    mapped = ctx.config.format_type_mapping.get(format_name)
    if mapped is not None:
        try:
            return PrimitiveType(PrimitiveKind(mapped))
        except ValueError:
            ctx.unsupported(f"Unknown type '{mapped}' mapped for format '{format_name}'")
            return base_type

    kind = base_type.kind

    if format_name == "utc-millisec":
        return PrimitiveType(PrimitiveKind.LONG)

    if base_type.is_numeric:
        target = _NUMERIC_FORMATS.get(format_name)
        if target is None:
            logger.debug("Ignoring format '%s' on %s at %s", format_name, kind.value, node.uri)
            return base_type
        return PrimitiveType(target)

    if kind != PrimitiveKind.STRING:
        return base_type

    if format_name == "date-time":
        return PrimitiveType(PrimitiveKind.DATE_TIME) if ctx.config.format_date_times else base_type
    if format_name == "date":
        return PrimitiveType(PrimitiveKind.DATE) if ctx.config.format_dates else base_type
    if format_name == "time":
        return PrimitiveType(PrimitiveKind.TIME) if ctx.config.format_times else base_type
    if format_name in _STRING_FORMATS:
        return PrimitiveType(_STRING_FORMATS[format_name])
    if format_name not in _PLAIN_STRING_FORMATS:
        logger.debug("Unrecognized format '%s' at %s", format_name, node.uri)
    return base_type


@rule("media")
def media_rule(ctx, name, node, base_type):
    """Binary-encoded strings become bytes."""
    encoding = node.get("contentEncoding")
    media = node.get("media")
    if isinstance(media, dict) and encoding is None:
        encoding = media.get("binaryEncoding")
    if isinstance(encoding, str) and encoding.lower() in _BINARY_ENCODINGS:
        return PrimitiveType(PrimitiveKind.BYTES)
    return base_type
