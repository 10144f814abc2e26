"""
Field-level rules applied by the property rule: required-ness, defaults and
validation constraints.
"""

import re
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation

import dateparser

from ...logging_config import get_logger
from ..core.engine import rule
from ..core.model import (
    NUMERIC_KINDS,
    ArrayType,
    Digits,
    GeneratedType,
    MapType,
    PrimitiveKind,
    PrimitiveType,
)
from .common import innermost_type

logger = get_logger(__name__)

_STRING_LIKE_KINDS = {
    PrimitiveKind.STRING,
    PrimitiveKind.URI,
    PrimitiveKind.UUID,
    PrimitiveKind.REGEX,
    PrimitiveKind.BYTES,
    PrimitiveKind.DATE_TIME,
    PrimitiveKind.DATE,
    PrimitiveKind.TIME,
}

_DATEPARSER_SETTINGS = {"PREFER_DAY_OF_MONTH": "first", "DATE_ORDER": "YMD"}


class _InvalidDefault(ValueError):
    pass


def _is_kind(type_ref, kinds) -> bool:
    return isinstance(type_ref, PrimitiveType) and (
        type_ref.kind in kinds or type_ref.kind == PrimitiveKind.ANY
    )


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@rule("required")
def required_rule(ctx, name, node, target):
    target.required = True
    return target


@rule("not_required")
def not_required_rule(ctx, name, node, target):
    target.required = False
    return target


@rule("default")
def default_rule(ctx, name, node, target):
    """Set the field default from the ``default`` keyword.

    The value is coerced to the field type: date-time strings are parsed,
    enum literals become members. Arrays without a default get an empty
    collection when ``initialize_collections`` is on.
    """
    if not node.has("default"):
        if ctx.config.initialize_collections and isinstance(target.type, ArrayType):
            target.default_factory = "set" if target.type.unique else "list"
        return target

    value = node.get("default")
    if value is None:
        if target.nullable or not target.required:
            target.default = None
        else:
            ctx.unsupported(f"Default null for non-nullable field '{name}'")
        return target

    try:
        target.default = coerce_default(value, target.type)
    except _InvalidDefault as e:
        ctx.unsupported(f"Default {value!r} of '{name}' is not a valid {e}")
    return target


def coerce_default(value, type_ref):
    """Convert a JSON default value to the representation of ``type_ref``.

    Raises:
        _InvalidDefault: If the value does not fit the type
    """
    if isinstance(type_ref, GeneratedType):
        if type_ref.is_enum:
            member = type_ref.member_for_value(value)
            if member is None:
                raise _InvalidDefault(f"member of {type_ref.name}")
            return member
        if not isinstance(value, dict):
            raise _InvalidDefault(f"object for {type_ref.name}")
        return dict(value)

    if isinstance(type_ref, ArrayType):
        if not isinstance(value, list):
            raise _InvalidDefault("array")
        return [coerce_default(item, type_ref.element) for item in value]

    if isinstance(type_ref, MapType):
        if not isinstance(value, dict):
            raise _InvalidDefault("object")
        return {key: coerce_default(item, type_ref.value) for key, item in value.items()}

    kind = type_ref.kind
    if kind in (PrimitiveKind.ANY, PrimitiveKind.NULL):
        return value
    if kind == PrimitiveKind.BOOLEAN:
        if not isinstance(value, bool):
            raise _InvalidDefault("boolean")
        return value
    if kind in (PrimitiveKind.INTEGER, PrimitiveKind.LONG, PrimitiveKind.BIG_INTEGER):
        return _coerce_integer(value)
    if kind in (PrimitiveKind.FLOAT, PrimitiveKind.DOUBLE):
        if _is_number(value):
            return float(value)
        if isinstance(value, str):
            try:
                return float(value)
            except ValueError:
                pass
        raise _InvalidDefault(kind.value)
    if kind == PrimitiveKind.DECIMAL:
        if isinstance(value, bool):
            raise _InvalidDefault("decimal")
        try:
            return Decimal(str(value))
        except InvalidOperation:
            raise _InvalidDefault("decimal") from None
    if kind in (PrimitiveKind.DATE_TIME, PrimitiveKind.DATE, PrimitiveKind.TIME):
        return _coerce_temporal(value, kind)
    if not isinstance(value, str):
        raise _InvalidDefault(kind.value)
    return value


def _coerce_integer(value):
    if isinstance(value, bool):
        raise _InvalidDefault("integer")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise _InvalidDefault("integer")


def _coerce_temporal(value, kind):
    if kind == PrimitiveKind.DATE_TIME and _is_number(value):
        # utc-millisec style epoch values
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    if not isinstance(value, str):
        raise _InvalidDefault(kind.value)
    parsed = dateparser.parse(value, languages=["en"], settings=_DATEPARSER_SETTINGS)
    if parsed is None:
        raise _InvalidDefault(kind.value)
    if kind == PrimitiveKind.DATE:
        return parsed.date()
    if kind == PrimitiveKind.TIME:
        return parsed.timetz() if parsed.tzinfo else parsed.time()
    return parsed


@rule("minimum_maximum")
def minimum_maximum_rule(ctx, name, node, target):
    """Numeric bounds, including draft-04 boolean and draft-06 numeric exclusive forms."""
    keywords = ("minimum", "maximum", "exclusiveMinimum", "exclusiveMaximum")
    if not any(node.has(k) for k in keywords):
        return target
    if not _is_kind(target.type, NUMERIC_KINDS):
        ctx.unsupported(f"Numeric bounds on non-numeric field '{name}'")
        return target

    constraints = target.constraints
    minimum = node.get("minimum")
    maximum = node.get("maximum")
    if _is_number(minimum):
        constraints.minimum = minimum
        constraints.exclusive_minimum = node.get("exclusiveMinimum") is True
    if _is_number(maximum):
        constraints.maximum = maximum
        constraints.exclusive_maximum = node.get("exclusiveMaximum") is True

    exclusive_minimum = node.get("exclusiveMinimum")
    if _is_number(exclusive_minimum):
        constraints.minimum = exclusive_minimum
        constraints.exclusive_minimum = True
    exclusive_maximum = node.get("exclusiveMaximum")
    if _is_number(exclusive_maximum):
        constraints.maximum = exclusive_maximum
        constraints.exclusive_maximum = True
    return target


@rule("multiple_of")
def multiple_of_rule(ctx, name, node, target):
    if not node.has("multipleOf"):
        return target
    value = node.get("multipleOf")
    if not _is_number(value) or value <= 0:
        ctx.unsupported(f"'multipleOf' of '{name}' must be a positive number")
        return target
    if not _is_kind(target.type, NUMERIC_KINDS):
        ctx.unsupported(f"'multipleOf' on non-numeric field '{name}'")
        return target
    target.constraints.multiple_of = value
    return target


@rule("min_items_max_items")
def min_items_max_items_rule(ctx, name, node, target):
    if not (node.has("minItems") or node.has("maxItems")):
        return target
    if not isinstance(target.type, ArrayType):
        ctx.unsupported(f"Item count bounds on non-array field '{name}'")
        return target
    if isinstance(node.get("minItems"), int):
        target.constraints.min_items = node.get("minItems")
    if isinstance(node.get("maxItems"), int):
        target.constraints.max_items = node.get("maxItems")
    return target


@rule("min_length_max_length")
def min_length_max_length_rule(ctx, name, node, target):
    if not (node.has("minLength") or node.has("maxLength")):
        return target
    if not _is_kind(target.type, _STRING_LIKE_KINDS):
        ctx.unsupported(f"Length bounds on non-string field '{name}'")
        return target
    if isinstance(node.get("minLength"), int):
        target.constraints.min_length = node.get("minLength")
    if isinstance(node.get("maxLength"), int):
        target.constraints.max_length = node.get("maxLength")
    return target


@rule("digits")
def digits_rule(ctx, name, node, target):
    """``digits: {integerDigits, fractionalDigits}`` on numeric or string fields."""
    if not node.has("digits"):
        return target
    digits = node.get("digits")
    if not isinstance(digits, dict):
        ctx.unsupported(f"'digits' of '{name}' must be an object")
        return target
    integer_digits = digits.get("integerDigits")
    fraction_digits = digits.get("fractionalDigits")
    if not isinstance(integer_digits, int) or not isinstance(fraction_digits, int):
        ctx.unsupported(f"'digits' of '{name}' needs integerDigits and fractionalDigits")
        return target
    if not _is_kind(target.type, NUMERIC_KINDS | {PrimitiveKind.STRING}):
        ctx.unsupported(f"'digits' on field '{name}' of type {target.type}")
        return target
    target.constraints.digits = Digits(integer_digits, fraction_digits)
    return target


@rule("pattern")
def pattern_rule(ctx, name, node, target):
    if not node.has("pattern"):
        return target
    pattern = node.get("pattern")
    if not isinstance(pattern, str):
        ctx.unsupported(f"'pattern' of '{name}' must be a string")
        return target
    if not _is_kind(target.type, _STRING_LIKE_KINDS):
        ctx.unsupported(f"'pattern' on non-string field '{name}'")
        return target
    try:
        re.compile(pattern)
    except re.error as e:
        ctx.unsupported(f"Invalid pattern for '{name}': {e}")
        return target
    target.constraints.pattern = pattern
    return target


@rule("valid")
def valid_rule(ctx, name, node, target):
    """Cascade validation into fields holding object types."""
    inner = innermost_type(target.type)
    if isinstance(inner, GeneratedType) and inner.is_object:
        target.constraints.valid = True
    return target

