"""
Type compatibility checks.

Decides whether two independently generated types are equivalent (so one can
stand in for the other) and whether a field type may be used where another is
declared (for inheritance). Comparisons are cycle-safe: a pair of types under
comparison is assumed equivalent while its members are compared.
"""

from typing import Dict, List, Optional, Set, Tuple

from ...logging_config import get_logger
from .model import (
    ArrayType,
    GeneratedType,
    MapType,
    PrimitiveKind,
    PrimitiveType,
    TypeRef,
)

logger = get_logger(__name__)

# Each kind may be widened to the kinds after it
_WIDENING = [
    [PrimitiveKind.INTEGER, PrimitiveKind.LONG, PrimitiveKind.BIG_INTEGER],
    [PrimitiveKind.FLOAT, PrimitiveKind.DOUBLE, PrimitiveKind.DECIMAL],
]


class TypeCompatibility:
    """Structural and nominal comparison of type references."""

    def equivalent(self, a: Optional[TypeRef], b: Optional[TypeRef]) -> bool:
        """True when ``a`` and ``b`` describe the same shape."""
        return self._equivalent(a, b, set())

    def _equivalent(self, a, b, assumed: Set[Tuple[int, int]]) -> bool:
        if a is b:
            return True
        if a is None or b is None:
            return False
        if isinstance(a, PrimitiveType) and isinstance(b, PrimitiveType):
            return a.kind == b.kind
        if isinstance(a, ArrayType) and isinstance(b, ArrayType):
            return a.unique == b.unique and self._equivalent(a.element, b.element, assumed)
        if isinstance(a, MapType) and isinstance(b, MapType):
            return self._equivalent(a.value, b.value, assumed)
        if isinstance(a, GeneratedType) and isinstance(b, GeneratedType):
            return self._equivalent_generated(a, b, assumed)
        return False

    def _equivalent_generated(self, a: GeneratedType, b: GeneratedType, assumed) -> bool:
        pair = (id(a), id(b))
        if pair in assumed:
            return True
        if a.kind != b.kind or a.nullable != b.nullable:
            return False

        if a.is_enum:
            if a.enum_value_type != b.enum_value_type:
                return False
            return [(m.name, m.value) for m in a.enum_members] == [
                (m.name, m.value) for m in b.enum_members
            ]

        if len(a.fields) != len(b.fields):
            return False

        assumed.add(pair)
        try:
            if not self._equivalent_optional(a.supertype, b.supertype, assumed):
                return False

            for fa, fb in zip(a.fields, b.fields):
                if (fa.json_name, fa.name, fa.required, fa.nullable) != (
                    fb.json_name, fb.name, fb.required, fb.nullable
                ):
                    return False
                if fa.default != fb.default or fa.default_factory != fb.default_factory:
                    return False
                if fa.constraints != fb.constraints:
                    return False
                if not self._equivalent(fa.type, fb.type, assumed):
                    return False

            ea, eb = a.extension_point, b.extension_point
            if (ea is None) != (eb is None):
                return False
            if ea is not None:
                if ea.kind != eb.kind:
                    return False
                if not self._equivalent_optional(ea.value_type, eb.value_type, assumed):
                    return False
            return True
        finally:
            assumed.discard(pair)

    def _equivalent_optional(self, a, b, assumed) -> bool:
        if a is None and b is None:
            return True
        return self._equivalent(a, b, assumed)

    def is_subtype(self, sub: GeneratedType, sup: GeneratedType) -> bool:
        """True when ``sup`` is ``sub`` or one of its supertypes."""
        seen = set()
        current = sub
        while current is not None and id(current) not in seen:
            if current is sup:
                return True
            seen.add(id(current))
            current = current.supertype
        return False

    def is_assignable(self, source: TypeRef, target: TypeRef) -> bool:
        """True when a value of ``source`` type can be used as ``target``.

        Covers equivalence, subtyping, numeric widening and ``any`` targets.
        """
        if self.equivalent(source, target):
            return True
        if isinstance(target, PrimitiveType) and target.kind == PrimitiveKind.ANY:
            return True
        if isinstance(source, GeneratedType) and isinstance(target, GeneratedType):
            return self.is_subtype(source, target)
        if isinstance(source, PrimitiveType) and isinstance(target, PrimitiveType):
            for chain in _WIDENING:
                if source.kind in chain and target.kind in chain:
                    return chain.index(source.kind) <= chain.index(target.kind)
            return False
        if isinstance(source, ArrayType) and isinstance(target, ArrayType):
            return source.unique == target.unique and self.is_assignable(
                source.element, target.element
            )
        if isinstance(source, MapType) and isinstance(target, MapType):
            return self.is_assignable(source.value, target.value)
        return False

    def find_duplicates(self, types: List[GeneratedType]) -> Dict[GeneratedType, GeneratedType]:
        """Map each redundant type to the earlier equivalent type it duplicates.

        Only types created under the same requested name, in the same
        namespace, are candidates; explicitly named types are never dropped.
        """
        groups: Dict[Tuple[str, str, str], List[GeneratedType]] = {}
        for gtype in types:
            key = (gtype.namespace, gtype.base_name, gtype.kind.value)
            groups.setdefault(key, []).append(gtype)

        duplicates: Dict[GeneratedType, GeneratedType] = {}
        for group in groups.values():
            if len(group) < 2:
                continue
            canonical: List[GeneratedType] = []
            for candidate in group:
                match = None
                if not candidate.explicit_name:
                    match = next(
                        (kept for kept in canonical if self.equivalent(kept, candidate)), None
                    )
                if match is None:
                    canonical.append(candidate)
                else:
                    logger.debug(
                        "Collapsing %s into equivalent %s",
                        candidate.qualified_name,
                        match.qualified_name,
                    )
                    duplicates[candidate] = match
        return duplicates
