"""
Type model for code generation.

Holds the types produced by the rules: primitive, array and map type
references, and the generated object/enum types with their fields. Generated
types are compared by identity so that cyclic references (a type whose field
refers back to it) stay a single instance.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Set, Tuple, Union

from .errors import AmbiguousTypeError
from .naming import UniqueNameScope


class PrimitiveKind(Enum):
    """Primitive representations a schema type can map to."""

    STRING = "string"
    INTEGER = "integer"
    LONG = "long"
    BIG_INTEGER = "big-integer"
    FLOAT = "float"
    DOUBLE = "double"
    DECIMAL = "decimal"
    BOOLEAN = "boolean"
    ANY = "any"
    NULL = "null"
    DATE_TIME = "date-time"
    DATE = "date"
    TIME = "time"
    UUID = "uuid"
    URI = "uri"
    REGEX = "regex"
    BYTES = "bytes"


INTEGRAL_KINDS = {PrimitiveKind.INTEGER, PrimitiveKind.LONG, PrimitiveKind.BIG_INTEGER}
NUMERIC_KINDS = INTEGRAL_KINDS | {
    PrimitiveKind.FLOAT,
    PrimitiveKind.DOUBLE,
    PrimitiveKind.DECIMAL,
}


@dataclass(frozen=True)
class PrimitiveType:
    """A built-in value type."""

    kind: PrimitiveKind

    @property
    def is_numeric(self) -> bool:
        return self.kind in NUMERIC_KINDS

    @property
    def is_integral(self) -> bool:
        return self.kind in INTEGRAL_KINDS

    def __str__(self) -> str:
        return self.kind.value


ANY_TYPE = PrimitiveType(PrimitiveKind.ANY)


@dataclass(frozen=True)
class ArrayType:
    """A collection parameterized by its element type."""

    element: "TypeRef"
    unique: bool = False

    def __str__(self) -> str:
        container = "set" if self.unique else "list"
        return f"{container}[{type_display_name(self.element)}]"


@dataclass(frozen=True)
class MapType:
    """String-keyed map parameterized by its value type."""

    value: "TypeRef"

    def __str__(self) -> str:
        return f"map[{type_display_name(self.value)}]"


class TypeKind(Enum):
    """Kinds of generated types."""

    OBJECT = "object"
    ENUM = "enum"


class ExtensionKind(Enum):
    """Shapes of the additional-properties extension point."""

    SEALED = "sealed"  # additionalProperties: false
    OPEN = "open"      # additionalProperties: true (or absent)
    TYPED = "typed"    # additionalProperties: {schema}


@dataclass
class Documentation:
    """Title, description and comment text gathered from a schema node."""

    title: Optional[str] = None
    description: Optional[str] = None
    comment: Optional[str] = None
    notes: List[str] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.title or self.description or self.comment or self.notes)

    def lines(self) -> List[str]:
        """All documentation paragraphs in display order."""
        parts = [self.title, self.description, self.comment, *self.notes]
        return [p for p in parts if p]


@dataclass
class Digits:
    """Bounds on the number of integer and fraction digits."""

    integer_digits: int
    fraction_digits: int


@dataclass
class Constraints:
    """Validation bounds attached to a field."""

    minimum: Optional[float] = None
    maximum: Optional[float] = None
    exclusive_minimum: bool = False
    exclusive_maximum: bool = False
    multiple_of: Optional[float] = None
    min_items: Optional[int] = None
    max_items: Optional[int] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    pattern: Optional[str] = None
    digits: Optional[Digits] = None
    valid: bool = False

    def is_empty(self) -> bool:
        return self == Constraints()

    def as_dict(self) -> Dict[str, Any]:
        """Non-default constraints as a plain dict."""
        result = {}
        for name in self.__dataclass_fields__:
            value = getattr(self, name)
            if value is None or value is False:
                continue
            result[name] = value
        return result


class _NoDefault:
    """Marker for fields without a default value."""

    def __repr__(self) -> str:
        return "NO_DEFAULT"

    def __bool__(self) -> bool:
        return False


NO_DEFAULT = _NoDefault()


@dataclass(eq=False)
class Field:
    """Represents a single field in a generated type."""

    name: str
    json_name: str
    type: "TypeRef"
    owner: Optional["GeneratedType"] = field(default=None, repr=False)
    required: bool = False
    nullable: bool = False
    default: Any = NO_DEFAULT
    default_factory: Optional[str] = None  # "list", "set" or "dict"
    constraints: Constraints = field(default_factory=Constraints)
    doc: Documentation = field(default_factory=Documentation)
    annotations: List[Any] = field(default_factory=list, repr=False)
    source: Optional[str] = None

    @property
    def has_default(self) -> bool:
        return self.default is not NO_DEFAULT or self.default_factory is not None


@dataclass(eq=False)
class EnumMember:
    """One constant of an enumeration."""

    name: str
    value: Any
    annotations: List[Any] = field(default_factory=list, repr=False)


@dataclass(eq=False)
class ExtensionPoint:
    """How an object type accepts properties it does not declare."""

    kind: ExtensionKind
    value_type: Optional["TypeRef"] = None
    field_name: str = "additional_properties"
    annotations: List[Any] = field(default_factory=list, repr=False)

    @property
    def is_sealed(self) -> bool:
        return self.kind == ExtensionKind.SEALED


@dataclass(frozen=True)
class Constructor:
    """A constructor signature derived from the field list."""

    kind: str  # "no_args", "all_properties", "required_properties", "copy"
    parameters: Tuple[Field, ...] = ()


@dataclass
class Builder:
    """A fluent builder companion for an object type."""

    name: str
    fields: Tuple[Field, ...]
    parent: Optional["Builder"] = None


@dataclass
class DynamicAccessors:
    """Generic by-name property accessors (get/set/with)."""

    properties: Tuple[str, ...]
    methods: Tuple[str, ...] = ("get", "set", "with")


class GeneratedType:
    """An object or enum type being built by the rules.

    Instances are hashed and compared by identity: the same schema node
    always maps to the same instance, which is what makes recursive schemas
    representable without copies.
    """

    def __init__(
        self,
        name: str,
        kind: TypeKind = TypeKind.OBJECT,
        namespace: str = "",
        source: Optional[str] = None,
        base_name: Optional[str] = None,
    ):
        self.name = name
        self.kind = kind
        self.namespace = namespace
        self.source = source
        self.base_name = base_name or name
        self.fields: List[Field] = []
        self.supertype: Optional["GeneratedType"] = None
        self.doc = Documentation()
        self.enum_members: List[EnumMember] = []
        self.enum_value_type: Optional[PrimitiveType] = None
        self.nullable = False
        self.extension_point: Optional[ExtensionPoint] = None
        self.constructors: List[Constructor] = []
        self.builder: Optional[Builder] = None
        self.dynamic_accessors: Optional[DynamicAccessors] = None
        self.annotations: List[Any] = []
        self.applied_rules: Set[Tuple[str, str]] = set()
        self.explicit_name = False
        self.finalized = False
        self._field_names = UniqueNameScope()

    def __repr__(self) -> str:
        state = "final" if self.finalized else "building"
        return f"<GeneratedType {self.kind.value} {self.qualified_name} ({state})>"

    def __str__(self) -> str:
        return self.qualified_name

    @property
    def qualified_name(self) -> str:
        return f"{self.namespace}.{self.name}" if self.namespace else self.name

    @property
    def is_enum(self) -> bool:
        return self.kind == TypeKind.ENUM

    @property
    def is_object(self) -> bool:
        return self.kind == TypeKind.OBJECT

    def add_field(self, new_field: Field) -> Field:
        """Add a field, making its name unique within this type."""
        if self.finalized:
            raise RuntimeError(f"Cannot add field to finalized type {self.qualified_name}")
        new_field.name = self._field_names.claim(new_field.name)
        new_field.owner = self
        self.fields.append(new_field)
        return new_field

    def claim_field_name(self, name: str) -> str:
        """Claim a member name that is not a declared field."""
        return self._field_names.claim(name)

    def reserve_field_names(self, names: List[str]):
        """Keep ``names`` (typically inherited fields) from being claimed."""
        for name in names:
            self._field_names.add(name)

    def get_field(self, name: str) -> Optional[Field]:
        """Get a declared field by target name or JSON name."""
        for candidate in self.fields:
            if candidate.name == name or candidate.json_name == name:
                return candidate
        return None

    def find_inherited_field(self, json_name: str) -> Optional[Field]:
        """Look up a field by JSON name along the supertype chain."""
        seen = set()
        current = self.supertype
        while current is not None and id(current) not in seen:
            seen.add(id(current))
            found = current.get_field(json_name)
            if found is not None and found.json_name == json_name:
                return found
            current = current.supertype
        return None

    def all_fields(self) -> List[Field]:
        """Fields including inherited ones, supertype fields first."""
        chain = []
        seen = set()
        current = self
        while current is not None and id(current) not in seen:
            seen.add(id(current))
            chain.append(current)
            current = current.supertype
        result = []
        for gtype in reversed(chain):
            result.extend(gtype.fields)
        return result

    def required_fields(self) -> List[Field]:
        return [f for f in self.all_fields() if f.required]

    def add_enum_member(self, name: str, value: Any) -> EnumMember:
        member = EnumMember(name=name, value=value)
        self.enum_members.append(member)
        return member

    def member_for_value(self, value: Any) -> Optional[EnumMember]:
        """Enum member whose literal value equals ``value``."""
        for member in self.enum_members:
            if member.value == value and type(member.value) is type(value):
                return member
        for member in self.enum_members:
            if member.value == value:
                return member
        return None

    def mark_applied(self, rule_name: str, identity: str) -> bool:
        """Record a rule application; False when it was already recorded."""
        marker = (rule_name, identity)
        if marker in self.applied_rules:
            return False
        self.applied_rules.add(marker)
        return True

    def finalize(self):
        self.finalized = True


TypeRef = Union[PrimitiveType, ArrayType, MapType, GeneratedType]


def type_display_name(type_ref: TypeRef) -> str:
    """Human-readable rendering of a type reference."""
    if isinstance(type_ref, GeneratedType):
        return type_ref.name
    return str(type_ref)


def referenced_types(type_ref: Optional[TypeRef]) -> Iterator[GeneratedType]:
    """Generated types reachable through one type reference (not recursive)."""
    if type_ref is None:
        return
    if isinstance(type_ref, GeneratedType):
        yield type_ref
    elif isinstance(type_ref, ArrayType):
        yield from referenced_types(type_ref.element)
    elif isinstance(type_ref, MapType):
        yield from referenced_types(type_ref.value)


def replace_type(type_ref: Optional[TypeRef], mapping: Dict[GeneratedType, GeneratedType]):
    """Rebuild a type reference with generated types substituted via ``mapping``."""
    if type_ref is None:
        return None
    if isinstance(type_ref, GeneratedType):
        return mapping.get(type_ref, type_ref)
    if isinstance(type_ref, ArrayType):
        return ArrayType(replace_type(type_ref.element, mapping), type_ref.unique)
    if isinstance(type_ref, MapType):
        return MapType(replace_type(type_ref.value, mapping))
    return type_ref


class Namespace:
    """A container of uniquely named generated types."""

    def __init__(self, name: str):
        self.name = name
        self.types: Dict[str, GeneratedType] = {}
        self._names = UniqueNameScope(separator="")

    def __iter__(self) -> Iterator[GeneratedType]:
        return iter(list(self.types.values()))

    def __len__(self) -> int:
        return len(self.types)

    def __contains__(self, name: str) -> bool:
        return name in self.types

    def get(self, name: str) -> Optional[GeneratedType]:
        return self.types.get(name)

    def new_type(
        self,
        name: str,
        kind: TypeKind = TypeKind.OBJECT,
        source: Optional[str] = None,
    ) -> GeneratedType:
        """Create a type under ``name``, numbering it when the name is taken."""
        unique = self._names.claim(name)
        gtype = GeneratedType(
            unique, kind=kind, namespace=self.name, source=source, base_name=name
        )
        self.types[unique] = gtype
        return gtype

    def new_explicit_type(
        self,
        name: str,
        kind: TypeKind = TypeKind.OBJECT,
        source: Optional[str] = None,
    ) -> GeneratedType:
        """Create a type whose name was requested explicitly.

        Explicit names are never renumbered.

        Raises:
            AmbiguousTypeError: If the name is already taken in this namespace
        """
        if name in self._names:
            existing = self.types.get(name)
            origin = existing.source if existing is not None else None
            raise AmbiguousTypeError(
                f"Type name '{self.name}.{name}' requested by {source} is already "
                f"used by {origin}",
                location=source,
            )
        self._names.add(name)
        gtype = GeneratedType(name, kind=kind, namespace=self.name, source=source)
        gtype.explicit_name = True
        self.types[name] = gtype
        return gtype

    def remove(self, gtype: GeneratedType):
        """Drop a type from this namespace (its name stays reserved)."""
        if self.types.get(gtype.name) is gtype:
            del self.types[gtype.name]


class TypeModel:
    """Arena of all generated types for one generation run, by namespace."""

    def __init__(self, default_namespace: str = ""):
        self.default_namespace = default_namespace
        self._namespaces: Dict[str, Namespace] = {}

    def namespace(self, name: Optional[str] = None) -> Namespace:
        """Get or create a namespace (the default one when ``name`` is None)."""
        key = self.default_namespace if name is None else name
        if key not in self._namespaces:
            self._namespaces[key] = Namespace(key)
        return self._namespaces[key]

    def namespaces(self) -> List[Namespace]:
        return list(self._namespaces.values())

    def all_types(self) -> List[GeneratedType]:
        """All generated types in creation order, namespace by namespace."""
        result = []
        for ns in self._namespaces.values():
            result.extend(ns)
        return result

    def __len__(self) -> int:
        return sum(len(ns) for ns in self._namespaces.values())

    def get(self, qualified_name: str) -> Optional[GeneratedType]:
        for gtype in self.all_types():
            if gtype.qualified_name == qualified_name:
                return gtype
        return None

    def replace_references(self, mapping: Dict[GeneratedType, GeneratedType]):
        """Redirect every reference to a key of ``mapping`` and drop the keys."""
        if not mapping:
            return
        for gtype in self.all_types():
            if gtype in mapping:
                continue
            if gtype.supertype is not None:
                gtype.supertype = mapping.get(gtype.supertype, gtype.supertype)
            for fld in gtype.fields:
                fld.type = replace_type(fld.type, mapping)
            if gtype.extension_point is not None:
                gtype.extension_point.value_type = replace_type(
                    gtype.extension_point.value_type, mapping
                )
        for duplicate in mapping:
            self.namespace(duplicate.namespace).remove(duplicate)

    def reachable_from(self, roots: List[TypeRef]) -> List[GeneratedType]:
        """Generated types reachable from ``roots``, depth-first, cycle-safe."""
        seen: Dict[int, GeneratedType] = {}
        order: List[GeneratedType] = []

        def visit(gtype: GeneratedType):
            if id(gtype) in seen:
                return
            seen[id(gtype)] = gtype
            if gtype.supertype is not None:
                visit(gtype.supertype)
            for fld in gtype.fields:
                for ref in referenced_types(fld.type):
                    visit(ref)
            if gtype.extension_point is not None:
                for ref in referenced_types(gtype.extension_point.value_type):
                    visit(ref)
            order.append(gtype)

        for root in roots:
            for ref in referenced_types(root):
                visit(ref)
        return order
