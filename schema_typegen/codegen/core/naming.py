"""
Naming utilities for safe code generation.

Maps arbitrary schema property names, titles, refs and enum values to valid
target identifiers: case conversion, reserved-word escaping and deterministic
disambiguation within a scope (a namespace, a type's fields, an enum's
members).
"""

import re
from typing import Any, Dict, Iterable, Optional, Set
from enum import Enum
from urllib.parse import unquote, urldefrag, urlsplit


class NamingCase(Enum):
    """Different naming case styles."""
    SNAKE_CASE = "snake"      # user_name
    CAMEL_CASE = "camel"      # userName
    PASCAL_CASE = "pascal"    # UserName
    KEBAB_CASE = "kebab"      # user-name
    SCREAMING_SNAKE = "screaming_snake"  # USER_NAME


class NameSanitizer:
    """Handles name cleanup, case conversion and reserved-word escaping."""

    def __init__(self, reserved_words: Set[str] = None, builtin_types: Set[str] = None):
        """
        Initialize name sanitizer.

        Args:
            reserved_words: Set of language reserved words
            builtin_types: Set of builtin type names that might conflict
        """
        self.reserved_words = reserved_words or set()
        self.builtin_types = builtin_types or set()
        self._name_cache: Dict[str, str] = {}

    def sanitize_name(self, name: str, target_case: NamingCase = NamingCase.SNAKE_CASE,
                      suffix_on_conflict: str = "_", fallback: str = "field") -> str:
        """
        Sanitize a name for safe use in the target language.

        The result is a pure function of the arguments; uniqueness is the job
        of :class:`UniqueNameScope`.

        Args:
            name: Original name to sanitize
            target_case: Desired case style
            suffix_on_conflict: Suffix added to reserved words
            fallback: Name used when nothing usable is left after cleanup

        Returns:
            Sanitized name safe for use
        """
        cache_key = f"{name}\0{target_case.value}\0{suffix_on_conflict}\0{fallback}"
        if cache_key in self._name_cache:
            return self._name_cache[cache_key]

        cleaned = self._clean_basic(name)
        converted = self._convert_case(cleaned, target_case) if cleaned else ""

        if not converted:
            converted = self._convert_case(fallback, target_case)

        # Identifiers cannot start with a digit
        if converted[0].isdigit():
            converted = f"_{converted}"

        final_name = self._escape_reserved(converted, suffix_on_conflict)
        self._name_cache[cache_key] = final_name
        return final_name

    def _clean_basic(self, name: str) -> str:
        """Basic name cleanup - remove invalid characters."""
        cleaned = re.sub(r'[^a-zA-Z0-9_-]', '_', str(name))
        return cleaned.strip('_-')

    def _convert_case(self, name: str, target_case: NamingCase) -> str:
        """Convert name to target case style."""
        if target_case == NamingCase.SNAKE_CASE:
            return self._to_snake_case(name)
        elif target_case == NamingCase.CAMEL_CASE:
            return self._to_camel_case(name)
        elif target_case == NamingCase.PASCAL_CASE:
            return self._to_pascal_case(name)
        elif target_case == NamingCase.KEBAB_CASE:
            return self._to_kebab_case(name)
        elif target_case == NamingCase.SCREAMING_SNAKE:
            return self._to_snake_case(name).upper()
        else:
            return name

    def _to_snake_case(self, name: str) -> str:
        """Convert to snake_case."""
        name = name.replace('-', '_')

        # HTTPServer -> HTTP_Server, userName -> user_Name
        name = re.sub(r'([A-Z]+)([A-Z][a-z])', r'\1_\2', name)
        name = re.sub(r'([a-z0-9])([A-Z])', r'\1_\2', name)

        name = name.lower()
        name = re.sub(r'_+', '_', name)

        return name.strip('_')

    def _to_camel_case(self, name: str) -> str:
        """Convert to camelCase."""
        parts = self._to_snake_case(name).split('_')
        if not parts:
            return name
        return parts[0].lower() + ''.join(part.capitalize() for part in parts[1:])

    def _to_pascal_case(self, name: str) -> str:
        """Convert to PascalCase."""
        parts = self._to_snake_case(name).split('_')
        return ''.join(part.capitalize() for part in parts if part)

    def _to_kebab_case(self, name: str) -> str:
        """Convert to kebab-case."""
        return self._to_snake_case(name).replace('_', '-')

    def _escape_reserved(self, name: str, suffix: str) -> str:
        """Append the conflict suffix to reserved words and builtins."""
        if name in self.reserved_words or name in self.builtin_types:
            return f"{name}{suffix}"
        return name


class UniqueNameScope:
    """A set of claimed identifiers with deterministic numeric disambiguation.

    The first claim of a name gets it unchanged; later claims of the same name
    get ``<name><separator>1``, ``<name><separator>2`` ... skipping suffixes
    that are already taken. Claims are resolved in call order, so declaration
    order decides who keeps the bare name.
    """

    def __init__(self, taken: Iterable[str] = (), separator: str = "_"):
        self.separator = separator
        self._used: Set[str] = set(taken)

    def __contains__(self, name: str) -> bool:
        return name in self._used

    def claim(self, name: str) -> str:
        """Claim ``name`` (or the first free suffixed variant) and return it."""
        candidate = name
        counter = 1
        while candidate in self._used:
            candidate = f"{name}{self.separator}{counter}"
            counter += 1
        self._used.add(candidate)
        return candidate

    def add(self, name: str):
        """Mark a name as used without disambiguation."""
        self._used.add(name)


# Irregular plurals are rare in schema property names; the suffix rules cover
# the common English cases.
_SINGULAR_RULES = [
    (re.compile(r'(?i)(quiz)zes$'), r'\1'),
    (re.compile(r'(?i)(matr|vert|ind)ices$'), r'\1ix'),
    (re.compile(r'(?i)(alias|status|address)(es)?$'), r'\1'),
    (re.compile(r'(?i)([^aeiouy]|qu)ies$'), r'\1y'),
    (re.compile(r'(?i)(x|ch|ss|sh)es$'), r'\1'),
    (re.compile(r'(?i)(children)$'), 'child'),
    (re.compile(r'(?i)(people)$'), 'person'),
    (re.compile(r'(?i)([^s])s$'), r'\1'),
]


def singularize(word: str) -> str:
    """Return a singular form of an English plural noun."""
    for pattern, replacement in _SINGULAR_RULES:
        if pattern.search(word):
            return pattern.sub(replacement, word)
    return word


def name_from_ref(ref: str) -> str:
    """Derive a type name candidate from a $ref value.

    ``#/definitions/postalAddress`` gives ``postalAddress``;
    ``schemas/person.schema.json`` gives ``person``.
    """
    document, fragment = urldefrag(ref)
    if fragment:
        tokens = [t for t in fragment.split('/') if t]
        if tokens:
            return unquote(tokens[-1]).replace('~1', '/').replace('~0', '~')

    path = urlsplit(document).path.rstrip('/')
    base = path.rsplit('/', 1)[-1] if path else ""
    base = base.split('.', 1)[0]
    return base or "Root"


class NameHelper:
    """Naming decisions used by the rules.

    Wraps a :class:`NameSanitizer` with the configured case styles and the
    keywords that override names (``x-name``, ``title``).
    """

    NAME_KEYWORD = "x-name"
    ENUM_NAMES_KEYWORD = "x-enum-names"

    def __init__(self, sanitizer: NameSanitizer, config: Any):
        self.sanitizer = sanitizer
        self.config = config

    @property
    def class_case(self) -> NamingCase:
        return NamingCase(self.config.class_case)

    @property
    def field_case(self) -> NamingCase:
        return NamingCase(self.config.field_case)

    @property
    def enum_case(self) -> NamingCase:
        return NamingCase(self.config.enum_case)

    def normalize_class_name(self, name: str) -> str:
        """Normalize a raw name into a class identifier with prefix/suffix."""
        base = self.sanitizer.sanitize_name(
            name, self.class_case, fallback="Type"
        )
        return f"{self.config.class_name_prefix}{base}{self.config.class_name_suffix}"

    def class_name(self, name: str, node) -> str:
        """Pick the class name for a schema node reached under ``name``.

        ``x-name`` wins, then ``title`` when configured, then ``name``.
        A dotted ``x-name`` contributes only its last segment here.
        """
        explicit = self.explicit_name(node)
        if explicit:
            return self.normalize_class_name(explicit.rsplit('.', 1)[-1])

        title = node.get("title") if node is not None else None
        if self.config.use_title_as_class_name and isinstance(title, str) and title.strip():
            return self.normalize_class_name(title)

        return self.normalize_class_name(name)

    def explicit_name(self, node) -> Optional[str]:
        """Return the ``x-name`` keyword of a node, if it is a usable string."""
        if node is None:
            return None
        value = node.get(self.NAME_KEYWORD)
        if isinstance(value, str) and value.strip():
            return value.strip()
        return None

    def explicit_namespace(self, node) -> Optional[str]:
        """Namespace part of a dotted ``x-name`` (``pkg.sub.Name`` -> ``pkg.sub``)."""
        explicit = self.explicit_name(node)
        if explicit and '.' in explicit:
            return explicit.rsplit('.', 1)[0]
        return None

    def field_name(self, property_name: str, node) -> str:
        """Target field name for a property (``x-name`` overrides)."""
        explicit = self.explicit_name(node)
        source = explicit if explicit else property_name
        return self.sanitizer.sanitize_name(source, self.field_case, fallback="field")

    def enum_constant_name(self, value: Any) -> str:
        """Target member name for a literal enum value."""
        if isinstance(value, bool):
            raw = "true" if value else "false"
        elif value == "":
            raw = "empty"
        else:
            raw = str(value)
        return self.sanitizer.sanitize_name(raw, self.enum_case, fallback="value")

    def item_type_name(self, name: str) -> str:
        """Class name candidate for array elements reached under ``name``."""
        return singularize(name)

    def additional_properties_type_name(self, owner_name: str) -> str:
        """Class name candidate for a typed additionalProperties value."""
        return f"{owner_name}Property"
