"""
Python naming rules: reserved words, builtins and pydantic model members
that generated identifiers must not shadow.
"""

from ...core.naming import NameSanitizer


# Python reserved keywords
PYTHON_RESERVED_WORDS = {
    "False",
    "None",
    "True",
    "and",
    "as",
    "assert",
    "async",
    "await",
    "break",
    "class",
    "continue",
    "def",
    "del",
    "elif",
    "else",
    "except",
    "finally",
    "for",
    "from",
    "global",
    "if",
    "import",
    "in",
    "is",
    "lambda",
    "nonlocal",
    "not",
    "or",
    "pass",
    "raise",
    "return",
    "try",
    "while",
    "with",
    "yield",
}

# Python built-in types and functions
PYTHON_BUILTIN_TYPES = {
    # Types
    "int",
    "float",
    "str",
    "bool",
    "list",
    "dict",
    "set",
    "tuple",
    "bytes",
    "bytearray",
    "frozenset",
    "range",
    "object",
    "type",
    "complex",
    "memoryview",
    # Special attributes
    "property",
    "staticmethod",
    "classmethod",
    "super",
    # Common functions
    "len",
    "print",
    "input",
    "open",
    "all",
    "any",
    "abs",
    "min",
    "max",
    "sum",
    "sorted",
    "reversed",
    "enumerate",
    "zip",
    "map",
    "filter",
    "isinstance",
    "issubclass",
    "hasattr",
    "getattr",
    "setattr",
    "delattr",
    "dir",
    "vars",
    "id",
    "hash",
    "repr",
    "str",
    "format",
    "iter",
    "next",
    "slice",
    "callable",
    # Exceptions
    "Exception",
    "BaseException",
    "ValueError",
    "TypeError",
    "KeyError",
    "AttributeError",
    "IndexError",
    "RuntimeError",
    "NotImplementedError",
    "StopIteration",
}

# Members of pydantic.BaseModel and helpers emitted on generated classes
PYTHON_MODEL_MEMBERS = {
    "model_config",
    "model_fields",
    "model_dump",
    "model_validate",
    "model_copy",
    "model_rebuild",
    "schema",
    "json",
    "copy",
    "from_required",
    "get_property",
    "set_property",
    "with_property",
}

# Names imported by generated modules
PYTHON_IMPORTED_NAMES = {
    "annotations",
    "Any",
    "ClassVar",
    "Enum",
    "Decimal",
    "UUID",
    "datetime",
    "date",
    "time",
    "dataclass",
    "field",
    "replace",
    "BaseModel",
    "ConfigDict",
    "Field",
}


def create_python_sanitizer() -> NameSanitizer:
    """Create a name sanitizer configured for Python."""
    return NameSanitizer(
        PYTHON_RESERVED_WORDS,
        PYTHON_BUILTIN_TYPES | PYTHON_MODEL_MEMBERS | PYTHON_IMPORTED_NAMES,
    )
