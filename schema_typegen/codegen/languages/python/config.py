"""
Python-specific configuration and type mappings.

Maps primitive kinds of the type model to Python annotations and the imports
they need, for dataclass and Pydantic output.
"""

from enum import Enum
from typing import Any, Dict, Set

from ...core.model import PrimitiveKind


class PythonStyle(Enum):
    """Python code generation styles."""

    DATACLASS = "dataclass"
    PYDANTIC = "pydantic"


# Python type mappings
PYTHON_TYPE_MAP = {
    PrimitiveKind.STRING: "str",
    PrimitiveKind.INTEGER: "int",
    PrimitiveKind.LONG: "int",
    PrimitiveKind.BIG_INTEGER: "int",
    PrimitiveKind.FLOAT: "float",
    PrimitiveKind.DOUBLE: "float",
    PrimitiveKind.DECIMAL: "Decimal",
    PrimitiveKind.BOOLEAN: "bool",
    PrimitiveKind.ANY: "Any",
    PrimitiveKind.NULL: "None",
    PrimitiveKind.DATE_TIME: "datetime",
    PrimitiveKind.DATE: "date",
    PrimitiveKind.TIME: "time",
    PrimitiveKind.UUID: "UUID",
    PrimitiveKind.URI: "str",
    PrimitiveKind.REGEX: "str",
    PrimitiveKind.BYTES: "bytes",
}

# Types that require imports
PYTHON_IMPORT_MAP = {
    "Any": ("typing", "Any"),
    "Decimal": ("decimal", "Decimal"),
    "datetime": ("datetime", "datetime"),
    "date": ("datetime", "date"),
    "time": ("datetime", "time"),
    "UUID": ("uuid", "UUID"),
}

# Imports every file of a style needs
STYLE_IMPORTS = {
    PythonStyle.DATACLASS: {("dataclasses", "dataclass"), ("dataclasses", "field")},
    PythonStyle.PYDANTIC: {("pydantic", "BaseModel"), ("pydantic", "ConfigDict"), ("pydantic", "Field")},
}


class PythonConfig:
    """Python-specific configuration, read from ``GenerationConfig.custom``."""

    def __init__(self, style: str = "dataclass", **kwargs):
        """Initialize Python configuration."""
        try:
            self.style = PythonStyle(style)
        except ValueError:
            # Styles without a Python counterpart ("none") render plain dataclasses
            self.style = PythonStyle.DATACLASS

        # Optional field handling
        self.use_optional = kwargs.get("use_optional", True)

        # Pydantic-specific options
        self.pydantic_use_alias = kwargs.get("pydantic_use_alias", True)
        self.pydantic_config_dict = kwargs.get("pydantic_config_dict", True)

        # Dataclass-specific options
        self.dataclass_frozen = kwargs.get("dataclass_frozen", False)
        self.dataclass_slots = kwargs.get("dataclass_slots", False)
        self.dataclass_kw_only = kwargs.get("dataclass_kw_only", True)

        self.type_map = PYTHON_TYPE_MAP.copy()
        for kind_name, python_type in kwargs.get("type_overrides", {}).items():
            self.type_map[PrimitiveKind(kind_name)] = python_type

    @classmethod
    def from_generation_config(cls, config) -> "PythonConfig":
        return cls(style=config.annotation_style, **config.custom)

    def get_python_type(self, kind: PrimitiveKind) -> str:
        """Get Python annotation for a primitive kind."""
        return self.type_map.get(kind, "Any")

    def get_required_imports(self, types_used: Set[str]) -> Dict[str, Set[str]]:
        """Imports grouped by module for the annotations in ``types_used``."""
        imports: Dict[str, Set[str]] = {}
        for module, name in STYLE_IMPORTS[self.style]:
            imports.setdefault(module, set()).add(name)
        for python_type in types_used:
            if python_type in PYTHON_IMPORT_MAP:
                module, name = PYTHON_IMPORT_MAP[python_type]
                imports.setdefault(module, set()).add(name)
        return imports

    def as_dict(self) -> Dict[str, Any]:
        return {
            "style": self.style.value,
            "use_optional": self.use_optional,
            "pydantic_use_alias": self.pydantic_use_alias,
            "pydantic_config_dict": self.pydantic_config_dict,
            "dataclass_frozen": self.dataclass_frozen,
            "dataclass_slots": self.dataclass_slots,
            "dataclass_kw_only": self.dataclass_kw_only,
        }
