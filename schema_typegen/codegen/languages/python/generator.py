"""
Python code generator implementation.

Renders generated types as Python dataclasses or Pydantic v2 models using
templates.
"""

from datetime import date, datetime, time
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, List, Optional, Set

from ....logging_config import get_logger
from ...core.config import GenerationConfig
from ...core.generator import TypeRenderer
from ...core.model import (
    ArrayType,
    EnumMember,
    ExtensionKind,
    Field,
    GeneratedType,
    MapType,
    PrimitiveKind,
    PrimitiveType,
    TypeRef,
    referenced_types,
)
from ...core.naming import UniqueNameScope
from .config import PythonConfig, PythonStyle

logger = get_logger(__name__)

_STDLIB_MODULES = {"dataclasses", "datetime", "decimal", "enum", "typing", "uuid"}


class PythonGenerator(TypeRenderer):
    """Renderer for Python dataclasses and Pydantic models."""

    def __init__(self, config: Optional[GenerationConfig] = None):
        """Initialize Python renderer with configuration."""
        super().__init__(config)

        self.python_config = PythonConfig.from_generation_config(self.config)

        # State tracking
        self.types_used: Set[str] = set()
        self.extra_imports: Set[tuple] = set()
        self._names: Dict[int, str] = {}

    @property
    def language_name(self) -> str:
        """Return the language name."""
        return "python"

    @property
    def file_extension(self) -> str:
        """Return Python file extension."""
        return ".py"

    @property
    def is_pydantic(self) -> bool:
        return self.python_config.style == PythonStyle.PYDANTIC

    def get_template_directory(self) -> Path:
        """Return the Python templates directory."""
        return Path(__file__).parent / "templates"

    def render(self, types: List[GeneratedType], roots: Dict[str, TypeRef]) -> str:
        """Generate complete Python code for all types."""
        # Reset state
        self.types_used.clear()
        self.extra_imports.clear()

        ordered = self._get_generation_order(types)
        self._assign_names(ordered)

        classes = [self._generate_class_data(gtype) for gtype in ordered]
        aliases = self._generate_aliases(roots)

        context = {
            "header": self._header(roots),
            "import_groups": self._get_import_groups(),
            "classes": classes,
            "aliases": aliases,
            "rebuild": [c["name"] for c in classes if c["kind"] == "object"] if self.is_pydantic else [],
            "config": self.python_config,
        }
        return self.render_template(self._get_template_name(), context)

    def _get_template_name(self) -> str:
        """Get the appropriate template based on style."""
        style_templates = {
            PythonStyle.DATACLASS: "dataclass_file.py.j2",
            PythonStyle.PYDANTIC: "pydantic_file.py.j2",
        }
        return style_templates[self.python_config.style]

    def _header(self, roots: Dict[str, TypeRef]) -> Optional[str]:
        if not self.config.add_comments:
            return None
        names = ", ".join(roots) if roots else "schema"
        return f"Types generated from JSON Schema ({names})."

    # Naming

    def _assign_names(self, types: List[GeneratedType]):
        """Give every type a module-unique class name (namespaces share one file)."""
        scope = UniqueNameScope(separator="")
        self._names = {}
        for gtype in types:
            self._names[id(gtype)] = scope.claim(gtype.name)
        for gtype in types:
            if gtype.builder is not None:
                self._names[id(gtype.builder)] = scope.claim(f"{self._names[id(gtype)]}Builder")

    def class_name(self, gtype: GeneratedType) -> str:
        return self._names.get(id(gtype), gtype.name)

    # Class data

    def _generate_class_data(self, gtype: GeneratedType) -> Dict[str, Any]:
        """Generate class data for template."""
        doc = "\n\n".join(gtype.doc.lines()) if self.config.add_comments else ""
        if gtype.is_enum:
            return {
                "kind": "enum",
                "name": self.class_name(gtype),
                "doc": doc,
                "bases": self._enum_bases(gtype),
                "members": [
                    {"name": m.name, "value": repr(m.value)} for m in gtype.enum_members
                ],
            }

        fields = [self._generate_field_data(f) for f in gtype.fields]
        if not self.is_pydantic and not self.python_config.dataclass_kw_only:
            # Positional dataclass fields without defaults must come first
            fields.sort(key=lambda f: f["default"] is not None)

        class_data = {
            "kind": "object",
            "name": self.class_name(gtype),
            "doc": doc,
            "base": self.class_name(gtype.supertype) if gtype.supertype is not None else None,
            "fields": fields,
            "extension": self._generate_extension_data(gtype),
            "from_required": self._generate_required_constructor(gtype),
            "copy_method": any(c.kind == "copy" for c in gtype.constructors),
            "accessors": self._generate_accessor_data(gtype),
            "builder": self._generate_builder_data(gtype),
        }

        if self.is_pydantic:
            class_data["model_config"] = self._model_config(gtype)
        else:
            class_data["decorator"] = self._dataclass_decorator(gtype)

        if class_data["copy_method"] and not self.is_pydantic:
            self.extra_imports.add(("dataclasses", "replace"))

        class_data["empty"] = not (
            class_data["fields"]
            or class_data["extension"]
            or class_data["from_required"]
            or class_data["copy_method"]
            or class_data["accessors"]
            or class_data.get("model_config")
        )
        return class_data

    def _enum_bases(self, gtype: GeneratedType) -> str:
        self.extra_imports.add(("enum", "Enum"))
        value_type = gtype.enum_value_type
        if value_type is not None and value_type.kind == PrimitiveKind.STRING:
            return "str, Enum"
        if value_type is not None and value_type.is_integral:
            return "int, Enum"
        return "Enum"

    def _generate_field_data(self, fld: Field) -> Dict[str, Any]:
        """Generate field data for template."""
        python_type = self._get_type(fld.type)
        optional = fld.nullable or (not fld.required and not fld.has_default)
        if optional and self.python_config.use_optional and python_type not in ("Any", "None"):
            python_type = f"{python_type} | None"

        default = self._default_expression(fld, optional)
        comment = "\n".join(fld.doc.lines()) if self.config.add_comments else ""

        return {
            "name": fld.name,
            "json_name": fld.json_name,
            "type": python_type,
            "default": default,
            "comment": comment,
        }

    def _default_expression(self, fld: Field, optional: bool) -> Optional[str]:
        """Right-hand side of the field declaration, or None for no default."""
        value_expr = None
        factory_expr = None

        if fld.default is not None and fld.has_default and fld.default_factory is None:
            literal = self._literal(fld.default, fld.type)
            if isinstance(fld.default, (list, dict, set)) or (
                isinstance(fld.type, GeneratedType) and fld.type.is_object
            ):
                factory_expr = f"lambda: {literal}"
            else:
                value_expr = literal
        elif fld.default_factory is not None:
            factory_expr = fld.default_factory
        elif fld.default is None or optional:
            # Explicit null default, or an optional field without one
            if fld.default is None or not fld.required:
                value_expr = "None"

        arguments = self._markup_arguments(fld)

        if self.is_pydantic:
            if not arguments:
                if factory_expr is not None:
                    return f"Field(default_factory={factory_expr})"
                return value_expr
            parts = []
            if value_expr is not None:
                parts.append(value_expr)
            elif factory_expr is not None:
                parts.append(f"default_factory={factory_expr}")
            parts.extend(f"{key}={self._literal(value)}" for key, value in arguments.items())
            return f"Field({', '.join(parts)})"

        if not arguments:
            if factory_expr is not None:
                return f"field(default_factory={factory_expr})"
            return value_expr
        parts = []
        if value_expr is not None:
            parts.append(f"default={value_expr}")
        elif factory_expr is not None:
            parts.append(f"default_factory={factory_expr}")
        parts.append(f"metadata={self._literal(arguments)}")
        return f"field({', '.join(parts)})"

    def _markup_arguments(self, fld: Field) -> Dict[str, Any]:
        arguments: Dict[str, Any] = {}
        wanted = "Field" if self.is_pydantic else "metadata"
        for markup in fld.annotations:
            if getattr(markup, "name", None) == wanted:
                arguments.update(markup.arguments)
        return arguments

    def _generate_extension_data(self, gtype: GeneratedType) -> Optional[Dict[str, Any]]:
        extension = gtype.extension_point
        if extension is None or extension.is_sealed:
            return None
        value_type = self._get_type(extension.value_type) if extension.value_type is not None else "Any"
        if value_type == "Any":
            self.types_used.add("Any")

        if self.is_pydantic:
            if extension.kind != ExtensionKind.TYPED:
                # extra="allow" in model_config is enough
                return None
            return {
                "name": "__pydantic_extra__",
                "type": f"dict[str, {value_type}]",
                "default": "Field(init=False)",
            }

        metadata = {}
        for markup in extension.annotations:
            if getattr(markup, "name", None) == "metadata":
                metadata.update(markup.arguments)
        default = "field(default_factory=dict"
        if metadata:
            default += f", metadata={self._literal(metadata)}"
        default += ")"
        return {
            "name": extension.field_name,
            "type": f"dict[str, {value_type}]",
            "default": default,
        }

    def _model_config(self, gtype: GeneratedType) -> Optional[str]:
        arguments: Dict[str, Any] = {}
        for markup in gtype.annotations:
            if getattr(markup, "name", None) == "model_config":
                arguments.update(markup.arguments)
        if not arguments:
            return None
        return "ConfigDict(" + ", ".join(
            f"{key}={self._literal(value)}" for key, value in arguments.items()
        ) + ")"

    def _dataclass_decorator(self, gtype: GeneratedType) -> str:
        arguments: Dict[str, Any] = {}
        for markup in gtype.annotations:
            if getattr(markup, "name", None) == "dataclass":
                arguments.update(markup.arguments)
        if not arguments:
            arguments = {
                "kw_only": self.python_config.dataclass_kw_only,
                "slots": self.python_config.dataclass_slots,
                "frozen": self.python_config.dataclass_frozen,
            }
        enabled = [f"{key}=True" for key, value in arguments.items() if value]
        return f"@dataclass({', '.join(enabled)})" if enabled else "@dataclass"

    def _generate_required_constructor(self, gtype: GeneratedType) -> Optional[Dict[str, str]]:
        for constructor in gtype.constructors:
            if constructor.kind == "required_properties":
                params = [
                    f"{f.name}: {self._get_type(f.type)}" for f in constructor.parameters
                ]
                args = [f"{f.name}={f.name}" for f in constructor.parameters]
                return {"params": ", ".join(params), "args": ", ".join(args)}
        return None

    def _generate_accessor_data(self, gtype: GeneratedType) -> Optional[Dict[str, Any]]:
        accessors = gtype.dynamic_accessors
        if accessors is None:
            return None
        self.types_used.add("Any")
        self.extra_imports.add(("typing", "ClassVar"))
        by_json_name = {f.json_name: f.name for f in gtype.all_fields()}
        names = {p: by_json_name[p] for p in accessors.properties if p in by_json_name}
        return {"names": self._literal(names)}

    def _generate_builder_data(self, gtype: GeneratedType) -> Optional[Dict[str, Any]]:
        builder = gtype.builder
        if builder is None:
            return None
        self.types_used.add("Any")
        parent = None
        if builder.parent is not None and gtype.supertype is not None:
            parent = self._names.get(id(builder.parent))
        return {
            "name": self._names[id(builder)],
            "parent": parent,
            "fields": [
                {"name": f.name, "type": self._get_type(f.type)} for f in builder.fields
            ],
        }

    def _generate_aliases(self, roots: Dict[str, TypeRef]) -> List[Dict[str, str]]:
        """Aliases for root schemas that are not classes (arrays, maps, primitives)."""
        aliases = []
        taken = set(self._names.values())
        for name, root in roots.items():
            if isinstance(root, GeneratedType) or name in taken:
                continue
            aliases.append({"name": name, "type": self._get_type(root)})
            taken.add(name)
        return aliases

    # Types and literals

    def _get_type(self, type_ref: TypeRef) -> str:
        """Get Python annotation for a type reference."""
        if isinstance(type_ref, GeneratedType):
            return self.class_name(type_ref)
        if isinstance(type_ref, ArrayType):
            element = self._get_type(type_ref.element)
            if type_ref.unique and self._is_hashable(type_ref.element):
                return f"set[{element}]"
            return f"list[{element}]"
        if isinstance(type_ref, MapType):
            return f"dict[str, {self._get_type(type_ref.value)}]"
        python_type = self.python_config.get_python_type(type_ref.kind)
        self.types_used.add(python_type)
        return python_type

    def _is_hashable(self, type_ref: TypeRef) -> bool:
        # Generated dataclasses and models define __eq__ without __hash__
        if isinstance(type_ref, PrimitiveType):
            return type_ref.kind != PrimitiveKind.ANY
        return isinstance(type_ref, GeneratedType) and type_ref.is_enum

    def _literal(self, value: Any, type_ref: Optional[TypeRef] = None) -> str:
        """Python source for a default value."""
        if isinstance(value, EnumMember):
            # Collapsed duplicates keep member names, so any enum in the field type will do
            enum_type = next((t for t in referenced_types(type_ref) if t.is_enum), None)
            owner = self.class_name(enum_type) if enum_type is not None else "Enum"
            return f"{owner}.{value.name}"
        if isinstance(value, bool) or value is None:
            return repr(value)
        if isinstance(value, datetime):
            self.types_used.add("datetime")
            return f"datetime.fromisoformat({value.isoformat()!r})"
        if isinstance(value, date):
            self.types_used.add("date")
            return f"date.fromisoformat({value.isoformat()!r})"
        if isinstance(value, time):
            self.types_used.add("time")
            return f"time.fromisoformat({value.isoformat()!r})"
        if isinstance(value, Decimal):
            self.types_used.add("Decimal")
            return f"Decimal({str(value)!r})"
        if isinstance(value, str) and isinstance(type_ref, PrimitiveType) and type_ref.kind == PrimitiveKind.UUID:
            self.types_used.add("UUID")
            return f"UUID({value!r})"
        if isinstance(value, list):
            element = type_ref.element if isinstance(type_ref, ArrayType) else None
            items = [self._literal(item, element) for item in value]
            if isinstance(type_ref, ArrayType) and type_ref.unique and self._is_hashable(type_ref.element):
                return "{" + ", ".join(items) + "}" if items else "set()"
            return "[" + ", ".join(items) + "]"
        if isinstance(value, dict):
            if isinstance(type_ref, GeneratedType) and type_ref.is_object:
                return self._object_literal(value, type_ref)
            item_type = type_ref.value if isinstance(type_ref, MapType) else None
            items = [f"{key!r}: {self._literal(item, item_type)}" for key, item in value.items()]
            return "{" + ", ".join(items) + "}"
        return repr(value)

    def _object_literal(self, value: Dict[str, Any], gtype: GeneratedType) -> str:
        """Constructor call for an object default, keyed by field names."""
        by_json_name = {f.json_name: f for f in gtype.all_fields()}
        args = []
        for key, item in value.items():
            fld = by_json_name.get(key)
            if fld is None:
                logger.debug("Dropping unknown key %r from default of %s", key, gtype.name)
                continue
            args.append(f"{fld.name}={self._literal(item, fld.type)}")
        return f"{self.class_name(gtype)}({', '.join(args)})"

    # Imports and ordering

    def _get_import_groups(self) -> List[List[str]]:
        """Import lines grouped as standard library, then third-party."""
        imports = self.python_config.get_required_imports(self.types_used)
        for module, name in self.extra_imports:
            imports.setdefault(module, set()).add(name)

        stdlib = []
        third_party = []
        for module in sorted(imports):
            line = f"from {module} import {', '.join(sorted(imports[module]))}"
            (stdlib if module in _STDLIB_MODULES else third_party).append(line)
        return [group for group in (stdlib, third_party) if group]

    def _get_generation_order(self, types: List[GeneratedType]) -> List[GeneratedType]:
        """Order types so base classes and enums precede their users.

        Other references are annotations, which are not evaluated at class
        creation, so they keep the incoming order.
        """
        wanted = {id(t) for t in types}
        visited = set()
        ordered = []

        def visit(gtype: GeneratedType):
            if id(gtype) in visited or id(gtype) not in wanted:
                return
            visited.add(id(gtype))

            if gtype.supertype is not None:
                visit(gtype.supertype)
            for fld in gtype.fields:
                for dependency in referenced_types(fld.type):
                    if dependency.is_enum:
                        visit(dependency)
            ordered.append(gtype)

        for gtype in types:
            visit(gtype)

        return ordered


def create_python_generator(config: Optional[GenerationConfig] = None, style: str = None) -> PythonGenerator:
    """Create a Python renderer, optionally forcing the output style."""
    if config is None:
        from ...core.config import load_config

        config = load_config(style or "dataclass")
    elif style is not None and style != config.annotation_style:
        from dataclasses import replace

        config = replace(config, annotation_style=style)
    return PythonGenerator(config)
