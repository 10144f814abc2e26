"""
Core type generation components.

Schema resolution, the rule engine, the type model and the base renderer
interface used by all target languages.
"""

from .annotator import Annotator, CompositeAnnotator, FieldMetadata, Markup, NoopAnnotator
from .compat import TypeCompatibility
from .config import ConfigError, ConfigManager, GenerationConfig, load_config
from .engine import RegistryError, RuleContext, RuleEngine, RuleRegistry, default_registry, rule
from .errors import (
    AmbiguousTypeError,
    CyclicLoadError,
    TypegenError,
    UnresolvableReferenceError,
    UnsupportedSchemaConstructError,
)
from .generator import GenerationResult, GeneratorError, TypeRenderer, render_types
from .model import (
    ANY_TYPE,
    ArrayType,
    Field,
    GeneratedType,
    MapType,
    PrimitiveKind,
    PrimitiveType,
    TypeKind,
    TypeModel,
)
from .naming import NameHelper, NameSanitizer, NamingCase, UniqueNameScope
from .schema import SchemaNode, SchemaStore
from .templates import TemplateEngine, TemplateError, create_template_engine

__all__ = [
    # Schema resolution
    "SchemaNode",
    "SchemaStore",
    # Rule engine
    "RuleEngine",
    "RuleContext",
    "RuleRegistry",
    "default_registry",
    "rule",
    # Type model
    "TypeModel",
    "GeneratedType",
    "Field",
    "TypeKind",
    "PrimitiveKind",
    "PrimitiveType",
    "ArrayType",
    "MapType",
    "ANY_TYPE",
    "TypeCompatibility",
    # Annotators
    "Annotator",
    "NoopAnnotator",
    "CompositeAnnotator",
    "FieldMetadata",
    "Markup",
    # Naming utilities - language-agnostic
    "NameSanitizer",
    "NamingCase",
    "NameHelper",
    "UniqueNameScope",
    # Configuration system
    "GenerationConfig",
    "ConfigManager",
    "ConfigError",
    "load_config",
    # Errors
    "TypegenError",
    "UnresolvableReferenceError",
    "CyclicLoadError",
    "AmbiguousTypeError",
    "UnsupportedSchemaConstructError",
    "RegistryError",
    # Rendering
    "TypeRenderer",
    "GeneratorError",
    "GenerationResult",
    "render_types",
    "TemplateEngine",
    "TemplateError",
    "create_template_engine",
]
