"""
Schema Typegen Code Generation Module

Builds a deduplicated type model from JSON Schema documents and renders it
in a target language.
"""

from pathlib import Path
from typing import Any, Dict, Optional, Union

from .core.config import GenerationConfig, ConfigManager, load_config
from .core.errors import (
    AmbiguousTypeError,
    CyclicLoadError,
    TypegenError,
    UnresolvableReferenceError,
    UnsupportedSchemaConstructError,
)
from .core.generator import GenerationResult, GeneratorError, TypeRenderer, render_types
from .core.model import GeneratedType, TypeModel, TypeRef
from .registry import (
    ComponentRegistry,
    get_annotator,
    get_renderer,
    is_language_supported,
    list_annotation_styles,
    list_supported_languages,
    register_annotator,
    register_renderer,
)
from .typegen import TypeGenerator, load_schema_file

# Version info
__version__ = "0.1.0"

ConfigSource = Optional[Union[GenerationConfig, Dict[str, Any], str, Path]]


def _config_from(config: ConfigSource, style: Optional[str]) -> GenerationConfig:
    if isinstance(config, GenerationConfig):
        return config
    if isinstance(config, (str, Path)):
        return load_config(style or "pydantic", config_file=config)
    return load_config(style or "pydantic", custom_config=config)


# Convenience functions
def generate_types(
    schema: Union[Dict[str, Any], str, Path],
    root_name: Optional[str] = None,
    config: ConfigSource = None,
    style: Optional[str] = None,
    fetcher=None,
) -> TypeGenerator:
    """
    Build the type model for a schema.

    Args:
        schema: Parsed schema, path to a schema file, or schema URI
        root_name: Name for the root type
        config: Configuration as GenerationConfig, dict, or file path
        style: Annotation style when config does not set one
        fetcher: Fetch capability for referenced documents

    Returns:
        The TypeGenerator holding the model, roots and warnings
    """
    generator = TypeGenerator(config=_config_from(config, style), fetcher=fetcher)
    generator.generate(schema, name=root_name)
    return generator


def generate_code_from_schema(
    schema: Union[Dict[str, Any], str, Path],
    language: str = "python",
    root_name: Optional[str] = None,
    config: ConfigSource = None,
    style: Optional[str] = None,
    fetcher=None,
) -> GenerationResult:
    """
    Generate source code for a schema.

    Fatal schema errors are reported as a failed result rather than raised.

    Returns:
        GenerationResult with generated code
    """
    try:
        generator = generate_types(schema, root_name, config, style, fetcher)
    except TypegenError as e:
        return GenerationResult.error(str(e), exception=e)
    return generator.render(language=language)


# Export main interfaces
__all__ = [
    "TypeGenerator",
    "TypeRenderer",
    "GenerationResult",
    "GeneratorError",
    "GeneratedType",
    "TypeModel",
    "TypeRef",
    "GenerationConfig",
    "ConfigManager",
    "load_config",
    "load_schema_file",
    "TypegenError",
    "UnresolvableReferenceError",
    "CyclicLoadError",
    "AmbiguousTypeError",
    "UnsupportedSchemaConstructError",
    "ComponentRegistry",
    "generate_types",
    "generate_code_from_schema",
    "render_types",
    "get_renderer",
    "get_annotator",
    "register_renderer",
    "register_annotator",
    "list_supported_languages",
    "list_annotation_styles",
    "is_language_supported",
]
