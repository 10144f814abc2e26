"""
schema_typegen - generate typed models from JSON Schema documents.
"""

from .codegen import (
    GenerationConfig,
    GenerationResult,
    TypeGenerator,
    TypegenError,
    generate_code_from_schema,
    generate_types,
    load_config,
)
from .logging_config import configure_logging, get_logger

__version__ = "0.1.0"

__all__ = [
    "TypeGenerator",
    "GenerationConfig",
    "GenerationResult",
    "TypegenError",
    "generate_types",
    "generate_code_from_schema",
    "load_config",
    "configure_logging",
    "get_logger",
]
