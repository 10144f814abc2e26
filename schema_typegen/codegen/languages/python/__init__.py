"""
Python code generator module.

Renders generated types as Python dataclasses or Pydantic models.
"""

from .annotators import DataclassAnnotator, PydanticAnnotator
from .config import PythonConfig, PythonStyle
from .generator import PythonGenerator, create_python_generator
from .naming import create_python_sanitizer

__all__ = [
    # Generator
    "PythonGenerator",
    "create_python_generator",
    # Annotators
    "PydanticAnnotator",
    "DataclassAnnotator",
    # Naming
    "create_python_sanitizer",
    # Configuration
    "PythonConfig",
    "PythonStyle",
]
