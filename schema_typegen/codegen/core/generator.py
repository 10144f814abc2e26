"""
Base renderer interface for all code generation targets.

Defines the contract that language renderers implement: turning the
generated type model into source text.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional

from ...logging_config import get_logger
from .config import GenerationConfig
from .model import ANY_TYPE, ArrayType, GeneratedType, MapType, TypeRef
from .templates import TemplateEngine, create_template_engine

logger = get_logger(__name__)


class GeneratorError(Exception):
    """Base exception for code generation errors."""

    pass


class TypeRenderer(ABC):
    """Abstract base class for all type renderers."""

    def __init__(self, config: Optional[GenerationConfig] = None):
        """Initialize renderer with optional configuration."""
        self.config = config or GenerationConfig()
        self._template_engine = None
        self._setup_templates()

    def _setup_templates(self):
        """Setup template engine for this renderer."""
        self._template_engine = create_template_engine(self.get_template_directory())

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Return the name of the target language (e.g., 'python')."""
        pass

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """Return the file extension for generated files (e.g., '.py')."""
        pass

    def get_template_directory(self) -> Optional[Path]:
        """
        Return the directory containing templates for this renderer.

        Return None to use in-memory templates only.
        """
        return None

    @property
    def template_engine(self) -> TemplateEngine:
        """Get the template engine for this renderer."""
        if self._template_engine is None:
            self._setup_templates()
        return self._template_engine

    @abstractmethod
    def render(self, types: List[GeneratedType], roots: Dict[str, TypeRef]) -> str:
        """
        Render source code for generated types.

        Args:
            types: Generated types in dependency order
            roots: Root type references by name

        Returns:
            Generated code as a string
        """
        pass

    def validate_types(self, types: List[GeneratedType]) -> List[str]:
        """
        Check generated types for things the output cannot express well.

        Returns:
            List of warning messages (empty if no issues)
        """
        warnings = []

        for gtype in types:
            if gtype.is_enum:
                if not gtype.enum_members:
                    warnings.append(f"Enum '{gtype.name}' has no members")
                continue

            extension = gtype.extension_point
            if not gtype.fields and gtype.supertype is None and (extension is None or extension.is_sealed):
                warnings.append(f"Type '{gtype.name}' has no fields")

            for fld in gtype.fields:
                if fld.type == ANY_TYPE:
                    warnings.append(f"Field {gtype.name}.{fld.name} has no declared type")
                elif isinstance(fld.type, (ArrayType, MapType)):
                    inner = fld.type.element if isinstance(fld.type, ArrayType) else fld.type.value
                    if inner == ANY_TYPE:
                        warnings.append(
                            f"Collection field {gtype.name}.{fld.name} has no element type"
                        )

        return warnings

    def format_code(self, code: str) -> str:
        """
        Apply language-specific formatting to generated code.

        Args:
            code: Raw generated code

        Returns:
            Formatted code
        """
        # Basic cleanup - remove excessive blank lines
        lines = code.split("\n")
        formatted_lines = []
        blank_count = 0

        for line in lines:
            stripped = line.rstrip()
            if not stripped:
                blank_count += 1
                if blank_count <= 2:  # Allow max 2 consecutive blank lines
                    formatted_lines.append("")
            else:
                blank_count = 0
                formatted_lines.append(stripped)

        return "\n".join(formatted_lines).strip("\n") + "\n"

    # Template helper methods

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """Render a template with context."""
        return self.template_engine.render_template(template_name, context)


class GenerationResult:
    """Container for generation results and metadata."""

    def __init__(
        self, code: str, warnings: List[str] = None, metadata: Dict[str, Any] = None
    ):
        """
        Initialize generation result.

        Args:
            code: Generated code
            warnings: Any warnings from generation
            metadata: Additional metadata about generation
        """
        self.code = code
        self.warnings = warnings or []
        self.metadata = metadata or {}
        self.success = True
        self.error_message: Optional[str] = None
        self.exception: Optional[Exception] = None

    @classmethod
    def error(cls, message: str, exception: Exception = None) -> "GenerationResult":
        """Create a failed generation result."""
        result = cls(code="")
        result.success = False
        result.error_message = message
        result.exception = exception
        return result


def render_types(
    renderer: TypeRenderer,
    types: List[GeneratedType],
    roots: Dict[str, TypeRef],
    warnings: Optional[List[str]] = None,
) -> GenerationResult:
    """
    Render types using the specified renderer with error handling.

    Args:
        renderer: Renderer instance
        types: Generated types in dependency order
        roots: Root type references by name
        warnings: Warnings already collected while building the types

    Returns:
        GenerationResult with code, warnings, and metadata
    """
    try:
        all_warnings = list(warnings or [])
        all_warnings.extend(renderer.validate_types(types))

        code = renderer.render(types, roots)
        formatted_code = renderer.format_code(code)

        metadata = {
            "language": renderer.language_name,
            "file_extension": renderer.file_extension,
            "type_count": len(types),
            "enum_count": sum(1 for t in types if t.is_enum),
            "roots": list(roots),
            "annotation_style": renderer.config.annotation_style,
        }

        return GenerationResult(formatted_code, all_warnings, metadata)

    except Exception as e:
        logger.error("Rendering failed: %s", e)
        return GenerationResult.error(f"Code generation failed: {str(e)}", exception=e)
