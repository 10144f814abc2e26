"""
Jinja2 environment for rendering generated source files.

Templates are plain-text source, so autoescaping is off and undefined
variables fail loudly instead of rendering as empty strings.
"""

from pathlib import Path
from typing import Any, Dict, Optional

from jinja2 import DictLoader, Environment, FileSystemLoader, StrictUndefined
from jinja2 import TemplateError as JinjaTemplateError


class TemplateError(Exception):
    """Exception raised when a template cannot be loaded or rendered."""

    pass


class TemplateEngine:
    """Jinja2 environment with source-code filters."""

    def __init__(self, template_dir: Optional[Path] = None):
        """
        Initialize template engine.

        Args:
            template_dir: Directory containing ``.j2`` templates. Without one
                the engine starts with an empty in-memory loader.
        """
        self.template_dir = template_dir
        if template_dir is not None and template_dir.exists():
            loader = FileSystemLoader(str(template_dir))
        else:
            loader = DictLoader({})

        self._env = Environment(
            loader=loader,
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )
        self._env.filters["indent_lines"] = indent_lines
        self._env.filters["comment"] = comment_lines
        self._env.filters["docstring"] = docstring_text

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Render a template with the given context.

        Raises:
            TemplateError: If the template is missing, broken, or uses a
                variable the context does not provide
        """
        try:
            template = self._env.get_template(template_name)
            return template.render(**context)
        except JinjaTemplateError as e:
            raise TemplateError(f"Failed to render template {template_name}: {e}") from e


def indent_lines(value: str, spaces: int = 4) -> str:
    """Indent every non-blank line."""
    indent = " " * spaces
    return "\n".join(indent + line if line.strip() else line for line in str(value).split("\n"))


def comment_lines(value: str, marker: str = "#") -> str:
    """Turn text into a block of line comments."""
    return "\n".join(
        f"{marker} {line}" if line.strip() else marker for line in str(value).split("\n")
    )


def docstring_text(value: str) -> str:
    """Escape text for use inside a triple-quoted docstring."""
    text = str(value).replace("\\", "\\\\").replace('"""', '\\"\\"\\"')
    # A quote right before the closing quotes would end the string early
    return text + " " if text.endswith('"') else text


def create_template_engine(template_dir: Optional[Path] = None) -> TemplateEngine:
    """Create a template engine, reading templates from ``template_dir`` when given."""
    return TemplateEngine(template_dir)
