"""
Command-line interface for schema_typegen.

Generates Python models from a JSON Schema file or URL.
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.syntax import Syntax
from rich.table import Table

from .codegen import (
    GenerationConfig,
    TypeGenerator,
    TypegenError,
    is_language_supported,
    list_annotation_styles,
    list_supported_languages,
    load_config,
)
from .codegen.core.config import ConfigError, get_config_manager
from .codegen.core.model import type_display_name
from .codegen.registry import get_annotator_registry
from .logging_config import configure_logging, get_logger

logger = get_logger(__name__)

console = Console()


class CLIError(Exception):
    """Exception raised for CLI-related errors."""

    pass


def create_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="schema-typegen",
        description="Generate typed models from JSON Schema documents",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  schema-typegen person.schema.json
  schema-typegen person.schema.json --style dataclass -o models.py
  schema-typegen https://example.com/schemas/order.json --summary
  schema-typegen --list-languages
        """.strip(),
    )

    parser.add_argument("schema", nargs="?", help="Schema file path or URL")

    # Core generation options
    parser.add_argument(
        "--language", "-l", default="python", help="Target language (default: python)"
    )
    parser.add_argument("--output", "-o", metavar="FILE", help="Output file (default: stdout)")
    parser.add_argument("--config", metavar="FILE", help="Configuration file path (JSON)")
    parser.add_argument(
        "--style",
        "-s",
        help="Annotation style: pydantic, dataclass or none (default: pydantic)",
    )
    parser.add_argument("--root-name", metavar="NAME", help="Name for the root type")
    parser.add_argument("--package-name", "--package", metavar="NAME", help="Package name")

    # Common options
    common_group = parser.add_argument_group("common generation options")
    common_group.add_argument(
        "--no-comments", action="store_true", help="Don't add comments to generated code"
    )
    common_group.add_argument(
        "--class-case",
        choices=["pascal", "camel", "snake"],
        help="Naming case for classes",
    )
    common_group.add_argument(
        "--field-case",
        choices=["pascal", "camel", "snake"],
        help="Naming case for fields",
    )
    common_group.add_argument(
        "--title-names",
        action="store_true",
        help="Use schema titles as class names",
    )
    common_group.add_argument(
        "--builders", action="store_true", help="Generate builder classes"
    )
    common_group.add_argument(
        "--no-constraints",
        action="store_true",
        help="Don't emit validation constraints",
    )
    common_group.add_argument(
        "--fail-on-unsupported",
        action="store_true",
        help="Abort on schema constructs that cannot be represented",
    )

    # Informational commands
    info_group = parser.add_argument_group("information")
    info_group.add_argument(
        "--summary", action="store_true", help="Show a table of generated types"
    )
    info_group.add_argument(
        "--list-languages",
        action="store_true",
        help="List supported languages and annotation styles and exit",
    )
    info_group.add_argument(
        "--verbose", "-v", action="count", default=0, help="Increase log verbosity"
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point for the ``schema-typegen`` command."""
    parser = create_parser()
    args = parser.parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    configure_logging(level)

    try:
        if args.list_languages:
            return _list_languages()

        if not args.schema:
            console.print("[red]✗[/red] A schema file or URL is required")
            return 1

        config = _build_config(args)
        return _generate_and_output(args, config)

    except CLIError as e:
        console.print(f"[red]✗ Error:[/red] {e}")
        return 1
    except TypegenError as e:
        logger.error("Generation aborted: %s", e)
        console.print(f"[red]✗ Generation failed:[/red] {e}")
        return 1


def _list_languages() -> int:
    """List supported languages and annotation styles."""
    table = Table(title="📋 Supported Targets", box=box.ROUNDED, title_style="bold cyan")
    table.add_column("Kind", style="bold green", no_wrap=True)
    table.add_column("Names", style="cyan")

    table.add_row("Languages", ", ".join(list_supported_languages()))
    table.add_row("Annotation styles", ", ".join(list_annotation_styles()))

    console.print()
    console.print(table)
    console.print()
    console.print(
        Panel(
            "[bold]Usage:[/bold] schema-typegen [dim]schema.json[/dim] --style [cyan]STYLE[/cyan]",
            title="💡 Quick Start",
            border_style="blue",
        )
    )
    return 0


def _build_config(args: argparse.Namespace) -> GenerationConfig:
    """Build configuration from CLI arguments."""
    overrides: dict[str, Any] = {}

    style = None
    if args.style:
        styles = get_annotator_registry()
        if not styles.is_supported(args.style):
            raise CLIError(
                f"Unknown annotation style '{args.style}'. "
                f"Available: {', '.join(list_annotation_styles())}"
            )
        style = styles.resolve_name(args.style)
        overrides["annotation_style"] = style

    if args.package_name:
        overrides["package_name"] = args.package_name
    if args.no_comments:
        overrides["add_comments"] = False
    if args.class_case:
        overrides["class_case"] = args.class_case
    if args.field_case:
        overrides["field_case"] = args.field_case
    if args.title_names:
        overrides["use_title_as_class_name"] = True
    if args.builders:
        overrides["generate_builders"] = True
    if args.no_constraints:
        overrides["include_validation_constraints"] = False
    if args.fail_on_unsupported:
        overrides["fail_on_unsupported"] = True

    try:
        config = load_config(
            style or "pydantic", custom_config=overrides, config_file=args.config
        )
    except ConfigError as e:
        raise CLIError(f"Configuration error: {e}") from e

    for warning in get_config_manager().validate_config(config):
        console.print(f"[yellow]⚠️  {warning}[/yellow]")
    return config


def _generate_and_output(args: argparse.Namespace, config: GenerationConfig) -> int:
    """Generate code and handle output with rich formatting."""
    if not is_language_supported(args.language):
        raise CLIError(
            f"Unsupported language '{args.language}'. "
            f"Supported languages: {', '.join(list_supported_languages())}"
        )

    generator = TypeGenerator(config=config)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("[cyan]Resolving schema and building types...", total=None)
        generator.generate(_schema_source(args.schema), name=args.root_name)
        progress.remove_task(task)

        task = progress.add_task(f"[green]Rendering {args.language} code...", total=None)
        result = generator.render(language=args.language)
        progress.remove_task(task)

    if not result.success:
        console.print(f"[red]✗ Code generation failed:[/red] {result.error_message}")
        return 1

    if args.output:
        output_path = Path(args.output)
        try:
            output_path.write_text(result.code, encoding="utf-8")
        except OSError as e:
            console.print(f"[red]✗ Failed to write to {output_path}:[/red] {e}")
            return 1
        console.print(f"[green]✓[/green] Generated code saved to [cyan]{output_path}[/cyan]")
    else:
        console.print(Syntax(result.code, "python", theme="monokai"))

    if args.summary:
        _print_summary(generator)

    if result.warnings:
        console.print("\n[yellow]⚠️  Warnings:[/yellow]")
        for warning in result.warnings:
            console.print(f"  [yellow]•[/yellow] {warning}")
        console.print()

    return 0


def _schema_source(schema: str) -> str | Path:
    if "://" in schema:
        return schema
    path = Path(schema)
    if not path.exists():
        raise CLIError(f"Schema file not found: {schema}")
    return path


def _print_summary(generator: TypeGenerator) -> None:
    """Show the generated types in a table."""
    table = Table(
        title="📊 Generated Types",
        box=box.SIMPLE,
        show_header=True,
        header_style="bold cyan",
    )
    table.add_column("Type", style="bold")
    table.add_column("Kind", style="green")
    table.add_column("Members", justify="right")
    table.add_column("Extends", style="dim")

    for gtype in generator.types():
        members = len(gtype.enum_members) if gtype.is_enum else len(gtype.fields)
        table.add_row(
            gtype.qualified_name,
            gtype.kind.value,
            str(members),
            type_display_name(gtype.supertype) if gtype.supertype else "",
        )

    roots = ", ".join(
        f"{name} → {type_display_name(ref)}" for name, ref in generator.roots.items()
    )
    console.print()
    console.print(table)
    console.print(f"[dim]Roots: {roots}[/dim]")
