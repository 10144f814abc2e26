"""
Configuration management for type generation.

Handles loading and merging configuration from JSON files,
providing defaults per annotation style and validation of settings.
"""

import json
from pathlib import Path
from typing import Dict, Any, Optional, Union
from dataclasses import dataclass, field, fields, asdict


class ConfigError(Exception):
    """Exception raised for configuration-related errors."""
    pass


@dataclass
class GenerationConfig:
    """Options consumed by the rules, the annotators and the renderers."""

    # Output settings
    output_file: Optional[str] = None
    package_name: str = "models"

    # Naming settings
    class_case: str = "pascal"
    field_case: str = "snake"
    enum_case: str = "screaming_snake"
    class_name_prefix: str = ""
    class_name_suffix: str = ""
    use_title_as_class_name: bool = False

    # Numeric representations
    use_long_integers: bool = False
    use_big_integers: bool = False
    use_double_numbers: bool = True
    use_big_decimals: bool = False

    # Format handling
    format_date_times: bool = True
    format_dates: bool = True
    format_times: bool = True
    format_type_mapping: Dict[str, str] = field(default_factory=dict)

    # Shape of generated types
    include_additional_properties: bool = True
    include_constructors: bool = False
    constructors_required_properties_only: bool = False
    include_copy_constructor: bool = False
    generate_builders: bool = False
    include_dynamic_accessors: bool = False
    include_validation_constraints: bool = True
    initialize_collections: bool = True
    collapse_equivalent_types: bool = True

    # Annotator selection, passed through to the annotator registry
    annotation_style: str = "pydantic"

    # Error handling
    fail_on_unsupported: bool = False

    # Additional metadata
    add_comments: bool = True

    # Custom settings (annotator/renderer-specific)
    custom: Dict[str, Any] = field(default_factory=dict)


class ConfigManager:
    """Manages configuration loading and merging."""

    def __init__(self):
        """Initialize configuration manager."""
        self._configs: Dict[str, Dict[str, Any]] = {}
        self._load_defaults()

    def _load_defaults(self):
        """Load default configurations for the supported annotation styles."""
        self._configs["pydantic"] = {
            "annotation_style": "pydantic",
            "field_case": "snake",
            "include_additional_properties": True,
            "custom": {
                "pydantic_use_alias": True,
                "pydantic_config_dict": True,
            }
        }

        self._configs["dataclass"] = {
            "annotation_style": "dataclass",
            "field_case": "snake",
            "include_additional_properties": True,
            "custom": {
                "dataclass_slots": False,
                "dataclass_kw_only": True,
            }
        }

        self._configs["none"] = {
            "annotation_style": "none",
            "include_additional_properties": False,
            "include_validation_constraints": False,
        }

    def get_config(self, style: str = "pydantic", custom_config: Optional[Dict[str, Any]] = None,
                   config_file: Optional[Union[str, Path]] = None) -> GenerationConfig:
        """
        Get complete configuration for an annotation style.

        Args:
            style: Annotation style name
            custom_config: Custom configuration overrides
            config_file: Path to JSON configuration file

        Returns:
            Merged configuration
        """
        file_config = self._load_config_file(config_file) if config_file else {}

        # An explicit style in the overrides picks the defaults to start from
        for source in (custom_config or {}, file_config):
            if isinstance(source.get("annotation_style"), str):
                style = source["annotation_style"]
                break

        base_config = _copy_config_dict(self._configs.get(style, {"annotation_style": style}))
        _merge_config_dict(base_config, file_config)

        if custom_config:
            _merge_config_dict(base_config, custom_config)

        return self._dict_to_config(base_config)

    def _load_config_file(self, config_path: Union[str, Path]) -> Dict[str, Any]:
        """Load configuration from JSON file."""
        path = Path(config_path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {path}")

        if not path.suffix.lower() == '.json':
            raise ConfigError(f"Configuration file must be JSON: {path}")

        try:
            with open(path, 'r', encoding='utf-8') as f:
                config = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in configuration file {path}: {str(e)}") from e
        except OSError as e:
            raise ConfigError(f"Failed to load configuration file {path}: {str(e)}") from e

        if not isinstance(config, dict):
            raise ConfigError(f"Configuration file must contain a JSON object: {path}")

        return config

    def _dict_to_config(self, config_dict: Dict[str, Any]) -> GenerationConfig:
        """Convert dictionary to GenerationConfig instance."""
        known_fields = {f.name for f in fields(GenerationConfig)}

        config_args = {}
        custom_args = {}

        for key, value in config_dict.items():
            if key in known_fields:
                config_args[key] = value
            else:
                custom_args[key] = value

        # Unknown keys are kept for annotators and renderers
        if custom_args:
            existing_custom = dict(config_args.get('custom', {}))
            existing_custom.update(custom_args)
            config_args['custom'] = existing_custom

        return GenerationConfig(**config_args)

    def save_config(self, config: GenerationConfig, output_path: Union[str, Path]):
        """Save configuration to JSON file."""
        path = Path(output_path)

        config_dict = asdict(config)
        custom = config_dict.pop("custom")
        config_dict.update(custom)

        try:
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(config_dict, f, indent=2, ensure_ascii=False)
        except OSError as e:
            raise ConfigError(f"Failed to save configuration to {path}: {str(e)}") from e

    def list_styles(self) -> list[str]:
        """Get list of styles with registered defaults."""
        return list(self._configs.keys())

    def validate_config(self, config: GenerationConfig) -> list[str]:
        """
        Validate a configuration.

        Returns:
            List of validation warnings
        """
        warnings = []

        valid_cases = {"pascal", "camel", "snake", "screaming_snake", "kebab"}

        if config.class_case not in valid_cases:
            warnings.append(f"Invalid class_case: {config.class_case}")

        if config.field_case not in valid_cases:
            warnings.append(f"Invalid field_case: {config.field_case}")

        if config.enum_case not in valid_cases:
            warnings.append(f"Invalid enum_case: {config.enum_case}")

        if config.use_big_integers and config.use_long_integers:
            warnings.append("use_big_integers overrides use_long_integers")

        if config.constructors_required_properties_only and not config.include_constructors:
            warnings.append(
                "constructors_required_properties_only has no effect without include_constructors"
            )

        if config.package_name and not all(
            part.isidentifier() for part in config.package_name.split(".")
        ):
            warnings.append(f"Invalid package name: {config.package_name}")

        # Imported lazily: the model imports nothing from this module
        from .model import PrimitiveKind

        valid_kinds = {kind.value for kind in PrimitiveKind}
        for format_name, kind in config.format_type_mapping.items():
            if kind not in valid_kinds:
                warnings.append(f"Unknown type '{kind}' for format '{format_name}'")

        return warnings


def _copy_config_dict(config: Dict[str, Any]) -> Dict[str, Any]:
    copied = dict(config)
    if "custom" in copied:
        copied["custom"] = dict(copied["custom"])
    return copied


def _merge_config_dict(base: Dict[str, Any], overrides: Dict[str, Any]):
    """Merge overrides into base, combining the nested custom dicts."""
    for key, value in overrides.items():
        if key == "custom" and isinstance(value, dict):
            merged = dict(base.get("custom", {}))
            merged.update(value)
            base["custom"] = merged
        else:
            base[key] = value


# Global configuration manager instance
_config_manager = None


def get_config_manager() -> ConfigManager:
    """Get the global configuration manager instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager


def load_config(style: str = "pydantic", custom_config: Optional[Dict[str, Any]] = None,
                config_file: Optional[Union[str, Path]] = None) -> GenerationConfig:
    """
    Convenience function to load configuration.

    Args:
        style: Annotation style name
        custom_config: Custom configuration overrides
        config_file: Path to JSON configuration file

    Returns:
        Merged configuration
    """
    manager = get_config_manager()
    return manager.get_config(style, custom_config, config_file)


# Example configuration file for reference
EXAMPLE_CONFIG = {
    "package_name": "models",
    "annotation_style": "pydantic",
    "use_title_as_class_name": True,
    "use_long_integers": True,
    "include_additional_properties": False,
    "generate_builders": False,
    "format_type_mapping": {"email": "string"},
}
