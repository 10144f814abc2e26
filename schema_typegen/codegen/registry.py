"""
Registry system for renderers and annotators.

Provides dynamic registration and instantiation of language renderers and
annotation styles, each under a primary name plus optional aliases.
"""

from pathlib import Path
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar, Union

from .core.annotator import Annotator, NoopAnnotator
from .core.config import GenerationConfig, load_config
from .core.engine import RegistryError
from .core.generator import TypeRenderer

T = TypeVar("T")

ConfigSource = Optional[Union[GenerationConfig, Dict[str, Any], str, Path]]


class ComponentRegistry(Generic[T]):
    """Registry for one family of pluggable components."""

    def __init__(self, kind: str, base_class: Type[T]):
        """Initialize empty registry."""
        self.kind = kind
        self.base_class = base_class
        self._components: Dict[str, Type[T]] = {}
        self._aliases: Dict[str, str] = {}

    def register(
        self,
        name: str,
        component_class: Type[T],
        aliases: Optional[List[str]] = None,
        replace: bool = False,
    ):
        """
        Register a component class.

        Args:
            name: Primary name (e.g., 'python', 'pydantic')
            component_class: Class implementing the family's base class
            aliases: Alternative names
            replace: If True, replace existing registration. If False, skip if exists.

        Raises:
            RegistryError: If the class is invalid or an alias conflicts
        """
        if not issubclass(component_class, self.base_class):
            raise RegistryError(
                f"{self.kind.capitalize()} class must inherit from {self.base_class.__name__}"
            )

        key = name.lower()

        if key in self._components and not replace:
            # Already registered, skip silently
            return

        self._components[key] = component_class

        for alias in aliases or []:
            alias_key = alias.lower()

            if alias_key == key:
                continue

            if not replace:
                if alias_key in self._components:
                    raise RegistryError(
                        f"Alias '{alias}' conflicts with existing {self.kind} '{alias_key}'"
                    )
                if alias_key in self._aliases and self._aliases[alias_key] != key:
                    raise RegistryError(
                        f"Alias '{alias}' already points to '{self._aliases[alias_key]}'"
                    )

            self._aliases[alias_key] = key

    def unregister(self, name: str):
        """Unregister a component and its aliases."""
        key = name.lower()
        self._components.pop(key, None)

        for alias in [a for a, target in self._aliases.items() if target == key]:
            del self._aliases[alias]

    def resolve_name(self, name: str) -> str:
        """
        Primary name for a name or alias.

        Raises:
            RegistryError: If nothing is registered under the name
        """
        key = name.lower()
        if key in self._components:
            return key
        if key in self._aliases:
            return self._aliases[key]
        raise RegistryError(
            f"No {self.kind} registered as: {name}. "
            f"Available: {', '.join(self.list_names())}"
        )

    def get_class(self, name: str) -> Type[T]:
        return self._components[self.resolve_name(name)]

    def list_names(self) -> List[str]:
        """Get list of registered primary names."""
        return sorted(self._components.keys())

    def get_aliases(self, name: str) -> List[str]:
        key = name.lower()
        return sorted(alias for alias, target in self._aliases.items() if target == key)

    def is_supported(self, name: str) -> bool:
        key = name.lower()
        return key in self._components or key in self._aliases


def _resolve_config(config: ConfigSource, style: Optional[str] = None) -> GenerationConfig:
    """Turn any accepted config form into a GenerationConfig."""
    if isinstance(config, GenerationConfig):
        return config
    if isinstance(config, (str, Path)):
        return load_config(style or "pydantic", config_file=config)
    if isinstance(config, dict):
        return load_config(style or "pydantic", custom_config=config)
    if config is None:
        return load_config(style or "pydantic")
    raise RegistryError(f"Invalid config type: {type(config)}")


# Global registries - created once
_renderers: Optional[ComponentRegistry[TypeRenderer]] = None
_annotators: Optional[ComponentRegistry[Annotator]] = None


def get_renderer_registry() -> ComponentRegistry[TypeRenderer]:
    """Get the global renderer registry, initializing if needed."""
    global _renderers
    if _renderers is None:
        _renderers = ComponentRegistry("renderer", TypeRenderer)
        _auto_register()
    return _renderers


def get_annotator_registry() -> ComponentRegistry[Annotator]:
    """Get the global annotator registry, initializing if needed."""
    global _annotators
    if _annotators is None:
        _annotators = ComponentRegistry("annotator", Annotator)
        _auto_register()
    return _annotators


def _auto_register():
    """
    Register the built-in renderers and annotation styles.

    This is the single source of truth for built-in registration.
    """
    from .languages.python import DataclassAnnotator, PydanticAnnotator, PythonGenerator

    if _renderers is not None:
        _renderers.register("python", PythonGenerator, aliases=["py"])

    if _annotators is not None:
        _annotators.register("pydantic", PydanticAnnotator, aliases=["pydantic2"])
        _annotators.register("dataclass", DataclassAnnotator, aliases=["dataclasses"])
        _annotators.register("none", NoopAnnotator, aliases=["noop"])


# Public API functions using the global registries


def register_renderer(language: str, renderer_class: Type[TypeRenderer],
                      aliases: Optional[List[str]] = None):
    """Register a renderer in the global registry."""
    get_renderer_registry().register(language, renderer_class, aliases)


def register_annotator(style: str, annotator_class: Type[Annotator],
                       aliases: Optional[List[str]] = None):
    """Register an annotation style in the global registry."""
    get_annotator_registry().register(style, annotator_class, aliases)


def get_renderer(language: str, config: ConfigSource = None) -> TypeRenderer:
    """
    Get renderer instance from global registry.

    Args:
        language: Language name or alias
        config: Configuration as GenerationConfig, dict, or file path

    Returns:
        Configured renderer instance

    Raises:
        RegistryError: If the language is unknown or creation fails
    """
    renderer_class = get_renderer_registry().get_class(language)
    final_config = _resolve_config(config)
    try:
        return renderer_class(final_config)
    except Exception as e:
        raise RegistryError(f"Failed to create {language} renderer: {e}") from e


def get_annotator(style: str, config: ConfigSource = None) -> Annotator:
    """
    Get annotator instance for an annotation style.

    Raises:
        RegistryError: If the style is unknown
    """
    annotator_class = get_annotator_registry().get_class(style)
    return annotator_class(_resolve_config(config, style))


def list_supported_languages() -> List[str]:
    """List all supported languages from global registry."""
    return get_renderer_registry().list_names()


def list_annotation_styles() -> List[str]:
    """List all registered annotation styles."""
    return get_annotator_registry().list_names()


def is_language_supported(language: str) -> bool:
    """Check if language is supported by global registry."""
    return get_renderer_registry().is_supported(language)
