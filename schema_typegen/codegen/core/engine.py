"""
Rule dispatch engine.

Rules are plain functions ``rule(ctx, name, node, target) -> output``
registered under stable names in a :class:`RuleRegistry`. The engine looks a
rule up by name, builds a :class:`RuleContext` for the call and runs it;
rules reach other rules through ``ctx.apply``. Idempotent rules are guarded
by applied-rule markers on their target so revisiting a node through a
recursive $ref does not apply them twice.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from ...logging_config import get_logger
from .annotator import Annotator, NoopAnnotator
from .compat import TypeCompatibility
from .config import GenerationConfig
from .errors import UnsupportedSchemaConstructError
from .model import ANY_TYPE, GeneratedType, TypeModel
from .naming import NameHelper, NameSanitizer
from .schema import SchemaNode, SchemaStore

logger = get_logger(__name__)

RuleFunction = Callable[["RuleContext", str, SchemaNode, Any], Any]


class RegistryError(KeyError):
    """Exception raised for rule registry errors."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


@dataclass(frozen=True)
class RuleSpec:
    """A registered rule."""

    name: str
    function: RuleFunction
    idempotent: bool = False
    produces_type: bool = False


class RuleRegistry:
    """Registry of rules keyed by name."""

    def __init__(self):
        """Initialize empty registry."""
        self._rules: Dict[str, RuleSpec] = {}

    def register(
        self,
        name: str,
        function: RuleFunction,
        idempotent: bool = False,
        produces_type: bool = False,
        replace: bool = False,
    ):
        """
        Register a rule.

        Args:
            name: Stable rule name (e.g. 'object', 'properties')
            function: Rule implementation
            idempotent: Guard the rule with applied-rule markers on its target
            produces_type: The rule returns a type reference
            replace: Replace an existing registration instead of failing

        Raises:
            RegistryError: If the name is taken and replace is False
        """
        if not callable(function):
            raise RegistryError(f"Rule '{name}' must be callable")

        if name in self._rules and not replace:
            raise RegistryError(f"Rule '{name}' is already registered")

        self._rules[name] = RuleSpec(name, function, idempotent, produces_type)

    def unregister(self, name: str):
        """Remove a rule if registered."""
        self._rules.pop(name, None)

    def get(self, name: str) -> RuleSpec:
        """
        Get a rule by name.

        Raises:
            RegistryError: If no rule has that name
        """
        try:
            return self._rules[name]
        except KeyError:
            available = ", ".join(sorted(self._rules))
            raise RegistryError(
                f"No rule registered as '{name}'. Available: {available}"
            ) from None

    def is_registered(self, name: str) -> bool:
        return name in self._rules

    def list_rules(self) -> List[str]:
        return sorted(self._rules)

    def copy(self) -> "RuleRegistry":
        """A registry with the same rules, safe to modify independently."""
        clone = RuleRegistry()
        clone._rules = dict(self._rules)
        return clone

    def rule(self, name: str, idempotent: bool = False, produces_type: bool = False):
        """Decorator form of :meth:`register`."""

        def decorator(function: RuleFunction) -> RuleFunction:
            self.register(name, function, idempotent=idempotent, produces_type=produces_type)
            return function

        return decorator


# Populated by schema_typegen.codegen.rules on import
default_registry = RuleRegistry()


def rule(name: str, idempotent: bool = False, produces_type: bool = False):
    """Register a function in the default rule catalogue."""
    return default_registry.rule(name, idempotent=idempotent, produces_type=produces_type)


class RuleContext:
    """Per-call view handed to a rule.

    Carries the node being transformed, its parent, the target construct and
    access to the engine's collaborators. Not kept after the call returns.
    """

    def __init__(
        self,
        engine: "RuleEngine",
        rule_name: str,
        node: SchemaNode,
        target: Any,
        parent: Optional[SchemaNode] = None,
    ):
        self.engine = engine
        self.rule_name = rule_name
        self.node = node
        self.target = target
        self.parent = parent

    @property
    def store(self) -> SchemaStore:
        return self.engine.store

    @property
    def model(self) -> TypeModel:
        return self.engine.model

    @property
    def config(self) -> GenerationConfig:
        return self.engine.config

    @property
    def annotator(self) -> Annotator:
        return self.engine.annotator

    @property
    def naming(self) -> NameHelper:
        return self.engine.naming

    @property
    def compat(self) -> TypeCompatibility:
        return self.engine.compat

    def apply(self, rule_name: str, name: str, node: SchemaNode, target: Any,
              parent: Optional[SchemaNode] = None) -> Any:
        """Dispatch another rule through the engine."""
        return self.engine.apply(rule_name, name, node, target, parent=parent)

    def unsupported(self, message: str, node: Optional[SchemaNode] = None):
        """Report a construct that is skipped.

        Raises:
            UnsupportedSchemaConstructError: When fail_on_unsupported is set
        """
        location = (node or self.node).uri
        if self.config.fail_on_unsupported:
            raise UnsupportedSchemaConstructError(message, location=location)
        self.engine.warn(message, location)


class RuleEngine:
    """Applies named rules to schema nodes."""

    def __init__(
        self,
        config: Optional[GenerationConfig] = None,
        annotator: Optional[Annotator] = None,
        store: Optional[SchemaStore] = None,
        model: Optional[TypeModel] = None,
        sanitizer: Optional[NameSanitizer] = None,
        compat: Optional[TypeCompatibility] = None,
        registry: Optional[RuleRegistry] = None,
    ):
        self.config = config or GenerationConfig()
        self.annotator = annotator or NoopAnnotator(self.config)
        self.store = store if store is not None else SchemaStore()
        self.model = model if model is not None else TypeModel(self.config.package_name)
        self.naming = NameHelper(sanitizer or NameSanitizer(), self.config)
        self.compat = compat or TypeCompatibility()
        self.registry = registry if registry is not None else _load_default_registry()
        self.warnings: List[str] = []
        # Types built under an explicit name that was already taken
        self.explicit_claims: Dict[GeneratedType, GeneratedType] = {}
        # Types found to duplicate another, waiting to be collapsed
        self.duplicates: Dict[GeneratedType, GeneratedType] = {}
        self._depth = 0

    def apply(self, rule_name: str, name: str, node: SchemaNode, target: Any,
              parent: Optional[SchemaNode] = None) -> Any:
        """
        Apply rule ``rule_name`` to ``node`` producing the rule's output.

        Args:
            rule_name: Registered rule name
            name: Name the node was reached under (property or type name)
            node: Schema node to transform
            target: Construct the rule populates (namespace, type, field ...)
            parent: Schema node enclosing ``node``, when relevant

        Returns:
            Whatever the rule returns; ``target`` for a skipped idempotent rule
        """
        spec = self.registry.get(rule_name)

        if spec.idempotent and isinstance(target, GeneratedType):
            if not target.mark_applied(rule_name, node.uri):
                logger.debug("Rule '%s' already applied to %s", rule_name, node.uri)
                return target

        logger.debug("%sapply %s '%s' %s", "  " * self._depth, rule_name, name, node.uri)
        context = RuleContext(self, rule_name, node, target, parent)
        self._depth += 1
        try:
            return spec.function(context, name, node, target)
        except UnsupportedSchemaConstructError as e:
            if self.config.fail_on_unsupported:
                raise
            self.warn(str(e))
            return ANY_TYPE if spec.produces_type else target
        finally:
            self._depth -= 1

    def warn(self, message: str, location: Optional[str] = None):
        """Record and log a recovered problem."""
        if location and location not in message:
            message = f"{message} (at {location})"
        logger.warning(message)
        self.warnings.append(message)


def _load_default_registry() -> RuleRegistry:
    # Importing the rules package fills default_registry
    from .. import rules  # noqa: F401

    return default_registry
