"""
High-level entry point: load schemas, run the rules, collapse duplicates.
"""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..logging_config import get_logger
from ..utils import Fetcher, path_to_uri
from .core.annotator import Annotator
from .core.compat import TypeCompatibility
from .core.config import GenerationConfig, load_config
from .core.engine import RuleEngine, RuleRegistry
from .core.generator import GenerationResult, TypeRenderer, render_types
from .core.model import GeneratedType, TypeModel, TypeRef, replace_type
from .core.naming import NameSanitizer, name_from_ref
from .core.schema import SchemaNode, SchemaStore
from .registry import get_annotator, get_renderer

logger = get_logger(__name__)

SchemaSource = Union[Dict[str, Any], str, Path]


class TypeGenerator:
    """Generates a type model from one or more root schemas.

    One generator keeps one schema store and one type model, so schemas
    added across several :meth:`generate` calls share types.
    """

    def __init__(
        self,
        config: Optional[GenerationConfig] = None,
        annotator: Optional[Annotator] = None,
        fetcher: Optional[Fetcher] = None,
        sanitizer: Optional[NameSanitizer] = None,
        registry: Optional[RuleRegistry] = None,
    ):
        self.config = config or load_config()
        self.annotator = annotator or get_annotator(self.config.annotation_style, self.config)
        if sanitizer is None:
            from .languages.python.naming import create_python_sanitizer

            sanitizer = create_python_sanitizer()
        self.store = SchemaStore(fetcher)
        self.model = TypeModel(self.config.package_name)
        self.compat = TypeCompatibility()
        self.engine = RuleEngine(
            config=self.config,
            annotator=self.annotator,
            store=self.store,
            model=self.model,
            sanitizer=sanitizer,
            compat=self.compat,
            registry=registry,
        )
        self.roots: Dict[str, TypeRef] = {}

    @property
    def warnings(self) -> List[str]:
        return self.engine.warnings

    def load(self, source: SchemaSource, uri: Optional[str] = None,
             name: Optional[str] = None) -> SchemaNode:
        """
        Get the root node for a schema source.

        Args:
            source: Parsed schema, a path to a schema file, or a URI
            uri: Canonical URI for an in-memory schema
            name: Root name, used for the default URI of in-memory schemas

        Returns:
            Root schema node
        """
        if isinstance(source, dict):
            if uri is None:
                schema_id = source.get("$id") or source.get("id")
                if isinstance(schema_id, str) and "://" in schema_id:
                    uri = schema_id
                else:
                    uri = self._in_memory_uri(source, name or "schema")
            if self.store.has_document(uri):
                return self.store.resolve(uri)
            return self.store.add_document(uri, source)

        if isinstance(source, Path) or "://" not in str(source):
            source = path_to_uri(Path(source).resolve())
        return self.store.resolve(str(source))

    def _in_memory_uri(self, source: Dict[str, Any], stem: str) -> str:
        """File URI under the working directory not yet taken by another schema."""
        counter = 0
        while True:
            suffix = f"_{counter}" if counter else ""
            uri = path_to_uri(Path.cwd() / f"{stem}{suffix}.json")
            if not self.store.has_document(uri) or self.store.resolve(uri).content is source:
                return uri
            counter += 1

    def generate(self, source: SchemaSource, name: Optional[str] = None,
                 uri: Optional[str] = None) -> TypeRef:
        """
        Generate types for a root schema.

        Args:
            source: Parsed schema, a path to a schema file, or a URI
            name: Name for the root type (default: title or file name)
            uri: Canonical URI for an in-memory schema

        Returns:
            Type reference for the root schema

        Raises:
            TypegenError: On unresolvable references, cyclic loads or
                ambiguous explicit type names
        """
        root = self.load(source, uri=uri, name=name)
        if name is None:
            name = _default_root_name(root)

        logger.info("Generating types for %s", root.uri)
        result = self.engine.apply("schema", name, root, self.model.namespace())
        self._collapse()
        result = self.store.get_type(root) or result

        self.roots[self.engine.naming.normalize_class_name(name)] = result
        logger.info(
            "Generated %d types for %s (%d warnings)",
            len(self.model),
            root.uri,
            len(self.warnings),
        )
        return result

    def _collapse(self):
        """Replace duplicate types by their equivalents everywhere."""
        mapping: Dict[GeneratedType, GeneratedType] = dict(self.engine.duplicates)
        self.engine.duplicates.clear()
        if self.config.collapse_equivalent_types:
            candidates = [t for t in self.model.all_types() if t not in mapping]
            mapping.update(self.compat.find_duplicates(candidates))
        if not mapping:
            return

        # Follow chains so every duplicate maps to a surviving type
        for duplicate in list(mapping):
            target = mapping[duplicate]
            seen = {duplicate}
            while target in mapping and target not in seen:
                seen.add(target)
                target = mapping[target]
            mapping[duplicate] = target

        logger.info("Collapsing %d duplicate types", len(mapping))
        self.model.replace_references(mapping)
        self.store.replace_types(mapping)
        self.roots = {name: replace_type(ref, mapping) for name, ref in self.roots.items()}

    def types(self) -> List[GeneratedType]:
        """All generated types, dependencies first."""
        reachable = self.model.reachable_from(list(self.roots.values()))
        seen = {id(t) for t in reachable}
        return reachable + [t for t in self.model.all_types() if id(t) not in seen]

    def render(self, renderer: Optional[TypeRenderer] = None,
               language: str = "python") -> GenerationResult:
        """Render all generated types with a renderer (default: from the registry)."""
        renderer = renderer or get_renderer(language, self.config)
        return render_types(renderer, self.types(), dict(self.roots), self.warnings)


def _default_root_name(node: SchemaNode) -> str:
    title = node.get("title")
    if isinstance(title, str) and title.strip():
        return title.strip()
    return name_from_ref(node.document)


def load_schema_file(path: Union[str, Path]) -> Any:
    """Read a JSON schema file."""
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)
