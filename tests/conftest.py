"""Shared fixtures for schema_typegen tests."""

from __future__ import annotations

from typing import Any, Callable

import pytest

from schema_typegen.codegen import TypeGenerator, load_config
from schema_typegen.utils import MappingFetcher

BASE_URI = "file:///schemas/"


def schema_uri(name: str) -> str:
    return f"{BASE_URI}{name}"


@pytest.fixture
def make_generator() -> Callable[..., TypeGenerator]:
    """Factory for generators serving in-memory documents.

    Keyword arguments other than ``documents`` and ``style`` are config
    overrides.
    """

    def factory(
        documents: dict[str, Any] | None = None,
        style: str = "pydantic",
        **overrides: Any,
    ) -> TypeGenerator:
        config = load_config(style, custom_config=overrides)
        fetcher = MappingFetcher(
            {schema_uri(name): content for name, content in (documents or {}).items()}
        )
        return TypeGenerator(config=config, fetcher=fetcher)

    return factory


@pytest.fixture
def generate(make_generator):
    """Generate types for one schema; returns ``(generator, root_type)``."""

    def run(schema: dict[str, Any], name: str = "Root", documents=None, **overrides: Any):
        generator = make_generator(documents, **overrides)
        root = generator.generate(schema, name=name, uri=schema_uri("root.json"))
        return generator, root

    return run
