import logging
from typing import Optional

from .base import IdeaRegistry
from .memory import InMemoryIdeaRegistry
from .sql import SqlIdeaRegistry

logger = logging.getLogger(__name__)

_registry: Optional[IdeaRegistry] = None


def build_registry(backend: str, database_url: str = "") -> IdeaRegistry:
    if backend == "memory":
        return InMemoryIdeaRegistry()
    if backend == "sql":
        from idea_processor.db import make_engine, make_session_factory

        engine = make_engine(database_url)
        return SqlIdeaRegistry(make_session_factory(engine))
    raise ValueError(f"Unknown REGISTRY_BACKEND: {backend}")


def get_registry() -> IdeaRegistry:
    """Registry built from config, created on first use."""
    global _registry
    if _registry is None:
        from idea_processor import config

        _registry = build_registry(config.REGISTRY_BACKEND, config.DATABASE_URL)
        logger.info("Idea registry: %s", type(_registry).__name__)
    return _registry


def set_registry(registry: IdeaRegistry) -> None:
    global _registry
    _registry = registry


__all__ = [
    "IdeaRegistry",
    "InMemoryIdeaRegistry",
    "SqlIdeaRegistry",
    "build_registry",
    "get_registry",
    "set_registry",
]
