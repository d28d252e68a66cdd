"""Infrastructure: model registry and record backends (relational, document, memory)."""

from searchmodel.infrastructure.registry import TypeRegistry, get_registry, reset_registry

__all__ = ["TypeRegistry", "get_registry", "reset_registry"]
