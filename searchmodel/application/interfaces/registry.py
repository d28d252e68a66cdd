"""Registry interface (port): what reassembly needs from a model registry."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from searchmodel.application.services.type_resolver import TypeResolutionCache
    from searchmodel.domain.entities import TypeRegistration


class ITypeRegistry(Protocol):
    """Protocol for a registry that can be scanned without locking (DIP)."""

    type_cache: TypeResolutionCache

    def snapshot(self) -> tuple[TypeRegistration, ...]:
        """Return an immutable copy of the current registrations."""
        ...

    def versioned_snapshot(self) -> tuple[int, tuple[TypeRegistration, ...]]:
        """Return the registry generation together with a snapshot taken at it."""
        ...
