"""Registry of indexable models.

Models register once per (index, document type) pair together with the
fetcher their records are loaded through. Reassembly reads an immutable
snapshot, so registering models from another thread never changes a scan
in progress. Every mutation bumps the registry generation, clears the shared
type cache and notifies listeners.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable, Iterator
from typing import TYPE_CHECKING, Any

from searchmodel.application.services.naming import document_type_for, index_name_for
from searchmodel.application.services.type_resolver import TypeResolutionCache
from searchmodel.domain.entities import TypeRegistration
from searchmodel.domain.exceptions import (
    DuplicateRegistrationException,
    RegistrationNotFoundException,
)
from searchmodel.shared.telemetry.logging import get_logger

if TYPE_CHECKING:
    from searchmodel.application.interfaces.fetchers import IRecordFetcher

logger = get_logger(__name__)


class TypeRegistry:
    """Thread-safe collection of TypeRegistration.

    (index_name, document_type) is unique across registrations, including
    the typeless (document_type None) case.
    """

    def __init__(self) -> None:
        self._registrations: list[TypeRegistration] = []
        self._listeners: list[Callable[[], None]] = []
        self._lock = threading.RLock()
        self._generation = 0
        self.type_cache = TypeResolutionCache()

    def register(self, registration: TypeRegistration) -> TypeRegistration:
        """Add a registration; raise DuplicateRegistrationException if its key is taken."""
        with self._lock:
            for existing in self._registrations:
                if existing.key == registration.key:
                    raise DuplicateRegistrationException(
                        registration.index_name,
                        registration.document_type,
                        existing.record_type,
                    )
            self._registrations.append(registration)
            generation = self._bump()
        logger.debug(
            "Registered %s for index=%s type=%s (%s backend)",
            getattr(registration.record_type, "__qualname__", registration.record_type),
            registration.index_name,
            registration.document_type,
            registration.backend.value,
        )
        self._changed(generation)
        return registration

    def register_model(
        self,
        record_type: Any,
        fetcher: IRecordFetcher,
        *,
        index_name: str | None = None,
        document_type: str | None = None,
    ) -> TypeRegistration:
        """Register a model, deriving index name and document type when not given."""
        return self.register(
            TypeRegistration(
                index_name=index_name or index_name_for(record_type),
                document_type=document_type or document_type_for(record_type),
                record_type=record_type,
                fetcher=fetcher,
            )
        )

    def unregister(self, record_type: Any) -> int:
        """Remove every registration of record_type. Returns how many were removed."""
        with self._lock:
            kept = [r for r in self._registrations if r.record_type is not record_type]
            removed = len(self._registrations) - len(kept)
            self._registrations = kept
            generation = self._bump() if removed else None
        if generation is not None:
            self._changed(generation)
        return removed

    def registration_for(self, record_type: Any) -> TypeRegistration:
        """Return the first registration of record_type."""
        for registration in self.snapshot():
            if registration.record_type is record_type:
                return registration
        raise RegistrationNotFoundException(record_type)

    def snapshot(self) -> tuple[TypeRegistration, ...]:
        """Return a consistent copy of the registrations in registration order."""
        with self._lock:
            return tuple(self._registrations)

    def versioned_snapshot(self) -> tuple[int, tuple[TypeRegistration, ...]]:
        """Return (generation, snapshot) read under one lock."""
        with self._lock:
            return self._generation, tuple(self._registrations)

    def models(self) -> list[Any]:
        """Registered models, without duplicates, in registration order."""
        seen: list[Any] = []
        for registration in self.snapshot():
            if not any(m is registration.record_type for m in seen):
                seen.append(registration.record_type)
        return seen

    def index_names(self, record_types: Iterable[Any] | None = None) -> list[str]:
        """Index names to search across several models (all models when none given)."""
        return [r.index_name for r in self._selected(record_types)]

    def document_types(
        self, record_types: Iterable[Any] | None = None
    ) -> list[str] | None:
        """Declared document types of the selected models; None when none declares one."""
        types = [
            r.document_type
            for r in self._selected(record_types)
            if r.document_type is not None
        ]
        return types or None

    def add_listener(self, callback: Callable[[], None]) -> None:
        """Call callback after every mutation (register, unregister, clear)."""
        with self._lock:
            self._listeners.append(callback)

    def clear(self) -> None:
        with self._lock:
            self._registrations = []
            generation = self._bump()
        self._changed(generation)

    def _selected(self, record_types: Iterable[Any] | None) -> list[TypeRegistration]:
        registrations = self.snapshot()
        if record_types is None:
            return list(registrations)
        wanted = list(record_types)
        if not wanted:
            return list(registrations)
        return [r for r in registrations if any(r.record_type is t for t in wanted)]

    def _bump(self) -> int:
        # Caller holds self._lock.
        self._generation += 1
        return self._generation

    def _changed(self, generation: int) -> None:
        self.type_cache.invalidate(generation)
        with self._lock:
            listeners = list(self._listeners)
        for callback in listeners:
            callback()

    def __iter__(self) -> Iterator[TypeRegistration]:
        return iter(self.snapshot())

    def __len__(self) -> int:
        with self._lock:
            return len(self._registrations)


_registry: TypeRegistry | None = None
_registry_lock = threading.RLock()


def get_registry() -> TypeRegistry:
    """Return the process-wide registry, creating it on first use."""
    global _registry
    with _registry_lock:
        if _registry is None:
            _registry = TypeRegistry()
        return _registry


def reset_registry() -> None:
    """Drop the process-wide registry (tests, application reload)."""
    global _registry
    with _registry_lock:
        _registry = None
