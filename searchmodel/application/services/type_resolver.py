"""Resolve search hits to their registered model.

TypeResolver memoizes (index, type) lookups for the lifetime of one
reassembly call over a fixed snapshot of registrations. A
TypeResolutionCache can additionally share resolutions across calls; it is
owned by a registry and cleared on every registry mutation.
"""

from __future__ import annotations

import threading
from collections.abc import Sequence

from searchmodel.domain.entities import TypeRegistration
from searchmodel.domain.exceptions import UnknownDocumentTypeException
from searchmodel.domain.value_objects import SearchHit, TypeKey


class TypeResolutionCache:
    """Thread-safe (index, type) -> registration map with explicit invalidation.

    Entries are tagged with the registry generation their snapshot was taken
    at; a put from an older generation than the last invalidation is dropped.
    """

    def __init__(self) -> None:
        self._entries: dict[TypeKey, TypeRegistration] = {}
        self._generation = 0
        self._lock = threading.Lock()

    def get(self, key: TypeKey) -> TypeRegistration | None:
        with self._lock:
            return self._entries.get(key)

    def put(
        self, key: TypeKey, registration: TypeRegistration, generation: int = 0
    ) -> bool:
        """Store a resolution scanned at generation; returns False if it was stale."""
        with self._lock:
            if generation != self._generation:
                return False
            self._entries[key] = registration
            return True

    def invalidate(self, generation: int | None = None) -> None:
        """Drop every cached resolution (called when the registry changes).

        generation is the registry generation after the change; it never
        moves backwards when invalidations arrive out of order.
        """
        with self._lock:
            self._entries.clear()
            if generation is not None:
                self._generation = max(self._generation, generation)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class TypeResolver:
    """Find the registration owning a hit; first matching registration wins."""

    def __init__(
        self,
        registrations: Sequence[TypeRegistration],
        shared_cache: TypeResolutionCache | None = None,
        generation: int = 0,
    ) -> None:
        self._registrations = tuple(registrations)
        self._shared_cache = shared_cache
        self.generation = generation
        self._memo: dict[TypeKey, TypeRegistration] = {}
        self.scans = 0

    def resolve(self, hit: SearchHit) -> TypeRegistration:
        """Return the registration for hit or raise UnknownDocumentTypeException."""
        key = hit.type_key
        registration = self._memo.get(key)
        if registration is not None:
            return registration
        if self._shared_cache is not None:
            registration = self._shared_cache.get(key)
        if registration is None:
            registration = self._scan(key)
            if self._shared_cache is not None:
                self._shared_cache.put(key, registration, self.generation)
        self._memo[key] = registration
        return registration

    def _scan(self, key: TypeKey) -> TypeRegistration:
        self.scans += 1
        for registration in self._registrations:
            if registration.matches(key.index, key.document_type):
                return registration
        raise UnknownDocumentTypeException(key.index, key.document_type)
