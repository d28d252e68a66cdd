"""In-memory backend."""

from searchmodel.infrastructure.memory.fetcher import InMemoryRecordFetcher

__all__ = ["InMemoryRecordFetcher"]
