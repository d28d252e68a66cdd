"""Application ports: record fetcher, registry, and the fetch_by_id callable contract."""

from searchmodel.application.interfaces.fetchers import FetchById, IRecordFetcher
from searchmodel.application.interfaces.registry import ITypeRegistry

__all__ = ["FetchById", "IRecordFetcher", "ITypeRegistry"]
