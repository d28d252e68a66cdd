"""searchmodel: load search engine hits back into application models.

Register each indexable model with the fetcher its records come from, then
reassemble ranked hits (possibly spanning several models and backends) into
records in rank order with one fetch per model.
"""

from searchmodel.application.dtos import RecordWithHit, Result
from searchmodel.application.interfaces import IRecordFetcher
from searchmodel.application.use_cases import ResultReassembler, SearchResponse, reassemble
from searchmodel.domain import (
    BackendKind,
    FetchFailedException,
    FetchTimeoutException,
    SearchHit,
    SearchModelException,
    TypeRegistration,
    UnknownDocumentTypeException,
)
from searchmodel.infrastructure.memory import InMemoryRecordFetcher
from searchmodel.infrastructure.registry import TypeRegistry, get_registry, reset_registry

__version__ = "1.0.0"

__all__ = [
    "BackendKind",
    "FetchFailedException",
    "FetchTimeoutException",
    "IRecordFetcher",
    "InMemoryRecordFetcher",
    "RecordWithHit",
    "Result",
    "ResultReassembler",
    "SearchHit",
    "SearchModelException",
    "SearchResponse",
    "TypeRegistration",
    "TypeRegistry",
    "UnknownDocumentTypeException",
    "get_registry",
    "reassemble",
    "reset_registry",
]
