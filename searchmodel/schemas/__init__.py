"""Pydantic schemas for search engine wire responses."""

from searchmodel.schemas.search import (
    HitsEnvelope,
    HitTotal,
    RawHit,
    SearchEngineResponse,
)

__all__ = ["HitTotal", "HitsEnvelope", "RawHit", "SearchEngineResponse"]
