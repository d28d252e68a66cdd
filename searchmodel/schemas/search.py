"""Search engine response schemas (Elasticsearch / OpenSearch _search body).

Only the fields the library reads are declared; everything else is kept
(extra="allow") so callers can still reach it.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class HitTotal(BaseModel):
    """hits.total in its object form (Elasticsearch 7+)."""

    value: int
    relation: str = "eq"


class RawHit(BaseModel):
    """One entry of hits.hits."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    index: str = Field(..., alias="_index", min_length=1)
    type: str | None = Field(None, alias="_type")
    id: str = Field(..., alias="_id", min_length=1)
    score: float | None = Field(None, alias="_score")
    source: dict[str, Any] | None = Field(None, alias="_source")
    highlight: dict[str, list[str]] | None = None
    sort: list[Any] | None = None

    @field_validator("id", mode="before")
    @classmethod
    def id_as_string(cls, v: Any) -> Any:
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v


class HitsEnvelope(BaseModel):
    """The hits object: total, max_score and the ranked hit list."""

    model_config = ConfigDict(extra="allow")

    total: int | HitTotal | None = None
    max_score: float | None = None
    hits: list[RawHit] = Field(default_factory=list)


class SearchEngineResponse(BaseModel):
    """Top-level search response body."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    took: int | None = None
    timed_out: bool | None = None
    shards: dict[str, Any] | None = Field(None, alias="_shards")
    hits: HitsEnvelope = Field(default_factory=HitsEnvelope)
    aggregations: dict[str, Any] | None = None
    suggest: dict[str, list[dict[str, Any]]] | None = None

    @property
    def total(self) -> int | None:
        """Total hit count whether the engine reports a number or {value, relation}."""
        total = self.hits.total
        if isinstance(total, HitTotal):
            return total.value
        return total
