"""Search response wrapper: engine metadata, raw results and reassembled records."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from searchmodel.application.dtos.response import RecordWithHit, Result
from searchmodel.domain.exceptions import ValidationException
from searchmodel.domain.value_objects import SearchHit
from searchmodel.schemas.search import RawHit, SearchEngineResponse

if TYPE_CHECKING:
    from searchmodel.application.use_cases.reassembly import ResultReassembler


def _result_from_raw(raw: RawHit) -> Result:
    extra = dict(raw.model_extra or {})
    if raw.sort is not None:
        extra["sort"] = raw.sort
    return Result(
        index=raw.index,
        type=raw.type,
        id=raw.id,
        score=raw.score,
        source=raw.source,
        highlight=raw.highlight,
        extra=extra,
    )


class SearchResponse:
    """A search engine response across one or many models.

    Iterating yields Result objects (the engine's view); records() loads the
    models' own records in rank order through the reassembler.
    """

    def __init__(
        self, raw: Mapping[str, Any], reassembler: ResultReassembler
    ) -> None:
        try:
            self.response = SearchEngineResponse.model_validate(raw)
        except ValidationError as e:
            raise ValidationException(f"Invalid search response: {e}") from e
        self.raw_response = raw
        self.reassembler = reassembler
        self.results = [_result_from_raw(h) for h in self.response.hits.hits]
        self._pairs: list[tuple[Any, Result]] | None = None

    @property
    def total(self) -> int | None:
        return self.response.total

    @property
    def max_score(self) -> float | None:
        return self.response.hits.max_score

    @property
    def took(self) -> int | None:
        return self.response.took

    @property
    def timed_out(self) -> bool | None:
        return self.response.timed_out

    @property
    def shards(self) -> dict[str, Any] | None:
        return self.response.shards

    @property
    def aggregations(self) -> dict[str, Any]:
        return self.response.aggregations or {}

    @property
    def suggestions(self) -> dict[str, list[dict[str, Any]]]:
        return self.response.suggest or {}

    @property
    def suggestion_terms(self) -> list[str]:
        """Unique suggested texts across every suggester, first-seen order."""
        terms: dict[str, None] = {}
        for entries in self.suggestions.values():
            if not entries:
                continue
            for option in entries[0].get("options", []):
                text = option.get("text")
                if text is not None:
                    terms[text] = None
        return list(terms)

    @property
    def hits(self) -> list[SearchHit]:
        return [r.hit for r in self.results]

    @property
    def ids(self) -> list[str]:
        return [r.id for r in self.results]

    async def records(self) -> list[Any]:
        """Records for the hits in rank order (loaded once, then cached)."""
        return [record for record, _ in await self.records_with_hits()]

    async def records_with_hits(self) -> list[tuple[Any, Result]]:
        """(record, result) pairs in rank order; hits without a record are skipped.

        Records are loaded on the first call to this method or records();
        later calls reuse them.
        """
        if self._pairs is None:
            self._pairs = self._pair_with_results(
                await self.reassembler.reassemble_with_hits(self.hits)
            )
        return list(self._pairs)

    def _pair_with_results(
        self, pairs: list[RecordWithHit[Any]]
    ) -> list[tuple[Any, Result]]:
        by_position: list[tuple[Any, Result]] = []
        # Both lists are in rank order; advance through results to pair positions.
        results = iter(self.results)
        for pair in pairs:
            for result in results:
                if result.hit == pair.hit:
                    by_position.append((pair.record, result))
                    break
        return by_position

    def __iter__(self) -> Iterator[Result]:
        return iter(self.results)

    def __len__(self) -> int:
        return len(self.results)

    def __getitem__(self, position: int) -> Result:
        return self.results[position]
