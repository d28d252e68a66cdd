"""DTOs for search results (no dependency on the wire schema or any backend)."""

from dataclasses import dataclass, field
from typing import Any

from searchmodel.domain.value_objects import SearchHit


@dataclass(frozen=True)
class Result:
    """One search engine hit as returned by the engine (read-model).

    source and highlight are None when the engine did not return them.
    """

    index: str
    type: str | None
    id: str
    score: float | None = None
    source: dict[str, Any] | None = None
    highlight: dict[str, list[str]] | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def hit(self) -> SearchHit:
        return SearchHit(index=self.index, type=self.type, id=self.id)

    @property
    def has_source(self) -> bool:
        return self.source is not None

    @property
    def has_highlight(self) -> bool:
        return bool(self.highlight)

    def get(self, key: str, default: Any = None) -> Any:
        """Look up key in _source first, then in other hit fields (e.g. 'sort', 'fields')."""
        if self.source and key in self.source:
            return self.source[key]
        return self.extra.get(key, default)


@dataclass(frozen=True)
class RecordWithHit[RecordT]:
    """A reassembled record paired with the hit it was loaded for."""

    record: RecordT
    hit: SearchHit
