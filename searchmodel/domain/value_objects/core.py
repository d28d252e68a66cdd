"""Domain value objects for searchmodel.

Value objects are immutable and self-validating. A SearchHit is created
fresh per search response and discarded after reassembly.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, NamedTuple

from searchmodel.core.constants import DEFAULT_DOC_TYPE
from searchmodel.domain.exceptions import ValidationException


def normalize_document_type(document_type: str | None) -> str | None:
    """Map the typeless sentinel ('_doc') and empty strings to None."""
    if not document_type or document_type == DEFAULT_DOC_TYPE:
        return None
    return document_type


class TypeKey(NamedTuple):
    """(index, document_type) pair used to resolve and memoize hit types."""

    index: str
    document_type: str | None


@dataclass(frozen=True)
class SearchHit:
    """One ranked search result: origin index, optional type, document id.

    Hits are positional; two hits with identical fields are distinct
    entries of a result set.
    """

    index: str
    type: str | None
    id: str

    def __post_init__(self) -> None:
        if not self.index:
            raise ValidationException("Search hit must carry an index", field="index")
        if self.id is None or self.id == "":
            raise ValidationException("Search hit must carry an id", field="id")
        if not isinstance(self.id, str):
            object.__setattr__(self, "id", str(self.id))

    @property
    def is_typeless(self) -> bool:
        """True when the hit carries no real document type."""
        return normalize_document_type(self.type) is None

    @property
    def type_key(self) -> TypeKey:
        """Memo key for type resolution ('_doc' and None collapse to None)."""
        return TypeKey(self.index, normalize_document_type(self.type))

    @classmethod
    def from_raw(cls, raw: Mapping[str, Any]) -> "SearchHit":
        """Build a hit from an engine hit ({_index, _type, _id}) or a plain {index, type, id} mapping."""
        index = raw.get("_index", raw.get("index"))
        doc_type = raw.get("_type", raw.get("type"))
        doc_id = raw.get("_id", raw.get("id"))
        if not index:
            raise ValidationException("Search hit must carry an index", field="index")
        if doc_id is None:
            raise ValidationException("Search hit must carry an id", field="id")
        return cls(index=str(index), type=doc_type, id=str(doc_id))
