"""Domain value objects: search hits and type keys."""

from searchmodel.domain.value_objects.core import (
    SearchHit,
    TypeKey,
    normalize_document_type,
)

__all__ = ["SearchHit", "TypeKey", "normalize_document_type"]
