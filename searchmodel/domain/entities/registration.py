"""Type registration domain entity.

Binds one (index, document type) pair to the model that owns it and to
the fetcher that loads that model's records.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from searchmodel.domain.enums import BackendKind
from searchmodel.domain.exceptions import ValidationException
from searchmodel.domain.value_objects.core import TypeKey, normalize_document_type

if TYPE_CHECKING:
    from searchmodel.application.interfaces.fetchers import IRecordFetcher


@dataclass(frozen=True)
class TypeRegistration:
    """One indexable model: where its documents live and how to load its records.

    document_type is None for typeless indices; '_doc' is normalized to None
    on construction so both spellings register the same key.
    """

    index_name: str
    document_type: str | None
    record_type: Any
    fetcher: IRecordFetcher

    def __post_init__(self) -> None:
        self.validate()
        object.__setattr__(
            self, "document_type", normalize_document_type(self.document_type)
        )

    def validate(self) -> None:
        """Raise ValidationException if the registration is incomplete."""
        if not self.index_name or not self.index_name.strip():
            raise ValidationException("Index name is required", field="index_name")
        if self.record_type is None:
            raise ValidationException("Record type is required", field="record_type")
        if self.fetcher is None or not hasattr(self.fetcher, "fetch_by_ids"):
            raise ValidationException(
                "Fetcher must implement fetch_by_ids", field="fetcher"
            )

    @property
    def key(self) -> TypeKey:
        return TypeKey(self.index_name, self.document_type)

    @property
    def backend(self) -> BackendKind:
        """Backend kind of the fetcher chosen at registration time."""
        return self.fetcher.kind

    def matches(self, index: str, document_type: str | None) -> bool:
        """Return whether a hit from index/document_type belongs to this model.

        Typeless hits only match registrations that declare no type; a hit
        with a real type never matches a typeless registration.
        """
        if index != self.index_name:
            return False
        return normalize_document_type(document_type) == self.document_type
