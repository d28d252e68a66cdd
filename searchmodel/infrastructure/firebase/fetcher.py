"""Firestore-backed record fetcher (implements IRecordFetcher)."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from searchmodel.core.config import get_settings
from searchmodel.core.constants import SPAN_FETCH
from searchmodel.domain.enums import BackendKind
from searchmodel.infrastructure.firebase._rest_client import (
    DocumentSnapshot,
    FirestoreRESTClient,
)
from searchmodel.infrastructure.firebase.client import get_firestore_client
from searchmodel.shared.telemetry.tracing import add_span_attributes, traced


class FirestoreRecordFetcher:
    """Load documents of one collection by document id.

    factory(doc_id, data) turns a document into the model's record; without
    it the DocumentSnapshot itself is returned.
    """

    kind = BackendKind.DOCUMENT

    def __init__(
        self,
        collection: str,
        client: FirestoreRESTClient | None = None,
        *,
        factory: Callable[[str, dict[str, Any]], Any] | None = None,
        batch_size: int | None = None,
    ) -> None:
        self.collection = collection
        self._client = client
        self.factory = factory
        self.batch_size = batch_size or get_settings().fetch_batch_size

    def _build(self, snapshot: DocumentSnapshot) -> Any:
        if self.factory is None:
            return snapshot
        return self.factory(snapshot.id, snapshot.to_dict())

    @traced(SPAN_FETCH, attributes={"backend": BackendKind.DOCUMENT.value})
    async def fetch_by_ids(self, ids: Sequence[str]) -> dict[str, Any]:
        """Return records keyed by document id; missing documents are omitted."""
        client = self._client or get_firestore_client()
        unique = list(dict.fromkeys(str(i) for i in ids if i))
        found: dict[str, Any] = {}
        for start in range(0, len(unique), self.batch_size):
            chunk = unique[start : start + self.batch_size]
            async for snapshot in client.batch_get(self.collection, chunk):
                found[snapshot.id] = self._build(snapshot)
        add_span_attributes(**{"ids.count": len(unique), "records.found": len(found)})
        return found
