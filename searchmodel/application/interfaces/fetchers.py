"""Record fetcher interface (port) for the application layer.

Every backend (relational, document, memory) implements IRecordFetcher.
The reassembler only ever calls fetch_by_ids, once per model per call.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import Any, Protocol, runtime_checkable

from searchmodel.domain.enums import BackendKind


@runtime_checkable
class IRecordFetcher(Protocol):
    """Protocol for batch-loading one model's records by document id."""

    kind: BackendKind

    async def fetch_by_ids(self, ids: Sequence[str]) -> Mapping[str, Any]:
        """Return records keyed by their own identifier (as str).

        Must accept any number of ids. Ids with no record are omitted from
        the result; that is not an error.
        """
        ...


# Caller-supplied override: (record_type, ids) -> {id: record}, sync or async.
FetchById = Callable[
    [Any, Sequence[str]], Mapping[Any, Any] | Awaitable[Mapping[Any, Any]]
]
