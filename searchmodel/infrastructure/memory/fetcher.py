"""In-process record fetcher (implements IRecordFetcher)."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from searchmodel.domain.enums import BackendKind
from searchmodel.domain.exceptions import ValidationException


class InMemoryRecordFetcher:
    """Records held in a dict keyed by str(getattr(record, id_attr)).

    A mapping passed as records is used with its own keys instead.
    """

    kind = BackendKind.MEMORY

    def __init__(
        self,
        records: Iterable[Any] | Mapping[Any, Any] = (),
        *,
        id_attr: str = "id",
    ) -> None:
        self.id_attr = id_attr
        self._records: dict[str, Any] = {}
        if isinstance(records, Mapping):
            self._records.update((str(k), v) for k, v in records.items())
        else:
            for record in records:
                self.add(record)

    def add(self, record: Any) -> None:
        """Store record under its own identifier (replaces any previous one)."""
        record_id = getattr(record, self.id_attr, None)
        if record_id is None:
            raise ValidationException(
                f"Record has no '{self.id_attr}' attribute", field=self.id_attr
            )
        self._records[str(record_id)] = record

    def remove(self, record_id: Any) -> bool:
        """Remove a record; returns False when it was not stored."""
        return self._records.pop(str(record_id), None) is not None

    async def fetch_by_ids(self, ids: Sequence[str]) -> dict[str, Any]:
        """Return stored records for ids; unknown ids are omitted."""
        found: dict[str, Any] = {}
        for record_id in ids:
            record = self._records.get(str(record_id))
            if record is not None:
                found[str(record_id)] = record
        return found

    def __len__(self) -> int:
        return len(self._records)
