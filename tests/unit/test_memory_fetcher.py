"""Tests for InMemoryRecordFetcher."""

import pytest

from searchmodel.application.interfaces import IRecordFetcher
from searchmodel.domain.enums import BackendKind
from searchmodel.domain.exceptions import ValidationException
from searchmodel.infrastructure.memory import InMemoryRecordFetcher
from tests.factories import Record, RecordingFetcher


def test_satisfies_fetcher_protocol() -> None:
    fetcher = InMemoryRecordFetcher()
    assert isinstance(fetcher, IRecordFetcher)
    assert isinstance(RecordingFetcher({}), IRecordFetcher)
    assert fetcher.kind is BackendKind.MEMORY


async def test_fetch_by_ids_keys_by_str_id() -> None:
    fetcher = InMemoryRecordFetcher([Record("A", 1), Record("A", 2)])
    found = await fetcher.fetch_by_ids(["2", "1", "5"])
    assert found == {"2": Record("A", 2), "1": Record("A", 1)}


async def test_mapping_input_uses_its_keys() -> None:
    fetcher = InMemoryRecordFetcher({10: "ten", "x": "ex"})
    assert await fetcher.fetch_by_ids(["10", "x"]) == {"10": "ten", "x": "ex"}
    assert len(fetcher) == 2


async def test_custom_id_attr_add_and_remove() -> None:
    class Doc:
        def __init__(self, slug: str) -> None:
            self.slug = slug

    doc = Doc("hello")
    fetcher = InMemoryRecordFetcher(id_attr="slug")
    fetcher.add(doc)
    assert await fetcher.fetch_by_ids(["hello"]) == {"hello": doc}
    assert fetcher.remove("hello") is True
    assert fetcher.remove("hello") is False
    assert await fetcher.fetch_by_ids(["hello"]) == {}


def test_record_without_id_rejected() -> None:
    with pytest.raises(ValidationException) as exc_info:
        InMemoryRecordFetcher([object()])
    assert exc_info.value.details == {"field": "id"}
