"""Tests for SearchResponse (engine metadata, results, records)."""

import pytest

from searchmodel.application.use_cases import ResultReassembler, SearchResponse
from searchmodel.domain.exceptions import ValidationException
from searchmodel.domain.value_objects import SearchHit


def _body(hits: list[dict], **extra) -> dict:
    body = {
        "took": 4,
        "timed_out": False,
        "_shards": {"total": 1, "successful": 1, "failed": 0},
        "hits": {"total": {"value": 42, "relation": "eq"}, "max_score": 2.5, "hits": hits},
    }
    body.update(extra)
    return body


RAW_HITS = [
    {"_index": "dummy", "_type": "dummy_two", "_id": "2", "_score": 2.5,
     "_source": {"title": "two"}, "highlight": {"title": ["<em>two</em>"]}},
    {"_index": "dummy", "_type": "dummy_one", "_id": 9, "_score": 2.0, "sort": [2.0, "x"]},
    {"_index": "other_index", "_type": "dummy_two", "_id": "1", "_score": 1.0,
     "fields": {"slug": ["c-one"]}},
]


@pytest.fixture
def response(registry) -> SearchResponse:
    return SearchResponse(_body(RAW_HITS), ResultReassembler(registry))


def test_metadata(response) -> None:
    assert response.total == 42
    assert response.max_score == 2.5
    assert response.took == 4
    assert response.timed_out is False
    assert response.shards == {"total": 1, "successful": 1, "failed": 0}
    assert response.aggregations == {}
    assert response.suggestions == {}


def test_numeric_total(registry) -> None:
    body = _body([])
    body["hits"]["total"] = 7
    assert SearchResponse(body, ResultReassembler(registry)).total == 7


def test_results_keep_engine_fields(response) -> None:
    assert len(response) == 3
    first, second, third = response
    assert first.has_source and first.get("title") == "two"
    assert first.has_highlight
    assert second.id == "9"
    assert second.has_source is False
    assert second.get("sort") == [2.0, "x"]
    assert third.get("fields") == {"slug": ["c-one"]}
    assert third.get("missing", "default") == "default"
    assert response[0] is first


def test_hits_and_ids(response) -> None:
    assert response.ids == ["2", "9", "1"]
    assert response.hits[0] == SearchHit("dummy", "dummy_two", "2")


async def test_records_in_rank_order_without_missing(response) -> None:
    records = await response.records()
    # dummy_one/9 has no record and is dropped
    assert [(r.kind, r.id) for r in records] == [("B", 2), ("C", 1)]


async def test_records_are_loaded_once(registry) -> None:
    calls = []

    async def fetch_by_id(record_type, ids):
        calls.append(record_type)
        return {}

    response = SearchResponse(
        _body(RAW_HITS[:1]), ResultReassembler(registry, fetch_by_id=fetch_by_id)
    )
    assert await response.records() == []
    assert await response.records() == []
    assert len(calls) == 1


async def test_records_and_pairs_share_one_load(registry) -> None:
    calls = []

    async def fetch_by_id(record_type, ids):
        calls.append(record_type)
        return {i: f"{record_type.__name__}:{i}" for i in ids}

    response = SearchResponse(
        _body(RAW_HITS[:1]), ResultReassembler(registry, fetch_by_id=fetch_by_id)
    )
    pairs = await response.records_with_hits()
    assert await response.records_with_hits() == pairs
    assert await response.records() == [record for record, _ in pairs]
    assert len(calls) == 1


async def test_records_with_hits_pairs_by_position(response) -> None:
    pairs = await response.records_with_hits()
    assert [(record.id, result.index) for record, result in pairs] == [
        (2, "dummy"),
        (1, "other_index"),
    ]
    assert pairs[0][1] is response[0]
    assert pairs[1][1] is response[2]


async def test_records_with_duplicate_hits(registry) -> None:
    hit = {"_index": "dummy", "_type": "dummy_one", "_id": "1"}
    response = SearchResponse(_body([hit, dict(hit)]), ResultReassembler(registry))
    pairs = await response.records_with_hits()
    assert [result for _, result in pairs] == [response[0], response[1]]
    assert pairs[0][1] is response[0]
    assert pairs[1][1] is response[1]


def test_suggestion_terms_unique_first_seen(registry) -> None:
    suggest = {
        "title_suggest": [
            {"text": "serch", "options": [{"text": "search"}, {"text": "serge"}]},
        ],
        "body_suggest": [
            {"text": "serch", "options": [{"text": "search"}, {"text": "church"}]},
        ],
        "empty": [],
    }
    response = SearchResponse(_body([], suggest=suggest), ResultReassembler(registry))
    assert response.suggestion_terms == ["search", "serge", "church"]


def test_aggregations_passed_through(registry) -> None:
    aggs = {"by_index": {"buckets": [{"key": "dummy", "doc_count": 2}]}}
    response = SearchResponse(_body([], aggregations=aggs), ResultReassembler(registry))
    assert response.aggregations == aggs


def test_invalid_body_rejected(registry) -> None:
    with pytest.raises(ValidationException, match="Invalid search response"):
        SearchResponse({"hits": {"hits": [{"_id": "1"}]}}, ResultReassembler(registry))
