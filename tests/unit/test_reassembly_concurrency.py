"""Concurrent fetch pass: concurrency limit, deadline, cancellation."""

import asyncio

import pytest

from searchmodel.application.use_cases.reassembly import ResultReassembler
from searchmodel.domain.exceptions import FetchFailedException, FetchTimeoutException
from searchmodel.domain.enums import BackendKind
from searchmodel.domain.value_objects import SearchHit
from searchmodel.infrastructure.registry import TypeRegistry
from tests.factories import RecordingFetcher, TypeA, TypeB, TypeC


class GaugeFetcher:
    """Fetcher that tracks how many of its kind run at once."""

    kind = BackendKind.MEMORY

    def __init__(self, gauge: dict[str, int], label: str) -> None:
        self.gauge = gauge
        self.label = label

    async def fetch_by_ids(self, ids):
        self.gauge["current"] += 1
        self.gauge["peak"] = max(self.gauge["peak"], self.gauge["current"])
        try:
            await asyncio.sleep(0.01)
        finally:
            self.gauge["current"] -= 1
        return {i: f"{self.label}{i}" for i in ids}


def _three_model_registry(a, b, c) -> TypeRegistry:
    reg = TypeRegistry()
    reg.register_model(TypeA, a, index_name="a")
    reg.register_model(TypeB, b, index_name="b")
    reg.register_model(TypeC, c, index_name="c")
    return reg


HITS = [
    SearchHit(index="c", type=None, id="1"),
    SearchHit(index="a", type=None, id="1"),
    SearchHit(index="b", type=None, id="1"),
]


@pytest.mark.parametrize("limit, expected_peak", [(1, 1), (2, 2), (8, 3)])
async def test_concurrency_limit_bounds_in_flight_fetches(limit, expected_peak) -> None:
    gauge = {"current": 0, "peak": 0}
    reg = _three_model_registry(
        GaugeFetcher(gauge, "A"), GaugeFetcher(gauge, "B"), GaugeFetcher(gauge, "C")
    )
    records = await ResultReassembler(reg, concurrency=limit).reassemble(HITS)
    assert records == ["C1", "A1", "B1"]
    assert gauge["peak"] == expected_peak


async def test_fetches_run_concurrently() -> None:
    """Three 0.2s fetches complete well under their sequential total."""
    a = RecordingFetcher({"1": "A1"}, delay=0.2)
    b = RecordingFetcher({"1": "B1"}, delay=0.2)
    c = RecordingFetcher({"1": "C1"}, delay=0.2)
    reg = _three_model_registry(a, b, c)
    loop = asyncio.get_running_loop()
    started = loop.time()
    records = await ResultReassembler(reg).reassemble(HITS)
    assert records == ["C1", "A1", "B1"]
    assert loop.time() - started < 0.5


async def test_timeout_raises_and_cancels_pending() -> None:
    fast = RecordingFetcher({"1": "A1"})
    slow = RecordingFetcher({"1": "B1"}, delay=5)
    reg = _three_model_registry(fast, slow, RecordingFetcher({"1": "C1"}))
    with pytest.raises(FetchTimeoutException) as exc_info:
        await ResultReassembler(reg, timeout=0.05).reassemble(HITS)
    err = exc_info.value
    assert err.error_code == "FETCH_TIMEOUT"
    assert err.details["timeout"] == 0.05
    assert err.details["record_type"] == "TypeB"
    assert err.details["id_count"] == 1
    assert slow.cancelled is True


async def test_timeout_is_fatal_even_with_allow_partial() -> None:
    slow = RecordingFetcher({"1": "A1"}, delay=5)
    reg = _three_model_registry(
        slow, RecordingFetcher({"1": "B1"}), RecordingFetcher({"1": "C1"})
    )
    with pytest.raises(FetchTimeoutException):
        await ResultReassembler(reg, timeout=0.05, allow_partial=True).reassemble(HITS)


async def test_failure_cancels_sibling_fetches() -> None:
    slow = RecordingFetcher({"1": "A1"}, delay=5)
    broken = RecordingFetcher({}, error=ConnectionError("refused"))
    reg = _three_model_registry(slow, broken, RecordingFetcher({"1": "C1"}))
    with pytest.raises(FetchFailedException, match="refused"):
        await ResultReassembler(reg).reassemble(HITS)
    assert slow.cancelled is True


async def test_caller_cancellation_propagates_to_fetches() -> None:
    slow = RecordingFetcher({"1": "A1"}, delay=5)
    reg = _three_model_registry(
        slow, RecordingFetcher({"1": "B1"}), RecordingFetcher({"1": "C1"})
    )
    task = asyncio.create_task(ResultReassembler(reg).reassemble(HITS))
    await asyncio.sleep(0.05)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
    assert slow.cancelled is True
