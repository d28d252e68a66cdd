"""Multi-model result reassembly.

Turns a ranked list of search hits that point at different models into the
ranked list of those models' records:

1. Resolve every hit to its registration (memoized per call) and group the
   ids per model. An unresolvable hit fails the call before any fetch.
2. Fetch each model's records once, all models concurrently.
3. Walk the hits again in rank order and pick each hit's record.

Hits whose record no longer exists (deleted row, stale index) are dropped,
so a page may hold fewer records than the engine's total hit count. Any
backend failure aborts the call; nothing partial is returned unless the
caller opts in with allow_partial.
"""

from __future__ import annotations

import asyncio
import inspect
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from searchmodel.application.dtos.response import RecordWithHit
from searchmodel.application.services.type_resolver import TypeResolver
from searchmodel.core.config import get_settings
from searchmodel.core.constants import SPAN_REASSEMBLE
from searchmodel.domain.exceptions import (
    FetchFailedException,
    FetchTimeoutException,
    SearchModelException,
    ValidationException,
)
from searchmodel.domain.value_objects import SearchHit
from searchmodel.shared.telemetry.logging import get_logger
from searchmodel.shared.telemetry.tracing import TracedOperation, add_span_event

if TYPE_CHECKING:
    from searchmodel.application.interfaces.fetchers import FetchById
    from searchmodel.application.interfaces.registry import ITypeRegistry
    from searchmodel.domain.entities import TypeRegistration

logger = get_logger(__name__)


@dataclass
class _FetchPlan:
    """Output of the grouping pass."""

    # (record_type, hit) in rank order
    resolved: list[tuple[Any, SearchHit]] = field(default_factory=list)
    # record_type -> registration that owns the fetch
    registrations: dict[Any, TypeRegistration] = field(default_factory=dict)
    # record_type -> ordered, de-duplicated ids (dict used as ordered set)
    ids_by_type: dict[Any, dict[str, None]] = field(default_factory=dict)

    def id_count(self, record_types: Iterable[Any]) -> int:
        return sum(len(self.ids_by_type[t]) for t in record_types)


class ResultReassembler:
    """Reassemble ranked hits into records with one fetch per distinct model.

    Options default to settings (fetch_concurrency, fetch_timeout_seconds,
    allow_partial_results, shared_type_cache) when not given.
    """

    def __init__(
        self,
        registry: ITypeRegistry,
        *,
        fetch_by_id: FetchById | None = None,
        concurrency: int | None = None,
        timeout: float | None = None,
        allow_partial: bool | None = None,
        use_shared_cache: bool | None = None,
    ) -> None:
        settings = get_settings()
        self.registry = registry
        self.fetch_by_id = fetch_by_id
        self.concurrency = (
            concurrency if concurrency is not None else settings.fetch_concurrency
        )
        if self.concurrency < 1:
            raise ValidationException(
                "Fetch concurrency must be at least 1", field="concurrency"
            )
        self.timeout = timeout if timeout is not None else settings.fetch_timeout_seconds
        self.allow_partial = (
            allow_partial if allow_partial is not None else settings.allow_partial_results
        )
        self.use_shared_cache = (
            use_shared_cache
            if use_shared_cache is not None
            else settings.shared_type_cache
        )

    async def reassemble(self, hits: Iterable[SearchHit | Mapping[str, Any]]) -> list[Any]:
        """Return the records for hits, in hit order, without missing records."""
        return [pair.record for pair in await self.reassemble_with_hits(hits)]

    async def reassemble_with_hits(
        self, hits: Iterable[SearchHit | Mapping[str, Any]]
    ) -> list[RecordWithHit[Any]]:
        """Like reassemble, but pair each record with the hit it was loaded for."""
        hit_list = [h if isinstance(h, SearchHit) else SearchHit.from_raw(h) for h in hits]
        async with TracedOperation(SPAN_REASSEMBLE, {"hits.count": len(hit_list)}) as op:
            plan = self._group(hit_list)
            op.set_attribute("types.count", len(plan.ids_by_type))
            records_by_type = await self._fetch_all(plan)

            output: list[RecordWithHit[Any]] = []
            missing = 0
            for record_type, hit in plan.resolved:
                record = records_by_type.get(record_type, {}).get(hit.id)
                if record is None:
                    missing += 1
                    continue
                output.append(RecordWithHit(record=record, hit=hit))
            op.set_attribute("records.missing", missing)

        if missing:
            logger.debug(
                "Dropped %d of %d hits with no matching record", missing, len(hit_list)
            )
        return output

    def _group(self, hits: list[SearchHit]) -> _FetchPlan:
        shared_cache = self.registry.type_cache if self.use_shared_cache else None
        generation, registrations = self.registry.versioned_snapshot()
        resolver = TypeResolver(registrations, shared_cache, generation)
        plan = _FetchPlan()
        for hit in hits:
            registration = resolver.resolve(hit)
            record_type = registration.record_type
            if record_type not in plan.registrations:
                plan.registrations[record_type] = registration
                plan.ids_by_type[record_type] = {}
            plan.ids_by_type[record_type][hit.id] = None
            plan.resolved.append((record_type, hit))
        return plan

    async def _fetch_all(self, plan: _FetchPlan) -> dict[Any, dict[str, Any]]:
        if not plan.ids_by_type:
            return {}
        semaphore = asyncio.Semaphore(self.concurrency)
        tasks = {
            record_type: asyncio.create_task(
                self._fetch_one(plan.registrations[record_type], list(ids), semaphore)
            )
            for record_type, ids in plan.ids_by_type.items()
        }
        try:
            async with asyncio.timeout(self.timeout):
                results = await asyncio.gather(
                    *tasks.values(), return_exceptions=self.allow_partial
                )
        except TimeoutError:
            pending = [t for t, task in tasks.items() if task.cancelled() or not task.done()]
            logger.warning(
                "Record fetch timed out after %ss (%d model(s) pending)",
                self.timeout,
                len(pending),
            )
            raise FetchTimeoutException(
                self.timeout, pending, plan.id_count(pending)
            ) from None
        finally:
            await _cancel_unfinished(tasks.values())

        records_by_type: dict[Any, dict[str, Any]] = {}
        for record_type, result in zip(tasks, results):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                logger.warning(
                    "Treating records of %s as missing after fetch error: %s",
                    plan.registrations[record_type].index_name,
                    result,
                )
                add_span_event(
                    "fetch.failed",
                    {"index": plan.registrations[record_type].index_name, "error": str(result)},
                )
                result = {}
            records_by_type[record_type] = result
        return records_by_type

    async def _fetch_one(
        self,
        registration: TypeRegistration,
        ids: list[str],
        semaphore: asyncio.Semaphore,
    ) -> dict[str, Any]:
        record_type = registration.record_type
        async with semaphore:
            try:
                if self.fetch_by_id is not None:
                    fetched = self.fetch_by_id(record_type, ids)
                else:
                    fetched = registration.fetcher.fetch_by_ids(ids)
                if inspect.isawaitable(fetched):
                    fetched = await fetched
            except SearchModelException:
                raise
            except Exception as e:
                logger.warning(
                    "Fetch of %d id(s) from index %s failed: %s",
                    len(ids),
                    registration.index_name,
                    e,
                )
                raise FetchFailedException(record_type, len(ids), str(e)) from e
        if not isinstance(fetched, Mapping):
            raise FetchFailedException(
                record_type,
                len(ids),
                f"fetcher returned {type(fetched).__name__}, expected a mapping of id to record",
            )
        return {str(key): record for key, record in fetched.items()}


async def _cancel_unfinished(tasks: Iterable[asyncio.Task[Any]]) -> None:
    """Cancel tasks still running and wait for them to settle."""
    unfinished = [task for task in tasks if not task.done()]
    for task in unfinished:
        task.cancel()
    if unfinished:
        await asyncio.gather(*unfinished, return_exceptions=True)


async def reassemble(
    hits: Iterable[SearchHit | Mapping[str, Any]],
    registry: ITypeRegistry,
    fetch_by_id: FetchById | None = None,
    **options: Any,
) -> list[Any]:
    """Reassemble hits against registry (see ResultReassembler for options)."""
    reassembler = ResultReassembler(registry, fetch_by_id=fetch_by_id, **options)
    return await reassembler.reassemble(hits)
