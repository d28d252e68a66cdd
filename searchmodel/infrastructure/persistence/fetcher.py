"""SQLAlchemy-backed record fetcher (implements IRecordFetcher)."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from typing import Any

from sqlalchemy import inspect as sa_inspect, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.orm import ColumnProperty
from sqlalchemy.sql.base import ExecutableOption

from searchmodel.core.config import get_settings
from searchmodel.core.constants import SPAN_FETCH
from searchmodel.domain.enums import BackendKind
from searchmodel.domain.exceptions import ValidationException
from searchmodel.infrastructure.persistence.database import get_session_factory
from searchmodel.shared.telemetry.logging import get_logger
from searchmodel.shared.telemetry.tracing import add_span_attributes, traced

logger = get_logger(__name__)


def _chunks(items: list[Any], size: int) -> Iterator[list[Any]]:
    for start in range(0, len(items), size):
        yield items[start : start + size]


class SqlAlchemyRecordFetcher:
    """Load a mapped model's rows by primary key.

    Only single-column primary keys are supported. Document ids arrive as
    strings and are converted to the key column's Python type; ids that
    cannot be converted cannot exist and are skipped.
    """

    kind = BackendKind.RELATIONAL

    def __init__(
        self,
        model: type[Any],
        session_factory: async_sessionmaker[AsyncSession] | None = None,
        *,
        options: Sequence[ExecutableOption] = (),
        batch_size: int | None = None,
    ) -> None:
        """Initialize for one mapped model.

        Args:
            model: SQLAlchemy mapped class.
            session_factory: Session factory; defaults to the shared one built from settings.
            options: Loader options applied to every query (e.g. selectinload(Model.tags)).
            batch_size: Ids per IN query; defaults to settings.fetch_batch_size.
        """
        mapper = sa_inspect(model)
        if len(mapper.primary_key) != 1:
            raise ValidationException(
                f"{model.__name__} must have a single-column primary key",
                field="primary_key",
            )
        self.model = model
        self._pk_column = mapper.primary_key[0]
        self._pk_attr = mapper.get_property_by_column(self._pk_column)
        if not isinstance(self._pk_attr, ColumnProperty):
            raise ValidationException(
                f"{model.__name__} primary key is not a mapped column", field="primary_key"
            )
        self._session_factory = session_factory
        self.options = tuple(options)
        self.batch_size = batch_size or get_settings().fetch_batch_size
        self._coerce = self._id_coercer()

    def _id_coercer(self) -> Callable[[str], Any]:
        try:
            python_type = self._pk_column.type.python_type
        except NotImplementedError:
            return str
        if python_type is str:
            return str
        return python_type

    def _coerce_ids(self, ids: Sequence[str]) -> list[Any]:
        values: list[Any] = []
        for record_id in ids:
            try:
                values.append(self._coerce(record_id))
            except (TypeError, ValueError):
                logger.debug(
                    "Skipping id %r: not a valid %s primary key", record_id, self.model.__name__
                )
        return values

    @traced(SPAN_FETCH, attributes={"backend": BackendKind.RELATIONAL.value})
    async def fetch_by_ids(self, ids: Sequence[str]) -> dict[str, Any]:
        """Return rows keyed by str(primary key); missing ids are omitted."""
        values = self._coerce_ids(ids)
        if not values:
            return {}
        session_factory = self._session_factory or get_session_factory()
        pk_key = self._pk_attr.key
        pk = getattr(self.model, pk_key)
        found: dict[str, Any] = {}
        async with session_factory() as session:
            for chunk in _chunks(values, self.batch_size):
                stmt = select(self.model).where(pk.in_(chunk)).options(*self.options)
                result = await session.execute(stmt)
                for row in result.scalars().all():
                    found[str(getattr(row, pk_key))] = row
        add_span_attributes(**{"ids.count": len(values), "records.found": len(found)})
        return found
