"""Pytest configuration and fixtures for searchmodel.

Unit tests use in-memory fetchers only. Integration tests exercise the
SQLAlchemy backend against in-memory SQLite (aiosqlite) and the Firestore
backend against httpx.MockTransport. Only tests marked requires_db need
an external database (SEARCHMODEL_DATABASE_URL).
"""

import pytest
from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from searchmodel.core.config import get_settings
from searchmodel.domain.exceptions import BackendNotConfiguredException
from searchmodel.infrastructure.persistence.database import dispose_engine, get_session_factory
from searchmodel.infrastructure.registry import TypeRegistry, reset_registry
from tests.factories import TypeA, TypeB, TypeC, make_fetcher

_span_exporter = InMemorySpanExporter()


@pytest.fixture(scope="session", autouse=True)
def _tracer_provider() -> TracerProvider:
    """Install one SDK tracer provider for the session (the global can only be set once)."""
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(_span_exporter))
    trace.set_tracer_provider(provider)
    return provider


@pytest.fixture
def span_exporter() -> InMemorySpanExporter:
    """Exporter holding only the spans finished during the current test."""
    _span_exporter.clear()
    yield _span_exporter
    _span_exporter.clear()


@pytest.fixture(autouse=True)
def _fresh_settings_and_registry():
    """Each test starts with settings re-read from env and no global registry."""
    get_settings.cache_clear()
    reset_registry()
    yield
    get_settings.cache_clear()
    reset_registry()


@pytest.fixture
def registry() -> TypeRegistry:
    """Registry with three models sharing index and type names pairwise."""
    reg = TypeRegistry()
    reg.register_model(
        TypeA, make_fetcher("A", [1, 2, 3]), index_name="dummy", document_type="dummy_one"
    )
    reg.register_model(
        TypeB, make_fetcher("B", [1, 2, 3]), index_name="dummy", document_type="dummy_two"
    )
    reg.register_model(
        TypeC, make_fetcher("C", [1, 2]), index_name="other_index", document_type="dummy_two"
    )
    return reg


@pytest.fixture
async def db_session_factory():
    """Shared session factory built from SEARCHMODEL_DATABASE_URL.

    Skips (pytest.skip) when no database is configured. Use
    @pytest.mark.requires_db on tests that need it; run without a database
    via: pytest -m 'not requires_db'.
    """
    try:
        factory = get_session_factory()
    except BackendNotConfiguredException:
        pytest.skip("Database not configured: set SEARCHMODEL_DATABASE_URL")
    yield factory
    await dispose_engine()
