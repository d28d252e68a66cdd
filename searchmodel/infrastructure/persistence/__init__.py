"""Relational backend (SQLAlchemy async)."""

from searchmodel.infrastructure.persistence.fetcher import SqlAlchemyRecordFetcher

__all__ = ["SqlAlchemyRecordFetcher"]
