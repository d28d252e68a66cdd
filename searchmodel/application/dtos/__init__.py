"""Application DTOs."""

from searchmodel.application.dtos.response import RecordWithHit, Result

__all__ = ["RecordWithHit", "Result"]
