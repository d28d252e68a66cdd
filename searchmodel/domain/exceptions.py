"""Domain exceptions for searchmodel.

Defines the error taxonomy of registration and result reassembly. These
exceptions are independent of any backend; backend errors are wrapped in
FetchFailedException with the original error chained as __cause__.

A hit whose record is missing from its backend is not an error: the
reassembler drops it and the page simply holds fewer records than the
engine's total hit count.
"""

from typing import Any


class SearchModelException(Exception):
    """Base exception for all searchmodel errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. index, record_type).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


def _type_label(record_type: Any) -> str:
    """Readable name for a model handle (class name, or str() for anything else)."""
    return getattr(record_type, "__qualname__", None) or str(record_type)


class ValidationException(SearchModelException):
    """Raised when input validation fails (e.g. hit without index or id)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class UnknownDocumentTypeException(SearchModelException):
    """Raised when a hit's (index, type) matches no registration.

    Signals registry drift (stale registry, renamed index), not a deleted record.
    """

    def __init__(self, index: str, document_type: str | None) -> None:
        """Initialize with the unresolvable index and document type.

        Args:
            index: Index name carried by the hit.
            document_type: Document type carried by the hit (None when typeless).
        """
        super().__init__(
            f"No registered model for index '{index}' and type '{document_type}'",
            "UNKNOWN_DOCUMENT_TYPE",
            {"index": index, "document_type": document_type},
        )


class DuplicateRegistrationException(SearchModelException):
    """Raised when a second model claims an already registered (index, type) pair."""

    def __init__(
        self, index: str, document_type: str | None, existing: Any
    ) -> None:
        """Initialize with the contested key and the model that already owns it.

        Args:
            index: Index name of the registration.
            document_type: Document type of the registration (None when typeless).
            existing: Model handle already registered for the pair.
        """
        super().__init__(
            f"Index '{index}' with type '{document_type}' is already registered "
            f"to {_type_label(existing)}",
            "DUPLICATE_REGISTRATION",
            {
                "index": index,
                "document_type": document_type,
                "existing": _type_label(existing),
            },
        )


class RegistrationNotFoundException(SearchModelException):
    """Raised when a model has no registration."""

    def __init__(self, record_type: Any) -> None:
        super().__init__(
            f"Model is not registered: {_type_label(record_type)}",
            "REGISTRATION_NOT_FOUND",
            {"record_type": _type_label(record_type)},
        )


class FetchFailedException(SearchModelException):
    """Raised when a backend fetch fails; aborts the whole reassembly."""

    def __init__(
        self,
        record_type: Any,
        id_count: int,
        reason: str | None = None,
        error_code: str = "FETCH_FAILED",
    ) -> None:
        """Initialize with the model whose fetch failed.

        Args:
            record_type: Model handle the fetch was issued for.
            id_count: Number of ids requested.
            reason: Optional description (usually str() of the backend error).
            error_code: Override for subclasses.
        """
        label = _type_label(record_type)
        message = f"Fetching {id_count} record(s) of {label} failed"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(
            message,
            error_code,
            {"record_type": label, "id_count": id_count},
        )


class FetchTimeoutException(FetchFailedException):
    """Raised when the fetch pass exceeds its deadline."""

    def __init__(self, timeout: float, pending: list[Any], id_count: int) -> None:
        """Initialize with the deadline and the models still being fetched.

        Args:
            timeout: Deadline in seconds.
            pending: Model handles whose fetch had not completed.
            id_count: Number of ids requested from those models.
        """
        super().__init__(
            ", ".join(_type_label(t) for t in pending) or "records",
            id_count,
            f"timed out after {timeout}s",
            error_code="FETCH_TIMEOUT",
        )
        self.details["timeout"] = timeout


class BackendNotConfiguredException(SearchModelException):
    """Raised when a fetcher needs a backend (SQL, Firestore) that is not configured."""

    def __init__(self, backend: str) -> None:
        super().__init__(
            f"The {backend} backend is not configured.",
            "BACKEND_NOT_CONFIGURED",
            {"backend": backend},
        )
