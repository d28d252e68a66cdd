"""Domain enumerations for searchmodel."""

from enum import Enum


class BackendKind(str, Enum):
    """Record backend a model is fetched from.

    Chosen once when the model is registered (through its fetcher), never
    re-derived per lookup.
    """

    RELATIONAL = "relational"
    DOCUMENT = "document"
    MEMORY = "memory"

    @classmethod
    def values(cls) -> list[str]:
        """Return all backend kinds as strings."""
        return [kind.value for kind in cls]
