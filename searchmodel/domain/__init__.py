"""Domain layer: value objects, entities, enums, and exceptions.

No dependencies on infrastructure. Used by application and
infrastructure layers.
"""

from searchmodel.domain.entities import TypeRegistration
from searchmodel.domain.enums import BackendKind
from searchmodel.domain.exceptions import (
    BackendNotConfiguredException,
    DuplicateRegistrationException,
    FetchFailedException,
    FetchTimeoutException,
    RegistrationNotFoundException,
    SearchModelException,
    UnknownDocumentTypeException,
    ValidationException,
)
from searchmodel.domain.value_objects import SearchHit, TypeKey

__all__ = [
    "BackendKind",
    "BackendNotConfiguredException",
    "DuplicateRegistrationException",
    "FetchFailedException",
    "FetchTimeoutException",
    "RegistrationNotFoundException",
    "SearchHit",
    "SearchModelException",
    "TypeKey",
    "TypeRegistration",
    "UnknownDocumentTypeException",
    "ValidationException",
]
