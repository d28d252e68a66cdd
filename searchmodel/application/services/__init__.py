"""Application services: model naming and hit type resolution."""

from searchmodel.application.services.naming import (
    default_index_name,
    document_type_for,
    index_name_for,
    pluralize,
    underscore,
)
from searchmodel.application.services.type_resolver import (
    TypeResolutionCache,
    TypeResolver,
)

__all__ = [
    "TypeResolutionCache",
    "TypeResolver",
    "default_index_name",
    "document_type_for",
    "index_name_for",
    "pluralize",
    "underscore",
]
