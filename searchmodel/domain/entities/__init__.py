"""Domain entities."""

from searchmodel.domain.entities.registration import TypeRegistration

__all__ = ["TypeRegistration"]
