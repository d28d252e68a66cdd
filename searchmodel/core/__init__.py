"""Core: settings and constants."""

from searchmodel.core.config import Settings, get_settings
from searchmodel.core.constants import DEFAULT_DOC_TYPE

__all__ = ["DEFAULT_DOC_TYPE", "Settings", "get_settings"]
