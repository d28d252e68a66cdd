"""Implicit index and document type names for registered models.

A model may declare __index_name__ (a string, or a zero-argument callable
called each time index_name_for runs) and __document_type__. Without them,
SQLAlchemy models fall back to __tablename__ and other classes to the
snake_case plural of the class name (namespaced names joined with '-').
TypeRegistry resolves the name once at registration; a callable that later
returns a different name does not move an existing registration.
"""

import re
from typing import Any

from searchmodel.core.constants import INDEX_NAME_NAMESPACE_SEP

_CAMEL_BOUNDARY_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")

# Minimal irregulars; anything else follows the suffix rules in pluralize().
_IRREGULAR_PLURALS = {
    "person": "people",
    "child": "children",
    "man": "men",
    "woman": "women",
}
_UNCOUNTABLE = frozenset({"data", "information", "news", "series", "species"})


def underscore(name: str) -> str:
    """Convert CamelCase to snake_case (HTTPRequest -> http_request)."""
    return _CAMEL_BOUNDARY_RE.sub("_", name).replace("-", "_").lower()


def pluralize(word: str) -> str:
    """English plural of a snake_case word; only the last segment changes."""
    if not word:
        return word
    head, _, last = word.rpartition("_")
    prefix = f"{head}_" if head else ""
    if last in _UNCOUNTABLE:
        plural = last
    elif last in _IRREGULAR_PLURALS:
        plural = _IRREGULAR_PLURALS[last]
    elif re.search(r"[^aeiou]y$", last):
        plural = last[:-1] + "ies"
    elif re.search(r"(s|x|z|ch|sh)$", last):
        plural = last + "es"
    else:
        plural = last + "s"
    return prefix + plural


def default_index_name(record_type: Any) -> str:
    """Snake_case plural of the model's qualified name ('Namespace.DummyTwo' -> 'namespace-dummy_twos')."""
    qualname = getattr(record_type, "__qualname__", None) or type(record_type).__qualname__
    parts = [p for p in qualname.split(".") if p != "<locals>"]
    *namespace, name = parts
    segments = [underscore(p) for p in namespace] + [pluralize(underscore(name))]
    return INDEX_NAME_NAMESPACE_SEP.join(segments)


def index_name_for(record_type: Any) -> str:
    """Return the index name a model is stored under."""
    declared = getattr(record_type, "__index_name__", None)
    if callable(declared):
        declared = declared()
    if declared:
        return str(declared)
    tablename = getattr(record_type, "__tablename__", None)
    if isinstance(tablename, str) and tablename:
        return tablename
    return default_index_name(record_type)


def document_type_for(record_type: Any) -> str | None:
    """Return the declared document type, or None for typeless models."""
    declared = getattr(record_type, "__document_type__", None)
    return str(declared) if declared else None
