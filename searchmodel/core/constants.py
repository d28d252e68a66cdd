"""Core constants: shared literal values for hits, naming and tracing."""

# Document type reported by typeless indices (Elasticsearch 7+ / OpenSearch).
DEFAULT_DOC_TYPE = "_doc"

# Separator for namespaced model names in derived index names (a.b.Article -> a-b-articles)
INDEX_NAME_NAMESPACE_SEP = "-"

# Span names
SPAN_REASSEMBLE = "searchmodel.reassemble"
SPAN_FETCH = "searchmodel.fetch"
