"""Application use cases: result reassembly and the search response wrapper."""

from searchmodel.application.use_cases.reassembly import ResultReassembler, reassemble
from searchmodel.application.use_cases.records import SearchResponse

__all__ = ["ResultReassembler", "SearchResponse", "reassemble"]
