"""In-memory vector index engine."""

from .models import Document, IndexHooks, Neighbor, SearchResult
from .vector_index import VectorIndex, instantiate

__all__ = [
    "Document",
    "IndexHooks",
    "Neighbor",
    "SearchResult",
    "VectorIndex",
    "instantiate",
]
