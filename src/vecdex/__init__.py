"""In-memory embedding index with async readiness gating."""

from .corpus import SeedRecord, load_corpus, seed_records
from .errors import (
    DimensionMismatch,
    EmbedError,
    LoadError,
    OrchestratorNotReady,
    VecdexError,
)
from .index import Document, IndexHooks, Neighbor, SearchResult, VectorIndex, instantiate
from .pipelines import IndexBuildPipeline, QueryPipeline, QueryResult
from .session import ReadinessState, Resource, Session

__all__ = [
    "DimensionMismatch",
    "Document",
    "EmbedError",
    "IndexBuildPipeline",
    "IndexHooks",
    "LoadError",
    "Neighbor",
    "OrchestratorNotReady",
    "QueryPipeline",
    "QueryResult",
    "ReadinessState",
    "Resource",
    "SearchResult",
    "SeedRecord",
    "Session",
    "VecdexError",
    "VectorIndex",
    "instantiate",
    "load_corpus",
    "seed_records",
]
