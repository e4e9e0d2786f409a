"""Build and query pipelines gated on a ready :class:`~vecdex.session.Session`."""

from .build import IndexBuildPipeline, embed_all
from .query import QueryPipeline, QueryResult

__all__ = ["IndexBuildPipeline", "QueryPipeline", "QueryResult", "embed_all"]
