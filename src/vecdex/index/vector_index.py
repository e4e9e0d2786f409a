"""Async in-memory nearest-neighbor index over document embeddings."""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable

import numpy as np

from vecdex.errors import DimensionMismatch

from .models import Document, IndexHooks, Neighbor, SearchResult, Snapshot, as_vector

logger = logging.getLogger(__name__)


class VectorIndex:
    """Exact k-nearest-neighbor index using squared Euclidean distance.

    Every build produces a new immutable :class:`Snapshot` and commits it with
    a single reference swap, so readers see either the whole previous
    document set or the whole new one. The dimension ``D`` is fixed by the
    constructor or by the first non-empty build and never changes afterwards.
    """

    def __init__(self, dimension: int | None = None, hooks: IndexHooks | None = None) -> None:
        if dimension is not None and dimension <= 0:
            raise ValueError(f"dimension must be positive, got {dimension}")
        self._dimension = dimension
        self._hooks = hooks or IndexHooks()
        self._snapshot = Snapshot.empty(dimension)

    # ------------------------------------------------------------------ #
    # READ helpers
    # ------------------------------------------------------------------ #

    @property
    def dimension(self) -> int | None:
        return self._dimension

    @property
    def generation(self) -> int:
        return self._snapshot.generation

    @property
    def documents(self) -> tuple[Document, ...]:
        return self._snapshot.documents

    def size(self) -> int:
        return len(self._snapshot.documents)

    def __len__(self) -> int:
        return self.size()

    # ------------------------------------------------------------------ #
    # WRITE helpers
    # ------------------------------------------------------------------ #

    async def build(self, documents: Iterable[Document]) -> int:
        """Replace the whole document set with ``documents``.

        :param documents: Documents in insertion order; ids must be unique.
        :returns: The generation number of the committed snapshot.
        :raises DimensionMismatch: If any embedding disagrees with ``D``.
        """

        generation = await self._commit(tuple(documents))
        self._fire("on_index")
        return generation

    async def clear(self) -> int:
        """Atomically replace the document set with the empty set."""

        generation = await self._commit(())
        self._fire("on_clear")
        return generation

    async def _commit(self, docs: tuple[Document, ...]) -> int:
        dim = self._validate(docs)

        staged = await asyncio.to_thread(Snapshot.from_documents, docs, dim or 0, 0)

        # Re-check after the await: a concurrent build may have fixed D.
        if docs and self._dimension is not None and dim != self._dimension:
            raise DimensionMismatch(self._dimension, dim, docs[0].id)

        generation = self._snapshot.generation + 1
        self._snapshot = Snapshot(staged.documents, staged.matrix, generation)
        if docs and self._dimension is None:
            self._dimension = dim

        logger.info(
            "Committed index generation %d (%d documents, dim=%s)",
            generation,
            len(docs),
            self._dimension,
        )
        return generation

    # ------------------------------------------------------------------ #
    # SEARCH
    # ------------------------------------------------------------------ #

    async def search(self, query, k: int) -> SearchResult:
        """Return the ``min(k, size)`` nearest documents to ``query``.

        Results are ordered by ascending distance; equal distances keep
        insertion order.

        :param query: Sequence or array-like vector of length ``D``.
        :param k: Number of neighbors to return; ``0`` yields no results.
        :raises DimensionMismatch: If ``len(query) != D``.
        """

        if k < 0:
            raise ValueError(f"k must be >= 0, got {k}")

        snapshot = self._snapshot
        vec = as_vector(query)
        if self._dimension is not None and vec.shape[0] != self._dimension:
            raise DimensionMismatch(self._dimension, int(vec.shape[0]))

        if k == 0 or not snapshot.documents:
            result = SearchResult((), snapshot.generation)
        else:
            result = await asyncio.to_thread(_rank, snapshot, vec, k)

        logger.debug(
            "Search k=%d returned %d hits (generation %d)",
            k,
            len(result),
            result.generation,
        )
        self._fire("on_search")
        return result

    # ------------------------------------------------------------------ #
    # internals
    # ------------------------------------------------------------------ #

    def _validate(self, docs: tuple[Document, ...]) -> int | None:
        """Check ids and dimensions; return the dimension of ``docs``."""

        expected = self._dimension
        seen: set[str] = set()
        for doc in docs:
            if doc.id in seen:
                raise ValueError(f"Duplicate document id {doc.id!r} in build input")
            seen.add(doc.id)
            if expected is None:
                expected = doc.dimension
                if expected == 0:
                    raise ValueError(f"Document {doc.id!r} has an empty embedding")
            elif doc.dimension != expected:
                raise DimensionMismatch(expected, doc.dimension, doc.id)
        return expected

    def _fire(self, name: str) -> None:
        hook = getattr(self._hooks, name)
        if hook is None:
            return
        try:
            hook()
        except Exception:
            logger.exception("Index hook %s failed", name)


def _rank(snapshot: Snapshot, vec: np.ndarray, k: int) -> SearchResult:
    diff = snapshot.matrix - vec
    distances = np.einsum("ij,ij->i", diff, diff)
    order = np.argsort(distances, kind="stable")[:k]
    neighbors = tuple(
        Neighbor(
            document=snapshot.documents[i],
            distance=float(distances[i]),
            similarity_score=1.0 / (1.0 + float(distances[i])),
        )
        for i in order
    )
    return SearchResult(neighbors, snapshot.generation)


async def instantiate(
    dimension: int | None = None, hooks: IndexHooks | None = None
) -> VectorIndex:
    """Create the session's index engine and fire its ``on_init`` hook."""

    index = VectorIndex(dimension, hooks)
    logger.info("Vector index engine instantiated (dim=%s)", dimension)
    index._fire("on_init")
    return index


__all__ = ["VectorIndex", "instantiate"]
