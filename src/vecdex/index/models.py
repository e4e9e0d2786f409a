"""Value types stored in and returned from the vector index."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterator, Sequence

import numpy as np


def as_vector(values) -> np.ndarray:
    """Return ``values`` as a flat, read-only float32 array."""

    # Copy so later mutation of the caller's buffer cannot reach stored data.
    vec = np.array(values, dtype=np.float32, copy=True).reshape(-1)
    vec.setflags(write=False)
    return vec


@dataclass(frozen=True)
class Document:
    """A stored document: display fields plus its embedding.

    Equality and hashing use ``(id, title, url)`` only.
    """

    id: str
    title: str
    url: str
    embedding: np.ndarray = field(compare=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "embedding", as_vector(self.embedding))

    @property
    def dimension(self) -> int:
        return int(self.embedding.shape[0])


@dataclass(frozen=True)
class Neighbor:
    """A retrieved document paired with its distance to the query.

    ``distance`` is the squared Euclidean distance and
    ``similarity_score`` is ``1 / (1 + distance)``.
    """

    document: Document
    distance: float
    similarity_score: float

    @property
    def id(self) -> str:
        return self.document.id

    @property
    def title(self) -> str:
        return self.document.title

    @property
    def url(self) -> str:
        return self.document.url


@dataclass(frozen=True)
class SearchResult:
    """Ranked neighbors and the index generation they were computed against."""

    neighbors: tuple[Neighbor, ...]
    generation: int

    def __iter__(self) -> Iterator[Neighbor]:
        return iter(self.neighbors)

    def __len__(self) -> int:
        return len(self.neighbors)

    def __getitem__(self, item):
        return self.neighbors[item]

    def ids(self) -> list[str]:
        return [n.document.id for n in self.neighbors]


Hook = Callable[[], None]


@dataclass
class IndexHooks:
    """Optional callbacks fired after an index operation succeeds."""

    on_init: Hook | None = None
    on_index: Hook | None = None
    on_search: Hook | None = None
    on_clear: Hook | None = None


@dataclass(frozen=True)
class Snapshot:
    """One immutable generation of the index.

    ``matrix`` row ``i`` is ``documents[i].embedding``.
    """

    documents: tuple[Document, ...]
    matrix: np.ndarray
    generation: int

    @classmethod
    def empty(cls, dimension: int | None, generation: int = 0) -> "Snapshot":
        matrix = np.empty((0, dimension or 0), dtype=np.float32)
        matrix.setflags(write=False)
        return cls((), matrix, generation)

    @classmethod
    def from_documents(
        cls, documents: Sequence[Document], dimension: int, generation: int
    ) -> "Snapshot":
        if not documents:
            return cls.empty(dimension, generation)
        matrix = np.vstack([doc.embedding for doc in documents]).astype(np.float32)
        matrix.setflags(write=False)
        return cls(tuple(documents), matrix, generation)


__all__ = [
    "Document",
    "Neighbor",
    "SearchResult",
    "IndexHooks",
    "Snapshot",
    "as_vector",
]
