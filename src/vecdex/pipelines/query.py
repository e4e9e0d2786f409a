"""Embed a free-text query and search the session's index."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from vecdex.config import index as index_cfg
from vecdex.index import Neighbor
from vecdex.session import Session

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueryResult:
    query: str
    neighbors: tuple[Neighbor, ...]
    generation: int

    def __len__(self) -> int:
        return len(self.neighbors)

    def titles(self) -> list[str]:
        return [n.document.title for n in self.neighbors]


class QueryPipeline:
    """Runs independent queries against the index.

    ``latest`` holds the result to display. A run only replaces it when no
    later-issued run has already been displayed and its generation is not
    older than the displayed one, so slow queries against a superseded index
    are dropped.
    """

    def __init__(self, session: Session, k: int | None = None) -> None:
        self._session = session
        self.k = k if k is not None else index_cfg.DEFAULT_K
        if self.k < 0:
            raise ValueError(f"k must be >= 0, got {self.k}")
        self._issued = 0
        self._displayed = 0
        self.latest: QueryResult | None = None

    async def run(self, text: str) -> QueryResult:
        """
        Return the ``k`` nearest documents to ``text``.

        :raises OrchestratorNotReady: If the session gate is closed.
        :raises EmbedError: If the query fails to embed; ``latest`` is kept.
        """

        engine, provider = self._session.require_ready()
        self._issued += 1
        seq = self._issued

        if not text or not text.strip():
            result = QueryResult(text, (), engine.generation)
        else:
            vec = await provider.embed(text)
            found = await engine.search(vec, self.k)
            result = QueryResult(text, found.neighbors, found.generation)

        self._publish(seq, result)
        return result

    def _publish(self, seq: int, result: QueryResult) -> None:
        latest = self.latest
        if seq < self._displayed or (latest is not None and result.generation < latest.generation):
            logger.debug(
                "Discarding stale query result %r (run %d, generation %d)",
                result.query,
                seq,
                result.generation,
            )
            return
        self._displayed = seq
        self.latest = result
