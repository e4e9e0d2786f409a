"""Embed a fixed corpus and load it into the session's index in one build."""

from __future__ import annotations

import asyncio
import logging
from typing import Sequence

import numpy as np

from vecdex.config import embedding as embedding_cfg
from vecdex.corpus import SeedRecord
from vecdex.embeddings import EmbeddingProvider
from vecdex.index import Document
from vecdex.session import Session

logger = logging.getLogger(__name__)


async def embed_all(
    provider: EmbeddingProvider, texts: Sequence[str], concurrency: int
) -> list[np.ndarray]:
    """
    Embed ``texts`` concurrently, at most ``concurrency`` calls in flight.

    Results keep the order of ``texts``. The first failure cancels the
    remaining calls and is re-raised.
    """

    semaphore = asyncio.Semaphore(concurrency)

    async def _bounded(text: str) -> np.ndarray:
        async with semaphore:
            return await provider.embed(text)

    tasks = [asyncio.create_task(_bounded(text)) for text in texts]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


class IndexBuildPipeline:
    """Embeds every seed record, then builds the index exactly once.

    If any embedding fails nothing is built and the index keeps its previous
    generation. Re-running replaces the index wholesale.
    """

    def __init__(
        self,
        session: Session,
        corpus: Sequence[SeedRecord],
        concurrency: int | None = None,
    ) -> None:
        self._session = session
        self.corpus = tuple(corpus)
        self.concurrency = concurrency if concurrency is not None else embedding_cfg.CONCURRENCY
        if self.concurrency <= 0:
            raise ValueError(f"concurrency must be > 0, got {self.concurrency}")
        self._lock = asyncio.Lock()
        self.last_generation: int | None = None

    async def run(self) -> int:
        """
        Build the index from the corpus.

        :returns: Generation number of the committed index.
        :raises OrchestratorNotReady: If the session gate is closed.
        :raises EmbedError: If any record fails to embed.
        :raises DimensionMismatch: If the embeddings disagree with the index.
        """

        engine, provider = self._session.require_ready()

        async with self._lock:
            logger.info("Embedding %d seed records", len(self.corpus))
            try:
                vectors = await embed_all(
                    provider, [record.text for record in self.corpus], self.concurrency
                )
                documents = [
                    Document(id=record.id, title=record.title, url=record.url, embedding=vec)
                    for record, vec in zip(self.corpus, vectors)
                ]
                generation = await engine.build(documents)
            except Exception as exc:
                logger.error("Index build aborted: %s", exc)
                raise

        self.last_generation = generation
        return generation
