"""Embedding provider backed by a local Ollama server"""

from __future__ import annotations

import numpy as np
from ollama import AsyncClient

from vecdex.errors import DimensionMismatch

from .base import EmbeddingProvider

_PROBE_TEXT = "dimension probe"


class OllamaEmbeddingProvider(EmbeddingProvider):
    name = "Ollama embedding provider"

    def __init__(
        self,
        model_id: str = "nomic-embed-text",
        dimension: int = 0,
        host: str = "http://localhost:11434",
    ) -> None:
        super().__init__(model_id, dimension)
        self.host = host
        self._client: AsyncClient | None = None

    async def _load(self) -> None:
        client = AsyncClient(host=self.host)
        try:
            # Fails here, not on first use, when the server or model is missing.
            resp = await client.embed(model=self.model_id, input=_PROBE_TEXT)
            probe = resp.embeddings[0]
            if self._dimension == 0:
                self._dimension = len(probe)
            elif len(probe) != self._dimension:
                raise DimensionMismatch(self._dimension, len(probe))
        except BaseException:
            await client.close()
            raise
        self._client = client

    async def _embed(self, text: str) -> np.ndarray:
        resp = await self._client.embed(model=self.model_id, input=text)
        return np.asarray(resp.embeddings[0], dtype=np.float32)

    async def aclose(self) -> None:
        client, self._client = self._client, None
        if client is not None:
            await client.close()
        await super().aclose()
