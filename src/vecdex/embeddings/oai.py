"""Embedding provider backed by the OpenAI embeddings API"""

from __future__ import annotations

import logging

import numpy as np
from openai import AsyncOpenAI

from .base import EmbeddingProvider

logger = logging.getLogger(__name__)


class OpenAIEmbeddingProvider(EmbeddingProvider):
    name = "OpenAI embedding provider"

    def __init__(
        self,
        model_id: str = "text-embedding-3-small",
        dimension: int = 1536,
        api_key: str | None = None,
    ) -> None:
        super().__init__(model_id, dimension)
        self._api_key = api_key
        self._client: AsyncOpenAI | None = None

    async def _load(self) -> None:
        # Raises openai.OpenAIError when no key is configured.
        self._client = AsyncOpenAI(api_key=self._api_key)

    async def _embed(self, text: str) -> np.ndarray:
        resp = await self._client.embeddings.create(model=self.model_id, input=text)
        return np.asarray(resp.data[0].embedding, dtype=np.float32)

    async def aclose(self) -> None:
        client, self._client = self._client, None
        if client is not None:
            await client.close()
            logger.info("Closed OpenAI client")
        await super().aclose()
