"""Embedding provider interface shared by all backends."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

import numpy as np

from vecdex.errors import DimensionMismatch, EmbedError

logger = logging.getLogger(__name__)


class EmbeddingProvider(ABC):
    """Maps text to a fixed-length float32 vector.

    ``load()`` must complete once before ``embed()`` is used. After that the
    provider is stateless from the caller's point of view.
    """

    name = "embedding provider"

    def __init__(self, model_id: str, dimension: int = 0) -> None:
        self.model_id = model_id
        self._dimension = dimension
        self._loaded = False

    @property
    def dimension(self) -> int:
        """Output length, or ``0`` while still unknown."""
        return self._dimension

    @property
    def loaded(self) -> bool:
        return self._loaded

    async def load(self) -> "EmbeddingProvider":
        """Run the backend's one-time initialization and return ``self``."""

        if self._loaded:
            return self
        logger.info("Loading %s (model=%s)", self.name, self.model_id)
        await self._load()
        self._loaded = True
        logger.info("Loaded %s (model=%s, dim=%s)", self.name, self.model_id, self._dimension or "?")
        return self

    async def embed(self, text: str) -> np.ndarray:
        """
        Return the embedding vector for ``text``.

        :raises EmbedError: If the backend fails or the provider is not loaded.
        :raises DimensionMismatch: If the backend returns the wrong length.
        """

        if not self._loaded:
            raise EmbedError(text, RuntimeError(f"{self.name} is not loaded"))

        try:
            raw = await self._embed(text)
        except EmbedError:
            raise
        except Exception as exc:
            raise EmbedError(text, exc) from exc

        vec = np.asarray(raw, dtype=np.float32).reshape(-1)
        if self._dimension == 0:
            self._dimension = int(vec.shape[0])
        elif vec.shape[0] != self._dimension:
            raise DimensionMismatch(self._dimension, int(vec.shape[0]))
        return vec

    async def aclose(self) -> None:
        """Release backend resources. Safe to call more than once."""
        self._loaded = False

    @abstractmethod
    async def _load(self) -> None:
        """Backend-specific initialization."""

    @abstractmethod
    async def _embed(self, text: str):
        """Backend-specific embedding call returning an array-like vector."""
