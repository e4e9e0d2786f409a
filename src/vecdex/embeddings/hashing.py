"""
Deterministic hashing embeddings
================================

Offline provider: each lower-cased word is hashed with BLAKE2b into one of
``dimension`` signed buckets and the counts are L2-normalized. Texts that
share words land close together, which is enough for demos and tests
without a model download.
"""

from __future__ import annotations

import hashlib
import re

import numpy as np

from .base import EmbeddingProvider

_TOKEN_RE = re.compile(r"\w+", re.UNICODE)


def tokenize(text: str) -> list[str]:
    return _TOKEN_RE.findall((text or "").lower())


def _bucket(token: str, dimension: int) -> tuple[int, float]:
    digest = hashlib.blake2b(token.encode("utf-8"), digest_size=8).digest()
    index = int.from_bytes(digest[:4], "big") % dimension
    sign = -1.0 if digest[4] & 1 else 1.0
    return index, sign


class HashEmbeddingProvider(EmbeddingProvider):
    name = "hash embedding provider"

    def __init__(self, dimension: int = 384, model_id: str = "blake2b-hash") -> None:
        if dimension <= 0:
            raise ValueError(f"Hash embeddings need a positive dimension, got {dimension}")
        super().__init__(model_id, dimension)

    async def _load(self) -> None:
        return None

    async def _embed(self, text: str) -> np.ndarray:
        vec = np.zeros(self._dimension, dtype=np.float32)
        for token in tokenize(text):
            index, sign = _bucket(token, self._dimension)
            vec[index] += sign
        norm = float(np.linalg.norm(vec))
        if norm > 0:
            vec /= norm
        return vec
