"""
Embedding providers
===================

Centralizes embedding backends so the rest of the codebase does not care
about model details (dimensionality, provider, etc.).
"""

from __future__ import annotations

from vecdex.config import embedding as embedding_cfg

from .base import EmbeddingProvider
from .hashing import HashEmbeddingProvider
from .oai import OpenAIEmbeddingProvider
from .ollama import OllamaEmbeddingProvider


def create_provider(cfg=None) -> EmbeddingProvider:
    """Build the (unloaded) provider selected by ``cfg.PROVIDER``."""

    cfg = cfg or embedding_cfg
    if cfg.PROVIDER == "openai":
        return OpenAIEmbeddingProvider(cfg.MODEL_ID, cfg.EMB_DIM, api_key=cfg.API_KEY)
    if cfg.PROVIDER == "ollama":
        return OllamaEmbeddingProvider(cfg.MODEL_ID, cfg.EMB_DIM, host=cfg.SERVER_URL)
    return HashEmbeddingProvider(cfg.EMB_DIM, model_id=cfg.MODEL_ID)


__all__ = [
    "EmbeddingProvider",
    "HashEmbeddingProvider",
    "OpenAIEmbeddingProvider",
    "OllamaEmbeddingProvider",
    "create_provider",
]
