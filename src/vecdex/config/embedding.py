import os

PROVIDERS = ("hash", "openai", "ollama")

_DEFAULT_DIMS = {
    "hash": 384,
    "openai": 1536,
    # 0 means learn the dimension from the first embedding.
    "ollama": 0,
}

_DEFAULT_MODELS = {
    "hash": "blake2b-hash",
    "openai": "text-embedding-3-small",
    "ollama": "nomic-embed-text",
}


class Embedding:
    def __init__(self, config: dict | None = None) -> None:
        emb_cfg = (config or {}).get("vecdex", {}).get("embedding", {})
        self.PROVIDER: str = str(emb_cfg.get("provider", os.getenv("VECDEX_EMBED_PROVIDER", "hash"))).lower()
        if self.PROVIDER not in PROVIDERS:
            raise ValueError(
                f"Unknown embedding provider {self.PROVIDER!r}; expected one of {', '.join(PROVIDERS)}"
            )

        self.MODEL_ID: str = str(
            emb_cfg.get("model_id")
            or os.getenv("VECDEX_EMBED_MODEL_ID")
            or _DEFAULT_MODELS[self.PROVIDER]
        )
        self.EMB_DIM: int = int(
            emb_cfg.get("emb_dim", os.getenv("VECDEX_EMB_DIM", str(_DEFAULT_DIMS[self.PROVIDER])))
        )
        self.SERVER_URL: str = str(
            emb_cfg.get("server_url", os.getenv("VECDEX_OLLAMA_URL", "http://localhost:11434"))
        )
        api_key_env = str(emb_cfg.get("api_key_env", "OPENAI_API_KEY"))
        self.API_KEY: str | None = os.getenv(api_key_env)
        self.CONCURRENCY: int = int(
            emb_cfg.get("concurrency", os.getenv("VECDEX_EMBED_CONCURRENCY", "8"))
        )

        if self.EMB_DIM < 0:
            raise ValueError(f"emb_dim must be >= 0, got {self.EMB_DIM}")
        if self.CONCURRENCY <= 0:
            raise ValueError(f"concurrency must be positive, got {self.CONCURRENCY}")
