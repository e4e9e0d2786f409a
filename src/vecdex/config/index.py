import os


class Index:
    def __init__(self, config: dict | None = None) -> None:
        idx_cfg = (config or {}).get("vecdex", {}).get("index", {})
        self.DEFAULT_K: int = int(idx_cfg.get("default_k", os.getenv("VECDEX_DEFAULT_K", "4")))
        dim_raw = idx_cfg.get("dimension", os.getenv("VECDEX_INDEX_DIM", ""))
        # Unset means the first non-empty build establishes the dimension.
        self.DIMENSION: int | None = int(dim_raw) if str(dim_raw).strip() else None

        if self.DEFAULT_K <= 0:
            raise ValueError(f"default_k must be positive, got {self.DEFAULT_K}")
        if self.DIMENSION is not None and self.DIMENSION <= 0:
            raise ValueError(f"dimension must be positive, got {self.DIMENSION}")
