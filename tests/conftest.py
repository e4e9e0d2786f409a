import asyncio
import os

import pytest

# Keep tests offline and independent of any local config.toml / .env.
os.environ["VECDEX_EMBED_PROVIDER"] = "hash"
os.environ["VECDEX_CONFIG"] = os.path.join(os.path.dirname(__file__), "no-such-config.toml")
os.environ.setdefault("VECDEX_EMB_DIM", "384")
os.environ.setdefault("VECDEX_DEFAULT_K", "4")
os.environ.setdefault("VECDEX_EMBED_CONCURRENCY", "8")

from vecdex.corpus import SeedRecord  # noqa: E402
from vecdex.embeddings import EmbeddingProvider  # noqa: E402

# 3-d embeddings for the small example corpus; "sunny" sits next to "sunny day".
EXAMPLE_VECTORS = {
    "happy person": [1.0, 0.0, 0.0],
    "happy dog": [0.9, 0.1, 0.0],
    "sunny day": [0.0, 1.0, 0.0],
    "sunny": [0.0, 0.9, 0.1],
    "happy": [0.99, 0.01, 0.0],
}


class FakeProvider(EmbeddingProvider):
    """Table-driven provider with optional per-text delays and failures."""

    name = "fake provider"

    def __init__(self, vectors=None, dimension=0, fail_on=(), delays=None):
        super().__init__("fake-model", dimension)
        self.vectors = dict(vectors if vectors is not None else EXAMPLE_VECTORS)
        self.fail_on = set(fail_on)
        self.delays = dict(delays or {})
        self.calls = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.closed = False

    async def _load(self):
        return None

    async def _embed(self, text):
        self.calls.append(text)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(text, 0))
            if text in self.fail_on:
                raise RuntimeError(f"cannot embed {text}")
            return self.vectors[text]
        finally:
            self.in_flight -= 1

    async def aclose(self):
        self.closed = True
        await super().aclose()


@pytest.fixture
def make_provider():
    return FakeProvider


@pytest.fixture
def example_corpus():
    texts = ["happy person", "happy dog", "sunny day", "sunny day"]
    return [
        SeedRecord(id=str(i), title=text, url=f"/path/{i}", text=text)
        for i, text in enumerate(texts)
    ]
