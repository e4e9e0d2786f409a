import pytest

from vecdex.config import load_raw_config
from vecdex.config.embedding import Embedding
from vecdex.config.index import Index
from vecdex.config.log import Log


def test_embedding_defaults_follow_provider(monkeypatch):
    monkeypatch.delenv("VECDEX_EMB_DIM", raising=False)
    monkeypatch.delenv("VECDEX_EMBED_MODEL_ID", raising=False)
    monkeypatch.setenv("VECDEX_EMBED_PROVIDER", "openai")

    cfg = Embedding({})
    assert cfg.PROVIDER == "openai"
    assert cfg.MODEL_ID == "text-embedding-3-small"
    assert cfg.EMB_DIM == 1536

    ollama = Embedding({"vecdex": {"embedding": {"provider": "ollama"}}})
    assert ollama.MODEL_ID == "nomic-embed-text"
    assert ollama.EMB_DIM == 0


def test_embedding_file_values_override_env(monkeypatch):
    monkeypatch.setenv("VECDEX_EMB_DIM", "99")
    cfg = Embedding(
        {"vecdex": {"embedding": {"provider": "hash", "emb_dim": 12, "concurrency": 2}}}
    )
    assert cfg.EMB_DIM == 12
    assert cfg.CONCURRENCY == 2


def test_embedding_reads_api_key_from_named_env(monkeypatch):
    monkeypatch.setenv("MY_KEY", "sk-secret")
    cfg = Embedding({"vecdex": {"embedding": {"provider": "openai", "api_key_env": "MY_KEY"}}})
    assert cfg.API_KEY == "sk-secret"


@pytest.mark.parametrize(
    "section",
    [
        {"provider": "word2vec"},
        {"provider": "hash", "concurrency": 0},
        {"provider": "hash", "emb_dim": -1},
    ],
)
def test_embedding_rejects_invalid_values(section):
    with pytest.raises(ValueError):
        Embedding({"vecdex": {"embedding": section}})


def test_index_config(monkeypatch):
    monkeypatch.delenv("VECDEX_INDEX_DIM", raising=False)
    monkeypatch.setenv("VECDEX_DEFAULT_K", "6")

    cfg = Index({})
    assert cfg.DEFAULT_K == 6
    assert cfg.DIMENSION is None

    pinned = Index({"vecdex": {"index": {"default_k": 2, "dimension": 384}}})
    assert pinned.DEFAULT_K == 2
    assert pinned.DIMENSION == 384

    with pytest.raises(ValueError):
        Index({"vecdex": {"index": {"default_k": 0}}})


def test_log_level_is_upper_cased():
    assert Log({"vecdex": {"logging": {"level": "debug"}}}).LEVEL == "DEBUG"


def test_load_raw_config(tmp_path, monkeypatch):
    path = tmp_path / "config.toml"
    path.write_text('[vecdex.index]\ndefault_k = 3\n', encoding="utf-8")

    assert load_raw_config(path) == {"vecdex": {"index": {"default_k": 3}}}
    assert load_raw_config(tmp_path / "missing.toml") == {}

    monkeypatch.setenv("VECDEX_CONFIG", str(path))
    assert Index(load_raw_config()).DEFAULT_K == 3
