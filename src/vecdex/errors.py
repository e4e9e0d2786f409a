"""Error kinds raised by the index, the embedding providers and the session."""

from __future__ import annotations


class VecdexError(Exception):
    """Base class for all vecdex errors."""


class LoadError(VecdexError):
    """A gated resource (engine or embedding provider) failed to initialize.

    Terminal for the session that raised it; nothing retries internally.
    """

    def __init__(self, resource: str, cause: BaseException | None = None) -> None:
        self.resource = resource
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Failed to load {resource}{detail}")


class DimensionMismatch(VecdexError, ValueError):
    """A document or query vector does not have the index dimension."""

    def __init__(self, expected: int, actual: int, doc_id: str | None = None) -> None:
        self.expected = expected
        self.actual = actual
        self.doc_id = doc_id
        where = f" for document {doc_id!r}" if doc_id is not None else ""
        super().__init__(f"Expected embedding of dim {expected}, got {actual}{where}")


class EmbedError(VecdexError):
    """The embedding provider failed on ``text``."""

    def __init__(self, text: str, cause: BaseException | None = None) -> None:
        self.text = text
        self.cause = cause
        preview = text if len(text) <= 40 else text[:37] + "..."
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Failed to embed {preview!r}{detail}")


class OrchestratorNotReady(VecdexError):
    """A dependent operation ran before the readiness gate opened."""

    def __init__(self, state: str) -> None:
        self.state = state
        super().__init__(f"Session is not ready (state: {state})")


__all__ = [
    "VecdexError",
    "LoadError",
    "DimensionMismatch",
    "EmbedError",
    "OrchestratorNotReady",
]
