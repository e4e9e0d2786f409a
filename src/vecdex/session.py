"""
Session readiness
=================

A :class:`Session` owns the two slow, independently-initialized resources the
pipelines depend on (the vector index engine and the embedding provider),
brings both up concurrently exactly once, and exposes a single readiness
gate. Cancellation is a token owned by the session and checked after every
awaited step, so an initialization that finishes after ``cancel()`` never
touches observable state.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from typing import Any, Awaitable, Callable

from vecdex.config import index as index_cfg
from vecdex.embeddings import EmbeddingProvider, create_provider
from vecdex.errors import LoadError, OrchestratorNotReady
from vecdex.index import VectorIndex, instantiate

logger = logging.getLogger(__name__)

EngineFactory = Callable[[], Awaitable[VectorIndex]]
ProviderLoader = Callable[[], Awaitable[EmbeddingProvider]]


class ReadinessState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class Resource(str, enum.Enum):
    ENGINE = "engine"
    PROVIDER = "provider"


class CancellationToken:
    """One-way flag shared by everything a session launches."""

    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


async def _release(handle: Any) -> None:
    close = getattr(handle, "aclose", None)
    if close is None:
        return
    try:
        await close()
    except Exception:
        logger.exception("Failed to release %s", type(handle).__name__)


def _default_engine() -> Awaitable[VectorIndex]:
    return instantiate(index_cfg.DIMENSION)


def _default_provider() -> Awaitable[EmbeddingProvider]:
    return create_provider().load()


class Session:
    """Readiness orchestrator for one index engine and one embedding provider."""

    def __init__(
        self,
        instantiate_engine: EngineFactory | None = None,
        load_provider: ProviderLoader | None = None,
    ) -> None:
        self._factories: dict[Resource, Callable[[], Awaitable[Any]]] = {
            Resource.ENGINE: instantiate_engine or _default_engine,
            Resource.PROVIDER: load_provider or _default_provider,
        }
        self._states = {r: ReadinessState.UNINITIALIZED for r in Resource}
        self._handles: dict[Resource, Any] = {}
        self._errors: dict[Resource, BaseException] = {}
        self._token = CancellationToken()
        self._task: asyncio.Task | None = None

    # ------------------------------------------------------------------ #
    # lifecycle
    # ------------------------------------------------------------------ #

    def start(self) -> asyncio.Task:
        """Launch both initializations concurrently. Idempotent.

        Must be called from a running event loop.
        """

        if self._token.cancelled:
            raise OrchestratorNotReady(self.state)
        if self._task is not None:
            return self._task

        for resource in Resource:
            self._states[resource] = ReadinessState.LOADING
        logger.info("Starting session resources: %s", ", ".join(r.value for r in Resource))
        self._task = asyncio.create_task(self._bring_up())
        return self._task

    def cancel(self) -> None:
        """Mark the session cancelled; later load results are discarded."""

        if self._token.cancelled:
            return
        self._token.cancel()
        logger.info("Session cancelled (state: %s)", self._summary())

    async def wait_ready(self) -> "Session":
        """Wait for the bring-up launched by :meth:`start`.

        :raises OrchestratorNotReady: If never started or cancelled.
        :raises LoadError: If either resource failed to initialize.
        """

        task = self._task
        if task is None:
            raise OrchestratorNotReady(self.state)
        try:
            await asyncio.shield(task)
        except asyncio.CancelledError:
            # bring-up stopped by aclose(); the waiter itself was not cancelled
            if task.cancelled() and self._token.cancelled:
                raise OrchestratorNotReady(self.state) from None
            raise
        if self._token.cancelled:
            raise OrchestratorNotReady(self.state)
        for resource in Resource:
            if self._states[resource] is ReadinessState.FAILED:
                cause = self._errors.get(resource)
                raise LoadError(resource.value, cause) from cause
        return self

    async def aclose(self) -> None:
        """Tear down: cancel, stop pending loads and release held handles."""

        self.cancel()
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:  # pragma: no cover - normal cancellation
                pass
        for resource in Resource:
            handle = self._handles.pop(resource, None)
            if handle is not None:
                await _release(handle)

    async def __aenter__(self) -> "Session":
        self.start()
        try:
            return await self.wait_ready()
        except BaseException:
            await self.aclose()
            raise

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    # ------------------------------------------------------------------ #
    # gate
    # ------------------------------------------------------------------ #

    @property
    def cancelled(self) -> bool:
        return self._token.cancelled

    @property
    def is_ready(self) -> bool:
        """``True`` iff both resources are ready.

        :raises OrchestratorNotReady: If the session has been cancelled.
        """

        if self._token.cancelled:
            raise OrchestratorNotReady(self.state)
        return self._summary() is ReadinessState.READY

    @property
    def state(self) -> str:
        if self._token.cancelled:
            return "cancelled"
        return self._summary().value

    @property
    def states(self) -> dict[Resource, ReadinessState]:
        """Per-resource states (a copy)."""
        return dict(self._states)

    def error(self, resource: Resource) -> BaseException | None:
        return self._errors.get(resource)

    def require_ready(self) -> tuple[VectorIndex, EmbeddingProvider]:
        """Return ``(engine, provider)`` or fail fast when the gate is closed."""

        if not self.is_ready:
            raise OrchestratorNotReady(self.state)
        return self._handles[Resource.ENGINE], self._handles[Resource.PROVIDER]

    @property
    def engine(self) -> VectorIndex:
        return self.require_ready()[0]

    @property
    def provider(self) -> EmbeddingProvider:
        return self.require_ready()[1]

    # ------------------------------------------------------------------ #
    # internals
    # ------------------------------------------------------------------ #

    def _summary(self) -> ReadinessState:
        states = set(self._states.values())
        if ReadinessState.FAILED in states:
            return ReadinessState.FAILED
        if states == {ReadinessState.READY}:
            return ReadinessState.READY
        if states == {ReadinessState.UNINITIALIZED}:
            return ReadinessState.UNINITIALIZED
        return ReadinessState.LOADING

    async def _bring_up(self) -> None:
        await asyncio.gather(*(self._init(resource) for resource in Resource))
        if not self._token.cancelled and self._summary() is ReadinessState.READY:
            logger.info("Session ready")

    async def _init(self, resource: Resource) -> None:
        try:
            handle = await self._factories[resource]()
        except Exception as exc:
            if self._token.cancelled:
                logger.info("Ignoring %s load failure after cancellation: %s", resource.value, exc)
                return
            logger.exception("Failed to load %s", resource.value)
            self._errors[resource] = exc
            self._states[resource] = ReadinessState.FAILED
            return

        if self._token.cancelled:
            logger.info("Discarding %s loaded after cancellation", resource.value)
            await _release(handle)
            return

        self._handles[resource] = handle
        self._states[resource] = ReadinessState.READY
        logger.info("Resource %s ready", resource.value)


__all__ = [
    "CancellationToken",
    "ReadinessState",
    "Resource",
    "Session",
]
