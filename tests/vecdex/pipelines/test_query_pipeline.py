import asyncio

import pytest

from vecdex.errors import EmbedError, OrchestratorNotReady
from vecdex.index import VectorIndex
from vecdex.pipelines import IndexBuildPipeline, QueryPipeline
from vecdex.session import Session


async def _ready_session(provider):
    engine = VectorIndex()

    async def instantiate_engine():
        return engine

    session = Session(instantiate_engine, provider.load)
    session.start()
    await session.wait_ready()
    return session


def test_query_ranks_matching_documents_first(make_provider, example_corpus):
    provider = make_provider()

    async def main():
        session = await _ready_session(provider)
        await IndexBuildPipeline(session, example_corpus).run()
        pipeline = QueryPipeline(session, k=2)
        return pipeline, await pipeline.run("sunny")

    pipeline, result = asyncio.run(main())

    assert [n.id for n in result.neighbors] == ["2", "3"]
    assert result.titles() == ["sunny day", "sunny day"]
    assert result.generation == 1
    assert pipeline.latest is result


def test_default_k_comes_from_config(make_provider, example_corpus):
    provider = make_provider()

    async def main():
        session = await _ready_session(provider)
        await IndexBuildPipeline(session, example_corpus).run()
        return await QueryPipeline(session).run("happy")

    result = asyncio.run(main())
    assert len(result) == 4
    assert [n.id for n in result.neighbors][:2] == ["0", "1"]


def test_query_before_build_is_empty(make_provider):
    provider = make_provider()

    async def main():
        session = await _ready_session(provider)
        return await QueryPipeline(session).run("sunny")

    result = asyncio.run(main())
    assert result.neighbors == ()
    assert result.generation == 0


def test_blank_query_skips_provider(make_provider, example_corpus):
    provider = make_provider()

    async def main():
        session = await _ready_session(provider)
        await IndexBuildPipeline(session, example_corpus).run()
        provider.calls.clear()
        return await QueryPipeline(session).run("   ")

    result = asyncio.run(main())
    assert len(result) == 0
    assert provider.calls == []


def test_query_requires_ready_session(make_provider):
    provider = make_provider()
    session = Session(load_provider=provider.load)

    with pytest.raises(OrchestratorNotReady):
        asyncio.run(QueryPipeline(session).run("sunny"))


def test_failed_query_keeps_previous_result(make_provider, example_corpus):
    provider = make_provider(fail_on={"broken"})

    async def main():
        session = await _ready_session(provider)
        await IndexBuildPipeline(session, example_corpus).run()
        pipeline = QueryPipeline(session, k=1)
        first = await pipeline.run("happy")
        with pytest.raises(EmbedError):
            await pipeline.run("broken")
        return pipeline, first

    pipeline, first = asyncio.run(main())
    assert pipeline.latest is first


def test_slow_query_does_not_overwrite_newer_result(make_provider, example_corpus):
    provider = make_provider(delays={"happy": 0.05})

    async def main():
        session = await _ready_session(provider)
        await IndexBuildPipeline(session, example_corpus).run()
        pipeline = QueryPipeline(session, k=1)
        slow, fast = await asyncio.gather(pipeline.run("happy"), pipeline.run("sunny"))
        return pipeline, slow, fast

    pipeline, slow, fast = asyncio.run(main())
    assert slow.neighbors[0].id == "0"
    assert pipeline.latest is fast


def test_query_result_from_superseded_generation_is_discarded(make_provider, example_corpus):
    provider = make_provider()

    async def main():
        session = await _ready_session(provider)
        await IndexBuildPipeline(session, example_corpus).run()
        pipeline = QueryPipeline(session, k=4)
        fresh = await pipeline.run("sunny")
        stale = type(fresh)(query="happy", neighbors=fresh.neighbors, generation=0)
        pipeline._publish(pipeline._issued + 1, stale)
        return pipeline, fresh

    pipeline, fresh = asyncio.run(main())
    assert pipeline.latest is fresh


def test_query_sees_rebuilt_index(make_provider, example_corpus):
    provider = make_provider()

    async def main():
        session = await _ready_session(provider)
        await IndexBuildPipeline(session, example_corpus).run()
        pipeline = QueryPipeline(session, k=4)
        before = await pipeline.run("sunny")
        await IndexBuildPipeline(session, example_corpus[:2]).run()
        after = await pipeline.run("sunny")
        return before, after

    before, after = asyncio.run(main())
    assert before.generation == 1
    assert after.generation == 2
    assert {n.id for n in after.neighbors} == {"0", "1"}


def test_negative_k_rejected(make_provider):
    with pytest.raises(ValueError):
        QueryPipeline(Session(load_provider=make_provider().load), k=-1)
