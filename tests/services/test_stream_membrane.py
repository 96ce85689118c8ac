"""Stream Membrane — lazy per-chunk merges over async iterables.

Tests cover:
    - preserve (default): chunk keys win; overwrite: callback keys win
    - Laziness: nothing pulled or awaited until the consumer iterates
    - Empty source / None base: zero chunks, callback never awaited
    - Callback errors surface from the failing iteration step
    - Non-iterable base and non-mapping chunks raise ShapeMismatchError
    - Early close and mid-stream errors close the source iterator
    - One instance serves concurrent streams without mixing chunks or ambients
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from membrane.core.errors import InvalidStrategyError, ShapeMismatchError
from membrane.services.stream_membrane import StreamMembrane
from tests.services.async_streams import collect, to_async


@pytest.mark.asyncio
async def test_preserve_keeps_chunk_values():
    membrane = StreamMembrane(AsyncMock(return_value={"id": 999, "tagged": True}))

    chunks = await collect(await membrane.merge(to_async([{"id": 1}, {"id": 2}])))

    assert chunks == [{"id": 1, "tagged": True}, {"id": 2, "tagged": True}]


@pytest.mark.asyncio
async def test_overwrite_lets_callback_values_win():
    membrane = StreamMembrane(AsyncMock(return_value={"id": 999}), "overwrite")

    chunks = await collect(await membrane.merge(to_async([{"id": 1, "a": 1}])))

    assert chunks == [{"id": 999, "a": 1}]


@pytest.mark.asyncio
async def test_chunks_are_fresh_dicts():
    chunk = {"id": 1}
    membrane = StreamMembrane(AsyncMock(return_value={"x": 1}))

    [merged] = await collect(await membrane.merge(to_async([chunk])))

    assert merged is not chunk
    assert chunk == {"id": 1}


@pytest.mark.asyncio
async def test_nothing_pulled_until_consumed():
    source = to_async([{"id": 1}, {"id": 2}, {"id": 3}])
    callback = AsyncMock(return_value={})
    membrane = StreamMembrane(callback)

    stream = await membrane.merge(source)
    assert source.pulled == 0
    callback.assert_not_awaited()

    first = await anext(stream)
    assert first == {"id": 1}
    assert source.pulled == 1
    assert callback.await_count == 1
    await stream.aclose()


@pytest.mark.asyncio
async def test_callback_sees_each_chunk_in_order_with_ambient():
    seen = []

    async def record(chunk, ambient):
        seen.append((chunk["id"], ambient["run"]))
        return {}

    membrane = StreamMembrane(record)
    await collect(await membrane.merge(to_async([{"id": 1}, {"id": 2}]), {"run": "r1"}))

    assert seen == [(1, "r1"), (2, "r1")]


@pytest.mark.asyncio
async def test_empty_source_never_invokes_callback():
    callback = AsyncMock(return_value={})
    chunks = await collect(await StreamMembrane(callback).merge(to_async([])))
    assert chunks == []
    callback.assert_not_awaited()


@pytest.mark.asyncio
async def test_none_base_is_exhausted_stream():
    callback = AsyncMock(return_value={})
    chunks = await collect(await StreamMembrane(callback).merge(None))
    assert chunks == []
    callback.assert_not_awaited()


@pytest.mark.asyncio
async def test_callback_error_surfaces_at_failing_chunk():
    boom = RuntimeError("chunk 2 failed")
    callback = AsyncMock(side_effect=[{}, boom])
    stream = await StreamMembrane(callback).merge(to_async([{"id": 1}, {"id": 2}]))

    assert await anext(stream) == {"id": 1}
    with pytest.raises(RuntimeError) as exc_info:
        await anext(stream)
    assert exc_info.value is boom


@pytest.mark.asyncio
async def test_non_iterable_base_rejected():
    with pytest.raises(ShapeMismatchError):
        await StreamMembrane(AsyncMock()).merge([{"id": 1}])


@pytest.mark.asyncio
async def test_non_mapping_chunk_rejected_before_callback():
    callback = AsyncMock(return_value={})
    stream = await StreamMembrane(callback).merge(to_async(["text"]))

    with pytest.raises(ShapeMismatchError) as exc_info:
        await anext(stream)
    assert exc_info.value.role == "chunk"
    callback.assert_not_awaited()


def test_stream_never_passes_through():
    membrane = StreamMembrane(AsyncMock())
    assert membrane.passes_through is False
    with pytest.raises(InvalidStrategyError):
        StreamMembrane(AsyncMock(), "passthrough")


def _tracked_source(items, events):
    async def source():
        try:
            for item in items:
                yield item
        finally:
            events.append("source closed")

    return source()


@pytest.mark.asyncio
async def test_early_close_closes_source():
    events = []
    membrane = StreamMembrane(AsyncMock(return_value={}))
    stream = await membrane.merge(_tracked_source([{"id": 1}, {"id": 2}, {"id": 3}], events))

    assert await anext(stream) == {"id": 1}
    await stream.aclose()

    assert events == ["source closed"]


@pytest.mark.asyncio
async def test_callback_error_closes_source():
    events = []
    membrane = StreamMembrane(AsyncMock(side_effect=RuntimeError("enrich failed")))
    stream = await membrane.merge(_tracked_source([{"id": 1}, {"id": 2}], events))

    with pytest.raises(RuntimeError):
        await anext(stream)

    assert events == ["source closed"]


@pytest.mark.asyncio
async def test_source_without_aclose_is_consumed():
    class PlainIterator:
        def __init__(self):
            self._items = [{"id": 1}, {"id": 2}]

        def __aiter__(self):
            return self

        async def __anext__(self):
            if not self._items:
                raise StopAsyncIteration
            return self._items.pop(0)

    membrane = StreamMembrane(AsyncMock(return_value={"ok": True}))
    chunks = await collect(await membrane.merge(PlainIterator()))

    assert chunks == [{"id": 1, "ok": True}, {"id": 2, "ok": True}]


@pytest.mark.asyncio
async def test_concurrent_streams_on_one_instance_do_not_interfere():
    async def tag(chunk, ambient):
        await asyncio.sleep(0)
        return {"run": ambient["run"]}

    membrane = StreamMembrane(tag)

    async def consume(run):
        source = to_async([{"id": f"{run}-{i}"} for i in range(3)])
        return await collect(await membrane.merge(source, {"run": run}))

    results = await asyncio.gather(*(consume(run) for run in ("a", "b", "c")))

    for run, chunks in zip(("a", "b", "c"), results):
        assert chunks == [{"id": f"{run}-{i}", "run": run} for i in range(3)]
