"""Stream Membrane — per-chunk merges over a lazily consumed async iterable.

Invariants:
    - No callback runs until the consumer requests a chunk
    - Chunks processed one at a time, in source order, never concurrently
    - Each yielded chunk is a fresh dict: preserve = chunk wins, overwrite = permeate wins
    - A callback error surfaces from the iteration step of the failing chunk
    - nullish(None) is an exhausted iterator: zero chunks, callback never invoked
    - Closing the merged stream (or an error mid-stream) closes the source iterator

Design Decisions:
    - merge() is a coroutine returning an async generator, so pipelines can
      `await output.merge(...)` uniformly for every shape
"""

import contextlib
import logging
from collections.abc import AsyncIterable, AsyncIterator
from typing import Any

from membrane.core.domain_types import (
    Ambient,
    PermeateCallback,
    Shape,
    StreamMergeStrategy,
    resolve_strategy,
)
from membrane.core.errors import ShapeMismatchError
from membrane.core.merge_objects import ensure_mapping, overlay_fields

logger = logging.getLogger(__name__)


async def empty_stream() -> AsyncIterator[Any]:
    """Async iterator that is exhausted on first pull."""
    return
    yield


def _closing(iterator: AsyncIterator) -> contextlib.AbstractAsyncContextManager:
    """aclose() the iterator on exit when it supports it."""
    if hasattr(iterator, "aclose"):
        return contextlib.aclosing(iterator)
    return contextlib.nullcontext(iterator)


class StreamMembrane:
    shape = Shape.STREAM
    passes_through = False

    def __init__(
        self,
        callback: PermeateCallback,
        strategy: StreamMergeStrategy | str = StreamMergeStrategy.PRESERVE,
    ):
        self._callback = callback
        self._strategy = resolve_strategy(
            StreamMergeStrategy, strategy, type(self).__name__,
        )

    @property
    def strategy(self) -> StreamMergeStrategy:
        return self._strategy

    def nullish(self, value: Any) -> Any:
        if value is None:
            return empty_stream()
        return value

    async def merge(
        self, base: Any, ambient: Ambient | None = None,
    ) -> AsyncIterator[dict]:
        source = self.nullish(base)
        if not isinstance(source, AsyncIterable):
            raise ShapeMismatchError(
                type(self).__name__, Shape.STREAM.value, source, "base",
            )
        return self._diffuse_chunks(source, ambient)

    async def _diffuse_chunks(
        self, source: AsyncIterable, ambient: Ambient | None,
    ) -> AsyncIterator[dict]:
        name = type(self).__name__
        count = 0
        iterator = aiter(source)
        async with _closing(iterator):
            async for chunk in iterator:
                chunk = ensure_mapping(chunk, name, "chunk")
                permeate = ensure_mapping(await self._callback(chunk, ambient), name)
                if self._strategy == StreamMergeStrategy.PRESERVE:
                    yield overlay_fields(permeate, chunk)
                else:
                    yield overlay_fields(chunk, permeate)
                count += 1
        logger.debug(
            f"Stream exhausted after {count} chunk(s)",
            extra={"membrane": name, "strategy": self._strategy.value},
        )
