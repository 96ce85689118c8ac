"""Collection Membrane — list-shaped merges with append, overwrite, or preserve.

Invariants:
    - nullish(None) returns a fresh [] per call
    - append: [*base, *permeate]; overwrite/preserve: index-wise with HOLE awareness
    - Non-array base (after nullish) returns the callback result outright
    - passthrough returns the callback result and flags the pipeline
"""

from typing import Any

from membrane.core.domain_types import (
    Ambient,
    CollectionMergeStrategy,
    PermeateCallback,
    Shape,
    resolve_strategy,
)
from membrane.core.merge_collections import merge_items


class CollectionMembrane:
    """Array membrane. Default strategy `append`."""

    shape = Shape.COLLECTION

    def __init__(
        self,
        callback: PermeateCallback,
        strategy: CollectionMergeStrategy | str = CollectionMergeStrategy.APPEND,
    ):
        self._callback = callback
        self._strategy = resolve_strategy(
            CollectionMergeStrategy, strategy, type(self).__name__,
        )

    @property
    def strategy(self) -> CollectionMergeStrategy:
        return self._strategy

    @property
    def passes_through(self) -> bool:
        return self._strategy == CollectionMergeStrategy.PASSTHROUGH

    def nullish(self, value: Any) -> Any:
        if value is None:
            return []
        return value

    async def merge(self, base: Any, ambient: Ambient | None = None) -> Any:
        resolved = self.nullish(base)
        permeate = await self._callback(resolved, ambient)
        return merge_items(resolved, permeate, self._strategy, type(self).__name__)
