"""Scalar Membrane — str/int/float/bool values; the callback is the full authority.

Invariants:
    - nullish is the identity: None reaches the callback unresolved
    - merge returns the callback result unchanged (no structural merge for primitives)
    - Default strategy passthrough: a pipeline using this as input returns the original scalar
"""

from typing import Any

from membrane.core.domain_types import (
    Ambient,
    PermeateCallback,
    ScalarMergeStrategy,
    Shape,
    resolve_strategy,
)


class ScalarMembrane:
    shape = Shape.SCALAR

    def __init__(
        self,
        callback: PermeateCallback,
        strategy: ScalarMergeStrategy | str = ScalarMergeStrategy.PASSTHROUGH,
    ):
        self._callback = callback
        self._strategy = resolve_strategy(
            ScalarMergeStrategy, strategy, type(self).__name__,
        )

    @property
    def strategy(self) -> ScalarMergeStrategy:
        return self._strategy

    @property
    def passes_through(self) -> bool:
        return self._strategy == ScalarMergeStrategy.PASSTHROUGH

    def nullish(self, value: Any) -> Any:
        return value

    async def merge(self, base: Any, ambient: Ambient | None = None) -> Any:
        return await self._callback(self.nullish(base), ambient)
