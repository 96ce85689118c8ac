"""Object Membranes — additive, projecting, and pure-projection merges for mappings.

Invariants:
    - nullish(None) returns a fresh {} (new dict per call, never shared)
    - ObjectMembrane preserve: base keys win, callback may add missing keys
    - ObjectProjectionMembrane output keys == callback result keys, values per strategy
    - ProjectionMembrane always passes through; merge returns the callback result as-is
    - Callback is awaited exactly once per merge with (resolved, ambient)
"""

from typing import Any

from membrane.core.domain_types import (
    Ambient,
    ObjectMergeStrategy,
    PermeateCallback,
    Shape,
    resolve_strategy,
)
from membrane.core.errors import InvalidStrategyError
from membrane.core.merge_objects import merge_fields, project_fields


def _resolve_mapping(value: Any) -> Any:
    if value is None:
        return {}
    return value


class ObjectMembrane:
    """Additive membrane: enriches base with callback-produced keys.

    Base and callback result must be Mappings. Attribute-based objects (dataclasses,
    pydantic models) are not merged field by field; under preserve they raise
    ShapeMismatchError, so convert them first (e.g. `model.model_dump()`).
    dict subclasses keep their concrete type in the merged result.
    """

    shape = Shape.OBJECT

    def __init__(
        self,
        callback: PermeateCallback,
        strategy: ObjectMergeStrategy | str = ObjectMergeStrategy.PRESERVE,
    ):
        self._callback = callback
        self._strategy = resolve_strategy(
            ObjectMergeStrategy, strategy, type(self).__name__,
        )

    @property
    def strategy(self) -> ObjectMergeStrategy:
        return self._strategy

    @property
    def passes_through(self) -> bool:
        return self._strategy == ObjectMergeStrategy.PASSTHROUGH

    def nullish(self, value: Any) -> Any:
        return _resolve_mapping(value)

    async def merge(self, base: Any, ambient: Ambient | None = None) -> Any:
        resolved = self.nullish(base)
        permeate = await self._callback(resolved, ambient)
        return merge_fields(resolved, permeate, self._strategy, type(self).__name__)


class ObjectProjectionMembrane(ObjectMembrane):
    """Subtractive + additive: merge per strategy, keep only the callback's keys.

    Lets a callback narrow a domain object (drop sensitive fields) while
    enriching it, e.g. returning {"id", "email"} from a twelve-field record
    yields exactly those two keys.
    """

    def __init__(
        self,
        callback: PermeateCallback,
        strategy: ObjectMergeStrategy | str = ObjectMergeStrategy.PRESERVE,
    ):
        super().__init__(callback, strategy)
        if self._strategy == ObjectMergeStrategy.PASSTHROUGH:
            raise InvalidStrategyError(
                strategy, type(self).__name__,
                [ObjectMergeStrategy.OVERWRITE.value, ObjectMergeStrategy.PRESERVE.value],
            )

    async def merge(self, base: Any, ambient: Ambient | None = None) -> dict:
        resolved = self.nullish(base)
        permeate = await self._callback(resolved, ambient)
        return project_fields(resolved, permeate, self._strategy, type(self).__name__)


class ProjectionMembrane:
    """Pure projection: callback derives a view, pipeline returns the original base."""

    shape = Shape.OBJECT
    strategy = ObjectMergeStrategy.PASSTHROUGH
    passes_through = True

    def __init__(self, callback: PermeateCallback):
        self._callback = callback

    def nullish(self, value: Any) -> Any:
        return _resolve_mapping(value)

    async def merge(self, base: Any, ambient: Ambient | None = None) -> Any:
        return await self._callback(self.nullish(base), ambient)
