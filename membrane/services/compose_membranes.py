"""Composite Membranes — sequential chaining and null-collapsing wrappers.

Invariants:
    - SequenceMembrane holds ≥1 membranes sharing one Shape (checked at construction)
    - SequenceMembrane threads each result as the next base, left to right
    - NullableMembrane delegates untouched when base is not None
    - NullableMembrane on a None base returns None iff the inner result is effectively
      empty for the inner's declared Shape; stream results never collapse
"""

from typing import Any

from membrane.core.detect_empty import is_effectively_empty
from membrane.core.domain_types import Ambient, Shape
from membrane.core.errors import EmptySequenceError, ShapeMismatchError
from membrane.core.membrane_protocol import MembraneLike


class SequenceMembrane:
    """Chains membranes: each merge() result becomes the next membrane's base."""

    strategy = None
    passes_through = False

    def __init__(self, membranes: list[MembraneLike]):
        membranes = list(membranes)
        if not membranes:
            raise EmptySequenceError()
        shape = membranes[0].shape
        for membrane in membranes[1:]:
            if membrane.shape != shape:
                raise ShapeMismatchError(
                    type(self).__name__, shape.value, membrane, "membrane",
                )
        self._membranes = tuple(membranes)

    @property
    def membranes(self) -> tuple[MembraneLike, ...]:
        return self._membranes

    @property
    def shape(self) -> Shape:
        return self._membranes[0].shape

    def nullish(self, value: Any) -> Any:
        return self._membranes[0].nullish(value)

    async def merge(self, base: Any, ambient: Ambient | None = None) -> Any:
        first, *rest = self._membranes
        result = await first.merge(base, ambient)
        for membrane in rest:
            result = await membrane.merge(result, ambient)
        return result


class NullableMembrane:
    """Wraps a membrane so an un-augmented None base merges to None.

    Typical use is an optional related-entity load: a missing record stays None
    unless the callback supplied real data for it.
    """

    def __init__(self, inner: MembraneLike):
        self._inner = inner

    @property
    def inner(self) -> MembraneLike:
        return self._inner

    @property
    def shape(self) -> Shape:
        return self._inner.shape

    @property
    def strategy(self) -> Any:
        return self._inner.strategy

    @property
    def passes_through(self) -> bool:
        return self._inner.passes_through

    def nullish(self, value: Any) -> Any:
        return self._inner.nullish(value)

    async def merge(self, base: Any, ambient: Ambient | None = None) -> Any:
        if base is not None:
            return await self._inner.merge(base, ambient)
        result = await self._inner.merge(base, ambient)
        if is_effectively_empty(result, self._inner.shape):
            return None
        return result
