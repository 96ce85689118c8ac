"""Merge Contract — the structural interface every transformer satisfies.

Invariants:
    - nullish(None) returns the empty value of `shape`; non-None input is returned unchanged
    - merge() never raises for an absent base and propagates callback errors verbatim
    - passes_through is True exactly when strategy is the "passthrough" marker
    - Ambient is received per call and never stored on the transformer

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - passes_through as an explicit flag: the orchestrator reads a typed field
      instead of probing for a strategy attribute
"""

from typing import Any, Protocol, runtime_checkable

from membrane.core.domain_types import Ambient, Shape


@runtime_checkable
class MembraneLike(Protocol):
    """Contract for a stateless, strategy-configured merge unit."""

    @property
    def shape(self) -> Shape: ...

    @property
    def strategy(self) -> Any: ...

    @property
    def passes_through(self) -> bool: ...

    def nullish(self, value: Any) -> Any: ...

    async def merge(self, base: Any, ambient: Ambient | None = None) -> Any: ...


class PermeatorLike(Protocol):
    """Contract for an input → callback → output pipeline."""

    async def permeate(
        self, base: Any, callback: Any, ambient: Ambient | None = None,
    ) -> Any: ...
