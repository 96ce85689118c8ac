"""Proxy Membrane — wraps the callback result in a live view that falls back to base.

Invariants:
    - No copying: the result references both the callback result and the resolved base
    - Callback result shadows base on key conflict
    - No strategy; never passes through
"""

from typing import Any

from membrane.core.domain_types import Ambient, PermeateCallback, Shape
from membrane.core.merge_objects import ensure_mapping
from membrane.core.overlay_view import OverlayView


class ProxyMembrane:
    """Additive-with-fallback view. Use when base is large and overrides are sparse.

    Both layers must be Mappings; any other base raises ShapeMismatchError.
    """

    shape = Shape.OBJECT
    strategy = None
    passes_through = False

    def __init__(self, callback: PermeateCallback):
        self._callback = callback

    def nullish(self, value: Any) -> Any:
        if value is None:
            return {}
        return value

    async def merge(self, base: Any, ambient: Ambient | None = None) -> OverlayView:
        resolved = self.nullish(base)
        permeate = await self._callback(resolved, ambient)
        name = type(self).__name__
        return OverlayView(
            ensure_mapping(permeate, name),
            ensure_mapping(resolved, name, "base"),
        )
