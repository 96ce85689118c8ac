"""Overlay View — read-only live Mapping over a front layer and a back layer.

Invariants:
    - Layers are stored by reference and never modified by the view
    - Reads check the front layer first, then fall back to the back layer
    - `key in view` is True when either layer holds the key
    - Iteration yields front keys, then back-only keys; no key twice

Design Decisions:
    - collections.abc.Mapping over ChainMap: ChainMap writes into its first map,
      and the front layer here is the callback's result
"""

from collections.abc import Iterator, Mapping
from typing import Any


class OverlayView(Mapping):
    """Merged view of front (wins) over back, without copying either."""

    __slots__ = ("_front", "_back")

    def __init__(self, front: Mapping, back: Mapping):
        self._front = front
        self._back = back

    @property
    def front(self) -> Mapping:
        return self._front

    @property
    def back(self) -> Mapping:
        return self._back

    def __getitem__(self, key: Any) -> Any:
        if key in self._front:
            return self._front[key]
        return self._back[key]

    def __contains__(self, key: object) -> bool:
        return key in self._front or key in self._back

    def __iter__(self) -> Iterator:
        yield from self._front
        for key in self._back:
            if key not in self._front:
                yield key

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __repr__(self) -> str:
        return f"OverlayView({dict(self)!r})"

    def to_dict(self) -> dict:
        """Materialize the view into a plain dict."""
        return dict(self)
