"""Collection Merge Rules — pure index-aware merges for list-shaped values.

Invariants:
    - All functions are PURE: inputs never mutated, a new list always returned
    - A slot is present iff its index is in range and it does not hold HOLE
    - An absent slot never overrides a present slot in the other source
    - Slots absent in both sources stay HOLE in the result
    - append keeps both sources' order and length exactly (HOLEs included)
"""

from typing import Any, Sequence

from membrane.core.domain_types import HOLE, CollectionMergeStrategy, Shape
from membrane.core.errors import ShapeMismatchError


def is_array_like(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def is_present(items: Sequence, index: int) -> bool:
    """True when items has an assigned value at index."""
    return index < len(items) and items[index] is not HOLE


def ensure_array(value: Any, membrane: str, role: str = "permeate") -> Sequence:
    if not is_array_like(value):
        raise ShapeMismatchError(membrane, Shape.COLLECTION.value, value, role)
    return value


def append_items(base: Sequence, permeate: Sequence) -> list:
    return [*base, *permeate]


def merge_by_index(
    base: Sequence, permeate: Sequence, strategy: CollectionMergeStrategy,
) -> list:
    """Slot-wise merge; overwrite favours permeate, preserve favours base."""
    if strategy == CollectionMergeStrategy.OVERWRITE:
        primary, secondary = permeate, base
    else:
        primary, secondary = base, permeate

    merged = []
    for index in range(max(len(base), len(permeate))):
        if is_present(primary, index):
            merged.append(primary[index])
        elif is_present(secondary, index):
            merged.append(secondary[index])
        else:
            merged.append(HOLE)
    return merged


def merge_items(
    base: Any, permeate: Any, strategy: CollectionMergeStrategy, membrane: str,
) -> Any:
    """Dispatch a collection merge. Non-array base falls back to permeate."""
    if strategy == CollectionMergeStrategy.PASSTHROUGH or not is_array_like(base):
        return permeate
    ensure_array(permeate, membrane)
    if strategy == CollectionMergeStrategy.APPEND:
        return append_items(base, permeate)
    return merge_by_index(base, permeate, strategy)
