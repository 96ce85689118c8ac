"""Empty Detection — decides whether a merge result added nothing to an empty base.

Invariants:
    - PURE: inspects, never consumes — stream results are never empty
    - Dispatch is on the transformer's declared Shape, not on the runtime value type
    - None is empty for every shape
"""

from typing import Any, Mapping

from membrane.core.domain_types import Shape


def is_effectively_empty(value: Any, shape: Shape) -> bool:
    """True when value is the un-augmented empty form of shape."""
    if value is None:
        return True
    if shape == Shape.STREAM:
        return False
    if shape == Shape.OBJECT:
        return isinstance(value, Mapping) and len(value) == 0
    if shape == Shape.COLLECTION:
        return isinstance(value, (list, tuple)) and len(value) == 0
    return False
