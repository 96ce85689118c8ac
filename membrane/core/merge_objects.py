"""Object Merge Rules — pure key-precedence merges for mapping-shaped values.

Invariants:
    - All functions are PURE: no IO, no async, inputs never mutated
    - preserve: base keys win on collision; permeate contributes only missing keys
    - overwrite/passthrough: permeate is returned as-is (same reference)
    - project_fields output carries exactly the permeate's keys, in permeate order

Design Decisions:
    - fresh_like keeps the concrete dict subclass (and its constructor state, e.g.
      defaultdict.default_factory) so merged results keep the base's type
    - Non-dict Mappings merge into a plain dict
"""

import copy
from typing import Any, Mapping

from membrane.core.domain_types import ObjectMergeStrategy, Shape
from membrane.core.errors import ShapeMismatchError


def ensure_mapping(value: Any, membrane: str, role: str = "permeate") -> Mapping:
    """Return value if it is a Mapping, else raise ShapeMismatchError."""
    if not isinstance(value, Mapping):
        raise ShapeMismatchError(membrane, Shape.OBJECT.value, value, role)
    return value


def fresh_like(base: Mapping) -> dict:
    """Empty mapping of base's concrete dict type (plain dict otherwise)."""
    if type(base) is dict or not isinstance(base, dict):
        return {}
    fresh = copy.copy(base)
    fresh.clear()
    return fresh


def merge_fields(
    base: Mapping, permeate: Any, strategy: ObjectMergeStrategy, membrane: str,
) -> Any:
    """Combine base and permeate per object strategy."""
    if strategy != ObjectMergeStrategy.PRESERVE:
        return permeate
    ensure_mapping(base, membrane, "base")
    ensure_mapping(permeate, membrane)
    merged = fresh_like(base)
    merged.update(permeate)
    merged.update(base)
    return merged


def project_fields(
    base: Mapping, permeate: Any, strategy: ObjectMergeStrategy, membrane: str,
) -> dict:
    """Resolve values per strategy, keep only the permeate's keys."""
    ensure_mapping(permeate, membrane)
    if strategy == ObjectMergeStrategy.PRESERVE:
        ensure_mapping(base, membrane, "base")
        return {
            key: base[key] if key in base else value
            for key, value in permeate.items()
        }
    return dict(permeate)


def overlay_fields(lower: Mapping, upper: Mapping) -> dict:
    """Fresh dict of lower's keys overlaid by upper's keys (upper wins)."""
    return {**lower, **upper}
