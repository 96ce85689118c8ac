"""Domain Types — shapes, merge strategies, and the sparse-slot sentinel.

Invariants:
    - Every transformer declares exactly one Shape, fixed at construction
    - Each transformer kind owns a closed strategy Enum — no raw string matching
    - PASSTHROUGH is the single pass-through marker shared by every strategy Enum
    - HOLE is a singleton: identity comparison (`is HOLE`) is the only valid check

Design Decisions:
    - str Enums: plain strings coerce at construction and compare equal to their value
    - HOLE over None for unassigned list slots: None stays a present value
"""

from enum import Enum
from typing import Any, Awaitable, Callable, Mapping, NoReturn, TypeVar

from membrane.core.errors import InvalidStrategyError


# ─── Shapes ──────────────────────────────────────────────────────

class Shape(str, Enum):
    """Data shape a transformer owns — drives nullish and empty detection."""
    OBJECT = "object"
    COLLECTION = "collection"
    SCALAR = "scalar"
    STREAM = "stream"


# ─── Strategies ──────────────────────────────────────────────────

PASSTHROUGH = "passthrough"


class ObjectMergeStrategy(str, Enum):
    """`overwrite`: callback result replaces base; `preserve`: base keys win."""
    OVERWRITE = "overwrite"
    PRESERVE = "preserve"
    PASSTHROUGH = "passthrough"


class CollectionMergeStrategy(str, Enum):
    """`overwrite`/`preserve`: index-wise precedence; `append`: base then permeate."""
    OVERWRITE = "overwrite"
    PRESERVE = "preserve"
    APPEND = "append"
    PASSTHROUGH = "passthrough"


class StreamMergeStrategy(str, Enum):
    """Per-chunk precedence: `preserve` keeps chunk keys, `overwrite` lets permeate win."""
    OVERWRITE = "overwrite"
    PRESERVE = "preserve"


class ScalarMergeStrategy(str, Enum):
    """`append` is reserved; today it only opts out of pass-through."""
    PASSTHROUGH = "passthrough"
    APPEND = "append"


class PermeatorStrategy(str, Enum):
    """Pipeline-level strategy — `passthrough` returns the caller's base."""
    PASSTHROUGH = "passthrough"


# ─── Sparse Slots ────────────────────────────────────────────────

def _get_hole() -> "_HoleType":
    return HOLE


class _HoleType:
    """Sentinel type for an unassigned list slot."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "<HOLE>"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self) -> tuple[Callable[[], "_HoleType"], tuple[()]]:
        return (_get_hole, ())

    def __copy__(self) -> "_HoleType":
        return self

    def __deepcopy__(self, memo: dict) -> "_HoleType":
        return self


HOLE = _HoleType()


# ─── Callback Types ──────────────────────────────────────────────

Ambient = Mapping[str, Any]

PermeateCallback = Callable[[Any, Ambient | None], Awaitable[Any]]
PipelineCallback = Callable[[Any], Awaitable[Any]]
ErrorHandler = Callable[[Exception], NoReturn]

StrategyT = TypeVar("StrategyT", bound=Enum)


def resolve_strategy(
    enum_cls: type[StrategyT], value: object, membrane: str,
) -> StrategyT:
    """Coerce a str/Enum strategy into enum_cls. Raises InvalidStrategyError."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        raise InvalidStrategyError(
            value, membrane, [member.value for member in enum_cls],
        ) from None
