"""Error Hierarchy — typed, categorized exceptions for membrane failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Construction errors (VALIDATION) raise at build time, never during merge
    - SHAPE errors mean a callback or base broke the shape contract of its transformer
    - to_dict() produces a JSON-safe envelope with no traceback data

Design Decisions:
    - Single hierarchy with MembraneError base: one except clause catches all library errors
    - Callback errors are NOT wrapped by default — they propagate verbatim;
      raise_permeation_error is an opt-in on_error handler that wraps them
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, NoReturn


class ErrorSeverity(str, Enum):
    """Error severity for observability and caller handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    SHAPE = "shape"
    PIPELINE = "pipeline"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    membrane: str | None = None
    strategy: str | None = None
    stage: str | None = None
    debug_info: dict[str, Any] | None = None


class MembraneError(Exception):
    """Base exception for all membrane errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()

    def to_dict(self) -> dict:
        """Convert to a structured error envelope."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "membrane": self.context.membrane,
                    "strategy": self.context.strategy,
                    "stage": self.context.stage,
                },
            }
        }


# ─── Construction Errors ────────────────────────────────────────

class InvalidStrategyError(MembraneError):
    """Strategy value is not legal for the transformer kind."""
    def __init__(
        self, strategy: object, membrane: str, allowed: list[str],
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.membrane = membrane
        ctx.strategy = str(strategy)
        super().__init__(
            f"Invalid strategy {strategy!r} for {membrane}. "
            f"Allowed: {', '.join(allowed)}",
            "INVALID_STRATEGY", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ctx,
        )
        self.strategy = strategy
        self.allowed = allowed


class EmptySequenceError(MembraneError):
    """SequenceMembrane built with no transformers."""
    def __init__(self, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.membrane = "SequenceMembrane"
        super().__init__(
            "SequenceMembrane requires at least one membrane.",
            "EMPTY_SEQUENCE", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, ctx,
        )


# ─── Merge Errors ───────────────────────────────────────────────

class ShapeMismatchError(MembraneError):
    """Value does not match the shape its transformer owns."""
    def __init__(
        self, membrane: str, expected: str, actual: object,
        role: str = "permeate", context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.membrane = membrane
        ctx.debug_info = {"role": role, "actual_type": type(actual).__name__}
        super().__init__(
            f"{membrane} expected {role} of shape '{expected}', "
            f"got {type(actual).__name__}",
            "SHAPE_MISMATCH", ErrorCategory.SHAPE,
            ErrorSeverity.ERROR, ctx,
        )
        self.expected = expected
        self.role = role


class PermeationError(MembraneError):
    """A pipeline stage failed — wraps the original callback error."""
    def __init__(
        self, message: str, original: BaseException | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        if original is not None:
            ctx.debug_info = {"original_type": type(original).__name__}
        super().__init__(
            f"Permeation failed: {message}",
            "PERMEATION_FAILED", ErrorCategory.PIPELINE,
            ErrorSeverity.ERROR, ctx,
        )
        self.original = original


def raise_permeation_error(error: Exception) -> NoReturn:
    """Stock on_error handler: normalize foreign errors to PermeationError."""
    if isinstance(error, MembraneError):
        raise error
    raise PermeationError(str(error) or type(error).__name__, error) from error
