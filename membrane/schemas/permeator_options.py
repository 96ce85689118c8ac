"""Permeator Options — pydantic model for pipeline configuration.

Invariants:
    - Frozen: a pipeline descriptor's options never change after construction
    - strategy accepts "passthrough" (str or Enum) or None; anything else fails validation
    - trace_stages defaults to Settings.trace_stages at construction time
"""

from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, Field

from membrane.config import get_settings
from membrane.core.domain_types import PermeatorStrategy


class PermeatorOptions(BaseModel):
    """Strategy and error policy for a MutablePermeator/ImmutablePermeator."""

    model_config = ConfigDict(frozen=True)

    strategy: PermeatorStrategy | None = None
    # Must raise; called with any Exception from input merge, callback, or output merge
    on_error: Callable[[Exception], Any] | None = None
    trace_stages: bool = Field(default_factory=lambda: get_settings().trace_stages)

    @property
    def passes_through(self) -> bool:
        return self.strategy == PermeatorStrategy.PASSTHROUGH
