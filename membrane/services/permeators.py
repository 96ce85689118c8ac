"""Permeators — input merge → callback → output merge, as one reusable operation.

Invariants:
    - Stages run strictly in order: input, callback, output — never concurrently
    - Ambient is threaded to input and output merges per call, never stored
    - MutablePermeator returns the original base (same object) when the input membrane
      passes through or options.strategy is "passthrough"; otherwise the output result
    - ImmutablePermeator always returns the original base after running every stage
    - Errors are never swallowed: on_error may replace the error, otherwise the original
      object propagates; non-Exception BaseExceptions (CancelledError) bypass on_error

Design Decisions:
    - The failing stage is recorded in the log record only; the error object is never modified
    - A handler that returns instead of raising is logged and the original re-raised
"""

import logging
from typing import Any

from membrane.core.domain_types import Ambient, PipelineCallback
from membrane.core.membrane_protocol import MembraneLike
from membrane.schemas.permeator_options import PermeatorOptions

logger = logging.getLogger(__name__)


class MutablePermeator:
    """Three-stage pipeline returning the output merge result (or base on pass-through)."""

    def __init__(
        self,
        input: MembraneLike,
        output: MembraneLike,
        options: PermeatorOptions | None = None,
    ):
        self._input = input
        self._output = output
        self._options = options or PermeatorOptions()

    @property
    def input(self) -> MembraneLike:
        return self._input

    @property
    def output(self) -> MembraneLike:
        return self._output

    @property
    def options(self) -> PermeatorOptions:
        return self._options

    @property
    def passes_through(self) -> bool:
        return self._input.passes_through or self._options.passes_through

    async def permeate(
        self,
        base: Any,
        callback: PipelineCallback,
        ambient: Ambient | None = None,
    ) -> Any:
        stage = "input"
        try:
            permeate_value = await self._input.merge(base, ambient)
            self._trace(stage)
            stage = "callback"
            callback_result = await callback(permeate_value)
            self._trace(stage)
            stage = "output"
            final = await self._output.merge(callback_result, ambient)
            self._trace(stage)
        except Exception as exc:
            self._handle_error(exc, stage)
            raise

        if self.passes_through:
            return base
        return final

    def _trace(self, stage: str) -> None:
        if self._options.trace_stages:
            logger.debug(f"Permeator stage '{stage}' complete", extra={"stage": stage})

    def _handle_error(self, exc: Exception, stage: str) -> None:
        """Run on_error for a failed stage. Returns only if the handler did not raise."""
        logger.debug(
            f"Permeator {stage} stage failed: {type(exc).__name__}: {exc}",
            extra={"stage": stage, "error_code": getattr(exc, "code", None)},
        )
        if self._options.on_error is None:
            return
        self._options.on_error(exc)
        logger.warning(
            "Permeator on_error handler returned without raising; re-raising original error",
            extra={"stage": stage},
        )


class ImmutablePermeator:
    """Runs the full pipeline for its side effects and returns the caller's base.

    Use when the pipeline exists for validation or enrichment side effects and the
    caller needs its own input back by reference.
    """

    def __init__(
        self,
        input: MembraneLike,
        output: MembraneLike,
        options: PermeatorOptions | None = None,
    ):
        self._inner = MutablePermeator(input, output, options)

    @property
    def input(self) -> MembraneLike:
        return self._inner.input

    @property
    def output(self) -> MembraneLike:
        return self._inner.output

    @property
    def options(self) -> PermeatorOptions:
        return self._inner.options

    async def permeate(
        self,
        base: Any,
        callback: PipelineCallback,
        ambient: Ambient | None = None,
    ) -> Any:
        await self._inner.permeate(base, callback, ambient)
        return base
