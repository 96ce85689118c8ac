"""Factories — one constructor per transformer kind and per pipeline variant.

Invariants:
    - Factories add no behavior: each returns the concrete class it names
    - Defaults match the concrete classes (object/stream: preserve, collection: append,
      scalar: passthrough)
"""

from membrane.core.domain_types import (
    CollectionMergeStrategy,
    ErrorHandler,
    ObjectMergeStrategy,
    PermeateCallback,
    PermeatorStrategy,
    ScalarMergeStrategy,
    StreamMergeStrategy,
)
from membrane.core.membrane_protocol import MembraneLike
from membrane.schemas.permeator_options import PermeatorOptions
from membrane.services.collection_membrane import CollectionMembrane
from membrane.services.compose_membranes import NullableMembrane, SequenceMembrane
from membrane.services.object_membranes import (
    ObjectMembrane,
    ObjectProjectionMembrane,
    ProjectionMembrane,
)
from membrane.services.permeators import ImmutablePermeator, MutablePermeator
from membrane.services.proxy_membrane import ProxyMembrane
from membrane.services.scalar_membrane import ScalarMembrane
from membrane.services.stream_membrane import StreamMembrane


class Membrane:
    """Static factory for membranes."""

    @staticmethod
    def object(
        callback: PermeateCallback,
        strategy: ObjectMergeStrategy | str = ObjectMergeStrategy.PRESERVE,
    ) -> ObjectMembrane:
        return ObjectMembrane(callback, strategy)

    @staticmethod
    def object_projection(
        callback: PermeateCallback,
        strategy: ObjectMergeStrategy | str = ObjectMergeStrategy.PRESERVE,
    ) -> ObjectProjectionMembrane:
        return ObjectProjectionMembrane(callback, strategy)

    @staticmethod
    def projection(callback: PermeateCallback) -> ProjectionMembrane:
        return ProjectionMembrane(callback)

    @staticmethod
    def collection(
        callback: PermeateCallback,
        strategy: CollectionMergeStrategy | str = CollectionMergeStrategy.APPEND,
    ) -> CollectionMembrane:
        return CollectionMembrane(callback, strategy)

    @staticmethod
    def scalar(
        callback: PermeateCallback,
        strategy: ScalarMergeStrategy | str = ScalarMergeStrategy.PASSTHROUGH,
    ) -> ScalarMembrane:
        return ScalarMembrane(callback, strategy)

    @staticmethod
    def proxy(callback: PermeateCallback) -> ProxyMembrane:
        return ProxyMembrane(callback)

    @staticmethod
    def stream(
        callback: PermeateCallback,
        strategy: StreamMergeStrategy | str = StreamMergeStrategy.PRESERVE,
    ) -> StreamMembrane:
        return StreamMembrane(callback, strategy)

    @staticmethod
    def sequence(first: MembraneLike, *rest: MembraneLike) -> SequenceMembrane:
        return SequenceMembrane([first, *rest])

    @staticmethod
    def nullable(membrane: MembraneLike) -> NullableMembrane:
        return NullableMembrane(membrane)


class Permeator:
    """Static factory for pipelines."""

    @staticmethod
    def mutable(
        input: MembraneLike,
        output: MembraneLike,
        *,
        strategy: PermeatorStrategy | str | None = None,
        on_error: ErrorHandler | None = None,
    ) -> MutablePermeator:
        options = PermeatorOptions(strategy=strategy, on_error=on_error)
        return MutablePermeator(input, output, options)

    @staticmethod
    def immutable(
        input: MembraneLike,
        output: MembraneLike,
        *,
        on_error: ErrorHandler | None = None,
    ) -> ImmutablePermeator:
        return ImmutablePermeator(input, output, PermeatorOptions(on_error=on_error))
