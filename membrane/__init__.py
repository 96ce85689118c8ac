"""Membrane — composable data diffusion: merge a base with async callback output.

Invariants:
    - Package root has no import side effects (logging is configured only via setup_logging)
    - Everything re-exported here is public API; submodules are implementation layout

Usage:
    from membrane import Membrane, Permeator

    enrich = Membrane.object(load_profile)              # preserve: base keys win
    expose = Membrane.object_projection(public_fields)  # keep only returned keys
    pipeline = Permeator.mutable(enrich, expose)
    result = await pipeline.permeate(user, fetch_related, {"tenant": "acme"})
"""

from membrane.core.domain_types import (
    HOLE,
    PASSTHROUGH,
    CollectionMergeStrategy,
    ObjectMergeStrategy,
    PermeatorStrategy,
    ScalarMergeStrategy,
    Shape,
    StreamMergeStrategy,
)
from membrane.core.errors import (
    EmptySequenceError,
    InvalidStrategyError,
    MembraneError,
    PermeationError,
    ShapeMismatchError,
    raise_permeation_error,
)
from membrane.core.membrane_protocol import MembraneLike, PermeatorLike
from membrane.core.overlay_view import OverlayView
from membrane.infrastructure.observability import setup_logging
from membrane.schemas.permeator_options import PermeatorOptions
from membrane.services.collection_membrane import CollectionMembrane
from membrane.services.compose_membranes import NullableMembrane, SequenceMembrane
from membrane.services.factory import Membrane, Permeator
from membrane.services.object_membranes import (
    ObjectMembrane,
    ObjectProjectionMembrane,
    ProjectionMembrane,
)
from membrane.services.permeators import ImmutablePermeator, MutablePermeator
from membrane.services.proxy_membrane import ProxyMembrane
from membrane.services.scalar_membrane import ScalarMembrane
from membrane.services.stream_membrane import StreamMembrane

__version__ = "1.0.0"

__all__ = [
    # Factories
    "Membrane",
    "Permeator",
    # Membranes
    "CollectionMembrane",
    "NullableMembrane",
    "ObjectMembrane",
    "ObjectProjectionMembrane",
    "ProjectionMembrane",
    "ProxyMembrane",
    "ScalarMembrane",
    "SequenceMembrane",
    "StreamMembrane",
    # Permeators
    "ImmutablePermeator",
    "MutablePermeator",
    "PermeatorOptions",
    # Contracts and types
    "MembraneLike",
    "PermeatorLike",
    "OverlayView",
    "Shape",
    "HOLE",
    "PASSTHROUGH",
    "CollectionMergeStrategy",
    "ObjectMergeStrategy",
    "PermeatorStrategy",
    "ScalarMergeStrategy",
    "StreamMergeStrategy",
    # Errors
    "MembraneError",
    "InvalidStrategyError",
    "EmptySequenceError",
    "ShapeMismatchError",
    "PermeationError",
    "raise_permeation_error",
    # Observability
    "setup_logging",
]
