"""
Geometry Layer
==============

Bounded Context: Shape description and resolution.

Responsibilities:
- Shape descriptors (immutable input model)
- Aspect-ratio fitting, child placement and sizing
- Boundary construction per shape kind
- NO masks, NO drawing

Design Philosophy:
- Pure functions
- Immutable data structures
- Fail-fast validation at construction, clamping at resolution
"""

from guideline_overlay.geometry.primitives import Box, EdgeInsets, Size, SizingMode
from guideline_overlay.geometry.descriptors import (
    ID_CARD_ASPECT_RATIO,
    Positioning,
    PositioningMode,
    ShapeDescriptor,
    ShapeKind,
    structural_key,
)
from guideline_overlay.geometry.resolver import (
    ResolvedShape,
    build_boundary,
    fit_aspect_ratio,
    resolve,
    resolve_child_box,
)

__all__ = [
    "Box",
    "EdgeInsets",
    "Size",
    "SizingMode",
    "ID_CARD_ASPECT_RATIO",
    "Positioning",
    "PositioningMode",
    "ShapeDescriptor",
    "ShapeKind",
    "structural_key",
    "ResolvedShape",
    "build_boundary",
    "fit_aspect_ratio",
    "resolve",
    "resolve_child_box",
]
