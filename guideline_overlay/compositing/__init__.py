"""
Compositing Layer
=================

Bounded Context: Occlusion mask construction.

Responsibilities:
- Collect boundaries across the resolved forest
- Union them (polygon boolean OR)
- Subtract the union from the canvas

Non-responsibilities:
- Resolution (handled by geometry)
- Drawing (handled by rendering)
"""

from guideline_overlay.compositing.mask import (
    MaskRegion,
    collect_boundaries,
    composite,
    union_boundaries,
)

__all__ = [
    "MaskRegion",
    "collect_boundaries",
    "composite",
    "union_boundaries",
]
