"""
Mask Compositor Module
======================

Unions every resolved boundary and subtracts it from the canvas.

Design:
- Stateless (module-level pure functions)
- shapely boolean algebra: overlapping boundaries merge, never add up
- Union is order independent; traversal order only matters for drawing

Dependencies:
- shapely (unary_union, difference)
"""

from dataclasses import dataclass
from typing import Iterable, List, Sequence

from shapely.geometry import Polygon, box as shapely_box
from shapely.geometry.base import BaseGeometry
from shapely.ops import unary_union

from guideline_overlay.geometry.primitives import Box
from guideline_overlay.geometry.resolver import ResolvedShape


@dataclass(frozen=True)
class MaskRegion:
    """
    Occlusion mask for one canvas.

    Attributes:
        region: Canvas minus the union of all boundaries (filled with mask color)
        union: Union of all boundaries (the uncovered camera preview)
        canvas: Canvas box the mask was computed for
    """

    region: BaseGeometry
    union: BaseGeometry
    canvas: Box

    @property
    def area(self) -> float:
        """Masked area in square canvas units."""
        return self.region.area

    @property
    def visible_area(self) -> float:
        """Area of the union that lies on the canvas."""
        return self.union.intersection(canvas_polygon(self.canvas)).area


def canvas_polygon(canvas: Box) -> Polygon:
    canvas = canvas.clamped()
    if canvas.is_degenerate:
        return Polygon()
    return shapely_box(*canvas.to_ltrb())


def collect_boundaries(shapes: Iterable[ResolvedShape]) -> List[Polygon]:
    """
    Every non-empty boundary in the forest, in traversal order.

    Top-level shapes in sequence order; each parent before its children.
    """
    return [
        node.boundary
        for shape in shapes
        for node in shape.walk()
        if not node.boundary.is_empty
    ]


def union_boundaries(shapes: Iterable[ResolvedShape]) -> BaseGeometry:
    """Boolean OR of all boundaries in the forest."""
    boundaries = collect_boundaries(shapes)
    if not boundaries:
        return Polygon()
    return unary_union(boundaries)


def composite(shapes: Sequence[ResolvedShape], canvas: Box) -> MaskRegion:
    """
    Build the occlusion mask for a resolved forest.

    Args:
        shapes: Resolved top-level shapes
        canvas: Full canvas box

    Returns:
        MaskRegion with ``region = canvas - union(boundaries)``
    """
    union = union_boundaries(shapes)
    background = canvas_polygon(canvas)
    region = background.difference(union) if not union.is_empty else background
    return MaskRegion(region=region, union=union, canvas=canvas)
