"""
Render Plan Module
==================

Derives drawable strokes from a resolved forest.

Design:
- Stateless, purely additive (never touches the mask)
- Output is vector data; pixels are the visualizer's job
- Traversal order: each node's own strokes before its children's

Plan contents per shape:
- Frame stroke: the boundary, frame color, stroke width
- Grid: 3x3 split of the boundary's bounding box, 60% opacity, width 1
- Corners: L-shaped indicators for rectangles, legs clamped to half a side
"""

from dataclasses import dataclass
from typing import Iterable, List, Tuple

import supervision as sv
from shapely.geometry.base import BaseGeometry

from guideline_overlay.geometry.primitives import Box
from guideline_overlay.geometry.resolver import ResolvedShape


GRID_OPACITY_FACTOR = 0.6
GRID_STROKE_WIDTH = 1.0

DEBUG_COLOR = sv.Color(r=255, g=0, b=0)
DEBUG_STROKE_WIDTH = 1.0

Point = Tuple[float, float]


@dataclass(frozen=True)
class LineSegment:
    """Straight decoration stroke."""

    start: Point
    end: Point
    color: sv.Color
    opacity: float
    width: float

    @property
    def length(self) -> float:
        return ((self.end[0] - self.start[0]) ** 2 + (self.end[1] - self.start[1]) ** 2) ** 0.5


@dataclass(frozen=True)
class FrameStroke:
    """Outline of one shape boundary."""

    boundary: BaseGeometry
    color: sv.Color
    opacity: float
    width: float


def grid_lines(bounds: Box, color: sv.Color, opacity: float) -> List[LineSegment]:
    """
    Two vertical and two horizontal lines splitting ``bounds`` into thirds.

    Lines alternate vertical/horizontal for i = 1, 2.
    """
    grid_opacity = opacity * GRID_OPACITY_FACTOR
    dx = bounds.width / 3
    dy = bounds.height / 3

    lines = []
    for i in range(1, 3):
        x = bounds.left + dx * i
        lines.append(LineSegment(
            start=(x, bounds.top),
            end=(x, bounds.bottom),
            color=color,
            opacity=grid_opacity,
            width=GRID_STROKE_WIDTH,
        ))
        y = bounds.top + dy * i
        lines.append(LineSegment(
            start=(bounds.left, y),
            end=(bounds.right, y),
            color=color,
            opacity=grid_opacity,
            width=GRID_STROKE_WIDTH,
        ))
    return lines


def corner_indicators(
    bounds: Box,
    length: float,
    color: sv.Color,
    opacity: float,
    width: float,
) -> List[LineSegment]:
    """
    Four L-shaped corner guides, a horizontal then a vertical leg per corner.

    Legs are clamped to half of the side they run along so that
    opposite legs never overlap on small boxes.
    """
    leg_x = min(length, bounds.width / 2)
    leg_y = min(length, bounds.height / 2)
    left, top, right, bottom = bounds.to_ltrb()

    legs = (
        # Top-left
        ((left, top), (left + leg_x, top)),
        ((left, top), (left, top + leg_y)),
        # Top-right
        ((right - leg_x, top), (right, top)),
        ((right, top), (right, top + leg_y)),
        # Bottom-left
        ((left, bottom), (left + leg_x, bottom)),
        ((left, bottom - leg_y), (left, bottom)),
        # Bottom-right
        ((right - leg_x, bottom), (right, bottom)),
        ((right, bottom - leg_y), (right, bottom)),
    )
    return [
        LineSegment(start=start, end=end, color=color, opacity=opacity, width=width)
        for start, end in legs
    ]


def shape_decorations(shape: ResolvedShape) -> List[LineSegment]:
    """Decorations of a single node, children excluded."""
    if shape.is_degenerate:
        return []

    bounds = shape.bounds
    decorations = []
    if shape.show_grid:
        decorations.extend(grid_lines(bounds, shape.frame_color, shape.frame_opacity))

    if shape.corner_length > 0 and shape.kind.has_corners:
        decorations.extend(corner_indicators(
            bounds,
            shape.corner_length,
            shape.frame_color,
            shape.frame_opacity,
            shape.stroke_width,
        ))
    return decorations


def build_plan(shape: ResolvedShape) -> List[LineSegment]:
    """
    Decorations for a shape and all of its descendants.

    Args:
        shape: Resolved shape (root of a subtree)

    Returns:
        Line segments in traversal order
    """
    decorations = []
    for node in shape.walk():
        decorations.extend(shape_decorations(node))
    return decorations


def frame_strokes(shapes: Iterable[ResolvedShape]) -> List[FrameStroke]:
    """Frame outlines for a forest, top-level order then parents before children."""
    return [
        FrameStroke(
            boundary=node.boundary,
            color=node.frame_color,
            opacity=node.frame_opacity,
            width=node.stroke_width,
        )
        for shape in shapes
        for node in shape.walk()
        if not node.is_degenerate
    ]
