"""
Geometry Resolver
=================

Pure functions: (descriptor, available box) -> resolved shape.

Design:
- No state, no I/O, no logging
- Parent passes its resolved box down by value
- Curves are sampled into shapely polygons so they compose with
  polygon boolean operations downstream
- No error path: degenerate boxes clamp to zero-area geometry

Dependencies:
- numpy (curve sampling)
- shapely (boundary polygons)
"""

from dataclasses import dataclass
from typing import Iterator, Optional, Tuple

import numpy as np
import supervision as sv
from shapely.geometry import Polygon, box as shapely_box

from guideline_overlay.geometry.descriptors import (
    PositioningMode,
    ShapeDescriptor,
    ShapeKind,
)
from guideline_overlay.geometry.primitives import Box, Size


# Vertices per full ellipse / per rounded corner
CURVE_SEGMENTS = 64
CORNER_SEGMENTS = 16

# Child size when none is given, as a fraction of the parent box
DEFAULT_CHILD_FRACTION = 0.3


@dataclass(frozen=True)
class ResolvedShape:
    """
    Concrete geometry for one descriptor node.

    Built fresh on every resolve pass and never mutated.

    Attributes:
        descriptor: Source descriptor (styling is read from it)
        box: Resolved frame box (aspect-adjusted; square for circles)
        boundary: Closed boundary polygon (empty when degenerate)
        children: Resolved children, in descriptor order
    """

    descriptor: ShapeDescriptor
    box: Box
    boundary: Polygon
    children: Tuple["ResolvedShape", ...] = ()

    @property
    def kind(self) -> ShapeKind:
        return self.descriptor.kind

    @property
    def stroke_width(self) -> float:
        return self.descriptor.stroke_width

    @property
    def frame_color(self) -> sv.Color:
        return self.descriptor.frame_color

    @property
    def frame_opacity(self) -> float:
        return self.descriptor.frame_opacity

    @property
    def corner_length(self) -> float:
        return self.descriptor.corner_length

    @property
    def show_grid(self) -> bool:
        return self.descriptor.show_grid

    @property
    def is_degenerate(self) -> bool:
        return self.boundary.is_empty or self.boundary.area == 0

    @property
    def bounds(self) -> Box:
        """Axis-aligned bounding box of the boundary."""
        if self.boundary.is_empty:
            return self.box
        return Box.from_ltrb(*self.boundary.bounds)

    def walk(self) -> Iterator["ResolvedShape"]:
        """Yield this shape and its descendants, each parent before its children."""
        yield self
        for child in self.children:
            yield from child.walk()


def fit_aspect_ratio(available: Box, aspect_ratio: float) -> Box:
    """
    Largest box of ``aspect_ratio`` (width / height) centered in ``available``.

    Wider than target: width shrinks, height and top stay.
    Taller than target: height shrinks, width and left stay.

    Args:
        available: Box to fit into
        aspect_ratio: Target width / height, > 0

    Returns:
        Fitted box; zero-area boxes are returned clamped and unchanged
    """
    available = available.clamped()
    if available.is_degenerate:
        return available

    current_ratio = available.width / available.height
    if current_ratio > aspect_ratio:
        width = available.height * aspect_ratio
        return Box(
            left=available.center_x - width / 2,
            top=available.top,
            width=width,
            height=available.height,
        )
    if current_ratio < aspect_ratio:
        height = available.width / aspect_ratio
        return Box(
            left=available.left,
            top=available.center_y - height / 2,
            width=available.width,
            height=height,
        )
    return available


def square_in(available: Box) -> Box:
    """Centered square with side min(width, height)."""
    available = available.clamped()
    side = min(available.width, available.height)
    return Box(
        left=available.center_x - side / 2,
        top=available.center_y - side / 2,
        width=side,
        height=side,
    )


def resolve_frame_box(descriptor: ShapeDescriptor, available: Box) -> Box:
    """Apply the kind and aspect-ratio rules to the available box."""
    if descriptor.kind is ShapeKind.CIRCLE:
        return square_in(available)
    if descriptor.aspect_ratio is not None:
        return fit_aspect_ratio(available, descriptor.aspect_ratio)
    return available.clamped()


def ellipse_vertices(frame: Box, segments: int = CURVE_SEGMENTS) -> np.ndarray:
    """Vertices of the ellipse inscribed in ``frame``, shape (segments, 2)."""
    angles = np.linspace(0.0, 2 * np.pi, segments, endpoint=False)
    return np.column_stack((
        frame.center_x + frame.width / 2 * np.cos(angles),
        frame.center_y + frame.height / 2 * np.sin(angles),
    ))


def rounded_rectangle_vertices(
    frame: Box,
    radius: float,
    segments: int = CORNER_SEGMENTS,
) -> np.ndarray:
    """
    Vertices of a rounded rectangle.

    The radius is clamped to half the smaller side so corners never
    overlap. Arcs run clockwise on screen starting at the bottom-right.
    """
    radius = min(radius, frame.width / 2, frame.height / 2)
    # (arc center x, arc center y, start angle in degrees)
    corners = (
        (frame.right - radius, frame.bottom - radius, 0.0),
        (frame.left + radius, frame.bottom - radius, 90.0),
        (frame.left + radius, frame.top + radius, 180.0),
        (frame.right - radius, frame.top + radius, 270.0),
    )
    arcs = []
    for cx, cy, start in corners:
        angles = np.radians(np.linspace(start, start + 90.0, segments + 1))
        arcs.append(np.column_stack((
            cx + radius * np.cos(angles),
            cy + radius * np.sin(angles),
        )))
    return np.vstack(arcs)


def build_boundary(kind: ShapeKind, frame: Box, corner_radius: float = 0.0) -> Polygon:
    """
    Closed boundary for a shape kind inside a resolved frame box.

    Args:
        kind: Shape kind
        frame: Resolved frame box (already square for circles)
        corner_radius: Rounded rectangle radius, clamped to the box

    Returns:
        Boundary polygon, empty for zero-area frames
    """
    if frame.is_degenerate:
        return Polygon()

    if kind is ShapeKind.RECTANGLE:
        return shapely_box(*frame.to_ltrb())

    if kind is ShapeKind.ROUNDED_RECTANGLE:
        if corner_radius <= 0:
            return shapely_box(*frame.to_ltrb())
        return Polygon(rounded_rectangle_vertices(frame, corner_radius))

    if kind is ShapeKind.CIRCLE:
        return Polygon(ellipse_vertices(square_in(frame)))

    # ShapeKind.ELLIPSE
    return Polygon(ellipse_vertices(frame))


def resolve_child_size(size: Optional[Size], parent: Box) -> Tuple[float, float]:
    if size is None:
        return (
            max(parent.width * DEFAULT_CHILD_FRACTION, 0.0),
            max(parent.height * DEFAULT_CHILD_FRACTION, 0.0),
        )
    return size.resolve(parent)


def resolve_child_box(child: ShapeDescriptor, parent: Box) -> Box:
    """
    Place a child inside its parent's resolved box.

    ABSOLUTE: the child's own bounds, parent ignored.
    CENTER: child centered on the parent center.
    RELATIVE: child centered on parent.left + width * dx, parent.top + height * dy.
    INSET: child top-left at parent top-left + (insets.left, insets.top);
        right/bottom insets do not affect placement.
    """
    positioning = child.positioning
    mode = positioning.mode

    if mode is PositioningMode.ABSOLUTE:
        return child.bounds

    width, height = resolve_child_size(child.size, parent)

    if mode is PositioningMode.CENTER:
        anchor_x, anchor_y = parent.center
    elif mode is PositioningMode.RELATIVE:
        dx, dy = positioning.offset
        anchor_x = parent.left + parent.width * dx
        anchor_y = parent.top + parent.height * dy
    else:  # INSET
        insets = positioning.insets
        return Box(
            left=parent.left + insets.left,
            top=parent.top + insets.top,
            width=width,
            height=height,
        )

    return Box(
        left=anchor_x - width / 2,
        top=anchor_y - height / 2,
        width=width,
        height=height,
    )


def resolve(descriptor: ShapeDescriptor, available: Box) -> ResolvedShape:
    """
    Resolve a descriptor and all its descendants.

    Args:
        descriptor: Shape node to resolve
        available: Region the shape may occupy (canvas minus padding, the
            shape's own bounds, or the parent's resolved box)

    Returns:
        ResolvedShape whose children were placed against this shape's
        resolved box, in order
    """
    frame = resolve_frame_box(descriptor, available)
    boundary = build_boundary(descriptor.kind, frame, descriptor.corner_radius)
    children = tuple(
        resolve(child, resolve_child_box(child, frame))
        for child in descriptor.children
    )
    return ResolvedShape(
        descriptor=descriptor,
        box=frame,
        boundary=boundary,
        children=children,
    )
