"""
Shape Descriptor Model
======================

Declarative, immutable description of one guideline shape and its children.

Design:
- Frozen dataclasses, validated in __post_init__ (fail fast)
- Strict forest: children are owned tuples, no back references
- Positioning is a tagged value (mode + its own parameters)
- Colors are supervision colors; opacity is carried separately

Usage:
    card = ShapeDescriptor.absolute(
        ShapeKind.ROUNDED_RECTANGLE,
        bounds=Box.from_ltrb(50, 100, 350, 300),
        aspect_ratio=ID_CARD_ASPECT_RATIO,
        children=[
            ShapeDescriptor.inset(
                ShapeKind.RECTANGLE,
                insets=EdgeInsets.all(20),
                size=(0.3, 0.4),
            ),
        ],
    )
"""

import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Optional, Tuple

import supervision as sv

from guideline_overlay.errors import InvalidConfigurationError
from guideline_overlay.geometry.primitives import Box, EdgeInsets, Size


# Aspect ratio of ISO/IEC 7810 ID-1 cards (credit cards, ID cards)
ID_CARD_ASPECT_RATIO = 1.586

DEFAULT_STROKE_WIDTH = 2.0
DEFAULT_CORNER_RADIUS = 12.0
DEFAULT_CORNER_LENGTH = 20.0


def default_frame_color() -> sv.Color:
    return sv.Color(r=255, g=255, b=255)


class ShapeKind(str, Enum):
    """Geometric kind of a guideline shape."""

    RECTANGLE = "rectangle"
    """Sharp corners. Documents, forms, letters."""

    ROUNDED_RECTANGLE = "rounded_rectangle"
    """Uniform corner radius. ID cards, credit cards."""

    CIRCLE = "circle"
    """Always square-bounded; ignores aspect ratio. Face capture."""

    ELLIPSE = "ellipse"
    """Inscribed in its box. Passport and visa portraits."""

    @property
    def has_corners(self) -> bool:
        return self in (ShapeKind.RECTANGLE, ShapeKind.ROUNDED_RECTANGLE)


class PositioningMode(str, Enum):
    """How a child box is placed inside its parent's resolved box."""

    ABSOLUTE = "absolute"
    CENTER = "center"
    RELATIVE = "relative"
    INSET = "inset"


@dataclass(frozen=True)
class Positioning:
    """
    Tagged positioning rule.

    Attributes:
        mode: Positioning mode
        offset: (x, y) fractions in [0, 1] of the parent box (RELATIVE only)
        insets: Margins from the parent's top-left corner (INSET only).
            Only ``left`` and ``top`` move the child; ``right`` and
            ``bottom`` are kept for configuration round-trips.
    """

    mode: PositioningMode = PositioningMode.ABSOLUTE
    offset: Optional[Tuple[float, float]] = None
    insets: Optional[EdgeInsets] = None

    def __post_init__(self):
        if self.mode is PositioningMode.RELATIVE:
            if self.offset is None:
                raise InvalidConfigurationError(
                    "Relative positioning requires an offset"
                )
            dx, dy = self.offset
            if not (0.0 <= dx <= 1.0 and 0.0 <= dy <= 1.0):
                raise InvalidConfigurationError(
                    f"Relative offset values must be in [0.0, 1.0], got {self.offset}"
                )
            object.__setattr__(self, "offset", (float(dx), float(dy)))
        elif self.offset is not None:
            raise InvalidConfigurationError(
                f"offset is only valid for relative positioning, got mode={self.mode.value}"
            )

        if self.mode is PositioningMode.INSET:
            if self.insets is None:
                raise InvalidConfigurationError(
                    "Inset positioning requires insets"
                )
        elif self.insets is not None:
            raise InvalidConfigurationError(
                f"insets are only valid for inset positioning, got mode={self.mode.value}"
            )

    @classmethod
    def absolute(cls) -> "Positioning":
        return cls(PositioningMode.ABSOLUTE)

    @classmethod
    def center(cls) -> "Positioning":
        return cls(PositioningMode.CENTER)

    @classmethod
    def relative(cls, dx: float, dy: float) -> "Positioning":
        return cls(PositioningMode.RELATIVE, offset=(dx, dy))

    @classmethod
    def inset(cls, insets: EdgeInsets) -> "Positioning":
        return cls(PositioningMode.INSET, insets=insets)


@dataclass(frozen=True)
class ShapeDescriptor:
    """
    Immutable description of one shape node.

    Attributes:
        kind: Shape kind
        bounds: Explicit box (absolute positioning, multi-shape top level)
        positioning: Placement rule relative to the parent box
        size: Child size; a bare (w, h) pair is converted with Size.infer.
            None means 30% of the parent in each dimension.
        aspect_ratio: Target width/height (> 0); ignored for circles
        stroke_width: Frame stroke width (>= 0)
        corner_radius: Corner radius for rounded rectangles (>= 0)
        corner_length: Leg length of L-shaped corner indicators (>= 0)
        frame_color: Stroke color for frame and corners
        frame_opacity: Stroke opacity in [0, 1]
        show_grid: Draw a 3x3 alignment grid
        children: Owned child descriptors, in drawing order

    Invariants:
        - aspect_ratio is None or a finite number > 0
        - stroke_width, corner_radius, corner_length >= 0
        - children with ABSOLUTE positioning carry bounds
    """

    kind: ShapeKind
    bounds: Optional[Box] = None
    positioning: Positioning = field(default_factory=Positioning)
    size: Optional[Size] = None
    aspect_ratio: Optional[float] = None
    stroke_width: float = DEFAULT_STROKE_WIDTH
    corner_radius: float = DEFAULT_CORNER_RADIUS
    corner_length: float = DEFAULT_CORNER_LENGTH
    frame_color: sv.Color = field(default_factory=default_frame_color)
    frame_opacity: float = 1.0
    show_grid: bool = False
    children: Tuple["ShapeDescriptor", ...] = ()

    def __post_init__(self):
        """Validate invariants and normalise containers."""
        if not isinstance(self.kind, ShapeKind):
            raise InvalidConfigurationError(
                f"kind must be a ShapeKind, got {self.kind!r}"
            )

        if self.aspect_ratio is not None:
            if not math.isfinite(self.aspect_ratio) or self.aspect_ratio <= 0:
                raise InvalidConfigurationError(
                    f"Aspect ratio must be positive, got {self.aspect_ratio}"
                )

        for name in ("stroke_width", "corner_radius", "corner_length"):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise InvalidConfigurationError(
                    f"{name} must be a finite number >= 0, got {value}"
                )
        if not 0.0 <= self.frame_opacity <= 1.0:
            raise InvalidConfigurationError(
                f"frame_opacity must be in [0.0, 1.0], got {self.frame_opacity}"
            )

        if self.size is not None:
            object.__setattr__(self, "size", Size.coerce(self.size))

        children = tuple(self.children or ())
        for child in children:
            if not isinstance(child, ShapeDescriptor):
                raise InvalidConfigurationError(
                    f"children must be ShapeDescriptor instances, got {type(child).__name__}"
                )
            if child.positioning.mode is PositioningMode.ABSOLUTE and child.bounds is None:
                raise InvalidConfigurationError(
                    f"Child {child.kind.value} uses absolute positioning but has no bounds"
                )
        object.__setattr__(self, "children", children)

    # ----- Factories -----

    @classmethod
    def absolute(cls, kind: ShapeKind, bounds: Box, **style) -> "ShapeDescriptor":
        """Shape at an explicit box."""
        return cls(kind=kind, bounds=bounds, positioning=Positioning.absolute(), **style)

    @classmethod
    def centered(cls, kind: ShapeKind, size, **style) -> "ShapeDescriptor":
        """Shape centered in its parent's resolved box."""
        return cls(kind=kind, positioning=Positioning.center(), size=size, **style)

    @classmethod
    def inset(
        cls,
        kind: ShapeKind,
        insets: EdgeInsets,
        size=None,
        **style,
    ) -> "ShapeDescriptor":
        """Shape offset from its parent's top-left corner by ``insets.left/top``."""
        return cls(kind=kind, positioning=Positioning.inset(insets), size=size, **style)

    @classmethod
    def relative_position(
        cls,
        kind: ShapeKind,
        offset: Tuple[float, float],
        size=None,
        **style,
    ) -> "ShapeDescriptor":
        """Shape centered on a fractional point of its parent's box."""
        dx, dy = offset
        return cls(kind=kind, positioning=Positioning.relative(dx, dy), size=size, **style)

    def with_changes(self, **changes) -> "ShapeDescriptor":
        """Copy with the given fields replaced (re-validated)."""
        return replace(self, **changes)

    def walk(self):
        """Yield this descriptor and every descendant, parents first."""
        yield self
        for child in self.children:
            yield from child.walk()


def structural_key(descriptor: ShapeDescriptor) -> tuple:
    """
    Hashable key capturing every field that affects resolution or styling.

    sv.Color is not hashable, so colors enter the key as RGB tuples.
    """
    positioning = descriptor.positioning
    return (
        descriptor.kind.value,
        descriptor.bounds,
        positioning.mode.value,
        positioning.offset,
        positioning.insets,
        descriptor.size,
        descriptor.aspect_ratio,
        descriptor.stroke_width,
        descriptor.corner_radius,
        descriptor.corner_length,
        color_key(descriptor.frame_color),
        descriptor.frame_opacity,
        descriptor.show_grid,
        tuple(structural_key(child) for child in descriptor.children),
    )


def color_key(color: sv.Color) -> Tuple[int, int, int]:
    return (color.r, color.g, color.b)
