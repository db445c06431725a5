"""
Geometric Primitives
====================

Pure value types - NO state, NO side effects.

Design:
- Immutable (frozen dataclass pattern)
- Canvas coordinates: origin top-left, y grows downwards
- Degenerate values are representable; clamping happens at resolve time
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from guideline_overlay.errors import InvalidConfigurationError


def require_finite(owner: str, **values: float) -> None:
    """Reject NaN and infinite components (comparisons against NaN are always False)."""
    for name, value in values.items():
        if not math.isfinite(value):
            raise InvalidConfigurationError(f"{owner} {name} must be finite, got {value}")


@dataclass(frozen=True)
class Box:
    """
    Immutable axis-aligned box.

    Attributes:
        left: Left edge x-coordinate
        top: Top edge y-coordinate
        width: Box width (may be negative before clamping)
        height: Box height (may be negative before clamping)

    Example:
        >>> box = Box.from_ltrb(50, 100, 350, 300)
        >>> box.width, box.height
        (300, 200)
    """

    left: float
    top: float
    width: float
    height: float

    def __post_init__(self):
        require_finite(
            "Box", left=self.left, top=self.top, width=self.width, height=self.height
        )

    @classmethod
    def from_ltrb(cls, left: float, top: float, right: float, bottom: float) -> "Box":
        return cls(left=left, top=top, width=right - left, height=bottom - top)

    @classmethod
    def from_size(cls, size_wh: Tuple[float, float]) -> "Box":
        """Canvas box anchored at the origin."""
        width, height = size_wh
        return cls(left=0.0, top=0.0, width=width, height=height)

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def center_x(self) -> float:
        return self.left + self.width / 2

    @property
    def center_y(self) -> float:
        return self.top + self.height / 2

    @property
    def center(self) -> Tuple[float, float]:
        return (self.center_x, self.center_y)

    @property
    def area(self) -> float:
        return max(self.width, 0.0) * max(self.height, 0.0)

    @property
    def is_degenerate(self) -> bool:
        """True when the box encloses no area."""
        return self.width <= 0 or self.height <= 0

    def clamped(self) -> "Box":
        """
        Clamp negative dimensions to zero.

        The box collapses onto its center so that a degenerate child
        still sits where its parent placed it.
        """
        if self.width >= 0 and self.height >= 0:
            return self
        width = max(self.width, 0.0)
        height = max(self.height, 0.0)
        return Box(
            left=self.center_x - width / 2,
            top=self.center_y - height / 2,
            width=width,
            height=height,
        )

    def deflate(self, insets: "EdgeInsets") -> "Box":
        """Shrink the box by insets on each side, clamped to zero area."""
        return Box.from_ltrb(
            self.left + insets.left,
            self.top + insets.top,
            self.right - insets.right,
            self.bottom - insets.bottom,
        ).clamped()

    def to_ltrb(self) -> Tuple[float, float, float, float]:
        return (self.left, self.top, self.right, self.bottom)


@dataclass(frozen=True)
class EdgeInsets:
    """Margins for the four sides of a box."""

    left: float = 0.0
    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0

    def __post_init__(self):
        require_finite(
            "EdgeInsets", left=self.left, top=self.top, right=self.right, bottom=self.bottom
        )

    @classmethod
    def all(cls, value: float) -> "EdgeInsets":
        return cls(left=value, top=value, right=value, bottom=value)

    @classmethod
    def symmetric(cls, horizontal: float = 0.0, vertical: float = 0.0) -> "EdgeInsets":
        return cls(left=horizontal, top=vertical, right=horizontal, bottom=vertical)


class SizingMode(str, Enum):
    """How a size is interpreted against the parent box."""

    ABSOLUTE = "absolute"
    """Canvas units."""

    RELATIVE = "relative"
    """Fractions of the parent's resolved width/height."""


@dataclass(frozen=True)
class Size:
    """
    Tagged size value: absolute canvas units or fractions of the parent.

    The mode is always explicit once a Size exists. The magnitude rule
    (both components <= 1.0 means relative) is only applied by ``infer``,
    which is what bare ``(w, h)`` tuples go through.

    Example:
        >>> Size.relative(0.3, 0.2).resolve(Box(0, 0, 300, 200))
        (90.0, 40.0)
        >>> Size.absolute(1, 1).mode
        <SizingMode.ABSOLUTE: 'absolute'>
    """

    width: float
    height: float
    mode: SizingMode = SizingMode.ABSOLUTE

    def __post_init__(self):
        require_finite("Size", width=self.width, height=self.height)

    @classmethod
    def absolute(cls, width: float, height: float) -> "Size":
        return cls(width=width, height=height, mode=SizingMode.ABSOLUTE)

    @classmethod
    def relative(cls, width: float, height: float) -> "Size":
        return cls(width=width, height=height, mode=SizingMode.RELATIVE)

    @classmethod
    def infer(cls, width: float, height: float) -> "Size":
        """Pick the mode from magnitude: both <= 1.0 is relative."""
        if width <= 1.0 and height <= 1.0:
            return cls.relative(width, height)
        return cls.absolute(width, height)

    @classmethod
    def coerce(cls, value) -> "Size":
        """Accept a Size or a bare ``(w, h)`` pair."""
        if isinstance(value, Size):
            return value
        try:
            width, height = value
        except (TypeError, ValueError):
            raise InvalidConfigurationError(
                f"size must be a Size or a (width, height) pair, got {value!r}"
            )
        return cls.infer(float(width), float(height))

    def resolve(self, parent: Box) -> Tuple[float, float]:
        """
        Concrete (width, height) against a parent box, clamped at zero.
        """
        if self.mode is SizingMode.RELATIVE:
            width = parent.width * self.width
            height = parent.height * self.height
        else:
            width, height = self.width, self.height
        return (max(width, 0.0), max(height, 0.0))
