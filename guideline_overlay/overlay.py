"""
Overlay Pipeline
================

Bounded Context: Whole-overlay resolution for one canvas size.

    OverlayConfig ──► resolve (per top-level shape, recursive)
                          │
                          ├──► composite  ──► MaskRegion
                          └──► frame_strokes / build_plan ──► strokes
                                          │
                                          ▼
                                    OverlayResult

Design:
- resolve_overlay is a pure function of (config, canvas size)
- No hidden state: the host calls it again whenever either input changes
- Single-shape form has its own fast path (no forest construction)
"""

from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

import supervision as sv
from shapely.geometry.base import BaseGeometry

from guideline_overlay.compositing.mask import MaskRegion, composite
from guideline_overlay.errors import InvalidConfigurationError
from guideline_overlay.geometry.descriptors import (
    ID_CARD_ASPECT_RATIO,
    PositioningMode,
    ShapeDescriptor,
    ShapeKind,
)
from guideline_overlay.geometry.primitives import Box, EdgeInsets
from guideline_overlay.geometry.resolver import ResolvedShape, resolve, resolve_child_box
from guideline_overlay.rendering.plan import (
    FrameStroke,
    LineSegment,
    build_plan,
    frame_strokes,
)


DEFAULT_PADDING = EdgeInsets.all(20.0)
DEFAULT_MASK_OPACITY = 0.54


def default_mask_color() -> sv.Color:
    return sv.Color(r=0, g=0, b=0)


@dataclass(frozen=True)
class OverlayConfig:
    """
    Top-level overlay configuration.

    Exactly one form is used:
    - single-shape: ``shape`` fills the canvas minus ``padding``
    - multi-shape: ``shapes`` is a non-empty ordered sequence of
      top-level descriptors; ``padding`` is ignored

    Attributes:
        shape: Single-shape form descriptor
        shapes: Multi-shape form descriptors
        mask_color: Fill color of the occlusion mask
        mask_opacity: Mask fill opacity in [0, 1]
        debug_mode: Emit the unioned boundary as a debug overlay
        padding: Canvas padding for the single-shape form
    """

    shape: Optional[ShapeDescriptor] = None
    shapes: Optional[Tuple[ShapeDescriptor, ...]] = None
    mask_color: sv.Color = field(default_factory=default_mask_color)
    mask_opacity: float = DEFAULT_MASK_OPACITY
    debug_mode: bool = False
    padding: EdgeInsets = DEFAULT_PADDING

    def __post_init__(self):
        """Validate that exactly one form is configured."""
        if self.shape is not None and self.shapes is not None:
            raise InvalidConfigurationError(
                "OverlayConfig takes either 'shape' or 'shapes', not both"
            )
        if self.shape is None and self.shapes is None:
            raise InvalidConfigurationError(
                "OverlayConfig requires 'shape' or 'shapes'"
            )

        if self.shapes is not None:
            shapes = tuple(self.shapes)
            if len(shapes) == 0:
                raise InvalidConfigurationError("At least one shape must be provided")
            for index, descriptor in enumerate(shapes):
                if not isinstance(descriptor, ShapeDescriptor):
                    raise InvalidConfigurationError(
                        f"shapes[{index}] must be a ShapeDescriptor, got {type(descriptor).__name__}"
                    )
                if (
                    descriptor.positioning.mode is PositioningMode.ABSOLUTE
                    and descriptor.bounds is None
                ):
                    raise InvalidConfigurationError(
                        f"shapes[{index}] uses absolute positioning but has no bounds"
                    )
            object.__setattr__(self, "shapes", shapes)
        elif not isinstance(self.shape, ShapeDescriptor):
            raise InvalidConfigurationError(
                f"shape must be a ShapeDescriptor, got {type(self.shape).__name__}"
            )

        if not 0.0 <= self.mask_opacity <= 1.0:
            raise InvalidConfigurationError(
                f"mask_opacity must be in [0.0, 1.0], got {self.mask_opacity}"
            )

    @classmethod
    def single(cls, shape: ShapeDescriptor, **options) -> "OverlayConfig":
        return cls(shape=shape, **options)

    @classmethod
    def multi(cls, shapes, **options) -> "OverlayConfig":
        return cls(shapes=tuple(shapes), **options)

    @classmethod
    def default(cls) -> "OverlayConfig":
        """ID-card guideline: one rounded rectangle at ratio 1.586."""
        return cls.single(ShapeDescriptor(
            kind=ShapeKind.ROUNDED_RECTANGLE,
            aspect_ratio=ID_CARD_ASPECT_RATIO,
        ))

    @property
    def is_multi_shape(self) -> bool:
        return self.shapes is not None

    @property
    def top_level_shapes(self) -> Tuple[ShapeDescriptor, ...]:
        if self.is_multi_shape:
            return self.shapes
        return (self.shape,)

    def with_changes(self, **changes) -> "OverlayConfig":
        """Copy with fields replaced. Switching form requires clearing the other one."""
        return replace(self, **changes)

    @classmethod
    def from_yaml(cls, yaml_path) -> "OverlayConfig":
        from guideline_overlay.config import load_overlay_config

        return load_overlay_config(yaml_path)

    @classmethod
    def from_dict(cls, data) -> "OverlayConfig":
        from guideline_overlay.config import overlay_config_from_dict

        return overlay_config_from_dict(data)


@dataclass(frozen=True)
class OverlayResult:
    """
    Everything a renderer needs for one repaint.

    Draw order: fill ``mask.region`` with the mask color, stroke
    ``frames``, stroke ``decorations``, then (debug only) ``debug_overlay``.

    Attributes:
        canvas: Canvas box
        shapes: Resolved top-level shapes
        mask: Occlusion mask (region + union)
        frames: Per-shape frame strokes, in traversal order
        decorations: Grid and corner segments, in traversal order
        debug_overlay: Unioned boundary when debug mode is on
        mask_color: Mask fill color
        mask_opacity: Mask fill opacity
    """

    canvas: Box
    shapes: Tuple[ResolvedShape, ...]
    mask: MaskRegion
    frames: Tuple[FrameStroke, ...]
    decorations: Tuple[LineSegment, ...]
    debug_overlay: Optional[BaseGeometry]
    mask_color: sv.Color
    mask_opacity: float

    @property
    def mask_region(self) -> BaseGeometry:
        return self.mask.region

    @property
    def mask_area(self) -> float:
        return self.mask.area

    @property
    def shape_area(self) -> float:
        """Visible (unmasked) area of the canvas."""
        return self.mask.visible_area


def resolve_single_shape(
    descriptor: ShapeDescriptor,
    canvas: Box,
    padding: EdgeInsets = DEFAULT_PADDING,
) -> ResolvedShape:
    """
    Resolve the single-shape form.

    The shape fills ``canvas`` shrunk by ``padding`` on all four sides;
    its bounds and positioning are not consulted.
    """
    return resolve(descriptor, canvas.deflate(padding))


def resolve_top_level(descriptor: ShapeDescriptor, canvas: Box) -> ResolvedShape:
    """
    Resolve a multi-shape top-level entry.

    Absolute entries use their own bounds; any other positioning is
    applied against the full canvas box.
    """
    if descriptor.positioning.mode is PositioningMode.ABSOLUTE:
        return resolve(descriptor, descriptor.bounds)
    return resolve(descriptor, resolve_child_box(descriptor, canvas))


def build_result(
    shapes: Tuple[ResolvedShape, ...],
    canvas: Box,
    config: OverlayConfig,
) -> OverlayResult:
    """Composite the mask and derive strokes for an already resolved forest."""
    mask = composite(shapes, canvas)

    decorations = []
    for shape in shapes:
        decorations.extend(build_plan(shape))

    return OverlayResult(
        canvas=canvas,
        shapes=shapes,
        mask=mask,
        frames=tuple(frame_strokes(shapes)),
        decorations=tuple(decorations),
        debug_overlay=mask.union if config.debug_mode else None,
        mask_color=config.mask_color,
        mask_opacity=config.mask_opacity,
    )


def resolve_overlay(config: OverlayConfig, canvas_size: Tuple[float, float]) -> OverlayResult:
    """
    Resolve an overlay for one canvas size.

    Args:
        config: Overlay configuration
        canvas_size: (width, height) of the preview canvas

    Returns:
        OverlayResult with mask, frame strokes, decorations and the
        optional debug overlay

    Example:
        >>> result = resolve_overlay(OverlayConfig.default(), (400, 800))
        >>> round(result.shapes[0].box.height, 1)
        227.0
    """
    canvas = Box.from_size(canvas_size).clamped()

    if config.is_multi_shape:
        shapes = tuple(resolve_top_level(descriptor, canvas) for descriptor in config.shapes)
    else:
        shapes = (resolve_single_shape(config.shape, canvas, config.padding),)

    return build_result(shapes, canvas, config)
