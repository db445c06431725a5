"""
Guideline Overlay v1.0
======================

Bounded Context: Camera guideline overlays (document, ID card, face capture).

Given a canvas size and a declarative tree of shapes, computes the shapes'
concrete geometry, one occlusion mask for everything outside them, and the
strokes a renderer draws on top. Recomputed on every preview repaint; never
touches camera pixels except in the optional visualizer.

Architecture:

    guideline_overlay/
    ├── geometry/          # Pure geometry (immutable, stateless)
    │   ├── primitives.py  # Box, EdgeInsets, Size
    │   ├── descriptors.py # ShapeKind, Positioning, ShapeDescriptor
    │   └── resolver.py    # Aspect fitting, child placement, boundaries
    │
    ├── compositing/       # Mask construction (shapely boolean ops)
    │   └── mask.py        # MaskRegion, composite
    │
    ├── rendering/         # Strokes and drawing
    │   ├── plan.py        # Frame strokes, grid, corner indicators
    │   └── visualizer.py  # OverlayVisualizer (supervision / OpenCV)
    │
    ├── overlay.py         # OverlayConfig, resolve_overlay
    ├── engine.py          # OverlayEngine (memoized repaint entry point)
    ├── config.py          # YAML loading
    └── logging/           # Structured JSON logging

Usage:

    # 1. Describe the overlay (immutable)
    from guideline_overlay import (
        OverlayConfig, ShapeDescriptor, ShapeKind, ID_CARD_ASPECT_RATIO,
    )

    config = OverlayConfig.single(
        ShapeDescriptor(
            kind=ShapeKind.ROUNDED_RECTANGLE,
            aspect_ratio=ID_CARD_ASPECT_RATIO,
            show_grid=True,
        )
    )

    # 2. Resolve per repaint (pure)
    from guideline_overlay import resolve_overlay

    result = resolve_overlay(config, (1280, 720))
    result.mask_region      # canvas minus shapes (shapely geometry)
    result.frames           # frame strokes
    result.decorations      # grid / corner segments

    # 3. Or memoize and draw onto frames
    from guideline_overlay import OverlayEngine, OverlayVisualizer

    engine = OverlayEngine()
    visualizer = OverlayVisualizer()
    frame = visualizer.draw(frame, engine.resolve(config, (1280, 720)))
"""

from guideline_overlay.errors import InvalidConfigurationError

# Geometry Layer (immutable, stateless)
from guideline_overlay.geometry import (
    ID_CARD_ASPECT_RATIO,
    Box,
    EdgeInsets,
    Positioning,
    PositioningMode,
    ResolvedShape,
    ShapeDescriptor,
    ShapeKind,
    Size,
    SizingMode,
    fit_aspect_ratio,
    resolve,
)

# Compositing Layer
from guideline_overlay.compositing import MaskRegion, composite

# Rendering Layer
from guideline_overlay.rendering import (
    FrameStroke,
    LineSegment,
    OverlayVisualizer,
    build_plan,
)

# Pipeline
from guideline_overlay.overlay import (
    OverlayConfig,
    OverlayResult,
    resolve_overlay,
    resolve_single_shape,
)
from guideline_overlay.engine import OverlayCache, OverlayEngine
from guideline_overlay.config import load_overlay_config

__all__ = [
    # Errors
    "InvalidConfigurationError",
    # Geometry
    "ID_CARD_ASPECT_RATIO",
    "Box",
    "EdgeInsets",
    "Positioning",
    "PositioningMode",
    "ResolvedShape",
    "ShapeDescriptor",
    "ShapeKind",
    "Size",
    "SizingMode",
    "fit_aspect_ratio",
    "resolve",
    # Compositing
    "MaskRegion",
    "composite",
    # Rendering
    "FrameStroke",
    "LineSegment",
    "OverlayVisualizer",
    "build_plan",
    # Pipeline
    "OverlayConfig",
    "OverlayResult",
    "resolve_overlay",
    "resolve_single_shape",
    "OverlayEngine",
    "OverlayCache",
    "load_overlay_config",
]

__version__ = "1.0.0"
