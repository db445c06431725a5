"""
Rendering Layer
===============

Bounded Context: Render plans and frame drawing.

Responsibilities:
- Derive frame strokes and decorations (grid, corners) from resolved shapes
- Draw a resolved overlay onto video frames
- Pure rendering - no layout decisions, no state

Non-responsibilities:
- Resolution (handled by geometry)
- Mask construction (handled by compositing)

Design:
- plan.py: vector output, no pixels
- visualizer.py: pixels, via supervision/OpenCV
"""

from guideline_overlay.rendering.plan import (
    DEBUG_COLOR,
    GRID_OPACITY_FACTOR,
    FrameStroke,
    LineSegment,
    build_plan,
    corner_indicators,
    frame_strokes,
    grid_lines,
)
from guideline_overlay.rendering.visualizer import OverlayVisualizer

__all__ = [
    "DEBUG_COLOR",
    "GRID_OPACITY_FACTOR",
    "FrameStroke",
    "LineSegment",
    "build_plan",
    "corner_indicators",
    "frame_strokes",
    "grid_lines",
    "OverlayVisualizer",
]
