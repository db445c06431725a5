"""
Overlay Visualizer Module
=========================

Draws a resolved OverlayResult onto a BGR frame.

Design:
- Stateless rendering (no geometry, no decisions)
- Canvas units are frame pixels: resolve with the frame's (width, height)
- Fixed draw order: mask fill, frame strokes, decorations, debug overlay
- Opacity via alpha blending of a drawn copy

Dependencies:
- supervision (draw utilities, Color, Point)
- opencv (mask rasterisation, blending)
- numpy (frames)
"""

from typing import TYPE_CHECKING, Iterator, Optional

import cv2
import numpy as np
import supervision as sv
from shapely.geometry import Polygon
from shapely.geometry.base import BaseGeometry

from guideline_overlay.logging import LogEvent, StructuredLogger, create_logger
from guideline_overlay.rendering.plan import (
    DEBUG_COLOR,
    DEBUG_STROKE_WIDTH,
    FrameStroke,
    LineSegment,
)

if TYPE_CHECKING:
    from guideline_overlay.overlay import OverlayResult


def iter_polygons(geometry: BaseGeometry) -> Iterator[Polygon]:
    """Non-empty polygons of a Polygon / MultiPolygon / GeometryCollection."""
    if geometry is None or geometry.is_empty:
        return
    if isinstance(geometry, Polygon):
        yield geometry
        return
    for part in getattr(geometry, "geoms", ()):
        yield from iter_polygons(part)


def to_pixels(coords) -> np.ndarray:
    """Round float coordinates to an int32 (N, 2) array for OpenCV."""
    return np.round(np.asarray(coords, dtype=np.float64)[:, :2]).astype(np.int32)


def rasterize(geometry: BaseGeometry, resolution_wh) -> np.ndarray:
    """
    Boolean mask of ``geometry`` at the given (width, height).

    Polygons are filled largest first so islands inside another
    polygon's hole are not erased by that hole.

    Returns:
        Boolean array of shape (height, width)
    """
    width, height = resolution_wh
    mask = np.zeros((height, width), dtype=np.uint8)
    polygons = sorted(iter_polygons(geometry), key=lambda p: p.area, reverse=True)
    for polygon in polygons:
        cv2.fillPoly(mask, [to_pixels(polygon.exterior.coords)], color=1)
        for interior in polygon.interiors:
            cv2.fillPoly(mask, [to_pixels(interior.coords)], color=0)
    return mask.astype(bool)


def stroke_thickness(width: float) -> int:
    return max(1, int(round(width)))


class OverlayVisualizer:
    """
    Stateless renderer for OverlayResult.

    Usage:
        engine = OverlayEngine()
        visualizer = OverlayVisualizer()

        height, width = frame.shape[:2]
        result = engine.resolve(config, (width, height))
        frame = visualizer.draw(frame, result)
    """

    def __init__(self, logger: Optional[StructuredLogger] = None):
        self.logger = logger or create_logger("visualizer")

    def draw(self, frame: np.ndarray, result: "OverlayResult") -> np.ndarray:
        """
        Draw mask, frames, decorations and (debug) overlay.

        Args:
            frame: BGR frame; not modified
            result: Overlay resolved for this frame's (width, height)

        Returns:
            New frame with the overlay drawn
        """
        frame = frame.copy()
        frame = self.draw_mask(frame, result)

        for stroke in result.frames:
            frame = self.draw_frame_stroke(frame, stroke)

        for segment in result.decorations:
            frame = self.draw_segment(frame, segment)

        if result.debug_overlay is not None:
            frame = self.draw_outline(frame, result.debug_overlay, DEBUG_COLOR, DEBUG_STROKE_WIDTH)

        self.logger.debug(
            event=LogEvent.OVERLAY_RENDERED,
            message="Rendered overlay",
            metadata={
                'frames': len(result.frames),
                'decorations': len(result.decorations),
                'debug': result.debug_overlay is not None,
            },
        )
        return frame

    def draw_mask(self, frame: np.ndarray, result: "OverlayResult") -> np.ndarray:
        """Fill the mask region with the mask color at the mask opacity."""
        if result.mask_opacity <= 0 or result.mask_region.is_empty:
            return frame

        height, width = frame.shape[:2]
        inside = rasterize(result.mask_region, (width, height))
        if not inside.any():
            return frame

        overlay = frame.copy()
        overlay[inside] = result.mask_color.as_bgr()
        return self._blend(frame, overlay, result.mask_opacity)

    def draw_frame_stroke(self, frame: np.ndarray, stroke: FrameStroke) -> np.ndarray:
        if stroke.width <= 0 or stroke.opacity <= 0:
            return frame
        overlay = self.draw_outline(frame.copy(), stroke.boundary, stroke.color, stroke.width)
        return self._blend(frame, overlay, stroke.opacity)

    def draw_segment(self, frame: np.ndarray, segment: LineSegment) -> np.ndarray:
        if segment.width <= 0 or segment.opacity <= 0:
            return frame
        overlay = sv.draw_line(
            scene=frame.copy(),
            start=sv.Point(x=int(round(segment.start[0])), y=int(round(segment.start[1]))),
            end=sv.Point(x=int(round(segment.end[0])), y=int(round(segment.end[1]))),
            color=segment.color,
            thickness=stroke_thickness(segment.width),
        )
        return self._blend(frame, overlay, segment.opacity)

    def draw_outline(
        self,
        frame: np.ndarray,
        geometry: BaseGeometry,
        color: sv.Color,
        width: float,
    ) -> np.ndarray:
        """Stroke every ring (exterior and holes) of ``geometry`` in place."""
        thickness = stroke_thickness(width)
        for polygon in iter_polygons(geometry):
            rings = [polygon.exterior, *polygon.interiors]
            for ring in rings:
                frame = sv.draw_polygon(
                    scene=frame,
                    polygon=to_pixels(ring.coords),
                    color=color,
                    thickness=thickness,
                )
        return frame

    @staticmethod
    def _blend(frame: np.ndarray, overlay: np.ndarray, opacity: float) -> np.ndarray:
        if opacity >= 1.0:
            return overlay
        return cv2.addWeighted(overlay, opacity, frame, 1.0 - opacity, 0)
