"""
Overlay Engine
==============

Per-repaint entry point with optional memoization.

resolve_overlay is a pure function, so its results can be reused for as
long as the canvas size and the configuration stay the same. The camera
preview repaints every frame while both usually stay constant.

Design:
- Cache key: (canvas width, canvas height, structural key of the config)
- LRU eviction; clearing the cache never changes results
- Cache mutations under a lock, results are immutable and shared
- DEBUG-level structured logs (silent at the default INFO level)
"""

import threading
from collections import OrderedDict
from typing import Optional, Tuple

from guideline_overlay.errors import InvalidConfigurationError
from guideline_overlay.geometry.descriptors import color_key, structural_key
from guideline_overlay.logging import LogEvent, StructuredLogger, create_logger
from guideline_overlay.overlay import OverlayConfig, OverlayResult, resolve_overlay


DEFAULT_CACHE_SIZE = 16


def config_key(config: OverlayConfig) -> tuple:
    """Hashable key for everything in a config that affects the result."""
    return (
        config.is_multi_shape,
        tuple(structural_key(shape) for shape in config.top_level_shapes),
        color_key(config.mask_color),
        config.mask_opacity,
        config.debug_mode,
        config.padding,
    )


def cache_key(config: OverlayConfig, canvas_size: Tuple[float, float]) -> tuple:
    width, height = canvas_size
    return (float(width), float(height), config_key(config))


class OverlayCache:
    """
    Bounded LRU cache of resolved overlays.

    Thread Safety:
        get/put/clear hold a lock; cached OverlayResults are immutable.
    """

    def __init__(self, max_entries: int = DEFAULT_CACHE_SIZE):
        if max_entries < 1:
            raise InvalidConfigurationError(
                f"max_entries must be >= 1, got {max_entries}"
            )
        self.max_entries = max_entries
        self._entries: "OrderedDict[tuple, OverlayResult]" = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def get(self, key: tuple) -> Optional[OverlayResult]:
        with self._lock:
            result = self._entries.get(key)
            if result is None:
                self.misses += 1
                return None
            self._entries.move_to_end(key)
            self.hits += 1
            return result

    def put(self, key: tuple, result: OverlayResult) -> None:
        with self._lock:
            self._entries[key] = result
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class OverlayEngine:
    """
    Resolves overlays for a repaint loop.

    The engine does not track "current" config or canvas size; the host
    passes both on every call.

    Usage:
        engine = OverlayEngine()
        for frame in frames:
            height, width = frame.shape[:2]
            result = engine.resolve(config, (width, height))
            frame = visualizer.draw(frame, result)
    """

    def __init__(
        self,
        cache_size: int = DEFAULT_CACHE_SIZE,
        logger: Optional[StructuredLogger] = None,
    ):
        """
        Args:
            cache_size: Maximum cached results; 0 disables memoization
            logger: Structured logger (default: component "engine")
        """
        self.cache = OverlayCache(cache_size) if cache_size > 0 else None
        self.logger = logger or create_logger("engine")

    def resolve(self, config: OverlayConfig, canvas_size: Tuple[float, float]) -> OverlayResult:
        """
        Resolve ``config`` for ``canvas_size``, reusing a cached result if any.

        Returns:
            The same OverlayResult resolve_overlay would produce
        """
        if self.cache is None:
            return self._resolve(config, canvas_size)

        key = cache_key(config, canvas_size)
        cached = self.cache.get(key)
        if cached is not None:
            self.logger.debug(
                event=LogEvent.OVERLAY_CACHE_HIT,
                message="Reused resolved overlay",
                metadata={'canvas': list(canvas_size)},
            )
            return cached

        self.logger.debug(
            event=LogEvent.OVERLAY_CACHE_MISS,
            message="Resolving overlay",
            metadata={'canvas': list(canvas_size), 'cache_size': len(self.cache)},
        )
        result = self._resolve(config, canvas_size)
        self.cache.put(key, result)
        return result

    def clear_cache(self) -> None:
        if self.cache is None:
            return
        self.cache.clear()
        self.logger.debug(
            event=LogEvent.OVERLAY_CACHE_CLEARED,
            message="Cleared overlay cache",
        )

    def _resolve(self, config: OverlayConfig, canvas_size: Tuple[float, float]) -> OverlayResult:
        result = resolve_overlay(config, canvas_size)

        degenerate = [
            node.kind.value
            for shape in result.shapes
            for node in shape.walk()
            if node.is_degenerate
        ]
        if degenerate:
            self.logger.debug(
                event=LogEvent.GEOMETRY_DEGENERATE,
                message=f"{len(degenerate)} shape(s) clamped to zero area",
                metadata={'canvas': list(canvas_size), 'kinds': degenerate},
            )

        self.logger.debug(
            event=LogEvent.OVERLAY_RESOLVED,
            message="Resolved overlay",
            metadata={
                'canvas': list(canvas_size),
                'shape_count': sum(1 for shape in result.shapes for _ in shape.walk()),
                'mask_area': result.mask_area,
            },
        )
        return result
