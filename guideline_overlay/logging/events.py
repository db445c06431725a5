"""
Structured Log Event Types
==========================

Bounded Context: Observability Event Taxonomy

Typed event names for structured logging.

Design:
- Enum-based (prevents typos, enables autocomplete)
- Hierarchical naming (namespace.category.action)
- Searchable in log aggregators

Event Naming Convention:
    <component>.<category>.<action>

    component: overlay, geometry, config, error
"""

from enum import Enum


class LogEvent(str, Enum):
    """
    Typed log event names for structured logging.

    Categories:
    - overlay.*: Overlay resolution and caching
    - geometry.*: Resolution edge cases
    - config.*: Configuration loading
    - error.*: Error conditions
    """

    # ========== Overlay Events ==========
    OVERLAY_RESOLVED = "overlay.resolved"
    """Overlay resolved for a canvas size."""

    OVERLAY_CACHE_HIT = "overlay.cache.hit"
    """Resolved overlay served from the cache."""

    OVERLAY_CACHE_MISS = "overlay.cache.miss"
    """No cached overlay for (canvas, config); resolving."""

    OVERLAY_CACHE_CLEARED = "overlay.cache.cleared"
    """Overlay cache emptied."""

    OVERLAY_RENDERED = "overlay.rendered"
    """Overlay drawn onto a frame."""

    # ========== Geometry Events ==========
    GEOMETRY_DEGENERATE = "geometry.degenerate"
    """A shape collapsed to zero area and was clamped."""

    # ========== Config Events ==========
    CONFIG_LOADED = "config.loaded"
    """Overlay configuration loaded from file."""

    # ========== Error Events ==========
    CONFIG_INVALID = "error.config_invalid"
    """Configuration failed validation."""
