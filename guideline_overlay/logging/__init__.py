"""
Structured Logging
==================

JSON log lines for the overlay pipeline, one logger per component
("engine", "visualizer", "config").

Per-repaint events are DEBUG and silent at the default INFO level.

Example:
    >>> from guideline_overlay.logging import create_logger, LogEvent
    >>> logger = create_logger("config")
    >>> logger.info(
    ...     event=LogEvent.CONFIG_LOADED,
    ...     message="Loaded overlay config",
    ...     metadata={'path': 'overlay.yaml', 'shape_count': 2}
    ... )
"""

from .events import LogEvent
from .structured import JSONFormatter, StructuredLogger, create_logger

__all__ = [
    'LogEvent',
    'JSONFormatter',
    'StructuredLogger',
    'create_logger',
]
