"""
Structured JSON Logger
======================

One JSON object per line, tagged with a component and a LogEvent.

Design:
- Wraps ``logging.getLogger("guideline_overlay.<component>")``
- Records below the logger's level are dropped before serialisation,
  so per-repaint DEBUG calls cost one level check when disabled
- Metadata values that json cannot encode are stringified

Example:
    >>> logger = create_logger("engine", level=logging.DEBUG)
    >>> logger.debug(
    ...     event=LogEvent.OVERLAY_RESOLVED,
    ...     message="Resolved overlay",
    ...     metadata={'canvas': [400, 800], 'shape_count': 3}
    ... )

Output:
    {"timestamp": "2025-10-24T15:30:45.123456+00:00", "level": "DEBUG",
     "component": "engine", "event": "overlay.resolved",
     "message": "Resolved overlay",
     "metadata": {"canvas": [400, 800], "shape_count": 3}}
"""

import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from .events import LogEvent


LOGGER_PREFIX = "guideline_overlay"


class StructuredLogger:
    """
    JSON logger bound to one component of the overlay pipeline.

    Attributes:
        component: Component name ("engine", "visualizer", "config")
        logger: Underlying ``logging.Logger``
    """

    def __init__(
        self,
        component: str,
        level: int = logging.INFO,
        logger_name: Optional[str] = None,
    ):
        """
        Args:
            component: Component identifier
            level: Logging level (default: INFO)
            logger_name: Logger name (default: guideline_overlay.<component>)
        """
        self.component = component
        self.logger = logging.getLogger(logger_name or f"{LOGGER_PREFIX}.{component}")
        self.logger.setLevel(level)

        # One handler per named logger, however many instances share it
        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(JSONFormatter())
            self.logger.addHandler(handler)

    def build_entry(
        self,
        level: int,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
        exc_info: Optional[BaseException] = None,
    ) -> Dict[str, Any]:
        """The dict serialised for one record."""
        entry: Dict[str, Any] = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': logging.getLevelName(level),
            'component': self.component,
            'event': event.value,
            'message': message,
        }
        if metadata:
            entry['metadata'] = metadata
        if exc_info is not None:
            entry['exception'] = {
                'type': type(exc_info).__name__,
                'message': str(exc_info),
            }
        return entry

    def log(
        self,
        level: int,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
        exc_info: Optional[BaseException] = None,
    ) -> None:
        if not self.logger.isEnabledFor(level):
            return

        entry = self.build_entry(level, event, message, metadata, exc_info)
        self.logger.log(
            level,
            json.dumps(entry, default=str),
            exc_info=exc_info if level >= logging.ERROR else None,
        )

    def debug(self, event: LogEvent, message: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        """Per-repaint events (resolution, cache, rendering)."""
        self.log(logging.DEBUG, event, message, metadata)

    def info(self, event: LogEvent, message: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        self.log(logging.INFO, event, message, metadata)

    def warning(self, event: LogEvent, message: str, metadata: Optional[Dict[str, Any]] = None) -> None:
        self.log(logging.WARNING, event, message, metadata)

    def error(
        self,
        event: LogEvent,
        message: str,
        metadata: Optional[Dict[str, Any]] = None,
        exc_info: Optional[BaseException] = None,
    ) -> None:
        """
        Log an ERROR record; ``exc_info`` adds the exception type and text
        to the JSON entry and the traceback to the record.

        Example:
            >>> try:
            ...     OverlayConfig.from_yaml("overlay.yaml")
            ... except InvalidConfigurationError as e:
            ...     logger.error(
            ...         event=LogEvent.CONFIG_INVALID,
            ...         message="Rejected overlay config",
            ...         exc_info=e,
            ...     )
        """
        self.log(logging.ERROR, event, message, metadata, exc_info)

    def set_level(self, level: int) -> None:
        self.logger.setLevel(level)


class JSONFormatter(logging.Formatter):
    """Emits the pre-serialised JSON message as is."""

    def format(self, record: logging.LogRecord) -> str:
        return record.getMessage()


def create_logger(component: str, level: int = logging.INFO) -> StructuredLogger:
    """
    Factory for component loggers.

    Example:
        >>> logger = create_logger("engine", level=logging.DEBUG)
    """
    return StructuredLogger(component=component, level=level)
