"""
Overlay configuration loading.

Builds OverlayConfig / ShapeDescriptor trees from YAML files or plain
dicts. All validation stays in the dataclasses; this module only maps
keys and converts malformed input into InvalidConfigurationError.

Example YAML:
    mask_color: "#000000"
    mask_opacity: 0.54
    debug_mode: false
    shapes:
      - kind: rounded_rectangle
        bounds: [50, 100, 300, 200]     # [left, top, width, height]
        aspect_ratio: 1.586
        corner_radius: 12
        show_grid: true
        children:
          - kind: circle
            positioning: inset
            insets: [20, 20, 20, 20]    # [left, top, right, bottom]
            size: [0.3, 0.2]
            size_mode: relative         # omit to infer from magnitude

Single-shape form:
    padding: 20                         # or [left, top, right, bottom]
    shape:
      kind: ellipse
      aspect_ratio: 0.78
"""

from pathlib import Path
from typing import Any, Dict, Optional

import supervision as sv
import yaml

from guideline_overlay.errors import InvalidConfigurationError
from guideline_overlay.geometry.descriptors import (
    Positioning,
    PositioningMode,
    ShapeDescriptor,
    ShapeKind,
)
from guideline_overlay.geometry.primitives import Box, EdgeInsets, Size, SizingMode
from guideline_overlay.logging import LogEvent, StructuredLogger, create_logger
from guideline_overlay.overlay import OverlayConfig

NUMERIC_STYLE_KEYS = (
    "aspect_ratio",
    "stroke_width",
    "corner_radius",
    "corner_length",
    "frame_opacity",
)
FLAG_STYLE_KEYS = ("show_grid",)


def parse_number(value: Any, name: str) -> float:
    """Numbers only; YAML booleans and numeric strings are rejected."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidConfigurationError(f"{name} must be a number, got {value!r}")
    return float(value)


def parse_flag(value: Any, name: str) -> bool:
    if not isinstance(value, bool):
        raise InvalidConfigurationError(f"{name} must be true or false, got {value!r}")
    return value


def parse_color(value: Any) -> sv.Color:
    """Accept "#rrggbb" strings or [r, g, b] lists."""
    if isinstance(value, sv.Color):
        return value
    try:
        if isinstance(value, str):
            return sv.Color.from_hex(value)
        r, g, b = value
        return sv.Color(r=int(r), g=int(g), b=int(b))
    except (TypeError, ValueError):
        raise InvalidConfigurationError(f"Invalid color: {value!r}")


def parse_insets(value: Any) -> EdgeInsets:
    """A number applies to all sides; a list is [left, top, right, bottom]."""
    if isinstance(value, (int, float)):
        return EdgeInsets.all(float(value))
    try:
        if isinstance(value, dict):
            return EdgeInsets(**{k: float(v) for k, v in value.items()})
        left, top, right, bottom = value
        return EdgeInsets(left=float(left), top=float(top), right=float(right), bottom=float(bottom))
    except (TypeError, ValueError):
        raise InvalidConfigurationError(
            f"Insets must be a number or [left, top, right, bottom], got {value!r}"
        )


def parse_box(value: Any) -> Box:
    try:
        left, top, width, height = value
    except (TypeError, ValueError):
        raise InvalidConfigurationError(
            f"bounds must be [left, top, width, height], got {value!r}"
        )
    return Box(left=float(left), top=float(top), width=float(width), height=float(height))


def parse_size(value: Any, mode: Optional[str]) -> Size:
    try:
        width, height = value
    except (TypeError, ValueError):
        raise InvalidConfigurationError(f"size must be [width, height], got {value!r}")
    if mode is None:
        return Size.infer(float(width), float(height))
    return Size(width=float(width), height=float(height), mode=SizingMode(mode))


def parse_positioning(data: Dict[str, Any]) -> Positioning:
    mode = PositioningMode(data.get("positioning", PositioningMode.ABSOLUTE.value))
    if mode is PositioningMode.RELATIVE:
        if "offset" not in data:
            raise InvalidConfigurationError("relative positioning requires 'offset'")
        dx, dy = data["offset"]
        return Positioning.relative(float(dx), float(dy))
    if mode is PositioningMode.INSET:
        if "insets" not in data:
            raise InvalidConfigurationError("inset positioning requires 'insets'")
        return Positioning.inset(parse_insets(data["insets"]))
    return Positioning(mode)


def shape_from_dict(data: Dict[str, Any]) -> ShapeDescriptor:
    """
    Build a ShapeDescriptor (and its children) from a dict.

    Raises:
        InvalidConfigurationError: On missing keys, unknown enum values
            or any descriptor invariant violation
    """
    if not isinstance(data, dict):
        raise InvalidConfigurationError(f"Shape entry must be a mapping, got {data!r}")

    try:
        kwargs: Dict[str, Any] = {
            "kind": ShapeKind(data["kind"]),
            "positioning": parse_positioning(data),
        }
        if "bounds" in data:
            kwargs["bounds"] = parse_box(data["bounds"])
        if "size" in data:
            kwargs["size"] = parse_size(data["size"], data.get("size_mode"))
        if "frame_color" in data:
            kwargs["frame_color"] = parse_color(data["frame_color"])
        for key in NUMERIC_STYLE_KEYS:
            if key in data:
                kwargs[key] = parse_number(data[key], key)
        for key in FLAG_STYLE_KEYS:
            if key in data:
                kwargs[key] = parse_flag(data[key], key)
        kwargs["children"] = tuple(
            shape_from_dict(child) for child in data.get("children") or ()
        )
        return ShapeDescriptor(**kwargs)
    except InvalidConfigurationError:
        raise
    except KeyError as e:
        raise InvalidConfigurationError(f"Missing required shape field: {e}")
    except (TypeError, ValueError) as e:
        raise InvalidConfigurationError(f"Invalid shape data: {e}")


def overlay_config_from_dict(data: Dict[str, Any]) -> OverlayConfig:
    """Build an OverlayConfig from a dict (single- or multi-shape form)."""
    if not isinstance(data, dict):
        raise InvalidConfigurationError(
            f"Overlay config must be a mapping, got {type(data).__name__}"
        )

    options: Dict[str, Any] = {}
    if "mask_color" in data:
        options["mask_color"] = parse_color(data["mask_color"])
    if "mask_opacity" in data:
        options["mask_opacity"] = parse_number(data["mask_opacity"], "mask_opacity")
    if "debug_mode" in data:
        options["debug_mode"] = parse_flag(data["debug_mode"], "debug_mode")
    if "padding" in data:
        options["padding"] = parse_insets(data["padding"])

    if "shapes" in data:
        shapes = data["shapes"] or ()
        options["shapes"] = tuple(shape_from_dict(shape) for shape in shapes)
    if "shape" in data:
        options["shape"] = shape_from_dict(data["shape"])

    return OverlayConfig(**options)


def load_overlay_config(
    yaml_path,
    logger: Optional[StructuredLogger] = None,
) -> OverlayConfig:
    """
    Load an OverlayConfig from a YAML file.

    Args:
        yaml_path: Path to the YAML file
        logger: Structured logger (default: component "config")

    Raises:
        FileNotFoundError: If the file doesn't exist
        InvalidConfigurationError: If the YAML or its content is invalid
    """
    logger = logger or create_logger("config")
    path = Path(yaml_path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {yaml_path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f)
        config = overlay_config_from_dict(data)
    except yaml.YAMLError as e:
        logger.error(
            event=LogEvent.CONFIG_INVALID,
            message=f"Invalid YAML in {path}",
            metadata={'path': str(path)},
            exc_info=e,
        )
        raise InvalidConfigurationError(f"Invalid YAML in {yaml_path}: {e}")
    except InvalidConfigurationError as e:
        logger.error(
            event=LogEvent.CONFIG_INVALID,
            message=f"Rejected overlay config {path}",
            metadata={'path': str(path)},
            exc_info=e,
        )
        raise

    logger.info(
        event=LogEvent.CONFIG_LOADED,
        message="Loaded overlay config",
        metadata={
            'path': str(path),
            'multi_shape': config.is_multi_shape,
            'shape_count': sum(
                1 for shape in config.top_level_shapes for _ in shape.walk()
            ),
        },
    )
    return config
