"""
Test Overlay Pipeline
=====================

End-to-end resolution: single- and multi-shape forms, debug overlay,
determinism and configuration validation.

Usage:
    pytest test_overlay.py
"""

import pytest
import supervision as sv

from guideline_overlay import (
    Box,
    EdgeInsets,
    InvalidConfigurationError,
    OverlayConfig,
    ShapeDescriptor,
    ShapeKind,
    Size,
    resolve_overlay,
)


def id_card_config(**options) -> OverlayConfig:
    return OverlayConfig.single(
        ShapeDescriptor(kind=ShapeKind.ROUNDED_RECTANGLE, aspect_ratio=1.586),
        **options,
    )


# ========== Single-shape form ==========

def test_default_config_on_portrait_canvas():
    print("\n" + "=" * 60)
    print("TEST: Default overlay on 400x800")
    print("=" * 60)

    result = resolve_overlay(OverlayConfig.default(), (400, 800))
    box = result.shapes[0].box

    assert len(result.shapes) == 1
    assert box.width == pytest.approx(360)
    assert box.height == pytest.approx(227.0, abs=0.1)
    assert box.top == pytest.approx(286.5, abs=0.1)
    assert len(result.frames) == 1
    assert len(result.decorations) == 8
    assert result.debug_overlay is None
    print(f"✓ Box: {box}, mask area: {result.mask_area:.1f}")


def test_mask_partitions_canvas():
    result = resolve_overlay(id_card_config(), (400, 800))
    assert result.mask_area + result.shape_area == pytest.approx(400 * 800)
    assert result.shape_area == pytest.approx(result.shapes[0].boundary.area)


def test_padding_is_applied_on_all_sides():
    config = OverlayConfig.single(
        ShapeDescriptor(kind=ShapeKind.RECTANGLE),
        padding=EdgeInsets(left=10, top=20, right=30, bottom=40),
    )
    result = resolve_overlay(config, (200, 200))
    assert result.shapes[0].box == Box(10, 20, 160, 140)


def test_single_shape_ignores_bounds():
    config = OverlayConfig.single(
        ShapeDescriptor.absolute(ShapeKind.RECTANGLE, bounds=Box(0, 0, 5, 5))
    )
    result = resolve_overlay(config, (100, 100))
    assert result.shapes[0].box == Box(20, 20, 60, 60)


def test_single_and_multi_forms_agree():
    descriptor = ShapeDescriptor(kind=ShapeKind.ROUNDED_RECTANGLE, aspect_ratio=1.586)
    single = resolve_overlay(OverlayConfig.single(descriptor), (400, 800))
    multi = resolve_overlay(
        OverlayConfig.multi([descriptor.with_changes(bounds=Box(20, 20, 360, 760))]),
        (400, 800),
    )

    assert multi.shapes[0].box == single.shapes[0].box
    assert multi.mask_area == pytest.approx(single.mask_area)


def test_resolution_is_deterministic():
    config = OverlayConfig.multi([
        ShapeDescriptor.absolute(
            ShapeKind.ELLIPSE,
            bounds=Box(10, 10, 200, 300),
            aspect_ratio=0.78,
            show_grid=True,
            children=[ShapeDescriptor.centered(ShapeKind.CIRCLE, size=(0.3, 0.3))],
        ),
        ShapeDescriptor.absolute(ShapeKind.ROUNDED_RECTANGLE, bounds=Box(250, 50, 300, 200)),
    ])

    first = resolve_overlay(config, (640, 480))
    second = resolve_overlay(config, (640, 480))

    assert [s.box for s in first.shapes] == [s.box for s in second.shapes]
    assert first.mask_region.equals(second.mask_region)
    assert [(d.start, d.end) for d in first.decorations] == [(d.start, d.end) for d in second.decorations]


# ========== Multi-shape form ==========

def test_multi_shape_union():
    config = OverlayConfig.multi([
        ShapeDescriptor.absolute(ShapeKind.RECTANGLE, bounds=Box(0, 0, 100, 100)),
        ShapeDescriptor.absolute(ShapeKind.RECTANGLE, bounds=Box(50, 50, 100, 100)),
    ])
    result = resolve_overlay(config, (400, 300))

    assert result.shape_area == pytest.approx(100 * 100 * 2 - 50 * 50)
    assert result.mask_area == pytest.approx(400 * 300 - 17500)
    assert len(result.frames) == 2


def test_centered_top_level_shape_uses_canvas():
    config = OverlayConfig.multi([
        ShapeDescriptor.centered(ShapeKind.CIRCLE, size=Size.absolute(100, 100)),
    ])
    result = resolve_overlay(config, (400, 300))
    assert result.shapes[0].box == Box(150, 100, 100, 100)


def test_children_are_part_of_the_union():
    config = OverlayConfig.multi([
        ShapeDescriptor.absolute(
            ShapeKind.RECTANGLE,
            bounds=Box(0, 0, 100, 100),
            children=[ShapeDescriptor.absolute(ShapeKind.RECTANGLE, bounds=Box(200, 0, 50, 50))],
        ),
    ])
    result = resolve_overlay(config, (400, 300))

    assert result.shape_area == pytest.approx(12500)
    assert len(result.frames) == 2
    assert len(result.decorations) == 16


# ========== Debug overlay ==========

def test_debug_overlay_is_the_union():
    config = OverlayConfig.multi(
        [
            ShapeDescriptor.absolute(ShapeKind.CIRCLE, bounds=Box(0, 0, 100, 100)),
            ShapeDescriptor.absolute(ShapeKind.RECTANGLE, bounds=Box(50, 0, 100, 100)),
        ],
        debug_mode=True,
    )
    result = resolve_overlay(config, (400, 300))

    assert result.debug_overlay is not None
    assert result.debug_overlay.equals(result.mask.union)


def test_mask_style_is_carried_through():
    color = sv.Color(r=10, g=20, b=30)
    result = resolve_overlay(id_card_config(mask_color=color, mask_opacity=0.3), (640, 480))
    assert result.mask_color == color
    assert result.mask_opacity == 0.3


# ========== Degenerate canvases ==========

@pytest.mark.parametrize("canvas_size", [(0, 0), (30, 30), (-10, 100)])
def test_degenerate_canvas_does_not_raise(canvas_size):
    result = resolve_overlay(OverlayConfig.default(), canvas_size)

    assert result.shapes[0].is_degenerate
    assert result.frames == ()
    assert result.decorations == ()
    assert result.shape_area == 0


# ========== Validation ==========

def test_rejects_empty_shapes():
    with pytest.raises(InvalidConfigurationError, match="At least one shape"):
        OverlayConfig.multi([])


def test_rejects_both_forms():
    descriptor = ShapeDescriptor(kind=ShapeKind.RECTANGLE)
    with pytest.raises(InvalidConfigurationError):
        OverlayConfig(shape=descriptor, shapes=(descriptor,))


def test_rejects_neither_form():
    with pytest.raises(InvalidConfigurationError):
        OverlayConfig()


def test_rejects_absolute_top_level_without_bounds():
    with pytest.raises(InvalidConfigurationError, match="no bounds"):
        OverlayConfig.multi([ShapeDescriptor(kind=ShapeKind.RECTANGLE)])


def test_rejects_non_descriptor_entries():
    with pytest.raises(InvalidConfigurationError):
        OverlayConfig.multi([{"kind": "circle"}])


@pytest.mark.parametrize("opacity", [-0.1, 1.5])
def test_rejects_mask_opacity_out_of_range(opacity):
    with pytest.raises(InvalidConfigurationError):
        id_card_config(mask_opacity=opacity)
