"""
Test Geometry Layer
===================

Descriptor validation, aspect-ratio fitting, child placement and
boundary construction.

Usage:
    pytest test_geometry.py
"""

import math

import pytest
import supervision as sv

from guideline_overlay import (
    Box,
    EdgeInsets,
    InvalidConfigurationError,
    Positioning,
    ShapeDescriptor,
    ShapeKind,
    Size,
    SizingMode,
    fit_aspect_ratio,
    resolve,
    resolve_single_shape,
)
from guideline_overlay.geometry import build_boundary, resolve_child_box, structural_key


PARENT = Box.from_ltrb(50, 100, 350, 300)


# ========== Primitives ==========

def test_box_from_ltrb():
    assert PARENT.width == 300
    assert PARENT.height == 200
    assert PARENT.center == (200, 200)
    assert PARENT.to_ltrb() == (50, 100, 350, 300)


def test_box_deflate_by_padding():
    canvas = Box.from_size((400, 800))
    assert canvas.deflate(EdgeInsets.all(20)) == Box(20, 20, 360, 760)


def test_box_deflate_collapses_to_center():
    shrunk = Box(0, 0, 30, 30).deflate(EdgeInsets.all(20))
    assert shrunk.width == 0
    assert shrunk.height == 0
    assert shrunk.center == (15, 15)


def test_size_inference_from_magnitude():
    assert Size.infer(0.3, 0.2).mode is SizingMode.RELATIVE
    assert Size.infer(1.0, 1.0).mode is SizingMode.RELATIVE
    assert Size.infer(1.0, 2.0).mode is SizingMode.ABSOLUTE
    assert Size.infer(120, 80).mode is SizingMode.ABSOLUTE


def test_explicit_small_absolute_size_is_not_relative():
    size = Size.absolute(0.5, 0.5)
    assert size.resolve(PARENT) == (0.5, 0.5)


def test_tuple_size_is_converted_once():
    descriptor = ShapeDescriptor.centered(ShapeKind.RECTANGLE, size=(0.5, 0.25))
    assert descriptor.size == Size.relative(0.5, 0.25)


# ========== Descriptor validation ==========

@pytest.mark.parametrize("aspect_ratio", [0, -1.0, float("nan"), float("inf")])
def test_rejects_non_positive_aspect_ratio(aspect_ratio):
    with pytest.raises(InvalidConfigurationError):
        ShapeDescriptor(kind=ShapeKind.RECTANGLE, aspect_ratio=aspect_ratio)


@pytest.mark.parametrize("field_name", ["stroke_width", "corner_radius", "corner_length"])
def test_rejects_negative_style_values(field_name):
    with pytest.raises(InvalidConfigurationError):
        ShapeDescriptor(kind=ShapeKind.ROUNDED_RECTANGLE, **{field_name: -1.0})


@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
@pytest.mark.parametrize("field_name", ["stroke_width", "corner_radius", "corner_length", "frame_opacity"])
def test_rejects_non_finite_style_values(field_name, value):
    with pytest.raises(InvalidConfigurationError):
        ShapeDescriptor(kind=ShapeKind.ROUNDED_RECTANGLE, **{field_name: value})


@pytest.mark.parametrize("build", [
    lambda: Box(float("nan"), 0, 10, 10),
    lambda: Box(0, 0, float("inf"), 10),
    lambda: Box.from_size((640, float("nan"))),
    lambda: EdgeInsets.all(float("nan")),
    lambda: EdgeInsets(right=float("inf")),
    lambda: Size.relative(float("nan"), 0.5),
])
def test_primitives_reject_non_finite_values(build):
    with pytest.raises(InvalidConfigurationError, match="must be finite"):
        build()


def test_rejects_opacity_out_of_range():
    with pytest.raises(InvalidConfigurationError):
        ShapeDescriptor(kind=ShapeKind.RECTANGLE, frame_opacity=1.5)


def test_rejects_relative_offset_out_of_range():
    with pytest.raises(InvalidConfigurationError):
        Positioning.relative(1.5, 0.5)


def test_rejects_absolute_child_without_bounds():
    with pytest.raises(InvalidConfigurationError, match="no bounds"):
        ShapeDescriptor(
            kind=ShapeKind.RECTANGLE,
            children=[ShapeDescriptor(kind=ShapeKind.CIRCLE)],
        )


def test_invalid_configuration_is_a_value_error():
    assert issubclass(InvalidConfigurationError, ValueError)


def test_with_changes_revalidates():
    descriptor = ShapeDescriptor(kind=ShapeKind.RECTANGLE)
    assert descriptor.with_changes(show_grid=True).show_grid
    with pytest.raises(InvalidConfigurationError):
        descriptor.with_changes(stroke_width=-2)


def test_structural_key_tracks_colors():
    white = ShapeDescriptor(kind=ShapeKind.RECTANGLE)
    also_white = ShapeDescriptor(kind=ShapeKind.RECTANGLE)
    red = white.with_changes(frame_color=sv.Color(r=255, g=0, b=0))

    assert structural_key(white) == structural_key(also_white)
    assert hash(structural_key(white)) == hash(structural_key(also_white))
    assert structural_key(white) != structural_key(red)


# ========== Aspect ratio ==========

@pytest.mark.parametrize("box", [
    Box(0, 0, 400, 800),
    Box(10, 20, 800, 100),
    Box(-50, 30, 123.4, 567.8),
    Box(5, 5, 100, 100),
])
@pytest.mark.parametrize("ratio", [0.5, 0.78, 1.0, 1.586, 3.0])
def test_fit_aspect_ratio_properties(box, ratio):
    fitted = fit_aspect_ratio(box, ratio)

    assert fitted.width / fitted.height == pytest.approx(ratio)
    assert fitted.left >= box.left - 1e-9
    assert fitted.top >= box.top - 1e-9
    assert fitted.right <= box.right + 1e-9
    assert fitted.bottom <= box.bottom + 1e-9
    assert fitted.center_x == pytest.approx(box.center_x)
    assert fitted.center_y == pytest.approx(box.center_y)


def test_fit_aspect_ratio_wide_box_keeps_height():
    fitted = fit_aspect_ratio(Box(0, 10, 400, 100), 2.0)
    assert fitted == Box(100, 10, 200, 100)


def test_fit_aspect_ratio_equal_ratio_is_unchanged():
    box = Box(3, 4, 200, 100)
    assert fit_aspect_ratio(box, 2.0) == box


def test_fit_aspect_ratio_degenerate_box():
    fitted = fit_aspect_ratio(Box(10, 10, 100, 0), 1.5)
    assert fitted.height == 0
    assert fitted.area == 0


def test_id_card_scenario():
    print("\n" + "=" * 60)
    print("TEST: 400x800 canvas, ID card, padding 20")
    print("=" * 60)

    descriptor = ShapeDescriptor(kind=ShapeKind.ROUNDED_RECTANGLE, aspect_ratio=1.586)
    resolved = resolve_single_shape(descriptor, Box.from_size((400, 800)), EdgeInsets.all(20))

    assert resolved.box.left == pytest.approx(20)
    assert resolved.box.width == pytest.approx(360)
    assert resolved.box.height == pytest.approx(227.0, abs=0.1)
    assert resolved.box.top == pytest.approx(286.5, abs=0.1)
    print(f"✓ Resolved box: {resolved.box}")


# ========== Shape kinds ==========

@pytest.mark.parametrize("box", [Box(10, 20, 300, 100), Box(0, 0, 50, 400), Box(7, 7, 64, 64)])
def test_circle_is_square_regardless_of_aspect_ratio(box):
    resolved = resolve(ShapeDescriptor(kind=ShapeKind.CIRCLE, aspect_ratio=3.0), box)
    side = min(box.width, box.height)

    assert resolved.box.width == pytest.approx(side)
    assert resolved.box.height == pytest.approx(side)
    assert resolved.box.center_x == pytest.approx(box.center_x)
    assert resolved.box.center_y == pytest.approx(box.center_y)

    left, top, right, bottom = resolved.boundary.bounds
    assert right - left == pytest.approx(side, abs=1e-9)
    assert bottom - top == pytest.approx(side, abs=1e-9)


def test_ellipse_is_inscribed_in_box():
    boundary = build_boundary(ShapeKind.ELLIPSE, Box(0, 0, 200, 100))
    assert boundary.bounds == pytest.approx((0, 0, 200, 100), abs=1e-9)
    assert boundary.area == pytest.approx(math.pi * 100 * 50, rel=0.01)


def test_rectangle_boundary():
    boundary = build_boundary(ShapeKind.RECTANGLE, PARENT)
    assert boundary.area == pytest.approx(300 * 200)
    assert boundary.bounds == (50, 100, 350, 300)


def test_rounded_rectangle_radius_is_clamped():
    boundary = build_boundary(ShapeKind.ROUNDED_RECTANGLE, Box(0, 0, 40, 20), corner_radius=100)

    assert boundary.is_valid
    assert boundary.bounds == pytest.approx((0, 0, 40, 20), abs=1e-9)
    # Stadium: 20x20 square plus a full circle of radius 10
    assert boundary.area == pytest.approx(400 + math.pi * 100, rel=0.01)


def test_rounded_rectangle_with_zero_radius_is_rectangle():
    boundary = build_boundary(ShapeKind.ROUNDED_RECTANGLE, PARENT, corner_radius=0)
    assert boundary.area == pytest.approx(300 * 200)


def test_degenerate_box_yields_empty_boundary():
    resolved = resolve(ShapeDescriptor(kind=ShapeKind.RECTANGLE), Box(0, 0, -10, 50))

    assert resolved.box.width == 0
    assert resolved.boundary.is_empty
    assert resolved.is_degenerate


# ========== Child placement ==========

def test_inset_scenario():
    child = ShapeDescriptor.inset(
        ShapeKind.RECTANGLE,
        insets=EdgeInsets(left=20, top=20, right=20, bottom=20),
        size=(0.3, 0.2),
    )
    box = resolve_child_box(child, PARENT)

    assert box.width == pytest.approx(90)
    assert box.height == pytest.approx(40)
    assert (box.left, box.top) == (70, 120)


def test_inset_ignores_right_and_bottom():
    child = ShapeDescriptor.inset(
        ShapeKind.RECTANGLE,
        insets=EdgeInsets(left=10, top=5, right=500, bottom=500),
        size=Size.absolute(40, 30),
    )
    assert resolve_child_box(child, PARENT) == Box(60, 105, 40, 30)


@pytest.mark.parametrize("parent", [PARENT, Box(0, 0, 1, 1), Box(-20, 40, 640, 480)])
@pytest.mark.parametrize("size", [Size.relative(0.5, 0.5), Size.absolute(30, 90), Size.relative(1.2, 0.1)])
def test_centered_child_shares_parent_center(parent, size):
    child = ShapeDescriptor.centered(ShapeKind.ELLIPSE, size=size)
    box = resolve_child_box(child, parent)

    assert box.center_x == pytest.approx(parent.center_x)
    assert box.center_y == pytest.approx(parent.center_y)


def test_relative_half_offset_equals_center():
    size = Size.relative(0.4, 0.3)
    centered = resolve_child_box(ShapeDescriptor.centered(ShapeKind.RECTANGLE, size=size), PARENT)
    relative = resolve_child_box(
        ShapeDescriptor.relative_position(ShapeKind.RECTANGLE, offset=(0.5, 0.5), size=size),
        PARENT,
    )
    assert relative.to_ltrb() == pytest.approx(centered.to_ltrb())


def test_relative_offset_centers_child_on_point():
    child = ShapeDescriptor.relative_position(
        ShapeKind.CIRCLE, offset=(0.0, 1.0), size=Size.absolute(20, 20)
    )
    assert resolve_child_box(child, PARENT) == Box(40, 290, 20, 20)


def test_missing_size_defaults_to_thirty_percent():
    child = ShapeDescriptor(kind=ShapeKind.RECTANGLE, positioning=Positioning.center())
    box = resolve_child_box(child, PARENT)

    assert box.width == pytest.approx(90)
    assert box.height == pytest.approx(60)


def test_absolute_child_ignores_parent():
    own = Box(0, 0, 10, 10)
    child = ShapeDescriptor.absolute(ShapeKind.RECTANGLE, bounds=own)
    assert resolve_child_box(child, PARENT) == own


def test_children_use_parent_resolved_box():
    parent = ShapeDescriptor.absolute(
        ShapeKind.RECTANGLE,
        bounds=Box(0, 0, 400, 100),
        aspect_ratio=1.0,
        children=[ShapeDescriptor.centered(ShapeKind.RECTANGLE, size=(0.5, 0.5))],
    )
    resolved = resolve(parent, parent.bounds)

    assert resolved.box == Box(150, 0, 100, 100)
    assert resolved.children[0].box == Box(175, 25, 50, 50)


def test_nested_children_resolve_in_order():
    grandchild = ShapeDescriptor.centered(ShapeKind.CIRCLE, size=(0.5, 0.5))
    first = ShapeDescriptor.inset(ShapeKind.RECTANGLE, insets=EdgeInsets.all(10), size=(0.5, 0.5),
                                  children=[grandchild])
    second = ShapeDescriptor.centered(ShapeKind.ELLIPSE, size=(0.2, 0.2))
    root = ShapeDescriptor.absolute(ShapeKind.RECTANGLE, bounds=Box(0, 0, 200, 200),
                                    children=[first, second])

    resolved = resolve(root, root.bounds)
    kinds = [node.kind for node in resolved.walk()]

    assert kinds == [ShapeKind.RECTANGLE, ShapeKind.RECTANGLE, ShapeKind.CIRCLE, ShapeKind.ELLIPSE]
    assert resolved.children[0].box == Box(10, 10, 100, 100)
    assert resolved.children[0].children[0].box == Box(35, 35, 50, 50)
    assert resolved.children[1].box == Box(80, 80, 40, 40)
