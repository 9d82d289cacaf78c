"""Tests for render dimension resolution."""

import pytest

from renovation_preview.services.dimensions import (
    fit_within,
    resolve_dimensions,
    resolve_dimensions_from_bytes,
)
from tests.conftest import make_image_bytes


def test_matching_dimensions_keep_scale_one() -> None:
    dimensions = resolve_dimensions(800, 600, 800, 600)

    assert (dimensions.render_width, dimensions.render_height) == (800, 600)
    assert dimensions.scale_x == 1.0
    assert dimensions.scale_y == 1.0
    assert dimensions.mismatch is False


def test_large_image_is_capped_on_longer_edge() -> None:
    dimensions = resolve_dimensions(4000, 3000, 4000, 3000)

    assert (dimensions.render_width, dimensions.render_height) == (1500, 1125)
    assert dimensions.scale_x == pytest.approx(0.375)
    assert dimensions.scale_y == pytest.approx(0.375)


def test_portrait_image_is_capped_on_height() -> None:
    assert fit_within(1000, 3000, 1500) == (500, 1500)


def test_mismatch_scales_from_recorded_dimensions() -> None:
    dimensions = resolve_dimensions(1500, 1000, 3000, 2000)

    assert dimensions.mismatch is True
    assert (dimensions.render_width, dimensions.render_height) == (1500, 1000)
    assert dimensions.scale_x == pytest.approx(1.0)
    assert (dimensions.actual_width, dimensions.actual_height) == (3000, 2000)


def test_one_pixel_difference_is_not_a_mismatch() -> None:
    assert resolve_dimensions(801, 600, 800, 600).mismatch is False


def test_missing_recorded_dimensions_fall_back_to_actual() -> None:
    dimensions = resolve_dimensions(0, 0, 640, 480)

    assert dimensions.scale_x == 1.0
    assert dimensions.scale_y == 1.0
    assert dimensions.mismatch is False


def test_resolve_from_bytes_reads_intrinsic_size() -> None:
    dimensions = resolve_dimensions_from_bytes(320, 240, make_image_bytes(640, 480))

    assert (dimensions.render_width, dimensions.render_height) == (640, 480)
    assert dimensions.scale_x == pytest.approx(2.0)
    assert dimensions.mismatch is True
