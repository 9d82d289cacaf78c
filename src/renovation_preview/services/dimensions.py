"""Reconcile recorded, decoded and render-target image dimensions."""

import io
import logging
import math
from dataclasses import dataclass

from PIL import Image

DEFAULT_MAX_DIMENSION = 1500
_MISMATCH_TOLERANCE_PX = 1

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderDimensions:
    """Render target size and the scale from mask space into it."""

    render_width: int
    render_height: int
    scale_x: float
    scale_y: float
    actual_width: int
    actual_height: int
    mismatch: bool = False


def fit_within(width: int, height: int, max_dimension: int) -> tuple[int, int]:
    """Cap the longer edge at ``max_dimension`` while keeping aspect ratio."""
    if width <= max_dimension and height <= max_dimension:
        return width, height
    scale = min(max_dimension / width, max_dimension / height)
    return max(1, math.floor(width * scale)), max(1, math.floor(height * scale))


def resolve_dimensions(
    recorded_width: int,
    recorded_height: int,
    actual_width: int,
    actual_height: int,
    max_dimension: int = DEFAULT_MAX_DIMENSION,
) -> RenderDimensions:
    """Compute the render target from actual pixels and mask scale from recorded."""
    if recorded_width <= 0 or recorded_height <= 0:
        _logger.warning(
            "Recorded dimensions missing (%sx%s); using decoded %sx%s",
            recorded_width,
            recorded_height,
            actual_width,
            actual_height,
        )
        recorded_width, recorded_height = actual_width, actual_height

    mismatch = (
        abs(actual_width - recorded_width) > _MISMATCH_TOLERANCE_PX
        or abs(actual_height - recorded_height) > _MISMATCH_TOLERANCE_PX
    )
    if mismatch:
        _logger.warning(
            "Dimension mismatch: recorded=%sx%s actual=%sx%s; "
            "masks still scale from recorded dimensions",
            recorded_width,
            recorded_height,
            actual_width,
            actual_height,
        )

    render_width, render_height = fit_within(
        actual_width, actual_height, max_dimension
    )
    return RenderDimensions(
        render_width=render_width,
        render_height=render_height,
        scale_x=render_width / recorded_width,
        scale_y=render_height / recorded_height,
        actual_width=actual_width,
        actual_height=actual_height,
        mismatch=mismatch,
    )


def resolve_dimensions_from_bytes(
    recorded_width: int,
    recorded_height: int,
    data: bytes,
    max_dimension: int = DEFAULT_MAX_DIMENSION,
) -> RenderDimensions:
    """Read the intrinsic size from image bytes and resolve dimensions."""
    with Image.open(io.BytesIO(data)) as image:
        actual_width, actual_height = image.size
    return resolve_dimensions(
        recorded_width, recorded_height, actual_width, actual_height, max_dimension
    )
