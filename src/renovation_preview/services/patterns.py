"""Texture tiles sized for real-world scale."""

import math
from dataclasses import dataclass

import numpy as np
from PIL import Image

MIN_REPEAT_PX = 32
MAX_CALIBRATED_REPEAT_PX = 2048
MAX_HEURISTIC_REPEAT_PX = 1024
HEURISTIC_REPEAT_PX = 256
MIN_TILE_PX = 16


@dataclass(frozen=True)
class TexturePattern:
    """A repeating fill tile and the scale factors that produced it."""

    tile: Image.Image
    repeat_px: float
    user_scale: float
    base_scale_x: float
    base_scale_y: float

    @property
    def tile_size(self) -> tuple[int, int]:
        """Return the tile width and height in pixels."""
        return self.tile.size


def compute_repeat_px(
    physical_repeat_m: float | None,
    pixels_per_meter: float | None,
    default_tile_scale: float = 1.0,
) -> float:
    """Return the on-screen length of one material repeat in pixels.

    With calibration the repeat follows the photo's pixels-per-meter; without it
    a fixed 256px heuristic scaled by the material's default tile scale is used.
    """
    if pixels_per_meter and physical_repeat_m:
        return _clamp(
            pixels_per_meter * physical_repeat_m,
            MIN_REPEAT_PX,
            MAX_CALIBRATED_REPEAT_PX,
        )
    return float(
        _clamp(
            math.floor(HEURISTIC_REPEAT_PX * default_tile_scale),
            MIN_REPEAT_PX,
            MAX_HEURISTIC_REPEAT_PX,
        )
    )


def build_pattern(
    texture: Image.Image,
    repeat_px: float,
    texture_scale_pct: float = 100.0,
    max_tile_px: int | None = None,
) -> TexturePattern:
    """Resample a texture into a tile of ``repeat_px`` times the user scale.

    The base scale (repeat over texture size) followed by the user multiplier
    matches the interactive editor's pattern transform at 1:1 stage scale.
    A tile longer than ``max_tile_px`` never repeats on the canvas, so only its
    top-left ``max_tile_px`` span is resampled.
    """
    width, height = texture.size
    if width <= 0 or height <= 0:
        raise ValueError("Texture image has no pixels")
    user_scale = texture_scale_pct / 100
    base_scale_x = repeat_px / width
    base_scale_y = repeat_px / height
    tile_width = max(MIN_TILE_PX, math.floor(repeat_px * user_scale))
    tile_height = max(MIN_TILE_PX, math.floor(repeat_px * user_scale))
    visible_width = min(tile_width, max_tile_px or tile_width)
    visible_height = min(tile_height, max_tile_px or tile_height)
    source_box = (
        0,
        0,
        width * visible_width / tile_width,
        height * visible_height / tile_height,
    )
    tile = texture.convert("RGBA").resize(
        (visible_width, visible_height), Image.Resampling.LANCZOS, box=source_box
    )
    return TexturePattern(
        tile=tile,
        repeat_px=repeat_px,
        user_scale=user_scale,
        base_scale_x=base_scale_x,
        base_scale_y=base_scale_y,
    )


def tile_region(tile: Image.Image, box: tuple[int, int, int, int]) -> np.ndarray:
    """Repeat a tile over ``box`` (left, top, right, bottom) in canvas space.

    The repetition is anchored at the canvas origin, so adjacent regions filled
    with the same tile line up seamlessly.
    """
    left, top, right, bottom = box
    width = right - left
    height = bottom - top
    pixels = np.asarray(tile.convert("RGBA"))
    tile_height, tile_width = pixels.shape[:2]
    offset_x = left % tile_width
    offset_y = top % tile_height
    repeats_x = math.ceil((offset_x + width) / tile_width)
    repeats_y = math.ceil((offset_y + height) / tile_height)
    tiled = np.tile(pixels, (repeats_y, repeats_x, 1))
    return tiled[offset_y : offset_y + height, offset_x : offset_x + width]


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))
