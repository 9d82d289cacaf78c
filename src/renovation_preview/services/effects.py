"""Blend passes applied over a filled mask region.

All functions operate on float RGB arrays in the 0-255 range with a per-pixel
coverage array in 0-1, mirroring canvas ``globalCompositeOperation`` and
``globalAlpha`` semantics restricted to the mask area.
"""

import numpy as np

from renovation_preview.domain.masks import UnderwaterSettings

NEUTRAL_INTENSITY = 50.0
FALLBACK_COLOR = (0.0, 170.0, 0.0)
FALLBACK_ALPHA = 0.25

_BRIGHTNESS_EPSILON = 0.001
_CONTRAST_EPSILON = 0.01
_UNDERWATER_CHANNELS = (0.65, 0.90, 1.15)
_CONTRAST_FILL_ALPHA = 0.8

_WHITE = np.array([255.0, 255.0, 255.0], dtype=np.float32)
_BLACK = np.zeros(3, dtype=np.float32)


def source_over(
    destination: np.ndarray, source: np.ndarray, alpha: np.ndarray
) -> np.ndarray:
    """Normal alpha blend of ``source`` over ``destination``."""
    return destination + (source - destination) * alpha[..., None]


def multiply(
    destination: np.ndarray, color: np.ndarray, alpha: np.ndarray
) -> np.ndarray:
    """Multiply blend with a flat color."""
    blended = destination * color / 255.0
    return source_over(destination, blended, alpha)


def screen(destination: np.ndarray, color: np.ndarray, alpha: np.ndarray) -> np.ndarray:
    """Screen blend with a flat color."""
    blended = 255.0 - (255.0 - destination) * (255.0 - color) / 255.0
    return source_over(destination, blended, alpha)


def intensity_factors(intensity_pct: float) -> tuple[float, float]:
    """Return (brightness, contrast) offsets for an intensity setting."""
    brightness = (intensity_pct - NEUTRAL_INTENSITY) / 200
    contrast = (intensity_pct - NEUTRAL_INTENSITY) / 50
    return brightness, contrast


def apply_intensity(
    region: np.ndarray, coverage: np.ndarray, intensity_pct: float
) -> np.ndarray:
    """Brighten or darken, then shift contrast, inside the covered area."""
    if intensity_pct == NEUTRAL_INTENSITY:
        return region
    brightness, contrast = intensity_factors(intensity_pct)
    if abs(brightness) > _BRIGHTNESS_EPSILON:
        alpha = coverage * (abs(brightness) * 0.5)
        if brightness > 0:
            region = screen(region, _WHITE, alpha)
        else:
            region = multiply(region, _BLACK, alpha)
    if abs(contrast) > _CONTRAST_EPSILON:
        alpha = coverage * (abs(contrast) * 0.3 * _CONTRAST_FILL_ALPHA)
        region = multiply(region, _WHITE if contrast > 0 else _BLACK, alpha)
    return region


def underwater_tint() -> np.ndarray:
    """Return the multiply color used for the underwater effect."""
    channels = [
        min(255.0, float(np.floor(255 * factor))) for factor in _UNDERWATER_CHANNELS
    ]
    return np.array(channels, dtype=np.float32)


def apply_underwater(
    region: np.ndarray, coverage: np.ndarray, settings: UnderwaterSettings | None
) -> np.ndarray:
    """Apply the fixed water tint when enabled with a positive blend."""
    if settings is None or not settings.enabled or settings.blend_pct <= 0:
        return region
    alpha = coverage * min(settings.blend_pct / 100, 1.0)
    return multiply(region, underwater_tint(), alpha)


def fallback_fill(region: np.ndarray, coverage: np.ndarray) -> np.ndarray:
    """Fill the covered area with the translucent placeholder color."""
    color = np.array(FALLBACK_COLOR, dtype=np.float32)
    return source_over(region, color, coverage * FALLBACK_ALPHA)
