"""Material domain models."""

from dataclasses import dataclass
from uuid import UUID

DEFAULT_PHYSICAL_REPEAT_M = 0.30


@dataclass(frozen=True)
class Material:
    """Tileable surface material with its real-world repeat size."""

    id: UUID
    physical_repeat_meters: float
    texture_image_url: str | None = None
    default_tile_scale: float = 1.0


def derive_physical_repeat(
    sheet_width_mm: float | None, tile_width_mm: float | None
) -> float:
    """Return the repeat length in meters implied by sheet or tile width."""
    if sheet_width_mm and sheet_width_mm > 0:
        return sheet_width_mm / 1000
    if tile_width_mm and tile_width_mm > 0:
        return tile_width_mm / 1000
    return DEFAULT_PHYSICAL_REPEAT_M
