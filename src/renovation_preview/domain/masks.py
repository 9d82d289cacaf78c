"""Domain models for user-drawn masks."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class Point:
    """A 2D coordinate."""

    x: float
    y: float


@dataclass(frozen=True)
class CornerPoint:
    """Path vertex joined to its neighbours with straight segments."""

    x: float
    y: float


@dataclass(frozen=True)
class SmoothPoint:
    """Path vertex reached through a cubic Bezier segment."""

    x: float
    y: float
    handle1: Point
    handle2: Point


MaskPoint = CornerPoint | SmoothPoint


@dataclass(frozen=True)
class UnderwaterSettings:
    """Underwater tint configuration for a mask."""

    enabled: bool = False
    blend_pct: float = 0.0


@dataclass(frozen=True)
class MaskSettings:
    """Per-mask rendering settings."""

    texture_scale_pct: float = 100.0
    intensity_pct: float = 50.0
    underwater: UnderwaterSettings | None = None


@dataclass(frozen=True)
class Mask:
    """A closed region drawn over a photo, optionally tied to a material."""

    id: UUID
    photo_id: UUID
    path_data: object
    mutated_at: datetime
    material_id: UUID | None = None
    z_index: int = 0
    settings: MaskSettings = field(default_factory=MaskSettings)
