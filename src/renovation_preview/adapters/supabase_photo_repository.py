"""Supabase-backed photo repository."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from renovation_preview.domain.photos import CompositeRecord, PhotoReference
from renovation_preview.services.composites import PhotoRepository

_PHOTO_COLUMNS = (
    "id, original_url, width, height, calibration_pixels_per_meter, "
    "composite_url, composite_generated_at"
)


@dataclass
class SupabasePhotoRepository(PhotoRepository):
    """Supabase implementation for photos and their cached composite."""

    client: Client

    def get_photo(self, photo_id: UUID) -> PhotoReference | None:
        """Return a photo by id, if present."""
        response = (
            self.client.table("photos")
            .select(_PHOTO_COLUMNS)
            .eq("id", str(photo_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_photo(response.data[0])

    def update_composite(self, photo_id: UUID, record: CompositeRecord) -> None:
        """Store the composite URL and the time its render started."""
        self.client.table("photos").update(
            {
                "composite_url": record.url,
                "composite_generated_at": record.generated_at.isoformat(),
            }
        ).eq("id", str(photo_id)).execute()

    def clear_composite(self, photo_id: UUID) -> None:
        """Forget the cached composite so the next request re-renders."""
        self.client.table("photos").update(
            {"composite_url": None, "composite_generated_at": None}
        ).eq("id", str(photo_id)).execute()


def _parse_photo(row: dict[str, object]) -> PhotoReference:
    composite = None
    if row.get("composite_url") and row.get("composite_generated_at"):
        composite = CompositeRecord(
            url=str(row["composite_url"]),
            generated_at=datetime.fromisoformat(str(row["composite_generated_at"])),
        )
    calibration = row.get("calibration_pixels_per_meter")
    return PhotoReference(
        id=UUID(str(row["id"])),
        recorded_width=int(row.get("width") or 0),
        recorded_height=int(row.get("height") or 0),
        source_image_url=str(row["original_url"]),
        composite=composite,
        pixels_per_meter=float(calibration) if calibration else None,
    )
