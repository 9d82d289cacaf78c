"""Supabase-backed mask repository."""

import json
from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from renovation_preview.domain.masks import Mask, MaskSettings, UnderwaterSettings
from renovation_preview.services.composites import MaskRepository


@dataclass
class SupabaseMaskRepository(MaskRepository):
    """Supabase implementation for masks drawn on photos."""

    client: Client

    def list_masks(self, photo_id: UUID) -> list[Mask]:
        """Return all masks for a photo in creation order."""
        response = (
            self.client.table("masks")
            .select("*")
            .eq("photo_id", str(photo_id))
            .order("created_at")
            .execute()
        )
        return [_parse_mask(row) for row in response.data or []]

    def get_mask(self, mask_id: UUID) -> Mask | None:
        """Return a mask by id, if present."""
        response = (
            self.client.table("masks")
            .select("*")
            .eq("id", str(mask_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_mask(response.data[0])

    def delete_mask(self, mask_id: UUID) -> None:
        """Delete a mask row."""
        self.client.table("masks").delete().eq("id", str(mask_id)).execute()


def _parse_mask(row: dict[str, object]) -> Mask:
    mutated_at = row.get("updated_at") or row["created_at"]
    return Mask(
        id=UUID(str(row["id"])),
        photo_id=UUID(str(row["photo_id"])),
        path_data=row.get("path_json"),
        mutated_at=datetime.fromisoformat(str(mutated_at)),
        material_id=UUID(str(row["material_id"])) if row.get("material_id") else None,
        z_index=int(row.get("z_index") or 0),
        settings=_parse_settings(row.get("calc_meta_json")),
    )


def _parse_settings(raw: object) -> MaskSettings:
    """Read rendering settings from the mask's calculation metadata."""
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            return MaskSettings()
    if not isinstance(raw, dict):
        return MaskSettings()
    underwater = None
    realism = raw.get("underwaterRealism")
    if isinstance(realism, dict):
        underwater = UnderwaterSettings(
            enabled=bool(realism.get("enabled")),
            blend_pct=_to_float(realism.get("blend"), 0.0),
        )
    return MaskSettings(
        texture_scale_pct=_to_float(raw.get("textureScale"), 100.0),
        intensity_pct=_to_float(raw.get("intensity"), 50.0),
        underwater=underwater,
    )


def _to_float(value: object, default: float) -> float:
    if value is None or isinstance(value, bool):
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default
