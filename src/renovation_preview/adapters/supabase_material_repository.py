"""Supabase-backed material repository."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from renovation_preview.domain.materials import Material, derive_physical_repeat
from renovation_preview.services.compositing import MaterialRepository


@dataclass
class SupabaseMaterialRepository(MaterialRepository):
    """Supabase implementation for material lookups."""

    client: Client

    def get_material(self, material_id: UUID) -> Material | None:
        """Return a material by id, if present."""
        response = (
            self.client.table("materials")
            .select("*")
            .eq("id", str(material_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_material(response.data[0])


def _parse_material(row: dict[str, object]) -> Material:
    repeat = _to_float(row.get("physical_repeat_m"))
    if not repeat or repeat <= 0:
        repeat = derive_physical_repeat(
            _to_float(row.get("sheet_width_mm")), _to_float(row.get("tile_width_mm"))
        )
    return Material(
        id=UUID(str(row["id"])),
        physical_repeat_meters=repeat,
        texture_image_url=row.get("texture_url") or None,
        default_tile_scale=_to_float(row.get("default_tile_scale")) or 1.0,
    )


def _to_float(value: object) -> float | None:
    """Convert numeric columns, which arrive as strings, to floats."""
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None
