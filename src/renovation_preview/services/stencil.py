"""Black and white stencils of mask coverage for enhancement services."""

import asyncio
import logging
from dataclasses import dataclass
from uuid import uuid4

from PIL import Image, ImageDraw

from renovation_preview.domain.masks import Mask
from renovation_preview.domain.photos import PhotoReference
from renovation_preview.services.composites import BlobStorage
from renovation_preview.services.dimensions import RenderDimensions
from renovation_preview.services.images import encode_png
from renovation_preview.services.paths import (
    build_outline,
    parse_mask_path,
    scale_points,
)

_logger = logging.getLogger(__name__)


def render_stencil(masks: list[Mask], width: int, height: int) -> Image.Image | None:
    """Draw the union of mask fills in white on black.

    Masks are drawn in their own coordinate space. Returns ``None`` when no
    mask has a usable path.
    """
    identity = RenderDimensions(
        render_width=width,
        render_height=height,
        scale_x=1.0,
        scale_y=1.0,
        actual_width=width,
        actual_height=height,
    )
    stencil = Image.new("L", (width, height), 0)
    draw = ImageDraw.Draw(stencil)
    drawn = 0
    for mask in masks:
        points = parse_mask_path(mask.path_data)
        if points is None:
            continue
        draw.polygon(build_outline(scale_points(points, identity)), fill=255)
        drawn += 1
    if not drawn:
        return None
    return stencil


@dataclass
class StencilService:
    """Render and publish mask stencils."""

    blob_storage: BlobStorage

    async def generate_stencil(
        self, photo: PhotoReference, masks: list[Mask]
    ) -> str | None:
        """Upload a stencil for the photo and return its URL, if one was drawn."""
        if photo.recorded_width <= 0 or photo.recorded_height <= 0:
            _logger.warning("Photo %s has no recorded dimensions", photo.id)
            return None
        try:
            stencil = await asyncio.to_thread(
                render_stencil, masks, photo.recorded_width, photo.recorded_height
            )
            if stencil is None:
                return None
            data = encode_png(stencil)
            return await asyncio.to_thread(
                self.blob_storage.put,
                f"ai-enhancements/masks/{uuid4()}.png",
                data,
                "image/png",
            )
        except Exception:
            _logger.exception("Stencil generation failed for photo %s", photo.id)
            return None
