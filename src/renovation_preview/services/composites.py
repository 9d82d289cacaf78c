"""Composite generation with cache reuse and persistence."""

import asyncio
import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID, uuid4

from renovation_preview.domain.masks import Mask
from renovation_preview.domain.photos import (
    CompositeRecord,
    CompositeResult,
    PhotoReference,
)
from renovation_preview.services.compositing import CompositingPipeline
from renovation_preview.services.images import ImageLoadError
from renovation_preview.services.validity import is_composite_valid

_logger = logging.getLogger(__name__)

PHOTO_NOT_FOUND = "Photo not found"


class PhotoRepository(Protocol):
    """Persistence interface for photos and their cached composite."""

    def get_photo(self, photo_id: UUID) -> PhotoReference | None:
        """Return a photo by id, if present."""

    def update_composite(self, photo_id: UUID, record: CompositeRecord) -> None:
        """Replace the cached composite for a photo."""

    def clear_composite(self, photo_id: UUID) -> None:
        """Remove the cached composite for a photo."""


class MaskRepository(Protocol):
    """Persistence interface for masks."""

    def list_masks(self, photo_id: UUID) -> list[Mask]:
        """Return all masks drawn on a photo."""

    def get_mask(self, mask_id: UUID) -> Mask | None:
        """Return a mask by id, if present."""

    def delete_mask(self, mask_id: UUID) -> None:
        """Delete a mask."""


class BlobStorage(Protocol):
    """Interface for publishing binary objects."""

    def put(self, key: str, data: bytes, content_type: str) -> str:
        """Store bytes under ``key`` and return a public URL."""


@dataclass
class CompositeService:
    """Serve cached composites or render and store new ones."""

    photo_repository: PhotoRepository
    mask_repository: MaskRepository
    blob_storage: BlobStorage
    pipeline: CompositingPipeline

    async def generate_composite(
        self,
        photo_id: UUID,
        *,
        force: bool = False,
        masks: list[Mask] | None = None,
        pixels_per_meter: float | None = None,
    ) -> CompositeResult:
        """Return the composite for a photo; never raises.

        A non-empty ``masks`` list is rendered as-is, bypassing the cache and
        leaving the stored composite untouched.
        """
        try:
            return await self._generate(
                photo_id,
                force=force,
                masks=masks,
                pixels_per_meter=pixels_per_meter,
            )
        except Exception as exc:
            _logger.exception("Composite generation failed for photo %s", photo_id)
            return CompositeResult.failed(str(exc) or exc.__class__.__name__)

    async def _generate(
        self,
        photo_id: UUID,
        *,
        force: bool,
        masks: list[Mask] | None,
        pixels_per_meter: float | None,
    ) -> CompositeResult:
        started_at = datetime.now(tz=UTC)
        photo = await asyncio.to_thread(self.photo_repository.get_photo, photo_id)
        if photo is None:
            return CompositeResult.failed(PHOTO_NOT_FOUND)

        provided = bool(masks)
        if not provided:
            masks = await asyncio.to_thread(self.mask_repository.list_masks, photo_id)
        if not masks:
            _logger.info("Photo %s has no masks; returning original", photo_id)
            return CompositeResult.unedited(photo.source_image_url)

        if not provided and is_composite_valid(photo.composite, masks, force=force):
            _logger.info("Using cached composite for photo %s", photo_id)
            return CompositeResult.edited(photo.source_image_url, photo.composite.url)

        try:
            rendered = await self.pipeline.render(
                photo, masks, pixels_per_meter or photo.pixels_per_meter
            )
        except ImageLoadError as exc:
            _logger.warning(
                "Base image unavailable for photo %s, returning original: %s",
                photo_id,
                exc,
            )
            return CompositeResult.unedited(photo.source_image_url)

        url = await asyncio.to_thread(
            self.blob_storage.put,
            f"composites/composite-{uuid4()}.jpg",
            rendered.data,
            "image/jpeg",
        )
        if not provided:
            await asyncio.to_thread(
                self.photo_repository.update_composite,
                photo_id,
                CompositeRecord(url=url, generated_at=started_at),
            )
        return CompositeResult.edited(photo.source_image_url, url)
