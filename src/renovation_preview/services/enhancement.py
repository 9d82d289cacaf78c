"""Prepare the composite and stencil handed to image enhancement."""

import asyncio
import logging
from dataclasses import dataclass
from uuid import UUID

from renovation_preview.domain.photos import EnhancementInputs
from renovation_preview.services.composites import (
    CompositeService,
    MaskRepository,
    PhotoRepository,
)
from renovation_preview.services.stencil import StencilService

DEFAULT_COMPOSITE_TIMEOUT_SECONDS = 15.0
DEFAULT_STENCIL_TIMEOUT_SECONDS = 5.0

_logger = logging.getLogger(__name__)


@dataclass
class EnhancementService:
    """Run a fresh composite and a stencil side by side, each time-boxed."""

    photo_repository: PhotoRepository
    mask_repository: MaskRepository
    composite_service: CompositeService
    stencil_service: StencilService
    composite_timeout_seconds: float = DEFAULT_COMPOSITE_TIMEOUT_SECONDS
    stencil_timeout_seconds: float = DEFAULT_STENCIL_TIMEOUT_SECONDS

    async def prepare_inputs(
        self, photo_id: UUID, pixels_per_meter: float | None = None
    ) -> EnhancementInputs | None:
        """Return enhancement inputs, or ``None`` when the photo is unknown.

        A composite that fails or times out falls back to the original image;
        a stencil that fails or times out is omitted.
        """
        try:
            photo = await asyncio.to_thread(self.photo_repository.get_photo, photo_id)
            if photo is None:
                return None
            masks = await asyncio.to_thread(self.mask_repository.list_masks, photo_id)
        except Exception:
            _logger.exception("Failed to load photo %s for enhancement", photo_id)
            return None

        composite, stencil_url = await asyncio.gather(
            asyncio.wait_for(
                self.composite_service.generate_composite(
                    photo_id, force=True, pixels_per_meter=pixels_per_meter
                ),
                timeout=self.composite_timeout_seconds,
            ),
            asyncio.wait_for(
                self.stencil_service.generate_stencil(photo, masks),
                timeout=self.stencil_timeout_seconds,
            ),
            return_exceptions=True,
        )

        composite_url = photo.source_image_url
        if isinstance(composite, BaseException):
            _logger.warning(
                "Composite for photo %s unavailable, using original: %r",
                photo_id,
                composite,
            )
        elif composite.status == "completed":
            composite_url = composite.after_url
        else:
            _logger.warning(
                "Composite for photo %s failed, using original: %s",
                photo_id,
                composite.error,
            )

        if isinstance(stencil_url, BaseException):
            _logger.warning(
                "Stencil for photo %s unavailable: %r", photo_id, stencil_url
            )
            stencil_url = None

        return EnhancementInputs(composite_url=composite_url, stencil_url=stencil_url)
