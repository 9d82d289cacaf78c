"""Mask lifecycle operations that affect cached composites."""

import logging
from dataclasses import dataclass
from uuid import UUID

from renovation_preview.services.composites import MaskRepository, PhotoRepository

_logger = logging.getLogger(__name__)


@dataclass
class MaskService:
    """Delete masks and invalidate the composite they contributed to."""

    mask_repository: MaskRepository
    photo_repository: PhotoRepository

    def delete_mask(self, mask_id: UUID) -> bool:
        """Delete a mask and clear its photo's composite; False if missing."""
        mask = self.mask_repository.get_mask(mask_id)
        if mask is None:
            return False
        self.mask_repository.delete_mask(mask_id)
        self.photo_repository.clear_composite(mask.photo_id)
        _logger.info(
            "Deleted mask %s and cleared composite for photo %s",
            mask_id,
            mask.photo_id,
        )
        return True
