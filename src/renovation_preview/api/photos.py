"""Composite, enhancement and mask endpoints."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, HTTPException, Request, status

from renovation_preview.domain.photos import CompositeResult, EnhancementInputs
from renovation_preview.services.composites import PHOTO_NOT_FOUND

if TYPE_CHECKING:
    from renovation_preview.containers import AppContainer

router = APIRouter(tags=["composites"])


@router.get("/photos/{photo_id}/composite", response_model=CompositeResult)
async def get_composite(
    photo_id: UUID,
    request: Request,
    force: bool = False,
    pixels_per_meter: float | None = None,
) -> CompositeResult:
    """Return the cached composite for a photo, rendering it when stale."""
    container: AppContainer = request.app.state.container
    result = await container.composite_service.generate_composite(
        photo_id, force=force, pixels_per_meter=pixels_per_meter
    )
    if result.error == PHOTO_NOT_FOUND:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=result.error)
    return result


@router.post(
    "/photos/{photo_id}/enhancement-inputs", response_model=EnhancementInputs
)
async def prepare_enhancement_inputs(
    photo_id: UUID, request: Request, pixels_per_meter: float | None = None
) -> EnhancementInputs:
    """Render a fresh composite and mask stencil for enhancement."""
    container: AppContainer = request.app.state.container
    inputs = await container.enhancement_service.prepare_inputs(
        photo_id, pixels_per_meter
    )
    if inputs is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=PHOTO_NOT_FOUND
        )
    return inputs


@router.delete("/masks/{mask_id}")
async def delete_mask(mask_id: UUID, request: Request) -> dict[str, str]:
    """Delete a mask and invalidate its photo's composite."""
    container: AppContainer = request.app.state.container
    deleted = await asyncio.to_thread(container.mask_service.delete_mask, mask_id)
    if not deleted:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Mask not found"
        )
    return {"status": "deleted"}
