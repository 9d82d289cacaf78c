"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from renovation_preview.adapters.http_image_client import HttpxImageClient
from renovation_preview.adapters.supabase_blob_storage import SupabaseBlobStorage
from renovation_preview.adapters.supabase_mask_repository import (
    SupabaseMaskRepository,
)
from renovation_preview.adapters.supabase_material_repository import (
    SupabaseMaterialRepository,
)
from renovation_preview.adapters.supabase_photo_repository import (
    SupabasePhotoRepository,
)
from renovation_preview.config import Settings
from renovation_preview.services.composites import CompositeService
from renovation_preview.services.compositing import CompositingPipeline
from renovation_preview.services.enhancement import EnhancementService
from renovation_preview.services.masks import MaskService
from renovation_preview.services.stencil import StencilService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    composite_service: CompositeService
    enhancement_service: EnhancementService
    mask_service: MaskService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    photo_repository = SupabasePhotoRepository(supabase_client)
    mask_repository = SupabaseMaskRepository(supabase_client)
    material_repository = SupabaseMaterialRepository(supabase_client)
    blob_storage = SupabaseBlobStorage(
        supabase_client, bucket=resolved_settings.storage_bucket
    )
    image_client = HttpxImageClient.create(
        base_url=resolved_settings.public_base_url,
        timeout=resolved_settings.http_timeout_seconds,
    )
    pipeline = CompositingPipeline(
        image_client=image_client,
        material_repository=material_repository,
        max_dimension=resolved_settings.max_composite_dimension,
        jpeg_quality=resolved_settings.composite_jpeg_quality,
    )
    composite_service = CompositeService(
        photo_repository=photo_repository,
        mask_repository=mask_repository,
        blob_storage=blob_storage,
        pipeline=pipeline,
    )
    enhancement_service = EnhancementService(
        photo_repository=photo_repository,
        mask_repository=mask_repository,
        composite_service=composite_service,
        stencil_service=StencilService(blob_storage),
        composite_timeout_seconds=resolved_settings.composite_timeout_seconds,
        stencil_timeout_seconds=resolved_settings.stencil_timeout_seconds,
    )
    mask_service = MaskService(
        mask_repository=mask_repository,
        photo_repository=photo_repository,
    )

    async def close_resources() -> None:
        await image_client.close()

    return AppContainer(
        settings=resolved_settings,
        composite_service=composite_service,
        enhancement_service=enhancement_service,
        mask_service=mask_service,
        close_resources=close_resources,
    )
