"""Shared test fixtures."""

import io
from dataclasses import dataclass, field
from datetime import UTC, datetime
from uuid import UUID, uuid4

import pytest
from PIL import Image

from renovation_preview.config import Settings
from renovation_preview.containers import AppContainer
from renovation_preview.domain.masks import Mask, MaskSettings
from renovation_preview.domain.materials import Material
from renovation_preview.domain.photos import CompositeRecord, PhotoReference
from renovation_preview.services.composites import (
    BlobStorage,
    CompositeService,
    MaskRepository,
    PhotoRepository,
)
from renovation_preview.services.compositing import (
    CompositingPipeline,
    MaterialRepository,
)
from renovation_preview.services.enhancement import EnhancementService
from renovation_preview.services.images import ImageClient
from renovation_preview.services.masks import MaskService
from renovation_preview.services.stencil import StencilService

PHOTO_URL = "https://images.test/photos/pool.jpg"
TEXTURE_URL = "https://images.test/textures/tile.png"


def make_image_bytes(
    width: int,
    height: int,
    color: tuple[int, ...] = (200, 200, 200),
    image_format: str = "PNG",
) -> bytes:
    """Encode a solid-color image."""
    mode = "RGBA" if len(color) == 4 else "RGB"
    buffer = io.BytesIO()
    Image.new(mode, (width, height), color).save(buffer, format=image_format)
    return buffer.getvalue()


def square_path(left: float, top: float, right: float, bottom: float) -> list:
    return [
        {"x": left, "y": top},
        {"x": right, "y": top},
        {"x": right, "y": bottom},
        {"x": left, "y": bottom},
    ]


def make_mask(  # noqa: PLR0913
    photo_id: UUID,
    *,
    material_id: UUID | None = None,
    path_data: object = None,
    z_index: int = 0,
    mutated_at: datetime | None = None,
    settings: MaskSettings | None = None,
) -> Mask:
    return Mask(
        id=uuid4(),
        photo_id=photo_id,
        path_data=path_data
        if path_data is not None
        else square_path(100, 100, 300, 300),
        mutated_at=mutated_at or datetime(2024, 1, 1, tzinfo=UTC),
        material_id=material_id,
        z_index=z_index,
        settings=settings or MaskSettings(),
    )


@dataclass
class InMemoryPhotoRepository(PhotoRepository):
    """In-memory photo repository for tests."""

    photos: dict[UUID, PhotoReference] = field(default_factory=dict)
    updates: list[tuple[UUID, CompositeRecord]] = field(default_factory=list)
    cleared: list[UUID] = field(default_factory=list)

    def add(self, photo: PhotoReference) -> PhotoReference:
        self.photos[photo.id] = photo
        return photo

    def get_photo(self, photo_id: UUID) -> PhotoReference | None:
        return self.photos.get(photo_id)

    def update_composite(self, photo_id: UUID, record: CompositeRecord) -> None:
        self.updates.append((photo_id, record))
        photo = self.photos[photo_id]
        self.photos[photo_id] = PhotoReference(
            id=photo.id,
            recorded_width=photo.recorded_width,
            recorded_height=photo.recorded_height,
            source_image_url=photo.source_image_url,
            composite=record,
            pixels_per_meter=photo.pixels_per_meter,
        )

    def clear_composite(self, photo_id: UUID) -> None:
        self.cleared.append(photo_id)
        photo = self.photos.get(photo_id)
        if photo is None:
            return
        self.photos[photo_id] = PhotoReference(
            id=photo.id,
            recorded_width=photo.recorded_width,
            recorded_height=photo.recorded_height,
            source_image_url=photo.source_image_url,
            pixels_per_meter=photo.pixels_per_meter,
        )


@dataclass
class InMemoryMaskRepository(MaskRepository):
    """In-memory mask repository for tests."""

    masks: dict[UUID, Mask] = field(default_factory=dict)

    def add(self, mask: Mask) -> Mask:
        self.masks[mask.id] = mask
        return mask

    def list_masks(self, photo_id: UUID) -> list[Mask]:
        return [mask for mask in self.masks.values() if mask.photo_id == photo_id]

    def get_mask(self, mask_id: UUID) -> Mask | None:
        return self.masks.get(mask_id)

    def delete_mask(self, mask_id: UUID) -> None:
        self.masks.pop(mask_id, None)


@dataclass
class InMemoryMaterialRepository(MaterialRepository):
    """In-memory material repository that records lookups."""

    materials: dict[UUID, Material] = field(default_factory=dict)
    lookups: list[UUID] = field(default_factory=list)

    def add(self, material: Material) -> Material:
        self.materials[material.id] = material
        return material

    def get_material(self, material_id: UUID) -> Material | None:
        self.lookups.append(material_id)
        return self.materials.get(material_id)


@dataclass
class InMemoryBlobStorage(BlobStorage):
    """Blob storage that keeps uploads in memory."""

    objects: dict[str, tuple[bytes, str]] = field(default_factory=dict)

    def put(self, key: str, data: bytes, content_type: str) -> str:
        self.objects[key] = (data, content_type)
        return f"https://cdn.test/{key}"


@dataclass
class FakeImageClient(ImageClient):
    """Image client serving canned bytes and recording requests."""

    images: dict[str, bytes] = field(default_factory=dict)
    requests: list[str] = field(default_factory=list)

    async def fetch_bytes(self, url: str) -> bytes:
        self.requests.append(url)
        if url not in self.images:
            raise RuntimeError(f"404 for {url}")
        return self.images[url]


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
    )


@pytest.fixture
def photo_repository() -> InMemoryPhotoRepository:
    return InMemoryPhotoRepository()


@pytest.fixture
def mask_repository() -> InMemoryMaskRepository:
    return InMemoryMaskRepository()


@pytest.fixture
def material_repository() -> InMemoryMaterialRepository:
    return InMemoryMaterialRepository()


@pytest.fixture
def blob_storage() -> InMemoryBlobStorage:
    return InMemoryBlobStorage()


@pytest.fixture
def image_client() -> FakeImageClient:
    return FakeImageClient(
        images={
            PHOTO_URL: make_image_bytes(800, 600),
            TEXTURE_URL: make_image_bytes(64, 64, (180, 40, 40, 255)),
        }
    )


@pytest.fixture
def photo(photo_repository: InMemoryPhotoRepository) -> PhotoReference:
    return photo_repository.add(
        PhotoReference(
            id=uuid4(),
            recorded_width=800,
            recorded_height=600,
            source_image_url=PHOTO_URL,
        )
    )


@pytest.fixture
def material(material_repository: InMemoryMaterialRepository) -> Material:
    return material_repository.add(
        Material(id=uuid4(), physical_repeat_meters=0.3, texture_image_url=TEXTURE_URL)
    )


@pytest.fixture
def pipeline(
    image_client: FakeImageClient,
    material_repository: InMemoryMaterialRepository,
) -> CompositingPipeline:
    return CompositingPipeline(
        image_client=image_client, material_repository=material_repository
    )


@pytest.fixture
def composite_service(
    photo_repository: InMemoryPhotoRepository,
    mask_repository: InMemoryMaskRepository,
    blob_storage: InMemoryBlobStorage,
    pipeline: CompositingPipeline,
) -> CompositeService:
    return CompositeService(
        photo_repository=photo_repository,
        mask_repository=mask_repository,
        blob_storage=blob_storage,
        pipeline=pipeline,
    )


@pytest.fixture
def container(
    settings: Settings,
    photo_repository: InMemoryPhotoRepository,
    mask_repository: InMemoryMaskRepository,
    blob_storage: InMemoryBlobStorage,
    composite_service: CompositeService,
) -> AppContainer:
    enhancement_service = EnhancementService(
        photo_repository=photo_repository,
        mask_repository=mask_repository,
        composite_service=composite_service,
        stencil_service=StencilService(blob_storage),
    )
    mask_service = MaskService(
        mask_repository=mask_repository, photo_repository=photo_repository
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        composite_service=composite_service,
        enhancement_service=enhancement_service,
        mask_service=mask_service,
        close_resources=close_resources,
    )
