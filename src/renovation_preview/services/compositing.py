"""Compositing pipeline that paints material-filled masks onto a photo."""

import asyncio
import logging
import math
import time
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

import numpy as np
from PIL import Image, ImageDraw

from renovation_preview.domain.masks import Mask
from renovation_preview.domain.materials import Material
from renovation_preview.domain.photos import PhotoReference
from renovation_preview.services.dimensions import (
    DEFAULT_MAX_DIMENSION,
    RenderDimensions,
    resolve_dimensions,
)
from renovation_preview.services.effects import (
    apply_intensity,
    apply_underwater,
    fallback_fill,
    source_over,
)
from renovation_preview.services.images import (
    ImageClient,
    ImageLoadError,
    decode_image,
    encode_jpeg,
)
from renovation_preview.services.paths import (
    build_outline,
    parse_mask_path,
    scale_points,
)
from renovation_preview.services.patterns import (
    TexturePattern,
    build_pattern,
    compute_repeat_px,
    tile_region,
)

DEFAULT_JPEG_QUALITY = 85

_logger = logging.getLogger(__name__)


class MaterialRepository(Protocol):
    """Read access to materials."""

    def get_material(self, material_id: UUID) -> Material | None:
        """Return a material by id, if present."""


@dataclass(frozen=True)
class MaskAssets:
    """Material and decoded texture resolved for a single mask."""

    material: Material | None = None
    texture: Image.Image | None = None


@dataclass(frozen=True)
class RenderedComposite:
    """Encoded composite and bookkeeping from a render call."""

    data: bytes
    width: int
    height: int
    painted_masks: int
    skipped_masks: int


def sort_masks(masks: list[Mask]) -> list[Mask]:
    """Return masks in paint order; ties keep their original order."""
    return sorted(masks, key=lambda mask: mask.z_index)


class AssetLoader:
    """Request-scoped loader for materials and textures.

    Lookups for every mask run concurrently; repeated material ids and texture
    URLs within the request share a single fetch.
    """

    def __init__(
        self, image_client: ImageClient, material_repository: MaterialRepository
    ) -> None:
        self.image_client = image_client
        self.material_repository = material_repository
        self._materials: dict[UUID, asyncio.Task[Material | None]] = {}
        self._textures: dict[str, asyncio.Task[Image.Image | None]] = {}

    async def load(self, masks: list[Mask]) -> dict[UUID, MaskAssets]:
        """Resolve assets for all masks before any painting starts."""
        results = await asyncio.gather(*(self._load_for_mask(mask) for mask in masks))
        return {mask.id: assets for mask, assets in zip(masks, results, strict=True)}

    async def _load_for_mask(self, mask: Mask) -> MaskAssets:
        if mask.material_id is None:
            return MaskAssets()
        material = await self._material_task(mask.material_id)
        if material is None:
            _logger.warning(
                "Material %s not found for mask %s", mask.material_id, mask.id
            )
            return MaskAssets()
        if not material.texture_image_url:
            return MaskAssets(material=material)
        texture = await self._texture_task(material.texture_image_url)
        return MaskAssets(material=material, texture=texture)

    def _material_task(self, material_id: UUID) -> "asyncio.Task[Material | None]":
        task = self._materials.get(material_id)
        if task is None:
            task = asyncio.ensure_future(self._fetch_material(material_id))
            self._materials[material_id] = task
        return task

    def _texture_task(self, url: str) -> "asyncio.Task[Image.Image | None]":
        task = self._textures.get(url)
        if task is None:
            task = asyncio.ensure_future(self._fetch_texture(url))
            self._textures[url] = task
        return task

    async def _fetch_material(self, material_id: UUID) -> Material | None:
        try:
            return await asyncio.to_thread(
                self.material_repository.get_material, material_id
            )
        except Exception as exc:
            _logger.warning("Failed to load material %s: %s", material_id, exc)
            return None

    async def _fetch_texture(self, url: str) -> Image.Image | None:
        try:
            data = await self.image_client.fetch_bytes(url)
            return decode_image(data).convert("RGBA")
        except Exception as exc:
            _logger.warning("Failed to load texture %s: %s", url, exc)
            return None


@dataclass
class CompositingPipeline:
    """Render masks with their materials over a downsized base image."""

    image_client: ImageClient
    material_repository: MaterialRepository
    max_dimension: int = DEFAULT_MAX_DIMENSION
    jpeg_quality: int = DEFAULT_JPEG_QUALITY

    async def load_base_image(
        self, photo: PhotoReference
    ) -> tuple[Image.Image, RenderDimensions]:
        """Fetch, decode and resize the photo to its render target."""
        try:
            data = await self.image_client.fetch_bytes(photo.source_image_url)
        except Exception as exc:
            raise ImageLoadError(
                f"Failed to fetch image {photo.source_image_url}: {exc}"
            ) from exc
        image = decode_image(data)
        dimensions = resolve_dimensions(
            photo.recorded_width,
            photo.recorded_height,
            image.width,
            image.height,
            self.max_dimension,
        )
        target = (dimensions.render_width, dimensions.render_height)
        if image.size != target:
            _logger.info(
                "Resizing base image from %sx%s to %sx%s",
                image.width,
                image.height,
                *target,
            )
            image = image.resize(target, Image.Resampling.LANCZOS)
        return image.convert("RGB"), dimensions

    async def render(
        self,
        photo: PhotoReference,
        masks: list[Mask],
        pixels_per_meter: float | None = None,
    ) -> RenderedComposite:
        """Run the load, prefetch, paint and encode phases for one photo."""
        started = time.perf_counter()
        base, dimensions = await self.load_base_image(photo)
        ordered = sort_masks(masks)
        loader = AssetLoader(self.image_client, self.material_repository)
        assets = await loader.load(ordered)
        canvas, painted = await asyncio.to_thread(
            self.paint, base, dimensions, ordered, assets, pixels_per_meter
        )
        data = encode_jpeg(canvas, self.jpeg_quality)
        _logger.info(
            "Rendered photo %s: %s/%s masks painted, %sx%s, %s bytes in %.0fms",
            photo.id,
            painted,
            len(ordered),
            canvas.width,
            canvas.height,
            len(data),
            (time.perf_counter() - started) * 1000,
        )
        return RenderedComposite(
            data=data,
            width=canvas.width,
            height=canvas.height,
            painted_masks=painted,
            skipped_masks=len(ordered) - painted,
        )

    def paint(
        self,
        base: Image.Image,
        dimensions: RenderDimensions,
        masks: list[Mask],
        assets: dict[UUID, MaskAssets],
        pixels_per_meter: float | None = None,
    ) -> tuple[Image.Image, int]:
        """Paint masks in the given order and return the canvas and paint count."""
        canvas = np.asarray(base.convert("RGB"), dtype=np.float32).copy()
        painted = 0
        for mask in masks:
            if mask.material_id is None:
                _logger.info("Skipping mask %s: no material assigned", mask.id)
                continue
            points = parse_mask_path(mask.path_data)
            if points is None:
                _logger.info("Skipping mask %s: unusable path", mask.id)
                continue
            outline = build_outline(scale_points(points, dimensions))
            mask_assets = assets.get(mask.id, MaskAssets())
            pattern = self._pattern_for(mask, mask_assets, pixels_per_meter, dimensions)
            try:
                _paint_region(canvas, outline, mask, pattern)
            except Exception:
                _logger.exception("Failed to paint mask %s, using fallback", mask.id)
                _paint_region(canvas, outline, mask, None)
            painted += 1
        pixels = np.clip(np.rint(canvas), 0, 255).astype(np.uint8)
        return Image.fromarray(pixels), painted

    def _pattern_for(
        self,
        mask: Mask,
        assets: MaskAssets,
        pixels_per_meter: float | None,
        dimensions: RenderDimensions,
    ) -> TexturePattern | None:
        material = assets.material
        if material is None or assets.texture is None:
            return None
        try:
            repeat_px = compute_repeat_px(
                material.physical_repeat_meters,
                pixels_per_meter,
                material.default_tile_scale,
            )
            pattern = build_pattern(
                assets.texture,
                repeat_px,
                mask.settings.texture_scale_pct,
                max_tile_px=max(dimensions.render_width, dimensions.render_height),
            )
        except Exception as exc:
            _logger.warning("Failed to build pattern for mask %s: %s", mask.id, exc)
            return None
        _logger.debug(
            "Pattern for mask %s: repeat=%.1fpx user_scale=%.2f tile=%sx%s",
            mask.id,
            repeat_px,
            pattern.user_scale,
            *pattern.tile_size,
        )
        return pattern


def _paint_region(
    canvas: np.ndarray,
    outline: list[tuple[float, float]],
    mask: Mask,
    pattern: TexturePattern | None,
) -> None:
    """Fill the outline on ``canvas`` in place, then apply the mask's effects."""
    height, width = canvas.shape[:2]
    box = _bounding_box(outline, width, height)
    if box is None:
        return
    left, top, right, bottom = box
    coverage = _rasterize(outline, box)
    region = canvas[top:bottom, left:right]
    if pattern is None:
        region = fallback_fill(region, coverage)
    else:
        tile = tile_region(pattern.tile, box).astype(np.float32)
        alpha = coverage * (tile[..., 3] / 255.0)
        region = source_over(region, tile[..., :3], alpha)
        region = apply_intensity(region, coverage, mask.settings.intensity_pct)
        region = apply_underwater(region, coverage, mask.settings.underwater)
    canvas[top:bottom, left:right] = region


def _bounding_box(
    outline: list[tuple[float, float]], width: int, height: int
) -> tuple[int, int, int, int] | None:
    xs = [x for x, _ in outline]
    ys = [y for _, y in outline]
    left = max(0, math.floor(min(xs)))
    top = max(0, math.floor(min(ys)))
    right = min(width, math.ceil(max(xs)) + 1)
    bottom = min(height, math.ceil(max(ys)) + 1)
    if right <= left or bottom <= top:
        return None
    return left, top, right, bottom


def _rasterize(
    outline: list[tuple[float, float]], box: tuple[int, int, int, int]
) -> np.ndarray:
    """Return 0-1 coverage of the polygon within ``box``."""
    left, top, right, bottom = box
    layer = Image.new("L", (right - left, bottom - top), 0)
    ImageDraw.Draw(layer).polygon(
        [(x - left, y - top) for x, y in outline], fill=255
    )
    return np.asarray(layer, dtype=np.float32) / 255.0
