"""Domain models for photos and their rendered composites."""

from dataclasses import dataclass
from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


@dataclass(frozen=True)
class CompositeRecord:
    """Cached composite stored alongside a photo."""

    url: str
    generated_at: datetime


@dataclass(frozen=True)
class PhotoReference:
    """Photo metadata needed to render a composite.

    Mask coordinates are authored against ``recorded_width``/``recorded_height``,
    which may differ from the decoded image size.
    """

    id: UUID
    recorded_width: int
    recorded_height: int
    source_image_url: str
    composite: CompositeRecord | None = None
    pixels_per_meter: float | None = None


class CompositeResult(BaseModel):
    """Outcome of a composite request, serialized in camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    before_url: str
    after_url: str
    side_by_side_url: str
    status: Literal["completed", "failed"]
    has_edits: bool
    error: str | None = None

    @classmethod
    def unedited(cls, source_url: str) -> "CompositeResult":
        """Result that exposes the original image unchanged."""
        return cls(
            before_url=source_url,
            after_url=source_url,
            side_by_side_url=source_url,
            status="completed",
            has_edits=False,
        )

    @classmethod
    def edited(cls, source_url: str, composite_url: str) -> "CompositeResult":
        """Result for a freshly rendered or cached composite."""
        return cls(
            before_url=source_url,
            after_url=composite_url,
            side_by_side_url=composite_url,
            status="completed",
            has_edits=True,
        )

    @classmethod
    def failed(cls, error: str) -> "CompositeResult":
        """Result for a render that could not complete."""
        return cls(
            before_url="",
            after_url="",
            side_by_side_url="",
            status="failed",
            has_edits=False,
            error=error,
        )


class EnhancementInputs(BaseModel):
    """Images handed to a downstream enhancement service."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    composite_url: str
    stencil_url: str | None = None
