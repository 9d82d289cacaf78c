"""Mask path normalization, scaling and outline construction."""

import json
import logging
import math

from renovation_preview.domain.masks import CornerPoint, MaskPoint, Point, SmoothPoint
from renovation_preview.services.dimensions import RenderDimensions

MIN_PATH_POINTS = 3
BEZIER_STEPS = 16

_logger = logging.getLogger(__name__)


def parse_mask_path(raw: object) -> list[MaskPoint] | None:
    """Normalize stored path data into canonical points.

    Returns ``None`` when the mask should be skipped: the data is absent or
    malformed, or fewer than three points remain after normalization.
    """
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            _logger.warning("Mask path is not valid JSON")
            return None
    if isinstance(raw, dict):
        raw = raw.get("points")
    if not isinstance(raw, list):
        return None

    points = [_parse_point(item) for item in raw]
    if len(points) < MIN_PATH_POINTS:
        return None
    return points


def _parse_point(item: object) -> MaskPoint:
    if isinstance(item, dict):
        x = _coerce_coordinate(item.get("x"))
        y = _coerce_coordinate(item.get("y"))
        kind = item.get("kind")
        handle1 = _parse_handle(item.get("h1") or item.get("handle1"))
        handle2 = _parse_handle(item.get("h2") or item.get("handle2"))
        if (
            isinstance(kind, str)
            and kind.lower() == "smooth"
            and handle1 is not None
            and handle2 is not None
        ):
            return SmoothPoint(x=x, y=y, handle1=handle1, handle2=handle2)
        return CornerPoint(x=x, y=y)
    if isinstance(item, list | tuple):
        return CornerPoint(
            x=_coerce_coordinate(item[0] if len(item) > 0 else None),
            y=_coerce_coordinate(item[1] if len(item) > 1 else None),
        )
    return CornerPoint(x=0.0, y=0.0)


def _parse_handle(raw: object) -> Point | None:
    if isinstance(raw, dict):
        return Point(
            x=_coerce_coordinate(raw.get("x")), y=_coerce_coordinate(raw.get("y"))
        )
    if isinstance(raw, list | tuple) and len(raw) >= 2:  # noqa: PLR2004
        return Point(x=_coerce_coordinate(raw[0]), y=_coerce_coordinate(raw[1]))
    return None


def _coerce_coordinate(value: object) -> float:
    """Convert a stored coordinate to float, defaulting to 0."""
    if isinstance(value, bool) or value is None:
        return 0.0
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def scale_points(
    points: list[MaskPoint], dimensions: RenderDimensions
) -> list[MaskPoint]:
    """Map points from recorded space into render space, clamped to bounds."""
    max_x = dimensions.render_width - 1
    max_y = dimensions.render_height - 1

    def scale(x: float, y: float) -> Point:
        return Point(
            x=_clamp(x * dimensions.scale_x, 0, max_x),
            y=_clamp(y * dimensions.scale_y, 0, max_y),
        )

    scaled: list[MaskPoint] = []
    for point in points:
        anchor = scale(point.x, point.y)
        if isinstance(point, SmoothPoint):
            scaled.append(
                SmoothPoint(
                    x=anchor.x,
                    y=anchor.y,
                    handle1=scale(point.handle1.x, point.handle1.y),
                    handle2=scale(point.handle2.x, point.handle2.y),
                )
            )
        else:
            scaled.append(CornerPoint(x=anchor.x, y=anchor.y))
    return scaled


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(value, high))


def build_outline(
    points: list[MaskPoint], steps: int = BEZIER_STEPS
) -> list[tuple[float, float]]:
    """Flatten a closed path of straight and cubic segments into a polygon."""
    first = points[0]
    outline = [(first.x, first.y)]
    for previous, current in zip(points, points[1:], strict=False):
        if isinstance(current, SmoothPoint):
            outline.extend(
                _cubic(
                    Point(previous.x, previous.y),
                    _trailing_handle(previous),
                    current.handle1,
                    Point(current.x, current.y),
                    steps,
                )
            )
        else:
            outline.append((current.x, current.y))

    last = points[-1]
    if isinstance(last, SmoothPoint):
        leading = (
            first.handle1
            if isinstance(first, SmoothPoint)
            else Point(first.x, first.y)
        )
        outline.extend(
            _cubic(
                Point(last.x, last.y),
                last.handle2,
                leading,
                Point(first.x, first.y),
                steps,
            )
        )
    return outline


def _trailing_handle(point: MaskPoint) -> Point:
    if isinstance(point, SmoothPoint):
        return point.handle2
    return Point(point.x, point.y)


def _cubic(
    start: Point, control1: Point, control2: Point, end: Point, steps: int
) -> list[tuple[float, float]]:
    """Sample a cubic Bezier, excluding its start point."""
    samples: list[tuple[float, float]] = []
    for index in range(1, steps + 1):
        t = index / steps
        inverse = 1 - t
        a = inverse**3
        b = 3 * inverse**2 * t
        c = 3 * inverse * t**2
        d = t**3
        samples.append(
            (
                a * start.x + b * control1.x + c * control2.x + d * end.x,
                a * start.y + b * control1.y + c * control2.y + d * end.y,
            )
        )
    return samples
