"""
Geometry helpers for nearest-feature lookup.

The resolver ranks candidates with a flat, latitude-corrected squared
distance instead of a great-circle distance:

    d = (lat - lat')^2 + (lon - lon')^2 * scale
    scale = cos(lat * pi / 180)^2

The scale shrinks longitude differences as meridians converge toward the
poles. Candidates are prefiltered with an axis-aligned bounding box of
fixed half-width in degrees; the box itself is never scaled.
"""

from dataclasses import dataclass
from typing import Tuple
import math

from .errors import InvalidCoordinate


DEFAULT_HALF_WIDTH = 1.5
"""Bounding-box half-width in degrees."""


@dataclass(frozen=True)
class BoundingBox:
    """
    An axis-aligned latitude/longitude rectangle in degrees.

    Bounds are inclusive on both ends, matching SQL BETWEEN.
    """
    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float

    def __post_init__(self):
        if self.min_lat > self.max_lat or self.min_lon > self.max_lon:
            raise ValueError(
                f"Invalid bounding box: lat=[{self.min_lat}, {self.max_lat}], "
                f"lon=[{self.min_lon}, {self.max_lon}]"
            )

    def contains(self, lat: float, lon: float) -> bool:
        """Check if (lat, lon) lies within the box."""
        return (
            self.min_lat <= lat <= self.max_lat
            and self.min_lon <= lon <= self.max_lon
        )


def scale_factor(lat: float) -> float:
    """
    Longitude weight for a given latitude.

    Args:
        lat: Latitude in degrees

    Returns:
        cos(lat)^2, in [0, 1]. Exactly 1.0 at the equator.
    """
    return math.cos(lat * math.pi / 180.0) ** 2


def bounding_box(lat: float, lon: float, half_width: float = DEFAULT_HALF_WIDTH) -> BoundingBox:
    """
    Build the search box centred on (lat, lon).

    Args:
        lat: Latitude in degrees
        lon: Longitude in degrees
        half_width: Half of the box side, in degrees

    Returns:
        BoundingBox spanning lat +/- half_width and lon +/- half_width
    """
    return BoundingBox(
        min_lat=lat - half_width,
        max_lat=lat + half_width,
        min_lon=lon - half_width,
        max_lon=lon + half_width,
    )


def corrected_distance_sq(
    lat: float,
    lon: float,
    other_lat: float,
    other_lon: float,
    scale: float,
) -> float:
    """
    Squared distance with the longitude term weighted by ``scale``.

    Operand order mirrors the SQL ranking expression so that Python and
    store results agree bit-for-bit.
    """
    return (lat - other_lat) * (lat - other_lat) + (lon - other_lon) * (lon - other_lon) * scale


def check_coords(lat: float, lon: float, validate_range: bool = True) -> Tuple[float, float]:
    """
    Validate a query coordinate.

    Args:
        lat: Latitude in degrees
        lon: Longitude in degrees
        validate_range: Also require lat in [-90, 90] and lon in [-180, 180]

    Returns:
        Tuple of (lat, lon) as floats

    Raises:
        InvalidCoordinate: if either value is non-finite or, when
            validate_range is set, outside the WGS84 range
    """
    try:
        lat = float(lat)
        lon = float(lon)
    except (TypeError, ValueError) as e:
        raise InvalidCoordinate(lat, lon, "coordinates must be numeric") from e

    if not (math.isfinite(lat) and math.isfinite(lon)):
        raise InvalidCoordinate(lat, lon, "coordinates must be finite")

    if validate_range:
        if not -90.0 <= lat <= 90.0:
            raise InvalidCoordinate(lat, lon, "latitude must be within [-90, 90]")
        if not -180.0 <= lon <= 180.0:
            raise InvalidCoordinate(lat, lon, "longitude must be within [-180, 180]")

    return lat, lon
