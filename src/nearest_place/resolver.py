"""
Nearest-feature resolver.

Maps a (lat, lon) coordinate to the single closest feature in a gazetteer
store. Candidates are prefiltered by a fixed-size bounding box and ranked by
a latitude-corrected squared distance (see ``geometry``). The store decides
which row ranks first; the resolver validates inputs, decodes the loosely
typed row into a LocationDescription, and maps outcomes to typed errors.
"""

from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, Union
import logging
import math

from .duckdb_store import DuckDBStore
from .errors import InvalidRecord, LocationNotFound
from .geometry import DEFAULT_HALF_WIDTH, check_coords, scale_factor
from .store import (
    COL_ADMIN_NAME,
    COL_COUNTRY_CODE,
    COL_COUNTRY_NAME,
    COL_ID,
    COL_LATITUDE,
    COL_LONGITUDE,
    COL_NAME,
    DEFAULT_CANDIDATE_LIMIT,
    SpatialIndexStore,
)


@dataclass
class ResolverConfig:
    """Configuration for the resolver and the store it opens."""

    half_width: float = DEFAULT_HALF_WIDTH
    """Bounding-box half-width in degrees."""

    candidate_limit: int = DEFAULT_CANDIDATE_LIMIT
    """Ranked coordinate rows considered per query."""

    validate_range: bool = True
    """Reject latitude outside [-90, 90] and longitude outside [-180, 180]."""

    def __post_init__(self):
        if not (math.isfinite(self.half_width) and self.half_width > 0):
            raise ValueError("half_width must be a positive finite number")
        if isinstance(self.candidate_limit, bool) or not isinstance(self.candidate_limit, int):
            raise ValueError("candidate_limit must be an integer")
        if self.candidate_limit < 1:
            raise ValueError("candidate_limit must be at least 1")


@dataclass(frozen=True)
class LocationDescription:
    """A resolved feature, copied out of the store row."""

    id: int
    name: str
    admin_name: str
    country_code: str
    country_name: str
    latitude: float
    longitude: float

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a plain dictionary (JSON-serializable)."""
        return asdict(self)


def _column(row: Sequence[Any], index: int, column: str) -> Any:
    try:
        return row[index]
    except IndexError:
        raise InvalidRecord(column, None, "column missing from row") from None


def _decode_int(row: Sequence[Any], index: int, column: str) -> int:
    value = _column(row, index, column)
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidRecord(column, value, "expected integer")
    return value


def _decode_text(row: Sequence[Any], index: int, column: str) -> str:
    value = _column(row, index, column)
    if not isinstance(value, str):
        raise InvalidRecord(column, value, "expected text")
    return value


def _decode_float(row: Sequence[Any], index: int, column: str) -> float:
    value = _column(row, index, column)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidRecord(column, value, "expected number")
    return float(value)


def decode_record(row: Sequence[Any]) -> LocationDescription:
    """
    Decode a positional feature row.

    Args:
        row: Row in ``everything`` layout

    Returns:
        LocationDescription with every field populated

    Raises:
        InvalidRecord: if a required column is absent, NULL, or of the
            wrong type. Nothing is defaulted.
    """
    return LocationDescription(
        id=_decode_int(row, COL_ID, "id"),
        name=_decode_text(row, COL_NAME, "name"),
        admin_name=_decode_text(row, COL_ADMIN_NAME, "admin_name"),
        country_code=_decode_text(row, COL_COUNTRY_CODE, "country_code"),
        country_name=_decode_text(row, COL_COUNTRY_NAME, "country_name"),
        latitude=_decode_float(row, COL_LATITUDE, "latitude"),
        longitude=_decode_float(row, COL_LONGITUDE, "longitude"),
    )


class Resolver:
    """
    Resolves coordinates to the nearest gazetteer feature.

    Holds one store. Calls are synchronous and not safe for concurrent use
    on the same instance; create one resolver per thread instead.
    """

    def __init__(
        self,
        store: SpatialIndexStore,
        config: Optional[ResolverConfig] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Args:
            store: Store to query
            config: Resolver configuration (defaults to ResolverConfig())
            logger: Logger for diagnostic events (defaults to this module's)
        """
        self.store = store
        self.config = config or ResolverConfig()
        self.logger = logger or logging.getLogger(__name__)

    def resolve(self, latitude: float, longitude: float) -> LocationDescription:
        """
        Find the feature nearest to a coordinate.

        Args:
            latitude: Latitude in degrees
            longitude: Longitude in degrees

        Returns:
            LocationDescription of the best-ranked feature

        Raises:
            InvalidCoordinate: if the input is non-finite, or out of range
                while config.validate_range is set
            LocationNotFound: if no feature lies inside the search box
            InvalidRecord: if the best row is malformed
        """
        lat, lon = check_coords(latitude, longitude, self.config.validate_range)
        scale = scale_factor(lat)

        self.logger.debug("Resolving (%s, %s) with scale %.6f", lat, lon, scale)
        row = self.store.nearest(lat, lon, scale)

        if row is None:
            self.logger.debug("No feature near (%s, %s)", lat, lon)
            raise LocationNotFound(lat, lon)

        try:
            return decode_record(row)
        except InvalidRecord as e:
            self.logger.warning("Malformed gazetteer row near (%s, %s): %s", lat, lon, e)
            raise

    def close(self) -> None:
        """Close the underlying store."""
        self.store.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


def open_resolver(
    path: Union[str, Path],
    config: Optional[ResolverConfig] = None,
    logger: Optional[logging.Logger] = None,
) -> Resolver:
    """
    Open a DuckDB gazetteer read-only and wrap it in a resolver.

    Args:
        path: Path to the gazetteer database file
        config: Resolver configuration
        logger: Logger for diagnostic events

    Returns:
        Configured Resolver instance

    Raises:
        DatasetConnectionError: if the dataset cannot be opened or prepared
    """
    config = config or ResolverConfig()
    store = DuckDBStore(path, config.half_width, config.candidate_limit)

    resolver = Resolver(store, config, logger)
    resolver.logger.info("Loaded gazetteer %s with %d features", path, store.feature_count())
    return resolver
