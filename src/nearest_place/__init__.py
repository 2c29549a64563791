"""
nearest-place: Offline nearest-feature lookup over a static gazetteer.

This package resolves a WGS84 (lat, lon) coordinate to the closest named
feature in a pre-built gazetteer, using a bounding-box prefilter and a
latitude-corrected squared-distance ranking executed by DuckDB.
"""

__version__ = "0.1.0"

from .errors import (
    NearestPlaceError,
    DatasetConnectionError,
    LocationNotFound,
    InvalidRecord,
    InvalidCoordinate,
)
from .geometry import BoundingBox, bounding_box, scale_factor, corrected_distance_sq, check_coords
from .store import SpatialIndexStore, MemoryStore
from .duckdb_store import DuckDBStore
from .resolver import Resolver, ResolverConfig, LocationDescription, decode_record, open_resolver

__all__ = [
    "NearestPlaceError",
    "DatasetConnectionError",
    "LocationNotFound",
    "InvalidRecord",
    "InvalidCoordinate",
    "BoundingBox",
    "bounding_box",
    "scale_factor",
    "corrected_distance_sq",
    "check_coords",
    "SpatialIndexStore",
    "MemoryStore",
    "DuckDBStore",
    "Resolver",
    "ResolverConfig",
    "LocationDescription",
    "decode_record",
    "open_resolver",
]
