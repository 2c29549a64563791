"""
Spatial index store interface.

This module defines the store protocol the resolver queries and an
in-memory implementation used for testing and for tiny gazetteers.
"""

from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from .geometry import DEFAULT_HALF_WIDTH, bounding_box, corrected_distance_sq


DEFAULT_CANDIDATE_LIMIT = 1
"""Ranked coordinate rows fetched per query."""

# Positional layout of a row in the ``everything`` feature table.
# Column 2 holds the ASCII name and is not read by the resolver.
COL_ID = 0
COL_NAME = 1
COL_ASCII_NAME = 2
COL_ADMIN_NAME = 3
COL_COUNTRY_CODE = 4
COL_COUNTRY_NAME = 5
COL_LATITUDE = 6
COL_LONGITUDE = 7


class SpatialIndexStore(ABC):
    """
    Abstract base class for gazetteer stores.

    A store holds feature records and a coordinate index, and answers a
    single question: which feature inside the bounding box of the query
    point ranks first by latitude-corrected squared distance.
    """

    @abstractmethod
    def nearest(self, lat: float, lon: float, scale: float) -> Optional[Sequence[Any]]:
        """
        Find the best-ranked feature row around a point.

        Args:
            lat: Latitude in degrees
            lon: Longitude in degrees
            scale: Longitude weight, cos(lat)^2

        Returns:
            Positional feature row, or None if the box is empty.
            Column values are loosely typed and may be None.
        """
        pass

    def close(self) -> None:
        """Release any resources held by the store."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


class MemoryStore(SpatialIndexStore):
    """
    Store over a list of feature rows held in memory.

    Applies the same box predicate, ranking and tie-break as DuckDBStore.
    Rows use the ``everything`` column layout; coordinates for the index are
    read from the latitude and longitude columns.
    """

    def __init__(
        self,
        rows: Iterable[Sequence[Any]],
        half_width: float = DEFAULT_HALF_WIDTH,
        candidate_limit: int = DEFAULT_CANDIDATE_LIMIT,
        coordinates: Optional[Iterable[Tuple[int, float, float]]] = None,
    ):
        """
        Args:
            rows: Feature rows in ``everything`` layout
            half_width: Bounding-box half-width in degrees
            candidate_limit: Ranked coordinate rows considered per query
            coordinates: Optional (feature_id, lat, lon) index; by default
                built from each row's id, latitude and longitude columns
        """
        self._rows = [tuple(row) for row in rows]
        self.half_width = half_width
        self.candidate_limit = candidate_limit

        if coordinates is None:
            coordinates = [
                (row[COL_ID], row[COL_LATITUDE], row[COL_LONGITUDE])
                for row in self._rows
            ]
        self._coordinates: List[Tuple[int, float, float]] = list(coordinates)

    def nearest(self, lat: float, lon: float, scale: float) -> Optional[Sequence[Any]]:
        box = bounding_box(lat, lon, self.half_width)

        ranked = sorted(
            (
                (corrected_distance_sq(lat, lon, flat, flon, scale), fid)
                for fid, flat, flon in self._coordinates
                if box.contains(flat, flon)
            )
        )[: self.candidate_limit]

        # Same semantics as the SQL join: first ranked id with a feature row
        for _, fid in ranked:
            for row in self._rows:
                if row and row[COL_ID] == fid:
                    return row
        return None

    def feature_count(self) -> int:
        """Get the number of feature rows."""
        return len(self._rows)
