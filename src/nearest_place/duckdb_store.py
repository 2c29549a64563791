"""
DuckDB-backed gazetteer store.

The dataset is a DuckDB database with two tables:

- ``everything``: one row per feature (id, name, ascii_name, admin_name,
  country_code, country_name, latitude, longitude)
- ``coordinates``: (feature_id, latitude, longitude), the range-searchable
  coordinate index

The lookup query is parsed once when the store opens and re-executed with
bound parameters for every call.
"""

from pathlib import Path
from typing import Any, Optional, Sequence, Union
import logging
import math

import duckdb

from .errors import DatasetConnectionError
from .geometry import DEFAULT_HALF_WIDTH
from .store import DEFAULT_CANDIDATE_LIMIT, SpatialIndexStore


logger = logging.getLogger(__name__)


NEAREST_SQL_TEMPLATE = """
    SELECT e.* FROM everything e
    JOIN (
        SELECT feature_id,
               ($lat - latitude) * ($lat - latitude) +
               ($lon - longitude) * ($lon - longitude) * $scale AS distance
        FROM coordinates
        WHERE latitude BETWEEN $lat - {half_width} AND $lat + {half_width}
          AND longitude BETWEEN $lon - {half_width} AND $lon + {half_width}
        ORDER BY distance ASC, feature_id ASC
        LIMIT {limit}
    ) c ON e.id = c.feature_id
    ORDER BY c.distance ASC, c.feature_id ASC
    LIMIT 1
"""


def build_nearest_sql(
    half_width: float = DEFAULT_HALF_WIDTH,
    candidate_limit: int = DEFAULT_CANDIDATE_LIMIT,
) -> str:
    """
    Render the lookup query for a given box size and candidate limit.

    Args:
        half_width: Bounding-box half-width in degrees
        candidate_limit: Ranked coordinate rows considered per query

    Returns:
        SQL text with named parameters $lat, $lon and $scale
    """
    if not (math.isfinite(half_width) and half_width > 0):
        raise ValueError("half_width must be a positive finite number")
    if int(candidate_limit) != candidate_limit or candidate_limit < 1:
        raise ValueError("candidate_limit must be a positive integer")

    return NEAREST_SQL_TEMPLATE.format(
        half_width=repr(float(half_width)),
        limit=int(candidate_limit),
    )


class DuckDBStore(SpatialIndexStore):
    """
    Read-only store over a DuckDB gazetteer file.

    One connection and one parsed statement per instance. The statement is
    reused serially and the instance must not be shared between threads.
    """

    def __init__(
        self,
        path: Union[str, Path],
        half_width: float = DEFAULT_HALF_WIDTH,
        candidate_limit: int = DEFAULT_CANDIDATE_LIMIT,
    ):
        """
        Open the gazetteer.

        Args:
            path: Path to the DuckDB database file
            half_width: Bounding-box half-width in degrees
            candidate_limit: Ranked coordinate rows considered per query

        Raises:
            DatasetConnectionError: if the file is missing, cannot be opened
                read-only, or lacks the tables the query needs
        """
        self.path = Path(path)
        self.half_width = half_width
        self.candidate_limit = candidate_limit
        self._con: Optional[duckdb.DuckDBPyConnection] = None

        sql = build_nearest_sql(half_width, candidate_limit)

        if not self.path.is_file():
            raise DatasetConnectionError(str(self.path), "file does not exist")

        try:
            self._con = duckdb.connect(str(self.path), read_only=True)
        except duckdb.Error as e:
            raise DatasetConnectionError(str(self.path), str(e)) from e

        try:
            self._statement = self._prepare(sql)
        except duckdb.Error as e:
            self.close()
            raise DatasetConnectionError(str(self.path), str(e)) from e

        logger.debug("Opened gazetteer %s read-only", self.path)

    def _prepare(self, sql: str) -> duckdb.Statement:
        """Parse the lookup query and check it binds against the schema."""
        statements = self._con.extract_statements(sql)
        statement = statements[0]

        # Binding surfaces missing tables or columns at open time
        self._con.execute(statement, {"lat": 0.0, "lon": 0.0, "scale": 1.0}).fetchall()
        return statement

    def nearest(self, lat: float, lon: float, scale: float) -> Optional[Sequence[Any]]:
        if self._con is None:
            raise DatasetConnectionError(str(self.path), "store is closed")

        return self._con.execute(
            self._statement,
            {"lat": lat, "lon": lon, "scale": scale},
        ).fetchone()

    def feature_count(self) -> int:
        """Get the number of feature rows in the gazetteer."""
        if self._con is None:
            raise DatasetConnectionError(str(self.path), "store is closed")

        (count,) = self._con.execute("SELECT COUNT(*) FROM everything").fetchone()
        return count

    def close(self) -> None:
        """Close the database connection."""
        if self._con is not None:
            self._con.close()
            self._con = None

    def __del__(self):
        """Cleanup on garbage collection."""
        # __init__ may have failed before _con was set
        if getattr(self, "_con", None) is not None:
            self.close()
