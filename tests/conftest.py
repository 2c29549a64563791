"""Shared fixtures: small DuckDB gazetteers built in a temp directory."""

from pathlib import Path
from typing import Iterable, Optional, Sequence, Tuple

import duckdb
import pytest


# (id, name, ascii_name, admin_name, country_code, country_name, latitude, longitude)
SAMPLE_FEATURES = [
    (1, "Paris", "Paris", "Ile-de-France", "FR", "France", 48.85341, 2.3488),
    (2, "Versailles", "Versailles", "Ile-de-France", "FR", "France", 48.80359, 2.13424),
    (3, "Tokyo", "Tokyo", "Tokyo", "JP", "Japan", 35.6895, 139.69171),
    (4, "Reykjavík", "Reykjavik", "Capital Region", "IS", "Iceland", 64.13548, -21.89541),
    (5, "Point A", "Point A", "Region A", "AA", "Alpha", 10.0, 20.0),
]


def write_gazetteer(
    path: Path,
    features: Iterable[Sequence],
    coordinates: Optional[Iterable[Tuple[int, float, float]]] = None,
    country_code_type: str = "VARCHAR",
) -> Path:
    """
    Write a gazetteer database.

    Args:
        path: Target database file
        features: Rows in ``everything`` layout
        coordinates: (feature_id, lat, lon) rows; defaults to each feature's
            own coordinates
        country_code_type: SQL type of the country_code column
    """
    features = list(features)
    if coordinates is None:
        coordinates = [(f[0], f[6], f[7]) for f in features]

    con = duckdb.connect(str(path))
    try:
        con.execute(f"""
            CREATE TABLE everything (
                id BIGINT,
                name VARCHAR,
                ascii_name VARCHAR,
                admin_name VARCHAR,
                country_code {country_code_type},
                country_name VARCHAR,
                latitude DOUBLE,
                longitude DOUBLE
            )
        """)
        con.execute("""
            CREATE TABLE coordinates (
                feature_id BIGINT,
                latitude DOUBLE,
                longitude DOUBLE
            )
        """)
        if features:
            con.executemany(
                "INSERT INTO everything VALUES (?, ?, ?, ?, ?, ?, ?, ?)", features
            )
        coordinates = list(coordinates)
        if coordinates:
            con.executemany("INSERT INTO coordinates VALUES (?, ?, ?)", coordinates)
        con.execute("CREATE INDEX coordinates_lat_lon_idx ON coordinates (latitude, longitude)")
    finally:
        con.close()

    return path


@pytest.fixture
def gazetteer_path(tmp_path):
    """Gazetteer with a handful of real and synthetic features."""
    return write_gazetteer(tmp_path / "gazetteer.duckdb", SAMPLE_FEATURES)
