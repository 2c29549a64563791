"""Exception types raised by the resolver and stores."""

from typing import Any


class NearestPlaceError(Exception):
    """Base class for all nearest-place errors."""


class DatasetConnectionError(NearestPlaceError, ConnectionError):
    """The gazetteer could not be opened or the lookup query could not be prepared."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot open gazetteer {path}: {reason}")


class LocationNotFound(NearestPlaceError, LookupError):
    """No feature lies inside the search box around the query point."""

    def __init__(self, latitude: float, longitude: float):
        self.latitude = latitude
        self.longitude = longitude
        super().__init__(f"No feature found near ({latitude}, {longitude})")


class InvalidRecord(NearestPlaceError, ValueError):
    """
    A feature row had a missing or wrongly typed value in a required column.

    This points at a corrupt or schema-mismatched dataset, as opposed to
    LocationNotFound which is a normal outcome in sparse regions.
    """

    def __init__(self, column: str, value: Any, reason: str):
        self.column = column
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid value in column {column!r}: {value!r} ({reason})")


class InvalidCoordinate(NearestPlaceError, ValueError):
    """The query coordinate is non-finite or outside the WGS84 range."""

    def __init__(self, latitude: Any, longitude: Any, reason: str):
        self.latitude = latitude
        self.longitude = longitude
        self.reason = reason
        super().__init__(f"Invalid coordinate ({latitude}, {longitude}): {reason}")
