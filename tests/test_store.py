"""Tests for the store interface and MemoryStore."""

import pytest
from nearest_place.geometry import scale_factor
from nearest_place.store import COL_ID, MemoryStore, SpatialIndexStore

from conftest import SAMPLE_FEATURES


def nearest_id(store, lat, lon):
    row = store.nearest(lat, lon, scale_factor(lat))
    return None if row is None else row[COL_ID]


class TestMemoryStore:
    """Tests for MemoryStore."""

    def test_is_store(self):
        """Test MemoryStore implements the store interface."""
        assert isinstance(MemoryStore([]), SpatialIndexStore)

    def test_empty(self):
        """Test an empty store finds nothing."""
        assert MemoryStore([]).nearest(0.0, 0.0, 1.0) is None

    def test_exact_match(self):
        """Test a stored coordinate resolves to its own feature."""
        store = MemoryStore(SAMPLE_FEATURES)
        for feature in SAMPLE_FEATURES:
            assert nearest_id(store, feature[6], feature[7]) == feature[0]

    def test_nearest_of_two(self):
        """Test the closer of two nearby features is chosen."""
        store = MemoryStore(SAMPLE_FEATURES)
        # Slightly west of Paris, still closer to Paris than Versailles
        assert nearest_id(store, 48.85, 2.30) == 1
        assert nearest_id(store, 48.80, 2.14) == 2

    def test_outside_box(self):
        """Test features beyond the half-width are ignored."""
        store = MemoryStore(SAMPLE_FEATURES)
        assert nearest_id(store, 0.0, 0.0) is None
        assert nearest_id(store, 10.0, 21.6) is None

    def test_box_edge_inclusive(self):
        """Test a feature exactly on the box edge is found."""
        store = MemoryStore([(9, "Edge", "Edge", "A", "AA", "Alpha", 1.5, 0.0)])
        assert nearest_id(store, 0.0, 0.0) == 9

    def test_custom_half_width(self):
        """Test a wider box reaches further features."""
        store = MemoryStore(SAMPLE_FEATURES, half_width=3.0)
        assert nearest_id(store, 10.0, 22.5) == 5

    def test_tie_broken_by_lowest_id(self):
        """Test equidistant features resolve to the smallest identifier."""
        rows = [
            (7, "North", "North", "A", "AA", "Alpha", 0.5, 0.0),
            (6, "South", "South", "A", "AA", "Alpha", -0.5, 0.0),
        ]
        store = MemoryStore(rows)
        results = {nearest_id(store, 0.0, 0.0) for _ in range(5)}
        assert results == {6}

    def test_orphan_coordinate_with_limit_one(self):
        """Test a coordinate without a feature row yields no match."""
        rows = [(2, "Real", "Real", "A", "AA", "Alpha", 0.5, 0.5)]
        coordinates = [(1, 0.1, 0.1), (2, 0.5, 0.5)]
        store = MemoryStore(rows, coordinates=coordinates)
        assert nearest_id(store, 0.0, 0.0) is None

    def test_orphan_coordinate_with_larger_limit(self):
        """Test a larger candidate limit falls through to the next feature."""
        rows = [(2, "Real", "Real", "A", "AA", "Alpha", 0.5, 0.5)]
        coordinates = [(1, 0.1, 0.1), (2, 0.5, 0.5)]
        store = MemoryStore(rows, candidate_limit=2, coordinates=coordinates)
        assert nearest_id(store, 0.0, 0.0) == 2

    def test_feature_count(self):
        """Test feature count."""
        assert MemoryStore(SAMPLE_FEATURES).feature_count() == len(SAMPLE_FEATURES)

    def test_context_manager(self):
        """Test the store can be used as a context manager."""
        with MemoryStore(SAMPLE_FEATURES) as store:
            assert nearest_id(store, 35.6895, 139.69171) == 3
