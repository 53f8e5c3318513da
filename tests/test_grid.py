"""
Grid model and seeding tests.

Coordinates in caller space map to (row, col) = (y - org_y, x - org_x).
"""

import numpy as np
import pytest

from chamfer_map.config import UNSET, NO_FEATURE
from chamfer_map.errors import GridConfigError
from chamfer_map.grid import (
    FORWARD_MASK,
    BACKWARD_MASK,
    in_map,
    masked_neighbors,
    rc_to_xy,
    xy_to_rc,
)
from chamfer_map.models import FeaturePoint, GridSpec
from chamfer_map.seeding import feature_xy, seed_from_features, seed_from_index_map


class Accessor:
    """Feature exposing x()/y() methods."""

    def __init__(self, x, y):
        self._x, self._y = x, y

    def x(self):
        return self._x

    def y(self):
        return self._y


class TestGridSpec:
    def test_valid_requires_positive_size(self):
        assert GridSpec(0, 0, 3, 2).valid
        assert not GridSpec(0, 0, 0, 2).valid
        assert not GridSpec(0, 0, 3, -1).valid

    def test_shape_is_rows_by_cols(self):
        assert GridSpec(5, 5, 3, 2).shape == (2, 3)


class TestInMap:
    def test_bounds_with_offset_origin(self):
        spec = GridSpec(10, -5, 3, 2)
        assert in_map(spec, 10, -5)
        assert in_map(spec, 12, -4)
        assert not in_map(spec, 13, -5)
        assert not in_map(spec, 10, -3)
        assert not in_map(spec, 9, -5)

    def test_coordinate_conversion(self):
        spec = GridSpec(10, -5, 3, 2)
        assert xy_to_rc(spec, 12, -4) == (1, 2)
        assert rc_to_xy(spec, 1, 2) == (12, -4)


class TestMasks:
    def test_forward_mask_order(self):
        got = list(masked_neighbors(1, 1, 3, 3, FORWARD_MASK))
        assert got == [(0, 1, 3), (1, 0, 3), (0, 0, 4), (0, 2, 4)]

    def test_backward_mask_order(self):
        got = list(masked_neighbors(1, 1, 3, 3, BACKWARD_MASK))
        assert got == [(2, 1, 3), (1, 2, 3), (2, 2, 4), (2, 0, 4)]

    def test_corner_has_no_forward_neighbors(self):
        assert list(masked_neighbors(0, 0, 3, 3, FORWARD_MASK)) == []

    def test_neighbors_clipped_at_edge(self):
        got = list(masked_neighbors(1, 2, 3, 3, FORWARD_MASK))
        assert got == [(0, 2, 3), (1, 1, 3), (0, 1, 4)]


class TestFeatureAccess:
    def test_pair(self):
        assert feature_xy((3, 4)) == (3, 4)

    def test_accessor_methods(self):
        assert feature_xy(Accessor(3, 4)) == (3, 4)

    def test_attributes(self):
        assert feature_xy(FeaturePoint(3, 4)) == (3, 4)

    def test_rounds_to_nearest_cell(self):
        assert feature_xy((2.6, -1.2)) == (3, -1)

    def test_halves_round_up(self):
        assert feature_xy((2.5, 3.5)) == (3, 4)
        assert feature_xy((-2.5, 0.5)) == (-2, 1)


class TestSeedFromFeatures:
    def test_feature_cells_and_outside_points(self):
        spec = GridSpec(0, 0, 4, 3)
        layers, coords = seed_from_features(spec, [(1, 1), (5, 5), (1, 1), (3, 2)])

        assert layers.distance[1, 1] == 0
        assert layers.index[1, 1] == 0  # lowest position keeps a shared cell
        assert layers.distance[2, 3] == 0
        assert layers.index[2, 3] == 3
        assert np.count_nonzero(layers.distance == 0) == 2
        assert np.count_nonzero(layers.index != NO_FEATURE) == 2
        assert coords.shape == (4, 2)
        assert coords[1].tolist() == [5, 5]

    def test_empty_sequence(self):
        spec = GridSpec(0, 0, 3, 3)
        layers, coords = seed_from_features(spec, [])
        assert (layers.distance == UNSET).all()
        assert (layers.index == NO_FEATURE).all()
        assert coords.shape == (0, 2)

    def test_accepts_generator(self):
        spec = GridSpec(0, 0, 3, 3)
        layers, coords = seed_from_features(spec, (Accessor(i, i) for i in range(3)))
        assert [int(layers.index[i, i]) for i in range(3)] == [0, 1, 2]
        assert len(coords) == 3


class TestSeedFromIndexMap:
    def test_seeds_without_distance_map(self):
        spec = GridSpec(0, 0, 3, 2)
        index = [[-1, 0, -1], [-1, -1, 1]]
        layers, propagate = seed_from_index_map(spec, index)
        assert propagate
        assert layers.distance[0, 1] == 0
        assert layers.distance[1, 2] == 0
        assert layers.distance[0, 0] == UNSET
        assert layers.index[0, 0] == NO_FEATURE

    def test_adopts_distance_map(self):
        spec = GridSpec(0, 0, 2, 1)
        layers, propagate = seed_from_index_map(spec, [[0, 0]], [[0, 3]])
        assert not propagate
        assert layers.distance.tolist() == [[0, 3]]

    def test_shape_mismatch(self):
        spec = GridSpec(0, 0, 3, 2)
        with pytest.raises(GridConfigError):
            seed_from_index_map(spec, [[0, -1], [-1, -1]])
        with pytest.raises(GridConfigError):
            seed_from_index_map(spec, np.zeros((2, 3)), np.zeros((3, 2)))

    def test_inconsistent_reachability(self):
        spec = GridSpec(0, 0, 2, 1)
        with pytest.raises(GridConfigError):
            seed_from_index_map(spec, [[0, -1]], [[0, 3]])
