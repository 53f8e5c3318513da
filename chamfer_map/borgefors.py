# borgefors.py - Borgefors distance map over a set of feature points (3-4 chamfer)
from __future__ import annotations
import logging
import math
import operator
from typing import Any, Iterable, Optional, Tuple
import numpy as np

from chamfer_map.config import ORTHO_WEIGHT, UNSET, NO_FEATURE
from chamfer_map.errors import GridConfigError, MapContractError
from chamfer_map.grid import in_map as _in_map, xy_to_rc
from chamfer_map.models import ChamferLayers, GridSpec
from chamfer_map.chamfer_core import chamfer34
from chamfer_map.seeding import feature_xy, seed_from_features, seed_from_index_map

log = logging.getLogger(__name__)

# region Geometry Validation
def _geometry(org_x, org_y, size_x, size_y) -> GridSpec:
    try:
        spec = GridSpec(operator.index(org_x), operator.index(org_y),
                        operator.index(size_x), operator.index(size_y))
    except TypeError as e:
        raise GridConfigError(f"grid geometry must be integers: {e}") from e
    if not spec.valid:
        raise GridConfigError(f"grid size must be positive, got {spec.size_x}x{spec.size_y}")
    return spec


def _frozen(a: np.ndarray) -> np.ndarray:
    a.flags.writeable = False
    return a
# endregion


class BorgeforsMap:
    """
    Approximate distance and nearest-feature lookup over a fixed grid.

    The map is built once from a geometry and a sequence of features (anything
    with x()/y(), x/y attributes or an (x, y) pair) and is immutable afterwards.
    Only the feature coordinates are snapshotted; the caller's sequence is not
    kept. Rebuild with set() or start over with reset().

        m = BorgeforsMap(0, 0, 5, 5, [(2, 2)])
        m.distance(0, 0)   # 8/3, two diagonal steps
        m.nearest(0, 0)    # 0

    Ties between equally distant features go to whichever value reached the
    cell first: the forward sweep (top-left to bottom-right) runs before the
    backward one, and a cell only takes a neighbor's value when it is strictly
    shorter than what it already holds.
    """

    def __init__(
        self,
        org_x: Optional[int] = None,
        org_y: Optional[int] = None,
        size_x: Optional[int] = None,
        size_y: Optional[int] = None,
        features: Iterable[Any] = (),
        release_dist_map: bool = False,
    ):
        self.reset()
        if (org_x, org_y, size_x, size_y) != (None, None, None, None):
            self.set(org_x, org_y, size_x, size_y, features, release_dist_map)

    # region Building
    def set(self, org_x: int, org_y: int, size_x: int, size_y: int,
            features: Iterable[Any], release_dist_map: bool = False) -> None:
        """
        Build the map for the grid with top-left corner (org_x, org_y) and
        size_x by size_y cells. Features outside the grid are ignored.

        With release_dist_map the quantized distance array is dropped after the
        build; distance() then measures the exact Euclidean distance to the
        nearest feature instead.
        """
        self.reset()
        spec = _geometry(org_x, org_y, size_x, size_y)
        layers, coords = seed_from_features(spec, features)
        chamfer34(layers)
        self._commit(spec, layers, coords, release_dist_map)

    def set_from_maps(self, org_x: int, org_y: int, size_x: int, size_y: int,
                      index_map, distance_map=None,
                      features: Optional[Iterable[Any]] = None) -> None:
        """
        Build from a caller-made index map, shape (size_y, size_x), negative
        entries meaning "no feature". Without distance_map the indexed cells
        are used as zero-distance seeds and propagated; with one, both maps are
        taken as they are. features, if given, supplies the coordinates used by
        nearest_point() and exact_distance().
        """
        self.reset()
        spec = _geometry(org_x, org_y, size_x, size_y)
        layers, propagate = seed_from_index_map(spec, index_map, distance_map)

        coords = None
        if features is not None:
            coords = np.array([feature_xy(f) for f in features], dtype=np.int64).reshape(-1, 2)
            if layers.index.size and int(layers.index.max()) >= len(coords):
                raise GridConfigError(
                    f"index map refers to feature {int(layers.index.max())} "
                    f"but only {len(coords)} features were given")
        if propagate:
            chamfer34(layers)
        self._commit(spec, layers, coords, False)

    def _commit(self, spec: GridSpec, layers: ChamferLayers,
                coords: Optional[np.ndarray], release_dist_map: bool) -> None:
        self._spec = spec
        self._index = _frozen(layers.index)
        self._distance = None if release_dist_map else _frozen(layers.distance)
        self._coords = None if coords is None else _frozen(coords)
        self._valid = True
        log.info("built %dx%d map at (%d,%d): %d features, %d/%d cells reachable",
                 spec.size_x, spec.size_y, spec.org_x, spec.org_y,
                 0 if coords is None else len(coords),
                 int(np.count_nonzero(self._index != NO_FEATURE)), self._index.size)

    def reset(self) -> None:
        """Back to the empty, invalid state."""
        self._valid = False
        self._spec: Optional[GridSpec] = None
        self._distance: Optional[np.ndarray] = None
        self._index: Optional[np.ndarray] = None
        self._coords: Optional[np.ndarray] = None
    # endregion

    # region Geometry
    @property
    def is_valid(self) -> bool:
        return self._valid

    def in_map(self, x: int, y: int) -> bool:
        return self._spec is not None and _in_map(self._spec, x, y)

    def origin(self) -> Tuple[int, int]:
        if self._spec is None:
            return (0, 0)
        return (self._spec.org_x, self._spec.org_y)

    def width(self) -> int:
        return 0 if self._spec is None else self._spec.size_x

    def height(self) -> int:
        return 0 if self._spec is None else self._spec.size_y
    # endregion

    # region Queries
    def _cell(self, x: int, y: int) -> Tuple[int, int]:
        if not self._valid:
            raise MapContractError("distance map has not been built")
        if not _in_map(self._spec, x, y):
            raise MapContractError(f"({x}, {y}) is outside the map")
        return xy_to_rc(self._spec, x, y)

    def distance(self, x: int, y: int) -> float:
        """Approximate distance from (x, y) to the nearest feature, in cells.
        math.inf when no feature is reachable."""
        r, c = self._cell(x, y)
        if self._distance is None:
            return self.exact_distance(x, y)
        d = int(self._distance[r, c])
        if d == UNSET:
            return math.inf
        return d / ORTHO_WEIGHT

    def exact_distance(self, x: int, y: int) -> float:
        """Euclidean distance from (x, y) to the feature nearest() picks."""
        r, c = self._cell(x, y)
        i = int(self._index[r, c])
        if i == NO_FEATURE:
            return math.inf
        fx, fy = self._feature_coords(i)
        return math.hypot(x - fx, y - fy)

    def nearest(self, x: int, y: int) -> int:
        """Position, in the building sequence, of the feature nearest to (x, y)."""
        r, c = self._cell(x, y)
        i = int(self._index[r, c])
        if i == NO_FEATURE:
            raise MapContractError(f"no feature reaches ({x}, {y})")
        return i

    def nearest_point(self, x: int, y: int) -> Tuple[int, int]:
        return self._feature_coords(self.nearest(x, y))

    def _feature_coords(self, i: int) -> Tuple[int, int]:
        if self._coords is None:
            raise MapContractError("map was built without feature coordinates")
        fx, fy = self._coords[i]
        return int(fx), int(fy)

    def distance_map(self) -> np.ma.MaskedArray:
        """Quantized chamfer distances, (height, width), masked where unreachable."""
        if not self._valid:
            raise MapContractError("distance map has not been built")
        if self._distance is None:
            raise MapContractError("distance map was released after the build")
        return np.ma.MaskedArray(self._distance, mask=self._distance == UNSET)

    def index_map(self) -> np.ma.MaskedArray:
        """Nearest feature positions, (height, width), masked where unreachable."""
        if not self._valid:
            raise MapContractError("distance map has not been built")
        return np.ma.MaskedArray(self._index, mask=self._index == NO_FEATURE)
    # endregion

    # region Comparison / Duplication
    def __eq__(self, other):
        if not isinstance(other, BorgeforsMap):
            return NotImplemented
        if self._spec != other._spec:
            return False
        if (self._distance is None) != (other._distance is None):
            return False
        if self._distance is not None and not np.array_equal(self._distance, other._distance):
            return False
        if self._index is None or other._index is None:
            return self._index is other._index
        return np.array_equal(self._index, other._index)

    __hash__ = None

    def clone(self) -> "BorgeforsMap":
        """Explicit deep copy; the arrays are duplicated."""
        dup = BorgeforsMap()
        if self._valid:
            dup._spec = self._spec
            dup._index = _frozen(self._index.copy())
            dup._distance = None if self._distance is None else _frozen(self._distance.copy())
            dup._coords = None if self._coords is None else _frozen(self._coords.copy())
            dup._valid = True
        return dup

    def __copy__(self):
        raise TypeError("BorgeforsMap cannot be copied implicitly; use clone() or rebuild it")

    def __deepcopy__(self, memo):
        raise TypeError("BorgeforsMap cannot be copied implicitly; use clone() or rebuild it")
    # endregion

    def __repr__(self):
        if not self._valid:
            return "BorgeforsMap(<invalid>)"
        s = self._spec
        return f"BorgeforsMap(org=({s.org_x}, {s.org_y}), size=({s.size_x}, {s.size_y}))"
