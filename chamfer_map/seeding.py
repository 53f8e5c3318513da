# seeding.py - builds the initial distance/index layers the chamfer passes relax
import logging
import math
from typing import Any, Iterable, Optional, Tuple
import numpy as np

from chamfer_map.config import UNSET, NO_FEATURE
from chamfer_map.errors import GridConfigError
from chamfer_map.grid import in_map, xy_to_rc
from chamfer_map.models import ChamferLayers, GridSpec

log = logging.getLogger(__name__)

# region Feature Access
def _coord(v) -> int:
    if callable(v):
        v = v()
    # halves round up, 2.5 -> 3 and -2.5 -> -2
    return int(math.floor(float(v) + 0.5))


def feature_xy(feature: Any) -> Tuple[int, int]:
    """Integer (x, y) of a feature: x()/y() accessors, x/y attributes or a pair."""
    if hasattr(feature, "x") and hasattr(feature, "y"):
        return _coord(feature.x), _coord(feature.y)
    x, y = feature
    return _coord(x), _coord(y)
# endregion

# region Empty Layers
def empty_layers(spec: GridSpec) -> ChamferLayers:
    return ChamferLayers(
        distance=np.full(spec.shape, UNSET, dtype=np.int64),
        index=np.full(spec.shape, NO_FEATURE, dtype=np.int64),
    )
# endregion

# region Seeding From Features
def seed_from_features(spec: GridSpec, features: Iterable[Any]) -> Tuple[ChamferLayers, np.ndarray]:
    """
    Feature cells get distance 0 and their position in the sequence, everything
    else stays unset. Features outside the grid are skipped; on a shared cell
    the lowest position keeps it.

    Returns the layers and an (N,2) int snapshot of every feature's (x, y),
    so nothing from the caller's sequence has to be kept afterwards.
    """
    layers = empty_layers(spec)
    coords = []
    outside = 0
    for i, f in enumerate(features):
        x, y = feature_xy(f)
        coords.append((x, y))
        if not in_map(spec, x, y):
            outside += 1
            continue
        r, c = xy_to_rc(spec, x, y)
        if layers.index[r, c] == NO_FEATURE:
            layers.distance[r, c] = 0
            layers.index[r, c] = i

    snapshot = np.array(coords, dtype=np.int64).reshape(-1, 2)
    log.debug("seeded %d features (%d outside grid %s)", len(coords), outside, spec)
    return layers, snapshot
# endregion

# region Seeding From Pre-built Maps
def seed_from_index_map(
    spec: GridSpec,
    index_map,
    distance_map: Optional[Any] = None,
) -> Tuple[ChamferLayers, bool]:
    """
    Adopt a caller-built index map. Negative entries mean "no feature".

    Without distance_map every indexed cell becomes a zero-distance seed and the
    second element of the result is True (propagation still has to run). With a
    distance_map both arrays are taken as final (negative distance = unset) and
    the flag is False.
    """
    index = np.array(index_map, dtype=np.int64)
    if index.shape != spec.shape:
        raise GridConfigError(f"index map shape {index.shape} != grid shape {spec.shape}")
    index[index < 0] = NO_FEATURE
    unindexed = index == NO_FEATURE

    if distance_map is None:
        distance = np.where(unindexed, UNSET, 0).astype(np.int64)
        return ChamferLayers(distance=distance, index=index), True

    distance = np.array(distance_map, dtype=np.int64)
    if distance.shape != spec.shape:
        raise GridConfigError(f"distance map shape {distance.shape} != grid shape {spec.shape}")
    unset = (distance < 0) | (distance >= UNSET)
    if not np.array_equal(unset, unindexed):
        raise GridConfigError("distance and index maps disagree on which cells are reachable")
    distance[unset] = UNSET
    return ChamferLayers(distance=distance, index=index), False
# endregion
