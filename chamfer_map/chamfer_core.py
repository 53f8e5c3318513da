# region Imports
import logging
import time
from typing import List, Sequence
import numpy as np

from chamfer_map.config import UNSET
from chamfer_map.grid import FORWARD_MASK, BACKWARD_MASK, masked_neighbors
from chamfer_map.models import ChamferLayers

log = logging.getLogger(__name__)
# endregion

# region Minimum Selection
def minimum5(candidates: Sequence[int]) -> int:
    """Position of the first minimum. Later entries must be strictly smaller to win."""
    best = 0
    for k in range(1, len(candidates)):
        if candidates[k] < candidates[best]:
            best = k
    return best
# endregion

# region Raster Sweep
def _sweep(dist: List[List[int]], idx: List[List[int]], rows, cols, mask) -> None:
    H, W = len(dist), len(dist[0])
    for r in rows:
        drow, irow = dist[r], idx[r]
        for c in cols:
            # current value first, then the mask in its fixed order
            cand = [drow[c]]
            src = [irow[c]]
            for rr, cc, w in masked_neighbors(r, c, H, W, mask):
                d = dist[rr][cc]
                if d == UNSET:
                    continue
                cand.append(d + w)
                src.append(idx[rr][cc])
            k = minimum5(cand)
            if k:
                drow[c] = cand[k]
                irow[c] = src[k]


def _forward(dist, idx) -> None:
    H, W = len(dist), len(dist[0])
    _sweep(dist, idx, range(H), range(W), FORWARD_MASK)


def _backward(dist, idx) -> None:
    H, W = len(dist), len(dist[0])
    _sweep(dist, idx, range(H - 1, -1, -1), range(W - 1, -1, -1), BACKWARD_MASK)


def _run(layers: ChamferLayers, *passes) -> None:
    dist = layers.distance.tolist()
    idx = layers.index.tolist()
    for p in passes:
        p(dist, idx)
    layers.distance[...] = np.asarray(dist, dtype=np.int64)
    layers.index[...] = np.asarray(idx, dtype=np.int64)
# endregion

# region Public Passes
def forward_chamfer(layers: ChamferLayers) -> None:
    """Top-left to bottom-right: relax against up, left, upper-left, upper-right."""
    if layers.distance.size:
        _run(layers, _forward)


def backward_chamfer(layers: ChamferLayers) -> None:
    """Bottom-right to top-left: relax against down, right, lower-right, lower-left."""
    if layers.distance.size:
        _run(layers, _backward)


def chamfer34(layers: ChamferLayers) -> None:
    """Both passes in place. Afterwards every reachable cell holds its 3-4 chamfer
    distance to the closest seed and that seed's index."""
    if layers.distance.size == 0:
        return
    t0 = time.perf_counter()
    _run(layers, _forward, _backward)
    log.debug("chamfer34 on %s grid took %.3fs", layers.distance.shape, time.perf_counter() - t0)
# endregion
