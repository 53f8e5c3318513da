# metrics.py - checks a built chamfer map against brute-force Euclidean distances
import numpy as np
from chamfer_map.config import ORTHO_WEIGHT
from chamfer_map.grid import in_map
from chamfer_map.models import GridSpec

def exact_distance_field(spec: GridSpec, coords: np.ndarray) -> np.ndarray:
    """Euclidean distance from every cell to the closest in-grid feature, (H,W).
    O(N*cells), reference use only. inf everywhere when no feature is inside."""
    coords = np.asarray(coords, dtype=np.float64).reshape(-1, 2)
    inside = np.array([in_map(spec, int(x), int(y)) for x, y in coords], dtype=bool)
    pts = coords[inside]
    if len(pts) == 0:
        return np.full(spec.shape, np.inf)

    ys = np.arange(spec.org_y, spec.org_y + spec.size_y, dtype=np.float64)
    xs = np.arange(spec.org_x, spec.org_x + spec.size_x, dtype=np.float64)
    yy, xx = np.meshgrid(ys, xs, indexing="ij")
    best = np.full(spec.shape, np.inf)
    for fx, fy in pts:
        np.minimum(best, np.hypot(xx - fx, yy - fy), out=best)
    return best


def approximation_error(bmap, coords) -> dict:
    """Error of bmap.distance against the exact field over reachable cells
    that are not themselves features."""
    spec = GridSpec(*bmap.origin(), bmap.width(), bmap.height())
    exact = exact_distance_field(spec, coords)
    approx = bmap.distance_map().astype(np.float64) / ORTHO_WEIGHT

    sel = ~np.ma.getmaskarray(approx) & np.isfinite(exact) & (exact > 0)
    if not sel.any():
        return {"cells": 0, "max_abs": 0.0, "mean_abs": 0.0, "max_rel": 0.0, "mean_rel": 0.0}

    a = np.ma.getdata(approx)[sel]
    e = exact[sel]
    abs_err = np.abs(a - e)
    rel_err = abs_err / e
    return {
        "cells": int(sel.sum()),
        "max_abs": float(abs_err.max()),
        "mean_abs": float(abs_err.mean()),
        "max_rel": float(rel_err.max()),
        "mean_rel": float(rel_err.mean()),
    }


def voronoi_regions(bmap) -> dict:
    """Number of cells owned by each feature position."""
    idx = bmap.index_map().compressed()
    labels, counts = np.unique(idx, return_counts=True)
    return {int(k): int(v) for k, v in zip(labels, counts)}
