# app.py — Slim Flask API around the Borgefors chamfer map
# deps: pip install flask numpy pillow matplotlib

from __future__ import annotations
import logging
from typing import Any, Dict, List, Tuple
from flask import Flask, request, jsonify, make_response

from chamfer_map.config import API_HOST, API_PORT, MAX_CELLS, LOG_LEVEL, MAX_REL_ERROR
from chamfer_map.borgefors import BorgeforsMap
from chamfer_map.errors import GridConfigError, MapContractError
from chamfer_map.metrics import voronoi_regions
from chamfer_map.viz import render_distance_png

log = logging.getLogger(__name__)

app = Flask(__name__)

# ======= CORS =======
@app.after_request
def _cors(resp):
    resp.headers["Access-Control-Allow-Origin"]  = "*"
    resp.headers["Access-Control-Allow-Headers"] = "*"
    resp.headers["Access-Control-Allow-Methods"] = "GET,POST,OPTIONS"
    return resp

# ======= errors =======
@app.errorhandler(GridConfigError)
def _bad_config(e):
    return jsonify({"error": str(e)}), 400

@app.errorhandler(MapContractError)
def _contract(e):
    return jsonify({"error": str(e)}), 409

# ======= request parsing =======
def _pair(v: Any, name: str) -> Tuple[int, int]:
    try:
        a, b = v
        return int(a), int(b)
    except (TypeError, ValueError, OverflowError) as e:
        raise GridConfigError(f"{name} must be a pair of integers") from e


def _pairs(v: Any, name: str) -> List[Tuple[int, int]]:
    if v is None:
        return []
    if not isinstance(v, list):
        raise GridConfigError(f"{name} must be a list of [x, y] pairs")
    return [_pair(p, name) for p in v]


def _build_from_body(data: Dict[str, Any]) -> Tuple[BorgeforsMap, List[Tuple[int, int]]]:
    """
    JSON body:
    {
      "origin":   [x, y],             // default [0, 0]
      "size":     [width, height],    // required
      "features": [[x, y], ...],      // may be empty
      "queries":  [[x, y], ...]       // optional
    }
    """
    if "size" not in data:
        raise GridConfigError("size=[width,height] required")
    org_x, org_y = _pair(data.get("origin", [0, 0]), "origin")
    size_x, size_y = _pair(data["size"], "size")
    if size_x * size_y > MAX_CELLS:
        raise GridConfigError(f"grid of {size_x}x{size_y} exceeds {MAX_CELLS} cells")

    features = _pairs(data.get("features"), "features")
    queries = _pairs(data.get("queries"), "queries")
    return BorgeforsMap(org_x, org_y, size_x, size_y, features), queries


def _answer(bmap: BorgeforsMap, x: int, y: int) -> Dict[str, Any]:
    out: Dict[str, Any] = {"x": x, "y": y, "in_map": bmap.in_map(x, y)}
    if not out["in_map"]:
        return out
    d = bmap.distance(x, y)
    if d == float("inf"):
        out.update({"distance": None, "nearest": None, "nearest_point": None})
    else:
        out.update({"distance": d, "nearest": bmap.nearest(x, y),
                    "nearest_point": list(bmap.nearest_point(x, y))})
    return out

# ======= routes =======
@app.route("/", methods=["GET"])
def root():
    return {"ok": True, "metric": "chamfer 3-4", "max_rel_error": MAX_REL_ERROR,
            "build": "/chamfer/build (POST JSON)", "png": "/chamfer/png (POST JSON)"}

@app.route("/chamfer/build", methods=["POST"])
def chamfer_build():
    data = request.get_json(force=True, silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "JSON object body required"}), 400

    bmap, queries = _build_from_body(data)
    index = bmap.index_map()
    resp: Dict[str, Any] = {
        "origin": list(bmap.origin()),
        "size": [bmap.width(), bmap.height()],
        "reachable_cells": int(index.count()),
        "regions": {str(k): v for k, v in voronoi_regions(bmap).items()},
        "results": [_answer(bmap, x, y) for x, y in queries],
    }
    if data.get("include_maps"):
        resp["distance_map"] = bmap.distance_map().filled(-1).tolist()
        resp["index_map"] = index.filled(-1).tolist()
    return jsonify(resp)

@app.route("/chamfer/png", methods=["POST"])
def chamfer_png():
    data = request.get_json(force=True, silent=True)
    if not isinstance(data, dict):
        return jsonify({"error": "JSON object body required"}), 400

    bmap, _ = _build_from_body(data)
    resp = make_response(render_distance_png(bmap))
    resp.headers["Content-Type"] = "image/png"
    return resp


if __name__ == "__main__":
    logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    app.run(host=API_HOST, port=API_PORT, threaded=True)
