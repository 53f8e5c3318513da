# config.py
import os

# 3-4 chamfer weights; dividing by ORTHO_WEIGHT calibrates to grid units
ORTHO_WEIGHT = 3
DIAG_WEIGHT = 4

# Internal markers, never exposed as finite values
UNSET = 2**31 - 1
NO_FEATURE = -1

# Worst-case relative error of the 3-4 metric against true Euclidean distance
MAX_REL_ERROR = 0.08

# HTTP API
API_HOST = os.environ.get("CHAMFER_MAP_HOST", "0.0.0.0")
API_PORT = int(os.environ.get("CHAMFER_MAP_PORT", "8081"))
MAX_CELLS = int(os.environ.get("CHAMFER_MAP_MAX_CELLS", str(1024 * 1024)))

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()
