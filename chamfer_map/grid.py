# region Imports
from typing import Iterator, Tuple
from chamfer_map.config import ORTHO_WEIGHT, DIAG_WEIGHT
from chamfer_map.models import GridSpec
# endregion

# region Neighbor Masks
# (dr, dc, weight) in scan order; the first minimum found wins a tie
FORWARD_MASK = (
    (-1, 0, ORTHO_WEIGHT),   # up
    (0, -1, ORTHO_WEIGHT),   # left
    (-1, -1, DIAG_WEIGHT),   # upper-left
    (-1, 1, DIAG_WEIGHT),    # upper-right
)

BACKWARD_MASK = (
    (1, 0, ORTHO_WEIGHT),    # down
    (0, 1, ORTHO_WEIGHT),    # right
    (1, 1, DIAG_WEIGHT),     # lower-right
    (1, -1, DIAG_WEIGHT),    # lower-left
)


def masked_neighbors(r: int, c: int, H: int, W: int, mask) -> Iterator[Tuple[int, int, int]]:
    for dr, dc, w in mask:
        rr, cc = r + dr, c + dc
        if 0 <= rr < H and 0 <= cc < W:
            yield rr, cc, w
# endregion

# region Coordinate Helpers
def in_map(spec: GridSpec, x: int, y: int) -> bool:
    return (spec.org_x <= x < spec.org_x + spec.size_x
            and spec.org_y <= y < spec.org_y + spec.size_y)


def xy_to_rc(spec: GridSpec, x: int, y: int) -> Tuple[int, int]:
    return (y - spec.org_y, x - spec.org_x)


def rc_to_xy(spec: GridSpec, r: int, c: int) -> Tuple[int, int]:
    return (c + spec.org_x, r + spec.org_y)
# endregion
