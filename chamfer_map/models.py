# models.py
from dataclasses import dataclass
import numpy as np

@dataclass(frozen=True)
class GridSpec:
    org_x: int
    org_y: int
    size_x: int
    size_y: int

    @property
    def valid(self) -> bool:
        return self.size_x > 0 and self.size_y > 0

    @property
    def shape(self):
        return (self.size_y, self.size_x)

@dataclass
class FeaturePoint:
    x: int
    y: int

@dataclass
class ChamferLayers:
    distance: np.ndarray   # (H,W) int, config.UNSET where no path yet
    index: np.ndarray      # (H,W) int, config.NO_FEATURE where no path yet
