"""Borgefors 3-4 chamfer distance and nearest-feature maps over a 2D grid."""

from chamfer_map.borgefors import BorgeforsMap
from chamfer_map.errors import ChamferMapError, GridConfigError, MapContractError
from chamfer_map.models import FeaturePoint, GridSpec

__all__ = [
    'BorgeforsMap',
    'ChamferMapError',
    'GridConfigError',
    'MapContractError',
    'FeaturePoint',
    'GridSpec',
]
