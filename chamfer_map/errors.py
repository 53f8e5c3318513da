# errors.py


class ChamferMapError(Exception):
    """Base class for chamfer map failures."""


class GridConfigError(ChamferMapError, ValueError):
    """Grid geometry or pre-built map shapes are unusable."""


class MapContractError(ChamferMapError, RuntimeError):
    """A query was made that the map cannot answer: invalid map, cell outside
    the grid, or nearest() on an unreachable cell. Always a caller bug."""
