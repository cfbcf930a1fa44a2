from .info import (
    PositionInfo,
)

from .satpass import (
    ElevationFunction,
    SatellitePass,
    PassFinder,
    findPasses,
)

__all__ = (
    # info.py
    'PositionInfo',

    # satpass.py
    'ElevationFunction',
    'SatellitePass',
    'PassFinder',
    'findPasses',
)
