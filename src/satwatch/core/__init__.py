from .coordinates import (
    GeoPosition,
    LookAngles,
    temeToEcef,
    ecefToGeodetic,
    geodeticToEcef,
    ecefToLookAngles,
    computeLookAngles,
    computeAngleParts,
)

from .exceptions import (
    SatwatchException,
    InvalidRange,
)

from .juliandate import (
    JulianDate,
    now,
    J2000,
)

from .sidereal import (
    greenwichSiderealAngle,
    earthOffsetAngle,
    siderealTime,
    localSiderealTime,
)

__all__ = (
    # coordinates.py
    'GeoPosition',
    'LookAngles',
    'temeToEcef',
    'ecefToGeodetic',
    'geodeticToEcef',
    'ecefToLookAngles',
    'computeLookAngles',
    'computeAngleParts',

    # exceptions.py
    'SatwatchException',
    'InvalidRange',

    # juliandate.py
    'JulianDate',
    'now',
    'J2000',

    # sidereal.py
    'greenwichSiderealAngle',
    'earthOffsetAngle',
    'siderealTime',
    'localSiderealTime',
)
