from math import fmod

from satwatch.util.constants import TWOPI, DEG2RAD, RAD2DEG, J2000_JD, JULIAN_CENTURY

from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from satwatch.core.juliandate import JulianDate


def greenwichSiderealAngle(jd: float) -> float:
    """Greenwich mean sidereal angle in radians [0, 2pi) from a UT1 Julian date number, using the IAU-82 polynomial."""

    tut1 = (jd - J2000_JD) / JULIAN_CENTURY
    temp = -6.2e-6 * tut1 * tut1 * tut1 + 0.093104 * tut1 * tut1 \
        + (876600.0 * 3600 + 8640184.812866) * tut1 + 67310.54841
    # 360 / 86400 = 1 / 240, seconds to degrees
    temp = fmod(temp * DEG2RAD / 240.0, TWOPI)

    if temp < 0.0:
        temp += TWOPI
    return temp


def earthOffsetAngle(time: 'JulianDate') -> float:
    """Computes the earth offset angle from the inertial reference frame in radians."""

    return greenwichSiderealAngle(time.value)


def siderealTime(time: 'JulianDate') -> float:
    """Greenwich mean sidereal time in degrees [0, 360)."""

    degrees = earthOffsetAngle(time) * RAD2DEG
    return 0.0 if degrees >= 360.0 else degrees


def localSiderealTime(time: 'JulianDate', longitude: float) -> float:
    """Local mean sidereal time in degrees [0, 360), for an east positive longitude in degrees."""

    lst = (siderealTime(time) + longitude) % 360.0
    return 0.0 if lst >= 360.0 else lst
