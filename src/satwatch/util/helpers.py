from math import atan2

from satwatch.util.constants import TWOPI


def atan3(y: float, x: float) -> float:
    """A version of atan2 whose return value is between 0 and 2pi."""

    angle = atan2(y, x)

    if angle < 0:
        return angle + TWOPI
    return angle


def wrapDegrees(angle: float) -> float:
    """Wrap an angle in degrees to [0, 360)."""

    value = angle % 360.0
    # -1e-20 % 360.0 rounds to 360.0
    if value >= 360.0:
        return 0.0
    return value


def wrapLongitude(angle: float) -> float:
    """Wrap a longitude in degrees to [-180, 180)."""

    return wrapDegrees(angle + 180.0) - 180.0
