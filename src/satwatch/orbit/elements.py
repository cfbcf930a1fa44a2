from math import sqrt, sin, cos, acos, atan2, degrees, pi

from pyevspace import Vector, cross, dot

from satwatch import config
from satwatch.util.constants import EARTH_MU, TWOPI, SECONDS_PER_DAY
from satwatch.util.helpers import atan3

from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from satwatch.core.juliandate import JulianDate
    from satwatch.orbit.state import StateVector

# below this eccentricity or node vector magnitude an orbit is treated as circular or equatorial
_SINGULAR_TOLERANCE = 1e-11


def _angleBetween(lhs: Vector, rhs: Vector) -> float:
    cosine = dot(lhs, rhs) / (lhs.mag() * rhs.mag())
    return acos(max(-1.0, min(1.0, cosine)))


class Elements:
    """Osculating Keplerian elements of an orbit at an epoch. Angles are in degrees and the semi-major axis is in
    kilometers."""

    __slots__ = '_raan', '_inc', '_aop', '_ecc', '_sma', '_meanAnomaly', '_trueAnomaly', '_epoch'

    def __init__(self, raan: float, inclination: float, argumentOfPerigee: float, eccentricity: float,
                 semiMajorAxis: float, meanAnomaly: float, epoch: 'JulianDate', trueAnomaly: float = None):
        self._raan = raan
        self._inc = inclination
        self._aop = argumentOfPerigee
        self._ecc = eccentricity
        self._sma = semiMajorAxis
        self._meanAnomaly = meanAnomaly
        self._epoch = epoch
        if trueAnomaly is None:
            trueAnomaly = degrees(meanToTrueAnomaly(meanAnomaly * pi / 180, eccentricity))
        self._trueAnomaly = trueAnomaly

    @classmethod
    def fromState(cls, position: Vector, velocity: Vector, epoch: 'JulianDate', mu: float = EARTH_MU) -> 'Elements':
        """Computes the elements from position (km) and velocity (km/s) vectors. For state vectors from the SGP4
        model these are the osculating elements, which vary around the mean elements of the element set.

        The argument of perigee of a circular orbit is zero and its anomalies are measured from the ascending node.
        The node of an equatorial orbit is on the x-axis."""

        r = position.mag()
        v = velocity.mag()
        momentum = cross(position, velocity)
        node = Vector(-momentum[1], momentum[0], 0.0)
        eccentricityVector = (position * (v * v - mu / r) - velocity * dot(position, velocity)) * (1.0 / mu)

        ecc = eccentricityVector.mag()
        energy = v * v / 2 - mu / r
        sma = -mu / (2 * energy)
        inc = acos(max(-1.0, min(1.0, momentum[2] / momentum.mag())))

        if node.mag() < _SINGULAR_TOLERANCE:
            node = Vector(1.0, 0.0, 0.0)
            raan = 0.0
        else:
            raan = atan3(node[1], node[0])

        if ecc < _SINGULAR_TOLERANCE:
            periapsis = node
            aop = 0.0
        else:
            periapsis = eccentricityVector
            aop = _angleBetween(node, eccentricityVector)
            # the sign of the angle comes from the out of plane component
            if dot(cross(node, eccentricityVector), momentum) < 0:
                aop = TWOPI - aop

        trueAnomaly = _angleBetween(periapsis, position)
        if dot(cross(periapsis, position), momentum) < 0:
            trueAnomaly = TWOPI - trueAnomaly

        meanAnomaly = trueToMeanAnomaly(trueAnomaly, ecc) if ecc < 1.0 else trueAnomaly

        return cls(degrees(raan), degrees(inc), degrees(aop), ecc, sma, degrees(meanAnomaly), epoch,
                   degrees(trueAnomaly))

    @classmethod
    def fromStateVector(cls, state: 'StateVector', mu: float = EARTH_MU) -> 'Elements':
        return cls.fromState(state.position, state.velocity, state.time, mu)

    def __str__(self):
        header = ' elements |  raan   |   inc   |   aop   |   ecc    |   sma    | mean anom | true anom '
        values = '  values  | {:^7.3f} | {:^7.3f} | {:^7.3f} | {:^8.6f} | {:^8.2f} | {:^9.4f} | {:^9.4f} ' \
            .format(self._raan, self._inc, self._aop, self._ecc, self._sma, self._meanAnomaly, self._trueAnomaly)
        return f'{header}\n{values}'

    def __repr__(self):
        return f'Elements({self._raan}, {self._inc}, {self._aop}, {self._ecc}, {self._sma}, {self._meanAnomaly}, ' \
               f'{self._epoch!r}, {self._trueAnomaly})'

    def toDict(self) -> dict:
        return {"raan": self._raan, "inclination": self._inc, "argumentOfPerigee": self._aop,
                "eccentricity": self._ecc, "semiMajorAxis": self._sma, "meanAnomaly": self._meanAnomaly,
                "trueAnomaly": self._trueAnomaly, "epoch": self._epoch.toDict()}

    @property
    def raan(self) -> float:
        return self._raan

    @property
    def inclination(self) -> float:
        return self._inc

    @property
    def argumentOfPerigee(self) -> float:
        return self._aop

    @property
    def eccentricity(self) -> float:
        return self._ecc

    @property
    def semiMajorAxis(self) -> float:
        return self._sma

    @property
    def meanAnomaly(self) -> float:
        return self._meanAnomaly

    @property
    def trueAnomaly(self) -> float:
        return self._trueAnomaly

    @property
    def epoch(self) -> 'JulianDate':
        return self._epoch

    @property
    def meanMotion(self) -> float:
        """Mean motion in revolutions per day."""
        return smaToMeanMotion(self._sma) * SECONDS_PER_DAY / TWOPI


def trueToMeanAnomaly(trueAnomaly: float, eccentricity: float) -> float:
    """Converts a true anomaly in radians to a mean anomaly in radians."""

    eccentricAnomaly = trueToEccentricAnomaly(trueAnomaly, eccentricity)
    return eccentricToMeanAnomaly(eccentricAnomaly, eccentricity) % TWOPI


def trueToEccentricAnomaly(trueAnomaly: float, eccentricity: float) -> float:
    """Converts a true anomaly to an eccentric anomaly in radians."""

    y = sqrt(1 - (eccentricity * eccentricity)) * sin(trueAnomaly)
    return atan3(y, cos(trueAnomaly) + eccentricity)


def meanToTrueAnomaly(meanAnomaly: float, eccentricity: float) -> float:
    """Converts a mean anomaly in radians to a true anomaly in radians."""

    eccAnom = meanToEccentricAnomaly(meanAnomaly, eccentricity)
    return eccentricToTrueAnomaly(eccAnom, eccentricity) % TWOPI


def meanToEccentricAnomaly(meanAnomaly: float, eccentricity: float) -> float:
    """Converts a mean anomaly in radians to an eccentric anomaly in radians with Newton's method. At most
    config.KEPLER_MAX_ITERATIONS steps are taken."""

    Ej = meanAnomaly if eccentricity < 0.8 else pi
    for _ in range(config.KEPLER_MAX_ITERATIONS):
        numerator = Ej - (eccentricity * sin(Ej)) - meanAnomaly
        denominator = 1 - eccentricity * cos(Ej)
        Ej1 = Ej - (numerator / denominator)
        if abs(Ej1 - Ej) <= config.KEPLER_TOLERANCE:
            return Ej1
        Ej = Ej1

    return Ej


def eccentricToTrueAnomaly(eccentricAnomaly: float, eccentricity: float) -> float:
    """Converts an eccentric anomaly in radians to a true anomaly in radians."""

    beta = eccentricity / (1 + sqrt(1 - eccentricity * eccentricity))
    return eccentricAnomaly + 2 * atan2(beta * sin(eccentricAnomaly), 1 - beta * cos(eccentricAnomaly))


def eccentricToMeanAnomaly(eccentricAnomaly: float, eccentricity: float) -> float:
    """Converts an eccentric anomaly to a mean anomaly in radians."""

    return eccentricAnomaly - eccentricity * sin(eccentricAnomaly)


def smaToMeanMotion(semiMajorAxis: float, mu: float = EARTH_MU) -> float:
    """Converts a semi-major axis in kilometers to a mean motion in radians per second."""

    return sqrt(mu / (semiMajorAxis * semiMajorAxis * semiMajorAxis))


def meanMotionToSma(meanMotion: float, mu: float = EARTH_MU) -> float:
    """Converts a mean motion in radians per second to a semi-major axis in kilometers."""

    return (mu / (meanMotion * meanMotion)) ** (1.0 / 3.0)
