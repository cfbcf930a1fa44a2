import json
from math import sqrt, cos, sin, asin, atan2, radians, degrees

from pyevspace import Vector, dot

from satwatch import config
from satwatch.core.sidereal import earthOffsetAngle
from satwatch.util.constants import EARTH_EQUATORIAL_RADIUS, EARTH_POLAR_RADIUS, EARTH_ECCENTRICITY_SQUARED, \
    EARTH_ROTATION_RATE
from satwatch.util.helpers import atan3, wrapLongitude

from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from satwatch.core.juliandate import JulianDate


def computeAngleParts(value: float) -> (int, int, float):
    """Split an angle in degrees into whole degrees, arc-minutes and arc-seconds. The sign is carried by the
    degrees."""

    wholePart = int(value)
    frac = abs(value - wholePart)

    tmp = frac * 60
    minutesWhole = int(tmp)
    seconds = (tmp - minutesWhole) * 60

    return wholePart, minutesWhole, seconds


class GeoPosition:
    """A geodetic position on or above the WGS-84 ellipsoid. Angles in degrees, altitude in kilometers. Longitude is
    normalized to [-180, 180)."""

    __slots__ = '_lat', '_lng', '_alt', '_ecef'

    def __init__(self, latitude: float, longitude: float, altitude: float = 0.0):
        if latitude < -90 or latitude > 90:
            raise ValueError(f'latitude must be between -90 and 90, not {latitude}')

        self._lat = latitude
        self._lng = wrapLongitude(longitude)
        self._alt = altitude
        self._ecef = None

    def __str__(self) -> str:
        return f'latitude: {self._lat}, longitude: {self._lng}, altitude: {self._alt}'

    def __repr__(self) -> str:
        return f'GeoPosition({self._lat}, {self._lng}, {self._alt})'

    def __eq__(self, other: 'GeoPosition') -> bool:
        if isinstance(other, GeoPosition):
            return (self._lat, self._lng, self._alt) == (other._lat, other._lng, other._alt)
        return NotImplemented

    def __hash__(self):
        return hash((self._lat, self._lng, self._alt))

    def toDict(self) -> dict:
        return {"latitude": self._lat, "longitude": self._lng, "altitude": self._alt}

    def toJson(self) -> str:
        return json.dumps(self, default=lambda o: o.toDict())

    @property
    def latitude(self) -> float:
        return self._lat

    @property
    def longitude(self) -> float:
        return self._lng

    @property
    def altitude(self) -> float:
        return self._alt

    @property
    def latitudeRadians(self) -> float:
        return radians(self._lat)

    @property
    def longitudeRadians(self) -> float:
        return radians(self._lng)

    @property
    def parts(self):
        return computeAngleParts(self._lat), computeAngleParts(self._lng)

    def getPositionVector(self) -> Vector:
        """Earth-fixed position vector in kilometers. The vector is computed once and reused."""

        if self._ecef is None:
            self._ecef = geodeticToEcef(self._lat, self._lng, self._alt)
        return self._ecef


class LookAngles:
    """The azimuth, elevation, range and range-rate of an object as seen from an observer."""

    __slots__ = '_azimuth', '_elevation', '_range', '_rangeRate', '_direction'

    _COMPASS = ('N', 'NNE', 'NE', 'ENE', 'E', 'ESE', 'SE', 'SSE',
                'S', 'SSW', 'SW', 'WSW', 'W', 'WNW', 'NW', 'NNW')

    def __init__(self, azimuth: float, elevation: float, range_: float, rangeRate: float):
        # Angles in degrees, range in kilometers, range-rate in kilometers per second.
        if not -90 <= elevation <= 90:
            raise ValueError(f'elevation must be in [-90, 90], was {elevation}')

        self._azimuth = azimuth % 360
        if self._azimuth >= 360:
            self._azimuth = 0.0
        self._elevation = elevation
        self._range = range_
        self._rangeRate = rangeRate
        self._direction = self.azimuthAngleString(self._azimuth)

    @classmethod
    def azimuthAngleString(cls, azimuth: float) -> str:
        """Converts an azimuth angle in degrees to a 16 point compass direction."""

        index = int(((azimuth + 11.25) % 360) / 22.5)
        return cls._COMPASS[index % 16]

    def toDict(self) -> dict:
        return {"azimuth": self._azimuth, "elevation": self._elevation, "range": self._range,
                "rangeRate": self._rangeRate, "direction": self._direction}

    def toJson(self) -> str:
        return json.dumps(self, default=lambda o: o.toDict())

    def __str__(self) -> str:
        return f'azimuth: {self._azimuth}, elevation: {self._elevation}, range: {self._range}, ' \
               f'range-rate: {self._rangeRate}, direction: {self._direction}'

    def __repr__(self) -> str:
        return f'LookAngles({self._azimuth}, {self._elevation}, {self._range}, {self._rangeRate})'

    @property
    def azimuth(self) -> float:
        return self._azimuth

    @property
    def elevation(self) -> float:
        return self._elevation

    @property
    def range(self) -> float:
        return self._range

    @property
    def rangeRate(self) -> float:
        return self._rangeRate

    @property
    def direction(self) -> str:
        return self._direction


def geodeticToEcef(latitude: float, longitude: float, altitude: float = 0.0) -> Vector:
    """Converts geodetic coordinates in degrees and kilometers to an earth-fixed position vector."""

    lat = radians(latitude)
    lng = radians(longitude)
    sinLat = sin(lat)
    cosLat = cos(lat)
    N = EARTH_EQUATORIAL_RADIUS / sqrt(1.0 - EARTH_ECCENTRICITY_SQUARED * sinLat * sinLat)

    return Vector((N + altitude) * cosLat * cos(lng),
                  (N + altitude) * cosLat * sin(lng),
                  (N * (1.0 - EARTH_ECCENTRICITY_SQUARED) + altitude) * sinLat)


def ecefToGeodetic(position: Vector) -> GeoPosition:
    """Converts an earth-fixed position vector to geodetic coordinates on the WGS-84 ellipsoid.

    Latitude is solved by fixed-point iteration capped at config.GEODETIC_MAX_ITERATIONS. If the cap is reached the
    last iterate is used, which is accurate to well under a millimeter for any terrestrial or orbital position."""

    x, y, z = position[0], position[1], position[2]
    p = sqrt(x * x + y * y)
    longitude = degrees(atan2(y, x))

    # On the polar axis the longitude is undefined and the height is measured from the pole.
    if p == 0.0:
        latitude = 90.0 if z >= 0 else -90.0
        return GeoPosition(latitude, 0.0, abs(z) - EARTH_POLAR_RADIUS)

    e2 = EARTH_ECCENTRICITY_SQUARED
    lat = atan2(z, p * (1.0 - e2))
    for _ in range(config.GEODETIC_MAX_ITERATIONS):
        sinLat = sin(lat)
        N = EARTH_EQUATORIAL_RADIUS / sqrt(1.0 - e2 * sinLat * sinLat)
        newLat = atan2(z + e2 * N * sinLat, p)
        if abs(newLat - lat) < config.GEODETIC_TOLERANCE:
            lat = newLat
            break
        lat = newLat

    sinLat = sin(lat)
    cosLat = cos(lat)
    N = EARTH_EQUATORIAL_RADIUS / sqrt(1.0 - e2 * sinLat * sinLat)
    # the cosine form loses precision near the poles
    if abs(cosLat) > abs(sinLat):
        altitude = p / cosLat - N
    else:
        altitude = z / sinLat - N * (1.0 - e2)

    latitude = max(-90.0, min(90.0, degrees(lat)))
    return GeoPosition(latitude, longitude, altitude)


def temeToEcef(position: Vector, velocity: Vector, time: 'JulianDate') -> (Vector, Vector):
    """Rotates a TEME state to the earth-fixed frame about the z-axis by the Greenwich sidereal angle. The velocity
    is made relative to the rotating earth."""

    theta = earthOffsetAngle(time)
    cosTheta = cos(theta)
    sinTheta = sin(theta)

    x = cosTheta * position[0] + sinTheta * position[1]
    y = -sinTheta * position[0] + cosTheta * position[1]
    rEcef = Vector(x, y, position[2])

    # v_ecef = R * v - omega x r_ecef
    vx = cosTheta * velocity[0] + sinTheta * velocity[1] + EARTH_ROTATION_RATE * y
    vy = -sinTheta * velocity[0] + cosTheta * velocity[1] - EARTH_ROTATION_RATE * x
    vEcef = Vector(vx, vy, velocity[2])

    return rEcef, vEcef


def ecefToLookAngles(position: Vector, velocity: Vector, observer: GeoPosition) -> LookAngles:
    """Computes look angles from earth-fixed position and velocity vectors of an object and an observer."""

    rho = position - observer.getPositionVector()
    rangeValue = rho.mag()

    # A degenerate zero-length line of sight is reported straight overhead.
    if rangeValue == 0.0:
        return LookAngles(0.0, 90.0, 0.0, 0.0)

    lat = observer.latitudeRadians
    lng = observer.longitudeRadians
    sinLat, cosLat = sin(lat), cos(lat)
    sinLng, cosLng = sin(lng), cos(lng)

    # south-east-zenith basis of the observer's horizon
    south = Vector(sinLat * cosLng, sinLat * sinLng, -cosLat)
    east = Vector(-sinLng, cosLng, 0.0)
    zenith = Vector(cosLat * cosLng, cosLat * sinLng, sinLat)

    s = dot(rho, south)
    e = dot(rho, east)
    z = dot(rho, zenith)

    elevation = degrees(asin(max(-1.0, min(1.0, z / rangeValue))))
    azimuth = degrees(atan3(e, -s))
    rangeRate = dot(rho, velocity) / rangeValue

    return LookAngles(azimuth, elevation, rangeValue, rangeRate)


def computeLookAngles(position: Vector, velocity: Vector, observer: GeoPosition, time: 'JulianDate') -> LookAngles:
    """Computes look angles of an object from its TEME state at time."""

    rEcef, vEcef = temeToEcef(position, velocity, time)
    return ecefToLookAngles(rEcef, vEcef, observer)
