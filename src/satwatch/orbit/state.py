import json

from pyevspace import Vector

from satwatch.core.coordinates import GeoPosition, LookAngles, temeToEcef, ecefToGeodetic, computeLookAngles

from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from satwatch.core.juliandate import JulianDate


class StateVector:
    """Position (km) and velocity (km/s) in the TEME inertial frame at an instant."""

    __slots__ = '_position', '_velocity', '_time'

    def __init__(self, position: Vector, velocity: Vector, time: 'JulianDate'):
        self._position = position
        self._velocity = velocity
        self._time = time

    def __str__(self) -> str:
        return f'position: {list(self._position)}, velocity: {list(self._velocity)}, time: {self._time.date()}'

    def __repr__(self) -> str:
        return f'StateVector({list(self._position)}, {list(self._velocity)}, {self._time!r})'

    def __iter__(self):
        # unpacks as (position, velocity)
        return iter((self._position, self._velocity))

    def toDict(self) -> dict:
        return {"position": list(self._position), "velocity": list(self._velocity), "time": self._time.toDict()}

    def toJson(self) -> str:
        return json.dumps(self, default=lambda o: o.toDict())

    @property
    def position(self) -> Vector:
        return self._position

    @property
    def velocity(self) -> Vector:
        return self._velocity

    @property
    def time(self) -> 'JulianDate':
        return self._time

    @property
    def radius(self) -> float:
        return self._position.mag()

    @property
    def speed(self) -> float:
        """Magnitude of the inertial velocity in km/s."""
        return self._velocity.mag()

    def toEcef(self) -> (Vector, Vector):
        return temeToEcef(self._position, self._velocity, self._time)

    def toGeodetic(self) -> GeoPosition:
        """The sub-satellite point and altitude on the WGS-84 ellipsoid."""

        position, _ = self.toEcef()
        return ecefToGeodetic(position)

    def lookAngles(self, observer: GeoPosition) -> LookAngles:
        return computeLookAngles(self._position, self._velocity, observer, self._time)
