import json

from satwatch.core.coordinates import LookAngles

from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from satwatch.core.juliandate import JulianDate


class PositionInfo:
    """Look angles of a satellite at one instant of a pass."""

    __slots__ = '_lookAngles', '_time'

    def __init__(self, time: 'JulianDate', lookAngles: LookAngles):
        self._time = time
        self._lookAngles = lookAngles

    def __str__(self):
        # the instance name is filled in by SatellitePass
        return ' {{:^10}} | {:^12} | {:^9.2f} | {:^7.2f} {:^5} | {:^9.1f} ' \
            .format(self._time.time(), self.elevation, self.azimuth, '({})'.format(self.direction), self.range)

    def __repr__(self):
        return f'PositionInfo({self._time!r}, {self._lookAngles!r})'

    def toJson(self) -> str:
        return json.dumps(self, default=lambda o: o.toDict())

    def toDict(self) -> dict:
        return {"time": self._time.toDict(), "azimuth": self.azimuth, "elevation": self.elevation,
                "range": self.range, "direction": self.direction}

    @property
    def lookAngles(self) -> LookAngles:
        return self._lookAngles

    @property
    def time(self) -> 'JulianDate':
        return self._time

    @property
    def azimuth(self) -> float:
        return self._lookAngles.azimuth

    @property
    def elevation(self) -> float:
        return self._lookAngles.elevation

    @property
    def range(self) -> float:
        return self._lookAngles.range

    @property
    def direction(self) -> str:
        return self._lookAngles.direction
