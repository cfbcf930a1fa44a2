import json
import logging
from dataclasses import dataclass, asdict

from satwatch import config
from satwatch.batch.engine import propagateAll, trajectory
from satwatch.core.coordinates import GeoPosition, LookAngles
from satwatch.core.juliandate import now
from satwatch.orbit.exceptions import PropagationError
from satwatch.orbit.sgp4 import Propagator
from satwatch.orbit.state import StateVector
from satwatch.orbit.tle import TwoLineElement
from satwatch.satellitepass.satpass import SatellitePass, findPasses

from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from satwatch.core.juliandate import JulianDate

logger = logging.getLogger(__name__)


class GroundStation:
    """A named observer with its own minimum elevation for visibility, in degrees."""

    __slots__ = '_name', '_position', '_minElevation'

    def __init__(self, name: str, position: GeoPosition, minElevation: float = None):
        if minElevation is None:
            minElevation = config.DEFAULT_MIN_ELEVATION
        if not -90 <= minElevation <= 90:
            raise ValueError(f'minElevation must be in [-90, 90], was {minElevation}')

        self._name = name
        self._position = position
        self._minElevation = minElevation

    def __str__(self) -> str:
        return f'{self._name} ({self._position}), minimum elevation: {self._minElevation}'

    def __repr__(self) -> str:
        return f'GroundStation({self._name!r}, {self._position!r}, {self._minElevation})'

    def toDict(self) -> dict:
        return {"name": self._name, "position": self._position.toDict(), "minElevation": self._minElevation}

    def toJson(self) -> str:
        return json.dumps(self, default=lambda o: o.toDict())

    @property
    def name(self) -> str:
        return self._name

    @property
    def position(self) -> GeoPosition:
        return self._position

    @property
    def minElevation(self) -> float:
        return self._minElevation


@dataclass(frozen=True)
class SatelliteInfo:
    catalogNumber: int
    name: str
    designator: str
    epoch: str
    period: float
    deepSpace: bool

    def toDict(self) -> dict:
        return asdict(self)


class Tracker:
    """Holds propagators for a catalog of element sets keyed by catalog number. Looking up a catalog number that
    was never added raises KeyError."""

    __slots__ = '_propagators'

    def __init__(self):
        self._propagators: dict[int, Propagator] = {}

    def __len__(self) -> int:
        return len(self._propagators)

    def __contains__(self, catalogNumber: int) -> bool:
        return catalogNumber in self._propagators

    def _getPropagator(self, catalogNumber: int) -> Propagator:
        try:
            return self._propagators[catalogNumber]
        except KeyError:
            raise KeyError(f'satellite {catalogNumber} is not tracked') from None

    def addTle(self, tle: TwoLineElement | str) -> int:
        """Adds or replaces an element set and returns its catalog number. Initialization errors are raised here,
        before anything is stored."""

        if isinstance(tle, str):
            tle = TwoLineElement(tle)
        propagator = Propagator(tle)

        if tle.catalogNumber in self._propagators:
            logger.info('replacing element set of %s (%d)', tle.name, tle.catalogNumber)
        else:
            logger.info('tracking %s (%d)', tle.name, tle.catalogNumber)
        self._propagators[tle.catalogNumber] = propagator

        return tle.catalogNumber

    def getTle(self, catalogNumber: int) -> TwoLineElement:
        return self._getPropagator(catalogNumber).tle

    def getPropagator(self, catalogNumber: int) -> Propagator:
        return self._getPropagator(catalogNumber)

    def listSatellites(self) -> list[SatelliteInfo]:
        return [self.getSatelliteInfo(number) for number in sorted(self._propagators)]

    def getSatelliteInfo(self, catalogNumber: int) -> SatelliteInfo:
        propagator = self._getPropagator(catalogNumber)
        tle = propagator.tle
        return SatelliteInfo(tle.catalogNumber, tle.name, tle.designator, tle.epoch.date(), tle.period,
                             propagator.isDeepSpace)

    def getState(self, catalogNumber: int, time: 'JulianDate' = None) -> StateVector:
        if time is None:
            time = now()
        return self._getPropagator(catalogNumber).propagate(time)

    def getPosition(self, catalogNumber: int, time: 'JulianDate' = None) -> GeoPosition:
        """The sub-satellite point and altitude at time, the current time by default."""

        return self.getState(catalogNumber, time).toGeodetic()

    def getPositions(self, catalogNumber: int, start: 'JulianDate', end: 'JulianDate',
                     step: float = None) -> list[tuple['JulianDate', GeoPosition]]:
        """Returns (time, position) pairs from start to end every step seconds. Instants where propagation fails
        are left out."""

        if step is None:
            step = config.DEFAULT_TRAJECTORY_STEP
        samples = trajectory(self._getPropagator(catalogNumber), start, end, step)

        positions = []
        for time in samples.times():
            try:
                state = samples.propagator.propagate(time)
            except PropagationError as e:
                logger.debug('skipping %s at %s: %s', catalogNumber, time.date(), e)
                continue
            positions.append((time, state.toGeodetic()))

        return positions

    def getLookAngles(self, catalogNumber: int, observer: GroundStation | GeoPosition,
                      time: 'JulianDate' = None) -> LookAngles:
        if isinstance(observer, GroundStation):
            observer = observer.position
        return self.getState(catalogNumber, time).lookAngles(observer)

    def predictPasses(self, catalogNumber: int, station: GroundStation, start: 'JulianDate' = None,
                      hours: float = 24.0) -> list[SatellitePass]:
        """Passes over station above its minimum elevation in the hours following start."""

        if start is None:
            start = now()
        end = start.future(hours / 24.0)
        return findPasses(self._getPropagator(catalogNumber), station.position, start, end, station.minElevation)

    def propagateAll(self, time: 'JulianDate' = None) -> dict[int, StateVector | PropagationError]:
        """Propagates every tracked satellite to time, keyed by catalog number. Failed objects map to their
        PropagationError."""

        if time is None:
            time = now()
        numbers = sorted(self._propagators)
        results = propagateAll([self._propagators[number] for number in numbers], time)

        return dict(zip(numbers, results))
