import json
import logging
from dataclasses import dataclass
from math import ceil

from satwatch import config
from satwatch.core._analysis import AnalyticFunction, Boundary, Point, refineCrossing, findMaximum
from satwatch.core.exceptions import InvalidRange
from satwatch.satellitepass.info import PositionInfo
from satwatch.util.constants import SECONDS_PER_DAY, SECONDS_PER_MINUTE

from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from satwatch.core.coordinates import GeoPosition
    from satwatch.core.juliandate import JulianDate
    from satwatch.orbit.sgp4 import Propagator

logger = logging.getLogger(__name__)


class ElevationFunction(AnalyticFunction):
    """Elevation of a satellite above an observer's minimum elevation, in degrees. Positive values mean the
    satellite is above the threshold."""

    __slots__ = '_propagator', '_observer', '_minElevation'

    def __init__(self, propagator: 'Propagator', observer: 'GeoPosition', minElevation: float):
        self._propagator = propagator
        self._observer = observer
        self._minElevation = minElevation

    def compute(self, time: 'JulianDate') -> float:
        state = self._propagator.propagate(time)
        return state.lookAngles(self._observer).elevation - self._minElevation

    def positionInfo(self, time: 'JulianDate') -> PositionInfo:
        state = self._propagator.propagate(time)
        return PositionInfo(time, state.lookAngles(self._observer))


class SatellitePass:
    """A single visibility window of a satellite from an observer: acquisition of signal (aos), time of closest
    approach (tca) and loss of signal (los). When the window was cut by the bounds of the search the aos or los is
    the search bound and aosTruncated or losTruncated is set."""

    __slots__ = '_name', '_infos', '_aosTruncated', '_losTruncated'

    def __init__(self, aosInfo: PositionInfo, tcaInfo: PositionInfo, losInfo: PositionInfo,
                 aosTruncated: bool = False, losTruncated: bool = False, name: str = ''):
        self._name = name
        self._infos = {'aos': aosInfo, 'tca': tcaInfo, 'los': losInfo}
        self._aosTruncated = aosTruncated
        self._losTruncated = losTruncated

    def __str__(self):
        width = 64
        if self._name == '':
            title = 'Pass details at {}'.format(self.tca.date())
        else:
            title = 'Pass details for {}, at {}'.format(self._name, self.tca.date())
        heading = ' {:^10} | {:^12} | elevation | {:^13} | range (km) '.format('instance', 'time', 'azimuth')
        lineBreak = '-' * width
        string = '{:^{w}}\n{}\n'.format(title, heading, w=width)

        for name in ('aos', 'tca', 'los'):
            label = name + '*' if self._isTruncated(name) else name
            string += '{}\n{}\n'.format(lineBreak, str(self._infos[name]).format(label))
        return string

    def __repr__(self):
        return f'SatellitePass({self.aosInfo!r}, {self.tcaInfo!r}, {self.losInfo!r}, {self._aosTruncated}, ' \
               f'{self._losTruncated}, {self._name!r})'

    def _isTruncated(self, name: str) -> bool:
        return (name == 'aos' and self._aosTruncated) or (name == 'los' and self._losTruncated)

    def toJson(self) -> str:
        return json.dumps(self, default=lambda o: o.toDict())

    def toDict(self) -> dict:
        return {"name": self._name, "aosInfo": self.aosInfo.toDict(), "tcaInfo": self.tcaInfo.toDict(),
                "losInfo": self.losInfo.toDict(), "maxElevation": self.maxElevation, "duration": self.duration,
                "aosTruncated": self._aosTruncated, "losTruncated": self._losTruncated}

    @property
    def name(self) -> str:
        return self._name

    @property
    def aosInfo(self) -> PositionInfo:
        return self._infos['aos']

    @property
    def tcaInfo(self) -> PositionInfo:
        return self._infos['tca']

    @property
    def losInfo(self) -> PositionInfo:
        return self._infos['los']

    @property
    def aos(self) -> 'JulianDate':
        return self._infos['aos'].time

    @property
    def tca(self) -> 'JulianDate':
        return self._infos['tca'].time

    @property
    def los(self) -> 'JulianDate':
        return self._infos['los'].time

    @property
    def maxElevation(self) -> float:
        return self._infos['tca'].elevation

    @property
    def duration(self) -> float:
        """Time between aos and los in seconds."""
        return (self.los - self.aos) * SECONDS_PER_DAY

    @property
    def durationMinutes(self) -> float:
        return self.duration / SECONDS_PER_MINUTE

    @property
    def aosTruncated(self) -> bool:
        return self._aosTruncated

    @property
    def losTruncated(self) -> bool:
        return self._losTruncated

    @property
    def truncated(self) -> bool:
        return self._aosTruncated or self._losTruncated


@dataclass(frozen=True)
class _Window:
    aos: Point
    los: Point
    aosTruncated: bool
    losTruncated: bool


class PassFinder:
    """Searches a time span for the visibility windows of one satellite from one observer.

    The elevation is sampled every step seconds. A sign change of the elevation above the minimum between two
    samples brackets a rise or set, which is then bisected to config.PASS_TIME_TOLERANCE. A sample that is a local
    maximum while still below the minimum gets a golden-section search of its neighborhood, which finds passes
    shorter than the step. A pass that rises and sets again entirely between two samples with neither neighbor a
    local maximum can still be missed, so the step must be small compared to the shortest pass of interest."""

    __slots__ = '_propagator', '_observer', '_minElevation', '_step', '_function'

    def __init__(self, propagator: 'Propagator', observer: 'GeoPosition', minElevation: float = None,
                 step: float = None):
        if minElevation is None:
            minElevation = config.DEFAULT_MIN_ELEVATION
        if step is None:
            step = config.PASS_SAMPLE_STEP
        if step <= 0:
            raise InvalidRange(f'pass search step must be positive, got {step}', step=step)

        self._propagator = propagator
        self._observer = observer
        self._minElevation = minElevation
        self._step = step
        self._function = ElevationFunction(propagator, observer, minElevation)

    @property
    def propagator(self) -> 'Propagator':
        return self._propagator

    @property
    def observer(self) -> 'GeoPosition':
        return self._observer

    @property
    def minElevation(self) -> float:
        return self._minElevation

    @property
    def step(self) -> float:
        return self._step

    def _samplePoints(self, start: 'JulianDate', end: 'JulianDate') -> list[Point]:
        count = ceil((end - start) * SECONDS_PER_DAY / self._step)
        times = [start.futureSeconds(i * self._step) for i in range(count)]
        # the last sample is always the end of the search
        times = [time for time in times if time < end] + [end]

        return [self._function.computePoint(time) for time in times]

    def _refine(self, point1: Point, point2: Point) -> Point:
        boundary = Boundary(point1, point2, self._function)
        return refineCrossing(boundary, config.PASS_TIME_TOLERANCE, config.PASS_MAX_BISECTIONS)

    def _findCrossingWindows(self, points: list[Point]) -> list[_Window]:
        windows = []
        aos = points[0] if points[0].above else None
        aosTruncated = aos is not None

        for previous, current in zip(points, points[1:]):
            if not previous.above and current.above:
                aos = self._refine(previous, current)
                aosTruncated = False
            elif previous.above and not current.above:
                los = self._refine(previous, current)
                windows.append(_Window(aos, los, aosTruncated, False))
                aos = None

        if aos is not None:
            windows.append(_Window(aos, points[-1], aosTruncated, True))

        return windows

    def _findShortWindows(self, points: list[Point]) -> list[_Window]:
        windows = []
        for i, current in enumerate(points):
            left = points[i - 1] if i > 0 else None
            right = points[i + 1] if i + 1 < len(points) else None
            neighbors = [p for p in (left, current, right) if p is not None]

            if len(neighbors) < 2 or any(p.above for p in neighbors):
                continue
            if (left is not None and current.y <= left.y) or (right is not None and current.y < right.y):
                continue

            peak = findMaximum(self._function, neighbors[0].x, neighbors[-1].x, config.PASS_TIME_TOLERANCE,
                               config.PEAK_MAX_ITERATIONS)
            if peak.above:
                logger.debug('found a pass between samples at %s', peak.x.date())
                aos = self._refine(neighbors[0], peak)
                los = self._refine(peak, neighbors[-1])
                windows.append(_Window(aos, los, False, False))

        return windows

    def _findPeak(self, window: _Window, points: list[Point]) -> Point:
        candidates = [window.aos, window.los] + [p for p in points if window.aos.x < p.x < window.los.x]
        best = max(candidates, key=lambda p: p.y)

        lower = max(window.aos.x, best.x.futureSeconds(-self._step))
        upper = min(window.los.x, best.x.futureSeconds(self._step))
        peak = findMaximum(self._function, lower, upper, config.PASS_TIME_TOLERANCE, config.PEAK_MAX_ITERATIONS)

        return peak if peak.y >= best.y else best

    def _toPass(self, window: _Window, points: list[Point]) -> SatellitePass:
        peak = self._findPeak(window, points)
        infos = [self._function.positionInfo(p.x) for p in (window.aos, peak, window.los)]
        name = self._propagator.tle.name

        return SatellitePass(*infos, window.aosTruncated, window.losTruncated, name)

    def computePasses(self, start: 'JulianDate', end: 'JulianDate') -> list[SatellitePass]:
        """Returns the passes between start and end ordered by aos."""

        if end <= start:
            raise InvalidRange(f'pass search end {end.date()} must be after start {start.date()}', start, end)

        points = self._samplePoints(start, end)
        windows = self._findCrossingWindows(points) + self._findShortWindows(points)
        windows.sort(key=lambda w: w.aos.x)

        passes = [self._toPass(window, points) for window in windows]
        logger.debug('found %d passes of %s between %s and %s', len(passes), self._propagator.tle.name,
                     start.date(), end.date())

        return passes


def findPasses(propagator: 'Propagator', observer: 'GeoPosition', start: 'JulianDate', end: 'JulianDate',
               minElevation: float = None, step: float = None) -> list[SatellitePass]:
    """Finds every pass of the satellite above minElevation degrees (config.DEFAULT_MIN_ELEVATION when None) seen
    from observer between start and end. The elevation is sampled every step seconds, config.PASS_SAMPLE_STEP by
    default. Propagation errors raised during the search are not caught."""

    return PassFinder(propagator, observer, minElevation, step).computePasses(start, end)
