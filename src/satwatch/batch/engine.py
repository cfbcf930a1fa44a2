import logging
from concurrent.futures import ThreadPoolExecutor
from math import floor
from typing import Iterator, Sequence

from satwatch import config
from satwatch.core.coordinates import GeoPosition
from satwatch.core.exceptions import InvalidRange
from satwatch.orbit.exceptions import PropagationError
from satwatch.orbit.state import StateVector
from satwatch.util.constants import SECONDS_PER_DAY

from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from satwatch.core.juliandate import JulianDate
    from satwatch.orbit.sgp4 import Propagator

logger = logging.getLogger(__name__)

# slack when deciding whether the end time lands on the step grid
_GRID_TOLERANCE = 1e-6  # seconds


def _propagateOne(propagator: 'Propagator', time: 'JulianDate') -> StateVector | PropagationError:
    try:
        return propagator.propagate(time)
    except PropagationError as e:
        logger.debug('propagation of %s failed at %s: %s', propagator.tle.catalogNumber, time.date(), e)
        return e


def propagateAll(propagators: Sequence['Propagator'], time: 'JulianDate',
                 workers: int = None) -> list[StateVector | PropagationError]:
    """Propagates every propagator to the same instant. The result holds one entry per input in the same order,
    either the StateVector or the PropagationError raised for that object, so a decayed object never prevents the
    others from being computed.

    The work is spread over a thread pool of size workers (config.BATCH_WORKERS when None). Propagators are
    immutable, so the results are identical to calling propagate on each one in turn."""

    propagators = list(propagators)
    if not propagators:
        return []

    if workers is None:
        workers = config.BATCH_WORKERS
    if workers is not None and workers < 1:
        raise ValueError(f'workers must be positive, got {workers}')

    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix='satwatch-batch') as executor:
        results = list(executor.map(_propagateOne, propagators, [time] * len(propagators)))

    failures = sum(1 for result in results if isinstance(result, PropagationError))
    if failures:
        logger.debug('%d of %d objects failed to propagate at %s', failures, len(results), time.date())

    return results


class Trajectory:
    """A finite, restartable sequence of states from start to end. Each sample is computed from start directly,
    so long spans don't accumulate rounding drift. The end time is included when it falls on the step grid."""

    __slots__ = '_propagator', '_start', '_end', '_step', '_count'

    def __init__(self, propagator: 'Propagator', start: 'JulianDate', end: 'JulianDate', step: float):
        if step <= 0:
            raise InvalidRange(f'trajectory step must be positive, got {step}', start, end, step)
        if end < start:
            raise InvalidRange(f'trajectory end {end.date()} is before start {start.date()}', start, end, step)

        self._propagator = propagator
        self._start = start
        self._end = end
        self._step = step

        span = (end - start) * SECONDS_PER_DAY
        self._count = floor((span + _GRID_TOLERANCE) / step) + 1

    def __len__(self) -> int:
        return self._count

    def __iter__(self) -> Iterator[StateVector]:
        for i in range(self._count):
            yield self._propagator.propagate(self.timeAt(i))

    def __repr__(self) -> str:
        return f'Trajectory({self._propagator!r}, {self._start!r}, {self._end!r}, {self._step})'

    def timeAt(self, index: int) -> 'JulianDate':
        if not 0 <= index < self._count:
            raise IndexError(f'trajectory index {index} out of range')
        return self._start.futureSeconds(index * self._step)

    def times(self) -> Iterator['JulianDate']:
        return (self.timeAt(i) for i in range(self._count))

    def geodetic(self) -> Iterator[GeoPosition]:
        """Yields the sub-satellite point of each sample."""

        for state in self:
            yield state.toGeodetic()

    @property
    def propagator(self) -> 'Propagator':
        return self._propagator

    @property
    def start(self) -> 'JulianDate':
        return self._start

    @property
    def end(self) -> 'JulianDate':
        return self._end

    @property
    def step(self) -> float:
        return self._step


def trajectory(propagator: 'Propagator', start: 'JulianDate', end: 'JulianDate',
               step: float = None) -> Trajectory:
    """Returns the lazily evaluated states of propagator from start to end every step seconds."""

    if step is None:
        step = config.DEFAULT_TRAJECTORY_STEP
    return Trajectory(propagator, start, end, step)
