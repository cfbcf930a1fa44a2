from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from satwatch.util.constants import SECONDS_PER_DAY

from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from satwatch.core.juliandate import JulianDate


@dataclass(frozen=True)
class Point:
    x: 'JulianDate'
    y: float

    @property
    def above(self) -> bool:
        """True if the function value is on or above zero."""
        return self.y >= 0


class AnalyticFunction(ABC):
    """A real valued function of time whose roots and maxima are searched for."""

    __slots__ = ()

    @abstractmethod
    def compute(self, time: 'JulianDate') -> float:
        pass

    def computePoint(self, time: 'JulianDate') -> Point:
        return Point(time, self.compute(time))


@dataclass
class Boundary:
    lower: Point = field(init=False)
    upper: Point = field(init=False)
    function: AnalyticFunction

    def __init__(self, point1: Point, point2: Point, function: AnalyticFunction):
        if point1.x < point2.x:
            self.lower = point1
            self.upper = point2
        else:
            self.upper = point1
            self.lower = point2
        self.function = function

    def bifurcate(self) -> ('Boundary', 'Boundary'):
        """Evaluates the function at the middle of the boundary and returns the left and right halves."""

        middleTime = self.lower.x.futureSeconds(self.range() / 2)
        middle = self.function.computePoint(middleTime)

        return Boundary(self.lower, middle, self.function), Boundary(middle, self.upper, self.function)

    def range(self) -> float:
        """The width of the boundary in seconds, always positive."""

        return (self.upper.x - self.lower.x) * SECONDS_PER_DAY

    def difference(self) -> float:
        return abs(self.upper.y - self.lower.y)

    def hasSameSign(self) -> bool:
        """Returns True if both end points are on the same side of zero, counting zero as above."""

        return self.lower.above == self.upper.above


def refineCrossing(boundary: Boundary, tolerance: float, maxIterations: int) -> Point:
    """Bisects a boundary whose end points lie on opposite sides of zero until it is no wider than tolerance
    seconds or maxIterations halvings were made. Returns the end point on or above zero, so the result always
    satisfies the threshold it was searched against."""

    if boundary.hasSameSign():
        raise ValueError('boundary does not bracket a crossing')

    for _ in range(maxIterations):
        if boundary.range() <= tolerance:
            break
        left, right = boundary.bifurcate()
        boundary = right if left.hasSameSign() else left

    return boundary.upper if boundary.upper.above else boundary.lower


_INVERSE_PHI = 0.6180339887498949


def findMaximum(function: AnalyticFunction, lower: 'JulianDate', upper: 'JulianDate', tolerance: float,
                maxIterations: int) -> Point:
    """Golden-section search for the maximum of a unimodal function on [lower, upper]. The search stops when the
    bracket is no wider than tolerance seconds or after maxIterations reductions, returning the best point seen."""

    width = (upper - lower) * SECONDS_PER_DAY
    if width <= 0:
        return function.computePoint(lower)

    a, b = 0.0, width
    c = b - _INVERSE_PHI * (b - a)
    d = a + _INVERSE_PHI * (b - a)
    pointC = function.computePoint(lower.futureSeconds(c))
    pointD = function.computePoint(lower.futureSeconds(d))

    for _ in range(maxIterations):
        if b - a <= tolerance:
            break
        if pointC.y >= pointD.y:
            b, d, pointD = d, c, pointC
            c = b - _INVERSE_PHI * (b - a)
            pointC = function.computePoint(lower.futureSeconds(c))
        else:
            a, c, pointC = c, d, pointD
            d = a + _INVERSE_PHI * (b - a)
            pointD = function.computePoint(lower.futureSeconds(d))

    return pointC if pointC.y >= pointD.y else pointD
