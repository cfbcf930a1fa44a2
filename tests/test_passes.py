import json
import unittest

from satwatch.core._analysis import AnalyticFunction, Boundary, Point, refineCrossing, findMaximum
from satwatch.core.coordinates import GeoPosition
from satwatch.core.exceptions import InvalidRange
from satwatch.core.juliandate import JulianDate
from satwatch.orbit.exceptions import PropagationError
from satwatch.orbit.sgp4 import Propagator
from satwatch.orbit.tle import TwoLineElement
from satwatch.satellitepass.satpass import ElevationFunction, PassFinder, SatellitePass, findPasses
from tests.data import equatorialTle, decayingTle


class _Parabola(AnalyticFunction):
    """100 - t^2 / 100 with t in seconds from center, zero at t = +-100."""

    def __init__(self, center: JulianDate):
        self.center = center

    def compute(self, time: JulianDate) -> float:
        t = (time - self.center) * 86400
        return 100 - t * t / 100


class TestAnalysis(unittest.TestCase):

    @classmethod
    def setUpClass(cls) -> None:
        cls.center = JulianDate(2021, 5, 1, 12)
        cls.function = _Parabola(cls.center)

    def testBoundaryOrder(self):
        later = self.function.computePoint(self.center.futureSeconds(200))
        earlier = self.function.computePoint(self.center)
        boundary = Boundary(later, earlier, self.function)
        self.assertEqual(boundary.lower, earlier)
        self.assertAlmostEqual(boundary.range(), 200, places=6)
        self.assertFalse(boundary.hasSameSign())

    def testRefineCrossing(self):
        boundary = Boundary(self.function.computePoint(self.center),
                            self.function.computePoint(self.center.futureSeconds(200)), self.function)
        crossing = refineCrossing(boundary, 0.1, 60)

        self.assertTrue(crossing.above)
        offset = (crossing.x - self.center) * 86400
        self.assertTrue(99.85 <= offset <= 100.0001, offset)

    def testRefineNoCrossing(self):
        boundary = Boundary(self.function.computePoint(self.center),
                            self.function.computePoint(self.center.futureSeconds(50)), self.function)
        self.assertRaises(ValueError, refineCrossing, boundary, 0.1, 60)

    def testFindMaximum(self):
        peak = findMaximum(self.function, self.center.futureSeconds(-60), self.center.futureSeconds(30), 0.1, 100)
        self.assertAlmostEqual((peak.x - self.center) * 86400, 0.0, delta=0.1)
        self.assertAlmostEqual(peak.y, 100.0, places=3)

    def testPoint(self):
        self.assertTrue(Point(self.center, 0.0).above)
        self.assertFalse(Point(self.center, -1e-9).above)


class TestPassFinder(unittest.TestCase):

    @classmethod
    def setUpClass(cls) -> None:
        cls.propagator = Propagator(TwoLineElement(equatorialTle()))
        cls.observer = GeoPosition(0, 0)
        cls.start = cls.propagator.epoch
        cls.end = cls.start.future(1)
        cls.passes = findPasses(cls.propagator, cls.observer, cls.start, cls.end)
        cls.complete = [p for p in cls.passes if not p.truncated]

    def testCount(self):
        # an equatorial orbit passes overhead once every synodic period of about 103 minutes
        self.assertTrue(10 <= len(self.passes) <= 16, len(self.passes))
        self.assertTrue(len(self.complete) >= len(self.passes) - 2)

    def testOrdering(self):
        for satPass in self.complete:
            with self.subTest(tca=satPass.tca.date()):
                self.assertLess(satPass.aos, satPass.tca)
                self.assertLess(satPass.tca, satPass.los)

        for first, second in zip(self.passes, self.passes[1:]):
            self.assertLess(first.los, second.aos)

    def testWithinSearch(self):
        for satPass in self.passes:
            self.assertGreaterEqual(satPass.aos, self.start)
            self.assertLessEqual(satPass.los, self.end)

    def testElevations(self):
        for satPass in self.complete:
            with self.subTest(tca=satPass.tca.date()):
                self.assertGreater(satPass.maxElevation, 80)
                # crossings are bisected to a tenth of a second
                self.assertAlmostEqual(satPass.aosInfo.elevation, 10.0, delta=0.1)
                self.assertAlmostEqual(satPass.losInfo.elevation, 10.0, delta=0.1)
                self.assertGreaterEqual(satPass.aosInfo.elevation, 10.0)

    def testDuration(self):
        for satPass in self.complete:
            with self.subTest(tca=satPass.tca.date()):
                self.assertTrue(7 < satPass.durationMinutes < 10.5, satPass.durationMinutes)
                self.assertAlmostEqual(satPass.duration, satPass.durationMinutes * 60)

        total = sum(p.duration for p in self.passes)
        self.assertLess(total, 15 * 10.5 * 60)

    def testDeterministic(self):
        again = findPasses(self.propagator, self.observer, self.start, self.end)
        self.assertEqual([p.tca for p in again], [p.tca for p in self.passes])

    def testName(self):
        self.assertEqual(self.passes[0].name, 'EQUATORIAL')

    def testTruncatedStart(self):
        satPass = self.complete[1]
        passes = findPasses(self.propagator, self.observer, satPass.tca, satPass.tca.future(0.05))

        first = passes[0]
        self.assertTrue(first.aosTruncated)
        self.assertFalse(first.losTruncated)
        self.assertEqual(first.aos, satPass.tca)
        self.assertAlmostEqual((first.los - satPass.los) * 86400, 0.0, delta=0.5)

    def testTruncatedEnd(self):
        satPass = self.complete[1]
        passes = findPasses(self.propagator, self.observer, satPass.tca.future(-0.05), satPass.tca)

        last = passes[-1]
        self.assertTrue(last.losTruncated)
        self.assertFalse(last.aosTruncated)
        self.assertTrue(last.truncated)
        self.assertEqual(last.los, satPass.tca)
        self.assertAlmostEqual((last.aos - satPass.aos) * 86400, 0.0, delta=0.5)

    def testCoarseStep(self):
        # with samples 15 minutes apart most passes fall between samples
        finder = PassFinder(self.propagator, self.observer, step=900)
        coarse = finder.computePasses(self.start, self.end)

        for satPass in self.complete:
            with self.subTest(tca=satPass.tca.date()):
                matches = [p for p in coarse if abs(p.tca - satPass.tca) * 86400 < 2.0]
                self.assertEqual(len(matches), 1)
                self.assertAlmostEqual((matches[0].aos - satPass.aos) * 86400, 0.0, delta=0.5)

    def testMinElevation(self):
        low = findPasses(self.propagator, self.observer, self.start, self.end, minElevation=0.0)
        lowComplete = [p for p in low if not p.truncated]
        self.assertGreater(lowComplete[0].duration, self.complete[0].duration)
        for satPass in lowComplete:
            self.assertTrue(satPass.durationMinutes < 14.0)

    def testInvalidRange(self):
        self.assertRaises(InvalidRange, findPasses, self.propagator, self.observer, self.start, self.start)
        self.assertRaises(InvalidRange, findPasses, self.propagator, self.observer, self.end, self.start)
        self.assertRaises(InvalidRange, PassFinder, self.propagator, self.observer, 10.0, 0)
        self.assertRaises(InvalidRange, PassFinder, self.propagator, self.observer, 10.0, -15)

    def testPropagationError(self):
        propagator = Propagator(TwoLineElement(decayingTle()))
        start = propagator.epoch.future(2)
        self.assertRaises(PropagationError, findPasses, propagator, self.observer, start, start.future(1))

    def testFinderProperties(self):
        finder = PassFinder(self.propagator, self.observer)
        self.assertEqual(finder.minElevation, 10.0)
        self.assertEqual(finder.step, 15.0)
        self.assertIs(finder.propagator, self.propagator)
        self.assertEqual(finder.observer, self.observer)


class TestSatellitePass(unittest.TestCase):

    @classmethod
    def setUpClass(cls) -> None:
        propagator = Propagator(TwoLineElement(equatorialTle()))
        observer = GeoPosition(0, 0)
        cls.passes = findPasses(propagator, observer, propagator.epoch, propagator.epoch.future(0.3))
        cls.function = ElevationFunction(propagator, observer, 10.0)

    def testString(self):
        satPass = self.passes[1]
        string = str(satPass)
        self.assertIn('EQUATORIAL', string)
        self.assertIn('aos', string)
        self.assertIn('tca', string)
        self.assertNotIn('aos*', string)

        truncated = SatellitePass(satPass.aosInfo, satPass.tcaInfo, satPass.losInfo, aosTruncated=True)
        self.assertIn('aos*', str(truncated))
        self.assertNotIn('los*', str(truncated))
        self.assertIn('Pass details at', str(truncated))

    def testDict(self):
        satPass = self.passes[1]
        data = json.loads(satPass.toJson())
        self.assertEqual(data['name'], 'EQUATORIAL')
        self.assertAlmostEqual(data['maxElevation'], satPass.maxElevation)
        self.assertEqual(data['tcaInfo']['elevation'], satPass.tcaInfo.elevation)
        self.assertFalse(data['aosTruncated'])

    def testPositionInfo(self):
        satPass = self.passes[1]
        info = self.function.positionInfo(satPass.tca)
        self.assertAlmostEqual(info.elevation, satPass.maxElevation, places=9)
        self.assertEqual(info.time, satPass.tca)
        self.assertIn(info.direction, ('N', 'NNE', 'NE', 'ENE', 'E', 'ESE', 'SE', 'SSE', 'S', 'SSW', 'SW', 'WSW',
                                       'W', 'WNW', 'NW', 'NNW'))
        self.assertAlmostEqual(self.function.compute(satPass.tca), satPass.maxElevation - 10.0, places=9)

    def testSlots(self):
        self.assertFalse(hasattr(self.function, '__dict__'))
        with self.assertRaises(AttributeError):
            self.function.extra = 1


if __name__ == '__main__':
    unittest.main()
