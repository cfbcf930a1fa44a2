import unittest

from satwatch.batch.engine import propagateAll, Trajectory, trajectory
from satwatch.core.coordinates import GeoPosition
from satwatch.core.exceptions import InvalidRange
from satwatch.orbit.exceptions import DecayedOrbit
from satwatch.orbit.sgp4 import Propagator
from satwatch.orbit.state import StateVector
from satwatch.orbit.tle import TwoLineElement, formatTle
from tests.data import equatorialTle, decayingTle


def _catalog() -> list:
    tles = [formatTle(40000 + i, 2020, 1.0, 10.0 * i, 25.0 * i, 0.001 * (i + 1), 30.0 * i, 40.0 * i, 14.0 + 0.1 * i)
            for i in range(8)]
    tles.append(equatorialTle())
    return [Propagator(TwoLineElement(tle)) for tle in tles]


class TestPropagateAll(unittest.TestCase):

    @classmethod
    def setUpClass(cls) -> None:
        cls.propagators = _catalog()
        cls.time = cls.propagators[0].epoch.future(0.75)

    def testMatchesSequential(self):
        results = propagateAll(self.propagators, self.time, workers=4)
        self.assertEqual(len(results), len(self.propagators))

        for propagator, result in zip(self.propagators, results):
            with self.subTest(catalogNumber=propagator.tle.catalogNumber):
                expected = propagator.propagate(self.time)
                self.assertIsInstance(result, StateVector)
                self.assertEqual(list(result.position), list(expected.position))
                self.assertEqual(list(result.velocity), list(expected.velocity))
                self.assertEqual(result.time, self.time)

    def testWorkerCount(self):
        single = propagateAll(self.propagators, self.time, workers=1)
        pooled = propagateAll(self.propagators, self.time)
        self.assertEqual([list(state.position) for state in single], [list(state.position) for state in pooled])

    def testErrorIsolation(self):
        decaying = Propagator(TwoLineElement(decayingTle()))
        propagators = self.propagators[:3] + [decaying] + self.propagators[3:]
        time = decaying.epoch.future(3)

        with self.assertLogs('satwatch.batch.engine', 'DEBUG'):
            results = propagateAll(propagators, time)

        self.assertEqual(len(results), len(propagators))
        self.assertIsInstance(results[3], DecayedOrbit)
        for index, result in enumerate(results):
            if index != 3:
                self.assertIsInstance(result, StateVector)

    def testInvalidWorkers(self):
        self.assertRaises(ValueError, propagateAll, self.propagators, self.time, 0)

    def testEmpty(self):
        self.assertEqual(propagateAll([], self.time), [])
        self.assertEqual(propagateAll(iter(()), self.time), [])


class TestTrajectory(unittest.TestCase):

    @classmethod
    def setUpClass(cls) -> None:
        cls.propagator = Propagator(TwoLineElement(equatorialTle()))
        cls.start = cls.propagator.epoch

    def testLength(self):
        traj = Trajectory(self.propagator, self.start, self.start.futureSeconds(600), 60)
        self.assertEqual(len(traj), 11)
        self.assertEqual(len(list(traj)), 11)

    def testEndIncluded(self):
        end = self.start.futureSeconds(600)
        states = list(Trajectory(self.propagator, self.start, end, 60))

        self.assertEqual(states[0].time, self.start)
        self.assertAlmostEqual((states[-1].time - end) * 86400, 0.0, places=6)

    def testEndOffGrid(self):
        traj = Trajectory(self.propagator, self.start, self.start.futureSeconds(630), 60)
        self.assertEqual(len(traj), 11)
        self.assertAlmostEqual((traj.timeAt(10) - self.start) * 86400, 600.0, places=6)

    def testSingleSample(self):
        traj = Trajectory(self.propagator, self.start, self.start, 60)
        self.assertEqual(len(traj), 1)
        self.assertEqual([state.time for state in traj], [self.start])

    def testRestartable(self):
        traj = trajectory(self.propagator, self.start, self.start.futureSeconds(300), 30)
        first = [list(state.position) for state in traj]
        second = [list(state.position) for state in traj]
        self.assertEqual(first, second)

    def testSamplesMatchPropagator(self):
        traj = trajectory(self.propagator, self.start, self.start.futureSeconds(300), 30)
        for index, state in enumerate(traj):
            with self.subTest(index=index):
                expected = self.propagator.propagate(traj.timeAt(index))
                self.assertEqual(list(state.position), list(expected.position))

    def testDefaultStep(self):
        traj = trajectory(self.propagator, self.start, self.start.futureSeconds(3600))
        self.assertEqual(traj.step, 60.0)
        self.assertEqual(len(traj), 61)

    def testInvalid(self):
        end = self.start.futureSeconds(600)
        self.assertRaises(InvalidRange, Trajectory, self.propagator, self.start, end, 0)
        self.assertRaises(InvalidRange, Trajectory, self.propagator, self.start, end, -60)
        with self.assertRaises(InvalidRange) as context:
            Trajectory(self.propagator, end, self.start, 60)
        self.assertEqual(context.exception.start, end)

    def testIndex(self):
        traj = Trajectory(self.propagator, self.start, self.start.futureSeconds(120), 60)
        self.assertRaises(IndexError, traj.timeAt, 3)
        self.assertRaises(IndexError, traj.timeAt, -1)
        self.assertEqual(len(list(traj.times())), 3)

    def testGeodetic(self):
        # an equatorial orbit stays over the equator
        traj = trajectory(self.propagator, self.start, self.start.futureSeconds(5400), 300)
        for geo in traj.geodetic():
            self.assertIsInstance(geo, GeoPosition)
            self.assertLess(abs(geo.latitude), 0.1)
            self.assertTrue(500 < geo.altitude < 650)


if __name__ == '__main__':
    unittest.main()
