import json
import unittest
from unittest import mock

from satwatch.core.coordinates import GeoPosition, LookAngles
from satwatch.orbit.exceptions import InitError, DecayedOrbit, ChecksumError
from satwatch.orbit.state import StateVector
from satwatch.orbit.tle import TwoLineElement, formatTle
from satwatch.satellitepass.satpass import findPasses
from satwatch.tracker import GroundStation, SatelliteInfo, Tracker
from tests.data import ISS, GEO, equatorialTle, decayingTle


class TestGroundStation(unittest.TestCase):

    def testDefaults(self):
        station = GroundStation('Quito', GeoPosition(-0.18, -78.47, 2.85))
        self.assertEqual(station.name, 'Quito')
        self.assertEqual(station.minElevation, 10.0)
        self.assertEqual(station.position, GeoPosition(-0.18, -78.47, 2.85))

    def testValidation(self):
        self.assertRaises(ValueError, GroundStation, 'bad', GeoPosition(0, 0), 91)
        self.assertRaises(ValueError, GroundStation, 'bad', GeoPosition(0, 0), -90.5)
        GroundStation('horizon', GeoPosition(0, 0), 0.0)

    def testDict(self):
        data = json.loads(GroundStation('Quito', GeoPosition(-0.18, -78.47), 5.0).toJson())
        self.assertEqual(data['name'], 'Quito')
        self.assertEqual(data['minElevation'], 5.0)
        self.assertEqual(data['position']['latitude'], -0.18)


class TestTracker(unittest.TestCase):

    def setUp(self) -> None:
        self.tracker = Tracker()
        self.tracker.addTle(ISS)
        self.tracker.addTle(TwoLineElement(GEO))
        self.tracker.addTle(equatorialTle())

    def testAdd(self):
        self.assertEqual(len(self.tracker), 3)
        self.assertIn(25544, self.tracker)
        self.assertNotIn(5, self.tracker)

        with self.assertLogs('satwatch.tracker', 'INFO') as logs:
            number = self.tracker.addTle(decayingTle())
        self.assertEqual(number, 99991)
        self.assertIn('tracking', logs.output[0])

    def testReplace(self):
        updated = formatTle(99990, 2020, 2.0, 0.0, 0.0, 0.0001, 0.0, 0.0, 15.0, name='EQUATORIAL')
        with self.assertLogs('satwatch.tracker', 'INFO') as logs:
            self.tracker.addTle(updated)

        self.assertIn('replacing', logs.output[0])
        self.assertEqual(len(self.tracker), 3)
        self.assertEqual(self.tracker.getTle(99990).epochDay, 2.0)

    def testAddErrors(self):
        degenerate = formatTle(99993, 2020, 1.0, 51.6, 0.0, 0.0001, 0.0, 0.0, 17.0)
        self.assertRaises(InitError, self.tracker.addTle, degenerate)
        self.assertNotIn(99993, self.tracker)

        lines = ISS.splitlines()
        lines[1] = lines[1][:68] + '0'
        self.assertRaises(ChecksumError, self.tracker.addTle, '\n'.join(lines))

    def testLookup(self):
        self.assertEqual(self.tracker.getTle(25544).name, 'ISS (ZARYA)')
        self.assertEqual(self.tracker.getPropagator(28626).method, 'd')
        self.assertRaises(KeyError, self.tracker.getTle, 12345)
        self.assertRaises(KeyError, self.tracker.getPosition, 12345)

    def testListSatellites(self):
        satellites = self.tracker.listSatellites()
        self.assertEqual([info.catalogNumber for info in satellites], [25544, 28626, 99990])
        self.assertTrue(all(isinstance(info, SatelliteInfo) for info in satellites))

    def testSatelliteInfo(self):
        info = self.tracker.getSatelliteInfo(28626)
        self.assertTrue(info.deepSpace)
        self.assertAlmostEqual(info.period, 1440 / 1.00270176)
        self.assertEqual(info.designator, '05008A')

        data = self.tracker.getSatelliteInfo(25544).toDict()
        self.assertEqual(data['name'], 'ISS (ZARYA)')
        self.assertFalse(data['deepSpace'])
        self.assertEqual(data['epoch'], self.tracker.getTle(25544).epoch.date())

    def testPosition(self):
        tle = self.tracker.getTle(25544)
        for hours in (0, 1, 2, 5):
            with self.subTest(hours=hours):
                position = self.tracker.getPosition(25544, tle.epoch.future(hours / 24))
                self.assertLessEqual(abs(position.latitude), 52.0)
                self.assertTrue(370 < position.altitude < 460)

    def testCurrentTime(self):
        epoch = self.tracker.getTle(99990).epoch
        with mock.patch('satwatch.tracker.now', return_value=epoch):
            state = self.tracker.getState(99990)
        self.assertIsInstance(state, StateVector)
        self.assertEqual(state.time, epoch)

    def testPositions(self):
        epoch = self.tracker.getTle(99990).epoch
        positions = self.tracker.getPositions(99990, epoch, epoch.futureSeconds(600), 60)

        self.assertEqual(len(positions), 11)
        self.assertEqual(positions[0][0], epoch)
        for _, position in positions:
            self.assertLess(abs(position.latitude), 0.1)

    def testPositionsSkipFailures(self):
        self.tracker.addTle(decayingTle())
        epoch = self.tracker.getTle(99991).epoch
        positions = self.tracker.getPositions(99991, epoch.future(2), epoch.future(3), 3600)

        # the orbit decays part way through the span
        self.assertTrue(0 < len(positions) < 25)
        self.assertEqual(positions[0][0], epoch.future(2))

    def testLookAngles(self):
        epoch = self.tracker.getTle(99990).epoch
        station = GroundStation('equator', GeoPosition(0, 0))

        fromStation = self.tracker.getLookAngles(99990, station, epoch)
        fromPosition = self.tracker.getLookAngles(99990, GeoPosition(0, 0), epoch)
        self.assertIsInstance(fromStation, LookAngles)
        self.assertEqual(fromStation.elevation, fromPosition.elevation)
        self.assertEqual(fromStation.azimuth, fromPosition.azimuth)

    def testPredictPasses(self):
        propagator = self.tracker.getPropagator(99990)
        station = GroundStation('equator', GeoPosition(0, 0), 10.0)
        start = propagator.epoch

        passes = self.tracker.predictPasses(99990, station, start, hours=12)
        expected = findPasses(propagator, station.position, start, start.future(0.5), 10.0)
        self.assertEqual([p.tca for p in passes], [p.tca for p in expected])
        self.assertTrue(5 <= len(passes) <= 8)

    def testPropagateAll(self):
        self.tracker.addTle(decayingTle())
        time = self.tracker.getTle(99991).epoch.future(3)

        results = self.tracker.propagateAll(time)
        self.assertEqual(sorted(results), [25544, 28626, 99990, 99991])
        self.assertIsInstance(results[99991], DecayedOrbit)
        self.assertIsInstance(results[99990], StateVector)
        self.assertEqual(results[99990].time, time)


if __name__ == '__main__':
    unittest.main()
