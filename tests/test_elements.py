import unittest
from math import sqrt, sin, cos, radians, pi

from pyevspace import Vector

from satwatch import config
from satwatch.core.juliandate import JulianDate
from satwatch.orbit.elements import Elements, trueToMeanAnomaly, trueToEccentricAnomaly, meanToTrueAnomaly, \
    meanToEccentricAnomaly, eccentricToTrueAnomaly, eccentricToMeanAnomaly, smaToMeanMotion, meanMotionToSma
from satwatch.util.constants import EARTH_MU, TWOPI, SECONDS_PER_DAY

epoch = JulianDate(2020, 1, 1)


class TestFromState(unittest.TestCase):

    def testCircularEquatorial(self):
        speed = sqrt(EARTH_MU / 7000)
        elements = Elements.fromState(Vector(7000, 0, 0), Vector(0, speed, 0), epoch)

        self.assertAlmostEqual(elements.eccentricity, 0.0, places=12)
        self.assertAlmostEqual(elements.inclination, 0.0, places=9)
        self.assertAlmostEqual(elements.semiMajorAxis, 7000.0, places=6)
        # no node or periapsis, everything is measured from the x-axis
        self.assertEqual(elements.raan, 0.0)
        self.assertEqual(elements.argumentOfPerigee, 0.0)
        self.assertAlmostEqual(elements.trueAnomaly, 0.0, places=9)
        self.assertEqual(elements.epoch, epoch)

    def testCircularPolar(self):
        speed = sqrt(EARTH_MU / 7000)
        elements = Elements.fromState(Vector(0, 7000, 0), Vector(0, 0, speed), epoch)

        self.assertAlmostEqual(elements.inclination, 90.0, places=9)
        self.assertAlmostEqual(elements.raan, 90.0, places=9)
        self.assertEqual(elements.argumentOfPerigee, 0.0)
        # the satellite is at the ascending node
        self.assertAlmostEqual(cos(radians(elements.trueAnomaly)), 1.0, places=12)

    def testInclinedAtPerigee(self):
        perigee = 7000
        inclination = radians(30)
        speed = sqrt(EARTH_MU * 1.1 / perigee)
        position = Vector(0, perigee * cos(inclination), perigee * sin(inclination))
        velocity = Vector(-speed, 0, 0)

        elements = Elements.fromState(position, velocity, epoch)
        self.assertAlmostEqual(elements.inclination, 30.0, places=9)
        self.assertAlmostEqual(elements.raan, 0.0, places=9)
        self.assertAlmostEqual(elements.argumentOfPerigee, 90.0, places=6)
        self.assertAlmostEqual(elements.semiMajorAxis, perigee / 0.9, places=6)
        self.assertAlmostEqual(elements.eccentricity, 0.1, places=9)
        self.assertAlmostEqual(cos(radians(elements.trueAnomaly)), 1.0, places=9)
        self.assertAlmostEqual(cos(radians(elements.meanAnomaly)), 1.0, places=9)

    def testRetrograde(self):
        speed = sqrt(EARTH_MU / 8000)
        elements = Elements.fromState(Vector(8000, 0, 0), Vector(0, -speed * cos(radians(10)),
                                                                  speed * sin(radians(10))), epoch)
        self.assertAlmostEqual(elements.inclination, 170.0, places=9)
        self.assertAlmostEqual(elements.raan, 0.0, places=9)


class TestElements(unittest.TestCase):

    def testDefaultTrueAnomaly(self):
        elements = Elements(10.0, 45.0, 20.0, 0.0, 7000.0, 90.0, epoch)
        self.assertAlmostEqual(elements.trueAnomaly, 90.0, places=9)

        elements = Elements(10.0, 45.0, 20.0, 0.3, 7000.0, 0.0, epoch)
        self.assertAlmostEqual(elements.trueAnomaly, 0.0, places=9)

    def testMeanMotion(self):
        elements = Elements(0.0, 0.0, 0.0, 0.0, 7000.0, 0.0, epoch)
        expected = sqrt(EARTH_MU / 7000 ** 3) * SECONDS_PER_DAY / TWOPI
        self.assertAlmostEqual(elements.meanMotion, expected, places=12)

    def testDict(self):
        data = Elements(10.0, 45.0, 20.0, 0.001, 7000.0, 30.0, epoch).toDict()
        self.assertEqual(data['raan'], 10.0)
        self.assertEqual(data['inclination'], 45.0)
        self.assertEqual(data['semiMajorAxis'], 7000.0)
        self.assertEqual(data['epoch'], epoch.toDict())

    def testString(self):
        lines = str(Elements(10.0, 45.0, 20.0, 0.001, 7000.0, 30.0, epoch)).splitlines()
        self.assertEqual(len(lines), 2)
        self.assertIn('7000.00', lines[1])


class TestAnomalies(unittest.TestCase):

    def testKnownValues(self):
        # E = 1 rad with e = 0.1
        meanAnomaly = 1.0 - 0.1 * sin(1.0)
        self.assertAlmostEqual(eccentricToMeanAnomaly(1.0, 0.1), meanAnomaly, places=15)
        self.assertAlmostEqual(meanToEccentricAnomaly(meanAnomaly, 0.1), 1.0, places=10)

        self.assertAlmostEqual(eccentricToTrueAnomaly(0.0, 0.7), 0.0, places=12)
        self.assertAlmostEqual(eccentricToTrueAnomaly(pi, 0.7), pi, places=12)

    def testCircular(self):
        for angle in (0.3, 2.0, 4.5):
            with self.subTest(angle=angle):
                self.assertAlmostEqual(meanToTrueAnomaly(angle, 0.0), angle, places=12)
                self.assertAlmostEqual(trueToMeanAnomaly(angle, 0.0), angle, places=12)

    def testInverse(self):
        # mean and true anomaly conversions undo each other for a Molniya-like orbit
        meanAnomaly = 0.4
        trueAnomaly = meanToTrueAnomaly(meanAnomaly, 0.74)
        self.assertGreater(trueAnomaly, meanAnomaly)
        self.assertAlmostEqual(trueToMeanAnomaly(trueAnomaly, 0.74), meanAnomaly, places=9)
        self.assertAlmostEqual(trueToEccentricAnomaly(trueAnomaly, 0.74), meanToEccentricAnomaly(meanAnomaly, 0.74),
                               places=9)

    def testIterationLimit(self):
        converged = meanToEccentricAnomaly(0.4, 0.74)
        original = config.KEPLER_MAX_ITERATIONS
        config.KEPLER_MAX_ITERATIONS = 1
        try:
            limited = meanToEccentricAnomaly(0.4, 0.74)
        finally:
            config.KEPLER_MAX_ITERATIONS = original

        self.assertNotAlmostEqual(limited, converged, places=6)


class TestMeanMotion(unittest.TestCase):

    def testGeosynchronous(self):
        siderealDay = 86164.0905
        self.assertAlmostEqual(meanMotionToSma(TWOPI / siderealDay), 42164.17, delta=0.1)

    def testInverse(self):
        meanMotion = smaToMeanMotion(6796.0)
        self.assertAlmostEqual(meanMotionToSma(meanMotion), 6796.0, places=6)
        self.assertAlmostEqual(meanMotion * SECONDS_PER_DAY / TWOPI, 15.5, delta=0.05)


if __name__ == '__main__':
    unittest.main()
