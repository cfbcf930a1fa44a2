from math import pi, sqrt

TWOPI = 2 * pi
DEG2RAD = pi / 180
RAD2DEG = 180 / pi

# time
MINUTES_PER_DAY = 1440.0
SECONDS_PER_DAY = 86400.0
SECONDS_PER_MINUTE = 60.0
J2000_JD = 2451545.0
JULIAN_CENTURY = 36525.0
# Julian date of 1949 December 31 00:00 UT, the SGP4 epoch origin
SGP4_EPOCH_ORIGIN_JD = 2433281.5

# WGS-72 gravity model used by SGP4
WGS72_MU = 398600.8
WGS72_RADIUS = 6378.135
WGS72_XKE = 60.0 / sqrt(WGS72_RADIUS ** 3 / WGS72_MU)
WGS72_J2 = 0.001082616
WGS72_J3 = -0.00000253881
WGS72_J4 = -0.00000165597
WGS72_J3OJ2 = WGS72_J3 / WGS72_J2

# WGS-84 ellipsoid used for geodetic conversions
EARTH_EQUATORIAL_RADIUS = 6378.137
EARTH_FLATTENING = 1 / 298.257223563
EARTH_POLAR_RADIUS = EARTH_EQUATORIAL_RADIUS * (1 - EARTH_FLATTENING)
EARTH_ECCENTRICITY_SQUARED = EARTH_FLATTENING * (2 - EARTH_FLATTENING)
EARTH_MU = 398600.4418

# radians per second
EARTH_ROTATION_RATE = 7.292115146706979e-5

# element set bounds
MAX_MEAN_MOTION = 17.0
DEEP_SPACE_PERIOD = 225.0
