"""Propagate earth satellites from two-line element sets and predict when they are visible from the ground.

Element sets are parsed and validated into `TwoLineElement` objects, which initialize an SGP4/SDP4 `Propagator`.
Propagating gives the position and velocity of the satellite in the TEME frame as a `StateVector`, which can be
converted to an earth-fixed frame, to geodetic coordinates or to the look angles seen by an observer on the ground.
Many satellites can be propagated to one instant at once, and the passes of a satellite above an observer's minimum
elevation can be searched over a time span.

Usage
_____

>>> from satwatch import TwoLineElement, Propagator, GeoPosition, JulianDate, findPasses
>>>
>>> tle = TwoLineElement('''ISS (ZARYA)
... 1 25544U 98067A   19343.69339541  .00001764  00000-0  38792-4 0  9991
... 2 25544  51.6439 211.2001 0007417  17.6667  85.6398 15.50103472202482''')
>>> propagator = Propagator(tle)
>>> state = propagator.propagate(tle.epoch)
>>> geo = state.toGeodetic()
>>>
>>> observer = GeoPosition(38.8339, -104.8214, 1.839)
>>> passes = findPasses(propagator, observer, tle.epoch, tle.epoch.future(1))

Logging goes through the standard library loggers under the 'satwatch' name, which are silent until the
application configures logging, for example with `satwatch.config.configureLogging()`.
"""

import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = []

# import subpackages
from .util import *
__all__ += util.__all__
from .core import *
__all__ += core.__all__
from .orbit import *
__all__ += orbit.__all__
from .batch import *
__all__ += batch.__all__
from .satellitepass import *
__all__ += satellitepass.__all__

# import modules
from . import config
from .tracker import GroundStation, SatelliteInfo, Tracker
__all__ += ['config', 'GroundStation', 'SatelliteInfo', 'Tracker']
