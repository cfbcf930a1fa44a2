from .elements import (
    Elements,
    trueToMeanAnomaly,
    trueToEccentricAnomaly,
    meanToTrueAnomaly,
    meanToEccentricAnomaly,
    eccentricToTrueAnomaly,
    eccentricToMeanAnomaly,
    smaToMeanMotion,
    meanMotionToSma,
)

from .exceptions import (
    TLEException,
    FormatError,
    ChecksumError,
    RangeError,
    InitError,
    PropagationError,
    DecayedOrbit,
    InvalidDomain,
)

from .sgp4 import (
    MeanElements,
    NearEarthConstants,
    Propagator,
    initialize,
    propagate,
    solveKepler,
)

from .sdp4 import (
    DeepSpaceConstants,
)

from .state import (
    StateVector,
)

from .tle import (
    TwoLineElement,
    TLEGroupIterator,
    computeChecksum,
    parsePackedExponent,
    formatPackedExponent,
    parseTle,
    parseTleText,
    formatTle,
)

__all__ = (
    # elements.py
    'Elements',
    'trueToMeanAnomaly',
    'trueToEccentricAnomaly',
    'meanToTrueAnomaly',
    'meanToEccentricAnomaly',
    'eccentricToTrueAnomaly',
    'eccentricToMeanAnomaly',
    'smaToMeanMotion',
    'meanMotionToSma',

    # exceptions.py
    'TLEException',
    'FormatError',
    'ChecksumError',
    'RangeError',
    'InitError',
    'PropagationError',
    'DecayedOrbit',
    'InvalidDomain',

    # sgp4.py
    'MeanElements',
    'NearEarthConstants',
    'Propagator',
    'initialize',
    'propagate',
    'solveKepler',

    # sdp4.py
    'DeepSpaceConstants',

    # state.py
    'StateVector',

    # tle.py
    'TwoLineElement',
    'TLEGroupIterator',
    'computeChecksum',
    'parsePackedExponent',
    'formatPackedExponent',
    'parseTle',
    'parseTleText',
    'formatTle',
)
