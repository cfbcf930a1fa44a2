"""Tunable defaults used throughout the package.

Values are read at call time, so changing a module attribute changes the behavior of subsequent calls."""

import logging

# pass prediction
PASS_SAMPLE_STEP = 15.0             # seconds between coarse elevation samples
PASS_TIME_TOLERANCE = 0.1           # seconds, bisection stops below this bracket width
PASS_MAX_BISECTIONS = 60
PEAK_MAX_ITERATIONS = 100
DEFAULT_MIN_ELEVATION = 10.0        # degrees

# propagation
KEPLER_MAX_ITERATIONS = 10
KEPLER_TOLERANCE = 1.0e-12

# geodetic conversion
GEODETIC_MAX_ITERATIONS = 10
GEODETIC_TOLERANCE = 1.0e-12        # radians

# batch propagation
BATCH_WORKERS = None                # None lets the executor decide
DEFAULT_TRAJECTORY_STEP = 60.0      # seconds

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def configureLogging(level: int | str = logging.INFO, fmt: str = LOG_FORMAT,
                     handler: logging.Handler = None) -> logging.Logger:
    """Attach a handler to the package logger. By default records are written to stderr."""

    logger = logging.getLogger('satwatch')
    logger.setLevel(level)

    if handler is None:
        handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt))

    # replace previously configured handlers so repeated calls don't duplicate output
    for existing in [h for h in logger.handlers if not isinstance(h, logging.NullHandler)]:
        logger.removeHandler(existing)
    logger.addHandler(handler)

    return logger
