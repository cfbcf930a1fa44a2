from satwatch.core.exceptions import SatwatchException


class TLEException(SatwatchException):
    """Base exception for errors while parsing a two-line element set. The line attribute is the 1-based line
    number of the data line at fault, or None if the error applies to the whole set."""

    def __init__(self, message: str, line: int = None, field: str = None):
        super().__init__(message)
        self.line = line
        self.field = field


class FormatError(TLEException):
    """Raised when an element set has the wrong number of lines, a wrong line length or a malformed column."""
    pass


class ChecksumError(TLEException):
    """Raised when the checksum digit of a data line does not match the line's contents."""

    def __init__(self, message: str, line: int = None, expected: int = None, actual: int = None):
        super().__init__(message, line, 'checksum')
        self.expected = expected
        self.actual = actual


class RangeError(TLEException):
    """Raised when a parsed element is outside its physically valid range."""

    def __init__(self, message: str, line: int = None, field: str = None, value: float = None):
        super().__init__(message, line, field)
        self.value = value


class InitError(SatwatchException):
    """Raised when mean elements are too degenerate to initialize a propagator."""
    pass


class PropagationError(SatwatchException):
    """Base exception for a physically invalid state reached during propagation. The error is terminal for the
    requested time only, minutes is the time since epoch that was requested."""

    def __init__(self, message: str, minutes: float = None):
        super().__init__(message)
        self.minutes = minutes


class DecayedOrbit(PropagationError):
    """Raised when the orbit radius has dropped below the earth's surface."""
    pass


class InvalidDomain(PropagationError):
    """Raised when mean motion, eccentricity or the semi-latus rectum leave their valid domain."""
    pass
