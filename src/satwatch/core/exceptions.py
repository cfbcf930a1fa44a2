class SatwatchException(Exception):
    """Base exception for all errors raised by the package."""
    pass


class InvalidRange(SatwatchException):
    """Raised when a time span or step used for a trajectory or pass search is malformed."""

    def __init__(self, message: str, start=None, end=None, step=None):
        super().__init__(message)
        self.start = start
        self.end = end
        self.step = step
