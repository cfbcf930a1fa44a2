from .helpers import (
    atan3,
    wrapDegrees,
    wrapLongitude,
)

__all__ = (
    # helpers.py
    'atan3',
    'wrapDegrees',
    'wrapLongitude',
)
