from .engine import (
    propagateAll,
    Trajectory,
    trajectory,
)

__all__ = (
    # engine.py
    'propagateAll',
    'Trajectory',
    'trajectory',
)
