"""Pure-function schedules for exploration rates.

All schedules follow the signature ``schedule(step) -> value`` and carry
no Python-side state, so the same schedule can be shared between runs.

Usage::

    from rlcore.schedule import linear_schedule

    schedule = linear_schedule(start=1.0, end=0.05, steps=10_000)
    eps = schedule(step)
"""

from __future__ import annotations

import math
from collections.abc import Callable

from rlcore.errors import InvalidHyperparameter

Schedule = Callable[[int], float]


def constant_schedule(value: float) -> Schedule:
    """Return a schedule that always yields *value*."""
    _value = float(value)

    def _schedule(step: int) -> float:
        return _value

    return _schedule


def linear_schedule(
    start: float,
    end: float,
    steps: int,
) -> Schedule:
    """Return a pure function that linearly interpolates from *start* to *end*.

    Parameters
    ----------
    start:
        Value at step 0.
    end:
        Value at step *steps* (and beyond).
    steps:
        Number of steps over which to interpolate.  Values below 1 are
        treated as 1.

    Returns
    -------
    A callable ``(step: int) -> float``.
    """
    _start = float(start)
    _end = float(end)
    _steps = float(max(steps, 1))

    def _schedule(step: int) -> float:
        frac = min(max(step / _steps, 0.0), 1.0)
        return _start + frac * (_end - _start)

    return _schedule


def exponential_schedule(
    start: float,
    end: float,
    decay: float,
) -> Schedule:
    """Return ``max(end, start * decay**step)``-style decay towards a floor.

    The floor is approached from above when ``start > end``; *decay* must be
    in (0, 1].
    """
    if not 0.0 < decay <= 1.0:
        raise InvalidHyperparameter(f"decay must be in (0, 1], got {decay!r}")
    _start = float(start)
    _end = float(end)
    _log_decay = math.log(decay)

    def _schedule(step: int) -> float:
        value = _start * math.exp(_log_decay * max(step, 0))
        return max(value, _end)

    return _schedule
