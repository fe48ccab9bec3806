"""Exception hierarchy for rlcore.

Fatal training errors carry the position in the run where they happened
(episode index, step index, last state and action) so the caller can
diagnose a broken domain without re-running it::

    try:
        trainer.run()
    except DomainTransitionError as err:
        print(err.episode, err.step, err.state, err.action)
        raise

``BufferUnderflow`` is the one non-fatal error: the trainer swallows it and
skips the update while the replay buffer warms up.
"""

from __future__ import annotations

from typing import Any


class RLCoreError(Exception):
    """Base class for every error raised by rlcore."""


class TrainingError(RLCoreError):
    """A fatal error raised while a training run is in progress."""

    def __init__(
        self,
        message: str,
        *,
        episode: int | None = None,
        step: int | None = None,
        state: Any = None,
        action: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.episode = episode
        self.step = step
        self.state = state
        self.action = action

    def with_context(
        self,
        *,
        episode: int | None = None,
        step: int | None = None,
        state: Any = None,
        action: Any = None,
    ) -> TrainingError:
        """Fill in any context field that is still unset and return ``self``."""
        if self.episode is None:
            self.episode = episode
        if self.step is None:
            self.step = step
        if self.state is None:
            self.state = state
        if self.action is None:
            self.action = action
        return self

    def __str__(self) -> str:
        context = [
            f"{name}={value!r}"
            for name, value in (
                ("episode", self.episode),
                ("step", self.step),
                ("state", self.state),
                ("action", self.action),
            )
            if value is not None
        ]
        if not context:
            return self.message
        return f"{self.message} ({', '.join(context)})"


class NoLegalActions(TrainingError):
    """A non-terminal state reported an empty set of legal actions."""


class DomainTransitionError(TrainingError):
    """The domain's ``legal_actions`` or ``step`` call raised."""


class InvalidHyperparameter(RLCoreError, ValueError):
    """A hyperparameter is outside its valid range."""


class BufferUnderflow(RLCoreError):
    """A batch was requested before the replay buffer held enough data."""

    def __init__(self, requested: int, available: int) -> None:
        super().__init__(
            f"requested a batch of {requested} but the buffer holds {available}"
        )
        self.requested = requested
        self.available = available


def check_range(
    name: str,
    value: float,
    low: float,
    high: float,
    *,
    low_inclusive: bool = True,
    high_inclusive: bool = True,
) -> None:
    """Raise :class:`InvalidHyperparameter` if *value* is outside the range."""
    above = value >= low if low_inclusive else value > low
    below = value <= high if high_inclusive else value < high
    if not (above and below):
        lo = "[" if low_inclusive else "("
        hi = "]" if high_inclusive else ")"
        raise InvalidHyperparameter(
            f"{name} must be in {lo}{low}, {high}{hi}, got {value!r}"
        )


def check_positive(name: str, value: int | float) -> None:
    """Raise :class:`InvalidHyperparameter` unless *value* is > 0."""
    if value <= 0:
        raise InvalidHyperparameter(f"{name} must be positive, got {value!r}")
