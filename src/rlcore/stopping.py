"""Stopping conditions for a training run.

The trainer checks every condition after each step.  Budget conditions end
the run as ``EXHAUSTED``; convergence conditions end it as ``CONVERGED``.
Tabular Q-learning never detects convergence on its own, so without a
convergence condition a run always ends ``EXHAUSTED``::

    stopping = [
        MaxEpisodes(5_000),
        ValueChangeBelow(threshold=1e-4, patience=50),
    ]
"""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from rlcore.errors import check_positive


class TrainerStatus(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    CONVERGED = "converged"
    EXHAUSTED = "exhausted"
    FAILED = "failed"

    @property
    def finished(self) -> bool:
        return self in (TrainerStatus.CONVERGED, TrainerStatus.EXHAUSTED, TrainerStatus.FAILED)


@dataclass
class TrainProgress:
    """Counters the trainer exposes to stopping conditions.

    Fields:
        steps: Environment steps taken so far.
        episodes: Episodes finished so far.
        episode_returns: Undiscounted return of each finished episode.
        episode_value_changes: Largest ``|delta Q|`` seen in each finished
            episode (tabular rule only; empty for other rules).
    """

    steps: int = 0
    episodes: int = 0
    episode_returns: list[float] = field(default_factory=list)
    episode_value_changes: list[float] = field(default_factory=list)


class StoppingCondition(ABC):
    """Decide whether a run should stop, and with which status."""

    status: TrainerStatus = TrainerStatus.EXHAUSTED

    @abstractmethod
    def should_stop(self, progress: TrainProgress) -> bool:
        ...

    def check(self, progress: TrainProgress) -> TrainerStatus | None:
        return self.status if self.should_stop(progress) else None


class MaxEpisodes(StoppingCondition):
    """Stop once *n* episodes have finished."""

    def __init__(self, n: int) -> None:
        check_positive("max_episodes", n)
        self.n = n

    def should_stop(self, progress: TrainProgress) -> bool:
        return progress.episodes >= self.n

    def __repr__(self) -> str:
        return f"MaxEpisodes({self.n})"


class MaxSteps(StoppingCondition):
    """Stop once *n* environment steps have been taken."""

    def __init__(self, n: int) -> None:
        check_positive("max_steps", n)
        self.n = n

    def should_stop(self, progress: TrainProgress) -> bool:
        return progress.steps >= self.n

    def __repr__(self) -> str:
        return f"MaxSteps({self.n})"


class RewardPredicate(StoppingCondition):
    """Converged when *predicate* holds over the last *window* episode returns.

    Example::

        RewardPredicate(lambda rs: min(rs) >= 0.9, window=20)
    """

    status = TrainerStatus.CONVERGED

    def __init__(self, predicate: Callable[[Sequence[float]], bool], window: int = 1) -> None:
        check_positive("window", window)
        self.predicate = predicate
        self.window = window

    def should_stop(self, progress: TrainProgress) -> bool:
        returns = progress.episode_returns
        if len(returns) < self.window:
            return False
        return bool(self.predicate(returns[-self.window:]))

    def __repr__(self) -> str:
        return f"RewardPredicate(window={self.window})"


class ValueChangeBelow(StoppingCondition):
    """Converged when no value moved by *threshold* or more for *patience* episodes."""

    status = TrainerStatus.CONVERGED

    def __init__(self, threshold: float, patience: int = 1) -> None:
        check_positive("threshold", threshold)
        check_positive("patience", patience)
        self.threshold = threshold
        self.patience = patience

    def should_stop(self, progress: TrainProgress) -> bool:
        changes = progress.episode_value_changes
        if len(changes) < self.patience:
            return False
        return all(c < self.threshold for c in changes[-self.patience:])

    def __repr__(self) -> str:
        return f"ValueChangeBelow(threshold={self.threshold}, patience={self.patience})"
