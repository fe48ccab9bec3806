"""Runner configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from rlcore.errors import InvalidHyperparameter, check_positive, check_range
from rlcore.schedule import Schedule, exponential_schedule, linear_schedule
from rlcore.stopping import MaxEpisodes, MaxSteps, StoppingCondition


@dataclass(frozen=True)
class RunnerConfig:
    """Shared settings for the training loop.

    Controls the budget, exploration schedule, seeding and logging.
    Algorithm-specific settings live in ``QLearningConfig`` / ``DQNConfig``.
    """

    # Training budget (at least one, or pass an explicit stopping condition)
    max_episodes: int | None = None
    max_steps: int | None = None
    max_episode_steps: int | None = None  # truncate long episodes

    # Exploration
    epsilon: float = 0.1
    epsilon_decay: Literal["none", "linear", "exponential"] = "none"
    epsilon_end: float = 0.01
    epsilon_decay_steps: int = 10_000  # linear: steps to reach epsilon_end
    epsilon_decay_rate: float = 0.999  # exponential: factor per step
    decay_by: Literal["step", "episode"] = "step"

    # Seeding
    seed: int = 0

    # Logging
    log_interval: int = 1_000

    def __post_init__(self) -> None:
        for name in ("max_episodes", "max_steps", "max_episode_steps"):
            value = getattr(self, name)
            if value is not None:
                check_positive(name, value)
        check_range("epsilon", self.epsilon, 0.0, 1.0)
        check_range("epsilon_end", self.epsilon_end, 0.0, 1.0)
        check_positive("epsilon_decay_steps", self.epsilon_decay_steps)
        check_range("epsilon_decay_rate", self.epsilon_decay_rate, 0.0, 1.0, low_inclusive=False)
        check_positive("log_interval", self.log_interval)
        if self.epsilon_decay not in ("none", "linear", "exponential"):
            raise InvalidHyperparameter(f"unknown epsilon_decay {self.epsilon_decay!r}")
        if self.decay_by not in ("step", "episode"):
            raise InvalidHyperparameter(f"decay_by must be 'step' or 'episode', got {self.decay_by!r}")

    def epsilon_schedule(self) -> float | Schedule:
        """The exploration rate as a constant or a decay schedule."""
        if self.epsilon_decay == "linear":
            return linear_schedule(self.epsilon, self.epsilon_end, self.epsilon_decay_steps)
        if self.epsilon_decay == "exponential":
            return exponential_schedule(self.epsilon, self.epsilon_end, self.epsilon_decay_rate)
        return self.epsilon

    def stopping_conditions(self) -> list[StoppingCondition]:
        """Budget conditions implied by ``max_episodes`` / ``max_steps``."""
        conditions: list[StoppingCondition] = []
        if self.max_episodes is not None:
            conditions.append(MaxEpisodes(self.max_episodes))
        if self.max_steps is not None:
            conditions.append(MaxSteps(self.max_steps))
        return conditions
