"""Exploration policies.

A policy picks one of the legal actions at a state given the current value
estimates.  Policies only read the store::

    policy = EpsilonGreedy(linear_schedule(1.0, 0.05, 5_000), rng=make_rng(0))
    action = policy.select(state, legal_actions, store, step=global_step)

``Greedy`` is meant for evaluation; ``EpsilonGreedy`` for training;
``RandomExploration`` gives a baseline.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import Literal

import numpy as np

from rlcore.errors import InvalidHyperparameter, NoLegalActions, check_range
from rlcore.schedule import Schedule
from rlcore.types import Action, State
from rlcore.values.base import ActionValueStore


class ExplorationPolicy(ABC):
    """Choose an action among *legal_actions*."""

    @abstractmethod
    def select(
        self,
        state: State,
        legal_actions: Sequence[Action],
        store: ActionValueStore,
        *,
        step: int = 0,
        episode: int = 0,
    ) -> Action:
        """Return the chosen action.

        Args:
            state: Current state.
            legal_actions: Non-empty, ordered legal actions at *state*.
            store: Current value estimates (read only).
            step: Global step index, for step-decayed schedules.
            episode: Episode index, for episode-decayed schedules.
        """
        ...


class Greedy(ExplorationPolicy):
    """Always exploit: ``store.best_action``."""

    def select(self, state, legal_actions, store, *, step=0, episode=0):
        return store.best_action(state, legal_actions)[0]

    def __repr__(self) -> str:
        return "Greedy()"


class RandomExploration(ExplorationPolicy):
    """Uniformly random legal action."""

    def __init__(self, rng: np.random.Generator | None = None) -> None:
        self._rng = rng if rng is not None else np.random.default_rng()

    def select(self, state, legal_actions, store, *, step=0, episode=0):
        if len(legal_actions) == 0:
            raise NoLegalActions("cannot pick a random action from an empty set", state=state)
        return legal_actions[int(self._rng.integers(len(legal_actions)))]

    def __repr__(self) -> str:
        return "RandomExploration()"


class EpsilonGreedy(ExplorationPolicy):
    """Random with probability epsilon, greedy otherwise.

    Args:
        epsilon: A constant in [0, 1] or a schedule ``(int) -> float``.
        rng: Source of randomness.
        decay_by: Whether a schedule is indexed by global ``"step"`` or by
            ``"episode"``.
    """

    def __init__(
        self,
        epsilon: float | Schedule,
        rng: np.random.Generator | None = None,
        decay_by: Literal["step", "episode"] = "step",
    ) -> None:
        if decay_by not in ("step", "episode"):
            raise InvalidHyperparameter(f"decay_by must be 'step' or 'episode', got {decay_by!r}")
        if not callable(epsilon):
            check_range("epsilon", epsilon, 0.0, 1.0)
        self._epsilon = epsilon
        self._rng = rng if rng is not None else np.random.default_rng()
        self._greedy = Greedy()
        self.decay_by = decay_by

    def epsilon(self, *, step: int = 0, episode: int = 0) -> float:
        """Exploration rate at the given point of training."""
        if not callable(self._epsilon):
            return float(self._epsilon)
        value = float(self._epsilon(step if self.decay_by == "step" else episode))
        check_range("epsilon", value, 0.0, 1.0)
        return value

    def select(self, state, legal_actions, store, *, step=0, episode=0):
        eps = self.epsilon(step=step, episode=episode)
        if eps > 0.0 and self._rng.random() < eps:
            if len(legal_actions) == 0:
                raise NoLegalActions("cannot explore from an empty action set", state=state)
            return legal_actions[int(self._rng.integers(len(legal_actions)))]
        return self._greedy.select(state, legal_actions, store)

    def __repr__(self) -> str:
        return f"EpsilonGreedy(epsilon={self._epsilon!r}, decay_by={self.decay_by!r})"
