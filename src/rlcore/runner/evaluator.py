"""Greedy evaluation of a learned store.

Rolls out the greedy policy (no exploration, no updates) from one or more
start states::

    path = greedy_rollout(domain, store, 0, max_steps=50)
    [step.action for step in path]          # ["right", "right", ...]

    metrics = evaluate(domain, store, 0, n_episodes=10, max_steps=50)
    # metrics.mean_return, metrics.std_return, metrics.mean_length
"""

from __future__ import annotations

from collections.abc import Callable
from typing import NamedTuple

import numpy as np

from rlcore.errors import InvalidHyperparameter, check_positive
from rlcore.types import UNSET, Action, Domain, State, is_terminal
from rlcore.values.base import ActionValueStore


class EvalMetrics(NamedTuple):
    """Aggregated evaluation results."""

    mean_return: float
    std_return: float
    mean_length: float


class RolloutStep(NamedTuple):
    state: State
    action: Action
    reward: float


def greedy_rollout(
    domain: Domain,
    store: ActionValueStore,
    state: State,
    *,
    max_steps: int,
) -> list[RolloutStep]:
    """Follow ``store.best_action`` from *state* until terminal or *max_steps*."""
    check_positive("max_steps", max_steps)
    path: list[RolloutStep] = []
    while len(path) < max_steps:
        actions = tuple(domain.legal_actions(state))
        if not actions or is_terminal(domain, state):
            break
        action, _ = store.best_action(state, actions)
        reward, next_state = domain.step(state, action)
        path.append(RolloutStep(state, action, float(reward)))
        state = next_state
    return path


def evaluate(
    domain: Domain,
    store: ActionValueStore,
    initial_state: State = UNSET,
    *,
    initial_state_fn: Callable[[], State] | None = None,
    n_episodes: int = 10,
    max_steps: int = 1_000,
) -> EvalMetrics:
    """Mean/std return and mean length of *n_episodes* greedy rollouts."""
    if (initial_state is UNSET) == (initial_state_fn is None):
        raise InvalidHyperparameter(
            "exactly one of initial_state and initial_state_fn is required"
        )
    check_positive("n_episodes", n_episodes)
    start = initial_state_fn if initial_state_fn is not None else (lambda: initial_state)

    returns = np.zeros(n_episodes)
    lengths = np.zeros(n_episodes)
    for i in range(n_episodes):
        path = greedy_rollout(domain, store, start(), max_steps=max_steps)
        returns[i] = sum(step.reward for step in path)
        lengths[i] = len(path)

    return EvalMetrics(
        mean_return=float(np.mean(returns)),
        std_return=float(np.std(returns)),
        mean_length=float(np.mean(lengths)),
    )
