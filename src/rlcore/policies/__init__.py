"""Exploration policies: greedy, epsilon-greedy and uniform random."""

from rlcore.policies.exploration import (
    EpsilonGreedy,
    ExplorationPolicy,
    Greedy,
    RandomExploration,
)

__all__ = [
    "EpsilonGreedy",
    "ExplorationPolicy",
    "Greedy",
    "RandomExploration",
]
