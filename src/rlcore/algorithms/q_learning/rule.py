"""One-step Q-learning update for the tabular store.

Off-policy: the target bootstraps from the greedy value of the next state
no matter which action the exploration policy takes next::

    target    = r                                  if terminal
              = r + gamma * max_a' Q(s', a')       otherwise
    Q(s, a)  <- (1 - alpha) * Q(s, a) + alpha * target

A next state with no legal actions is treated as terminal even when the
domain did not flag it, so the max is never taken over an empty set.
"""

from __future__ import annotations

from rlcore.algorithms.q_learning.table import TabularStore
from rlcore.dataprotocol.transition import Transition
from rlcore.errors import check_range
from rlcore.values.base import ActionValueStore


def td_target(
    store: ActionValueStore,
    transition: Transition,
    discount_factor: float,
) -> float:
    """Temporal-difference target for *transition* against *store*."""
    if not transition.bootstraps:
        return float(transition.reward)
    next_value = store.max_value(transition.next_state, transition.next_actions)
    return float(transition.reward) + discount_factor * next_value


class QLearning:
    """Tabular update rule.

    Args:
        learning_rate: alpha in (0, 1].
        discount_factor: gamma in [0, 1].
    """

    def __init__(self, learning_rate: float = 0.1, discount_factor: float = 0.9) -> None:
        check_range("learning_rate", learning_rate, 0.0, 1.0, low_inclusive=False)
        check_range("discount_factor", discount_factor, 0.0, 1.0)
        self.learning_rate = learning_rate
        self.discount_factor = discount_factor

    def target(self, store: ActionValueStore, transition: Transition) -> float:
        return td_target(store, transition, self.discount_factor)

    def apply(self, store: TabularStore, transition: Transition) -> dict[str, float]:
        """Write the updated estimate into *store*.

        Returns the TD error and the absolute change of the stored value.
        """
        old = store.value(transition.state, transition.action)
        target = self.target(store, transition)
        new = (1.0 - self.learning_rate) * old + self.learning_rate * target
        store.update(transition.state, transition.action, new)
        return {"td_error": target - old, "value_change": abs(new - old)}

    def __repr__(self) -> str:
        return (
            f"QLearning(learning_rate={self.learning_rate}, "
            f"discount_factor={self.discount_factor})"
        )
