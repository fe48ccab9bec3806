"""Action-value store interface.

Two implementations share this interface:

- :class:`~rlcore.algorithms.q_learning.table.TabularStore`: an exact
  ``(state, action) -> value`` mapping written in place by
  :class:`~rlcore.algorithms.q_learning.rule.QLearning`.
- :class:`~rlcore.algorithms.dqn.store.ApproximateStore`: a trainable
  function fitted on batches by
  :class:`~rlcore.algorithms.dqn.rule.DeepQLearning`.

Exploration policies only ever read a store; the update rule owned by the
trainer is the only writer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable

from rlcore.errors import NoLegalActions
from rlcore.types import Action, State


class ActionValueStore(ABC):
    """Estimated value for (state, action) pairs."""

    @abstractmethod
    def value(self, state: State, action: Action) -> float:
        """Return the current estimate for ``(state, action)``."""
        ...

    def values(self, state: State, legal_actions: Iterable[Action]) -> dict[Action, float]:
        """Return estimates for every legal action, in the supplied order."""
        return {action: self.value(state, action) for action in legal_actions}

    def best_action(
        self, state: State, legal_actions: Iterable[Action]
    ) -> tuple[Action, float]:
        """Return the ``(action, value)`` pair with the highest estimate.

        Ties go to the action that comes first in *legal_actions*.

        Raises:
            NoLegalActions: if *legal_actions* is empty.
        """
        best: tuple[Action, float] | None = None
        for action, value in self.values(state, legal_actions).items():
            if best is None or value > best[1]:
                best = (action, value)
        if best is None:
            raise NoLegalActions("best action requested with no legal actions", state=state)
        return best

    def max_value(self, state: State, legal_actions: Iterable[Action]) -> float:
        """Value used to bootstrap a TD target from *state*."""
        return self.best_action(state, legal_actions)[1]
