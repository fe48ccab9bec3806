"""Transition container for RL experience data.

A transition is created once per environment step by the trainer and
handed to the update rule.  Only the replay buffer keeps transitions
around after that, which is why the legal actions of the next state are
captured at creation time: a replayed transition can be bootstrapped
without querying the domain again.
"""

from __future__ import annotations

from typing import NamedTuple

from rlcore.types import Action, Reward, State


class Transition(NamedTuple):
    """A single (s, a, r, s', terminal) experience tuple.

    Fields:
        state:        State the action was taken in.
        action:       Action taken.
        reward:       Scalar reward received.
        next_state:   Resulting state.
        terminal:     Whether ``next_state`` ends the episode.
        next_actions: Legal actions at ``next_state`` (empty when terminal).
    """

    state: State
    action: Action
    reward: Reward
    next_state: State
    terminal: bool
    next_actions: tuple[Action, ...] = ()

    @property
    def bootstraps(self) -> bool:
        """True if the TD target includes a next-state value."""
        return not self.terminal and len(self.next_actions) > 0
