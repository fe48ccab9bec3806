"""Exact tabular action-value store."""

from __future__ import annotations

import copy
from collections.abc import Mapping

from rlcore.types import Action, State
from rlcore.values.base import ActionValueStore

Table = dict[State, dict[Action, float]]


class TabularStore(ActionValueStore):
    """Nested ``state -> {action: value}`` mapping.

    Reads never create entries: an unseen pair evaluates to
    ``initial_value`` until the update rule writes it.

    Args:
        initial_value: Estimate returned for pairs that were never updated.
    """

    def __init__(self, initial_value: float = 0.0) -> None:
        self.initial_value = float(initial_value)
        self._table: Table = {}

    def value(self, state: State, action: Action) -> float:
        return self._table.get(state, {}).get(action, self.initial_value)

    def update(self, state: State, action: Action, new_value: float) -> None:
        """Write *new_value* for ``(state, action)``."""
        self._table.setdefault(state, {})[action] = float(new_value)

    def expected_values(self, state: State) -> dict[Action, float] | None:
        """Learned values for *state*, or ``None`` if it was never updated."""
        entry = self._table.get(state)
        return dict(entry) if entry is not None else None

    def export_values(self) -> Table:
        """Return a deep copy of the learned table."""
        return copy.deepcopy(self._table)

    def import_values(self, table: Mapping[State, Mapping[Action, float]]) -> None:
        """Replace the learned table with *table*."""
        self._table = {
            state: {action: float(v) for action, v in actions.items()}
            for state, actions in table.items()
        }

    def states(self) -> list[State]:
        return list(self._table)

    def __contains__(self, key: object) -> bool:
        """``(state, action) in store`` tests whether the pair was ever updated."""
        if not isinstance(key, tuple) or len(key) != 2:
            return False
        state, action = key
        return action in self._table.get(state, {})

    def __len__(self) -> int:
        return sum(len(actions) for actions in self._table.values())

    def __repr__(self) -> str:
        return f"TabularStore(pairs={len(self)}, initial_value={self.initial_value})"
