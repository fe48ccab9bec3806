"""Approximate action-value store backed by a trainable function."""

from __future__ import annotations

import copy
import logging
from collections.abc import Iterable, Mapping, Sequence

from rlcore.errors import NoLegalActions, check_positive
from rlcore.types import Action, State, TrainableFunction, TrainingExample
from rlcore.values.base import ActionValueStore

logger = logging.getLogger(__name__)


def _lookup(values: Mapping[Action, float], action: Action) -> float:
    try:
        return float(values[action])
    except KeyError:
        raise KeyError(f"trainable function has no value for action {action!r}") from None


class ApproximateStore(ActionValueStore):
    """Values are never stored individually, only evaluated.

    With ``target_sync_interval`` set, bootstrapping (:meth:`max_value`) reads
    a frozen copy of the function that is refreshed every
    ``target_sync_interval`` calls to :meth:`train_on_batch`.  Functions may
    provide ``snapshot()`` to produce that copy cheaply; otherwise the
    function is deep-copied.

    Args:
        function: The trainable function.
        target_sync_interval: Fits between target refreshes; ``None``
            bootstraps from the online function.
    """

    def __init__(
        self,
        function: TrainableFunction,
        target_sync_interval: int | None = None,
    ) -> None:
        if target_sync_interval is not None:
            check_positive("target_sync_interval", target_sync_interval)
        self.function = function
        self.target_sync_interval = target_sync_interval
        self.fit_count = 0
        self._target = None
        if target_sync_interval is not None:
            self.sync_target()

    def value(self, state: State, action: Action) -> float:
        return _lookup(self.function.evaluate(state), action)

    def values(self, state: State, legal_actions: Iterable[Action]) -> dict[Action, float]:
        evaluated = self.function.evaluate(state)
        return {action: _lookup(evaluated, action) for action in legal_actions}

    def max_value(self, state: State, legal_actions: Iterable[Action]) -> float:
        source = self._target if self._target is not None else self.function
        evaluated = source.evaluate(state)
        best: float | None = None
        for action in legal_actions:
            v = _lookup(evaluated, action)
            if best is None or v > best:
                best = v
        if best is None:
            raise NoLegalActions("max value requested with no legal actions", state=state)
        return best

    def train_on_batch(self, examples: Sequence[TrainingExample]) -> float:
        """Fit the function on one batch and return its loss."""
        loss = float(self.function.fit(examples))
        self.fit_count += 1
        if self.target_sync_interval is not None and self.fit_count % self.target_sync_interval == 0:
            self.sync_target()
        return loss

    def sync_target(self) -> None:
        """Copy the current function into the bootstrap target."""
        snapshot = getattr(self.function, "snapshot", None)
        self._target = snapshot() if snapshot is not None else copy.deepcopy(self.function)
        logger.debug("Synced target function after %d fits", self.fit_count)

    @property
    def has_target(self) -> bool:
        return self._target is not None

    def __repr__(self) -> str:
        return (
            f"ApproximateStore({self.function!r}, "
            f"target_sync_interval={self.target_sync_interval})"
        )
