"""Core type definitions for rlcore.

States and actions are opaque to the core: any immutable, hashable value
works (ints, strings, tuples, frozen dataclasses, ...).  The problem domain
and the trainable function are consumed through structural protocols, so
callers never have to inherit from anything.
"""

from __future__ import annotations

from collections.abc import Hashable, Iterable, Mapping, Sequence
from typing import Any, NamedTuple, Protocol, TypeAlias, runtime_checkable

# ---------------------------------------------------------------------------
# Scalar / key type aliases
# ---------------------------------------------------------------------------
State: TypeAlias = Hashable
Action: TypeAlias = Hashable
Reward: TypeAlias = float


class _Unset:
    """Marker for an omitted start state; ``None`` is a valid state."""

    def __repr__(self) -> str:
        return "UNSET"


UNSET: Any = _Unset()


class TrainingExample(NamedTuple):
    """One supervised example for the approximate store: ``Q(state, action) ~ target``."""

    state: State
    action: Action
    target: float


# ---------------------------------------------------------------------------
# Consumed interfaces
# ---------------------------------------------------------------------------
@runtime_checkable
class Domain(Protocol):
    """Structural contract for a problem domain.

    Domains may additionally define ``is_terminal(state) -> bool`` to flag
    terminal states that still report legal actions; it is looked up with
    ``getattr`` and therefore not part of the protocol.
    """

    def legal_actions(self, state: State) -> Iterable[Action]:
        """Return the legal actions at *state*; empty means terminal.

        The iteration order is the order used to break ties between
        equally valued actions.
        """
        ...

    def step(self, state: State, action: Action) -> tuple[Reward, State]:
        """Apply *action* at *state* and return ``(reward, next_state)``."""
        ...


@runtime_checkable
class TrainableFunction(Protocol):
    """An opaque parametrised function ``State -> {Action: value}``.

    The approximate store calls ``evaluate`` for every lookup and ``fit``
    once per sampled batch.  How the parameters change is entirely up to
    the implementation.
    """

    def evaluate(self, state: State) -> Mapping[Action, float]:
        ...

    def fit(self, examples: Sequence[TrainingExample]) -> float:
        """Adjust parameters on one batch and return the training loss."""
        ...


def is_terminal(domain: Domain, state: State) -> bool:
    """Return the domain's own terminal signal for *state* (``False`` if absent)."""
    fn = getattr(domain, "is_terminal", None)
    if fn is None:
        return False
    return bool(fn(state))
