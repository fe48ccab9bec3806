"""Shared test domains.

All domains are tiny, deterministic and implement the ``Domain`` protocol
structurally (no base class).
"""

from __future__ import annotations

import pytest


class LineWorld:
    """Cells ``0..size-1``; reward 1.0 on reaching the last cell, which is terminal.

    Moving left from cell 0 stays in cell 0.
    """

    ACTIONS = ("left", "right")

    def __init__(self, size: int = 6) -> None:
        self.size = size
        self.goal = size - 1

    def legal_actions(self, state: int) -> tuple[str, ...]:
        return () if state == self.goal else self.ACTIONS

    def step(self, state: int, action: str) -> tuple[float, int]:
        next_state = min(state + 1, self.goal) if action == "right" else max(state - 1, 0)
        return (1.0 if next_state == self.goal else 0.0), next_state

    def encode(self, state: int) -> list[float]:
        return [state / self.goal]


class Ring:
    """Never terminates: a single action cycling through ``0..size-1``, reward 1 per step."""

    def __init__(self, size: int = 3) -> None:
        self.size = size

    def legal_actions(self, state: int) -> tuple[str, ...]:
        return ("next",)

    def step(self, state: int, action: str) -> tuple[float, int]:
        return 1.0, (state + 1) % self.size


class FlaggedTerminal(LineWorld):
    """Line world whose goal still lists actions but is flagged by ``is_terminal``."""

    def legal_actions(self, state: int) -> tuple[str, ...]:
        return self.ACTIONS

    def is_terminal(self, state: int) -> bool:
        return state == self.goal


class ExplodingDomain(LineWorld):
    """``step`` raises once the agent enters *bad_state*."""

    def __init__(self, size: int = 6, bad_state: int = 2) -> None:
        super().__init__(size)
        self.bad_state = bad_state

    def step(self, state: int, action: str) -> tuple[float, int]:
        if state == self.bad_state:
            raise RuntimeError("simulation diverged")
        return super().step(state, action)


class DeadEnd:
    """A start state with no legal actions that is not flagged terminal."""

    def legal_actions(self, state: int) -> tuple[str, ...]:
        return ()

    def step(self, state: int, action: str) -> tuple[float, int]:
        raise AssertionError("step must not be called")


@pytest.fixture
def line_world() -> LineWorld:
    return LineWorld(size=6)


@pytest.fixture
def small_line_world() -> LineWorld:
    return LineWorld(size=4)


@pytest.fixture
def ring() -> Ring:
    return Ring()


@pytest.fixture
def flagged_terminal() -> FlaggedTerminal:
    return FlaggedTerminal(size=4)


@pytest.fixture
def exploding_domain() -> ExplodingDomain:
    return ExplodingDomain(size=6, bad_state=2)


@pytest.fixture
def dead_end() -> DeadEnd:
    return DeadEnd()
