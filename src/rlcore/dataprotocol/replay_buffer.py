"""Replay buffer for the approximate (DQN) variant.

Transitions hold arbitrary hashable states, so storage is a plain Python
list used as a ring: ``push`` overwrites the oldest slot once the buffer
is full.  Sampling is uniform with replacement and driven by a numpy
``Generator`` so a seeded run is reproducible.

Typical usage::

    buffer = ReplayBuffer(capacity=10_000, rng=make_rng(0))
    for step in range(total_steps):
        ...
        buffer.push(transition)
        if len(buffer) >= batch_size:
            batch = buffer.sample(batch_size)
"""

from __future__ import annotations

from collections.abc import Iterator

import numpy as np

from rlcore.dataprotocol.transition import Transition
from rlcore.errors import BufferUnderflow, check_positive


class ReplayBuffer:
    """Fixed-size circular buffer with uniform random sampling."""

    def __init__(self, capacity: int, rng: np.random.Generator | None = None) -> None:
        check_positive("capacity", capacity)
        self.capacity = capacity
        self._rng = rng if rng is not None else np.random.default_rng()
        self._storage: list[Transition] = []
        self._ptr = 0

    def push(self, transition: Transition) -> None:
        """Store a single transition, evicting the oldest one when full."""
        if len(self._storage) < self.capacity:
            self._storage.append(transition)
        else:
            self._storage[self._ptr] = transition
        self._ptr = (self._ptr + 1) % self.capacity

    def sample(self, batch_size: int) -> list[Transition]:
        """Uniformly sample *batch_size* transitions.

        Raises:
            BufferUnderflow: if fewer than *batch_size* transitions are stored.
        """
        check_positive("batch_size", batch_size)
        if len(self._storage) < batch_size:
            raise BufferUnderflow(batch_size, len(self._storage))
        indices = self._rng.integers(0, len(self._storage), size=batch_size)
        return [self._storage[i] for i in indices]

    def is_full(self) -> bool:
        return len(self._storage) == self.capacity

    def clear(self) -> None:
        self._storage.clear()
        self._ptr = 0

    def __iter__(self) -> Iterator[Transition]:
        """Iterate oldest first."""
        if not self.is_full():
            return iter(list(self._storage))
        return iter(self._storage[self._ptr:] + self._storage[: self._ptr])

    def __len__(self) -> int:
        return len(self._storage)

    def __repr__(self) -> str:
        return f"ReplayBuffer(size={len(self)}, capacity={self.capacity})"
