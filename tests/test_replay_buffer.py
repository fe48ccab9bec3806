"""Tests for ReplayBuffer."""

from __future__ import annotations

import numpy as np
import pytest

from rlcore.dataprotocol import ReplayBuffer, Transition
from rlcore.errors import BufferUnderflow, InvalidHyperparameter


def _transition(i: int) -> Transition:
    return Transition(state=i, action="a", reward=float(i), next_state=i + 1, terminal=False)


class TestReplayBuffer:
    def test_push_and_len(self) -> None:
        buf = ReplayBuffer(capacity=10)
        assert len(buf) == 0
        buf.push(_transition(0))
        assert len(buf) == 1

    def test_eviction_at_capacity(self) -> None:
        buf = ReplayBuffer(capacity=3)
        for i in range(4):
            buf.push(_transition(i))
        assert len(buf) == 3
        states = [t.state for t in buf]
        assert 0 not in states
        assert states == [1, 2, 3]

    def test_circular_overwrite_keeps_order(self) -> None:
        buf = ReplayBuffer(capacity=3)
        for i in range(7):
            buf.push(_transition(i))
        assert [t.state for t in buf] == [4, 5, 6]
        assert buf.is_full()

    def test_sample_size_and_membership(self) -> None:
        buf = ReplayBuffer(capacity=100, rng=np.random.default_rng(0))
        for i in range(20):
            buf.push(_transition(i))
        batch = buf.sample(8)
        assert len(batch) == 8
        assert all(isinstance(t, Transition) for t in batch)
        assert all(0 <= t.state < 20 for t in batch)

    def test_sample_covers_buffer(self) -> None:
        buf = ReplayBuffer(capacity=5, rng=np.random.default_rng(0))
        for i in range(5):
            buf.push(_transition(i))
        seen = {t.state for _ in range(50) for t in buf.sample(5)}
        assert seen == {0, 1, 2, 3, 4}

    def test_underflow(self) -> None:
        buf = ReplayBuffer(capacity=10)
        buf.push(_transition(0))
        with pytest.raises(BufferUnderflow) as exc_info:
            buf.sample(4)
        assert exc_info.value.requested == 4
        assert exc_info.value.available == 1

    def test_seeded_sampling_is_reproducible(self) -> None:
        bufs = [ReplayBuffer(capacity=50, rng=np.random.default_rng(3)) for _ in range(2)]
        for buf in bufs:
            for i in range(50):
                buf.push(_transition(i))
        assert bufs[0].sample(10) == bufs[1].sample(10)

    def test_clear(self) -> None:
        buf = ReplayBuffer(capacity=2)
        buf.push(_transition(0))
        buf.clear()
        assert len(buf) == 0
        buf.push(_transition(1))
        assert [t.state for t in buf] == [1]

    def test_invalid_capacity(self) -> None:
        with pytest.raises(InvalidHyperparameter):
            ReplayBuffer(capacity=0)
