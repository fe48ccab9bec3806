"""Deep Q-learning update with experience replay.

Each step's transition goes into a replay buffer.  Every
``train_interval`` pushes, a uniformly random batch is drawn, each sampled
transition is turned into ``(state, action, target)`` using the same TD
target as the tabular rule, and the store fits its function on the whole
batch.  Training on decorrelated batches rather than on single consecutive
transitions is what keeps the function fit stable.

Until the buffer holds ``max(batch_size, warmup_steps)`` transitions,
:meth:`DeepQLearning.apply` raises :class:`~rlcore.errors.BufferUnderflow`;
the trainer treats that as "no update this step".
"""

from __future__ import annotations

import numpy as np

from rlcore.algorithms.dqn.config import DQNConfig
from rlcore.algorithms.dqn.store import ApproximateStore
from rlcore.algorithms.q_learning.rule import td_target
from rlcore.dataprotocol.replay_buffer import ReplayBuffer
from rlcore.dataprotocol.transition import Transition
from rlcore.errors import BufferUnderflow, InvalidHyperparameter, check_positive, check_range
from rlcore.types import TrainingExample


class DeepQLearning:
    """Replay-based update rule for :class:`ApproximateStore`.

    Args:
        discount_factor: gamma in [0, 1].
        batch_size: Transitions per fit.
        buffer: Replay buffer to use; a new one of *buffer_size* if None.
        buffer_size: Capacity of the buffer created when *buffer* is None.
        warmup_steps: Minimum buffer fill before the first fit.
        train_interval: Fit once every N pushed transitions.
        rng: Generator for the buffer created when *buffer* is None.
    """

    def __init__(
        self,
        discount_factor: float = 0.99,
        *,
        batch_size: int = 32,
        buffer: ReplayBuffer | None = None,
        buffer_size: int = 10_000,
        warmup_steps: int = 0,
        train_interval: int = 1,
        rng: np.random.Generator | None = None,
    ) -> None:
        check_range("discount_factor", discount_factor, 0.0, 1.0)
        check_positive("batch_size", batch_size)
        check_positive("train_interval", train_interval)
        self.buffer = buffer if buffer is not None else ReplayBuffer(buffer_size, rng=rng)
        if batch_size > self.buffer.capacity:
            raise InvalidHyperparameter(
                f"batch_size ({batch_size}) cannot exceed buffer capacity ({self.buffer.capacity})"
            )
        self.discount_factor = discount_factor
        self.batch_size = batch_size
        self.warmup_steps = warmup_steps
        self.train_interval = train_interval
        self._pushes = 0

    @classmethod
    def from_config(
        cls, config: DQNConfig, rng: np.random.Generator | None = None
    ) -> DeepQLearning:
        return cls(
            config.discount_factor,
            batch_size=config.batch_size,
            buffer_size=config.buffer_size,
            warmup_steps=config.warmup_steps,
            train_interval=config.train_interval,
            rng=rng,
        )

    def examples(
        self, store: ApproximateStore, batch: list[Transition]
    ) -> list[TrainingExample]:
        return [
            TrainingExample(t.state, t.action, td_target(store, t, self.discount_factor))
            for t in batch
        ]

    def apply(self, store: ApproximateStore, transition: Transition) -> dict[str, float]:
        """Record *transition* and, when due, fit *store* on a sampled batch.

        Returns the fit metrics, or an empty dict on steps without a fit.

        Raises:
            BufferUnderflow: while the buffer is still warming up.
        """
        self.buffer.push(transition)
        self._pushes += 1

        required = max(self.batch_size, self.warmup_steps)
        if len(self.buffer) < required:
            raise BufferUnderflow(required, len(self.buffer))
        if self._pushes % self.train_interval != 0:
            return {}

        batch = self.buffer.sample(self.batch_size)
        examples = self.examples(store, batch)
        loss = store.train_on_batch(examples)
        return {
            "loss": loss,
            "target_mean": float(np.mean([ex.target for ex in examples])),
        }

    def __repr__(self) -> str:
        return (
            f"DeepQLearning(discount_factor={self.discount_factor}, "
            f"batch_size={self.batch_size}, buffer={self.buffer!r})"
        )
