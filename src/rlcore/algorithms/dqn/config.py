"""Deep Q-learning hyperparameters."""

from __future__ import annotations

from dataclasses import dataclass

from rlcore.errors import InvalidHyperparameter, check_positive, check_range


@dataclass(frozen=True)
class DQNConfig:
    """All deep Q-learning hyperparameters in one place.

    The optimiser learning rate ``lr`` takes the role that alpha plays in the
    tabular rule.
    """

    # Network
    hidden_sizes: tuple[int, ...] = (64, 64)

    # Optimization
    lr: float = 1e-3
    discount_factor: float = 0.99
    batch_size: int = 32
    max_grad_norm: float = 10.0

    # Experience replay
    buffer_size: int = 10_000
    warmup_steps: int = 0  # transitions required before the first fit
    train_interval: int = 1  # fit once every N pushed transitions

    # Target network (None = bootstrap from the online function)
    target_sync_interval: int | None = 100

    def __post_init__(self) -> None:
        check_range("lr", self.lr, 0.0, 1.0, low_inclusive=False)
        check_range("discount_factor", self.discount_factor, 0.0, 1.0)
        check_positive("batch_size", self.batch_size)
        check_positive("buffer_size", self.buffer_size)
        check_positive("train_interval", self.train_interval)
        check_positive("max_grad_norm", self.max_grad_norm)
        if self.warmup_steps < 0:
            raise InvalidHyperparameter(
                f"warmup_steps must be >= 0, got {self.warmup_steps!r}"
            )
        if self.batch_size > self.buffer_size:
            raise InvalidHyperparameter(
                f"batch_size ({self.batch_size}) cannot exceed "
                f"buffer_size ({self.buffer_size})"
            )
        if self.target_sync_interval is not None:
            check_positive("target_sync_interval", self.target_sync_interval)
        for size in self.hidden_sizes:
            check_positive("hidden_sizes", size)
