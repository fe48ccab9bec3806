"""Tabular Q-learning hyperparameters."""

from __future__ import annotations

from dataclasses import dataclass

from rlcore.errors import check_range


@dataclass(frozen=True)
class QLearningConfig:
    """All tabular Q-learning hyperparameters in one place.

    Validated on construction; an out-of-range value raises
    ``InvalidHyperparameter`` before any training starts.
    """

    # Step size alpha in (0, 1]
    learning_rate: float = 0.1

    # Discount gamma in [0, 1]
    discount_factor: float = 0.9

    # Estimate for pairs that were never updated
    initial_value: float = 0.0

    def __post_init__(self) -> None:
        check_range("learning_rate", self.learning_rate, 0.0, 1.0, low_inclusive=False)
        check_range("discount_factor", self.discount_factor, 0.0, 1.0)
