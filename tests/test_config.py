"""Tests for the frozen config dataclasses."""

from __future__ import annotations

import dataclasses

import pytest

from rlcore.algorithms.dqn import DQNConfig
from rlcore.algorithms.q_learning import QLearningConfig
from rlcore.errors import InvalidHyperparameter
from rlcore.runner import RunnerConfig
from rlcore.stopping import MaxEpisodes, MaxSteps


class TestRunnerConfig:
    def test_defaults(self) -> None:
        config = RunnerConfig()
        assert config.epsilon_schedule() == 0.1
        assert config.stopping_conditions() == []

    def test_frozen(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            RunnerConfig().epsilon = 0.5  # type: ignore[misc]

    def test_stopping_conditions(self) -> None:
        conditions = RunnerConfig(max_episodes=10, max_steps=100).stopping_conditions()
        assert [type(c) for c in conditions] == [MaxEpisodes, MaxSteps]
        assert [c.n for c in conditions] == [10, 100]

    def test_linear_schedule(self) -> None:
        schedule = RunnerConfig(
            epsilon=1.0, epsilon_decay="linear", epsilon_end=0.1, epsilon_decay_steps=10
        ).epsilon_schedule()
        assert schedule(0) == 1.0
        assert schedule(10) == pytest.approx(0.1)

    def test_exponential_schedule(self) -> None:
        schedule = RunnerConfig(
            epsilon=1.0, epsilon_decay="exponential", epsilon_end=0.1, epsilon_decay_rate=0.5
        ).epsilon_schedule()
        assert schedule(1) == pytest.approx(0.5)
        assert schedule(50) == pytest.approx(0.1)

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"epsilon": 1.5},
            {"epsilon_end": -0.1},
            {"max_episodes": 0},
            {"max_steps": -5},
            {"max_episode_steps": 0},
            {"epsilon_decay": "cosine"},
            {"epsilon_decay_rate": 0.0},
            {"decay_by": "minute"},
            {"log_interval": 0},
        ],
    )
    def test_rejects(self, kwargs) -> None:
        with pytest.raises(InvalidHyperparameter):
            RunnerConfig(**kwargs)


class TestQLearningConfig:
    def test_defaults(self) -> None:
        config = QLearningConfig()
        assert config.learning_rate == 0.1
        assert config.discount_factor == 0.9
        assert config.initial_value == 0.0


class TestDQNConfig:
    def test_defaults_are_valid(self) -> None:
        config = DQNConfig()
        assert config.batch_size <= config.buffer_size

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"lr": 0.0},
            {"discount_factor": 1.5},
            {"batch_size": 0},
            {"batch_size": 64, "buffer_size": 32},
            {"warmup_steps": -1},
            {"train_interval": 0},
            {"target_sync_interval": 0},
            {"hidden_sizes": (32, 0)},
            {"max_grad_norm": 0.0},
        ],
    )
    def test_rejects(self, kwargs) -> None:
        with pytest.raises(InvalidHyperparameter):
            DQNConfig(**kwargs)

    def test_target_network_optional(self) -> None:
        assert DQNConfig(target_sync_interval=None).target_sync_interval is None
