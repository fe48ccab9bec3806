"""Tests for stopping conditions."""

from __future__ import annotations

import pytest

from rlcore.errors import InvalidHyperparameter
from rlcore.stopping import (
    MaxEpisodes,
    MaxSteps,
    RewardPredicate,
    TrainerStatus,
    TrainProgress,
    ValueChangeBelow,
)


class TestBudgets:
    def test_max_episodes(self) -> None:
        cond = MaxEpisodes(3)
        assert cond.check(TrainProgress(episodes=2)) is None
        assert cond.check(TrainProgress(episodes=3)) is TrainerStatus.EXHAUSTED

    def test_max_steps(self) -> None:
        cond = MaxSteps(100)
        assert not cond.should_stop(TrainProgress(steps=99))
        assert cond.check(TrainProgress(steps=100)) is TrainerStatus.EXHAUSTED

    @pytest.mark.parametrize("cls", [MaxEpisodes, MaxSteps])
    def test_rejects_non_positive(self, cls) -> None:
        with pytest.raises(InvalidHyperparameter):
            cls(0)


class TestRewardPredicate:
    def test_waits_for_full_window(self) -> None:
        cond = RewardPredicate(lambda rs: min(rs) >= 1.0, window=3)
        assert cond.check(TrainProgress(episode_returns=[1.0, 1.0])) is None

    def test_converged_over_window(self) -> None:
        cond = RewardPredicate(lambda rs: min(rs) >= 1.0, window=3)
        progress = TrainProgress(episode_returns=[0.0, 1.0, 1.0, 1.0])
        assert cond.check(progress) is TrainerStatus.CONVERGED

    def test_only_last_window_is_seen(self) -> None:
        seen = []
        cond = RewardPredicate(lambda rs: seen.append(list(rs)) or False, window=2)
        cond.check(TrainProgress(episode_returns=[1.0, 2.0, 3.0]))
        assert seen == [[2.0, 3.0]]


class TestValueChangeBelow:
    def test_converged_after_patience(self) -> None:
        cond = ValueChangeBelow(threshold=0.01, patience=2)
        assert cond.check(TrainProgress(episode_value_changes=[0.5, 0.001])) is None
        progress = TrainProgress(episode_value_changes=[0.5, 0.001, 0.002])
        assert cond.check(progress) is TrainerStatus.CONVERGED

    def test_threshold_is_exclusive(self) -> None:
        cond = ValueChangeBelow(threshold=0.01)
        assert cond.check(TrainProgress(episode_value_changes=[0.01])) is None

    def test_no_history(self) -> None:
        assert not ValueChangeBelow(threshold=0.1).should_stop(TrainProgress())


class TestTrainerStatus:
    def test_finished(self) -> None:
        assert not TrainerStatus.IDLE.finished
        assert not TrainerStatus.RUNNING.finished
        assert TrainerStatus.CONVERGED.finished
        assert TrainerStatus.EXHAUSTED.finished
        assert TrainerStatus.FAILED.finished
