"""Tests for rlcore.checkpoint."""

from __future__ import annotations

from pathlib import Path

import pytest

from rlcore.algorithms.dqn import ApproximateStore, DQNConfig, QNetworkFunction
from rlcore.algorithms.q_learning import TabularStore
from rlcore.checkpoint import (
    load_checkpoint,
    load_function,
    load_metadata,
    load_table,
    save_checkpoint,
    save_function,
    save_table,
)
from rlcore.seeding import make_key
from rlcore.types import TrainingExample

ACTIONS = ("left", "right")


def _store() -> TabularStore:
    store = TabularStore(initial_value=0.5)
    store.update(0, "right", 0.9)
    store.update((1, 2), "left", -1.0)
    store.update("goal", "stay", 1.0)
    return store


def _network(seed: int) -> QNetworkFunction:
    return QNetworkFunction(
        ACTIONS,
        encode=lambda s: [float(s)],
        input_dim=1,
        config=DQNConfig(hidden_sizes=(8,)),
        key=make_key(seed),
    )


class TestTable:
    @pytest.mark.parametrize("name", ["values.pkl", "values.pkl.bz2"])
    def test_roundtrip(self, tmp_path: Path, name: str) -> None:
        path = save_table(tmp_path / name, _store())
        restored = load_table(path)
        assert restored.export_values() == _store().export_values()
        assert restored.initial_value == 0.5
        assert restored.value("unseen", "a") == 0.5

    def test_load_into_existing_store(self, tmp_path: Path) -> None:
        save_table(tmp_path / "values.pkl", _store())
        target = TabularStore()
        target.update("stale", "a", 3.0)
        assert load_table(tmp_path / "values.pkl", target) is target
        assert ("stale", "a") not in target
        assert target.value((1, 2), "left") == -1.0

    def test_creates_parent_dirs(self, tmp_path: Path) -> None:
        path = save_table(tmp_path / "a" / "b" / "values.pkl", _store())
        assert path.exists()


class TestFunction:
    def test_roundtrip(self, tmp_path: Path) -> None:
        trained = _network(0)
        for _ in range(5):
            trained.fit([TrainingExample(1, "right", 2.0)])
        save_function(tmp_path / "state.eqx", trained)

        fresh = _network(1)
        assert fresh.evaluate(1) != trained.evaluate(1)
        load_function(tmp_path / "state.eqx", fresh)
        assert fresh.evaluate(1) == trained.evaluate(1)


class TestCheckpoint:
    def test_tabular_with_metadata(self, tmp_path: Path) -> None:
        d = save_checkpoint(tmp_path / "ckpt", _store(), metadata={"episodes": 12})
        restored = load_checkpoint(d, TabularStore())
        assert restored.export_values() == _store().export_values()
        assert load_metadata(d) == {"episodes": 12}

    def test_step_subdirectory(self, tmp_path: Path) -> None:
        d = save_checkpoint(tmp_path, _store(), step=500)
        assert d == tmp_path / "step_500"
        restored = load_checkpoint(tmp_path, TabularStore(), step=500)
        assert restored.value(0, "right") == 0.9

    def test_no_metadata_returns_none(self, tmp_path: Path) -> None:
        save_checkpoint(tmp_path, _store())
        assert load_metadata(tmp_path) is None

    def test_approximate_store_resyncs_target(self, tmp_path: Path) -> None:
        trained = _network(0)
        trained.fit([TrainingExample(1, "left", -3.0)])
        save_checkpoint(tmp_path, ApproximateStore(trained))

        store = ApproximateStore(_network(1), target_sync_interval=10)
        load_checkpoint(tmp_path, store)
        expected = max(trained.evaluate(1).values())
        assert store.max_value(1, ACTIONS) == pytest.approx(expected)

    def test_unknown_store(self, tmp_path: Path) -> None:
        with pytest.raises(TypeError):
            save_checkpoint(tmp_path, object())  # type: ignore[arg-type]

    def test_function_without_parameters(self, tmp_path: Path) -> None:
        class DictFunction:
            def evaluate(self, state):
                return {a: 0.0 for a in ACTIONS}

            def fit(self, examples):
                return 0.0

        with pytest.raises(TypeError, match="DictFunction"):
            save_checkpoint(tmp_path, ApproximateStore(DictFunction()))
        with pytest.raises(TypeError):
            load_function(tmp_path / "state.eqx", DictFunction())
