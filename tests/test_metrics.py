"""Tests for rlcore.metrics."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import patch

import jax.numpy as jnp
import numpy as np
import pytest

from rlcore.metrics import MetricsLogger, log_step_progress, read_metrics, setup_logging


@pytest.fixture
def rlcore_logger() -> Iterator[logging.Logger]:
    logger = logging.getLogger("rlcore")
    yield logger
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


class TestMetricsLogger:
    def test_write_and_read(self, tmp_path: Path) -> None:
        path = tmp_path / "metrics.jsonl"
        with MetricsLogger(path) as logger:
            logger.write({"episode": 1, "return": 0.5})
            logger.write({"episode": 2, "return": 1.0, "loss": 0.25})

        records = read_metrics(path)
        assert len(records) == 2
        assert records[0]["episode"] == 1
        assert records[1]["loss"] == 0.25

    def test_auto_wall_time(self, tmp_path: Path) -> None:
        path = tmp_path / "metrics.jsonl"
        with MetricsLogger(path) as logger:
            logger.write({"step": 1})

        assert isinstance(read_metrics(path)[0]["wall_time"], float)

    def test_explicit_wall_time_not_overwritten(self, tmp_path: Path) -> None:
        path = tmp_path / "metrics.jsonl"
        with MetricsLogger(path) as logger:
            logger.write({"step": 1, "wall_time": 99.9})

        assert read_metrics(path)[0]["wall_time"] == 99.9

    def test_scalar_conversion(self, tmp_path: Path) -> None:
        path = tmp_path / "metrics.jsonl"
        with MetricsLogger(path) as logger:
            logger.write({"loss": jnp.float32(0.5), "step": np.int64(100)})

        record = read_metrics(path)[0]
        assert isinstance(record["loss"], float)
        assert isinstance(record["step"], int)

    def test_append_mode(self, tmp_path: Path) -> None:
        path = tmp_path / "metrics.jsonl"
        for step in (1, 2):
            logger = MetricsLogger(path)
            logger.write({"step": step})
            logger.close()

        assert [r["step"] for r in read_metrics(path)] == [1, 2]

    def test_creates_parent_dirs(self, tmp_path: Path) -> None:
        path = tmp_path / "deep" / "nested" / "metrics.jsonl"
        with MetricsLogger(path) as logger:
            logger.write({"x": 1})
            assert logger.path == path

        assert path.exists()

    def test_read_nonexistent_file(self, tmp_path: Path) -> None:
        assert read_metrics(tmp_path / "nope.jsonl") == []


class TestSetupLogging:
    def test_single_handler(self, rlcore_logger: logging.Logger) -> None:
        setup_logging()
        setup_logging()
        assert len(rlcore_logger.handlers) == 1
        assert rlcore_logger.level == logging.INFO
        assert rlcore_logger.propagate is False

    def test_custom_level(self, rlcore_logger: logging.Logger) -> None:
        setup_logging(level=logging.DEBUG)
        assert rlcore_logger.level == logging.DEBUG

    def test_formatter_output(self, rlcore_logger: logging.Logger) -> None:
        setup_logging()
        handler = rlcore_logger.handlers[0]
        for level, abbrev in [(logging.DEBUG, "D"), (logging.WARNING, "W"), (logging.ERROR, "E")]:
            record = logging.LogRecord(
                name="rlcore.runner.trainer",
                level=level,
                pathname="",
                lineno=0,
                msg="episode %d done",
                args=(3,),
                exc_info=None,
            )
            formatted = handler.format(record)
            assert formatted.startswith(f"{abbrev} ")
            assert "[rlcore.runner.trainer] episode 3 done" in formatted


class TestLogStepProgress:
    def test_with_budget(self) -> None:
        with patch.object(logging.getLogger("rlcore"), "info") as mock_info:
            log_step_progress(500, 10_000)
        msg = mock_info.call_args[0][0]
        assert "500/10000" in msg
        assert "5.0%" in msg

    def test_without_budget(self) -> None:
        with patch.object(logging.getLogger("rlcore"), "info") as mock_info:
            log_step_progress(500, None, {"episode": 12, "epsilon": 0.25})
        msg = mock_info.call_args[0][0]
        assert "%" not in msg
        assert msg.startswith("step 500")
        assert "episode=12" in msg
        assert "epsilon=0.25" in msg
