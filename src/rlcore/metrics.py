"""Structured JSONL metrics and console logging for training runs.

``MetricsLogger`` appends one JSON object per line; the trainer writes one
record per finished episode.  Each line is self-describing, so fields may
differ between records (e.g. ``loss`` only appears once the replay buffer
has warmed up).

Usage::

    from rlcore.metrics import MetricsLogger, setup_logging

    setup_logging()
    with MetricsLogger("runs/lineworld/metrics.jsonl") as metrics:
        trainer = Trainer(..., metrics=metrics)
        trainer.run()
"""

from __future__ import annotations

import json
import logging
import time
from pathlib import Path
from typing import IO, Any

import jax.numpy as jnp
import numpy as np

# ---------------------------------------------------------------------------
# Structured console logging
# ---------------------------------------------------------------------------

_LEVEL_ABBREV = {
    logging.DEBUG: "D",
    logging.INFO: "I",
    logging.WARNING: "W",
    logging.ERROR: "E",
    logging.CRITICAL: "C",
}


class _TrainFormatter(logging.Formatter):
    """Abbreviated level + millisecond timestamp.

    Example output::

        I 2026-02-15 14:30:22.123 [rlcore.runner.trainer] Training finished: exhausted
    """

    def format(self, record: logging.LogRecord) -> str:
        lvl = _LEVEL_ABBREV.get(record.levelno, "?")
        ts = self.formatTime(record, "%Y-%m-%d %H:%M:%S")
        msg = record.getMessage()
        line = f"{lvl} {ts}.{int(record.msecs):03d} [{record.name}] {msg}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def setup_logging(level: int = logging.INFO) -> None:
    """Install a compact stream handler on the ``rlcore`` logger.

    Existing handlers on that logger are replaced, so repeated calls do not
    duplicate output.
    """
    logger = logging.getLogger("rlcore")
    logger.setLevel(level)

    for h in logger.handlers[:]:
        logger.removeHandler(h)

    handler = logging.StreamHandler()
    handler.setFormatter(_TrainFormatter())
    logger.addHandler(handler)
    logger.propagate = False


def log_step_progress(
    step: int,
    total_steps: int | None,
    metrics: dict[str, Any] | None = None,
    logger_name: str = "rlcore",
) -> None:
    """Log a one-line training progress message.

    Example output::

        I 2026-02-15 14:30:22.123 [rlcore] step 5000/20000 (25.0%) | episode=212 epsilon=0.31

    When the run has no step budget (*total_steps* is ``None``) the
    percentage is omitted.
    """
    if total_steps:
        parts = [f"step {step}/{total_steps} ({100.0 * step / total_steps:.1f}%)"]
    else:
        parts = [f"step {step}"]
    if metrics:
        kv = " ".join(
            f"{k}={v:.4g}" if isinstance(v, float) else f"{k}={v}"
            for k, v in ((k, _to_python(v)) for k, v in metrics.items())
            if k not in ("step", "wall_time")
        )
        if kv:
            parts.append(kv)
    logging.getLogger(logger_name).info(" | ".join(parts))


# ---------------------------------------------------------------------------
# MetricsLogger
# ---------------------------------------------------------------------------


class MetricsLogger:
    """Append-only JSONL logger.

    Parameters
    ----------
    path:
        Path to the JSONL file.  Parent directories are created
        automatically.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._file: IO[str] = open(self._path, "a")  # noqa: SIM115
        self._start_time = time.monotonic()

    def write(self, record: dict[str, Any]) -> None:
        """Write a single record as one JSON line.

        Adds ``wall_time`` (seconds since the logger was created) unless
        present, and converts numpy/JAX scalars to Python numbers.
        """
        row = {k: _to_python(v) for k, v in record.items()}
        if "wall_time" not in row:
            row["wall_time"] = round(time.monotonic() - self._start_time, 3)
        self._file.write(json.dumps(row, default=str) + "\n")
        self._file.flush()

    def close(self) -> None:
        self._file.close()

    @property
    def path(self) -> Path:
        return self._path

    def __enter__(self) -> MetricsLogger:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"MetricsLogger({self._path})"


def read_metrics(path: str | Path) -> list[dict[str, Any]]:
    """Read all records from a JSONL metrics file."""
    p = Path(path)
    if not p.exists():
        return []
    return [json.loads(line) for line in p.read_text().splitlines() if line.strip()]


def _to_python(val: Any) -> Any:
    """Convert JAX/numpy scalars to plain Python types for JSON."""
    if isinstance(val, (jnp.ndarray, np.ndarray)):
        return val.item()
    if isinstance(val, (np.integer, np.floating, np.bool_)):
        return val.item()
    return val
