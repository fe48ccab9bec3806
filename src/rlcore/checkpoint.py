"""Persistence for learned action values.

Each store is saved in the format its parameters natively support:

- :class:`~rlcore.algorithms.q_learning.table.TabularStore`: the nested
  ``state -> {action: value}`` mapping is pickled with ``dill`` (keys are
  arbitrary hashable objects, so array formats do not apply).  Paths ending
  in ``.bz2`` are compressed.
- :class:`~rlcore.algorithms.dqn.function.QNetworkFunction`: network
  parameters and optimiser state are written with Equinox leaf
  serialisation and restored into a like-shaped template.

Usage::

    from rlcore.checkpoint import load_checkpoint, save_checkpoint

    save_checkpoint("runs/lineworld/final", store, metadata={"episodes": 500})
    load_checkpoint("runs/lineworld/final", TabularStore())
"""

from __future__ import annotations

import bz2
import json
import logging
from pathlib import Path
from typing import IO, Any

import dill
import equinox as eqx

from rlcore.algorithms.dqn.store import ApproximateStore
from rlcore.algorithms.q_learning.table import TabularStore
from rlcore.values.base import ActionValueStore

logger = logging.getLogger(__name__)

_TABLE_FILE = "values.pkl"
_FUNCTION_FILE = "state.eqx"
_METADATA_FILE = "metadata.json"


def _open(path: Path, mode: str) -> IO[bytes]:
    if path.suffix == ".bz2":
        return bz2.open(path, mode)
    return open(path, mode)


# ---------------------------------------------------------------------------
# Tabular store
# ---------------------------------------------------------------------------


def save_table(path: str | Path, store: TabularStore) -> Path:
    """Pickle the learned table and initial value of *store* to *path*."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    payload = {"initial_value": store.initial_value, "table": store.export_values()}
    with _open(p, "wb") as f:
        dill.dump(payload, f, protocol=dill.HIGHEST_PROTOCOL)
    return p


def load_table(path: str | Path, store: TabularStore | None = None) -> TabularStore:
    """Load a table saved with :func:`save_table`.

    Restores into *store* when given (its initial value is overwritten),
    otherwise into a new :class:`TabularStore`.
    """
    with _open(Path(path), "rb") as f:
        payload = dill.load(f)
    if store is None:
        store = TabularStore(payload["initial_value"])
    else:
        store.initial_value = float(payload["initial_value"])
    store.import_values(payload["table"])
    return store


# ---------------------------------------------------------------------------
# Trainable function
# ---------------------------------------------------------------------------


def _function_leaves(function: Any) -> tuple[Any, Any]:
    if not (hasattr(function, "params") and hasattr(function, "opt_state")):
        raise TypeError(
            f"cannot serialise {type(function).__name__}: expected params and opt_state"
        )
    return function.params, function.opt_state


def save_function(path: str | Path, function: Any) -> Path:
    """Serialise ``(function.params, function.opt_state)`` with Equinox."""
    leaves = _function_leaves(function)
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    eqx.tree_serialise_leaves(str(p), leaves)
    return p


def load_function(path: str | Path, function: Any) -> Any:
    """Restore parameters saved with :func:`save_function` into *function*.

    *function* must have been built with the same action set, input size and
    hidden sizes; its current parameters serve as the shape template.
    """
    like = _function_leaves(function)
    function.params, function.opt_state = eqx.tree_deserialise_leaves(str(path), like)
    return function


# ---------------------------------------------------------------------------
# Directory checkpoints
# ---------------------------------------------------------------------------


def save_checkpoint(
    directory: str | Path,
    store: ActionValueStore,
    *,
    step: int | None = None,
    metadata: dict[str, Any] | None = None,
) -> Path:
    """Save *store* (and optional JSON metadata) to a checkpoint directory.

    Creates ``directory/`` (or ``directory/step_N/`` if *step* is given).

    Raises:
        TypeError: for store types with no known serialisation.
    """
    d = Path(directory)
    if step is not None:
        d = d / f"step_{step}"
    d.mkdir(parents=True, exist_ok=True)

    if isinstance(store, TabularStore):
        save_table(d / _TABLE_FILE, store)
    elif isinstance(store, ApproximateStore):
        save_function(d / _FUNCTION_FILE, store.function)
    else:
        raise TypeError(f"don't know how to checkpoint {type(store).__name__}")

    if metadata is not None:
        (d / _METADATA_FILE).write_text(json.dumps(metadata, indent=2, default=str) + "\n")

    logger.info("Saved checkpoint to %s", d)
    return d


def load_checkpoint(
    directory: str | Path,
    store: ActionValueStore,
    *,
    step: int | None = None,
) -> ActionValueStore:
    """Restore a checkpoint saved with :func:`save_checkpoint` into *store*."""
    d = Path(directory)
    if step is not None:
        d = d / f"step_{step}"

    if isinstance(store, TabularStore):
        load_table(d / _TABLE_FILE, store)
    elif isinstance(store, ApproximateStore):
        load_function(d / _FUNCTION_FILE, store.function)
        if store.has_target:
            store.sync_target()
    else:
        raise TypeError(f"don't know how to restore {type(store).__name__}")
    return store


def load_metadata(
    directory: str | Path,
    *,
    step: int | None = None,
) -> dict[str, Any] | None:
    """Load checkpoint metadata, or ``None`` if none was saved."""
    d = Path(directory)
    if step is not None:
        d = d / f"step_{step}"

    meta_path = d / _METADATA_FILE
    if meta_path.exists():
        return json.loads(meta_path.read_text())
    return None
