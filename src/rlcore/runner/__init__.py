"""Training runners for rlcore.

A single Python loop (:class:`Trainer`) drives both variants:

- **Tabular** (``train_q``): every transition is written into the table
  immediately.
- **Approximate** (``train_dqn``): transitions go into a replay buffer and
  the trainable function is fitted on sampled batches.

Evaluation is shared: ``greedy_rollout`` / ``evaluate`` act greedily without
touching the store.
"""

from rlcore.runner.config import RunnerConfig
from rlcore.runner.evaluator import EvalMetrics, RolloutStep, evaluate, greedy_rollout
from rlcore.runner.train_dqn import train_dqn
from rlcore.runner.train_q import train_q
from rlcore.runner.trainer import Trainer, TrainResult

__all__ = [
    # Config
    "RunnerConfig",
    # Loop
    "Trainer",
    "TrainResult",
    "train_q",
    "train_dqn",
    # Evaluator
    "EvalMetrics",
    "RolloutStep",
    "evaluate",
    "greedy_rollout",
]
