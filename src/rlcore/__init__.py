"""rlcore: tabular and deep Q-learning over arbitrary domains."""

from rlcore.algorithms.dqn import ApproximateStore, DeepQLearning, DQNConfig, QNetworkFunction
from rlcore.algorithms.q_learning import QLearning, QLearningConfig, TabularStore
from rlcore.checkpoint import (
    load_checkpoint,
    load_function,
    load_metadata,
    load_table,
    save_checkpoint,
    save_function,
    save_table,
)
from rlcore.dataprotocol import ReplayBuffer, Transition
from rlcore.errors import (
    BufferUnderflow,
    DomainTransitionError,
    InvalidHyperparameter,
    NoLegalActions,
    RLCoreError,
    TrainingError,
)
from rlcore.metrics import MetricsLogger, setup_logging
from rlcore.policies import EpsilonGreedy, ExplorationPolicy, Greedy, RandomExploration
from rlcore.runner import RunnerConfig, Trainer, TrainResult, evaluate, greedy_rollout, train_dqn, train_q
from rlcore.schedule import constant_schedule, exponential_schedule, linear_schedule
from rlcore.seeding import make_key, make_rng
from rlcore.stopping import (
    MaxEpisodes,
    MaxSteps,
    RewardPredicate,
    StoppingCondition,
    TrainerStatus,
    ValueChangeBelow,
)
from rlcore.types import Domain, TrainableFunction, TrainingExample
from rlcore.values import ActionValueStore

__all__ = [
    "ActionValueStore",
    "ApproximateStore",
    "BufferUnderflow",
    "DQNConfig",
    "DeepQLearning",
    "Domain",
    "DomainTransitionError",
    "EpsilonGreedy",
    "ExplorationPolicy",
    "Greedy",
    "InvalidHyperparameter",
    "MaxEpisodes",
    "MaxSteps",
    "MetricsLogger",
    "NoLegalActions",
    "QLearning",
    "QLearningConfig",
    "QNetworkFunction",
    "RLCoreError",
    "RandomExploration",
    "ReplayBuffer",
    "RewardPredicate",
    "RunnerConfig",
    "StoppingCondition",
    "TabularStore",
    "TrainResult",
    "TrainableFunction",
    "Trainer",
    "TrainerStatus",
    "TrainingError",
    "TrainingExample",
    "Transition",
    "ValueChangeBelow",
    "constant_schedule",
    "evaluate",
    "exponential_schedule",
    "greedy_rollout",
    "linear_schedule",
    "load_checkpoint",
    "load_function",
    "load_metadata",
    "load_table",
    "make_key",
    "make_rng",
    "save_checkpoint",
    "save_function",
    "save_table",
    "setup_logging",
    "train_dqn",
    "train_q",
]
