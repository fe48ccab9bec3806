from rlcore.algorithms.dqn.config import DQNConfig
from rlcore.algorithms.dqn.function import FrozenQNetwork, QNetwork, QNetworkFunction
from rlcore.algorithms.dqn.rule import DeepQLearning
from rlcore.algorithms.dqn.store import ApproximateStore

__all__ = [
    "ApproximateStore",
    "DQNConfig",
    "DeepQLearning",
    "FrozenQNetwork",
    "QNetwork",
    "QNetworkFunction",
]
