from rlcore.algorithms.q_learning.config import QLearningConfig
from rlcore.algorithms.q_learning.rule import QLearning, td_target
from rlcore.algorithms.q_learning.table import TabularStore

__all__ = ["QLearning", "QLearningConfig", "TabularStore", "td_target"]
