"""Tabular Q-learning training entry point.

Wires a :class:`~rlcore.runner.trainer.Trainer` from the two config
objects::

    from rlcore.algorithms.q_learning import QLearningConfig
    from rlcore.runner import RunnerConfig, train_q

    result = train_q(
        domain,
        initial_state=0,
        q_config=QLearningConfig(learning_rate=0.5, discount_factor=0.9),
        runner_config=RunnerConfig(max_episodes=500, epsilon=0.2),
    )
    action, value = result.store.best_action(0, domain.legal_actions(0))
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

from rlcore.algorithms.q_learning.config import QLearningConfig
from rlcore.algorithms.q_learning.rule import QLearning
from rlcore.algorithms.q_learning.table import TabularStore
from rlcore.metrics import MetricsLogger
from rlcore.policies.exploration import EpsilonGreedy, ExplorationPolicy
from rlcore.runner.config import RunnerConfig
from rlcore.runner.trainer import Trainer, TrainResult
from rlcore.seeding import make_rng
from rlcore.stopping import StoppingCondition
from rlcore.types import UNSET, Domain, State


def train_q(
    domain: Domain,
    initial_state: State = UNSET,
    *,
    initial_state_fn: Callable[[], State] | None = None,
    q_config: QLearningConfig | None = None,
    runner_config: RunnerConfig | None = None,
    store: TabularStore | None = None,
    policy: ExplorationPolicy | None = None,
    stopping: Sequence[StoppingCondition] = (),
    metrics: MetricsLogger | None = None,
) -> TrainResult:
    """Train a tabular store with one-step Q-learning.

    Args:
        domain: The problem domain.
        initial_state: Fixed start state of every episode.
        initial_state_fn: Alternative to *initial_state*: called per episode.
        q_config: Learning rate, discount and initial value.
        runner_config: Budget, exploration schedule, seed and logging.
        store: Store to continue training; a fresh one if None.
        policy: Override the epsilon-greedy policy built from *runner_config*.
        stopping: Extra stopping conditions (e.g. convergence predicates),
            checked together with the config's budget.
        metrics: Optional JSONL logger.

    Returns:
        ``TrainResult`` with the final status, the store and episode returns.
    """
    q_config = q_config if q_config is not None else QLearningConfig()
    runner_config = runner_config if runner_config is not None else RunnerConfig()

    if store is None:
        store = TabularStore(q_config.initial_value)
    if policy is None:
        policy = EpsilonGreedy(
            runner_config.epsilon_schedule(),
            rng=make_rng(runner_config.seed),
            decay_by=runner_config.decay_by,
        )
    rule = QLearning(q_config.learning_rate, q_config.discount_factor)

    trainer = Trainer(
        domain,
        store,
        policy,
        rule,
        initial_state=initial_state,
        initial_state_fn=initial_state_fn,
        stopping=[*runner_config.stopping_conditions(), *stopping],
        max_episode_steps=runner_config.max_episode_steps,
        metrics=metrics,
        log_interval=runner_config.log_interval,
    )
    return trainer.run()
