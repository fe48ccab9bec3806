"""Deep Q-learning training entry point.

Same Python outer loop as the tabular variant; the difference is the
store (a trainable function) and the rule (experience replay).  The
replay buffer lives in Python, the gradient step inside the function is
jitted::

    from rlcore.algorithms.dqn import DQNConfig, QNetworkFunction
    from rlcore.runner import RunnerConfig, train_dqn

    dqn_config = DQNConfig(hidden_sizes=(32,), batch_size=16)
    function = QNetworkFunction(
        actions=("left", "right"), encode=encode, input_dim=1, config=dqn_config,
    )
    result = train_dqn(
        domain, 0,
        function=function,
        dqn_config=dqn_config,
        runner_config=RunnerConfig(max_steps=5_000, epsilon=1.0,
                                   epsilon_decay="linear", epsilon_decay_steps=3_000),
    )
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from rlcore.algorithms.dqn.config import DQNConfig
from rlcore.algorithms.dqn.rule import DeepQLearning
from rlcore.algorithms.dqn.store import ApproximateStore
from rlcore.metrics import MetricsLogger
from rlcore.policies.exploration import EpsilonGreedy, ExplorationPolicy
from rlcore.runner.config import RunnerConfig
from rlcore.runner.trainer import Trainer, TrainResult
from rlcore.seeding import make_rng, spawn_rngs
from rlcore.stopping import StoppingCondition
from rlcore.types import UNSET, Domain, State, TrainableFunction

logger = logging.getLogger(__name__)


def train_dqn(
    domain: Domain,
    initial_state: State = UNSET,
    *,
    function: TrainableFunction,
    initial_state_fn: Callable[[], State] | None = None,
    dqn_config: DQNConfig | None = None,
    runner_config: RunnerConfig | None = None,
    policy: ExplorationPolicy | None = None,
    stopping: Sequence[StoppingCondition] = (),
    metrics: MetricsLogger | None = None,
) -> TrainResult:
    """Train *function* with replay-based deep Q-learning.

    Args:
        domain: The problem domain.
        initial_state: Fixed start state of every episode.
        function: The trainable function wrapped by the approximate store.
        initial_state_fn: Alternative to *initial_state*: called per episode.
        dqn_config: Discount, replay and target-network settings.
        runner_config: Budget, exploration schedule, seed and logging.
        policy: Override the epsilon-greedy policy built from *runner_config*.
        stopping: Extra stopping conditions.
        metrics: Optional JSONL logger.

    Returns:
        ``TrainResult`` whose ``store`` is the trained ``ApproximateStore``.
    """
    dqn_config = dqn_config if dqn_config is not None else DQNConfig()
    runner_config = runner_config if runner_config is not None else RunnerConfig()

    policy_rng, buffer_rng = spawn_rngs(make_rng(runner_config.seed), n=2)
    store = ApproximateStore(function, target_sync_interval=dqn_config.target_sync_interval)
    rule = DeepQLearning.from_config(dqn_config, rng=buffer_rng)
    if policy is None:
        policy = EpsilonGreedy(
            runner_config.epsilon_schedule(),
            rng=policy_rng,
            decay_by=runner_config.decay_by,
        )
    logger.info(
        "DQN: batch_size=%d buffer_size=%d target_sync_interval=%s",
        dqn_config.batch_size, dqn_config.buffer_size, dqn_config.target_sync_interval,
    )

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
