"""Episodic training driver.

The trainer owns the action-value store for the duration of a run and
drives the loop::

    state -> policy.select -> domain.step -> Transition -> rule.apply -> ...

Status moves ``IDLE -> RUNNING -> {CONVERGED, EXHAUSTED, FAILED}``.  A run
ends when any stopping condition fires.  Domain failures and contract
violations are fatal: the status becomes ``FAILED`` and the error is
re-raised with the episode index, step index, last state and last action
attached.  Nothing is retried.

Usage::

    trainer = Trainer(
        domain,
        TabularStore(),
        EpsilonGreedy(0.1, rng=make_rng(0)),
        QLearning(learning_rate=0.5, discount_factor=0.9),
        initial_state=0,
        stopping=MaxEpisodes(500),
    )
    result = trainer.run()
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any, NamedTuple, Protocol

from rlcore.dataprotocol.transition import Transition
from rlcore.errors import (
    BufferUnderflow,
    DomainTransitionError,
    InvalidHyperparameter,
    NoLegalActions,
    TrainingError,
    check_positive,
)
from rlcore.metrics import MetricsLogger, log_step_progress
from rlcore.policies.exploration import ExplorationPolicy
from rlcore.stopping import (
    MaxSteps,
    StoppingCondition,
    TrainerStatus,
    TrainProgress,
    ValueChangeBelow,
)
from rlcore.types import UNSET, Action, Domain, State
from rlcore.values.base import ActionValueStore

logger = logging.getLogger(__name__)


class UpdateRule(Protocol):
    def apply(self, store: Any, transition: Transition) -> dict[str, float]:
        ...


class TrainResult(NamedTuple):
    """Return value of :meth:`Trainer.run`."""

    status: TrainerStatus
    store: ActionValueStore
    episodes: int
    steps: int
    episode_returns: list[float]
    metrics_log: list[dict[str, float]]


class Trainer:
    """Runs Q-learning episodes against a domain until a stopping condition fires.

    Args:
        domain: The problem domain (legal actions, transitions).
        store: Action-value store, owned by this trainer while it runs.
        policy: Exploration policy used to act.
        rule: Update rule that writes *store* from each transition.
        initial_state: Start state of every episode.
        initial_state_fn: Zero-argument callable returning a start state,
            called at every episode start.  Exactly one of *initial_state*
            and *initial_state_fn* must be given.
        stopping: One or more stopping conditions.
        max_episode_steps: Truncate episodes after this many steps.
        metrics: Optional JSONL logger receiving one record per episode.
        log_interval: Steps between progress log lines.
        max_terminal_starts: Consecutive terminal start states tolerated
            when only step-based conditions can end the run.  A fixed
            *initial_state* that is terminal fails on the first episode.
    """

    def __init__(
        self,
        domain: Domain,
        store: ActionValueStore,
        policy: ExplorationPolicy,
        rule: UpdateRule,
        *,
        initial_state: State = UNSET,
        initial_state_fn: Callable[[], State] | None = None,
        stopping: StoppingCondition | Sequence[StoppingCondition],
        max_episode_steps: int | None = None,
        metrics: MetricsLogger | None = None,
        log_interval: int = 1_000,
        max_terminal_starts: int = 1_000,
    ) -> None:
        if (initial_state is UNSET) == (initial_state_fn is None):
            raise InvalidHyperparameter(
                "exactly one of initial_state and initial_state_fn is required"
            )
        if isinstance(stopping, StoppingCondition):
            stopping = [stopping]
        self.stopping = list(stopping)
        if not self.stopping:
            raise InvalidHyperparameter("at least one stopping condition is required")
        if max_episode_steps is not None:
            check_positive("max_episode_steps", max_episode_steps)
        check_positive("log_interval", log_interval)
        check_positive("max_terminal_starts", max_terminal_starts)

        self.domain = domain
        self.store = store
        self.policy = policy
        self.rule = rule
        self.max_episode_steps = max_episode_steps
        self.metrics = metrics
        self.log_interval = log_interval
        self.max_terminal_starts = max_terminal_starts
        self._fixed_start = initial_state_fn is None
        self._initial_state_fn = (
            initial_state_fn if initial_state_fn is not None else (lambda: initial_state)
        )

        self.status = TrainerStatus.IDLE
        self.progress = TrainProgress()
        self.metrics_log: list[dict[str, float]] = []
        self._total_steps = next(
            (c.n for c in self.stopping if isinstance(c, MaxSteps)), None
        )
        # Empty episodes advance neither of these conditions.
        self._steps_only = all(
            isinstance(c, (MaxSteps, ValueChangeBelow)) for c in self.stopping
        )
        self._terminal_starts = 0
        # Last known position, attached to fatal errors.
        self._state: State | None = None
        self._action: Action | None = None

    # ------------------------------------------------------------------
    # Domain calls
    # ------------------------------------------------------------------

    def _legal_actions(self, state: State) -> tuple[Action, ...]:
        try:
            return tuple(self.domain.legal_actions(state))
        except Exception as exc:
            raise DomainTransitionError(f"legal_actions() raised {exc!r}") from exc

    def _is_terminal(self, state: State) -> bool:
        fn = getattr(self.domain, "is_terminal", None)
        if fn is None:
            return False
        try:
            return bool(fn(state))
        except Exception as exc:
            raise DomainTransitionError(f"is_terminal() raised {exc!r}") from exc

    def _step(self, state: State, action: Action) -> tuple[float, State]:
        try:
            result = self.domain.step(state, action)
        except Exception as exc:
            raise DomainTransitionError(f"step() raised {exc!r}") from exc
        try:
            reward, next_state = result
            reward = float(reward)
        except (TypeError, ValueError) as exc:
            raise DomainTransitionError(
                f"step() must return (reward, next_state), got {result!r}"
            ) from exc
        return reward, next_state

    def _initial_state(self) -> State:
        try:
            return self._initial_state_fn()
        except Exception as exc:
            raise DomainTransitionError(f"initial_state_fn() raised {exc!r}") from exc

    # ------------------------------------------------------------------
    # Loop
    # ------------------------------------------------------------------

    def _epsilon(self) -> float | None:
        fn = getattr(self.policy, "epsilon", None)
        if not callable(fn):
            return None
        return fn(step=self.progress.steps, episode=self.progress.episodes)

    def _check_stopping(self) -> TrainerStatus | None:
        for condition in self.stopping:
            status = condition.check(self.progress)
            if status is not None:
                logger.info("Stopping: %r fired", condition)
                return status
        return None

    def _finish_episode(
        self, ep_return: float, length: int, value_change: float | None, last_update: dict[str, float]
    ) -> None:
        progress = self.progress
        progress.episodes += 1
        progress.episode_returns.append(ep_return)
        if value_change is not None:
            progress.episode_value_changes.append(value_change)

        record: dict[str, float] = {
            "episode": progress.episodes,
            "step": progress.steps,
            "return": ep_return,
            "length": length,
        }
        epsilon = self._epsilon()
        if epsilon is not None:
            record["epsilon"] = epsilon
        if value_change is not None:
            record["max_value_change"] = value_change
        if "loss" in last_update:
            record["loss"] = last_update["loss"]
        self.metrics_log.append(record)
        if self.metrics is not None:
            self.metrics.write(record)

    def _run_episode(self) -> TrainerStatus | None:
        """Play one episode; returns a final status if a condition fired."""
        progress = self.progress
        state = self._initial_state()
        self._state, self._action = state, None
        actions = self._legal_actions(state)
        if not actions or self._is_terminal(state):
            if not actions and not self._is_terminal(state):
                raise NoLegalActions("start state has no legal actions")
            logger.warning("Episode %d starts in a terminal state", progress.episodes)
            self._finish_episode(0.0, 0, None, {})
            status = self._check_stopping()
            if status is None and self._steps_only:
                self._terminal_starts += 1
                if self._fixed_start or self._terminal_starts >= self.max_terminal_starts:
                    raise TrainingError(
                        "start state is terminal and no stopping condition counts episodes"
                    )
            return status
        self._terminal_starts = 0

        ep_return = 0.0
        ep_steps = 0
        value_change: float | None = None
        last_update: dict[str, float] = {}

        while True:
            action = self.policy.select(
                state, actions, self.store, step=progress.steps, episode=progress.episodes
            )
            self._action = action
            reward, next_state = self._step(state, action)
            next_actions = self._legal_actions(next_state)
            terminal = not next_actions or self._is_terminal(next_state)
            transition = Transition(
                state=state,
                action=action,
                reward=reward,
                next_state=next_state,
                terminal=terminal,
                next_actions=() if terminal else next_actions,
            )

            try:
                update = self.rule.apply(self.store, transition)
            except BufferUnderflow as err:
                logger.debug("Skipping update at step %d: %s", progress.steps, err)
                update = {}
            if update:
                last_update = update
            if "value_change" in update:
                value_change = max(value_change or 0.0, update["value_change"])

            progress.steps += 1
            ep_steps += 1
            ep_return += reward

            if progress.steps % self.log_interval == 0:
                summary = {"episode": progress.episodes, **last_update}
                epsilon = self._epsilon()
                if epsilon is not None:
                    summary["epsilon"] = epsilon
                log_step_progress(progress.steps, self._total_steps, summary, logger_name=__name__)

            truncated = self.max_episode_steps is not None and ep_steps >= self.max_episode_steps
            if terminal or truncated:
                self._finish_episode(ep_return, ep_steps, value_change, last_update)
                return self._check_stopping()

            status = self._check_stopping()
            if status is not None:
                return status
            state, actions = next_state, next_actions
            self._state, self._action = state, None

    def run(self) -> TrainResult:
        """Train until a stopping condition fires.

        Raises:
            RuntimeError: if the trainer already ran.
            NoLegalActions: a non-terminal state had no legal actions.
            DomainTransitionError: a domain call raised.
            TrainingError: any other failure, with the original exception
                as ``__cause__``, or a terminal start state that no
                configured condition can stop.
        """
        if self.status is not TrainerStatus.IDLE:
            raise RuntimeError(f"Trainer already ran (status={self.status.value})")
        self.status = TrainerStatus.RUNNING
        logger.info(
            "Training started: rule=%r policy=%r stopping=%r",
            self.rule, self.policy, self.stopping,
        )

        try:
            status = self._check_stopping()
            while status is None:
                status = self._run_episode()
        except TrainingError as err:
            self.status = TrainerStatus.FAILED
            err.with_context(
                episode=self.progress.episodes,
                step=self.progress.steps,
                state=self._state,
                action=self._action,
            )
            logger.error("Training failed: %s", err)
            raise
        except Exception as exc:
            self.status = TrainerStatus.FAILED
            err = TrainingError(
                f"training step raised {exc!r}",
                episode=self.progress.episodes,
                step=self.progress.steps,
                state=self._state,
                action=self._action,
            )
            logger.exception("Training failed: %s", err)
            raise err from exc

        self.status = status
        logger.info(
            "Training finished: %s after %d episodes, %d steps",
            status.value, self.progress.episodes, self.progress.steps,
        )
        return TrainResult(
            status=status,
            store=self.store,
            episodes=self.progress.episodes,
            steps=self.progress.steps,
            episode_returns=list(self.progress.episode_returns),
            metrics_log=list(self.metrics_log),
        )
