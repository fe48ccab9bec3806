"""Default trainable function: an Equinox MLP fitted with Optax.

The network maps an encoded state to one Q-value per action in a fixed,
caller-supplied action list.  States are turned into float vectors by a
caller-supplied ``encode`` function, so the same class serves any domain
whose states can be flattened::

    fn = QNetworkFunction(
        actions=("left", "right"),
        encode=lambda s: [s / 10.0],
        input_dim=1,
        config=DQNConfig(hidden_sizes=(32,)),
        key=make_key(0),
    )
    fn.evaluate(3)                       # {"left": ..., "right": ...}
    fn.fit([TrainingExample(3, "right", 1.0)])

Every ``fit`` call is one jitted gradient step on the mean squared error
between ``Q(s, a)`` and the supplied targets.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any, NamedTuple

import chex
import equinox as eqx
import jax
import jax.numpy as jnp
import numpy as np
import optax

from rlcore.algorithms.dqn.config import DQNConfig
from rlcore.errors import InvalidHyperparameter, check_positive
from rlcore.seeding import make_key
from rlcore.types import Action, State, TrainingExample

Encoder = Callable[[State], Any]


class QNetwork(eqx.Module):
    """MLP: encoded state -> Q(s, a) for each discrete action."""

    layers: list
    activation: Callable = eqx.field(static=True)

    def __init__(
        self,
        input_dim: int,
        n_actions: int,
        hidden_sizes: tuple[int, ...] = (64, 64),
        *,
        activation: Callable = jax.nn.relu,
        key: jax.Array,
    ) -> None:
        dims = [input_dim, *hidden_sizes, n_actions]
        keys = jax.random.split(key, len(dims) - 1)
        self.layers = [
            eqx.nn.Linear(d_in, d_out, key=k)
            for d_in, d_out, k in zip(dims[:-1], dims[1:], keys)
        ]
        self.activation = activation

    def __call__(self, x: jax.Array) -> jax.Array:
        *hidden, head = self.layers
        for layer in hidden:
            x = self.activation(layer(x))
        return head(x)


class FitMetrics(NamedTuple):
    loss: chex.Array
    q_mean: chex.Array


def make_optimizer(lr: float, max_grad_norm: float) -> optax.GradientTransformation:
    """Adam with global-norm gradient clipping."""
    return optax.chain(
        optax.clip_by_global_norm(max_grad_norm),
        optax.adam(lr),
    )


@eqx.filter_jit
def _forward(params: QNetwork, x: jax.Array) -> jax.Array:
    return params(x)


def _make_fit_step(optimizer: optax.GradientTransformation) -> Callable:
    @eqx.filter_jit
    def _fit_step(
        params: QNetwork,
        opt_state: optax.OptState,
        obs: jax.Array,
        actions: jax.Array,
        targets: jax.Array,
    ) -> tuple[QNetwork, optax.OptState, FitMetrics]:
        def loss_fn(p: QNetwork) -> tuple[jax.Array, jax.Array]:
            q_all = jax.vmap(p)(obs)  # (B, n_actions)
            q_values = q_all[jnp.arange(q_all.shape[0]), actions]
            loss = jnp.mean((q_values - jax.lax.stop_gradient(targets)) ** 2)
            return loss, q_values

        (loss, q_values), grads = eqx.filter_value_and_grad(loss_fn, has_aux=True)(params)
        updates, new_opt_state = optimizer.update(
            grads, opt_state, eqx.filter(params, eqx.is_array)
        )
        new_params = eqx.apply_updates(params, updates)
        return new_params, new_opt_state, FitMetrics(loss=loss, q_mean=jnp.mean(q_values))

    return _fit_step


class FrozenQNetwork:
    """Read-only view of a network's parameters at one point in time."""

    def __init__(self, params: QNetwork, actions: tuple[Action, ...], encode: Callable) -> None:
        self.params = params
        self.actions = actions
        self._encode = encode

    def evaluate(self, state: State) -> dict[Action, float]:
        q = np.asarray(_forward(self.params, self._encode(state)))
        return {action: float(q[i]) for i, action in enumerate(self.actions)}


class QNetworkFunction:
    """Trainable ``State -> {Action: value}`` backed by a :class:`QNetwork`.

    Args:
        actions: The fixed discrete action set, in network output order.
        encode: ``state -> array-like`` of length *input_dim*.
        input_dim: Size of the encoded state.
        config: Network and optimiser hyperparameters.
        key: PRNG key for parameter initialisation (``make_key(0)`` if None).
    """

    def __init__(
        self,
        actions: Sequence[Action],
        encode: Encoder,
        input_dim: int,
        *,
        config: DQNConfig | None = None,
        key: jax.Array | None = None,
    ) -> None:
        self.actions = tuple(actions)
        if not self.actions:
            raise InvalidHyperparameter("actions must not be empty")
        if len(set(self.actions)) != len(self.actions):
            raise InvalidHyperparameter("actions must be unique")
        check_positive("input_dim", input_dim)

        self.config = config if config is not None else DQNConfig()
        self.encode = encode
        self.input_dim = input_dim
        self._index = {action: i for i, action in enumerate(self.actions)}

        self.params = QNetwork(
            input_dim,
            len(self.actions),
            self.config.hidden_sizes,
            key=key if key is not None else make_key(0),
        )
        self._optimizer = make_optimizer(self.config.lr, self.config.max_grad_norm)
        self.opt_state = self._optimizer.init(eqx.filter(self.params, eqx.is_array))
        self._fit_step = _make_fit_step(self._optimizer)
        self.fit_count = 0
        self.last_metrics: dict[str, float] = {}

    def _encode_state(self, state: State) -> jax.Array:
        x = jnp.asarray(self.encode(state), dtype=jnp.float32).reshape(-1)
        if x.shape[0] != self.input_dim:
            raise ValueError(
                f"encode() produced {x.shape[0]} features, expected {self.input_dim}"
            )
        return x

    def _action_index(self, action: Action) -> int:
        try:
            return self._index[action]
        except KeyError:
            raise KeyError(f"action {action!r} is not in the network's action set") from None

    def evaluate(self, state: State) -> dict[Action, float]:
        q = np.asarray(_forward(self.params, self._encode_state(state)))
        return {action: float(q[i]) for i, action in enumerate(self.actions)}

    def fit(self, examples: Sequence[TrainingExample]) -> float:
        """One gradient step on *examples*; returns the batch loss."""
        if not examples:
            raise ValueError("fit() needs at least one example")
        obs = jnp.stack([self._encode_state(ex.state) for ex in examples])
        actions = jnp.asarray([self._action_index(ex.action) for ex in examples], dtype=jnp.int32)
        targets = jnp.asarray([ex.target for ex in examples], dtype=jnp.float32)

        self.params, self.opt_state, metrics = self._fit_step(
            self.params, self.opt_state, obs, actions, targets
        )
        self.fit_count += 1
        self.last_metrics = {"loss": float(metrics.loss), "q_mean": float(metrics.q_mean)}
        return self.last_metrics["loss"]

    def snapshot(self) -> FrozenQNetwork:
        """Freeze the current parameters (used as the bootstrap target)."""
        return FrozenQNetwork(self.params, self.actions, self._encode_state)

    def __repr__(self) -> str:
        return (
            f"QNetworkFunction(actions={len(self.actions)}, input_dim={self.input_dim}, "
            f"hidden_sizes={self.config.hidden_sizes})"
        )
