"""Random-number management utilities.

The Python-side training loop (exploration, replay sampling) draws from
``numpy.random.Generator`` objects; network initialisation uses JAX PRNG
keys.  Both are derived from one integer seed so a run is reproducible
end to end.

Usage::

    from rlcore.seeding import make_key, make_rng, spawn_rngs

    rng = make_rng(42)
    policy_rng, buffer_rng = spawn_rngs(rng, n=2)
    key = make_key(42)
"""

from __future__ import annotations

import jax
import numpy as np


def make_rng(seed: int | None) -> np.random.Generator:
    """Create a numpy ``Generator`` from an integer seed (``None`` = OS entropy)."""
    return np.random.default_rng(seed)


def spawn_rngs(rng: np.random.Generator, n: int) -> tuple[np.random.Generator, ...]:
    """Derive *n* statistically independent generators from *rng*.

    Example::

        policy_rng, buffer_rng = spawn_rngs(make_rng(0), n=2)
    """
    return tuple(rng.spawn(n))


def make_key(seed: int) -> jax.Array:
    """Create a JAX PRNG key from an integer seed."""
    return jax.random.PRNGKey(seed)

