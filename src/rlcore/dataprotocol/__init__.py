"""Experience containers: the per-step transition and the replay buffer."""

from rlcore.dataprotocol.replay_buffer import ReplayBuffer
from rlcore.dataprotocol.transition import Transition

__all__ = ["ReplayBuffer", "Transition"]
