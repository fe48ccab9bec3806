from rlcore.values.base import ActionValueStore

__all__ = ["ActionValueStore"]
