"""Persisted state: the JSON store and the schema upgrade chain."""

from .store import PersistedState, StateStore
from .upgrade import StateRecord, UpgradeChain, UpgradeStep

__all__ = ["PersistedState", "StateRecord", "StateStore", "UpgradeChain", "UpgradeStep"]
