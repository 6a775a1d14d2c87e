"""
Mutable combat state: per-entity ledgers and the combat arena.
"""

from .ledger import TrackingLedger
from .combat import EntityKind, EntityState, CombatState
