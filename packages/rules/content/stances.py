"""
Stances - the posture an entity is currently in.

Stances carry no damage math of their own. They are read by conditions
(IF_IN_STANCE) and LIMIT_BREAK additionally drives the ledger's
limit-break flag:

- Entering LIMIT_BREAK sets is_in_limit_break
- Leaving LIMIT_BREAK clears it
"""

from enum import Enum

__all__ = ["StanceType"]


class StanceType(Enum):
    """Stance identifiers. NONE is the default between fights."""
    NONE = "None"
    AGGRESSIVE = "Aggressive"
    DEFENSIVE = "Defensive"
    FOCUSED = "Focused"
    BERSERKER = "Berserker"
    GUARDIAN = "Guardian"
    MYSTIC = "Mystic"
    LIMIT_BREAK = "LimitBreak"

