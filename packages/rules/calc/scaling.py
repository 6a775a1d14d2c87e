"""
Scaling Calculator - grows an effect's amount from a tracked counter.

    bonus  = floor(tracked_value * multiplier), clamped to [0, cap]
    result = base + bonus

The tracked value comes from the acting entity's ledger (or its health /
hand size for the entity-backed types). Missing health is max - current in
raw points, not a percentage.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import TYPE_CHECKING, Callable, Dict, Optional

if TYPE_CHECKING:
    from ..state.combat import EntityState
    from ..state.ledger import TrackingLedger

__all__ = ["ScalingType", "scale", "tracked_value_for", "SCALING_SOURCES"]


class ScalingType(Enum):
    ZERO_COST_CARDS_THIS_TURN = "ZeroCostCardsThisTurn"
    ZERO_COST_CARDS_THIS_FIGHT = "ZeroCostCardsThisFight"
    CARDS_PLAYED_THIS_TURN = "CardsPlayedThisTurn"
    CARDS_PLAYED_THIS_FIGHT = "CardsPlayedThisFight"
    DAMAGE_DEALT_THIS_TURN = "DamageDealtThisTurn"
    DAMAGE_DEALT_THIS_FIGHT = "DamageDealtThisFight"
    CURRENT_HEALTH = "CurrentHealth"
    MISSING_HEALTH = "MissingHealth"
    COMBO_COUNT = "ComboCount"
    HAND_SIZE = "HandSize"


SCALING_SOURCES: Dict[ScalingType, Callable[["EntityState", "TrackingLedger"], int]] = {
    ScalingType.ZERO_COST_CARDS_THIS_TURN: lambda e, l: l.zero_cost_cards_this_turn,
    ScalingType.ZERO_COST_CARDS_THIS_FIGHT: lambda e, l: l.zero_cost_cards_this_fight,
    ScalingType.CARDS_PLAYED_THIS_TURN: lambda e, l: l.cards_played_this_turn,
    ScalingType.CARDS_PLAYED_THIS_FIGHT: lambda e, l: l.cards_played_this_fight,
    ScalingType.DAMAGE_DEALT_THIS_TURN: lambda e, l: l.damage_dealt_this_round,
    ScalingType.DAMAGE_DEALT_THIS_FIGHT: lambda e, l: l.damage_dealt_this_fight,
    ScalingType.CURRENT_HEALTH: lambda e, l: e.health,
    ScalingType.MISSING_HEALTH: lambda e, l: e.max_health - e.health,
    ScalingType.COMBO_COUNT: lambda e, l: l.combo_count,
    ScalingType.HAND_SIZE: lambda e, l: e.hand_size,
}


def scale(
    base: int,
    scaling_type: ScalingType,
    multiplier: float,
    cap: Optional[int],
    tracked_value: int,
) -> int:
    """
    Compute a scaled amount.

    Args:
        base: Unscaled amount from the card
        scaling_type: Counter the bonus is read from (informational here;
            tracked_value is already resolved)
        multiplier: Bonus per tracked unit, may be fractional
        cap: Largest bonus allowed, or None for uncapped
        tracked_value: Current value of the counter

    Returns:
        base + bonus
    """
    bonus = math.floor(tracked_value * multiplier)
    if bonus < 0:
        bonus = 0
    if cap is not None and bonus > cap:
        bonus = cap
    return base + bonus


def tracked_value_for(scaling_type: ScalingType, entity: EntityState, ledger: TrackingLedger) -> int:
    """Read the counter a scaling type refers to."""
    return max(0, SCALING_SOURCES[scaling_type](entity, ledger))
