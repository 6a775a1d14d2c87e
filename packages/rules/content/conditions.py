"""
Condition Evaluator - decides whether a card effect's condition holds.

Operators are fixed per condition type:
- Health conditions are strict: below is <, above is >
- Stance and last-card-type conditions are exact equality
- Every other (count) condition is >=

Health conditions read the source or target entity. Counter conditions read
the source's ledger. Cards-in-pile and energy conditions read the source
entity's collaborator-supplied counts.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional

if TYPE_CHECKING:
    from ..state.combat import EntityState
    from ..state.ledger import TrackingLedger

__all__ = ["ConditionType", "evaluate_condition", "is_supported_condition", "CONDITION_HANDLERS"]

logger = logging.getLogger(__name__)


class ConditionType(Enum):
    IF_TARGET_HEALTH_BELOW = "IfTargetHealthBelow"
    IF_TARGET_HEALTH_ABOVE = "IfTargetHealthAbove"
    IF_SOURCE_HEALTH_BELOW = "IfSourceHealthBelow"
    IF_SOURCE_HEALTH_ABOVE = "IfSourceHealthAbove"
    IF_CARDS_IN_HAND = "IfCardsInHand"
    IF_CARDS_IN_DECK = "IfCardsInDeck"
    IF_CARDS_IN_DISCARD = "IfCardsInDiscard"
    IF_TIMES_PLAYED_THIS_FIGHT = "IfTimesPlayedThisFight"
    IF_DAMAGE_TAKEN_THIS_FIGHT = "IfDamageTakenThisFight"
    IF_DAMAGE_TAKEN_LAST_ROUND = "IfDamageTakenLastRound"
    IF_HEALING_RECEIVED_THIS_FIGHT = "IfHealingReceivedThisFight"
    IF_HEALING_RECEIVED_LAST_ROUND = "IfHealingReceivedLastRound"
    IF_PERFECTION_STREAK = "IfPerfectionStreak"
    IF_COMBO_COUNT = "IfComboCount"
    IF_ZERO_COST_CARDS_THIS_TURN = "IfZeroCostCardsThisTurn"
    IF_ZERO_COST_CARDS_THIS_FIGHT = "IfZeroCostCardsThisFight"
    IF_IN_STANCE = "IfInStance"
    IF_LAST_CARD_TYPE = "IfLastCardType"
    IF_ENERGY_REMAINING = "IfEnergyRemaining"


class _Subject:
    """Everything a condition handler may read."""

    __slots__ = ("source", "target", "source_ledger", "target_ledger", "card_id")

    def __init__(self, source, target, source_ledger, target_ledger, card_id):
        self.source = source
        self.target = target
        self.source_ledger = source_ledger
        self.target_ledger = target_ledger
        self.card_id = card_id


def _times_played(s: _Subject) -> int:
    if s.card_id is None:
        return 0
    return s.source_ledger.times_played(s.card_id)


# Each handler: (threshold, subject) -> bool
CONDITION_HANDLERS: Dict[ConditionType, Callable[[Any, _Subject], bool]] = {
    ConditionType.IF_TARGET_HEALTH_BELOW: lambda t, s: s.target.health < t,
    ConditionType.IF_TARGET_HEALTH_ABOVE: lambda t, s: s.target.health > t,
    ConditionType.IF_SOURCE_HEALTH_BELOW: lambda t, s: s.source.health < t,
    ConditionType.IF_SOURCE_HEALTH_ABOVE: lambda t, s: s.source.health > t,
    ConditionType.IF_CARDS_IN_HAND: lambda t, s: s.source.hand_size >= t,
    ConditionType.IF_CARDS_IN_DECK: lambda t, s: s.source.deck_size >= t,
    ConditionType.IF_CARDS_IN_DISCARD: lambda t, s: s.source.discard_size >= t,
    ConditionType.IF_TIMES_PLAYED_THIS_FIGHT: lambda t, s: _times_played(s) >= t,
    ConditionType.IF_DAMAGE_TAKEN_THIS_FIGHT: lambda t, s: s.source_ledger.damage_taken_this_fight >= t,
    ConditionType.IF_DAMAGE_TAKEN_LAST_ROUND: lambda t, s: s.source_ledger.damage_taken_last_round >= t,
    ConditionType.IF_HEALING_RECEIVED_THIS_FIGHT: lambda t, s: s.source_ledger.healing_received_this_fight >= t,
    ConditionType.IF_HEALING_RECEIVED_LAST_ROUND: lambda t, s: s.source_ledger.healing_received_last_round >= t,
    ConditionType.IF_PERFECTION_STREAK: lambda t, s: s.source_ledger.perfection_streak >= t,
    ConditionType.IF_COMBO_COUNT: lambda t, s: s.source_ledger.combo_count >= t,
    ConditionType.IF_ZERO_COST_CARDS_THIS_TURN: lambda t, s: s.source_ledger.zero_cost_cards_this_turn >= t,
    ConditionType.IF_ZERO_COST_CARDS_THIS_FIGHT: lambda t, s: s.source_ledger.zero_cost_cards_this_fight >= t,
    ConditionType.IF_IN_STANCE: lambda t, s: s.source_ledger.current_stance == t,
    ConditionType.IF_LAST_CARD_TYPE: lambda t, s: s.source_ledger.last_played_card_type == t,
    ConditionType.IF_ENERGY_REMAINING: lambda t, s: s.source.energy >= t,
}


def is_supported_condition(condition_type: Any) -> bool:
    return condition_type in CONDITION_HANDLERS


def evaluate_condition(
    condition_type: ConditionType,
    threshold: Any,
    source: EntityState,
    target: EntityState,
    source_ledger: TrackingLedger,
    target_ledger: Optional[TrackingLedger] = None,
    card_id: Optional[str] = None,
) -> bool:
    """
    Evaluate one condition.

    Args:
        condition_type: Which check to run
        threshold: int for numeric checks, StanceType for IF_IN_STANCE,
            CardType for IF_LAST_CARD_TYPE
        source: Entity playing the card
        target: Entity the effect is aimed at
        source_ledger: Ledger of source
        target_ledger: Ledger of target
        card_id: Card being played, for IF_TIMES_PLAYED_THIS_FIGHT

    Returns:
        Whether the condition holds. An unhandled condition type is False
        (fail closed) and is logged; it never raises.
    """
    handler = CONDITION_HANDLERS.get(condition_type)
    if handler is None:
        logger.error(f"Unhandled condition type {condition_type!r}; treating as not met")
        return False

    subject = _Subject(source, target, source_ledger, target_ledger, card_id)
    result = bool(handler(threshold, subject))
    logger.debug(f"Condition {condition_type.value} (threshold={threshold}) -> {result}")
    return result
