"""
Tracking Ledger - per-entity counters feeding conditions and scaling.

Three time windows are kept for damage and healing:
- this_fight: running totals since the last fight reset
- this_round: totals since the current turn started
- last_round: the previous turn's totals, overwritten (never accumulated)
  by reset_for_new_turn()

All counters are non-negative; recording a negative amount raises ValueError.
"""

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional

from ..content.cards import CardType
from ..content.stances import StanceType

__all__ = ["TrackingLedger"]

logger = logging.getLogger(__name__)

# Card types that keep the current combo going even without building it
_COMBO_PRESERVING = (CardType.COMBO, CardType.FINISHER)


def _check_amount(name: str, amount: int) -> None:
    if amount < 0:
        raise ValueError(f"{name} must be >= 0, got {amount}")


@dataclass
class TrackingLedger:
    """Counters for one entity. Owned by the combat arena, keyed by entity id."""
    owner_id: Optional[str] = None

    # Card plays
    cards_played_this_turn: int = 0
    cards_played_this_fight: int = 0
    zero_cost_cards_this_turn: int = 0
    zero_cost_cards_this_fight: int = 0
    last_played_card_type: Optional[CardType] = None
    card_play_counts: Dict[str, int] = field(default_factory=dict)

    # Damage / healing
    damage_dealt_this_fight: int = 0
    damage_dealt_this_round: int = 0
    damage_dealt_last_round: int = 0
    damage_taken_this_fight: int = 0
    damage_taken_this_round: int = 0
    damage_taken_last_round: int = 0
    healing_given_this_fight: int = 0
    healing_given_this_round: int = 0
    healing_given_last_round: int = 0
    healing_received_this_fight: int = 0
    healing_received_this_round: int = 0
    healing_received_last_round: int = 0

    # Combat state
    combo_count: int = 0
    current_stance: StanceType = StanceType.NONE
    perfection_streak: int = 0
    took_damage_this_turn: bool = False
    is_stunned: bool = False
    is_in_limit_break: bool = False
    strength_stacks: int = 0
    turn_number: int = 0

    # =========================================================================
    # RECORDING
    # =========================================================================

    def record_card_played(
        self,
        cost: int,
        is_combo: bool,
        card_type: CardType,
        is_zero_cost: bool,
        card_id: Optional[str] = None,
    ) -> None:
        """
        Record a card play.

        Combo rule: a combo-building card adds one to the combo. Any other
        card resets it, unless the card is itself a COMBO or FINISHER type.
        """
        _check_amount("cost", cost)
        self.cards_played_this_turn += 1
        self.cards_played_this_fight += 1
        if is_zero_cost:
            self.zero_cost_cards_this_turn += 1
            self.zero_cost_cards_this_fight += 1
        if card_id is not None:
            self.card_play_counts[card_id] = self.card_play_counts.get(card_id, 0) + 1
        self.last_played_card_type = card_type

        if is_combo:
            self.combo_count += 1
        elif card_type not in _COMBO_PRESERVING:
            self.combo_count = 0

        logger.debug(
            f"{self.owner_id}: played {card_id or card_type.value} "
            f"(combo={self.combo_count}, zero_cost_turn={self.zero_cost_cards_this_turn})"
        )

    def times_played(self, card_id: str) -> int:
        return self.card_play_counts.get(card_id, 0)

    def record_damage_dealt(self, amount: int) -> None:
        _check_amount("damage dealt", amount)
        self.damage_dealt_this_fight += amount
        self.damage_dealt_this_round += amount

    def record_damage_taken(self, amount: int) -> None:
        """Record damage that reached health. Any damage breaks the perfection streak."""
        _check_amount("damage taken", amount)
        self.damage_taken_this_fight += amount
        self.damage_taken_this_round += amount
        if amount > 0:
            self.took_damage_this_turn = True
            self.perfection_streak = 0

    def record_healing_given(self, amount: int) -> None:
        _check_amount("healing given", amount)
        self.healing_given_this_fight += amount
        self.healing_given_this_round += amount

    def record_healing_received(self, amount: int) -> None:
        _check_amount("healing received", amount)
        self.healing_received_this_fight += amount
        self.healing_received_this_round += amount

    # =========================================================================
    # STATE SETTERS
    # =========================================================================

    def set_combo_count(self, count: int) -> None:
        _check_amount("combo count", count)
        self.combo_count = count

    def set_stance(self, stance: StanceType) -> StanceType:
        """Change stance and keep the limit-break flag in step. Returns the old stance."""
        old = self.current_stance
        self.current_stance = stance
        if stance == StanceType.LIMIT_BREAK:
            self.is_in_limit_break = True
        elif old == StanceType.LIMIT_BREAK:
            self.is_in_limit_break = False
        if old != stance:
            logger.debug(f"{self.owner_id}: stance {old.value} -> {stance.value}")
        return old

    def set_stunned(self, stunned: bool) -> None:
        self.is_stunned = stunned

    def set_limit_break(self, active: bool) -> None:
        self.is_in_limit_break = active

    def add_strength(self, amount: int) -> None:
        _check_amount("strength", amount)
        self.strength_stacks += amount

    # =========================================================================
    # RESETS
    # =========================================================================

    def reset_for_new_turn(self) -> None:
        """
        Start a new turn for this entity.

        Moves this-round totals into the last-round slots, zeroes this-turn
        counters, and grows the perfection streak if no damage was taken
        during the turn that just ended. Fight totals are kept.
        """
        self.damage_dealt_last_round = self.damage_dealt_this_round
        self.damage_taken_last_round = self.damage_taken_this_round
        self.healing_given_last_round = self.healing_given_this_round
        self.healing_received_last_round = self.healing_received_this_round
        self.damage_dealt_this_round = 0
        self.damage_taken_this_round = 0
        self.healing_given_this_round = 0
        self.healing_received_this_round = 0

        self.cards_played_this_turn = 0
        self.zero_cost_cards_this_turn = 0

        if self.turn_number > 0 and not self.took_damage_this_turn:
            self.perfection_streak += 1
        self.took_damage_this_turn = False
        self.turn_number += 1

        logger.debug(f"{self.owner_id}: turn {self.turn_number} (perfection={self.perfection_streak})")

    def reset_for_new_fight(self) -> None:
        """Zero every counter and flag, and return to no stance."""
        owner = self.owner_id
        fresh = TrackingLedger(owner_id=owner)
        for name, value in vars(fresh).items():
            setattr(self, name, value)

    # =========================================================================
    # QUERIES
    # =========================================================================

    def snapshot(self) -> Dict[str, Any]:
        """Plain-dict copy for read-only queries and logging."""
        data = asdict(self)
        data["current_stance"] = self.current_stance.value
        data["last_played_card_type"] = (
            self.last_played_card_type.value if self.last_played_card_type else None
        )
        return data
