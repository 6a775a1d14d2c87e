"""
Status Effects - buffs/debuffs attached to a combatant and the per-entity store.

=== STATUS CATEGORIES ===

Damage pipeline (see calc/damage.py for the order they apply in):
- FLAT_DAMAGE_BONUS        Strength   source, added to outgoing damage
- FLAT_DAMAGE_PENALTY      Curse      source, subtracted from outgoing damage
- DAMAGE_REDUCTION         Weak       source, x0.75 per instance
- DAMAGE_AMPLIFICATION     Break      target, x1.5 per instance
- FLAT_DEFENSE             Armor      target, subtracted after multipliers

Turn-end:
- DAMAGE_OVER_TIME         Burn       potency dealt at end of owner's turn
- HEAL_OVER_TIME           Salve      potency healed at end of owner's turn

Other:
- SHIELD                   absorbs damage before health, consumed as it absorbs
- THORNS                   potency reflected to attackers that reach health
- STUN / LIMIT_BREAK       single-instance flags (re-adding refreshes, never doubles)
- CRITICAL_BOOST           stored only; the engine resolves no random crits
- ELEMENTAL                marker status for content built on top of the engine

=== STACKING ===

Instances of one kind coexist. Flat kinds sum their potencies; percentage
kinds contribute one fixed factor per instance and the factors multiply.
Durations are in turns; WHOLE_FIGHT lasts until clear_all() at fight reset.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, NamedTuple, Optional, Tuple

__all__ = [
    "StatusKind",
    "StatusCategory",
    "StatusType",
    "StatusInfo",
    "STATUS_DATA",
    "WHOLE_FIGHT",
    "StatusEffect",
    "StatusSnapshot",
    "StatusEffectStore",
    "is_negative_status",
]

logger = logging.getLogger(__name__)

# Duration sentinel: never decremented by tick(), removed only by clear_all()
WHOLE_FIGHT = -1


class StatusKind(Enum):
    """Closed set of status effect kinds."""
    STRENGTH = "Strength"
    CURSE = "Curse"
    WEAK = "Weak"
    BREAK = "Break"
    ARMOR = "Armor"
    BURN = "Burn"
    SALVE = "Salve"
    SHIELD = "Shield"
    THORNS = "Thorns"
    STUN = "Stun"
    LIMIT_BREAK = "LimitBreak"
    CRITICAL_BOOST = "CriticalUp"
    ELEMENTAL = "Elemental"


class StatusCategory(Enum):
    FLAT_DAMAGE_BONUS = "flat_damage_bonus"
    FLAT_DAMAGE_PENALTY = "flat_damage_penalty"
    DAMAGE_REDUCTION = "damage_reduction"
    DAMAGE_AMPLIFICATION = "damage_amplification"
    FLAT_DEFENSE = "flat_defense"
    DAMAGE_OVER_TIME = "damage_over_time"
    HEAL_OVER_TIME = "heal_over_time"
    SHIELD = "shield"
    THORNS = "thorns"
    FLAG = "flag"
    PASSIVE = "passive"


class StatusType(Enum):
    BUFF = "BUFF"
    DEBUFF = "DEBUFF"


@dataclass(frozen=True)
class StatusInfo:
    category: StatusCategory
    status_type: StatusType
    single_instance: bool = False


STATUS_DATA: Dict[StatusKind, StatusInfo] = {
    StatusKind.STRENGTH: StatusInfo(StatusCategory.FLAT_DAMAGE_BONUS, StatusType.BUFF),
    StatusKind.CURSE: StatusInfo(StatusCategory.FLAT_DAMAGE_PENALTY, StatusType.DEBUFF),
    StatusKind.WEAK: StatusInfo(StatusCategory.DAMAGE_REDUCTION, StatusType.DEBUFF),
    StatusKind.BREAK: StatusInfo(StatusCategory.DAMAGE_AMPLIFICATION, StatusType.DEBUFF),
    StatusKind.ARMOR: StatusInfo(StatusCategory.FLAT_DEFENSE, StatusType.BUFF),
    StatusKind.BURN: StatusInfo(StatusCategory.DAMAGE_OVER_TIME, StatusType.DEBUFF),
    StatusKind.SALVE: StatusInfo(StatusCategory.HEAL_OVER_TIME, StatusType.BUFF),
    StatusKind.SHIELD: StatusInfo(StatusCategory.SHIELD, StatusType.BUFF),
    StatusKind.THORNS: StatusInfo(StatusCategory.THORNS, StatusType.BUFF),
    StatusKind.STUN: StatusInfo(StatusCategory.FLAG, StatusType.DEBUFF, single_instance=True),
    StatusKind.LIMIT_BREAK: StatusInfo(StatusCategory.FLAG, StatusType.BUFF, single_instance=True),
    StatusKind.CRITICAL_BOOST: StatusInfo(StatusCategory.PASSIVE, StatusType.BUFF),
    StatusKind.ELEMENTAL: StatusInfo(StatusCategory.PASSIVE, StatusType.DEBUFF),
}


def is_negative_status(kind: StatusKind) -> bool:
    """True for debuffs; negative effects are never applied to defeated entities."""
    return STATUS_DATA[kind].status_type == StatusType.DEBUFF


# =============================================================================
# STATUS EFFECT INSTANCE
# =============================================================================

class StatusSnapshot(NamedTuple):
    """Immutable view of one StatusEffect, used for logging and rollback."""
    kind: StatusKind
    potency: int
    duration: int
    source_id: Optional[str]


@dataclass
class StatusEffect:
    """
    One applied instance of a status.

    Attributes:
        kind: Which status this is
        potency: Magnitude; meaning depends on kind (damage per turn, shield HP, ...)
        duration: Turns remaining, or WHOLE_FIGHT
        source_id: Entity id that applied it. Not an owning reference; the
            source may already have left the fight.
    """
    kind: StatusKind
    potency: int
    duration: int = WHOLE_FIGHT
    source_id: Optional[str] = None

    @property
    def is_whole_fight(self) -> bool:
        return self.duration == WHOLE_FIGHT

    def snapshot(self) -> StatusSnapshot:
        return StatusSnapshot(self.kind, self.potency, self.duration, self.source_id)

    def __repr__(self) -> str:
        dur = "fight" if self.is_whole_fight else str(self.duration)
        return f"{self.kind.value}({self.potency}, {dur})"


# =============================================================================
# STATUS EFFECT STORE
# =============================================================================

@dataclass
class StatusEffectStore:
    """
    All status effects on one entity, in application order.

    Every entity in a combat owns exactly one store (see state/combat.py).
    """
    owner_id: Optional[str] = None
    effects: List[StatusEffect] = field(default_factory=list)

    def add_effect(
        self,
        kind: StatusKind,
        potency: int,
        duration: int = WHOLE_FIGHT,
        source_id: Optional[str] = None,
    ) -> StatusEffect:
        """
        Add a status instance.

        Single-instance kinds are idempotent: re-adding keeps one instance and
        refreshes it to the larger duration and potency.

        Returns:
            The instance now held by the store.

        Raises:
            ValueError: On negative potency or a duration that is neither
                positive nor WHOLE_FIGHT.
        """
        if potency < 0:
            raise ValueError(f"Status potency must be >= 0, got {potency}")
        if duration != WHOLE_FIGHT and duration <= 0:
            raise ValueError(f"Status duration must be > 0 or WHOLE_FIGHT, got {duration}")

        if STATUS_DATA[kind].single_instance:
            existing = self.first(kind)
            if existing is not None:
                if existing.is_whole_fight or duration == WHOLE_FIGHT:
                    existing.duration = WHOLE_FIGHT
                else:
                    existing.duration = max(existing.duration, duration)
                existing.potency = max(existing.potency, potency)
                logger.debug(f"{self.owner_id}: refreshed {existing!r}")
                return existing

        effect = StatusEffect(kind, potency, duration, source_id)
        self.effects.append(effect)
        logger.debug(f"{self.owner_id}: added {effect!r} from {source_id}")
        return effect

    def remove_effect(self, kind: StatusKind, source_id: Optional[str] = None) -> List[StatusEffect]:
        """Remove every instance of kind, or only those applied by source_id."""
        removed = [
            e for e in self.effects
            if e.kind == kind and (source_id is None or e.source_id == source_id)
        ]
        if removed:
            self.effects = [e for e in self.effects if not any(e is r for r in removed)]
            logger.debug(f"{self.owner_id}: removed {removed}")
        return removed

    def clear_all(self) -> int:
        """Drop everything, including whole-fight effects. Returns the count dropped."""
        count = len(self.effects)
        self.effects = []
        return count

    def tick(self) -> List[StatusEffect]:
        """
        Advance one turn boundary.

        Decrements every timed duration by 1 and removes those reaching 0.
        WHOLE_FIGHT instances are untouched.

        Returns:
            The instances that expired, in application order.
        """
        expired = []
        kept = []
        for effect in self.effects:
            if not effect.is_whole_fight:
                effect.duration -= 1
                if effect.duration <= 0:
                    expired.append(effect)
                    continue
            kept.append(effect)
        self.effects = kept
        if expired:
            logger.debug(f"{self.owner_id}: expired {expired}")
        return expired

    # === Queries ===

    def get_active(self, kind: StatusKind) -> int:
        """Sum of potencies of every active instance of kind (0 if none)."""
        return sum(e.potency for e in self.effects if e.kind == kind)

    def has_effect(self, kind: StatusKind) -> bool:
        return any(e.kind == kind for e in self.effects)

    def count(self, kind: StatusKind) -> int:
        """Number of coexisting instances of kind."""
        return sum(1 for e in self.effects if e.kind == kind)

    def first(self, kind: StatusKind) -> Optional[StatusEffect]:
        for effect in self.effects:
            if effect.kind == kind:
                return effect
        return None

    def total_for(self, category: StatusCategory) -> int:
        """Sum of potencies across every kind in a category."""
        return sum(e.potency for e in self.effects if STATUS_DATA[e.kind].category == category)

    def instances_for(self, category: StatusCategory) -> int:
        """Number of instances across every kind in a category."""
        return sum(1 for e in self.effects if STATUS_DATA[e.kind].category == category)

    # === Shield ===

    def absorb(self, amount: int) -> Tuple[int, int]:
        """
        Soak damage with Shield instances, oldest first.

        Depleted instances are removed.

        Returns:
            (damage left over for health, damage absorbed)
        """
        remaining = amount
        absorbed = 0
        for effect in self.effects:
            if remaining <= 0:
                break
            if effect.kind != StatusKind.SHIELD or effect.potency <= 0:
                continue
            soaked = min(effect.potency, remaining)
            effect.potency -= soaked
            remaining -= soaked
            absorbed += soaked
        self.effects = [
            e for e in self.effects
            if not (e.kind == StatusKind.SHIELD and e.potency <= 0)
        ]
        return remaining, absorbed

    # === Snapshot / rollback ===

    def snapshot(self) -> Tuple[StatusSnapshot, ...]:
        """Ordered, immutable copy of the store."""
        return tuple(e.snapshot() for e in self.effects)

    def restore(self, snapshot: Tuple[StatusSnapshot, ...]) -> None:
        """Replace the store's contents with a previous snapshot."""
        self.effects = [StatusEffect(s.kind, s.potency, s.duration, s.source_id) for s in snapshot]

    def __len__(self) -> int:
        return len(self.effects)

    def __repr__(self) -> str:
        return f"StatusEffectStore({self.owner_id}: {self.effects})"
