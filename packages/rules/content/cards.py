"""
Card definitions - immutable authored data consumed by the effect resolver.

A Card carries one or more CardEffects. Each CardEffect names a kind, a base
amount and a target selector, and may add:

- a condition: {type, threshold}
- an alternative: {kind, amount, logic: Replace | Additional, duration}
    Replace     condition met -> main effect only; not met -> alternative only
    Additional  main effect always; alternative too when the condition is met
- a scaling clause: {type, multiplier, cap}

Cards normally arrive as JSON from the authoring tool; Card.from_dict /
CardEffect.from_dict turn them into frozen dataclasses. Tag parsing is
strict (unknown tags raise ConfigurationError). Structural checks that span
several fields live in CardEffect.validate(), which the resolver runs per
effect so that one malformed effect does not block the rest of the card.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Type, TypeVar, Union

from ..calc.scaling import ScalingType
from ..errors import ConfigurationError
from .conditions import ConditionType, is_supported_condition
from .stances import StanceType
from .statuses import WHOLE_FIGHT, StatusKind

__all__ = [
    "CardType",
    "CardEffectKind",
    "CardTarget",
    "AlternativeLogic",
    "Condition",
    "AlternativeEffect",
    "Scaling",
    "CardEffect",
    "Card",
    "EFFECT_STATUS",
    "NEGATIVE_EFFECTS",
    "parse_enum",
    "parse_int",
]


class CardType(Enum):
    NONE = "None"
    ATTACK = "Attack"
    SKILL = "Skill"
    SPELL = "Spell"
    COMBO = "Combo"
    FINISHER = "Finisher"
    STANCE = "Stance"
    ARTIFACT = "Artifact"
    RITUAL = "Ritual"
    COUNTER = "Counter"
    REACTION = "Reaction"


class CardEffectKind(Enum):
    DAMAGE = "Damage"
    HEAL = "Heal"
    DRAW_CARD = "DrawCard"
    RESTORE_ENERGY = "RestoreEnergy"
    APPLY_BREAK = "ApplyBreak"
    APPLY_WEAK = "ApplyWeak"
    APPLY_DAMAGE_OVER_TIME = "ApplyDamageOverTime"
    APPLY_HEAL_OVER_TIME = "ApplyHealOverTime"
    RAISE_CRITICAL_CHANCE = "RaiseCriticalChance"
    APPLY_THORNS = "ApplyThorns"
    APPLY_SHIELD = "ApplyShield"
    APPLY_ARMOR = "ApplyArmor"
    APPLY_ELEMENTAL_STATUS = "ApplyElementalStatus"
    APPLY_STUN = "ApplyStun"
    APPLY_LIMIT_BREAK = "ApplyLimitBreak"
    APPLY_STRENGTH = "ApplyStrength"
    APPLY_CURSE = "ApplyCurse"
    DISCARD_RANDOM_CARDS = "DiscardRandomCards"
    ENTER_STANCE = "EnterStance"
    EXIT_STANCE = "ExitStance"


class CardTarget(Enum):
    """
    Who an effect lands on.

    SELF is the card's player. OPPONENT and ALLY use the target ids chosen by
    the orchestrator. ALL / ALL_ALLIES / ALL_ENEMIES expand over the entities
    in combat, with a player and its pets forming one side.
    """
    SELF = "Self"
    OPPONENT = "Opponent"
    ALLY = "Ally"
    ALL = "All"
    ALL_ALLIES = "AllAllies"
    ALL_ENEMIES = "AllEnemies"


class AlternativeLogic(Enum):
    REPLACE = "Replace"
    ADDITIONAL = "Additional"


# Effect kinds that add a status, with the duration used when the card gives none
EFFECT_STATUS: Dict[CardEffectKind, Tuple[StatusKind, int]] = {
    CardEffectKind.APPLY_BREAK: (StatusKind.BREAK, WHOLE_FIGHT),
    CardEffectKind.APPLY_WEAK: (StatusKind.WEAK, WHOLE_FIGHT),
    CardEffectKind.APPLY_DAMAGE_OVER_TIME: (StatusKind.BURN, WHOLE_FIGHT),
    CardEffectKind.APPLY_HEAL_OVER_TIME: (StatusKind.SALVE, WHOLE_FIGHT),
    CardEffectKind.RAISE_CRITICAL_CHANCE: (StatusKind.CRITICAL_BOOST, WHOLE_FIGHT),
    CardEffectKind.APPLY_THORNS: (StatusKind.THORNS, WHOLE_FIGHT),
    CardEffectKind.APPLY_SHIELD: (StatusKind.SHIELD, WHOLE_FIGHT),
    CardEffectKind.APPLY_ARMOR: (StatusKind.ARMOR, WHOLE_FIGHT),
    CardEffectKind.APPLY_ELEMENTAL_STATUS: (StatusKind.ELEMENTAL, WHOLE_FIGHT),
    CardEffectKind.APPLY_STUN: (StatusKind.STUN, 1),
    CardEffectKind.APPLY_LIMIT_BREAK: (StatusKind.LIMIT_BREAK, WHOLE_FIGHT),
    CardEffectKind.APPLY_STRENGTH: (StatusKind.STRENGTH, WHOLE_FIGHT),
    CardEffectKind.APPLY_CURSE: (StatusKind.CURSE, WHOLE_FIGHT),
}

# Kinds that never land on a defeated (health <= 0) entity
NEGATIVE_EFFECTS = frozenset({
    CardEffectKind.DAMAGE,
    CardEffectKind.APPLY_BREAK,
    CardEffectKind.APPLY_WEAK,
    CardEffectKind.APPLY_DAMAGE_OVER_TIME,
    CardEffectKind.APPLY_ELEMENTAL_STATUS,
    CardEffectKind.APPLY_STUN,
    CardEffectKind.APPLY_CURSE,
    CardEffectKind.DISCARD_RANDOM_CARDS,
})


E = TypeVar("E", bound=Enum)


def parse_enum(enum_cls: Type[E], value: Any, what: str) -> E:
    """
    Parse an authored tag into enum_cls.

    Accepts a member, its value ("ApplyWeak") or its name ("APPLY_WEAK").

    Raises:
        ConfigurationError: If the tag matches nothing.
    """
    if isinstance(value, enum_cls):
        return value
    for member in enum_cls:
        if value == member.value or (isinstance(value, str) and value.upper() == member.name):
            return member
    raise ConfigurationError(f"Unknown {what}: {value!r}")


def parse_int(value: Any, what: str) -> int:
    """
    Raises:
        ConfigurationError: If value is not an integer (or an integral string).
    """
    if isinstance(value, bool):
        raise ConfigurationError(f"{what} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"{what} must be an integer, got {value!r}") from None


def _parse_duration(value: Any) -> Optional[int]:
    return None if value is None else parse_int(value, "duration")


def _check_quantities(label: str, amount: Any, duration: Any) -> None:
    if not isinstance(amount, int) or isinstance(amount, bool) or amount < 0:
        raise ConfigurationError(f"{label}: amount must be an integer >= 0, got {amount!r}")
    if duration is None:
        return
    if not isinstance(duration, int) or isinstance(duration, bool):
        raise ConfigurationError(f"{label}: duration must be an integer, got {duration!r}")
    if duration != WHOLE_FIGHT and duration <= 0:
        raise ConfigurationError(f"{label}: invalid duration {duration}")


# =============================================================================
# EFFECT CLAUSES
# =============================================================================

@dataclass(frozen=True)
class Condition:
    """
    threshold is an int for numeric conditions, a StanceType for IF_IN_STANCE
    and a CardType for IF_LAST_CARD_TYPE.
    """
    type: ConditionType
    threshold: Union[int, StanceType, CardType] = 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Condition":
        if "type" not in data:
            raise ConfigurationError("Condition is missing 'type'")
        ctype = parse_enum(ConditionType, data["type"], "condition type")
        raw = data.get("threshold", 0)
        if ctype == ConditionType.IF_IN_STANCE:
            threshold = parse_enum(StanceType, raw, "stance")
        elif ctype == ConditionType.IF_LAST_CARD_TYPE:
            threshold = parse_enum(CardType, raw, "card type")
        else:
            threshold = parse_int(raw, "condition threshold")
        return cls(ctype, threshold)


@dataclass(frozen=True)
class AlternativeEffect:
    kind: CardEffectKind
    amount: int = 0
    logic: AlternativeLogic = AlternativeLogic.REPLACE
    duration: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AlternativeEffect":
        if "kind" not in data:
            raise ConfigurationError("Alternative effect is missing 'kind'")
        return cls(
            kind=parse_enum(CardEffectKind, data["kind"], "effect kind"),
            amount=parse_int(data.get("amount", 0), "amount"),
            logic=parse_enum(AlternativeLogic, data.get("logic", "Replace"), "alternative logic"),
            duration=_parse_duration(data.get("duration")),
        )


@dataclass(frozen=True)
class Scaling:
    type: ScalingType
    multiplier: float = 1.0
    cap: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Scaling":
        if "type" not in data:
            raise ConfigurationError("Scaling is missing 'type'")
        cap = data.get("cap")
        return cls(
            type=parse_enum(ScalingType, data["type"], "scaling type"),
            multiplier=float(data.get("multiplier", 1.0)),
            cap=parse_int(cap, "scaling cap") if cap is not None else None,
        )


# =============================================================================
# CARD EFFECT
# =============================================================================

@dataclass(frozen=True)
class CardEffect:
    """
    One effect of a card.

    Attributes:
        kind: What the effect does
        amount: Base amount before scaling
        target: Target selector
        duration: Status duration in turns (None = the kind's default)
        condition: Optional gate / switch for the alternative
        alternative: Optional second effect, see AlternativeLogic
        scaling: Optional amount scaling
        stance: Stance entered by ENTER_STANCE
        alternative_flagged: Authored data declared an alternative. Set
            without one attached, validate() rejects the effect.
    """
    kind: CardEffectKind
    amount: int = 0
    target: CardTarget = CardTarget.OPPONENT
    duration: Optional[int] = None
    condition: Optional[Condition] = None
    alternative: Optional[AlternativeEffect] = None
    scaling: Optional[Scaling] = None
    stance: Optional[StanceType] = None
    alternative_flagged: bool = False

    def validate(self) -> None:
        """
        Raises:
            ConfigurationError: If the effect cannot be resolved as authored.
        """
        if not isinstance(self.kind, CardEffectKind):
            raise ConfigurationError(f"Unknown effect kind: {self.kind!r}")
        if not isinstance(self.target, CardTarget):
            raise ConfigurationError(f"Unknown target selector: {self.target!r}")
        _check_quantities(self.kind.value, self.amount, self.duration)
        if self.condition is not None and not is_supported_condition(self.condition.type):
            raise ConfigurationError(f"Unknown condition type: {self.condition.type!r}")
        if self.scaling is not None and not isinstance(self.scaling.type, ScalingType):
            raise ConfigurationError(f"Unknown scaling type: {self.scaling.type!r}")
        if self.scaling is not None and self.scaling.cap is not None and self.scaling.cap < 0:
            raise ConfigurationError(f"{self.kind.value}: scaling cap must be >= 0, got {self.scaling.cap}")
        if self.alternative_flagged and self.alternative is None:
            raise ConfigurationError(f"{self.kind.value}: alternative effect referenced but absent")
        if self.alternative is not None:
            if self.condition is None:
                raise ConfigurationError(f"{self.kind.value}: alternative effect without a condition")
            if not isinstance(self.alternative.kind, CardEffectKind):
                raise ConfigurationError(f"Unknown alternative effect kind: {self.alternative.kind!r}")
            _check_quantities(self.alternative.kind.value, self.alternative.amount, self.alternative.duration)
            if self.alternative.kind == CardEffectKind.ENTER_STANCE:
                raise ConfigurationError("Alternative effects cannot enter a stance")
        if self.kind == CardEffectKind.ENTER_STANCE and self.stance is None:
            raise ConfigurationError("EnterStance effect names no stance")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CardEffect":
        if "kind" not in data:
            raise ConfigurationError("Card effect is missing 'kind'")
        condition = data.get("condition")
        alternative = data.get("alternative")
        scaling = data.get("scaling")
        stance = data.get("stance")
        return cls(
            kind=parse_enum(CardEffectKind, data["kind"], "effect kind"),
            amount=parse_int(data.get("amount", 0), "amount"),
            target=parse_enum(CardTarget, data.get("target", "Opponent"), "target selector"),
            duration=_parse_duration(data.get("duration")),
            condition=Condition.from_dict(condition) if condition else None,
            alternative=AlternativeEffect.from_dict(alternative) if alternative else None,
            scaling=Scaling.from_dict(scaling) if scaling else None,
            stance=parse_enum(StanceType, stance, "stance") if stance is not None else None,
            alternative_flagged=bool(data.get("has_alternative", alternative is not None)),
        )


# =============================================================================
# CARD
# =============================================================================

@dataclass(frozen=True)
class Card:
    """
    A playable card.

    builds_combo marks combo builders (see TrackingLedger.record_card_played).
    new_stance, when set, is entered as the card is played, before its effects.
    """
    id: str
    name: str
    card_type: CardType = CardType.ATTACK
    cost: int = 1
    effects: Tuple[CardEffect, ...] = ()
    builds_combo: bool = False
    new_stance: Optional[StanceType] = None

    @property
    def is_zero_cost(self) -> bool:
        return self.cost == 0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Card":
        if "id" not in data:
            raise ConfigurationError("Card is missing 'id'")
        cost = parse_int(data.get("cost", 1), "cost")
        if cost < 0:
            raise ConfigurationError(f"Card {data['id']}: cost must be >= 0, got {cost}")
        new_stance = data.get("new_stance")
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", data["id"])),
            card_type=parse_enum(CardType, data.get("card_type", "Attack"), "card type"),
            cost=cost,
            effects=tuple(CardEffect.from_dict(e) for e in data.get("effects", [])),
            builds_combo=bool(data.get("builds_combo", False)),
            new_stance=parse_enum(StanceType, new_stance, "stance") if new_stance is not None else None,
        )

    def __repr__(self) -> str:
        return f"Card({self.id}, {self.card_type.value}, cost={self.cost}, effects={len(self.effects)})"
