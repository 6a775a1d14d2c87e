"""
Authored content: status kinds, stances, conditions and card definitions.
"""

from .statuses import (
    StatusKind,
    StatusCategory,
    StatusType,
    STATUS_DATA,
    WHOLE_FIGHT,
    StatusEffect,
    StatusSnapshot,
    StatusEffectStore,
)

from .stances import StanceType

from .conditions import ConditionType, evaluate_condition

from .cards import (
    CardType,
    CardEffectKind,
    CardTarget,
    AlternativeLogic,
    Condition,
    AlternativeEffect,
    Scaling,
    CardEffect,
    Card,
)
