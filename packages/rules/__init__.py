"""
Card-Combat Rules Engine

Deterministic resolution of card effects for a turn-based, server
authoritative card battler. Given a card and the combatants involved it
computes damage, healing, status changes and whether conditional or scaling
clauses fire. Same inputs, same result.

Core subsystems:
- calc: Damage pipeline, scaling, combat math self-check
- content: Status kinds and store, stances, conditions, card definitions
- state: Tracking ledgers and the per-fight combat arena
- effects: The effect resolver that ties them together

Usage:
    from packages.rules import CombatState, EntityState, EffectResolver, Card

    combat = CombatState()
    combat.add_entity(EntityState("p1", health=50, max_health=50))
    combat.add_entity(EntityState("p2", health=50, max_health=50))
    combat.start_fight()

    resolver = EffectResolver(combat)
    result = resolver.resolve_card(Card.from_dict(card_json), "p1", ["p2"])
"""

__version__ = "0.1.0"

from .errors import RulesError, ConfigurationError
from .config import RulesConfig, load_config

# Damage / scaling
from .calc.damage import (
    ModifierSet,
    resolve_damage,
    build_modifier_set,
    WEAK_MULT,
    BREAK_MULT,
)
from .calc.scaling import ScalingType, scale

# Content
from .content.statuses import StatusKind, StatusEffect, StatusEffectStore, WHOLE_FIGHT
from .content.stances import StanceType
from .content.conditions import ConditionType, evaluate_condition
from .content.cards import (
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

# State
from .state.ledger import TrackingLedger
from .state.combat import EntityKind, EntityState, CombatState

# Resolution
from .effects.executor import AppliedEffect, EffectResult, EffectResolver
