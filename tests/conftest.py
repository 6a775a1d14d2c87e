"""
Shared pytest fixtures for the rules engine test suite.

This module provides reusable fixtures for:
- Combat arenas with two opposing players (and a pet)
- Resolvers bound to those arenas
- Card factories for one-effect cards
"""

import pytest
import sys

# Ensure project root is in path
import os
_project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, _project_root)

from packages.rules.config import RulesConfig
from packages.rules.content.cards import Card, CardEffect, CardEffectKind, CardTarget, CardType
from packages.rules.effects.executor import EffectResolver
from packages.rules.state.combat import CombatState, EntityKind, EntityState


# =============================================================================
# Arena Fixtures
# =============================================================================


@pytest.fixture
def combat():
    """Two players at 50/50 HP and 3 energy, fight started."""
    state = CombatState()
    state.add_entity(EntityState("p1", name="Alice", health=50, max_health=50))
    state.add_entity(EntityState("p2", name="Bob", health=50, max_health=50))
    state.start_fight()
    return state


@pytest.fixture
def combat_with_pets():
    """Two players, each with one pet, fight started."""
    state = CombatState()
    state.add_entity(EntityState("p1", health=50, max_health=50))
    state.add_entity(EntityState("pet1", kind=EntityKind.PET, health=20, max_health=20, owner_id="p1"))
    state.add_entity(EntityState("p2", health=50, max_health=50))
    state.add_entity(EntityState("pet2", kind=EntityKind.PET, health=20, max_health=20, owner_id="p2"))
    state.start_fight()
    return state


@pytest.fixture
def resolver(combat):
    """Resolver with default balance bound to the two-player arena."""
    return EffectResolver(combat, RulesConfig())


# =============================================================================
# Card Fixtures
# =============================================================================


@pytest.fixture
def make_card():
    """Factory: card from effects, Attack costing 1 unless overridden."""
    counter = {"n": 0}

    def _make(*effects, card_type=CardType.ATTACK, cost=1, builds_combo=False, new_stance=None, card_id=None):
        counter["n"] += 1
        cid = card_id or f"card_{counter['n']}"
        return Card(
            id=cid,
            name=cid,
            card_type=card_type,
            cost=cost,
            effects=tuple(effects),
            builds_combo=builds_combo,
            new_stance=new_stance,
        )

    return _make


@pytest.fixture
def strike(make_card):
    """10 damage to the chosen opponent."""
    return make_card(CardEffect(CardEffectKind.DAMAGE, 10, CardTarget.OPPONENT), card_id="strike")


# =============================================================================
# Environment Fixtures
# =============================================================================

RULES_ENV_VARS = (
    "RULES_WEAK_MULTIPLIER",
    "RULES_BREAK_MULTIPLIER",
    "RULES_THORNS_ENABLED",
    "RULES_LOG_LEVEL",
)


@pytest.fixture
def clean_env(monkeypatch):
    """Unset every RULES_* variable; monkeypatch restores them afterwards."""
    for name in RULES_ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch
