"""
Calculation utilities for the rules engine.

Contains:
- Damage resolution pipeline (pure functions, no side effects)
- Scaling calculator
- Combat math self-check scenarios
"""

from .damage import (
    ModifierSet,
    NO_MODIFIERS,
    resolve_damage,
    build_modifier_set,
    round_half_even,
    WEAK_MULT,
    BREAK_MULT,
)

from .scaling import ScalingType, scale, tracked_value_for

from .scenarios import DamageScenario, DAMAGE_SCENARIOS, run_scenario, run_scenarios
