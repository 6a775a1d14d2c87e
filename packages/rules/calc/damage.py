"""
Damage Resolution Pipeline - single source of truth for damage arithmetic.

Design principles:
1. Pure functions - no side effects, no state, no randomness
2. Every status that touches damage is folded into a ModifierSet first
3. One fixed order, identical for every caller

Resolution order:
1. Base damage (0 short-circuits to 0)
2. Flat penalties on the source (Curse)
3. Flat bonuses on the source (Strength)
4. Clamp to 0
5. Source reduction factors (Weak: 0.75 each)
6. Target amplification factors (Break: 1.5 each)
7. Target flat defense (Armor), never below 1 if there was damage to reduce
8. Round half to even
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from ..content.statuses import StatusCategory, StatusEffectStore

__all__ = [
    "ModifierSet",
    "NO_MODIFIERS",
    "resolve_damage",
    "build_modifier_set",
    "round_half_even",
    # Constants
    "WEAK_MULT",
    "BREAK_MULT",
]

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

# Weak - each instance on the attacker cuts outgoing damage by 25%
WEAK_MULT = 0.75

# Break - each instance on the defender raises incoming damage by 50%
BREAK_MULT = 1.50


# =============================================================================
# MODIFIERS
# =============================================================================

@dataclass(frozen=True)
class ModifierSet:
    """
    Damage-relevant statuses of one entity, already summed/collected.

    Source-side fields (flat_bonus, flat_penalty, reduction_factors) are read
    from the attacker; target-side fields (amplification_factors, defense)
    from the defender. A set built from a store carries both sides, and the
    pipeline reads only the side it needs.

    has_armor marks an Armor status on the defender even when its potency
    sums to 0; the armor floor still applies then.
    """
    flat_bonus: int = 0
    flat_penalty: int = 0
    reduction_factors: Tuple[float, ...] = ()
    amplification_factors: Tuple[float, ...] = ()
    defense: int = 0
    has_armor: bool = False

    @property
    def armored(self) -> bool:
        return self.has_armor or self.defense > 0


NO_MODIFIERS = ModifierSet()


def build_modifier_set(
    store: Optional[StatusEffectStore],
    weak_mult: float = WEAK_MULT,
    break_mult: float = BREAK_MULT,
) -> ModifierSet:
    """
    Collect a store's damage modifiers.

    Each Weak/Break instance contributes one factor regardless of its potency.
    """
    if store is None:
        return NO_MODIFIERS
    return ModifierSet(
        flat_bonus=store.total_for(StatusCategory.FLAT_DAMAGE_BONUS),
        flat_penalty=store.total_for(StatusCategory.FLAT_DAMAGE_PENALTY),
        reduction_factors=(weak_mult,) * store.instances_for(StatusCategory.DAMAGE_REDUCTION),
        amplification_factors=(break_mult,) * store.instances_for(StatusCategory.DAMAGE_AMPLIFICATION),
        defense=store.total_for(StatusCategory.FLAT_DEFENSE),
        has_armor=store.instances_for(StatusCategory.FLAT_DEFENSE) > 0,
    )


# =============================================================================
# RESOLUTION
# =============================================================================

def round_half_even(value: float) -> int:
    """Round to nearest int, ties to even: 7.5 -> 8, 8.5 -> 8."""
    return int(round(value))


def resolve_damage(
    base: int,
    source_mods: ModifierSet = NO_MODIFIERS,
    target_mods: ModifierSet = NO_MODIFIERS,
) -> int:
    """
    Resolve the damage one hit deals.

    Args:
        base: Effect's (already scaled) base damage
        source_mods: Attacker's modifiers
        target_mods: Defender's modifiers

    Returns:
        Final damage as int (minimum 0). Deterministic for fixed inputs.
    """
    # 1. Nothing to modify
    if base <= 0:
        return 0

    # 2-3. Flat source adjustments
    damage = float(base)
    damage -= source_mods.flat_penalty
    damage += source_mods.flat_bonus

    # 4. Curse can eat the whole hit, never more
    if damage < 0:
        damage = 0.0

    # 5. Attacker reductions chain multiplicatively
    for factor in source_mods.reduction_factors:
        damage *= factor

    # 6. Defender amplifications chain multiplicatively
    for factor in target_mods.amplification_factors:
        damage *= factor

    # 7. Armor, even at potency 0; a hit that had damage left always deals at least 1
    if target_mods.armored:
        if damage > 0:
            damage = max(1.0, damage - target_mods.defense)
        else:
            damage = 0.0

    # 8. Banker's rounding
    result = round_half_even(damage)
    logger.debug(f"resolve_damage(base={base}, src={source_mods}, tgt={target_mods}) -> {result}")
    return result


if __name__ == "__main__":
    print("=== Damage Pipeline Checks ===\n")

    assert resolve_damage(10, ModifierSet(reduction_factors=(WEAK_MULT,))) == 8
    print("10 + Weak: 8 (7.5 rounds to even)")

    assert resolve_damage(10, target_mods=ModifierSet(amplification_factors=(BREAK_MULT,))) == 15
    print("10 vs Break: 15")

    assert resolve_damage(5, target_mods=ModifierSet(defense=10)) == 1
    print("5 vs Armor 10: 1")

    assert resolve_damage(20, ModifierSet(flat_bonus=8, flat_penalty=4, reduction_factors=(WEAK_MULT,))) == 18
    print("20 + Str 8 + Curse 4 + Weak: 18")

    assert resolve_damage(1, ModifierSet(flat_bonus=100), ModifierSet(amplification_factors=(BREAK_MULT,))) == 152
    print("1 + Str 100 vs Break: 152 (151.5 rounds to even)")

    print("\n=== All checks passed ===")
