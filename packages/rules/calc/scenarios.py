"""
Combat math self-check.

A fixed table of damage scenarios run through the real status store and
pipeline. Used by `scripts/rules.py math` and by the test suite; a failure
means the pipeline's order or rounding has drifted.
"""

from dataclasses import dataclass
from typing import List, NamedTuple, Tuple

from ..content.statuses import StatusEffectStore, StatusKind
from .damage import build_modifier_set, resolve_damage

__all__ = ["DamageScenario", "ScenarioOutcome", "DAMAGE_SCENARIOS", "run_scenario", "run_scenarios"]

S = StatusKind


@dataclass(frozen=True)
class DamageScenario:
    name: str
    base: int
    source: Tuple[Tuple[StatusKind, int], ...]
    target: Tuple[Tuple[StatusKind, int], ...]
    expected: int


class ScenarioOutcome(NamedTuple):
    scenario: DamageScenario
    actual: int

    @property
    def passed(self) -> bool:
        return self.actual == self.scenario.expected


def _sc(name, base, expected, source=(), target=()):
    return DamageScenario(name, base, tuple(source), tuple(target), expected)


DAMAGE_SCENARIOS: Tuple[DamageScenario, ...] = (
    # Single modifiers
    _sc("Weak", 10, 8, source=[(S.WEAK, 1)]),
    _sc("Break", 10, 15, target=[(S.BREAK, 1)]),
    _sc("Strength 5", 10, 15, source=[(S.STRENGTH, 5)]),
    _sc("Curse 3", 10, 7, source=[(S.CURSE, 3)]),
    _sc("Armor 4", 10, 6, target=[(S.ARMOR, 4)]),

    # Combinations
    _sc("Weak + Break", 10, 11, source=[(S.WEAK, 1)], target=[(S.BREAK, 1)]),
    _sc("Strength + Break", 10, 22, source=[(S.STRENGTH, 5)], target=[(S.BREAK, 1)]),
    _sc("Curse + Weak", 10, 5, source=[(S.CURSE, 3), (S.WEAK, 1)]),
    _sc("Armor + Break", 10, 11, target=[(S.ARMOR, 4), (S.BREAK, 1)]),
    _sc("Strength + Curse + Weak", 20, 18, source=[(S.STRENGTH, 8), (S.CURSE, 4), (S.WEAK, 1)]),
    _sc("Everything", 20, 26,
        source=[(S.STRENGTH, 6), (S.WEAK, 1)], target=[(S.ARMOR, 3), (S.BREAK, 1)]),

    # Boundaries
    _sc("Zero damage", 0, 0, source=[(S.STRENGTH, 5)], target=[(S.BREAK, 1)]),
    _sc("High Armor vs Low Damage", 5, 1, target=[(S.ARMOR, 10)]),
    _sc("High Strength vs Low Base", 5, 20, source=[(S.STRENGTH, 15)]),
    _sc("Curse Exceeds Damage", 5, 0, source=[(S.CURSE, 10)]),
    _sc("Massive Strength vs Massive Armor", 10, 20, source=[(S.STRENGTH, 50)], target=[(S.ARMOR, 40)]),
    _sc("Damage Equals Armor", 8, 1, target=[(S.ARMOR, 8)]),
    _sc("Damage Equals Curse", 12, 0, source=[(S.CURSE, 12)]),
    _sc("Minimum Damage Massive Boost", 1, 152, source=[(S.STRENGTH, 100)], target=[(S.BREAK, 1)]),
    _sc("Minimum Damage Massive Penalty", 1, 0, source=[(S.CURSE, 100), (S.WEAK, 1)]),

    # Rounding
    _sc("Weak 21 (15.75)", 21, 16, source=[(S.WEAK, 1)]),
    _sc("Weak 19 (14.25)", 19, 14, source=[(S.WEAK, 1)]),
    _sc("Break 15 (22.5)", 15, 22, target=[(S.BREAK, 1)]),
    _sc("Break 17 (25.5)", 17, 26, target=[(S.BREAK, 1)]),

    # Potency edges
    _sc("Strength 1", 10, 11, source=[(S.STRENGTH, 1)]),
    _sc("Strength 25", 10, 35, source=[(S.STRENGTH, 25)]),
    _sc("Curse 1", 10, 9, source=[(S.CURSE, 1)]),
    _sc("Curse 9", 10, 1, source=[(S.CURSE, 9)]),
    _sc("Armor 1", 10, 9, target=[(S.ARMOR, 1)]),
    _sc("Armor 9", 10, 1, target=[(S.ARMOR, 9)]),
)


def run_scenario(scenario: DamageScenario, weak_mult: float = 0.75, break_mult: float = 1.5) -> ScenarioOutcome:
    source = StatusEffectStore(owner_id="source")
    target = StatusEffectStore(owner_id="target")
    for kind, potency in scenario.source:
        source.add_effect(kind, potency, 3)
    for kind, potency in scenario.target:
        target.add_effect(kind, potency, 3)
    actual = resolve_damage(
        scenario.base,
        build_modifier_set(source, weak_mult, break_mult),
        build_modifier_set(target, weak_mult, break_mult),
    )
    return ScenarioOutcome(scenario, actual)


def run_scenarios(weak_mult: float = 0.75, break_mult: float = 1.5) -> List[ScenarioOutcome]:
    return [run_scenario(s, weak_mult, break_mult) for s in DAMAGE_SCENARIOS]
