"""
Card Definition Parsing Tests

Authored JSON -> frozen Card / CardEffect, with strict tag parsing.
"""

import pytest

from packages.rules.calc.scaling import ScalingType
from packages.rules.content.cards import (
    AlternativeLogic,
    Card,
    CardEffect,
    CardEffectKind,
    CardTarget,
    CardType,
    Condition,
    parse_enum,
)
from packages.rules.content.conditions import ConditionType
from packages.rules.content.stances import StanceType
from packages.rules.errors import ConfigurationError


FLURRY = {
    "id": "flurry",
    "name": "Flurry",
    "card_type": "Combo",
    "cost": 0,
    "builds_combo": True,
    "effects": [
        {
            "kind": "Damage",
            "amount": 4,
            "target": "Opponent",
            "scaling": {"type": "ComboCount", "multiplier": 2, "cap": 6},
        },
        {
            "kind": "Damage",
            "amount": 6,
            "condition": {"type": "IfTargetHealthBelow", "threshold": 20},
            "alternative": {"kind": "ApplyWeak", "amount": 1, "logic": "Additional", "duration": 2},
        },
    ],
}


class TestParseCard:

    def test_full_card(self):
        card = Card.from_dict(FLURRY)
        assert card.id == "flurry"
        assert card.card_type == CardType.COMBO
        assert card.is_zero_cost
        assert card.builds_combo
        assert len(card.effects) == 2

        scaled, conditional = card.effects
        assert scaled.scaling.type == ScalingType.COMBO_COUNT
        assert scaled.scaling.multiplier == 2.0
        assert scaled.scaling.cap == 6
        assert conditional.condition == Condition(ConditionType.IF_TARGET_HEALTH_BELOW, 20)
        assert conditional.alternative.logic == AlternativeLogic.ADDITIONAL
        assert conditional.alternative.kind == CardEffectKind.APPLY_WEAK
        assert conditional.target == CardTarget.OPPONENT

    def test_defaults(self):
        card = Card.from_dict({"id": "x", "effects": [{"kind": "Heal", "amount": 3, "target": "Self"}]})
        assert card.name == "x"
        assert card.cost == 1
        assert card.card_type == CardType.ATTACK
        assert card.effects[0].duration is None

    def test_enum_names_accepted(self):
        effect = CardEffect.from_dict({"kind": "APPLY_STRENGTH", "amount": 2, "target": "SELF"})
        assert effect.kind == CardEffectKind.APPLY_STRENGTH
        assert effect.target == CardTarget.SELF

    def test_stance_threshold(self):
        cond = Condition.from_dict({"type": "IfInStance", "threshold": "Guardian"})
        assert cond.threshold == StanceType.GUARDIAN

    def test_card_type_threshold(self):
        cond = Condition.from_dict({"type": "IfLastCardType", "threshold": "Finisher"})
        assert cond.threshold == CardType.FINISHER

    def test_new_stance(self):
        card = Card.from_dict({"id": "rage", "card_type": "Stance", "new_stance": "Berserker"})
        assert card.new_stance == StanceType.BERSERKER

    def test_cards_are_frozen(self):
        card = Card.from_dict(FLURRY)
        with pytest.raises(AttributeError):
            card.cost = 5


class TestStrictParsing:

    @pytest.mark.parametrize("data", [
        {"id": "x", "effects": [{"kind": "Explode"}]},
        {"id": "x", "effects": [{"kind": "Damage", "target": "Everyone"}]},
        {"id": "x", "effects": [{"kind": "Damage", "condition": {"type": "IfMoonIsFull"}}]},
        {"id": "x", "effects": [{"kind": "Damage", "scaling": {"type": "Vibes"}}]},
        {"id": "x", "effects": [{"kind": "Damage", "condition": {"type": "IfComboCount", "threshold": "lots"}}]},
        {"id": "x", "card_type": "Sorcery"},
        {"id": "x", "cost": -1},
        {"effects": []},
        {"id": "x", "effects": [{"amount": 3}]},
        {"id": "x", "effects": [{"kind": "ApplyWeak", "amount": 1, "duration": "two"}]},
        {"id": "x", "effects": [{"kind": "Damage", "amount": "lots"}]},
        {"id": "x", "cost": "free"},
    ])
    def test_rejected(self, data):
        with pytest.raises(ConfigurationError):
            Card.from_dict(data)

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            parse_enum(CardType, "Sorcery", "card type")


class TestValidate:
    """Structural checks run by the resolver per effect."""

    def test_flagged_alternative_missing(self):
        effect = CardEffect.from_dict({
            "kind": "Damage",
            "amount": 3,
            "condition": {"type": "IfComboCount", "threshold": 1},
            "has_alternative": True,
        })
        with pytest.raises(ConfigurationError, match="absent"):
            effect.validate()

    def test_alternative_without_condition(self):
        effect = CardEffect.from_dict({"kind": "Damage", "alternative": {"kind": "Heal", "amount": 2}})
        with pytest.raises(ConfigurationError, match="without a condition"):
            effect.validate()

    def test_invalid_duration(self):
        with pytest.raises(ConfigurationError):
            CardEffect(CardEffectKind.APPLY_WEAK, 1, duration=0).validate()

    def test_numeric_strings_are_converted(self):
        effect = CardEffect.from_dict({"kind": "ApplyWeak", "amount": "1", "duration": "2"})
        assert effect.duration == 2
        effect.validate()

    def test_string_duration_rejected(self):
        with pytest.raises(ConfigurationError, match="duration"):
            CardEffect(CardEffectKind.APPLY_WEAK, 1, duration="2").validate()

    def test_negative_scaling_cap(self):
        effect = CardEffect.from_dict({
            "kind": "DrawCard",
            "amount": 1,
            "scaling": {"type": "ComboCount", "cap": -5},
        })
        with pytest.raises(ConfigurationError, match="scaling cap"):
            effect.validate()

    def test_well_formed_effects_pass(self):
        for effect in Card.from_dict(FLURRY).effects:
            effect.validate()
