"""
Scaling Calculator Tests
"""

import pytest

from packages.rules.calc.scaling import SCALING_SOURCES, ScalingType, scale, tracked_value_for
from packages.rules.content.cards import CardType
from packages.rules.state.combat import EntityState
from packages.rules.state.ledger import TrackingLedger


class TestScale:

    def test_bonus_is_floored(self):
        assert scale(5, ScalingType.COMBO_COUNT, 1.5, None, 3) == 9  # 5 + floor(4.5)

    def test_zero_tracked_gives_base(self):
        assert scale(7, ScalingType.COMBO_COUNT, 2.0, 10, 0) == 7

    @pytest.mark.parametrize("tracked", [10, 100, 10_000])
    def test_cap_bounds_bonus(self, tracked):
        assert scale(4, ScalingType.CARDS_PLAYED_THIS_FIGHT, 1.0, 6, tracked) == 10

    def test_negative_multiplier_never_subtracts(self):
        assert scale(4, ScalingType.COMBO_COUNT, -2.0, None, 5) == 4

    def test_fractional_multiplier(self):
        assert scale(0, ScalingType.MISSING_HEALTH, 0.25, None, 10) == 2


class TestTrackedValue:

    def test_every_type_has_a_source(self):
        assert set(SCALING_SOURCES) == set(ScalingType)

    def test_missing_health_is_raw_points(self):
        entity = EntityState("p1", health=35, max_health=50)
        assert tracked_value_for(ScalingType.MISSING_HEALTH, entity, TrackingLedger()) == 15

    def test_current_health_and_hand_size(self):
        entity = EntityState("p1", health=35, max_health=50, hand_size=6)
        assert tracked_value_for(ScalingType.CURRENT_HEALTH, entity, TrackingLedger()) == 35
        assert tracked_value_for(ScalingType.HAND_SIZE, entity, TrackingLedger()) == 6

    def test_ledger_counters(self):
        entity = EntityState("p1")
        ledger = TrackingLedger()
        ledger.record_card_played(0, True, CardType.ATTACK, True)
        ledger.record_card_played(1, True, CardType.ATTACK, False)
        ledger.record_damage_dealt(9)
        assert tracked_value_for(ScalingType.COMBO_COUNT, entity, ledger) == 2
        assert tracked_value_for(ScalingType.CARDS_PLAYED_THIS_TURN, entity, ledger) == 2
        assert tracked_value_for(ScalingType.ZERO_COST_CARDS_THIS_TURN, entity, ledger) == 1
        assert tracked_value_for(ScalingType.DAMAGE_DEALT_THIS_TURN, entity, ledger) == 9
        ledger.reset_for_new_turn()
        assert tracked_value_for(ScalingType.DAMAGE_DEALT_THIS_TURN, entity, ledger) == 0
        assert tracked_value_for(ScalingType.DAMAGE_DEALT_THIS_FIGHT, entity, ledger) == 9
        assert tracked_value_for(ScalingType.CARDS_PLAYED_THIS_FIGHT, entity, ledger) == 2
        assert tracked_value_for(ScalingType.ZERO_COST_CARDS_THIS_FIGHT, entity, ledger) == 1
