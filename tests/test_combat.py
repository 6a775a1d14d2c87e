"""
Combat Arena Tests

Membership, sides, fight/turn boundaries and encounter loading.
"""

import pytest

from packages.rules.content.stances import StanceType
from packages.rules.content.statuses import WHOLE_FIGHT, StatusKind
from packages.rules.state.combat import CombatState, EntityKind, EntityState


class TestEntityState:

    def test_health_out_of_range(self):
        with pytest.raises(ValueError):
            EntityState("p1", health=60, max_health=50)

    def test_energy_out_of_range(self):
        with pytest.raises(ValueError):
            EntityState("p1", energy=-1)

    def test_name_defaults_to_id(self):
        assert EntityState("p1").name == "p1"

    def test_pet_side_is_owner(self):
        pet = EntityState("pet1", kind=EntityKind.PET, owner_id="p1")
        assert pet.side == "p1"


class TestMembership:

    def test_each_entity_owns_store_and_ledger(self, combat):
        assert combat.store("p1") is not combat.store("p2")
        assert combat.ledger("p1") is not combat.ledger("p2")
        assert combat.store("p1").owner_id == "p1"

    def test_duplicate_id_rejected(self, combat):
        with pytest.raises(ValueError):
            combat.add_entity(EntityState("p1"))

    def test_pet_needs_known_owner(self):
        with pytest.raises(ValueError):
            CombatState().add_entity(EntityState("pet", kind=EntityKind.PET, owner_id="nobody"))

    def test_unknown_entity_is_key_error(self, combat):
        with pytest.raises(KeyError):
            combat.get_entity("ghost")

    def test_remove_entity(self, combat):
        combat.remove_entity("p2")
        assert "p2" not in combat
        assert "p2" not in combat.statuses
        assert "p2" not in combat.ledgers

    def test_arenas_share_nothing(self):
        first, second = CombatState(), CombatState()
        first.add_entity(EntityState("p1"))
        second.add_entity(EntityState("p1"))
        first.store("p1").add_effect(StatusKind.WEAK, 1, 2)
        assert not second.store("p1").has_effect(StatusKind.WEAK)


class TestSides:

    def test_allies_and_enemies(self, combat_with_pets):
        assert combat_with_pets.allies_of("pet1") == ["p1", "pet1"]
        assert combat_with_pets.enemies_of("p1") == ["p2", "pet2"]

    def test_out_of_combat_excluded(self, combat_with_pets):
        combat_with_pets.get_entity("pet2").in_combat = False
        assert combat_with_pets.enemies_of("p1") == ["p2"]


class TestBoundaries:

    def test_start_fight_resets(self, combat):
        combat.store("p1").add_effect(StatusKind.STRENGTH, 3, WHOLE_FIGHT)
        combat.ledger("p1").record_damage_taken(4)
        combat.ledger("p1").set_stance(StanceType.MYSTIC)
        combat.start_fight()
        assert len(combat.store("p1")) == 0
        assert combat.ledger("p1").damage_taken_this_fight == 0
        assert combat.ledger("p1").current_stance == StanceType.NONE

    def test_start_turn_rolls_ledgers(self, combat):
        combat.ledger("p2").record_damage_taken(7)
        combat.start_turn()
        assert combat.ledger("p2").damage_taken_last_round == 7
        assert combat.round_number == 1

    def test_end_turn_ticks_everyone(self, combat):
        combat.store("p1").add_effect(StatusKind.WEAK, 1, 1)
        combat.store("p2").add_effect(StatusKind.BREAK, 1, 2)
        expired = combat.end_turn()
        assert [e.kind for e in expired["p1"]] == [StatusKind.WEAK]
        assert expired["p2"] == []

    def test_stun_flag_cleared_on_expiry(self, combat):
        combat.store("p2").add_effect(StatusKind.STUN, 1, 1)
        combat.ledger("p2").set_stunned(True)
        combat.tick_statuses("p2")
        assert not combat.ledger("p2").is_stunned

    def test_end_fight(self, combat):
        combat.end_fight()
        assert combat.in_combat_ids() == []


class TestQueries:

    def test_active_effects_and_ledger_snapshot(self, combat):
        combat.store("p1").add_effect(StatusKind.ARMOR, 2, 3)
        assert combat.get_active_effects("p1")[0].potency == 2
        assert combat.get_ledger_snapshot("p1")["owner_id"] == "p1"


class TestFromDict:

    def test_encounter(self):
        combat = CombatState.from_dict({
            "entities": [
                {"id": "p1", "health": 40, "max_health": 50,
                 "statuses": [{"kind": "Weak", "potency": 1, "duration": 2}]},
                {"id": "pet1", "kind": "Pet", "owner_id": "p1", "health": 10, "max_health": 10},
                {"id": "p2", "statuses": [{"kind": "Armor", "potency": 3}]},
            ],
        })
        assert combat.get_entity("p1").health == 40
        assert combat.get_entity("pet1").kind == EntityKind.PET
        assert combat.store("p1").first(StatusKind.WEAK).duration == 2
        assert combat.store("p2").first(StatusKind.ARMOR).is_whole_fight

    def test_unknown_status_kind(self):
        with pytest.raises(ValueError):
            CombatState.from_dict({"entities": [{"id": "p1", "statuses": [{"kind": "Sparkly"}]}]})
