"""
Combat arena - the entities of one fight and the state they own.

Every entity owns exactly one StatusEffectStore and one TrackingLedger,
keyed by entity id here. Separate CombatState instances share nothing, so
several fights can run side by side in one process.

Sides: a player and its pets fight together. An entity's side is its
owner_id when it has one, otherwise its own id.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from ..content.stances import StanceType
from ..content.statuses import WHOLE_FIGHT, StatusEffect, StatusEffectStore, StatusKind, StatusSnapshot
from .ledger import TrackingLedger

__all__ = ["EntityKind", "EntityState", "CombatState"]

logger = logging.getLogger(__name__)


class EntityKind(Enum):
    PLAYER = "Player"
    PET = "Pet"


@dataclass
class EntityState:
    """
    A combatant.

    hand_size / deck_size / discard_size are supplied by the card-pile
    collaborator and only read by conditions and scaling.
    """
    id: str
    name: str = ""
    kind: EntityKind = EntityKind.PLAYER
    health: int = 100
    max_health: int = 100
    energy: int = 3
    max_energy: int = 3
    owner_id: Optional[str] = None
    hand_size: int = 0
    deck_size: int = 0
    discard_size: int = 0
    in_combat: bool = True

    def __post_init__(self):
        if self.max_health < 0 or not 0 <= self.health <= self.max_health:
            raise ValueError(f"{self.id}: health {self.health}/{self.max_health} out of range")
        if self.max_energy < 0 or not 0 <= self.energy <= self.max_energy:
            raise ValueError(f"{self.id}: energy {self.energy}/{self.max_energy} out of range")
        if not self.name:
            self.name = self.id

    @property
    def is_alive(self) -> bool:
        return self.health > 0

    @property
    def side(self) -> str:
        return self.owner_id or self.id

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> EntityState:
        fields = dict(data)
        fields.pop("statuses", None)
        if "kind" in fields:
            fields["kind"] = EntityKind(fields["kind"])
        return cls(**fields)


@dataclass
class CombatState:
    """Arena of entities, their status stores and their ledgers."""
    entities: Dict[str, EntityState] = field(default_factory=dict)
    statuses: Dict[str, StatusEffectStore] = field(default_factory=dict)
    ledgers: Dict[str, TrackingLedger] = field(default_factory=dict)
    round_number: int = 0

    # =========================================================================
    # MEMBERSHIP
    # =========================================================================

    def add_entity(self, entity: EntityState) -> EntityState:
        if entity.id in self.entities:
            raise ValueError(f"Entity {entity.id} is already in this combat")
        if entity.owner_id is not None and entity.owner_id not in self.entities:
            raise ValueError(f"Pet {entity.id} names unknown owner {entity.owner_id}")
        self.entities[entity.id] = entity
        self.statuses[entity.id] = StatusEffectStore(owner_id=entity.id)
        self.ledgers[entity.id] = TrackingLedger(owner_id=entity.id)
        return entity

    def remove_entity(self, entity_id: str) -> EntityState:
        """Drop an entity and its state. Statuses it applied elsewhere stay."""
        entity = self.entities.pop(entity_id)
        del self.statuses[entity_id]
        del self.ledgers[entity_id]
        return entity

    def get_entity(self, entity_id: str) -> EntityState:
        """Raises KeyError for unknown ids."""
        return self.entities[entity_id]

    def store(self, entity_id: str) -> StatusEffectStore:
        return self.statuses[entity_id]

    def ledger(self, entity_id: str) -> TrackingLedger:
        return self.ledgers[entity_id]

    def __contains__(self, entity_id: str) -> bool:
        return entity_id in self.entities

    # =========================================================================
    # SIDES
    # =========================================================================

    def allies_of(self, entity_id: str) -> List[str]:
        """Ids on the same side as entity_id, itself included, in join order."""
        side = self.get_entity(entity_id).side
        return [e.id for e in self.entities.values() if e.side == side and e.in_combat]

    def enemies_of(self, entity_id: str) -> List[str]:
        side = self.get_entity(entity_id).side
        return [e.id for e in self.entities.values() if e.side != side and e.in_combat]

    def in_combat_ids(self) -> List[str]:
        return [e.id for e in self.entities.values() if e.in_combat]

    # =========================================================================
    # READ-ONLY QUERIES
    # =========================================================================

    def get_active_effects(self, entity_id: str) -> Tuple[StatusSnapshot, ...]:
        return self.statuses[entity_id].snapshot()

    def get_ledger_snapshot(self, entity_id: str) -> Dict[str, Any]:
        return self.ledgers[entity_id].snapshot()

    # =========================================================================
    # FIGHT / TURN BOUNDARIES
    # =========================================================================

    def start_fight(self) -> None:
        """Clear every store and ledger and bring everyone into combat."""
        for entity_id, entity in self.entities.items():
            entity.in_combat = True
            self.statuses[entity_id].clear_all()
            self.ledgers[entity_id].reset_for_new_fight()
        self.round_number = 0
        logger.info(f"Fight started with {len(self.entities)} entities")

    def end_fight(self) -> None:
        for entity in self.entities.values():
            entity.in_combat = False
        logger.info(f"Fight ended after {self.round_number} rounds")

    def start_turn(self, entity_ids: Optional[List[str]] = None) -> None:
        """Roll the ledgers of entity_ids (default: everyone in combat) into a new turn."""
        ids = entity_ids if entity_ids is not None else self.in_combat_ids()
        for entity_id in ids:
            self.ledgers[entity_id].reset_for_new_turn()
        self.round_number += 1

    def tick_statuses(self, entity_id: str) -> List[StatusEffect]:
        """
        Age entity_id's statuses by one turn and drop the ledger flags whose
        status just ran out.
        """
        store = self.statuses[entity_id]
        ledger = self.ledgers[entity_id]
        expired = store.tick()
        if any(e.kind == StatusKind.STUN for e in expired) and not store.has_effect(StatusKind.STUN):
            ledger.set_stunned(False)
        if (
            any(e.kind == StatusKind.LIMIT_BREAK for e in expired)
            and not store.has_effect(StatusKind.LIMIT_BREAK)
            and ledger.current_stance != StanceType.LIMIT_BREAK
        ):
            ledger.set_limit_break(False)
        return expired

    def end_turn(self, entity_ids: Optional[List[str]] = None) -> Dict[str, List[StatusEffect]]:
        """Tick every listed entity's statuses. Returns what expired per entity."""
        ids = entity_ids if entity_ids is not None else self.in_combat_ids()
        return {entity_id: self.tick_statuses(entity_id) for entity_id in ids}

    def copy(self) -> CombatState:
        """Independent deep copy, e.g. for previewing a card play."""
        return copy.deepcopy(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> CombatState:
        """
        Build an arena from an encounter description:

            {"entities": [{"id": "p1", "health": 40, "max_health": 50,
                           "statuses": [{"kind": "Weak", "potency": 1, "duration": 2}]},
                          {"id": "pet1", "kind": "Pet", "owner_id": "p1"}]}

        Owners must be listed before their pets. Statuses are added after
        the fight starts so they survive the fight reset.
        """
        combat = cls()
        entries = data.get("entities", [])
        for entry in entries:
            combat.add_entity(EntityState.from_dict(entry))
        combat.start_fight()
        for entry in entries:
            store = combat.store(entry["id"])
            for status in entry.get("statuses", []):
                store.add_effect(
                    StatusKind(status["kind"]),
                    int(status.get("potency", 1)),
                    int(status.get("duration", WHOLE_FIGHT)),
                    status.get("source_id"),
                )
        return combat
