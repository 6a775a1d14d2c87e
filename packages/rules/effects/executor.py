"""
Effect Resolver - plays a card's effects against a combat arena.

Usage:
    from packages.rules.effects import EffectResolver
    from packages.rules.state.combat import CombatState

    resolver = EffectResolver(combat)
    result = resolver.resolve_card(card, "player_1", ["player_2"])

Per card play:
1. The play is recorded in the source's ledger (counts, combo, last type)
2. The card's stance change, if any, is applied
3. Each CardEffect resolves in declaration order, fully (ledgers included)
   before the next one starts, so effect N+1 sees what effect N did

A malformed effect is reported in the result and skipped; the rest of the
card still resolves. Invalid targets are skipped one at a time.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from ..calc.damage import build_modifier_set, resolve_damage
from ..calc.scaling import scale, tracked_value_for
from ..config import RulesConfig
from ..content.cards import (
    EFFECT_STATUS,
    NEGATIVE_EFFECTS,
    AlternativeLogic,
    Card,
    CardEffect,
    CardEffectKind,
    CardTarget,
    Scaling,
)
from ..content.conditions import evaluate_condition
from ..content.stances import StanceType
from ..content.statuses import StatusKind, StatusSnapshot
from ..errors import ConfigurationError
from ..state.combat import CombatState, EntityState

__all__ = ["AppliedEffect", "EffectResult", "EffectResolver"]

logger = logging.getLogger(__name__)


# =============================================================================
# RESULTS
# =============================================================================

@dataclass
class AppliedEffect:
    """
    One effect landing on one target.

    Attributes:
        target_id: Entity the effect landed on
        effect_kind: Kind that was applied
        amount_applied: What actually changed: health lost, health healed,
            energy gained, status potency added, cards to draw/discard
        statuses: Target's status store right after this effect
        absorbed: Damage soaked by Shield before health
        cause: "card", "alternative", "thorns", "burn" or "salve"
    """
    target_id: str
    effect_kind: CardEffectKind
    amount_applied: int
    statuses: Tuple[StatusSnapshot, ...] = ()
    absorbed: int = 0
    cause: str = "card"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "target_id": self.target_id,
            "effect_kind": self.effect_kind.value,
            "amount_applied": self.amount_applied,
            "absorbed": self.absorbed,
            "cause": self.cause,
            "statuses": [
                {"kind": s.kind.value, "potency": s.potency, "duration": s.duration, "source_id": s.source_id}
                for s in self.statuses
            ],
        }


@dataclass
class EffectResult:
    """Outcome of a card play or a turn-end pass."""
    succeeded: bool = True
    applied: List[AppliedEffect] = field(default_factory=list)
    skipped: List[Tuple[str, str]] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def failure_reason(self) -> Optional[str]:
        return "; ".join(self.errors) if self.errors else None

    def fail(self, reason: str) -> None:
        self.succeeded = False
        self.errors.append(reason)

    def amounts(self, target_id: str, kind: CardEffectKind) -> List[int]:
        """Amounts of every applied effect of kind on target_id, in order."""
        return [a.amount_applied for a in self.applied if a.target_id == target_id and a.effect_kind == kind]

    def kinds_for(self, target_id: str) -> List[CardEffectKind]:
        return [a.effect_kind for a in self.applied if a.target_id == target_id]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "succeeded": self.succeeded,
            "failure_reason": self.failure_reason,
            "applied": [a.to_dict() for a in self.applied],
            "skipped": [{"target_id": t, "reason": r} for t, r in self.skipped],
            "extra": self.extra,
        }


# =============================================================================
# RESOLVER
# =============================================================================

class EffectResolver:
    """
    Resolves cards against one CombatState.

    Holds no state of its own beyond the arena and config; it never calls
    outward, everything observable is returned in the EffectResult.
    """

    def __init__(self, combat: CombatState, config: Optional[RulesConfig] = None):
        self.combat = combat
        self.config = config or RulesConfig()
        self._handlers: Dict[CardEffectKind, Callable[..., None]] = {
            CardEffectKind.DAMAGE: self._apply_damage,
            CardEffectKind.HEAL: self._apply_heal,
            CardEffectKind.RESTORE_ENERGY: self._apply_energy,
            CardEffectKind.DRAW_CARD: self._apply_passthrough,
            CardEffectKind.DISCARD_RANDOM_CARDS: self._apply_passthrough,
            CardEffectKind.ENTER_STANCE: self._apply_stance,
            CardEffectKind.EXIT_STANCE: self._apply_stance,
        }
        for kind in EFFECT_STATUS:
            self._handlers[kind] = self._apply_status

    # =========================================================================
    # CARD PLAY
    # =========================================================================

    def resolve_card(self, card: Card, source_id: str, target_ids: Optional[Sequence[str]] = None) -> EffectResult:
        """
        Resolve every effect of card played by source_id.

        Args:
            card: Card being played
            source_id: Entity playing it
            target_ids: Targets picked by the orchestrator, used by OPPONENT
                and ALLY effects

        Returns:
            EffectResult; succeeded is False if any effect was malformed or
            the source is unknown.
        """
        result = EffectResult()
        try:
            source = self.combat.get_entity(source_id)
        except KeyError:
            result.fail(f"Unknown source entity {source_id}")
            logger.error(f"resolve_card({card.id}): unknown source {source_id}")
            return result
        if not source.in_combat:
            result.fail(f"Source entity {source_id} is not in combat")
            logger.error(f"resolve_card({card.id}): {source_id} is not in combat")
            return result

        targets = list(target_ids or [])
        logger.info(f"{source_id} plays {card.id} -> {targets or '(no targets)'}")

        self.combat.ledger(source_id).record_card_played(
            card.cost, card.builds_combo, card.card_type, card.is_zero_cost, card.id
        )
        if card.new_stance is not None:
            self._set_stance(source, card.new_stance)
            result.extra["stance"] = card.new_stance.value

        for index, effect in enumerate(card.effects):
            try:
                effect.validate()
                self._resolve_effect(card, effect, source, targets, result)
            except ConfigurationError as e:
                logger.error(f"{card.id} effect #{index}: {e}")
                result.fail(f"effect #{index}: {e}")

        if not result.succeeded:
            logger.warning(f"{card.id} resolved with errors: {result.failure_reason}")
        return result

    def _resolve_effect(
        self,
        card: Card,
        effect: CardEffect,
        source: EntityState,
        target_ids: List[str],
        result: EffectResult,
    ) -> None:
        amount = self._scaled_amount(effect.amount, effect.scaling, source)
        resolved = self._resolve_targets(effect.target, source.id, target_ids)
        if not resolved:
            logger.warning(f"{card.id}: {effect.kind.value} has no target")
            result.skipped.append(("", f"{effect.kind.value}: no target"))
            return

        for target_id in resolved:
            if effect.condition is None:
                self._apply(effect.kind, amount, effect.duration, source, target_id, result, effect.stance)
                continue

            target = self._lookup(target_id, result)
            if target is None:
                continue
            condition = effect.condition
            met = evaluate_condition(
                condition.type,
                condition.threshold,
                source,
                target,
                self.combat.ledger(source.id),
                self.combat.ledger(target_id),
                card.id,
            )
            alternative = effect.alternative

            if alternative is None:
                # Plain gate
                if met:
                    self._apply(effect.kind, amount, effect.duration, source, target_id, result, effect.stance)
            elif alternative.logic == AlternativeLogic.REPLACE:
                if met:
                    self._apply(effect.kind, amount, effect.duration, source, target_id, result, effect.stance)
                else:
                    self._apply(alternative.kind, alternative.amount, alternative.duration,
                                source, target_id, result, cause="alternative")
            else:
                self._apply(effect.kind, amount, effect.duration, source, target_id, result, effect.stance)
                if met:
                    self._apply(alternative.kind, alternative.amount, alternative.duration,
                                source, target_id, result, cause="alternative")

    def _scaled_amount(self, base: int, scaling: Optional[Scaling], source: EntityState) -> int:
        if scaling is None:
            return base
        tracked = tracked_value_for(scaling.type, source, self.combat.ledger(source.id))
        amount = scale(base, scaling.type, scaling.multiplier, scaling.cap, tracked)
        logger.debug(f"Scaling {scaling.type.value}: tracked={tracked} x{scaling.multiplier} -> {amount}")
        return amount

    def _resolve_targets(self, selector: CardTarget, source_id: str, target_ids: List[str]) -> List[str]:
        if selector == CardTarget.SELF:
            return [source_id]
        if selector == CardTarget.ALL:
            return self.combat.in_combat_ids()
        if selector == CardTarget.ALL_ALLIES:
            return self.combat.allies_of(source_id)
        if selector == CardTarget.ALL_ENEMIES:
            return self.combat.enemies_of(source_id)
        # OPPONENT / ALLY: orchestrator's pick, duplicates dropped
        return list(dict.fromkeys(target_ids))

    # =========================================================================
    # APPLICATION
    # =========================================================================

    def _lookup(self, target_id: str, result: EffectResult) -> Optional[EntityState]:
        try:
            target = self.combat.get_entity(target_id)
        except KeyError:
            self._skip(result, target_id, "unknown entity")
            return None
        if not target.in_combat:
            self._skip(result, target_id, "not in combat")
            return None
        return target

    def _skip(self, result: EffectResult, target_id: str, reason: str) -> None:
        logger.warning(f"Skipping target {target_id}: {reason}")
        result.skipped.append((target_id, reason))

    def _apply(
        self,
        kind: CardEffectKind,
        amount: int,
        duration: Optional[int],
        source: EntityState,
        target_id: str,
        result: EffectResult,
        stance: Optional[StanceType] = None,
        cause: str = "card",
    ) -> None:
        target = self._lookup(target_id, result)
        if target is None:
            return
        if kind in NEGATIVE_EFFECTS and not target.is_alive:
            self._skip(result, target_id, f"defeated, cannot take {kind.value}")
            return
        handler = self._handlers.get(kind)
        if handler is None:
            raise ConfigurationError(f"No handler for effect kind {kind!r}")
        handler(kind, amount, duration, source, target, result, stance, cause)

    def _record(self, result: EffectResult, target: EntityState, kind: CardEffectKind,
                amount: int, absorbed: int = 0, cause: str = "card") -> None:
        result.applied.append(AppliedEffect(
            target_id=target.id,
            effect_kind=kind,
            amount_applied=amount,
            statuses=self.combat.get_active_effects(target.id),
            absorbed=absorbed,
            cause=cause,
        ))

    def _deal(self, attacker_id: Optional[str], target: EntityState, damage: int,
              use_shield: bool = True) -> Tuple[int, int]:
        """
        Move resolved damage onto target: Shield first, then health (never
        below 0). Ledgers record the health actually lost.

        Returns:
            (health lost, damage absorbed by Shield)
        """
        absorbed = 0
        remaining = damage
        if use_shield and damage > 0:
            remaining, absorbed = self.combat.store(target.id).absorb(damage)
        loss = min(remaining, target.health)
        target.health -= loss
        if attacker_id is not None and attacker_id in self.combat:
            self.combat.ledger(attacker_id).record_damage_dealt(loss)
        self.combat.ledger(target.id).record_damage_taken(loss)
        if loss > 0 and not target.is_alive:
            logger.info(f"{target.id} was defeated")
        return loss, absorbed

    def _apply_damage(self, kind, amount, duration, source, target, result, stance, cause):
        cfg = self.config
        source_mods = build_modifier_set(self.combat.store(source.id), cfg.weak_multiplier, cfg.break_multiplier)
        target_mods = build_modifier_set(self.combat.store(target.id), cfg.weak_multiplier, cfg.break_multiplier)
        damage = resolve_damage(amount, source_mods, target_mods)
        loss, absorbed = self._deal(source.id, target, damage)
        logger.debug(f"{source.id} -> {target.id}: {amount} base, {damage} resolved, "
                     f"{absorbed} absorbed, {loss} to health")
        self._record(result, target, kind, loss, absorbed, cause)

        if not cfg.thorns_enabled or loss <= 0 or source.id == target.id or not source.is_alive:
            return
        thorns = self.combat.store(target.id).get_active(StatusKind.THORNS)
        if thorns > 0:
            reflected, reflected_absorbed = self._deal(target.id, source, thorns)
            logger.debug(f"Thorns: {target.id} reflects {thorns} to {source.id} ({reflected} to health)")
            self._record(result, source, CardEffectKind.DAMAGE, reflected, reflected_absorbed, "thorns")

    def _apply_heal(self, kind, amount, duration, source, target, result, stance, cause):
        healed = self._heal(source.id, target, amount)
        self._record(result, target, kind, healed, cause=cause)

    def _heal(self, healer_id: Optional[str], target: EntityState, amount: int) -> int:
        healed = max(0, min(amount, target.max_health - target.health))
        target.health += healed
        if healer_id is not None and healer_id in self.combat:
            self.combat.ledger(healer_id).record_healing_given(healed)
        self.combat.ledger(target.id).record_healing_received(healed)
        return healed

    def _apply_energy(self, kind, amount, duration, source, target, result, stance, cause):
        gained = max(0, min(amount, target.max_energy - target.energy))
        target.energy += gained
        self._record(result, target, kind, gained, cause=cause)

    def _apply_passthrough(self, kind, amount, duration, source, target, result, stance, cause):
        # Card piles belong to the orchestrator; report how many to draw/discard
        self._record(result, target, kind, amount, cause=cause)

    def _apply_stance(self, kind, amount, duration, source, target, result, stance, cause):
        new_stance = stance if kind == CardEffectKind.ENTER_STANCE else StanceType.NONE
        if new_stance is None:
            raise ConfigurationError("EnterStance effect names no stance")
        self._set_stance(target, new_stance)
        self._record(result, target, kind, 0, cause=cause)

    def _set_stance(self, entity: EntityState, stance: StanceType) -> None:
        self.combat.ledger(entity.id).set_stance(stance)

    def _apply_status(self, kind, amount, duration, source, target, result, stance, cause):
        status_kind, default_duration = EFFECT_STATUS[kind]
        ledger = self.combat.ledger(target.id)
        self.combat.store(target.id).add_effect(
            status_kind,
            amount,
            duration if duration is not None else default_duration,
            source.id,
        )
        if status_kind == StatusKind.STRENGTH:
            ledger.add_strength(amount)
        elif status_kind == StatusKind.STUN:
            ledger.set_stunned(True)
        elif status_kind == StatusKind.LIMIT_BREAK:
            ledger.set_limit_break(True)
        self._record(result, target, kind, amount, cause=cause)

    # =========================================================================
    # TURN END
    # =========================================================================

    def process_turn_end(self, entity_id: str) -> EffectResult:
        """
        End entity_id's turn: Burn deals its potency, Salve heals its
        potency, then every status ages one turn.

        Burn is direct health loss (no pipeline, no Shield). Each instance
        credits its own source's ledger when that source is still present.
        """
        result = EffectResult()
        try:
            entity = self.combat.get_entity(entity_id)
        except KeyError:
            result.fail(f"Unknown entity {entity_id}")
            return result

        store = self.combat.store(entity_id)
        for effect in list(store.effects):
            if effect.kind == StatusKind.BURN and entity.is_alive and effect.potency > 0:
                loss, _ = self._deal(effect.source_id, entity, effect.potency, use_shield=False)
                self._record(result, entity, CardEffectKind.DAMAGE, loss, cause="burn")
            elif effect.kind == StatusKind.SALVE and entity.is_alive and effect.potency > 0:
                healed = self._heal(effect.source_id, entity, effect.potency)
                self._record(result, entity, CardEffectKind.HEAL, healed, cause="salve")

        expired = self.combat.tick_statuses(entity_id)
        result.extra["expired"] = [e.snapshot() for e in expired]
        logger.debug(f"{entity_id} turn end: {len(result.applied)} ticks, {len(expired)} expired")
        return result
