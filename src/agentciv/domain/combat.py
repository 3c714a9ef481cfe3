"""Default combat resolver.

Resolution is pure: it reads the two units and their surroundings and
returns a :class:`CombatOutcome` without touching state. A single seeded
roll in ``[0, roll_max]`` sets the attacker's variance; the defender's
retaliation uses the mirrored variance so both sides draw from one roll.
"""

from __future__ import annotations

from dataclasses import dataclass

from agentciv.domain.models import GameState, Unit
from agentciv.domain.rules_config import DEFAULT_RULES, RulesConfig
from agentciv.domain.ruleset import Ruleset
from agentciv.utils.rng import random_int


@dataclass(slots=True)
class CombatOutcome:
    """Result of one attack, as computed by a combat resolver."""

    attacker_id: str
    defender_id: str
    attacker_civ_id: str
    defender_civ_id: str
    damage_to_defender: int
    damage_to_attacker: int
    attacker_destroyed: bool
    defender_destroyed: bool
    ranged: bool = False


@dataclass(slots=True)
class CombatResolver:
    """Seeded resolver implementing :class:`agentciv.interfaces.ICombatResolver`."""

    ruleset: Ruleset
    rules: RulesConfig = DEFAULT_RULES

    def resolve_combat(
        self, state: GameState, attacker_id: str, defender_id: str, seed: str
    ) -> CombatOutcome | None:
        return self._resolve(state, attacker_id, defender_id, seed, ranged=False)

    def resolve_ranged_combat(
        self, state: GameState, attacker_id: str, defender_id: str, seed: str
    ) -> CombatOutcome | None:
        return self._resolve(state, attacker_id, defender_id, seed, ranged=True)

    def _resolve(
        self,
        state: GameState,
        attacker_id: str,
        defender_id: str,
        seed: str,
        *,
        ranged: bool,
    ) -> CombatOutcome | None:
        attacker = state.units.get(attacker_id)
        defender = state.units.get(defender_id)
        if attacker is None or defender is None:
            return None

        rules = self.rules.combat
        roll = random_int(seed, 0, rules.roll_max)["value"] / rules.roll_max
        attack_mod = rules.attack_variance_floor + rules.attack_variance_span * roll
        counter_mod = 2 * rules.attack_variance_floor + rules.attack_variance_span - attack_mod

        attack_strength = attacker.attack * attack_mod * self._bonus(state, attacker)
        defense_strength = defender.defense * self._defense_multiplier(state, defender)
        damage = max(
            1,
            round(attack_strength * rules.damage_scale - defense_strength * rules.defense_absorption),
        )

        counter = 0
        if not ranged and defender.attack > 0:
            counter_strength = defender.attack * counter_mod * self._bonus(state, defender)
            counter = max(
                0,
                round(
                    (
                        counter_strength * rules.damage_scale
                        - attacker.defense * rules.defense_absorption
                    )
                    * rules.counter_scale
                ),
            )

        return CombatOutcome(
            attacker_id=attacker.id,
            defender_id=defender.id,
            attacker_civ_id=attacker.owner_id,
            defender_civ_id=defender.owner_id,
            damage_to_defender=damage,
            damage_to_attacker=counter,
            attacker_destroyed=attacker.hp - counter <= 0,
            defender_destroyed=defender.hp - damage <= 0,
            ranged=ranged,
        )

    def _bonus(self, state: GameState, unit: Unit) -> float:
        civ = state.civilizations.get(unit.owner_id)
        if civ is not None and civ.combat_bonus_turns > 0:
            return 1.0 + self.rules.great_people.combat_bonus
        return 1.0

    def _defense_multiplier(self, state: GameState, unit: Unit) -> float:
        tile = state.grid[unit.y][unit.x]
        multiplier = 1.0 + self.ruleset.defense_bonus(tile.terrain)
        if unit.fortified:
            multiplier += self.rules.combat.fortify_bonus
        if tile.city_id is not None and tile.owner_id == unit.owner_id:
            multiplier += self.rules.combat.city_defense_bonus
        return multiplier
