"""Declarative tuning constants for the turn engine."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CityRules:
    """Founding, growth, border and healing figures."""

    starting_border_radius: int = 1
    max_border_radius: int = 4
    border_culture_base: int = 15  # times current radius
    starting_defense: int = 5
    founding_reveal_radius: int = 3
    base_food: int = 2
    base_production: int = 1
    base_gold: int = 1
    base_culture: int = 1
    food_per_population: int = 2
    growth_interval: int = 3
    boosted_growth_interval: int = 2
    capital_building: str = "palace"


@dataclass(frozen=True, slots=True)
class EconomyRules:
    """Gold, upkeep and attrition."""

    attrition_damage: int = 10
    unhappy_production_multiplier: float = 0.75
    golden_age_gold_multiplier: float = 1.25
    golden_age_production_multiplier: float = 1.25


@dataclass(frozen=True, slots=True)
class HealingRules:
    """Hit points restored per turn by location."""

    acted: int = 0
    neutral: int = 10
    friendly_territory: int = 15
    friendly_city: int = 20


@dataclass(frozen=True, slots=True)
class HappinessRules:
    base: int = 10
    per_luxury: int = 2
    population_divisor: int = 2
    war_weariness_per_combat: int = 1
    war_weariness_per_war_turn: int = 1
    war_weariness_decay: int = 1


@dataclass(frozen=True, slots=True)
class ScoreRules:
    """Weights for the score victory."""

    per_city: int = 10
    per_unit: int = 2
    gold_divisor: int = 10
    per_population: int = 3
    per_tech: int = 5
    per_golden_age: int = 20
    per_spaceship_part: int = 50


@dataclass(frozen=True, slots=True)
class ResearchRules:
    switch_retention: float = 0.9
    minimum_science: int = 1
    population_divisor: int = 2


@dataclass(frozen=True, slots=True)
class GoldenAgeRules:
    base_threshold: int = 100
    threshold_increment: int = 50
    duration_turns: int = 10
    culture_divisor: int = 2


@dataclass(frozen=True, slots=True)
class GreatPeopleRules:
    """Great-person thresholds and ability strengths."""

    base_threshold: int = 100
    threshold_multiplier: float = 1.5
    golden_age_turns: int = 8
    combat_bonus_turns: int = 5
    combat_bonus: float = 0.10
    gold_bonus: int = 200
    spawn_search_radius: int = 3


@dataclass(frozen=True, slots=True)
class TradeRules:
    base_gold: int = 2
    distance_divisor: int = 4
    duration_turns: int = 20


@dataclass(frozen=True, slots=True)
class GovernmentRules:
    anarchy_turns: int = 2


@dataclass(frozen=True, slots=True)
class DiplomacyRules:
    peace_after_quiet_turns: int = 10


@dataclass(frozen=True, slots=True)
class CombatRules:
    """Inputs to the default combat resolver."""

    roll_max: int = 1000
    attack_variance_floor: float = 0.8
    attack_variance_span: float = 0.4
    damage_scale: float = 3.0
    defense_absorption: float = 0.9
    counter_scale: float = 0.5
    fortify_bonus: float = 0.25
    city_defense_bonus: float = 0.5


@dataclass(frozen=True, slots=True)
class BarbarianRules:
    spawn_interval: int = 5
    max_units_near_camp: int = 3
    camp_radius: int = 4
    camp_reward: int = 25
    unit_type: str = "warrior"


@dataclass(frozen=True, slots=True)
class RulesConfig:
    """Top-level configuration container for all subsystems."""

    city: CityRules = CityRules()
    economy: EconomyRules = EconomyRules()
    healing: HealingRules = HealingRules()
    happiness: HappinessRules = HappinessRules()
    score: ScoreRules = ScoreRules()
    research: ResearchRules = ResearchRules()
    golden_age: GoldenAgeRules = GoldenAgeRules()
    great_people: GreatPeopleRules = GreatPeopleRules()
    trade: TradeRules = TradeRules()
    government: GovernmentRules = GovernmentRules()
    diplomacy: DiplomacyRules = DiplomacyRules()
    combat: CombatRules = CombatRules()
    barbarians: BarbarianRules = BarbarianRules()


DEFAULT_RULES = RulesConfig()
