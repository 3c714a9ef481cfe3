"""Read-only content catalog consumed by the turn engine.

Definitions are frozen dataclasses validated from a plain mapping (the
bundled :data:`~agentciv.domain.ruleset_data.DEFAULT_RULESET_DATA` or a JSON
file) through a pydantic ``TypeAdapter``. :class:`Ruleset` indexes them by id
and answers the "what is available given these techs" queries the validator
and the turn resolver need.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import TypeAdapter, ValidationError

from .enums import (
    GreatPersonAbility,
    GreatPersonType,
    ImprovementType,
    ResourceType,
    SpaceshipPart,
    TerrainType,
    UnitClass,
)
from .ruleset_data import DEFAULT_RULESET_DATA

IMPASSABLE_COST = 999.0


class RulesetError(ValueError):
    """Raised when ruleset content is malformed or inconsistent."""


@dataclass(frozen=True, slots=True)
class TerrainDef:
    id: TerrainType
    move_cost: float
    defense_bonus: float = 0.0
    food: int = 0
    production: int = 0
    gold: int = 0


@dataclass(frozen=True, slots=True)
class ResourceDef:
    id: ResourceType
    terrains: tuple[TerrainType, ...]
    food: int = 0
    production: int = 0
    gold: int = 0
    luxury: bool = False


@dataclass(frozen=True, slots=True)
class UnitDef:
    """Unit template: stats, prerequisites and capabilities."""

    id: str
    name: str
    unit_class: UnitClass
    cost: int
    attack: int
    defense: int
    movement: int
    hp: int = 100
    range: int = 0
    vision: int = 2
    maintenance: int = 1
    tech: str | None = None
    resource: ResourceType | None = None
    obsolete_by: str | None = None
    upgrade_cost: int | None = None
    can_found_city: bool = False
    can_build_improvements: bool = False
    can_establish_trade: bool = False
    is_great_person: bool = False
    buildable: bool = True

    @property
    def can_attack(self) -> bool:
        return self.attack > 0 and self.unit_class not in (
            UnitClass.CIVILIAN,
            UnitClass.GREAT_PERSON,
        )


@dataclass(frozen=True, slots=True)
class BuildingDef:
    id: str
    name: str
    cost: int
    upkeep: int = 0
    tech: str | None = None
    requires_building: str | None = None
    gold: int = 0
    food: int = 0
    production: int = 0
    science: int = 0
    culture: int = 0
    happiness: int = 0
    defense: int = 0
    pop_growth_bonus: bool = False
    spaceship_part: SpaceshipPart | None = None
    buildable: bool = True


@dataclass(frozen=True, slots=True)
class TechDef:
    id: str
    name: str
    cost: int
    prerequisites: tuple[str, ...] = ()
    era: str = "ancient"


@dataclass(frozen=True, slots=True)
class ImprovementDef:
    id: ImprovementType
    name: str
    turns_to_complete: int
    valid_terrain: tuple[TerrainType, ...]
    food: int = 0
    production: int = 0
    gold: int = 0
    move_cost: float | None = None


@dataclass(frozen=True, slots=True)
class GovernmentEffects:
    """Government modifiers; every field is suspended during anarchy."""

    gold_per_city: int = 0
    production_bonus: float = 0.0
    trade_bonus: float = 0.0
    happiness_bonus: int = 0
    unit_maintenance_reduction: float = 0.0
    war_weariness_reduction: float = 0.0
    no_happiness_penalty: bool = False


@dataclass(frozen=True, slots=True)
class GovernmentDef:
    id: str
    name: str
    tech: str | None = None
    effects: GovernmentEffects = GovernmentEffects()


@dataclass(frozen=True, slots=True)
class GreatPersonDef:
    type: GreatPersonType
    unit_type: str
    ability: GreatPersonAbility
    description: str = ""


@dataclass(frozen=True, slots=True)
class NaturalWonderDef:
    id: str
    name: str
    bonuses: dict[str, int] = field(default_factory=dict)
    discovery_happiness: int = 2
    preferred_terrain: tuple[TerrainType, ...] = ()


@dataclass(frozen=True, slots=True)
class CivBonuses:
    gold: int = 0
    science: int = 0
    production: int = 0


@dataclass(frozen=True, slots=True)
class CivDef:
    id: str
    name: str
    leader_name: str
    start_x: int
    start_y: int
    personality: str = ""
    color: str = "#ffffff"
    city_names: tuple[str, ...] = ()
    start_units: tuple[str, ...] = ("warrior", "settler", "worker", "scout")
    bonuses: CivBonuses = CivBonuses()


@dataclass(frozen=True, slots=True)
class RulesetData:
    """Raw catalog as read from a document."""

    terrains: list[TerrainDef]
    resources: list[ResourceDef]
    units: list[UnitDef]
    buildings: list[BuildingDef]
    techs: list[TechDef]
    improvements: list[ImprovementDef]
    governments: list[GovernmentDef]
    great_people: list[GreatPersonDef]
    natural_wonders: list[NaturalWonderDef]
    civilizations: list[CivDef]


_DATA_ADAPTER: TypeAdapter[RulesetData] = TypeAdapter(RulesetData)


class Ruleset:
    """Indexed, immutable view of a :class:`RulesetData` catalog."""

    def __init__(self, data: RulesetData) -> None:
        self.data = data
        self.terrains = {t.id: t for t in data.terrains}
        self.resources = {r.id: r for r in data.resources}
        self.units = {u.id: u for u in data.units}
        self.buildings = {b.id: b for b in data.buildings}
        self.techs = {t.id: t for t in data.techs}
        self.improvements = {i.id: i for i in data.improvements}
        self.governments = {g.id: g for g in data.governments}
        self.great_people = {g.type: g for g in data.great_people}
        self.natural_wonders = {w.id: w for w in data.natural_wonders}
        self.civilizations = {c.id: c for c in data.civilizations}
        self._check_references()

    def _check_references(self) -> None:
        for tech in self.techs.values():
            for prereq in tech.prerequisites:
                if prereq not in self.techs:
                    raise RulesetError(f"Tech {tech.id} requires unknown tech {prereq}")
        for unit in self.units.values():
            if unit.tech is not None and unit.tech not in self.techs:
                raise RulesetError(f"Unit {unit.id} requires unknown tech {unit.tech}")
            if unit.obsolete_by is not None and unit.obsolete_by not in self.units:
                raise RulesetError(f"Unit {unit.id} upgrades to unknown unit {unit.obsolete_by}")
        for building in self.buildings.values():
            if building.tech is not None and building.tech not in self.techs:
                raise RulesetError(f"Building {building.id} requires unknown tech {building.tech}")
            if (
                building.requires_building is not None
                and building.requires_building not in self.buildings
            ):
                raise RulesetError(
                    f"Building {building.id} requires unknown building {building.requires_building}"
                )
        for person in self.great_people.values():
            if person.unit_type not in self.units:
                raise RulesetError(f"Great person {person.type} uses unknown unit {person.unit_type}")
        for civ in self.civilizations.values():
            for unit_type in civ.start_units:
                if unit_type not in self.units:
                    raise RulesetError(f"Civilization {civ.id} starts with unknown unit {unit_type}")

    # --- lookups -----------------------------------------------------------------

    def unit(self, unit_id: str) -> UnitDef | None:
        return self.units.get(unit_id)

    def building(self, building_id: str) -> BuildingDef | None:
        return self.buildings.get(building_id)

    def tech(self, tech_id: str) -> TechDef | None:
        return self.techs.get(tech_id)

    def improvement(self, improvement_id: str) -> ImprovementDef | None:
        try:
            return self.improvements.get(ImprovementType(improvement_id))
        except ValueError:
            return None

    def government(self, government_id: str) -> GovernmentDef | None:
        return self.governments.get(government_id)

    def resource(self, resource: ResourceType) -> ResourceDef | None:
        return self.resources.get(resource)

    def civilization(self, civ_id: str) -> CivDef | None:
        return self.civilizations.get(civ_id)

    def great_person(self, kind: GreatPersonType) -> GreatPersonDef | None:
        return self.great_people.get(kind)

    def great_person_for_unit(self, unit_type: str) -> GreatPersonDef | None:
        for person in self.great_people.values():
            if person.unit_type == unit_type:
                return person
        return None

    # --- queries -----------------------------------------------------------------

    def available_units(self, researched: Iterable[str]) -> list[UnitDef]:
        known = set(researched)
        return [
            unit
            for unit in self.units.values()
            if unit.buildable and (unit.tech is None or unit.tech in known)
        ]

    def available_buildings(
        self, researched: Iterable[str], existing: Iterable[str]
    ) -> list[BuildingDef]:
        known = set(researched)
        present = set(existing)
        return [
            building
            for building in self.buildings.values()
            if building.buildable
            and building.id not in present
            and (building.tech is None or building.tech in known)
            and (building.requires_building is None or building.requires_building in present)
        ]

    def researchable_techs(self, researched: Iterable[str]) -> list[TechDef]:
        """Techs not yet known whose prerequisites are all known, cheapest first."""
        known = set(researched)
        options = [
            tech
            for tech in self.techs.values()
            if tech.id not in known and all(p in known for p in tech.prerequisites)
        ]
        return sorted(options, key=lambda tech: (tech.cost, tech.id))

    def available_governments(self, researched: Iterable[str]) -> list[GovernmentDef]:
        known = set(researched)
        return [g for g in self.governments.values() if g.tech is None or g.tech in known]

    def move_cost(self, terrain: TerrainType) -> float:
        terrain_def = self.terrains.get(terrain)
        if terrain_def is None or terrain_def.move_cost >= IMPASSABLE_COST:
            return math.inf
        return terrain_def.move_cost

    def is_passable(self, terrain: TerrainType) -> bool:
        return math.isfinite(self.move_cost(terrain))

    def defense_bonus(self, terrain: TerrainType) -> float:
        terrain_def = self.terrains.get(terrain)
        return terrain_def.defense_bonus if terrain_def is not None else 0.0


def ruleset_from_mapping(payload: Mapping[str, Any]) -> Ruleset:
    """Validate a raw mapping into a :class:`Ruleset`."""

    try:
        data = _DATA_ADAPTER.validate_python(payload)
    except ValidationError as exc:
        raise RulesetError(f"Invalid ruleset document: {exc}") from exc
    return Ruleset(data)


def load_ruleset(path: Path | str) -> Ruleset:
    """Load a ruleset JSON document from disk."""

    raw = Path(path).read_bytes()
    try:
        data = _DATA_ADAPTER.validate_json(raw)
    except ValidationError as exc:
        raise RulesetError(f"Invalid ruleset document {path}: {exc}") from exc
    return Ruleset(data)


@lru_cache
def default_ruleset() -> Ruleset:
    """Return the bundled ruleset."""

    return ruleset_from_mapping(DEFAULT_RULESET_DATA)
