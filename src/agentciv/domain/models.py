"""Dataclasses describing every agentciv game entity.

``GameState`` is the single root aggregate. It owns every entity in
id-keyed dictionaries; the grid and civilization rosters only hold
identifiers, so a stale identifier must always be looked up again before
use. Every field is a primitive, enum, collection or nested dataclass which
lets :class:`pydantic.TypeAdapter` dump and load the whole aggregate as JSON.

Structural edits (moving, spawning, destroying units, founding cities) go
through :mod:`agentciv.domain.world`; nothing here carries behaviour apart
from the id generator.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import NewType

from .enums import (
    CameraPriority,
    EventType,
    GreatPersonType,
    ImprovementType,
    ProductionKind,
    RelationshipStatus,
    ResourceType,
    TerrainType,
    TurnPhase,
    VictoryType,
)

# --- Strongly typed identifiers -------------------------------------------------

GameID = NewType("GameID", str)
CivID = NewType("CivID", str)
UnitID = NewType("UnitID", str)
CityID = NewType("CityID", str)
TradeRouteID = NewType("TradeRouteID", str)
CampID = NewType("CampID", str)
WonderID = NewType("WonderID", str)

BARBARIAN_CIV_ID = CivID("barbarians")


# --- Identifier generation ------------------------------------------------------


@dataclass(slots=True)
class IdGenerator:
    """Per-prefix monotonically increasing identifiers owned by a game."""

    counters: dict[str, int] = field(default_factory=dict)

    def next(self, prefix: str) -> str:
        value = self.counters.get(prefix, 0) + 1
        self.counters[prefix] = value
        return f"{prefix}{value}"


# --- Map ------------------------------------------------------------------------


@dataclass(slots=True)
class ImprovementWork:
    """An improvement being built on a tile by a worker."""

    improvement: ImprovementType
    turns_remaining: int
    worker_id: UnitID


@dataclass(slots=True)
class Tile:
    """One grid cell."""

    x: int
    y: int
    terrain: TerrainType
    owner_id: CivID | None = None
    city_id: CityID | None = None
    improvement: ImprovementType | None = None
    improvement_work: ImprovementWork | None = None
    unit_id: UnitID | None = None
    resource: ResourceType | None = None
    natural_wonder_id: WonderID | None = None


# --- Entities -------------------------------------------------------------------


@dataclass(slots=True)
class Unit:
    """A unit on the map, owned by a civilization or the barbarians."""

    id: UnitID
    type: str
    owner_id: CivID
    x: int
    y: int
    hp: int
    max_hp: int
    attack: int
    defense: int
    movement: int
    movement_left: float
    range: int = 0
    fortified: bool = False
    acted_this_turn: bool = False
    is_great_person: bool = False


@dataclass(slots=True)
class ProductionOrder:
    """In-progress city production."""

    kind: ProductionKind
    target: str
    progress: int
    cost: int


@dataclass(slots=True)
class City:
    """A city and its cached per-turn yields."""

    id: CityID
    name: str
    owner_id: CivID
    x: int
    y: int
    population: int = 1
    gold_per_turn: int = 0
    food_per_turn: int = 0
    production_per_turn: int = 0
    science_per_turn: int = 0
    culture_per_turn: int = 0
    culture_stored: int = 0
    border_radius: int = 1
    buildings: list[str] = field(default_factory=list)
    production: ProductionOrder | None = None
    defense: int = 5
    local_happiness: int = 0


@dataclass(slots=True)
class ResearchProgress:
    """The technology a civilization is currently researching."""

    tech_id: str
    progress: int
    cost: int


@dataclass(slots=True)
class SpaceshipParts:
    booster: bool = False
    cockpit: bool = False
    engine: bool = False

    def count(self) -> int:
        return int(self.booster) + int(self.cockpit) + int(self.engine)


def _great_person_track() -> dict[GreatPersonType, int]:
    return {kind: 0 for kind in GreatPersonType}


@dataclass(slots=True)
class Civilization:
    """One independently controlled faction."""

    id: CivID
    name: str
    leader_name: str
    personality: str = ""
    gold: int = 0
    cities: list[CityID] = field(default_factory=list)
    units: list[UnitID] = field(default_factory=list)
    known_tiles: set[str] = field(default_factory=set)
    relationships: dict[CivID, RelationshipStatus] = field(default_factory=dict)
    last_combat_turn: dict[CivID, int] = field(default_factory=dict)
    researched_techs: list[str] = field(default_factory=list)
    current_research: ResearchProgress | None = None
    science_per_turn: int = 1
    government: str = "despotism"
    anarchy_turns: int = 0
    happiness: int = 0
    war_weariness: int = 0
    golden_age_points: int = 0
    golden_age_turns: int = 0
    golden_ages_completed: int = 0
    great_people_progress: dict[GreatPersonType, int] = field(default_factory=_great_person_track)
    great_people_thresholds: dict[GreatPersonType, int] = field(default_factory=dict)
    combat_bonus_turns: int = 0
    spaceship_parts: SpaceshipParts = field(default_factory=SpaceshipParts)
    score: int = 0
    is_alive: bool = True


@dataclass(slots=True)
class TradeRoute:
    """A timed gold link between two cities, occupying its caravan."""

    id: TradeRouteID
    owner_id: CivID
    from_city_id: CityID
    to_city_id: CityID
    unit_id: UnitID
    gold_per_turn: int
    turns_remaining: int


@dataclass(slots=True)
class BarbarianCamp:
    id: CampID
    x: int
    y: int
    strength: int = 1
    last_spawn_turn: int = 0


@dataclass(slots=True)
class NaturalWonder:
    """A map feature boosting nearby city yields."""

    id: WonderID
    name: str
    x: int
    y: int
    bonuses: dict[str, int] = field(default_factory=dict)
    discovery_happiness: int = 0
    discovered_by: CivID | None = None


# --- Event records (append-only) ------------------------------------------------


@dataclass(slots=True)
class TurnEvent:
    id: str
    turn: int
    type: EventType
    message: str
    civ_id: CivID | None = None


@dataclass(slots=True)
class GameNotification:
    """Player-facing notification with an optional map location."""

    id: str
    turn: int
    type: EventType
    message: str
    timestamp: datetime
    civ_id: CivID | None = None
    x: int | None = None
    y: int | None = None


@dataclass(slots=True)
class CameraEvent:
    """Presentation hint: pan the camera to a location."""

    type: EventType
    x: int
    y: int
    priority: CameraPriority
    turn: int


@dataclass(slots=True)
class CombatEvent:
    """Combat log entry."""

    turn: int
    attacker_id: UnitID
    defender_id: UnitID
    attacker_civ_id: CivID
    defender_civ_id: CivID
    x: int
    y: int
    damage_to_defender: int
    damage_to_attacker: int
    attacker_destroyed: bool
    defender_destroyed: bool
    ranged: bool = False


@dataclass(slots=True)
class CombatEffect:
    """Timestamped combat visual for presentation."""

    id: str
    attacker_x: int
    attacker_y: int
    defender_x: int
    defender_y: int
    damage: int
    attacker_civ_id: CivID
    defender_civ_id: CivID
    timestamp: datetime
    defender_destroyed: bool = False


# --- Root aggregate -------------------------------------------------------------


@dataclass(slots=True)
class GameState:
    """Root aggregate owning every entity of one game."""

    id: GameID
    seed: int
    grid_size: int
    grid: list[list[Tile]]
    turn: int = 1
    max_turns: int = 100
    phase: TurnPhase = TurnPhase.IDLE
    civilizations: dict[CivID, Civilization] = field(default_factory=dict)
    units: dict[UnitID, Unit] = field(default_factory=dict)
    cities: dict[CityID, City] = field(default_factory=dict)
    trade_routes: dict[TradeRouteID, TradeRoute] = field(default_factory=dict)
    natural_wonders: dict[WonderID, NaturalWonder] = field(default_factory=dict)
    barbarian_camps: dict[CampID, BarbarianCamp] = field(default_factory=dict)
    barbarian_units: list[UnitID] = field(default_factory=list)
    combat_log: list[CombatEvent] = field(default_factory=list)
    combat_effects: list[CombatEffect] = field(default_factory=list)
    notifications: list[GameNotification] = field(default_factory=list)
    turn_events: list[TurnEvent] = field(default_factory=list)
    camera_events: list[CameraEvent] = field(default_factory=list)
    winner: CivID | None = None
    victory_type: VictoryType | None = None
    ids: IdGenerator = field(default_factory=IdGenerator)
