"""Enumerations shared across the agentciv domain."""

from __future__ import annotations

from enum import StrEnum


class TerrainType(StrEnum):
    """Terrain kinds present in the default ruleset."""

    GRASSLAND = "grassland"
    PLAINS = "plains"
    FOREST = "forest"
    HILLS = "hills"
    MOUNTAIN = "mountain"
    WATER = "water"
    DESERT = "desert"


class ImprovementType(StrEnum):
    """Tile improvements a worker can build."""

    FARM = "farm"
    MINE = "mine"
    ROAD = "road"
    LUMBER_MILL = "lumber_mill"
    PASTURE = "pasture"


class ResourceType(StrEnum):
    """Strategic and luxury resources."""

    IRON = "iron"
    HORSES = "horses"
    WHEAT = "wheat"
    GOLD = "gold"
    SILK = "silk"
    SPICES = "spices"
    GEMS = "gems"


class UnitClass(StrEnum):
    """Broad unit categories used for capability checks and zone of control."""

    CIVILIAN = "civilian"
    MELEE = "melee"
    RANGED = "ranged"
    MOUNTED = "mounted"
    SIEGE = "siege"
    NAVAL = "naval"
    GREAT_PERSON = "great_person"


ZOC_CLASSES: frozenset[UnitClass] = frozenset(
    {UnitClass.MELEE, UnitClass.RANGED, UnitClass.MOUNTED, UnitClass.NAVAL, UnitClass.SIEGE}
)


class RelationshipStatus(StrEnum):
    """Diplomatic stance of one civilization toward another."""

    NEUTRAL = "neutral"
    FRIENDLY = "friendly"
    ALLIED = "allied"
    WAR = "war"


class GreatPersonType(StrEnum):
    """The five great-person point tracks."""

    SCIENTIST = "scientist"
    ARTIST = "artist"
    GENERAL = "general"
    MERCHANT = "merchant"
    ENGINEER = "engineer"


class GreatPersonAbility(StrEnum):
    """Fixed, consumable abilities of great people."""

    INSTANT_RESEARCH = "instant_research"
    GOLDEN_AGE = "golden_age"
    COMBAT_BONUS = "combat_bonus"
    GOLD_BONUS = "gold_bonus"
    RUSH_PRODUCTION = "rush_production"


class ProductionKind(StrEnum):
    """What a city production order produces."""

    UNIT = "unit"
    BUILDING = "building"


class TurnPhase(StrEnum):
    """Coarse state of the turn loop."""

    IDLE = "idle"
    COLLECTING = "collecting"
    RESOLUTION = "resolution"
    GAME_OVER = "game_over"


class VictoryType(StrEnum):
    """How a game was won."""

    CONQUEST = "conquest"
    SCIENCE = "science"
    SCORE = "score"


class SpaceshipPart(StrEnum):
    """Late-game building parts required for a science victory."""

    BOOSTER = "booster"
    COCKPIT = "cockpit"
    ENGINE = "engine"


class EventType(StrEnum):
    """Categories of turn events and notifications."""

    CITY_FOUNDED = "city_founded"
    COMBAT = "combat"
    UNIT_DESTROYED = "unit_destroyed"
    PRODUCTION = "production"
    RESEARCH = "research"
    GOLDEN_AGE = "golden_age"
    GREAT_PERSON = "great_person"
    BORDERS = "borders"
    GROWTH = "growth"
    WONDER = "wonder"
    TRADE = "trade"
    GOVERNMENT = "government"
    BARBARIAN = "barbarian"
    DIPLOMACY = "diplomacy"
    ELIMINATION = "elimination"
    VICTORY = "victory"
    ECONOMY = "economy"


class CameraPriority(StrEnum):
    """Ordering hint for presentation camera pans."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
