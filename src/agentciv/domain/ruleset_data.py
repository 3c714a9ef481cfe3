"""Bundled default ruleset content.

Plain JSON-compatible data validated by :func:`agentciv.domain.ruleset.ruleset_from_mapping`.
A replacement document with the same shape can be supplied through
``Settings.ruleset_path``.
"""

from __future__ import annotations

from typing import Any

_TERRAINS: list[dict[str, Any]] = [
    {"id": "grassland", "move_cost": 1, "food": 2},
    {"id": "plains", "move_cost": 1, "food": 1, "production": 1},
    {"id": "forest", "move_cost": 2, "defense_bonus": 0.25, "food": 1, "production": 2},
    {"id": "hills", "move_cost": 2, "defense_bonus": 0.25, "production": 2},
    {"id": "mountain", "move_cost": 999, "defense_bonus": 0.5, "production": 1},
    {"id": "water", "move_cost": 999, "food": 1, "gold": 1},
    {"id": "desert", "move_cost": 1, "production": 1},
]

_RESOURCES: list[dict[str, Any]] = [
    {"id": "iron", "terrains": ["hills", "plains"], "production": 1},
    {"id": "horses", "terrains": ["grassland", "plains"], "production": 1},
    {"id": "wheat", "terrains": ["grassland", "plains"], "food": 2},
    {"id": "gold", "terrains": ["hills", "desert"], "gold": 2, "luxury": True},
    {"id": "silk", "terrains": ["forest"], "gold": 1, "luxury": True},
    {"id": "spices", "terrains": ["grassland", "forest"], "food": 1, "gold": 1, "luxury": True},
    {"id": "gems", "terrains": ["hills"], "gold": 3, "luxury": True},
]

_TECHS: list[dict[str, Any]] = [
    {"id": "agriculture", "name": "Agriculture", "cost": 20},
    {"id": "mining", "name": "Mining", "cost": 25},
    {"id": "archery", "name": "Archery", "cost": 30},
    {"id": "pottery", "name": "Pottery", "cost": 25, "prerequisites": ["agriculture"]},
    {
        "id": "animal_husbandry",
        "name": "Animal Husbandry",
        "cost": 25,
        "prerequisites": ["agriculture"],
    },
    {"id": "bronze_working", "name": "Bronze Working", "cost": 35, "prerequisites": ["mining"]},
    {"id": "masonry", "name": "Masonry", "cost": 35, "prerequisites": ["mining"]},
    {"id": "writing", "name": "Writing", "cost": 40, "prerequisites": ["pottery"]},
    {
        "id": "horseback_riding",
        "name": "Horseback Riding",
        "cost": 45,
        "prerequisites": ["animal_husbandry"],
    },
    {"id": "the_wheel", "name": "The Wheel", "cost": 45, "prerequisites": ["animal_husbandry"]},
    {"id": "iron_working", "name": "Iron Working", "cost": 60, "prerequisites": ["bronze_working"]},
    {
        "id": "mathematics",
        "name": "Mathematics",
        "cost": 70,
        "prerequisites": ["writing", "the_wheel"],
    },
    {
        "id": "currency",
        "name": "Currency",
        "cost": 70,
        "prerequisites": ["bronze_working", "writing"],
    },
    {"id": "monarchy", "name": "Monarchy", "cost": 80, "prerequisites": ["masonry", "writing"]},
    {"id": "philosophy", "name": "Philosophy", "cost": 90, "prerequisites": ["writing"]},
    {
        "id": "construction",
        "name": "Construction",
        "cost": 90,
        "prerequisites": ["masonry", "mathematics"],
        "era": "classical",
    },
    {
        "id": "engineering",
        "name": "Engineering",
        "cost": 120,
        "prerequisites": ["construction"],
        "era": "classical",
    },
    {
        "id": "republic",
        "name": "The Republic",
        "cost": 140,
        "prerequisites": ["philosophy", "currency"],
        "era": "classical",
    },
    {
        "id": "banking",
        "name": "Banking",
        "cost": 150,
        "prerequisites": ["currency", "philosophy"],
        "era": "medieval",
    },
    {
        "id": "education",
        "name": "Education",
        "cost": 160,
        "prerequisites": ["philosophy"],
        "era": "medieval",
    },
    {
        "id": "printing_press",
        "name": "Printing Press",
        "cost": 180,
        "prerequisites": ["education"],
        "era": "medieval",
    },
    {
        "id": "gunpowder",
        "name": "Gunpowder",
        "cost": 200,
        "prerequisites": ["engineering", "education"],
        "era": "renaissance",
    },
    {
        "id": "democracy",
        "name": "Democracy",
        "cost": 250,
        "prerequisites": ["republic", "printing_press"],
        "era": "renaissance",
    },
    {
        "id": "industrialization",
        "name": "Industrialization",
        "cost": 300,
        "prerequisites": ["gunpowder", "banking"],
        "era": "industrial",
    },
    {
        "id": "electricity",
        "name": "Electricity",
        "cost": 350,
        "prerequisites": ["industrialization"],
        "era": "industrial",
    },
    {
        "id": "rocketry",
        "name": "Rocketry",
        "cost": 450,
        "prerequisites": ["electricity"],
        "era": "modern",
    },
    {
        "id": "space_flight",
        "name": "Space Flight",
        "cost": 600,
        "prerequisites": ["rocketry"],
        "era": "modern",
    },
]

_UNITS: list[dict[str, Any]] = [
    {
        "id": "settler",
        "name": "Settler",
        "unit_class": "civilian",
        "cost": 50,
        "attack": 0,
        "defense": 1,
        "movement": 2,
        "can_found_city": True,
    },
    {
        "id": "worker",
        "name": "Worker",
        "unit_class": "civilian",
        "cost": 30,
        "attack": 0,
        "defense": 1,
        "movement": 2,
        "can_build_improvements": True,
    },
    {
        "id": "scout",
        "name": "Scout",
        "unit_class": "melee",
        "cost": 20,
        "attack": 2,
        "defense": 2,
        "movement": 3,
        "vision": 3,
    },
    {
        "id": "warrior",
        "name": "Warrior",
        "unit_class": "melee",
        "cost": 30,
        "attack": 8,
        "defense": 6,
        "movement": 1,
        "obsolete_by": "swordsman",
        "upgrade_cost": 40,
    },
    {
        "id": "archer",
        "name": "Archer",
        "unit_class": "ranged",
        "cost": 40,
        "attack": 7,
        "defense": 5,
        "movement": 1,
        "range": 2,
        "tech": "archery",
    },
    {
        "id": "spearman",
        "name": "Spearman",
        "unit_class": "melee",
        "cost": 40,
        "attack": 10,
        "defense": 12,
        "movement": 1,
        "tech": "bronze_working",
        "obsolete_by": "musketman",
        "upgrade_cost": 60,
    },
    {
        "id": "swordsman",
        "name": "Swordsman",
        "unit_class": "melee",
        "cost": 50,
        "attack": 14,
        "defense": 10,
        "movement": 1,
        "tech": "iron_working",
        "resource": "iron",
        "obsolete_by": "musketman",
        "upgrade_cost": 60,
    },
    {
        "id": "horseman",
        "name": "Horseman",
        "unit_class": "mounted",
        "cost": 50,
        "attack": 12,
        "defense": 8,
        "movement": 2,
        "tech": "horseback_riding",
        "resource": "horses",
        "maintenance": 2,
    },
    {
        "id": "catapult",
        "name": "Catapult",
        "unit_class": "siege",
        "cost": 70,
        "attack": 16,
        "defense": 4,
        "movement": 1,
        "range": 2,
        "tech": "mathematics",
        "maintenance": 2,
    },
    {
        "id": "caravan",
        "name": "Caravan",
        "unit_class": "civilian",
        "cost": 50,
        "attack": 0,
        "defense": 1,
        "movement": 2,
        "tech": "currency",
        "can_establish_trade": True,
        "maintenance": 0,
    },
    {
        "id": "musketman",
        "name": "Musketman",
        "unit_class": "melee",
        "cost": 90,
        "attack": 20,
        "defense": 20,
        "movement": 1,
        "tech": "gunpowder",
        "maintenance": 2,
    },
    {
        "id": "great_scientist",
        "name": "Great Scientist",
        "unit_class": "great_person",
        "cost": 0,
        "attack": 0,
        "defense": 1,
        "movement": 2,
        "maintenance": 0,
        "is_great_person": True,
        "buildable": False,
    },
    {
        "id": "great_artist",
        "name": "Great Artist",
        "unit_class": "great_person",
        "cost": 0,
        "attack": 0,
        "defense": 1,
        "movement": 2,
        "maintenance": 0,
        "is_great_person": True,
        "buildable": False,
    },
    {
        "id": "great_general",
        "name": "Great General",
        "unit_class": "great_person",
        "cost": 0,
        "attack": 0,
        "defense": 1,
        "movement": 2,
        "maintenance": 0,
        "is_great_person": True,
        "buildable": False,
    },
    {
        "id": "great_merchant",
        "name": "Great Merchant",
        "unit_class": "great_person",
        "cost": 0,
        "attack": 0,
        "defense": 1,
        "movement": 2,
        "maintenance": 0,
        "is_great_person": True,
        "buildable": False,
    },
    {
        "id": "great_engineer",
        "name": "Great Engineer",
        "unit_class": "great_person",
        "cost": 0,
        "attack": 0,
        "defense": 1,
        "movement": 2,
        "maintenance": 0,
        "is_great_person": True,
        "buildable": False,
    },
]

_BUILDINGS: list[dict[str, Any]] = [
    {
        "id": "palace",
        "name": "Palace",
        "cost": 0,
        "gold": 2,
        "production": 1,
        "science": 1,
        "culture": 1,
        "defense": 3,
        "buildable": False,
    },
    {"id": "monument", "name": "Monument", "cost": 30, "upkeep": 1, "culture": 2},
    {"id": "granary", "name": "Granary", "cost": 40, "upkeep": 1, "food": 2, "tech": "pottery"},
    {"id": "library", "name": "Library", "cost": 60, "upkeep": 1, "science": 2, "tech": "writing"},
    {"id": "barracks", "name": "Barracks", "cost": 40, "upkeep": 1, "defense": 2, "tech": "bronze_working"},
    {"id": "walls", "name": "Walls", "cost": 50, "upkeep": 1, "defense": 5, "tech": "masonry"},
    {
        "id": "temple",
        "name": "Temple",
        "cost": 50,
        "upkeep": 1,
        "culture": 1,
        "happiness": 2,
        "tech": "philosophy",
    },
    {"id": "market", "name": "Market", "cost": 70, "gold": 3, "tech": "currency"},
    {
        "id": "aqueduct",
        "name": "Aqueduct",
        "cost": 80,
        "upkeep": 1,
        "food": 1,
        "pop_growth_bonus": True,
        "tech": "construction",
    },
    {
        "id": "colosseum",
        "name": "Colosseum",
        "cost": 80,
        "upkeep": 1,
        "happiness": 3,
        "tech": "construction",
    },
    {
        "id": "workshop",
        "name": "Workshop",
        "cost": 70,
        "upkeep": 1,
        "production": 2,
        "tech": "engineering",
    },
    {
        "id": "university",
        "name": "University",
        "cost": 120,
        "upkeep": 2,
        "science": 3,
        "tech": "education",
        "requires_building": "library",
    },
    {
        "id": "bank",
        "name": "Bank",
        "cost": 120,
        "gold": 3,
        "tech": "banking",
        "requires_building": "market",
    },
    {
        "id": "factory",
        "name": "Factory",
        "cost": 200,
        "upkeep": 3,
        "production": 4,
        "tech": "industrialization",
        "requires_building": "workshop",
    },
    {
        "id": "spaceship_booster",
        "name": "Spaceship Booster",
        "cost": 300,
        "tech": "rocketry",
        "requires_building": "factory",
        "spaceship_part": "booster",
    },
    {
        "id": "spaceship_cockpit",
        "name": "Spaceship Cockpit",
        "cost": 300,
        "tech": "space_flight",
        "requires_building": "factory",
        "spaceship_part": "cockpit",
    },
    {
        "id": "spaceship_engine",
        "name": "Spaceship Engine",
        "cost": 400,
        "tech": "space_flight",
        "requires_building": "factory",
        "spaceship_part": "engine",
    },
]

_IMPROVEMENTS: list[dict[str, Any]] = [
    {
        "id": "farm",
        "name": "Farm",
        "turns_to_complete": 3,
        "valid_terrain": ["grassland", "plains", "desert"],
        "food": 1,
    },
    {
        "id": "mine",
        "name": "Mine",
        "turns_to_complete": 4,
        "valid_terrain": ["hills", "desert"],
        "production": 2,
    },
    {
        "id": "lumber_mill",
        "name": "Lumber Mill",
        "turns_to_complete": 4,
        "valid_terrain": ["forest"],
        "production": 1,
    },
    {
        "id": "pasture",
        "name": "Pasture",
        "turns_to_complete": 3,
        "valid_terrain": ["grassland", "plains"],
        "production": 1,
    },
    {
        "id": "road",
        "name": "Road",
        "turns_to_complete": 2,
        "valid_terrain": ["grassland", "plains", "forest", "hills", "desert"],
        "move_cost": 0.5,
    },
]

_GOVERNMENTS: list[dict[str, Any]] = [
    {"id": "despotism", "name": "Despotism"},
    {
        "id": "monarchy",
        "name": "Monarchy",
        "tech": "monarchy",
        "effects": {"gold_per_city": 1, "happiness_bonus": 1, "unit_maintenance_reduction": 0.5},
    },
    {
        "id": "republic",
        "name": "Republic",
        "tech": "republic",
        "effects": {"trade_bonus": 0.5, "production_bonus": 0.1},
    },
    {
        "id": "democracy",
        "name": "Democracy",
        "tech": "democracy",
        "effects": {"trade_bonus": 0.5, "gold_per_city": 2, "happiness_bonus": 2},
    },
    {
        "id": "communism",
        "name": "Communism",
        "tech": "industrialization",
        "effects": {
            "production_bonus": 0.25,
            "no_happiness_penalty": True,
            "war_weariness_reduction": 0.5,
        },
    },
]

_GREAT_PEOPLE: list[dict[str, Any]] = [
    {
        "type": "scientist",
        "unit_type": "great_scientist",
        "ability": "instant_research",
        "description": "Completes the current research immediately",
    },
    {
        "type": "artist",
        "unit_type": "great_artist",
        "ability": "golden_age",
        "description": "Starts a golden age",
    },
    {
        "type": "general",
        "unit_type": "great_general",
        "ability": "combat_bonus",
        "description": "Grants a temporary combat bonus to every unit",
    },
    {
        "type": "merchant",
        "unit_type": "great_merchant",
        "ability": "gold_bonus",
        "description": "Grants a lump sum of gold",
    },
    {
        "type": "engineer",
        "unit_type": "great_engineer",
        "ability": "rush_production",
        "description": "Completes the nearest city's production",
    },
]

_NATURAL_WONDERS: list[dict[str, Any]] = [
    {
        "id": "old_faithful",
        "name": "Old Faithful",
        "bonuses": {"science": 2, "culture": 1},
        "preferred_terrain": ["grassland", "plains"],
    },
    {
        "id": "mount_fuji",
        "name": "Mount Fuji",
        "bonuses": {"culture": 3},
        "discovery_happiness": 3,
        "preferred_terrain": ["hills", "mountain"],
    },
    {
        "id": "grand_mesa",
        "name": "Grand Mesa",
        "bonuses": {"production": 2, "gold": 1},
        "preferred_terrain": ["desert", "hills"],
    },
    {
        "id": "crystal_lake",
        "name": "Crystal Lake",
        "bonuses": {"food": 2, "gold": 2},
        "preferred_terrain": ["grassland", "forest"],
    },
]

_CIVILIZATIONS: list[dict[str, Any]] = [
    {
        "id": "rome",
        "name": "Rome",
        "leader_name": "Augustus",
        "personality": "expansionist builder",
        "color": "#b22222",
        "start_x": 5,
        "start_y": 5,
        "city_names": ["Rome", "Antium", "Cumae", "Neapolis", "Ravenna", "Arretium"],
        "bonuses": {"production": 1},
    },
    {
        "id": "egypt",
        "name": "Egypt",
        "leader_name": "Cleopatra",
        "personality": "scholarly and cautious",
        "color": "#daa520",
        "start_x": 24,
        "start_y": 5,
        "city_names": ["Thebes", "Memphis", "Heliopolis", "Elephantine", "Alexandria", "Pi-Ramesses"],
        "bonuses": {"science": 1},
    },
    {
        "id": "mongolia",
        "name": "Mongolia",
        "leader_name": "Genghis Khan",
        "personality": "aggressive raider",
        "color": "#4682b4",
        "start_x": 14,
        "start_y": 24,
        "city_names": ["Karakorum", "Beshbalik", "Turfan", "Hovd", "Uliastai", "Aktau"],
        "bonuses": {"gold": 2},
    },
]

DEFAULT_RULESET_DATA: dict[str, Any] = {
    "terrains": _TERRAINS,
    "resources": _RESOURCES,
    "units": _UNITS,
    "buildings": _BUILDINGS,
    "techs": _TECHS,
    "improvements": _IMPROVEMENTS,
    "governments": _GOVERNMENTS,
    "great_people": _GREAT_PEOPLE,
    "natural_wonders": _NATURAL_WONDERS,
    "civilizations": _CIVILIZATIONS,
}
