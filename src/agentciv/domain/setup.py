"""Seeded world generation for a new game."""

from __future__ import annotations

import logging
import random

from agentciv.domain import cities, world
from agentciv.domain.context import EngineContext, default_context
from agentciv.domain.enums import RelationshipStatus, ResourceType, TerrainType
from agentciv.domain.models import (
    BarbarianCamp,
    CampID,
    Civilization,
    CivID,
    GameID,
    GameState,
    NaturalWonder,
    Tile,
    WonderID,
)
from agentciv.domain.ruleset import CivDef, Ruleset
from agentciv.utils.grid_math import GridCoord, chebyshev, in_bounds, manhattan, neighbors8
from agentciv.utils.rng import generate_seed, seeded_random

logger = logging.getLogger(__name__)

BASE_GRID_SIZE = 30
MIN_GRID_SIZE = 10
STARTING_GOLD = 20
STARTING_HAPPINESS = 10
RESOURCE_CHANCE = 0.15
MAX_NATURAL_WONDERS = 3
WONDER_START_EXCLUSION = 5
WONDER_SPACING = 3
CAMP_SPACING = 5


# --- Terrain --------------------------------------------------------------------


def _smoothstep(t: float) -> float:
    return t * t * (3 - 2 * t)


def _noise_field(rng: random.Random, size: int, *, cell: int, octaves: int) -> list[list[float]]:
    """Fractal value noise in roughly ``[-1, 1]``."""

    field = [[0.0] * size for _ in range(size)]
    amplitude = 1.0
    total = 0.0
    for _ in range(octaves):
        points = size // cell + 2
        lattice = [[rng.uniform(-1.0, 1.0) for _ in range(points)] for _ in range(points)]
        for y in range(size):
            gy, ty = divmod(y, cell)
            sy = _smoothstep(ty / cell)
            for x in range(size):
                gx, tx = divmod(x, cell)
                sx = _smoothstep(tx / cell)
                top = lattice[gy][gx] * (1 - sx) + lattice[gy][gx + 1] * sx
                bottom = lattice[gy + 1][gx] * (1 - sx) + lattice[gy + 1][gx + 1] * sx
                field[y][x] += (top * (1 - sy) + bottom * sy) * amplitude
        total += amplitude
        amplitude *= 0.5
        cell = max(1, cell // 2)
    return [[value / total for value in row] for row in field]


def _classify(elevation: float, moisture: float) -> TerrainType:
    if elevation < -0.15:
        return TerrainType.WATER
    if elevation > 0.45:
        return TerrainType.MOUNTAIN
    if elevation > 0.3:
        return TerrainType.HILLS
    if moisture > 0.2:
        return TerrainType.FOREST
    if moisture < -0.2:
        return TerrainType.DESERT
    if moisture > 0.0:
        return TerrainType.GRASSLAND
    return TerrainType.PLAINS


def generate_terrain(seed: int, size: int, ruleset: Ruleset) -> list[list[Tile]]:
    """Build the tile grid: noise terrain pushed towards water at the edges, plus resources."""

    elevation = _noise_field(seeded_random(generate_seed(seed, 0, "elevation")), size, cell=8, octaves=3)
    moisture = _noise_field(seeded_random(generate_seed(seed, 0, "moisture")), size, cell=6, octaves=2)
    resource_rng = seeded_random(generate_seed(seed, 0, "resources"))
    resources = sorted(ruleset.resources.values(), key=lambda resource: resource.id)

    grid: list[list[Tile]] = []
    for y in range(size):
        row: list[Tile] = []
        for x in range(size):
            edge = min(x, y, size - 1 - x, size - 1 - y) / (size * 0.15)
            falloff = min(1.0, edge)
            height = elevation[y][x] * falloff - (1 - falloff) * 0.3
            terrain = _classify(height, moisture[y][x])
            tile = Tile(x=x, y=y, terrain=terrain)
            if resource_rng.random() < RESOURCE_CHANCE:
                options = [resource for resource in resources if terrain in resource.terrains]
                if options:
                    tile.resource = resource_rng.choice(options).id
            row.append(tile)
        grid.append(row)
    return grid


def scaled_start(civ_def: CivDef, size: int) -> GridCoord:
    scale = size / BASE_GRID_SIZE
    x = min(size - 2, max(1, round(civ_def.start_x * scale)))
    y = min(size - 2, max(1, round(civ_def.start_y * scale)))
    return GridCoord(x, y)


def _ensure_start_viable(grid: list[list[Tile]], start: GridCoord, size: int) -> None:
    """Clear impassable terrain around a start and guarantee a food resource next to it."""

    grid[start.y][start.x].terrain = TerrainType.GRASSLAND
    for coord in neighbors8(start):
        if not in_bounds(coord, size):
            continue
        tile = grid[coord.y][coord.x]
        if tile.terrain in (TerrainType.WATER, TerrainType.MOUNTAIN):
            tile.terrain = TerrainType.PLAINS

    spots = [GridCoord(start.x + 1, start.y), GridCoord(start.x, start.y + 1), GridCoord(start.x - 1, start.y)]
    spots = [spot for spot in spots if in_bounds(spot, size)]
    if spots and not any(grid[s.y][s.x].resource == ResourceType.WHEAT for s in spots):
        grid[spots[0].y][spots[0].x].resource = ResourceType.WHEAT


# --- Features -------------------------------------------------------------------


def _place_barbarian_camps(
    state: GameState, ruleset: Ruleset, starts: list[GridCoord], rng: random.Random
) -> None:
    size = state.grid_size
    count = 2 + rng.randrange(3)
    min_distance = size // 4
    candidates = [
        GridCoord(tile.x, tile.y)
        for row in state.grid
        for tile in row
        if ruleset.is_passable(tile.terrain)
        and tile.owner_id is None
        and all(manhattan(GridCoord(tile.x, tile.y), start) >= min_distance for start in starts)
    ]
    rng.shuffle(candidates)

    placed: list[GridCoord] = []
    for candidate in candidates:
        if len(placed) >= count:
            break
        if any(manhattan(candidate, other) < CAMP_SPACING for other in placed):
            continue
        camp = BarbarianCamp(
            id=CampID(state.ids.next("bcamp")),
            x=candidate.x,
            y=candidate.y,
            strength=50 + rng.randrange(30),
        )
        state.barbarian_camps[camp.id] = camp
        placed.append(candidate)


def _place_natural_wonders(
    state: GameState, ruleset: Ruleset, starts: list[GridCoord], rng: random.Random
) -> None:
    size = state.grid_size
    definitions = sorted(ruleset.natural_wonders.values(), key=lambda wonder: wonder.id)
    rng.shuffle(definitions)
    forbidden: list[tuple[GridCoord, int]] = [(start, WONDER_START_EXCLUSION) for start in starts]

    for definition in definitions:
        if len(state.natural_wonders) >= MAX_NATURAL_WONDERS:
            break
        best: tuple[float, GridCoord] | None = None
        for y in range(3, size - 3):
            for x in range(3, size - 3):
                here = GridCoord(x, y)
                tile = state.grid[y][x]
                if tile.city_id is not None or tile.natural_wonder_id is not None:
                    continue
                if tile.terrain not in definition.preferred_terrain:
                    continue
                if any(chebyshev(here, spot) <= radius for spot, radius in forbidden):
                    continue
                score = rng.random() * 10 + 20
                score += 5 * sum(
                    1
                    for near in neighbors8(here)
                    if in_bounds(near, size) and state.grid[near.y][near.x].terrain == TerrainType.WATER
                )
                for existing in state.natural_wonders.values():
                    distance = manhattan(here, GridCoord(existing.x, existing.y))
                    if distance < 8:
                        score -= (8 - distance) * 5
                if best is None or score > best[0]:
                    best = (score, here)
        if best is None:
            continue

        spot = best[1]
        wonder = NaturalWonder(
            id=WonderID(definition.id),
            name=definition.name,
            x=spot.x,
            y=spot.y,
            bonuses=dict(definition.bonuses),
            discovery_happiness=definition.discovery_happiness,
        )
        state.natural_wonders[wonder.id] = wonder
        state.grid[spot.y][spot.x].natural_wonder_id = wonder.id
        forbidden.append((spot, WONDER_SPACING))


# --- Civilizations --------------------------------------------------------------


def _found_civilization(
    state: GameState, civ_def: CivDef, start: GridCoord, context: EngineContext
) -> Civilization:
    ruleset = context.ruleset
    civ = Civilization(
        id=CivID(civ_def.id),
        name=civ_def.name,
        leader_name=civ_def.leader_name,
        personality=civ_def.personality,
        gold=STARTING_GOLD,
        happiness=STARTING_HAPPINESS,
    )
    for kind in civ.great_people_progress:
        civ.great_people_thresholds[kind] = context.rules.great_people.base_threshold
    for other in ruleset.civilizations:
        if other != civ.id:
            civ.relationships[CivID(other)] = RelationshipStatus.NEUTRAL
    state.civilizations[civ.id] = civ

    name = world.next_city_name(state, ruleset, civ)
    world.create_city(state, civ, start.x, start.y, name=name, rules=context.rules)

    offsets = [(1, 0), (0, 1), (-1, 0), (0, -1)]
    for unit_type, (dx, dy) in zip(civ_def.start_units, offsets):
        unit_def = ruleset.unit(unit_type)
        spot = GridCoord(start.x + dx, start.y + dy)
        if unit_def is None or not in_bounds(spot, state.grid_size):
            continue
        tile = state.grid[spot.y][spot.x]
        if tile.unit_id is not None or not ruleset.is_passable(tile.terrain):
            continue
        unit = world.spawn_unit(state, unit_def, civ.id, spot.x, spot.y)
        world.reveal(state, civ.id, unit.x, unit.y, unit_def.vision)
    return civ


def create_game(
    game_id: str,
    *,
    seed: int,
    grid_size: int = BASE_GRID_SIZE,
    max_turns: int = 100,
    context: EngineContext | None = None,
) -> GameState:
    """Generate a fresh game: terrain, civilizations, camps and natural wonders.

    Raises:
        ValueError: If the grid is too small or the turn limit is not positive.
    """
    if grid_size < MIN_GRID_SIZE:
        raise ValueError(f"grid_size must be at least {MIN_GRID_SIZE}")
    if max_turns < 1:
        raise ValueError("max_turns must be positive")
    context = context or default_context()
    ruleset = context.ruleset

    grid = generate_terrain(seed, grid_size, ruleset)
    civ_defs = list(ruleset.civilizations.values())
    starts = [scaled_start(civ_def, grid_size) for civ_def in civ_defs]
    for start in starts:
        _ensure_start_viable(grid, start, grid_size)

    state = GameState(
        id=GameID(game_id), seed=seed, grid_size=grid_size, grid=grid, max_turns=max_turns
    )
    for civ_def, start in zip(civ_defs, starts):
        if state.grid[start.y][start.x].city_id is not None:
            logger.warning("start for %s collides with another city; skipping", civ_def.id)
            continue
        _found_civilization(state, civ_def, start, context)

    feature_rng = seeded_random(generate_seed(seed, 0, "features"))
    _place_barbarian_camps(state, ruleset, starts, feature_rng)
    _place_natural_wonders(state, ruleset, starts, feature_rng)

    for city in state.cities.values():
        cities.update_city_yields(state, city, context)
    state.turn_events.clear()
    state.notifications.clear()
    state.camera_events.clear()

    logger.info(
        "created game %s (seed=%s, grid=%s, civs=%s)",
        game_id,
        seed,
        grid_size,
        len(state.civilizations),
    )
    return state
