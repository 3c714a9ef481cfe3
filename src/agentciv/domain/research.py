"""Per-civilization science accumulation and technology unlocking."""

from __future__ import annotations

from agentciv.domain import world
from agentciv.domain.context import EngineContext
from agentciv.domain.enums import CameraPriority, EventType
from agentciv.domain.models import Civilization, GameState, ResearchProgress
from agentciv.domain.ruleset import Ruleset, TechDef


def researchable(civ: Civilization, ruleset: Ruleset) -> list[TechDef]:
    return ruleset.researchable_techs(civ.researched_techs)


def auto_select(civ: Civilization, ruleset: Ruleset) -> ResearchProgress | None:
    """Pick the cheapest researchable tech (ties broken by id).

    This is a policy default for civilizations that have not chosen a tech.
    """
    options = researchable(civ, ruleset)
    if not options:
        return None
    tech = options[0]
    return ResearchProgress(tech_id=tech.id, progress=0, cost=tech.cost)


def switch_research(civ: Civilization, tech: TechDef, context: EngineContext) -> None:
    """Start researching ``tech``, carrying over part of the current progress."""

    carried = 0
    if civ.current_research is not None and civ.current_research.tech_id != tech.id:
        carried = int(civ.current_research.progress * context.rules.research.switch_retention)
    elif civ.current_research is not None:
        carried = civ.current_research.progress
    civ.current_research = ResearchProgress(
        tech_id=tech.id,
        progress=max(0, min(carried, tech.cost - 1)),
        cost=tech.cost,
    )


def compute_science(state: GameState, civ: Civilization, context: EngineContext) -> int:
    rules = context.rules.research
    total = 0
    for city_id in civ.cities:
        city = state.cities.get(city_id)
        if city is None:
            continue
        total += city.science_per_turn + city.population // rules.population_divisor
    civ_def = context.ruleset.civilization(civ.id)
    if civ_def is not None:
        total += civ_def.bonuses.science
    return max(rules.minimum_science, total)


def complete_research(state: GameState, civ: Civilization, context: EngineContext) -> list[str]:
    """Finish the active tech immediately and auto-select the next one."""

    if civ.current_research is None:
        civ.current_research = auto_select(civ, context.ruleset)
        if civ.current_research is None:
            return []
    tech_id = civ.current_research.tech_id
    if tech_id not in civ.researched_techs:
        civ.researched_techs.append(tech_id)
    tech = context.ruleset.tech(tech_id)
    name = tech.name if tech is not None else tech_id
    message = world.record_event(
        state, EventType.RESEARCH, f"{civ.name} discovered {name}", civ.id
    )
    world.notify(state, context.clock, EventType.RESEARCH, message, civ_id=civ.id)
    capital = world.capital_of(state, civ)
    if capital is not None:
        world.pan_camera(state, EventType.RESEARCH, capital.x, capital.y, CameraPriority.LOW)
    civ.current_research = auto_select(civ, context.ruleset)
    return [message]


def process_research(state: GameState, civ: Civilization, context: EngineContext) -> list[str]:
    """Accumulate one turn of science; overflow past the cost is discarded."""

    civ.science_per_turn = compute_science(state, civ, context)
    if civ.current_research is None:
        civ.current_research = auto_select(civ, context.ruleset)
        if civ.current_research is None:
            return []

    civ.current_research.progress += civ.science_per_turn
    if civ.current_research.progress >= civ.current_research.cost:
        return complete_research(state, civ, context)
    return []
