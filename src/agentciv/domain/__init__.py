"""Turn engine for agentciv games.

The package is organised bottom-up:

* :mod:`models`, :mod:`enums` and :mod:`actions` describe game state and the
  twelve action kinds.
* :mod:`ruleset` and :mod:`rules_config` hold read-only content and tuning.
* :mod:`world` owns every structural edit so grid occupancy, rosters and the
  entity stores agree.
* :mod:`validation` and :mod:`execution` turn submitted actions into state
  changes; :mod:`turn` runs the end-of-turn resolver around them.
"""

from . import (
    actions,
    autoplay,
    barbarians,
    cities,
    combat,
    context,
    economy,
    enums,
    execution,
    golden_age,
    great_people,
    models,
    pathfinding,
    research,
    rules_config,
    ruleset,
    setup,
    turn,
    validation,
    victory,
    world,
)

__all__ = [
    "actions",
    "autoplay",
    "barbarians",
    "cities",
    "combat",
    "context",
    "economy",
    "enums",
    "execution",
    "golden_age",
    "great_people",
    "models",
    "pathfinding",
    "research",
    "rules_config",
    "ruleset",
    "setup",
    "turn",
    "validation",
    "victory",
    "world",
]
