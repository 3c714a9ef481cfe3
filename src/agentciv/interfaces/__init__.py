"""Protocol-based interfaces for the turn engine's external collaborators.

The engine depends only on these contracts; :mod:`agentciv.domain.pathfinding`
and :mod:`agentciv.domain.combat` ship default implementations.
"""

from agentciv.interfaces.combat import ICombatResolver
from agentciv.interfaces.pathfinding import IPathfinder

__all__ = [
    "ICombatResolver",
    "IPathfinder",
]
