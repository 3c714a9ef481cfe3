"""Combat Resolver Protocol Interface.

This module defines the protocol (interface) for combat resolution. The
resolver only computes outcomes; the executor applies them to state.
"""

from typing import Protocol

from agentciv.domain.combat import CombatOutcome
from agentciv.domain.models import GameState


class ICombatResolver(Protocol):
    """Protocol defining the interface for unit-versus-unit combat.

    Both methods must be pure with respect to ``state`` and deterministic for
    a given seed.
    """

    def resolve_combat(
        self, state: GameState, attacker_id: str, defender_id: str, seed: str
    ) -> CombatOutcome | None:
        """Resolve a melee exchange; the defender may retaliate.

        Args:
            state: Current game snapshot (read-only)
            attacker_id: Attacking unit identifier
            defender_id: Defending unit identifier
            seed: Deterministic seed string (see ``agentciv.utils.rng``)

        Returns:
            CombatOutcome, or None when either unit is missing
        """
        ...

    def resolve_ranged_combat(
        self, state: GameState, attacker_id: str, defender_id: str, seed: str
    ) -> CombatOutcome | None:
        """Resolve a ranged attack; the attacker takes no damage."""
        ...
