"""Typed actions a civilization can submit for a turn.

``Action`` is a closed union: the validator and executor ``match`` on it
exhaustively, so adding a variant forces both to be updated. Wire payloads
carry the variant in a ``type`` field and are parsed with a pydantic
discriminated union.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Annotated, Any, Literal

from pydantic import Field, TypeAdapter

from .enums import GreatPersonAbility, ProductionKind


@dataclass(frozen=True, slots=True)
class MoveUnit:
    unit_id: str
    target_x: int
    target_y: int
    type: Literal["move_unit"] = "move_unit"


@dataclass(frozen=True, slots=True)
class Attack:
    """Melee attack against an orthogonally adjacent unit."""

    unit_id: str
    target_unit_id: str
    type: Literal["attack"] = "attack"


@dataclass(frozen=True, slots=True)
class RangedAttack:
    """Attack the unit on a tile within range; the defender does not retaliate."""

    unit_id: str
    target_x: int
    target_y: int
    type: Literal["ranged_attack"] = "ranged_attack"


@dataclass(frozen=True, slots=True)
class FoundCity:
    unit_id: str
    name: str | None = None
    type: Literal["found_city"] = "found_city"


@dataclass(frozen=True, slots=True)
class Build:
    """Queue a unit or building in a city."""

    city_id: str
    target: str
    build_type: ProductionKind = ProductionKind.UNIT
    type: Literal["build"] = "build"


@dataclass(frozen=True, slots=True)
class SetResearch:
    tech_id: str
    type: Literal["set_research"] = "set_research"


@dataclass(frozen=True, slots=True)
class BuildImprovement:
    unit_id: str
    improvement: str
    type: Literal["build_improvement"] = "build_improvement"


@dataclass(frozen=True, slots=True)
class Fortify:
    unit_id: str
    type: Literal["fortify"] = "fortify"


@dataclass(frozen=True, slots=True)
class UpgradeUnit:
    unit_id: str
    target_type: str
    type: Literal["upgrade_unit"] = "upgrade_unit"


@dataclass(frozen=True, slots=True)
class EstablishTradeRoute:
    unit_id: str
    target_city_id: str
    type: Literal["establish_trade_route"] = "establish_trade_route"


@dataclass(frozen=True, slots=True)
class ChangeGovernment:
    government: str
    type: Literal["change_government"] = "change_government"


@dataclass(frozen=True, slots=True)
class ExpendGreatPerson:
    unit_id: str
    ability: GreatPersonAbility
    type: Literal["expend_great_person"] = "expend_great_person"


Action = (
    MoveUnit
    | Attack
    | RangedAttack
    | FoundCity
    | Build
    | SetResearch
    | BuildImprovement
    | Fortify
    | UpgradeUnit
    | EstablishTradeRoute
    | ChangeGovernment
    | ExpendGreatPerson
)

ACTION_ADAPTER: TypeAdapter[Action] = TypeAdapter(
    Annotated[Action, Field(discriminator="type")]
)
ACTION_LIST_ADAPTER: TypeAdapter[list[Action]] = TypeAdapter(
    list[Annotated[Action, Field(discriminator="type")]]
)


def parse_action(payload: Mapping[str, Any]) -> Action:
    """Validate a single wire payload into an :data:`Action`.

    Raises:
        pydantic.ValidationError: If ``type`` is unknown or fields are missing.
    """
    return ACTION_ADAPTER.validate_python(payload)


def parse_actions(payloads: Iterable[Mapping[str, Any]]) -> list[Action]:
    return ACTION_LIST_ADAPTER.validate_python(list(payloads))


def dump_action(action: Action) -> dict[str, Any]:
    return ACTION_ADAPTER.dump_python(action, mode="json")
