"""Tests for action legality checks."""

from __future__ import annotations

import pytest

from agentciv.domain import world
from agentciv.domain.actions import (
    Attack,
    Build,
    BuildImprovement,
    ChangeGovernment,
    EstablishTradeRoute,
    ExpendGreatPerson,
    Fortify,
    FoundCity,
    MoveUnit,
    RangedAttack,
    SetResearch,
    UpgradeUnit,
)
from agentciv.domain.enums import (
    GreatPersonAbility,
    ImprovementType,
    ProductionKind,
    RelationshipStatus,
    ResourceType,
    TerrainType,
)
from agentciv.domain.models import BARBARIAN_CIV_ID, ImprovementWork, ProductionOrder, TradeRoute
from agentciv.domain.validation import validate_action


@pytest.fixture
def state(builder):
    state = builder.state()
    builder.civ(state, "alpha", gold=100)
    builder.civ(state, "beta")
    return state


def _valid(state, action, context, civ_id: str = "alpha") -> bool:
    return validate_action(state, action, civ_id, context)


class TestCivilizationChecks:
    def test_unknown_civilization(self, state, context) -> None:
        assert not _valid(state, SetResearch(tech_id="agriculture"), context, "gamma")

    def test_eliminated_civilization(self, state, context) -> None:
        state.civilizations["alpha"].is_alive = False
        assert not _valid(state, SetResearch(tech_id="agriculture"), context)


class TestMove:
    def test_adjacent_move(self, state, builder, context) -> None:
        unit = builder.unit(state, "alpha", "warrior", 2, 2)
        assert _valid(state, MoveUnit(unit_id=unit.id, target_x=3, target_y=2), context)

    def test_beyond_movement_budget(self, state, builder, context) -> None:
        unit = builder.unit(state, "alpha", "warrior", 2, 2)
        assert not _valid(state, MoveUnit(unit_id=unit.id, target_x=4, target_y=2), context)

    def test_occupied_target(self, state, builder, context) -> None:
        unit = builder.unit(state, "alpha", "warrior", 2, 2)
        builder.unit(state, "alpha", "worker", 3, 2)
        assert not _valid(state, MoveUnit(unit_id=unit.id, target_x=3, target_y=2), context)

    def test_exhausted_unit(self, state, builder, context) -> None:
        unit = builder.unit(state, "alpha", "warrior", 2, 2, movement_left=0.0)
        assert not _valid(state, MoveUnit(unit_id=unit.id, target_x=3, target_y=2), context)

    def test_foreign_unit(self, state, builder, context) -> None:
        unit = builder.unit(state, "beta", "warrior", 2, 2)
        assert not _valid(state, MoveUnit(unit_id=unit.id, target_x=3, target_y=2), context)

    def test_unit_on_trade_route_is_committed(self, state, builder, context) -> None:
        unit = builder.unit(state, "alpha", "scout", 2, 2)
        state.trade_routes["tr1"] = TradeRoute(
            id="tr1",
            owner_id="alpha",
            from_city_id="c1",
            to_city_id="c2",
            unit_id=unit.id,
            gold_per_turn=3,
            turns_remaining=10,
        )
        assert not _valid(state, MoveUnit(unit_id=unit.id, target_x=3, target_y=2), context)

    def test_out_of_bounds(self, state, builder, context) -> None:
        unit = builder.unit(state, "alpha", "scout", 0, 0)
        assert not _valid(state, MoveUnit(unit_id=unit.id, target_x=-1, target_y=0), context)


class TestAttack:
    def test_adjacent_enemy(self, state, builder, context) -> None:
        unit = builder.unit(state, "alpha", "warrior", 3, 3)
        target = builder.unit(state, "beta", "warrior", 4, 3)
        assert _valid(state, Attack(unit_id=unit.id, target_unit_id=target.id), context)

    def test_distant_enemy(self, state, builder, context) -> None:
        unit = builder.unit(state, "alpha", "warrior", 3, 3)
        target = builder.unit(state, "beta", "warrior", 4, 4)
        assert not _valid(state, Attack(unit_id=unit.id, target_unit_id=target.id), context)

    def test_own_unit(self, state, builder, context) -> None:
        unit = builder.unit(state, "alpha", "warrior", 3, 3)
        target = builder.unit(state, "alpha", "worker", 4, 3)
        assert not _valid(state, Attack(unit_id=unit.id, target_unit_id=target.id), context)

    def test_allied_unit(self, state, builder, context) -> None:
        unit = builder.unit(state, "alpha", "warrior", 3, 3)
        target = builder.unit(state, "beta", "warrior", 4, 3)
        world.set_relationship(state, "alpha", "beta", RelationshipStatus.ALLIED)
        assert not _valid(state, Attack(unit_id=unit.id, target_unit_id=target.id), context)

    def test_barbarian_target(self, state, builder, context) -> None:
        unit = builder.unit(state, "alpha", "warrior", 3, 3)
        target = builder.unit(state, BARBARIAN_CIV_ID, "warrior", 4, 3)
        assert _valid(state, Attack(unit_id=unit.id, target_unit_id=target.id), context)

    def test_civilian_cannot_attack(self, state, builder, context) -> None:
        unit = builder.unit(state, "alpha", "settler", 3, 3)
        target = builder.unit(state, "beta", "warrior", 4, 3)
        assert not _valid(state, Attack(unit_id=unit.id, target_unit_id=target.id), context)


class TestRangedAttack:
    def test_within_range(self, state, builder, context) -> None:
        archer = builder.unit(state, "alpha", "archer", 3, 3)
        builder.unit(state, "beta", "warrior", 5, 3)
        assert _valid(state, RangedAttack(unit_id=archer.id, target_x=5, target_y=3), context)

    def test_out_of_range(self, state, builder, context) -> None:
        archer = builder.unit(state, "alpha", "archer", 3, 3)
        builder.unit(state, "beta", "warrior", 6, 3)
        assert not _valid(state, RangedAttack(unit_id=archer.id, target_x=6, target_y=3), context)

    def test_melee_unit_has_no_range(self, state, builder, context) -> None:
        warrior = builder.unit(state, "alpha", "warrior", 3, 3)
        builder.unit(state, "beta", "warrior", 4, 3)
        assert not _valid(state, RangedAttack(unit_id=warrior.id, target_x=4, target_y=3), context)

    def test_empty_tile(self, state, builder, context) -> None:
        archer = builder.unit(state, "alpha", "archer", 3, 3)
        assert not _valid(state, RangedAttack(unit_id=archer.id, target_x=4, target_y=3), context)

    def test_allied_target(self, state, builder, context) -> None:
        archer = builder.unit(state, "alpha", "archer", 3, 3)
        builder.unit(state, "beta", "warrior", 5, 3)
        world.set_relationship(state, "alpha", "beta", RelationshipStatus.ALLIED)
        assert not _valid(state, RangedAttack(unit_id=archer.id, target_x=5, target_y=3), context)


class TestFoundCity:
    def test_open_grassland(self, state, builder, context) -> None:
        settler = builder.unit(state, "alpha", "settler", 5, 5)
        assert _valid(state, FoundCity(unit_id=settler.id), context)

    def test_water(self, state, builder, context) -> None:
        builder.terrain(state, 5, 5, TerrainType.WATER)
        settler = builder.unit(state, "alpha", "settler", 5, 5)
        assert not _valid(state, FoundCity(unit_id=settler.id), context)

    def test_foreign_territory(self, state, builder, context) -> None:
        state.grid[5][5].owner_id = "beta"
        settler = builder.unit(state, "alpha", "settler", 5, 5)
        assert not _valid(state, FoundCity(unit_id=settler.id), context)

    def test_own_territory(self, state, builder, context) -> None:
        state.grid[5][5].owner_id = "alpha"
        settler = builder.unit(state, "alpha", "settler", 5, 5)
        assert _valid(state, FoundCity(unit_id=settler.id), context)

    def test_existing_city(self, state, builder, context) -> None:
        builder.city(state, "alpha", 5, 5)
        settler = builder.unit(state, "alpha", "settler", 5, 5)
        assert not _valid(state, FoundCity(unit_id=settler.id), context)

    def test_worker_cannot_settle(self, state, builder, context) -> None:
        worker = builder.unit(state, "alpha", "worker", 5, 5)
        assert not _valid(state, FoundCity(unit_id=worker.id), context)


class TestBuild:
    @pytest.fixture
    def city(self, state, builder):
        return builder.city(state, "alpha", 5, 5)

    def _build(self, city, target: str, kind: ProductionKind = ProductionKind.UNIT) -> Build:
        return Build(city_id=city.id, target=target, build_type=kind)

    def test_basic_unit(self, state, city, context) -> None:
        assert _valid(state, self._build(city, "warrior"), context)

    def test_unit_needs_tech(self, state, city, context) -> None:
        assert not _valid(state, self._build(city, "archer"), context)
        state.civilizations["alpha"].researched_techs.append("archery")
        assert _valid(state, self._build(city, "archer"), context)

    def test_unit_needs_strategic_resource(self, state, city, context) -> None:
        state.civilizations["alpha"].researched_techs.extend(
            ["mining", "bronze_working", "iron_working"]
        )
        assert not _valid(state, self._build(city, "swordsman"), context)
        state.grid[4][5].resource = ResourceType.IRON
        assert _valid(state, self._build(city, "swordsman"), context)

    def test_great_people_and_palace_are_not_buildable(self, state, city, context) -> None:
        assert not _valid(state, self._build(city, "great_scientist"), context)
        assert not _valid(state, self._build(city, "palace", ProductionKind.BUILDING), context)

    def test_building_needs_tech(self, state, city, context) -> None:
        assert not _valid(state, self._build(city, "library", ProductionKind.BUILDING), context)
        state.civilizations["alpha"].researched_techs.append("writing")
        assert _valid(state, self._build(city, "library", ProductionKind.BUILDING), context)

    def test_building_needs_prerequisite_building(self, state, city, context) -> None:
        state.civilizations["alpha"].researched_techs.extend(["writing", "philosophy", "education"])
        assert not _valid(state, self._build(city, "university", ProductionKind.BUILDING), context)
        city.buildings.append("library")
        assert _valid(state, self._build(city, "university", ProductionKind.BUILDING), context)

    def test_building_already_present(self, state, city, context) -> None:
        city.buildings.append("monument")
        assert not _valid(state, self._build(city, "monument", ProductionKind.BUILDING), context)

    def test_production_in_progress(self, state, city, context) -> None:
        city.production = ProductionOrder(kind=ProductionKind.UNIT, target="warrior", progress=3, cost=30)
        assert not _valid(state, self._build(city, "scout"), context)

    def test_foreign_city(self, state, city, context) -> None:
        assert not _valid(state, self._build(city, "warrior"), context, "beta")

    def test_unknown_target(self, state, city, context) -> None:
        assert not _valid(state, self._build(city, "dragon"), context)


class TestSetResearch:
    def test_root_tech(self, state, context) -> None:
        assert _valid(state, SetResearch(tech_id="agriculture"), context)

    def test_prerequisites(self, state, context) -> None:
        assert not _valid(state, SetResearch(tech_id="pottery"), context)
        state.civilizations["alpha"].researched_techs.append("agriculture")
        assert _valid(state, SetResearch(tech_id="pottery"), context)

    def test_already_known(self, state, context) -> None:
        state.civilizations["alpha"].researched_techs.append("agriculture")
        assert not _valid(state, SetResearch(tech_id="agriculture"), context)

    def test_unknown_tech(self, state, context) -> None:
        assert not _valid(state, SetResearch(tech_id="warp_drive"), context)


class TestBuildImprovement:
    def test_farm_on_grassland(self, state, builder, context) -> None:
        worker = builder.unit(state, "alpha", "worker", 2, 2)
        assert _valid(state, BuildImprovement(unit_id=worker.id, improvement="farm"), context)

    def test_wrong_terrain(self, state, builder, context) -> None:
        worker = builder.unit(state, "alpha", "worker", 2, 2)
        assert not _valid(state, BuildImprovement(unit_id=worker.id, improvement="mine"), context)

    def test_existing_improvement_or_work(self, state, builder, context) -> None:
        worker = builder.unit(state, "alpha", "worker", 2, 2)
        state.grid[2][2].improvement = ImprovementType.ROAD
        assert not _valid(state, BuildImprovement(unit_id=worker.id, improvement="farm"), context)

        state.grid[2][2].improvement = None
        state.grid[2][2].improvement_work = ImprovementWork(
            improvement=ImprovementType.FARM, turns_remaining=2, worker_id="u99"
        )
        assert not _valid(state, BuildImprovement(unit_id=worker.id, improvement="farm"), context)

    def test_only_workers_build(self, state, builder, context) -> None:
        warrior = builder.unit(state, "alpha", "warrior", 2, 2)
        assert not _valid(state, BuildImprovement(unit_id=warrior.id, improvement="farm"), context)

    def test_unknown_improvement(self, state, builder, context) -> None:
        worker = builder.unit(state, "alpha", "worker", 2, 2)
        assert not _valid(state, BuildImprovement(unit_id=worker.id, improvement="canal"), context)


class TestFortify:
    def test_military_unit(self, state, builder, context) -> None:
        warrior = builder.unit(state, "alpha", "warrior", 2, 2)
        assert _valid(state, Fortify(unit_id=warrior.id), context)

    def test_civilians_cannot_fortify(self, state, builder, context) -> None:
        worker = builder.unit(state, "alpha", "worker", 2, 2)
        settler = builder.unit(state, "alpha", "settler", 3, 2)
        assert not _valid(state, Fortify(unit_id=worker.id), context)
        assert not _valid(state, Fortify(unit_id=settler.id), context)


class TestUpgrade:
    def test_upgrade_requires_gold_and_tech(self, state, builder, context) -> None:
        warrior = builder.unit(state, "alpha", "warrior", 2, 2)
        action = UpgradeUnit(unit_id=warrior.id, target_type="swordsman")
        assert not _valid(state, action, context)

        civ = state.civilizations["alpha"]
        civ.researched_techs.extend(["mining", "bronze_working", "iron_working"])
        assert _valid(state, action, context)

        civ.gold = 39
        assert not _valid(state, action, context)

    def test_only_along_upgrade_line(self, state, builder, context) -> None:
        state.civilizations["alpha"].researched_techs.append("archery")
        warrior = builder.unit(state, "alpha", "warrior", 2, 2)
        assert not _valid(state, UpgradeUnit(unit_id=warrior.id, target_type="archer"), context)


class TestTradeRoute:
    @pytest.fixture
    def cities(self, state, builder):
        return builder.city(state, "alpha", 1, 1), builder.city(state, "alpha", 8, 1)

    def test_caravan_in_own_city(self, state, builder, cities, context) -> None:
        home, target = cities
        caravan = builder.unit(state, "alpha", "caravan", home.x, home.y)
        assert _valid(state, EstablishTradeRoute(unit_id=caravan.id, target_city_id=target.id), context)

    def test_caravan_outside_a_city(self, state, builder, cities, context) -> None:
        _, target = cities
        caravan = builder.unit(state, "alpha", "caravan", 4, 4)
        assert not _valid(
            state, EstablishTradeRoute(unit_id=caravan.id, target_city_id=target.id), context
        )

    def test_route_to_the_same_city(self, state, builder, cities, context) -> None:
        home, _ = cities
        caravan = builder.unit(state, "alpha", "caravan", home.x, home.y)
        assert not _valid(
            state, EstablishTradeRoute(unit_id=caravan.id, target_city_id=home.id), context
        )

    def test_only_caravans_trade(self, state, builder, cities, context) -> None:
        home, target = cities
        scout = builder.unit(state, "alpha", "scout", home.x, home.y)
        assert not _valid(
            state, EstablishTradeRoute(unit_id=scout.id, target_city_id=target.id), context
        )

    def test_target_may_be_foreign(self, state, builder, cities, context) -> None:
        home, _ = cities
        foreign = builder.city(state, "beta", 8, 8)
        caravan = builder.unit(state, "alpha", "caravan", home.x, home.y)
        assert _valid(
            state, EstablishTradeRoute(unit_id=caravan.id, target_city_id=foreign.id), context
        )


class TestChangeGovernment:
    def test_requires_tech(self, state, context) -> None:
        action = ChangeGovernment(government="monarchy")
        assert not _valid(state, action, context)
        state.civilizations["alpha"].researched_techs.append("monarchy")
        assert _valid(state, action, context)

    def test_current_government(self, state, context) -> None:
        assert not _valid(state, ChangeGovernment(government="despotism"), context)

    def test_not_during_anarchy(self, state, context) -> None:
        civ = state.civilizations["alpha"]
        civ.researched_techs.append("monarchy")
        civ.anarchy_turns = 1
        assert not _valid(state, ChangeGovernment(government="monarchy"), context)

    def test_unknown_government(self, state, context) -> None:
        assert not _valid(state, ChangeGovernment(government="technocracy"), context)


class TestExpendGreatPerson:
    def test_matching_ability(self, state, builder, context) -> None:
        merchant = builder.unit(state, "alpha", "great_merchant", 2, 2)
        assert _valid(
            state, ExpendGreatPerson(unit_id=merchant.id, ability=GreatPersonAbility.GOLD_BONUS), context
        )
        assert not _valid(
            state, ExpendGreatPerson(unit_id=merchant.id, ability=GreatPersonAbility.GOLDEN_AGE), context
        )

    def test_regular_units_cannot_be_expended(self, state, builder, context) -> None:
        warrior = builder.unit(state, "alpha", "warrior", 2, 2)
        assert not _valid(
            state, ExpendGreatPerson(unit_id=warrior.id, ability=GreatPersonAbility.GOLD_BONUS), context
        )

    def test_golden_age_does_not_stack(self, state, builder, context) -> None:
        artist = builder.unit(state, "alpha", "great_artist", 2, 2)
        action = ExpendGreatPerson(unit_id=artist.id, ability=GreatPersonAbility.GOLDEN_AGE)
        assert _valid(state, action, context)
        state.civilizations["alpha"].golden_age_turns = 4
        assert not _valid(state, action, context)

    def test_rush_needs_production(self, state, builder, context) -> None:
        city = builder.city(state, "alpha", 5, 5)
        engineer = builder.unit(state, "alpha", "great_engineer", 2, 2)
        action = ExpendGreatPerson(unit_id=engineer.id, ability=GreatPersonAbility.RUSH_PRODUCTION)
        assert not _valid(state, action, context)
        city.production = ProductionOrder(kind=ProductionKind.UNIT, target="warrior", progress=0, cost=30)
        assert _valid(state, action, context)

    def test_instant_research_needs_something_to_research(self, state, builder, context) -> None:
        scientist = builder.unit(state, "alpha", "great_scientist", 2, 2)
        action = ExpendGreatPerson(unit_id=scientist.id, ability=GreatPersonAbility.INSTANT_RESEARCH)
        assert _valid(state, action, context)
        state.civilizations["alpha"].researched_techs.extend(context.ruleset.techs)
        assert not _valid(state, action, context)
