"""Tests for the civilization economy steps."""

from __future__ import annotations

import pytest

from agentciv.domain import cities, economy, world
from agentciv.domain.enums import EventType, RelationshipStatus, ResourceType
from agentciv.domain.models import TradeRoute


@pytest.fixture
def state(builder):
    state = builder.state()
    builder.civ(state, "alpha")
    builder.civ(state, "beta")
    return state


def _effects(civ, context):
    return economy.government_effects(civ, context)


class TestIncomeAndUpkeep:
    def test_income_from_cities(self, state, builder, context) -> None:
        civ = state.civilizations["alpha"]
        city = builder.city(state, "alpha", 5, 5)
        cities.update_city_yields(state, city, context)

        assert economy.collect_income(state, civ, context, _effects(civ, context), golden_age=False) == 4
        assert civ.gold == 4

    def test_golden_age_boosts_income(self, state, builder, context) -> None:
        civ = state.civilizations["alpha"]
        city = builder.city(state, "alpha", 5, 5)
        cities.update_city_yields(state, city, context)
        assert economy.collect_income(state, civ, context, _effects(civ, context), golden_age=True) == 5

    def test_trade_routes_pay_their_owner(self, state, builder, context) -> None:
        civ = state.civilizations["alpha"]
        home = builder.city(state, "alpha", 1, 1)
        target = builder.city(state, "beta", 8, 8)
        state.trade_routes["tr1"] = TradeRoute(
            id="tr1",
            owner_id="alpha",
            from_city_id=home.id,
            to_city_id=target.id,
            unit_id="u1",
            gold_per_turn=4,
            turns_remaining=5,
        )
        civ.government = "republic"

        income = economy.collect_income(state, civ, context, _effects(civ, context), golden_age=False)

        assert income == 6
        beta = state.civilizations["beta"]
        assert economy.collect_income(state, beta, context, _effects(beta, context), golden_age=False) == 0

    def test_upkeep(self, state, builder, context) -> None:
        civ = state.civilizations["alpha"]
        city = builder.city(state, "alpha", 5, 5)
        city.buildings.append("monument")
        builder.unit(state, "alpha", "warrior", 1, 1)
        builder.unit(state, "alpha", "warrior", 2, 1)
        builder.unit(state, "alpha", "caravan", 3, 1)

        assert economy.pay_upkeep(state, civ, context, _effects(civ, context)) == 3
        assert civ.gold == -3

    def test_monarchy_halves_unit_maintenance(self, state, builder, context) -> None:
        civ = state.civilizations["alpha"]
        civ.government = "monarchy"
        builder.unit(state, "alpha", "warrior", 1, 1)
        builder.unit(state, "alpha", "warrior", 2, 1)
        assert economy.pay_upkeep(state, civ, context, _effects(civ, context)) == 1

    def test_anarchy_suspends_government_effects(self, state, context) -> None:
        civ = state.civilizations["alpha"]
        civ.government = "monarchy"
        civ.anarchy_turns = 2
        assert _effects(civ, context) == economy.NO_EFFECTS


class TestTimers:
    def test_anarchy_counts_down(self, state) -> None:
        civ = state.civilizations["alpha"]
        civ.anarchy_turns = 2
        civ.combat_bonus_turns = 1

        assert economy.tick_timers(civ) is True
        assert economy.tick_timers(civ) is True
        assert economy.tick_timers(civ) is False
        assert civ.anarchy_turns == 0
        assert civ.combat_bonus_turns == 0


class TestAttrition:
    def test_negative_treasury_damages_units(self, state, builder, context) -> None:
        civ = state.civilizations["alpha"]
        civ.gold = -5
        unit = builder.unit(state, "alpha", "warrior", 1, 1)

        assert economy.apply_attrition(state, civ, context) == []
        assert unit.hp == 90

    def test_attrition_disbands_weak_units(self, state, builder, context, check_occupancy) -> None:
        civ = state.civilizations["alpha"]
        civ.gold = -1
        unit = builder.unit(state, "alpha", "warrior", 1, 1, hp=10)

        events = economy.apply_attrition(state, civ, context)

        assert events == ["Alpha's unpaid warrior disbanded"]
        assert unit.id not in state.units
        assert state.grid[1][1].unit_id is None
        check_occupancy(state)

    def test_no_attrition_when_solvent(self, state, builder, context) -> None:
        civ = state.civilizations["alpha"]
        unit = builder.unit(state, "alpha", "warrior", 1, 1)
        economy.apply_attrition(state, civ, context)
        assert unit.hp == 100


class TestHealing:
    def test_heal_by_location(self, state, builder, context) -> None:
        civ = state.civilizations["alpha"]
        builder.city(state, "alpha", 5, 5)
        in_city = builder.unit(state, "alpha", "warrior", 5, 5, hp=50)
        at_home = builder.unit(state, "alpha", "warrior", 5, 4, hp=50)
        abroad = builder.unit(state, "alpha", "warrior", 1, 1, hp=50)
        tired = builder.unit(state, "alpha", "warrior", 5, 6, hp=50, acted_this_turn=True)
        nearly = builder.unit(state, "alpha", "warrior", 4, 5, hp=95)

        economy.heal_units(state, civ, context)

        assert in_city.hp == 70
        assert at_home.hp == 65
        assert abroad.hp == 60
        assert tired.hp == 50
        assert nearly.hp == 100
        assert not tired.acted_this_turn

    def test_no_healing_in_debt(self, state, builder, context) -> None:
        civ = state.civilizations["alpha"]
        civ.gold = -1
        unit = builder.unit(state, "alpha", "warrior", 1, 1, hp=50)
        economy.heal_units(state, civ, context)
        assert unit.hp == 50

    def test_reset_movement(self, state, builder) -> None:
        civ = state.civilizations["alpha"]
        scout = builder.unit(state, "alpha", "scout", 1, 1, movement_left=0.0)
        economy.reset_movement(state, civ)
        assert scout.movement_left == 3.0


class TestHappinessAndScore:
    def test_war_weariness(self, state, context) -> None:
        civ = state.civilizations["alpha"]
        civ.relationships["beta"] = RelationshipStatus.WAR
        economy.update_war_weariness(civ, context)
        economy.update_war_weariness(civ, context)
        assert civ.war_weariness == 2

        civ.relationships["beta"] = RelationshipStatus.NEUTRAL
        for _ in range(5):
            economy.update_war_weariness(civ, context)
        assert civ.war_weariness == 0

    def test_happiness(self, state, builder, context) -> None:
        civ = state.civilizations["alpha"]
        builder.city(state, "alpha", 5, 5)
        assert economy.compute_happiness(state, civ, context, _effects(civ, context)) == 9

        state.grid[5][4].resource = ResourceType.GEMS
        state.grid[5][6].resource = ResourceType.GEMS
        assert economy.compute_happiness(state, civ, context, _effects(civ, context)) == 11

        civ.war_weariness = 4
        assert economy.compute_happiness(state, civ, context, _effects(civ, context)) == 7

    def test_score(self, state, builder, context) -> None:
        civ = state.civilizations["alpha"]
        builder.city(state, "alpha", 5, 5)
        builder.unit(state, "alpha", "warrior", 1, 1)
        civ.gold = 55
        civ.researched_techs = ["agriculture", "mining"]
        civ.golden_ages_completed = 1

        assert economy.compute_score(state, civ, context) == 10 + 2 + 5 + 3 + 10 + 20


class TestElimination:
    def test_civ_without_cities_or_units_is_eliminated(self, state, context) -> None:
        civ = state.civilizations["beta"]
        events = economy.check_elimination(state, civ, context)
        assert events == ["Beta has been eliminated!"]
        assert not civ.is_alive

    def test_a_single_unit_keeps_a_civ_alive(self, state, builder, context) -> None:
        civ = state.civilizations["beta"]
        builder.unit(state, "beta", "scout", 1, 1)
        assert economy.check_elimination(state, civ, context) == []
        assert civ.is_alive


class TestTradeRoutes:
    def _route(self, state, home, target, unit_id, turns: int) -> TradeRoute:
        route = TradeRoute(
            id="tr1",
            owner_id="alpha",
            from_city_id=home.id,
            to_city_id=target.id,
            unit_id=unit_id,
            gold_per_turn=3,
            turns_remaining=turns,
        )
        state.trade_routes[route.id] = route
        return route

    def test_routes_expire(self, state, builder, context) -> None:
        home = builder.city(state, "alpha", 1, 1)
        target = builder.city(state, "alpha", 8, 8)
        caravan = builder.unit(state, "alpha", "caravan", 1, 1)
        route = self._route(state, home, target, caravan.id, 2)

        assert economy.process_trade_routes(state, context) == []
        assert route.turns_remaining == 1
        assert economy.process_trade_routes(state, context) == ["Trade route tr1 has ended"]
        assert state.trade_routes == {}

    def test_broken_routes_are_removed(self, state, builder, context) -> None:
        home = builder.city(state, "alpha", 1, 1)
        target = builder.city(state, "alpha", 8, 8)
        self._route(state, home, target, "u404", 10)

        economy.process_trade_routes(state, context)

        assert state.trade_routes == {}


class TestWarExpiry:
    def test_quiet_war_ends(self, state, context) -> None:
        world.declare_war(state, "alpha", "beta")
        state.turn = 1 + context.rules.diplomacy.peace_after_quiet_turns

        events = economy.expire_wars(state, context)

        assert events == ["The war between Alpha and Beta has ended"]
        assert state.civilizations["alpha"].relationships["beta"] == RelationshipStatus.NEUTRAL
        assert state.civilizations["beta"].relationships["alpha"] == RelationshipStatus.NEUTRAL
        assert state.turn_events[-1].type == EventType.DIPLOMACY

    def test_recent_fighting_keeps_war(self, state, context) -> None:
        world.declare_war(state, "alpha", "beta")
        state.turn = context.rules.diplomacy.peace_after_quiet_turns

        assert economy.expire_wars(state, context) == []
        assert world.at_war(state.civilizations["alpha"])

    def test_war_with_eliminated_civ_ends_silently(self, state, context) -> None:
        world.declare_war(state, "alpha", "beta")
        state.civilizations["beta"].is_alive = False

        assert economy.expire_wars(state, context) == []
        assert not world.at_war(state.civilizations["alpha"])
