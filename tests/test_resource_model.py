"""Tests for the Resource Model."""

import pytest

from water_saver.models.config import GameConfig
from water_saver.resource import model
from water_saver.resource.model import UnknownIdentifierError


@pytest.fixture
def config():
    return GameConfig()


@pytest.fixture
def state(config):
    return model.initial_state(config)


class TestInitialState:
    def test_fresh_run(self, state):
        assert state.resource_level == 0
        assert state.elapsed_ticks == 0
        assert state.base_drain_rate == 15
        assert state.resource_saved_estimate == 0
        assert state.choices == {"bucket": False, "shower": False}
        assert [s.id for s in state.sources] == ["tap", "shower", "toilet"]
        assert all(s.is_leaking and not s.fixed for s in state.sources)

    def test_generation_carried(self, config):
        assert model.initial_state(config, generation=4).generation == 4

    def test_initial_level_from_config(self):
        config = GameConfig(initial_level=60)
        assert model.initial_state(config).resource_level == 60


class TestTotalDrain:
    def test_all_leaks_no_choices(self, state, config):
        assert model.total_drain(state, config) == 34

    def test_choices_reduce_drain(self, state, config):
        state = model.toggle_choice(state, "bucket")
        state = model.toggle_choice(state, "shower")
        assert model.total_drain(state, config) == 20

    def test_fixed_source_excluded(self, state, config):
        state = model.fix_leak(state, "toilet")
        assert model.total_drain(state, config) == 28

    def test_toggle_round_trip_restores_drain(self, state, config):
        before = model.total_drain(state, config)
        adopted = model.toggle_choice(state, "bucket")
        assert model.total_drain(adopted, config) == before - 8
        dropped = model.toggle_choice(adopted, "bucket")
        assert model.total_drain(dropped, config) == before


class TestAdvance:
    def test_level_floored_at_zero(self, state, config):
        nxt = model.advance(state, config)
        assert nxt.resource_level == 0
        assert nxt.elapsed_ticks == 1
        assert nxt.resource_saved_estimate == 0

    def test_level_drops_by_drain(self, config):
        state = model.initial_state(GameConfig(initial_level=100))
        nxt = model.advance(state, config)
        assert nxt.resource_level == 66

    def test_floor_holds_over_many_ticks(self, config):
        state = model.initial_state(GameConfig(initial_level=50))
        for _ in range(20):
            state = model.advance(state, config)
            assert state.resource_level >= 0
        assert state.resource_level == 0
        assert state.elapsed_ticks == 20

    def test_no_upper_clamp(self):
        config = GameConfig(initial_level=99, inflow_per_tick=40)
        state = model.initial_state(config)
        for source in ("tap", "shower", "toilet"):
            state = model.fix_leak(state, source)
        nxt = model.advance(state, config)
        # 99 + 40 - 15
        assert nxt.resource_level == 124

    def test_saved_estimate_grows_when_drain_below_base(self, state, config):
        state = model.toggle_choice(state, "bucket")
        state = model.toggle_choice(state, "shower")
        state = model.fix_leak(state, "toilet")
        assert model.total_drain(state, config) == 14

        nxt = model.advance(state, config)
        assert nxt.resource_saved_estimate == pytest.approx(0.5)
        nxt = model.advance(nxt, config)
        assert nxt.resource_saved_estimate == pytest.approx(1.0)

    def test_saved_estimate_unchanged_at_base_rate(self, state, config):
        for source in ("tap", "shower", "toilet"):
            state = model.fix_leak(state, source)
        assert model.total_drain(state, config) == 15
        assert model.advance(state, config).resource_saved_estimate == 0

    def test_advance_does_not_mutate_input(self, config):
        state = model.initial_state(GameConfig(initial_level=80))
        model.advance(state, config)
        assert state.resource_level == 80
        assert state.elapsed_ticks == 0


class TestFixLeak:
    def test_fix_sets_flags(self, state):
        fixed = model.fix_leak(state, "tap")
        tap = fixed.get_source("tap")
        assert tap.fixed is True
        assert tap.is_leaking is False
        # Original untouched
        assert state.get_source("tap").fixed is False

    def test_double_fix_is_noop(self, state):
        once = model.fix_leak(state, "tap")
        twice = model.fix_leak(once, "tap")
        assert twice == once

    def test_unknown_source_raises(self, state):
        with pytest.raises(UnknownIdentifierError):
            model.fix_leak(state, "garden_hose")

    def test_leaks_fixed_count(self, state):
        assert model.leaks_fixed(state) == 0
        state = model.fix_leak(state, "tap")
        state = model.fix_leak(state, "shower")
        assert model.leaks_fixed(state) == 2


class TestToggleChoice:
    def test_toggle_flips(self, state):
        on = model.toggle_choice(state, "shower")
        assert on.choices["shower"] is True
        off = model.toggle_choice(on, "shower")
        assert off.choices["shower"] is False

    def test_unknown_choice_raises(self, state):
        with pytest.raises(UnknownIdentifierError):
            model.toggle_choice(state, "rain_barrel")

    def test_unknown_identifier_is_key_error(self, state):
        with pytest.raises(KeyError):
            model.toggle_choice(state, "rain_barrel")
