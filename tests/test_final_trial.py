"""Tests for the final trial state machine."""

import pytest

from src.core.final_trial import (
    EndingId,
    SacrificeKind,
    TrialAction,
    TrialResources,
    TrialSnapshot,
    TrialState,
    apply_final_rewards,
    available_sacrifices,
    can_sacrifice,
    compute_ending_id,
    compute_initial_resolve,
    compute_threat,
    final_rewards,
    gamble_outcome,
    get_dmg_base,
    resolve_action,
    round_half_up,
    sacrifice_deduction,
    sacrifice_outcome,
    start_trial,
    steady_outcome,
)
from src.core.pity import PityState
from src.core.rng import SequenceRng
from src.data.models.reward import ElixirQuality


@pytest.fixture
def fresh_state():
    """Step 1 state with threat 60 and resolve 70."""
    return TrialState(threat=60, resolve=70, hp=100, step=1)


@pytest.fixture
def rich_resources():
    return TrialResources(
        spirit_stones=200,
        pills=10,
        materials={"spirit_herb": 5},
        inheritance_points=4,
    )


class TestSetup:
    """Tests for threat and resolve setup."""

    def test_round_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(6.5) == 7
        assert round_half_up(7.2) == 7
        assert round_half_up(7.8) == 8

    def test_threat_minimum(self):
        assert compute_threat(TrialSnapshot()) == 60

    def test_threat_formula(self):
        snapshot = TrialSnapshot(
            realm="golden_core",
            danger=80,
            chains_completed=2,
            best_alchemy_quality=ElixirQuality.TIAN,
        )
        assert compute_threat(snapshot) == 120

    def test_threat_di_bonus(self):
        base = TrialSnapshot(realm="nascent_soul", danger=40)
        with_di = TrialSnapshot(realm="nascent_soul", danger=40, best_alchemy_quality=ElixirQuality.DI)
        with_xuan = TrialSnapshot(realm="nascent_soul", danger=40, best_alchemy_quality=ElixirQuality.XUAN)
        assert compute_threat(with_di) == compute_threat(base) + 6
        assert compute_threat(with_xuan) == compute_threat(base)

    def test_threat_maximum(self):
        snapshot = TrialSnapshot(realm="spirit_transformation", danger=200, chains_completed=5)
        assert compute_threat(snapshot) == 140

    def test_initial_resolve(self):
        assert compute_initial_resolve(TrialSnapshot(realm="foundation", max_hp=100)) == 70
        assert compute_initial_resolve(TrialSnapshot(realm="mortal", max_hp=85)) == 51

    def test_unknown_realm_counts_as_mortal(self):
        assert compute_initial_resolve(TrialSnapshot(realm="heavenly_emperor")) == 60

    def test_start_trial(self):
        state = start_trial(TrialSnapshot(realm="foundation"), hp=80)
        assert state.step == 1
        assert state.threat == 62
        assert state.resolve == 70
        assert state.hp == 80
        assert not state.is_terminal


class TestOutcomes:
    """Tests for per-action damage and gains."""

    def test_dmg_base(self):
        assert get_dmg_base(100, 1) == 14
        assert get_dmg_base(100, 3) == 18
        assert get_dmg_base(60, 2) == 11

    def test_steady(self):
        outcome = steady_outcome(14, 70)
        assert outcome.dmg == 7
        assert outcome.resolve_delta == 2
        assert steady_outcome(14, 10).dmg == 13

    def test_steady_minimum_damage(self):
        assert steady_outcome(14, 500).dmg == 1

    def test_gamble_success(self):
        outcome = gamble_outcome(14, 0.54)
        assert outcome.success is True
        assert outcome.dmg == 8
        assert outcome.resolve_delta == 6

    def test_gamble_failure_at_threshold(self):
        outcome = gamble_outcome(14, 0.55)
        assert outcome.success is False
        assert outcome.dmg == 20
        assert outcome.resolve_delta == 0

    @pytest.mark.parametrize("kind,dmg,heal,resolve", [
        (SacrificeKind.SPIRIT_STONES, 6, 0, 0),
        (SacrificeKind.PILLS, 14, 10, 0),
        (SacrificeKind.MATERIAL, 8, 0, 0),
        (SacrificeKind.INHERITANCE, 14, 0, 5),
    ])
    def test_sacrifice(self, kind, dmg, heal, resolve):
        outcome = sacrifice_outcome(14, kind)
        assert outcome.dmg == dmg
        assert outcome.heal == heal
        assert outcome.resolve_delta == resolve

    def test_shield_minimum_damage(self):
        assert sacrifice_outcome(5, SacrificeKind.SPIRIT_STONES).dmg == 1


class TestSacrificeAffordability:
    """Tests for sacrifice costs."""

    def test_nothing_affordable_when_broke(self):
        assert available_sacrifices(TrialResources()) == []

    def test_all_affordable(self, rich_resources):
        assert available_sacrifices(rich_resources) == list(SacrificeKind)

    def test_thresholds(self):
        assert can_sacrifice(TrialResources(spirit_stones=50), SacrificeKind.SPIRIT_STONES)
        assert not can_sacrifice(TrialResources(spirit_stones=49), SacrificeKind.SPIRIT_STONES)
        assert can_sacrifice(TrialResources(materials={"spirit_herb": 3}), SacrificeKind.MATERIAL)
        assert not can_sacrifice(TrialResources(materials={"spirit_herb": 2}), SacrificeKind.MATERIAL)
        assert not can_sacrifice(TrialResources(materials={"iron_sand": 9}), SacrificeKind.MATERIAL)

    def test_deduction(self):
        assert sacrifice_deduction(SacrificeKind.MATERIAL) == {"material": {"id": "spirit_herb", "count": 3}}
        assert sacrifice_deduction(SacrificeKind.PILLS) == {"pills": 2}
        assert sacrifice_deduction(SacrificeKind.INHERITANCE) == {"inheritance_points": 2}


class TestEndings:
    """Tests for ending classification and rewards."""

    def test_ascend_threshold(self):
        assert compute_ending_id(hp=10, resolve=80, threat=60) == EndingId.ASCEND

    def test_retire_threshold(self):
        assert compute_ending_id(hp=10, resolve=79, threat=60) == EndingId.RETIRE
        assert compute_ending_id(hp=10, resolve=55, threat=60) == EndingId.RETIRE

    def test_demon(self):
        assert compute_ending_id(hp=10, resolve=54, threat=60) == EndingId.DEMON

    def test_dead_regardless_of_score(self):
        assert compute_ending_id(hp=0, resolve=200, threat=60) == EndingId.DEAD

    def test_rewards(self):
        assert final_rewards(EndingId.ASCEND).shards_bonus == 3
        assert final_rewards(EndingId.RETIRE).legacy_bonus == 2
        demon = final_rewards(EndingId.DEMON)
        assert demon.demon_unlock
        assert demon.shards_bonus == 1
        assert not final_rewards(EndingId.DEAD).demon_unlock

    def test_apply_rewards(self):
        pity = apply_final_rewards(PityState(kungfu_shards=10), final_rewards("ascend"))
        assert pity.kungfu_shards == 13


class TestResolveAction:
    """Tests for step transitions."""

    def test_steady_run_to_retire(self, fresh_state):
        state = fresh_state
        results = []
        for _ in range(3):
            result = resolve_action(state, TrialAction.STEADY)
            results.append(result)
            state = result.state

        assert [r.outcome.dmg for r in results] == [2, 4, 6]
        assert [r.ending for r in results] == [None, None, EndingId.RETIRE]
        assert state.hp == 88
        assert state.resolve == 76
        assert state.step == 4
        assert state.is_complete

    def test_lucky_gambles_ascend(self, fresh_state):
        rng = SequenceRng([0.0, 0.0, 0.0])
        state = fresh_state
        for _ in range(3):
            result = resolve_action(state, TrialAction.GAMBLE, rng=rng)
            state = result.state

        assert rng.consumed == 3
        assert state.hp == 80
        assert state.resolve == 88
        assert result.ending == EndingId.ASCEND

    def test_gamble_consumes_one_draw(self, fresh_state):
        rng = SequenceRng([0.9, 0.1])
        result = resolve_action(fresh_state, "gamble", rng=rng)
        assert rng.consumed == 1
        assert result.outcome.success is False

    def test_death_ends_immediately(self):
        state = TrialState(threat=140, resolve=0, hp=5, step=1)
        result = resolve_action(state, TrialAction.STEADY)
        assert result.outcome.dmg == 19
        assert result.state.hp == -14
        assert result.state.step == 2
        assert result.ending == EndingId.DEAD
        assert result.state.is_terminal

    def test_terminal_state_rejected(self):
        with pytest.raises(ValueError):
            resolve_action(TrialState(threat=60, resolve=70, hp=0, step=2), TrialAction.STEADY)
        with pytest.raises(ValueError):
            resolve_action(TrialState(threat=60, resolve=70, hp=50, step=4), TrialAction.STEADY)

    def test_gamble_requires_rng(self, fresh_state):
        with pytest.raises(ValueError):
            resolve_action(fresh_state, TrialAction.GAMBLE)

    def test_sacrifice_requires_arguments(self, fresh_state):
        with pytest.raises(ValueError):
            resolve_action(fresh_state, TrialAction.SACRIFICE, sacrifice_kind=SacrificeKind.PILLS)

    def test_unaffordable_sacrifice_not_executed(self, fresh_state):
        result = resolve_action(
            fresh_state,
            TrialAction.SACRIFICE,
            sacrifice_kind=SacrificeKind.SPIRIT_STONES,
            resources=TrialResources(spirit_stones=10),
        )
        assert not result.executed
        assert result.state is fresh_state
        assert result.outcome is None
        assert result.ending is None

    def test_heal_capped_at_max_hp(self, rich_resources):
        state = TrialState(threat=60, resolve=70, hp=95, step=1)
        uncapped = resolve_action(
            state, TrialAction.SACRIFICE,
            sacrifice_kind=SacrificeKind.PILLS, resources=rich_resources,
        )
        capped = resolve_action(
            state, TrialAction.SACRIFICE,
            sacrifice_kind=SacrificeKind.PILLS, resources=rich_resources, max_hp=95,
        )
        assert uncapped.state.hp == 96
        assert capped.state.hp == 95

    def test_heal_can_prevent_death(self, rich_resources):
        """Death is checked after damage and heal are both applied."""
        state = TrialState(threat=60, resolve=70, hp=5, step=1)
        result = resolve_action(
            state, TrialAction.SACRIFICE,
            sacrifice_kind=SacrificeKind.PILLS, resources=rich_resources,
        )
        assert result.state.hp == 6
        assert result.ending is None

    def test_inheritance_adds_resolve(self, fresh_state, rich_resources):
        result = resolve_action(
            fresh_state, TrialAction.SACRIFICE,
            sacrifice_kind=SacrificeKind.INHERITANCE, resources=rich_resources,
        )
        assert result.state.resolve == 75
        assert result.state.hp == 91
