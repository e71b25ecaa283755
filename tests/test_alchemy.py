"""Tests for alchemy quality rolling."""

import pytest

from src.core.alchemy import (
    HeatLevel,
    adjust_quality_distribution,
    best_quality,
    normalize_dist,
    quality_base_for_tier,
    roll_quality,
    roll_quality_with_pity,
)
from src.core.pity import PityState
from src.core.rng import SequenceRng
from src.data.models.reward import ElixirQuality

FAN, XUAN, DI, TIAN = ElixirQuality


class TestDistributions:
    """Tests for base and adjusted distributions."""

    def test_tier_base(self):
        base = quality_base_for_tier("xuan")
        assert base[FAN] == pytest.approx(0.78)
        assert base[XUAN] == pytest.approx(0.22)
        assert base[DI] == 0
        assert base[TIAN] == 0

    @pytest.mark.parametrize("tier", ["fan", "xuan", "di", "tian"])
    def test_tier_base_sums_to_one(self, tier):
        assert sum(quality_base_for_tier(tier).values()) == pytest.approx(1.0)

    def test_empty_distribution_becomes_fan(self):
        assert normalize_dist({}) == {FAN: 1.0, XUAN: 0.0, DI: 0.0, TIAN: 0.0}

    def test_push_without_shift_is_identity(self):
        base = quality_base_for_tier("tian")
        adjusted = adjust_quality_distribution(base)
        for quality in ElixirQuality:
            assert adjusted[quality] == pytest.approx(base[quality])

    def test_steady_cannot_create_quality(self):
        adjusted = adjust_quality_distribution(quality_base_for_tier("fan"), HeatLevel.STEADY)
        assert adjusted[FAN] == pytest.approx(1.0)

    def test_blast_favors_high_quality(self):
        base = quality_base_for_tier("di")
        adjusted = adjust_quality_distribution(base, HeatLevel.BLAST)
        assert adjusted[DI] > base[DI]
        assert adjusted[FAN] < base[FAN]

    def test_shift_moves_mass_upward(self):
        adjusted = adjust_quality_distribution(quality_base_for_tier("xuan"), quality_shift=0.2)
        assert adjusted[FAN] == pytest.approx(0.68)
        assert adjusted[XUAN] == pytest.approx(0.16)
        assert adjusted[DI] == pytest.approx(0.08)
        assert adjusted[TIAN] == pytest.approx(0.08)

    def test_shift_respects_floor(self):
        adjusted = adjust_quality_distribution(quality_base_for_tier("fan"), quality_shift=0.35)
        assert adjusted[XUAN] > 0


class TestRollQuality:
    """Tests for single quality rolls."""

    def test_consumes_one_draw(self):
        rng = SequenceRng([0.5, 0.5])
        roll_quality(rng, quality_base_for_tier("di"), HeatLevel.BLAST, 0.2)
        assert rng.consumed == 1

    def test_cumulative_selection(self):
        base = quality_base_for_tier("xuan")
        assert roll_quality(SequenceRng([0.5]), base) == FAN
        assert roll_quality(SequenceRng([0.78]), base) == FAN
        assert roll_quality(SequenceRng([0.9]), base) == XUAN

    def test_fan_recipe_always_fan(self):
        base = quality_base_for_tier("fan")
        for draw in (0.0, 0.5, 0.999):
            assert roll_quality(SequenceRng([draw]), base) == FAN


class TestRollQualityWithPity:
    """Tests for pity-assisted brewing."""

    def test_no_pity_no_lift(self):
        quality = roll_quality_with_pity(SequenceRng([0.0]), quality_base_for_tier("fan"), PityState())
        assert quality == FAN

    def test_hard_pity_lifts_to_di(self):
        quality = roll_quality_with_pity(
            SequenceRng([0.0]), quality_base_for_tier("fan"), PityState(alchemy_top_pity=10)
        )
        assert quality == DI

    def test_hard_pity_keeps_tian(self):
        quality = roll_quality_with_pity(
            SequenceRng([0.9999]), quality_base_for_tier("fan"), PityState(alchemy_top_pity=10)
        )
        assert quality == TIAN

    def test_soft_pity_only_shifts(self):
        """At soft pity a low draw can still give fan."""
        quality = roll_quality_with_pity(
            SequenceRng([0.0]), quality_base_for_tier("fan"), PityState(alchemy_top_pity=6)
        )
        assert quality == FAN


class TestBestQuality:
    """Tests for comparing batch results."""

    def test_higher_wins(self):
        assert best_quality(XUAN, DI) == DI
        assert best_quality(TIAN, FAN) == TIAN

    def test_none_handling(self):
        assert best_quality(None, XUAN) == XUAN
        assert best_quality(FAN, None) == FAN
        assert best_quality(None, None) is None
