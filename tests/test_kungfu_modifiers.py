"""Tests for skill book modifier merging."""

import pytest

from src.core.kungfu_modifiers import (
    LootKungfuMod,
    apply_modifier_caps,
    loot_kungfu_mod,
    merge_equipped_modifiers,
    merge_modifiers,
    modifiers_from_effects,
)


class TestMergeModifiers:
    """Tests for merge rules."""

    def test_multiplicative_keys(self):
        merged = merge_modifiers([
            {"explore_rare_weight_mult": 1.2},
            {"explore_rare_weight_mult": 1.5},
        ])
        assert merged["explore_rare_weight_mult"] == pytest.approx(1.8)

    def test_additive_keys(self):
        merged = merge_modifiers([{"explore_retreat_add": 0.1}, {"explore_retreat_add": 0.05}])
        assert merged["explore_retreat_add"] == pytest.approx(0.15)

    def test_choice_add_floored(self):
        merged = merge_modifiers([{"event_choice_add": 0.6}, {"event_choice_add": 0.6}])
        assert merged["event_choice_add"] == 1

    def test_disjoint_keys_kept(self):
        merged = merge_modifiers([{"a_mult": 2.0}, {"b_add": 3}])
        assert merged == {"a_mult": 2.0, "b_add": 3}

    def test_empty(self):
        assert merge_modifiers([]) == {}


class TestCaps:
    """Tests for soft caps."""

    def test_upper_cap(self):
        merged = merge_equipped_modifiers([
            {"breakthrough_success_add": 0.2},
            {"breakthrough_success_add": 0.2},
        ])
        assert merged["breakthrough_success_add"] == pytest.approx(0.3)

    def test_lower_cap_on_multiplier(self):
        merged = merge_equipped_modifiers([{"alchemy_boom_mul": 0.5}, {"alchemy_boom_mul": 0.5}])
        assert merged["alchemy_boom_mul"] == pytest.approx(0.3)

    def test_uncapped_key_untouched(self):
        assert apply_modifier_caps({"explore_rare_weight_mult": 9.0}) == {"explore_rare_weight_mult": 9.0}


class TestEffectTranslation:
    """Tests for effect name aliases."""

    def test_legend_effect_reaches_loot_mod(self):
        merged = merge_equipped_modifiers([{"loot_legend_weight_mul": 2.0}])
        assert loot_kungfu_mod(merged).loot_legend_mul == 2.0

    def test_rare_effect_boosts_rare_and_epic(self):
        mod = loot_kungfu_mod(merge_equipped_modifiers([{"loot_rare_weight_mul": 1.5}]))
        assert mod.loot_rare_mul == 1.5
        assert mod.effective_epic_mul == 1.5

    def test_effects_mapping(self):
        book = modifiers_from_effects(effects={"breakthrough_rate_add": 0.1, "unknown_effect": 9})
        assert book == {"breakthrough_success_add": 0.1}

    def test_direct_key_wins_over_alias(self):
        book = modifiers_from_effects(
            modifiers={"explore_legend_weight_mult": 3.0},
            effects={"loot_legend_weight_mul": 2.0},
        )
        assert book == {"explore_legend_weight_mult": 3.0}

    def test_aliases_from_several_books_multiply(self):
        merged = merge_equipped_modifiers([
            {"loot_legend_weight_mul": 2.0},
            {"explore_legend_weight_mult": 1.5},
        ])
        assert merged["explore_legend_weight_mult"] == pytest.approx(3.0)

    def test_alias_is_capped(self):
        merged = merge_equipped_modifiers([{"alchemy_boom_rate_mul": 0.1}])
        assert merged == {"alchemy_boom_mul": pytest.approx(0.3)}


class TestLootKungfuMod:
    """Tests for the loot projection."""

    def test_defaults_neutral(self):
        mod = loot_kungfu_mod({})
        assert mod == LootKungfuMod()
        assert mod.effective_epic_mul == 1.0

    def test_epic_falls_back_to_rare(self):
        mod = loot_kungfu_mod({"explore_rare_weight_mult": 1.4})
        assert mod.loot_rare_mul == 1.4
        assert mod.effective_epic_mul == 1.4

    def test_explicit_epic(self):
        mod = loot_kungfu_mod({"explore_rare_weight_mult": 1.4, "explore_epic_weight_mult": 1.1})
        assert mod.effective_epic_mul == 1.1

    def test_legend(self):
        assert loot_kungfu_mod({"explore_legend_weight_mult": 2.0}).loot_legend_mul == 2.0
