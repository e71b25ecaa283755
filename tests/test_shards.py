"""Tests for the shard exchange."""

import pytest

from src.core.pity import PityState, add_kungfu_shards
from src.core.shards import can_afford_exchange, shard_cost, spend_kungfu_shards
from src.data.models.reward import RarityTier


class TestShardCost:
    """Tests for exchange prices."""

    @pytest.mark.parametrize("rarity,cost", [
        (RarityTier.RARE, 30),
        (RarityTier.EPIC, 60),
        (RarityTier.LEGENDARY, 100),
        ("epic", 60),
    ])
    def test_prices(self, rarity, cost):
        assert shard_cost(rarity) == cost

    def test_common_not_for_sale(self):
        with pytest.raises(ValueError):
            shard_cost(RarityTier.COMMON)

    def test_can_afford(self):
        assert can_afford_exchange(PityState(kungfu_shards=30), RarityTier.RARE)
        assert not can_afford_exchange(PityState(kungfu_shards=29), RarityTier.RARE)


class TestSpendShards:
    """Tests for all-or-nothing exchanges."""

    def test_insufficient_balance_leaves_state(self):
        state = PityState(kungfu_shards=29, legend_loot_pity=3)
        result = spend_kungfu_shards(state, RarityTier.RARE)
        assert not result.success
        assert result.cost == 30
        assert result.new_state is state

    def test_exact_balance(self):
        result = spend_kungfu_shards(PityState(kungfu_shards=100), RarityTier.LEGENDARY)
        assert result.success
        assert result.new_state.kungfu_shards == 0

    def test_deducts_exact_cost(self):
        state = PityState(kungfu_shards=100, legend_kungfu_pity=4)
        result = spend_kungfu_shards(state, RarityTier.EPIC)
        assert result.success
        assert result.new_state.kungfu_shards == 40
        assert result.new_state.legend_kungfu_pity == 4
        assert state.kungfu_shards == 100

    def test_common_raises(self):
        with pytest.raises(ValueError):
            spend_kungfu_shards(PityState(kungfu_shards=500), RarityTier.COMMON)

    def test_earn_then_spend(self):
        state = add_kungfu_shards(PityState(), 20)
        assert not spend_kungfu_shards(state, RarityTier.RARE).success

        state = add_kungfu_shards(state, 20)
        result = spend_kungfu_shards(state, RarityTier.RARE)
        assert result.success
        assert result.new_state.kungfu_shards == 10
