# Data Models
from .reward import (
    RarityTier,
    ElixirQuality,
    RewardType,
    MaterialReward,
    FragmentReward,
    CurrencyPackReward,
    RelicFragmentReward,
    SkillBookReward,
    RewardItem,
    LootTableDrop,
    LootTableEntry,
    describe_reward,
    reward_item_adapter,
)

__all__ = [
    "RarityTier",
    "ElixirQuality",
    "RewardType",
    "MaterialReward",
    "FragmentReward",
    "CurrencyPackReward",
    "RelicFragmentReward",
    "SkillBookReward",
    "RewardItem",
    "LootTableDrop",
    "LootTableEntry",
    "describe_reward",
    "reward_item_adapter",
]
