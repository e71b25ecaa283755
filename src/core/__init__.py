# Core reward engine modules
from .constants import (
    DANGER_BANDS,
    STREAK_MULTIPLIERS,
    PITY_ALCHEMY_THRESHOLD,
    PITY_ALCHEMY_HARD,
    PITY_LEGEND_LOOT_THRESHOLD,
    PITY_LEGEND_LOOT_HARD,
    PITY_LEGEND_KUNGFU_THRESHOLD,
    SHARD_COST,
    GAMBLE_SUCCESS_RATE,
    REALMS,
)

from .rng import Rng, DefaultRng, SeededRng, SequenceRng, NumpyRng, RngExhaustedError, rand_int, make_rng
from .pity import (
    PityState,
    PityTrack,
    PityConfig,
    DEFAULT_PITY_CONFIG,
    LootPityMod,
    update_pity_after_alchemy,
    alchemy_pity_quality_shift,
    should_force_alchemy_floor,
    update_pity_after_loot,
    legend_loot_weight_mul,
    should_force_legend_loot,
    loot_pity_mod,
    update_pity_after_kungfu_drop,
    legend_kungfu_weight_mul,
    kungfu_pity_mod,
    add_kungfu_shards,
)
from .kungfu_modifiers import (
    LootKungfuMod,
    merge_modifiers,
    merge_equipped_modifiers,
    modifiers_from_effects,
    loot_kungfu_mod,
)
from .loot import (
    LootDrop,
    get_loot_rarity_weight,
    get_loot_rarity_weights,
    roll_loot_drop,
    roll_loot_with_pity,
    highest_rarity_drop,
)
from .shards import ShardSpendResult, shard_cost, can_afford_exchange, spend_kungfu_shards
from .alchemy import HeatLevel, roll_quality, roll_quality_with_pity, quality_base_for_tier, best_quality
from .final_trial import (
    TrialAction,
    SacrificeKind,
    EndingId,
    TrialSnapshot,
    TrialResources,
    TrialState,
    ActionOutcome,
    FinalRewards,
    TrialStepResult,
    compute_threat,
    compute_initial_resolve,
    start_trial,
    get_dmg_base,
    resolve_action,
    compute_ending_id,
    final_rewards,
    apply_final_rewards,
)
from .probability import DropProbabilityCalculator

__all__ = [
    # Constants
    "DANGER_BANDS",
    "STREAK_MULTIPLIERS",
    "PITY_ALCHEMY_THRESHOLD",
    "PITY_ALCHEMY_HARD",
    "PITY_LEGEND_LOOT_THRESHOLD",
    "PITY_LEGEND_LOOT_HARD",
    "PITY_LEGEND_KUNGFU_THRESHOLD",
    "SHARD_COST",
    "GAMBLE_SUCCESS_RATE",
    "REALMS",
    # Random sources
    "Rng",
    "DefaultRng",
    "SeededRng",
    "SequenceRng",
    "NumpyRng",
    "RngExhaustedError",
    "rand_int",
    "make_rng",
    # Pity
    "PityState",
    "PityTrack",
    "PityConfig",
    "DEFAULT_PITY_CONFIG",
    "LootPityMod",
    "update_pity_after_alchemy",
    "alchemy_pity_quality_shift",
    "should_force_alchemy_floor",
    "update_pity_after_loot",
    "legend_loot_weight_mul",
    "should_force_legend_loot",
    "loot_pity_mod",
    "update_pity_after_kungfu_drop",
    "legend_kungfu_weight_mul",
    "kungfu_pity_mod",
    "add_kungfu_shards",
    # Kungfu
    "LootKungfuMod",
    "merge_modifiers",
    "merge_equipped_modifiers",
    "modifiers_from_effects",
    "loot_kungfu_mod",
    # Loot
    "LootDrop",
    "get_loot_rarity_weight",
    "get_loot_rarity_weights",
    "roll_loot_drop",
    "roll_loot_with_pity",
    "highest_rarity_drop",
    # Shards
    "ShardSpendResult",
    "shard_cost",
    "can_afford_exchange",
    "spend_kungfu_shards",
    # Alchemy
    "HeatLevel",
    "roll_quality",
    "roll_quality_with_pity",
    "quality_base_for_tier",
    "best_quality",
    # Final trial
    "TrialAction",
    "SacrificeKind",
    "EndingId",
    "TrialSnapshot",
    "TrialResources",
    "TrialState",
    "ActionOutcome",
    "FinalRewards",
    "TrialStepResult",
    "compute_threat",
    "compute_initial_resolve",
    "start_trial",
    "get_dmg_base",
    "resolve_action",
    "compute_ending_id",
    "final_rewards",
    "apply_final_rewards",
    # Analysis
    "DropProbabilityCalculator",
]
