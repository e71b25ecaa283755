"""Reward engine tuning constants."""

from typing import Final

# =============================================================================
# LOOT WEIGHTS
# =============================================================================
# Base rarity weight by danger band.
# Format: (exclusive upper danger bound, [common, rare, epic, legendary])
# The last band has no upper bound.
DANGER_BANDS: Final[tuple[tuple[float, tuple[int, int, int, int]], ...]] = (
    (30, (100, 20, 0, 0)),            # epic locked below 30
    (50, (100, 30, 5, 0)),
    (70, (100, 40, 10, 0)),           # legendary locked below 70
    (85, (100, 50, 20, 2)),
    (float("inf"), (100, 60, 30, 5)),
)

# Streak bonuses, highest threshold first. Only the first matching row applies.
# Format: (min streak, {rarity: multiplier})
STREAK_MULTIPLIERS: Final[tuple[tuple[int, dict[str, float]], ...]] = (
    (8, {"epic": 1.3, "legendary": 1.2}),
    (5, {"rare": 1.2, "epic": 1.1}),
    (3, {"rare": 1.1}),
)

# =============================================================================
# PITY
# =============================================================================
# Alchemy: brews in a row whose best quality stayed below "di"
PITY_ALCHEMY_THRESHOLD: Final[int] = 6
PITY_ALCHEMY_HARD: Final[int] = 10       # next brew is at least "di"
PITY_ALCHEMY_SOFT_SHIFT: Final[float] = 0.2
PITY_ALCHEMY_HARD_SHIFT: Final[float] = 0.35

# Exploration: loot rolls without a legendary (soft and hard coincide)
PITY_LEGEND_LOOT_THRESHOLD: Final[int] = 12
PITY_LEGEND_LOOT_HARD: Final[int] = 12   # next roll is legendary
PITY_LEGEND_LOOT_SOFT_MUL: Final[float] = 2.0
PITY_LEGEND_LOOT_HARD_MUL: Final[float] = 50.0

# Skill books: drops without a legendary book (no hard floor)
PITY_LEGEND_KUNGFU_THRESHOLD: Final[int] = 10
PITY_LEGEND_KUNGFU_SOFT_MUL: Final[float] = 1.5

# =============================================================================
# SHARD EXCHANGE
# =============================================================================
SHARD_COST: Final[dict[str, int]] = {
    "rare": 30,
    "epic": 60,
    "legendary": 100,
}

# =============================================================================
# ALCHEMY QUALITY
# =============================================================================
# Quality weights [fan, xuan, di, tian] by recipe tier
QUALITY_WEIGHTS_BY_TIER: Final[dict[str, tuple[int, int, int, int]]] = {
    "fan": (100, 0, 0, 0),
    "xuan": (78, 22, 0, 0),
    "di": (62, 28, 10, 0),
    "tian": (66, 24, 8, 2),
}

# Furnace heat multipliers [fan, xuan, di, tian]
HEAT_QUALITY_MULTIPLIERS: Final[dict[str, tuple[float, float, float, float]]] = {
    "steady": (1.15, 1.05, 0.85, 0.80),
    "push": (1.0, 1.0, 1.0, 1.0),
    "blast": (0.85, 0.95, 1.15, 1.20),
}

# How a positive quality shift moves probability mass [fan, xuan, di, tian]
QUALITY_SHIFT_SPREAD: Final[tuple[float, float, float, float]] = (-0.5, -0.3, 0.4, 0.4)
QUALITY_SHIFT_FLOOR: Final[float] = 0.01

# =============================================================================
# KUNGFU MODIFIERS
# =============================================================================
# Skill book effect names -> modifier keys they feed
KUNGFU_EFFECT_TO_MODIFIER: Final[dict[str, str]] = {
    "explore_retreat_add": "explore_retreat_add",
    "explore_danger_inc_mul": "explore_danger_inc_mult",
    "loot_rare_weight_mul": "explore_rare_weight_mult",
    "loot_legend_weight_mul": "explore_legend_weight_mult",
    "alchemy_boom_rate_mul": "alchemy_boom_mul",
    "alchemy_quality_shift": "alchemy_quality_shift",
    "breakthrough_rate_add": "breakthrough_success_add",
}

KUNGFU_MODIFIER_CAPS: Final[dict[str, tuple[float, float]]] = {
    "breakthrough_success_add": (0.0, 0.3),
    "explore_retreat_add": (0.0, 0.25),
    "alchemy_boom_mul": (0.3, 1.5),
    "alchemy_quality_shift": (-0.2, 0.2),
}

# =============================================================================
# FINAL TRIAL
# =============================================================================
REALMS: Final[tuple[str, ...]] = (
    "mortal",
    "qi_refining",
    "foundation",
    "golden_core",
    "nascent_soul",
    "spirit_transformation",
)

TRIAL_STEPS: Final[int] = 3

THREAT_BASE: Final[int] = 50
THREAT_PER_REALM: Final[int] = 6
THREAT_PER_DANGER: Final[float] = 0.3
THREAT_PER_CHAIN: Final[int] = 8
THREAT_ALCHEMY_BONUS: Final[dict[str, int]] = {
    "tian": 12,
    "di": 6,
}
THREAT_MIN: Final[int] = 60
THREAT_MAX: Final[int] = 140

RESOLVE_HP_RATIO: Final[float] = 0.6
RESOLVE_PER_REALM: Final[int] = 5
DEFAULT_MAX_HP: Final[int] = 100

DMG_THREAT_RATIO: Final[float] = 0.12
DMG_PER_STEP: Final[int] = 2

STEADY_RESOLVE_RATIO: Final[float] = 0.1
STEADY_RESOLVE_GAIN: Final[int] = 2

GAMBLE_SUCCESS_RATE: Final[float] = 0.55
GAMBLE_SUCCESS_DMG_MUL: Final[float] = 0.6
GAMBLE_FAIL_DMG_MUL: Final[float] = 1.4
GAMBLE_SUCCESS_RESOLVE_GAIN: Final[int] = 6

# Ending score cut-offs (score = resolve - threat)
ASCEND_MIN_SCORE: Final[int] = 20
RETIRE_MIN_SCORE: Final[int] = -5
