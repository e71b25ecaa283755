"""Alchemy quality rolling.

A recipe defines a base probability for each elixir quality. Furnace heat
and quality shifts (from skill books and alchemy pity) move probability
mass toward the higher qualities before a single draw picks the result.
"""

from enum import StrEnum
from typing import Mapping, Optional

from src.core.constants import (
    HEAT_QUALITY_MULTIPLIERS,
    QUALITY_SHIFT_FLOOR,
    QUALITY_SHIFT_SPREAD,
    QUALITY_WEIGHTS_BY_TIER,
)
from src.core.pity import (
    ALCHEMY_PITY_FLOOR,
    DEFAULT_PITY_CONFIG,
    PityConfig,
    PityState,
    alchemy_pity_quality_shift,
    should_force_alchemy_floor,
)
from src.core.rng import Rng
from src.data.models.reward import ElixirQuality

QualityDist = dict[ElixirQuality, float]


class HeatLevel(StrEnum):
    """Furnace heat chosen for a brew."""
    STEADY = "steady"
    PUSH = "push"
    BLAST = "blast"


def normalize_dist(weights: Mapping[ElixirQuality, float]) -> QualityDist:
    """Scale weights to sum to 1; an empty distribution becomes all "fan"."""
    total = sum(weights.get(q, 0.0) for q in ElixirQuality)
    if total <= 0:
        return {q: (1.0 if q == ElixirQuality.FAN else 0.0) for q in ElixirQuality}
    return {q: weights.get(q, 0.0) / total for q in ElixirQuality}


def quality_base_for_tier(recipe_tier: str) -> QualityDist:
    """Normalized default quality base of a recipe tier (fan/xuan/di/tian)."""
    weights = QUALITY_WEIGHTS_BY_TIER[recipe_tier]
    return normalize_dist(dict(zip(ElixirQuality, map(float, weights))))


def adjust_quality_distribution(
    quality_base: Mapping[ElixirQuality, float],
    heat: HeatLevel = HeatLevel.PUSH,
    quality_shift: float = 0.0,
) -> QualityDist:
    """
    Apply heat and quality shift to a base distribution.

    Args:
        quality_base: Base probability per quality.
        heat: Furnace heat.
        quality_shift: Positive values move mass from fan/xuan to di/tian.

    Returns:
        Normalized distribution.
    """
    multipliers = HEAT_QUALITY_MULTIPLIERS[HeatLevel(heat).value]
    adjusted = {
        q: quality_base.get(q, 0.0) * mul
        for q, mul in zip(ElixirQuality, multipliers)
    }

    if quality_shift > 0:
        for q, spread in zip(ElixirQuality, QUALITY_SHIFT_SPREAD):
            if spread < 0:
                adjusted[q] = max(QUALITY_SHIFT_FLOOR, adjusted[q] + quality_shift * spread)
            else:
                adjusted[q] = adjusted[q] + quality_shift * spread

    return normalize_dist(adjusted)


def roll_quality(
    rng: Rng,
    quality_base: Mapping[ElixirQuality, float],
    heat: Optional[HeatLevel] = None,
    quality_shift: float = 0.0,
) -> ElixirQuality:
    """
    Roll one elixir quality. Consumes exactly 1 value from ``rng``.

    The base distribution is used as-is when there is no heat and no shift.
    """
    if heat is not None or quality_shift != 0:
        dist = adjust_quality_distribution(quality_base, heat or HeatLevel.PUSH, quality_shift)
    else:
        dist = dict(quality_base)

    draw = rng.next()
    cumulative = 0.0
    for quality in ElixirQuality:
        cumulative += dist.get(quality, 0.0)
        if draw <= cumulative:
            return quality
    return ElixirQuality.TIAN


def roll_quality_with_pity(
    rng: Rng,
    quality_base: Mapping[ElixirQuality, float],
    pity: PityState,
    heat: Optional[HeatLevel] = None,
    kungfu_shift: float = 0.0,
    config: PityConfig = DEFAULT_PITY_CONFIG,
) -> ElixirQuality:
    """
    Roll a quality with the alchemy pity applied. Consumes exactly 1 value.

    Soft pity adds its shift on top of ``kungfu_shift``. At hard pity the
    result is lifted to at least "di".
    """
    shift = kungfu_shift + alchemy_pity_quality_shift(pity, config)
    quality = roll_quality(rng, quality_base, heat, shift)
    if should_force_alchemy_floor(pity, config) and quality < ALCHEMY_PITY_FLOOR:
        return ALCHEMY_PITY_FLOOR
    return quality


def best_quality(
    a: Optional[ElixirQuality],
    b: Optional[ElixirQuality],
) -> Optional[ElixirQuality]:
    """Higher of two qualities; None means nothing brewed."""
    if a is None:
        return b
    if b is None:
        return a
    return a if a >= b else b
