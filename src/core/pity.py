"""Pity Ledger.

Three escalation tracks (alchemy quality, exploration legendary loot and
legendary skill books) plus the kungfu shard balance. Every function is pure:
it takes a PityState snapshot and returns a new one, never mutating the input.

Each track counts consecutive "bad" outcomes and resets on a "good" one.
Past the soft threshold a moderate modifier applies; past the hard threshold
a stronger one applies or the next outcome is forced.
"""

import logging
from dataclasses import dataclass, field, fields, replace
from typing import Optional

from src.core.constants import (
    PITY_ALCHEMY_THRESHOLD,
    PITY_ALCHEMY_HARD,
    PITY_ALCHEMY_SOFT_SHIFT,
    PITY_ALCHEMY_HARD_SHIFT,
    PITY_LEGEND_LOOT_THRESHOLD,
    PITY_LEGEND_LOOT_HARD,
    PITY_LEGEND_LOOT_SOFT_MUL,
    PITY_LEGEND_LOOT_HARD_MUL,
    PITY_LEGEND_KUNGFU_THRESHOLD,
    PITY_LEGEND_KUNGFU_SOFT_MUL,
)
from src.data.models.reward import ElixirQuality, RarityTier

logger = logging.getLogger(__name__)

ALCHEMY_PITY_FLOOR = ElixirQuality.DI


@dataclass(frozen=True)
class PityState:
    """Pity counters and shard balance owned by the player's meta record."""

    alchemy_top_pity: int = 0
    legend_loot_pity: int = 0
    legend_kungfu_pity: int = 0
    kungfu_shards: int = 0

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if value < 0:
                raise ValueError(f"{f.name} cannot be negative (got {value})")

    def to_dict(self) -> dict[str, int]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class PityTrack:
    """
    Thresholds and modifier values of one escalation track.

    ``hard_threshold`` of None means the track has no hard stage.
    """

    soft_threshold: int
    soft_value: float
    hard_threshold: Optional[int] = None
    hard_value: Optional[float] = None
    neutral_value: float = 1.0

    def modifier(self, counter: int) -> float:
        """Modifier value for the current counter."""
        if self.hard_threshold is not None and counter >= self.hard_threshold:
            return self.hard_value if self.hard_value is not None else self.soft_value
        if counter >= self.soft_threshold:
            return self.soft_value
        return self.neutral_value

    def is_hard(self, counter: int) -> bool:
        return self.hard_threshold is not None and counter >= self.hard_threshold


@dataclass(frozen=True)
class PityConfig:
    """Tuning for all pity tracks."""

    alchemy: PityTrack = field(default_factory=lambda: PityTrack(
        soft_threshold=PITY_ALCHEMY_THRESHOLD,
        soft_value=PITY_ALCHEMY_SOFT_SHIFT,
        hard_threshold=PITY_ALCHEMY_HARD,
        hard_value=PITY_ALCHEMY_HARD_SHIFT,
        neutral_value=0.0,
    ))
    legend_loot: PityTrack = field(default_factory=lambda: PityTrack(
        soft_threshold=PITY_LEGEND_LOOT_THRESHOLD,
        soft_value=PITY_LEGEND_LOOT_SOFT_MUL,
        hard_threshold=PITY_LEGEND_LOOT_HARD,
        hard_value=PITY_LEGEND_LOOT_HARD_MUL,
    ))
    legend_kungfu: PityTrack = field(default_factory=lambda: PityTrack(
        soft_threshold=PITY_LEGEND_KUNGFU_THRESHOLD,
        soft_value=PITY_LEGEND_KUNGFU_SOFT_MUL,
    ))


DEFAULT_PITY_CONFIG = PityConfig()


@dataclass(frozen=True)
class LootPityMod:
    """Pity-derived loot modifier: legendary weight multiplier or a forced legendary."""

    legend_weight_mul: float = 1.0
    force_legendary: bool = False


def _advance(counter: int, good_outcome: bool) -> int:
    return 0 if good_outcome else counter + 1


# =============================================================================
# ALCHEMY
# =============================================================================

def update_pity_after_alchemy(
    top_quality: Optional[ElixirQuality],
    state: PityState,
) -> PityState:
    """
    Advance the alchemy track after a brew batch.

    Args:
        top_quality: Best quality of the batch, None if nothing was produced.
        state: Current pity snapshot.

    Returns:
        New snapshot; counter reset when the batch reached "di" or better.
    """
    good = top_quality is not None and ElixirQuality(top_quality) >= ALCHEMY_PITY_FLOOR
    return replace(state, alchemy_top_pity=_advance(state.alchemy_top_pity, good))


def alchemy_pity_quality_shift(
    state: PityState,
    config: PityConfig = DEFAULT_PITY_CONFIG,
) -> float:
    """Quality shift toward di/tian for the next brew."""
    return config.alchemy.modifier(state.alchemy_top_pity)


def should_force_alchemy_floor(
    state: PityState,
    config: PityConfig = DEFAULT_PITY_CONFIG,
) -> bool:
    """Whether the next brew must reach at least "di"."""
    return config.alchemy.is_hard(state.alchemy_top_pity)


# =============================================================================
# EXPLORATION LOOT
# =============================================================================

def update_pity_after_loot(had_legendary: bool, state: PityState) -> PityState:
    """Reset on a legendary drop, otherwise count one more miss."""
    return replace(state, legend_loot_pity=_advance(state.legend_loot_pity, had_legendary))


def legend_loot_weight_mul(
    state: PityState,
    config: PityConfig = DEFAULT_PITY_CONFIG,
) -> float:
    return config.legend_loot.modifier(state.legend_loot_pity)


def should_force_legend_loot(
    state: PityState,
    config: PityConfig = DEFAULT_PITY_CONFIG,
) -> bool:
    return config.legend_loot.is_hard(state.legend_loot_pity)


def loot_pity_mod(
    state: PityState,
    config: PityConfig = DEFAULT_PITY_CONFIG,
) -> LootPityMod:
    """Build the loot modifier for the next exploration roll."""
    force = should_force_legend_loot(state, config)
    if force:
        logger.debug("Hard loot pity reached at %d misses", state.legend_loot_pity)
    return LootPityMod(
        legend_weight_mul=legend_loot_weight_mul(state, config),
        force_legendary=force,
    )


# =============================================================================
# SKILL BOOKS
# =============================================================================

def update_pity_after_kungfu_drop(rarity: RarityTier, state: PityState) -> PityState:
    """Reset on a legendary skill book, otherwise count one more miss."""
    is_legendary = RarityTier(rarity) == RarityTier.LEGENDARY
    return replace(state, legend_kungfu_pity=_advance(state.legend_kungfu_pity, is_legendary))


def legend_kungfu_weight_mul(
    state: PityState,
    config: PityConfig = DEFAULT_PITY_CONFIG,
) -> float:
    return config.legend_kungfu.modifier(state.legend_kungfu_pity)


def kungfu_pity_mod(
    state: PityState,
    config: PityConfig = DEFAULT_PITY_CONFIG,
) -> LootPityMod:
    """Weight modifier for legendary skill books in a loot roll. Never forces an outcome."""
    return LootPityMod(
        legend_weight_mul=legend_kungfu_weight_mul(state, config),
        force_legendary=config.legend_kungfu.is_hard(state.legend_kungfu_pity),
    )


# =============================================================================
# SHARDS
# =============================================================================

def add_kungfu_shards(state: PityState, amount: int) -> PityState:
    """
    Credit shards, e.g. for a duplicate high-rarity skill book.

    Raises:
        ValueError: If amount is negative. Shards only go down through an exchange.
    """
    if amount < 0:
        raise ValueError(f"Shard award cannot be negative (got {amount})")
    return replace(state, kungfu_shards=state.kungfu_shards + amount)
