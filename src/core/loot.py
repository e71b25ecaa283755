"""Exploration Loot System.

Rarity weights are keyed off danger and streak, then scaled by equipment
(kungfu) and pity modifiers. A roll is two weighted draws: first the rarity
tier, then the item inside that tier.

Weight pipeline:
    base weight (danger band) -> x streak -> x kungfu -> x pity

A tier with base weight 0 stays at 0 whatever the multipliers are; only the
hard pity override can make legendary reachable below its danger floor.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, TypeVar

from src.core.constants import DANGER_BANDS, STREAK_MULTIPLIERS
from src.core.kungfu_modifiers import LootKungfuMod
from src.core.pity import (
    DEFAULT_PITY_CONFIG,
    LootPityMod,
    PityConfig,
    PityState,
    kungfu_pity_mod,
    loot_pity_mod,
    update_pity_after_kungfu_drop,
    update_pity_after_loot,
)
from src.core.rng import Rng
from src.data.loaders.loot_loader import load_loot_table
from src.data.models.reward import LootTableEntry, RarityTier, RewardItem

T = TypeVar("T")


@dataclass(frozen=True)
class LootDrop:
    """A rolled reward together with the rarity tier it came from."""

    rarity: RarityTier
    item: RewardItem

    @property
    def is_skill_book(self) -> bool:
        return self.item.type == "skill_book"

    def __repr__(self) -> str:
        return f"LootDrop({self.rarity.value}: {self.item.type} {self.item.id} x{self.item.count})"


# =============================================================================
# WEIGHT PIPELINE
# =============================================================================

def base_weight(rarity: RarityTier, danger: float) -> float:
    """Base weight of a tier for the danger band ``danger`` falls into."""
    rank = RarityTier(rarity).rank
    for upper, weights in DANGER_BANDS:
        if danger < upper:
            return float(weights[rank])
    return float(DANGER_BANDS[-1][1][rank])


def streak_multiplier(rarity: RarityTier, streak: int) -> float:
    """Multiplier from the highest streak threshold reached."""
    for min_streak, multipliers in STREAK_MULTIPLIERS:
        if streak >= min_streak:
            return multipliers.get(RarityTier(rarity).value, 1.0)
    return 1.0


def kungfu_multiplier(rarity: RarityTier, kungfu_mod: Optional[LootKungfuMod]) -> float:
    """Equipment multiplier; common is never scaled."""
    if kungfu_mod is None:
        return 1.0
    if rarity == RarityTier.RARE:
        return kungfu_mod.loot_rare_mul
    if rarity == RarityTier.EPIC:
        return kungfu_mod.effective_epic_mul
    if rarity == RarityTier.LEGENDARY:
        return kungfu_mod.loot_legend_mul
    return 1.0


def pity_multiplier(rarity: RarityTier, pity_mod: Optional[LootPityMod]) -> float:
    """Soft pity multiplier; only legendary is scaled."""
    if pity_mod is None or rarity != RarityTier.LEGENDARY:
        return 1.0
    return pity_mod.legend_weight_mul


def get_loot_rarity_weight(
    rarity: RarityTier,
    danger: float,
    streak: int,
    kungfu_mod: Optional[LootKungfuMod] = None,
    pity_mod: Optional[LootPityMod] = None,
) -> float:
    """
    Calculate the weight of one rarity tier.

    Args:
        rarity: Tier to weigh.
        danger: Current danger level.
        streak: Current streak.
        kungfu_mod: Equipment multipliers.
        pity_mod: Pity multiplier and hard pity override.

    Returns:
        Non-negative weight. With ``force_legendary`` set, 1 for legendary
        and 0 for everything else.
    """
    rarity = RarityTier(rarity)
    if pity_mod is not None and pity_mod.force_legendary:
        return 1.0 if rarity == RarityTier.LEGENDARY else 0.0

    weight = base_weight(rarity, danger)
    if weight <= 0:
        return 0.0

    for multiplier in (
        streak_multiplier(rarity, streak),
        kungfu_multiplier(rarity, kungfu_mod),
        pity_multiplier(rarity, pity_mod),
    ):
        weight *= multiplier

    return max(0.0, weight)


def get_loot_rarity_weights(
    danger: float,
    streak: int,
    kungfu_mod: Optional[LootKungfuMod] = None,
    pity_mod: Optional[LootPityMod] = None,
) -> dict[RarityTier, float]:
    """Weights for every tier, in rarity order."""
    return {
        tier: get_loot_rarity_weight(tier, danger, streak, kungfu_mod, pity_mod)
        for tier in RarityTier
    }


# =============================================================================
# ROLLING
# =============================================================================

def pick_weighted(options: Sequence[T], weights: Sequence[float], draw: float) -> T:
    """
    Cumulative weighted pick.

    Scales ``draw`` by the total weight and returns the first option with a
    positive weight whose running total reaches the scaled draw. Falls back to
    the first option when the total weight is 0.
    """
    total = sum(weights)
    if total <= 0:
        return options[0]

    roll = draw * total
    cumulative = 0.0
    for option, weight in zip(options, weights):
        if weight <= 0:
            continue
        cumulative += weight
        if roll <= cumulative:
            return option

    # Float drift at the top of the range
    for option, weight in reversed(list(zip(options, weights))):
        if weight > 0:
            return option
    return options[0]


def item_weights(
    entry: LootTableEntry,
    skill_book_pity_mod: Optional[LootPityMod] = None,
) -> list[float]:
    """Item weights of a tier; legendary skill books are scaled by skill book pity."""
    mul = 1.0
    if skill_book_pity_mod is not None and entry.rarity == RarityTier.LEGENDARY:
        mul = skill_book_pity_mod.legend_weight_mul
    return [
        d.weight * mul if d.item.type == "skill_book" else float(d.weight)
        for d in entry.drops
    ]


def roll_loot_drop(
    rng: Rng,
    danger: float,
    streak: int,
    kungfu_mod: Optional[LootKungfuMod] = None,
    pity_mod: Optional[LootPityMod] = None,
    table: Optional[Sequence[LootTableEntry]] = None,
    skill_book_pity_mod: Optional[LootPityMod] = None,
) -> LootDrop:
    """
    Roll one exploration drop. Consumes exactly 2 values from ``rng``.

    Args:
        rng: Injected random source.
        danger: Current danger level.
        streak: Current streak.
        kungfu_mod: Equipment multipliers.
        pity_mod: Pity multiplier and hard pity override.
        table: Loot table, defaults to the built-in one.
        skill_book_pity_mod: Skill book pity; scales the weight of skill
            books inside the legendary tier.

    Returns:
        LootDrop holding a fresh copy of the item template.
    """
    entries = list(table) if table is not None else list(load_loot_table())

    tier_weights = [
        get_loot_rarity_weight(entry.rarity, danger, streak, kungfu_mod, pity_mod)
        for entry in entries
    ]
    entry = pick_weighted(entries, tier_weights, rng.next())

    drop = pick_weighted(
        entry.drops,
        item_weights(entry, skill_book_pity_mod),
        rng.next(),
    )

    return LootDrop(rarity=entry.rarity, item=drop.item.model_copy())


def highest_rarity_drop(drops: Sequence[LootDrop]) -> Optional[LootDrop]:
    """The drop of highest rarity; the earliest one wins ties."""
    best: Optional[LootDrop] = None
    for drop in drops:
        if best is None or drop.rarity > best.rarity:
            best = drop
    return best


def roll_loot_with_pity(
    rng: Rng,
    danger: float,
    streak: int,
    pity: PityState,
    kungfu_mod: Optional[LootKungfuMod] = None,
    config: PityConfig = DEFAULT_PITY_CONFIG,
) -> tuple[LootDrop, PityState]:
    """
    Roll a drop under the current pity state and advance the ledger.

    The loot track decides the rarity tier; the skill book track makes
    legendary skill books more likely once a legendary tier is rolled. The
    loot track always advances. The skill book track advances only when the
    drop is a skill book. Consumes exactly 2 values from ``rng``.

    Returns:
        (drop, new pity state)
    """
    drop = roll_loot_drop(
        rng,
        danger,
        streak,
        kungfu_mod,
        loot_pity_mod(pity, config),
        skill_book_pity_mod=kungfu_pity_mod(pity, config),
    )

    new_pity = update_pity_after_loot(drop.rarity == RarityTier.LEGENDARY, pity)
    if drop.is_skill_book:
        new_pity = update_pity_after_kungfu_drop(drop.rarity, new_pity)

    return drop, new_pity
