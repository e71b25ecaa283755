"""Drop Probability Calculator.

Analytical odds and Monte Carlo checks for the loot roller, pity ledger and
final trial gamble.
"""

import math
from typing import Optional, Sequence

import numpy as np

from src.core.final_trial import gamble_outcome
from src.core.kungfu_modifiers import LootKungfuMod
from src.core.loot import get_loot_rarity_weights, roll_loot_with_pity
from src.core.pity import DEFAULT_PITY_CONFIG, LootPityMod, PityConfig, PityState, loot_pity_mod
from src.core.rng import NumpyRng
from src.data.loaders.loot_loader import load_loot_table
from src.data.models.reward import LootTableEntry, RarityTier, RewardItem


class DropProbabilityCalculator:
    """
    Calculate drop odds for decision making and balance checks.
    """

    @staticmethod
    def tier_probabilities(
        danger: float,
        streak: int,
        kungfu_mod: Optional[LootKungfuMod] = None,
        pity_mod: Optional[LootPityMod] = None,
    ) -> dict[RarityTier, float]:
        """
        Probability of each rarity tier on the next roll.

        Args:
            danger: Current danger level.
            streak: Current streak.
            kungfu_mod: Equipment multipliers.
            pity_mod: Pity multiplier and override.

        Returns:
            Mapping of tier to probability (0.0 to 1.0), summing to 1.
        """
        weights = get_loot_rarity_weights(danger, streak, kungfu_mod, pity_mod)
        total = sum(weights.values())
        if total <= 0:
            # Same fallback as the roller: first tier
            return {tier: (1.0 if tier == RarityTier.COMMON else 0.0) for tier in RarityTier}
        return {tier: weight / total for tier, weight in weights.items()}

    @staticmethod
    def item_probabilities(
        rarity: RarityTier,
        table: Optional[Sequence[LootTableEntry]] = None,
    ) -> list[tuple[RewardItem, float]]:
        """
        Probability of each item once ``rarity`` has been rolled.

        Returns:
            List of (item template, probability) in table order.
        """
        entries = table if table is not None else load_loot_table()
        entry = next(e for e in entries if e.rarity == rarity)
        total = entry.total_weight
        if total <= 0:
            return [(d.item, 1.0 if i == 0 else 0.0) for i, d in enumerate(entry.drops)]
        return [(d.item, d.weight / total) for d in entry.drops]

    @staticmethod
    def legendary_chance_by_pity(
        danger: float,
        streak: int,
        kungfu_mod: Optional[LootKungfuMod] = None,
        config: PityConfig = DEFAULT_PITY_CONFIG,
    ) -> np.ndarray:
        """
        Legendary chance of the next roll for each loot pity counter value.

        Index ``i`` holds the chance with ``i`` misses in a row. The last
        index is the cap: counters above it behave the same.
        """
        track = config.legend_loot
        cap = track.hard_threshold if track.hard_threshold is not None else track.soft_threshold
        chances = np.zeros(cap + 1, dtype=float)
        for counter in range(cap + 1):
            pity_mod = loot_pity_mod(PityState(legend_loot_pity=counter), config)
            tiers = DropProbabilityCalculator.tier_probabilities(danger, streak, kungfu_mod, pity_mod)
            chances[counter] = tiers[RarityTier.LEGENDARY]
        return chances

    @staticmethod
    def expected_attempts_to_legendary(
        danger: float,
        streak: int,
        start_pity: int = 0,
        kungfu_mod: Optional[LootKungfuMod] = None,
        config: PityConfig = DEFAULT_PITY_CONFIG,
    ) -> float:
        """
        Expected number of rolls until the next legendary.

        Hard pity bounds the result. Returns ``inf`` when legendary can never
        drop.
        """
        chances = DropProbabilityCalculator.legendary_chance_by_pity(
            danger, streak, kungfu_mod, config
        )
        start = min(max(0, start_pity), len(chances) - 1)
        path = chances[start:]

        # survival[i] = P(no legendary in the first i rolls)
        survival = np.concatenate(([1.0], np.cumprod(1.0 - path)))
        expected = float(survival[:-1].sum())

        tail = float(survival[-1])
        if tail > 0:
            last = float(chances[-1])
            if last <= 0:
                return float("inf")
            expected += tail / last
        return expected

    @staticmethod
    def simulate_legendary_gaps(
        legendaries: int,
        danger: float,
        streak: int,
        seed: Optional[int] = None,
        kungfu_mod: Optional[LootKungfuMod] = None,
        config: PityConfig = DEFAULT_PITY_CONFIG,
    ) -> np.ndarray:
        """
        Roll until ``legendaries`` legendary drops occurred, using the real
        roller and pity ledger.

        Returns:
            Array with the number of rolls each legendary took.

        Raises:
            ValueError: If legendary can never drop with these settings.
        """
        expected = DropProbabilityCalculator.expected_attempts_to_legendary(
            danger, streak, kungfu_mod=kungfu_mod, config=config
        )
        if math.isinf(expected):
            raise ValueError(
                f"Legendary is unreachable at danger {danger} without a hard pity"
            )

        rng = NumpyRng(seed)
        pity = PityState()
        gaps: list[int] = []
        rolls = 0
        while len(gaps) < legendaries:
            drop, pity = roll_loot_with_pity(rng, danger, streak, pity, kungfu_mod, config)
            rolls += 1
            if drop.rarity == RarityTier.LEGENDARY:
                gaps.append(rolls)
                rolls = 0
        return np.asarray(gaps, dtype=int)

    @staticmethod
    def simulate_gamble_success_rate(trials: int, seed: Optional[int] = None) -> float:
        """Observed success rate of the final trial gamble over ``trials`` attempts."""
        if trials <= 0:
            return 0.0
        rng = NumpyRng(seed)
        successes = sum(1 for _ in range(trials) if gamble_outcome(10, rng.next()).success)
        return successes / trials
