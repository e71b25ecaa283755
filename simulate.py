#!/usr/bin/env python
"""
Drop rate simulation script.

Usage:
    # Odds and simulated legendary gaps at high danger
    python simulate.py --danger 90 --streak 0 --legendaries 2000 --seed 7

    # Check the final trial gamble rate
    python simulate.py --gamble-trials 100000
"""

import argparse
import sys
from pathlib import Path

import numpy as np

# Add project root to path
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from src.core.probability import DropProbabilityCalculator
from src.core.constants import GAMBLE_SUCCESS_RATE
from src.data.models.reward import RarityTier


def print_odds(danger: float, streak: int) -> None:
    print(f"=== Tier odds (danger={danger}, streak={streak}) ===")
    odds = DropProbabilityCalculator.tier_probabilities(danger, streak)
    for tier in RarityTier:
        print(f"  {tier.value:<10} {odds[tier] * 100:6.2f}%")

    expected = DropProbabilityCalculator.expected_attempts_to_legendary(danger, streak)
    print(f"  Expected rolls to legendary (with pity): {expected:.2f}")


def print_gaps(danger: float, streak: int, legendaries: int, seed) -> None:
    gaps = DropProbabilityCalculator.simulate_legendary_gaps(legendaries, danger, streak, seed=seed)
    print(f"\n=== Simulated gaps over {legendaries} legendaries ===")
    print(f"  mean   {gaps.mean():.2f}")
    print(f"  median {np.median(gaps):.0f}")
    print(f"  p90    {np.percentile(gaps, 90):.0f}")
    print(f"  max    {gaps.max()}")


def main():
    parser = argparse.ArgumentParser(
        description="Cultivation reward engine drop simulation",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--danger", type=float, default=90.0, help="Danger level (default: 90)")
    parser.add_argument("--streak", type=int, default=0, help="Streak (default: 0)")
    parser.add_argument(
        "--legendaries",
        type=int,
        default=1000,
        help="Legendary drops to simulate, 0 to skip (default: 1000)",
    )
    parser.add_argument(
        "--gamble-trials",
        type=int,
        default=0,
        help="Final trial gamble attempts to simulate (default: 0)",
    )
    parser.add_argument("--seed", type=int, default=None, help="Random seed")

    args = parser.parse_args()

    print_odds(args.danger, args.streak)

    if args.legendaries > 0:
        print_gaps(args.danger, args.streak, args.legendaries, args.seed)

    if args.gamble_trials > 0:
        rate = DropProbabilityCalculator.simulate_gamble_success_rate(args.gamble_trials, seed=args.seed)
        print("\n=== Gamble ===")
        print(f"  observed {rate * 100:.2f}% (target {GAMBLE_SUCCESS_RATE * 100:.0f}%)")


if __name__ == "__main__":
    main()
