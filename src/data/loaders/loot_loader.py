"""Loot table loader for exploration rewards."""

import json
from functools import lru_cache
from pathlib import Path
from typing import Optional

from ..models.reward import LootTableEntry, RarityTier


DEFAULT_LOOT_TABLE: list[dict] = [
    {
        "rarity": "common",
        "drops": [
            {"item": {"type": "material", "id": "spirit_herb", "count": 1}, "weight": 40},
            {"item": {"type": "material", "id": "iron_sand", "count": 1}, "weight": 30},
            {"item": {"type": "currency_pack", "id": "pills", "count": 1}, "weight": 30},
        ],
    },
    {
        "rarity": "rare",
        "drops": [
            {"item": {"type": "material", "id": "beast_core", "count": 1}, "weight": 30},
            {"item": {"type": "material", "id": "moon_dew", "count": 1}, "weight": 22},
            {"item": {"type": "fragment", "id": "spirit_pill_recipe", "count": 1}, "weight": 22},
            {"item": {"type": "currency_pack", "id": "pills", "count": 2}, "weight": 12},
            {"item": {"type": "skill_book", "id": "steady_heart"}, "weight": 7},
            {"item": {"type": "skill_book", "id": "shallow_breath"}, "weight": 7},
        ],
    },
    {
        "rarity": "epic",
        "drops": [
            {"item": {"type": "material", "id": "moon_dew", "count": 2}, "weight": 25},
            {"item": {"type": "fragment", "id": "foundation_pill_recipe", "count": 1}, "weight": 25},
            {"item": {"type": "currency_pack", "id": "pills", "count": 3}, "weight": 15},
            {"item": {"type": "skill_book", "id": "lucky_cauldron"}, "weight": 12},
            {"item": {"type": "skill_book", "id": "retreat_charm"}, "weight": 10},
            {"item": {"type": "skill_book", "id": "fire_suppress"}, "weight": 8},
        ],
    },
    {
        "rarity": "legendary",
        "drops": [
            {"item": {"type": "material", "id": "moon_dew", "count": 3}, "weight": 20},
            {"item": {"type": "fragment", "id": "foundation_pill_recipe", "count": 2}, "weight": 20},
            {"item": {"type": "currency_pack", "id": "pills", "count": 5}, "weight": 15},
            {"item": {"type": "skill_book", "id": "breakthrough_boost"}, "weight": 15},
            {"item": {"type": "skill_book", "id": "tian_blessing"}, "weight": 15},
            {"item": {"type": "skill_book", "id": "legendary_eye"}, "weight": 15},
        ],
    },
]


def parse_loot_table(data: list[dict]) -> tuple[LootTableEntry, ...]:
    """Validate raw loot table data.

    Entries are returned in rarity order regardless of their order in
    ``data``; every rarity tier must appear exactly once.

    Args:
        data: List of ``{"rarity": ..., "drops": [...]}`` dictionaries.

    Returns:
        Tuple of LootTableEntry objects, common first.
    """
    entries = [LootTableEntry.model_validate(entry) for entry in data]
    by_rarity = {entry.rarity: entry for entry in entries}
    if len(by_rarity) != len(entries):
        raise ValueError("Loot table lists a rarity tier more than once")

    missing = [tier.value for tier in RarityTier if tier not in by_rarity]
    if missing:
        raise ValueError(f"Loot table is missing rarity tiers: {', '.join(missing)}")

    return tuple(by_rarity[tier] for tier in RarityTier)


@lru_cache(maxsize=None)
def load_loot_table(path: Optional[Path] = None) -> tuple[LootTableEntry, ...]:
    """Load the exploration loot table.

    Args:
        path: Optional JSON file overriding the built-in table.

    Returns:
        Tuple of LootTableEntry objects, common first.
    """
    if path is None:
        return parse_loot_table(DEFAULT_LOOT_TABLE)

    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    return parse_loot_table(data["loot_table"] if isinstance(data, dict) else data)


def get_loot_entry(rarity: RarityTier) -> LootTableEntry:
    """Get the default table entry for a rarity tier."""
    for entry in load_loot_table():
        if entry.rarity == rarity:
            return entry
    raise KeyError(rarity)


def get_skill_book_ids(rarity: Optional[RarityTier] = None) -> list[str]:
    """Get skill book IDs in the default table, optionally for one tier."""
    return [
        drop.item.id
        for entry in load_loot_table()
        if rarity is None or entry.rarity == rarity
        for drop in entry.drops
        if drop.item.type == "skill_book"
    ]
