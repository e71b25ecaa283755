"""Kungfu (skill book) modifiers.

Each equipped skill book contributes a flat mapping of named modifiers.
Books may also declare effect names (e.g. ``loot_legend_weight_mul``), which
are translated to modifier keys first. The mappings are then merged into one mapping which the explore, alchemy and final trial
code reads from.

Merge rules by key suffix:
- ``_mult`` / ``_mul``: multiplied, default 1
- ``_choice_add``: summed then floored
- anything else: summed, default 0
"""

import math
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional

from src.core.constants import KUNGFU_EFFECT_TO_MODIFIER, KUNGFU_MODIFIER_CAPS

KungfuModifiers = dict[str, float]


@dataclass(frozen=True)
class LootKungfuMod:
    """
    Equipment-derived loot weight multipliers.

    ``loot_epic_mul`` falls back to ``loot_rare_mul`` when unset, so a single
    "rare weight" modifier boosts both rare and epic tiers.
    """

    loot_rare_mul: float = 1.0
    loot_legend_mul: float = 1.0
    loot_epic_mul: Optional[float] = None

    @property
    def effective_epic_mul(self) -> float:
        if self.loot_epic_mul is None:
            return self.loot_rare_mul
        return self.loot_epic_mul


def _is_mult_key(key: str) -> bool:
    return key.endswith("_mult") or key.endswith("_mul")


def merge_modifiers(modifier_list: Iterable[Mapping[str, float]]) -> KungfuModifiers:
    """Merge per-book modifiers using the suffix rules."""
    modifier_list = list(modifier_list)
    keys: list[str] = []
    for modifiers in modifier_list:
        for key in modifiers:
            if key not in keys:
                keys.append(key)

    merged: KungfuModifiers = {}
    for key in keys:
        values = [m[key] for m in modifier_list if m.get(key) is not None]
        if _is_mult_key(key):
            result = 1.0
            for value in values:
                result *= value
            merged[key] = result
        elif key.endswith("_choice_add"):
            merged[key] = math.floor(sum(values))
        else:
            merged[key] = sum(values)
    return merged


def apply_modifier_caps(
    modifiers: Mapping[str, float],
    caps: Mapping[str, tuple[float, float]] = KUNGFU_MODIFIER_CAPS,
) -> KungfuModifiers:
    """Clamp capped keys into their allowed range."""
    capped = dict(modifiers)
    for key, (low, high) in caps.items():
        if key in capped:
            capped[key] = max(low, min(high, capped[key]))
    return capped


def modifiers_from_effects(
    modifiers: Optional[Mapping[str, float]] = None,
    effects: Optional[Mapping[str, float]] = None,
) -> KungfuModifiers:
    """
    Modifier mapping of a single book.

    Effect names listed in KUNGFU_EFFECT_TO_MODIFIER are translated to the
    modifier key they feed. A key the book sets directly wins over its effect
    alias. Unknown effect names are dropped.

    Args:
        modifiers: Modifier keys declared by the book.
        effects: Effect names declared by the book.
    """
    book: KungfuModifiers = {}
    for key, value in (modifiers or {}).items():
        if key in KUNGFU_EFFECT_TO_MODIFIER:
            continue
        book[key] = value
    for source in (modifiers or {}, effects or {}):
        for effect, value in source.items():
            key = KUNGFU_EFFECT_TO_MODIFIER.get(effect)
            if key is not None and key not in book:
                book[key] = value
    return book


def merge_equipped_modifiers(modifier_list: Iterable[Mapping[str, float]]) -> KungfuModifiers:
    """Translate, merge and soft-cap the modifiers of every equipped book."""
    return apply_modifier_caps(
        merge_modifiers(modifiers_from_effects(book) for book in modifier_list)
    )


def loot_kungfu_mod(modifiers: Mapping[str, float]) -> LootKungfuMod:
    """Project merged modifiers onto the loot weight multipliers."""
    return LootKungfuMod(
        loot_rare_mul=modifiers.get("explore_rare_weight_mult", 1.0),
        loot_legend_mul=modifiers.get("explore_legend_weight_mult", 1.0),
        loot_epic_mul=modifiers.get("explore_epic_weight_mult"),
    )
