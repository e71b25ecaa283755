"""Shard Exchange.

Kungfu shards accumulate from wasted duplicate drops and can be traded at a
fixed price for a guaranteed reward of a chosen rarity. Exchanges are
all-or-nothing.
"""

import logging
from dataclasses import dataclass, replace

from src.core.constants import SHARD_COST
from src.core.pity import PityState
from src.data.models.reward import RarityTier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShardSpendResult:
    """Outcome of an exchange attempt."""

    success: bool
    new_state: PityState
    cost: int


def shard_cost(rarity: RarityTier) -> int:
    """
    Price of a guaranteed reward of ``rarity``.

    Raises:
        ValueError: For tiers that cannot be bought (common).
    """
    rarity = RarityTier(rarity)
    if rarity.value not in SHARD_COST:
        raise ValueError(f"{rarity.value} rewards cannot be bought with shards")
    return SHARD_COST[rarity.value]


def can_afford_exchange(state: PityState, rarity: RarityTier) -> bool:
    return state.kungfu_shards >= shard_cost(rarity)


def spend_kungfu_shards(state: PityState, rarity: RarityTier) -> ShardSpendResult:
    """
    Trade shards for a guaranteed reward of ``rarity``.

    On failure the very same state object is returned untouched. On success
    exactly ``cost`` shards are deducted; granting the reward is up to the
    caller.
    """
    cost = shard_cost(rarity)
    if state.kungfu_shards < cost:
        logger.debug(
            "Shard exchange refused: %d shards, %s costs %d",
            state.kungfu_shards, RarityTier(rarity).value, cost,
        )
        return ShardSpendResult(success=False, new_state=state, cost=cost)

    return ShardSpendResult(
        success=True,
        new_state=replace(state, kungfu_shards=state.kungfu_shards - cost),
        cost=cost,
    )
