"""
Reward engine service.

Translates API schemas into engine snapshots and back. The service holds no
player state; every call works on the snapshots it is given.
"""

import logging
import math
from typing import Optional

import numpy as np

from src.core.final_trial import (
    EndingId,
    TrialResources,
    TrialSnapshot,
    TrialState,
    final_rewards,
    get_dmg_base,
    resolve_action,
    start_trial,
)
from src.core.kungfu_modifiers import LootKungfuMod
from src.core.loot import get_loot_rarity_weights, highest_rarity_drop, roll_loot_with_pity
from src.core.pity import (
    PityState,
    add_kungfu_shards,
    alchemy_pity_quality_shift,
    legend_kungfu_weight_mul,
    legend_loot_weight_mul,
    loot_pity_mod,
    should_force_alchemy_floor,
    should_force_legend_loot,
    update_pity_after_alchemy,
    update_pity_after_kungfu_drop,
    update_pity_after_loot,
)
from src.core.probability import DropProbabilityCalculator
from src.core.rng import Rng, make_rng
from src.core.shards import spend_kungfu_shards

from ..config import settings
from ..schemas.loot import (
    AlchemyPityUpdateRequest,
    KungfuModSchema,
    KungfuPityUpdateRequest,
    LootDropSchema,
    LootOddsRequest,
    LootOddsResponse,
    LootPityUpdateRequest,
    LootRollRequest,
    LootRollResponse,
    LootSimulateRequest,
    LootSimulateResponse,
    PityResponse,
    PityStateSchema,
    ShardAddRequest,
    ShardSpendRequest,
    ShardSpendResponse,
)
from ..schemas.trial import (
    FinalRewardsSchema,
    StartTrialRequest,
    TrialActionRequest,
    TrialActionResponse,
    TrialStateResponse,
    TrialStateSchema,
)

logger = logging.getLogger(__name__)


class RewardEngineService:
    """Stateless facade over the reward engine."""

    def __init__(
        self,
        default_seed: Optional[int] = None,
        max_rolls: int = 50,
        default_simulations: int = 1000,
        max_simulations: int = 20000,
    ):
        self.default_seed = default_seed
        self.max_rolls = max_rolls
        self.default_simulations = default_simulations
        self.max_simulations = max_simulations

    # === Conversion helpers ===

    def _rng(self, seed: Optional[int]) -> Rng:
        return make_rng(seed if seed is not None else self.default_seed)

    @staticmethod
    def _pity(schema: PityStateSchema) -> PityState:
        return PityState(**schema.model_dump())

    @staticmethod
    def _pity_schema(state: PityState) -> PityStateSchema:
        return PityStateSchema(**state.to_dict())

    @staticmethod
    def _kungfu(schema: Optional[KungfuModSchema]) -> Optional[LootKungfuMod]:
        if schema is None:
            return None
        return LootKungfuMod(**schema.model_dump())

    # === Loot ===

    def loot_odds(self, request: LootOddsRequest) -> LootOddsResponse:
        """Weights, odds and expected rolls to a legendary."""
        pity = self._pity(request.pity)
        kungfu = self._kungfu(request.kungfu)
        pity_mod = loot_pity_mod(pity)

        expected = DropProbabilityCalculator.expected_attempts_to_legendary(
            request.danger, request.streak, pity.legend_loot_pity, kungfu
        )
        return LootOddsResponse(
            weights=get_loot_rarity_weights(request.danger, request.streak, kungfu, pity_mod),
            probabilities=DropProbabilityCalculator.tier_probabilities(
                request.danger, request.streak, kungfu, pity_mod
            ),
            force_legendary=pity_mod.force_legendary,
            expected_rolls_to_legendary=expected if math.isfinite(expected) else None,
        )

    def roll_loot(self, request: LootRollRequest) -> LootRollResponse:
        """
        Roll ``count`` drops in sequence.

        Raises:
            ValueError: If more rolls are requested than allowed.
        """
        if request.count > self.max_rolls:
            raise ValueError(f"At most {self.max_rolls} rolls per request")

        rng = self._rng(request.seed)
        pity = self._pity(request.pity)
        kungfu = self._kungfu(request.kungfu)

        drops = []
        for _ in range(request.count):
            drop, pity = roll_loot_with_pity(rng, request.danger, request.streak, pity, kungfu)
            drops.append(drop)

        logger.debug("Rolled %d drops at danger %.1f", len(drops), request.danger)

        best = highest_rarity_drop(drops)
        return LootRollResponse(
            drops=[LootDropSchema(rarity=d.rarity, item=d.item) for d in drops],
            best=LootDropSchema(rarity=best.rarity, item=best.item) if best else None,
            pity=self._pity_schema(pity),
        )

    def simulate_loot(self, request: LootSimulateRequest) -> LootSimulateResponse:
        """
        Simulate legendary gaps with the real roller.

        Raises:
            ValueError: If more legendaries are requested than allowed, or
                legendary cannot drop.
        """
        legendaries = request.legendaries or self.default_simulations
        if legendaries > self.max_simulations:
            raise ValueError(f"At most {self.max_simulations} legendaries per simulation")

        kungfu = self._kungfu(request.kungfu)
        expected = DropProbabilityCalculator.expected_attempts_to_legendary(
            request.danger, request.streak, kungfu_mod=kungfu
        )
        gaps = DropProbabilityCalculator.simulate_legendary_gaps(
            legendaries,
            request.danger,
            request.streak,
            seed=request.seed if request.seed is not None else self.default_seed,
            kungfu_mod=kungfu,
        )
        logger.debug("Simulated %d legendaries at danger %.1f", legendaries, request.danger)

        return LootSimulateResponse(
            legendaries=legendaries,
            mean_gap=float(gaps.mean()),
            median_gap=float(np.median(gaps)),
            p90_gap=float(np.percentile(gaps, 90)),
            max_gap=int(gaps.max()),
            expected_gap=expected if math.isfinite(expected) else None,
        )

    # === Pity ===

    def describe_pity(self, state: PityState) -> PityResponse:
        return PityResponse(
            pity=self._pity_schema(state),
            alchemy_quality_shift=alchemy_pity_quality_shift(state),
            force_alchemy_floor=should_force_alchemy_floor(state),
            legend_loot_weight_mul=legend_loot_weight_mul(state),
            force_legend_loot=should_force_legend_loot(state),
            legend_kungfu_weight_mul=legend_kungfu_weight_mul(state),
        )

    def summarize_pity(self, schema: PityStateSchema) -> PityResponse:
        return self.describe_pity(self._pity(schema))

    def update_loot_pity(self, request: LootPityUpdateRequest) -> PityResponse:
        return self.describe_pity(update_pity_after_loot(request.had_legendary, self._pity(request.pity)))

    def update_alchemy_pity(self, request: AlchemyPityUpdateRequest) -> PityResponse:
        return self.describe_pity(update_pity_after_alchemy(request.top_quality, self._pity(request.pity)))

    def update_kungfu_pity(self, request: KungfuPityUpdateRequest) -> PityResponse:
        return self.describe_pity(update_pity_after_kungfu_drop(request.rarity, self._pity(request.pity)))

    def add_shards(self, request: ShardAddRequest) -> PityResponse:
        return self.describe_pity(add_kungfu_shards(self._pity(request.pity), request.amount))

    def spend_shards(self, request: ShardSpendRequest) -> ShardSpendResponse:
        """
        Exchange shards.

        Raises:
            ValueError: If the rarity cannot be bought.
        """
        result = spend_kungfu_shards(self._pity(request.pity), request.rarity)
        if result.success:
            logger.info("Exchanged %d shards for a %s reward", result.cost, request.rarity.value)
        return ShardSpendResponse(
            success=result.success,
            cost=result.cost,
            pity=self._pity_schema(result.new_state),
        )

    # === Final trial ===

    @staticmethod
    def _state_schema(state: TrialState) -> TrialStateSchema:
        return TrialStateSchema(step=state.step, threat=state.threat, resolve=state.resolve, hp=state.hp)

    @staticmethod
    def rewards(ending: EndingId) -> FinalRewardsSchema:
        rewards = final_rewards(ending)
        return FinalRewardsSchema(
            ending=ending,
            legacy_bonus=rewards.legacy_bonus,
            shards_bonus=rewards.shards_bonus,
            demon_unlock=rewards.demon_unlock,
        )

    def start_trial(self, request: StartTrialRequest) -> TrialStateResponse:
        snapshot = TrialSnapshot(**request.snapshot.model_dump())
        state = start_trial(snapshot, request.hp)
        logger.info("Final trial started: threat=%d resolve=%d", state.threat, state.resolve)
        return TrialStateResponse(
            state=self._state_schema(state),
            dmg_base=get_dmg_base(state.threat, state.step),
            is_terminal=state.is_terminal,
        )

    def trial_action(self, request: TrialActionRequest) -> TrialActionResponse:
        """
        Resolve one trial step.

        Raises:
            ValueError: If the trial is over or sacrifice arguments are missing.
        """
        state = TrialState(**request.state.model_dump())
        resources = None
        if request.resources is not None:
            resources = TrialResources(**request.resources.model_dump())

        result = resolve_action(
            state,
            request.action,
            rng=self._rng(request.seed),
            sacrifice_kind=request.sacrifice_kind,
            resources=resources,
            max_hp=request.max_hp,
        )

        outcome = result.outcome
        return TrialActionResponse(
            executed=result.executed,
            state=self._state_schema(result.state),
            dmg=outcome.dmg if outcome else None,
            resolve_delta=outcome.resolve_delta if outcome else None,
            heal=outcome.heal if outcome else None,
            success=outcome.success if outcome else None,
            ending=result.ending,
            rewards=self.rewards(result.ending) if result.ending else None,
        )


def build_service() -> RewardEngineService:
    """Service configured from settings."""
    return RewardEngineService(
        default_seed=settings.DEFAULT_SEED,
        max_rolls=settings.MAX_ROLLS_PER_REQUEST,
        default_simulations=settings.DEFAULT_SIMULATION_COUNT,
        max_simulations=settings.MAX_SIMULATION_COUNT,
    )
