"""
Loot and pity API schemas.
"""

from pydantic import BaseModel, Field
from typing import Optional, List, Dict

from src.data.models.reward import ElixirQuality, RarityTier, RewardItem


# === Shared ===


class PityStateSchema(BaseModel):
    """Pity counters and shard balance."""

    alchemy_top_pity: int = Field(default=0, ge=0)
    legend_loot_pity: int = Field(default=0, ge=0)
    legend_kungfu_pity: int = Field(default=0, ge=0)
    kungfu_shards: int = Field(default=0, ge=0)


class KungfuModSchema(BaseModel):
    """Equipment loot multipliers."""

    loot_rare_mul: float = Field(default=1.0, ge=0)
    loot_legend_mul: float = Field(default=1.0, ge=0)
    loot_epic_mul: Optional[float] = Field(default=None, ge=0)


class LootDropSchema(BaseModel):
    """A rolled drop."""

    rarity: RarityTier
    item: RewardItem


# === Request Schemas ===


class LootOddsRequest(BaseModel):
    """Weight/odds query."""

    danger: float = Field(default=0, ge=0)
    streak: int = Field(default=0, ge=0)
    kungfu: Optional[KungfuModSchema] = None
    pity: PityStateSchema = Field(default_factory=PityStateSchema)


class LootRollRequest(LootOddsRequest):
    """Roll request. Rolls are applied in order, each advancing pity."""

    count: int = Field(default=1, ge=1)
    seed: Optional[int] = None


class LootSimulateRequest(BaseModel):
    """Monte Carlo run of the roller and pity ledger."""

    danger: float = Field(default=0, ge=0)
    streak: int = Field(default=0, ge=0)
    kungfu: Optional[KungfuModSchema] = None
    legendaries: Optional[int] = Field(default=None, ge=1)  # None = settings default
    seed: Optional[int] = None


class LootPityUpdateRequest(BaseModel):
    pity: PityStateSchema
    had_legendary: bool


class AlchemyPityUpdateRequest(BaseModel):
    pity: PityStateSchema
    top_quality: Optional[ElixirQuality] = None


class KungfuPityUpdateRequest(BaseModel):
    pity: PityStateSchema
    rarity: RarityTier


class ShardAddRequest(BaseModel):
    pity: PityStateSchema
    amount: int = Field(..., ge=0)


class ShardSpendRequest(BaseModel):
    pity: PityStateSchema
    rarity: RarityTier


# === Response Schemas ===


class LootOddsResponse(BaseModel):
    """Tier weights and odds."""

    weights: Dict[RarityTier, float]
    probabilities: Dict[RarityTier, float]
    force_legendary: bool
    expected_rolls_to_legendary: Optional[float] = None  # None = unreachable


class LootRollResponse(BaseModel):
    """Rolled drops and the pity state after them."""

    drops: List[LootDropSchema]
    best: Optional[LootDropSchema] = None
    pity: PityStateSchema


class LootSimulateResponse(BaseModel):
    """Distribution of rolls needed per legendary."""

    legendaries: int
    mean_gap: float
    median_gap: float
    p90_gap: float
    max_gap: int
    expected_gap: Optional[float] = None


class PityResponse(BaseModel):
    """Pity state with the modifiers it currently derives."""

    pity: PityStateSchema
    alchemy_quality_shift: float
    force_alchemy_floor: bool
    legend_loot_weight_mul: float
    force_legend_loot: bool
    legend_kungfu_weight_mul: float


class ShardSpendResponse(BaseModel):
    """Exchange result."""

    success: bool
    cost: int
    pity: PityStateSchema
