"""
Final trial API schemas.
"""

from pydantic import BaseModel, Field
from typing import Optional, Dict

from src.core.constants import DEFAULT_MAX_HP, REALMS
from src.core.final_trial import EndingId, SacrificeKind, TrialAction
from src.data.models.reward import ElixirQuality


# === Request Schemas ===


class TrialSnapshotSchema(BaseModel):
    """Run progress used to set up the trial."""

    realm: str = REALMS[0]
    danger: float = Field(default=0, ge=0)
    chains_completed: int = Field(default=0, ge=0)
    best_alchemy_quality: Optional[ElixirQuality] = None
    max_hp: int = Field(default=DEFAULT_MAX_HP, ge=1)


class StartTrialRequest(BaseModel):
    snapshot: TrialSnapshotSchema = Field(default_factory=TrialSnapshotSchema)
    hp: int = Field(..., ge=1)


class TrialResourcesSchema(BaseModel):
    """Inventory counts for sacrifice checks."""

    spirit_stones: int = Field(default=0, ge=0)
    pills: int = Field(default=0, ge=0)
    materials: Dict[str, int] = Field(default_factory=dict)
    inheritance_points: int = Field(default=0, ge=0)


class TrialStateSchema(BaseModel):
    """Trial state."""

    step: int = Field(..., ge=1, le=4)
    threat: int
    resolve: int
    hp: int


class TrialActionRequest(BaseModel):
    state: TrialStateSchema
    action: TrialAction
    sacrifice_kind: Optional[SacrificeKind] = None
    resources: Optional[TrialResourcesSchema] = None
    max_hp: Optional[int] = Field(default=None, ge=1)
    seed: Optional[int] = None


# === Response Schemas ===


class FinalRewardsSchema(BaseModel):
    ending: EndingId
    legacy_bonus: int
    shards_bonus: int
    demon_unlock: bool = False


class TrialStateResponse(BaseModel):
    state: TrialStateSchema
    dmg_base: int
    is_terminal: bool


class TrialActionResponse(BaseModel):
    executed: bool
    state: TrialStateSchema
    dmg: Optional[int] = None
    resolve_delta: Optional[int] = None
    heal: Optional[int] = None
    success: Optional[bool] = None
    ending: Optional[EndingId] = None
    rewards: Optional[FinalRewardsSchema] = None
