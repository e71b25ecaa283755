"""
Pity and shard exchange API routes.
"""

from fastapi import APIRouter, HTTPException, Depends

from ..schemas.loot import (
    AlchemyPityUpdateRequest,
    KungfuPityUpdateRequest,
    LootPityUpdateRequest,
    PityResponse,
    PityStateSchema,
    ShardAddRequest,
    ShardSpendRequest,
    ShardSpendResponse,
)
from ..services.engine_service import RewardEngineService
from ..dependencies import get_engine_service

router = APIRouter()


@router.post("/describe", response_model=PityResponse)
async def describe_pity(
    pity: PityStateSchema,
    service: RewardEngineService = Depends(get_engine_service),
):
    """Modifiers derived from a pity state."""
    return service.summarize_pity(pity)


@router.post("/loot", response_model=PityResponse)
async def update_loot_pity(
    request: LootPityUpdateRequest,
    service: RewardEngineService = Depends(get_engine_service),
):
    """Advance the legendary loot track."""
    return service.update_loot_pity(request)


@router.post("/alchemy", response_model=PityResponse)
async def update_alchemy_pity(
    request: AlchemyPityUpdateRequest,
    service: RewardEngineService = Depends(get_engine_service),
):
    """Advance the alchemy track."""
    return service.update_alchemy_pity(request)


@router.post("/kungfu", response_model=PityResponse)
async def update_kungfu_pity(
    request: KungfuPityUpdateRequest,
    service: RewardEngineService = Depends(get_engine_service),
):
    """Advance the legendary skill book track."""
    return service.update_kungfu_pity(request)


@router.post("/shards/add", response_model=PityResponse)
async def add_shards(
    request: ShardAddRequest,
    service: RewardEngineService = Depends(get_engine_service),
):
    """Credit shards."""
    return service.add_shards(request)


@router.post("/shards/spend", response_model=ShardSpendResponse)
async def spend_shards(
    request: ShardSpendRequest,
    service: RewardEngineService = Depends(get_engine_service),
):
    """Exchange shards for a guaranteed reward (all-or-nothing)."""
    try:
        return service.spend_shards(request)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
