"""
Loot API routes.
"""

from fastapi import APIRouter, HTTPException, Depends

from ..schemas.loot import (
    LootOddsRequest,
    LootOddsResponse,
    LootRollRequest,
    LootRollResponse,
    LootSimulateRequest,
    LootSimulateResponse,
)
from ..services.engine_service import RewardEngineService
from ..dependencies import get_engine_service

router = APIRouter()


@router.post("/odds", response_model=LootOddsResponse)
async def loot_odds(
    request: LootOddsRequest,
    service: RewardEngineService = Depends(get_engine_service),
):
    """Tier weights and odds for the next roll."""
    return service.loot_odds(request)


@router.post("/roll", response_model=LootRollResponse)
async def roll_loot(
    request: LootRollRequest,
    service: RewardEngineService = Depends(get_engine_service),
):
    """Roll drops, advancing pity after each one."""
    try:
        return service.roll_loot(request)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.post("/simulate", response_model=LootSimulateResponse)
def simulate_loot(
    request: LootSimulateRequest,
    service: RewardEngineService = Depends(get_engine_service),
):
    """Simulate how many rolls each legendary takes."""
    try:
        return service.simulate_loot(request)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
