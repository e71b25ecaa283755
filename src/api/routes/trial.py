"""
Final trial API routes.
"""

from fastapi import APIRouter, HTTPException, Depends

from src.core.final_trial import EndingId

from ..schemas.trial import (
    FinalRewardsSchema,
    StartTrialRequest,
    TrialActionRequest,
    TrialActionResponse,
    TrialStateResponse,
)
from ..services.engine_service import RewardEngineService
from ..dependencies import get_engine_service

router = APIRouter()


@router.post("/start", response_model=TrialStateResponse)
async def start_trial(
    request: StartTrialRequest,
    service: RewardEngineService = Depends(get_engine_service),
):
    """Compute threat and resolve and open step 1."""
    return service.start_trial(request)


@router.post("/action", response_model=TrialActionResponse)
async def trial_action(
    request: TrialActionRequest,
    service: RewardEngineService = Depends(get_engine_service),
):
    """Resolve one step (steady, gamble or sacrifice)."""
    try:
        return service.trial_action(request)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("/rewards/{ending}", response_model=FinalRewardsSchema)
async def get_rewards(
    ending: EndingId,
    service: RewardEngineService = Depends(get_engine_service),
):
    """Permanent rewards of an ending."""
    return service.rewards(ending)
