"""Reward center read endpoints.

GET /reward-centers/{address}   — reward rules and current treasury balance
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.rc_common.database import get_db_session
from src.rc_common.response import ApiResponse, success_response
from src.rc_reward_center.application.service import RewardCenterService

router = APIRouter(prefix="/reward-centers", tags=["reward-centers"])

_service = RewardCenterService()


@router.get("/{address}")
async def get_reward_center(
    address: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.get_reward_center(db, address)
    return success_response(result.model_dump(mode="json")).for_request(request)
