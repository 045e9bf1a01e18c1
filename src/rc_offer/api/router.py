"""Offer read endpoints.

GET /offers?reward_center=&state=   — offers of one reward center, newest first
GET /offers/{address}               — current record at an offer address
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.rc_common.database import get_db_session
from src.rc_common.enums import OfferState
from src.rc_common.response import ApiResponse, success_response
from src.rc_offer.application.service import OfferService

router = APIRouter(prefix="/offers", tags=["offers"])

_service = OfferService()


@router.get("")
async def list_offers(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    reward_center: str = Query(...),
    state: OfferState | None = Query(None),
    limit: int = Query(50, ge=1, le=200),
) -> ApiResponse:
    result = await _service.list_offers(
        db, reward_center, state.value if state else None, limit
    )
    return success_response(result.model_dump(mode="json")).for_request(request)


@router.get("/{address}")
async def get_offer(
    address: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.get_offer(db, address)
    return success_response(result.model_dump(mode="json")).for_request(request)
