"""Listing read endpoints.

GET /listings?reward_center=&state=   — listings of one reward center, newest first
GET /listings/{address}               — current record at a listing address
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.rc_common.database import get_db_session
from src.rc_common.enums import ListingState
from src.rc_common.response import ApiResponse, success_response
from src.rc_listing.application.service import ListingService

router = APIRouter(prefix="/listings", tags=["listings"])

_service = ListingService()


@router.get("")
async def list_listings(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    reward_center: str = Query(...),
    state: ListingState | None = Query(None),
    limit: int = Query(50, ge=1, le=200),
) -> ApiResponse:
    result = await _service.list_listings(
        db, reward_center, state.value if state else None, limit
    )
    return success_response(result.model_dump(mode="json")).for_request(request)


@router.get("/{address}")
async def get_listing(
    address: str,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.get_listing(db, address)
    return success_response(result.model_dump(mode="json")).for_request(request)
