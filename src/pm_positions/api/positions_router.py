# src/pm_positions/api/positions_router.py
"""Positions REST API — read-only views of the ledger."""
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_common.database import get_db_session
from src.pm_common.response import ApiResponse, success_response
from src.pm_positions.application.schemas import PositionListResponse, PositionResponse
from src.pm_positions.infrastructure.positions_repository import PositionsQueryRepository

router = APIRouter(tags=["positions"])
_repo = PositionsQueryRepository()


@router.get("/positions/{user}")
async def list_user_positions(
    user: str,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    market: Annotated[str | None, Query()] = None,
) -> ApiResponse:
    items = await _repo.list_by_user(user.lower(), db, market.lower() if market else None)
    data = PositionListResponse(
        items=[PositionResponse.from_domain(p) for p in items],
        total=len(items),
    )
    return success_response(data.model_dump())


@router.get("/markets/{market}/positions")
async def list_market_positions(
    market: str,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    items = await _repo.list_by_market(market.lower(), db)
    data = PositionListResponse(
        items=[PositionResponse.from_domain(p) for p in items],
        total=len(items),
    )
    return success_response(data.model_dump())
