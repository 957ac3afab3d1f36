# src/pm_positions/api/events_router.py
"""Event ingest endpoint — called by the chain decoding layer.

Mounted at /api/v1/events in main.py. Events in a batch are applied in order,
one transaction per event; rejected events are skipped and reported.
"""
import logging

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.pm_common.database import get_db_session
from src.pm_common.errors import BatchTooLargeError
from src.pm_common.response import ApiResponse, success_response
from src.pm_positions.application.schemas import EventBatchRequest, EventBatchResponse
from src.pm_positions.application.service import PositionUpdateService
from src.pm_positions.domain.diagnostics import DiagnosticCollector

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/events", tags=["events"])
_service = PositionUpdateService()


@router.post("")
async def ingest_events(
    request: EventBatchRequest,
    http_request: Request,
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse:
    if len(request.events) > settings.MAX_EVENTS_PER_BATCH:
        raise BatchTooLargeError(len(request.events), settings.MAX_EVENTS_PER_BATCH)

    diagnostics = DiagnosticCollector()
    results = await _service.apply_many(db, request.to_domain(), diagnostics)
    data = EventBatchResponse.from_results(results, diagnostics.items)
    if data.skipped:
        logger.info("Event batch: %d applied, %d skipped", data.applied, data.skipped)
    return success_response(
        data.model_dump(), getattr(http_request.state, "request_id", None)
    )
