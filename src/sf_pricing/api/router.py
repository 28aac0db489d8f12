"""sf_pricing REST API — shipping quote, no authentication required."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.sf_common.database import get_db_session
from src.sf_common.response import ApiResponse, success_response, with_request_id
from src.sf_pricing.application.schemas import QuoteRequest
from src.sf_pricing.application.service import QuoteService

router = APIRouter(prefix="/shipping", tags=["shipping"])

_service = QuoteService()


def get_quote_service() -> QuoteService:
    return _service


@router.post("/quote")
async def quote(
    body: QuoteRequest,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[QuoteService, Depends(get_quote_service)],
    request: Request,
) -> ApiResponse:
    data = await service.quote(db, body)
    return with_request_id(success_response(data.model_dump(mode="json")), request)
