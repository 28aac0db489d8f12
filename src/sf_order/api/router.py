"""sf_order REST API — customer endpoints, all require a customer JWT."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.sf_common.database import get_db_session
from src.sf_common.response import ApiResponse, success_response, with_request_id
from src.sf_gateway.auth.dependencies import Principal, require_customer
from src.sf_order.application.schemas import (
    CancelOrderRequest,
    ChangePaymentMethodRequest,
    PlaceOrderRequest,
)
from src.sf_order.application.service import OrderApplicationService

router = APIRouter(prefix="/orders", tags=["orders"])

_service = OrderApplicationService()


def get_order_service() -> OrderApplicationService:
    return _service


@router.post("", status_code=201)
async def place_order(
    body: PlaceOrderRequest,
    principal: Annotated[Principal, Depends(require_customer)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[OrderApplicationService, Depends(get_order_service)],
    request: Request,
) -> ApiResponse:
    data = await service.place_order_from_cart(db, principal.subject, body)
    return with_request_id(success_response(data.model_dump(mode="json")), request)


@router.get("")
async def list_orders(
    principal: Annotated[Principal, Depends(require_customer)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[OrderApplicationService, Depends(get_order_service)],
    request: Request,
    status: str | None = Query(None, description="Filter by order status"),
    limit: int = Query(20, ge=1, le=100, description="Items per page"),
    cursor: str | None = Query(None, description="Pagination cursor (order ID)"),
) -> ApiResponse:
    data = await service.list_orders(db, principal.subject, status, limit, cursor)
    return with_request_id(success_response(data.model_dump(mode="json")), request)


@router.get("/{order_id}")
async def get_order(
    order_id: str,
    principal: Annotated[Principal, Depends(require_customer)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[OrderApplicationService, Depends(get_order_service)],
    request: Request,
) -> ApiResponse:
    data = await service.get_order(db, order_id, principal.subject)
    return with_request_id(success_response(data.model_dump(mode="json")), request)


@router.post("/{order_id}/cancel")
async def cancel_order(
    order_id: str,
    principal: Annotated[Principal, Depends(require_customer)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[OrderApplicationService, Depends(get_order_service)],
    request: Request,
    body: CancelOrderRequest | None = None,
) -> ApiResponse:
    reason = body.reason if body else None
    data = await service.cancel_order(db, order_id, principal.subject, reason)
    return with_request_id(success_response(data.model_dump(mode="json")), request)


@router.put("/{order_id}/payment-method")
async def change_payment_method(
    order_id: str,
    body: ChangePaymentMethodRequest,
    principal: Annotated[Principal, Depends(require_customer)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[OrderApplicationService, Depends(get_order_service)],
    request: Request,
) -> ApiResponse:
    data = await service.change_payment_method(
        db, order_id, principal.subject, body.payment_method
    )
    return with_request_id(success_response(data.model_dump(mode="json")), request)
